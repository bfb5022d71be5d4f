"""Grocery list management operations."""

import logging
from datetime import datetime
from uuid import UUID

from .data_store import DataStore, DataStoreProtocol
from .models import Category, GroceryItem, GroceryList

logger = logging.getLogger(__name__)


class InvalidItemError(Exception):
    """Raised when a grocery item fails validation."""


class ItemNotFoundError(Exception):
    """Raised when an item is not found."""

    def __init__(self, item_id: UUID | str):
        self.item_id = item_id
        super().__init__(f"Item with ID '{item_id}' not found")


def parse_category(category: Category | str) -> Category:
    """Resolve a category name, case-insensitively."""
    if isinstance(category, Category):
        return category
    try:
        return Category(category.strip().lower())
    except ValueError:
        options = ", ".join(c.value for c in Category)
        raise InvalidItemError(f"Unknown category '{category}'. Choose one of: {options}")


def validate_quantity(quantity: int | str) -> int:
    """Parse a quantity and require it to be a whole number of at least 1."""
    try:
        parsed = int(quantity)
    except (TypeError, ValueError):
        raise InvalidItemError("Quantity must be 1 or more.")
    if parsed < 1:
        raise InvalidItemError("Quantity must be 1 or more.")
    return parsed


class ListManager:
    """Manages the grocery list of one owner (a user, or the guest)."""

    def __init__(self, data_store: DataStoreProtocol | None = None, owner: str | None = None):
        """Initialize list manager.

        Args:
            data_store: DataStore instance. Creates new one if not provided.
            owner: User email whose list to manage; None for the guest list
        """
        self.data_store = data_store or DataStore()
        self.owner = owner

    def _load(self) -> GroceryList:
        return self.data_store.load_list(self.owner)

    def _save(self, grocery_list: GroceryList) -> None:
        self.data_store.save_list(grocery_list, self.owner)

    def add_item(
        self,
        name: str,
        quantity: int | str = 1,
        size: str = "",
        category: Category | str = Category.PRODUCE,
    ) -> dict:
        """Add an item to the grocery list.

        New items go to the front of the stored list.

        Args:
            name: Item name (required)
            quantity: Whole number to buy, at least 1
            size: Optional size text
            category: One of the Category values

        Returns:
            Dict with success status and item data

        Raises:
            InvalidItemError: If the name is empty, the quantity is below 1,
                or the category is unknown
        """
        trimmed_name = name.strip()
        if not trimmed_name:
            raise InvalidItemError("Name is required.")

        item = GroceryItem(
            name=trimmed_name,
            size=size.strip(),
            category=parse_category(category),
            quantity=validate_quantity(quantity),
            added_at=datetime.now(),
        )

        grocery_list = self._load()
        grocery_list.items.insert(0, item)
        self._save(grocery_list)
        logger.info("Added %s x%d to the grocery list", item.name, item.quantity)

        return {
            "success": True,
            "message": f"Added {item.name} to grocery list",
            "data": {"item": item.model_dump(mode="json")},
        }

    def remove_item(self, item_id: UUID | str) -> dict:
        """Remove an item from the grocery list.

        Args:
            item_id: ID of item to remove

        Returns:
            Dict with success status

        Raises:
            ItemNotFoundError: If item not found
        """
        item_id = self._parse_id(item_id)
        grocery_list = self._load()

        for i, item in enumerate(grocery_list.items):
            if item.id == item_id:
                removed = grocery_list.items.pop(i)
                self._save(grocery_list)
                logger.info("Removed %s from the grocery list", removed.name)
                return {
                    "success": True,
                    "message": f"Removed {removed.name} from grocery list",
                    "data": {"item": removed.model_dump(mode="json")},
                }

        raise ItemNotFoundError(item_id)

    def update_item(
        self,
        item_id: UUID | str,
        name: str | None = None,
        quantity: int | str | None = None,
        size: str | None = None,
        category: Category | str | None = None,
    ) -> dict:
        """Update an existing item.

        Args:
            item_id: ID of item to update
            name: New name
            quantity: New quantity
            size: New size text
            category: New category

        Returns:
            Dict with success status

        Raises:
            ItemNotFoundError: If item not found
            InvalidItemError: If a new value fails validation
        """
        item_id = self._parse_id(item_id)
        grocery_list = self._load()

        for item in grocery_list.items:
            if item.id == item_id:
                if name is not None:
                    if not name.strip():
                        raise InvalidItemError("Name is required.")
                    item.name = name.strip()
                if quantity is not None:
                    item.quantity = validate_quantity(quantity)
                if size is not None:
                    item.size = size.strip()
                if category is not None:
                    item.category = parse_category(category)

                self._save(grocery_list)
                return {
                    "success": True,
                    "message": f"Updated {item.name}",
                    "data": {"item": item.model_dump(mode="json")},
                }

        raise ItemNotFoundError(item_id)

    def get_items(self) -> list[GroceryItem]:
        """All items in stored order, for pricing."""
        return list(self._load().items)

    def get_list(self, category: Category | str | None = None) -> dict:
        """Get the grocery list sorted by name.

        Args:
            category: Only include items in this category

        Returns:
            Dict with list data
        """
        grocery_list = self._load()
        items = grocery_list.items

        if category:
            wanted = parse_category(category)
            items = [i for i in items if i.category == wanted]

        items = sorted(items, key=lambda i: i.name.casefold())

        return {
            "success": True,
            "data": {
                "list": {
                    "version": grocery_list.version,
                    "last_updated": grocery_list.last_updated.isoformat(),
                    "items": [item.model_dump(mode="json") for item in items],
                    "total_items": len(items),
                }
            },
        }

    def get_item(self, item_id: UUID | str) -> GroceryItem:
        """Get a specific item by ID.

        Raises:
            ItemNotFoundError: If item not found
        """
        item_id = self._parse_id(item_id)
        item = self.data_store.get_item(item_id, self.owner)
        if not item:
            raise ItemNotFoundError(item_id)
        return item

    def clear(self) -> dict:
        """Remove every item from the list.

        Returns:
            Dict with count of removed items
        """
        grocery_list = self._load()
        removed_count = len(grocery_list.items)
        grocery_list.items = []
        self._save(grocery_list)

        return {
            "success": True,
            "message": f"Cleared {removed_count} items",
            "data": {"removed_count": removed_count},
        }

    def get_by_category(self) -> dict:
        """Get items grouped by category.

        Returns:
            Dict with items grouped by category, in Category order
        """
        by_category: dict[str, list[dict]] = {}
        for item in sorted(self._load().items, key=lambda i: i.name.casefold()):
            by_category.setdefault(item.category.value, []).append(item.model_dump(mode="json"))

        ordered = {c.value: by_category[c.value] for c in Category if c.value in by_category}
        return {
            "success": True,
            "data": {"by_category": ordered},
        }

    @staticmethod
    def _parse_id(item_id: UUID | str) -> UUID:
        if isinstance(item_id, UUID):
            return item_id
        try:
            return UUID(item_id)
        except ValueError:
            raise ItemNotFoundError(item_id)
