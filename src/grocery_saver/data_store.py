"""Data persistence for Grocery Saver.

This module provides data persistence with support for JSON (default) or SQLite backends.
Use create_data_store() to get the appropriate backend based on configuration.

Grocery lists are kept per owner: ``None`` is the guest's local list, any other
value is the signed-in user's email.
"""

import json
import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import quote
from uuid import UUID

from .models import GroceryItem, GroceryList, PriceCatalog, PriceRecord

logger = logging.getLogger(__name__)


class BackendType(str, Enum):
    """Data storage backend types."""

    JSON = "json"
    SQLITE = "sqlite"


class DataStoreProtocol(Protocol):
    """Protocol defining the data store interface."""

    def load_list(self, owner: str | None = None) -> GroceryList: ...
    def save_list(self, grocery_list: GroceryList, owner: str | None = None) -> None: ...
    def get_item(self, item_id: UUID, owner: str | None = None) -> GroceryItem | None: ...
    def load_prices(self) -> PriceCatalog: ...
    def save_prices(self, catalog: PriceCatalog) -> None: ...
    def get_price(self, price_id: UUID) -> PriceRecord | None: ...


class JSONEncoder(json.JSONEncoder):
    """Custom JSON encoder for our data types."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        return super().default(obj)


def json_decoder(data: dict[str, Any]) -> dict[str, Any]:
    """Decode JSON data back to Python objects."""
    for key, value in data.items():
        if isinstance(value, str):
            if key == "id":
                try:
                    data[key] = UUID(value)
                except ValueError:
                    pass
            elif key in ("added_at", "last_updated", "started_at"):
                try:
                    data[key] = datetime.fromisoformat(value)
                except ValueError:
                    pass
    return data


def normalize_owner(owner: str) -> str:
    """Emails are matched ignoring case and surrounding whitespace."""
    return owner.strip().lower()


def owner_slug(owner: str) -> str:
    """File-safe name for a user's list file.

    Percent-encoding keeps distinct emails on distinct files.
    """
    return quote(normalize_owner(owner), safe="@")


class DataStore:
    """Manages JSON file persistence for grocery data."""

    def __init__(self, data_dir: Path | None = None):
        """Initialize data store.

        Args:
            data_dir: Directory for data files. Defaults to ./data
        """
        self.data_dir = data_dir or Path.cwd() / "data"
        self._ensure_directories()

    def _ensure_directories(self) -> None:
        """Create necessary directories if they don't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        (self.data_dir / "users").mkdir(exist_ok=True)

    def _list_path(self, owner: str | None) -> Path:
        """Path to an owner's list file."""
        if owner is None:
            return self.data_dir / "guest_items.json"
        return self.data_dir / "users" / f"{owner_slug(owner)}.json"

    def _prices_path(self) -> Path:
        """Path to the price catalog file."""
        return self.data_dir / "product_prices.json"

    # --- Grocery List Operations ---

    def load_list(self, owner: str | None = None) -> GroceryList:
        """Load a grocery list.

        Args:
            owner: User email, or None for the guest list

        Returns:
            GroceryList object, empty if file doesn't exist
        """
        path = self._list_path(owner)
        if not path.exists():
            return GroceryList()

        logger.debug("Loading grocery list from %s", path)
        with open(path) as f:
            data = json.load(f, object_hook=json_decoder)

        items = [GroceryItem(**item_data) for item_data in data.get("items", [])]

        return GroceryList(
            version=data.get("version", "1.0"),
            last_updated=data.get("last_updated", datetime.now()),
            items=items,
        )

    def save_list(self, grocery_list: GroceryList, owner: str | None = None) -> None:
        """Save a grocery list.

        Args:
            grocery_list: GroceryList to save
            owner: User email, or None for the guest list
        """
        grocery_list.last_updated = datetime.now()
        path = self._list_path(owner)

        logger.debug("Saving %d items to %s", len(grocery_list.items), path)
        with open(path, "w") as f:
            json.dump(grocery_list.model_dump(), f, cls=JSONEncoder, indent=2)

    def get_item(self, item_id: UUID, owner: str | None = None) -> GroceryItem | None:
        """Get a specific item by ID.

        Args:
            item_id: UUID of the item
            owner: User email, or None for the guest list

        Returns:
            GroceryItem if found, None otherwise
        """
        for item in self.load_list(owner).items:
            if item.id == item_id:
                return item
        return None

    # --- Price Catalog Operations ---

    def load_prices(self) -> PriceCatalog:
        """Load the price catalog.

        Returns:
            PriceCatalog in insertion order, empty if file doesn't exist
        """
        path = self._prices_path()
        if not path.exists():
            return PriceCatalog()

        logger.debug("Loading price catalog from %s", path)
        with open(path) as f:
            data = json.load(f, object_hook=json_decoder)

        return PriceCatalog(
            version=data.get("version", "1.0"),
            last_updated=data.get("last_updated", datetime.now()),
            prices=[PriceRecord(**record) for record in data.get("prices", [])],
        )

    def save_prices(self, catalog: PriceCatalog) -> None:
        """Save the price catalog.

        Args:
            catalog: PriceCatalog to save
        """
        catalog.last_updated = datetime.now()
        path = self._prices_path()

        logger.debug("Saving %d price records to %s", len(catalog.prices), path)
        with open(path, "w") as f:
            json.dump(catalog.model_dump(), f, cls=JSONEncoder, indent=2)

    def get_price(self, price_id: UUID) -> PriceRecord | None:
        """Get a specific price record by ID.

        Args:
            price_id: UUID of the record

        Returns:
            PriceRecord if found, None otherwise
        """
        for record in self.load_prices().prices:
            if record.id == price_id:
                return record
        return None


def create_data_store(
    backend: BackendType = BackendType.JSON,
    data_dir: Path | None = None,
    db_path: Path | None = None,
) -> DataStoreProtocol:
    """Create a data store with the specified backend.

    Args:
        backend: Which backend to use (json or sqlite)
        data_dir: Directory for data files (used by JSON backend, also used
                  as base path for SQLite if db_path not specified)
        db_path: Path to SQLite database file (only used by SQLite backend)

    Returns:
        A DataStore or SQLiteStore instance

    Example:
        # Use JSON backend (default)
        store = create_data_store()

        # Use SQLite with custom path
        store = create_data_store(
            BackendType.SQLITE,
            db_path=Path("./my_data/grocery.db")
        )
    """
    if backend == BackendType.SQLITE:
        from .sqlite_store import SQLiteStore

        if db_path is None and data_dir is not None:
            db_path = data_dir / "grocery.db"

        return SQLiteStore(db_path=db_path)
    else:
        return DataStore(data_dir=data_dir)
