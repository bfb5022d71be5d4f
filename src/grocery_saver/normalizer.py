"""Name normalization used to join grocery items against price records."""

from collections.abc import Iterable

from .models import GroceryItem, NormalizedItem, NormalizedPriceRecord, PriceRecord


def normalize_item_name(name: str) -> str:
    """Build the join key for an item or product name."""
    return name.strip().lower()


def normalize_retailer_name(name: str) -> str:
    """Trim a retailer name. Case is kept since the name is also displayed."""
    return name.strip()


def normalize_items(items: Iterable[GroceryItem]) -> list[NormalizedItem]:
    """Attach a normalized name to every grocery item."""
    return [
        NormalizedItem(**item.model_dump(), normalized_name=normalize_item_name(item.name))
        for item in items
    ]


def normalize_prices(prices: Iterable[PriceRecord]) -> list[NormalizedPriceRecord]:
    """Attach normalized product and retailer names to every price record."""
    return [
        NormalizedPriceRecord(
            **record.model_dump(),
            normalized_product_name=normalize_item_name(record.product_name),
            normalized_retailer_name=normalize_retailer_name(record.retailer_name),
        )
        for record in prices
    ]


def normalize(
    items: Iterable[GroceryItem], prices: Iterable[PriceRecord]
) -> tuple[list[NormalizedItem], list[NormalizedPriceRecord]]:
    """Normalize a grocery list and a price catalog in one call.

    Args:
        items: Grocery items as entered by the user
        prices: Price records as stored in the catalog

    Returns:
        Tuple of (normalized items, normalized price records), in input order
    """
    return normalize_items(items), normalize_prices(prices)
