"""Caller-facing shopping plan service.

Loads the active grocery list and the price catalog, turns the user's
"number of stores" input into a valid count and asks the solver for the
cheapest plan.
"""

import logging
import re

from .list_manager import ListManager
from .price_catalog import PriceCatalogManager
from .solver import MAX_STORE_COUNT, clamp_store_count, compute_best_plan

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_store_count(raw: str | int | None, upper: int = MAX_STORE_COUNT) -> int:
    """Turn free-form store count input into a count in [1, upper].

    The leading integer of the text is used ("3 stores" -> 3); text without
    one, and zero, become 1.
    """
    if isinstance(raw, int):
        value = raw
    else:
        match = _LEADING_INT.match(raw or "")
        value = int(match.group(1)) if match else 0
    if value == 0:
        value = 1
    return clamp_store_count(value, upper=min(upper, MAX_STORE_COUNT))


class ShoppingPlanner:
    """Recommends where to shop for the current grocery list."""

    def __init__(
        self,
        list_manager: ListManager,
        price_catalog: PriceCatalogManager,
        store_limit: int = MAX_STORE_COUNT,
    ):
        """Initialize the planner.

        Args:
            list_manager: Supplies the grocery items
            price_catalog: Supplies the price records
            store_limit: Largest store count a user may ask for
        """
        self.list_manager = list_manager
        self.price_catalog = price_catalog
        self.store_limit = clamp_store_count(store_limit)

    def best_plan(self, store_count: str | int | None = 1) -> dict:
        """Compute the cheapest plan visiting at most ``store_count`` stores.

        Args:
            store_count: Raw store count input; clamped to [1, store_limit]

        Returns:
            Dict with the plan (or None), the effective store count, and
            the sizes of the inputs
        """
        max_stores = parse_store_count(store_count, upper=self.store_limit)
        items = self.list_manager.get_items()
        prices = self.price_catalog.get_prices()

        logger.debug(
            "Planning %d items against %d prices, up to %d stores",
            len(items),
            len(prices),
            max_stores,
        )
        plan = compute_best_plan(items, prices, max_stores)

        if plan is None:
            message = "No matching prices found. Try increasing the number of stores."
        else:
            message = f"Best plan: {', '.join(plan.store_set)} for ${plan.total_cost:.2f}"

        return {
            "success": True,
            "message": message,
            "data": {
                "plan": plan.model_dump(mode="json") if plan else None,
                "store_count": max_stores,
                "item_count": len(items),
                "price_count": len(prices),
            },
        }
