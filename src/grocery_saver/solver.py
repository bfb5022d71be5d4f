"""Multi-store shopping plan solver.

Finds the cheapest way to buy a whole grocery list when the shopper is
willing to visit at most ``k`` different retailers. Every subset of exactly
``min(k, retailers)`` retailers is evaluated; for each subset every item is
bought at the cheapest retailer in that subset, and the cheapest subset that
can supply every item wins.

Ties are resolved by position:
    * within a subset, the earliest retailer (sorted order) keeps an item
      unless another retailer is strictly cheaper
    * across subsets, the first feasible subset in combination order keeps
      the lead unless another subset is strictly cheaper
"""

import logging
from collections.abc import Iterable, Iterator, Sequence
from itertools import combinations

from .models import (
    GroceryItem,
    NormalizedItem,
    NormalizedPriceRecord,
    PlanLineItem,
    PriceRecord,
    ShoppingPlan,
    SubsetEvaluation,
)
from .normalizer import normalize

logger = logging.getLogger(__name__)

MIN_STORE_COUNT = 1
MAX_STORE_COUNT = 5

PriceIndex = dict[str, dict[str, float]]


def clamp_store_count(value: int, upper: int = MAX_STORE_COUNT) -> int:
    """Clamp a requested store count into [1, upper]."""
    return max(MIN_STORE_COUNT, min(upper, value))


def build_price_index(normalized_prices: Iterable[NormalizedPriceRecord]) -> PriceIndex:
    """Map normalized product name -> retailer -> price.

    A later record for the same (product, retailer) pair replaces the earlier one.
    """
    index: PriceIndex = {}
    for record in normalized_prices:
        retailers = index.setdefault(record.normalized_product_name, {})
        retailers[record.normalized_retailer_name] = record.price
    return index


def distinct_retailers(normalized_prices: Iterable[NormalizedPriceRecord]) -> list[str]:
    """Sorted distinct retailer names."""
    return sorted({record.normalized_retailer_name for record in normalized_prices})


def retailer_combinations(retailers: Sequence[str], size: int) -> Iterator[tuple[str, ...]]:
    """Yield every subset of ``size`` retailers in lexicographic index order."""
    return combinations(retailers, size)


def evaluate_subset(
    stores: Sequence[str],
    normalized_items: Iterable[NormalizedItem],
    price_index: PriceIndex,
) -> SubsetEvaluation:
    """Price the whole list using only the given stores.

    All items are checked even after one turns out to be missing, so the
    returned ``missing`` tuple is complete.
    """
    total = 0.0
    line_items: list[PlanLineItem] = []
    missing: list[str] = []

    for item in normalized_items:
        product_prices = price_index.get(item.normalized_name, {})

        best_price: float | None = None
        best_retailer = ""
        for store in stores:
            price = product_prices.get(store)
            if price is not None and (best_price is None or price < best_price):
                best_price = price
                best_retailer = store

        if best_price is None:
            missing.append(item.normalized_name)
            continue

        total += best_price * item.quantity
        line_items.append(
            PlanLineItem(
                name=item.normalized_name,
                price=best_price,
                retailer=best_retailer,
                quantity=item.quantity,
            )
        )

    return SubsetEvaluation(
        stores=tuple(stores),
        total=total,
        line_items=tuple(line_items),
        missing=tuple(missing),
    )


def solve(
    normalized_items: Sequence[NormalizedItem],
    price_index: PriceIndex,
    retailers: Sequence[str],
    requested_store_count: int,
) -> ShoppingPlan | None:
    """Find the cheapest feasible plan over subsets of the sorted retailers.

    Args:
        normalized_items: Items to buy
        price_index: Output of build_price_index
        retailers: Output of distinct_retailers (sorted)
        requested_store_count: Maximum number of stores to visit

    Returns:
        The cheapest ShoppingPlan, or None if no subset can supply every item
    """
    if not normalized_items or not retailers:
        return None

    size = min(requested_store_count, len(retailers))
    if size < MIN_STORE_COUNT:
        return None

    best: SubsetEvaluation | None = None
    evaluated = 0
    for stores in retailer_combinations(retailers, size):
        evaluated += 1
        evaluation = evaluate_subset(stores, normalized_items, price_index)
        if not evaluation.feasible:
            continue
        if best is None or evaluation.total < best.total:
            best = evaluation

    logger.debug(
        "Evaluated %d store subsets of size %d over %d retailers",
        evaluated,
        size,
        len(retailers),
    )

    if best is None:
        logger.debug("No store subset of size %d can supply every item", size)
        return None

    logger.debug("Best store set %s costs %.2f", list(best.stores), best.total)
    return ShoppingPlan(
        store_set=list(best.stores),
        total_cost=best.total,
        line_items=list(best.line_items),
    )


def compute_best_plan(
    items: Sequence[GroceryItem],
    prices: Sequence[PriceRecord],
    max_stores: int,
) -> ShoppingPlan | None:
    """Recommend which stores to visit and what to buy where.

    Args:
        items: Grocery items (quantity >= 1)
        prices: Price records (price >= 0)
        max_stores: Most stores the shopper will visit; clamped to [1, 5]

    Returns:
        The cheapest ShoppingPlan, or None when there is nothing to buy or
        some item cannot be priced within any allowed set of stores
    """
    normalized_items, normalized_prices = normalize(items, prices)
    price_index = build_price_index(normalized_prices)
    retailers = distinct_retailers(normalized_prices)
    return solve(normalized_items, price_index, retailers, clamp_store_count(max_stores))
