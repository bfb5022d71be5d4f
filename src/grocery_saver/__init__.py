"""Grocery Saver - Grocery lists and the cheapest stores to buy them at."""

from .config import ConfigManager
from .data_store import BackendType, create_data_store, DataStore
from .list_manager import InvalidItemError, ItemNotFoundError, ListManager
from .models import (
    Category,
    GroceryItem,
    GroceryList,
    NormalizedItem,
    NormalizedPriceRecord,
    PlanLineItem,
    PriceCatalog,
    PriceRecord,
    Session,
    SessionMode,
    ShoppingPlan,
    SubsetEvaluation,
)
from .normalizer import normalize
from .output_formatter import OutputFormatter
from .planner import parse_store_count, ShoppingPlanner
from .price_catalog import (
    InvalidPriceError,
    PriceCatalogManager,
    PriceImportError,
    PriceNotFoundError,
    PriceRecordInput,
)
from .session import NotSignedInError, SessionManager
from .solver import (
    build_price_index,
    compute_best_plan,
    distinct_retailers,
    evaluate_subset,
    MAX_STORE_COUNT,
    solve,
)
from .sqlite_store import SQLiteStore

__version__ = "0.1.0"

__all__ = [
    "BackendType",
    "build_price_index",
    "Category",
    "compute_best_plan",
    "ConfigManager",
    "create_data_store",
    "DataStore",
    "distinct_retailers",
    "evaluate_subset",
    "GroceryItem",
    "GroceryList",
    "InvalidItemError",
    "InvalidPriceError",
    "ItemNotFoundError",
    "ListManager",
    "MAX_STORE_COUNT",
    "normalize",
    "NormalizedItem",
    "NormalizedPriceRecord",
    "NotSignedInError",
    "OutputFormatter",
    "parse_store_count",
    "PlanLineItem",
    "PriceCatalog",
    "PriceCatalogManager",
    "PriceImportError",
    "PriceNotFoundError",
    "PriceRecord",
    "PriceRecordInput",
    "Session",
    "SessionManager",
    "SessionMode",
    "ShoppingPlan",
    "ShoppingPlanner",
    "solve",
    "SQLiteStore",
    "SubsetEvaluation",
]
