"""Core data models for Grocery Saver."""

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class Category(str, Enum):
    """Grocery item categories."""

    PRODUCE = "produce"
    PROTEIN = "protein"
    SNACKS = "snacks"
    PANTRY = "pantry"
    HOUSEHOLD = "household"


class SessionMode(str, Enum):
    """How the current user is using the app."""

    GUEST = "guest"
    USER = "user"
    NONE = "none"


class GroceryItem(BaseModel):
    """A requested purchase on the grocery list."""

    id: UUID = Field(default_factory=uuid4)
    name: str
    size: str = ""
    category: Category = Category.PRODUCE
    quantity: int = Field(default=1, ge=1)
    added_at: datetime = Field(default_factory=datetime.now)


class PriceRecord(BaseModel):
    """An observed price for a product at a retailer."""

    id: UUID = Field(default_factory=uuid4)
    product_name: str
    retailer_name: str
    price: float = Field(ge=0)
    size: str = ""


class NormalizedItem(GroceryItem):
    """A grocery item with its join key attached."""

    normalized_name: str


class NormalizedPriceRecord(PriceRecord):
    """A price record with its join keys attached."""

    normalized_product_name: str
    normalized_retailer_name: str


class PlanLineItem(BaseModel):
    """Where to buy one grocery item and at what price."""

    model_config = ConfigDict(frozen=True)

    name: str
    price: float
    retailer: str
    quantity: int


class ShoppingPlan(BaseModel):
    """The cheapest feasible set of stores and the per-item breakdown."""

    model_config = ConfigDict(frozen=True)

    store_set: list[str]
    total_cost: float
    line_items: list[PlanLineItem]

    @property
    def items_by_retailer(self) -> dict[str, list[PlanLineItem]]:
        """Group line items by the store they are bought at, in store_set order."""
        grouped: dict[str, list[PlanLineItem]] = {store: [] for store in self.store_set}
        for line in self.line_items:
            grouped[line.retailer].append(line)
        return grouped


class SubsetEvaluation(BaseModel):
    """Cost of buying the whole list from one candidate set of stores."""

    model_config = ConfigDict(frozen=True)

    stores: tuple[str, ...]
    total: float
    line_items: tuple[PlanLineItem, ...] = ()
    missing: tuple[str, ...] = ()

    @property
    def feasible(self) -> bool:
        """True when every item is priced by some store in the subset."""
        return not self.missing


class GroceryList(BaseModel):
    """A user's (or the guest's) complete grocery list."""

    version: str = "1.0"
    last_updated: datetime = Field(default_factory=datetime.now)
    items: list[GroceryItem] = Field(default_factory=list)


class PriceCatalog(BaseModel):
    """All known price records."""

    version: str = "1.0"
    last_updated: datetime = Field(default_factory=datetime.now)
    prices: list[PriceRecord] = Field(default_factory=list)


class Session(BaseModel):
    """The active session: guest, signed-in user, or nobody."""

    mode: SessionMode = SessionMode.NONE
    user: str | None = None
    started_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        """Whether someone is using the app."""
        return self.mode != SessionMode.NONE
