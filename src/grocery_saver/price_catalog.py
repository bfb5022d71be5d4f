"""Price catalog management and bulk import."""

import logging
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, ValidationError, field_validator

from .data_store import DataStore, DataStoreProtocol
from .models import PriceRecord
from .normalizer import normalize_item_name, normalize_retailer_name

logger = logging.getLogger(__name__)


class InvalidPriceError(Exception):
    """Raised when a price record fails validation."""


class PriceNotFoundError(Exception):
    """Raised when a price record is not found."""

    def __init__(self, price_id: UUID | str):
        self.price_id = price_id
        super().__init__(f"Price with ID '{price_id}' not found")


class PriceImportError(Exception):
    """Raised when a bulk import payload is malformed."""


class PriceRecordInput(BaseModel):
    """Input model for one price record from an external source."""

    product_name: str
    retailer_name: str
    price: float = Field(ge=0, allow_inf_nan=False)
    size: str = ""

    @field_validator("product_name", "retailer_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v.strip()


class PriceCatalogManager:
    """Manages the catalog of (product, retailer, price) records."""

    def __init__(self, data_store: DataStoreProtocol | None = None):
        """Initialize price catalog manager.

        Args:
            data_store: DataStore instance. Creates new one if not provided.
        """
        self.data_store = data_store or DataStore()

    def add_price(
        self,
        product_name: str,
        retailer_name: str,
        price: float,
        size: str = "",
    ) -> dict:
        """Record a price for a product at a retailer.

        Records are appended, so a new price for an existing
        (product, retailer) pair takes precedence when planning.

        Returns:
            Dict with success status and price data

        Raises:
            InvalidPriceError: If a name is empty or the price is negative or not finite
        """
        record = self._validate(
            {
                "product_name": product_name,
                "retailer_name": retailer_name,
                "price": price,
                "size": size,
            }
        )

        catalog = self.data_store.load_prices()
        catalog.prices.append(record)
        self.data_store.save_prices(catalog)
        logger.info(
            "Recorded %s at %s for %.2f", record.product_name, record.retailer_name, record.price
        )

        return {
            "success": True,
            "message": f"Added price for {record.product_name} at {record.retailer_name}",
            "data": {"price": record.model_dump(mode="json")},
        }

    def remove_price(self, price_id: UUID | str) -> dict:
        """Remove a price record.

        Raises:
            PriceNotFoundError: If the record is not found
        """
        price_id = self._parse_id(price_id)
        removed = self.data_store.get_price(price_id)
        if removed is None:
            raise PriceNotFoundError(price_id)

        catalog = self.data_store.load_prices()
        catalog.prices = [r for r in catalog.prices if r.id != price_id]
        self.data_store.save_prices(catalog)

        return {
            "success": True,
            "message": f"Removed price for {removed.product_name} at {removed.retailer_name}",
            "data": {"price": removed.model_dump(mode="json")},
        }

    def get_prices(self) -> list[PriceRecord]:
        """All price records in insertion order."""
        return list(self.data_store.load_prices().prices)

    def list_prices(self, retailer: str | None = None, product: str | None = None) -> dict:
        """List price records, optionally filtered.

        Filters compare normalized names, so " Milk " matches "milk".

        Args:
            retailer: Only records from this retailer
            product: Only records for this product

        Returns:
            Dict with price data
        """
        records = self.get_prices()

        if retailer:
            wanted_retailer = normalize_retailer_name(retailer).casefold()
            records = [
                r
                for r in records
                if normalize_retailer_name(r.retailer_name).casefold() == wanted_retailer
            ]

        if product:
            wanted_product = normalize_item_name(product)
            records = [r for r in records if normalize_item_name(r.product_name) == wanted_product]

        return {
            "success": True,
            "data": {
                "prices": [r.model_dump(mode="json") for r in records],
                "total_prices": len(records),
            },
        }

    def list_retailers(self) -> dict:
        """Distinct retailer names, sorted."""
        retailers = sorted({normalize_retailer_name(r.retailer_name) for r in self.get_prices()})
        return {
            "success": True,
            "data": {"retailers": retailers},
        }

    def import_prices(self, payload: Any) -> dict:
        """Append many price records at once.

        Args:
            payload: A list of record dicts, or a dict with a "prices" list

        Returns:
            Dict with the number of imported records

        Raises:
            PriceImportError: If the payload shape or any record is invalid;
                nothing is imported in that case
        """
        if isinstance(payload, dict):
            payload = payload.get("prices")
        if not isinstance(payload, list):
            raise PriceImportError("Expected a list of price records")

        records: list[PriceRecord] = []
        for position, raw in enumerate(payload):
            if not isinstance(raw, dict):
                raise PriceImportError(f"Record {position} is not an object")
            try:
                records.append(self._validate(raw))
            except InvalidPriceError as e:
                raise PriceImportError(f"Record {position}: {e}")

        catalog = self.data_store.load_prices()
        catalog.prices.extend(records)
        self.data_store.save_prices(catalog)
        logger.info("Imported %d price records", len(records))

        return {
            "success": True,
            "message": f"Imported {len(records)} prices",
            "data": {"imported_count": len(records)},
        }

    def clear(self) -> dict:
        """Remove every price record."""
        catalog = self.data_store.load_prices()
        removed_count = len(catalog.prices)
        catalog.prices = []
        self.data_store.save_prices(catalog)

        return {
            "success": True,
            "message": f"Cleared {removed_count} prices",
            "data": {"removed_count": removed_count},
        }

    @staticmethod
    def _validate(raw: dict[str, Any]) -> PriceRecord:
        try:
            parsed = PriceRecordInput(**raw)
            return PriceRecord(**parsed.model_dump())
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise InvalidPriceError(problems)

    @staticmethod
    def _parse_id(price_id: UUID | str) -> UUID:
        if isinstance(price_id, UUID):
            return price_id
        try:
            return UUID(price_id)
        except ValueError:
            raise PriceNotFoundError(price_id)
