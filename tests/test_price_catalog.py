"""Tests for the price catalog."""

import json
from uuid import uuid4

import pytest

from grocery_saver.price_catalog import (
    InvalidPriceError,
    PriceImportError,
    PriceNotFoundError,
)


class TestAddPrice:
    """Tests for recording prices."""

    def test_add_price(self, price_catalog):
        """Record a price."""
        result = price_catalog.add_price("Milk", "Acme", 2.5, size="1 gal")

        assert result["message"] == "Added price for Milk at Acme"
        record = result["data"]["price"]
        assert record["price"] == 2.5
        assert record["size"] == "1 gal"

    def test_names_trimmed(self, price_catalog):
        """Names are trimmed but keep their case."""
        record = price_catalog.add_price("  Milk ", " Acme ", 2.5)["data"]["price"]
        assert record["product_name"] == "Milk"
        assert record["retailer_name"] == "Acme"

    def test_zero_price_allowed(self, price_catalog):
        """Free items are valid."""
        assert price_catalog.add_price("Bag", "Acme", 0)["data"]["price"]["price"] == 0

    @pytest.mark.parametrize(
        "product, retailer, price",
        [("", "Acme", 1.0), ("Milk", "  ", 1.0), ("Milk", "Acme", -0.01), ("Milk", "Acme", "x")],
    )
    def test_invalid_price(self, price_catalog, product, retailer, price):
        """Empty names and negative or non-numeric prices are rejected."""
        with pytest.raises(InvalidPriceError):
            price_catalog.add_price(product, retailer, price)
        assert price_catalog.get_prices() == []

    @pytest.mark.parametrize("price", [float("nan"), float("inf"), "NaN"])
    def test_non_finite_price(self, price_catalog, price):
        """NaN and infinite prices are rejected as invalid."""
        with pytest.raises(InvalidPriceError, match="price"):
            price_catalog.add_price("Milk", "Acme", price)
        assert price_catalog.get_prices() == []

    def test_duplicates_appended(self, price_catalog):
        """Repeated pairs are kept in insertion order."""
        price_catalog.add_price("milk", "Acme", 1.0)
        price_catalog.add_price("milk", "Acme", 2.0)
        assert [r.price for r in price_catalog.get_prices()] == [1.0, 2.0]


class TestRemoveAndList:
    """Tests for removing and listing prices."""

    def test_remove_price(self, price_catalog):
        """Remove a record by ID."""
        price_id = price_catalog.add_price("Milk", "Acme", 2.0)["data"]["price"]["id"]
        price_catalog.remove_price(price_id)
        assert price_catalog.get_prices() == []

    def test_remove_missing(self, price_catalog):
        """Unknown IDs raise PriceNotFoundError."""
        with pytest.raises(PriceNotFoundError):
            price_catalog.remove_price(uuid4())
        with pytest.raises(PriceNotFoundError):
            price_catalog.remove_price("nope")

    def test_filter_by_product(self, price_catalog):
        """Product filter ignores case and padding."""
        price_catalog.add_price("Milk", "Acme", 2.0)
        price_catalog.add_price("Eggs", "Acme", 3.0)

        data = price_catalog.list_prices(product=" MILK ")["data"]
        assert data["total_prices"] == 1
        assert data["prices"][0]["product_name"] == "Milk"

    def test_filter_by_retailer(self, price_catalog):
        """Retailer filter matches trimmed names."""
        price_catalog.add_price("Milk", "Acme", 2.0)
        price_catalog.add_price("Milk", "Bolt", 3.0)

        prices = price_catalog.list_prices(retailer="Bolt ")["data"]["prices"]
        assert [p["retailer_name"] for p in prices] == ["Bolt"]

    def test_list_retailers(self, price_catalog):
        """Retailers are distinct and sorted."""
        price_catalog.add_price("Milk", "Bolt", 2.0)
        price_catalog.add_price("Eggs", "Acme", 3.0)
        price_catalog.add_price("Bread", "Bolt", 1.0)

        assert price_catalog.list_retailers()["data"]["retailers"] == ["Acme", "Bolt"]

    def test_clear(self, price_catalog):
        """Clear removes every record."""
        price_catalog.add_price("Milk", "Acme", 2.0)
        assert price_catalog.clear()["data"]["removed_count"] == 1
        assert price_catalog.get_prices() == []


class TestImport:
    """Tests for bulk import."""

    def test_import_list(self, price_catalog):
        """Import a bare list of records."""
        result = price_catalog.import_prices(
            [
                {"product_name": "Milk", "retailer_name": "Acme", "price": 2.0},
                {"product_name": "Eggs", "retailer_name": "Bolt", "price": 3.0, "size": "12"},
            ]
        )

        assert result["message"] == "Imported 2 prices"
        assert len(price_catalog.get_prices()) == 2

    def test_import_wrapped(self, price_catalog):
        """Import an object with a prices key."""
        payload = {"prices": [{"product_name": "Milk", "retailer_name": "Acme", "price": 2}]}
        assert price_catalog.import_prices(payload)["data"]["imported_count"] == 1

    def test_import_all_or_nothing(self, price_catalog):
        """One bad record rejects the whole batch."""
        price_catalog.add_price("Bread", "Acme", 1.0)

        with pytest.raises(PriceImportError, match="Record 1"):
            price_catalog.import_prices(
                [
                    {"product_name": "Milk", "retailer_name": "Acme", "price": 2.0},
                    {"product_name": "Eggs", "retailer_name": "Acme", "price": -1},
                ]
            )
        assert [r.product_name for r in price_catalog.get_prices()] == ["Bread"]

    def test_import_nan_price(self, price_catalog):
        """A NaN price fails the import like any other bad record."""
        payload = json.loads('[{"product_name": "milk", "retailer_name": "A", "price": NaN}]')

        with pytest.raises(PriceImportError, match="Record 0"):
            price_catalog.import_prices(payload)
        assert price_catalog.get_prices() == []

    @pytest.mark.parametrize("payload", [None, "milk", {"records": []}, [1, 2]])
    def test_import_bad_shape(self, price_catalog, payload):
        """Payloads that are not record lists are rejected."""
        with pytest.raises(PriceImportError):
            price_catalog.import_prices(payload)
