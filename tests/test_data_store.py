"""Tests for data persistence layer."""

import json
from datetime import datetime
from uuid import uuid4

import pytest

from grocery_saver.data_store import (
    BackendType,
    DataStore,
    JSONEncoder,
    create_data_store,
    owner_slug,
)
from grocery_saver.models import Category, GroceryItem, GroceryList, PriceCatalog, PriceRecord
from grocery_saver.sqlite_store import SQLiteStore


class TestJSONEncoder:
    """Tests for custom JSON encoder."""

    def test_encode_uuid(self):
        """UUID is encoded as string."""
        test_uuid = uuid4()
        encoded = json.dumps({"id": test_uuid}, cls=JSONEncoder)
        assert str(test_uuid) in encoded

    def test_encode_datetime(self):
        """Datetime is encoded as ISO format."""
        dt = datetime(2024, 1, 15, 10, 30, 0)
        encoded = json.dumps({"time": dt}, cls=JSONEncoder)
        assert "2024-01-15T10:30:00" in encoded

    def test_encode_fallback(self):
        """Unknown types raise TypeError."""
        with pytest.raises(TypeError):
            json.dumps({"bad": object()}, cls=JSONEncoder)


class TestOwnerSlug:
    """Tests for per-user file names."""

    def test_email_slug(self):
        """Emails become safe file names, ignoring case and padding."""
        assert owner_slug(" Ana@Example.com ") == "ana@example.com"

    def test_distinct_emails_distinct_slugs(self):
        """Emails differing only in punctuation do not share a file."""
        assert owner_slug("a+b@x.com") != owner_slug("a_b@x.com")
        assert "/" not in owner_slug("a/b@x.com")


class TestGroceryLists:
    """Tests for list persistence."""

    def test_load_empty(self, data_store):
        """Missing file gives an empty list."""
        assert data_store.load_list().items == []

    def test_save_and_load_guest_list(self, data_store):
        """Guest list round trips with all fields."""
        item = GroceryItem(name="Milk", size="1 gal", category=Category.PROTEIN, quantity=2)
        data_store.save_list(GroceryList(items=[item]))

        loaded = data_store.load_list()
        assert loaded.items == [item]

    def test_owners_are_separate(self, data_store):
        """Each owner has an independent list."""
        data_store.save_list(GroceryList(items=[GroceryItem(name="Milk")]), owner="a@x.com")
        data_store.save_list(GroceryList(items=[GroceryItem(name="Eggs")]))

        assert [i.name for i in data_store.load_list("a@x.com").items] == ["Milk"]
        assert [i.name for i in data_store.load_list().items] == ["Eggs"]
        assert data_store.load_list("b@x.com").items == []

    def test_similar_emails_are_separate(self, data_store):
        """Users whose emails differ only by punctuation keep separate lists."""
        data_store.save_list(GroceryList(items=[GroceryItem(name="Milk")]), owner="a+b@x.com")

        assert data_store.load_list("a_b@x.com").items == []
        assert [i.name for i in data_store.load_list("a+b@x.com").items] == ["Milk"]

    def test_owner_case_insensitive(self, data_store):
        """The same email in a different case opens the same list."""
        data_store.save_list(GroceryList(items=[GroceryItem(name="Milk")]), owner="Ana@x.com")
        assert [i.name for i in data_store.load_list(" ana@X.com").items] == ["Milk"]

    def test_get_item(self, data_store):
        """Find an item by ID for the right owner only."""
        item = GroceryItem(name="Milk")
        data_store.save_list(GroceryList(items=[item]), owner="a@x.com")

        assert data_store.get_item(item.id, owner="a@x.com") == item
        assert data_store.get_item(item.id) is None


class TestPriceCatalogStorage:
    """Tests for price catalog persistence."""

    def test_load_empty(self, data_store):
        """Missing file gives an empty catalog."""
        assert data_store.load_prices().prices == []

    def test_order_preserved(self, data_store):
        """Records keep insertion order."""
        records = [
            PriceRecord(product_name="milk", retailer_name="A", price=2.0),
            PriceRecord(product_name="milk", retailer_name="A", price=3.0),
        ]
        data_store.save_prices(PriceCatalog(prices=records))
        assert data_store.load_prices().prices == records

    def test_get_price(self, data_store):
        """Find a price record by ID."""
        record = PriceRecord(product_name="milk", retailer_name="A", price=2.0)
        data_store.save_prices(PriceCatalog(prices=[record]))

        assert data_store.get_price(record.id) == record
        assert data_store.get_price(uuid4()) is None


class TestCreateDataStore:
    """Tests for backend selection."""

    def test_json_default(self, temp_data_dir):
        """JSON is the default backend."""
        assert isinstance(create_data_store(data_dir=temp_data_dir), DataStore)

    def test_sqlite_in_data_dir(self, temp_data_dir):
        """SQLite database lives in the data directory."""
        store = create_data_store(BackendType.SQLITE, data_dir=temp_data_dir)
        assert isinstance(store, SQLiteStore)
        assert store.db_path == temp_data_dir / "grocery.db"
