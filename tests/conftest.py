"""Shared test fixtures for Grocery Saver."""

import pytest

from grocery_saver.data_store import DataStore
from grocery_saver.list_manager import ListManager
from grocery_saver.models import GroceryItem, PriceRecord
from grocery_saver.price_catalog import PriceCatalogManager
from grocery_saver.session import SessionManager


@pytest.fixture
def temp_data_dir(tmp_path):
    """Create a temporary data directory."""
    data_dir = tmp_path / "test_data"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def data_store(temp_data_dir):
    """Create a DataStore with temporary directory."""
    return DataStore(data_dir=temp_data_dir)


@pytest.fixture
def list_manager(data_store):
    """ListManager over the guest list in temporary storage."""
    return ListManager(data_store=data_store)


@pytest.fixture
def price_catalog(data_store):
    """PriceCatalogManager with temporary storage."""
    return PriceCatalogManager(data_store=data_store)


@pytest.fixture
def session_manager(temp_data_dir):
    """SessionManager with temporary storage."""
    return SessionManager(data_dir=temp_data_dir)


@pytest.fixture
def milk_and_eggs():
    """Two items, one of each."""
    return [GroceryItem(name="Milk", quantity=1), GroceryItem(name="Eggs", quantity=1)]


@pytest.fixture
def split_prices():
    """Prices where A is cheaper for milk and B for eggs."""
    return [
        PriceRecord(product_name="milk", retailer_name="A", price=2.00),
        PriceRecord(product_name="milk", retailer_name="B", price=3.00),
        PriceRecord(product_name="eggs", retailer_name="A", price=4.00),
        PriceRecord(product_name="eggs", retailer_name="B", price=1.00),
    ]
