"""SQLite-based data persistence for Grocery Saver.

This module provides SQLite database storage as an alternative to JSON files.
It implements the same interface as DataStore for seamless switching.
"""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from uuid import UUID

from .data_store import normalize_owner
from .models import Category, GroceryItem, GroceryList, PriceCatalog, PriceRecord

logger = logging.getLogger(__name__)

# Guest items are stored with an empty owner
GUEST_OWNER = ""


def _owner_key(owner: str | None) -> str:
    return GUEST_OWNER if owner is None else normalize_owner(owner)


class SQLiteStore:
    """Manages SQLite database persistence for grocery data."""

    SCHEMA_VERSION = 1

    def __init__(self, db_path: Path | None = None):
        """Initialize SQLite store.

        Args:
            db_path: Path to the SQLite database file. Defaults to ./data/grocery.db
        """
        if db_path is None:
            db_path = Path.cwd() / "data" / "grocery.db"
        self.db_path = db_path
        self._ensure_directories()
        self._init_database()

    def _ensure_directories(self) -> None:
        """Create necessary directories if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def _get_connection(self):
        """Get a database connection with proper cleanup."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_database(self) -> None:
        """Initialize database schema if not exists."""
        logger.debug("Opening SQLite store at %s", self.db_path)
        with self._get_connection() as conn:
            conn.executescript("""
                -- Schema version tracking
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                );

                -- Grocery list items, one list per owner
                CREATE TABLE IF NOT EXISTS grocery_items (
                    id TEXT PRIMARY KEY,
                    owner TEXT NOT NULL DEFAULT '',
                    position INTEGER NOT NULL,
                    name TEXT NOT NULL,
                    size TEXT NOT NULL DEFAULT '',
                    category TEXT NOT NULL DEFAULT 'produce',
                    quantity INTEGER NOT NULL CHECK (quantity >= 1),
                    added_at TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_grocery_items_owner
                    ON grocery_items(owner, position);

                -- List metadata per owner
                CREATE TABLE IF NOT EXISTS list_metadata (
                    owner TEXT PRIMARY KEY,
                    version TEXT NOT NULL DEFAULT '1.0',
                    last_updated TEXT NOT NULL
                );

                -- Price catalog, position keeps insertion order
                CREATE TABLE IF NOT EXISTS product_prices (
                    id TEXT PRIMARY KEY,
                    position INTEGER NOT NULL,
                    product_name TEXT NOT NULL,
                    retailer_name TEXT NOT NULL,
                    price REAL NOT NULL CHECK (price >= 0),
                    size TEXT NOT NULL DEFAULT ''
                );

                CREATE TABLE IF NOT EXISTS catalog_metadata (
                    id INTEGER PRIMARY KEY CHECK (id = 1),
                    version TEXT NOT NULL DEFAULT '1.0',
                    last_updated TEXT NOT NULL
                );

                INSERT OR IGNORE INTO catalog_metadata (id, version, last_updated)
                VALUES (1, '1.0', datetime('now'));

                -- Record schema version
                INSERT OR IGNORE INTO schema_version (version) VALUES (1);
            """)

    # --- Grocery List Operations ---

    def _row_to_item(self, row: sqlite3.Row) -> GroceryItem:
        return GroceryItem(
            id=UUID(row["id"]),
            name=row["name"],
            size=row["size"],
            category=Category(row["category"]),
            quantity=row["quantity"],
            added_at=datetime.fromisoformat(row["added_at"]),
        )

    def load_list(self, owner: str | None = None) -> GroceryList:
        """Load a grocery list.

        Args:
            owner: User email, or None for the guest list

        Returns:
            GroceryList object
        """
        key = _owner_key(owner)
        with self._get_connection() as conn:
            meta = conn.execute(
                "SELECT version, last_updated FROM list_metadata WHERE owner = ?",
                (key,),
            ).fetchone()
            rows = conn.execute(
                "SELECT * FROM grocery_items WHERE owner = ? ORDER BY position",
                (key,),
            ).fetchall()

        items = [self._row_to_item(row) for row in rows]
        if meta is None:
            return GroceryList(items=items)

        return GroceryList(
            version=meta["version"],
            last_updated=datetime.fromisoformat(meta["last_updated"]),
            items=items,
        )

    def save_list(self, grocery_list: GroceryList, owner: str | None = None) -> None:
        """Save a grocery list, replacing the owner's stored items.

        Args:
            grocery_list: GroceryList to save
            owner: User email, or None for the guest list
        """
        grocery_list.last_updated = datetime.now()
        key = _owner_key(owner)

        with self._get_connection() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO list_metadata (owner, version, last_updated)
                VALUES (?, ?, ?)
                """,
                (key, grocery_list.version, grocery_list.last_updated.isoformat()),
            )
            conn.execute("DELETE FROM grocery_items WHERE owner = ?", (key,))
            conn.executemany(
                """
                INSERT INTO grocery_items
                (id, owner, position, name, size, category, quantity, added_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        str(item.id),
                        key,
                        position,
                        item.name,
                        item.size,
                        item.category.value,
                        item.quantity,
                        item.added_at.isoformat(),
                    )
                    for position, item in enumerate(grocery_list.items)
                ],
            )

    def get_item(self, item_id: UUID, owner: str | None = None) -> GroceryItem | None:
        """Get a specific item by ID.

        Args:
            item_id: UUID of the item
            owner: User email, or None for the guest list

        Returns:
            GroceryItem if found, None otherwise
        """
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM grocery_items WHERE id = ? AND owner = ?",
                (str(item_id), _owner_key(owner)),
            ).fetchone()

        if not row:
            return None
        return self._row_to_item(row)

    # --- Price Catalog Operations ---

    def _row_to_price(self, row: sqlite3.Row) -> PriceRecord:
        return PriceRecord(
            id=UUID(row["id"]),
            product_name=row["product_name"],
            retailer_name=row["retailer_name"],
            price=row["price"],
            size=row["size"],
        )

    def load_prices(self) -> PriceCatalog:
        """Load the price catalog in insertion order."""
        with self._get_connection() as conn:
            meta = conn.execute(
                "SELECT version, last_updated FROM catalog_metadata WHERE id = 1"
            ).fetchone()
            rows = conn.execute("SELECT * FROM product_prices ORDER BY position").fetchall()

        return PriceCatalog(
            version=meta["version"],
            last_updated=datetime.fromisoformat(meta["last_updated"]),
            prices=[self._row_to_price(row) for row in rows],
        )

    def save_prices(self, catalog: PriceCatalog) -> None:
        """Save the price catalog, replacing all stored records.

        Args:
            catalog: PriceCatalog to save
        """
        catalog.last_updated = datetime.now()

        with self._get_connection() as conn:
            conn.execute(
                "UPDATE catalog_metadata SET version = ?, last_updated = ? WHERE id = 1",
                (catalog.version, catalog.last_updated.isoformat()),
            )
            conn.execute("DELETE FROM product_prices")
            conn.executemany(
                """
                INSERT INTO product_prices
                (id, position, product_name, retailer_name, price, size)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        str(record.id),
                        position,
                        record.product_name,
                        record.retailer_name,
                        record.price,
                        record.size,
                    )
                    for position, record in enumerate(catalog.prices)
                ],
            )

    def get_price(self, price_id: UUID) -> PriceRecord | None:
        """Get a specific price record by ID."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM product_prices WHERE id = ?",
                (str(price_id),),
            ).fetchone()

        if not row:
            return None
        return self._row_to_price(row)
