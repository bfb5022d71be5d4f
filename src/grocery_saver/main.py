"""CLI entry point for Grocery Saver."""

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from .config import ConfigManager
from .data_store import BackendType, DataStoreProtocol, create_data_store
from .list_manager import InvalidItemError, ItemNotFoundError, ListManager
from .models import Category
from .output_formatter import OutputFormatter
from .planner import ShoppingPlanner
from .price_catalog import (
    InvalidPriceError,
    PriceCatalogManager,
    PriceImportError,
    PriceNotFoundError,
)
from .session import InvalidLoginError, NotSignedInError, SessionManager

app = typer.Typer(
    name="grocery",
    help="Grocery list and multi-store price comparison",
    no_args_is_help=True,
)

# Global state for formatter and config (set by callback)
formatter: OutputFormatter = OutputFormatter()
config: ConfigManager | None = None
data_dir: Path | None = None
data_store: DataStoreProtocol | None = None
session_manager: SessionManager | None = None


def configure_logging(level: str, verbose: bool = False) -> None:
    """Send package logs to stderr through Rich."""
    package_logger = logging.getLogger("grocery_saver")
    package_logger.handlers = [
        RichHandler(console=Console(stderr=True), show_path=False, markup=False)
    ]
    package_logger.setLevel(logging.DEBUG if verbose else getattr(logging, level, logging.WARNING))


def get_config() -> ConfigManager:
    """Get or create ConfigManager instance."""
    global config
    if config is None:
        config = ConfigManager()
    return config


def get_data_dir() -> Path:
    """Effective data directory."""
    return data_dir or get_config().data.storage_dir


def get_data_store() -> DataStoreProtocol:
    """Get or create the data store using config values."""
    global data_store
    if data_store is None:
        backend = BackendType(get_config().data.backend)
        data_store = create_data_store(backend=backend, data_dir=get_data_dir())
    return data_store


def get_session_manager() -> SessionManager:
    """Get or create SessionManager instance."""
    global session_manager
    if session_manager is None:
        session_manager = SessionManager(get_data_dir())
    return session_manager


def get_list_manager() -> ListManager:
    """ListManager for the signed-in user's (or the guest's) list."""
    owner = get_session_manager().require_owner()
    return ListManager(get_data_store(), owner=owner)


def get_price_catalog() -> PriceCatalogManager:
    """Get a PriceCatalogManager over the configured store."""
    return PriceCatalogManager(get_data_store())


def get_planner() -> ShoppingPlanner:
    """Get a ShoppingPlanner for the active session."""
    return ShoppingPlanner(
        get_list_manager(),
        get_price_catalog(),
        store_limit=get_config().planner.store_limit,
    )


@app.callback()
def main(
    json_output: Annotated[
        bool, typer.Option("--json", help="Output as JSON for programmatic use")
    ] = False,
    data_dir_option: Annotated[
        Path | None, typer.Option("--data-dir", help="Data directory path")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    """Grocery Saver CLI - Find the cheapest stores for your grocery list."""
    global formatter, config, data_dir, data_store, session_manager

    formatter = OutputFormatter(json_mode=json_output)

    # Load config early
    config = ConfigManager()
    configure_logging(config.logging.level, verbose)

    # CLI --data-dir overrides config, which overrides default
    data_dir = data_dir_option if data_dir_option else config.data.storage_dir
    data_store = create_data_store(backend=BackendType(config.data.backend), data_dir=data_dir)
    session_manager = SessionManager(data_dir)


# --- Session commands ---

session_app = typer.Typer(help="Guest and user sessions")
app.add_typer(session_app, name="session")


@session_app.command("guest")
def session_guest() -> None:
    """Continue as guest; the list is kept on this device."""
    session = get_session_manager().continue_as_guest()
    formatter.output(
        {
            "success": True,
            "message": "Continuing as guest",
            "data": {"session": session.model_dump(mode="json")},
        },
        "Continuing as guest",
    )


@session_app.command("login")
def session_login(
    email: Annotated[str, typer.Argument(help="Email address")],
) -> None:
    """Sign in and use your own grocery list."""
    try:
        session = get_session_manager().login(email)
    except InvalidLoginError as e:
        formatter.error(str(e), error_code="INVALID_LOGIN")
        raise typer.Exit(code=1)

    formatter.output(
        {
            "success": True,
            "message": f"Logged in as {session.user}",
            "data": {"session": session.model_dump(mode="json")},
        },
        f"Logged in as {session.user}",
    )


@session_app.command("logout")
def session_logout() -> None:
    """Sign out (also ends guest mode)."""
    get_session_manager().sign_out()
    formatter.success("Signed out")


@session_app.command("status")
def session_status() -> None:
    """Show who is signed in."""
    session = get_session_manager().current()
    formatter.output({"success": True, "data": {"session": session.model_dump(mode="json")}})


# --- Grocery list commands ---


@app.command()
def add(
    item: Annotated[str, typer.Argument(help="Item name to add")],
    quantity: Annotated[int, typer.Option("--quantity", "-q", help="Quantity to buy")] = 1,
    size: Annotated[str, typer.Option("--size", "-s", help="Size, e.g. '1 gal'")] = "",
    category: Annotated[
        Category | None, typer.Option("--category", "-c", help="Item category")
    ] = None,
) -> None:
    """Add an item to the grocery list."""
    try:
        manager = get_list_manager()
        result = manager.add_item(
            name=item,
            quantity=quantity,
            size=size,
            category=category or get_config().defaults.category,
        )
    except NotSignedInError as e:
        formatter.error(str(e), error_code="NOT_SIGNED_IN")
        raise typer.Exit(code=1)
    except InvalidItemError as e:
        formatter.error(str(e), error_code="INVALID_ITEM")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)

    formatter.output(result, result["message"])


@app.command()
def remove(
    item_id: Annotated[str, typer.Argument(help="Item ID to remove")],
) -> None:
    """Remove an item from the grocery list."""
    try:
        result = get_list_manager().remove_item(item_id)
    except NotSignedInError as e:
        formatter.error(str(e), error_code="NOT_SIGNED_IN")
        raise typer.Exit(code=1)
    except ItemNotFoundError as e:
        formatter.error(str(e), error_code="ITEM_NOT_FOUND")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)

    formatter.output(result, result["message"])


@app.command()
def update(
    item_id: Annotated[str, typer.Argument(help="Item ID to update")],
    name: Annotated[str | None, typer.Option("--name", help="New name")] = None,
    quantity: Annotated[int | None, typer.Option("--quantity", "-q", help="New quantity")] = None,
    size: Annotated[str | None, typer.Option("--size", "-s", help="New size")] = None,
    category: Annotated[
        Category | None, typer.Option("--category", "-c", help="New category")
    ] = None,
) -> None:
    """Update an item on the grocery list."""
    try:
        result = get_list_manager().update_item(
            item_id, name=name, quantity=quantity, size=size, category=category
        )
    except NotSignedInError as e:
        formatter.error(str(e), error_code="NOT_SIGNED_IN")
        raise typer.Exit(code=1)
    except ItemNotFoundError as e:
        formatter.error(str(e), error_code="ITEM_NOT_FOUND")
        raise typer.Exit(code=1)
    except InvalidItemError as e:
        formatter.error(str(e), error_code="INVALID_ITEM")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)

    formatter.output(result, result["message"])


@app.command(name="list")
def list_items(
    category: Annotated[
        Category | None, typer.Option("--category", "-c", help="Filter by category")
    ] = None,
    by_category: Annotated[bool, typer.Option("--by-category", help="Group by category")] = False,
) -> None:
    """View the grocery list."""
    try:
        manager = get_list_manager()
        if by_category:
            result = manager.get_by_category()
        else:
            result = manager.get_list(category=category)
    except NotSignedInError as e:
        formatter.error(str(e), error_code="NOT_SIGNED_IN")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)

    formatter.output(result)


@app.command()
def clear() -> None:
    """Remove every item from the grocery list."""
    try:
        result = get_list_manager().clear()
    except NotSignedInError as e:
        formatter.error(str(e), error_code="NOT_SIGNED_IN")
        raise typer.Exit(code=1)

    formatter.output(result, result["message"])


# --- Price catalog commands ---

price_app = typer.Typer(help="Price catalog commands")
app.add_typer(price_app, name="price")


@price_app.command("add")
def price_add(
    product: Annotated[str, typer.Argument(help="Product name")],
    retailer: Annotated[str, typer.Argument(help="Retailer name")],
    price: Annotated[float, typer.Argument(help="Price")],
    size: Annotated[str, typer.Option("--size", "-s", help="Package size")] = "",
) -> None:
    """Record a product price at a retailer."""
    try:
        result = get_price_catalog().add_price(product, retailer, price, size=size)
    except InvalidPriceError as e:
        formatter.error(str(e), error_code="INVALID_PRICE")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)

    formatter.output(result, result["message"])


@price_app.command("remove")
def price_remove(
    price_id: Annotated[str, typer.Argument(help="Price record ID")],
) -> None:
    """Remove a price record."""
    try:
        result = get_price_catalog().remove_price(price_id)
    except PriceNotFoundError as e:
        formatter.error(str(e), error_code="PRICE_NOT_FOUND")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)

    formatter.output(result, result["message"])


@price_app.command("list")
def price_list(
    retailer: Annotated[str | None, typer.Option("--retailer", "-r", help="Retailer")] = None,
    product: Annotated[str | None, typer.Option("--product", "-p", help="Product")] = None,
) -> None:
    """List known prices."""
    try:
        result = get_price_catalog().list_prices(retailer=retailer, product=product)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)

    formatter.output(result)


@price_app.command("retailers")
def price_retailers() -> None:
    """List retailers that have prices."""
    try:
        result = get_price_catalog().list_retailers()
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)

    formatter.output(result)


@price_app.command("import")
def price_import(
    data: Annotated[str | None, typer.Option("--data", "-d", help="JSON price data")] = None,
    file: Annotated[Path | None, typer.Option("--file", "-f", help="Path to JSON file")] = None,
) -> None:
    """Import price records from JSON."""
    if not data and not file:
        formatter.error("Must provide either --data or --file", error_code="INVALID_IMPORT")
        raise typer.Exit(code=1)

    try:
        if data:
            payload = json.loads(data)
        else:
            with open(file) as f:  # type: ignore[arg-type]
                payload = json.load(f)
        result = get_price_catalog().import_prices(payload)
    except json.JSONDecodeError as e:
        formatter.error(f"Invalid JSON: {e}", error_code="INVALID_IMPORT")
        raise typer.Exit(code=1)
    except PriceImportError as e:
        formatter.error(str(e), error_code="INVALID_IMPORT")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)

    formatter.output(result, result["message"])


@price_app.command("clear")
def price_clear() -> None:
    """Remove every price record."""
    result = get_price_catalog().clear()
    formatter.output(result, result["message"])


# --- Planning ---


@app.command()
def plan(
    stores: Annotated[
        str | None,
        typer.Option("--stores", "-n", help="Number of stores to visit (1-5)"),
    ] = None,
) -> None:
    """Find the cheapest stores to buy the whole list."""
    try:
        planner = get_planner()
        requested = stores if stores is not None else get_config().defaults.max_stores
        result = planner.best_plan(requested)
    except NotSignedInError:
        formatter.error("Please log in to view prices.", error_code="NOT_SIGNED_IN")
        raise typer.Exit(code=1)
    except Exception as e:
        formatter.error(str(e))
        raise typer.Exit(code=1)

    if result["data"]["price_count"] == 0 and not formatter.json_mode:
        formatter.warning("No price data available.")
    formatter.output(result, result["message"])


@app.command()
def tui() -> None:
    """Open the interactive terminal UI."""
    from .tui import GrocerySaverTUI

    try:
        list_manager = get_list_manager()
    except NotSignedInError as e:
        formatter.error(str(e), error_code="NOT_SIGNED_IN")
        raise typer.Exit(code=1)

    cfg = get_config()
    GrocerySaverTUI(
        list_manager,
        get_price_catalog(),
        store_limit=cfg.planner.store_limit,
        default_store_count=cfg.defaults.max_stores,
    ).run()


if __name__ == "__main__":
    app()
