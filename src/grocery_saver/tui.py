"""Terminal UI for Grocery Saver."""

from __future__ import annotations

from typing import Any

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Label,
    Static,
    TabbedContent,
    TabPane,
)

from .list_manager import InvalidItemError, ItemNotFoundError, ListManager
from .models import Category
from .planner import ShoppingPlanner
from .price_catalog import PriceCatalogManager
from .solver import MAX_STORE_COUNT


class ListItemFormScreen(ModalScreen[dict[str, Any] | None]):
    """Modal dialog to add a grocery list item."""

    DEFAULT_CSS = """
    ListItemFormScreen {
        align: center middle;
    }

    #list-item-form-dialog {
        width: 60;
        height: auto;
        padding: 1 2;
        border: round $primary;
        background: $surface;
    }

    #list-item-form-actions {
        align-horizontal: right;
        height: auto;
        margin-top: 1;
    }

    .field-label {
        margin-top: 1;
    }
    """

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def compose(self) -> ComposeResult:
        categories = " | ".join(c.value for c in Category)

        with Vertical(id="list-item-form-dialog"):
            yield Label("Add Item", classes="field-label")
            yield Label("Name (required)", classes="field-label")
            yield Input(placeholder="Milk", id="name")
            yield Label("Size (optional)", classes="field-label")
            yield Input(placeholder="1 gal", id="size")
            yield Label(f"Category: {categories}", classes="field-label")
            yield Input(value=Category.PRODUCE.value, id="category")
            yield Label("Quantity", classes="field-label")
            yield Input(value="1", id="quantity")
            with Horizontal(id="list-item-form-actions"):
                yield Button("Cancel", id="cancel")
                yield Button("Add Item", id="submit", variant="primary")

    def action_cancel(self) -> None:
        self.dismiss(None)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel":
            self.dismiss(None)
            return

        if event.button.id != "submit":
            return

        self.dismiss(
            {
                "name": self.query_one("#name", Input).value,
                "size": self.query_one("#size", Input).value,
                "category": self.query_one("#category", Input).value,
                "quantity": self.query_one("#quantity", Input).value.strip(),
            }
        )


class GrocerySaverTUI(App[None]):
    """Interactive terminal UI for the grocery list and best plan."""

    TITLE = "Grocery Saver"
    SUB_TITLE = "Find Best Prices"

    DEFAULT_CSS = """
    #status {
        dock: bottom;
        height: 1;
        padding: 0 1;
        background: $boost;
        color: $text;
    }

    #plan-controls {
        height: auto;
    }

    #store-count {
        width: 20;
    }

    DataTable {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("a", "add_item", "Add Item"),
        Binding("x", "remove_selected", "Remove Selected"),
        Binding("g", "show_groceries", "Groceries Tab"),
        Binding("p", "show_plan", "Plan Tab"),
    ]

    def __init__(
        self,
        list_manager: ListManager,
        price_catalog: PriceCatalogManager,
        store_limit: int = MAX_STORE_COUNT,
        default_store_count: int = 1,
    ):
        super().__init__()
        self.list_manager = list_manager
        self.planner = ShoppingPlanner(list_manager, price_catalog, store_limit=store_limit)
        self.default_store_count = default_store_count
        self._item_ids: list[str] = []

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with TabbedContent(initial="groceries"):
            with TabPane("Groceries", id="groceries"):
                yield DataTable(id="grocery-table")
            with TabPane("Best Plan", id="plan"):
                with Horizontal(id="plan-controls"):
                    yield Label(f"Number of Stores (1-{self.planner.store_limit}) ")
                    yield Input(value=str(self.default_store_count), id="store-count")
                    yield Button("Recalculate", id="recalculate", variant="primary")
                yield Static("", id="plan-summary")
                yield DataTable(id="plan-table")
        yield Static("a:add  x:remove  g:groceries  p:plan  r:refresh  q:quit", id="status")
        yield Footer()

    def on_mount(self) -> None:
        grocery_table = self.query_one("#grocery-table", DataTable)
        grocery_table.cursor_type = "row"
        grocery_table.add_columns("Item", "Size", "Category", "Qty")

        plan_table = self.query_one("#plan-table", DataTable)
        plan_table.add_columns("Item", "Qty", "Retailer", "Price")

        self.action_refresh()

    def action_refresh(self) -> None:
        try:
            self._refresh_grocery_table()
            self._refresh_plan()
            self._set_status("Refreshed grocery list and plan")
        except Exception as exc:
            self._set_status(f"Refresh failed: {exc}")

    def action_add_item(self) -> None:
        self.push_screen(ListItemFormScreen(), self._handle_add_item)

    def action_remove_selected(self) -> None:
        item_id = self._selected_id()
        if item_id is None:
            self._set_status("No item selected")
            return

        try:
            result = self.list_manager.remove_item(item_id)
        except ItemNotFoundError as exc:
            self._set_status(str(exc))
            return

        self._refresh_grocery_table()
        self._refresh_plan()
        self._set_status(result["message"])

    def action_show_groceries(self) -> None:
        self.query_one(TabbedContent).active = "groceries"

    def action_show_plan(self) -> None:
        self.query_one(TabbedContent).active = "plan"

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "recalculate":
            self._refresh_plan()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "store-count":
            self._refresh_plan()

    def _handle_add_item(self, payload: dict[str, Any] | None) -> None:
        if payload is None:
            return

        try:
            result = self.list_manager.add_item(
                name=payload["name"],
                size=payload["size"],
                category=payload["category"],
                quantity=payload["quantity"],
            )
        except InvalidItemError as exc:
            self.bell()
            self._set_status(str(exc))
            return

        self._refresh_grocery_table()
        self._refresh_plan()
        self._set_status(result["message"])

    def _refresh_grocery_table(self) -> None:
        table = self.query_one("#grocery-table", DataTable)
        table.clear(columns=False)
        self._item_ids = []

        items = self.list_manager.get_list()["data"]["list"]["items"]
        for item in items:
            item_id = str(item["id"])
            self._item_ids.append(item_id)
            table.add_row(
                item["name"],
                item.get("size") or "-",
                item["category"],
                str(item["quantity"]),
                key=item_id,
            )

        if self._item_ids:
            table.move_cursor(row=0, column=0)

    def _refresh_plan(self) -> None:
        count_input = self.query_one("#store-count", Input)
        result = self.planner.best_plan(count_input.value)
        count_input.value = str(result["data"]["store_count"])

        table = self.query_one("#plan-table", DataTable)
        table.clear(columns=False)
        summary = self.query_one("#plan-summary", Static)

        plan = result["data"]["plan"]
        if plan is None:
            summary.update(result["message"])
            return

        summary.update(
            f"Total: ${plan['total_cost']:.2f}\nStores: {', '.join(plan['store_set'])}"
        )
        for line in plan["line_items"]:
            table.add_row(
                line["name"],
                f"x{line['quantity']}",
                line["retailer"],
                f"${line['price']:.2f}",
            )

    def _selected_id(self) -> str | None:
        table = self.query_one("#grocery-table", DataTable)
        row = table.cursor_row
        if row is None or row < 0 or row >= len(self._item_ids):
            return None
        return self._item_ids[row]

    def _set_status(self, message: str) -> None:
        self.query_one("#status", Static).update(message)
