"""Output formatting for CLI and programmatic use."""

import json
from datetime import datetime
from typing import Any
from uuid import UUID

from rich.console import Console
from rich.panel import Panel
from rich.table import Table


class JSONEncoder(json.JSONEncoder):
    """Custom JSON encoder for output."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        return super().default(obj)


class OutputFormatter:
    """Formats output for both Rich terminal and JSON modes."""

    def __init__(self, json_mode: bool = False):
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON instead of Rich formatting
        """
        self.json_mode = json_mode
        self.console = Console()

    def output(self, data: dict[str, Any], message: str = "") -> None:
        """Output data in appropriate format.

        Args:
            data: Data to output
            message: Optional message for Rich mode
        """
        if self.json_mode:
            self._output_json(data)
        else:
            self._output_rich(data, message)

    def _output_json(self, data: dict[str, Any]) -> None:
        """Output as JSON to stdout."""
        print(json.dumps(data, cls=JSONEncoder, indent=2))

    def _output_rich(self, data: dict[str, Any], message: str) -> None:
        """Output with Rich formatting."""
        payload = data.get("data", {})

        if "plan" in payload:
            self._render_plan(data)
            return

        if message:
            self.console.print(f"[green]✓[/green] {message}")

        if "list" in payload:
            self._render_grocery_list(data)
        elif "item" in payload and isinstance(payload["item"], dict):
            self._render_item(data)
        elif "by_category" in payload:
            self._render_by_category(data)
        elif "prices" in payload:
            self._render_prices(data)
        elif "retailers" in payload:
            self._render_retailers(data)
        elif "session" in payload:
            self._render_session(data)

    def _render_grocery_list(self, data: dict) -> None:
        """Render grocery list with Rich."""
        list_data = data["data"]["list"]
        items = list_data["items"]

        if not items:
            self.console.print("[dim]No items yet.[/dim]")
            return

        table = Table(title="Grocery List", show_header=True, header_style="bold cyan")
        table.add_column("Item", style="cyan", no_wrap=False)
        table.add_column("Size", style="white")
        table.add_column("Category", style="yellow")
        table.add_column("Qty", style="magenta", justify="right")
        table.add_column("ID", style="dim")

        for item in items:
            table.add_row(
                item["name"],
                item.get("size") or "-",
                item.get("category", "produce"),
                str(item.get("quantity", 1)),
                str(item["id"])[:8],
            )

        self.console.print(table)
        self.console.print(f"\nTotal items: {len(items)}")

    def _render_item(self, data: dict) -> None:
        """Render a single item with Rich."""
        item = data["data"]["item"]
        details = [
            f"[bold]{item['name']}[/bold]",
            f"Category: {item.get('category', 'produce')}",
            f"Quantity: {item.get('quantity', 1)}",
        ]
        if item.get("size"):
            details.append(f"Size: {item['size']}")
        details.append(f"[dim]ID: {item['id']}[/dim]")

        self.console.print(Panel("\n".join(details), title="Item", border_style="cyan"))

    def _render_by_category(self, data: dict) -> None:
        """Render items grouped by category."""
        by_category = data["data"]["by_category"]
        if not by_category:
            self.console.print("[dim]No items yet.[/dim]")
            return

        for category, items in by_category.items():
            self.console.print(f"\n[bold yellow]{category}[/bold yellow] ({len(items)})")
            for item in items:
                size = f" • {item['size']}" if item.get("size") else ""
                self.console.print(f"  • {item['name']} x{item.get('quantity', 1)}{size}")

    def _render_prices(self, data: dict) -> None:
        """Render price records."""
        prices = data["data"]["prices"]
        if not prices:
            self.console.print("[dim]No price data available.[/dim]")
            return

        table = Table(title="Product Prices", show_header=True, header_style="bold cyan")
        table.add_column("Product", style="cyan")
        table.add_column("Retailer", style="green")
        table.add_column("Price", style="magenta", justify="right")
        table.add_column("Size", style="white")
        table.add_column("ID", style="dim")

        for record in prices:
            table.add_row(
                record["product_name"],
                record["retailer_name"],
                f"${record['price']:.2f}",
                record.get("size") or "-",
                str(record["id"])[:8],
            )

        self.console.print(table)

    def _render_retailers(self, data: dict) -> None:
        """Render the retailer list."""
        retailers = data["data"]["retailers"]
        if not retailers:
            self.console.print("[dim]No retailers yet.[/dim]")
            return
        for retailer in retailers:
            self.console.print(f"  • {retailer}")

    def _render_session(self, data: dict) -> None:
        """Render the active session."""
        session = data["data"]["session"]
        mode = session.get("mode")
        if mode == "guest":
            self.console.print("Guest mode (saved locally)")
        elif mode == "user":
            self.console.print(f"Signed in as: {session.get('user')}")
        else:
            self.console.print("[dim]Not signed in.[/dim]")

    def _render_plan(self, data: dict) -> None:
        """Render the best shopping plan."""
        payload = data["data"]
        plan = payload["plan"]

        if plan is None:
            self.console.print(
                "[yellow]No matching prices found. "
                "Try increasing the number of stores.[/yellow]"
            )
            return

        table = Table(
            title=f"Best Plan ({payload.get('store_count', len(plan['store_set']))} store max)",
            show_header=True,
            header_style="bold cyan",
        )
        table.add_column("Item", style="cyan")
        table.add_column("Qty", style="magenta", justify="right")
        table.add_column("Retailer", style="green")
        table.add_column("Price", justify="right")
        table.add_column("Subtotal", justify="right")

        for line in plan["line_items"]:
            table.add_row(
                line["name"],
                str(line["quantity"]),
                line["retailer"],
                f"${line['price']:.2f}",
                f"${line['price'] * line['quantity']:.2f}",
            )

        self.console.print(table)
        self.console.print(f"\nStores: [green]{', '.join(plan['store_set'])}[/green]")
        self.console.print(f"Total: [bold]${plan['total_cost']:.2f}[/bold]")

    def error(self, message: str, error_code: str | None = None) -> None:
        """Output error message.

        Args:
            message: Error message
            error_code: Optional error code
        """
        if self.json_mode:
            output = {"success": False, "error": message}
            if error_code:
                output["error_code"] = error_code
            print(json.dumps(output))
        else:
            self.console.print(f"[red]✗ Error:[/red] {message}")

    def success(self, message: str, data: dict | None = None) -> None:
        """Output success message.

        Args:
            message: Success message
            data: Optional data to include
        """
        if self.json_mode:
            output: dict[str, Any] = {"success": True, "message": message}
            if data:
                output["data"] = data
            print(json.dumps(output, cls=JSONEncoder))
        else:
            self.console.print(f"[green]✓[/green] {message}")

    def warning(self, message: str) -> None:
        """Output warning message.

        Args:
            message: Warning message
        """
        if self.json_mode:
            print(json.dumps({"warning": message}))
        else:
            self.console.print(f"[yellow]⚠[/yellow] {message}")
