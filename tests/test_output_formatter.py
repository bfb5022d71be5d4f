"""Tests for output formatting."""

import json
import re
from datetime import datetime
from io import StringIO
from uuid import uuid4

import pytest
from rich.console import Console

from grocery_saver.output_formatter import JSONEncoder, OutputFormatter


def strip_ansi(text: str) -> str:
    """Remove ANSI escape codes from text."""
    ansi_escape = re.compile(r"\x1b\[[0-9;]*m")
    return ansi_escape.sub("", text)


@pytest.fixture
def rich_formatter():
    """Rich formatter writing into a buffer."""
    formatter = OutputFormatter(json_mode=False)
    formatter.console = Console(file=StringIO(), force_terminal=True, width=100)
    return formatter


def rendered(formatter: OutputFormatter) -> str:
    return strip_ansi(formatter.console.file.getvalue())


class TestJSONEncoder:
    """Tests for JSONEncoder."""

    def test_encode_uuid(self):
        """UUID encoded as string."""
        test_id = uuid4()
        assert str(test_id) in json.dumps({"id": test_id}, cls=JSONEncoder)

    def test_encode_datetime(self):
        """Datetime encoded as ISO format."""
        dt = datetime(2024, 1, 15, 10, 30)
        assert "2024-01-15T10:30:00" in json.dumps({"time": dt}, cls=JSONEncoder)

    def test_encode_fallback(self):
        """Non-special types raise TypeError."""
        with pytest.raises(TypeError):
            json.dumps({"bad": object()}, cls=JSONEncoder)


class TestOutputFormatterJSON:
    """Tests for JSON output mode."""

    def test_json_mode_output(self, capsys):
        """JSON mode outputs valid JSON."""
        OutputFormatter(json_mode=True).output({"success": True, "data": {"test": "value"}})
        data = json.loads(capsys.readouterr().out)
        assert data["data"]["test"] == "value"

    def test_json_error(self, capsys):
        """JSON error output."""
        OutputFormatter(json_mode=True).error("Something went wrong", error_code="TEST_ERROR")
        data = json.loads(capsys.readouterr().out)
        assert data == {
            "success": False,
            "error": "Something went wrong",
            "error_code": "TEST_ERROR",
        }

    def test_json_success(self, capsys):
        """JSON success output."""
        OutputFormatter(json_mode=True).success("Done", data={"count": 5})
        data = json.loads(capsys.readouterr().out)
        assert data["message"] == "Done"
        assert data["data"]["count"] == 5

    def test_json_warning(self, capsys):
        """JSON warning output."""
        OutputFormatter(json_mode=True).warning("Careful")
        assert json.loads(capsys.readouterr().out)["warning"] == "Careful"


class TestOutputFormatterRich:
    """Tests for Rich output mode."""

    def test_rich_error_output(self, rich_formatter):
        """Rich error includes error message."""
        rich_formatter.error("Test error message")
        assert "Test error message" in rendered(rich_formatter)

    def test_render_empty_list(self, rich_formatter):
        """Empty lists show a hint."""
        rich_formatter.output({"success": True, "data": {"list": {"items": []}}})
        assert "No items yet." in rendered(rich_formatter)

    def test_render_list(self, rich_formatter):
        """List rows show name, size and quantity."""
        item_id = str(uuid4())
        rich_formatter.output(
            {
                "success": True,
                "data": {
                    "list": {
                        "items": [
                            {
                                "id": item_id,
                                "name": "Milk",
                                "size": "1 gal",
                                "category": "protein",
                                "quantity": 2,
                            }
                        ]
                    }
                },
            }
        )
        output = rendered(rich_formatter)
        assert "Milk" in output
        assert "1 gal" in output
        assert item_id[:8] in output

    def test_render_prices(self, rich_formatter):
        """Price rows show the formatted price."""
        rich_formatter.output(
            {
                "success": True,
                "data": {
                    "prices": [
                        {
                            "id": str(uuid4()),
                            "product_name": "Milk",
                            "retailer_name": "Acme",
                            "price": 2.5,
                            "size": "",
                        }
                    ]
                },
            }
        )
        output = rendered(rich_formatter)
        assert "Acme" in output
        assert "$2.50" in output

    def test_render_plan(self, rich_formatter):
        """Plans show the store set and total."""
        rich_formatter.output(
            {
                "success": True,
                "data": {
                    "plan": {
                        "store_set": ["A", "B"],
                        "total_cost": 3.0,
                        "line_items": [
                            {"name": "eggs", "price": 1.0, "retailer": "B", "quantity": 1},
                            {"name": "milk", "price": 2.0, "retailer": "A", "quantity": 1},
                        ],
                    },
                    "store_count": 2,
                },
            }
        )
        output = rendered(rich_formatter)
        assert "Stores: A, B" in output
        assert "Total: $3.00" in output
        assert "eggs" in output

    def test_render_no_plan(self, rich_formatter):
        """A missing plan shows the hint."""
        rich_formatter.output({"success": True, "data": {"plan": None, "store_count": 1}})
        assert "Try increasing the number of stores." in rendered(rich_formatter)

    def test_render_session(self, rich_formatter):
        """Session output names the user."""
        rich_formatter.output(
            {"success": True, "data": {"session": {"mode": "user", "user": "a@x.com"}}}
        )
        assert "Signed in as: a@x.com" in rendered(rich_formatter)
