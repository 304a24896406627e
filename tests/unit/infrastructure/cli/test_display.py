import pytest
from unittest.mock import MagicMock

from rich.panel import Panel

from resilient.infrastructure.cli.display import ConsoleDisplay


@pytest.fixture
def mock_console():
    """Fixture to create a mock rich Console object."""
    return MagicMock()


@pytest.fixture
def console_display(mock_console: MagicMock):
    """Fixture to create a ConsoleDisplay instance with a mocked console."""
    display = ConsoleDisplay()
    display.console = mock_console  # Inject the mock
    return display


def test_display_result_json(console_display: ConsoleDisplay, mock_console: MagicMock):
    console_display.display_result({"id": 1, "title": "hi"})

    mock_console.print_json.assert_called_once()
    printed = mock_console.print_json.call_args.args[0]
    assert '"title": "hi"' in printed


def test_display_result_with_title_uses_panel(console_display: ConsoleDisplay, mock_console: MagicMock):
    console_display.display_result([1, 2], title="GET /numbers")

    args, _ = mock_console.print.call_args
    assert isinstance(args[0], Panel)
    assert args[0].title == "GET /numbers"


def test_display_result_text(console_display: ConsoleDisplay, mock_console: MagicMock):
    console_display.display_result("pong [raw]")
    mock_console.print.assert_called_once_with("pong [raw]", markup=False, highlight=False)


def test_display_result_empty(console_display: ConsoleDisplay, mock_console: MagicMock):
    console_display.display_result(None)
    mock_console.print.assert_called_once_with("[dim](empty response)[/dim]")


def test_display_error(console_display: ConsoleDisplay, mock_console: MagicMock):
    """Test that display_error calls console.print with error formatting."""
    console_display.display_error("Something went wrong")
    mock_console.print.assert_called_once_with("[bold red]Error:[/bold red] Something went wrong")


def test_display_error_escapes_markup(console_display: ConsoleDisplay, mock_console: MagicMock):
    console_display.display_error("bad [bold]input")
    mock_console.print.assert_called_once_with("[bold red]Error:[/bold red] bad \\[bold]input")


def test_display_info(console_display: ConsoleDisplay, mock_console: MagicMock):
    """Test that display_info calls console.print with info formatting."""
    console_display.display_info("Process completed")
    mock_console.print.assert_called_once_with("[blue]Info:[/blue] Process completed")
