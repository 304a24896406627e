import json
import logging
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.box import ROUNDED
from rich.markup import escape
from rich.text import Text

from resilient.domain.interfaces.user_interface import UserInterface

logger = logging.getLogger(__name__)


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self):
        """Initializes the rich Console."""
        self._console = Console()

    @property
    def console(self):
        """Get the Rich console instance for direct operations."""
        return self._console

    @console.setter
    def console(self, value) -> None:
        self._console = value

    def display_result(self, result: Any, **kwargs: Any) -> None:
        """Displays a response body.

        JSON-compatible data is pretty printed, text is shown as is, and an
        empty body shows a short note.

        Args:
            result: The decoded response body.
            **kwargs: Additional arguments including:
                - title: Panel title (e.g. "GET /posts"). No panel if omitted.
        """
        title = kwargs.get("title")
        logger.debug(f"display_result called: title={title}, type={type(result).__name__}")

        if result is None:
            self.console.print("[dim](empty response)[/dim]")
            return

        if isinstance(result, (dict, list)):
            text = json.dumps(result, indent=2, ensure_ascii=False)
            if title:
                self.console.print(Panel(Text(text), title=title, title_align="left", box=ROUNDED, padding=(0, 1)))
            else:
                self.console.print_json(text)
            return

        self.console.print(str(result), markup=False, highlight=False)

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        self.console.print(f"[bold red]Error:[/bold red] {escape(error_message)}")

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        self.console.print(f"[blue]Info:[/blue] {escape(info_message)}")
