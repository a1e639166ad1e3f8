"""Error-reporting collaborators for reverted changes."""

from __future__ import annotations

from abc import ABC, abstractmethod

from rich.console import Console

from stride_cli.utils.logger import get_component_logger
from stride_cli.utils.ui.console import get_console


class ErrorReporter(ABC):
    """Receives a notice every time an optimistic change is reverted."""

    @abstractmethod
    def report(self, message: str, error: BaseException | None = None) -> None:
        """Surface a failure to the user."""


class ConsoleErrorReporter(ErrorReporter):
    """Prints reverted changes to a Rich console and logs them."""

    def __init__(self, console: Console | None = None):
        self.console = console or get_console(stderr=True)
        self.count = 0
        self._log = get_component_logger("notifications")

    def report(self, message: str, error: BaseException | None = None) -> None:
        self.count += 1
        self._log.error("%s (%s)", message, error)
        detail = f" [dim]({error})[/dim]" if error is not None else ""
        self.console.print(f"[bold yellow]Reverted:[/bold yellow] {message}{detail}")


class RecordingErrorReporter(ErrorReporter):
    """Keeps reports in memory, for embedding applications and tests."""

    def __init__(self):
        self.reports: list[tuple[str, BaseException | None]] = []

    def report(self, message: str, error: BaseException | None = None) -> None:
        self.reports.append((message, error))

    @property
    def messages(self) -> list[str]:
        return [message for message, _ in self.reports]

    def clear(self) -> None:
        self.reports.clear()
