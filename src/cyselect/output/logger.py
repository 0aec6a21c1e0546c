"""Levelled diagnostics on a Rich stderr console.

stdout is reserved for results (selected paths or JSON), so every
diagnostic, including ``info``, goes to stderr.
"""

from __future__ import annotations

from typing import Literal, Optional

from rich.console import Console
from rich.markup import escape

LogLevel = Literal["silent", "normal", "verbose", "debug"]
LOG_LEVELS = ("silent", "normal", "verbose", "debug")


class Logger:
    def __init__(self, level: LogLevel = "normal", console: Optional[Console] = None) -> None:
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {level!r}")
        self.level: LogLevel = level
        self.console = console or Console(stderr=True)

    def set_level(self, level: LogLevel) -> None:
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {level!r}")
        self.level = level

    @property
    def is_debug(self) -> bool:
        return self.level == "debug"

    @property
    def is_verbose(self) -> bool:
        return self.level in ("verbose", "debug")

    def info(self, message: str) -> None:
        if self.level != "silent":
            self.console.print(escape(message))

    def success(self, message: str) -> None:
        if self.level != "silent":
            self.console.print(f"[green]✓[/green] {escape(message)}")

    def warn(self, message: str) -> None:
        if self.level != "silent":
            self.console.print(f"[yellow]⚠[/yellow]  {escape(message)}")

    def error(self, message: str, exc: Optional[BaseException] = None) -> None:
        """Always shown; the exception detail only at debug level."""
        self.console.print(f"[bold red]Error:[/bold red] {escape(message)}")
        if exc is not None and self.is_debug:
            self.console.print(f"[dim]{escape(repr(exc))}[/dim]")

    def verbose(self, message: str) -> None:
        if self.is_verbose:
            self.console.print(f"[dim]{escape(message)}[/dim]")

    def debug(self, message: str) -> None:
        if self.is_verbose:
            self.console.print(f"[dim]· {escape(message)}[/dim]")
