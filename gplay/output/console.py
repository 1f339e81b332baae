"""Console output abstraction.

Services log through ``ConsoleProtocol`` instead of printing directly. The
protocol exposes three severity levels (output, warning, error) plus a dim
``hint`` line used when rendering error hints. The production implementation
uses Rich; ``MockConsole`` captures everything for tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol, runtime_checkable

__all__ = [
    "Style",
    "ConsoleProtocol",
    "RichConsole",
    "MockConsole",
    "OutputRecord",
]


class Style(Enum):
    """Severity of a console line."""

    OUTPUT = auto()
    WARNING = auto()
    ERROR = auto()
    HINT = auto()

    def __str__(self) -> str:
        return self.name.lower()


@runtime_checkable
class ConsoleProtocol(Protocol):
    """Logging capability injected into the workflow components."""

    def output(self, message: str) -> None:
        """Print a regular line to stdout."""
        ...

    def warning(self, message: str) -> None:
        """Print a warning line to stderr."""
        ...

    def error(self, message: str) -> None:
        """Print an error line to stderr."""
        ...

    def hint(self, message: str) -> None:
        """Print a dimmed secondary line to stderr."""
        ...


class RichConsole:
    """Console implementation using Rich library.

    Regular output goes to stdout, warnings and errors to stderr so that
    listings stay pipeable.
    """

    def __init__(self, *, no_color: bool = False) -> None:
        # Import Rich lazily to keep `gplay --help` fast
        from rich.console import Console

        self._out = Console(no_color=no_color, highlight=False, soft_wrap=True)
        self._err = Console(stderr=True, no_color=no_color, highlight=False, soft_wrap=True)

    def output(self, message: str) -> None:
        self._out.print(message, markup=False)

    def warning(self, message: str) -> None:
        self._err.print(f"warning: {message}", style="yellow", markup=False)

    def error(self, message: str) -> None:
        self._err.print(f"error: {message}", style="red bold", markup=False)

    def hint(self, message: str) -> None:
        self._err.print(f"hint: {message}", style="dim", markup=False)


@dataclass
class OutputRecord:
    """A single output record for MockConsole."""

    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console implementation that captures output for testing."""

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def output(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.OUTPUT))

    def warning(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.WARNING))

    def error(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.ERROR))

    def hint(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.HINT))

    # Test helper methods

    def clear(self) -> None:
        self.outputs.clear()

    def _with_style(self, style: Style) -> list[str]:
        return [o.message for o in self.outputs if o.style == style]

    @property
    def messages(self) -> list[str]:
        """Regular output lines, in order."""
        return self._with_style(Style.OUTPUT)

    @property
    def warnings(self) -> list[str]:
        return self._with_style(Style.WARNING)

    @property
    def errors(self) -> list[str]:
        return self._with_style(Style.ERROR)

    @property
    def text(self) -> str:
        """All captured lines, newline-separated."""
        return "\n".join(o.message for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        return [o for o in self.outputs if substring in o.message]
