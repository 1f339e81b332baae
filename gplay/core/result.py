"""Result type for explicit error handling.

Every call that talks to the Play API, the filesystem or the auth provider
returns a ``Result`` instead of raising. Callers branch on ``Ok``/``Err`` and
decide whether an error is fatal, recoverable, or only worth a warning.

Usage:
    opened = manager.open("com.example.app")
    if isinstance(opened, Err):
        return opened
    session = opened.value

    # Or with pattern matching
    match manager.open("com.example.app"):
        case Ok(session):
            ...
        case Err(error):
            console.error(error.message)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    value: T

    def map[U](self, f: Callable[[T], U]) -> Ok[U]:
        """Transform the carried value."""
        return Ok(f(self.value))

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    error: E

    def map(self, f: Callable[[object], object]) -> Err[E]:
        # Failures pass through untouched.
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
