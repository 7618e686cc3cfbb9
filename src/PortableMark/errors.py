"""Errors raised while converting an event stream into portable text.

A conversion is all-or-nothing: any of these aborts it and no partial
document is returned.
"""

from __future__ import annotations

from typing import Any


class ConversionError(Exception):
    """Base class for conversion failures.

    ``event`` is the input event being processed when the failure happened.
    The dispatcher fills it in when the error was raised by a helper that
    does not see the event itself.
    """

    def __init__(self, message: str, event: Any = None) -> None:
        super().__init__(message)
        self.reason = message
        self.event = event

    def __str__(self) -> str:
        if self.event is None:
            return self.reason
        return f"{self.reason} (at {self.event!r})"


class StructuralImbalance(ConversionError):
    """An End event without matching state, or input ending with state still open."""


class UnresolvedMarkReference(ConversionError):
    """A closing link whose mark definition is not registered in the open block."""


class ResolverFailure(ConversionError):
    """The asset resolver raised while resolving an image reference."""

    def __init__(self, message: str, event: Any = None, original_error: Exception | None = None) -> None:
        super().__init__(message, event)
        self.original_error = original_error
