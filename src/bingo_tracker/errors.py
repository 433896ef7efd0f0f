"""Typed failures reported by the game engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class BingoError(Exception):
    """Base engine error. Every failure is recoverable by the caller."""

    code: str
    message: str
    details: Any | None = None

    def __str__(self) -> str:
        return self.message


class OutOfRangeError(BingoError):
    """Numeric input outside its valid bound."""

    def __init__(self, message: str = "Number out of range", details: Any | None = None) -> None:
        super().__init__(code="out_of_range", message=message, details=details)


class DuplicateIdError(BingoError):
    """A card with the same identifier already exists."""

    def __init__(self, message: str = "Duplicate card id", details: Any | None = None) -> None:
        super().__init__(code="duplicate_id", message=message, details=details)


class DuplicateError(BingoError):
    """Number collision inside the draw history."""

    def __init__(self, message: str = "Duplicate number", details: Any | None = None) -> None:
        super().__init__(code="duplicate", message=message, details=details)


class AlreadyDrawnError(BingoError):
    """The number has been drawn already."""

    def __init__(self, message: str = "Number already drawn", details: Any | None = None) -> None:
        super().__init__(code="already_drawn", message=message, details=details)


class EmptyPoolError(BingoError):
    """All numbers have been drawn."""

    def __init__(self, message: str = "All numbers have been drawn", details: Any | None = None) -> None:
        super().__init__(code="empty_pool", message=message, details=details)


class NotFoundError(BingoError):
    """Operation on a card or history entry that does not exist."""

    def __init__(self, message: str = "Not found", details: Any | None = None) -> None:
        super().__init__(code="not_found", message=message, details=details)


class ValidationError(BingoError):
    """Malformed input."""

    def __init__(self, message: str = "Validation error", details: Any | None = None) -> None:
        super().__init__(code="validation_error", message=message, details=details)


class CardValidationError(ValidationError):
    """Manually entered card grid is malformed."""
