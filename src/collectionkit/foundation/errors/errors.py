"""Library-originated errors.

Errors raised by caller operations are never wrapped or translated; the
types here only cover misuse of the barrier and the cooperative stop signal.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    """Machine-readable codes for collectionkit errors."""
    BARRIER_NOT_ENTERED = "BARRIER_NOT_ENTERED"
    BARRIER_CLOSED = "BARRIER_CLOSED"
    DUPLICATE_INDEX = "DUPLICATE_INDEX"
    UNIT_CANCELLED = "UNIT_CANCELLED"
    UNKNOWN = "UNKNOWN"


class CollectionkitError(Exception):
    """Base exception for errors raised by collectionkit itself.

    Attributes:
        code: Error classification
        message: Human-readable message
    """

    default_code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(self, message: str, *, code: ErrorCode | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class BarrierError(CollectionkitError):
    """Raised when a JoinBarrier is used outside its lifecycle."""

    default_code = ErrorCode.BARRIER_CLOSED


class UnitCancelled(CollectionkitError):
    """Raised inside a work unit that observed a cancellation request."""

    default_code = ErrorCode.UNIT_CANCELLED

    def __init__(self, message: str = "work unit cancelled") -> None:
        super().__init__(message)
