"""Explicit success/failure results returned by :class:`RecordStore`.

Store operations never raise.  Instead of overloading ``None``/``False``
they return a :class:`StoreResult`, which keeps "record does not exist"
apart from "the store could not be reached".
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import ValidationError

from tripledger.exceptions import (
    LedgerApiError,
    LedgerError,
    LedgerTransportError,
    RecordNotFoundError,
)

T = TypeVar("T")


class FailureReason(enum.StrEnum):
    NOT_FOUND = "not_found"
    TRANSPORT = "transport"
    API = "api"
    INVALID = "invalid"
    UNAVAILABLE = "unavailable"


def classify_error(exc: Exception) -> FailureReason:
    """Map a caught exception to the failure reason reported to callers."""
    if isinstance(exc, RecordNotFoundError):
        return FailureReason.NOT_FOUND
    if isinstance(exc, LedgerTransportError):
        return FailureReason.TRANSPORT
    if isinstance(exc, LedgerApiError):
        return FailureReason.API
    if isinstance(exc, (ValidationError, ValueError)):
        return FailureReason.INVALID
    if isinstance(exc, LedgerError):
        return FailureReason.UNAVAILABLE
    return FailureReason.TRANSPORT


@dataclass(frozen=True, slots=True)
class StoreResult(Generic[T]):
    """Outcome of a store operation.

    Truthy on success.  ``value`` is only meaningful when ``ok`` is true;
    ``reason`` and ``message`` only when it is false.
    """

    value: T | None = None
    reason: FailureReason | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.reason is None

    def __bool__(self) -> bool:
        return self.ok

    @property
    def not_found(self) -> bool:
        return self.reason is FailureReason.NOT_FOUND

    def unwrap_or(self, default: T) -> T:
        if self.ok and self.value is not None:
            return self.value
        return default

    @classmethod
    def success(cls, value: T | None = None) -> StoreResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, reason: FailureReason, message: str = "") -> StoreResult[T]:
        return cls(reason=reason, message=message)
