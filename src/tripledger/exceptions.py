"""Custom exception hierarchy for tripledger."""

from __future__ import annotations


class LedgerError(Exception):
    """Base exception for all tripledger errors."""


class LedgerConfigError(LedgerError):
    """Invalid or missing configuration."""


class LedgerTransportError(LedgerError):
    """HTTP-level failure (network, timeout, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class LedgerApiError(LedgerError):
    """Record store returned an application-level error."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        endpoint: str = "",
    ) -> None:
        self.code = code
        self.endpoint = endpoint
        super().__init__(message)


class RecordNotFoundError(LedgerApiError):
    """The requested record does not exist in its collection.

    Raised by the transport for HTTP 404 responses.  Collections turn it
    into ``None`` for single-record reads and into a no-op for deletes.
    """
