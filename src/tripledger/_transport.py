"""JSON-over-HTTP transport for the hosted record store."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Protocol

import aiohttp

from tripledger._redact import redact_for_log
from tripledger.config import LedgerConfig
from tripledger.exceptions import LedgerApiError, LedgerTransportError, RecordNotFoundError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by collections.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def request(self, method: str, endpoint: str, payload: Any = None) -> Any:
        ...


def _error_details(body: Any) -> tuple[str, str]:
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            return str(error.get("code", "")), str(error.get("message", ""))
        if isinstance(error, str):
            return "", error
    return "", ""


class HttpTransport:
    """Sends JSON requests and unwraps the ``{"data": ...}`` envelope."""

    def __init__(self, config: LedgerConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    def _headers(self) -> dict[str, str]:
        headers = {
            "accept": "application/json",
            "content-type": "application/json; charset=UTF-8",
            "user-agent": self._config.user_agent,
        }
        if self._config.api_token:
            headers["authorization"] = f"Bearer {self._config.api_token}"
        return headers

    async def request(self, method: str, endpoint: str, payload: Any = None) -> Any:
        """Perform one request and return the ``data`` member of the reply.

        Raises
        ------
        RecordNotFoundError
            On HTTP 404.
        LedgerApiError
            When the store answers 2xx with an ``error`` member, or 4xx.
        LedgerTransportError
            On network failures, timeouts, 5xx and bodies that are not UTF-8 JSON.
        """
        url = f"{self._config.base_url}{endpoint}"
        body = json.dumps(payload, ensure_ascii=False) if payload is not None else None
        timeout = aiohttp.ClientTimeout(total=self._config.request_timeout)

        _logger.debug("%s %s", method, url)
        if self._config.api_trace_enabled and payload is not None:
            _logger.debug("Request body for %s %s: %s", method, endpoint, redact_for_log(payload))

        try:
            async with self._http.request(method, url, data=body, headers=self._headers(), timeout=timeout) as resp:
                status = resp.status
                text = await resp.text()
        except aiohttp.ClientError as exc:
            raise LedgerTransportError(
                f"{method} {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc
        except asyncio.TimeoutError as exc:
            raise LedgerTransportError(
                f"{method} {endpoint} timed out after {self._config.request_timeout}s",
                endpoint=endpoint,
            ) from exc
        except UnicodeDecodeError as exc:
            raise LedgerTransportError(
                f"Undecodable response body from {endpoint}: {exc}",
                endpoint=endpoint,
            ) from exc

        decoded: Any = None
        if text.strip():
            try:
                decoded = json.loads(text)
            except json.JSONDecodeError as exc:
                if 200 <= status < 300:
                    raise LedgerTransportError(
                        f"Invalid JSON from {endpoint}: {text[:200]}",
                        status_code=status,
                        endpoint=endpoint,
                    ) from exc

        if self._config.api_trace_enabled:
            _logger.debug("Response %s for %s %s: %s", status, method, endpoint, redact_for_log(decoded))

        code, message = _error_details(decoded)
        if status == 404:
            raise RecordNotFoundError(
                message or f"{endpoint} not found",
                code=code or "404",
                endpoint=endpoint,
            )
        if status >= 500 or status < 200:
            raise LedgerTransportError(
                f"HTTP {status} from {endpoint}: {text[:200]}",
                status_code=status,
                endpoint=endpoint,
            )
        if status >= 300:
            raise LedgerApiError(
                message or f"HTTP {status} from {endpoint}",
                code=code or str(status),
                endpoint=endpoint,
            )
        if code or message:
            raise LedgerApiError(
                f"{endpoint} failed: code={code} message={message}",
                code=code,
                endpoint=endpoint,
            )

        if isinstance(decoded, dict) and "data" in decoded:
            return decoded["data"]
        return decoded
