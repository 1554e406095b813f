"""Async connection to the hosted record store."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from tripledger._transport import HttpTransport
from tripledger.remote import CollectionName, HttpCollection
from tripledger.config import LedgerConfig
from tripledger.exceptions import LedgerError

_logger = logging.getLogger(__name__)


class LedgerClient:
    """Async client for the record store collections.

    Usage::

        async with LedgerClient(config) as client:
            store = RecordStore(client)
            await store.load()
    """

    def __init__(
        self,
        config: LedgerConfig,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: HttpTransport | None = None
        self._collections: dict[CollectionName, HttpCollection] = {}

    @property
    def config(self) -> LedgerConfig:
        return self._config

    @property
    def is_open(self) -> bool:
        return self._transport is not None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> LedgerClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        _logger.debug("Opened record store client for project %s", self._config.project_id)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None
        self._collections.clear()

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    def _require_transport(self) -> HttpTransport:
        if self._transport is None:
            raise LedgerError("Client not initialized. Use 'async with LedgerClient(...) as client:'")
        return self._transport

    def collection(self, name: CollectionName) -> HttpCollection:
        """Return the collection handle for *name*."""
        transport = self._require_transport()
        handle = self._collections.get(name)
        if handle is None:
            handle = HttpCollection(self._config, transport, CollectionName(name))
            self._collections[name] = handle
        return handle
