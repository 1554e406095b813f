"""Named record collections of the remote store.

A collection is the only surface :class:`~tripledger.store.RecordStore`
talks to.  Records cross this boundary as flat camelCase mappings.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Protocol

from tripledger._transport import Transport
from tripledger.config import LedgerConfig
from tripledger.exceptions import LedgerTransportError, RecordNotFoundError

_logger = logging.getLogger(__name__)

Record = dict[str, Any]


class CollectionName(enum.StrEnum):
    CLIENTS = "clients"
    TRIPS = "trips"
    TRIP_HISTORY = "tripHistory"
    DOCUMENTS = "documents"


class RemoteCollection(Protocol):
    """Async CRUD over one named collection."""

    async def get_all(self) -> list[Record]:
        ...

    async def get(self, record_id: str) -> Record | None:
        ...

    async def add(self, record: Record) -> Record:
        ...

    async def update(self, record_id: str, record: Record) -> Record:
        ...

    async def delete(self, record_id: str) -> None:
        ...


class CollectionProvider(Protocol):
    def collection(self, name: CollectionName) -> RemoteCollection:
        ...


def _expect_record(value: Any, endpoint: str) -> Record:
    if not isinstance(value, dict):
        raise LedgerTransportError(
            f"Expected a record from {endpoint}, got {type(value).__name__}",
            endpoint=endpoint,
        )
    return value


class HttpCollection:
    """:class:`RemoteCollection` backed by the record store HTTP API."""

    def __init__(self, config: LedgerConfig, transport: Transport, name: CollectionName) -> None:
        self._config = config
        self._transport = transport
        self.name = name

    def _path(self, record_id: str | None = None) -> str:
        return self._config.collection_path(self.name.value, record_id)

    async def get_all(self) -> list[Record]:
        endpoint = self._path()
        data = await self._transport.request("GET", endpoint)
        if data is None:
            return []
        if not isinstance(data, list):
            raise LedgerTransportError(
                f"Expected a list from {endpoint}, got {type(data).__name__}",
                endpoint=endpoint,
            )
        return [_expect_record(item, endpoint) for item in data]

    async def get(self, record_id: str) -> Record | None:
        endpoint = self._path(record_id)
        try:
            data = await self._transport.request("GET", endpoint)
        except RecordNotFoundError:
            return None
        if data is None:
            return None
        return _expect_record(data, endpoint)

    async def add(self, record: Record) -> Record:
        endpoint = self._path()
        payload = {key: value for key, value in record.items() if key != "id"}
        created = _expect_record(await self._transport.request("POST", endpoint, payload), endpoint)
        if not created.get("id"):
            raise LedgerTransportError(f"{endpoint} returned a record without id", endpoint=endpoint)
        return created

    async def update(self, record_id: str, record: Record) -> Record:
        endpoint = self._path(record_id)
        payload = {key: value for key, value in record.items() if key != "id"}
        data = await self._transport.request("PUT", endpoint, payload)
        if data is None:
            # Some deployments answer 204; the submitted record is then authoritative.
            return {**payload, "id": record_id}
        updated = _expect_record(data, endpoint)
        updated.setdefault("id", record_id)
        return updated

    async def delete(self, record_id: str) -> None:
        """Delete a record.  Deleting a missing record is not an error."""
        endpoint = self._path(record_id)
        try:
            await self._transport.request("DELETE", endpoint)
        except RecordNotFoundError:
            _logger.debug("%s already deleted", endpoint)
