"""In-memory record cache and sole writer of the remote record store.

:class:`RecordStore` holds the client and trip lists the presentation
layer renders, applies every create/update/delete remotely first and
patches its lists only after the store acknowledged the write.  Trip
updates additionally produce a :class:`TripHistory` entry; trip deletes
cascade to the trip's history and documents.

No operation raises.  Failures come back as a failed
:class:`StoreResult` and, for user-initiated writes, a message on the
``on_error`` callback.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, date, datetime
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from tripledger._constants import UNKNOWN_CLIENT_LABEL
from tripledger.diff import ChangeSet, diff_records
from tripledger.filters import filter_trips
from tripledger.models import Client, Document, LedgerBaseModel, Trip, TripFilter, TripHistory
from tripledger.remote import CollectionName, CollectionProvider, Record, RemoteCollection
from tripledger.result import FailureReason, StoreResult, classify_error
from tripledger.stats import StatisticsPeriod, TripSummary, summarize, trips_in_period

_logger = logging.getLogger(__name__)

M = TypeVar("M", bound=LedgerBaseModel)


_USER_MESSAGES: dict[str, str] = {
    "load": "Could not load data",
    "add_client": "Could not add client",
    "update_client": "Could not update client",
    "delete_client": "Could not delete client",
    "add_trip": "Could not add trip",
    "update_trip": "Could not update trip",
    "delete_trip": "Could not delete trip",
    "add_document": "Could not add document",
    "delete_document": "Could not delete document",
}

_NEGATIVE_AMOUNTS_MESSAGE = "Income and expenses must not be negative"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class StoreSnapshot(BaseModel):
    """Read-only view of the store state handed to the presentation layer."""

    model_config = ConfigDict(frozen=True)

    clients: tuple[Client, ...] = ()
    trips: tuple[Trip, ...] = ()
    filtered_trips: tuple[Trip, ...] = ()
    active_filter: TripFilter | None = None
    is_loading: bool = False


def _replace_by_id(items: list[M], record_id: str, replacement: M) -> list[M]:
    return [replacement if item.id == record_id else item for item in items]


def _without_id(items: list[M], record_id: str) -> list[M]:
    return [item for item in items if item.id != record_id]


class RecordStore:
    """Authoritative in-process cache of clients and trips.

    Parameters
    ----------
    provider
        Hands out :class:`RemoteCollection` handles, e.g. an open
        :class:`~tripledger.client.LedgerClient`.
    on_change
        Called with a fresh :class:`StoreSnapshot` after every state change.
    on_error
        Called with ``(operation, message)`` when a user-initiated
        operation fails.
    clock
        Returns the timestamp written to history entries.
    """

    def __init__(
        self,
        provider: CollectionProvider,
        *,
        on_change: Callable[[StoreSnapshot], None] | None = None,
        on_error: Callable[[str, str], None] | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._provider = provider
        self._on_change = on_change
        self._on_error = on_error
        self._clock = clock
        self._clients: list[Client] = []
        self._trips: list[Trip] = []
        self._filtered_trips: list[Trip] = []
        self._active_filter: TripFilter | None = None
        self._is_loading = False

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def clients(self) -> tuple[Client, ...]:
        return tuple(self._clients)

    @property
    def trips(self) -> tuple[Trip, ...]:
        return tuple(self._trips)

    @property
    def filtered_trips(self) -> tuple[Trip, ...]:
        return tuple(self._filtered_trips)

    @property
    def active_filter(self) -> TripFilter | None:
        return self._active_filter

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            clients=tuple(self._clients),
            trips=tuple(self._trips),
            filtered_trips=tuple(self._filtered_trips),
            active_filter=self._active_filter,
            is_loading=self._is_loading,
        )

    def reset(self) -> None:
        """Forget all cached state (sign-out)."""
        self._clients = []
        self._trips = []
        self._filtered_trips = []
        self._active_filter = None
        self._is_loading = False
        self._emit_change()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _collection(self, name: CollectionName) -> RemoteCollection:
        return self._provider.collection(name)

    def _emit_change(self) -> None:
        if self._on_change is None:
            return
        try:
            self._on_change(self.snapshot())
        except Exception:
            _logger.debug("on_change callback failed", exc_info=True)

    def _notify_error(self, operation: str, message: str) -> None:
        if self._on_error is None:
            return
        try:
            self._on_error(operation, message)
        except Exception:
            _logger.debug("on_error callback failed", exc_info=True)

    def _fail(self, operation: str, exc: Exception, *, notify: bool = True) -> StoreResult[Any]:
        reason = classify_error(exc)
        _logger.warning("%s failed (%s): %s", operation, reason, exc)
        _logger.debug("%s failure details", operation, exc_info=exc)
        if notify:
            self._notify_error(operation, _USER_MESSAGES.get(operation, str(exc)))
        return StoreResult.failure(reason, str(exc))

    def _reject(self, operation: str, message: str) -> StoreResult[Any]:
        _logger.warning("%s rejected: %s", operation, message)
        self._notify_error(operation, message)
        return StoreResult.failure(FailureReason.INVALID, message)

    @staticmethod
    def _coerce(model: type[M], value: M | Mapping[str, Any]) -> M:
        if isinstance(value, model):
            return value
        return model.model_validate(value)

    async def _get(self, name: CollectionName, model: type[M], record_id: str, operation: str) -> StoreResult[M]:
        try:
            record = await self._collection(name).get(record_id)
            if record is None:
                _logger.debug("%s: %s/%s not found", operation, name, record_id)
                return StoreResult.failure(FailureReason.NOT_FOUND, f"{name}/{record_id} not found")
            return StoreResult.success(model.model_validate(record))
        except Exception as exc:
            return self._fail(operation, exc, notify=False)

    async def _records_for_trip(self, name: CollectionName, trip_id: str) -> list[Record]:
        records = await self._collection(name).get_all()
        return [record for record in records if record.get("tripId") == trip_id]

    async def _list_for_trip(
        self,
        name: CollectionName,
        model: type[M],
        trip_id: str,
        operation: str,
    ) -> StoreResult[list[M]]:
        try:
            records = await self._records_for_trip(name, trip_id)
            return StoreResult.success([model.model_validate(record) for record in records])
        except Exception as exc:
            return self._fail(operation, exc, notify=False)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self) -> StoreResult[StoreSnapshot]:
        """Fetch clients and trips, replacing the cached lists on success."""
        self._is_loading = True
        self._emit_change()
        try:
            client_records = await self._collection(CollectionName.CLIENTS).get_all()
            trip_records = await self._collection(CollectionName.TRIPS).get_all()
            clients = [Client.model_validate(record) for record in client_records]
            trips = [Trip.model_validate(record) for record in trip_records]
        except Exception as exc:
            failure = self._fail("load", exc)
            self._is_loading = False
            self._emit_change()
            return failure
        finally:
            self._is_loading = False

        self._clients = clients
        self._trips = trips
        self._filtered_trips = list(trips)
        self._active_filter = None
        _logger.debug("Loaded %d clients and %d trips", len(clients), len(trips))
        self._emit_change()
        return StoreResult.success(self.snapshot())

    async def refresh(self) -> StoreResult[StoreSnapshot]:
        return await self.load()

    # ------------------------------------------------------------------
    # Clients
    # ------------------------------------------------------------------

    async def get_client(self, client_id: str) -> StoreResult[Client]:
        """Fetch one client from the remote store, bypassing the cache."""
        return await self._get(CollectionName.CLIENTS, Client, client_id, "get_client")

    async def add_client(self, client: Client | Mapping[str, Any]) -> StoreResult[Client]:
        try:
            candidate = self._coerce(Client, client)
            created = await self._collection(CollectionName.CLIENTS).add(candidate.to_record())
            persisted = Client.model_validate(created)
        except Exception as exc:
            return self._fail("add_client", exc)

        self._clients = [*self._clients, persisted]
        self._emit_change()
        return StoreResult.success(persisted)

    async def update_client(self, client_id: str, client: Client | Mapping[str, Any]) -> StoreResult[Client]:
        try:
            candidate = self._coerce(Client, client)
            updated_record = await self._collection(CollectionName.CLIENTS).update(client_id, candidate.to_record())
            updated = Client.model_validate({**updated_record, "id": updated_record.get("id") or client_id})
        except Exception as exc:
            return self._fail("update_client", exc)

        self._clients = _replace_by_id(self._clients, client_id, updated)
        self._emit_change()
        return StoreResult.success(updated)

    async def delete_client(self, client_id: str) -> StoreResult[str]:
        """Delete a client.  Trips referencing it are left in place."""
        try:
            await self._collection(CollectionName.CLIENTS).delete(client_id)
        except Exception as exc:
            return self._fail("delete_client", exc)

        self._clients = _without_id(self._clients, client_id)
        self._emit_change()
        return StoreResult.success(client_id)

    def client_label(self, client_id: str) -> str:
        """Name of the cached client, or a placeholder for orphaned trips."""
        for client in self._clients:
            if client.id == client_id:
                return client.name
        return UNKNOWN_CLIENT_LABEL

    # ------------------------------------------------------------------
    # Trips
    # ------------------------------------------------------------------

    async def get_trip(self, trip_id: str) -> StoreResult[Trip]:
        """Fetch one trip from the remote store, bypassing the cache."""
        return await self._get(CollectionName.TRIPS, Trip, trip_id, "get_trip")

    async def add_trip(self, trip: Trip | Mapping[str, Any]) -> StoreResult[Trip]:
        try:
            candidate = self._coerce(Trip, trip)
        except ValidationError as exc:
            return self._fail("add_trip", exc)
        if candidate.has_negative_amounts:
            return self._reject("add_trip", _NEGATIVE_AMOUNTS_MESSAGE)

        try:
            created = await self._collection(CollectionName.TRIPS).add(candidate.to_record())
            persisted = Trip.model_validate(created)
        except Exception as exc:
            return self._fail("add_trip", exc)

        self._trips = [*self._trips, persisted]
        self._filtered_trips = [*self._filtered_trips, persisted]
        self._emit_change()
        return StoreResult.success(persisted)

    async def update_trip(
        self,
        trip_id: str,
        trip: Trip | Mapping[str, Any],
        previous: Trip | Mapping[str, Any],
    ) -> StoreResult[Trip]:
        """Replace a trip and record what changed.

        *previous* is the version the caller started editing from.  When
        the remote update succeeds the cached lists are patched and, if
        any field differs from *previous*, one history entry is written.
        A failed history write does not fail the update.
        """
        try:
            candidate = self._coerce(Trip, trip)
            before = self._coerce(Trip, previous)
        except ValidationError as exc:
            return self._fail("update_trip", exc)
        if candidate.has_negative_amounts:
            return self._reject("update_trip", _NEGATIVE_AMOUNTS_MESSAGE)

        try:
            updated_record = await self._collection(CollectionName.TRIPS).update(trip_id, candidate.to_record())
            updated = Trip.model_validate({**updated_record, "id": updated_record.get("id") or trip_id})
        except Exception as exc:
            return self._fail("update_trip", exc)

        self._trips = _replace_by_id(self._trips, trip_id, updated)
        self._filtered_trips = _replace_by_id(self._filtered_trips, trip_id, updated)
        self._emit_change()

        changes = diff_records(before, candidate)
        if changes:
            await self._record_history(trip_id, changes)
        return StoreResult.success(updated)

    async def _record_history(self, trip_id: str, changes: ChangeSet) -> bool:
        entry = TripHistory.from_changes(trip_id, changes, self._clock())
        try:
            await self._collection(CollectionName.TRIP_HISTORY).add(entry.to_record())
        except Exception as exc:
            self._fail("record_history", exc, notify=False)
            return False
        _logger.debug("Recorded history for trip %s: %s", trip_id, ", ".join(changes.changed_fields))
        return True

    async def delete_trip(self, trip_id: str) -> StoreResult[str]:
        """Delete a trip, then its history entries and documents.

        Dependents are deleted one call at a time.  A failing dependent
        delete is logged and skipped; the result only reflects the trip
        delete itself.
        """
        try:
            await self._collection(CollectionName.TRIPS).delete(trip_id)
        except Exception as exc:
            return self._fail("delete_trip", exc)

        self._trips = _without_id(self._trips, trip_id)
        self._filtered_trips = _without_id(self._filtered_trips, trip_id)
        self._emit_change()

        for name in (CollectionName.TRIP_HISTORY, CollectionName.DOCUMENTS):
            await self._delete_dependents(name, trip_id)
        return StoreResult.success(trip_id)

    async def _delete_dependents(self, name: CollectionName, trip_id: str) -> int:
        try:
            records = await self._records_for_trip(name, trip_id)
        except Exception as exc:
            _logger.warning("Could not list %s of deleted trip %s: %s", name, trip_id, exc)
            return 0

        deleted = 0
        for record in records:
            record_id = record.get("id")
            if not record_id:
                continue
            try:
                await self._collection(name).delete(str(record_id))
            except Exception as exc:
                _logger.warning("Could not delete %s/%s of trip %s: %s", name, record_id, trip_id, exc)
                continue
            deleted += 1
        return deleted

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    def filter_trips(self, criteria: TripFilter | None) -> tuple[Trip, ...]:
        """Narrow :attr:`filtered_trips` to the trips matching *criteria*."""
        self._filtered_trips = filter_trips(self._trips, criteria)
        self._active_filter = None if criteria is None or criteria.is_empty else criteria
        self._emit_change()
        return tuple(self._filtered_trips)

    def clear_filters(self) -> None:
        self._filtered_trips = list(self._trips)
        self._active_filter = None
        self._emit_change()

    # ------------------------------------------------------------------
    # History and documents
    # ------------------------------------------------------------------

    async def get_trip_history(self, trip_id: str) -> StoreResult[list[TripHistory]]:
        return await self._list_for_trip(CollectionName.TRIP_HISTORY, TripHistory, trip_id, "get_trip_history")

    async def get_documents(self, trip_id: str) -> StoreResult[list[Document]]:
        return await self._list_for_trip(CollectionName.DOCUMENTS, Document, trip_id, "get_documents")

    async def add_document(self, document: Document | Mapping[str, Any]) -> StoreResult[Document]:
        try:
            candidate = self._coerce(Document, document)
            created = await self._collection(CollectionName.DOCUMENTS).add(candidate.to_record())
            return StoreResult.success(Document.model_validate(created))
        except Exception as exc:
            return self._fail("add_document", exc)

    async def delete_document(self, document_id: str) -> StoreResult[str]:
        try:
            await self._collection(CollectionName.DOCUMENTS).delete(document_id)
        except Exception as exc:
            return self._fail("delete_document", exc)
        return StoreResult.success(document_id)

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def statistics(
        self,
        period: StatisticsPeriod = StatisticsPeriod.MONTH,
        today: date | None = None,
    ) -> TripSummary:
        """Summary of the cached trips dated within *period*."""
        return summarize(trips_in_period(self._trips, period, today))
