from __future__ import annotations

import copy
from collections.abc import Callable
from typing import Any

import pytest

from tripledger.exceptions import LedgerTransportError
from tripledger.remote import CollectionName


class FakeCollection:
    """In-memory stand-in for a remote collection.

    Records every call in ``calls`` and raises the registered exception
    type for any ``(method, record_id)`` key in ``failures``
    (``record_id`` ``None`` matches every call of that method).
    """

    def __init__(self, name: CollectionName, id_factory: Callable[[], str]) -> None:
        self.name = name
        self._id_factory = id_factory
        self.records: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, str | None]] = []
        self.failures: dict[tuple[str, str | None], type[Exception]] = {}

    def seed(self, *records: dict[str, Any]) -> None:
        for record in records:
            self.records[record["id"]] = copy.deepcopy(record)

    def fail_on(
        self,
        method: str,
        record_id: str | None = None,
        exc_type: type[Exception] = LedgerTransportError,
    ) -> None:
        self.failures[(method, record_id)] = exc_type

    def _check(self, method: str, record_id: str | None = None) -> None:
        self.calls.append((method, record_id))
        exc_type = self.failures.get((method, record_id)) or self.failures.get((method, None))
        if exc_type is None:
            return
        message = f"{method} {self.name}/{record_id} failed"
        if issubclass(exc_type, LedgerTransportError):
            raise exc_type(message, endpoint=str(self.name))
        raise exc_type(message)

    def calls_of(self, method: str) -> list[str | None]:
        return [record_id for called, record_id in self.calls if called == method]

    async def get_all(self) -> list[dict[str, Any]]:
        self._check("get_all")
        return [copy.deepcopy(record) for record in self.records.values()]

    async def get(self, record_id: str) -> dict[str, Any] | None:
        self._check("get", record_id)
        record = self.records.get(record_id)
        return copy.deepcopy(record) if record is not None else None

    async def add(self, record: dict[str, Any]) -> dict[str, Any]:
        self._check("add")
        record_id = self._id_factory()
        stored = {**copy.deepcopy(record), "id": record_id}
        self.records[record_id] = stored
        return copy.deepcopy(stored)

    async def update(self, record_id: str, record: dict[str, Any]) -> dict[str, Any]:
        self._check("update", record_id)
        stored = {**copy.deepcopy(record), "id": record_id}
        self.records[record_id] = stored
        return copy.deepcopy(stored)

    async def delete(self, record_id: str) -> None:
        self._check("delete", record_id)
        self.records.pop(record_id, None)


class FakeBackend:
    def __init__(self) -> None:
        self._counter = 0
        self.collections = {name: FakeCollection(name, self._next_id) for name in CollectionName}

    def _next_id(self) -> str:
        self._counter += 1
        return f"rec-{self._counter}"

    def collection(self, name: CollectionName) -> FakeCollection:
        return self.collections[CollectionName(name)]

    @property
    def clients(self) -> FakeCollection:
        return self.collections[CollectionName.CLIENTS]

    @property
    def trips(self) -> FakeCollection:
        return self.collections[CollectionName.TRIPS]

    @property
    def history(self) -> FakeCollection:
        return self.collections[CollectionName.TRIP_HISTORY]

    @property
    def documents(self) -> FakeCollection:
        return self.collections[CollectionName.DOCUMENTS]

    def delete_calls(self) -> int:
        return sum(len(collection.calls_of("delete")) for collection in self.collections.values())


def trip_record(record_id: str, **overrides: Any) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": record_id,
        "date": "2024-03-10",
        "clientId": "c1",
        "startLocation": "Moscow",
        "endLocation": "Kazan",
        "cargo": "Pallets",
        "driver": "Ivanov",
        "vehicle": "A123BC",
        "income": 1000,
        "expenses": 400,
        "status": "planned",
        "notes": "",
    }
    record.update(overrides)
    return record


def client_record(record_id: str, **overrides: Any) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": record_id,
        "name": "Volga Logistics",
        "inn": "7701234567",
        "contactPerson": "Petrov",
        "phone": "+7 900 000-00-00",
        "email": "office@volga.example",
        "address": "Kazan",
        "notes": "",
    }
    record.update(overrides)
    return record


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()
