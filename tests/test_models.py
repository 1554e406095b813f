"""Tests for record models and their wire form."""

from __future__ import annotations

from datetime import UTC, datetime

from tripledger.diff import ChangeSet
from tripledger.models import Client, Document, DocumentType, Trip, TripHistory, TripStatus


class TestLedgerEnum:
    def test_unknown_value_falls_back(self) -> None:
        assert TripStatus("lost") == TripStatus.UNKNOWN
        assert DocumentType("receipt") == DocumentType.UNKNOWN

    def test_values_are_case_insensitive(self) -> None:
        assert TripStatus("Completed") is TripStatus.COMPLETED

    def test_all_enums_have_unknown(self) -> None:
        for cls in (TripStatus, DocumentType):
            assert cls.UNKNOWN == "unknown"


class TestTrip:
    SAMPLE_PAYLOAD: dict = {
        "id": "t1",
        "date": "2024-03-10",
        "clientId": "c1",
        "startLocation": "Moscow",
        "endLocation": "Kazan",
        "cargo": "Pallets",
        "driver": "Ivanov",
        "vehicle": "A123BC",
        "status": "in-progress",
        "income": "1500.5",
        "expenses": 300,
        "notes": None,
        "extraField": "ignored",
    }

    def test_parses_camel_case_payload(self) -> None:
        trip = Trip.model_validate(self.SAMPLE_PAYLOAD)

        assert trip.id == "t1"
        assert trip.client_id == "c1"
        assert trip.start_location == "Moscow"
        assert trip.status is TripStatus.IN_PROGRESS
        assert trip.income == 1500.5
        assert trip.notes == ""
        assert trip.profit == 1200.5

    def test_to_record_uses_wire_names_without_id(self) -> None:
        record = Trip.model_validate(self.SAMPLE_PAYLOAD).to_record()

        assert "id" not in record
        assert "extraField" not in record
        assert record["clientId"] == "c1"
        assert record["status"] == "in-progress"
        assert list(record) == [
            "date",
            "clientId",
            "startLocation",
            "endLocation",
            "cargo",
            "driver",
            "vehicle",
            "income",
            "expenses",
            "status",
            "notes",
        ]

    def test_negative_amounts_flag(self) -> None:
        assert Trip(expenses=-1).has_negative_amounts
        assert not Trip(income=0, expenses=0).has_negative_amounts


class TestClient:
    def test_tax_id_maps_to_inn(self) -> None:
        client = Client.model_validate({"id": "c1", "name": "Volga", "inn": "7701"})

        assert client.tax_id == "7701"
        assert client.to_record()["inn"] == "7701"
        assert Client(tax_id="1").tax_id == "1"


class TestDocument:
    def test_type_alias(self) -> None:
        doc = Document.model_validate({"tripId": "t1", "type": "waybill", "uri": "dav://docs/1.pdf"})

        assert doc.document_type is DocumentType.WAYBILL
        assert doc.to_record()["type"] == "waybill"


class TestTripHistory:
    def test_from_changes_serializes_compact_json(self) -> None:
        changes = ChangeSet(("income",), {"income": 1000}, {"income": 1200})

        entry = TripHistory.from_changes("t1", changes, datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC))

        assert entry.trip_id == "t1"
        assert entry.change_date == "2024-01-02T03:04:05.000Z"
        assert entry.changed_fields == '["income"]'
        assert entry.previous_values == '{"income":1000}'
        assert entry.new_values == '{"income":1200}'
        assert entry.changed_field_names() == ["income"]
        assert entry.previous() == {"income": 1000}
        assert entry.new() == {"income": 1200}

    def test_corrupt_payloads_parse_as_empty(self) -> None:
        entry = TripHistory(trip_id="t1", changed_fields="not json", previous_values="[1]", new_values="")

        assert entry.changed_field_names() == []
        assert entry.previous() == {}
        assert entry.new() == {}
