"""Trip history (audit trail) model."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from tripledger._constants import JSON_SEPARATORS
from tripledger.models._base import LedgerBaseModel

if TYPE_CHECKING:
    from tripledger.diff import ChangeSet


def _dumps(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=JSON_SEPARATORS)


def _loads(value: str, default: Any) -> Any:
    if not value:
        return default
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return default


class TripHistory(LedgerBaseModel):
    """Immutable record of one mutating trip update.

    ``changed_fields``, ``previous_values`` and ``new_values`` are stored
    as JSON strings; the store treats them as opaque text.
    """

    trip_id: str = ""
    change_date: str = ""
    """ISO-8601 UTC timestamp of the update."""
    changed_fields: str = "[]"
    previous_values: str = "{}"
    new_values: str = "{}"

    @classmethod
    def from_changes(
        cls,
        trip_id: str,
        changes: ChangeSet,
        changed_at: datetime | None = None,
    ) -> TripHistory:
        """Build an unsaved history entry from a computed change set."""
        when = changed_at or datetime.now(UTC)
        return cls(
            trip_id=trip_id,
            change_date=when.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            changed_fields=_dumps(list(changes.changed_fields)),
            previous_values=_dumps(changes.previous_values),
            new_values=_dumps(changes.new_values),
        )

    def changed_field_names(self) -> list[str]:
        names = _loads(self.changed_fields, [])
        return [str(name) for name in names] if isinstance(names, list) else []

    def previous(self) -> dict[str, Any]:
        values = _loads(self.previous_values, {})
        return values if isinstance(values, dict) else {}

    def new(self) -> dict[str, Any]:
        values = _loads(self.new_values, {})
        return values if isinstance(values, dict) else {}
