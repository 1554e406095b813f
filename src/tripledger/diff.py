"""Field-level differences between two versions of a record."""

from __future__ import annotations

from collections.abc import Collection, Mapping
from dataclasses import dataclass, field
from typing import Any

from tripledger.models._base import LedgerBaseModel


@dataclass(frozen=True)
class ChangeSet:
    """Changed field names (in record field order) with old and new values."""

    changed_fields: tuple[str, ...] = ()
    previous_values: dict[str, Any] = field(default_factory=dict)
    new_values: dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.changed_fields

    def __bool__(self) -> bool:
        return not self.is_empty


def _as_mapping(record: Mapping[str, Any] | LedgerBaseModel) -> Mapping[str, Any]:
    if isinstance(record, LedgerBaseModel):
        return record.wire_fields()
    return record


def diff_records(
    old: Mapping[str, Any] | LedgerBaseModel,
    new: Mapping[str, Any] | LedgerBaseModel,
    *,
    ignore: Collection[str] = ("id",),
) -> ChangeSet:
    """Compare *new* against *old* field by field.

    Iterates the fields of *new* in their declaration order (models are
    compared in their camelCase wire form) and reports every field whose
    value differs from the value *old* holds under the same name.  Fields
    in *ignore* are never reported.  A field missing from *old* compares
    as ``None``.  Values are compared with ``!=``; records hold scalars
    only, so no deep comparison is done.
    """
    old_fields = _as_mapping(old)
    new_fields = _as_mapping(new)

    changed: list[str] = []
    previous: dict[str, Any] = {}
    current: dict[str, Any] = {}
    for name, value in new_fields.items():
        if name in ignore:
            continue
        before = old_fields.get(name)
        if before != value:
            changed.append(name)
            previous[name] = before
            current[name] = value
    return ChangeSet(tuple(changed), previous, current)
