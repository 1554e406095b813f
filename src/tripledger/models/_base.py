"""Base model and enum for ledger records.

Every record model inherits from :class:`LedgerBaseModel` which
provides:

* ``alias_generator=to_camel`` so the camelCase keys used by the record
  store map automatically to snake_case fields.
* A ``model_validator(mode="before")`` that drops ``None`` values so the
  field default (usually ``""``) is used instead.
* :meth:`LedgerBaseModel.to_record` producing the wire form sent back
  to the store.

Enums inherit from :class:`LedgerEnum` which adds an ``UNKNOWN`` member
and a ``_missing_`` hook that returns it for any unmapped value.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class LedgerEnum(enum.StrEnum):
    """Base for string-valued record enums.

    Every subclass **must** define ``UNKNOWN = "unknown"``.
    Values the store sends that have no mapped member resolve to
    ``UNKNOWN`` instead of raising ``ValueError``.
    """

    @classmethod
    def _missing_(cls, value: object) -> LedgerEnum:
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        if hasattr(cls, "UNKNOWN"):
            unknown: LedgerEnum = cls.UNKNOWN  # type: ignore[attr-defined]
            return unknown
        return next(iter(cls))


class LedgerBaseModel(BaseModel):
    """Base for records stored in a remote collection."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    id: str | None = None
    """Identifier assigned by the record store; ``None`` before persistence."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        return {key: value for key, value in values.items() if value is not None}

    def to_record(self) -> dict[str, Any]:
        """Serialize to the flat camelCase mapping stored remotely, without ``id``."""
        return self.model_dump(mode="json", by_alias=True, exclude={"id"})

    def wire_fields(self) -> dict[str, Any]:
        """All fields in wire form and declaration order, ``id`` included."""
        return self.model_dump(mode="json", by_alias=True)
