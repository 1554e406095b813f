"""Trip model and trip filter criteria."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from tripledger.models._base import LedgerBaseModel, LedgerEnum


class TripStatus(LedgerEnum):
    """Lifecycle state of a trip."""

    UNKNOWN = "unknown"
    PLANNED = "planned"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Trip(LedgerBaseModel):
    """A single transport job."""

    date: str = ""
    """Calendar date, ``YYYY-MM-DD``."""
    client_id: str = ""
    start_location: str = ""
    end_location: str = ""
    cargo: str = ""
    driver: str = ""
    vehicle: str = ""
    income: int | float = 0
    expenses: int | float = 0
    status: TripStatus = TripStatus.PLANNED
    notes: str = ""

    @property
    def profit(self) -> int | float:
        return self.income - self.expenses

    @property
    def has_negative_amounts(self) -> bool:
        return self.income < 0 or self.expenses < 0


class TripFilter(BaseModel):
    """Optional criteria for narrowing the trip list.

    Every criterion left as ``None`` (or empty string) is not a
    constraint.  Dates are inclusive ``YYYY-MM-DD`` bounds.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    start_date: str | None = None
    end_date: str | None = None
    client_id: str | None = None
    start_location: str | None = None
    end_location: str | None = None
    status: TripStatus | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("status")
    @classmethod
    def _known_status(cls, value: TripStatus | None) -> TripStatus | None:
        if value is TripStatus.UNKNOWN:
            raise ValueError("unrecognised trip status")
        return value

    @property
    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (
                self.start_date,
                self.end_date,
                self.client_id,
                self.start_location,
                self.end_location,
                self.status,
            )
        )
