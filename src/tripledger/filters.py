"""Pure trip filtering used for the filtered trip view."""

from __future__ import annotations

from collections.abc import Iterable

from tripledger.models.trip import Trip, TripFilter


def _contains(haystack: str, needle: str) -> bool:
    return needle.lower() in haystack.lower()


def trip_matches(trip: Trip, criteria: TripFilter) -> bool:
    """Return ``True`` when *trip* satisfies every criterion that is set.

    Date bounds are inclusive and compared as strings, which orders
    correctly because trip dates are fixed-width ``YYYY-MM-DD``.
    """
    if criteria.start_date is not None and trip.date < criteria.start_date:
        return False
    if criteria.end_date is not None and trip.date > criteria.end_date:
        return False
    if criteria.client_id is not None and trip.client_id != criteria.client_id:
        return False
    if criteria.start_location is not None and not _contains(trip.start_location, criteria.start_location):
        return False
    if criteria.end_location is not None and not _contains(trip.end_location, criteria.end_location):
        return False
    return criteria.status is None or trip.status == criteria.status


def filter_trips(trips: Iterable[Trip], criteria: TripFilter | None) -> list[Trip]:
    """Return the trips matching *criteria*, preserving input order."""
    if criteria is None or criteria.is_empty:
        return list(trips)
    return [trip for trip in trips if trip_matches(trip, criteria)]
