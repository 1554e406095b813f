"""Aggregate statistics over trips.

Feeds the statistics view: totals for a period, trip counts by status
and a short per-day income/expense series.
"""

from __future__ import annotations

import calendar
import enum
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta

from tripledger._constants import DEFAULT_SUMMARY_DAYS
from tripledger.models.trip import Trip


class StatisticsPeriod(enum.StrEnum):
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


@dataclass(frozen=True)
class DailyFinancials:
    date: str
    income: float = 0.0
    expenses: float = 0.0

    @property
    def profit(self) -> float:
        return self.income - self.expenses


@dataclass(frozen=True)
class TripSummary:
    trip_count: int = 0
    total_income: float = 0.0
    total_expenses: float = 0.0
    by_status: dict[str, int] = field(default_factory=dict)
    daily: tuple[DailyFinancials, ...] = ()

    @property
    def total_profit(self) -> float:
        return self.total_income - self.total_expenses


def _shift_months(day: date, months: int) -> date:
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def period_start(period: StatisticsPeriod, today: date) -> date:
    """First day (inclusive) covered by *period* ending on *today*."""
    period = StatisticsPeriod(period)
    if period is StatisticsPeriod.WEEK:
        return today - timedelta(days=7)
    if period is StatisticsPeriod.MONTH:
        return _shift_months(today, 1)
    return _shift_months(today, 12)


def parse_trip_date(value: str) -> date | None:
    try:
        return date.fromisoformat(value[:10])
    except (TypeError, ValueError):
        return None


def trips_in_period(trips: Iterable[Trip], period: StatisticsPeriod, today: date | None = None) -> list[Trip]:
    """Trips dated on or after the start of *period*.

    Trips whose date cannot be parsed are left out.
    """
    cutoff = period_start(period, today or date.today())
    selected: list[Trip] = []
    for trip in trips:
        trip_date = parse_trip_date(trip.date)
        if trip_date is not None and trip_date >= cutoff:
            selected.append(trip)
    return selected


def summarize(trips: Iterable[Trip], *, max_days: int = DEFAULT_SUMMARY_DAYS) -> TripSummary:
    """Totals, status counts and the last *max_days* per-date buckets."""
    trip_list = list(trips)
    by_status: dict[str, int] = {}
    buckets: dict[str, list[float]] = {}
    for trip in trip_list:
        status = str(trip.status)
        by_status[status] = by_status.get(status, 0) + 1
        bucket = buckets.setdefault(trip.date, [0.0, 0.0])
        bucket[0] += trip.income
        bucket[1] += trip.expenses

    daily = [DailyFinancials(day, income, expenses) for day, (income, expenses) in sorted(buckets.items())]
    if max_days > 0:
        daily = daily[-max_days:]

    return TripSummary(
        trip_count=len(trip_list),
        total_income=sum(trip.income for trip in trip_list),
        total_expenses=sum(trip.expenses for trip in trip_list),
        by_status=by_status,
        daily=tuple(daily),
    )
