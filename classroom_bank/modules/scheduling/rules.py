"""Recurrence rules for bills and payments.

Two families are supported:

* ``CalendarRule`` fires at local midnight on every date matching its month,
  day-of-month and weekday filters (an empty filter matches everything).
  The fixed-at-creation tables below map the moment an obligation was created
  onto one of these rules; the rule never moves afterwards.
* ``RollingRule`` fires at a fixed step from an anchor (the obligation's
  creation moment), so a weekly bill created on a Tuesday at 09:30 fires every
  Tuesday at 09:30.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Literal, Protocol

RecurrenceMode = Literal["fixed_at_creation", "rolling"]

FIXED_AT_CREATION: RecurrenceMode = "fixed_at_creation"
ROLLING: RecurrenceMode = "rolling"

# upper bound on the day scan: a Feb 29 rule can be four years away
_MAX_SCAN_DAYS = 366 * 8


class RecurrenceRule(Protocol):
    def next_fire(self, after: datetime) -> datetime:
        ...


@dataclass(frozen=True, slots=True)
class CalendarRule:
    months: frozenset[int] = frozenset()
    days: frozenset[int] = frozenset()
    weekdays: frozenset[int] = frozenset()  # Monday == 0

    def matches(self, candidate: date) -> bool:
        if self.months and candidate.month not in self.months:
            return False
        if self.days and candidate.day not in self.days:
            return False
        if self.weekdays and candidate.weekday() not in self.weekdays:
            return False
        return True

    def next_fire(self, after: datetime) -> datetime:
        """First matching midnight strictly later than ``after``."""
        candidate = after.date() + timedelta(days=1)
        for _ in range(_MAX_SCAN_DAYS):
            if self.matches(candidate):
                return datetime.combine(candidate, time.min, tzinfo=after.tzinfo)
            candidate += timedelta(days=1)
        raise ValueError(f"{self!r} never fires")


def _add_months(anchor: datetime, months: int) -> datetime:
    month_index = anchor.month - 1 + months
    year = anchor.year + month_index // 12
    month = month_index % 12 + 1
    day = min(anchor.day, calendar.monthrange(year, month)[1])
    return anchor.replace(year=year, month=month, day=day)


@dataclass(frozen=True, slots=True)
class RollingRule:
    anchor: datetime
    step_days: int = 0
    step_months: int = 0

    def occurrence(self, index: int) -> datetime:
        if self.step_months:
            return _add_months(self.anchor, self.step_months * index)
        return self.anchor + timedelta(days=self.step_days * index)

    def next_fire(self, after: datetime) -> datetime:
        if after < self.anchor:
            return self.occurrence(1)
        if self.step_months:
            elapsed = (after.year - self.anchor.year) * 12 + after.month - self.anchor.month
            index = max(1, elapsed // self.step_months)
        else:
            index = max(1, (after - self.anchor) // timedelta(days=self.step_days))
        while self.occurrence(index) <= after:
            index += 1
        return self.occurrence(index)


def _weekday(day: int) -> CalendarRule:
    return CalendarRule(weekdays=frozenset({day}))


def _first_of(month: int) -> CalendarRule:
    return CalendarRule(months=frozenset({month}), days=frozenset({1}))


# keyed by the creation moment's weekday (Monday == 0)
WEEKLY_SCHEDULES: dict[int, CalendarRule] = {
    0: _weekday(0),
    1: _weekday(1),
    2: _weekday(2),
    3: _weekday(3),
    4: _weekday(4),
    5: _weekday(5),
    6: _weekday(6),
}

# keyed by the creation moment's month: the 1st of the following month, every year
MONTHLY_SCHEDULES: dict[int, CalendarRule] = {
    1: _first_of(2),
    2: _first_of(3),
    3: _first_of(4),
    4: _first_of(5),
    5: _first_of(6),
    6: _first_of(7),
    7: _first_of(8),
    8: _first_of(9),
    9: _first_of(10),
    10: _first_of(11),
    11: _first_of(12),
    12: _first_of(1),
}

BI_WEEKLY_SCHEDULE = CalendarRule(days=frozenset({1, 15}))
YEARLY_SCHEDULE = _first_of(1)


def resolve_rule(interval: str, created_at: datetime, mode: RecurrenceMode = FIXED_AT_CREATION) -> RecurrenceRule:
    if mode == ROLLING:
        if interval == "weekly":
            return RollingRule(anchor=created_at, step_days=7)
        if interval == "bi-weekly":
            return RollingRule(anchor=created_at, step_days=14)
        if interval == "monthly":
            return RollingRule(anchor=created_at, step_months=1)
        if interval == "yearly":
            return RollingRule(anchor=created_at, step_months=12)
    else:
        if interval == "weekly":
            return WEEKLY_SCHEDULES[created_at.weekday()]
        if interval == "bi-weekly":
            return BI_WEEKLY_SCHEDULE
        if interval == "monthly":
            return MONTHLY_SCHEDULES[created_at.month]
        if interval == "yearly":
            return YEARLY_SCHEDULE
    raise ValueError(f"unsupported interval: {interval}")
