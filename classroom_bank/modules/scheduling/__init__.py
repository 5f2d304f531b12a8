"""Recurring obligation scheduling exports"""

from .rules import (
    BI_WEEKLY_SCHEDULE,
    FIXED_AT_CREATION,
    MONTHLY_SCHEDULES,
    ROLLING,
    WEEKLY_SCHEDULES,
    YEARLY_SCHEDULE,
    CalendarRule,
    RecurrenceRule,
    RollingRule,
    resolve_rule,
)

__all__ = [
    "BI_WEEKLY_SCHEDULE",
    "FIXED_AT_CREATION",
    "MONTHLY_SCHEDULES",
    "ROLLING",
    "WEEKLY_SCHEDULES",
    "YEARLY_SCHEDULE",
    "CalendarRule",
    "RecurrenceRule",
    "RollingRule",
    "resolve_rule",
]
