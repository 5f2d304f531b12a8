"""
test_rules.py - Recurrence rules

Tests cover:
1. Fixed-at-creation tables for every interval
2. Rolling recurrence anchored at creation
3. Rejection of unknown intervals
"""

from datetime import datetime, timezone

import pytest

from classroom_bank.modules.scheduling import (
    BI_WEEKLY_SCHEDULE,
    MONTHLY_SCHEDULES,
    WEEKLY_SCHEDULES,
    YEARLY_SCHEDULE,
    CalendarRule,
    RollingRule,
    resolve_rule,
)
from tests.conftest import FIXED_NOW

UTC = timezone.utc


def at(year, month, day, hour=0, minute=0):
    return datetime(year, month, day, hour, minute, tzinfo=UTC)


class TestFixedAtCreation:
    def test_tables_cover_every_weekday_and_month(self):
        assert sorted(WEEKLY_SCHEDULES) == list(range(7))
        assert sorted(MONTHLY_SCHEDULES) == list(range(1, 13))

    def test_weekly_uses_creation_weekday(self):
        rule = resolve_rule("weekly", FIXED_NOW)  # Tuesday

        assert rule is WEEKLY_SCHEDULES[1]
        assert rule.next_fire(FIXED_NOW) == at(2026, 3, 17)
        assert rule.next_fire(at(2026, 3, 17)) == at(2026, 3, 24)

    def test_monthly_created_in_march_fires_each_april_first(self):
        created = at(2026, 3, 20, 14, 5)
        rule = resolve_rule("monthly", created)

        assert rule is MONTHLY_SCHEDULES[3]
        first = rule.next_fire(created)
        assert first == at(2026, 4, 1)
        assert rule.next_fire(first) == at(2027, 4, 1)

    def test_monthly_created_in_december_rolls_into_january(self):
        rule = resolve_rule("monthly", at(2026, 12, 3))
        assert rule.next_fire(at(2026, 12, 3)) == at(2027, 1, 1)

    def test_rule_is_fixed_when_evaluated_later(self):
        rule = resolve_rule("monthly", at(2026, 3, 20))
        assert rule.next_fire(at(2026, 7, 9)) == at(2027, 4, 1)

    def test_bi_weekly_fires_on_first_and_fifteenth(self):
        rule = resolve_rule("bi-weekly", FIXED_NOW)

        assert rule is BI_WEEKLY_SCHEDULE
        assert rule.next_fire(FIXED_NOW) == at(2026, 3, 15)
        assert rule.next_fire(at(2026, 3, 15)) == at(2026, 4, 1)

    def test_yearly_fires_on_january_first(self):
        rule = resolve_rule("yearly", FIXED_NOW)

        assert rule is YEARLY_SCHEDULE
        assert rule.next_fire(FIXED_NOW) == at(2027, 1, 1)


class TestRolling:
    def test_weekly_keeps_creation_time_of_day(self):
        rule = resolve_rule("weekly", FIXED_NOW, "rolling")
        assert rule.next_fire(FIXED_NOW) == at(2026, 3, 17, 9, 30)
        assert rule.next_fire(at(2026, 4, 1)) == at(2026, 4, 7, 9, 30)

    def test_bi_weekly_steps_fourteen_days(self):
        rule = resolve_rule("bi-weekly", FIXED_NOW, "rolling")
        assert rule.next_fire(FIXED_NOW) == at(2026, 3, 24, 9, 30)

    def test_monthly_clamps_to_month_end(self):
        rule = RollingRule(anchor=at(2026, 1, 31), step_months=1)

        assert rule.next_fire(at(2026, 1, 31)) == at(2026, 2, 28)
        assert rule.next_fire(at(2026, 2, 28)) == at(2026, 3, 31)

    def test_yearly_same_date_next_year(self):
        rule = resolve_rule("yearly", FIXED_NOW, "rolling")
        assert rule.next_fire(at(2027, 6, 1)) == at(2028, 3, 10, 9, 30)

    def test_before_anchor_returns_first_step(self):
        rule = resolve_rule("weekly", FIXED_NOW, "rolling")
        assert rule.next_fire(at(2025, 1, 1)) == at(2026, 3, 17, 9, 30)


def test_calendar_rule_without_filters_fires_every_midnight():
    assert CalendarRule().next_fire(FIXED_NOW) == at(2026, 3, 11)


@pytest.mark.parametrize("mode", ["fixed_at_creation", "rolling"])
def test_unknown_interval_is_rejected(mode):
    with pytest.raises(ValueError):
        resolve_rule("daily", FIXED_NOW, mode)
