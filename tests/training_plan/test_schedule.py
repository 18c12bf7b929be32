"""Tests for schedule resolution."""

from datetime import date

import pytest

from fitplan.domains.training_plan.enums import WorkoutDay
from fitplan.domains.training_plan.errors import ScheduleResolutionError
from fitplan.domains.training_plan.models import ScheduleAvailability
from fitplan.domains.training_plan.schedule import (
    available_weekday_indices,
    date_for_day,
    select_training_days,
    week_bounds,
)

ALL_DAYS = list(WorkoutDay)


def test_select_all_available_days():
    days = [WorkoutDay.MONDAY, WorkoutDay.WEDNESDAY, WorkoutDay.FRIDAY]
    assert select_training_days(days, 3) == days


def test_select_spreads_sessions_evenly():
    """Test that 3 sessions over 7 days use fixed-step sampling."""
    # step = 7/3: indices round(0)=0, round(2.33)=2, round(4.67)=5
    assert select_training_days(ALL_DAYS, 3) == [WorkoutDay.MONDAY, WorkoutDay.WEDNESDAY, WorkoutDay.SATURDAY]


@pytest.mark.parametrize("available", [1, 2, 3, 4, 5, 6, 7])
def test_selection_is_distinct_for_every_count(available: int):
    """Test that every valid count yields exactly that many distinct days."""
    days = ALL_DAYS[:available]
    for count in range(1, available + 1):
        selected = select_training_days(days, count)
        assert len(selected) == count
        assert len(set(selected)) == count


def test_selection_is_deterministic():
    assert select_training_days(ALL_DAYS, 4) == select_training_days(ALL_DAYS, 4)


def test_too_many_sessions_rejected():
    with pytest.raises(ScheduleResolutionError, match="Cannot place 4 sessions"):
        select_training_days([WorkoutDay.MONDAY, WorkoutDay.TUESDAY], 4)


def test_zero_sessions_rejected():
    with pytest.raises(ScheduleResolutionError, match="at least 1"):
        select_training_days(ALL_DAYS, 0)


def test_date_for_day_within_week_window():
    """Test that dates land inside [week_start, week_start + 6] for a mid-week start."""
    wednesday = date(2026, 1, 7)
    assert date_for_day(wednesday, WorkoutDay.WEDNESDAY) == date(2026, 1, 7)
    assert date_for_day(wednesday, WorkoutDay.FRIDAY) == date(2026, 1, 9)
    assert date_for_day(wednesday, WorkoutDay.MONDAY) == date(2026, 1, 12)


def test_week_bounds():
    assert week_bounds(date(2026, 1, 5), 1) == (date(2026, 1, 5), date(2026, 1, 11))
    assert week_bounds(date(2026, 1, 5), 3) == (date(2026, 1, 19), date(2026, 1, 25))


def test_available_weekday_indices():
    schedule = ScheduleAvailability.from_days([WorkoutDay.MONDAY, WorkoutDay.SUNDAY])
    assert available_weekday_indices(schedule) == {0, 6}
