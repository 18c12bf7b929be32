"""Schedule resolution: availability pattern → concrete training days and dates."""

from datetime import date, timedelta

from fitplan.domains.training_plan.enums import WorkoutDay
from fitplan.domains.training_plan.errors import ScheduleResolutionError
from fitplan.domains.training_plan.models import ScheduleAvailability


def select_training_days(available_days: list[WorkoutDay], count: int) -> list[WorkoutDay]:
    """Spread `count` sessions evenly over the available days.

    Uses fixed-step sampling: step = len(available_days) / count and
    index = round(i * step), clamped to the last day. Deterministic.

    Args:
        available_days: Available days ordered Monday → Sunday
        count: Number of sessions to place

    Returns:
        Exactly `count` distinct days, in weekly order

    Raises:
        ScheduleResolutionError: If count < 1 or count exceeds available days
    """
    if count < 1:
        raise ScheduleResolutionError(f"Session count must be at least 1, got {count}")
    if count > len(available_days):
        raise ScheduleResolutionError(
            f"Cannot place {count} sessions on {len(available_days)} available days"
        )

    step = len(available_days) / count
    last_index = len(available_days) - 1
    selected = [available_days[min(round(i * step), last_index)] for i in range(count)]

    if len(set(selected)) != count:
        raise ScheduleResolutionError(f"Day selection produced duplicates: {[d.value for d in selected]}")
    return selected


def date_for_day(week_start: date, day: WorkoutDay) -> date:
    """First date in [week_start, week_start + 6] that falls on `day`."""
    offset = (day.weekday_index - week_start.weekday()) % 7
    return week_start + timedelta(days=offset)


def week_bounds(plan_start: date, week_number: int) -> tuple[date, date]:
    """Return (start, end) dates of a 1-based plan week."""
    start = plan_start + timedelta(days=(week_number - 1) * 7)
    return start, start + timedelta(days=6)


def available_weekday_indices(schedule: ScheduleAvailability) -> set[int]:
    """date.weekday() values (Monday = 0) the schedule marks as available."""
    return {day.weekday_index for day in schedule.available_days}
