"""Periodization planning.

Partitions a plan of N weeks into contiguous phase segments, flags deload
weeks and resolves week-level intensity. Pure and deterministic.
"""

import math
from datetime import date

from loguru import logger

from fitplan.config.settings import settings
from fitplan.domains.training_plan.enums import IntensityLevel, TrainingPhase
from fitplan.domains.training_plan.errors import PlannerInvariantError
from fitplan.domains.training_plan.models import PhaseSegment, TrainingGoal
from fitplan.domains.training_plan.rules import DEFAULT_FOCUS, PHASE_FOCUS, PHASE_INTENSITY

BUILD_BLOCK_WEEKS = 4
MAX_FOUNDATION_WEEKS = 4


def resolve_plan_duration(primary_goal: TrainingGoal | None, today: date) -> int:
    """Resolve plan length in weeks.

    Args:
        primary_goal: Highest-priority active goal (or None)
        today: Plan start date

    Returns:
        Default length when the goal has no target date, otherwise
        ceil(days to target / 7) clamped to the configured bounds.
    """
    if primary_goal is None or primary_goal.target_date is None:
        return settings.default_plan_weeks

    days_to_target = (primary_goal.target_date - today).days
    weeks = math.ceil(days_to_target / 7)
    return max(settings.min_plan_weeks, min(settings.max_plan_weeks, weeks))


def design_periodization(total_weeks: int) -> list[PhaseSegment]:
    """Split weeks 1..total_weeks into ordered, gap-free phase segments.

    Policy:
    - <= 8 weeks: Foundation (first third), Build (next third), Peak (rest)
    - 9-16 weeks: Foundation, Build, Intensity by fifths; Peak through N-2; Taper tail
    - > 16 weeks: Foundation (up to 4), 4-week Build blocks while 6+ weeks remain,
      then Peak with a one-week Taper when room allows

    Args:
        total_weeks: Plan duration in weeks (>= 1)

    Returns:
        Non-empty list of segments covering every week exactly once

    Raises:
        PlannerInvariantError: If total_weeks < 1 or coverage check fails
    """
    if total_weeks < 1:
        raise PlannerInvariantError(f"Plan must have at least one week, got {total_weeks}")

    n = total_weeks
    bounds: list[tuple[TrainingPhase, int, int]] = []

    if n <= 8:
        foundation_end = n // 3
        build_end = (2 * n) // 3
        bounds.append((TrainingPhase.FOUNDATION, 1, foundation_end))
        bounds.append((TrainingPhase.BUILD, foundation_end + 1, build_end))
        bounds.append((TrainingPhase.PEAK, build_end + 1, n))
    elif n <= 16:
        foundation_end = n // 5
        build_end = (2 * n) // 5
        intensity_end = (3 * n) // 5
        peak_end = n - 2
        bounds.append((TrainingPhase.FOUNDATION, 1, foundation_end))
        bounds.append((TrainingPhase.BUILD, foundation_end + 1, build_end))
        bounds.append((TrainingPhase.INTENSITY, build_end + 1, intensity_end))
        bounds.append((TrainingPhase.PEAK, intensity_end + 1, peak_end))
        bounds.append((TrainingPhase.TAPER, peak_end + 1, n))
    else:
        foundation_end = min(MAX_FOUNDATION_WEEKS, n // 4)
        bounds.append((TrainingPhase.FOUNDATION, 1, foundation_end))
        current = foundation_end + 1
        while current + BUILD_BLOCK_WEEKS + 2 <= n:
            bounds.append((TrainingPhase.BUILD, current, current + BUILD_BLOCK_WEEKS - 1))
            current += BUILD_BLOCK_WEEKS
        if current + 2 <= n:
            bounds.append((TrainingPhase.PEAK, current, n - 1))
            bounds.append((TrainingPhase.TAPER, n, n))
        else:
            bounds.append((TrainingPhase.PEAK, current, n))

    segments = [PhaseSegment(phase=phase, start_week=start, end_week=end) for phase, start, end in bounds if end >= start]
    _assert_full_coverage(segments, n)

    logger.debug(
        "periodization_designed",
        total_weeks=n,
        phases=",".join(f"{s.phase.value}:{s.start_week}-{s.end_week}" for s in segments),
    )
    return segments


def _assert_full_coverage(segments: list[PhaseSegment], total_weeks: int) -> None:
    expected_start = 1
    for segment in segments:
        if segment.start_week != expected_start:
            raise PlannerInvariantError(
                f"Phase {segment.phase.value} starts at week {segment.start_week}, expected {expected_start}"
            )
        expected_start = segment.end_week + 1
    if expected_start != total_weeks + 1:
        raise PlannerInvariantError(f"Phases cover weeks 1..{expected_start - 1}, expected 1..{total_weeks}")


def phase_for_week(segments: list[PhaseSegment], week_number: int) -> TrainingPhase:
    """Return the phase whose segment contains week_number.

    Raises:
        PlannerInvariantError: If no segment contains the week
    """
    for segment in segments:
        if segment.contains(week_number):
            return segment.phase
    raise PlannerInvariantError(f"Week {week_number} is not covered by any phase")


def is_deload_week(week_number: int, total_weeks: int) -> bool:
    """Every Nth week is a deload week, except the plan's final week."""
    return week_number % settings.deload_frequency == 0 and week_number != total_weeks


def intensity_for_week(phase: TrainingPhase, is_deload: bool) -> IntensityLevel:
    if is_deload:
        return IntensityLevel.LOW
    return PHASE_INTENSITY[phase]


def focus_area_for_phase(phase: TrainingPhase, primary_goal: TrainingGoal | None) -> str:
    template = PHASE_FOCUS.get(phase)
    if template is None:
        return DEFAULT_FOCUS
    goal_label = "your goal"
    if primary_goal is not None:
        goal_label = primary_goal.description or primary_goal.goal_type.value.replace("_", " ")
    return template.format(goal=goal_label)
