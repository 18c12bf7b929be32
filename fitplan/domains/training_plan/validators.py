"""Validation for plan generation inputs and outputs.

Input validation raises PlanValidationError before any work is done.
Output validation (coherence check) raises PlannerInvariantError for
structural breaks and returns advisory warnings for volume regressions.
"""

from loguru import logger

from fitplan.config.settings import settings
from fitplan.domains.training_plan.enums import IntensityLevel
from fitplan.domains.training_plan.errors import PlannerInvariantError, PlanValidationError
from fitplan.domains.training_plan.models import TrainingPlan, UserProfile


def validate_profile_for_generation(profile: UserProfile | None) -> None:
    """Validate that a profile can drive plan generation.

    Rules:
    - Schedule availability must be present and internally consistent
    - At least one goal must exist

    Args:
        profile: Athlete profile

    Raises:
        PlanValidationError: If the profile is missing data or inconsistent
    """
    if profile is None:
        raise PlanValidationError("User profile is required to generate a plan")

    schedule = profile.schedule
    if schedule is None:
        raise PlanValidationError("User profile must include schedule availability")

    if not schedule.is_valid():
        raise PlanValidationError(
            "Schedule availability is inconsistent: "
            f"{schedule.available_days_count} day(s) available, "
            f"min={schedule.minimum_sessions_per_week}, max={schedule.maximum_sessions_per_week}"
        )

    if not profile.goals:
        raise PlanValidationError("User must have at least one training goal")


def validate_plan_coherence(plan: TrainingPlan) -> list[str]:
    """Validate a generated plan.

    Rules:
    - Week numbers are contiguous starting at 1 (hard)
    - Every week has at least one workout (hard)
    - Week-over-week volume should not drop more than the regression
      tolerance, except on low-intensity weeks (advisory)

    Args:
        plan: Generated plan

    Returns:
        Advisory warnings (empty when none)

    Raises:
        PlannerInvariantError: If a structural rule is violated
    """
    for expected, week in enumerate(plan.weeks, start=1):
        if week.week_number != expected:
            raise PlannerInvariantError(f"Week number mismatch: expected {expected}, got {week.week_number}")
        if not week.workouts:
            raise PlannerInvariantError(f"Week {week.week_number} has no workouts")

    if len(plan.weeks) != plan.total_weeks:
        raise PlannerInvariantError(f"Expected {plan.total_weeks} weeks, got {len(plan.weeks)}")

    warnings: list[str] = []
    tolerance = settings.volume_regression_tolerance
    for previous, current in zip(plan.weeks, plan.weeks[1:]):
        if current.intensity == IntensityLevel.LOW or previous.weekly_volume <= 0:
            continue
        drop = (previous.weekly_volume - current.weekly_volume) / previous.weekly_volume
        if drop > tolerance:
            message = (
                f"Volume drops {drop:.0%} from week {previous.week_number} "
                f"to week {current.week_number}"
            )
            logger.warning(
                "Volume regression detected",
                from_week=previous.week_number,
                to_week=current.week_number,
                previous_volume=previous.weekly_volume,
                current_volume=current.weekly_volume,
            )
            warnings.append(message)

    return warnings
