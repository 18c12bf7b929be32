"""Validators for plan adaptation.

Hard safety layer run before any mutation. Every check raises; none of
them touch the plan.
"""

import math
from datetime import date, datetime
from uuid import UUID

from loguru import logger

from fitplan.config.settings import settings
from fitplan.domains.training_plan.enums import AdaptationTrigger, PlanStatus
from fitplan.domains.training_plan.errors import (
    AdaptationRateLimitError,
    PlanNotFoundError,
    PlanValidationError,
)
from fitplan.domains.training_plan.models import ScheduleAvailability, TrainingPlan, as_utc
from fitplan.plans.adaptation.types import GoalTimelineChange


def ensure_active_plan(plan: TrainingPlan | None) -> TrainingPlan:
    """Return the plan if it exists and is active.

    Raises:
        PlanNotFoundError: If plan is None or not active
    """
    if plan is None:
        raise PlanNotFoundError("No active training plan found")
    if plan.status != PlanStatus.ACTIVE:
        raise PlanNotFoundError(f"Training plan {plan.id} is not active (status={plan.status.value})")
    return plan


def validate_adaptation_cooldown(plan: TrainingPlan, trigger: AdaptationTrigger, now: datetime) -> None:
    """Enforce the minimum interval between adaptations.

    Injury adaptations bypass the cooldown.

    Args:
        plan: Active plan
        trigger: Requested trigger
        now: Evaluation time (naive values are read as UTC)

    Raises:
        AdaptationRateLimitError: If the cooldown has not elapsed
    """
    if trigger == AdaptationTrigger.INJURY:
        return

    latest = plan.latest_adaptation()
    if latest is None:
        return

    cooldown_days = settings.adaptation_cooldown_days
    days_since = (as_utc(now) - latest.applied_at).total_seconds() / 86400
    if days_since < cooldown_days:
        days_remaining = max(1, math.ceil(cooldown_days - days_since))
        logger.info(
            "Adaptation blocked by cooldown",
            plan_id=str(plan.id),
            trigger=trigger.value,
            days_remaining=days_remaining,
        )
        raise AdaptationRateLimitError(days_remaining, latest.applied_at, cooldown_days)


def validate_missed_workout_ids(missed_workout_ids: list[UUID]) -> None:
    if not missed_workout_ids:
        raise PlanValidationError("At least one missed workout ID is required")


def validate_schedule_change(new_schedule: ScheduleAvailability) -> None:
    """Rules:
    - At least two available training days
    """
    available = new_schedule.available_days_count
    if available < settings.min_schedule_days:
        raise PlanValidationError(
            f"At least {settings.min_schedule_days} available training days are required, got {available}"
        )


def validate_timeline_change(plan: TrainingPlan, change: GoalTimelineChange, today: date) -> None:
    """Validate a goal timeline change.

    Rules:
    1. New end date must be after the plan start date
    2. When compressing, at least the floor number of weeks must remain from today

    Args:
        plan: Active plan
        change: Requested timeline change
        today: Evaluation date

    Raises:
        PlanValidationError: If a rule is violated
    """
    if change.new_end_date <= plan.start_date:
        raise PlanValidationError(
            f"New end date ({change.new_end_date}) must be after plan start date ({plan.start_date})"
        )

    if change.new_end_date < plan.end_date:
        remaining_weeks = (change.new_end_date - today).days / 7
        if remaining_weeks < settings.timeline_floor_weeks:
            raise PlanValidationError(
                f"Cannot compress timeline to less than {settings.timeline_floor_weeks} weeks "
                f"from today ({remaining_weeks:.1f} weeks requested)"
            )
