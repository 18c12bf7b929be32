"""Workout completion transitions.

NotStarted → Completed | Skipped, and Completed → NotStarted (undo).
"""

from datetime import datetime
from uuid import UUID

from loguru import logger

from fitplan.domains.training_plan.enums import CompletionStatus
from fitplan.domains.training_plan.errors import PlanNotFoundError, PlanValidationError
from fitplan.domains.training_plan.models import TrainingPlan, Workout, as_utc


def find_workout(plan: TrainingPlan, workout_id: UUID) -> Workout:
    """Return the workout with workout_id.

    Raises:
        PlanNotFoundError: If the plan has no such workout
    """
    for workout in plan.all_workouts():
        if workout.id == workout_id:
            return workout
    raise PlanNotFoundError(f"Workout {workout_id} not found in plan {plan.id}")


def mark_workout_completed(
    workout: Workout,
    completed_at: datetime | None = None,
    *,
    now: datetime | None = None,
) -> Workout:
    """Mark a workout completed.

    Rules:
    - completed_at must not be in the future
    - the workout must not already be completed
    - the workout must not be scheduled after today

    Args:
        workout: Workout to complete
        completed_at: Completion time (defaults to now)
        now: Evaluation time (defaults to current UTC time)

    Returns:
        The updated workout

    Raises:
        PlanValidationError: If a rule is violated
    """
    now = as_utc(now)
    completed_at = as_utc(completed_at) if completed_at else now

    if completed_at > now:
        raise PlanValidationError("Cannot complete a workout in the future")
    if workout.completion_status == CompletionStatus.COMPLETED:
        raise PlanValidationError("Workout is already marked as completed")
    if workout.scheduled_date > now.date():
        raise PlanValidationError("Cannot complete a workout scheduled for the future")

    workout.completion_status = CompletionStatus.COMPLETED
    workout.completed_at = completed_at
    logger.info("Workout completed", workout_id=str(workout.id), completed_at=completed_at.isoformat())
    return workout


def mark_workout_skipped(workout: Workout) -> Workout:
    if workout.completion_status == CompletionStatus.COMPLETED:
        raise PlanValidationError("Cannot skip a completed workout")
    workout.completion_status = CompletionStatus.SKIPPED
    logger.info("Workout skipped", workout_id=str(workout.id))
    return workout


def undo_workout_completion(workout: Workout) -> Workout:
    """Revert a completed workout to not started.

    Raises:
        PlanValidationError: If the workout is not completed
    """
    if workout.completion_status != CompletionStatus.COMPLETED:
        raise PlanValidationError("Workout is not marked as completed")
    workout.completion_status = CompletionStatus.NOT_STARTED
    workout.completed_at = None
    logger.info("Workout completion undone", workout_id=str(workout.id))
    return workout
