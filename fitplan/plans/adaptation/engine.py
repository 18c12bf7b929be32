"""Plan adaptation engine.

Applies one trigger at a time to an already-loaded active plan. Only future
(scheduled today or later), not-started workouts are ever mutated. Every
entry point validates first, then mutates, then appends exactly one
PlanAdaptation record. When nothing is eligible the call returns a no-op
result instead of raising.

Flow per call:
1. ensure_active_plan
2. request validation
3. cooldown (injury exempt)
4. mutation of eligible workouts (ADAPTATION stage)
5. audit record + structured result

`now` may be naive or aware; naive values are read as UTC.
"""

import math
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING
from uuid import UUID

from fitplan.config.settings import settings
from fitplan.domains.training_plan.enums import (
    AdaptationTrigger,
    AdaptationType,
    IntensityDirection,
    IntensityLevel,
)
from fitplan.domains.training_plan.models import (
    AdaptationChange,
    PlanAdaptation,
    ScheduleAvailability,
    TrainingPlan,
    Workout,
    as_utc,
)
from fitplan.domains.training_plan.observability import PlannerStage, planner_stage, run_logger
from fitplan.domains.training_plan.schedule import available_weekday_indices
from fitplan.plans.adaptation.types import (
    AdaptationOutcome,
    AdaptationResult,
    GoalTimelineChange,
    IntensityAdjustment,
)
from fitplan.plans.adaptation.validators import (
    ensure_active_plan,
    validate_adaptation_cooldown,
    validate_missed_workout_ids,
    validate_schedule_change,
    validate_timeline_change,
)

if TYPE_CHECKING:
    from loguru import Logger

RE_ENTRY_NOTE = "[Re-entry workout - intensity reduced for safe return to training]"
INJURY_NOTE = "[Adapted for injury - exercises may be modified or substituted]"

LONG_BREAK_WARNING = "Long break detected. Consider consulting with a coach about your training consistency."
INJURY_REVIEW_WARNING = "Please review modified workouts and consult a coach for exercise alternatives."
COMPRESSION_WARNING = (
    "Timeline compressed - training intensity progression may be steeper. Monitor for overtraining signs."
)

MAX_INTENSITY_JUMP = 2
REENTRY_EXTENDED_MISSED_COUNT = 4


# -----------------------------
# Entry points
# -----------------------------
def adapt_for_missed_workouts(
    plan: TrainingPlan | None,
    missed_workout_ids: list[UUID],
    *,
    now: datetime | None = None,
) -> AdaptationOutcome:
    """Ease the athlete back in after missed sessions.

    The next week of eligible workouts (two weeks after 4+ misses) drops one
    intensity step and gets a re-entry note.

    Args:
        plan: Active plan
        missed_workout_ids: IDs of missed workouts (at least one)
        now: Evaluation time (defaults to current UTC time)

    Returns:
        AdaptationOutcome with a Recovery record

    Raises:
        PlanNotFoundError: If the plan is missing or not active
        PlanValidationError: If no IDs were supplied
        AdaptationRateLimitError: If the cooldown has not elapsed
    """
    now = as_utc(now)
    trigger = AdaptationTrigger.MISSED_WORKOUTS
    plan = ensure_active_plan(plan)
    validate_missed_workout_ids(missed_workout_ids)
    validate_adaptation_cooldown(plan, trigger, now)
    run_log = run_logger("adapt", plan_id=plan.id, trigger=trigger)

    missed_count = len(set(missed_workout_ids))
    reentry_weeks = 2 if missed_count >= REENTRY_EXTENDED_MISSED_COUNT else 1
    eligible = plan.adaptable_workouts(now.date())[: reentry_weeks * plan.sessions_per_week]
    if not eligible:
        return _noop(plan, run_log, trigger, AdaptationType.RECOVERY, "No upcoming workouts to modify", now)

    changes: list[AdaptationChange] = []
    modified: list[Workout] = []
    with planner_stage(run_log, PlannerStage.ADAPTATION, eligible=len(eligible)):
        for workout in eligible:
            workout_changes = _shift_intensity(workout, IntensityDirection.EASIER)
            workout_changes += _prepend_note(workout, RE_ENTRY_NOTE)
            if workout_changes:
                changes.extend(workout_changes)
                modified.append(workout)

    warnings = None
    if missed_count >= settings.long_break_missed_threshold:
        run_log.warning("Long missed-workout streak", missed_count=missed_count)
        warnings = [LONG_BREAK_WARNING]

    return _record(
        plan,
        run_log,
        trigger,
        AdaptationType.RECOVERY,
        f"Reduced intensity for {reentry_weeks} week(s) after {missed_count} missed workouts",
        changes,
        modified,
        warnings,
        now,
    )


def adapt_for_intensity_change(
    plan: TrainingPlan | None,
    adjustment: IntensityAdjustment,
    *,
    now: datetime | None = None,
) -> AdaptationOutcome:
    """Shift every eligible workout one intensity step harder or easier.

    Args:
        plan: Active plan
        adjustment: Requested direction
        now: Evaluation time (defaults to current UTC time)

    Returns:
        AdaptationOutcome with an Intensity record
    """
    return _apply_intensity_change(plan, adjustment.direction, AdaptationTrigger.INTENSITY_CHANGE, as_utc(now))


def adapt_for_perceived_difficulty(
    plan: TrainingPlan | None,
    feedback: str,
    *,
    now: datetime | None = None,
) -> AdaptationOutcome:
    """Classify free-text difficulty feedback and adjust intensity.

    Feedback mentioning "easy" makes the plan harder; anything else makes
    it easier. The record carries the perceived-difficulty trigger.
    """
    direction = IntensityDirection.HARDER if "easy" in feedback.lower() else IntensityDirection.EASIER
    return _apply_intensity_change(plan, direction, AdaptationTrigger.PERCEIVED_DIFFICULTY, as_utc(now))


def adapt_for_schedule_change(
    plan: TrainingPlan | None,
    new_schedule: ScheduleAvailability,
    *,
    now: datetime | None = None,
) -> AdaptationOutcome:
    """Redistribute eligible workouts onto a new weekly availability.

    Key workouts are placed first, then the rest, each on the next available
    weekday walking forward from today. A placement looks at most
    RESCHEDULE_LOOKAHEAD_DAYS ahead of the cursor and leaves the workout on
    its original date when nothing fits.

    Args:
        plan: Active plan
        new_schedule: New availability (at least two days)
        now: Evaluation time (defaults to current UTC time)

    Returns:
        AdaptationOutcome with a Schedule record

    Raises:
        PlanValidationError: If fewer than two days are available
    """
    now = as_utc(now)
    today = now.date()
    trigger = AdaptationTrigger.SCHEDULE_CHANGE
    plan = ensure_active_plan(plan)
    validate_schedule_change(new_schedule)
    validate_adaptation_cooldown(plan, trigger, now)
    run_log = run_logger("adapt", plan_id=plan.id, trigger=trigger)

    eligible = plan.adaptable_workouts(today)
    if not eligible:
        return _noop(plan, run_log, trigger, AdaptationType.SCHEDULE, "No future workouts to reschedule", now)

    weekdays = available_weekday_indices(new_schedule)
    ordered = [w for w in eligible if w.is_key_workout] + [w for w in eligible if not w.is_key_workout]

    changes: list[AdaptationChange] = []
    modified: list[Workout] = []
    cursor = today
    with planner_stage(run_log, PlannerStage.ADAPTATION, eligible=len(eligible)):
        for workout in ordered:
            new_date = _next_available_date(cursor, weekdays)
            if new_date is None:
                run_log.warning(
                    "No slot within lookahead, keeping original date",
                    workout_id=str(workout.id),
                    scheduled_date=workout.scheduled_date.isoformat(),
                )
                continue
            cursor = new_date + timedelta(days=1)
            if new_date == workout.scheduled_date:
                continue
            old_date = workout.scheduled_date
            workout.scheduled_date = new_date
            changes.append(
                AdaptationChange(
                    entity="workout",
                    entity_id=workout.id,
                    field="scheduled_date",
                    old=old_date.isoformat(),
                    new=new_date.isoformat(),
                    summary=f"Rescheduled {workout.name} from {old_date.isoformat()} to {new_date.isoformat()}",
                )
            )
            modified.append(workout)

    available_days = new_schedule.available_days_count
    warnings = None
    if available_days < plan.sessions_per_week:
        run_log.warning(
            "Reduced training frequency",
            sessions_per_week=plan.sessions_per_week,
            available_days=available_days,
        )
        warnings = [
            "Reduced training frequency may impact goal timeline. "
            f"Original plan: {plan.sessions_per_week} days/week, New: {available_days} days/week"
        ]

    return _record(
        plan,
        run_log,
        trigger,
        AdaptationType.SCHEDULE,
        f"Redistributed workouts across {available_days} available training days",
        changes,
        modified,
        warnings,
        now,
    )


def adapt_for_injury(
    plan: TrainingPlan | None,
    injury_id: UUID,
    *,
    now: datetime | None = None,
) -> AdaptationOutcome:
    """Flag eligible workouts for injury review.

    Exercises are not reassigned; each workout gets an injury note (once).
    Injury adaptations bypass the cooldown.

    Args:
        plan: Active plan
        injury_id: Reported or updated injury
        now: Evaluation time (defaults to current UTC time)

    Returns:
        AdaptationOutcome with an Injury record
    """
    now = as_utc(now)
    trigger = AdaptationTrigger.INJURY
    plan = ensure_active_plan(plan)
    validate_adaptation_cooldown(plan, trigger, now)
    run_log = run_logger("adapt", plan_id=plan.id, trigger=trigger).bind(injury_id=str(injury_id))

    eligible = plan.adaptable_workouts(now.date())
    if not eligible:
        return _noop(plan, run_log, trigger, AdaptationType.INJURY, "No future workouts to adapt for injury", now)

    changes: list[AdaptationChange] = []
    modified: list[Workout] = []
    with planner_stage(run_log, PlannerStage.ADAPTATION, eligible=len(eligible)):
        for workout in eligible:
            workout_changes = _prepend_note(workout, INJURY_NOTE)
            if workout_changes:
                changes.extend(workout_changes)
                modified.append(workout)

    return _record(
        plan,
        run_log,
        trigger,
        AdaptationType.INJURY,
        f"Adapted plan to accommodate injury (ID: {injury_id}). Workouts marked for exercise modification.",
        changes,
        modified,
        [INJURY_REVIEW_WARNING],
        now,
    )


def adapt_for_goal_timeline_change(
    plan: TrainingPlan | None,
    change: GoalTimelineChange,
    *,
    now: datetime | None = None,
) -> AdaptationOutcome:
    """Move the plan end date and recompute its length.

    Existing weeks and workouts are left as they are.

    Args:
        plan: Active plan
        change: New end date
        now: Evaluation time (defaults to current UTC time)

    Returns:
        AdaptationOutcome with a Timeline record and zero affected workouts

    Raises:
        PlanValidationError: If the end date precedes the start or compression
            leaves fewer than the floor number of weeks
    """
    now = as_utc(now)
    trigger = AdaptationTrigger.TIMELINE_CHANGE
    plan = ensure_active_plan(plan)
    validate_timeline_change(plan, change, now.date())
    validate_adaptation_cooldown(plan, trigger, now)
    run_log = run_logger("adapt", plan_id=plan.id, trigger=trigger)

    old_end, new_end = plan.end_date, change.new_end_date
    old_total = plan.total_weeks
    compressed = new_end < old_end

    with planner_stage(run_log, PlannerStage.ADAPTATION):
        plan.end_date = new_end
        plan.total_weeks = math.ceil((new_end - plan.start_date).days / 7)
        plan.current_week = min(plan.current_week, plan.total_weeks)

    changes = [
        AdaptationChange(
            entity="plan",
            entity_id=plan.id,
            field="end_date",
            old=old_end.isoformat(),
            new=new_end.isoformat(),
            summary=f"Updated plan end date from {old_end.isoformat()} to {new_end.isoformat()}",
        ),
        AdaptationChange(
            entity="plan",
            entity_id=plan.id,
            field="total_weeks",
            old=old_total,
            new=plan.total_weeks,
            summary=f"Adjusted total weeks from {old_total} to {plan.total_weeks}",
        ),
    ]

    warnings = None
    if compressed:
        run_log.warning(
            "Timeline compressed",
            old_end_date=old_end.isoformat(),
            new_end_date=new_end.isoformat(),
        )
        warnings = [COMPRESSION_WARNING]

    label = "compressed" if compressed else "extended" if new_end > old_end else "unchanged"
    return _record(
        plan,
        run_log,
        trigger,
        AdaptationType.TIMELINE,
        f"Timeline {label} - new end date: {new_end.isoformat()}",
        changes,
        [],
        warnings,
        now,
    )


# -----------------------------
# Shared steps
# -----------------------------
def _apply_intensity_change(
    plan: TrainingPlan | None,
    direction: IntensityDirection,
    trigger: AdaptationTrigger,
    now: datetime,
) -> AdaptationOutcome:
    plan = ensure_active_plan(plan)
    validate_adaptation_cooldown(plan, trigger, now)
    run_log = run_logger("adapt", plan_id=plan.id, trigger=trigger).bind(direction=direction.value)

    eligible = plan.adaptable_workouts(now.date())
    if not eligible:
        return _noop(plan, run_log, trigger, AdaptationType.INTENSITY, "No future workouts to modify", now)

    changes: list[AdaptationChange] = []
    modified: list[Workout] = []
    with planner_stage(run_log, PlannerStage.ADAPTATION, eligible=len(eligible)):
        for workout in eligible:
            workout_changes = _shift_intensity(workout, direction)
            if workout_changes:
                changes.extend(workout_changes)
                modified.append(workout)

    check_intensity_progression(plan, run_log)

    label = "higher" if direction == IntensityDirection.HARDER else "lower"
    return _record(
        plan,
        run_log,
        trigger,
        AdaptationType.INTENSITY,
        f"Adjusted intensity {label} for future workouts",
        changes,
        modified,
        None,
        now,
    )


def check_intensity_progression(plan: TrainingPlan, run_log: "Logger | None" = None) -> list[tuple[date, date]]:
    """Log consecutive workouts whose intensity jumps more than two steps.

    Returns:
        (previous_date, current_date) pairs that were flagged
    """
    run_log = run_log or run_logger("adapt", plan_id=plan.id)
    workouts = sorted(plan.all_workouts(), key=lambda w: w.scheduled_date)
    flagged: list[tuple[date, date]] = []
    for previous, current in zip(workouts, workouts[1:]):
        if abs(current.intensity.rank - previous.intensity.rank) > MAX_INTENSITY_JUMP:
            run_log.warning(
                "Large intensity jump detected",
                previous_date=previous.scheduled_date.isoformat(),
                current_date=current.scheduled_date.isoformat(),
            )
            flagged.append((previous.scheduled_date, current.scheduled_date))
    return flagged


def _shift_intensity(workout: Workout, direction: IntensityDirection) -> list[AdaptationChange]:
    old: IntensityLevel = workout.intensity
    new = old.harder() if direction == IntensityDirection.HARDER else old.easier()
    if new == old:
        return []
    workout.intensity = new
    verb = "Increased" if direction == IntensityDirection.HARDER else "Decreased"
    return [
        AdaptationChange(
            entity="workout",
            entity_id=workout.id,
            field="intensity",
            old=old.value,
            new=new.value,
            summary=f"{verb} {workout.name} from {old.value} to {new.value}",
        )
    ]


def _prepend_note(workout: Workout, note: str) -> list[AdaptationChange]:
    if note in workout.description:
        return []
    old = workout.description
    workout.description = f"{note} {old}".strip()
    return [
        AdaptationChange(
            entity="workout",
            entity_id=workout.id,
            field="description",
            old=old,
            new=workout.description,
            summary=f"Added note to {workout.name}: {note}",
        )
    ]


def _next_available_date(start: date, weekdays: set[int]) -> date | None:
    for offset in range(settings.reschedule_lookahead_days + 1):
        candidate = start + timedelta(days=offset)
        if candidate.weekday() in weekdays:
            return candidate
    return None


def _noop(
    plan: TrainingPlan,
    run_log: "Logger",
    trigger: AdaptationTrigger,
    adaptation_type: AdaptationType,
    reason: str,
    now: datetime,
) -> AdaptationOutcome:
    run_log.warning("adaptation_noop", reason=reason)
    return AdaptationOutcome(
        result=AdaptationResult(
            plan_id=plan.id,
            trigger=trigger,
            adaptation_type=adaptation_type,
            description=f"Adaptation not applied: {reason}",
            workouts_affected=0,
            applied_at=now,
            success=False,
            warnings=[reason],
        )
    )


def _record(
    plan: TrainingPlan,
    run_log: "Logger",
    trigger: AdaptationTrigger,
    adaptation_type: AdaptationType,
    description: str,
    changes: list[AdaptationChange],
    modified: list[Workout],
    warnings: list[str] | None,
    now: datetime,
) -> AdaptationOutcome:
    adaptation = PlanAdaptation(
        plan_id=plan.id,
        trigger=trigger,
        adaptation_type=adaptation_type,
        description=description,
        changes=tuple(changes),
        applied_at=now,
    )
    plan.adaptations.append(adaptation)

    run_log.info(
        "adaptation_applied",
        adaptation_id=str(adaptation.id),
        adaptation_type=adaptation_type.value,
        workouts_affected=len(modified),
        changes=len(changes),
    )

    return AdaptationOutcome(
        result=AdaptationResult(
            adaptation_id=adaptation.id,
            plan_id=plan.id,
            trigger=trigger,
            adaptation_type=adaptation_type,
            description=description,
            workouts_affected=len(modified),
            applied_at=now,
            success=True,
            warnings=warnings,
        ),
        adaptation=adaptation,
        modified_workouts=modified,
    )
