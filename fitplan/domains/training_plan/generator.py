"""Plan generation pipeline.

Linear, deterministic given (profile, catalog, today, rng):

    profile validation → duration → sessions/week → periodization
    → per week: phase/deload/intensity, days, disciplines, workouts, volume
    → plan assembly → coherence check

No I/O and no side effects beyond the returned plan. Persisting the plan
and enforcing "one active plan per user" are the caller's job.
"""

import random
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING
from uuid import uuid4

from loguru import logger

from fitplan.config.settings import settings
from fitplan.domains.training_plan.catalog import ExerciseCatalog
from fitplan.domains.training_plan.composer import compose_workout
from fitplan.domains.training_plan.disciplines import allocate_disciplines, discipline_priorities
from fitplan.domains.training_plan.enums import PlanStatus
from fitplan.domains.training_plan.models import (
    PhaseSegment,
    PlanMetadata,
    SessionSlot,
    TrainingGoal,
    TrainingPlan,
    TrainingWeek,
    UserProfile,
)
from fitplan.domains.training_plan.observability import PlannerStage, planner_run, planner_stage, run_logger
from fitplan.domains.training_plan.periodization import (
    design_periodization,
    focus_area_for_phase,
    intensity_for_week,
    is_deload_week,
    phase_for_week,
    resolve_plan_duration,
)
from fitplan.domains.training_plan.rules import GOAL_DISPLAY_NAME
from fitplan.domains.training_plan.schedule import date_for_day, select_training_days, week_bounds
from fitplan.domains.training_plan.validators import validate_plan_coherence, validate_profile_for_generation

if TYPE_CHECKING:
    from loguru import Logger


def generate_plan(
    profile: UserProfile,
    catalog: ExerciseCatalog,
    *,
    today: date | None = None,
    rng: random.Random | None = None,
) -> TrainingPlan:
    """Generate a complete training plan for a profile.

    Args:
        profile: Athlete profile with schedule, goals, levels and injuries
        catalog: Exercise source
        today: Plan start date (defaults to the current UTC date)
        rng: Random source for exercise variety (defaults to an unseeded one)

    Returns:
        Active TrainingPlan starting at `today` with current_week = 1

    Raises:
        PlanValidationError: If the profile cannot drive generation
        ScheduleResolutionError: If sessions cannot be placed on available days
        PlannerInvariantError: If the generated plan is structurally broken
    """
    today = today or datetime.now(timezone.utc).date()
    rng = rng or random.Random()
    plan_id = uuid4()
    run_log = run_logger(
        "generate",
        user_id=profile.user_id if profile is not None else None,
        plan_id=plan_id,
    )

    with planner_run(run_log):
        with planner_stage(run_log, PlannerStage.PROFILE):
            validate_profile_for_generation(profile)

        schedule = profile.schedule
        assert schedule is not None  # checked by validate_profile_for_generation

        primary_goal = profile.primary_goal()
        total_weeks = resolve_plan_duration(primary_goal, today)
        sessions_per_week = min(schedule.maximum_sessions_per_week, schedule.available_days_count)

        with planner_stage(run_log, PlannerStage.PERIODIZATION, total_weeks=total_weeks):
            segments = design_periodization(total_weeks)

        with planner_stage(run_log, PlannerStage.WEEK, sessions_per_week=sessions_per_week):
            weeks = [
                _build_week(
                    week_number,
                    total_weeks=total_weeks,
                    segments=segments,
                    sessions_per_week=sessions_per_week,
                    start_date=today,
                    profile=profile,
                    primary_goal=primary_goal,
                    catalog=catalog,
                    rng=rng,
                    run_log=run_log,
                )
                for week_number in range(1, total_weeks + 1)
            ]
        _, end_date = week_bounds(today, total_weeks)

        plan = TrainingPlan(
            id=plan_id,
            user_id=profile.user_id,
            name=_plan_name(primary_goal, today),
            start_date=today,
            end_date=end_date,
            total_weeks=total_weeks,
            sessions_per_week=sessions_per_week,
            primary_goal_id=primary_goal.id if primary_goal else None,
            status=PlanStatus.ACTIVE,
            current_week=1,
            weeks=weeks,
            metadata=PlanMetadata(
                algorithm_version=settings.algorithm_version,
                generation_parameters={
                    "start_date": today.isoformat(),
                    "total_weeks": total_weeks,
                    "sessions_per_week": sessions_per_week,
                    "primary_goal_type": primary_goal.goal_type.value if primary_goal else None,
                    "available_days": [day.value for day in schedule.available_days],
                    "injury_types": [t.value for t in profile.limiting_injury_types()],
                },
            ),
        )

        with planner_stage(run_log, PlannerStage.COHERENCE):
            warnings = validate_plan_coherence(plan)
        if plan.metadata is not None:
            plan.metadata.warnings.extend(warnings)

    run_log.info(
        "plan_generated",
        total_weeks=total_weeks,
        sessions_per_week=sessions_per_week,
        workouts=len(plan.all_workouts()),
        warnings=len(warnings),
    )
    return plan


def regenerate_plan(
    profile: UserProfile,
    catalog: ExerciseCatalog,
    existing_plan: TrainingPlan | None,
    *,
    today: date | None = None,
    rng: random.Random | None = None,
) -> TrainingPlan:
    """Abandon the current plan (if any) and generate a fresh one.

    The new plan is generated first so a validation failure leaves the
    existing plan untouched.

    Args:
        profile: Athlete profile
        catalog: Exercise source
        existing_plan: Currently active plan, or None
        today: Plan start date
        rng: Random source for exercise variety

    Returns:
        Newly generated active plan
    """
    new_plan = generate_plan(profile, catalog, today=today, rng=rng)
    if existing_plan is not None and existing_plan.status == PlanStatus.ACTIVE:
        existing_plan.status = PlanStatus.ABANDONED
        logger.info(
            "Existing plan abandoned for regeneration",
            abandoned_plan_id=str(existing_plan.id),
            new_plan_id=str(new_plan.id),
        )
    return new_plan


def _build_week(
    week_number: int,
    *,
    total_weeks: int,
    segments: list[PhaseSegment],
    sessions_per_week: int,
    start_date: date,
    profile: UserProfile,
    primary_goal: TrainingGoal | None,
    catalog: ExerciseCatalog,
    rng: random.Random,
    run_log: "Logger",
) -> TrainingWeek:
    assert profile.schedule is not None

    phase = phase_for_week(segments, week_number)
    deload = is_deload_week(week_number, total_weeks)
    intensity = intensity_for_week(phase, deload)
    week_start, week_end = week_bounds(start_date, week_number)

    days = select_training_days(profile.schedule.available_days, sessions_per_week)
    # Slots in calendar order
    dated_days = sorted((date_for_day(week_start, day), day) for day in days)
    disciplines = allocate_disciplines(discipline_priorities(profile.goals), sessions_per_week)

    workouts = [
        compose_workout(
            SessionSlot(index=index, day=day, discipline=discipline),
            scheduled_date=scheduled_date,
            week_number=week_number,
            phase=phase,
            intensity=intensity,
            sessions_per_week=sessions_per_week,
            profile=profile,
            catalog=catalog,
            rng=rng,
        )
        for index, ((scheduled_date, day), discipline) in enumerate(zip(dated_days, disciplines))
    ]

    week = TrainingWeek(
        week_number=week_number,
        phase=phase,
        intensity=intensity,
        is_deload=deload,
        focus_area=focus_area_for_phase(phase, primary_goal),
        start_date=week_start,
        end_date=week_end,
        weekly_volume=sum(w.estimated_duration for w in workouts),
        workouts=workouts,
    )

    run_log.bind(week=week_number).debug(
        "week_generated",
        phase=phase.value,
        intensity=intensity.value,
        is_deload=deload,
        weekly_volume=week.weekly_volume,
    )
    return week


def _plan_name(primary_goal: TrainingGoal | None, start_date: date) -> str:
    goal_label = GOAL_DISPLAY_NAME[primary_goal.goal_type] if primary_goal else "Training"
    return f"{goal_label} Plan - {start_date.strftime('%b %Y')}"

