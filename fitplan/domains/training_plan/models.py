"""Core data models for plan generation and adaptation.

This module defines the canonical data structures that represent:
- The athlete profile the engine reads (availability, goals, injuries, levels)
- Catalog exercises (read-only input)
- The plan aggregate: TrainingPlan → TrainingWeek → Workout → WorkoutExercise
- The append-only adaptation audit record

Aggregates are mutable pydantic models (adaptation edits future workouts in
place). Planning intermediates are frozen dataclasses.
"""

import json
import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from uuid import UUID, uuid4

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

from fitplan.domains.training_plan.enums import (
    AdaptationTrigger,
    AdaptationType,
    CompletionStatus,
    ContraindicationSeverity,
    Discipline,
    DifficultyLevel,
    FitnessLevel,
    GoalStatus,
    GoalType,
    InjuryStatus,
    InjuryType,
    IntensityLevel,
    MovementPattern,
    PlanStatus,
    SessionType,
    TrainingPhase,
    WorkoutDay,
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime:
    """Current UTC time for None, UTC for naive values, converted otherwise."""
    if value is None:
        return utc_now()
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class _Aggregate(BaseModel):
    model_config = ConfigDict(validate_assignment=True)


# -----------------------------
# Athlete Profile
# -----------------------------
class ScheduleAvailability(_Aggregate):
    """Weekly training availability.

    Attributes:
        monday..sunday: Whether the day is available for training
        minimum_sessions_per_week: Lower bound on weekly sessions (>= 1)
        maximum_sessions_per_week: Upper bound on weekly sessions
    """

    monday: bool = False
    tuesday: bool = False
    wednesday: bool = False
    thursday: bool = False
    friday: bool = False
    saturday: bool = False
    sunday: bool = False
    minimum_sessions_per_week: int = 1
    maximum_sessions_per_week: int = 1

    @classmethod
    def from_days(
        cls,
        days: list[WorkoutDay],
        minimum_sessions_per_week: int = 1,
        maximum_sessions_per_week: int | None = None,
    ) -> "ScheduleAvailability":
        flags = {day.value: True for day in days}
        return cls(
            **flags,
            minimum_sessions_per_week=minimum_sessions_per_week,
            maximum_sessions_per_week=(
                maximum_sessions_per_week if maximum_sessions_per_week is not None else len(set(days))
            ),
        )

    @property
    def available_days(self) -> list[WorkoutDay]:
        """Available days ordered Monday → Sunday."""
        return [day for day in WorkoutDay if getattr(self, day.value)]

    @property
    def available_days_count(self) -> int:
        return len(self.available_days)

    def is_valid(self) -> bool:
        if self.available_days_count == 0:
            return False
        if self.minimum_sessions_per_week < 1:
            return False
        if self.maximum_sessions_per_week < self.minimum_sessions_per_week:
            return False
        # At least the minimum number of sessions must fit the marked days
        return self.available_days_count >= self.minimum_sessions_per_week


class TrainingGoal(_Aggregate):
    id: UUID = Field(default_factory=uuid4)
    goal_type: GoalType
    description: str = ""
    target_date: date | None = None
    priority: int = Field(default=1, ge=1)  # lower = more important
    status: GoalStatus = GoalStatus.ACTIVE


class InjuryLimitation(_Aggregate):
    id: UUID = Field(default_factory=uuid4)
    body_part: str
    injury_type: InjuryType
    movement_restrictions: list[str] = Field(default_factory=list)
    status: InjuryStatus = InjuryStatus.ACTIVE
    reported_at: AwareDatetime = Field(default_factory=utc_now)

    @property
    def is_limiting(self) -> bool:
        return self.status in {InjuryStatus.ACTIVE, InjuryStatus.IMPROVING}


class UserProfile(_Aggregate):
    """Athlete profile snapshot. Owned externally; the engine only reads it
    (injury reporting is the one supplement that appends to `injuries`)."""

    user_id: UUID = Field(default_factory=uuid4)
    fitness_levels: dict[Discipline, FitnessLevel] = Field(default_factory=dict)
    schedule: ScheduleAvailability | None = None
    goals: list[TrainingGoal] = Field(default_factory=list)
    injuries: list[InjuryLimitation] = Field(default_factory=list)

    def fitness_level_for(self, discipline: Discipline) -> FitnessLevel:
        return self.fitness_levels.get(discipline, FitnessLevel.BEGINNER)

    def active_goals(self) -> list[TrainingGoal]:
        return [g for g in self.goals if g.status == GoalStatus.ACTIVE]

    def primary_goal(self) -> TrainingGoal | None:
        active = sorted(self.active_goals(), key=lambda g: g.priority)
        return active[0] if active else None

    def limiting_injuries(self) -> list[InjuryLimitation]:
        return [injury for injury in self.injuries if injury.is_limiting]

    def limiting_injury_types(self) -> list[InjuryType]:
        """Distinct injury types of active or improving injuries, in report order."""
        seen: list[InjuryType] = []
        for injury in self.injuries:
            if injury.is_limiting and injury.injury_type not in seen:
                seen.append(injury.injury_type)
        return seen


# -----------------------------
# Exercise Catalog
# -----------------------------
class Exercise(_Aggregate):
    """Catalog exercise (read-only input).

    Attributes:
        approximate_duration: Seconds for duration-based exercises, None for rep-based
        contraindications: Injury types for which the exercise is unsafe
        contraindicated_body_parts: Injured body parts the exercise must avoid
        restriction_tags: Movement restrictions (e.g. "overhead") that rule it out
        alternative_ids: Similar-stimulus exercises, tried first as substitutes
        regression_ids: Easier variations, tried after alternatives
    """

    id: UUID = Field(default_factory=uuid4)
    name: str
    primary_discipline: Discipline
    difficulty: DifficultyLevel
    approximate_duration: int | None = None
    session_type: SessionType | None = None
    movement_patterns: list[MovementPattern] = Field(default_factory=list)
    muscle_groups: list[str] = Field(default_factory=list)
    contraindications: list[InjuryType] = Field(default_factory=list)
    contraindicated_body_parts: list[str] = Field(default_factory=list)
    restriction_tags: list[str] = Field(default_factory=list)
    alternative_ids: list[UUID] = Field(default_factory=list)
    regression_ids: list[UUID] = Field(default_factory=list)

    @property
    def is_compound(self) -> bool:
        return len(set(self.movement_patterns)) >= 2

    @property
    def is_duration_based(self) -> bool:
        return self.approximate_duration is not None


class ContraindicatedExercise(BaseModel):
    """An exercise ruled out by one of the athlete's limiting injuries."""

    model_config = ConfigDict(frozen=True)

    exercise_id: UUID
    exercise_name: str
    reason: str
    affected_body_part: str
    severity: ContraindicationSeverity


# -----------------------------
# Plan Aggregate
# -----------------------------
class WorkoutExercise(_Aggregate):
    exercise_id: UUID
    exercise_name: str
    order: int = Field(ge=1)
    sets: int | None = None
    reps: int | None = None
    rest_seconds: int | None = None
    duration_seconds: int | None = None
    intensity_guidance: str


class Workout(_Aggregate):
    """A single scheduled session.

    After generation only scheduled_date, intensity, description and
    completion fields change. Exercises are never reassigned.
    """

    id: UUID = Field(default_factory=uuid4)
    scheduled_date: date
    discipline: Discipline
    session_type: SessionType
    name: str
    description: str = ""
    estimated_duration: int  # minutes
    intensity: IntensityLevel
    is_key_workout: bool = False
    completion_status: CompletionStatus = CompletionStatus.NOT_STARTED
    completed_at: AwareDatetime | None = None
    exercises: list[WorkoutExercise] = Field(default_factory=list)

    @property
    def day_of_week(self) -> WorkoutDay:
        return WorkoutDay.from_index(self.scheduled_date.weekday())

    def is_adaptable(self, today: date) -> bool:
        """True for future (including today), not-yet-started workouts."""
        return self.scheduled_date >= today and self.completion_status == CompletionStatus.NOT_STARTED


class TrainingWeek(_Aggregate):
    week_number: int = Field(ge=1)
    phase: TrainingPhase
    intensity: IntensityLevel
    is_deload: bool = False
    focus_area: str = ""
    start_date: date
    end_date: date
    weekly_volume: int = 0  # minutes
    workouts: list[Workout] = Field(default_factory=list)


class AdaptationChange(BaseModel):
    """One field change applied by an adaptation.

    Attributes:
        entity: "workout" or "plan"
        entity_id: Optional ID of the changed entity
        field: Name of the field that changed
        old: Value before the change
        new: Value after the change
        summary: Human-readable description of the change
    """

    model_config = ConfigDict(frozen=True)

    entity: str
    entity_id: UUID | None = None
    field: str
    old: str | int | None = None
    new: str | int | None = None
    summary: str


class PlanAdaptation(BaseModel):
    """Immutable, append-only adaptation audit record."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    plan_id: UUID
    trigger: AdaptationTrigger
    adaptation_type: AdaptationType
    description: str
    changes: tuple[AdaptationChange, ...] = ()
    applied_at: AwareDatetime = Field(default_factory=utc_now)

    @property
    def changes_applied(self) -> str:
        """Serialized change list for storage alongside the record."""
        return json.dumps([change.model_dump(mode="json") for change in self.changes])


class PlanMetadata(_Aggregate):
    algorithm_version: str
    generation_parameters: dict[str, str | int | list[str] | None] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)


class TrainingPlan(_Aggregate):
    id: UUID = Field(default_factory=uuid4)
    user_id: UUID
    name: str
    start_date: date
    end_date: date
    total_weeks: int = Field(ge=1)
    sessions_per_week: int = Field(ge=1)
    primary_goal_id: UUID | None = None
    status: PlanStatus = PlanStatus.ACTIVE
    current_week: int = Field(default=1, ge=1)
    weeks: list[TrainingWeek] = Field(default_factory=list)
    adaptations: list[PlanAdaptation] = Field(default_factory=list)
    metadata: PlanMetadata | None = None

    def all_workouts(self) -> list[Workout]:
        return [workout for week in self.weeks for workout in week.workouts]

    def adaptable_workouts(self, today: date) -> list[Workout]:
        """Future, not-started workouts in chronological order."""
        return sorted(
            (w for w in self.all_workouts() if w.is_adaptable(today)),
            key=lambda w: w.scheduled_date,
        )

    def latest_adaptation(self) -> PlanAdaptation | None:
        if not self.adaptations:
            return None
        return max(self.adaptations, key=lambda a: a.applied_at)

    def sync_current_week(self, today: date) -> int:
        """Move the current-week pointer to the week containing `today`."""
        elapsed_weeks = math.floor((today - self.start_date).days / 7) + 1
        self.current_week = min(self.total_weeks, max(1, elapsed_weeks))
        return self.current_week


# -----------------------------
# Planning Intermediates
# -----------------------------
@dataclass(frozen=True)
class PhaseSegment:
    """Contiguous run of weeks sharing one periodization phase (inclusive bounds)."""

    phase: TrainingPhase
    start_week: int
    end_week: int

    def contains(self, week_number: int) -> bool:
        return self.start_week <= week_number <= self.end_week

    @property
    def length(self) -> int:
        return self.end_week - self.start_week + 1


@dataclass(frozen=True)
class SessionSlot:
    """One session position within a generated week.

    Attributes:
        index: 0-based position within the week
        day: Training day the session lands on
        discipline: Discipline assigned by the allocator
    """

    index: int
    day: WorkoutDay
    discipline: Discipline
