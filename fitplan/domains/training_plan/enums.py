"""Canonical enums for planning dimensions.

This module defines all enumerations used across the planning system.
All enums are string-based to ensure JSON serialization compatibility.
Ordinal scales (intensity) expose explicit rank helpers instead of relying
on string ordering.
"""

from enum import StrEnum


# -----------------------------
# Athlete Profile
# -----------------------------
class Discipline(StrEnum):
    """Training discipline a session belongs to."""

    ENDURANCE = "endurance"
    STRENGTH = "strength"
    HYBRID = "hybrid"


class FitnessLevel(StrEnum):
    """Self-reported fitness level for a discipline."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class DifficultyLevel(StrEnum):
    """Exercise difficulty tier in the catalog."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class GoalType(StrEnum):
    """Kind of training goal."""

    RACE = "race"
    DISTANCE = "distance"
    STRENGTH_MILESTONE = "strength_milestone"
    GENERAL_FITNESS = "general_fitness"


class GoalStatus(StrEnum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class InjuryType(StrEnum):
    ACUTE = "acute"
    CHRONIC = "chronic"


class InjuryStatus(StrEnum):
    """Injury lifecycle: active → improving → resolved."""

    ACTIVE = "active"
    IMPROVING = "improving"
    RESOLVED = "resolved"


class ContraindicationSeverity(StrEnum):
    ABSOLUTE = "absolute"
    RELATIVE = "relative"
    MODERATE = "moderate"


class MovementPattern(StrEnum):
    PUSH = "push"
    PULL = "pull"
    SQUAT = "squat"
    HINGE = "hinge"
    CARRY = "carry"
    CORE = "core"
    CARDIO = "cardio"


# -----------------------------
# Calendar
# -----------------------------
class WorkoutDay(StrEnum):
    """Day of week. Definition order matches date.weekday() (Monday = 0)."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def weekday_index(self) -> int:
        return list(WorkoutDay).index(self)

    @classmethod
    def from_index(cls, index: int) -> "WorkoutDay":
        return list(cls)[index]


# -----------------------------
# Periodization
# -----------------------------
class TrainingPhase(StrEnum):
    """Periodization phase assigned to a week."""

    FOUNDATION = "foundation"
    BUILD = "build"
    INTENSITY = "intensity"
    PEAK = "peak"
    TAPER = "taper"
    RECOVERY = "recovery"


class IntensityLevel(StrEnum):
    """Ordinal intensity scale. A deload week is expressed as LOW."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    MAXIMUM = "maximum"

    @property
    def rank(self) -> int:
        return _INTENSITY_ORDER.index(self)

    def harder(self) -> "IntensityLevel":
        """One step up the scale, capped at MAXIMUM."""
        return _INTENSITY_ORDER[min(self.rank + 1, len(_INTENSITY_ORDER) - 1)]

    def easier(self) -> "IntensityLevel":
        """One step down the scale, capped at LOW."""
        return _INTENSITY_ORDER[max(self.rank - 1, 0)]


_INTENSITY_ORDER: list[IntensityLevel] = [
    IntensityLevel.LOW,
    IntensityLevel.MODERATE,
    IntensityLevel.HIGH,
    IntensityLevel.MAXIMUM,
]


# -----------------------------
# Sessions
# -----------------------------
class SessionType(StrEnum):
    """Session type for a single workout."""

    # endurance
    EASY_RUN = "easy_run"
    INTERVALS = "intervals"
    TEMPO = "tempo"
    LONG_RUN = "long_run"
    RECOVERY = "recovery"
    # strength
    FULL_BODY = "full_body"
    UPPER_LOWER = "upper_lower"
    PUSH_PULL_LEGS = "push_pull_legs"
    # hybrid
    RACE_SIMULATION = "race_simulation"
    STATION_PRACTICE = "station_practice"
    TRANSITION_DRILLS = "transition_drills"
    HYBRID_CONDITIONING = "hybrid_conditioning"


class CompletionStatus(StrEnum):
    NOT_STARTED = "not_started"
    COMPLETED = "completed"
    SKIPPED = "skipped"


class PlanStatus(StrEnum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


# -----------------------------
# Adaptation
# -----------------------------
class AdaptationTrigger(StrEnum):
    """Event category that caused a plan mutation."""

    MISSED_WORKOUTS = "missed_workouts"
    INTENSITY_CHANGE = "intensity_change"
    SCHEDULE_CHANGE = "schedule_change"
    INJURY = "injury"
    TIMELINE_CHANGE = "timeline_change"
    PERCEIVED_DIFFICULTY = "perceived_difficulty"


class AdaptationType(StrEnum):
    INTENSITY = "intensity"
    SCHEDULE = "schedule"
    TIMELINE = "timeline"
    INJURY = "injury"
    RECOVERY = "recovery"


class IntensityDirection(StrEnum):
    HARDER = "harder"
    EASIER = "easier"
