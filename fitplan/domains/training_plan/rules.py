"""Lookup tables for plan generation.

Every phase/discipline/session rule is expressed as a map from enum tuples to
results so each rule can be audited and tested on its own. Functions in
composer.py, periodization.py, disciplines.py and contraindications.py only read
these tables.
"""

from fitplan.domains.training_plan.enums import (
    Discipline,
    DifficultyLevel,
    FitnessLevel,
    GoalType,
    IntensityLevel,
    MovementPattern,
    SessionType,
    TrainingPhase,
)

# -----------------------------
# Periodization
# -----------------------------
PHASE_INTENSITY: dict[TrainingPhase, IntensityLevel] = {
    TrainingPhase.FOUNDATION: IntensityLevel.LOW,
    TrainingPhase.BUILD: IntensityLevel.MODERATE,
    TrainingPhase.INTENSITY: IntensityLevel.HIGH,
    TrainingPhase.PEAK: IntensityLevel.HIGH,
    TrainingPhase.TAPER: IntensityLevel.LOW,
    TrainingPhase.RECOVERY: IntensityLevel.LOW,
}

# "{goal}" is replaced with the primary goal description (or type)
PHASE_FOCUS: dict[TrainingPhase, str] = {
    TrainingPhase.FOUNDATION: "Building aerobic base and movement quality",
    TrainingPhase.BUILD: "Increasing volume for {goal}",
    TrainingPhase.INTENSITY: "High-intensity work and specific adaptations",
    TrainingPhase.PEAK: "Peak performance and race-specific training",
    TrainingPhase.TAPER: "Recovery and sharpening for event",
}
DEFAULT_FOCUS = "General fitness improvement"

# -----------------------------
# Disciplines
# -----------------------------
GOAL_DISCIPLINE: dict[GoalType, Discipline] = {
    GoalType.RACE: Discipline.HYBRID,
    GoalType.DISTANCE: Discipline.ENDURANCE,
    GoalType.STRENGTH_MILESTONE: Discipline.STRENGTH,
    GoalType.GENERAL_FITNESS: Discipline.HYBRID,
}

FITNESS_DIFFICULTY: dict[FitnessLevel, DifficultyLevel] = {
    FitnessLevel.BEGINNER: DifficultyLevel.BEGINNER,
    FitnessLevel.INTERMEDIATE: DifficultyLevel.INTERMEDIATE,
    FitnessLevel.ADVANCED: DifficultyLevel.ADVANCED,
}

# -----------------------------
# Session types
# -----------------------------
# Key: (discipline, phase, is_first_session_of_week)
# Strength is resolved by weekly frequency, see STRENGTH_SPLIT_MIN_SESSIONS.
SESSION_TYPE_TABLE: dict[tuple[Discipline, TrainingPhase, bool], SessionType] = {
    (Discipline.ENDURANCE, TrainingPhase.FOUNDATION, True): SessionType.EASY_RUN,
    (Discipline.ENDURANCE, TrainingPhase.FOUNDATION, False): SessionType.LONG_RUN,
    (Discipline.ENDURANCE, TrainingPhase.BUILD, True): SessionType.TEMPO,
    (Discipline.ENDURANCE, TrainingPhase.BUILD, False): SessionType.LONG_RUN,
    (Discipline.ENDURANCE, TrainingPhase.INTENSITY, True): SessionType.INTERVALS,
    (Discipline.ENDURANCE, TrainingPhase.INTENSITY, False): SessionType.INTERVALS,
    (Discipline.HYBRID, TrainingPhase.PEAK, True): SessionType.RACE_SIMULATION,
    (Discipline.HYBRID, TrainingPhase.PEAK, False): SessionType.RACE_SIMULATION,
    (Discipline.HYBRID, TrainingPhase.INTENSITY, True): SessionType.STATION_PRACTICE,
    (Discipline.HYBRID, TrainingPhase.INTENSITY, False): SessionType.STATION_PRACTICE,
}

# Fallback when (discipline, phase, is_first) has no explicit row
DISCIPLINE_DEFAULT_SESSION: dict[Discipline, SessionType] = {
    Discipline.ENDURANCE: SessionType.EASY_RUN,
    Discipline.STRENGTH: SessionType.FULL_BODY,
    Discipline.HYBRID: SessionType.HYBRID_CONDITIONING,
}

STRENGTH_SPLIT_MIN_SESSIONS = 3

# -----------------------------
# Durations (minutes)
# -----------------------------
BASE_DURATION_MINUTES: dict[SessionType, int] = {
    SessionType.EASY_RUN: 30,
    SessionType.LONG_RUN: 60,
    SessionType.INTERVALS: 45,
    SessionType.TEMPO: 40,
    SessionType.RECOVERY: 20,
    SessionType.FULL_BODY: 60,
    SessionType.UPPER_LOWER: 45,
    SessionType.PUSH_PULL_LEGS: 45,
    SessionType.RACE_SIMULATION: 90,
    SessionType.STATION_PRACTICE: 45,
    SessionType.HYBRID_CONDITIONING: 50,
}
DEFAULT_DURATION_MINUTES = 45
HIGH_INTENSITY_DURATION_FACTOR = 1.2

# -----------------------------
# Exercise selection
# -----------------------------
EXERCISE_COUNT: dict[SessionType, int] = {
    SessionType.FULL_BODY: 6,
    SessionType.UPPER_LOWER: 5,
    SessionType.PUSH_PULL_LEGS: 5,
    SessionType.LONG_RUN: 1,
    SessionType.INTERVALS: 3,
    SessionType.RACE_SIMULATION: 8,
    SessionType.STATION_PRACTICE: 4,
}
DEFAULT_EXERCISE_COUNT = 4

# -----------------------------
# Progressive overload
# -----------------------------
BASE_EXERCISE_SECONDS = 300
BASE_SETS = 3
BASE_REPS = 10

REST_SECONDS: dict[IntensityLevel, int] = {
    IntensityLevel.LOW: 60,
    IntensityLevel.MODERATE: 90,
    IntensityLevel.HIGH: 120,
}
DEFAULT_REST_SECONDS = 90

INTENSITY_GUIDANCE: dict[tuple[IntensityLevel, Discipline], str] = {
    (IntensityLevel.LOW, Discipline.STRENGTH): "60-70% of max",
    (IntensityLevel.MODERATE, Discipline.STRENGTH): "70-80% of max",
    (IntensityLevel.HIGH, Discipline.STRENGTH): "80-90% of max",
    (IntensityLevel.LOW, Discipline.ENDURANCE): "Easy pace, conversational",
    (IntensityLevel.MODERATE, Discipline.ENDURANCE): "Tempo pace, slightly uncomfortable",
    (IntensityLevel.HIGH, Discipline.ENDURANCE): "Hard pace, near maximum effort",
}
DEFAULT_GUIDANCE = "RPE 5-7"

# -----------------------------
# Display names
# -----------------------------
SESSION_DISPLAY_NAME: dict[SessionType, str] = {
    SessionType.EASY_RUN: "Easy Run",
    SessionType.INTERVALS: "Intervals",
    SessionType.TEMPO: "Tempo",
    SessionType.LONG_RUN: "Long Run",
    SessionType.RECOVERY: "Recovery",
    SessionType.FULL_BODY: "Full Body",
    SessionType.UPPER_LOWER: "Upper Lower",
    SessionType.PUSH_PULL_LEGS: "Push Pull Legs",
    SessionType.RACE_SIMULATION: "Race Simulation",
    SessionType.STATION_PRACTICE: "Station Practice",
    SessionType.TRANSITION_DRILLS: "Transition Drills",
    SessionType.HYBRID_CONDITIONING: "Hybrid Conditioning",
}

GOAL_DISPLAY_NAME: dict[GoalType, str] = {
    GoalType.RACE: "Race",
    GoalType.DISTANCE: "Distance",
    GoalType.STRENGTH_MILESTONE: "Strength Milestone",
    GoalType.GENERAL_FITNESS: "General Fitness",
}

# -----------------------------
# Injury restrictions
# -----------------------------
# (body part keywords, restriction keywords, blocked pattern). A rule fires when
# the injury's body part contains any body keyword and any of its movement
# restrictions contains any restriction keyword.
RESTRICTED_PATTERN_RULES: list[tuple[tuple[str, ...], tuple[str, ...], MovementPattern]] = [
    (("shoulder",), ("overhead", "press"), MovementPattern.PUSH),
    (("shoulder",), ("pull",), MovementPattern.PULL),
    (("knee",), ("squat", "lunge"), MovementPattern.SQUAT),
    (("knee",), ("impact", "jump"), MovementPattern.CARDIO),
    (("back", "spine"), ("hinge", "heavy", "rotation"), MovementPattern.HINGE),
    (("ankle", "foot"), ("impact", "run", "jump"), MovementPattern.CARDIO),
]

# Restriction keyword that makes an explicit contraindication absolute
SEVERE_RESTRICTION_KEYWORD = "severe"
