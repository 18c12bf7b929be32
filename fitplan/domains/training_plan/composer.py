"""Workout composition for a single scheduled session.

For one (discipline, phase, slot) this module:
1. Selects a session type from SESSION_TYPE_TABLE
2. Estimates duration
3. Sources safe exercises from the catalog
4. Samples a varied exercise set with the injected random source
5. Applies progressive overload parameters for the week
"""

import random
from datetime import date
from uuid import UUID

from loguru import logger

from fitplan.config.settings import settings
from fitplan.domains.training_plan.catalog import ExerciseCatalog
from fitplan.domains.training_plan.contraindications import is_contraindicated
from fitplan.domains.training_plan.enums import (
    Discipline,
    DifficultyLevel,
    InjuryType,
    IntensityLevel,
    SessionType,
    TrainingPhase,
)
from fitplan.domains.training_plan.models import Exercise, SessionSlot, UserProfile, Workout, WorkoutExercise
from fitplan.domains.training_plan.rules import (
    BASE_DURATION_MINUTES,
    BASE_EXERCISE_SECONDS,
    BASE_REPS,
    BASE_SETS,
    DEFAULT_DURATION_MINUTES,
    DEFAULT_EXERCISE_COUNT,
    DEFAULT_GUIDANCE,
    DEFAULT_REST_SECONDS,
    DISCIPLINE_DEFAULT_SESSION,
    EXERCISE_COUNT,
    FITNESS_DIFFICULTY,
    HIGH_INTENSITY_DURATION_FACTOR,
    INTENSITY_GUIDANCE,
    REST_SECONDS,
    SESSION_DISPLAY_NAME,
    SESSION_TYPE_TABLE,
    STRENGTH_SPLIT_MIN_SESSIONS,
)


def select_session_type(
    discipline: Discipline,
    phase: TrainingPhase,
    is_first_session: bool,
    sessions_per_week: int,
) -> SessionType:
    """Look up the session type for a slot.

    Strength picks its split from weekly frequency; other disciplines read
    SESSION_TYPE_TABLE and fall back to the discipline default.
    """
    if discipline == Discipline.STRENGTH:
        if sessions_per_week >= STRENGTH_SPLIT_MIN_SESSIONS:
            return SessionType.PUSH_PULL_LEGS
        return SessionType.FULL_BODY

    session_type = SESSION_TYPE_TABLE.get((discipline, phase, is_first_session))
    if session_type is None:
        return DISCIPLINE_DEFAULT_SESSION[discipline]
    return session_type


def estimate_duration(session_type: SessionType, intensity: IntensityLevel) -> int:
    """Session duration in minutes, scaled up for high-intensity weeks."""
    base = BASE_DURATION_MINUTES.get(session_type, DEFAULT_DURATION_MINUTES)
    if intensity == IntensityLevel.HIGH:
        return round(base * HIGH_INTENSITY_DURATION_FACTOR)
    return base


def difficulty_for_discipline(profile: UserProfile, discipline: Discipline) -> DifficultyLevel:
    return FITNESS_DIFFICULTY[profile.fitness_level_for(discipline)]


def source_exercises(
    catalog: ExerciseCatalog,
    discipline: Discipline,
    difficulty: DifficultyLevel,
    session_type: SessionType,
    injury_types: list[InjuryType],
) -> list[Exercise]:
    """Query the catalog, restricting to injury-safe exercises when needed.

    Args:
        catalog: Exercise source
        discipline: Session discipline
        difficulty: Difficulty tier derived from fitness level
        session_type: Selected session type (criteria query only)
        injury_types: Types of active or improving injuries

    Returns:
        Unordered candidate list (may be empty)
    """
    if injury_types:
        return catalog.get_safe_exercises(injury_types, discipline, difficulty)
    return catalog.get_exercises_by_criteria(discipline, difficulty, session_type)


def select_exercises(candidates: list[Exercise], session_type: SessionType, rng: random.Random) -> list[Exercise]:
    """Sample a varied exercise set for one workout.

    Compound exercises (two or more movement patterns) are preferred when any
    exist. No exercise is picked twice.

    Args:
        candidates: Catalog candidates (duplicates allowed)
        session_type: Session type driving the exercise count
        rng: Injected random source

    Returns:
        Up to EXERCISE_COUNT[session_type] distinct exercises
    """
    count = EXERCISE_COUNT.get(session_type, DEFAULT_EXERCISE_COUNT)

    unique: dict[UUID, Exercise] = {}
    for exercise in candidates:
        unique.setdefault(exercise.id, exercise)
    distinct = list(unique.values())

    compound = [exercise for exercise in distinct if exercise.is_compound]
    pool = compound or distinct
    return rng.sample(pool, min(count, len(pool)))


def intensity_guidance(intensity: IntensityLevel, discipline: Discipline) -> str:
    return INTENSITY_GUIDANCE.get((intensity, discipline), DEFAULT_GUIDANCE)


def overload_multiplier(week_number: int) -> float:
    return 1 + (week_number - 1) * settings.progressive_overload_rate


def apply_progressive_overload(
    exercise: Exercise,
    week_number: int,
    intensity: IntensityLevel,
    order: int,
) -> WorkoutExercise:
    """Build the prescription for one exercise in a given week.

    Duration-based exercises get round(300s * multiplier). Rep-based exercises
    get 3 sets of round(10 * multiplier) reps with intensity-dependent rest.

    Args:
        exercise: Catalog exercise
        week_number: 1-based plan week
        intensity: Week intensity
        order: 1-based position within the workout

    Returns:
        WorkoutExercise prescription
    """
    multiplier = overload_multiplier(week_number)
    guidance = intensity_guidance(intensity, exercise.primary_discipline)

    if exercise.is_duration_based:
        return WorkoutExercise(
            exercise_id=exercise.id,
            exercise_name=exercise.name,
            order=order,
            duration_seconds=round(BASE_EXERCISE_SECONDS * multiplier),
            intensity_guidance=guidance,
        )

    return WorkoutExercise(
        exercise_id=exercise.id,
        exercise_name=exercise.name,
        order=order,
        sets=BASE_SETS,
        reps=round(BASE_REPS * multiplier),
        rest_seconds=REST_SECONDS.get(intensity, DEFAULT_REST_SECONDS),
        intensity_guidance=guidance,
    )


def is_key_workout(phase: TrainingPhase, index: int, session_count: int) -> bool:
    """Only the last session of a Peak week is a key workout."""
    return phase == TrainingPhase.PEAK and index == session_count - 1


def workout_name(discipline: Discipline, session_type: SessionType, phase: TrainingPhase) -> str:
    session_label = SESSION_DISPLAY_NAME.get(session_type, session_type.value)
    return f"{discipline.value.title()} - {session_label} ({phase.value.title()})"


def workout_description(session_type: SessionType, phase: TrainingPhase) -> str:
    session_label = SESSION_DISPLAY_NAME.get(session_type, session_type.value)
    return (
        f"Focus on {session_label.lower()} during {phase.value} phase. "
        "Maintain proper form and listen to your body."
    )


def compose_workout(
    slot: SessionSlot,
    *,
    scheduled_date: date,
    week_number: int,
    phase: TrainingPhase,
    intensity: IntensityLevel,
    sessions_per_week: int,
    profile: UserProfile,
    catalog: ExerciseCatalog,
    rng: random.Random,
) -> Workout:
    """Compose one workout for a session slot.

    Args:
        slot: Position, day and discipline of the session
        scheduled_date: Calendar date of the session
        week_number: 1-based plan week
        phase: Week phase
        intensity: Week intensity (LOW on deload weeks)
        sessions_per_week: Sessions in this week
        profile: Athlete profile (fitness levels, injuries)
        catalog: Exercise source
        rng: Injected random source for exercise variety

    Returns:
        Fully composed Workout
    """
    session_type = select_session_type(slot.discipline, phase, slot.index == 0, sessions_per_week)
    difficulty = difficulty_for_discipline(profile, slot.discipline)

    candidates = source_exercises(
        catalog,
        slot.discipline,
        difficulty,
        session_type,
        profile.limiting_injury_types(),
    )
    injuries = profile.limiting_injuries()
    if injuries:
        candidates = [exercise for exercise in candidates if not is_contraindicated(exercise, injuries)]
    selected = select_exercises(candidates, session_type, rng)
    if not selected:
        logger.warning(
            "No catalog exercises matched session",
            discipline=slot.discipline.value,
            difficulty=difficulty.value,
            session_type=session_type.value,
            week_number=week_number,
        )

    exercises = [
        apply_progressive_overload(exercise, week_number, intensity, order)
        for order, exercise in enumerate(selected, start=1)
    ]

    return Workout(
        scheduled_date=scheduled_date,
        discipline=slot.discipline,
        session_type=session_type,
        name=workout_name(slot.discipline, session_type, phase),
        description=workout_description(session_type, phase),
        estimated_duration=estimate_duration(session_type, intensity),
        intensity=intensity,
        is_key_workout=is_key_workout(phase, slot.index, sessions_per_week),
        exercises=exercises,
    )
