"""Root conftest for all tests.

Shared fixtures: a fixed clock, a seeded random source, a sample exercise
catalog and a few athlete profiles.
"""

import random
from datetime import date, datetime, time, timezone

import pytest
from loguru import logger

from fitplan.core.logger import setup_logger
from fitplan.domains.training_plan.catalog import InMemoryExerciseCatalog
from fitplan.domains.training_plan.enums import (
    Discipline,
    DifficultyLevel,
    FitnessLevel,
    GoalType,
    InjuryType,
    MovementPattern,
    SessionType,
    WorkoutDay,
)
from fitplan.domains.training_plan.generator import generate_plan
from fitplan.domains.training_plan.models import (
    Exercise,
    ScheduleAvailability,
    TrainingGoal,
    TrainingPlan,
    UserProfile,
)


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """Route loguru output through a single stderr sink for the test session."""
    setup_logger(level="DEBUG")
    yield


@pytest.fixture
def log_records():
    """Capture loguru records (message, level, extra) emitted during a test."""
    records: list[dict] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


@pytest.fixture
def today() -> date:
    """Fixed plan start date (a Monday)."""
    return date(2026, 1, 5)


@pytest.fixture
def now(today: date) -> datetime:
    return datetime.combine(today, time(9, 0), tzinfo=timezone.utc)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


def _exercise(
    name: str,
    discipline: Discipline,
    patterns: list[MovementPattern],
    *,
    difficulty: DifficultyLevel = DifficultyLevel.BEGINNER,
    duration: int | None = None,
    session_type: SessionType | None = None,
    contraindications: list[InjuryType] | None = None,
) -> Exercise:
    return Exercise(
        name=name,
        primary_discipline=discipline,
        difficulty=difficulty,
        approximate_duration=duration,
        session_type=session_type,
        movement_patterns=patterns,
        contraindications=contraindications or [],
    )


@pytest.fixture
def exercises() -> list[Exercise]:
    """Sample catalog covering every discipline at beginner level."""
    return [
        # hybrid
        _exercise("Sled Push", Discipline.HYBRID, [MovementPattern.PUSH, MovementPattern.CARDIO]),
        _exercise("Wall Balls", Discipline.HYBRID, [MovementPattern.SQUAT, MovementPattern.PUSH]),
        _exercise(
            "Burpee Broad Jump",
            Discipline.HYBRID,
            [MovementPattern.SQUAT, MovementPattern.CARDIO],
            contraindications=[InjuryType.ACUTE],
        ),
        _exercise("Farmers Carry", Discipline.HYBRID, [MovementPattern.CARRY, MovementPattern.CORE]),
        _exercise("Ski Erg", Discipline.HYBRID, [MovementPattern.CARDIO], duration=300),
        _exercise("Rowing", Discipline.HYBRID, [MovementPattern.PULL, MovementPattern.CARDIO], duration=300),
        # strength
        _exercise("Back Squat", Discipline.STRENGTH, [MovementPattern.SQUAT, MovementPattern.CORE]),
        _exercise("Deadlift", Discipline.STRENGTH, [MovementPattern.HINGE, MovementPattern.PULL]),
        _exercise("Bench Press", Discipline.STRENGTH, [MovementPattern.PUSH]),
        _exercise(
            "Overhead Press",
            Discipline.STRENGTH,
            [MovementPattern.PUSH, MovementPattern.CORE],
            contraindications=[InjuryType.CHRONIC],
        ),
        _exercise("Pull Up", Discipline.STRENGTH, [MovementPattern.PULL]),
        # endurance
        _exercise("Easy Jog", Discipline.ENDURANCE, [MovementPattern.CARDIO], duration=1800),
        _exercise(
            "Hill Repeats",
            Discipline.ENDURANCE,
            [MovementPattern.CARDIO, MovementPattern.HINGE],
            duration=600,
            session_type=SessionType.INTERVALS,
        ),
    ]


@pytest.fixture
def catalog(exercises: list[Exercise]) -> InMemoryExerciseCatalog:
    return InMemoryExerciseCatalog(exercises)


@pytest.fixture
def mwf_schedule() -> ScheduleAvailability:
    return ScheduleAvailability.from_days(
        [WorkoutDay.MONDAY, WorkoutDay.WEDNESDAY, WorkoutDay.FRIDAY],
        minimum_sessions_per_week=2,
        maximum_sessions_per_week=3,
    )


@pytest.fixture
def race_profile(mwf_schedule: ScheduleAvailability) -> UserProfile:
    """Race goal without target date, Mon/Wed/Fri, up to 3 sessions."""
    return UserProfile(
        fitness_levels={Discipline.HYBRID: FitnessLevel.BEGINNER},
        schedule=mwf_schedule,
        goals=[TrainingGoal(goal_type=GoalType.RACE, description="Hybrid race", priority=1)],
    )


@pytest.fixture
def plan(race_profile: UserProfile, catalog: InMemoryExerciseCatalog, today: date, rng: random.Random) -> TrainingPlan:
    return generate_plan(race_profile, catalog, today=today, rng=rng)
