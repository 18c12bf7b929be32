"""Exercise catalog interface.

The catalog is owned by the caller. The engine issues criteria lookup and
injury-safe lookup while composing workouts, and id lookup when following
an exercise's alternatives and regressions. InMemoryExerciseCatalog backs
the interface with a plain list for callers that preload exercises.
"""

from typing import Protocol
from uuid import UUID

from fitplan.domains.training_plan.enums import Discipline, DifficultyLevel, InjuryType, SessionType
from fitplan.domains.training_plan.models import Exercise


class ExerciseCatalog(Protocol):
    """Read-only exercise source consumed by the workout composer."""

    def get_exercises_by_criteria(
        self,
        discipline: Discipline | None = None,
        difficulty: DifficultyLevel | None = None,
        session_type: SessionType | None = None,
    ) -> list[Exercise]: ...

    def get_safe_exercises(
        self,
        injury_types: list[InjuryType],
        discipline: Discipline | None = None,
        difficulty: DifficultyLevel | None = None,
    ) -> list[Exercise]: ...

    def get_exercise_by_id(self, exercise_id: UUID) -> Exercise | None: ...


class InMemoryExerciseCatalog:
    """List-backed catalog.

    Criteria lookup matches exercises whose session type equals the requested
    one or is unset (general-purpose exercises).
    """

    def __init__(self, exercises: list[Exercise] | None = None):
        self._exercises: list[Exercise] = list(exercises or [])

    def __len__(self) -> int:
        return len(self._exercises)

    def add(self, exercise: Exercise) -> None:
        self._exercises.append(exercise)

    def get_exercises_by_criteria(
        self,
        discipline: Discipline | None = None,
        difficulty: DifficultyLevel | None = None,
        session_type: SessionType | None = None,
    ) -> list[Exercise]:
        return [
            exercise
            for exercise in self._exercises
            if _matches(exercise, discipline, difficulty)
            and (session_type is None or exercise.session_type in {None, session_type})
        ]

    def get_safe_exercises(
        self,
        injury_types: list[InjuryType],
        discipline: Discipline | None = None,
        difficulty: DifficultyLevel | None = None,
    ) -> list[Exercise]:
        blocked = set(injury_types)
        return [
            exercise
            for exercise in self._exercises
            if _matches(exercise, discipline, difficulty) and not blocked.intersection(exercise.contraindications)
        ]

    def get_exercise_by_id(self, exercise_id: UUID) -> Exercise | None:
        return next((exercise for exercise in self._exercises if exercise.id == exercise_id), None)


def _matches(exercise: Exercise, discipline: Discipline | None, difficulty: DifficultyLevel | None) -> bool:
    if discipline is not None and exercise.primary_discipline != discipline:
        return False
    return difficulty is None or exercise.difficulty == difficulty
