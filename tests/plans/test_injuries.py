"""Tests for injury lifecycle hooks and contraindications.

Tests verify that:
- Reporting an injury appends it to the profile and adapts the plan
- Status changes to improving/resolved re-run the injury adaptation
- A failed adaptation never rolls back the injury change
- Restriction tags and restricted movement patterns rule exercises out
- Each contraindicated exercise is reported once with its severity
- Substitutes come from alternatives, then regressions, then shared muscle groups
- No substitute is returned when nothing safe exists
"""

from uuid import uuid4

import pytest

from fitplan.domains.training_plan.catalog import InMemoryExerciseCatalog
from fitplan.domains.training_plan.contraindications import (
    contraindicated_exercises,
    find_substitute_exercise,
    is_contraindicated,
    restricted_patterns,
)
from fitplan.domains.training_plan.enums import (
    AdaptationTrigger,
    ContraindicationSeverity,
    Discipline,
    DifficultyLevel,
    InjuryStatus,
    InjuryType,
    MovementPattern,
    PlanStatus,
)
from fitplan.domains.training_plan.errors import PlanNotFoundError
from fitplan.domains.training_plan.models import Exercise, InjuryLimitation, UserProfile
from fitplan.plans.adaptation.engine import INJURY_NOTE
from fitplan.plans.injuries import mark_injury_resolved, report_injury, update_injury_status


def test_report_injury_adapts_active_plan(race_profile, plan, now):
    injury, outcome = report_injury(
        race_profile, plan, "knee", InjuryType.ACUTE, ["no jumping"], now=now
    )

    assert race_profile.injuries == [injury]
    assert injury.status == InjuryStatus.ACTIVE
    assert injury.reported_at == now
    assert injury.movement_restrictions == ["no jumping"]

    assert outcome is not None
    assert outcome.result.success is True
    assert outcome.adaptation.trigger == AdaptationTrigger.INJURY
    assert all(INJURY_NOTE in w.description for w in plan.adaptable_workouts(now.date()))


def test_report_injury_without_plan_keeps_injury(race_profile, now):
    """Test that a missing plan does not prevent the injury from being recorded."""
    injury, outcome = report_injury(race_profile, None, "ankle", InjuryType.CHRONIC, now=now)
    assert outcome is None
    assert race_profile.injuries == [injury]
    assert race_profile.limiting_injury_types() == [InjuryType.CHRONIC]


def test_report_injury_with_abandoned_plan(race_profile, plan, now):
    plan.status = PlanStatus.ABANDONED
    injury, outcome = report_injury(race_profile, plan, "ankle", InjuryType.ACUTE, now=now)
    assert outcome is None
    assert injury in race_profile.injuries
    assert plan.adaptations == []


def test_status_change_to_improving_readapts(race_profile, plan, now):
    injury, _ = report_injury(race_profile, plan, "knee", InjuryType.ACUTE, now=now)
    updated, outcome = update_injury_status(race_profile, plan, injury.id, InjuryStatus.IMPROVING, now=now)

    assert updated.status == InjuryStatus.IMPROVING
    assert updated.is_limiting is True
    assert outcome is not None
    assert len(plan.adaptations) == 2


def test_unchanged_status_does_not_readapt(race_profile, plan, now):
    injury, _ = report_injury(race_profile, plan, "knee", InjuryType.ACUTE, now=now)
    _, outcome = update_injury_status(race_profile, plan, injury.id, InjuryStatus.ACTIVE, now=now)
    assert outcome is None
    assert len(plan.adaptations) == 1


def test_resolved_injury_is_not_limiting(race_profile, plan, now):
    injury, _ = report_injury(race_profile, plan, "shoulder", InjuryType.CHRONIC, now=now)
    resolved, outcome = mark_injury_resolved(race_profile, plan, injury.id, now=now)

    assert resolved.status == InjuryStatus.RESOLVED
    assert resolved.is_limiting is False
    assert race_profile.limiting_injury_types() == []
    assert outcome is not None


def test_unknown_injury_rejected(race_profile, plan, now):
    with pytest.raises(PlanNotFoundError, match="not found"):
        update_injury_status(race_profile, plan, uuid4(), InjuryStatus.RESOLVED, now=now)


# -----------------------------
# Contraindications
# -----------------------------
def _strength(name: str, difficulty: DifficultyLevel, patterns: list[MovementPattern], muscles: list[str]) -> Exercise:
    return Exercise(
        name=name,
        primary_discipline=Discipline.STRENGTH,
        difficulty=difficulty,
        movement_patterns=patterns,
        muscle_groups=muscles,
    )


@pytest.fixture
def squat_family() -> dict[str, Exercise]:
    """Back squat with an unsafe and a safe alternative, one regression and
    two same-muscle exercises listed ahead of the closest-difficulty one."""
    return {
        "back_squat": _strength(
            "Back Squat", DifficultyLevel.INTERMEDIATE, [MovementPattern.SQUAT], ["quadriceps", "glutes"]
        ),
        "front_squat": _strength("Front Squat", DifficultyLevel.INTERMEDIATE, [MovementPattern.SQUAT], ["quadriceps"]),
        "glute_bridge": _strength("Glute Bridge", DifficultyLevel.BEGINNER, [MovementPattern.HINGE], ["glutes"]),
        "hip_thrust": _strength("Hip Thrust", DifficultyLevel.ADVANCED, [MovementPattern.HINGE], ["Glutes"]),
        "romanian_deadlift": _strength(
            "Romanian Deadlift", DifficultyLevel.INTERMEDIATE, [MovementPattern.HINGE], ["hamstrings", "glutes"]
        ),
        "step_up": Exercise(
            name="Step Up",
            primary_discipline=Discipline.HYBRID,
            difficulty=DifficultyLevel.INTERMEDIATE,
            movement_patterns=[MovementPattern.CARRY],
            muscle_groups=["glutes"],
        ),
    }


@pytest.fixture
def squat_catalog(squat_family) -> InMemoryExerciseCatalog:
    return InMemoryExerciseCatalog(list(squat_family.values()))


@pytest.fixture
def knee_profile() -> UserProfile:
    """Acute knee injury restricted from squatting."""
    return UserProfile(
        injuries=[
            InjuryLimitation(body_part="Left Knee", injury_type=InjuryType.ACUTE, movement_restrictions=["No squats"])
        ]
    )


def test_restriction_tag_rules_out_matching_exercise():
    """Test that an exercise tagged with one of the injury's restrictions is excluded."""
    box_jump = Exercise(
        name="Box Jump",
        primary_discipline=Discipline.HYBRID,
        difficulty=DifficultyLevel.BEGINNER,
        movement_patterns=[MovementPattern.SQUAT],
        restriction_tags=["no jumping"],
    )
    bench = Exercise(
        name="Bench Press",
        primary_discipline=Discipline.STRENGTH,
        difficulty=DifficultyLevel.BEGINNER,
        movement_patterns=[MovementPattern.PUSH],
        restriction_tags=["no pressing"],
    )
    profile = UserProfile(
        injuries=[InjuryLimitation(body_part="knee", injury_type=InjuryType.ACUTE, movement_restrictions=["No Jumping"])]
    )

    assert is_contraindicated(box_jump, profile.injuries) is True
    assert is_contraindicated(bench, profile.injuries) is False

    found = contraindicated_exercises(profile, InMemoryExerciseCatalog([box_jump, bench]))
    assert [c.exercise_name for c in found] == ["Box Jump"]
    assert found[0].reason == "Contraindicated due to knee injury"
    assert found[0].affected_body_part == "knee"
    assert found[0].severity == ContraindicationSeverity.MODERATE


def test_contraindicated_body_part_matches_injury():
    pull_up = Exercise(
        name="Pull Up",
        primary_discipline=Discipline.STRENGTH,
        difficulty=DifficultyLevel.BEGINNER,
        movement_patterns=[MovementPattern.PULL],
        contraindicated_body_parts=["Shoulder impingement"],
    )
    chronic = [InjuryLimitation(body_part="shoulder", injury_type=InjuryType.CHRONIC)]
    resolved = [
        InjuryLimitation(body_part="shoulder", injury_type=InjuryType.CHRONIC, status=InjuryStatus.RESOLVED)
    ]

    assert is_contraindicated(pull_up, chronic) is True
    found = contraindicated_exercises(UserProfile(injuries=chronic), InMemoryExerciseCatalog([pull_up]))
    assert found[0].severity == ContraindicationSeverity.RELATIVE
    assert contraindicated_exercises(UserProfile(injuries=resolved), InMemoryExerciseCatalog([pull_up])) == []

    severe = [InjuryLimitation(body_part="shoulder", injury_type=InjuryType.ACUTE, movement_restrictions=["Severe pain"])]
    found = contraindicated_exercises(UserProfile(injuries=severe), InMemoryExerciseCatalog([pull_up]))
    assert found[0].severity == ContraindicationSeverity.ABSOLUTE


def test_restricted_patterns_follow_body_part_rules():
    knee = InjuryLimitation(body_part="knee", injury_type=InjuryType.ACUTE, movement_restrictions=["no lunges", "low impact"])
    back = InjuryLimitation(body_part="Lower back", injury_type=InjuryType.CHRONIC, movement_restrictions=["no heavy lifting"])
    no_restrictions = InjuryLimitation(body_part="ankle", injury_type=InjuryType.ACUTE)

    assert restricted_patterns(knee) == [MovementPattern.SQUAT, MovementPattern.CARDIO]
    assert restricted_patterns(back) == [MovementPattern.HINGE]
    assert restricted_patterns(no_restrictions) == []


def test_contraindicated_exercises_reported_once(squat_catalog):
    """Test that an exercise ruled out by two injuries is listed once, for the first."""
    profile = UserProfile(
        injuries=[
            InjuryLimitation(body_part="knee", injury_type=InjuryType.ACUTE, movement_restrictions=["no squat"]),
            InjuryLimitation(
                body_part="Knee and lower back",
                injury_type=InjuryType.ACUTE,
                movement_restrictions=["severe", "no squat", "no hinge"],
            ),
        ]
    )

    found = contraindicated_exercises(profile, squat_catalog)

    names = [c.exercise_name for c in found]
    assert names == ["Back Squat", "Front Squat", "Glute Bridge", "Hip Thrust", "Romanian Deadlift"]
    by_name = {c.exercise_name: c for c in found}
    assert by_name["Back Squat"].affected_body_part == "knee"
    assert by_name["Back Squat"].reason == "Restricted movement pattern for knee"
    assert by_name["Glute Bridge"].affected_body_part == "Knee and lower back"
    assert all(c.severity == ContraindicationSeverity.MODERATE for c in found)


def test_substitute_prefers_first_safe_alternative(squat_family, squat_catalog, knee_profile):
    back_squat = squat_family["back_squat"]
    back_squat.alternative_ids = [squat_family["front_squat"].id, squat_family["romanian_deadlift"].id]
    back_squat.regression_ids = [squat_family["glute_bridge"].id]

    substitute = find_substitute_exercise(back_squat, knee_profile, squat_catalog)

    assert substitute is not None
    assert substitute.name == "Romanian Deadlift"


def test_substitute_falls_back_to_regression(squat_family, squat_catalog, knee_profile):
    back_squat = squat_family["back_squat"]
    back_squat.alternative_ids = [squat_family["front_squat"].id, uuid4()]
    back_squat.regression_ids = [squat_family["glute_bridge"].id]

    substitute = find_substitute_exercise(back_squat, knee_profile, squat_catalog)

    assert substitute is not None
    assert substitute.name == "Glute Bridge"


def test_substitute_falls_back_to_closest_difficulty_shared_muscle(squat_family, squat_catalog, knee_profile):
    """Test that the same-discipline fallback picks the closest difficulty, not the first listed."""
    substitute = find_substitute_exercise(squat_family["back_squat"], knee_profile, squat_catalog)

    assert substitute is not None
    assert substitute.name == "Romanian Deadlift"


def test_no_substitute_when_nothing_is_safe(squat_family, squat_catalog):
    profile = UserProfile(
        injuries=[
            InjuryLimitation(body_part="knee", injury_type=InjuryType.ACUTE, movement_restrictions=["no squats"]),
            InjuryLimitation(body_part="spine", injury_type=InjuryType.CHRONIC, movement_restrictions=["no hinge"]),
        ]
    )
    back_squat = squat_family["back_squat"]
    back_squat.regression_ids = [squat_family["glute_bridge"].id]

    assert find_substitute_exercise(back_squat, profile, squat_catalog) is None


def test_no_substitute_without_limiting_injury(squat_family, squat_catalog):
    back_squat = squat_family["back_squat"]
    back_squat.alternative_ids = [squat_family["romanian_deadlift"].id]

    assert find_substitute_exercise(back_squat, UserProfile(), squat_catalog) is None
