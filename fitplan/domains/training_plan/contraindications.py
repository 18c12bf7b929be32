"""Injury contraindications and exercise substitution.

An exercise is unsafe for a limiting injury when either
- it is explicitly contraindicated: one of its contraindicated body parts
  names the injured body part, or one of its restriction tags is among the
  injury's movement restrictions, or
- one of its movement patterns is blocked for that body part by
  RESTRICTED_PATTERN_RULES (e.g. a knee injury restricted from "squat"
  blocks the Squat pattern).

Matching is case-insensitive. Only active and improving injuries count.
"""

from uuid import UUID

from loguru import logger

from fitplan.domains.training_plan.catalog import ExerciseCatalog
from fitplan.domains.training_plan.enums import ContraindicationSeverity, DifficultyLevel, InjuryType, MovementPattern
from fitplan.domains.training_plan.models import ContraindicatedExercise, Exercise, InjuryLimitation, UserProfile
from fitplan.domains.training_plan.rules import RESTRICTED_PATTERN_RULES, SEVERE_RESTRICTION_KEYWORD

DIFFICULTY_ORDER = list(DifficultyLevel)


def restricted_patterns(injury: InjuryLimitation) -> list[MovementPattern]:
    """Movement patterns blocked by an injury's body part and restrictions."""
    body_part = injury.body_part.lower()
    restrictions = [r.lower() for r in injury.movement_restrictions]
    patterns: list[MovementPattern] = []
    for body_keywords, restriction_keywords, pattern in RESTRICTED_PATTERN_RULES:
        if pattern in patterns or not any(k in body_part for k in body_keywords):
            continue
        if any(k in restriction for restriction in restrictions for k in restriction_keywords):
            patterns.append(pattern)
    return patterns


def contraindication_severity(injury: InjuryLimitation) -> ContraindicationSeverity:
    if any(SEVERE_RESTRICTION_KEYWORD in r.lower() for r in injury.movement_restrictions):
        return ContraindicationSeverity.ABSOLUTE
    if injury.injury_type == InjuryType.CHRONIC:
        return ContraindicationSeverity.RELATIVE
    return ContraindicationSeverity.MODERATE


def _explicitly_contraindicated(exercise: Exercise, injury: InjuryLimitation) -> bool:
    body_part = injury.body_part.lower()
    if any(body_part in part.lower() for part in exercise.contraindicated_body_parts):
        return True
    restrictions = {r.lower() for r in injury.movement_restrictions}
    return any(tag.lower() in restrictions for tag in exercise.restriction_tags)


def _pattern_restricted(exercise: Exercise, injury: InjuryLimitation) -> bool:
    blocked = restricted_patterns(injury)
    return any(pattern in blocked for pattern in exercise.movement_patterns)


def is_contraindicated(exercise: Exercise, injuries: list[InjuryLimitation]) -> bool:
    """Whether any of the given injuries rules the exercise out."""
    return any(_explicitly_contraindicated(exercise, i) or _pattern_restricted(exercise, i) for i in injuries)


def contraindicated_exercises(profile: UserProfile, catalog: ExerciseCatalog) -> list[ContraindicatedExercise]:
    """List catalog exercises ruled out by the athlete's limiting injuries.

    Explicit contraindications take the injury's severity; pattern-based
    ones are Moderate. Each exercise is reported once, for the first injury
    (in report order) that rules it out.

    Args:
        profile: Athlete profile
        catalog: Exercise source

    Returns:
        Contraindicated exercises in catalog order per injury
    """
    injuries = profile.limiting_injuries()
    if not injuries:
        return []

    exercises = catalog.get_exercises_by_criteria()
    found: dict[UUID, ContraindicatedExercise] = {}
    for injury in injuries:
        for exercise in exercises:
            if exercise.id in found:
                continue
            if _explicitly_contraindicated(exercise, injury):
                reason = f"Contraindicated due to {injury.body_part} injury"
                severity = contraindication_severity(injury)
            elif _pattern_restricted(exercise, injury):
                reason = f"Restricted movement pattern for {injury.body_part}"
                severity = ContraindicationSeverity.MODERATE
            else:
                continue
            found[exercise.id] = ContraindicatedExercise(
                exercise_id=exercise.id,
                exercise_name=exercise.name,
                reason=reason,
                affected_body_part=injury.body_part,
                severity=severity,
            )

    logger.info("Contraindicated exercises resolved", user_id=str(profile.user_id), count=len(found))
    return list(found.values())


def find_substitute_exercise(
    exercise: Exercise,
    profile: UserProfile,
    catalog: ExerciseCatalog,
) -> Exercise | None:
    """Find a safe replacement for an exercise.

    Order of preference:
    1. The exercise's alternatives, in listed order
    2. Its regressions, in listed order
    3. Same-discipline exercises sharing a muscle group, closest difficulty
       first (catalog order breaks ties)

    Candidates ruled out by a limiting injury are skipped.

    Returns:
        The substitute, or None when the athlete has no limiting injury or
        nothing safe is found
    """
    injuries = profile.limiting_injuries()
    if not injuries:
        logger.info("No limiting injuries, no substitute needed", exercise_id=str(exercise.id))
        return None

    def usable(candidate: Exercise | None) -> bool:
        return candidate is not None and candidate.id != exercise.id and not is_contraindicated(candidate, injuries)

    for linked_ids in (exercise.alternative_ids, exercise.regression_ids):
        for linked_id in linked_ids:
            candidate = catalog.get_exercise_by_id(linked_id)
            if usable(candidate):
                return candidate

    muscle_groups = {m.lower() for m in exercise.muscle_groups}
    similar = [
        candidate
        for candidate in catalog.get_exercises_by_criteria(discipline=exercise.primary_discipline)
        if muscle_groups.intersection(m.lower() for m in candidate.muscle_groups) and usable(candidate)
    ]
    if similar:
        rank = DIFFICULTY_ORDER.index(exercise.difficulty)
        return min(similar, key=lambda c: abs(DIFFICULTY_ORDER.index(c.difficulty) - rank))

    logger.warning("No suitable substitute found", exercise_id=str(exercise.id), exercise_name=exercise.name)
    return None
