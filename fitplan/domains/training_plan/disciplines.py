"""Discipline allocation from prioritized goals.

Goals map to disciplines through GOAL_DISCIPLINE; each active goal adds
(4 - priority) weight to its discipline. Weekly sessions are split
proportionally to those weights.
"""

from loguru import logger

from fitplan.domains.training_plan.enums import Discipline, GoalStatus
from fitplan.domains.training_plan.models import TrainingGoal
from fitplan.domains.training_plan.rules import GOAL_DISCIPLINE

PRIORITY_CEILING = 4


def discipline_priorities(goals: list[TrainingGoal]) -> dict[Discipline, int]:
    """Sum weighted priorities per discipline over active goals.

    Args:
        goals: Profile goals (inactive ones are ignored)

    Returns:
        Discipline → weight. Defaults to {HYBRID: 1} when no active goal exists.
    """
    priorities: dict[Discipline, int] = {}
    for goal in goals:
        if goal.status != GoalStatus.ACTIVE:
            continue
        discipline = GOAL_DISCIPLINE[goal.goal_type]
        # Goals ranked 4 or lower still count once
        weight = max(1, PRIORITY_CEILING - goal.priority)
        priorities[discipline] = priorities.get(discipline, 0) + weight

    if not priorities:
        return {Discipline.HYBRID: 1}
    return priorities


def allocate_disciplines(priorities: dict[Discipline, int], total_sessions: int) -> list[Discipline]:
    """Assign a discipline to every weekly session slot.

    Disciplines are visited by descending weight (ties keep insertion order).
    Each gets max(1, round(share * total_sessions)) slots while slots remain;
    any remainder goes to the top discipline.

    Args:
        priorities: Discipline weights (from discipline_priorities)
        total_sessions: Sessions per week

    Returns:
        List of length total_sessions
    """
    if total_sessions <= 0:
        return []
    if not priorities:
        priorities = {Discipline.HYBRID: 1}

    ranked = sorted(priorities.items(), key=lambda item: item[1], reverse=True)
    total_weight = sum(weight for _, weight in ranked)

    allocation: list[Discipline] = []
    for discipline, weight in ranked:
        remaining = total_sessions - len(allocation)
        if remaining <= 0:
            break
        share = weight / total_weight
        count = max(1, round(share * total_sessions))
        allocation.extend([discipline] * min(count, remaining))

    top_discipline = ranked[0][0]
    while len(allocation) < total_sessions:
        allocation.append(top_discipline)

    logger.debug(
        "disciplines_allocated",
        total_sessions=total_sessions,
        allocation=",".join(d.value for d in allocation),
    )
    return allocation
