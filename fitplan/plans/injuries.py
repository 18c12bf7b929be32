"""Injury lifecycle hooks.

Reporting an injury and moving it to improving/resolved both re-run the
injury adaptation on the active plan. That adaptation is a dependent side
effect: if it fails the injury change still stands.
"""

from datetime import datetime
from uuid import UUID

from loguru import logger

from fitplan.domains.training_plan.enums import InjuryStatus, InjuryType
from fitplan.domains.training_plan.errors import PlanNotFoundError, PlannerError
from fitplan.domains.training_plan.models import InjuryLimitation, TrainingPlan, UserProfile, as_utc
from fitplan.plans.adaptation.engine import adapt_for_injury
from fitplan.plans.adaptation.types import AdaptationOutcome

_READAPT_STATUSES = {InjuryStatus.IMPROVING, InjuryStatus.RESOLVED}


def report_injury(
    profile: UserProfile,
    plan: TrainingPlan | None,
    body_part: str,
    injury_type: InjuryType,
    movement_restrictions: list[str] | None = None,
    *,
    now: datetime | None = None,
) -> tuple[InjuryLimitation, AdaptationOutcome | None]:
    """Record a new active injury and adapt the active plan.

    Args:
        profile: Athlete profile (the injury is appended to it)
        plan: Active plan, or None
        body_part: Injured body part
        injury_type: Acute or chronic
        movement_restrictions: Free-text restriction tags
        now: Report time (defaults to current UTC time)

    Returns:
        (injury, adaptation outcome or None if the adaptation failed)
    """
    now = as_utc(now)
    injury = InjuryLimitation(
        body_part=body_part,
        injury_type=injury_type,
        movement_restrictions=list(movement_restrictions or []),
        status=InjuryStatus.ACTIVE,
        reported_at=now,
    )
    profile.injuries.append(injury)
    logger.info(
        "Injury reported",
        user_id=str(profile.user_id),
        injury_id=str(injury.id),
        body_part=body_part,
        injury_type=injury_type.value,
    )

    return injury, _readapt(plan, injury.id, now)


def update_injury_status(
    profile: UserProfile,
    plan: TrainingPlan | None,
    injury_id: UUID,
    new_status: InjuryStatus,
    *,
    now: datetime | None = None,
) -> tuple[InjuryLimitation, AdaptationOutcome | None]:
    """Move an injury through its lifecycle.

    A change to improving or resolved re-runs the injury adaptation.

    Args:
        profile: Athlete profile owning the injury
        plan: Active plan, or None
        injury_id: Injury to update
        new_status: Target status
        now: Evaluation time (defaults to current UTC time)

    Returns:
        (updated injury, adaptation outcome or None when not re-adapted)

    Raises:
        PlanNotFoundError: If the profile has no injury with that ID
    """
    now = as_utc(now)
    injury = next((i for i in profile.injuries if i.id == injury_id), None)
    if injury is None:
        raise PlanNotFoundError(f"Injury {injury_id} not found")

    old_status = injury.status
    injury.status = new_status
    logger.info(
        "Injury status updated",
        injury_id=str(injury_id),
        old_status=old_status.value,
        new_status=new_status.value,
    )

    if old_status == new_status or new_status not in _READAPT_STATUSES:
        return injury, None
    return injury, _readapt(plan, injury_id, now)


def mark_injury_resolved(
    profile: UserProfile,
    plan: TrainingPlan | None,
    injury_id: UUID,
    *,
    now: datetime | None = None,
) -> tuple[InjuryLimitation, AdaptationOutcome | None]:
    return update_injury_status(profile, plan, injury_id, InjuryStatus.RESOLVED, now=now)


def _readapt(plan: TrainingPlan | None, injury_id: UUID, now: datetime) -> AdaptationOutcome | None:
    try:
        return adapt_for_injury(plan, injury_id, now=now)
    except PlannerError as e:
        logger.warning(
            "Injury adaptation failed, injury change kept",
            injury_id=str(injury_id),
            error=str(e),
        )
        return None
