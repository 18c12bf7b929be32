"""Adaptation request and result types.

Requests describe what the caller wants changed. Results describe what the
engine did. The audit record itself (PlanAdaptation) lives with the plan
models since it is part of the plan aggregate.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from fitplan.domains.training_plan.enums import AdaptationTrigger, AdaptationType, IntensityDirection
from fitplan.domains.training_plan.models import PlanAdaptation, Workout


class IntensityAdjustment(BaseModel):
    """Request to shift future workout intensity one step.

    Attributes:
        direction: HARDER or EASIER
        reason: Optional free-text reason from the athlete
    """

    model_config = ConfigDict(frozen=True)

    direction: IntensityDirection
    reason: str | None = None


class GoalTimelineChange(BaseModel):
    """Request to move the plan end date.

    Attributes:
        new_end_date: Requested plan end date
        reason: Optional free-text reason
    """

    model_config = ConfigDict(frozen=True)

    new_end_date: date
    reason: str | None = None


class AdaptationResult(BaseModel):
    """Structured outcome returned to the caller.

    A no-op (nothing eligible) has success=False and workouts_affected=0;
    in that case adaptation_id is None and no record was appended.

    Attributes:
        adaptation_id: ID of the appended PlanAdaptation, None for no-ops
        plan_id: Adapted plan
        trigger: Event that caused the adaptation
        adaptation_type: Kind of change applied
        description: Human-readable summary (or no-op reason)
        workouts_affected: Number of workouts mutated
        applied_at: When the adaptation was evaluated
        success: False only for no-ops
        warnings: Advisory warnings, None when there are none
    """

    adaptation_id: UUID | None = None
    plan_id: UUID
    trigger: AdaptationTrigger
    adaptation_type: AdaptationType
    description: str
    workouts_affected: int = 0
    applied_at: datetime
    success: bool
    warnings: list[str] | None = None


@dataclass
class AdaptationOutcome:
    """Everything the caller needs to persist after an adaptation."""

    result: AdaptationResult
    adaptation: PlanAdaptation | None = None
    modified_workouts: list[Workout] = field(default_factory=list)
