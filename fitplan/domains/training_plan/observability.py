"""Run-scoped logging for plan generation and adaptation.

A generation or adaptation call binds its correlation fields (user, plan,
trigger) once with `run_logger` and hands the bound logger to each stage.
Every line emitted inside the run then carries those fields in `extra`, so a
single plan's history can be filtered out of the log stream.

Events:
- planner_stage: status start/success/fail for one PlannerStage
- planner_run: one summary line per run with outcome and duration
"""

import time
from collections.abc import Iterator
from contextlib import contextmanager
from enum import StrEnum
from typing import TYPE_CHECKING
from uuid import UUID

from loguru import logger

from fitplan.domains.training_plan.enums import AdaptationTrigger
from fitplan.domains.training_plan.errors import PlannerError

if TYPE_CHECKING:
    from loguru import Logger


class PlannerStage(StrEnum):
    """Pipeline stages that report start/success/fail."""

    PROFILE = "profile_validate"
    PERIODIZATION = "periodization"
    WEEK = "week_generate"
    COHERENCE = "coherence_check"
    ADAPTATION = "adaptation"


class StageStatus(StrEnum):
    START = "start"
    SUCCESS = "success"
    FAIL = "fail"


def run_logger(
    operation: str,
    *,
    user_id: UUID | None = None,
    plan_id: UUID | None = None,
    trigger: AdaptationTrigger | None = None,
) -> "Logger":
    """Bind the correlation fields of one planner run.

    Unset fields are left out rather than bound as None.

    Args:
        operation: "generate" or "adapt"
        user_id: Athlete the run is for
        plan_id: Plan being built or adapted
        trigger: Adaptation trigger

    Returns:
        Bound loguru logger
    """
    context: dict[str, str] = {"operation": operation}
    if user_id is not None:
        context["user_id"] = str(user_id)
    if plan_id is not None:
        context["plan_id"] = str(plan_id)
    if trigger is not None:
        context["trigger"] = trigger.value
    return logger.bind(**context)


@contextmanager
def planner_stage(run_log: "Logger", stage: PlannerStage, **fields: str | int | bool) -> Iterator[None]:
    """Report one stage of a run.

    Emits `start` on entry and `success` with the stage duration on exit.
    A PlannerError escaping the block is reported as `fail` and re-raised.
    """
    stage_log = run_log.bind(stage=stage.value)
    stage_log.info("planner_stage", status=StageStatus.START.value, **fields)
    started = time.monotonic()
    try:
        yield
    except PlannerError as e:
        stage_log.warning("planner_stage", status=StageStatus.FAIL.value, error=str(e), **fields)
        raise
    stage_log.info(
        "planner_stage",
        status=StageStatus.SUCCESS.value,
        duration_seconds=round(time.monotonic() - started, 4),
        **fields,
    )


@contextmanager
def planner_run(run_log: "Logger") -> Iterator[None]:
    """Emit one `planner_run` summary line with outcome and total duration."""
    started = time.monotonic()
    outcome = "fail"
    try:
        yield
        outcome = "success"
    finally:
        run_log.info("planner_run", outcome=outcome, duration_seconds=round(time.monotonic() - started, 4))
