"""Loguru sinks for the fitplan engine.

Planner runs bind `operation`, `plan_id` and friends (see
`fitplan.domains.training_plan.observability.run_logger`). The console
format puts the run prefix in front of the message so lines from one plan
read together; the remaining extra fields are appended as key=value pairs.
"""

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from fitplan.config.settings import settings

if TYPE_CHECKING:
    from loguru import Record

RUN_FIELDS = ("operation", "plan_id", "trigger", "week", "stage")

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - {extra[run]}<level>{message}</level>{extra[fields]}"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} - {extra[run]}{message}{extra[fields]}"


def _render_run_context(record: "Record") -> None:
    extra = record["extra"]
    run = [f"{key}={extra[key]}" for key in RUN_FIELDS if key in extra]
    rest = [f"{key}={value}" for key, value in extra.items() if key not in RUN_FIELDS and key not in ("run", "fields")]
    extra["run"] = f"[{' '.join(run)}] " if run else ""
    extra["fields"] = f" | {' '.join(rest)}" if rest else ""


def setup_logger(
    level: str | None = None,
    log_file: str | None = None,
    *,
    serialize: bool = False,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """Replace loguru's default sink with the engine's sinks.

    Args:
        level: Minimum level (defaults to FITPLAN_LOG_LEVEL)
        log_file: Optional rotating file sink, zip-compressed on rotation
        serialize: Emit one JSON object per line on stderr instead of text
        rotation: File rotation size or interval
        retention: How long rotated files are kept
    """
    level = level or settings.log_level
    logger.remove()
    logger.configure(patcher=_render_run_context)

    if serialize:
        logger.add(sys.stderr, level=level, serialize=True)
    else:
        logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=level,
            rotation=rotation,
            retention=retention,
            compression="zip",
            backtrace=True,
            diagnose=True,
        )

    logger.debug("Logger configured", level=level, serialize=serialize, log_file=log_file)
