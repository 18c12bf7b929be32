"""Domain-specific errors for plan generation and adaptation.

The taxonomy separates conditions the caller must surface differently:
- PlanValidationError: request invalid or insufficient (HTTP 400 territory)
- PlanNotFoundError: no profile / no active plan (HTTP 404 territory)
- AdaptationRateLimitError: cooldown not elapsed, carries retry-after data
- PlannerInvariantError: generated structure violates an invariant

"Nothing to adapt" is not an error; see AdaptationResult.success.
"""

from datetime import datetime


class PlannerError(Exception):
    """Base exception for all planning errors."""

    pass


class PlanValidationError(PlannerError):
    """Raised when input is invalid or insufficient (e.g., no goals, < 2 training days)."""

    pass


class PlanNotFoundError(PlannerError):
    """Raised when a required aggregate is missing (e.g., no active plan, unknown workout)."""

    pass


class AdaptationRateLimitError(PlannerError):
    """Raised when an adaptation is requested before the cooldown has elapsed.

    Attributes:
        days_remaining: Whole days until another adaptation is allowed (>= 1)
        last_applied_at: Timestamp of the adaptation that started the cooldown
    """

    def __init__(self, days_remaining: int, last_applied_at: datetime, cooldown_days: int):
        self.days_remaining = days_remaining
        self.last_applied_at = last_applied_at
        self.cooldown_days = cooldown_days
        super().__init__(
            f"Adaptation frequency limit exceeded. Last adaptation applied at "
            f"{last_applied_at.isoformat()}. Minimum {cooldown_days} days required, "
            f"retry in {days_remaining} day(s)."
        )


class ScheduleResolutionError(PlannerError):
    """Raised when sessions cannot be mapped onto available days."""

    pass


class PlannerInvariantError(PlannerError):
    """Raised when a planning invariant is violated between stages."""

    pass
