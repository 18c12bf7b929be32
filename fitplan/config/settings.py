from loguru import logger
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    log_level: str = Field(default="INFO", validation_alias="FITPLAN_LOG_LEVEL")
    algorithm_version: str = Field(default="1.0.0", validation_alias="FITPLAN_ALGORITHM_VERSION")

    # Plan generation
    min_plan_weeks: int = Field(default=4, validation_alias="FITPLAN_MIN_PLAN_WEEKS")
    max_plan_weeks: int = Field(default=52, validation_alias="FITPLAN_MAX_PLAN_WEEKS")
    default_plan_weeks: int = Field(default=12, validation_alias="FITPLAN_DEFAULT_PLAN_WEEKS")
    progressive_overload_rate: float = Field(
        default=0.10,  # 10% per week
        validation_alias="FITPLAN_PROGRESSIVE_OVERLOAD_RATE",
    )
    deload_frequency: int = Field(default=4, validation_alias="FITPLAN_DELOAD_FREQUENCY")
    volume_regression_tolerance: float = Field(
        default=0.20,
        validation_alias="FITPLAN_VOLUME_REGRESSION_TOLERANCE",
    )

    # Plan adaptation
    adaptation_cooldown_days: int = Field(default=7, validation_alias="FITPLAN_ADAPTATION_COOLDOWN_DAYS")
    min_schedule_days: int = Field(default=2, validation_alias="FITPLAN_MIN_SCHEDULE_DAYS")
    timeline_floor_weeks: int = Field(default=4, validation_alias="FITPLAN_TIMELINE_FLOOR_WEEKS")
    reschedule_lookahead_days: int = Field(default=14, validation_alias="FITPLAN_RESCHEDULE_LOOKAHEAD_DAYS")
    long_break_missed_threshold: int = Field(
        default=7,
        validation_alias="FITPLAN_LONG_BREAK_MISSED_THRESHOLD",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_plan_bounds(self) -> "Settings":
        if self.min_plan_weeks < 1:
            raise ValueError("FITPLAN_MIN_PLAN_WEEKS must be at least 1")
        if self.min_plan_weeks > self.max_plan_weeks:
            raise ValueError(
                f"FITPLAN_MIN_PLAN_WEEKS ({self.min_plan_weeks}) must not exceed "
                f"FITPLAN_MAX_PLAN_WEEKS ({self.max_plan_weeks})"
            )
        if not self.min_plan_weeks <= self.default_plan_weeks <= self.max_plan_weeks:
            raise ValueError(
                f"FITPLAN_DEFAULT_PLAN_WEEKS ({self.default_plan_weeks}) must be within "
                f"[{self.min_plan_weeks}, {self.max_plan_weeks}]"
            )
        return self


settings = Settings()
logger.debug(
    "Engine settings loaded",
    algorithm_version=settings.algorithm_version,
    cooldown_days=settings.adaptation_cooldown_days,
)
