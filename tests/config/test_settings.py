"""Tests for engine settings."""

import pytest
from pydantic import ValidationError

from fitplan.config.settings import Settings


def test_defaults():
    settings = Settings()
    assert settings.adaptation_cooldown_days == 7
    assert settings.deload_frequency == 4
    assert (settings.min_plan_weeks, settings.default_plan_weeks, settings.max_plan_weeks) == (4, 12, 52)


def test_env_override(monkeypatch):
    monkeypatch.setenv("FITPLAN_ADAPTATION_COOLDOWN_DAYS", "3")
    assert Settings().adaptation_cooldown_days == 3


def test_default_weeks_must_be_within_bounds(monkeypatch):
    monkeypatch.setenv("FITPLAN_DEFAULT_PLAN_WEEKS", "60")
    with pytest.raises(ValidationError, match="FITPLAN_DEFAULT_PLAN_WEEKS"):
        Settings()
