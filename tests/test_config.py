"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from clinic_insights.config import Settings
from clinic_insights.schemas.metrics import SatisfactionPolicy


def test_satisfaction_policy_default():
    assert Settings().metrics_satisfaction_policy == SatisfactionPolicy.ZERO_FILL


def test_satisfaction_policy_from_env(monkeypatch):
    monkeypatch.setenv("METRICS_SATISFACTION_POLICY", "scored_only")
    assert Settings().metrics_satisfaction_policy == SatisfactionPolicy.SCORED_ONLY


def test_invalid_satisfaction_policy_rejected_at_startup(monkeypatch):
    monkeypatch.setenv("METRICS_SATISFACTION_POLICY", "bogus")
    with pytest.raises(ValidationError):
        Settings()


def test_test_environment_detected():
    assert Settings().is_test
