"""Tests for the metrics aggregator."""

import math
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from clinic_insights.schemas.metrics import DateRange, SatisfactionPolicy
from clinic_insights.services.metrics_service import MetricsService, compute_metrics

BASE_TIME = datetime(2026, 10, 19, 9, 15, tzinfo=timezone.utc)


def _event(
    question: str = "What are your operating hours?",
    response_time: float = 1.0,
    satisfaction_score: float | None = None,
    language: str = "English",
    resolved: bool = False,
    booking_conversion: bool = False,
    created_at: datetime = BASE_TIME,
) -> SimpleNamespace:
    """Helper to build an event-like object with defaults."""
    return SimpleNamespace(
        question=question,
        response_time=response_time,
        satisfaction_score=satisfaction_score,
        language=language,
        resolved=resolved,
        booking_conversion=booking_conversion,
        created_at=created_at,
    )


@pytest.fixture
def demo_clinic_events():
    return [
        _event(response_time=1.2, satisfaction_score=4.5, booking_conversion=False),
        _event(response_time=1.8, satisfaction_score=4.0, booking_conversion=True),
        _event(response_time=2.1, satisfaction_score=None, booking_conversion=False),
    ]


def test_empty_set_is_zeroed():
    metrics = compute_metrics([])
    assert metrics.total_conversations == 0
    assert metrics.avg_response_time == 0
    assert metrics.satisfaction_score == 0
    assert metrics.booking_conversion_rate == 0
    assert metrics.language_distribution == {}
    assert metrics.top_questions == []
    assert metrics.hourly_activity == []


def test_empty_set_legacy_nan_conversion_rate():
    metrics = compute_metrics([], nan_on_empty=True)
    assert math.isnan(metrics.booking_conversion_rate)


def test_demo_clinic_scenario(demo_clinic_events):
    metrics = compute_metrics(demo_clinic_events)
    assert metrics.total_conversations == 3
    assert metrics.avg_response_time == pytest.approx(1.7)
    assert metrics.satisfaction_score == pytest.approx((4.5 + 4.0 + 0) / 3)
    assert metrics.booking_conversion_rate == pytest.approx(100 / 3)


def test_satisfaction_scored_only(demo_clinic_events):
    metrics = compute_metrics(
        demo_clinic_events, satisfaction_policy=SatisfactionPolicy.SCORED_ONLY
    )
    assert metrics.satisfaction_score == pytest.approx(4.25)


def test_satisfaction_scored_only_without_scores():
    metrics = compute_metrics(
        [_event(), _event()], satisfaction_policy=SatisfactionPolicy.SCORED_ONLY
    )
    assert metrics.satisfaction_score == 0


def test_booking_conversion_rate_bounds():
    all_converted = compute_metrics([_event(booking_conversion=True)] * 4)
    none_converted = compute_metrics([_event()] * 4)
    assert all_converted.booking_conversion_rate == 100
    assert none_converted.booking_conversion_rate == 0


def test_language_distribution_is_case_sensitive_and_sums_to_total():
    events = [
        _event(language="English"),
        _event(language="english"),
        _event(language="Malay"),
        _event(language="Malay"),
    ]
    metrics = compute_metrics(events)
    assert metrics.language_distribution == {"English": 1, "english": 1, "Malay": 2}
    assert sum(metrics.language_distribution.values()) == metrics.total_conversations


def test_identical_questions_grouped_with_resolved_rate():
    events = [
        _event(question="How do I book?", resolved=True),
        _event(question="How do I book?", resolved=False),
    ]
    metrics = compute_metrics(events)
    assert len(metrics.top_questions) == 1
    top = metrics.top_questions[0]
    assert top.question == "How do I book?"
    assert top.count == 2
    assert top.resolved_rate == 50


def test_top_questions_ranked_truncated_and_stable():
    events = [_event(question=f"q{i}") for i in range(7)]
    events += [_event(question="q5"), _event(question="q5"), _event(question="q6")]
    metrics = compute_metrics(events)
    questions = [(q.question, q.count) for q in metrics.top_questions]
    # Ties keep first-encounter order
    assert questions == [("q5", 3), ("q6", 2), ("q0", 1), ("q1", 1), ("q2", 1)]
    counts = [q.count for q in metrics.top_questions]
    assert counts == sorted(counts, reverse=True)
    assert all(0 <= q.resolved_rate <= 100 for q in metrics.top_questions)


def test_hourly_activity_sorted_by_hour_label():
    events = [
        _event(created_at=BASE_TIME.replace(hour=14)),
        _event(created_at=BASE_TIME.replace(hour=9)),
        _event(created_at=BASE_TIME.replace(hour=9, minute=59)),
        _event(created_at=BASE_TIME.replace(hour=0)),
    ]
    metrics = compute_metrics(events)
    assert [(h.hour, h.conversations) for h in metrics.hourly_activity] == [
        ("00:00", 1),
        ("09:00", 2),
        ("14:00", 1),
    ]


def test_hourly_activity_uses_explicit_timezone():
    events = [_event(created_at=datetime(2026, 1, 15, 23, 30, tzinfo=timezone.utc))]
    utc = compute_metrics(events)
    kuala_lumpur = compute_metrics(events, tz=timezone(timedelta(hours=8)))
    assert utc.hourly_activity[0].hour == "23:00"
    assert kuala_lumpur.hourly_activity[0].hour == "07:00"


def test_naive_and_string_timestamps_treated_as_utc():
    events = [
        _event(created_at=datetime(2026, 1, 15, 6, 0)),
        _event(created_at="2026-01-15T06:45:00Z"),
    ]
    metrics = compute_metrics(events)
    assert [(h.hour, h.conversations) for h in metrics.hourly_activity] == [
        ("06:00", 2)
    ]


def test_date_range_inclusive_on_both_bounds():
    inside_start = _event(response_time=1.0, created_at=BASE_TIME)
    inside_end = _event(response_time=3.0, created_at=BASE_TIME + timedelta(hours=2))
    outside = _event(response_time=100.0, created_at=BASE_TIME + timedelta(hours=3))
    date_range = DateRange(start=BASE_TIME, end=BASE_TIME + timedelta(hours=2))
    metrics = compute_metrics([inside_start, inside_end, outside], date_range=date_range)
    assert metrics.total_conversations == 2
    assert metrics.avg_response_time == pytest.approx(2.0)


def test_date_range_excluding_record_leaves_summary_unaffected():
    kept = _event(response_time=1.5, satisfaction_score=5, language="English")
    excluded = _event(
        question="Excluded?",
        response_time=9.0,
        satisfaction_score=1,
        language="Tamil",
        booking_conversion=True,
        created_at=BASE_TIME - timedelta(days=2),
    )
    date_range = DateRange(start=BASE_TIME - timedelta(hours=1))
    with_excluded = compute_metrics([kept, excluded], date_range=date_range)
    alone = compute_metrics([kept])
    assert with_excluded == alone


def test_service_options_are_kept():
    tz = timezone(timedelta(hours=-5))
    service = MetricsService(tz=tz, satisfaction_policy=SatisfactionPolicy.SCORED_ONLY)
    assert service.tz is tz
    assert service.satisfaction_policy == SatisfactionPolicy.SCORED_ONLY
    assert service.nan_on_empty is False
