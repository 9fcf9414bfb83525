"""
Aggregation of AI performance events into the dashboard summary.

Pure computation over an in-memory row set: no I/O, no shared state. Callers
load one tenant's rows and pass them in; the summary is rebuilt from scratch on
every call.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone, tzinfo
from typing import Any, Iterable, List, Optional

from clinic_insights.schemas.metrics import (
    TOP_QUESTIONS_LIMIT,
    DateRange,
    HourlyActivity,
    PerformanceMetrics,
    SatisfactionPolicy,
    TopQuestion,
)


def _as_aware(value: datetime) -> datetime:
    """Naive timestamps are stored as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _created_at(record: Any) -> datetime:
    value = record.created_at
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return _as_aware(value)


def _percentage(part: int, whole: int) -> float:
    return part / whole * 100


class MetricsService:
    """Computes PerformanceMetrics from a tenant's events."""

    def __init__(
        self,
        tz: tzinfo = timezone.utc,
        satisfaction_policy: SatisfactionPolicy = SatisfactionPolicy.ZERO_FILL,
        nan_on_empty: bool = False,
    ) -> None:
        self.tz = tz
        self.satisfaction_policy = satisfaction_policy
        # Legacy dashboards divided by zero and showed NaN for an empty tenant
        self.nan_on_empty = nan_on_empty

    def compute(
        self,
        records: Iterable[Any],
        date_range: Optional[DateRange] = None,
    ) -> PerformanceMetrics:
        """
        Summarize records, optionally narrowed to date_range first.

        Args:
            records: events for a single tenant (ORM rows or any object with the
                event attributes).
            date_range: inclusive created_at bounds.

        Returns:
            PerformanceMetrics: zeroed when no record remains after filtering.
        """
        rows = self.filter_by_date_range(records, date_range)
        total = len(rows)

        return PerformanceMetrics(
            total_conversations=total,
            avg_response_time=self._avg_response_time(rows),
            satisfaction_score=self._satisfaction_score(rows),
            booking_conversion_rate=self._booking_conversion_rate(rows),
            language_distribution=self._language_distribution(rows),
            top_questions=self._top_questions(rows),
            hourly_activity=self._hourly_activity(rows),
        )

    def filter_by_date_range(
        self, records: Iterable[Any], date_range: Optional[DateRange]
    ) -> List[Any]:
        """Keep records whose created_at lies within the range, both ends inclusive."""
        rows = list(records)
        if date_range is None:
            return rows
        start = _as_aware(date_range.start) if date_range.start else None
        end = _as_aware(date_range.end) if date_range.end else None
        kept = []
        for row in rows:
            created_at = _created_at(row)
            if start is not None and created_at < start:
                continue
            if end is not None and created_at > end:
                continue
            kept.append(row)
        return kept

    def _avg_response_time(self, rows: List[Any]) -> float:
        if not rows:
            return 0.0
        return sum(row.response_time for row in rows) / len(rows)

    def _satisfaction_score(self, rows: List[Any]) -> float:
        if self.satisfaction_policy == SatisfactionPolicy.SCORED_ONLY:
            scored = [
                row.satisfaction_score
                for row in rows
                if row.satisfaction_score is not None
            ]
            return sum(scored) / len(scored) if scored else 0.0
        if not rows:
            return 0.0
        return sum(row.satisfaction_score or 0 for row in rows) / len(rows)

    def _booking_conversion_rate(self, rows: List[Any]) -> float:
        if not rows:
            return float("nan") if self.nan_on_empty else 0.0
        converted = sum(1 for row in rows if row.booking_conversion)
        return _percentage(converted, len(rows))

    def _language_distribution(self, rows: List[Any]) -> dict[str, int]:
        return dict(Counter(row.language for row in rows))

    def _top_questions(self, rows: List[Any]) -> List[TopQuestion]:
        counts: Counter[str] = Counter()
        resolved: Counter[str] = Counter()
        for row in rows:
            counts[row.question] += 1
            if row.resolved:
                resolved[row.question] += 1
        # Counter keeps first-encounter order and sorted() is stable, so ties
        # keep the order questions were first seen.
        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        return [
            TopQuestion(
                question=question,
                count=count,
                resolved_rate=_percentage(resolved[question], count),
            )
            for question, count in ranked[:TOP_QUESTIONS_LIMIT]
        ]

    def _hourly_activity(self, rows: List[Any]) -> List[HourlyActivity]:
        buckets: Counter[str] = Counter(
            f"{_created_at(row).astimezone(self.tz).hour:02d}:00" for row in rows
        )
        return [
            HourlyActivity(hour=hour, conversations=count)
            for hour, count in sorted(buckets.items())
        ]


def compute_metrics(
    records: Iterable[Any],
    date_range: Optional[DateRange] = None,
    tz: tzinfo = timezone.utc,
    satisfaction_policy: SatisfactionPolicy = SatisfactionPolicy.ZERO_FILL,
    nan_on_empty: bool = False,
) -> PerformanceMetrics:
    """Shortcut for MetricsService(...).compute(records, date_range)."""
    service = MetricsService(
        tz=tz,
        satisfaction_policy=satisfaction_policy,
        nan_on_empty=nan_on_empty,
    )
    return service.compute(records, date_range)
