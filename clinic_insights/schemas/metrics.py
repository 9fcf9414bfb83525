"""Dashboard summary contracts produced by the metrics aggregator."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

TOP_QUESTIONS_LIMIT = 5


class SatisfactionPolicy(str, Enum):
    """
    How unscored conversations count toward the satisfaction average.

    ZERO_FILL counts a missing score as 0 over every conversation (the
    dashboard's established figure). SCORED_ONLY averages scored conversations.
    """

    ZERO_FILL = "zero_fill"
    SCORED_ONLY = "scored_only"


class Period(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class DateRange(BaseModel):
    """Inclusive created_at bounds; either side may be open."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @model_validator(mode="after")
    def check_order(self) -> "DateRange":
        if self.start is None or self.end is None:
            return self
        start, end = (
            value if value.tzinfo else value.replace(tzinfo=timezone.utc)
            for value in (self.start, self.end)
        )
        if start > end:
            raise ValueError("start must not be after end")
        return self


class TopQuestion(BaseModel):
    question: str
    count: int
    resolved_rate: float = Field(..., description="Percentage (0-100) resolved")


class HourlyActivity(BaseModel):
    hour: str = Field(..., description="Hour of day, formatted HH:00")
    conversations: int


class PerformanceMetrics(BaseModel):
    """Fixed summary rendered by the dashboard cards."""

    total_conversations: int = 0
    avg_response_time: float = 0.0
    satisfaction_score: float = 0.0
    booking_conversion_rate: float = 0.0
    language_distribution: dict[str, int] = Field(default_factory=dict)
    top_questions: list[TopQuestion] = Field(default_factory=list)
    hourly_activity: list[HourlyActivity] = Field(default_factory=list)
