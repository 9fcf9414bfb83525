from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import Query
from pydantic import ValidationError as PydanticValidationError

from clinic_insights.config import get_settings
from clinic_insights.exceptions import ValidationError
from clinic_insights.schemas.metrics import DateRange, Period, SatisfactionPolicy

PERIOD_WINDOWS = {
    Period.DAY: timedelta(days=1),
    Period.WEEK: timedelta(days=7),
    Period.MONTH: timedelta(days=30),
}


def get_date_range(
    start: Optional[datetime] = Query(None, description="Inclusive lower bound"),
    end: Optional[datetime] = Query(None, description="Inclusive upper bound"),
    period: Optional[Period] = Query(
        None, description="Window ending now; ignored when start or end is given"
    ),
) -> DateRange:
    """FastAPI dependency resolving explicit bounds or a trailing period into a DateRange."""
    if start is None and end is None and period is not None:
        end = datetime.now(timezone.utc)
        start = end - PERIOD_WINDOWS[period]
    try:
        return DateRange(start=start, end=end)
    except PydanticValidationError as e:
        raise ValidationError("start must not be after end") from e


def get_timezone(
    tz: Optional[str] = Query(None, description="IANA timezone for hourly buckets"),
) -> tzinfo:
    """FastAPI dependency resolving the hour-bucketing timezone (default from settings)."""
    name = tz or get_settings().default_timezone
    if name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValidationError(f"Unknown timezone {name!r}") from e


def get_satisfaction_policy(
    satisfaction: Optional[SatisfactionPolicy] = Query(
        None, description="How unscored conversations count toward the average"
    ),
) -> SatisfactionPolicy:
    """FastAPI dependency resolving the satisfaction policy (default from settings)."""
    if satisfaction is not None:
        return satisfaction
    return get_settings().metrics_satisfaction_policy
