"""AI performance read API: raw event listing and the dashboard summary."""

from __future__ import annotations

from datetime import tzinfo

from fastapi import APIRouter, Depends
from fastapi_pagination import Page, Params
from fastapi_pagination.ext.sqlalchemy import paginate
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_insights.db import get_db
from clinic_insights.routers.utils.dependencies import (
    get_date_range,
    get_satisfaction_policy,
    get_timezone,
)
from clinic_insights.schemas.ai_performance import AIPerformanceRead
from clinic_insights.schemas.metrics import (
    DateRange,
    PerformanceMetrics,
    SatisfactionPolicy,
)
from clinic_insights.services.ai_performance_service import (
    AIPerformanceService,
    store_error_from,
)
from clinic_insights.services.metrics_service import MetricsService

metrics_router = APIRouter(prefix="/api/clients", tags=["AI Performance"])


@metrics_router.get(
    "/{client_id}/ai-performance/metrics", response_model=PerformanceMetrics
)
def get_performance_metrics(
    client_id: str,
    date_range: DateRange = Depends(get_date_range),
    tz: tzinfo = Depends(get_timezone),
    satisfaction_policy: SatisfactionPolicy = Depends(get_satisfaction_policy),
    db: Session = Depends(get_db),
) -> PerformanceMetrics:
    """
    Aggregate a tenant's events in the range into the dashboard summary.

    Rows are read oldest first so top_questions ties go to the earliest question.
    """
    records = AIPerformanceService(db).get_records(
        client_id,
        start=date_range.start,
        end=date_range.end,
        oldest_first=True,
    )
    service = MetricsService(tz=tz, satisfaction_policy=satisfaction_policy)
    return service.compute(records)


@metrics_router.get("/{client_id}/ai-performance", response_model=Page[AIPerformanceRead])
def list_performance_records(
    client_id: str,
    params: Params = Depends(),
    date_range: DateRange = Depends(get_date_range),
    db: Session = Depends(get_db),
) -> Page[AIPerformanceRead]:
    """List a tenant's raw events, newest first, with pagination."""
    query = AIPerformanceService(db).get_records_query(
        client_id, start=date_range.start, end=date_range.end
    )
    try:
        return paginate(
            db,
            query,
            params=params,
            transformer=lambda items: [
                AIPerformanceRead.model_validate(item) for item in items
            ],
        )
    except SQLAlchemyError as e:
        db.rollback()
        raise store_error_from("list", e) from e
