"""
Service for persisting and reading AI performance events.

Events are append-only; there is no update or delete path.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_insights.exceptions import StoreError
from clinic_insights.models.ai_performance import AIPerformance
from clinic_insights.schemas.ai_performance import AIPerformanceCreate

logger = logging.getLogger(__name__)


def _to_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def store_error_from(operation: str, error: SQLAlchemyError) -> StoreError:
    """Log a failed store call and wrap it; OperationalError is treated as transient."""
    logger.error("ai_performance %s failed: %s", operation, error)
    message = str(getattr(error, "orig", None) or error)
    return StoreError(message, transient=isinstance(error, OperationalError))


class AIPerformanceService:
    """Insert and read AI performance events. No update/delete (append-only)."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def create_record(self, data: AIPerformanceCreate) -> AIPerformance:
        """Insert exactly one event. Raises StoreError if the insert fails."""
        record = AIPerformance(**data.model_dump())
        try:
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise store_error_from("insert", e) from e
        return record

    def get_record(self, record_id: UUID) -> Optional[AIPerformance]:
        """Fetch a single event by ID."""
        try:
            return self.db.get(AIPerformance, record_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise store_error_from("read", e) from e

    def get_records_query(
        self,
        client_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        oldest_first: bool = False,
    ) -> Select:
        """Select a tenant's events, created_at inclusive on both bounds. Newest first unless oldest_first."""
        query = select(AIPerformance).where(AIPerformance.client_id == client_id)
        start = _to_utc(start)
        end = _to_utc(end)
        if start is not None:
            query = query.where(AIPerformance.created_at >= start)
        if end is not None:
            query = query.where(AIPerformance.created_at <= end)
        order = (
            AIPerformance.created_at.asc()
            if oldest_first
            else AIPerformance.created_at.desc()
        )
        return query.order_by(order)

    def get_records(
        self,
        client_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        oldest_first: bool = False,
    ) -> List[AIPerformance]:
        """Fetch every event for a tenant in the range. Raises StoreError on read failure."""
        try:
            query = self.get_records_query(
                client_id, start, end, oldest_first=oldest_first
            )
            return list(self.db.scalars(query).all())
        except SQLAlchemyError as e:
            self.db.rollback()
            raise store_error_from("read", e) from e
