"""
AIPerformance model: one row per AI-assisted conversation turn posted by the
external workflow engine.

Append-only. Rows are partitioned logically by client_id (tenant) and read
back by client_id + created_at range for dashboard aggregation.
"""

from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Column, Float, Index, String, Text, Uuid

from clinic_insights.db import Base
from clinic_insights.models.mixins import TimestampMixin


class AIPerformance(Base, TimestampMixin):
    """Single logged conversation event for a tenant. Never updated by this service."""

    __tablename__ = "ai_performance"

    __table_args__ = (
        Index("ix_ai_performance_client_id_created", "client_id", "created_at"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    conversation_id = Column(String(255), nullable=False)
    patient_id = Column(String(255), nullable=True)
    question = Column(Text, nullable=False)
    response = Column(Text, nullable=False)
    response_time = Column(Float, nullable=False)  # seconds
    satisfaction_score = Column(Float, nullable=True)  # 0-5
    language = Column(String(64), nullable=False, default="English")
    source = Column(String(32), nullable=False, default="whatsapp")
    resolved = Column(Boolean, nullable=False, default=False)
    booking_conversion = Column(Boolean, nullable=False, default=False)
    client_id = Column(String(255), nullable=False, index=True)
