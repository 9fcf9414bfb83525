"""Pydantic schemas for AI performance events (webhook ingestion and reads)."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_LANGUAGE = "English"


class Source(str, Enum):
    """Channels the workflow engine reports. Documented, not enforced on ingestion."""

    WHATSAPP = "whatsapp"
    WEBSITE = "website"
    PHONE = "phone"


class AIPerformanceCreate(BaseModel):
    """Fully normalized event, ready for a single insert."""

    conversation_id: str = Field(..., min_length=1, max_length=255)
    patient_id: Optional[str] = Field(None, max_length=255)
    question: str = Field(..., min_length=1)
    response: str = Field(..., min_length=1)
    response_time: float
    satisfaction_score: Optional[float] = None
    language: str = Field(DEFAULT_LANGUAGE, max_length=64)
    source: str = Field(Source.WHATSAPP.value, max_length=32)
    resolved: bool = False
    booking_conversion: bool = False
    client_id: str = Field(..., min_length=1, max_length=255)
    created_at: datetime
    updated_at: datetime


class AIPerformanceRead(BaseModel):
    """Response schema for a stored event."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    conversation_id: str
    patient_id: Optional[str]
    question: str
    response: str
    response_time: float
    satisfaction_score: Optional[float]
    language: str
    source: str
    resolved: bool
    booking_conversion: bool
    client_id: str
    created_at: datetime
    updated_at: datetime


class WebhookAckData(BaseModel):
    id: UUID
    conversation_id: str
    client_id: str


class WebhookAck(BaseModel):
    """Body returned to the workflow engine after a successful insert."""

    success: bool = True
    message: str = "AI performance data received successfully"
    data: WebhookAckData
