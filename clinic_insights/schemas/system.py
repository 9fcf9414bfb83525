"""Schemas for health and webhook documentation endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class HealthRead(BaseModel):
    status: str
    timestamp: datetime
    service: str
    version: str
    environment: str


class WebhookConfigRead(BaseModel):
    """How an automation tool should call the ingestion webhook for a tenant."""

    webhook_url: str
    method: str
    headers: dict[str, str]
    signature: dict[str, str]
    expected_payload: dict[str, str]
    example_payload: dict[str, Any]
