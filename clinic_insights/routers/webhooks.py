"""
Webhook routes for the external workflow engine (n8n).

The engine POSTs one AI performance event per request; we verify, validate,
persist and acknowledge. Errors render as {"success": false, ...} bodies.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from clinic_insights.commands.webhooks.ai_performance_command import (
    AIPerformanceWebhookCommand,
)
from clinic_insights.config import get_settings
from clinic_insights.db import get_db
from clinic_insights.schemas.ai_performance import WebhookAck
from clinic_insights.schemas.system import WebhookConfigRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/webhook", tags=["webhooks"])

EXPECTED_PAYLOAD = {
    "conversation_id": "string (required)",
    "patient_id": "string (optional)",
    "question": "string (required)",
    "response": "string (required)",
    "response_time": "number (required)",
    "satisfaction_score": "number 0-5 (optional)",
    "language": "string (default: English)",
    "source": "whatsapp | website | phone (default: whatsapp)",
    "resolved": "boolean (default: false)",
    "booking_conversion": "boolean (default: false)",
}

EXAMPLE_PAYLOAD = {
    "conversation_id": "conv_123456",
    "patient_id": "patient_789",
    "question": "What are your operating hours?",
    "response": "Our clinic is open Monday to Friday from 9 AM to 6 PM.",
    "response_time": 1.2,
    "satisfaction_score": 4.5,
    "language": "English",
    "source": "whatsapp",
    "resolved": True,
    "booking_conversion": False,
}


@router.post("/ai-performance/{client_id}", response_model=WebhookAck)
async def ai_performance_webhook(
    client_id: str,
    request: Request,
    db: Session = Depends(get_db),
) -> WebhookAck:
    """Receive one AI performance event for client_id and store it."""
    body = await request.body()
    command = AIPerformanceWebhookCommand(db)
    return await run_in_threadpool(
        command.execute, client_id, body, dict(request.headers)
    )


@router.get("/config/{client_id}", response_model=WebhookConfigRead)
def get_webhook_config(client_id: str, request: Request) -> WebhookConfigRead:
    """Describe how to call the ingestion webhook for client_id. No side effects."""
    settings = get_settings()
    base_url = (settings.public_base_url or str(request.base_url)).rstrip("/")
    return WebhookConfigRead(
        webhook_url=f"{base_url}{router.prefix}/ai-performance/{client_id}",
        method="POST",
        headers={"Content-Type": "application/json"},
        signature={
            "header": settings.webhook_signature_header,
            "algorithm": "HMAC-SHA256 hex digest of the raw body",
            "required": "true" if settings.webhook_secret else "false",
        },
        expected_payload=EXPECTED_PAYLOAD,
        example_payload=EXAMPLE_PAYLOAD,
    )
