"""
Command to handle AI performance webhooks from the workflow engine.

Receives the raw request, verifies the HMAC signature when a secret is
configured, validates and normalizes the payload, and inserts one event.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from sqlalchemy.orm import Session

from clinic_insights.config import get_settings
from clinic_insights.core.ingestion import validate_and_normalize
from clinic_insights.core.signature import get_header, verify_signature
from clinic_insights.exceptions import (
    AppError,
    InternalServerError,
    InvalidSignatureError,
    ValidationError,
)
from clinic_insights.schemas.ai_performance import WebhookAck, WebhookAckData
from clinic_insights.services.ai_performance_service import AIPerformanceService


class AIPerformanceWebhookCommand:
    """
    Command to ingest one AI performance event for a tenant.
    Verifies the signature header, parses the JSON body, persists the event.
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self.settings = get_settings()
        self.ai_performance_service = AIPerformanceService(db)
        self.logger = logging.getLogger(__name__)

    def execute(
        self, client_id: str, body: bytes, headers: Mapping[str, str]
    ) -> WebhookAck:
        """
        Execute the webhook: verify signature, validate body, insert event.

        Args:
            client_id: Tenant identifier taken from the request path.
            body: Raw request body (the signature covers these exact bytes).
            headers: Request headers.

        Returns:
            WebhookAck: success body echoing id, conversation_id and client_id.

        Raises:
            InvalidSignatureError: secret configured and signature missing or wrong.
            ValidationError: body is not valid JSON or fails validation.
            StoreError: the insert failed.
            InternalServerError: any other failure.
        """
        try:
            self._verify_signature(body, headers)
            payload = self._parse_body(body)
            data = validate_and_normalize(payload, client_id)
            record = self.ai_performance_service.create_record(data)
        except AppError as e:
            if isinstance(e, ValidationError):
                self.logger.warning(
                    "AI performance webhook rejected for %s: %s", client_id, e.message
                )
            raise
        except Exception as e:
            self.logger.exception("AI performance webhook failed for %s", client_id)
            raise InternalServerError(str(e)) from e

        self.logger.info(
            "Stored AI performance event %s (conversation %s) for %s",
            record.id,
            record.conversation_id,
            record.client_id,
        )
        return WebhookAck(
            data=WebhookAckData(
                id=record.id,
                conversation_id=record.conversation_id,
                client_id=record.client_id,
            )
        )

    def _verify_signature(self, body: bytes, headers: Mapping[str, str]) -> None:
        secret = self.settings.webhook_secret
        if not secret:
            self.logger.warning(
                "WEBHOOK_SECRET is not set; accepting unsigned AI performance webhook"
            )
            return
        signature = get_header(headers, self.settings.webhook_signature_header)
        if not verify_signature(secret, body, signature):
            self.logger.warning("AI performance webhook signature mismatch")
            raise InvalidSignatureError()

    def _parse_body(self, body: bytes) -> Any:
        try:
            return json.loads(body)
        except (ValueError, UnicodeDecodeError) as e:
            raise ValidationError("Invalid JSON body") from e
