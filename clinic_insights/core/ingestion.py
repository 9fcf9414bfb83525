"""
Validation and normalization of inbound AI performance payloads.

One pure function shared by every transport that accepts events: it never
touches the database, so a rejected payload can never produce a partial insert.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from clinic_insights.exceptions import CoercionError, ValidationError
from clinic_insights.schemas.ai_performance import (
    DEFAULT_LANGUAGE,
    AIPerformanceCreate,
    Source,
)

REQUIRED_FIELDS = ("conversation_id", "question", "response", "response_time")
MISSING_FIELDS_MESSAGE = (
    "Missing required fields: conversation_id, question, response, response_time"
)
SATISFACTION_MIN = 0.0
SATISFACTION_MAX = 5.0


def coerce_number(field: str, value: Any) -> float:
    """Parse value as a finite float. Raises CoercionError otherwise (booleans included)."""
    if isinstance(value, bool):
        raise CoercionError(field, value)
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise CoercionError(field, value) from e
    if math.isnan(number) or math.isinf(number):
        raise CoercionError(field, value)
    return number


def _optional_string(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def validate_and_normalize(
    raw_payload: Any,
    client_id: str,
    now: Optional[datetime] = None,
) -> AIPerformanceCreate:
    """
    Turn a raw webhook body into a fully populated event for client_id.

    conversation_id, question and response must be present and non-empty.
    response_time must be present (0 is valid; missing or null is not).
    Defaults: language "English", source "whatsapp", resolved and
    booking_conversion False. Booleans follow truthiness of the raw value.

    Raises:
        ValidationError: payload is not an object, client_id is empty, a
            required field is missing, or satisfaction_score is outside 0-5.
        CoercionError: response_time or satisfaction_score is not a number.
    """
    if not isinstance(raw_payload, dict):
        raise ValidationError("Body must be a JSON object")
    if not client_id or not client_id.strip():
        raise ValidationError("client_id is required")

    if (
        not raw_payload.get("conversation_id")
        or not raw_payload.get("question")
        or not raw_payload.get("response")
        or raw_payload.get("response_time") is None
    ):
        raise ValidationError(MISSING_FIELDS_MESSAGE)

    response_time = coerce_number("response_time", raw_payload["response_time"])

    satisfaction_score: Optional[float] = None
    raw_score = raw_payload.get("satisfaction_score")
    if raw_score is not None and raw_score != "":
        satisfaction_score = coerce_number("satisfaction_score", raw_score)
        if not SATISFACTION_MIN <= satisfaction_score <= SATISFACTION_MAX:
            raise ValidationError(
                f"satisfaction_score must be between {SATISFACTION_MIN:g} "
                f"and {SATISFACTION_MAX:g}"
            )

    timestamp = now or datetime.now(timezone.utc)
    try:
        return _build_record(
            raw_payload, client_id, response_time, satisfaction_score, timestamp
        )
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise ValidationError(f"Invalid field {field!r}: {first['msg']}") from e


def _build_record(
    raw_payload: dict[str, Any],
    client_id: str,
    response_time: float,
    satisfaction_score: Optional[float],
    timestamp: datetime,
) -> AIPerformanceCreate:
    return AIPerformanceCreate(
        conversation_id=str(raw_payload["conversation_id"]),
        patient_id=_optional_string(raw_payload.get("patient_id")),
        question=str(raw_payload["question"]),
        response=str(raw_payload["response"]),
        response_time=response_time,
        satisfaction_score=satisfaction_score,
        language=str(raw_payload.get("language") or DEFAULT_LANGUAGE),
        source=str(raw_payload.get("source") or Source.WHATSAPP.value),
        resolved=bool(raw_payload.get("resolved") or False),
        booking_conversion=bool(raw_payload.get("booking_conversion") or False),
        client_id=client_id,
        created_at=timestamp,
        updated_at=timestamp,
    )
