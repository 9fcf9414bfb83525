"""
HMAC-SHA256 signatures for the ingestion webhook.

The sender signs the raw request body with the shared secret and puts the
lowercase hex digest in the signature header, optionally prefixed "sha256=".
"""

from __future__ import annotations

import hashlib
import hmac
from typing import Mapping, Optional

SIGNATURE_PREFIX = "sha256="


def compute_signature(secret: str, body: bytes) -> str:
    """Hex HMAC-SHA256 of body under secret."""
    return hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


def get_header(headers: Mapping[str, str], name: str) -> Optional[str]:
    """Case-insensitive header lookup."""
    name_lower = name.lower()
    for key, value in headers.items():
        if key.lower() == name_lower:
            return value
    return None


def verify_signature(secret: str, body: bytes, signature: Optional[str]) -> bool:
    """Constant-time check of signature against the expected digest of body."""
    if not signature:
        return False
    provided = signature.strip()
    if provided.lower().startswith(SIGNATURE_PREFIX):
        provided = provided[len(SIGNATURE_PREFIX) :]
    expected = compute_signature(secret, body)
    return hmac.compare_digest(
        expected.encode("ascii"), provided.lower().encode("utf-8")
    )
