"""Tests for webhook HMAC signatures."""

import hashlib
import hmac

from clinic_insights.core.signature import (
    compute_signature,
    get_header,
    verify_signature,
)

BODY = b'{"conversation_id": "conv_001"}'


def test_compute_signature_matches_hmac_sha256():
    expected = hmac.new(b"s3cret", BODY, hashlib.sha256).hexdigest()
    assert compute_signature("s3cret", BODY) == expected


def test_verify_signature_valid():
    assert verify_signature("s3cret", BODY, compute_signature("s3cret", BODY))


def test_verify_signature_accepts_prefix_and_uppercase():
    signature = "sha256=" + compute_signature("s3cret", BODY).upper()
    assert verify_signature("s3cret", BODY, signature)


def test_verify_signature_wrong_secret():
    assert not verify_signature("s3cret", BODY, compute_signature("other", BODY))


def test_verify_signature_tampered_body():
    signature = compute_signature("s3cret", BODY)
    assert not verify_signature("s3cret", BODY + b" ", signature)


def test_verify_signature_missing():
    assert not verify_signature("s3cret", BODY, None)
    assert not verify_signature("s3cret", BODY, "")


def test_verify_signature_non_ascii_does_not_raise():
    assert not verify_signature("s3cret", BODY, "ñ" * 64)


def test_get_header_case_insensitive():
    headers = {"x-webhook-signature": "abc"}
    assert get_header(headers, "X-Webhook-Signature") == "abc"
    assert get_header(headers, "X-Other") is None
