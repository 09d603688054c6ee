"""Webhook signature helpers."""

from __future__ import annotations

import hashlib
import hmac

SIGNATURE_PREFIX = "sha1="


def build_github_signature(secret: str, payload: bytes) -> str:
    """Return the ``X-Hub-Signature`` value GitHub sends for the given payload."""

    digest = hmac.new(secret.encode("utf-8"), payload, hashlib.sha1).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_github_signature(secret: str, payload: bytes, raw_signature: str | None) -> bool:
    """Verify a webhook signature using a constant-time comparison."""

    if not raw_signature:
        return False

    expected_signature = build_github_signature(secret, payload)
    return hmac.compare_digest(expected_signature.encode("utf-8"), raw_signature.encode("utf-8"))
