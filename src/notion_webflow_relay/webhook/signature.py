"""Notion webhook signatures: ``sha256=`` + hex HMAC-SHA256 of the raw body."""

import hashlib
import hmac

SIGNATURE_PREFIX = "sha256="


def calculate_signature(body: bytes, secret: str) -> str:
    """Sign the exact bytes received. Never pass re-serialized JSON here."""
    digest = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_signature(body: bytes, signature: str | None, secret: str) -> bool:
    """Verify a Notion webhook signature in constant time.

    Fails closed when the header or the secret is missing.
    """
    if not signature or not secret:
        return False

    expected = calculate_signature(body, secret).encode()
    provided = signature.encode()
    if len(expected) != len(provided):
        return False
    return hmac.compare_digest(expected, provided)
