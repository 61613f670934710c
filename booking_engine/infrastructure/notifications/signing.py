from __future__ import annotations

import hmac
import logging


logger = logging.getLogger(__name__)


def sign_payload(body: bytes, secret: str) -> str:
    """Value for the X-Signature-256 header."""
    digest = hmac.new(secret.encode("utf-8"), body, "sha256").hexdigest()
    return f"sha256={digest}"


def verify_signature(body: bytes, signature_header: str | None, secret: str | None) -> bool:
    """Receiver-side check of an X-Signature-256 header."""
    if not signature_header:
        return False

    if not secret:
        logger.error("Missing secret for signature verification")
        return False

    try:
        algo, signature = signature_header.split("=", 1)
    except ValueError:
        return False

    if algo.lower() != "sha256":
        return False

    expected = hmac.new(secret.encode("utf-8"), body, "sha256").hexdigest()
    return hmac.compare_digest(expected, signature)
