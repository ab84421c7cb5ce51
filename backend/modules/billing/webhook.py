"""
Lemon Squeezy webhook authenticity check.

The sender signs the exact request bytes with HMAC-SHA256 and puts the hex
digest in the X-Signature header. Verification must run on the raw body,
never on a re-serialized payload.
"""

import hashlib
import hmac
import re
from typing import Optional

SIGNATURE_HEADER = "X-Signature"

_SIGNATURE_PATTERN = re.compile(r"^[0-9a-f]{64}$")


def compute_signature(raw_body: bytes, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()


def verify_signature(raw_body: bytes, signature: Optional[str], secret: str) -> bool:
    """
    Check a webhook signature.

    Args:
        raw_body: Request body exactly as received
        signature: Value of the X-Signature header, if any
        secret: Shared signing secret

    Returns:
        True only if signature is 64 lowercase hex characters equal to the
        HMAC-SHA256 of raw_body.
    """
    if not signature or not secret:
        return False
    if not _SIGNATURE_PATTERN.match(signature):
        return False
    return hmac.compare_digest(compute_signature(raw_body, secret), signature)
