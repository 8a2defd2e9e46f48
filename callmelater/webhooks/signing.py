"""HMAC-SHA256 signing and verification of CallMeLater callbacks.

CallMeLater signs each callback with the webhook secret configured on the
trigger and sends ``sha256=<hex digest>`` in ``x-callmelater-signature``.
The digest covers the compact JSON serialization of the body.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import re
from typing import Any, Dict, Optional

SIGNATURE_HEADER = "x-callmelater-signature"
SIGNATURE_PREFIX = "sha256="

_LONE_SURROGATE = re.compile("[\ud800-\udfff]")


def serialize_body(body: Dict[str, Any]) -> str:
    """Compact JSON with key order preserved and non-ASCII left as is.

    Unpaired surrogates cannot be encoded as UTF-8, so they are written as
    \\uXXXX escapes, the same way JavaScript's JSON.stringify does.
    """
    text = json.dumps(body, separators=(",", ":"), ensure_ascii=False)
    return _LONE_SURROGATE.sub(lambda m: "\\u%04x" % ord(m.group()), text)


def sign_payload(payload_bytes: bytes, secret: str) -> str:
    """Compute HMAC-SHA256 hex digest for *payload_bytes* using *secret*."""
    return hmac.new(secret.encode(), payload_bytes, hashlib.sha256).hexdigest()


def compute_signature(body: Dict[str, Any], secret: str) -> str:
    """Header value CallMeLater is expected to send for *body*."""
    digest = sign_payload(serialize_body(body).encode(), secret)
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_signature(body: Dict[str, Any], signature: Optional[str], secret: str) -> bool:
    """Exact comparison of *signature* against the expected header value."""
    if not signature:
        return False
    expected = compute_signature(body, secret)
    return hmac.compare_digest(signature.encode(), expected.encode())
