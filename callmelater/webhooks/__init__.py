"""Callback signature handling for the CallMeLater trigger."""

from .signing import (
    SIGNATURE_HEADER,
    SIGNATURE_PREFIX,
    compute_signature,
    serialize_body,
    sign_payload,
    verify_signature,
)

__all__ = [
    "SIGNATURE_HEADER",
    "SIGNATURE_PREFIX",
    "compute_signature",
    "serialize_body",
    "sign_payload",
    "verify_signature",
]
