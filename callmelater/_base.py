"""Shared constants and helpers for talking to the CallMeLater API."""

from __future__ import annotations

from typing import Any, Dict, Optional

DEFAULT_API_URL = "https://api.callmelater.io"
DEFAULT_TIMEOUT = 30.0

ACTIONS_PATH = "/api/v1/actions"
QUOTA_PATH = "/api/v1/quota"


def _build_headers(api_token: Optional[str]) -> Dict[str, str]:
    headers: Dict[str, str] = {
        "Accept": "application/json",
        "Content-Type": "application/json",
    }
    if api_token:
        headers["Authorization"] = f"Bearer {api_token}"
    return headers


def _extract_error(status_code: int, body: Any) -> str:
    """Pull a human readable message out of an API error body."""
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
        return str(body)
    return str(body) or f"status {status_code}"
