"""
Runtime configuration for the CallMeLater nodes.

Values come from the environment, optionally seeded from a ``.env`` file in
the working directory.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from callmelater._base import DEFAULT_API_URL, DEFAULT_TIMEOUT

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    api_token: str = ""
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    event: str = "any"
    webhook_secret: str = ""
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> "Settings":
        """Build settings from ``environ`` (defaults to ``os.environ``)."""
        if environ is None:
            if dotenv:
                load_dotenv()
            environ = os.environ

        raw_timeout = environ.get("CALLMELATER_TIMEOUT", "").strip()
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
        except ValueError as exc:
            raise ValueError(f"CALLMELATER_TIMEOUT must be a number, got {raw_timeout!r}") from exc

        return cls(
            api_token=environ.get("CALLMELATER_API_TOKEN", ""),
            api_url=environ.get("CALLMELATER_API_URL", "").strip() or DEFAULT_API_URL,
            timeout=timeout,
            event=environ.get("CALLMELATER_EVENT", "").strip() or "any",
            webhook_secret=environ.get("CALLMELATER_WEBHOOK_SECRET", ""),
            log_level=(environ.get("CALLMELATER_LOG_LEVEL", "").strip() or "INFO").upper(),
        )
