"""CallMeLater API credential: token, base URL and a reachability check."""

from __future__ import annotations

import logging
from typing import ClassVar, Dict

from pydantic import BaseModel, SecretStr, field_validator

from callmelater._base import DEFAULT_API_URL, QUOTA_PATH
from callmelater.config import Settings
from callmelater.exceptions import CallMeLaterError
from callmelater.host import HttpClient

logger = logging.getLogger(__name__)


class CallMeLaterApi(BaseModel):
    """API token plus the base URL of the CallMeLater instance.

    ``api_url`` only needs changing for self-hosted instances.
    """

    NAME: ClassVar[str] = "callMeLaterApi"
    DISPLAY_NAME: ClassVar[str] = "CallMeLater API"
    DOCUMENTATION_URL: ClassVar[str] = "https://docs.callmelater.io/api/authentication"

    api_token: SecretStr
    api_url: str = DEFAULT_API_URL

    @field_validator("api_token")
    @classmethod
    def _token_not_empty(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value().strip():
            raise ValueError("api_token must not be empty")
        return v

    @field_validator("api_url")
    @classmethod
    def _normalize_url(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        return v or DEFAULT_API_URL

    @classmethod
    def from_settings(cls, settings: Settings) -> "CallMeLaterApi":
        return cls(api_token=settings.api_token, api_url=settings.api_url)

    def auth_headers(self) -> Dict[str, str]:
        """Headers that authenticate every request."""
        return {"Authorization": f"Bearer {self.api_token.get_secret_value()}"}

    async def test(self, http: HttpClient) -> tuple[bool, str]:
        """Call ``/api/v1/quota`` to check the credential works.

        Returns ``(True, "")`` on success, or ``(False, reason)`` on failure.
        """
        try:
            await http.request("GET", f"{self.api_url}{QUOTA_PATH}")
        except CallMeLaterError as exc:
            logger.warning("Credential test against %s failed: %s", self.api_url, exc)
            return False, str(exc)
        return True, ""
