"""Asynchronous CallMeLater HTTP transport (uses httpx.AsyncClient)."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from callmelater._base import ACTIONS_PATH, DEFAULT_TIMEOUT, QUOTA_PATH, _build_headers, _extract_error
from callmelater.credentials import CallMeLaterApi
from callmelater.exceptions import CallMeLaterAPIError, CallMeLaterConnectionError, CallMeLaterTimeoutError

logger = logging.getLogger(__name__)


class CallMeLaterClient:
    """``HttpClient`` implementation authenticated with a CallMeLater API token.

    Usage::

        async with CallMeLaterClient(CallMeLaterApi(api_token="sk_live_...")) as client:
            quota = await client.get_quota()
            action = await client.request("GET", f"{client.api_url}/api/v1/actions/abc")

    ``request`` accepts absolute URLs, which is how the nodes address the API.
    Relative paths are resolved against the credential's ``api_url``.
    """

    def __init__(
        self,
        credentials: CallMeLaterApi,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = credentials.api_url
        self._headers = _build_headers(credentials.api_token.get_secret_value())
        self._client = httpx.AsyncClient(
            base_url=self.api_url,
            headers=self._headers,
            timeout=timeout,
            transport=transport,
        )

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    async def __aenter__(self) -> "CallMeLaterClient":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # HttpClient
    # ------------------------------------------------------------------

    async def request(self, method: str, url: str, body: Optional[Any] = None) -> Any:
        kwargs: Dict[str, Any] = {}
        if body is not None:
            kwargs["json"] = body

        logger.info("%s %s", method, url)
        try:
            resp = await self._client.request(method, url, **kwargs)
        except httpx.ConnectError as exc:
            raise CallMeLaterConnectionError(str(exc)) from exc
        except httpx.TimeoutException as exc:
            raise CallMeLaterTimeoutError(str(exc)) from exc
        except httpx.TransportError as exc:
            raise CallMeLaterConnectionError(str(exc)) from exc

        if resp.status_code >= 400:
            try:
                payload = resp.json()
            except ValueError:
                payload = {"message": resp.text}
            logger.warning("%s %s failed with HTTP %s", method, url, resp.status_code)
            raise CallMeLaterAPIError(
                resp.status_code, _extract_error(resp.status_code, payload), payload, method=method, url=url
            )

        if resp.status_code == 204 or not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as exc:
            logger.warning("%s %s returned a non-JSON body", method, url)
            raise CallMeLaterAPIError(
                resp.status_code, "Invalid JSON response", {"message": resp.text}, method=method, url=url
            ) from exc

    # ------------------------------------------------------------------
    # Convenience endpoints
    # ------------------------------------------------------------------

    async def get_quota(self) -> Dict[str, Any]:
        """GET /api/v1/quota (used to validate credentials)."""
        return await self.request("GET", QUOTA_PATH)

    async def create_action(self, action: Dict[str, Any]) -> Dict[str, Any]:
        """POST /api/v1/actions"""
        return await self.request("POST", ACTIONS_PATH, action)

    async def get_action(self, action_id: str) -> Dict[str, Any]:
        """GET /api/v1/actions/{id}"""
        return await self.request("GET", f"{ACTIONS_PATH}/{action_id}")

    async def cancel_action(self, action_id: str) -> Dict[str, Any]:
        """DELETE /api/v1/actions/{id}"""
        return await self.request("DELETE", f"{ACTIONS_PATH}/{action_id}")
