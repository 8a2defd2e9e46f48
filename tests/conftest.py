from typing import Any, List, Optional, Tuple

import pytest

from callmelater.credentials import CallMeLaterApi

API_URL = "https://api.callmelater.test"


class FakeHttp:
    """Records calls and replays queued responses (exceptions are raised)."""

    def __init__(self, responses: Optional[List[Any]] = None):
        self.calls: List[Tuple[str, str, Any]] = []
        self.responses = list(responses or [])

    async def request(self, method: str, url: str, body: Optional[Any] = None) -> Any:
        self.calls.append((method, url, body))
        response = self.responses.pop(0) if self.responses else {"data": {}}
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture()
def credentials() -> CallMeLaterApi:
    return CallMeLaterApi(api_token="sk_test_123", api_url=API_URL)


@pytest.fixture()
def fake_http() -> FakeHttp:
    return FakeHttp()


@pytest.fixture()
def make_http():
    """Build a FakeHttp with queued responses."""
    return FakeHttp
