"""
Host capabilities injected into the CallMeLater nodes.

The workflow host owns parameter extraction and HTTP transport. The nodes only
see the two small interfaces below, so any host (or a test) can drive them.
"""
from __future__ import annotations

import copy
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Union

from pydantic import BaseModel, Field

from callmelater.exceptions import NodeParameterError

_MISSING = object()


class ParameterSource(Protocol):
    """Resolves a node parameter for one input item."""

    def get(self, name: str, item_index: int = 0) -> Any:
        ...


class HttpClient(Protocol):
    """Sends one HTTP request and returns the decoded JSON response."""

    async def request(self, method: str, url: str, body: Optional[Any] = None) -> Any:
        ...


class NodeParameters:
    """Dictionary-backed ``ParameterSource``.

    ``values`` is either one mapping shared by every item or a sequence with
    one mapping per input item. Names absent from the values fall back to
    ``defaults``; names absent from both raise ``NodeParameterError``.
    """

    def __init__(
        self,
        values: Union[Mapping[str, Any], Sequence[Mapping[str, Any]]],
        defaults: Optional[Mapping[str, Any]] = None,
        node: str = "node",
    ):
        if isinstance(values, Mapping):
            self._per_item: Optional[List[Mapping[str, Any]]] = None
            self._shared: Mapping[str, Any] = values
        else:
            self._per_item = list(values)
            self._shared = {}
        self._defaults = dict(defaults or {})
        self.node = node

    def get(self, name: str, item_index: int = 0) -> Any:
        values = self._values_for(item_index)
        value = values.get(name, _MISSING)
        if value is _MISSING:
            value = self._defaults.get(name, _MISSING)
            if value is _MISSING:
                raise NodeParameterError(
                    self.node, name, f'Could not get parameter "{name}"'
                )
            # defaults are shared; hand out copies of mutable ones
            return copy.deepcopy(value)
        return value

    def _values_for(self, item_index: int) -> Mapping[str, Any]:
        if self._per_item is None:
            return self._shared
        if item_index < 0 or item_index >= len(self._per_item):
            return {}
        return self._per_item[item_index]


class WebhookRequest(BaseModel):
    """An inbound webhook call as handed over by the host."""

    body: Dict[str, Any] = Field(default_factory=dict)
    headers: Dict[str, str] = Field(default_factory=dict)

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None


class WebhookResponseData(BaseModel):
    """What a trigger returns to the host for one webhook call.

    ``workflow_data`` is ``None`` when nothing should be forwarded downstream.
    """

    status_code: int = 200
    body: Dict[str, Any] = Field(default_factory=dict)
    workflow_data: Optional[List[Dict[str, Any]]] = None
