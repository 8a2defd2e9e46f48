"""Errors raised by the CallMeLater client and nodes.

Transport problems and API rejections derive from ``CallMeLaterError``;
problems with the node configuration derive from ``NodeOperationError``.
"""

from typing import Any, Dict, Optional


class CallMeLaterError(Exception):
    """Something went wrong talking to the CallMeLater API."""


class CallMeLaterAPIError(CallMeLaterError):
    """The API answered, but not with a usable 2xx JSON body.

    ``method`` and ``url`` identify the failed call when the client knows it.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        response_body: Optional[Dict[str, Any]] = None,
        method: Optional[str] = None,
        url: Optional[str] = None,
    ):
        self.status_code = status_code
        self.detail = detail
        self.response_body = response_body or {}
        self.method = method
        self.url = url
        message = f"CallMeLater API returned {status_code}: {detail}"
        if method and url:
            message = f"{message} ({method} {url})"
        super().__init__(message)


class CallMeLaterConnectionError(CallMeLaterError):
    """The request never got an HTTP response (refused, reset, protocol error)."""


class CallMeLaterTimeoutError(CallMeLaterError):
    """The request exceeded the client timeout."""


class NodeOperationError(Exception):
    """Raised when a node cannot carry out the requested operation."""

    def __init__(self, node: str, message: str):
        self.node = node
        super().__init__(message)


class NodeParameterError(NodeOperationError):
    """Raised when a node parameter is missing or cannot be parsed."""

    def __init__(self, node: str, parameter: str, message: str):
        self.parameter = parameter
        super().__init__(node, message)
