"""CallMeLater nodes for workflow automation hosts.

An action node that schedules delayed webhooks and approval requests through
the CallMeLater API, and a trigger node that receives its callbacks.
"""

from callmelater.client import CallMeLaterClient
from callmelater.config import Settings
from callmelater.credentials import CallMeLaterApi
from callmelater.exceptions import (
    CallMeLaterAPIError,
    CallMeLaterConnectionError,
    CallMeLaterError,
    CallMeLaterTimeoutError,
    NodeOperationError,
    NodeParameterError,
)
from callmelater.host import HttpClient, NodeParameters, ParameterSource, WebhookRequest, WebhookResponseData
from callmelater.nodes import NODE_TYPES, CallMeLaterNode, CallMeLaterTrigger

__all__ = [
    "CallMeLaterAPIError",
    "CallMeLaterApi",
    "CallMeLaterClient",
    "CallMeLaterConnectionError",
    "CallMeLaterError",
    "CallMeLaterNode",
    "CallMeLaterTimeoutError",
    "CallMeLaterTrigger",
    "HttpClient",
    "NODE_TYPES",
    "NodeOperationError",
    "NodeParameterError",
    "NodeParameters",
    "ParameterSource",
    "Settings",
    "WebhookRequest",
    "WebhookResponseData",
]

__version__ = "0.1.0"
