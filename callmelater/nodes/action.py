"""
CallMeLater action node.

Schedules delayed webhooks and human approval requests, fetches their state
and cancels them. Each input item produces exactly one API call; items are
processed one after another and results keep the input order.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from callmelater._base import ACTIONS_PATH
from callmelater.credentials import CallMeLaterApi
from callmelater.exceptions import NodeOperationError, NodeParameterError
from callmelater.host import HttpClient, ParameterSource
from callmelater.models import (
    HTTP_METHODS,
    RETRY_STRATEGIES,
    Schedule,
    ScheduledAction,
)
from callmelater.nodes.base import BaseNode, NodeProperty, options

logger = logging.getLogger(__name__)

RESOURCE_ACTION = "action"

OP_CREATE_WEBHOOK = "createWebhook"
OP_CREATE_APPROVAL = "createApproval"
OP_GET = "get"
OP_CANCEL = "cancel"

DEFAULT_APPROVAL_TIMEOUT = "4h"
DEFAULT_ON_TIMEOUT = "expire"
DEFAULT_MAX_SNOOZES = 5
DEFAULT_CONFIRMATION_MODE = "first_response"


def split_recipients(value: str) -> List[str]:
    """Split a comma separated recipient list, dropping blank entries."""
    return [r.strip() for r in value.split(",") if r.strip()]


def parse_json_parameter(node: str, parameter: str, raw: Any) -> Any:
    """Decode a JSON text parameter. Non-string values are already decoded."""
    if not isinstance(raw, str):
        return raw
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise NodeParameterError(
            node, parameter, f"Parameter '{parameter}' is not valid JSON: {exc}"
        ) from exc


def _is_set(value: Any) -> bool:
    return value is not None and value != ""


def _as_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return split_recipients(value)
    return list(value)


class CallMeLaterNode(BaseNode):
    """Schedule webhooks and human approvals with CallMeLater."""

    NAME = "callMeLater"
    DISPLAY_NAME = "CallMeLater"
    DESCRIPTION = "Schedule webhooks and human approvals with CallMeLater"
    VERSION = 1
    GROUP = "transform"
    CREDENTIALS = [{"name": CallMeLaterApi.NAME, "required": True}]
    PROPERTIES = [
        NodeProperty(
            name="resource",
            display_name="Resource",
            type="options",
            options=options(("Action", RESOURCE_ACTION)),
            default=RESOURCE_ACTION,
        ),
        NodeProperty(
            name="operation",
            display_name="Operation",
            type="options",
            options=options(
                ("Create Webhook", OP_CREATE_WEBHOOK),
                ("Create Approval", OP_CREATE_APPROVAL),
                ("Get", OP_GET),
                ("Cancel", OP_CANCEL),
            ),
            default=OP_CREATE_WEBHOOK,
        ),
        # -- createWebhook ------------------------------------------------
        NodeProperty(
            name="name",
            display_name="Name",
            required=True,
            description="A name for this scheduled webhook",
            show_for_operations=[OP_CREATE_WEBHOOK],
        ),
        NodeProperty(
            name="schedule",
            display_name="Schedule",
            default="1h",
            placeholder="1h, 3d, 2025-02-15T14:30:00Z",
            description="When to execute. Use relative delays (1h, 3d) or ISO datetime.",
            show_for_operations=[OP_CREATE_WEBHOOK],
        ),
        NodeProperty(
            name="webhook_url",
            display_name="Webhook URL",
            required=True,
            placeholder="https://api.example.com/webhook",
            description="The URL to call when the schedule fires",
            show_for_operations=[OP_CREATE_WEBHOOK],
        ),
        NodeProperty(
            name="method",
            display_name="Method",
            type="options",
            options=options(*[(m, m) for m in HTTP_METHODS]),
            default="POST",
            show_for_operations=[OP_CREATE_WEBHOOK],
        ),
        NodeProperty(
            name="webhook_options",
            display_name="Additional Options",
            type="collection",
            default={},
            show_for_operations=[OP_CREATE_WEBHOOK],
            children=[
                NodeProperty(name="body", display_name="Body (JSON)", type="json", default="",
                             description="JSON body to send with the request"),
                NodeProperty(name="headers", display_name="Headers", type="json", default="",
                             description="Custom headers as JSON object"),
                NodeProperty(name="max_attempts", display_name="Max Attempts", type="number", default=5,
                             description="Maximum retry attempts on failure"),
                NodeProperty(name="retry_strategy", display_name="Retry Strategy", type="options",
                             options=options(("Exponential Backoff", "exponential"), ("Fixed Interval", "fixed")),
                             default=RETRY_STRATEGIES[0]),
                NodeProperty(name="idempotency_key", display_name="Idempotency Key", default="",
                             description="Unique key to prevent duplicate actions"),
                NodeProperty(name="callback_url", display_name="Callback URL", default="",
                             description="URL to receive webhook on completion/failure"),
            ],
        ),
        # -- createApproval -----------------------------------------------
        NodeProperty(
            name="approval_name",
            display_name="Name",
            required=True,
            description="A name for this approval request",
            show_for_operations=[OP_CREATE_APPROVAL],
        ),
        NodeProperty(
            name="message",
            display_name="Message",
            required=True,
            placeholder="Please approve this request...",
            description="The message recipients will see",
            show_for_operations=[OP_CREATE_APPROVAL],
        ),
        NodeProperty(
            name="recipients",
            display_name="Recipients",
            required=True,
            placeholder="email@example.com, +15551234567",
            description="Comma-separated list of email addresses or phone numbers",
            show_for_operations=[OP_CREATE_APPROVAL],
        ),
        NodeProperty(
            name="channels",
            display_name="Channels",
            type="multiOptions",
            options=options(("Email", "email"), ("SMS", "sms"), ("Microsoft Teams", "teams"), ("Slack", "slack")),
            default=["email"],
            description="How to deliver the approval request",
            show_for_operations=[OP_CREATE_APPROVAL],
        ),
        NodeProperty(
            name="approval_schedule",
            display_name="Schedule",
            default="5m",
            placeholder="5m, 1h, now",
            description="When to send the approval request (default: 5 minutes)",
            show_for_operations=[OP_CREATE_APPROVAL],
        ),
        NodeProperty(
            name="approval_options",
            display_name="Additional Options",
            type="collection",
            default={},
            show_for_operations=[OP_CREATE_APPROVAL],
            children=[
                NodeProperty(name="timeout", display_name="Timeout", default=DEFAULT_APPROVAL_TIMEOUT,
                             description="How long to wait for a response (e.g., 4h, 1d)"),
                NodeProperty(name="on_timeout", display_name="On Timeout", type="options",
                             options=options(("Expire", "expire"), ("Cancel", "cancel"), ("Auto-Approve", "approve")),
                             default=DEFAULT_ON_TIMEOUT, description="What to do if nobody responds"),
                NodeProperty(name="max_snoozes", display_name="Max Snoozes", type="number",
                             default=DEFAULT_MAX_SNOOZES, description="Maximum times a recipient can snooze"),
                NodeProperty(name="confirmation_mode", display_name="Confirmation Mode", type="options",
                             options=options(("First Response", "first_response"), ("All Required", "all_required")),
                             default=DEFAULT_CONFIRMATION_MODE,
                             description="Whether one response is enough or all must respond"),
                NodeProperty(name="callback_url", display_name="Callback URL", default="",
                             description="URL to receive webhook when someone responds"),
            ],
        ),
        # -- get / cancel -------------------------------------------------
        NodeProperty(
            name="action_id",
            display_name="Action ID",
            required=True,
            description="The ID of the action",
            show_for_operations=[OP_GET, OP_CANCEL],
        ),
    ]

    def __init__(self, credentials: CallMeLaterApi):
        self.credentials = credentials

    @property
    def actions_url(self) -> str:
        return f"{self.credentials.api_url}{ACTIONS_PATH}"

    async def execute(
        self,
        items: List[Dict[str, Any]],
        parameters: ParameterSource,
        http: HttpClient,
        continue_on_fail: bool = False,
    ) -> List[Any]:
        """Run the configured operation once per input item.

        Without ``continue_on_fail`` the first failure propagates and aborts
        the batch. With it, a failing item yields ``{"error": message}`` and
        the remaining items still run.
        """
        results: List[Any] = []
        for i in range(len(items)):
            try:
                results.append(await self._execute_item(i, parameters, http))
            except Exception as exc:
                if not continue_on_fail:
                    raise
                logger.warning("Item %d failed, continuing: %s", i, exc)
                results.append({"error": str(exc)})
        return results

    async def _execute_item(self, i: int, parameters: ParameterSource, http: HttpClient) -> Optional[Any]:
        resource = parameters.get("resource", i)
        operation = parameters.get("operation", i)

        if resource != RESOURCE_ACTION:
            raise NodeOperationError(self.NAME, f"Unknown resource: {resource}")

        if operation == OP_CREATE_WEBHOOK:
            action = self.build_webhook_action(i, parameters)
            response = await http.request("POST", self.actions_url, action.to_payload())
            return self._data(response)
        if operation == OP_CREATE_APPROVAL:
            action = self.build_approval_action(i, parameters)
            response = await http.request("POST", self.actions_url, action.to_payload())
            return self._data(response)
        if operation == OP_GET:
            action_id = parameters.get("action_id", i)
            response = await http.request("GET", f"{self.actions_url}/{action_id}")
            return self._data(response)
        if operation == OP_CANCEL:
            action_id = parameters.get("action_id", i)
            # The whole envelope is returned here, unlike every other operation.
            return await http.request("DELETE", f"{self.actions_url}/{action_id}")
        raise NodeOperationError(self.NAME, f"Unknown operation: {operation}")

    def _data(self, response: Any) -> Optional[Any]:
        if not isinstance(response, dict):
            raise NodeOperationError(self.NAME, f"Unexpected response from CallMeLater: {response!r}")
        return response.get("data")

    # ------------------------------------------------------------------
    # Request builders
    # ------------------------------------------------------------------

    def build_webhook_action(self, i: int, parameters: ParameterSource) -> ScheduledAction:
        opts: Mapping[str, Any] = parameters.get("webhook_options", i) or {}

        request: Dict[str, Any] = {
            "url": parameters.get("webhook_url", i),
            "method": parameters.get("method", i),
        }
        if _is_set(opts.get("body")):
            request["body"] = parse_json_parameter(self.NAME, "body", opts["body"])
        if _is_set(opts.get("headers")):
            request["headers"] = parse_json_parameter(self.NAME, "headers", opts["headers"])

        fields: Dict[str, Any] = {
            "name": parameters.get("name", i),
            "mode": "immediate",
            "request": request,
            "schedule": Schedule.parse(parameters.get("schedule", i)),
        }
        for key in ("max_attempts", "retry_strategy", "idempotency_key", "callback_url"):
            if _is_set(opts.get(key)):
                fields[key] = opts[key]

        return self._validated(fields)

    def build_approval_action(self, i: int, parameters: ParameterSource) -> ScheduledAction:
        opts: Mapping[str, Any] = parameters.get("approval_options", i) or {}

        max_snoozes = opts.get("max_snoozes")
        gate = {
            "message": parameters.get("message", i),
            "recipients": split_recipients(parameters.get("recipients", i)),
            "channels": _as_list(parameters.get("channels", i)),
            "timeout": opts.get("timeout") or DEFAULT_APPROVAL_TIMEOUT,
            "on_timeout": opts.get("on_timeout") or DEFAULT_ON_TIMEOUT,
            "max_snoozes": DEFAULT_MAX_SNOOZES if max_snoozes is None else max_snoozes,
            "confirmation_mode": opts.get("confirmation_mode") or DEFAULT_CONFIRMATION_MODE,
        }

        fields: Dict[str, Any] = {
            "name": parameters.get("approval_name", i),
            "mode": "gated",
            "gate": gate,
            "schedule": Schedule.parse(parameters.get("approval_schedule", i), allow_now=True),
        }
        if _is_set(opts.get("callback_url")):
            fields["callback_url"] = opts["callback_url"]

        return self._validated(fields)

    def _validated(self, fields: Dict[str, Any]) -> ScheduledAction:
        try:
            return ScheduledAction(**fields)
        except ValidationError as exc:
            raise NodeOperationError(self.NAME, f"Invalid action: {exc}") from exc
