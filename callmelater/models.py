"""
Pydantic models for the CallMeLater API.

``ScheduledAction`` is the body sent to ``POST /api/v1/actions``;
``WebhookEvent`` is the callback CallMeLater delivers to the trigger.
Neither is stored anywhere; they live for one request/response cycle.
"""
from __future__ import annotations

import re
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

DURATION_PATTERN = re.compile(r"^\d+[mhdw]$")

ActionMode = Literal["immediate", "gated"]
HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]
Channel = Literal["email", "sms", "teams", "slack"]
OnTimeout = Literal["expire", "cancel", "approve"]
ConfirmationMode = Literal["first_response", "all_required"]
RetryStrategy = Literal["exponential", "fixed"]

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")
CHANNELS = ("email", "sms", "teams", "slack")
ON_TIMEOUT_POLICIES = ("expire", "cancel", "approve")
CONFIRMATION_MODES = ("first_response", "all_required")
RETRY_STRATEGIES = ("exponential", "fixed")

EVENT_ANY = "any"
EVENT_TYPES = (
    EVENT_ANY,
    "reminder.responded",
    "action.executed",
    "action.failed",
    "action.expired",
)

# Copied into the trigger output only when present in the callback payload.
OPTIONAL_EVENT_FIELDS = (
    "response",
    "responder_email",
    "responded_at",
    "snooze_preset",
    "next_reminder_at",
    "action_status",
    "comment",
)


def is_duration(value: str) -> bool:
    """True for relative delays such as ``5m``, ``1h``, ``3d`` or ``2w``."""
    return bool(DURATION_PATTERN.match(value))


# ============================================================
# Outbound: scheduled actions
# ============================================================

class Schedule(BaseModel):
    """Either a relative ``wait`` or an absolute ``at`` timestamp."""

    wait: Optional[str] = None
    at: Optional[str] = None

    @model_validator(mode="after")
    def _exactly_one(self) -> "Schedule":
        if (self.wait is None) == (self.at is None):
            raise ValueError("schedule needs exactly one of 'wait' or 'at'")
        if self.wait is not None and not is_duration(self.wait):
            raise ValueError(f"invalid wait duration: {self.wait!r}")
        return self

    @classmethod
    def parse(cls, value: str, allow_now: bool = False) -> "Schedule":
        """Classify a user supplied schedule string.

        Durations become ``wait``; everything else is passed through verbatim
        as ``at``. With ``allow_now`` the literal ``now`` means ``wait: 0m``.
        """
        if is_duration(value):
            return cls(wait=value)
        if allow_now and value == "now":
            return cls(wait="0m")
        return cls(at=value)


class RequestSpec(BaseModel):
    """The HTTP call CallMeLater makes when an immediate action fires."""

    url: str
    method: HttpMethod
    body: Any = None
    headers: Optional[Dict[str, Any]] = None


class Gate(BaseModel):
    """Approval request settings for a gated action."""

    message: str
    recipients: List[str]
    channels: List[Channel]
    timeout: str
    on_timeout: OnTimeout
    max_snoozes: int = Field(ge=0)
    confirmation_mode: ConfirmationMode


class ScheduledAction(BaseModel):
    """Body of ``POST /api/v1/actions``."""

    name: str
    mode: ActionMode
    request: Optional[RequestSpec] = None
    gate: Optional[Gate] = None
    schedule: Schedule
    max_attempts: Optional[int] = None
    retry_strategy: Optional[RetryStrategy] = None
    idempotency_key: Optional[str] = None
    callback_url: Optional[str] = None

    @model_validator(mode="after")
    def _payload_matches_mode(self) -> "ScheduledAction":
        if self.mode == "immediate":
            if self.request is None or self.gate is not None:
                raise ValueError("immediate actions carry a request and no gate")
        elif self.gate is None or self.request is not None:
            raise ValueError("gated actions carry a gate and no request")
        return self

    def to_payload(self) -> Dict[str, Any]:
        """JSON body with only the fields that were explicitly set."""
        return self.model_dump(mode="json", exclude_unset=True)


# ============================================================
# Inbound: callback events
# ============================================================

class WebhookEvent(BaseModel):
    """A callback delivered by CallMeLater.

    Values are kept as delivered; unknown keys are preserved.
    """

    model_config = ConfigDict(extra="allow")

    event: Any = None
    action_id: Any = None
    action_name: Any = None
    timestamp: Any = None

    response: Any = None
    responder_email: Any = None
    responded_at: Any = None
    snooze_preset: Any = None
    next_reminder_at: Any = None
    action_status: Any = None
    comment: Any = None

    def to_output(self) -> Dict[str, Any]:
        """Flatten into the shape emitted by the trigger.

        Identifying fields are always present. Optional fields appear only
        when the payload carried a non-null value for them, so ``0``, ``""``
        and ``False`` are kept.
        """
        output: Dict[str, Any] = {
            "event": self.event,
            "action_id": self.action_id,
            "action_name": self.action_name,
            "timestamp": self.timestamp,
        }
        for key in OPTIONAL_EVENT_FIELDS:
            value = getattr(self, key)
            if value is not None:
                output[key] = value
        return output
