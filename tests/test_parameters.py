"""Tests for the dictionary-backed parameter source and node defaults."""

from __future__ import annotations

import pytest

from callmelater.exceptions import NodeParameterError
from callmelater.host import NodeParameters, WebhookRequest
from callmelater.nodes import CallMeLaterNode, CallMeLaterTrigger


def test_shared_values_apply_to_every_item() -> None:
    params = NodeParameters({"a": 1})
    assert params.get("a", 0) == 1
    assert params.get("a", 5) == 1


def test_per_item_values() -> None:
    params = NodeParameters([{"a": 1}, {"a": 2}], defaults={"a": 0})
    assert params.get("a", 0) == 1
    assert params.get("a", 1) == 2
    assert params.get("a", 2) == 0


def test_missing_without_default_raises() -> None:
    params = NodeParameters({}, node="callMeLater")
    with pytest.raises(NodeParameterError, match='Could not get parameter "action_id"') as exc_info:
        params.get("action_id")
    assert exc_info.value.node == "callMeLater"
    assert exc_info.value.parameter == "action_id"


def test_defaults_are_copied() -> None:
    params = CallMeLaterNode.parameters({})
    channels = params.get("channels")
    channels.append("sms")
    assert params.get("channels") == ["email"]


def test_action_node_defaults() -> None:
    defaults = CallMeLaterNode.get_defaults()
    assert defaults["resource"] == "action"
    assert defaults["operation"] == "createWebhook"
    assert defaults["schedule"] == "1h"
    assert defaults["approval_schedule"] == "5m"
    assert defaults["method"] == "POST"
    assert defaults["channels"] == ["email"]
    assert defaults["webhook_options"] == {}
    assert "name" not in defaults
    assert "action_id" not in defaults


def test_trigger_defaults() -> None:
    assert CallMeLaterTrigger.get_defaults() == {"event": "any", "webhook_secret": ""}


def test_webhook_request_header_lookup() -> None:
    request = WebhookRequest(headers={"Content-Type": "application/json"})
    assert request.header("content-type") == "application/json"
    assert request.header("x-missing") is None
