"""
CallMeLater trigger node.

Receives the callbacks CallMeLater sends when a reminder is answered or an
action is executed, fails or expires. Verifies the optional signature,
applies the event filter and hands a flattened event to the workflow.
"""
from __future__ import annotations

import logging
from typing import Any, Dict

from callmelater.credentials import CallMeLaterApi
from callmelater.host import ParameterSource, WebhookRequest, WebhookResponseData
from callmelater.models import EVENT_ANY, WebhookEvent
from callmelater.nodes.base import BaseNode, NodeProperty, PropertyOption
from callmelater.webhooks.signing import SIGNATURE_HEADER, verify_signature

logger = logging.getLogger(__name__)

WEBHOOK_PATH = "webhook"


def _reject(message: str) -> WebhookResponseData:
    return WebhookResponseData(status_code=401, body={"error": message})


class CallMeLaterTrigger(BaseNode):
    """Triggers when CallMeLater events occur (responses, completions, failures)."""

    NAME = "callMeLaterTrigger"
    DISPLAY_NAME = "CallMeLater Trigger"
    DESCRIPTION = "Triggers when CallMeLater events occur (responses, completions, failures)"
    VERSION = 1
    GROUP = "trigger"
    CREDENTIALS = [{"name": CallMeLaterApi.NAME, "required": False}]
    WEBHOOKS = [{"name": "default", "http_method": "POST", "response_mode": "onReceived", "path": WEBHOOK_PATH}]
    PROPERTIES = [
        NodeProperty(
            name="event",
            display_name="Event",
            type="options",
            options=[
                PropertyOption(name="Any Event", value=EVENT_ANY,
                               description="Trigger on any CallMeLater event"),
                PropertyOption(name="Reminder Responded", value="reminder.responded",
                               description="Someone confirmed, declined, or snoozed a reminder"),
                PropertyOption(name="Action Executed", value="action.executed",
                               description="A scheduled webhook was successfully executed"),
                PropertyOption(name="Action Failed", value="action.failed",
                               description="A scheduled webhook failed after all retries"),
                PropertyOption(name="Action Expired", value="action.expired",
                               description="A reminder expired without response"),
            ],
            default=EVENT_ANY,
            description="Which event should trigger this workflow",
        ),
        NodeProperty(
            name="webhook_secret",
            display_name="Webhook Secret",
            password=True,
            default="",
            description=(
                "Optional. Verify webhook signatures using this secret. "
                "Must match the secret configured in CallMeLater."
            ),
        ),
    ]

    @classmethod
    def get_metadata(cls) -> Dict[str, Any]:
        metadata = super().get_metadata()
        metadata["webhooks"] = list(cls.WEBHOOKS)
        return metadata

    # -- Webhook lifecycle ------------------------------------------------
    # The user pastes the host's webhook URL into CallMeLater by hand, so
    # there is nothing to register or clean up remotely.

    async def check_exists(self) -> bool:
        return True

    async def create(self) -> bool:
        return True

    async def delete(self) -> bool:
        return True

    # -- Webhook handling -------------------------------------------------

    async def webhook(self, request: WebhookRequest, parameters: ParameterSource) -> WebhookResponseData:
        """Handle one callback.

        401 for a missing or wrong signature, 200 with ``filtered`` when the
        event does not match the filter, otherwise 200 with one output item.
        """
        body = request.body
        event_filter = parameters.get("event")
        secret = parameters.get("webhook_secret")

        if secret:
            signature = request.header(SIGNATURE_HEADER)
            if not signature:
                logger.warning("Rejected callback without %s header", SIGNATURE_HEADER)
                return _reject("Missing signature header")
            if not verify_signature(body, signature, secret):
                logger.warning("Rejected callback with invalid signature")
                return _reject("Invalid signature")

        event_type = body.get("event")
        if event_filter != EVENT_ANY and event_type != event_filter:
            logger.debug("Filtered %s callback (filter=%s)", event_type, event_filter)
            return WebhookResponseData(status_code=200, body={"received": True, "filtered": True})

        output = WebhookEvent.model_validate(body).to_output()
        output["_raw"] = body

        logger.info("Accepted %s callback for action %s", event_type, output.get("action_id"))
        return WebhookResponseData(
            status_code=200,
            body={"received": True},
            workflow_data=[output],
        )
