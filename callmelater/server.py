"""
Webhook host adapter.

Serves the CallMeLater trigger over HTTP so callbacks can be received without
a full workflow host. Accepted events are handed to an ``on_event`` callback.
"""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from callmelater import __version__
from callmelater.config import Settings
from callmelater.host import WebhookRequest
from callmelater.nodes import NODE_TYPES, CallMeLaterTrigger
from callmelater.nodes.trigger import WEBHOOK_PATH

logger = logging.getLogger(__name__)

EventHandler = Callable[[List[Dict[str, Any]]], Awaitable[None]]


async def log_events(events: List[Dict[str, Any]]) -> None:
    for event in events:
        logger.info("Event %s for action %s", event.get("event"), event.get("action_id"))


def create_app(settings: Optional[Settings] = None, on_event: Optional[EventHandler] = None) -> FastAPI:
    """Build the FastAPI app that exposes the trigger at ``POST /webhook``."""
    settings = settings or Settings.from_env()
    handler = on_event or log_events

    trigger = CallMeLaterTrigger()
    parameters = CallMeLaterTrigger.parameters({
        "event": settings.event,
        "webhook_secret": settings.webhook_secret,
    })

    app = FastAPI(title="CallMeLater Trigger", version=__version__)

    @app.get("/health")
    async def health():
        return {"status": "healthy", "version": __version__}

    @app.get("/nodes")
    async def list_nodes():
        return {"nodes": [node.get_metadata() for node in NODE_TYPES.values()]}

    @app.post(f"/{WEBHOOK_PATH}")
    async def receive_webhook(request: Request):
        try:
            body = await request.json()
        except ValueError:
            return JSONResponse(status_code=400, content={"error": "Invalid JSON body"})
        if not isinstance(body, dict):
            return JSONResponse(status_code=400, content={"error": "Invalid JSON body"})

        result = await trigger.webhook(
            WebhookRequest(body=body, headers=dict(request.headers)),
            parameters,
        )
        if result.workflow_data is not None:
            await handler(result.workflow_data)
        return JSONResponse(status_code=result.status_code, content=result.body)

    return app
