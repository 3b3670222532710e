"""Webhook endpoint for receiving Notion events."""

import logging

from fastapi import APIRouter, Header, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from notion_webflow_relay.errors import AuthenticationFailure, DownstreamFailure, MalformedPayload
from notion_webflow_relay.webhook.relay import WebhookRelay

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/webhook")
async def handle_webhook(
    request: Request,
    x_notion_signature: str | None = Header(None),
):
    """Handle incoming Notion webhook events."""
    relay: WebhookRelay = request.app.state.relay
    body = await request.body()

    try:
        return await relay.handle(body, x_notion_signature)
    except AuthenticationFailure as exc:
        return PlainTextResponse(exc.detail, status_code=401)
    except MalformedPayload as exc:
        return JSONResponse({"success": False, "error": exc.reason}, status_code=400)
    except DownstreamFailure as exc:
        logger.error("Webflow upsert failed with status %d", exc.status_code)
        return JSONResponse(
            {
                "success": False,
                "error": "Webflow request failed",
                "webflowStatus": exc.status_code,
                "webflowResponse": exc.body,
            },
            status_code=502,
        )
