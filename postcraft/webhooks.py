"""
File: postcraft/webhooks.py
Path: postcraft/webhooks.py

Project: PostCraft Messenger Assistant

Purpose:
Inbound Messenger webhook handler (POST /webhook).

Notes:
- Verification (GET /webhook) lives in postcraft.main
- The whole batch is processed before the response is returned; every event
  has been attempted by the time Messenger sees EVENT_RECEIVED
- Per-event failures become chat replies, never HTTP errors
"""

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from postcraft.config import Settings
from postcraft.dependencies import get_settings, get_webhook_processor
from postcraft.errors import ValidationError
from postcraft.services.webhook_processor import WebhookProcessor

router = APIRouter(prefix="/webhook", tags=["webhook"])
logger = logging.getLogger("webhooks")

ACK_TEXT = "EVENT_RECEIVED"


async def _read_body(request: Request) -> bytes:
    return await request.body()


def _require_webhook_settings(settings: Settings = Depends(get_settings)) -> Settings:
    settings.require("gemini_api_key", "page_access_token", "database_url")
    return settings


@router.post("", response_class=PlainTextResponse)
def messenger_webhook(
    settings: Settings = Depends(_require_webhook_settings),
    processor: WebhookProcessor = Depends(get_webhook_processor),
    body: bytes = Depends(_read_body),
):
    try:
        payload = json.loads(body)
    except (ValueError, UnicodeDecodeError) as exc:
        raise ValidationError("Invalid JSON body") from exc

    if not isinstance(payload, dict) or payload.get("object") != "page":
        logger.warning("Rejected webhook delivery that is not a page subscription")
        raise ValidationError("Unsupported webhook object")

    count = processor.process_batch(payload)
    logger.info("Processed %s messaging event(s)", count)
    return ACK_TEXT
