"""
File: postcraft/privacy.py

Project: PostCraft Messenger Assistant

Purpose:
Facebook data deletion callback (POST /data-deletion).

Flow:
- body carries `signed_request` = "<signature>.<payload>", both base64url
- signature must equal HMAC-SHA256(app_secret, <payload> as sent)
- payload must carry `user_id`
- every stored record for that user is deleted
- respond with a status URL and a confirmation code
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import logging
import time
from typing import Any, Dict
from urllib.parse import parse_qs

from fastapi import APIRouter, Depends, Request

from postcraft.config import Settings
from postcraft.dependencies import get_settings, get_state_store
from postcraft.errors import ValidationError, VerificationError
from postcraft.services.state_store import StateStore

router = APIRouter(tags=["privacy"])
logger = logging.getLogger("privacy")


def _b64url_decode(value: str) -> bytes:
    padding = "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode(value + padding)


def verify_signed_request(signed_request: str, app_secret: str) -> Dict[str, Any]:
    """
    Return the decoded payload of a valid signed_request.
    Raises VerificationError on a bad format or signature.
    """
    parts = signed_request.split(".")
    if len(parts) != 2:
        raise VerificationError("Invalid signed_request format")

    encoded_signature, encoded_payload = parts
    try:
        signature = _b64url_decode(encoded_signature)
        payload_raw = _b64url_decode(encoded_payload)
    except (binascii.Error, ValueError) as exc:
        raise VerificationError("Invalid signed_request encoding") from exc

    expected = hmac.new(
        app_secret.encode("utf-8"),
        encoded_payload.encode("utf-8"),
        hashlib.sha256,
    ).digest()
    if not hmac.compare_digest(signature, expected):
        raise VerificationError("Invalid signed_request signature")

    try:
        payload = json.loads(payload_raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise VerificationError("Invalid signed_request payload") from exc

    if not isinstance(payload, dict):
        raise VerificationError("Invalid signed_request payload")
    return payload


def _extract_signed_request(request_body: bytes, content_type: str) -> str:
    if content_type.startswith("application/x-www-form-urlencoded"):
        values = parse_qs(request_body.decode("utf-8", errors="replace")).get("signed_request") or []
        signed_request = values[0] if values else None
    else:
        try:
            body = json.loads(request_body or b"{}")
        except (ValueError, UnicodeDecodeError) as exc:
            raise ValidationError("Invalid JSON payload") from exc
        signed_request = body.get("signed_request") if isinstance(body, dict) else None

    if not signed_request:
        raise ValidationError("Missing signed_request")
    return signed_request


async def _read_body(request: Request) -> bytes:
    return await request.body()


def _require_privacy_settings(settings: Settings = Depends(get_settings)) -> Settings:
    settings.require("app_secret", "database_url")
    return settings


@router.post("/data-deletion")
def data_deletion(
    request: Request,
    settings: Settings = Depends(_require_privacy_settings),
    store: StateStore = Depends(get_state_store),
    body: bytes = Depends(_read_body),
):
    signed_request = _extract_signed_request(body, request.headers.get("content-type", ""))

    payload = verify_signed_request(signed_request, settings.app_secret)
    user_id = payload.get("user_id")
    if not user_id:
        raise VerificationError("signed_request has no user_id")

    user_id = str(user_id)
    logger.info("Verified data deletion request for %s", user_id)

    deleted = store.delete_all_for_sender(user_id)
    logger.info("Erased %s inbound message(s) for %s", deleted, user_id)

    return {
        "url": settings.privacy_policy_url,
        "confirmation_code": f"deleted-{user_id}-{int(time.time() * 1000)}",
    }
