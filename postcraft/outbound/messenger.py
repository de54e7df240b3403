"""
File: postcraft/outbound/messenger.py

Project: PostCraft Messenger Assistant

Purpose:
Facebook Messenger Send API client.
Supports:
- Text messages (optionally with quick replies)
- URL attachments (image / audio / video / file)

Delivery is best effort: no retries, no exactly-once guarantee.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional
import requests

from postcraft.config import Settings

logger = logging.getLogger("messenger")


class MessengerError(RuntimeError):
    pass


@dataclass(frozen=True)
class SendResult:
    ok: bool
    status_code: int
    response_json: Dict[str, Any]


class MessengerClient:
    def __init__(
        self,
        settings: Settings,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._settings = settings
        self._session = session or requests.Session()

    @property
    def messages_url(self) -> str:
        return f"{self._settings.graph_base_url}/me/messages"

    def send_message(self, *, recipient_id: str, message: Dict[str, Any]) -> SendResult:
        """
        POST one `message` object (text | attachment, quick_replies?) to a recipient.
        """
        if not message:
            raise MessengerError("Message payload cannot be empty")

        self._settings.require("page_access_token")

        payload = {
            "recipient": {"id": recipient_id},
            "message": message,
        }

        resp = self._session.post(
            self.messages_url,
            params={"access_token": self._settings.page_access_token},
            json=payload,
            timeout=30,
        )

        try:
            data = resp.json()
        except ValueError:
            data = {"raw_text": resp.text}

        ok = 200 <= resp.status_code < 300 and "error" not in data
        if not ok:
            logger.error("Messenger send to %s failed (%s): %s", recipient_id, resp.status_code, data)

        return SendResult(ok=ok, status_code=resp.status_code, response_json=data)

    def send_text(self, *, recipient_id: str, text: str) -> SendResult:
        if not text:
            raise MessengerError("Message text cannot be empty")
        return self.send_message(recipient_id=recipient_id, message={"text": text})
