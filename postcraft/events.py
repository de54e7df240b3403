"""
File: postcraft/events.py

Project: PostCraft Messenger Assistant

Purpose:
Parse Messenger webhook deliveries into immutable InboundEvent objects.

Delivery shape:
{
  "object": "page",
  "entry": [{"messaging": [{"sender": {"id": ...},
                            "message": {"text": ..., "attachments": [...],
                                        "quick_reply": {"payload": ...}}}]}]
}
"""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional, Tuple

from postcraft.errors import ValidationError

DEFAULT_IMAGE_MIME = "image/jpeg"


@dataclass(frozen=True)
class Attachment:
    kind: str
    url: Optional[str]
    mime_type: str

    @property
    def is_image(self) -> bool:
        return self.kind == "image" and bool(self.url)


@dataclass(frozen=True)
class InboundEvent:
    sender_id: str
    text: Optional[str] = None
    attachments: Tuple[Attachment, ...] = ()
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    quick_reply: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def has_image(self) -> bool:
        return any(a.is_image for a in self.attachments)

    @property
    def first_image(self) -> Optional[Attachment]:
        return next((a for a in self.attachments if a.is_image), None)


def _guess_mime(kind: str, url: Optional[str], declared: Optional[str]) -> str:
    if declared:
        return declared
    if url:
        guessed, _ = mimetypes.guess_type(url.split("?", 1)[0])
        if guessed:
            return guessed
    if kind == "image":
        return DEFAULT_IMAGE_MIME
    return "application/octet-stream"


def _parse_attachment(raw: Dict[str, Any]) -> Attachment:
    kind = raw.get("type") or "file"
    payload = raw.get("payload") or {}
    url = payload.get("url") if isinstance(payload, dict) else None
    mime_type = _guess_mime(kind, url, raw.get("mimeType") or raw.get("mime_type"))
    return Attachment(kind=kind, url=url, mime_type=mime_type)


def parse_messaging_event(raw: Dict[str, Any]) -> InboundEvent:
    """
    Build an InboundEvent from one `messaging` item.
    Raises ValidationError when there is no sender id.
    """
    if not isinstance(raw, dict):
        raise ValidationError("Messaging event is not an object")

    sender_id = (raw.get("sender") or {}).get("id")
    if not sender_id:
        raise ValidationError("Messaging event has no sender id")

    message = raw.get("message") or {}
    attachments = tuple(
        _parse_attachment(a) for a in (message.get("attachments") or []) if isinstance(a, dict)
    )
    quick_reply = (message.get("quick_reply") or {}).get("payload")

    return InboundEvent(
        sender_id=str(sender_id),
        text=message.get("text"),
        attachments=attachments,
        quick_reply=quick_reply,
        raw=raw,
    )


def iter_messaging_items(body: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
    """
    Yield raw messaging items in delivery order.
    The caller has already checked body["object"] == "page".
    """
    for entry in body.get("entry") or []:
        for item in (entry or {}).get("messaging") or []:
            yield item
