"""
File: postcraft/services/assembler.py

Project: PostCraft Messenger Assistant

Purpose:
Turn a Reply into what a channel can actually deliver.

Channels:
- Messenger: media by URL only, quick replies supported
- Web: inline data URIs, no quick replies

Rules:
- Inline media on a URL-only channel is never dropped silently; the text
  goes out with one note per media kind pointing to the web app
- Notes from optional step failures are appended to the text
- The "Post it" shortcut comes first when a pending post was just created
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from postcraft.content import Citation, Media, Reply
from postcraft.intents import CONFIRM_POST_PAYLOAD, BotFeature
from postcraft import profile


@dataclass(frozen=True)
class ChannelCapabilities:
    inline_media: bool
    quick_replies: bool


MESSENGER = ChannelCapabilities(inline_media=False, quick_replies=True)
WEB = ChannelCapabilities(inline_media=True, quick_replies=False)

SHORTCUT_ORDER = (
    BotFeature.CHAT,
    BotFeature.EDIT_IMAGE,
    BotFeature.DAILY_POST,
    BotFeature.CREATE_STORY,
    BotFeature.SCHEDULE_POST,
)

_MEDIA_LABELS = {
    "image": "an image",
    "audio": "audio",
    "video": "a video",
}


@dataclass(frozen=True)
class QuickReply:
    title: str
    payload: str

    def to_dict(self) -> Dict[str, str]:
        return {"content_type": "text", "title": self.title, "payload": self.payload}


@dataclass
class OutboundMessage:
    text: str
    media: List[Media] = field(default_factory=list)
    citations: List[Citation] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)
    quick_replies: List[QuickReply] = field(default_factory=list)

    def media_of(self, kind: str) -> Optional[Media]:
        return next((m for m in self.media if m.kind == kind), None)


# Send API rejects message text longer than this
MESSENGER_TEXT_LIMIT = 2000

_SEPARATORS = ("\n\n", "\n", " ")


def split_text(text: str, limit: int = MESSENGER_TEXT_LIMIT) -> List[str]:
    """
    Break text into chunks of at most `limit` characters, preferring
    paragraph breaks, then line breaks, then spaces. A single word longer
    than `limit` is cut hard.
    """
    if len(text) <= limit:
        return [text] if text else []

    for sep in _SEPARATORS:
        if sep not in text:
            continue
        chunks: List[str] = []
        current = ""
        for piece in text.split(sep):
            candidate = f"{current}{sep}{piece}" if current else piece
            if len(candidate) <= limit:
                current = candidate
                continue
            if current:
                chunks.append(current)
            if len(piece) <= limit:
                current = piece
            else:
                parts = split_text(piece, limit)
                chunks.extend(parts[:-1])
                current = parts[-1] if parts else ""
        if current:
            chunks.append(current)
        return [c for c in chunks if c.strip()]

    return [text[i:i + limit] for i in range(0, len(text), limit)]


def degradation_note(kind: str) -> str:
    label = _MEDIA_LABELS.get(kind, "a file")
    return (
        f"(Note: I generated {label} for this, but I can't send it here. "
        f"{profile.WEB_APP_HINT})"
    )


class ResponseAssembler:
    def assemble(self, reply: Reply, capabilities: ChannelCapabilities) -> OutboundMessage:
        content = reply.content
        notes = list(content.notes)
        media: List[Media] = []

        for item in content.media():
            if item.is_inline and not capabilities.inline_media:
                notes.append(degradation_note(item.kind))
                continue
            if not item.is_inline and not item.url:
                continue
            media.append(item)

        quick_replies: List[QuickReply] = []
        if capabilities.quick_replies and reply.offer_shortcuts:
            quick_replies = self.shortcuts(pending_created=reply.pending_created)

        text = content.text
        if reply.pending_created:
            text = f"{text}\n\n{profile.PENDING_CREATED_HINT}" if text else profile.PENDING_CREATED_HINT

        return OutboundMessage(
            text=text,
            media=media,
            citations=list(content.citations),
            notes=notes,
            quick_replies=quick_replies,
        )

    @staticmethod
    def shortcuts(*, pending_created: bool = False) -> List[QuickReply]:
        replies = [
            QuickReply(title=profile.SHORTCUT_TITLES[f.value], payload=f.value)
            for f in SHORTCUT_ORDER
        ]
        if pending_created:
            replies.insert(
                0,
                QuickReply(title=profile.SHORTCUT_TITLES["confirm_post"], payload=CONFIRM_POST_PAYLOAD),
            )
        return replies

    # -------------------------------------------------
    # Channel payloads
    # -------------------------------------------------
    @staticmethod
    def full_text(message: OutboundMessage) -> str:
        parts = [message.text] if message.text else []
        parts.extend(message.notes)
        return "\n\n".join(parts)

    def to_messenger_payloads(self, message: OutboundMessage) -> List[Dict[str, Any]]:
        """
        Send API `message` objects, in delivery order: the text first (split
        into chunks the Send API accepts), then one attachment per URL media
        item. Quick replies ride on the last one.
        """
        payloads: List[Dict[str, Any]] = []

        text = self.full_text(message)
        if message.citations:
            sources = "\n".join(f"- {c.title or c.uri}: {c.uri}" for c in message.citations)
            text = f"{text}\n\nSources:\n{sources}" if text else f"Sources:\n{sources}"
        payloads.extend({"text": chunk} for chunk in split_text(text))

        for item in message.media:
            if item.url:
                payloads.append(
                    {
                        "attachment": {
                            "type": item.kind,
                            "payload": {"url": item.url, "is_reusable": True},
                        }
                    }
                )

        if message.quick_replies:
            if not payloads:
                payloads.append({"text": profile.GREETING_TEXT})
            payloads[-1]["quick_replies"] = [q.to_dict() for q in message.quick_replies]

        return payloads

    def to_web_payload(self, message: OutboundMessage) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"text": self.full_text(message)}

        image = message.media_of("image")
        if image is not None:
            payload["imageUrl"] = image.as_data_uri() if image.is_inline else image.url

        audio = message.media_of("audio")
        if audio is not None:
            payload["audioUrl"] = audio.as_data_uri() if audio.is_inline else audio.url

        if message.citations:
            payload["groundingUrls"] = [c.to_dict() for c in message.citations]
        if message.notes:
            payload["notes"] = list(message.notes)

        return payload
