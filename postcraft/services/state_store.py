"""
File: postcraft/services/state_store.py
Project: PostCraft Messenger Assistant

Purpose:
State store adapter.

This is the ONLY place allowed to:
- record an inbound message
- read / write / clear a sender's pending post
- erase everything stored for a sender

Design rules:
- Audit writes never fail the request (logged and swallowed)
- Pending-post reads/writes raise PersistenceError (they decide what gets published)
- DB is source of truth
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from postcraft.content import Media
from postcraft.errors import PersistenceError
from postcraft.events import InboundEvent
from postcraft.models import InboundMessage, PendingPost

logger = logging.getLogger("state_store")


@dataclass(frozen=True)
class PendingDraft:
    sender_id: str
    text: str
    image: Optional[Media] = None


class StateStore:
    def __init__(self, db: Session) -> None:
        self._db = db

    # -------------------------------------------------
    # Audit
    # -------------------------------------------------
    def record_inbound(self, event: InboundEvent) -> None:
        try:
            self._db.add(
                InboundMessage(
                    sender_id=event.sender_id,
                    message_text=event.text,
                    attachments=[
                        {"type": a.kind, "url": a.url, "mime_type": a.mime_type}
                        for a in event.attachments
                    ],
                    quick_reply=event.quick_reply,
                    full_event=event.raw,
                    received_at=event.received_at,
                )
            )
            self._db.commit()
            logger.info("Stored inbound message from %s", event.sender_id)
        except SQLAlchemyError:
            self._db.rollback()
            logger.exception("Failed to store inbound message from %s", event.sender_id)

    # -------------------------------------------------
    # Pending post
    # -------------------------------------------------
    def _pending_row(self, sender_id: str) -> Optional[PendingPost]:
        return (
            self._db.query(PendingPost)
            .filter(PendingPost.sender_id == sender_id)
            .one_or_none()
        )

    def get_pending(self, sender_id: str) -> Optional[PendingDraft]:
        try:
            row = self._pending_row(sender_id)
        except SQLAlchemyError as exc:
            self._db.rollback()
            raise PersistenceError(f"Could not read pending post for {sender_id}") from exc

        if row is None:
            return None

        image = None
        if row.image_data:
            image = Media(mime_type=row.image_mime_type or "image/png", data=row.image_data)
        return PendingDraft(sender_id=row.sender_id, text=row.text, image=image)

    def set_pending(self, sender_id: str, text: str, image: Optional[Media] = None) -> None:
        """
        Upsert the sender's pending post. Last write wins.
        """
        image_data = image.data if image is not None and image.is_inline else None
        image_mime = image.mime_type if image_data else None

        try:
            row = self._pending_row(sender_id)
            if row is None:
                self._db.add(
                    PendingPost(
                        sender_id=sender_id,
                        text=text,
                        image_data=image_data,
                        image_mime_type=image_mime,
                    )
                )
            else:
                row.text = text
                row.image_data = image_data
                row.image_mime_type = image_mime
            self._db.commit()
        except SQLAlchemyError as exc:
            self._db.rollback()
            raise PersistenceError(f"Could not save pending post for {sender_id}") from exc

        logger.info("Pending post saved for %s (image=%s)", sender_id, bool(image_data))

    def clear_pending(self, sender_id: str) -> bool:
        """
        Returns:
            True  -> a pending post was removed
            False -> nothing was pending
        """
        try:
            deleted = (
                self._db.query(PendingPost)
                .filter(PendingPost.sender_id == sender_id)
                .delete(synchronize_session=False)
            )
            self._db.commit()
        except SQLAlchemyError as exc:
            self._db.rollback()
            raise PersistenceError(f"Could not clear pending post for {sender_id}") from exc
        return bool(deleted)

    # -------------------------------------------------
    # Erasure
    # -------------------------------------------------
    def delete_all_for_sender(self, sender_id: str) -> int:
        """
        Delete every stored record for a sender.
        Returns the number of inbound messages removed.
        """
        try:
            deleted = (
                self._db.query(InboundMessage)
                .filter(InboundMessage.sender_id == sender_id)
                .delete(synchronize_session=False)
            )
            self._db.query(PendingPost).filter(PendingPost.sender_id == sender_id).delete(
                synchronize_session=False
            )
            self._db.commit()
        except SQLAlchemyError as exc:
            self._db.rollback()
            raise PersistenceError(f"Could not erase data for {sender_id}") from exc

        logger.info("Deleted %s inbound messages for %s", deleted, sender_id)
        return int(deleted)
