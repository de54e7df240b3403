"""
File: postcraft/scheduling.py

Project: PostCraft Messenger Assistant

Purpose:
Local reminder list of posts the user intends to publish later.

Rules:
- Nothing is ever posted automatically; this is a list, not a scheduler
- Entries are kept sorted by scheduled time
- Entries never expire; the list is cleared in bulk
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from postcraft.errors import PersistenceError, ValidationError

logger = logging.getLogger("scheduling")

CONTENT_TYPES = ("text", "image", "video", "audio")


def _preview(prefix: str, text: str) -> str:
    return f"{prefix}: {text[:30]}..."


@dataclass(frozen=True)
class ScheduledPost:
    message_id: str
    scheduled_at: datetime
    content_type: str
    preview: str
    original_content: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @classmethod
    def from_message(
        cls,
        *,
        message_id: str,
        scheduled_at: datetime,
        text: str = "",
        image_url: Optional[str] = None,
        video_url: Optional[str] = None,
        audio_url: Optional[str] = None,
    ) -> "ScheduledPost":
        """
        Media wins over text: the first of image, video, audio becomes the
        scheduled content and the preview is labelled with its kind.
        """
        if not message_id:
            raise ValidationError("A message id is required to schedule a post.")

        for content_type, url in (("image", image_url), ("video", video_url), ("audio", audio_url)):
            if url:
                return cls(
                    message_id=message_id,
                    scheduled_at=scheduled_at,
                    content_type=content_type,
                    preview=_preview(content_type.capitalize(), text),
                    original_content=url,
                )

        if not text:
            raise ValidationError("Nothing to schedule: the message has no content.")

        preview = text[:50] + ("..." if len(text) > 50 else "")
        return cls(
            message_id=message_id,
            scheduled_at=scheduled_at,
            content_type="text",
            preview=preview,
            original_content=text,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["scheduled_at"] = self.scheduled_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScheduledPost":
        content_type = data.get("content_type")
        if content_type not in CONTENT_TYPES:
            raise ValidationError(f"Unknown content type: {content_type}")
        return cls(
            id=data["id"],
            message_id=data["message_id"],
            scheduled_at=datetime.fromisoformat(data["scheduled_at"]),
            content_type=content_type,
            preview=data.get("preview", ""),
            original_content=data.get("original_content", ""),
        )


_LOCKS: Dict[str, threading.Lock] = {}
_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    # One lock per file, shared by every ScheduleBook pointing at it
    key = str(path.resolve())
    with _LOCKS_GUARD:
        return _LOCKS.setdefault(key, threading.Lock())


class ScheduleBook:
    """
    JSON-file backed list of ScheduledPost, sorted by scheduled_at.
    A missing file is an empty book. A corrupt file is an error, never
    silently replaced.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = _lock_for(self._path)

    def _load(self) -> List[ScheduledPost]:
        if not self._path.exists():
            return []
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8") or "[]")
            return [ScheduledPost.from_dict(item) for item in raw]
        except (ValueError, KeyError, TypeError) as exc:
            logger.exception("Schedule file %s is corrupt", self._path)
            raise PersistenceError(f"Schedule file {self._path} is corrupt.") from exc

    def _save(self, posts: List[ScheduledPost]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, prefix=f".{self._path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump([p.to_dict() for p in posts], fh, indent=2)
            os.replace(tmp, self._path)
        except OSError as exc:
            Path(tmp).unlink(missing_ok=True)
            raise PersistenceError(f"Could not write schedule file {self._path}.") from exc

    def list(self) -> List[ScheduledPost]:
        with self._lock:
            return self._load()

    def add(self, post: ScheduledPost) -> List[ScheduledPost]:
        with self._lock:
            posts = self._load()
            posts.append(post)
            posts.sort(key=lambda p: p.scheduled_at)
            self._save(posts)
        logger.info("Scheduled %s post for %s", post.content_type, post.scheduled_at.isoformat())
        return posts

    def clear(self) -> int:
        with self._lock:
            try:
                count = len(self._load())
            except PersistenceError:
                # Clearing is how a corrupt file gets reset
                count = 0
            if self._path.exists():
                self._path.unlink()
        logger.info("Cleared %s scheduled post(s)", count)
        return count
