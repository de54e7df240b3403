"""
File: postcraft/media/fetcher.py
Path: postcraft/media/fetcher.py

Purpose:
Download a Messenger attachment and turn it into inline (base64) Media
so it can be sent to the image-edit model.
"""

from __future__ import annotations

import logging
from typing import Optional
import requests

from postcraft.content import Media
from postcraft.errors import GenerationError

logger = logging.getLogger("media")

MAX_ATTACHMENT_BYTES = 20 * 1024 * 1024


class MediaFetcher:
    def __init__(self, session: Optional[requests.Session] = None) -> None:
        self._session = session or requests.Session()

    def fetch(self, url: str, mime_type: Optional[str] = None) -> Media:
        """
        Fetch `url` and return it base64 encoded.
        The server's Content-Type wins over the declared mime type.
        """
        logger.info("Fetching attachment from %s", url)
        try:
            resp = self._session.get(url, timeout=30)
        except requests.RequestException as exc:
            raise GenerationError(
                f"Failed to fetch attachment from {url}: {exc}",
                user_message="I couldn't download the image you sent. Please try sending it again.",
            ) from exc

        if not resp.ok:
            raise GenerationError(
                f"Failed to fetch attachment from {url} (status {resp.status_code})",
                user_message="I couldn't download the image you sent. Please try sending it again.",
            )

        if len(resp.content) > MAX_ATTACHMENT_BYTES:
            raise GenerationError(
                f"Attachment too large ({len(resp.content)} bytes)",
                user_message="That image is too large for me to edit. Please send a smaller one.",
            )

        content_type = (resp.headers.get("Content-Type") or "").split(";", 1)[0].strip()
        if not content_type.startswith("image/"):
            content_type = mime_type or "image/jpeg"

        return Media.from_bytes(resp.content, content_type)

    def ensure_inline(self, media: Media) -> Media:
        if media.is_inline:
            return media
        if not media.url:
            raise GenerationError("Media has neither inline data nor a URL")
        return self.fetch(media.url, media.mime_type)
