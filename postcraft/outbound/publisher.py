"""
File: postcraft/outbound/publisher.py

Project: PostCraft Messenger Assistant

Purpose:
Publish content to the configured Facebook Page via the Graph API.
- Text only   -> JSON POST to /{page_id}/feed
- Text+image  -> multipart POST to /{page_id}/photos (image bytes as `source`)

Any non-2xx status or an `error` object in a 2xx body is a failure. The
vendor's error message is raised verbatim as PublishError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional
import requests

from postcraft.config import Settings
from postcraft.content import Media
from postcraft.errors import PublishError

logger = logging.getLogger("publisher")

_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
}


@dataclass(frozen=True)
class PublishResult:
    post_id: str


class PagePublisher:
    def __init__(
        self,
        settings: Settings,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._settings = settings
        self._session = session or requests.Session()

    def _page_url(self, edge: str) -> str:
        return f"{self._settings.graph_base_url}/{self._settings.page_id}/{edge}"

    @staticmethod
    def _parse(resp: requests.Response, fallback: str) -> Dict[str, Any]:
        try:
            data = resp.json()
        except ValueError:
            data = {"raw_text": resp.text}

        error = data.get("error") if isinstance(data, dict) else None
        if not (200 <= resp.status_code < 300) or error:
            message = error.get("message") if isinstance(error, dict) else error
            raise PublishError(message or fallback)
        return data

    def _post(self, edge: str, fallback: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            resp = self._session.post(self._page_url(edge), timeout=30, **kwargs)
        except requests.RequestException as exc:
            logger.error("Graph API request to /%s failed: %s", edge, exc)
            raise PublishError(str(exc) or fallback) from exc
        return self._parse(resp, fallback)

    def publish(self, text: Optional[str], image: Optional[Media] = None) -> PublishResult:
        if not text and image is None:
            raise PublishError("No text or image content provided for publishing.")

        self._settings.require("page_access_token", "page_id")
        params = {"access_token": self._settings.page_access_token}

        if image is not None:
            ext = _EXTENSIONS.get(image.mime_type, "png")
            data = self._post(
                "photos",
                "Failed to upload image to Facebook.",
                params=params,
                data={"message": text or "", "published": "true"},
                files={"source": (f"image.{ext}", image.raw_bytes(), image.mime_type)},
            )
        else:
            data = self._post(
                "feed",
                "Failed to create text post on Facebook.",
                params=params,
                json={"message": text},
            )

        post_id = data.get("id") or data.get("post_id")
        if not post_id:
            raise PublishError("Facebook did not return a post id.")

        logger.info("Published to page %s: %s", self._settings.page_id, post_id)
        return PublishResult(post_id=str(post_id))
