"""Tests for attachment download."""

from __future__ import annotations

import base64
from unittest.mock import MagicMock

import pytest
import requests

from postcraft.content import Media
from postcraft.errors import GenerationError
from postcraft.media.fetcher import MAX_ATTACHMENT_BYTES, MediaFetcher


def _response(content: bytes, content_type: str = "image/png", ok: bool = True) -> MagicMock:
    resp = MagicMock()
    resp.ok = ok
    resp.status_code = 200 if ok else 404
    resp.content = content
    resp.headers = {"Content-Type": content_type}
    return resp


class TestFetch:
    def test_returns_inline_media(self):
        session = MagicMock()
        session.get.return_value = _response(b"img", "image/png; charset=binary")

        media = MediaFetcher(session=session).fetch("https://cdn.example/x", "image/jpeg")

        assert media.mime_type == "image/png"
        assert media.data == base64.b64encode(b"img").decode("ascii")
        session.get.assert_called_once_with("https://cdn.example/x", timeout=30)

    def test_declared_mime_used_when_server_is_vague(self):
        session = MagicMock()
        session.get.return_value = _response(b"img", "application/octet-stream")

        media = MediaFetcher(session=session).fetch("https://cdn.example/x", "image/webp")
        assert media.mime_type == "image/webp"

    def test_network_error(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("boom")

        with pytest.raises(GenerationError) as exc_info:
            MediaFetcher(session=session).fetch("https://cdn.example/x")
        assert "download" in exc_info.value.user_message

    def test_bad_status(self):
        session = MagicMock()
        session.get.return_value = _response(b"", ok=False)

        with pytest.raises(GenerationError):
            MediaFetcher(session=session).fetch("https://cdn.example/x")

    def test_too_large(self):
        session = MagicMock()
        session.get.return_value = _response(b"x" * (MAX_ATTACHMENT_BYTES + 1))

        with pytest.raises(GenerationError, match="too large"):
            MediaFetcher(session=session).fetch("https://cdn.example/x")


class TestEnsureInline:
    def test_inline_media_untouched(self):
        session = MagicMock()
        media = Media.from_bytes(b"abc", "image/png")

        assert MediaFetcher(session=session).ensure_inline(media) is media
        session.get.assert_not_called()

    def test_url_media_is_fetched(self):
        session = MagicMock()
        session.get.return_value = _response(b"abc")

        media = MediaFetcher(session=session).ensure_inline(
            Media(mime_type="image/png", url="https://cdn.example/y")
        )
        assert media.is_inline
