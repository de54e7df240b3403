"""Tests for webhook event parsing and content value objects."""

from __future__ import annotations

import pytest

from postcraft.content import Media
from postcraft.errors import ValidationError
from postcraft.events import iter_messaging_items, parse_messaging_event


class TestParseMessagingEvent:
    def test_text_attachments_and_quick_reply(self):
        event = parse_messaging_event(
            {
                "sender": {"id": 42},
                "message": {
                    "text": "edit this image: add a hat",
                    "attachments": [
                        {"type": "image", "payload": {"url": "https://cdn.example/p.png?x=1"}},
                        {"type": "audio", "payload": {"url": "https://cdn.example/a"}},
                    ],
                    "quick_reply": {"payload": "chat"},
                },
            }
        )

        assert event.sender_id == "42"
        assert event.text == "edit this image: add a hat"
        assert event.quick_reply == "chat"
        assert event.has_image
        assert event.first_image.mime_type == "image/png"
        assert event.attachments[1].mime_type == "application/octet-stream"

    def test_image_without_extension_defaults_to_jpeg(self):
        event = parse_messaging_event(
            {"sender": {"id": "1"}, "message": {"attachments": [{"type": "image", "payload": {"url": "https://x/y"}}]}}
        )
        assert event.first_image.mime_type == "image/jpeg"

    def test_missing_sender(self):
        with pytest.raises(ValidationError):
            parse_messaging_event({"message": {"text": "hi"}})

    def test_iter_preserves_order(self):
        body = {"entry": [{"messaging": [{"n": 1}, {"n": 2}]}, {"messaging": [{"n": 3}]}, {}]}
        assert [i["n"] for i in iter_messaging_items(body)] == [1, 2, 3]


class TestMedia:
    def test_data_uri_roundtrip_parse(self):
        media = Media.from_data_uri("data:image/png;base64,aGVsbG8=")
        assert media.mime_type == "image/png"
        assert media.raw_bytes() == b"hello"
        assert media.kind == "image"

    @pytest.mark.parametrize(
        "uri",
        ["", "http://x/y.png", "data:image/png,plain", "data:;base64,aGVsbG8=", "data:image/png;base64,%%%"],
    )
    def test_bad_data_uri(self, uri):
        with pytest.raises(ValidationError):
            Media.from_data_uri(uri)

    def test_unknown_major_type_is_file(self):
        assert Media(mime_type="application/pdf", url="https://x").kind == "file"
