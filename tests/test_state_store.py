"""Tests for the SQLAlchemy-backed state store."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from postcraft.errors import PersistenceError
from postcraft.events import Attachment, InboundEvent
from postcraft.models import InboundMessage, PendingPost
from postcraft.services.state_store import StateStore

from tests.conftest import inline_image


def _event(sender_id: str = "u1", text: str = "hello") -> InboundEvent:
    return InboundEvent(
        sender_id=sender_id,
        text=text,
        attachments=(Attachment(kind="image", url="https://cdn.example/x.jpg", mime_type="image/jpeg"),),
        raw={"sender": {"id": sender_id}, "message": {"text": text}},
    )


class TestRecordInbound:
    def test_stores_event(self, store, db_session):
        store.record_inbound(_event())

        row = db_session.query(InboundMessage).one()
        assert row.sender_id == "u1"
        assert row.message_text == "hello"
        assert row.attachments == [
            {"type": "image", "url": "https://cdn.example/x.jpg", "mime_type": "image/jpeg"}
        ]
        assert row.full_event["message"]["text"] == "hello"

    def test_failure_is_swallowed(self):
        db = MagicMock()
        db.commit.side_effect = OperationalError("INSERT", {}, Exception("db down"))

        StateStore(db).record_inbound(_event())

        db.rollback.assert_called_once()


class TestPendingPost:
    def test_roundtrip_with_image(self, store):
        image = inline_image()
        store.set_pending("u1", "Draft", image)

        draft = store.get_pending("u1")
        assert draft.text == "Draft"
        assert draft.image == image

    def test_missing_is_none(self, store):
        assert store.get_pending("nobody") is None

    def test_last_write_wins(self, store, db_session):
        store.set_pending("u1", "first", inline_image())
        store.set_pending("u1", "second")

        assert db_session.query(PendingPost).count() == 1
        draft = store.get_pending("u1")
        assert draft.text == "second"
        assert draft.image is None

    def test_url_only_image_is_not_stored(self, store):
        from postcraft.content import Media

        store.set_pending("u1", "Draft", Media(mime_type="image/png", url="https://cdn.example/x.png"))
        assert store.get_pending("u1").image is None

    def test_clear(self, store):
        store.set_pending("u1", "Draft")
        assert store.clear_pending("u1") is True
        assert store.clear_pending("u1") is False
        assert store.get_pending("u1") is None

    def test_read_failure_raises(self):
        db = MagicMock()
        db.query.side_effect = OperationalError("SELECT", {}, Exception("db down"))

        with pytest.raises(PersistenceError):
            StateStore(db).get_pending("u1")
        db.rollback.assert_called_once()


class TestErasure:
    def test_deletes_only_that_sender(self, store, db_session):
        store.record_inbound(_event("u1", "a"))
        store.record_inbound(_event("u1", "b"))
        store.record_inbound(_event("u2", "c"))
        store.set_pending("u1", "Draft")
        store.set_pending("u2", "Other draft")

        assert store.delete_all_for_sender("u1") == 2

        assert db_session.query(InboundMessage).filter_by(sender_id="u1").count() == 0
        assert db_session.query(InboundMessage).filter_by(sender_id="u2").count() == 1
        assert store.get_pending("u1") is None
        assert store.get_pending("u2") is not None

    def test_unknown_sender_deletes_nothing(self, store):
        assert store.delete_all_for_sender("ghost") == 0
