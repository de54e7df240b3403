"""Tests for the local schedule list."""

from __future__ import annotations

import threading
from datetime import datetime, timezone

import pytest

from postcraft.errors import PersistenceError, ValidationError
from postcraft.scheduling import ScheduleBook, ScheduledPost


def _at(day: int) -> datetime:
    return datetime(2026, 11, day, 9, 0, tzinfo=timezone.utc)


class TestScheduledPost:
    def test_short_text_preview(self):
        post = ScheduledPost.from_message(message_id="m1", scheduled_at=_at(1), text="Short one")
        assert post.content_type == "text"
        assert post.preview == "Short one"
        assert post.original_content == "Short one"

    def test_long_text_preview_is_truncated(self):
        text = "x" * 60
        post = ScheduledPost.from_message(message_id="m1", scheduled_at=_at(1), text=text)
        assert post.preview == "x" * 50 + "..."

    def test_media_takes_precedence(self):
        post = ScheduledPost.from_message(
            message_id="m1",
            scheduled_at=_at(1),
            text="A picture of the sea at dawn, golden light",
            image_url="data:image/png;base64,AAAA",
            audio_url="data:audio/wav;base64,BBBB",
        )
        assert post.content_type == "image"
        assert post.original_content == "data:image/png;base64,AAAA"
        assert post.preview == "Image: A picture of the sea at dawn, ..."

    def test_audio_preview(self):
        post = ScheduledPost.from_message(
            message_id="m1", scheduled_at=_at(1), text="Narration", audio_url="data:audio/wav;base64,BBBB"
        )
        assert post.preview == "Audio: Narration..."

    def test_empty_message_rejected(self):
        with pytest.raises(ValidationError):
            ScheduledPost.from_message(message_id="m1", scheduled_at=_at(1))


class TestScheduleBook:
    def test_missing_file_is_empty(self, tmp_path):
        assert ScheduleBook(tmp_path / "none.json").list() == []

    def test_kept_sorted_and_persisted(self, tmp_path):
        path = tmp_path / "schedule.json"
        book = ScheduleBook(path)
        book.add(ScheduledPost.from_message(message_id="late", scheduled_at=_at(20), text="late"))
        book.add(ScheduledPost.from_message(message_id="early", scheduled_at=_at(2), text="early"))

        reloaded = ScheduleBook(path).list()
        assert [p.message_id for p in reloaded] == ["early", "late"]
        assert reloaded[0].scheduled_at == _at(2)

    def test_clear_returns_count(self, tmp_path):
        book = ScheduleBook(tmp_path / "schedule.json")
        book.add(ScheduledPost.from_message(message_id="a", scheduled_at=_at(1), text="a"))
        book.add(ScheduledPost.from_message(message_id="b", scheduled_at=_at(2), text="b"))

        assert book.clear() == 2
        assert book.list() == []
        assert book.clear() == 0

    def test_concurrent_adds_through_separate_books(self, tmp_path):
        path = tmp_path / "schedule.json"

        def worker(n: int) -> None:
            book = ScheduleBook(path)
            for i in range(10):
                book.add(ScheduledPost.from_message(message_id=f"{n}-{i}", scheduled_at=_at(1 + i), text="x"))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(ScheduleBook(path).list()) == 80

    def test_corrupt_file_is_not_overwritten(self, tmp_path):
        path = tmp_path / "schedule.json"
        path.write_text("[{]", encoding="utf-8")
        book = ScheduleBook(path)

        with pytest.raises(PersistenceError):
            book.list()
        with pytest.raises(PersistenceError):
            book.add(ScheduledPost.from_message(message_id="a", scheduled_at=_at(1), text="a"))
        assert path.read_text(encoding="utf-8") == "[{]"

    def test_clear_resets_a_corrupt_file(self, tmp_path):
        path = tmp_path / "schedule.json"
        path.write_text("not json", encoding="utf-8")

        assert ScheduleBook(path).clear() == 0
        assert not path.exists()

    def test_no_temp_files_left_behind(self, tmp_path):
        book = ScheduleBook(tmp_path / "schedule.json")
        book.add(ScheduledPost.from_message(message_id="a", scheduled_at=_at(1), text="a"))
        assert [p.name for p in tmp_path.iterdir()] == ["schedule.json"]
