"""Shared fixtures: in-memory database, fake vendors, wired TestClient."""

from __future__ import annotations

import base64
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from postcraft.config import Settings
from postcraft.content import Citation, Media
from postcraft.errors import GenerationError, PublishError
from postcraft.generation.gemini import TextResult
from postcraft.models import Base
from postcraft.outbound.messenger import SendResult
from postcraft.outbound.publisher import PublishResult
from postcraft.services.state_store import StateStore

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"
WAV_BYTES = b"RIFF....WAVEfake-audio"


def inline_image(raw: bytes = PNG_BYTES, mime: str = "image/png") -> Media:
    return Media.from_bytes(raw, mime)


class FakeBackend:
    """Scripted stand-in for GeminiClient. Records every call."""

    def __init__(
        self,
        *,
        text: str = "A generated story about courage.",
        citations: Optional[list] = None,
        fail: Optional[set] = None,
    ) -> None:
        self.text = text
        self.citations = citations or []
        self.fail = fail or set()
        self.calls: list[tuple] = []

    def _maybe_fail(self, step: str) -> None:
        if step in self.fail:
            raise GenerationError(f"{step} unavailable")

    def generate_text(self, prompt: str, *, grounded: bool = False) -> TextResult:
        self.calls.append(("text", prompt, grounded))
        self._maybe_fail("text")
        return TextResult(text=self.text, citations=list(self.citations))

    def synthesize_speech(self, text: str, *, voice: Optional[str] = None) -> Media:
        self.calls.append(("speech", text, voice))
        self._maybe_fail("speech")
        return Media.from_bytes(WAV_BYTES, "audio/wav")

    def generate_image(self, prompt: str, *, aspect_ratio: str = "9:16") -> Media:
        self.calls.append(("image", prompt, aspect_ratio))
        self._maybe_fail("image")
        return inline_image()

    def edit_image(self, image: Media, prompt: str) -> Media:
        self.calls.append(("edit", image, prompt))
        self._maybe_fail("edit")
        return inline_image(b"edited-bytes")

    def steps(self) -> list[str]:
        return [c[0] for c in self.calls]


class FakeMessenger:
    def __init__(self, ok: bool = True) -> None:
        self.ok = ok
        self.sent: list[tuple[str, dict]] = []

    def send_message(self, *, recipient_id: str, message: dict) -> SendResult:
        self.sent.append((recipient_id, message))
        return SendResult(ok=self.ok, status_code=200 if self.ok else 400, response_json={})

    def texts_for(self, recipient_id: str) -> list[str]:
        return [m["text"] for r, m in self.sent if r == recipient_id and "text" in m]


class FakePublisher:
    def __init__(self, error: Optional[str] = None, post_id: str = "123_456") -> None:
        self.error = error
        self.post_id = post_id
        self.published: list[tuple] = []

    def publish(self, text, image=None) -> PublishResult:
        self.published.append((text, image))
        if self.error:
            raise PublishError(self.error)
        return PublishResult(post_id=self.post_id)


class FakeFetcher:
    def __init__(self) -> None:
        self.fetched: list[str] = []

    def ensure_inline(self, media: Media) -> Media:
        if media.is_inline:
            return media
        self.fetched.append(media.url)
        return Media(mime_type=media.mime_type, data=base64.b64encode(PNG_BYTES).decode("ascii"))


# ---------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------
@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        gemini_api_key="test-gemini-key",
        verify_token="verify-me",
        page_access_token="page-token",
        page_id="1001",
        app_secret="app-secret",
        database_url="sqlite://",
        public_base_url="https://postcraft.example",
        schedule_file=str(tmp_path / "schedule.json"),
    )


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def store(db_session) -> StateStore:
    return StateStore(db_session)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend(citations=[Citation(uri="https://news.example/a", title="A")])


@pytest.fixture
def messenger() -> FakeMessenger:
    return FakeMessenger()


@pytest.fixture
def publisher() -> FakePublisher:
    return FakePublisher()


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def app_client(settings, db_session, backend, messenger, publisher, fetcher):
    from postcraft import dependencies
    from postcraft.db import get_db
    from postcraft.main import app

    def _db():
        yield db_session

    app.dependency_overrides.update(
        {
            dependencies.get_settings: lambda: settings,
            get_db: _db,
            dependencies.get_backend: lambda: backend,
            dependencies.get_messenger: lambda: messenger,
            dependencies.get_publisher: lambda: publisher,
            dependencies.get_fetcher: lambda: fetcher,
        }
    )
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
