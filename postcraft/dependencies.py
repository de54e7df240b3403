"""
FastAPI dependency providers.

Routes never construct adapters themselves; they ask for them here so
tests can swap any of them via app.dependency_overrides.
"""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.orm import Session

from postcraft.config import Settings
from postcraft.db import get_db
from postcraft.generation.gemini import GeminiClient
from postcraft.media.fetcher import MediaFetcher
from postcraft.outbound import factory
from postcraft.outbound.messenger import MessengerClient
from postcraft.outbound.publisher import PagePublisher
from postcraft.scheduling import ScheduleBook
from postcraft.services.orchestrator import GenerationOrchestrator
from postcraft.services.state_store import StateStore
from postcraft.services.webhook_processor import WebhookProcessor


def get_settings() -> Settings:
    return factory.get_settings()


def get_backend() -> GeminiClient:
    return factory.get_gemini_client()


def get_messenger() -> MessengerClient:
    return factory.get_messenger_client()


def get_publisher() -> PagePublisher:
    return factory.get_page_publisher()


def get_fetcher() -> MediaFetcher:
    return factory.get_media_fetcher()


def get_state_store(db: Session = Depends(get_db)) -> StateStore:
    return StateStore(db)


def get_orchestrator(
    settings: Settings = Depends(get_settings),
    backend: GeminiClient = Depends(get_backend),
    store: StateStore = Depends(get_state_store),
    publisher: PagePublisher = Depends(get_publisher),
    fetcher: MediaFetcher = Depends(get_fetcher),
) -> GenerationOrchestrator:
    return GenerationOrchestrator(
        backend,
        store=store,
        publisher=publisher,
        fetcher=fetcher,
        voice=settings.tts_voice,
    )


def get_web_orchestrator(
    settings: Settings = Depends(get_settings),
    backend: GeminiClient = Depends(get_backend),
) -> GenerationOrchestrator:
    """Stateless orchestrator for the browser API (no sender, no drafts)."""
    return GenerationOrchestrator(backend, voice=settings.tts_voice)


def get_webhook_processor(
    store: StateStore = Depends(get_state_store),
    orchestrator: GenerationOrchestrator = Depends(get_orchestrator),
    messenger: MessengerClient = Depends(get_messenger),
) -> WebhookProcessor:
    return WebhookProcessor(store=store, orchestrator=orchestrator, messenger=messenger)


def get_schedule_book(settings: Settings = Depends(get_settings)) -> ScheduleBook:
    return ScheduleBook(settings.schedule_file)
