"""
File: postcraft/outbound/factory.py
Path: postcraft/outbound/factory.py

Project: PostCraft Messenger Assistant

Purpose:
- Provide a single place to construct outbound clients
- Reuse one instance of each per process (singleton-style), so HTTP
  sessions and the Gemini client keep their connection pools

Design rules:
- No business logic here
- Only construction / wiring
"""

from __future__ import annotations

import threading

from postcraft.config import Settings, load_settings
from postcraft.generation.gemini import GeminiClient
from postcraft.media.fetcher import MediaFetcher
from postcraft.outbound.messenger import MessengerClient
from postcraft.outbound.publisher import PagePublisher

_lock = threading.Lock()

_settings: Settings | None = None
_messenger_client: MessengerClient | None = None
_page_publisher: PagePublisher | None = None
_media_fetcher: MediaFetcher | None = None
_gemini_client: GeminiClient | None = None


# -------------------------------------------------
# Settings singleton
# -------------------------------------------------
def get_settings() -> Settings:
    global _settings
    if _settings is None:
        with _lock:
            if _settings is None:
                _settings = load_settings()
    return _settings


# -------------------------------------------------
# Client singletons
# -------------------------------------------------
def get_messenger_client() -> MessengerClient:
    global _messenger_client
    if _messenger_client is None:
        _messenger_client = MessengerClient(settings=get_settings())
    return _messenger_client


def get_page_publisher() -> PagePublisher:
    global _page_publisher
    if _page_publisher is None:
        _page_publisher = PagePublisher(settings=get_settings())
    return _page_publisher


def get_media_fetcher() -> MediaFetcher:
    global _media_fetcher
    if _media_fetcher is None:
        _media_fetcher = MediaFetcher()
    return _media_fetcher


def get_gemini_client() -> GeminiClient:
    global _gemini_client
    if _gemini_client is None:
        _gemini_client = GeminiClient(settings=get_settings())
    return _gemini_client


def reset_clients() -> None:
    """Forget every cached instance (tests, config reload)."""
    global _settings, _messenger_client, _page_publisher, _media_fetcher, _gemini_client
    with _lock:
        _settings = None
        _messenger_client = None
        _page_publisher = None
        _media_fetcher = None
        _gemini_client = None
