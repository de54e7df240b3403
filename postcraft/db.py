"""
PostCraft Messenger Assistant
Database module (single-file)

Provides:
- a lazily created SQLAlchemy engine, built once per process and reused
- get_db() generator for FastAPI dependency injection

The engine is the connection pool: pool_pre_ping drops dead connections and
pool_recycle reconnects idle ones, so long-lived workers survive database
restarts and idle timeouts.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from postcraft.config import Settings, load_settings
from postcraft.models import Base

logger = logging.getLogger("db")

POOL_RECYCLE_SECONDS = 1800

_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None
_lock = threading.Lock()


def _connect_args(url: str, timeout: int) -> dict:
    if url.startswith("postgresql"):
        return {"connect_timeout": timeout}
    if url.startswith("sqlite"):
        return {"timeout": timeout, "check_same_thread": False}
    return {}


def build_engine(settings: Settings) -> Engine:
    settings.require("database_url")
    url = settings.database_url
    engine = create_engine(
        url,
        pool_pre_ping=True,
        pool_recycle=POOL_RECYCLE_SECONDS,
        connect_args=_connect_args(url, settings.db_connect_timeout),
    )
    Base.metadata.create_all(engine)
    return engine


def get_engine() -> Engine:
    global _engine, _SessionLocal
    if _engine is None:
        with _lock:
            if _engine is None:
                logger.info("Creating database engine")
                _engine = build_engine(load_settings())
                _SessionLocal = sessionmaker(
                    autocommit=False,
                    autoflush=False,
                    bind=_engine,
                )
    return _engine


def get_sessionmaker() -> sessionmaker:
    get_engine()
    return _SessionLocal


def dispose_engine() -> None:
    """Drop the cached engine (shutdown hook, tests)."""
    global _engine, _SessionLocal
    with _lock:
        if _engine is not None:
            _engine.dispose()
        _engine = None
        _SessionLocal = None


def get_db():
    """
    FastAPI dependency:
    - opens a DB session
    - yields it to the request handler
    - always closes it afterwards
    """
    db = get_sessionmaker()()
    try:
        yield db
    finally:
        db.close()


def check_db_connection() -> None:
    with get_engine().connect() as conn:
        conn.execute(text("SELECT 1"))
