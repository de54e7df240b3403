"""
File: postcraft/main.py

Project: PostCraft Messenger Assistant

Purpose:
Application entry point.
Responsible only for:
- Logging setup
- FastAPI app creation
- Router registration
- Messenger webhook verification (GET)
- Mapping application errors to HTTP status codes

Design principles:
- No business logic in this file
- No database access
- All inbound Messenger processing is delegated to postcraft.webhooks
- POST /webhook is defined exactly once via router inclusion
"""

import logging
import os

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from postcraft.config import Settings
from postcraft.dependencies import get_settings
from postcraft.errors import (
    ConfigurationError,
    PersistenceError,
    ValidationError,
    VerificationError,
)
from postcraft.health import router as health_router
from postcraft.privacy import router as privacy_router
from postcraft.web.routes import router as web_router
from postcraft.webhooks import router as webhooks_router

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("main")

app = FastAPI(title="PostCraft Messenger Assistant")

# -------------------------------------------------------------------
# Webhook routes (POST /webhook)
# -------------------------------------------------------------------
app.include_router(webhooks_router)

# -------------------------------------------------------------------
# Browser API, data deletion, health
# -------------------------------------------------------------------
app.include_router(web_router)
app.include_router(privacy_router)
app.include_router(health_router)


# -------------------------------------------------------------------
# Messenger webhook verification (GET)
# -------------------------------------------------------------------
def _param(params, name: str):
    return params.get(f"hub.{name}") or params.get(name)


@app.get("/webhook", response_class=PlainTextResponse)
def verify_webhook(request: Request, settings: Settings = Depends(get_settings)):
    settings.require("verify_token")
    params = request.query_params

    mode = _param(params, "mode")
    token = _param(params, "verify_token")
    challenge = _param(params, "challenge")

    if mode == "subscribe" and token == settings.verify_token and challenge:
        logger.info("Webhook verified")
        return challenge

    raise VerificationError("Webhook verification failed")


# -------------------------------------------------------------------
# Error mapping
# -------------------------------------------------------------------
def _error(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": str(exc)})


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error("Configuration error on %s: %s", request.url.path, exc)
    return _error(500, exc)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    logger.warning("Rejected %s: %s", request.url.path, exc)
    return _error(400, exc)


@app.exception_handler(VerificationError)
async def verification_error_handler(request: Request, exc: VerificationError):
    logger.warning("Verification failed on %s: %s", request.url.path, exc)
    return _error(403, exc)


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.error("Storage failure on %s: %s", request.url.path, exc)
    return _error(500, exc)
