"""
File: postcraft/web/routes.py

Project: PostCraft Messenger Assistant

Purpose:
JSON endpoints used by the browser app.

Endpoints:
- POST /publish        publish text and/or a data-URI image to the Page
- POST /api/generate   server-side Gemini proxy (the API key never reaches
                       the browser)
- GET|POST|DELETE /api/schedule   local reminder list of posts to publish later

Design rules:
- No sender and no pending post; publishing is explicit
- Media always comes back inline as data URIs
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from postcraft.config import Settings
from postcraft.content import Media
from postcraft.dependencies import (
    get_publisher,
    get_schedule_book,
    get_settings,
    get_web_orchestrator,
)
from postcraft.errors import GenerationError, PublishError, ValidationError
from postcraft.intents import CreateStory, DailyPost, EditImage, PostType, Theme
from postcraft.outbound.publisher import PagePublisher
from postcraft.scheduling import ScheduleBook, ScheduledPost
from postcraft.services.assembler import WEB, ResponseAssembler
from postcraft.services.orchestrator import GenerationOrchestrator

router = APIRouter(tags=["web"])
logger = logging.getLogger("web")

FEATURES = ("textGeneration", "imageEdit", "imageGeneration", "dailyPost", "createStory")


async def _json_body(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except (ValueError, UnicodeDecodeError) as exc:
        raise ValidationError("Invalid JSON payload") from exc
    if not isinstance(body, dict):
        raise ValidationError("JSON body must be an object")
    return body


def _failure(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


# -------------------------------------------------------------------
# Publish
# -------------------------------------------------------------------
@router.post("/publish")
def publish(
    settings: Settings = Depends(get_settings),
    publisher: PagePublisher = Depends(get_publisher),
    body: Dict[str, Any] = Depends(_json_body),
):
    settings.require("page_access_token", "page_id")

    text = body.get("text")
    image_url = body.get("imageUrl")
    logger.info("Publish request (text=%s, image=%s)", bool(text), bool(image_url))

    if not text and not image_url:
        return _failure(400, "No text or image content provided for publishing.")

    try:
        image = Media.from_data_uri(image_url) if image_url else None
    except ValidationError as exc:
        return _failure(400, str(exc))

    try:
        result = publisher.publish(text, image)
    except PublishError as exc:
        logger.error("Publish failed: %s", exc)
        return _failure(500, str(exc))

    return {"success": True, "postId": result.post_id}


# -------------------------------------------------------------------
# Generation proxy
# -------------------------------------------------------------------
def _parse_theme(value: Any) -> Theme:
    if not value:
        return Theme.INSPIRATIONAL
    try:
        return Theme(str(value).lower())
    except ValueError as exc:
        raise ValidationError(f"Unknown theme: {value}") from exc


def _parse_post_type(value: Any) -> PostType:
    if not value:
        return PostType.STORY_REEL
    normalised = str(value).replace("-", "_").lower()
    aliases = {"storyreel": PostType.STORY_REEL, "regularpost": PostType.REGULAR_POST}
    if normalised in aliases:
        return aliases[normalised]
    try:
        return PostType(normalised)
    except ValueError as exc:
        raise ValidationError(f"Unknown post type: {value}") from exc


def _parse_image_file(value: Any) -> Media:
    if not isinstance(value, dict) or not value.get("base64Data") or not value.get("mimeType"):
        raise ValidationError("Image file data is missing for editing.")
    return Media.from_base64(str(value["base64Data"]), value["mimeType"])


@router.post("/api/generate")
def generate(
    settings: Settings = Depends(get_settings),
    orchestrator: GenerationOrchestrator = Depends(get_web_orchestrator),
    body: Dict[str, Any] = Depends(_json_body),
):
    feature = body.get("feature")
    if feature not in FEATURES:
        raise ValidationError("Unsupported Gemini feature requested.")

    settings.require("gemini_api_key")

    prompt = (body.get("prompt") or "").strip()
    logger.info("Generate request: %s (%s)", feature, prompt[:50])

    try:
        if feature == "textGeneration":
            if not prompt:
                raise ValidationError("A prompt is required.")
            reply = orchestrator.generate_text(
                prompt,
                grounded=bool(body.get("useGoogleSearch")),
                tts=bool(body.get("enableTTS")),
                voice=body.get("voiceName"),
            )
        elif feature == "imageEdit":
            image = _parse_image_file(body.get("imageFile"))
            if not prompt:
                raise ValidationError("A prompt is required.")
            reply = orchestrator.run(EditImage(prompt=prompt, source=image))
        elif feature == "imageGeneration":
            if not prompt:
                raise ValidationError("A prompt is required.")
            reply = orchestrator.generate_image(prompt)
        elif feature == "dailyPost":
            reply = orchestrator.run(
                DailyPost(
                    theme=_parse_theme(body.get("theme")),
                    post_type=_parse_post_type(body.get("postType")),
                    tts=bool(body.get("enableTTS")),
                )
            )
        else:
            reply = orchestrator.run(
                CreateStory(
                    theme=_parse_theme(body.get("theme")),
                    tts=bool(body.get("enableTTS", True)),
                    song_suggestion=bool(body.get("songSuggestion")),
                    idea=prompt,
                )
            )
    except GenerationError as exc:
        logger.error("Generation failed for %s: %s", feature, exc)
        return _failure(500, exc.user_message)

    assembler = ResponseAssembler()
    return assembler.to_web_payload(assembler.assemble(reply, WEB))


# -------------------------------------------------------------------
# Local schedule (reminder list, nothing is auto-posted)
# -------------------------------------------------------------------
def _parse_scheduled_at(value: Any) -> datetime:
    if not value:
        raise ValidationError("Please select a scheduled date/time.")
    try:
        when = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError as exc:
        raise ValidationError(f"Invalid scheduled date/time: {value}") from exc
    return when if when.tzinfo else when.replace(tzinfo=timezone.utc)


@router.get("/api/schedule")
def list_scheduled(book: ScheduleBook = Depends(get_schedule_book)):
    return [p.to_dict() for p in book.list()]


@router.post("/api/schedule")
def schedule_post(
    book: ScheduleBook = Depends(get_schedule_book),
    body: Dict[str, Any] = Depends(_json_body),
):
    post = ScheduledPost.from_message(
        message_id=body.get("messageId") or "",
        scheduled_at=_parse_scheduled_at(body.get("scheduledAt")),
        text=body.get("text") or "",
        image_url=body.get("imageUrl"),
        video_url=body.get("videoUrl"),
        audio_url=body.get("audioUrl"),
    )
    posts = book.add(post)
    return {"scheduled": post.to_dict(), "posts": [p.to_dict() for p in posts]}


@router.delete("/api/schedule")
def clear_scheduled(book: ScheduleBook = Depends(get_schedule_book)):
    return {"cleared": book.clear()}
