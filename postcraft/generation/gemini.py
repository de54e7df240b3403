"""
File: postcraft/generation/gemini.py

Project: PostCraft Messenger Assistant

Purpose:
Thin synchronous client over the google-genai SDK.
Supports:
- Text generation (optionally grounded with Google Search)
- Text-to-speech (prebuilt voices, returned as WAV)
- Image generation from text
- Image editing (image + instruction in, image out)

Every vendor failure surfaces as GenerationError. Callers decide whether a
step is optional.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from google import genai
from google.genai import types

from postcraft.config import Settings
from postcraft.content import Citation, Media
from postcraft.errors import GenerationError, NoEditedImage
from postcraft.generation.audio import pcm_to_wav

logger = logging.getLogger("gemini")

PREBUILT_VOICES = ("Kore", "Puck", "Zephyr", "Charon", "Fenrir")
STORY_ASPECT_RATIO = "9:16"


@dataclass(frozen=True)
class TextResult:
    text: str
    citations: list[Citation] = field(default_factory=list)


def _first_parts(response: Any) -> list:
    candidates = getattr(response, "candidates", None) or []
    if not candidates or candidates[0].content is None:
        return []
    return list(candidates[0].content.parts or [])


def _first_inline_part(response: Any):
    for part in _first_parts(response):
        inline = getattr(part, "inline_data", None)
        if inline is not None and inline.data and inline.mime_type:
            return inline
    return None


def extract_citations(response: Any) -> list[Citation]:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    citations: list[Citation] = []
    for chunk in chunks:
        for source in (getattr(chunk, "web", None), getattr(chunk, "maps", None)):
            if source is not None and getattr(source, "uri", None):
                citations.append(Citation(uri=source.uri, title=getattr(source, "title", None)))
    return citations


class GeminiClient:
    def __init__(self, settings: Settings, client: Optional[genai.Client] = None) -> None:
        self._settings = settings
        self._client = client

    def _get_client(self) -> genai.Client:
        """Lazy-create and cache the genai Client."""
        if self._client is None:
            self._settings.require("gemini_api_key")
            self._client = genai.Client(api_key=self._settings.gemini_api_key)
        return self._client

    def _generate(self, *, what: str, model: str, contents: Any, config=None):
        try:
            return self._get_client().models.generate_content(
                model=model,
                contents=contents,
                config=config,
            )
        except Exception as exc:
            logger.exception("Gemini %s call failed", what)
            raise GenerationError(f"Gemini {what} failed: {exc}") from exc

    # ---------------------------------------------------------
    # TEXT
    # ---------------------------------------------------------
    def generate_text(self, prompt: str, *, grounded: bool = False) -> TextResult:
        config = None
        if grounded:
            config = types.GenerateContentConfig(
                tools=[types.Tool(google_search=types.GoogleSearch())],
            )

        response = self._generate(
            what="text generation",
            model=self._settings.text_model,
            contents=prompt,
            config=config,
        )

        text = (response.text or "").strip()
        if not text:
            raise GenerationError(
                "Gemini returned no text",
                user_message="I couldn't come up with anything for that. Please try again.",
            )

        return TextResult(text=text, citations=extract_citations(response))

    # ---------------------------------------------------------
    # SPEECH
    # ---------------------------------------------------------
    def synthesize_speech(self, text: str, *, voice: Optional[str] = None) -> Media:
        voice_name = voice or self._settings.tts_voice
        config = types.GenerateContentConfig(
            response_modalities=["AUDIO"],
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice_name),
                ),
            ),
        )

        response = self._generate(
            what="speech synthesis",
            model=self._settings.tts_model,
            contents=text,
            config=config,
        )

        inline = _first_inline_part(response)
        if inline is None:
            raise GenerationError("No audio data received from the TTS model")

        logger.info("Synthesized %d bytes of PCM with voice %s", len(inline.data), voice_name)
        return Media.from_bytes(pcm_to_wav(inline.data), "audio/wav")

    # ---------------------------------------------------------
    # IMAGES
    # ---------------------------------------------------------
    def generate_image(self, prompt: str, *, aspect_ratio: str = STORY_ASPECT_RATIO) -> Media:
        config = types.GenerateContentConfig(
            response_modalities=["TEXT", "IMAGE"],
            image_config=types.ImageConfig(aspect_ratio=aspect_ratio),
        )

        response = self._generate(
            what="image generation",
            model=self._settings.image_model,
            contents=prompt,
            config=config,
        )

        inline = _first_inline_part(response)
        if inline is None:
            raise GenerationError("No image generated")
        return Media.from_bytes(inline.data, inline.mime_type)

    def edit_image(self, image: Media, prompt: str) -> Media:
        contents = [
            types.Part.from_bytes(data=image.raw_bytes(), mime_type=image.mime_type),
            prompt,
        ]

        response = self._generate(
            what="image edit",
            model=self._settings.image_model,
            contents=contents,
        )

        inline = _first_inline_part(response)
        if inline is None:
            raise NoEditedImage("No edited image part found in the Gemini response")
        return Media.from_bytes(inline.data, inline.mime_type)
