"""Tests for the Gemini client wrapper."""

from __future__ import annotations

import io
import wave
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from postcraft.config import Settings
from postcraft.content import Media
from postcraft.errors import ConfigurationError, GenerationError, NoEditedImage
from postcraft.generation.gemini import GeminiClient, extract_citations


def _inline_response(data: bytes, mime_type: str) -> SimpleNamespace:
    part = SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime_type), text=None)
    return SimpleNamespace(
        text=None,
        candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]), grounding_metadata=None)],
    )


def _text_response(text: str, chunks=None) -> SimpleNamespace:
    metadata = SimpleNamespace(grounding_chunks=chunks) if chunks is not None else None
    part = SimpleNamespace(inline_data=None, text=text)
    return SimpleNamespace(
        text=text,
        candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]), grounding_metadata=metadata)],
    )


def _client(response) -> tuple[GeminiClient, MagicMock]:
    genai_client = MagicMock()
    if isinstance(response, Exception):
        genai_client.models.generate_content.side_effect = response
    else:
        genai_client.models.generate_content.return_value = response
    return GeminiClient(Settings(gemini_api_key="k"), client=genai_client), genai_client


class TestGenerateText:
    def test_plain(self):
        client, genai_client = _client(_text_response("  Hello there  "))

        result = client.generate_text("hi")

        assert result.text == "Hello there"
        assert result.citations == []
        kwargs = genai_client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"
        assert kwargs["contents"] == "hi"
        assert kwargs["config"] is None

    def test_grounded_uses_search_tool_and_returns_citations(self):
        chunks = [
            SimpleNamespace(web=SimpleNamespace(uri="https://a.example", title="A"), maps=None),
            SimpleNamespace(web=None, maps=SimpleNamespace(uri="https://maps.example/x", title="Cafe")),
        ]
        client, genai_client = _client(_text_response("News", chunks))

        result = client.generate_text("news?", grounded=True)

        config = genai_client.models.generate_content.call_args.kwargs["config"]
        assert config.tools[0].google_search is not None
        assert [c.uri for c in result.citations] == ["https://a.example", "https://maps.example/x"]

    def test_empty_text_is_error(self):
        client, _ = _client(_text_response(""))
        with pytest.raises(GenerationError):
            client.generate_text("hi")

    def test_vendor_exception_is_wrapped(self):
        client, _ = _client(RuntimeError("429 RESOURCE_EXHAUSTED"))
        with pytest.raises(GenerationError, match="429"):
            client.generate_text("hi")


class TestSpeech:
    def test_pcm_is_wrapped_in_wav(self):
        pcm = b"\x00\x01" * 2400
        client, genai_client = _client(_inline_response(pcm, "audio/L16;rate=24000"))

        media = client.synthesize_speech("read me", voice="Kore")

        assert media.mime_type == "audio/wav"
        with wave.open(io.BytesIO(media.raw_bytes())) as wav:
            assert wav.getframerate() == 24000
            assert wav.getnchannels() == 1
            assert wav.getsampwidth() == 2
            assert wav.readframes(wav.getnframes()) == pcm

        kwargs = genai_client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash-preview-tts"
        voice = kwargs["config"].speech_config.voice_config.prebuilt_voice_config.voice_name
        assert voice == "Kore"

    def test_no_audio_is_error(self):
        client, _ = _client(_text_response("no audio"))
        with pytest.raises(GenerationError):
            client.synthesize_speech("read me")


class TestImages:
    def test_generate_image(self):
        client, genai_client = _client(_inline_response(b"png-bytes", "image/png"))

        media = client.generate_image("a lighthouse")

        assert media.raw_bytes() == b"png-bytes"
        config = genai_client.models.generate_content.call_args.kwargs["config"]
        assert config.image_config.aspect_ratio == "9:16"

    def test_edit_image_sends_image_then_prompt(self):
        client, genai_client = _client(_inline_response(b"edited", "image/png"))

        media = client.edit_image(Media.from_bytes(b"orig", "image/jpeg"), "add a hat")

        assert media.raw_bytes() == b"edited"
        contents = genai_client.models.generate_content.call_args.kwargs["contents"]
        assert contents[0].inline_data.data == b"orig"
        assert contents[0].inline_data.mime_type == "image/jpeg"
        assert contents[1] == "add a hat"

    def test_edit_without_image_part(self):
        client, _ = _client(_text_response("I can't do that"))
        with pytest.raises(NoEditedImage):
            client.edit_image(Media.from_bytes(b"orig", "image/jpeg"), "add a hat")


class TestClientCreation:
    def test_missing_key(self):
        with pytest.raises(ConfigurationError, match="GEMINI_API_KEY"):
            GeminiClient(Settings()).generate_text("hi")

    def test_client_is_created_once(self):
        with patch("postcraft.generation.gemini.genai") as mock_genai:
            mock_genai.Client.return_value.models.generate_content.return_value = _text_response("ok")
            client = GeminiClient(Settings(gemini_api_key="k"))
            client.generate_text("a")
            client.generate_text("b")

        mock_genai.Client.assert_called_once_with(api_key="k")


def test_extract_citations_without_metadata():
    assert extract_citations(SimpleNamespace(candidates=[])) == []
