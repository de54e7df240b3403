"""
Wrap raw PCM speech output in a WAV container.

Gemini TTS returns headerless 16-bit little-endian PCM, mono, 24 kHz.
"""

from __future__ import annotations

import io
import wave

TTS_SAMPLE_RATE = 24000
TTS_CHANNELS = 1
TTS_SAMPLE_WIDTH = 2  # bytes, 16-bit


def pcm_to_wav(
    pcm: bytes,
    *,
    sample_rate: int = TTS_SAMPLE_RATE,
    channels: int = TTS_CHANNELS,
    sample_width: int = TTS_SAMPLE_WIDTH,
) -> bytes:
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wav:
        wav.setnchannels(channels)
        wav.setsampwidth(sample_width)
        wav.setframerate(sample_rate)
        wav.writeframes(pcm)
    return buf.getvalue()
