from __future__ import annotations  # Text-to-speech module

import io
import re
import wave

from config import LlmRoute
from llm_gateway import LlmGatewayError, LlmQuotaError, speech

from .errors import AnalysisError, QuotaExceeded

SAMPLE_RATE = 24000
SAMPLE_WIDTH = 2  # 16-bit PCM

_MARKDOWN_CHARS = re.compile(r"[*_#`]")


def speech_audio(text: str, *, route: LlmRoute) -> bytes:  # Synthesize raw 16-bit PCM for an utterance
    sanitized = sanitize(text)
    if not sanitized:
        raise AnalysisError("Nothing to synthesize")
    try:
        return speech(sanitized, cfg=route)
    except LlmQuotaError as exc:
        raise QuotaExceeded("Speech service quota exceeded") from exc
    except LlmGatewayError as exc:
        raise AnalysisError("Speech synthesis failed") from exc


def sanitize(text: str) -> str:
    """Strip markdown characters that upset the speech model."""
    return _MARKDOWN_CHARS.sub("", text).strip()


def to_wav(pcm: bytes, *, sample_rate: int = SAMPLE_RATE, channels: int = 1) -> bytes:
    """Wrap raw PCM in a WAV container the browser can play directly."""

    usable = len(pcm) - (len(pcm) % (SAMPLE_WIDTH * channels))
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as handle:
        handle.setnchannels(channels)
        handle.setsampwidth(SAMPLE_WIDTH)
        handle.setframerate(sample_rate)
        handle.writeframes(pcm[:usable])
    return buffer.getvalue()
