from __future__ import annotations

import hashlib
from typing import Any

from .base import SpeechProvider, SpeechResult, VoiceOptions

# Roughly 150 spoken words per minute at speed 1.0.
_WORDS_PER_SECOND = 2.5


class StubSpeechProvider(SpeechProvider):
    """
    Deterministic provider for tests/dev when no speech API is configured.
    """

    name = "stub"

    async def synthesize(self, text: str, options: VoiceOptions) -> SpeechResult:
        digest = hashlib.sha256(f"{options.voice_id}:{text}".encode("utf-8")).hexdigest()[:16]
        words = len((text or "").split())
        duration = round(words / (_WORDS_PER_SECOND * (options.speed or 1.0)), 2)
        return SpeechResult(audio_url=f"stub://speech/{digest}.{options.audio_format}", duration=duration)

    async def list_voices(self) -> list[dict[str, Any]]:
        return [
            {"voiceId": "en-IN-male-1", "displayName": "Stub (en-IN, male)", "locale": "en-IN"},
            {"voiceId": "en-IN-female-1", "displayName": "Stub (en-IN, female)", "locale": "en-IN"},
        ]
