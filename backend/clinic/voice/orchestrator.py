from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, replace
from typing import Callable

from clinic.voice.context import ContextAggregator
from clinic.voice.intents import Intent, classify
from clinic.voice.speech.base import SpeechProvider, VoiceOptions
from clinic.voice.synthesizer import ResponseSynthesizer


_logger = logging.getLogger(__name__)

APOLOGY_TEXT = (
    "I'm having trouble accessing your account information right now. "
    "Please try again in a moment."
)


@dataclass(frozen=True)
class VoiceResponse:
    intent: Intent
    text: str
    audio_url: str | None = None
    duration: float | None = None


class QueryOrchestrator:
    """
    Runs one utterance through classify -> aggregate -> synthesize -> speech.

    `handle` never raises for pipeline failures: they come back as the fixed
    apology with intent GENERAL. A speech failure only drops the audio fields.
    The instance keeps no per-request state and is shared across requests.
    """

    def __init__(
        self,
        *,
        aggregator: ContextAggregator,
        synthesizer: ResponseSynthesizer,
        speech: SpeechProvider,
        voice_options: VoiceOptions | None = None,
        classifier: Callable[[str], Intent] = classify,
    ) -> None:
        self._aggregator = aggregator
        self._synthesizer = synthesizer
        self._speech = speech
        self._voice_options = voice_options or VoiceOptions()
        self._classify = classifier

    async def handle(
        self,
        user_id: int,
        utterance: str,
        *,
        include_audio: bool = True,
        voice_id: str | None = None,
    ) -> VoiceResponse:
        start = time.time()
        try:
            # Scheduled only; the fetches start at the await, after classification returns.
            aggregation = asyncio.create_task(self._aggregator.aggregate(user_id))
            try:
                intent = self._classify(utterance)
                bundle = await aggregation
            finally:
                if not aggregation.done():
                    aggregation.cancel()

            if bundle.all_failed:
                _logger.error("voice query degraded user_id=%s reason=context_unavailable", user_id)
                return VoiceResponse(intent=Intent.GENERAL, text=APOLOGY_TEXT)
            text = self._synthesizer.synthesize(intent, utterance, bundle)
        except Exception:
            _logger.exception("voice query failed user_id=%s", user_id)
            return VoiceResponse(intent=Intent.GENERAL, text=APOLOGY_TEXT)

        audio_url: str | None = None
        duration: float | None = None
        if include_audio:
            options = replace(self._voice_options, voice_id=voice_id) if voice_id else self._voice_options
            try:
                speech = await self._speech.synthesize(text, options)
                audio_url = speech.audio_url
                duration = speech.duration
            except Exception as exc:
                _logger.warning(
                    "speech synthesis failed user_id=%s provider=%s error=%s",
                    user_id,
                    getattr(self._speech, "name", "unknown"),
                    exc,
                )

        elapsed_ms = int((time.time() - start) * 1000)
        _logger.info(
            "voice query user_id=%s intent=%s chars=%s audio=%s ms=%s",
            user_id,
            intent.value,
            len(text),
            audio_url is not None,
            elapsed_ms,
        )
        return VoiceResponse(intent=intent, text=text, audio_url=audio_url, duration=duration)
