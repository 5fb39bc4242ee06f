from __future__ import annotations

from functools import lru_cache

from clinic.config.voice import get_voice_config
from clinic.db import SessionLocal
from clinic.voice.context import ContextAggregator
from clinic.voice.orchestrator import QueryOrchestrator
from clinic.voice.speech.base import SpeechProvider, VoiceOptions
from clinic.voice.speech.murf import MurfSpeechProvider
from clinic.voice.speech.stub import StubSpeechProvider
from clinic.voice.store import SqlContextStore
from clinic.voice.synthesizer import ResponseSynthesizer


@lru_cache(maxsize=1)
def get_speech_provider() -> SpeechProvider:
    cfg = get_voice_config()
    if cfg.tts_provider == "stub":
        return StubSpeechProvider()
    if cfg.tts_provider == "murf":
        return MurfSpeechProvider(
            api_key=cfg.murf_api_key,
            base_url=cfg.murf_base_url,
            timeout_s=cfg.murf_timeout_s,
        )
    raise RuntimeError(f"Unsupported TTS_PROVIDER: {cfg.tts_provider}")


@lru_cache(maxsize=1)
def get_context_aggregator() -> ContextAggregator:
    cfg = get_voice_config()
    return ContextAggregator(
        SqlContextStore(SessionLocal),
        bookings_limit=cfg.bookings_limit,
        orders_limit=cfg.orders_limit,
    )


@lru_cache(maxsize=1)
def get_query_orchestrator() -> QueryOrchestrator:
    cfg = get_voice_config()
    return QueryOrchestrator(
        aggregator=get_context_aggregator(),
        synthesizer=ResponseSynthesizer(
            assistant_name=cfg.assistant_name,
            currency_symbol=cfg.currency_symbol,
        ),
        speech=get_speech_provider(),
        voice_options=VoiceOptions(voice_id=cfg.voice_id, speed=cfg.voice_speed),
    )
