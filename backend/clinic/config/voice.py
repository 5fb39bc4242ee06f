from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class VoiceConfig:
    bookings_limit: int = 10
    orders_limit: int = 10
    assistant_name: str = "Zen"
    currency_symbol: str = "₹"
    tts_provider: str = "murf"  # murf | stub
    voice_id: str = "en-IN-male-1"
    voice_speed: float = 1.0
    murf_api_key: str = ""
    murf_base_url: str = "https://api.murf.ai/v1"
    murf_timeout_s: float = 30.0


def _env_str(key: str) -> str | None:
    if key not in os.environ:
        return None
    val = (os.getenv(key) or "").strip()
    return val or None


def _env_int(key: str) -> int | None:
    if key not in os.environ:
        return None
    try:
        return int(os.getenv(key) or "")
    except Exception:
        return None


def _env_float(key: str) -> float | None:
    if key not in os.environ:
        return None
    try:
        return float(os.getenv(key) or "")
    except Exception:
        return None


@lru_cache(maxsize=1)
def get_voice_config() -> VoiceConfig:
    defaults = VoiceConfig()

    bookings_limit = _env_int("VOICE_BOOKINGS_LIMIT")
    orders_limit = _env_int("VOICE_ORDERS_LIMIT")
    voice_speed = _env_float("VOICE_SPEED")
    timeout_s = _env_float("MURF_TIMEOUT_SECONDS")

    tts_provider = (_env_str("TTS_PROVIDER") or defaults.tts_provider).lower()
    if tts_provider not in {"murf", "stub"}:
        tts_provider = defaults.tts_provider

    return VoiceConfig(
        bookings_limit=(bookings_limit if bookings_limit and bookings_limit > 0 else defaults.bookings_limit),
        orders_limit=(orders_limit if orders_limit and orders_limit > 0 else defaults.orders_limit),
        assistant_name=_env_str("VOICE_ASSISTANT_NAME") or defaults.assistant_name,
        currency_symbol=_env_str("VOICE_CURRENCY_SYMBOL") or defaults.currency_symbol,
        tts_provider=tts_provider,
        voice_id=_env_str("VOICE_ID") or defaults.voice_id,
        voice_speed=(voice_speed if voice_speed and voice_speed > 0 else defaults.voice_speed),
        murf_api_key=_env_str("MURF_API_KEY") or "",
        murf_base_url=(_env_str("MURF_BASE_URL") or defaults.murf_base_url).rstrip("/"),
        murf_timeout_s=(timeout_s if timeout_s and timeout_s > 0 else defaults.murf_timeout_s),
    )
