from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from .base import SpeechProvider, SpeechResult, SpeechSynthesisError, VoiceOptions


_logger = logging.getLogger(__name__)


def _raise_murf_error(res: httpx.Response) -> None:
    try:
        payload = res.json()
        msg = payload.get("errorMessage") or payload.get("message") or res.text
    except Exception:
        msg = res.text
    raise SpeechSynthesisError(res.status_code, str(msg))


class MurfSpeechProvider(SpeechProvider):
    """Text-to-speech over the Murf REST API."""

    name = "murf"

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = "https://api.murf.ai/v1",
        timeout_s: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = (api_key or "").strip()
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        if not self._api_key:
            raise SpeechSynthesisError(None, "MURF_API_KEY is not set")
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout_s,
            headers={"api-key": self._api_key},
            transport=self._transport,
        )

    async def synthesize(self, text: str, options: VoiceOptions) -> SpeechResult:
        start = time.time()
        try:
            async with self._client() as client:
                res = await client.post(
                    "/speech",
                    json={
                        "text": text,
                        "voiceId": options.voice_id,
                        "audioFormat": options.audio_format,
                        "speed": float(options.speed),
                        "pitch": float(options.pitch),
                        "sampleRate": int(options.sample_rate),
                    },
                )
        except httpx.HTTPError as exc:
            raise SpeechSynthesisError(None, str(exc)) from exc
        elapsed_ms = int((time.time() - start) * 1000)
        _logger.info("murf speech status=%s voice=%s ms=%s", res.status_code, options.voice_id, elapsed_ms)
        if res.status_code >= 400:
            _raise_murf_error(res)

        data = res.json()
        audio_url = data.get("audioFile")
        if not audio_url:
            raise SpeechSynthesisError(res.status_code, "response did not include an audio file")
        duration = data.get("audioLengthInSeconds", data.get("audioDuration"))
        return SpeechResult(
            audio_url=str(audio_url),
            duration=(float(duration) if duration is not None else None),
        )

    async def list_voices(self) -> list[dict[str, Any]]:
        try:
            async with self._client() as client:
                res = await client.get("/voices")
        except httpx.HTTPError as exc:
            raise SpeechSynthesisError(None, str(exc)) from exc
        if res.status_code >= 400:
            _logger.info("murf voices status=%s", res.status_code)
            _raise_murf_error(res)
        data = res.json()
        voices = data.get("voices") if isinstance(data, dict) else data
        return [v for v in (voices or []) if isinstance(v, dict)]
