from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class SpeechSynthesisError(RuntimeError):
    status_code: int | None
    message: str

    def __str__(self) -> str:  # pragma: no cover
        prefix = f"Speech synthesis error ({self.status_code})" if self.status_code is not None else "Speech synthesis error"
        return f"{prefix}: {self.message}"


@dataclass(frozen=True)
class VoiceOptions:
    voice_id: str = "en-IN-male-1"
    speed: float = 1.0
    pitch: float = 1.0
    audio_format: str = "mp3"
    sample_rate: int = 24000


@dataclass(frozen=True)
class SpeechResult:
    audio_url: str
    duration: float | None = None


class SpeechProvider(Protocol):
    name: str

    async def synthesize(self, text: str, options: VoiceOptions) -> SpeechResult: ...

    async def list_voices(self) -> list[dict[str, Any]]: ...
