from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict


# --------------------
# Voice agent
# --------------------


class VoiceQueryIn(BaseModel):
    query: str
    include_audio: bool = True
    voice_id: Optional[str] = None


class VoiceQueryOut(BaseModel):
    intent: str
    text: str
    audio_url: Optional[str] = None
    duration: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)


class VoiceList(BaseModel):
    provider: str
    voices: List[dict[str, Any]] = []


# --------------------
# Account summary
# --------------------


class AccountUserSummary(BaseModel):
    name: Optional[str] = None
    member_type: Optional[str] = None
    location: Optional[str] = None


class AccountOrdersSummary(BaseModel):
    total: int = 0
    pending: int = 0
    delivered: int = 0


class AccountBookingsSummary(BaseModel):
    total: int = 0
    upcoming: int = 0
    completed: int = 0


class AccountServicesSummary(BaseModel):
    total: int = 0
    categories: List[str] = []


class AccountSummary(BaseModel):
    user: AccountUserSummary
    orders: AccountOrdersSummary
    bookings: AccountBookingsSummary
    services: AccountServicesSummary
    partial: bool = False
