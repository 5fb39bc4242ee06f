from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from clinic import schemas
from clinic.auth.deps import get_current_user_id
from clinic.voice.context import ContextAggregator, ContextBundle
from clinic.voice.factory import get_context_aggregator, get_query_orchestrator, get_speech_provider
from clinic.voice.orchestrator import QueryOrchestrator
from clinic.voice.speech.base import SpeechProvider


router = APIRouter(prefix="/voice-agent", tags=["Voice Agent"])


def _account_summary(bundle: ContextBundle) -> schemas.AccountSummary:
    profile = bundle.profile
    return schemas.AccountSummary(
        user=schemas.AccountUserSummary(
            name=(profile.full_name if profile else None),
            member_type=(profile.member_type if profile else None),
            location=(profile.location if profile else None),
        ),
        orders=schemas.AccountOrdersSummary(
            total=len(bundle.orders),
            pending=len(bundle.active_orders),
            delivered=sum(1 for o in bundle.orders if o.status == "Delivered"),
        ),
        bookings=schemas.AccountBookingsSummary(
            total=len(bundle.bookings),
            upcoming=len(bundle.upcoming_bookings),
            completed=sum(1 for b in bundle.bookings if b.status == "Completed"),
        ),
        services=schemas.AccountServicesSummary(
            total=len(bundle.services),
            categories=list(dict.fromkeys(s.category for s in bundle.services if s.category)),
        ),
        partial=bool(bundle.failed_slices),
    )


@router.post("/query", response_model=schemas.VoiceQueryOut)
async def voice_query(
    payload: schemas.VoiceQueryIn,
    user_id: int = Depends(get_current_user_id),
    orchestrator: QueryOrchestrator = Depends(get_query_orchestrator),
):
    query = (payload.query or "").strip()
    if not query:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Query is required")
    result = await orchestrator.handle(
        user_id,
        query,
        include_audio=payload.include_audio,
        voice_id=(payload.voice_id or "").strip() or None,
    )
    return schemas.VoiceQueryOut(
        intent=result.intent.value,
        text=result.text,
        audio_url=result.audio_url,
        duration=result.duration,
    )


@router.get("/account-summary", response_model=schemas.AccountSummary)
async def account_summary(
    user_id: int = Depends(get_current_user_id),
    aggregator: ContextAggregator = Depends(get_context_aggregator),
):
    bundle = await aggregator.aggregate(user_id)
    if bundle.all_failed:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Account data is temporarily unavailable",
        )
    return _account_summary(bundle)


@router.get("/voices", response_model=schemas.VoiceList)
async def list_voices(
    _: int = Depends(get_current_user_id),
    speech: SpeechProvider = Depends(get_speech_provider),
):
    try:
        voices = await speech.list_voices()
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Voice provider is not available: {exc}",
        ) from exc
    return schemas.VoiceList(provider=speech.name, voices=voices)
