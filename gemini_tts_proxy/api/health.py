from __future__ import annotations

from fastapi import APIRouter

from gemini_tts_proxy.api.formatting import utc_timestamp

router = APIRouter()


@router.get("/health")
async def health() -> dict:
    return {"status": "ok", "timestamp": utc_timestamp()}
