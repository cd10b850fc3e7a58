from __future__ import annotations

from fastapi import APIRouter

from gemini_tts_proxy.api.formatting import format_catalog
from gemini_tts_proxy.catalog import AVAILABLE_LANGUAGES, AVAILABLE_VOICES

router = APIRouter()


@router.get("/languages")
async def list_languages() -> list[dict]:
    return format_catalog(AVAILABLE_LANGUAGES)


@router.get("/voices")
async def list_voices() -> list[dict]:
    return format_catalog(AVAILABLE_VOICES)
