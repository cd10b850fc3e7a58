from __future__ import annotations

import asyncio
import dataclasses
import time
from dataclasses import dataclass
from typing import Any

import httpx

from gemini_tts_proxy.catalog import VOICE_NAMES
from gemini_tts_proxy.core.errors import MissingApiKeyError
from gemini_tts_proxy.core.proxy import resolve_connector
from gemini_tts_proxy.helpers.audio_helpers import convert_to_wav
from gemini_tts_proxy.helpers.language_repair import repair_language_code
from gemini_tts_proxy.helpers.payload_helpers import build_upstream_payload, normalize_payload
from gemini_tts_proxy.helpers.storage_helpers import save_wav
from gemini_tts_proxy.models import model_tts_gemini
from gemini_tts_proxy.runtime_types import RunContext, RunRequest

MISSING_KEY_MESSAGE = "Gemini API key is required. Please provide it in the `key` query parameter."


@dataclass
class AudioRequestMeta:
    api_key: str | None = None
    proxy_url: str | None = None
    save_to_path: str | None = None
    file_name: str | None = None

    @property
    def wants_file(self) -> bool:
        return bool(self.save_to_path and self.file_name)


@dataclass
class AudioResult:
    wav: bytes
    file_path: str | None = None


def require_api_key(api_key: str | None) -> str:
    if not api_key or not api_key.strip():
        raise MissingApiKeyError(MISSING_KEY_MESSAGE)
    return api_key.strip()


async def generate_audio(body: Any, meta: AudioRequestMeta, ctx: RunContext) -> AudioResult:
    """Turn a client speech request into WAV bytes, optionally persisted to disk."""
    ctx = dataclasses.replace(ctx, api_key=require_api_key(meta.api_key))

    speech = normalize_payload(body)
    if speech.voice_name not in VOICE_NAMES:
        ctx.logger.warning("audio.generate.unknown_voice", extra={"voice": speech.voice_name})
    speech = await repair_language_code(speech, ctx)

    connector = resolve_connector(meta.proxy_url)
    if connector is None:
        ctx.logger.info("audio.generate.direct")
    else:
        ctx.logger.info(
            "audio.generate.proxy", extra={"proxy": connector.redacted_url, "protocol": connector.protocol.value}
        )
    transport = ctx.transport_factory(connector)

    run_request = RunRequest(endpoint="speech", json=build_upstream_payload(speech))
    start = time.perf_counter()
    async with httpx.AsyncClient(transport=transport, timeout=model_tts_gemini.SPEC.limits.timeout_sec) as client:
        raw = await model_tts_gemini.run(run_request, dataclasses.replace(ctx, http_client=client))
    duration_ms = round((time.perf_counter() - start) * 1000, 2)

    wav = convert_to_wav(raw)
    ctx.logger.info(
        "audio.generate.converted",
        extra={"mime_type": raw.mime_type, "wav_bytes": len(wav), "duration_ms": duration_ms},
    )

    if not meta.wants_file:
        if meta.save_to_path or meta.file_name:
            ctx.logger.warning("audio.generate.partial_save_headers", extra={"hint": "both save_to_path and file_name are required"})
        return AudioResult(wav=wav)

    path = await asyncio.to_thread(save_wav, wav, meta.save_to_path, meta.file_name)
    ctx.logger.info("audio.generate.saved", extra={"file_path": str(path)})
    return AudioResult(wav=wav, file_path=str(path))
