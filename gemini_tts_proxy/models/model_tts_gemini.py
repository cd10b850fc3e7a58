from __future__ import annotations

from gemini_tts_proxy.helpers.audio_helpers import RawAudioPayload
from gemini_tts_proxy.helpers.gemini_helpers import extract_inline_audio, post_generate_content
from gemini_tts_proxy.runtime_types import RunContext, RunRequest
from gemini_tts_proxy.spec import ModelSpec

SPEC = ModelSpec.model_validate(
    {
        "id": "gemini//tts/flash-preview",
        "kind": "tts",
        "display": {
            "title": "Gemini TTS",
            "description": "Gemini text-to-speech; replies with base64 raw PCM and its MIME descriptor.",
            "tags": ["tts", "proxy", "gemini"],
        },
        "api": {"endpoint": "speech", "response_modality": "AUDIO"},
        "limits": {"timeout_sec": None},
        "backend": {"provider": "gemini", "model_ref": "gemini-2.5-flash-preview-tts"},
    }
)


def model_name(ctx: RunContext, req: RunRequest | None = None) -> str:
    if req is not None and req.model:
        return req.model
    return ctx.config.tts_model or SPEC.backend.model_ref


async def run(req: RunRequest, ctx: RunContext) -> RawAudioPayload:
    model = model_name(ctx, req)
    ctx.logger.info("audio.generate.upstream", extra={"model_id": model, "request_id": ctx.request_id})
    data = await post_generate_content(ctx, model, req.payload or {})
    return extract_inline_audio(data)
