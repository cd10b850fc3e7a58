from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import Response

from gemini_tts_proxy.api.dependencies import build_context, header_value, read_json_body
from gemini_tts_proxy.api.formatting import format_saved_response, format_wav_response
from gemini_tts_proxy.core.orchestrator import AudioRequestMeta, generate_audio, require_api_key

router = APIRouter()


@router.post("/generate-audio")
async def create_audio(request: Request) -> Response:
    """Synthesize speech with Gemini and return it as WAV, or save it when both save headers are set.

    The ``proxy_url`` header applies to the speech call only. Repairing an unsupported
    ``languageCode`` always calls the text model directly; if Gemini is reachable only
    through the proxy, that repair fails, is logged, and the original code is sent as is.
    """
    meta = AudioRequestMeta(
        api_key=request.query_params.get("key"),
        proxy_url=header_value(request, "proxy_url"),
        save_to_path=header_value(request, "save_to_path"),
        file_name=header_value(request, "file_name"),
    )
    # Key check comes before the body is read.
    require_api_key(meta.api_key)
    ctx = build_context(request)
    body = await read_json_body(request, ctx.config.max_request_mb)
    result = await generate_audio(body, meta, ctx)
    if result.file_path is not None:
        return format_saved_response(result.file_path)
    return format_wav_response(result.wav)
