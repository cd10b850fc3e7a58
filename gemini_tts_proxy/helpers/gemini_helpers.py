from __future__ import annotations

from typing import Any

import httpx

from gemini_tts_proxy.core.errors import InvalidUpstreamResponseError, UpstreamTransportError
from gemini_tts_proxy.helpers.audio_helpers import RawAudioPayload
from gemini_tts_proxy.runtime_types import RunContext

UPSTREAM_ERROR_MESSAGE = "An error occurred while calling the Gemini API."


def generate_content_url(base_url: str, model: str) -> str:
    return f"{base_url.rstrip('/')}/models/{model}:generateContent"


def auth_headers(api_key: str | None) -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if api_key:
        headers["x-goog-api-key"] = api_key
    return headers


async def post_generate_content(ctx: RunContext, model: str, payload: dict[str, Any]) -> Any:
    """POST a generateContent body and return the decoded JSON reply."""
    if ctx.http_client is None:
        raise RuntimeError("RunContext.http_client must be set before calling the upstream API.")
    url = generate_content_url(ctx.config.upstream_base_url, model)
    try:
        response = await ctx.http_client.post(url, headers=auth_headers(ctx.api_key), json=payload)
    except httpx.RequestError as exc:
        raise UpstreamTransportError.from_request_error(exc, UPSTREAM_ERROR_MESSAGE) from exc
    if response.is_error:
        raise UpstreamTransportError.from_response(response, UPSTREAM_ERROR_MESSAGE)
    try:
        return response.json()
    except ValueError as exc:
        raise InvalidUpstreamResponseError(
            "The response from the Gemini API was not JSON.", details=response.text
        ) from exc


def _parts(data: Any) -> list[Any]:
    if not isinstance(data, dict):
        return []
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        return []
    content = candidates[0].get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    return parts if isinstance(parts, list) else []


def extract_inline_audio(data: Any) -> RawAudioPayload:
    for part in _parts(data):
        inline = part.get("inlineData") if isinstance(part, dict) else None
        if isinstance(inline, dict) and isinstance(inline.get("data"), str) and inline["data"]:
            mime_type = inline.get("mimeType")
            return RawAudioPayload(data=inline["data"], mime_type=mime_type if isinstance(mime_type, str) else None)
    raise InvalidUpstreamResponseError(
        "Failed to generate audio. The response from Gemini API was invalid.", details=data
    )


def extract_text(data: Any) -> str | None:
    chunks = [part["text"] for part in _parts(data) if isinstance(part, dict) and isinstance(part.get("text"), str)]
    if not chunks:
        return None
    return "".join(chunks)
