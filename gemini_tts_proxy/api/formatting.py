from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Iterable

from fastapi.responses import JSONResponse, Response

from gemini_tts_proxy.core.errors import GatewayError
from gemini_tts_proxy.helpers.audio_helpers import WAV_MEDIA_TYPE

DOWNLOAD_FILENAME = "audio.wav"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_catalog(entries: Iterable[Any]) -> list[dict]:
    return [asdict(entry) for entry in entries]


def format_wav_response(wav: bytes) -> Response:
    """Send WAV bytes back as a download."""
    return Response(
        content=wav,
        media_type=WAV_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{DOWNLOAD_FILENAME}"'},
    )


def format_saved_response(file_path: str) -> JSONResponse:
    return JSONResponse({"success": True, "message": "Audio file saved successfully.", "filePath": file_path})


def format_error(
    message: str,
    *,
    err_type: str = "server_error",
    code: str | None = None,
    details: Any = None,
    status_code: int | None = None,
) -> JSONResponse:
    """Render the error payload shared by every endpoint."""
    payload = {"error": {"message": message, "type": err_type, "code": code, "details": details}}
    if status_code is not None:
        status = status_code
    elif err_type == "invalid_request_error":
        status = 400
    elif err_type == "authentication_error":
        status = 401
    else:
        status = 500
    return JSONResponse(payload, status_code=status)


def format_gateway_error(exc: GatewayError) -> JSONResponse:
    return format_error(
        exc.message,
        err_type=exc.err_type,
        code=exc.code,
        details=exc.details,
        status_code=exc.status_code,
    )
