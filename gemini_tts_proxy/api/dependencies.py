from __future__ import annotations

import json
import uuid
from typing import Any

from fastapi import Request

from gemini_tts_proxy.core.errors import InvalidRequestBodyError, RequestTooLargeError
from gemini_tts_proxy.runtime_types import RunContext


def build_context(request: Request) -> RunContext:
    state = request.app.state
    return RunContext(
        request_id=getattr(request.state, "request_id", None) or f"req_{uuid.uuid4().hex}",
        logger=state.logger,
        config=state.config,
        transport_factory=state.transport_factory,
    )


def header_value(request: Request, name: str) -> str | None:
    """Read a header by its underscore name, falling back to the hyphenated spelling."""
    value = request.headers.get(name)
    if value is None:
        value = request.headers.get(name.replace("_", "-"))
    if value is None or not value.strip():
        return None
    return value.strip()


async def read_json_body(request: Request, max_mb: int) -> Any:
    raw = await request.body()
    if len(raw) > max_mb * 1024 * 1024:
        raise RequestTooLargeError(f"Request body exceeds the {max_mb}MB limit.")
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except (UnicodeDecodeError, ValueError) as exc:
        raise InvalidRequestBodyError("Request body must be valid JSON.", details=str(exc)) from exc
