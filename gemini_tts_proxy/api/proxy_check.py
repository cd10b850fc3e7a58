from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from gemini_tts_proxy.api.dependencies import build_context, header_value
from gemini_tts_proxy.core.errors import InvalidProxyUrlError
from gemini_tts_proxy.core.proxy import probe_proxy, resolve_connector

router = APIRouter()


@router.post("/test-proxy")
async def check_proxy(request: Request) -> JSONResponse:
    connector = resolve_connector(header_value(request, "proxy_url"))
    if connector is None:
        raise InvalidProxyUrlError("The proxy_url header is required.")
    result = await probe_proxy(connector, build_context(request))
    return JSONResponse(result)
