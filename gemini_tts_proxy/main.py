from __future__ import annotations

import time
import uuid
from pathlib import Path
from typing import Callable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gemini_tts_proxy.api import catalog, generate_audio, health, proxy_check
from gemini_tts_proxy.api.formatting import format_gateway_error
from gemini_tts_proxy.core.config import ServiceConfig
from gemini_tts_proxy.core.errors import GatewayError
from gemini_tts_proxy.core.logging import configure_logging, pop_log_context, push_log_context, shutdown_logging
from gemini_tts_proxy.core.proxy import transport_for
from gemini_tts_proxy.models import model_llm_gemini, model_tts_gemini

LOGGER = configure_logging()

app = FastAPI(title="Gemini TTS Proxy", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=ServiceConfig.load().origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(health.router)
app.include_router(catalog.router)
app.include_router(generate_audio.router)
app.include_router(proxy_check.router)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next: Callable):
    request_id = request.headers.get("x-request-id") or f"req_{uuid.uuid4().hex}"
    request.state.request_id = request_id
    token = push_log_context(request_id=request_id, endpoint=str(request.url.path))
    start = time.perf_counter()
    logger = getattr(app.state, "logger", LOGGER)
    try:
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        logger.info(
            "request.complete",
            extra={"request_id": request_id, "endpoint": str(request.url.path), "status": response.status_code, "duration_ms": duration_ms},
        )
        response.headers["x-request-id"] = request_id
        return response
    except Exception:
        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        logger.exception("request.error", extra={"request_id": request_id, "endpoint": str(request.url.path), "duration_ms": duration_ms})
        raise
    finally:
        pop_log_context(token)


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    logger = getattr(app.state, "logger", LOGGER)
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "request.failed",
        extra={"endpoint": str(request.url.path), "status": exc.status_code, "error_code": exc.code, "error": exc.message},
    )
    return format_gateway_error(exc)


@app.on_event("startup")
async def startup() -> None:
    app.state.logger = LOGGER
    config = getattr(app.state, "config_override", None) or ServiceConfig.load()
    app.state.config = config
    app.state.transport_factory = transport_for
    app.state.started_at = time.time()
    LOGGER.info(
        "startup.models",
        extra={
            "tts_model": config.tts_model or model_tts_gemini.SPEC.backend.model_ref,
            "text_model": config.text_model or model_llm_gemini.SPEC.backend.model_ref,
            "upstream": config.upstream_base_url,
        },
    )
    base = f"http://localhost:{config.port}"
    LOGGER.info(
        "startup.endpoints",
        extra={
            "endpoints": [
                f"GET  {base}/health",
                f"GET  {base}/voices",
                f"GET  {base}/languages",
                f"POST {base}/generate-audio?key=YOUR_GEMINI_KEY",
                f"POST {base}/test-proxy",
            ]
        },
    )


@app.on_event("shutdown")
async def shutdown() -> None:
    LOGGER.info("shutdown", extra={"uptime_s": round(time.time() - getattr(app.state, "started_at", time.time()), 1)})


def main() -> None:
    import argparse
    import uvicorn

    parser = argparse.ArgumentParser(description="Gemini text-to-speech proxy")
    parser.add_argument("--host", type=str, default=None)
    parser.add_argument("--port", type=int, default=None)
    parser.add_argument("--config", type=str, default=None)
    args = parser.parse_args()

    config = ServiceConfig.load(Path(args.config) if args.config else None)
    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    app.state.config_override = config
    try:
        uvicorn.run(app, host=config.host, port=config.port, log_config=None)
    finally:
        shutdown_logging()


if __name__ == "__main__":
    main()
