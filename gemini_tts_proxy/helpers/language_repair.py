from __future__ import annotations

import dataclasses

import httpx

from gemini_tts_proxy.catalog import VALID_LANGUAGE_CODES, language_codes
from gemini_tts_proxy.core.errors import GatewayError
from gemini_tts_proxy.helpers.payload_helpers import SpeechRequest
from gemini_tts_proxy.models import model_llm_gemini
from gemini_tts_proxy.runtime_types import RunContext, RunRequest

NULL_ANSWER = "null"


def build_repair_prompt(invalid_code: str) -> str:
    codes = ", ".join(language_codes())
    return (
        f'The language code "{invalid_code}" is not supported by a text-to-speech service. '
        f"The supported language codes are: {codes}. "
        "Reply with only the single supported code that is the closest match, with no other text. "
        f"If none of them is a reasonable match, reply with only the word {NULL_ANSWER}."
    )


def pick_suggestion(answer: str | None) -> str | None:
    candidate = (answer or "").strip()
    if candidate in VALID_LANGUAGE_CODES:
        return candidate
    return None


async def repair_language_code(speech: SpeechRequest, ctx: RunContext) -> SpeechRequest:
    """Swap an unsupported language code for the closest supported one, if the text model offers one.

    Best effort: every failure is logged and the request is returned unchanged.
    """
    code = speech.language_code
    if code is None or code in VALID_LANGUAGE_CODES:
        return speech

    ctx.logger.info("language_repair.start", extra={"language_code": code})
    timeout = ctx.config.repair_timeout_s or model_llm_gemini.SPEC.limits.timeout_sec
    run_request = RunRequest(endpoint="text", json=model_llm_gemini.build_prompt_payload(build_repair_prompt(code)))
    try:
        async with httpx.AsyncClient(transport=ctx.transport_factory(None), timeout=timeout) as client:
            answer = await model_llm_gemini.run(run_request, dataclasses.replace(ctx, http_client=client))
    except (GatewayError, httpx.HTTPError) as exc:
        ctx.logger.warning(
            "language_repair.failed",
            extra={"language_code": code, "error": getattr(exc, "message", None) or str(exc)},
        )
        return speech

    suggestion = pick_suggestion(answer)
    if suggestion is None:
        ctx.logger.warning("language_repair.no_match", extra={"language_code": code, "answer": (answer or "")[:64]})
        return speech
    ctx.logger.info("language_repair.applied", extra={"language_code": code, "replacement": suggestion})
    return speech.with_language_code(suggestion)
