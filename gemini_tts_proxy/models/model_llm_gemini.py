from __future__ import annotations

from gemini_tts_proxy.helpers.gemini_helpers import extract_text, post_generate_content
from gemini_tts_proxy.runtime_types import RunContext, RunRequest
from gemini_tts_proxy.spec import ModelSpec

SPEC = ModelSpec.model_validate(
    {
        "id": "gemini//llm/flash",
        "kind": "llm",
        "display": {
            "title": "Gemini Flash",
            "description": "Short text completions used to repair request fields.",
            "tags": ["llm", "proxy", "gemini"],
        },
        "api": {"endpoint": "text", "response_modality": "TEXT"},
        "limits": {"timeout_sec": 30},
        "backend": {"provider": "gemini", "model_ref": "gemini-2.0-flash"},
    }
)


def build_prompt_payload(prompt: str) -> dict:
    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": {"temperature": 0},
    }


async def run(req: RunRequest, ctx: RunContext) -> str | None:
    model = req.model or ctx.config.text_model or SPEC.backend.model_ref
    data = await post_generate_content(ctx, model, req.payload or {})
    return extract_text(data)
