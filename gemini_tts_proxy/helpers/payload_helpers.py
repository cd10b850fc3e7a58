from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

from gemini_tts_proxy.catalog import DEFAULT_VOICE

DEFAULT_TEXT = "No text provided."


@dataclass(frozen=True)
class SpeechRequest:
    text: str
    voice_name: str = DEFAULT_VOICE
    language_code: str | None = None
    audio_config: dict[str, Any] | None = None

    def with_language_code(self, code: str) -> "SpeechRequest":
        return dataclasses.replace(self, language_code=code)


def _dig(payload: Any, *path: str) -> Any:
    node = payload
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def _text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _mapping(value: Any) -> dict[str, Any] | None:
    return value if isinstance(value, dict) else None


def _first(*candidates: Any) -> Any:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


def _nested_text(body: dict[str, Any]) -> str | None:
    contents = body.get("contents")
    if not isinstance(contents, list):
        return None
    for content in contents:
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            continue
        for part in parts:
            found = _text(part.get("text")) if isinstance(part, dict) else None
            if found:
                return found
    return None


def normalize_payload(body: Any) -> SpeechRequest:
    """Resolve a client body into a SpeechRequest.

    Precedence per field: top-level convenience field, then the nested
    ``generateContent`` field, then the default.

    - text: ``text`` > first ``contents[*].parts[*].text`` > DEFAULT_TEXT
    - voice_name: ``voice`` > ``generationConfig.speechConfig.voiceConfig.prebuiltVoiceConfig.voiceName`` > "Leda"
    - language_code: ``languageCode`` > ``generationConfig.speechConfig.languageCode`` > omitted
    - audio_config: ``audioConfig`` > ``generationConfig.audioConfig`` > omitted
    """
    if not isinstance(body, dict):
        body = {}
    speech_config = _dig(body, "generationConfig", "speechConfig")
    return SpeechRequest(
        text=_first(_text(body.get("text")), _nested_text(body), DEFAULT_TEXT),
        voice_name=_first(
            _text(body.get("voice")),
            _text(_dig(speech_config, "voiceConfig", "prebuiltVoiceConfig", "voiceName")),
            DEFAULT_VOICE,
        ),
        language_code=_first(_text(body.get("languageCode")), _text(_dig(speech_config, "languageCode"))),
        audio_config=_first(_mapping(body.get("audioConfig")), _mapping(_dig(body, "generationConfig", "audioConfig"))),
    )


def build_upstream_payload(speech: SpeechRequest) -> dict[str, Any]:
    """Render the Gemini ``generateContent`` body for an audio response."""
    speech_config: dict[str, Any] = {
        "voiceConfig": {"prebuiltVoiceConfig": {"voiceName": speech.voice_name}},
    }
    if speech.language_code is not None:
        speech_config["languageCode"] = speech.language_code
    generation_config: dict[str, Any] = {
        "responseModalities": ["AUDIO"],
        "speechConfig": speech_config,
    }
    if speech.audio_config is not None:
        generation_config["audioConfig"] = dict(speech.audio_config)
    return {
        "contents": [{"parts": [{"text": speech.text}]}],
        "generationConfig": generation_config,
    }
