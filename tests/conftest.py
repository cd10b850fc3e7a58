from __future__ import annotations

import base64
import json
import os
import tempfile

os.environ.setdefault("GEMINI_TTS_PROXY_LOG_DIR", tempfile.mkdtemp(prefix="gemini-tts-proxy-logs-"))
os.environ.setdefault(
    "GEMINI_TTS_PROXY_CONFIG",
    os.path.join(tempfile.mkdtemp(prefix="gemini-tts-proxy-config-"), "config.json"),
)

import httpx
import pytest
from fastapi.testclient import TestClient

from gemini_tts_proxy.main import app

PCM_SAMPLES = bytes(range(256)) * 4


def speech_reply(pcm: bytes = PCM_SAMPLES, mime_type: str | None = "audio/L16;codec=pcm;rate=24000") -> dict:
    inline = {"data": base64.b64encode(pcm).decode("ascii")}
    if mime_type is not None:
        inline["mimeType"] = mime_type
    return {"candidates": [{"content": {"role": "model", "parts": [{"inlineData": inline}]}}]}


def text_reply(text: str) -> dict:
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


class FakeGemini:
    """Stands in for the Gemini API and the IP-info endpoint behind an httpx.MockTransport."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.connectors: list = []
        self.speech = (200, speech_reply())
        self.text = (200, text_reply("null"))
        self.probe = (200, {"ip": "203.0.113.7", "country": "BR"})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "ipinfo.io":
            status, body = self.probe
        elif "tts" in request.url.path:
            status, body = self.speech
        else:
            status, body = self.text
        if isinstance(body, Exception):
            raise body
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    def transport_factory(self, connector):
        self.connectors.append(connector)
        return httpx.MockTransport(self.handler)

    def calls_to(self, marker: str) -> list[httpx.Request]:
        return [req for req in self.requests if marker in str(req.url)]

    def json_of(self, request: httpx.Request) -> dict:
        return json.loads(request.content)


@pytest.fixture
def client(monkeypatch):
    monkeypatch.delenv("PORT", raising=False)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def fake_gemini(client):
    fake = FakeGemini()
    client.app.state.transport_factory = fake.transport_factory
    return fake
