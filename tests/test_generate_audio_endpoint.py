from __future__ import annotations

import struct

import httpx
import pytest

from conftest import PCM_SAMPLES, speech_reply, text_reply
from gemini_tts_proxy.core.proxy import ProxyProtocol


def _post(client, body=None, key="test-key", headers=None, **kwargs):
    url = "/generate-audio" if key is None else f"/generate-audio?key={key}"
    return client.post(url, json=body if body is not None else {"text": "Hello"}, headers=headers or {}, **kwargs)


def test_missing_key_is_rejected_before_upstream(client, fake_gemini):
    resp = _post(client, key=None)
    assert resp.status_code == 401
    error = resp.json()["error"]
    assert error["type"] == "authentication_error"
    assert "key" in error["message"]
    assert fake_gemini.requests == []


def test_blank_key_is_rejected(client, fake_gemini):
    resp = _post(client, key="%20%20")
    assert resp.status_code == 401
    assert fake_gemini.requests == []


def test_wav_is_returned_as_download(client, fake_gemini):
    resp = _post(client, body={"text": "Hello there", "voice": "Kore"})
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "audio/wav"
    assert resp.headers["content-disposition"] == 'attachment; filename="audio.wav"'
    assert resp.content[:4] == b"RIFF"
    assert len(resp.content) == 44 + len(PCM_SAMPLES)
    assert resp.content[44:] == PCM_SAMPLES

    [upstream] = fake_gemini.calls_to("tts")
    assert upstream.headers["x-goog-api-key"] == "test-key"
    assert upstream.url.path.endswith("/models/gemini-2.5-flash-preview-tts:generateContent")
    body = fake_gemini.json_of(upstream)
    assert body["contents"] == [{"parts": [{"text": "Hello there"}]}]
    speech_config = body["generationConfig"]["speechConfig"]
    assert speech_config["voiceConfig"]["prebuiltVoiceConfig"]["voiceName"] == "Kore"
    assert "languageCode" not in speech_config
    assert body["generationConfig"]["responseModalities"] == ["AUDIO"]


def test_descriptor_sample_rate_lands_in_header(client, fake_gemini):
    fake_gemini.speech = (200, speech_reply(mime_type="audio/L16;codec=pcm;rate=16000"))
    resp = _post(client)
    assert resp.status_code == 200
    assert struct.unpack("<I", resp.content[24:28])[0] == 16000


@pytest.mark.parametrize("mime_type", ["audio/L16;rate=3000000000", "audio/L70000;rate=24000"])
def test_out_of_range_descriptor_falls_back_to_defaults(client, fake_gemini, mime_type):
    fake_gemini.speech = (200, speech_reply(mime_type=mime_type))
    resp = _post(client)
    assert resp.status_code == 200
    assert struct.unpack("<I", resp.content[24:28])[0] == 24000
    assert struct.unpack("<H", resp.content[34:36])[0] == 16
    assert resp.content[44:] == PCM_SAMPLES


def test_empty_body_speaks_default_text(client, fake_gemini):
    resp = client.post("/generate-audio?key=test-key")
    assert resp.status_code == 200
    [upstream] = fake_gemini.calls_to("tts")
    assert fake_gemini.json_of(upstream)["contents"][0]["parts"][0]["text"] == "No text provided."


def test_audio_is_saved_when_both_headers_present(client, fake_gemini, tmp_path):
    target_dir = tmp_path / "out"
    resp = _post(client, headers={"save_to_path": str(target_dir), "file_name": "greeting"})
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["success"] is True
    assert payload["message"] == "Audio file saved successfully."
    saved = target_dir / "greeting.wav"
    assert payload["filePath"] == str(saved)
    assert saved.read_bytes()[44:] == PCM_SAMPLES


def test_hyphenated_save_headers_are_accepted(client, fake_gemini, tmp_path):
    resp = _post(client, headers={"save-to-path": str(tmp_path), "file-name": "clip.wav"})
    assert resp.status_code == 200
    assert (tmp_path / "clip.wav").exists()


def test_single_save_header_returns_bytes(client, fake_gemini, tmp_path):
    resp = _post(client, headers={"save_to_path": str(tmp_path)})
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "audio/wav"
    assert list(tmp_path.iterdir()) == []


def test_unwritable_target_is_server_error(client, fake_gemini, tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x")
    resp = _post(client, headers={"save_to_path": str(blocker), "file_name": "a"})
    assert resp.status_code == 500
    assert resp.json()["error"]["code"] == "file_write_failed"


def test_upstream_error_status_and_details_propagate(client, fake_gemini):
    fake_gemini.speech = (400, {"error": {"code": 400, "message": "API key not valid.", "status": "INVALID_ARGUMENT"}})
    resp = _post(client)
    assert resp.status_code == 400
    error = resp.json()["error"]
    assert error["type"] == "upstream_error"
    assert error["details"]["message"] == "API key not valid."


def test_upstream_connection_failure_is_server_error(client, fake_gemini):
    fake_gemini.speech = (200, httpx.ConnectError("connection refused"))
    resp = _post(client)
    assert resp.status_code == 500
    assert resp.json()["error"]["code"] == "upstream_transport"


def test_reply_without_audio_is_invalid(client, fake_gemini):
    reply = text_reply("I cannot speak right now")
    fake_gemini.speech = (200, reply)
    resp = _post(client)
    assert resp.status_code == 500
    error = resp.json()["error"]
    assert error["message"] == "Failed to generate audio. The response from Gemini API was invalid."
    assert error["details"] == reply


def test_malformed_proxy_is_bad_request(client, fake_gemini):
    resp = _post(client, headers={"proxy_url": "http://host:notaport"})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "invalid_proxy_url"
    assert fake_gemini.calls_to("tts") == []


def test_unsupported_proxy_scheme_is_bad_request(client, fake_gemini):
    resp = _post(client, headers={"proxy_url": "ftp://host:21"})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "invalid_proxy_protocol"


def test_socks_proxy_is_handed_to_transport(client, fake_gemini):
    resp = _post(client, headers={"proxy_url": "socks5://127.0.0.1:1080"})
    assert resp.status_code == 200
    [connector] = fake_gemini.connectors
    assert connector.protocol is ProxyProtocol.SOCKS
    assert connector.url == "socks5://127.0.0.1:1080"


def test_http_proxy_via_hyphenated_header(client, fake_gemini):
    resp = _post(client, headers={"proxy-url": "http://proxy.local:3128"})
    assert resp.status_code == 200
    [connector] = fake_gemini.connectors
    assert connector.protocol is ProxyProtocol.HTTP_LIKE


def test_no_proxy_means_direct_transport(client, fake_gemini):
    _post(client)
    assert fake_gemini.connectors == [None]


def test_invalid_language_code_is_repaired(client, fake_gemini):
    fake_gemini.text = (200, text_reply("pt-BR"))
    resp = _post(client, body={"text": "Olá", "languageCode": "pt"})
    assert resp.status_code == 200
    assert len(fake_gemini.calls_to("gemini-2.0-flash")) == 1
    [upstream] = fake_gemini.calls_to("tts")
    assert fake_gemini.json_of(upstream)["generationConfig"]["speechConfig"]["languageCode"] == "pt-BR"


def test_repair_goes_direct_while_speech_uses_proxy(client, fake_gemini):
    fake_gemini.text = (200, text_reply("pt-BR"))
    resp = _post(client, body={"text": "Olá", "languageCode": "pt"}, headers={"proxy_url": "socks5://127.0.0.1:1080"})
    assert resp.status_code == 200
    repair_connector, speech_connector = fake_gemini.connectors
    assert repair_connector is None
    assert speech_connector.protocol is ProxyProtocol.SOCKS


def test_failed_repair_keeps_original_code(client, fake_gemini):
    fake_gemini.text = (503, {"error": {"message": "overloaded"}})
    resp = _post(client, body={"text": "Olá", "languageCode": "portuguese"})
    assert resp.status_code == 200
    [upstream] = fake_gemini.calls_to("tts")
    assert fake_gemini.json_of(upstream)["generationConfig"]["speechConfig"]["languageCode"] == "portuguese"


def test_valid_language_code_skips_repair(client, fake_gemini):
    _post(client, body={"text": "Hi", "languageCode": "en-US"})
    assert fake_gemini.calls_to("gemini-2.0-flash") == []


def test_nested_request_shape_is_forwarded(client, fake_gemini):
    body = {
        "contents": [{"parts": [{"text": "nested"}]}],
        "generationConfig": {
            "responseModalities": ["AUDIO"],
            "speechConfig": {"voiceConfig": {"prebuiltVoiceConfig": {"voiceName": "Puck"}}, "languageCode": "de-DE"},
        },
    }
    assert _post(client, body=body).status_code == 200
    [upstream] = fake_gemini.calls_to("tts")
    sent = fake_gemini.json_of(upstream)
    assert sent["contents"][0]["parts"][0]["text"] == "nested"
    assert sent["generationConfig"]["speechConfig"]["voiceConfig"]["prebuiltVoiceConfig"]["voiceName"] == "Puck"
    assert sent["generationConfig"]["speechConfig"]["languageCode"] == "de-DE"


def test_invalid_json_body_is_bad_request(client, fake_gemini):
    resp = client.post(
        "/generate-audio?key=test-key", content=b"{not json", headers={"content-type": "application/json"}
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "invalid_body"
    assert fake_gemini.requests == []


def test_oversized_body_is_rejected(client, fake_gemini):
    client.app.state.config = client.app.state.config.model_copy(update={"max_request_mb": 1})
    resp = client.post(
        "/generate-audio?key=test-key",
        content=b'{"text": "' + b"a" * (1024 * 1024) + b'"}',
        headers={"content-type": "application/json"},
    )
    assert resp.status_code == 413
    assert resp.json()["error"]["code"] == "body_too_large"
    assert fake_gemini.requests == []


def test_request_id_is_echoed(client, fake_gemini):
    ok = _post(client, headers={"x-request-id": "req_abc"})
    assert ok.headers["x-request-id"] == "req_abc"
    failed = _post(client, key=None, headers={"x-request-id": "req_def"})
    assert failed.headers["x-request-id"] == "req_def"
    assert _post(client).headers["x-request-id"].startswith("req_")
