from __future__ import annotations

import base64
import binascii
import re
import struct
from dataclasses import dataclass

from gemini_tts_proxy.core.errors import InvalidUpstreamResponseError

DEFAULT_MIME_TYPE = "audio/L16;rate=24000"
DEFAULT_CHANNELS = 1
DEFAULT_BITS_PER_SAMPLE = 16
DEFAULT_SAMPLE_RATE = 24000
WAV_HEADER_SIZE = 44
WAV_MEDIA_TYPE = "audio/wav"
MAX_BITS_PER_SAMPLE = 32
# byte_rate is a uint32 header field.
MAX_BYTE_RATE = 0xFFFFFFFF

_LINEAR_PCM_SUBTYPE = re.compile(r"^[Ll](\d+)")
_LEADING_INT = re.compile(r"^\s*(\d+)")
# RIFF/WAVE canonical PCM header, every numeric field little-endian.
_WAV_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


@dataclass(frozen=True)
class AudioFormat:
    channels: int = DEFAULT_CHANNELS
    sample_rate: int = DEFAULT_SAMPLE_RATE
    bits_per_sample: int = DEFAULT_BITS_PER_SAMPLE

    @property
    def block_align(self) -> int:
        return self.channels * (self.bits_per_sample // 8)

    @property
    def byte_rate(self) -> int:
        return self.sample_rate * self.block_align


@dataclass(frozen=True)
class RawAudioPayload:
    data: str
    mime_type: str | None = None


def _bits_from_subtype(subtype: str) -> int:
    match = _LINEAR_PCM_SUBTYPE.match(subtype)
    if not match:
        return DEFAULT_BITS_PER_SAMPLE
    bits = int(match.group(1))
    if bits <= 0 or bits % 8 or bits > MAX_BITS_PER_SAMPLE:
        return DEFAULT_BITS_PER_SAMPLE
    return bits


def _rate_from_params(params: list[str]) -> int:
    rate = DEFAULT_SAMPLE_RATE
    for param in params:
        key, _, value = param.partition("=")
        if key.strip().lower() != "rate":
            continue
        match = _LEADING_INT.match(value)
        if match and int(match.group(1)) > 0:
            rate = int(match.group(1))
    return rate


def parse_mime_type(mime_type: str | None) -> AudioFormat:
    """Describe raw PCM audio from a descriptor such as ``audio/L16;codec=pcm;rate=24000``.

    Every field falls back to its default when missing or unusable; this never raises.
    """
    descriptor = (mime_type or "").strip() or DEFAULT_MIME_TYPE
    file_type, *params = [part.strip() for part in descriptor.split(";")]
    _, _, subtype = file_type.partition("/")
    audio_format = AudioFormat(
        channels=DEFAULT_CHANNELS,
        sample_rate=_rate_from_params(params),
        bits_per_sample=_bits_from_subtype(subtype.strip()),
    )
    if audio_format.byte_rate > MAX_BYTE_RATE:
        return AudioFormat(channels=audio_format.channels, bits_per_sample=audio_format.bits_per_sample)
    return audio_format


def build_wav_header(data_length: int, audio_format: AudioFormat) -> bytes:
    return _WAV_HEADER.pack(
        b"RIFF",
        36 + data_length,
        b"WAVE",
        b"fmt ",
        16,
        1,
        audio_format.channels,
        audio_format.sample_rate,
        audio_format.byte_rate,
        audio_format.block_align,
        audio_format.bits_per_sample,
        b"data",
        data_length,
    )


def build_wav(pcm: bytes, audio_format: AudioFormat) -> bytes:
    return build_wav_header(len(pcm), audio_format) + bytes(pcm)


def decode_audio(raw: RawAudioPayload) -> bytes:
    try:
        return base64.b64decode(raw.data)
    except (binascii.Error, ValueError) as exc:
        raise InvalidUpstreamResponseError(
            "Upstream audio data is not valid base64.", details={"mimeType": raw.mime_type, "error": str(exc)}
        ) from exc


def convert_to_wav(raw: RawAudioPayload) -> bytes:
    pcm = decode_audio(raw)
    return build_wav(pcm, parse_mime_type(raw.mime_type))
