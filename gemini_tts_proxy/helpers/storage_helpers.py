from __future__ import annotations

from pathlib import Path

from gemini_tts_proxy.core.errors import FileWriteError

WAV_SUFFIX = ".wav"


def ensure_wav_suffix(file_name: str) -> str:
    if file_name.lower().endswith(WAV_SUFFIX):
        return file_name
    return f"{file_name}{WAV_SUFFIX}"


# save_to_path and file_name are used as given; no traversal checks are applied.
def save_wav(data: bytes, save_to_path: str, file_name: str) -> Path:
    directory = Path(save_to_path).expanduser()
    target = directory / ensure_wav_suffix(file_name)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
    except OSError as exc:
        raise FileWriteError("Failed to save the audio file.", details=str(exc)) from exc
    return target
