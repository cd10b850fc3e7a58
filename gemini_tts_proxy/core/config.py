from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

log = logging.getLogger("gemini-tts-proxy.config")

# Environment variable -> config field.
ENV_OVERRIDES = {
    "HOST": "host",
    "PORT": "port",
    "GEMINI_API_BASE_URL": "upstream_base_url",
    "GEMINI_TTS_MODEL": "tts_model",
    "GEMINI_TEXT_MODEL": "text_model",
    "PROXY_PROBE_URL": "proxy_probe_url",
    "ALLOWED_ORIGINS": "allowed_origins",
}


class ServiceConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8698
    upstream_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    tts_model: str | None = None
    text_model: str | None = None
    repair_timeout_s: float | None = None
    proxy_probe_url: str = "https://ipinfo.io/json"
    proxy_probe_timeout_s: float = 10.0
    max_request_mb: int = 10
    allowed_origins: str = "*"

    @classmethod
    def default_config_path(cls) -> Path:
        return Path.home() / ".gemini-tts-proxy" / "config.json"

    @classmethod
    def _resolve_path(cls, path: Path | None) -> Path:
        if path is not None:
            return Path(path).expanduser()
        raw = os.getenv("GEMINI_TTS_PROXY_CONFIG", "")
        if raw.strip():
            candidate = Path(raw.strip()).expanduser()
            if raw.strip().endswith(("/", "\\")) or candidate.is_dir():
                return candidate / "config.json"
            return candidate
        return cls.default_config_path()

    @classmethod
    def _read_file(cls, config_path: Path) -> dict[str, Any]:
        if not config_path.exists():
            return {}
        if not config_path.is_file():
            log.warning("Config path %s is not a file; using defaults.", config_path)
            return {}
        try:
            raw_text = config_path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            log.warning("Failed to read config file %s: %s", config_path, exc)
            return {}
        try:
            data = json.loads(raw_text or "{}")
        except json.JSONDecodeError as exc:
            log.warning("Corrupt config JSON in %s (%s); using defaults.", config_path, exc)
            return {}
        if not isinstance(data, dict):
            log.warning("Config file %s must hold a JSON object; using defaults.", config_path)
            return {}
        return data

    @classmethod
    def load(cls, path: Path | None = None) -> "ServiceConfig":
        """
        Load the service config.

        Never raises on config problems:
        - A missing file means defaults.
        - Unreadable, corrupt or schema-invalid files are logged and replaced by defaults.
        - Environment variables override whatever the file says.
        """
        config_path = cls._resolve_path(path)
        data = cls._read_file(config_path)
        for env_name, field_name in ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value is not None and value.strip():
                data[field_name] = value.strip()

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            log.warning("Invalid config values (%s); using defaults.", exc)
            return cls()

    def origins(self) -> list[str]:
        if self.allowed_origins.strip() == "*":
            return ["*"]
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]
