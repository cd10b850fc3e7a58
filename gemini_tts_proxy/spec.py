from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel


class DisplaySpec(BaseModel):
    title: str
    description: str
    tags: list[str]


class ApiSpec(BaseModel):
    endpoint: Literal["speech", "text"]
    response_modality: Literal["AUDIO", "TEXT"]


class LimitsSpec(BaseModel):
    # None means the call is awaited without a timeout.
    timeout_sec: Optional[float] = None


class BackendSpec(BaseModel):
    provider: Literal["gemini"]
    model_ref: str


class ModelSpec(BaseModel):
    id: str
    kind: Literal["tts", "llm"]
    display: DisplaySpec
    api: ApiSpec
    limits: LimitsSpec
    backend: BackendSpec


__all__ = ["ModelSpec"]
