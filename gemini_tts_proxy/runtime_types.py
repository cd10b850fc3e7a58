from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Literal

import httpx
from pydantic import BaseModel, ConfigDict, Field

from gemini_tts_proxy.core.config import ServiceConfig

if TYPE_CHECKING:
    from gemini_tts_proxy.core.proxy import ProxyConnector

EndpointLiteral = Literal["speech", "text"]

# Maps a resolved proxy connector (None for a direct connection) to the httpx transport to use.
TransportFactory = Callable[["ProxyConnector | None"], "httpx.AsyncBaseTransport | None"]


class RunRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    endpoint: EndpointLiteral
    model: str | None = None
    payload: dict | None = Field(default=None, alias="json")


@dataclass
class RunContext:
    request_id: str
    logger: Any
    config: ServiceConfig
    transport_factory: TransportFactory
    api_key: str | None = None
    http_client: httpx.AsyncClient | None = None
