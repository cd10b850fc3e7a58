from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx

from gemini_tts_proxy.core.errors import (
    InvalidProxyProtocolError,
    InvalidProxyUrlError,
    InvalidUpstreamResponseError,
    UpstreamTransportError,
)
from gemini_tts_proxy.runtime_types import RunContext

PROBE_ERROR_MESSAGE = "Proxy connectivity test failed."


class ProxyProtocol(str, Enum):
    HTTP_LIKE = "http"
    SOCKS = "socks"


@dataclass(frozen=True)
class ProxyConnector:
    url: str
    protocol: ProxyProtocol

    @property
    def redacted_url(self) -> str:
        parsed = httpx.URL(self.url)
        if not parsed.password:
            return self.url
        # httpx 0.28 rebuilds userinfo from the given parts only.
        return str(parsed.copy_with(username=parsed.username, password="***"))


def resolve_connector(proxy_url: str | None) -> ProxyConnector | None:
    """Classify a proxy URL; ``None`` means connect directly."""
    if proxy_url is None or not proxy_url.strip():
        return None
    raw = proxy_url.strip()
    try:
        parsed = httpx.URL(raw)
    except (httpx.InvalidURL, TypeError, ValueError) as exc:
        raise InvalidProxyUrlError("Invalid proxy_url header format.", details=str(exc)) from exc
    if not parsed.scheme or not parsed.host:
        raise InvalidProxyUrlError("Invalid proxy_url header format.", details=f"cannot parse proxy URL: {raw!r}")

    scheme = parsed.scheme.lower()
    if scheme.startswith("socks"):
        return ProxyConnector(url=raw, protocol=ProxyProtocol.SOCKS)
    if scheme.startswith("http"):
        return ProxyConnector(url=raw, protocol=ProxyProtocol.HTTP_LIKE)
    raise InvalidProxyProtocolError("Unsupported proxy protocol.", details=f"unsupported scheme: {scheme}")


def transport_for(connector: ProxyConnector | None) -> httpx.AsyncBaseTransport | None:
    if connector is None:
        return None
    try:
        return httpx.AsyncHTTPTransport(proxy=connector.url)
    except ValueError as exc:
        raise InvalidProxyProtocolError("Unsupported proxy protocol.", details=str(exc)) from exc


async def probe_proxy(connector: ProxyConnector, ctx: RunContext) -> Any:
    """Fetch the IP-info endpoint through the connector, within the probe timeout."""
    ctx.logger.info(
        "proxy.probe.start",
        extra={"proxy": connector.redacted_url, "protocol": connector.protocol.value, "target": ctx.config.proxy_probe_url},
    )
    transport = ctx.transport_factory(connector)
    async with httpx.AsyncClient(transport=transport, timeout=ctx.config.proxy_probe_timeout_s) as client:
        try:
            response = await client.get(ctx.config.proxy_probe_url)
        except httpx.RequestError as exc:
            raise UpstreamTransportError.from_request_error(exc, PROBE_ERROR_MESSAGE) from exc
    if response.is_error:
        raise UpstreamTransportError.from_response(response, PROBE_ERROR_MESSAGE)
    try:
        return response.json()
    except ValueError as exc:
        raise InvalidUpstreamResponseError("Proxy probe endpoint did not return JSON.", details=response.text) from exc
