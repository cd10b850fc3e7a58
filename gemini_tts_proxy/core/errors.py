from __future__ import annotations

from typing import Any

import httpx


class GatewayError(Exception):
    """Base class for errors that are rendered straight into the HTTP response."""

    status_code: int = 500
    err_type: str = "server_error"
    code: str | None = None

    def __init__(self, message: str, *, details: Any = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code


class MissingApiKeyError(GatewayError):
    status_code = 401
    err_type = "authentication_error"
    code = "missing_api_key"


class InvalidProxyUrlError(GatewayError):
    status_code = 400
    err_type = "invalid_request_error"
    code = "invalid_proxy_url"


class InvalidProxyProtocolError(GatewayError):
    status_code = 400
    err_type = "invalid_request_error"
    code = "invalid_proxy_protocol"


class InvalidRequestBodyError(GatewayError):
    status_code = 400
    err_type = "invalid_request_error"
    code = "invalid_body"


class RequestTooLargeError(GatewayError):
    status_code = 413
    err_type = "invalid_request_error"
    code = "body_too_large"


class UpstreamTransportError(GatewayError):
    err_type = "upstream_error"
    code = "upstream_transport"

    @classmethod
    def from_response(cls, response: httpx.Response, message: str) -> "UpstreamTransportError":
        try:
            body: Any = response.json()
        except ValueError:
            body = response.text
        if isinstance(body, dict) and "error" in body:
            body = body["error"]
        return cls(message, details=body, status_code=response.status_code)

    @classmethod
    def from_request_error(cls, exc: httpx.RequestError, message: str) -> "UpstreamTransportError":
        return cls(message, details=f"{type(exc).__name__}: {exc}")


class InvalidUpstreamResponseError(GatewayError):
    err_type = "upstream_error"
    code = "invalid_upstream_response"


class FileWriteError(GatewayError):
    code = "file_write_failed"
