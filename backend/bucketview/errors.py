"""Error taxonomy shared by the proxy endpoints and the client-side services.

Every failure is recovered at the boundary of the operation that started it:
the HTTP layer maps these to status codes, the navigator records the message.
"""

from __future__ import annotations

from typing import Any


class BucketViewError(Exception):
    status_code = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(BucketViewError):
    """A required credential or request field is missing or malformed (HTTP 400)."""

    status_code = 400


class MissingCredentialsError(ValidationError):
    def __init__(self, fields: list[str] | None = None, message: str | None = None):
        fields = list(fields or [])
        if message is None:
            message = "Missing credentials: " + ", ".join(fields) if fields else "Missing credentials"
        super().__init__(message, {"fields": fields})
        self.fields = fields


class MissingFieldError(ValidationError):
    def __init__(self, fields: list[str]):
        super().__init__("Missing required fields: " + ", ".join(fields), {"fields": list(fields)})
        self.fields = list(fields)


class GatewayError(BucketViewError):
    """The object store call failed; ``message`` is the provider's text, unchanged."""

    status_code = 500


class UploadError(GatewayError):
    pass


def provider_message(exc: BaseException) -> str:
    """Best human-readable message carried by a boto/botocore exception."""
    response = getattr(exc, "response", None)
    if isinstance(response, dict):
        msg = (response.get("Error") or {}).get("Message")
        if msg:
            return str(msg)
    return str(exc) or type(exc).__name__


class ProxyError(BucketViewError):
    """Non-2xx answer from the proxy, as seen by the client. ``message`` is the server's ``error`` text."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message, {"status": status_code})
        self.status_code = status_code
