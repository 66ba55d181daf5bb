"""Error hierarchy for the public API client.

Every failure surfaces to the immediate caller of an endpoint method; the
client never retries or suppresses any of these.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import ValidationError

if TYPE_CHECKING:
    from core.domain.models import ApiErrorDetail, ApiErrorResponse


class CoinbaseClientError(Exception):
    """Base error for the public API client."""


class InvalidRequestError(CoinbaseClientError):
    """Raised when a request cannot be built (malformed base URI or path)."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Invalid request URI {url!r}: {reason}")
        self.url = url
        self.reason = reason


class TransportError(CoinbaseClientError):
    """Raised when the request could not be sent or no response arrived.

    The underlying httpx error is chained as ``__cause__``.
    """

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"Transport failure for {url}: {message}")
        self.url = url


class ApiError(CoinbaseClientError):
    """Raised when the API answered with its error shape instead of an envelope."""

    def __init__(self, response: ApiErrorResponse, status_code: int | None = None) -> None:
        details = "; ".join(f"{e.id}: {e.message}" for e in response.errors)
        prefix = f"HTTP {status_code} " if status_code is not None else ""
        super().__init__(f"{prefix}API error: {details}")
        self.response = response
        self.status_code = status_code

    @property
    def errors(self) -> list[ApiErrorDetail]:
        return self.response.errors


class DecodeError(CoinbaseClientError):
    """Raised when a body is neither a valid envelope nor a valid error shape,
    or when the envelope's ``data`` does not match the endpoint's type.

    ``body`` holds the raw response text, untruncated.
    """

    def __init__(self, error: ValidationError, body: str) -> None:
        super().__init__(f"Could not decode response: {error}\nResponse body:\n{body}")
        self.error = error
        self.body = body
