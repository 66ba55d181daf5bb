"""Response interpreter.

Two-phase decode of a raw response body:

1. parse the JSON once (numbers with a fraction become `Decimal`, never
   `float`) and classify the document as an explicit outcome, trying the
   success envelope first and the API error shape second:
   `EnvelopeOutcome | ApiErrorOutcome | UnrecognizedOutcome`;
2. for an envelope, validate its `data` against the endpoint's expected type.

Empty, truncated and wrong-shape bodies all go through the same chain.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, TypeVar, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from core.domain.models import ApiErrorResponse, Envelope, Page
from core.errors import ApiError, DecodeError

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class EnvelopeOutcome:
    envelope: Envelope


@dataclass(frozen=True)
class ApiErrorOutcome:
    response: ApiErrorResponse


@dataclass(frozen=True)
class UnrecognizedOutcome:
    """Neither an envelope nor an error shape.

    `error` is the first failure of the chain: invalid JSON, or the
    envelope failure (never the error-shape one).
    """

    error: ValidationError
    body: str


DecodeOutcome = Union[EnvelopeOutcome, ApiErrorOutcome, UnrecognizedOutcome]


@dataclass(frozen=True)
class _Parsed:
    document: Any = None
    error: ValidationError | None = None


def body_text(body: bytes) -> str:
    """Raw body as text for diagnostics (never fails, never truncates)."""

    return body.decode("utf-8", errors="replace")


def _parse_json(body: bytes) -> _Parsed:
    """Parse `body` keeping every JSON number with a fraction as `Decimal`."""

    try:
        return _Parsed(document=json.loads(body, parse_float=Decimal))
    except ValueError as exc:
        error = ValidationError.from_exception_data(
            Envelope.__name__,
            [{"type": "json_invalid", "loc": (), "input": body_text(body), "ctx": {"error": str(exc)}}],
        )
        return _Parsed(error=error)


def _validate(model: type[M], document: Any) -> M | ValidationError:
    try:
        return model.model_validate(document)
    except ValidationError as exc:
        return exc


def classify(body: bytes) -> DecodeOutcome:
    """Classify `body`: envelope first, then error shape, then unrecognized."""

    parsed = _parse_json(body)
    if parsed.error is not None:
        # Not JSON: neither shape can match.
        return UnrecognizedOutcome(error=parsed.error, body=body_text(body))

    envelope = _validate(Envelope, parsed.document)
    if isinstance(envelope, Envelope):
        return EnvelopeOutcome(envelope)

    api_error = _validate(ApiErrorResponse, parsed.document)
    if isinstance(api_error, ApiErrorResponse):
        return ApiErrorOutcome(api_error)

    return UnrecognizedOutcome(error=envelope, body=body_text(body))


def decode_data(envelope: Envelope, adapter: TypeAdapter[T], body: bytes) -> T:
    """Decode the envelope's `data` into the adapter's type.

    `data` is validated as parsed, so decimal numbers reach the adapter as
    `Decimal`. `body` is only used for the diagnostic attached to `DecodeError`.
    """

    try:
        return adapter.validate_python(envelope.data)
    except ValidationError as exc:
        logger.debug("Envelope data did not match the expected type")
        raise DecodeError(exc, body_text(body)) from exc


def _require_envelope(body: bytes, status_code: int | None) -> Envelope:
    outcome = classify(body)
    if isinstance(outcome, ApiErrorOutcome):
        logger.debug("Response classified as API error (status=%s)", status_code)
        raise ApiError(outcome.response, status_code)
    if isinstance(outcome, UnrecognizedOutcome):
        logger.debug("Response classified as unrecognized (status=%s)", status_code)
        raise DecodeError(outcome.error, outcome.body)
    return outcome.envelope


def interpret(body: bytes, adapter: TypeAdapter[T], *, status_code: int | None = None) -> T:
    """Decode `body` into the adapter's type or raise a classified error.

    Raises:
        ApiError: the body is the API's error shape.
        DecodeError: the body is not recognised, or `data` has the wrong shape.
    """

    envelope = _require_envelope(body, status_code)
    return decode_data(envelope, adapter, body)


def interpret_page(
    body: bytes,
    adapter: TypeAdapter[T],
    *,
    status_code: int | None = None,
) -> Page[Any]:
    """Same as `interpret`, keeping the envelope's pagination metadata."""

    envelope = _require_envelope(body, status_code)
    data = decode_data(envelope, adapter, body)
    return Page(data=data, pagination=envelope.pagination)
