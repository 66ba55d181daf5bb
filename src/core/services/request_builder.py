"""Request builder.

Turns a relative API path into a transport-ready `httpx.Request`. Pure: no I/O.
"""

from __future__ import annotations

import httpx

from core.config import USER_AGENT
from core.errors import InvalidRequestError

_ALLOWED_SCHEMES = ("http", "https")


def _validate_target(target: str, path: str) -> httpx.URL:
    if "://" in path:
        raise InvalidRequestError(target, "path must be relative to the base URI")
    if any(ch.isspace() or ord(ch) < 0x20 or ord(ch) == 0x7F for ch in target):
        raise InvalidRequestError(target, "contains whitespace or control characters")

    try:
        url = httpx.URL(target)
    except httpx.InvalidURL as exc:
        raise InvalidRequestError(target, str(exc)) from exc

    if url.scheme not in _ALLOWED_SCHEMES:
        raise InvalidRequestError(target, "scheme must be http or https")
    if not url.host:
        raise InvalidRequestError(target, "missing host")
    return url


def build_request(
    base_url: str,
    path: str,
    *,
    user_agent: str = USER_AGENT,
    timeout: float | None = None,
) -> httpx.Request:
    """Build a GET request for `base_url + path`.

    - The path is appended verbatim (it may carry a literal query string).
    - The only header set is `User-Agent`; the body is empty.
    - `timeout` is attached as the httpx `timeout` extension so the
      transport enforces it.

    Raises `InvalidRequestError` when the concatenation is not a valid
    absolute http(s) URI.
    """

    target = base_url + path
    url = _validate_target(target, path)

    extensions = {}
    if timeout is not None:
        extensions["timeout"] = httpx.Timeout(timeout).as_dict()

    return httpx.Request(
        "GET",
        url,
        headers={"User-Agent": user_agent},
        extensions=extensions,
    )
