"""Shared fixtures: API bodies as the live API returns them, and a client
wired to an in-memory `httpx.MockTransport`."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from adapters.public_api import PublicClient  # noqa: E402
from core.config import AppSettings  # noqa: E402

BASE_URL = "https://api.example.com/v2"


def envelope(data: Any, **extra: Any) -> bytes:
    return json.dumps({"data": data, **extra}).encode("utf-8")


CURRENCIES_DATA = [
    {"id": "AED", "name": "United Arab Emirates Dirham", "min_size": "0.01000000"},
    {"id": "AFN", "name": "Afghan Afghani", "min_size": "0.01000000"},
    {"id": "ALL", "name": "Albanian Lek", "min_size": "0.01000000"},
    {"id": "AMD", "name": "Armenian Dram", "min_size": "0.01000000"},
]

EXCHANGE_RATES_DATA = {
    "currency": "BTC",
    "rates": {
        "AED": "36.73",
        "AFN": "589.50",
        "ALL": "1258.82",
        "AMD": "4769.49",
        "ANG": "17.88",
        "AOA": "1102.76",
        "ARS": "90.37",
        "AUD": "12.93",
        "AWG": "17.93",
        "AZN": "10.48",
        "BAM": "17.38",
    },
}

PRICE_DATA = {"amount": "1010.25", "currency": "USD"}

TIME_DATA = {"iso": "2015-06-23T18:02:51Z", "epoch": 1435082571}

PAGINATION = {
    "ending_before": None,
    "starting_after": None,
    "previous_ending_before": None,
    "next_starting_after": "2015-06-23T18:02:51Z",
    "limit": 25,
    "order": "desc",
    "previous_uri": None,
    "next_uri": "/v2/currencies?starting_after=2015-06-23T18%3A02%3A51Z",
}

NOT_FOUND = {"errors": [{"id": "not_found", "message": "Not found"}]}


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(base_url=BASE_URL, http_timeout_seconds=5.0, _env_file=None)


@pytest.fixture
def make_client(settings: AppSettings) -> Callable[[Callable[[httpx.Request], Any]], PublicClient]:
    """Build a `PublicClient` whose transport answers with `handler`."""

    def _make(handler: Callable[[httpx.Request], Any]) -> PublicClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return PublicClient(settings=settings, transport=http)

    return _make
