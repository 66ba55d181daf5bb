"""Tests for PublicClient over an in-memory transport: endpoint paths, error
classification end to end, and concurrent use of one client handle."""

from __future__ import annotations

import asyncio
from datetime import date
from decimal import Decimal

import httpx
import pytest

from adapters.public_api import ENDPOINTS, PublicClient
from conftest import (
    BASE_URL,
    CURRENCIES_DATA,
    EXCHANGE_RATES_DATA,
    NOT_FOUND,
    PAGINATION,
    PRICE_DATA,
    TIME_DATA,
    envelope,
)
from core.config import USER_AGENT
from core.errors import ApiError, DecodeError, InvalidRequestError, TransportError

_BODIES = {
    "/v2/currencies": envelope(CURRENCIES_DATA, pagination=PAGINATION),
    "/v2/exchange-rates": envelope(EXCHANGE_RATES_DATA),
    "/v2/current_time": envelope(TIME_DATA),
}


def _route(request: httpx.Request) -> httpx.Response:
    body = _BODIES.get(request.url.path, envelope(PRICE_DATA))
    return httpx.Response(200, content=body)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("call", "expected_url"),
    [
        (lambda c: c.currencies(), f"{BASE_URL}/currencies"),
        (lambda c: c.exchange_rates(), f"{BASE_URL}/exchange-rates"),
        (lambda c: c.exchange_rates("EUR"), f"{BASE_URL}/exchange-rates?currency=EUR"),
        (lambda c: c.exchange_rates_with_base("BTC"), f"{BASE_URL}/exchange-rates?currency=BTC"),
        (lambda c: c.buy_price("BTC-USD"), f"{BASE_URL}/currency_pair/BTC-USD/buy"),
        (lambda c: c.sell_price("ETH-EUR"), f"{BASE_URL}/currency_pair/ETH-EUR/sell"),
        (lambda c: c.spot_price("BTC-USD"), f"{BASE_URL}/currency_pair/BTC-USD/spot"),
        (
            lambda c: c.spot_price("BTC-USD", date(2017, 1, 1)),
            f"{BASE_URL}/currency_pair/BTC-USD/spot?date=2017-01-01",
        ),
        (lambda c: c.current_time(), f"{BASE_URL}/current_time"),
    ],
)
async def test_endpoint_paths_and_header(make_client, call, expected_url: str) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return _route(request)

    client = make_client(handler)
    await call(client)

    assert len(seen) == 1
    assert str(seen[0].url) == expected_url
    assert seen[0].method == "GET"
    assert seen[0].headers["User-Agent"] == USER_AGENT


@pytest.mark.asyncio
async def test_typed_results(make_client) -> None:
    client = make_client(_route)

    currencies = await client.currencies()
    rates = await client.exchange_rates()
    price = await client.buy_price("BTC-USD")
    now = await client.current_time()

    assert [c.id for c in currencies] == ["AED", "AFN", "ALL", "AMD"]
    assert rates.rates["ALL"] == Decimal("1258.82")
    assert price.amount == Decimal("1010.25")
    assert now.timestamp() == 1435082571


@pytest.mark.asyncio
async def test_currencies_page_exposes_pagination(make_client) -> None:
    client = make_client(_route)

    page = await client.currencies_page()

    assert len(page.data) == 4
    assert page.pagination is not None
    assert page.pagination.next_uri.startswith("/v2/currencies")


@pytest.mark.asyncio
async def test_get_dispatches_on_endpoint_table(make_client) -> None:
    client = make_client(_route)

    price = await client.get("spot_price", pair="BTC-USD")

    assert "spot_price" in ENDPOINTS
    assert price.currency == "USD"


@pytest.mark.asyncio
async def test_api_error_is_raised_with_status(make_client) -> None:
    client = make_client(lambda request: httpx.Response(404, json=NOT_FOUND))

    with pytest.raises(ApiError) as excinfo:
        await client.buy_price("FOO-BAR")

    assert excinfo.value.status_code == 404
    assert excinfo.value.errors[0].id == "not_found"


@pytest.mark.asyncio
async def test_unrecognized_body_is_decode_error(make_client) -> None:
    client = make_client(lambda request: httpx.Response(502, text="<html>Bad Gateway</html>"))

    with pytest.raises(DecodeError) as excinfo:
        await client.current_time()

    assert excinfo.value.body == "<html>Bad Gateway</html>"


@pytest.mark.asyncio
async def test_wrong_data_shape_is_decode_error(make_client) -> None:
    body = envelope({"iso": "yesterday"})
    client = make_client(lambda request: httpx.Response(200, content=body))

    with pytest.raises(DecodeError) as excinfo:
        await client.current_time()

    assert excinfo.value.body == body.decode()


@pytest.mark.asyncio
async def test_transport_failure_is_transport_error(make_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)

    with pytest.raises(TransportError) as excinfo:
        await client.currencies()

    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)
    assert excinfo.value.url == f"{BASE_URL}/currencies"


@pytest.mark.asyncio
async def test_timeout_is_transport_error(make_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = make_client(handler)

    with pytest.raises(TransportError):
        await client.current_time()


@pytest.mark.asyncio
async def test_invalid_pair_never_reaches_transport(make_client) -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return _route(request)

    client = make_client(handler)

    with pytest.raises(InvalidRequestError):
        await client.buy_price("BTC USD")
    assert calls == []


@pytest.mark.asyncio
async def test_invalid_base_url_is_invalid_request(settings) -> None:
    async with httpx.AsyncClient(transport=httpx.MockTransport(_route)) as http:
        client = PublicClient("https://api example.com/v2", settings=settings, transport=http)
        with pytest.raises(InvalidRequestError):
            await client.current_time()


@pytest.mark.asyncio
async def test_concurrent_calls_are_independent(make_client) -> None:
    pairs = [f"C{i}-USD" for i in range(20)]

    async def handler(request: httpx.Request) -> httpx.Response:
        pair = request.url.path.split("/")[3]
        index = int(pair.split("-")[0][1:])
        # Later requests answer first so responses interleave.
        await asyncio.sleep(0.001 * (len(pairs) - index))
        return httpx.Response(200, content=envelope({"amount": f"{index}.{index:02d}", "currency": pair}))

    client = make_client(handler)

    prices = await asyncio.gather(*(client.buy_price(pair) for pair in pairs))

    for index, (pair, price) in enumerate(zip(pairs, prices)):
        assert price.currency == pair
        assert price.amount == Decimal(f"{index}.{index:02d}")


@pytest.mark.asyncio
async def test_injected_transport_is_not_closed(settings) -> None:
    async with httpx.AsyncClient(transport=httpx.MockTransport(_route)) as http:
        async with PublicClient(settings=settings, transport=http) as client:
            await client.current_time()
        assert not http.is_closed


@pytest.mark.asyncio
async def test_owned_transport_is_closed(settings) -> None:
    client = PublicClient(settings=settings)
    assert client.base_url == settings.base_url

    await client.aclose()

    assert client._transport.is_closed


def test_base_url_argument_overrides_settings(settings) -> None:
    client = PublicClient("https://api.other.example/v2", settings=settings)

    request = client.request("/current_time")

    assert str(request.url) == "https://api.other.example/v2/current_time"
    assert request.extensions["timeout"]["read"] == settings.http_timeout_seconds
