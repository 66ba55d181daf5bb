"""Public (unauthenticated) Coinbase v2 data API.

Every endpoint is a row of `ENDPOINTS`: a path template plus the type its
`data` decodes into. A call is one request build, one `send` and one decode;
nothing is cached, retried or followed.

https://developers.coinbase.com/api/v2
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any

import httpx
from pydantic import TypeAdapter

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.models import Currency, CurrencyPrice, CurrentTime, ExchangeRates, Page
from core.errors import TransportError
from core.interfaces.transport import Transport
from core.services.request_builder import build_request
from core.services.response_decoder import interpret, interpret_page

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Endpoint:
    """Path template (relative to the base URI) and the expected `data` type."""

    path: str
    result: TypeAdapter[Any]

    def render(self, **params: str) -> str:
        return self.path.format(**params)


_CURRENCY_PRICE = TypeAdapter(CurrencyPrice)
_EXCHANGE_RATES = TypeAdapter(ExchangeRates)

ENDPOINTS: dict[str, Endpoint] = {
    "currencies": Endpoint("/currencies", TypeAdapter(list[Currency])),
    "exchange_rates": Endpoint("/exchange-rates", _EXCHANGE_RATES),
    "exchange_rates_with_base": Endpoint("/exchange-rates?currency={base}", _EXCHANGE_RATES),
    "buy_price": Endpoint("/currency_pair/{pair}/buy", _CURRENCY_PRICE),
    "sell_price": Endpoint("/currency_pair/{pair}/sell", _CURRENCY_PRICE),
    "spot_price": Endpoint("/currency_pair/{pair}/spot", _CURRENCY_PRICE),
    "spot_price_on_date": Endpoint("/currency_pair/{pair}/spot?date={date}", _CURRENCY_PRICE),
    "current_time": Endpoint("/current_time", TypeAdapter(CurrentTime)),
}


class PublicClient:
    """Client handle for the public endpoints.

    Holds the base URI, the settings and a transport; nothing is mutated after
    construction, so one instance can serve any number of concurrent calls.

    A transport created here is closed by `aclose()` / `async with`; an
    injected one belongs to the caller.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        settings: AppSettings | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._base_url = base_url if base_url is not None else self._settings.base_url
        self._owns_transport = transport is None
        self._transport: Transport = transport or build_async_client(self._settings)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def settings(self) -> AppSettings:
        return self._settings

    async def aclose(self) -> None:
        if self._owns_transport and isinstance(self._transport, httpx.AsyncClient):
            await self._transport.aclose()

    async def __aenter__(self) -> "PublicClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def request(self, path: str) -> httpx.Request:
        return build_request(
            self._base_url,
            path,
            user_agent=self._settings.user_agent,
            timeout=self._settings.http_timeout_seconds,
        )

    async def _fetch(self, request: httpx.Request) -> tuple[int, bytes]:
        logger.debug("GET %s", request.url)
        try:
            response = await self._transport.send(request)
            try:
                body = await response.aread()
            finally:
                await response.aclose()
        except httpx.HTTPError as exc:
            logger.debug("Transport failure for %s: %r", request.url, exc)
            raise TransportError(str(request.url), str(exc) or exc.__class__.__name__) from exc

        logger.debug("HTTP %s from %s (%d bytes)", response.status_code, request.url, len(body))
        return response.status_code, body

    async def get(self, name: str, **params: str) -> Any:
        """Call the endpoint registered as `name` in `ENDPOINTS`."""

        endpoint = ENDPOINTS[name]
        status_code, body = await self._fetch(self.request(endpoint.render(**params)))
        return interpret(body, endpoint.result, status_code=status_code)

    async def get_page(self, name: str, **params: str) -> Page[Any]:
        """Like `get`, also returning the envelope's pagination metadata."""

        endpoint = ENDPOINTS[name]
        status_code, body = await self._fetch(self.request(endpoint.render(**params)))
        return interpret_page(body, endpoint.result, status_code=status_code)

    async def currencies(self) -> list[Currency]:
        """**Get currencies**

        List known currencies. Codes conform to ISO 4217 where possible;
        currencies without an ISO 4217 representation use a custom code (e.g. BTC).

        https://developers.coinbase.com/api/v2#currencies
        """

        return await self.get("currencies")

    async def currencies_page(self) -> Page[list[Currency]]:
        return await self.get_page("currencies")

    async def exchange_rates(self, base: str | None = None) -> ExchangeRates:
        """**Get exchange rates**

        Default base currency is USD; rates are for one unit of the base currency.

        https://developers.coinbase.com/api/v2#exchange-rates
        """

        if base is not None:
            return await self.exchange_rates_with_base(base)
        return await self.get("exchange_rates")

    async def exchange_rates_with_base(self, base: str) -> ExchangeRates:
        return await self.get("exchange_rates_with_base", base=base)

    async def buy_price(self, pair: str) -> CurrencyPrice:
        """**Get buy price**: total price to buy one unit of the base currency.

        https://developers.coinbase.com/api/v2#get-buy-price
        """

        return await self.get("buy_price", pair=pair)

    async def sell_price(self, pair: str) -> CurrencyPrice:
        """**Get sell price**: total price to sell one unit of the base currency.

        https://developers.coinbase.com/api/v2#get-sell-price
        """

        return await self.get("sell_price", pair=pair)

    async def spot_price(self, pair: str, on: date | None = None) -> CurrencyPrice:
        """**Get spot price**

        Current market price for a currency pair, usually between the buy and
        sell price. With `on`, the historic spot price for that day (UTC).

        https://developers.coinbase.com/api/v2#get-spot-price
        """

        if on is not None:
            return await self.get("spot_price_on_date", pair=pair, date=on.isoformat())
        return await self.get("spot_price", pair=pair)

    async def current_time(self) -> CurrentTime:
        """**Get current time** of the API server.

        https://developers.coinbase.com/api/v2#time
        """

        return await self.get("current_time")
