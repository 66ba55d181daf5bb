"""`coinbase-public` command line.

Thin example surface over `adapters.public_api.PublicClient`: every command
is one client call plus a Rich render. Client errors are reported once, at
the command boundary, with exit code 1.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Awaitable, Callable, List, Optional, TypeVar

import typer
from rich.console import Console
from rich.markup import escape

from adapters.public_api import PublicClient
from cli import doctor
from cli.logging_setup import setup_logging
from cli.ui_components import (
    build_currencies_table,
    build_price_panel,
    build_rates_table,
    build_time_panel,
)
from core.config import APP_NAME, APP_VERSION, AppSettings
from core.errors import CoinbaseClientError, DecodeError

T = TypeVar("T")

app = typer.Typer(
    name=APP_NAME,
    no_args_is_help=True,
    help="Public Coinbase data (currencies, rates, prices, server time).",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


def make_client(settings: AppSettings) -> PublicClient:
    return PublicClient(settings=settings)


def _settings_from(ctx: typer.Context) -> AppSettings:
    settings = ctx.obj
    if isinstance(settings, AppSettings):
        return settings
    return AppSettings()


def run_call(settings: AppSettings, call: Callable[[PublicClient], Awaitable[T]]) -> T:
    """Run one client call on a fresh event loop and report client errors."""

    async def runner() -> T:
        async with make_client(settings) as client:
            return await call(client)

    try:
        return asyncio.run(runner())
    except CoinbaseClientError as exc:
        _err_console.print(f"[red]Error:[/red] {escape(str(exc).splitlines()[0])}")
        if isinstance(exc, DecodeError):
            _err_console.print("[dim]Response body:[/dim]")
            _err_console.print(escape(exc.body), highlight=False)
        raise typer.Exit(code=1) from exc


def _version_callback(value: bool) -> None:
    if value:
        _console.print(f"{APP_NAME} {APP_VERSION}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Override the API base URI."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    settings = AppSettings()
    if base_url:
        settings = settings.model_copy(update={"base_url": base_url})
    setup_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = settings


@app.command()
def currencies(ctx: typer.Context) -> None:
    """List known currencies."""

    result = run_call(_settings_from(ctx), lambda client: client.currencies())
    _console.print(build_currencies_table(result))


@app.command()
def rates(
    ctx: typer.Context,
    base: Optional[str] = typer.Option(None, "--base", "-b", help="Base currency (default USD)."),
    only: Optional[List[str]] = typer.Option(None, "--only", "-o", help="Show only these quote currencies."),
) -> None:
    """Exchange rates for one unit of the base currency."""

    result = run_call(_settings_from(ctx), lambda client: client.exchange_rates(base))
    _console.print(build_rates_table(result, only=only))


@app.command()
def buy(ctx: typer.Context, pair: str = typer.Argument(..., help="Currency pair, e.g. BTC-USD.")) -> None:
    """Total price to buy one unit of the base currency."""

    price = run_call(_settings_from(ctx), lambda client: client.buy_price(pair))
    _console.print(build_price_panel("buy", pair, price))


@app.command()
def sell(ctx: typer.Context, pair: str = typer.Argument(..., help="Currency pair, e.g. BTC-USD.")) -> None:
    """Total price to sell one unit of the base currency."""

    price = run_call(_settings_from(ctx), lambda client: client.sell_price(pair))
    _console.print(build_price_panel("sell", pair, price))


@app.command()
def spot(
    ctx: typer.Context,
    pair: str = typer.Argument(..., help="Currency pair, e.g. BTC-USD."),
    on: Optional[datetime] = typer.Option(None, "--date", formats=["%Y-%m-%d"], help="Historic day (UTC)."),
) -> None:
    """Current (or historic) market price of a currency pair."""

    day = on.date() if on is not None else None
    price = run_call(_settings_from(ctx), lambda client: client.spot_price(pair, day))
    _console.print(build_price_panel("spot", pair, price))


@app.command(name="time")
def server_time(ctx: typer.Context) -> None:
    """API server time."""

    now = run_call(_settings_from(ctx), lambda client: client.current_time())
    _console.print(build_time_panel(now))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
