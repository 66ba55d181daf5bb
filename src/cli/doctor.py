"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.public_api import PublicClient
from core.config import AppSettings, get_user_env_file, write_user_env_vars
from core.errors import CoinbaseClientError, InvalidRequestError
from core.services.request_builder import build_request

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_api(settings: AppSettings) -> tuple[bool, str]:
    try:
        async with PublicClient(settings=settings) as client:
            now = await client.current_time()
        return True, f"server time {now.iso.isoformat()}"
    except CoinbaseClientError as exc:
        return False, str(exc).splitlines()[0]


def _settings_from(ctx: typer.Context) -> AppSettings:
    settings = ctx.obj
    if isinstance(settings, AppSettings):
        return settings
    return AppSettings()


@app.command()
def run(ctx: typer.Context) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = _settings_from(ctx)

    table = Table(title="coinbase-public doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    try:
        build_request(settings.base_url, "/current_time")
        table.add_row("Base URL", "OK", settings.base_url)
        url_ok = True
    except InvalidRequestError as exc:
        table.add_row("Base URL", "FAIL", exc.reason)
        url_ok = False
    table.add_row("User-Agent", "OK", settings.user_agent)
    table.add_row("Timeout", "OK", f"{settings.http_timeout_seconds:g}s")
    user_env = get_user_env_file()
    table.add_row("User config", "OK" if user_env.exists() else "OPTIONAL", str(user_env))

    # Connectivity (best-effort)
    if url_ok:
        ok_api, detail_api = asyncio.run(_check_api(settings))
        table.add_row("API connectivity", "OK" if ok_api else "FAIL", detail_api)
    else:
        ok_api = False
        table.add_row("API connectivity", "SKIPPED", "invalid base URL")

    _console.print(table)

    if not ok_api:
        _console.print(
            "\n[yellow]Note:[/yellow] set a reachable base URL with "
            "`coinbase-public doctor set-base-url <url>` or COINBASE_PUBLIC_BASE_URL."
        )
        raise typer.Exit(code=1)


@app.command(name="set-base-url")
def set_base_url(url: str = typer.Argument(..., help="Base URI, e.g. https://api.coinbase.com/v2")) -> None:
    """Store the API base URL in the user config .env."""

    url = url.strip().rstrip("/")
    try:
        build_request(url, "/current_time")
    except InvalidRequestError as exc:
        raise typer.BadParameter(exc.reason) from exc

    env_path = write_user_env_vars({"COINBASE_PUBLIC_BASE_URL": url})
    _console.print(f"[green]Saved base URL to:[/green] {env_path}")
