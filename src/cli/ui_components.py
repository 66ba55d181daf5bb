"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Mantiene la lógica de comandos separada de detalles de presentación.
- Tablas/paneles reutilizables entre comandos.
"""

from __future__ import annotations

from typing import Iterable

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import Currency, CurrencyPrice, CurrentTime, ExchangeRates


def build_currencies_table(currencies: Iterable[Currency]) -> Table:
    table = Table(title="Currencies")
    table.add_column("Code", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Min size", style="green", justify="right")
    for currency in currencies:
        table.add_row(currency.id, currency.name, str(currency.min_size))
    return table


def build_rates_table(rates: ExchangeRates, *, only: Iterable[str] | None = None) -> Table:
    """Rates for one unit of `rates.currency`, sorted by quote code.

    `only` restricts the rows to the given quote codes (case-insensitive).
    """

    wanted = {code.upper() for code in only} if only else None

    table = Table(title=f"Exchange rates for 1 {rates.currency}")
    table.add_column("Currency", style="cyan", no_wrap=True)
    table.add_column("Rate", style="green", justify="right")
    for code in sorted(rates.rates):
        if wanted is not None and code.upper() not in wanted:
            continue
        table.add_row(code, str(rates.rates[code]))
    return table


def build_price_panel(kind: str, pair: str, price: CurrencyPrice) -> Panel:
    """Panel for a buy/sell/spot quote. Amounts are printed verbatim."""

    base = price.base or pair.split("-", 1)[0]
    body = Text()
    body.append(f"1 {base}", style="bold")
    body.append(" = ")
    body.append(f"{price.amount} {price.currency}", style="bold green")
    return Panel(body, title=Text(f"{kind.capitalize()} price · {pair}", style="bold yellow"), border_style="yellow")


def build_time_panel(now: CurrentTime) -> Panel:
    body = Text()
    body.append("ISO:   ", style="dim")
    body.append(now.iso.isoformat() + "\n")
    body.append("Epoch: ", style="dim")
    body.append(str(now.timestamp()))
    return Panel(body, title=Text("Server time", style="bold cyan"), border_style="cyan")
