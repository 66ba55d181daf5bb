"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- Los campos Decimal y datetime se validan desde lo que manda la API (strings
  o números ya parseados como `Decimal`): los montos nunca pasan por `float`.

Nota:
- Estos modelos describen *qué* devuelve la API, no *cómo* se obtiene.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import AwareDatetime, BaseModel, Field
from pydantic.config import ConfigDict

T = TypeVar("T")

_RECORD_CONFIG = ConfigDict(frozen=True, extra="ignore")


class Order(str, Enum):
    """Orden de una colección paginada."""

    ASCENDING = "asc"
    DESCENDING = "desc"


class Pagination(BaseModel):
    """Estado del cursor de un endpoint de listado.

    Solo informativo: el cliente nunca sigue `next_uri` por su cuenta.
    """

    model_config = _RECORD_CONFIG

    ending_before: AwareDatetime | None = None
    starting_after: AwareDatetime | None = None
    previous_ending_before: AwareDatetime | None = None
    next_starting_after: AwareDatetime | None = None
    limit: int = Field(..., ge=0, description="Tamaño de página.")
    order: Order = Field(..., description="Orden (asc/desc).")
    # La API real manda null en los extremos del cursor.
    previous_uri: str | None = None
    next_uri: str | None = None


class Envelope(BaseModel):
    """Envoltorio de toda respuesta exitosa.

    `data` es obligatorio: un objeto sin él no es un envelope. Se valida sobre
    el JSON ya parseado, así que los números decimales llegan como `Decimal`.
    """

    model_config = _RECORD_CONFIG

    data: Any = Field(..., description="Payload propio de cada endpoint.")
    pagination: Pagination | None = Field(
        default=None,
        description="Metadatos del cursor (solo endpoints de colección).",
    )


class ApiErrorDetail(BaseModel):
    model_config = _RECORD_CONFIG

    id: str = Field(..., min_length=1, description="Id del error (legible por máquina).")
    message: str = Field(..., description="Mensaje legible del error.")
    url: str | None = Field(default=None, description="Link a la documentación, si existe.")


class ApiErrorResponse(BaseModel):
    """Forma de error que devuelve la API en lugar de un envelope."""

    model_config = _RECORD_CONFIG

    errors: list[ApiErrorDetail] = Field(..., min_length=1)
    warnings: list[ApiErrorDetail] = Field(default_factory=list)


class Currency(BaseModel):
    """Moneda conocida (código ISO 4217 cuando existe, p. ej. `USD`, o propio, p. ej. `BTC`)."""

    model_config = _RECORD_CONFIG

    id: str = Field(..., min_length=1)
    name: str
    min_size: Decimal


class ExchangeRates(BaseModel):
    """Tasas por una unidad de `currency`, indexadas por moneda cotizada."""

    model_config = _RECORD_CONFIG

    currency: str
    rates: dict[str, Decimal] = Field(default_factory=dict)


class CurrencyPrice(BaseModel):
    model_config = _RECORD_CONFIG

    amount: Decimal
    currency: str
    base: str | None = None


class CurrentTime(BaseModel):
    """Hora del servidor de la API."""

    model_config = _RECORD_CONFIG

    iso: AwareDatetime
    epoch: int | None = None

    def timestamp(self) -> int:
        """Segundos enteros desde el epoch Unix, derivados de `iso`."""

        return int(self.iso.timestamp())


class Page(BaseModel, Generic[T]):
    """`data` decodificado junto con la paginación del envelope."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    data: T
    pagination: Pagination | None = None

