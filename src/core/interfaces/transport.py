"""Contrato del transporte.

Por qué un Protocol:
- Contrato estructural (duck typing) sin herencia: `httpx.AsyncClient` lo
  cumple tal cual.
- Los tests pueden usar cualquier objeto con un `send` compatible (o un
  `httpx.AsyncClient` sobre `httpx.MockTransport`).
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import httpx


@runtime_checkable
class Transport(Protocol):
    """Contrato mínimo del colaborador HTTP.

    Reglas de diseño:
    - `send` es asíncrono; es el único punto de suspensión de una llamada.
    - Fallos de conexión, TLS y timeout salen como `httpx.HTTPError`.
    """

    async def send(self, request: httpx.Request) -> httpx.Response:
        """Envía `request` y devuelve la respuesta (el body puede no estar leído)."""

        ...
