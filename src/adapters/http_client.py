"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts y política de redirects del transporte.
- Facilita testing: se puede enchufar un `httpx.MockTransport`.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def build_async_client(
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Los requests se arman en `core.services.request_builder` y se envían tal
    cual, así que aquí solo importa la config a nivel de transporte.
    """

    settings = settings or AppSettings()
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        transport=transport,
    )
