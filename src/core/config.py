"""Configuración del cliente.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que el adaptador HTTP y la CLI lean la misma config tipada.
"""

from __future__ import annotations

from pathlib import Path

import typer
from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_NAME = "coinbase-public"
APP_VERSION = "0.2.0"

USER_AGENT = f"{APP_NAME}/{APP_VERSION}"

MAIN_URL = "https://api.coinbase.com/v2"


def get_user_env_file() -> Path:
    """`.env` global del usuario (directorio de config por plataforma)."""

    return Path(typer.get_app_dir(APP_NAME)) / ".env"


def write_user_env_vars(values: dict[str, str]) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = {k: v for k, v in dotenv_values(env_path).items() if v is not None}

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# coinbase-public user config (.env)"]
    for key in sorted(existing):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central del cliente.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adaptador HTTP.
    """

    model_config = SettingsConfigDict(
        env_prefix="COINBASE_PUBLIC_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    base_url: str = Field(
        default=MAIN_URL,
        min_length=8,
        description="URI base de la API pública (los paths se concatenan tal cual).",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos), aplicado por el transporte.",
    )
    user_agent: str = Field(
        default=USER_AGENT,
        min_length=1,
        description="User-Agent enviado en cada request.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Nivel de log de la CLI (DEBUG, INFO, WARNING, ...).",
    )
