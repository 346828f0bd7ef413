"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP, sesión) lean config de forma consistente.

Dónde se busca el `.env` por usuario:
- `RECRUIT_PORTAL_CONFIG_DIR` si está definida (útil en CI y en tests).
- Si no, la ruta habitual de cada plataforma (APPDATA, Application Support,
  XDG).
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import set_key
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_DIR_NAME = "recruit-portal"
CONFIG_DIR_ENV = "RECRUIT_PORTAL_CONFIG_DIR"


def _platform_config_root() -> Path:
    home = Path.home()
    if sys.platform.startswith("win"):
        return Path(os.environ.get("APPDATA") or home)
    if sys.platform == "darwin":
        return home / "Library" / "Application Support"
    return Path(os.environ.get("XDG_CONFIG_HOME") or home / ".config")


def get_user_config_dir() -> Path:
    """Directorio por usuario con el `.env` global y la sesión persistida."""

    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return _platform_config_root() / APP_DIR_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def get_default_session_file() -> Path:
    return get_user_config_dir() / "session.json"


def write_user_env_vars(values: dict[str, str | None], *, env_path: Path | None = None) -> Path:
    """Actualiza claves del `.env` de usuario conservando el resto del fichero.

    `python-dotenv` reescribe solo las líneas de las claves pedidas; los
    comentarios y las demás variables quedan como estaban. Los valores `None`
    se ignoran.
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)
    env_path.touch(exist_ok=True)
    for key, value in values.items():
        if value is not None:
            set_key(env_path, key, value, quote_mode="never")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="RECRUIT_PORTAL_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_base_url: str = Field(
        default="http://localhost:5000/recruitment/api/v1",
        min_length=8,
        description="Base URL del backend REST (sin barra final).",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="recruit-portal-client/0.1",
        min_length=1,
        description="User-Agent para peticiones al backend.",
    )

    auth_login_endpoints: list[str] = Field(
        default_factory=lambda: ["auth/login", "Auth/Login", "account/login", "users/login"],
        min_length=1,
        description="Endpoints de login candidatos, en orden de preferencia.",
    )
    public_jobs_endpoint: str = Field(
        default="public/PublicJobs",
        min_length=1,
        description="Segmento del listado público de ofertas de empleo.",
    )
    offer_endpoints: list[str] = Field(
        default_factory=lambda: ["Offers", "offers", "OfferLetters", "offer-letters", "hiring/offers"],
        min_length=1,
        description="Variantes de endpoint para cartas de oferta; la primera es la primaria.",
    )

    session_tick_seconds: float = Field(
        default=15.0,
        gt=0,
        description="Intervalo del tick que recalcula la expiración de sesión.",
    )
    session_warning_minutes: int = Field(
        default=5,
        ge=1,
        le=120,
        description="Minutos restantes a partir de los cuales se emite aviso.",
    )
    session_file: Path | None = Field(
        default=None,
        description="Ruta del fichero de sesión persistida (por defecto en el dir de usuario).",
    )

    max_shape_attempts: int = Field(
        default=3,
        ge=1,
        le=3,
        description="Intentos de red máximos por operación con negociación de forma.",
    )

    log_level: str = Field(
        default="WARNING",
        description="Nivel de logging de la CLI (DEBUG, INFO, WARNING...).",
    )

    def resolved_session_file(self) -> Path:
        return self.session_file or get_default_session_file()
