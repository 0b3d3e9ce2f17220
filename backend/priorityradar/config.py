"""Configuracion central del backend.

Lee variables de entorno y expone parametros usados por el motor de ICP,
la API y el CLI.
"""

from __future__ import annotations

from pathlib import Path

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Repo / env paths
REPO_ROOT = Path(__file__).resolve().parents[2]
PRIORITYRADAR_ENV_PATH = REPO_ROOT / "backend" / "priorityradar" / ".env"
PRIORITYRADAR_ENV_EXAMPLE = REPO_ROOT / "backend" / "priorityradar" / ".env.example"


def _ensure_env_file() -> None:
    """Crear `backend/priorityradar/.env` desde su `.env.example` si falta."""
    if PRIORITYRADAR_ENV_PATH.exists():
        return
    if not PRIORITYRADAR_ENV_EXAMPLE.exists():
        return
    PRIORITYRADAR_ENV_PATH.write_text(
        PRIORITYRADAR_ENV_EXAMPLE.read_text(encoding="utf-8"), encoding="utf-8"
    )


# Ensure backend env exists before pydantic reads it
_ensure_env_file()


class Settings(BaseSettings):
    """Parametros de configuracion de la aplicacion.

    Se cargan desde entorno/.env con pydantic-settings.
    """

    model_config = SettingsConfigDict(
        env_file=str(PRIORITYRADAR_ENV_PATH),
        env_file_encoding="utf-8",
        extra="allow",
    )

    ########################################
    # App
    ########################################
    app_name: str = Field(default="Priority Compliance Radar", validation_alias="APP_NAME")
    # Zona horaria del "hoy" de pared (vencidas vs en proceso del mes actual).
    # Nombre IANA; la variable TZ del sistema no se lee.
    app_tz: str = Field(default="UTC", validation_alias="APP_TZ")

    ########################################
    # Paths
    ########################################
    priorities_path: str = Field(
        default="./data/cache/priorities.json", validation_alias="PRIORITIES_PATH"
    )

    ########################################
    # ICP / Listados
    ########################################
    series_max_months: int = Field(default=36, ge=1, validation_alias="SERIES_MAX_MONTHS")
    list_page_size_default: int = Field(
        default=10, ge=1, validation_alias="LIST_PAGE_SIZE_DEFAULT"
    )
    list_page_size_max: int = Field(default=500, ge=1, validation_alias="LIST_PAGE_SIZE_MAX")

    ########################################
    # Concurrencia
    ########################################
    fetch_workers: int = Field(default=5, ge=1, validation_alias="FETCH_WORKERS")
    series_workers: int = Field(default=4, ge=1, validation_alias="SERIES_WORKERS")

    ########################################
    # Logging
    ########################################
    log_enabled: bool = Field(default=False, validation_alias="LOG_ENABLED")
    log_to_file: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    log_file_name: str = Field(default="priorityradar.log", validation_alias="LOG_FILE_NAME")
    log_debug: bool = Field(default=False, validation_alias="LOG_DEBUG")

    @field_validator("app_tz")
    @classmethod
    def check_app_tz(cls, value: str) -> str:
        """APP_TZ debe ser un nombre IANA; se valida al arrancar, no por peticion."""
        name = value.strip()
        try:
            ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
            raise ValueError(f"APP_TZ must be an IANA time zone name, got {value!r}") from exc
        return name


settings = Settings()


def reload_priorityradar_settings() -> None:
    """Recarga `settings` desde `backend/priorityradar/.env`."""
    new_settings = Settings()
    for field_name in Settings.model_fields:
        setattr(settings, field_name, getattr(new_settings, field_name))
