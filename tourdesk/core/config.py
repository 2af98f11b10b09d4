"""Configuration settings for the tourdesk service."""

import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _to_bool(value: str, *, default: bool = False) -> bool:
    lowered = value.strip().lower()
    if not lowered:
        return default
    return lowered in {"true", "1", "yes", "y", "on"}


class Settings:
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Tourdesk Service")
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./tourdesk.db")
    API_PREFIX: str = os.getenv("API_PREFIX", "/api")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Días hacia adelante que se expanden al generar turnos desde un horario
    DIAS_VENTANA_EXPANSION: int = int(os.getenv("DIAS_VENTANA_EXPANSION", "365"))
    RESERVA_HOLD_MINUTOS: int = int(os.getenv("RESERVA_HOLD_MINUTOS", "5"))

    NOTIFICATION_ENABLED: bool = _to_bool(
        os.getenv("NOTIFICATION_ENABLED", "true"), default=True
    )
    NOTIFICATION_SERVICE_URL: str = os.getenv("NOTIFICATION_SERVICE_URL", "")
    NOTIFICATION_SERVICE_TIMEOUT: float = float(
        os.getenv("NOTIFICATION_SERVICE_TIMEOUT", "10")
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()

__all__ = ["settings", "get_settings", "Settings"]
