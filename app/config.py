from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

_BACKEND_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = f"sqlite:///{_BACKEND_ROOT / 'proveedores.db'}"

    # App
    APP_NAME: str = "Gestión de Proveedores"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # CORS — se puede sobreescribir con env var CORS_ORIGINS como JSON array
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # Locales aceptados en el primer segmento de la ruta (/{locale}/provider)
    SUPPORTED_LOCALES: list[str] = ["es", "en"]
    DEFAULT_LOCALE: str = "es"

    # Delete token (CSRF)
    CSRF_SECRET: str = "change-this-secret-in-production"
    CSRF_ALGORITHM: str = "HS256"
    CSRF_TOKEN_MINUTES: int = 60
    # False: an invalid delete token is ignored silently (same redirect/flash).
    # True: the router answers 403.
    CSRF_STRICT: bool = False

    # Export
    EXPORT_FILENAME: str = "proveedores_contabilidad.csv"

    model_config = {"env_file": ".env", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
