"""
Configuración de la aplicación
Conjunto Residencial Arkania

Lee las variables de entorno (y el archivo .env si existe) y las expone
en el objeto global `settings`.
"""
import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

ENV_PATH = Path(__file__).resolve().parents[2] / ".env"
load_dotenv(ENV_PATH)
load_dotenv(Path.cwd() / ".env")


def _env_bool(key: str, default: str = "false") -> bool:
    return os.getenv(key, default).strip().lower() in ("1", "true", "yes", "si")


def _env_list(key: str, default: str = "") -> List[str]:
    return [item.strip() for item in os.getenv(key, default).split(",") if item.strip()]


class Settings:
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Conjunto Residencial Arkania")
    VERSION: str = os.getenv("VERSION", "1.0.0")
    API_PREFIX: str = os.getenv("API_PREFIX", "/api")

    # Base de datos
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./arkania.db")
    DB_ECHO: bool = _env_bool("DB_ECHO")

    # JWT
    SECRET_KEY: str = os.getenv("SECRET_KEY", "cambiar-esta-clave-en-produccion")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))
    REFRESH_TOKEN_EXPIRE_DAYS: int = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7"))

    # Paginación
    DEFAULT_PAGE_SIZE: int = int(os.getenv("DEFAULT_PAGE_SIZE", "20"))
    MAX_PAGE_SIZE: int = int(os.getenv("MAX_PAGE_SIZE", "100"))

    # Contraseñas
    PASSWORD_MIN_LENGTH: int = int(os.getenv("PASSWORD_MIN_LENGTH", "8"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS
    CORS_ORIGINS: List[str] = _env_list("CORS_ORIGINS", "*")

    # Crear roles por defecto al iniciar
    SEED_DEFAULT_ROLES: bool = _env_bool("SEED_DEFAULT_ROLES", "true")

    # Administrador inicial; solo se crea si ADMIN_EMAIL y ADMIN_PASSWORD tienen valor
    ADMIN_EMAIL: str = os.getenv("ADMIN_EMAIL", "")
    ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "")
    ADMIN_DOCUMENT_NUMBER: str = os.getenv("ADMIN_DOCUMENT_NUMBER", "1000000001")
    ADMIN_FIRST_NAME: str = os.getenv("ADMIN_FIRST_NAME", "Administrador")
    ADMIN_LAST_NAME: str = os.getenv("ADMIN_LAST_NAME", "Arkania")


settings = Settings()
