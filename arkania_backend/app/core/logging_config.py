"""Configuración de logging de la aplicación"""
import logging
import logging.config

from app.core.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = None) -> None:
    """Configura el logger raíz y los loggers de uvicorn con el nivel de settings"""
    level = (level or settings.LOG_LEVEL).upper()

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": LOG_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            },
        },
        "root": {
            "handlers": ["console"],
            "level": level,
        },
        "loggers": {
            "uvicorn.access": {"level": "WARNING"},
            # echo del engine se controla con DB_ECHO
            "sqlalchemy.engine": {"level": "WARNING"},
        },
    })
