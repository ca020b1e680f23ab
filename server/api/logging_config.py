# logger del API (se apoya en movie_discovery.logger para handlers/fichero)
from __future__ import annotations

import logging

from movie_discovery import logger as core_logger
from server.api.settings import Settings

API_LOGGER_NAME = "movie_discovery.api"

_VALID_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})


def _level_name(raw: str) -> str:
    name = (raw or "").strip().upper()
    return name if name in _VALID_LEVELS else "INFO"


def configure_logging(settings: Settings) -> logging.Logger:
    """
    Configuración mínima:
    - Handlers y fichero de log (LOGGER_FILE_*) los gestiona movie_discovery.logger.
    - Respetamos handlers/format de quien ejecute (uvicorn, gunicorn, etc.).
    - El logger del API usa el nivel de Settings.
    """
    core_logger.get_logger()

    logger = logging.getLogger(API_LOGGER_NAME)
    logger.setLevel(_level_name(settings.log_level))
    return logger
