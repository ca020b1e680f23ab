from __future__ import annotations

"""
movie_discovery/config.py

Punto único de configuración: re-exporta config_base + config_<área>.

- Este módulo SOLO parsea, valida y expone constantes (sin lógica de negocio).
- Si una env var viene mal, no rompe: warning always=True y valor por defecto.
- logger.py lee este módulo desde sys.modules (DEBUG_MODE/SILENT_MODE/LOG_LEVEL/...).
- Dump de config solo si DEBUG_MODE y NO SILENT_MODE, y nunca con secretos en claro.
"""

from movie_discovery import logger as _logger
from movie_discovery.config_base import *  # noqa: F401,F403
from movie_discovery.config_base import DEBUG_MODE, SILENT_MODE
from movie_discovery.config_omdb import *  # noqa: F401,F403
from movie_discovery.config_omdb import OMDB_API_KEY
from movie_discovery.config_search import *  # noqa: F401,F403
from movie_discovery.config_search import MOVIE_CACHE_TTL_SECONDS, MOVIE_ENRICH_MAX_CONCURRENCY
from movie_discovery.config_youtube import *  # noqa: F401,F403
from movie_discovery.config_youtube import YOUTUBE_API_KEYS


def _mask_secret(value: str | None) -> str:
    if not value:
        return "<unset>"
    if len(value) <= 6:
        return "***"
    return f"{value[:3]}…{value[-2:]}"


def _log_config_debug(label: str, value: object) -> None:
    if not DEBUG_MODE or SILENT_MODE:
        return
    _logger.info(f"{label}: {value}")


_log_config_debug("YOUTUBE_API_KEYS", [_mask_secret(k) for k in YOUTUBE_API_KEYS])
_log_config_debug("OMDB_API_KEY", _mask_secret(OMDB_API_KEY))
_log_config_debug("MOVIE_CACHE_TTL_SECONDS", MOVIE_CACHE_TTL_SECONDS)
_log_config_debug("MOVIE_ENRICH_MAX_CONCURRENCY", MOVIE_ENRICH_MAX_CONCURRENCY)
