from __future__ import annotations

from typing import Final

from movie_discovery.config_base import (
    _env_int_in,
    _get_env_bool,
    _get_env_csv_list,
    _get_env_str,
)

# ============================================================
# Caché en memoria (búsquedas + enriquecimiento)
# ============================================================

MOVIE_CACHE_TTL_SECONDS: int = _env_int_in("MOVIE_CACHE_TTL_SECONDS", 60 * 60, min_v=1, max_v=60 * 60 * 24)

# 0 => sin límite (solo expiración por TTL).
MOVIE_CACHE_MAX_ENTRIES: int = _env_int_in("MOVIE_CACHE_MAX_ENTRIES", 512, min_v=0, max_v=1_000_000)

# ============================================================
# Orquestador de búsqueda
# ============================================================

MOVIE_QUERY_SUFFIX: str = " " + ((_get_env_str("MOVIE_QUERY_SUFFIX", "full movie") or "full movie").strip())

# Si la consulta con sufijo no devuelve nada, se reintenta con el término "tal cual".
MOVIE_SEARCH_TRY_RAW_TERM: bool = _get_env_bool("MOVIE_SEARCH_TRY_RAW_TERM", True)

MOVIE_MIN_DURATION_MINUTES: int = _env_int_in("MOVIE_MIN_DURATION_MINUTES", 60, min_v=0, max_v=600)

MOVIE_EXCLUDED_TITLE_WORDS: Final[tuple[str, ...]] = tuple(
    _get_env_csv_list("MOVIE_EXCLUDED_TITLE_WORDS", ["trailer", "teaser"], lower=True)
)

MOVIE_ENRICH_MAX_CONCURRENCY: int = _env_int_in("MOVIE_ENRICH_MAX_CONCURRENCY", 6, min_v=1, max_v=16)

# Tokens usados en el reintento de enriquecimiento con título acortado.
MOVIE_ENRICH_SHORT_TITLE_TOKENS: int = _env_int_in("MOVIE_ENRICH_SHORT_TITLE_TOKENS", 3, min_v=1, max_v=10)

# ============================================================
# Query builders
# ============================================================

_DEFAULT_TRENDING_SEEDS: Final[list[str]] = [
    "Bollywood",
    "Hindi",
    "Tamil",
    "Telugu",
    "Malayalam",
    "Shah Rukh Khan",
    "Salman Khan",
    "Aamir Khan",
    "Akshay Kumar",
    "Amitabh Bachchan",
]

MOVIE_TRENDING_SEEDS: Final[tuple[str, ...]] = tuple(
    _get_env_csv_list("MOVIE_TRENDING_SEEDS", _DEFAULT_TRENDING_SEEDS)
) or tuple(_DEFAULT_TRENDING_SEEDS)
