from __future__ import annotations

"""
movie_discovery/api.py

Frontera pública del núcleo. Seis funciones que delegan en un
MovieSearchService de proceso, construido de forma perezosa la primera vez
que se usa (credenciales y límites salen de movie_discovery.config).

Ninguna de estas funciones lanza por errores de red/proveedor:
- search_movies / advanced_search pueden devolver SearchResult.failure(...)
  solo cuando fallan YouTube Y el respaldo OMDb.
- enrich_movie_with_metadata devuelve la entrada intacta si no hay datos.
"""

import random
import threading
from collections.abc import Mapping
from typing import Any

from movie_discovery import logger as logger
from movie_discovery import query_builders
from movie_discovery.cache import TTLCache
from movie_discovery.config import (
    MOVIE_CACHE_MAX_ENTRIES,
    MOVIE_CACHE_TTL_SECONDS,
    YOUTUBE_API_KEYS,
    YOUTUBE_KEY_PROBE_MAX_SWEEPS,
    YOUTUBE_KEY_SWEEP_BACKOFF_SECONDS,
)
from movie_discovery.enrichment import MetadataEnricher
from movie_discovery.key_pool import KeyPool
from movie_discovery.models import Movie, SearchParams, SearchResult
from movie_discovery.omdb_client import OmdbClient
from movie_discovery.search_service import MovieSearchService
from movie_discovery.youtube_client import YouTubeClient

_SERVICE: MovieSearchService | None = None
_SERVICE_LOCK = threading.Lock()


def build_default_service() -> MovieSearchService:
    """Cablea clientes, pool de keys y caché a partir de la configuración."""
    cache: TTLCache[Any] = TTLCache(
        ttl_seconds=MOVIE_CACHE_TTL_SECONDS,
        max_entries=MOVIE_CACHE_MAX_ENTRIES,
        metrics_prefix="cache",
    )
    omdb = OmdbClient()
    if not omdb.enabled:
        logger.warning("OMDB_API_KEY is not set: enrichment and fallback search are disabled.", always=True)

    youtube: YouTubeClient | None = None
    key_pool: KeyPool | None = None
    if YOUTUBE_API_KEYS:
        youtube = YouTubeClient()
        key_pool = KeyPool(
            YOUTUBE_API_KEYS,
            prober=youtube.probe,
            max_sweeps=YOUTUBE_KEY_PROBE_MAX_SWEEPS,
            sweep_backoff_seconds=YOUTUBE_KEY_SWEEP_BACKOFF_SECONDS,
        )
    else:
        logger.warning("No YouTube API keys configured: searches go straight to the OMDb fallback.", always=True)

    return MovieSearchService(
        youtube=youtube,
        key_pool=key_pool,
        omdb=omdb,
        enricher=MetadataEnricher(omdb, cache),
        cache=cache,
    )


def get_service() -> MovieSearchService:
    global _SERVICE
    if _SERVICE is None:
        with _SERVICE_LOCK:
            if _SERVICE is None:
                _SERVICE = build_default_service()
    return _SERVICE


def set_service(service: MovieSearchService | None) -> None:
    """Sustituye (o con None, olvida) el servicio de proceso. Útil en tests."""
    global _SERVICE
    with _SERVICE_LOCK:
        _SERVICE = service


# ============================================================
# Operaciones públicas
# ============================================================


def search_movies(term: str) -> SearchResult:
    return get_service().search(term)


def get_trending_movies(*, rng: random.Random | None = None) -> SearchResult:
    return query_builders.trending(get_service(), rng=rng)


def get_movies_by_actor(name: str) -> SearchResult:
    return query_builders.by_actor(get_service(), name)


def get_movies_by_genre(genre: str) -> SearchResult:
    return query_builders.by_genre(get_service(), genre)


def advanced_search(params: SearchParams | Mapping[str, Any]) -> SearchResult:
    if not isinstance(params, SearchParams):
        params = SearchParams.from_dict(params)
    return query_builders.advanced(get_service(), params)


def enrich_movie_with_metadata(movie: Movie) -> Movie:
    return get_service().enricher.enrich(movie)
