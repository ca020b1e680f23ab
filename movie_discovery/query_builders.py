from __future__ import annotations

"""
movie_discovery/query_builders.py

Constructores de consulta sobre MovieSearchService.search:

- trending: semilla aleatoria primero, luego el resto en orden hasta dar con una lista no vacía.
- by_actor / by_genre: el término tal cual (el orquestador añade " full movie").
- advanced: query + actor + genre + language + year, y post-filtro por duración mínima.

El post-filtro de advanced se aplica sobre la copia devuelta; la entrada en
caché sigue siendo la lista sin filtrar.
"""

import random
from collections.abc import Sequence
from typing import Protocol

from movie_discovery import logger as logger
from movie_discovery.config_search import MOVIE_TRENDING_SEEDS
from movie_discovery.models import SearchParams, SearchResult


class TermSearch(Protocol):
    def search(self, term: str) -> SearchResult: ...


def seed_order(seeds: Sequence[str], rng: random.Random | None = None) -> list[str]:
    """Una semilla elegida al azar y después las demás en su orden original."""
    clean = [s for s in dict.fromkeys(s.strip() for s in seeds) if s]
    if not clean:
        return []
    first = (rng or random).choice(clean)
    return [first] + [s for s in clean if s != first]


def trending(
    service: TermSearch,
    *,
    seeds: Sequence[str] = MOVIE_TRENDING_SEEDS,
    rng: random.Random | None = None,
) -> SearchResult:
    result = SearchResult.of([])
    for seed in seed_order(seeds, rng):
        result = service.search(seed)
        if result.ok and result.movies:
            logger.debug_ctx("TRENDING", f"seed={seed!r} -> {len(result.movies)} movies")
            return result
    return result


def by_actor(service: TermSearch, name: str) -> SearchResult:
    return service.search(name)


def by_genre(service: TermSearch, genre: str) -> SearchResult:
    return service.search(genre)


def apply_min_duration(result: SearchResult, min_minutes: int | None) -> SearchResult:
    if not result.ok or min_minutes is None or result.movies is None:
        return result
    return result.with_movies([m for m in result.movies if m.duration_in_minutes >= min_minutes])


def advanced(service: TermSearch, params: SearchParams) -> SearchResult:
    result = service.search(params.composed_query())
    return apply_min_duration(result, params.duration)
