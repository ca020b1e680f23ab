from __future__ import annotations

"""
movie_discovery/enrichment.py

Enriquecedor de metadatos (OMDb) para Movie.

Contrato: enrich(movie) -> Movie, NUNCA lanza. Ante cualquier fallo devuelve
la entrada sin tocar (los metadatos siguen ausentes).

Algoritmo:
  1) caché (namespace "enrich", clave = movie.id)
  2) OMDb t=<title>
  3) si "not found": un único reintento con el título acortado (3 tokens)
  4) éxito -> merge_omdb_payload + caché bajo el id original

Internamente cada resultado queda etiquetado (LookupOutcome.status) en
métricas/logs para distinguir "no encontrado" de "fallo de red"; el caller
solo ve un Movie.
"""

from collections.abc import Mapping
from typing import Any, Protocol

from movie_discovery import logger as logger
from movie_discovery.cache import TTLCache
from movie_discovery.config_search import MOVIE_ENRICH_SHORT_TITLE_TOKENS
from movie_discovery.errors import LookupOutcome
from movie_discovery.models import Movie, Rating, clean_na
from movie_discovery.run_metrics import METRICS
from movie_discovery.title_utils import shorten_title

ENRICH_NAMESPACE = "enrich"

# Campo OMDb -> atributo de Movie.
_OMDB_FIELD_MAP: tuple[tuple[str, str], ...] = (
    ("Year", "year"),
    ("Rated", "rated"),
    ("Released", "released"),
    ("Runtime", "runtime"),
    ("Genre", "genre"),
    ("Director", "director"),
    ("Writer", "writer"),
    ("Actors", "actors"),
    ("Plot", "plot"),
    ("Language", "language"),
    ("Country", "country"),
    ("Awards", "awards"),
    ("imdbRating", "imdb_rating"),
    ("imdbID", "imdb_id"),
    ("Type", "type"),
)


class TitleLookup(Protocol):
    def lookup_title(self, title: str) -> LookupOutcome: ...


def _parse_ratings(raw: object) -> tuple[Rating, ...] | None:
    if not isinstance(raw, list):
        return None
    parsed = (Rating.from_dict(r) for r in raw if isinstance(r, Mapping))
    return tuple(r for r in parsed if r is not None)


def merge_omdb_payload(movie: Movie, payload: Mapping[str, Any]) -> Movie:
    """
    Copia de `movie` con los metadatos OMDb aplicados.

    - id / video_id / thumbnail / duration / ... se conservan.
    - "N/A" cuenta como ausente.
    - title <- Title de OMDb si viene.
    - poster <- Poster de OMDb, o el thumbnail original si OMDb da "N/A".
    """
    changes: dict[str, Any] = {attr: clean_na(payload.get(key)) for key, attr in _OMDB_FIELD_MAP}

    canonical_title = clean_na(payload.get("Title"))
    if canonical_title:
        changes["title"] = canonical_title

    changes["poster"] = clean_na(payload.get("Poster")) or movie.thumbnail or None
    changes["ratings"] = _parse_ratings(payload.get("Ratings"))

    return movie.with_metadata(**changes)


class MetadataEnricher:
    def __init__(
        self,
        omdb: TitleLookup | None,
        cache: TTLCache[Any],
        *,
        short_title_tokens: int = MOVIE_ENRICH_SHORT_TITLE_TOKENS,
    ) -> None:
        self._omdb = omdb
        self._cache = cache
        self._short_tokens = max(1, int(short_title_tokens))

    def _lookup(self, title: str) -> LookupOutcome | None:
        if self._omdb is None:
            return None
        outcome = self._omdb.lookup_title(title)
        if outcome.ok or outcome.status != "not_found":
            return outcome

        short = shorten_title(title, self._short_tokens)
        if short and short != title.strip():
            METRICS.incr("enrich.short_title_retries")
            logger.debug_ctx("ENRICH", f"not found {title!r}; retrying with {short!r}")
            return self._omdb.lookup_title(short)
        return outcome

    def enrich(self, movie: Movie) -> Movie:
        try:
            cached = self._cache.get(movie.id, namespace=ENRICH_NAMESPACE)
            if isinstance(cached, Movie):
                METRICS.incr("enrich.cache_hits")
                return cached

            outcome = self._lookup(movie.title)
            if outcome is None:
                METRICS.incr("enrich.skipped")
                return movie

            METRICS.incr(f"enrich.{outcome.status}")
            if not outcome.ok or outcome.payload is None:
                logger.debug_ctx("ENRICH", f"{movie.id} {movie.title!r}: {outcome.status} {outcome.detail}")
                return movie

            enriched = merge_omdb_payload(movie, outcome.payload)
            self._cache.set(movie.id, enriched, namespace=ENRICH_NAMESPACE)
            return enriched

        except Exception as exc:
            METRICS.incr("enrich.unexpected_errors")
            METRICS.add_error("enrich", "enrich", cause="unexpected", detail=repr(exc))
            logger.warning(f"[ENRICH] unexpected error for {movie.id!r}: {exc!r}")
            return movie
