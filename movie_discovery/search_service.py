from __future__ import annotations

"""
movie_discovery/search_service.py

Orquestador de búsqueda de películas: MovieSearchService.search(term) -> SearchResult.

Pasos por llamada (en orden estricto):
  1) CacheCheck             namespace "search", término normalizado
  2) KeyAcquire             KeyPool.acquire_working_key()
  3) VideoSearch            search.list con "<term> full movie" (y el término tal cual si no hay nada)
  4) DetailFetch            videos.list en un único batch
  5) FilterAndClean         >= 60 min, sin "trailer"/"teaser", ids únicos, extract_title
  6) EnrichFanOut           ThreadPoolExecutor acotado (orden del proveedor preservado)
  7) CacheStoreAndReturn

Reintentos: pasos 2-4 dentro de retry_with_backoff (on_failure = rotar key, delay fijo).
KeyPoolExhausted también cuenta como fallo reintentable.

Respaldo: OMDb s=<term>&type=movie -> Movies mínimos (video_id="").
Solo se devuelve SearchResult.failure si el primario Y el respaldo fallan.
Una lista vacía es un resultado válido (y se cachea).

search() NUNCA lanza.
"""

import html
import time
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Any, Callable, Protocol

from movie_discovery import logger as logger
from movie_discovery.cache import TTLCache
from movie_discovery.config_search import (
    MOVIE_ENRICH_MAX_CONCURRENCY,
    MOVIE_EXCLUDED_TITLE_WORDS,
    MOVIE_MIN_DURATION_MINUTES,
    MOVIE_QUERY_SUFFIX,
    MOVIE_SEARCH_TRY_RAW_TERM,
)
from movie_discovery.config_youtube import (
    YOUTUBE_RETRY_DELAY_SECONDS,
    YOUTUBE_SEARCH_MAX_ATTEMPTS,
    YOUTUBE_SEARCH_MAX_RESULTS,
)
from movie_discovery.durations import to_minutes
from movie_discovery.enrichment import MetadataEnricher
from movie_discovery.errors import (
    LookupOutcome,
    RetryExhausted,
    UpstreamError,
    failure_cause,
)
from movie_discovery.key_pool import KeyPool
from movie_discovery.models import Movie, SearchResult, clean_na
from movie_discovery.resilience import retry_with_backoff
from movie_discovery.run_metrics import METRICS
from movie_discovery.title_utils import extract_title, looks_like_trailer, normalize_cache_key
from movie_discovery.youtube_client import extract_video_ids

SEARCH_NAMESPACE = "search"

_THUMBNAIL_PREFERENCE: tuple[str, ...] = ("maxres", "standard", "high", "medium", "default")


class VideoProvider(Protocol):
    def search(self, query: str, *, key: str, max_results: int) -> list[dict[str, Any]]: ...

    def video_details(self, video_ids: Sequence[str], *, key: str) -> list[dict[str, Any]]: ...


class CatalogSearch(Protocol):
    def search(self, term: str) -> LookupOutcome: ...


# ============================================================
# Helpers puros (mapeo de payloads)
# ============================================================


def pick_thumbnail(snippet: Mapping[str, Any]) -> str:
    thumbs = snippet.get("thumbnails")
    if not isinstance(thumbs, Mapping):
        return ""
    for name in _THUMBNAIL_PREFERENCE:
        t = thumbs.get(name)
        if isinstance(t, Mapping) and t.get("url"):
            return str(t["url"])
    return ""


def video_item_to_movie(item: Mapping[str, Any]) -> Movie | None:
    """Item de videos.list -> Movie (sin filtrar). None si falta el id."""
    vid = item.get("id")
    if not isinstance(vid, str) or not vid:
        return None

    snippet = item.get("snippet") if isinstance(item.get("snippet"), Mapping) else {}
    details = item.get("contentDetails") if isinstance(item.get("contentDetails"), Mapping) else {}
    stats = item.get("statistics") if isinstance(item.get("statistics"), Mapping) else {}

    raw_title = html.unescape(str(snippet.get("title") or ""))
    return Movie(
        id=vid,
        video_id=vid,
        title=raw_title,
        thumbnail=pick_thumbnail(snippet),
        channel_title=html.unescape(str(snippet.get("channelTitle") or "")),
        published_at=str(snippet.get("publishedAt") or ""),
        duration=str(details.get("duration") or ""),
        view_count=str(stats.get("viewCount") or "0"),
    )


def omdb_search_entry_to_movie(entry: Mapping[str, Any]) -> Movie | None:
    """Entrada de OMDb s= -> Movie mínimo de respaldo (sin vídeo)."""
    imdb_id = clean_na(entry.get("imdbID"))
    if not imdb_id:
        return None
    year = clean_na(entry.get("Year"))
    return Movie(
        id=imdb_id,
        video_id="",
        title=clean_na(entry.get("Title")) or imdb_id,
        thumbnail=clean_na(entry.get("Poster")) or "",
        channel_title="OMDb",
        published_at=year or "",
        duration="",
        view_count="0",
        year=year,
        imdb_id=imdb_id,
        type=clean_na(entry.get("Type")),
    )


def filter_and_clean(
    items: Sequence[Mapping[str, Any]],
    *,
    min_minutes: int,
    excluded_words: Sequence[str],
) -> list[Movie]:
    """Duración mínima + sin tráilers + ids únicos (gana el primero) + título limpio."""
    out: list[Movie] = []
    seen: set[str] = set()
    for item in items:
        movie = video_item_to_movie(item)
        if movie is None or movie.id in seen:
            continue
        if to_minutes(movie.duration) < min_minutes:
            METRICS.incr("search.filtered.too_short")
            continue
        if looks_like_trailer(movie.title, excluded_words):
            METRICS.incr("search.filtered.trailer")
            continue
        seen.add(movie.id)
        out.append(replace(movie, title=extract_title(movie.title)))
    return out


# ============================================================
# Orquestador
# ============================================================


class MovieSearchService:
    def __init__(
        self,
        *,
        youtube: VideoProvider | None,
        key_pool: KeyPool | None,
        omdb: CatalogSearch | None,
        enricher: MetadataEnricher,
        cache: TTLCache[Any],
        max_results: int = YOUTUBE_SEARCH_MAX_RESULTS,
        min_duration_minutes: int = MOVIE_MIN_DURATION_MINUTES,
        excluded_title_words: Sequence[str] = MOVIE_EXCLUDED_TITLE_WORDS,
        enrich_concurrency: int = MOVIE_ENRICH_MAX_CONCURRENCY,
        max_attempts: int = YOUTUBE_SEARCH_MAX_ATTEMPTS,
        retry_delay_seconds: float = YOUTUBE_RETRY_DELAY_SECONDS,
        query_suffix: str = MOVIE_QUERY_SUFFIX,
        try_raw_term: bool = MOVIE_SEARCH_TRY_RAW_TERM,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._youtube = youtube
        self._key_pool = key_pool
        self._omdb = omdb
        self._enricher = enricher
        self._cache = cache
        self._max_results = max(1, min(50, int(max_results)))
        self._min_minutes = max(0, int(min_duration_minutes))
        self._excluded = tuple(excluded_title_words)
        self._enrich_concurrency = max(1, int(enrich_concurrency))
        self._max_attempts = int(max_attempts)
        self._retry_delay = max(0.0, float(retry_delay_seconds))
        self._query_suffix = query_suffix
        self._try_raw_term = bool(try_raw_term)
        self._sleep = sleep

    @property
    def enricher(self) -> MetadataEnricher:
        return self._enricher

    @property
    def has_video_provider(self) -> bool:
        return self._youtube is not None and self._key_pool is not None

    # -----------------------------
    # Pasos 2-4 (un intento)
    # -----------------------------

    def _query_variants(self, term: str) -> list[str]:
        suffix = self._query_suffix.strip()
        primary = term if not suffix or term.lower().endswith(suffix.lower()) else f"{term} {suffix}"
        variants = [primary]
        if self._try_raw_term and term != primary:
            variants.append(term)
        return variants

    def _fetch_candidates(self, term: str) -> list[dict[str, Any]]:
        youtube, key_pool = self._youtube, self._key_pool
        if youtube is None or key_pool is None:
            raise RuntimeError("video search needs a YouTube client and an API key pool")
        key = key_pool.acquire_working_key()

        for query in self._query_variants(term):
            items = youtube.search(query, key=key, max_results=self._max_results)
            ids = extract_video_ids(items)
            logger.debug_ctx("SEARCH", f"q={query!r} -> {len(ids)} ids")
            if ids:
                return youtube.video_details(ids, key=key)
        return []

    def _on_attempt_failure(self, attempt: int, exc: BaseException) -> None:
        cause = failure_cause(exc)
        METRICS.incr(f"search.attempt_failures.{cause}")
        logger.debug_ctx("SEARCH", f"attempt {attempt} failed ({cause}): {exc}")
        if self._key_pool is not None:
            self._key_pool.rotate()

    def _attempts(self) -> int:
        if self._max_attempts > 0:
            return self._max_attempts
        return max(1, len(self._key_pool) if self._key_pool is not None else 1)

    # -----------------------------
    # Pasos 5-6
    # -----------------------------

    def _enrich_all(self, movies: list[Movie]) -> list[Movie]:
        if not movies:
            return []
        workers = min(self._enrich_concurrency, len(movies))
        if workers <= 1:
            return [self._enricher.enrich(m) for m in movies]
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="enrich") as pool:
            return list(pool.map(self._enricher.enrich, movies))

    # -----------------------------
    # Respaldo
    # -----------------------------

    def _fallback(self, term: str, *, reason: str) -> SearchResult:
        METRICS.incr("search.fallback")
        logger.info(f"[SEARCH] OMDb fallback for {term!r} ({reason})")

        if self._omdb is None:
            return SearchResult.failure(f"No results for {term!r}: video search failed ({reason}) and no fallback is configured.")

        outcome = self._omdb.search(term)
        if outcome.status == "not_found":
            movies: list[Movie] = []
        elif outcome.ok and outcome.payload is not None:
            raw = outcome.payload.get("Search")
            entries = raw if isinstance(raw, list) else []
            movies = []
            seen: set[str] = set()
            for entry in entries:
                m = omdb_search_entry_to_movie(entry) if isinstance(entry, Mapping) else None
                if m is not None and m.id not in seen:
                    seen.add(m.id)
                    movies.append(m)
        else:
            METRICS.incr("search.failures")
            METRICS.add_error("search", "fallback", cause=outcome.status, detail=f"{reason}; {outcome.detail}")
            logger.warning(f"[SEARCH] video search and OMDb fallback both failed for {term!r}")
            return SearchResult.failure(
                f"No results for {term!r}: video search failed ({reason}) and the OMDb fallback failed ({outcome.status})."
            )

        result = SearchResult.of(movies, source="omdb")
        self._cache.set(term, result, namespace=SEARCH_NAMESPACE)
        return result

    # -----------------------------
    # API
    # -----------------------------

    def search(self, term: str) -> SearchResult:
        t = (term or "").strip()
        # "!!!" y "???" comparten la clave vacía: se tratan como término en blanco.
        if not t or not normalize_cache_key(t):
            return SearchResult.of([])

        t0 = time.monotonic()
        METRICS.incr("search.calls")
        try:
            return self._search(t)
        except Exception as exc:
            METRICS.incr("search.failures")
            METRICS.add_error("search", "search", cause="unexpected", detail=repr(exc))
            logger.error(f"[SEARCH] unexpected error for {t!r}: {exc!r}")
            return SearchResult.failure(f"Search for {t!r} failed unexpectedly.")
        finally:
            METRICS.observe_ms("search.latency_ms", (time.monotonic() - t0) * 1000.0)

    def _search(self, term: str) -> SearchResult:
        cached = self._cache.get(term, namespace=SEARCH_NAMESPACE)
        if isinstance(cached, SearchResult):
            METRICS.incr("search.cache_hits")
            return replace(cached, source="cache")

        if not self.has_video_provider:
            return self._fallback(term, reason="no YouTube API keys configured")

        try:
            details = retry_with_backoff(
                lambda: self._fetch_candidates(term),
                max_attempts=self._attempts(),
                delay_seconds=self._retry_delay,
                should_retry=lambda exc: isinstance(exc, UpstreamError),
                on_failure=self._on_attempt_failure,
                sleep=self._sleep,
            )
        except RetryExhausted as exc:
            cause = failure_cause(exc)
            METRICS.add_error("youtube", "search", cause=cause, detail=str(exc))
            return self._fallback(term, reason=cause)

        if not details:
            return self._fallback(term, reason="no video candidates")

        movies = filter_and_clean(details, min_minutes=self._min_minutes, excluded_words=self._excluded)
        enriched = self._enrich_all(movies)

        result = SearchResult.of(enriched, source="youtube")
        self._cache.set(term, result, namespace=SEARCH_NAMESPACE)
        logger.debug_ctx("SEARCH", f"{term!r}: {len(details)} candidates -> {len(enriched)} movies")
        return result
