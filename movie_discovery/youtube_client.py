from __future__ import annotations

"""
movie_discovery/youtube_client.py

Cliente mínimo de YouTube Data API v3 (requests + urllib3 Retry).

Endpoints usados:
- search.list           (part=snippet, type=video, videoDuration=long)  100 unidades de cuota
- videos.list           (part=contentDetails,statistics,snippet)        1 unidad
- videoCategories.list  (part=snippet, regionCode)                      1 unidad -> probe de key

Errores:
- Transporte / timeout / JSON inválido        -> NetworkFailure
- {"error": {...}} o HTTP != 200              -> UpstreamProviderError(status, reason)

La key NO se guarda aquí: la elige KeyPool y se pasa en cada llamada.
Retry de urllib3 solo para 5xx; 403/429 (cuota) se gestionan rotando key.
"""

import threading
import time
from collections.abc import Mapping, Sequence
from typing import Any

import requests  # type: ignore[import-not-found]
from requests.exceptions import RequestException  # type: ignore[import-not-found]

from movie_discovery import logger as logger
from movie_discovery.config_youtube import (
    YOUTUBE_BASE_URL,
    YOUTUBE_HTTP_RETRY_BACKOFF_FACTOR,
    YOUTUBE_HTTP_RETRY_TOTAL,
    YOUTUBE_HTTP_TIMEOUT_SECONDS,
    YOUTUBE_HTTP_USER_AGENT,
    YOUTUBE_PROBE_REGION_CODE,
    YOUTUBE_VIDEO_DURATION_FILTER,
)
from movie_discovery.errors import NetworkFailure, UpstreamProviderError
from movie_discovery.http_session import build_session
from movie_discovery.run_metrics import METRICS

# videos.list acepta como mucho 50 ids por llamada.
_MAX_IDS_PER_DETAILS_CALL = 50


def _dbg(msg: object) -> None:
    logger.debug_ctx("YOUTUBE", msg)


def _parse_error(payload: Mapping[str, Any], status: int) -> UpstreamProviderError:
    err = payload.get("error")
    message = f"HTTP {status}"
    reason: str | None = None
    if isinstance(err, Mapping):
        message = str(err.get("message") or message)
        errors = err.get("errors")
        if isinstance(errors, list) and errors and isinstance(errors[0], Mapping):
            reason = str(errors[0].get("reason") or "") or None
        code = err.get("code")
        if isinstance(code, int):
            status = code
    return UpstreamProviderError("youtube", logger.truncate_line(message, 200), status=status, reason=reason)


class YouTubeClient:
    def __init__(
        self,
        *,
        base_url: str = YOUTUBE_BASE_URL,
        timeout_seconds: float = YOUTUBE_HTTP_TIMEOUT_SECONDS,
        video_duration: str = YOUTUBE_VIDEO_DURATION_FILTER,
        probe_region_code: str = YOUTUBE_PROBE_REGION_CODE,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = max(0.5, float(timeout_seconds))
        self._video_duration = video_duration
        self._probe_region_code = probe_region_code
        self._session = session
        self._session_lock = threading.Lock()

    def _get_session(self) -> requests.Session:
        if self._session is not None:
            return self._session
        with self._session_lock:
            if self._session is None:
                self._session = build_session(
                    retry_total=YOUTUBE_HTTP_RETRY_TOTAL,
                    backoff_factor=YOUTUBE_HTTP_RETRY_BACKOFF_FACTOR,
                    user_agent=YOUTUBE_HTTP_USER_AGENT,
                )
            return self._session

    def _get(self, endpoint: str, params: Mapping[str, str], *, key: str) -> dict[str, Any]:
        url = f"{self._base_url}/{endpoint}"
        req_params = dict(params)
        req_params["key"] = key

        METRICS.incr(f"youtube.{endpoint}.calls")
        t0 = time.monotonic()
        try:
            resp = self._get_session().get(url, params=req_params, timeout=self._timeout)
        except RequestException as exc:
            METRICS.incr(f"youtube.{endpoint}.network_errors")
            raise NetworkFailure("youtube", logger.redact_secrets(f"{endpoint}: {exc!r}")) from exc
        finally:
            METRICS.observe_ms(f"youtube.{endpoint}.latency_ms", (time.monotonic() - t0) * 1000.0)

        try:
            data = resp.json()
        except ValueError as exc:
            METRICS.incr(f"youtube.{endpoint}.network_errors")
            raise NetworkFailure("youtube", f"{endpoint}: invalid JSON (HTTP {resp.status_code})") from exc

        if not isinstance(data, dict):
            raise NetworkFailure("youtube", f"{endpoint}: JSON is not an object")

        if resp.status_code != 200 or "error" in data:
            METRICS.incr(f"youtube.{endpoint}.provider_errors")
            err = _parse_error(data, resp.status_code)
            _dbg(f"{endpoint} error status={err.status} reason={err.reason} detail={err.detail}")
            raise err

        return data

    # -----------------------------
    # API
    # -----------------------------

    def probe(self, key: str) -> None:
        """Llamada barata (1 unidad) para saber si la key funciona; lanza si no."""
        self._get(
            "videoCategories",
            {"part": "snippet", "regionCode": self._probe_region_code},
            key=key,
        )

    def search(self, query: str, *, key: str, max_results: int) -> list[dict[str, Any]]:
        """Items crudos de search.list (en orden del proveedor)."""
        params = {
            "part": "snippet",
            "q": query,
            "type": "video",
            "maxResults": str(max(1, min(50, int(max_results)))),
        }
        if self._video_duration and self._video_duration != "any":
            params["videoDuration"] = self._video_duration

        data = self._get("search", params, key=key)
        items = data.get("items")
        return [it for it in items if isinstance(it, dict)] if isinstance(items, list) else []

    def video_details(self, video_ids: Sequence[str], *, key: str) -> list[dict[str, Any]]:
        """videos.list en un único batch (cap 50 ids)."""
        ids = [v for v in video_ids if v][:_MAX_IDS_PER_DETAILS_CALL]
        if not ids:
            return []
        data = self._get(
            "videos",
            {"part": "contentDetails,statistics,snippet", "id": ",".join(ids)},
            key=key,
        )
        items = data.get("items")
        return [it for it in items if isinstance(it, dict)] if isinstance(items, list) else []


def extract_video_ids(search_items: Sequence[Mapping[str, Any]]) -> list[str]:
    """`id.videoId` de cada item de search.list, sin duplicados y en orden."""
    out: list[str] = []
    seen: set[str] = set()
    for it in search_items:
        ident = it.get("id")
        vid = ident.get("videoId") if isinstance(ident, Mapping) else None
        if isinstance(vid, str) and vid and vid not in seen:
            seen.add(vid)
            out.append(vid)
    return out
