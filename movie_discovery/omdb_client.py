from __future__ import annotations

"""
movie_discovery/omdb_client.py

Cliente OMDb (requests.Session + Retry) con:

1) Fail-safe:
   - Fallos de red, rate-limit o API key inválida NO rompen una búsqueda:
     todo se devuelve como LookupOutcome etiquetado.
   - "Invalid API key!" desactiva OMDb para el resto del proceso.
   - Circuit breaker: tras N fallos de red seguidos deja de llamar durante
     OMDB_CIRCUIT_BREAKER_OPEN_SECONDS y luego prueba 1 request (HALF_OPEN).

2) ThreadPool safe:
   - Session compartida (pooling) + Retry de urllib3 (429/5xx).
   - Semaphore para limitar concurrencia (OMDB_HTTP_MAX_CONCURRENCY), así varias
     búsquedas en paralelo comparten el mismo límite.
   - Throttle opcional (intervalo mínimo entre llamadas).

3) Rate limit del free tier ("Request limit reached!"):
   - espera OMDB_RATE_LIMIT_WAIT_SECONDS y reintenta hasta OMDB_RATE_LIMIT_MAX_RETRIES.

API:
- lookup_title(title)  -> t=<title>          (enriquecimiento)
- search(term)         -> s=<term>&type=movie (búsqueda de respaldo)
"""

import threading
import time
from collections.abc import Mapping
from typing import Any, Callable, Final

import requests  # type: ignore[import-not-found]
from requests.exceptions import RequestException  # type: ignore[import-not-found]

from movie_discovery import logger as logger
from movie_discovery.config_omdb import (
    OMDB_API_KEY,
    OMDB_BASE_URL,
    OMDB_CIRCUIT_BREAKER_OPEN_SECONDS,
    OMDB_CIRCUIT_BREAKER_THRESHOLD,
    OMDB_HTTP_MAX_CONCURRENCY,
    OMDB_HTTP_MIN_INTERVAL_SECONDS,
    OMDB_HTTP_RETRY_BACKOFF_FACTOR,
    OMDB_HTTP_RETRY_TOTAL,
    OMDB_HTTP_SEMAPHORE_ACQUIRE_TIMEOUT,
    OMDB_HTTP_TIMEOUT_SECONDS,
    OMDB_HTTP_USER_AGENT,
    OMDB_PLOT,
    OMDB_RATE_LIMIT_MAX_RETRIES,
    OMDB_RATE_LIMIT_WAIT_SECONDS,
)
from movie_discovery.errors import LookupOutcome, LookupStatus, NetworkFailure
from movie_discovery.http_session import build_session
from movie_discovery.resilience import CircuitBreaker
from movie_discovery.run_metrics import METRICS

_NOT_FOUND_ERRORS: Final[frozenset[str]] = frozenset({"movie not found!", "series not found!"})


# ============================================================
# LOGGING (centralizado en logger.py)
# ============================================================


def _dbg(msg: object) -> None:
    """Diagnóstico contextual (solo si DEBUG_MODE=True)."""
    logger.debug_ctx("OMDB", msg)


def _warn_always(msg: object) -> None:
    """Aviso importante (visible incluso en SILENT_MODE)."""
    logger.warning(str(msg), always=True)


# ============================================================
# Clasificación de respuestas
# ============================================================


def _error_text(data: Mapping[str, object]) -> str:
    err = data.get("Error")
    return err.strip() if isinstance(err, str) else ""


def _is_false_response(data: Mapping[str, object]) -> bool:
    return str(data.get("Response", "")).strip().lower() == "false"


def is_movie_not_found(data: Mapping[str, object]) -> bool:
    """Movie not found! y variantes de OMDb para s= sin coincidencias."""
    if not _is_false_response(data):
        return False
    err = _error_text(data).lower()
    return err in _NOT_FOUND_ERRORS or err == "too many results."


def is_invalid_api_key(data: Mapping[str, object]) -> bool:
    return _is_false_response(data) and "api key" in _error_text(data).lower()


def is_rate_limit_response(data: Mapping[str, object]) -> bool:
    """OMDb free-tier devuelve {"Response":"False","Error":"Request limit reached!"}."""
    return _error_text(data).lower() == "request limit reached!"


# ============================================================
# Cliente
# ============================================================


class OmdbClient:
    def __init__(
        self,
        *,
        api_key: str | None = OMDB_API_KEY,
        base_url: str = OMDB_BASE_URL,
        timeout_seconds: float = OMDB_HTTP_TIMEOUT_SECONDS,
        max_concurrency: int = OMDB_HTTP_MAX_CONCURRENCY,
        min_interval_seconds: float = OMDB_HTTP_MIN_INTERVAL_SECONDS,
        rate_limit_wait_seconds: float = OMDB_RATE_LIMIT_WAIT_SECONDS,
        rate_limit_max_retries: int = OMDB_RATE_LIMIT_MAX_RETRIES,
        plot: str = OMDB_PLOT,
        breaker: CircuitBreaker | None = None,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._api_key = (api_key or "").strip()
        self._base_url = (base_url or "").strip() or "https://www.omdbapi.com/"
        self._timeout = max(0.5, float(timeout_seconds))
        self._max_concurrency = max(1, int(max_concurrency))
        self._semaphore = threading.Semaphore(self._max_concurrency)
        self._min_interval = max(0.0, float(min_interval_seconds))
        self._rate_limit_wait = max(0.0, float(rate_limit_wait_seconds))
        self._rate_limit_max_retries = max(0, int(rate_limit_max_retries))
        self._plot = plot if plot in ("short", "full") else "short"
        self._breaker = breaker or CircuitBreaker(
            failure_threshold=OMDB_CIRCUIT_BREAKER_THRESHOLD,
            open_seconds=OMDB_CIRCUIT_BREAKER_OPEN_SECONDS,
        )
        self._session = session
        self._session_lock = threading.Lock()
        self._sleep = sleep

        self._throttle_lock = threading.Lock()
        self._last_request_ts = 0.0

        self._state_lock = threading.Lock()
        self._disabled = False
        self._disabled_notice_shown = False
        self._rate_limit_notice_shown = False

    # -----------------------------
    # Estado
    # -----------------------------

    @property
    def enabled(self) -> bool:
        return bool(self._api_key) and not self._disabled

    def _disable(self, reason: str) -> None:
        with self._state_lock:
            if not self._disabled:
                self._disabled = True
                METRICS.incr("omdb.disabled_switches")
            notice = not self._disabled_notice_shown
            self._disabled_notice_shown = True
        if notice:
            _warn_always(f"ERROR: OMDb desactivado para este proceso: {reason}")

    # -----------------------------
    # HTTP
    # -----------------------------

    def _get_session(self) -> requests.Session:
        if self._session is not None:
            return self._session
        with self._session_lock:
            if self._session is None:
                pool = min(64, self._max_concurrency)
                self._session = build_session(
                    retry_total=OMDB_HTTP_RETRY_TOTAL,
                    backoff_factor=OMDB_HTTP_RETRY_BACKOFF_FACTOR,
                    user_agent=OMDB_HTTP_USER_AGENT,
                    pool_size=pool,
                    status_forcelist=(429, 500, 502, 503, 504),
                )
            return self._session

    def _throttle(self) -> None:
        if self._min_interval <= 0.0:
            return
        with self._throttle_lock:
            wait_s = (self._last_request_ts + self._min_interval) - time.monotonic()
            if wait_s > 0.0:
                METRICS.incr("omdb.throttle_sleeps")
                self._sleep(wait_s)
            self._last_request_ts = time.monotonic()

    def _http_get(self, params: Mapping[str, str]) -> tuple[int, dict[str, Any] | None]:
        """
        GET con semaphore + throttle. Devuelve (status_code, json|None).
        Lanza NetworkFailure en fallo de transporte o si no hay hueco en el semaphore.
        """
        if not self._semaphore.acquire(timeout=OMDB_HTTP_SEMAPHORE_ACQUIRE_TIMEOUT):
            raise NetworkFailure("omdb", f"semaphore acquire timeout ({OMDB_HTTP_SEMAPHORE_ACQUIRE_TIMEOUT:.1f}s)")

        try:
            self._throttle()
            METRICS.incr("omdb.http_requests")
            t0 = time.monotonic()
            try:
                resp = self._get_session().get(self._base_url, params=dict(params), timeout=self._timeout)
            except RequestException as exc:
                raise NetworkFailure("omdb", logger.redact_secrets(repr(exc))) from exc
            finally:
                METRICS.observe_ms("omdb.latency_ms", (time.monotonic() - t0) * 1000.0)
        finally:
            self._semaphore.release()

        try:
            data = resp.json()
        except ValueError:
            return resp.status_code, None
        return resp.status_code, data if isinstance(data, dict) else None

    # -----------------------------
    # Núcleo
    # -----------------------------

    def _outcome(self, action: str, status: LookupStatus, **kw: Any) -> LookupOutcome:
        METRICS.incr(f"omdb.{action}.{status}")
        return LookupOutcome(status=status, **kw)

    def _request(self, params: Mapping[str, str], *, action: str) -> LookupOutcome:
        if not self._api_key:
            self._disable("OMDB_API_KEY no configurada")
            return self._outcome(action, "disabled", detail="missing api key")
        if self._disabled:
            return self._outcome(action, "disabled", detail="disabled")

        allowed, reason = self._breaker.allow()
        if not allowed:
            _dbg(f"circuit {reason}; skipping {action}")
            return self._outcome(action, "circuit_open", detail=reason)

        req_params = {str(k): str(v) for k, v in params.items()}
        req_params["apikey"] = self._api_key

        attempt = 0
        while True:
            try:
                status_code, data = self._http_get(req_params)
            except NetworkFailure as exc:
                self._breaker.record_failure(exc.detail)
                METRICS.add_error("omdb", action, cause="network", detail=exc.detail)
                _dbg(f"{action} network error: {exc.detail}")
                return self._outcome(action, "network_error", detail=exc.detail)

            if data is None:
                detail = f"HTTP {status_code}: non-JSON response"
                self._breaker.record_failure(detail)
                METRICS.add_error("omdb", action, cause="provider", detail=detail)
                return self._outcome(action, "upstream_error", detail=detail)

            # Cualquier JSON válido indica que OMDb responde.
            self._breaker.record_success()

            if is_rate_limit_response(data):
                if attempt >= self._rate_limit_max_retries:
                    METRICS.add_error("omdb", action, cause="quota", detail="Request limit reached!")
                    return self._outcome(action, "rate_limited", detail="Request limit reached!")
                attempt += 1
                self._notify_rate_limit()
                if self._rate_limit_wait > 0.0:
                    self._sleep(self._rate_limit_wait)
                continue

            if is_invalid_api_key(data):
                self._disable("OMDb respondió 'Invalid API key!'. Revisa OMDB_API_KEY.")
                return self._outcome(action, "disabled", detail=_error_text(data))

            if is_movie_not_found(data):
                return self._outcome(action, "not_found", detail=_error_text(data))

            if _is_false_response(data) or status_code != 200:
                detail = _error_text(data) or f"HTTP {status_code}"
                METRICS.add_error("omdb", action, cause="provider", detail=detail)
                return self._outcome(action, "upstream_error", detail=detail)

            return self._outcome(action, "ok", payload=data)

    def _notify_rate_limit(self) -> None:
        METRICS.incr("omdb.rate_limit_hits")
        with self._state_lock:
            notice = not self._rate_limit_notice_shown
            self._rate_limit_notice_shown = True
        if notice:
            _warn_always(
                "AVISO: límite de llamadas gratuitas de OMDb alcanzado. "
                f"Esperando {self._rate_limit_wait:g} segundos antes de continuar..."
            )

    # -----------------------------
    # API pública
    # -----------------------------

    def lookup_title(self, title: str) -> LookupOutcome:
        t = (title or "").strip()
        if not t:
            return self._outcome("lookup", "not_found", detail="empty title")
        return self._request({"t": t, "plot": self._plot}, action="lookup")

    def search(self, term: str) -> LookupOutcome:
        """s=<term>&type=movie. payload["Search"] es la lista cruda de OMDb."""
        t = (term or "").strip()
        if not t:
            return self._outcome("search", "not_found", detail="empty term")
        return self._request({"s": t, "type": "movie"}, action="search")
