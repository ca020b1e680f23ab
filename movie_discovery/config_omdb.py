from __future__ import annotations

from movie_discovery.config_base import (
    _env_float_min,
    _env_int_in,
    _get_env_str,
)

# ============================================================
# OMDb (API + throttling)
# ============================================================

OMDB_API_KEY: str | None = _get_env_str("OMDB_API_KEY", None)

OMDB_RATE_LIMIT_WAIT_SECONDS: int = _env_int_in("OMDB_RATE_LIMIT_WAIT_SECONDS", 5, min_v=0, max_v=60 * 60)
OMDB_RATE_LIMIT_MAX_RETRIES: int = _env_int_in("OMDB_RATE_LIMIT_MAX_RETRIES", 1, min_v=0, max_v=20)

OMDB_HTTP_MAX_CONCURRENCY: int = _env_int_in("OMDB_HTTP_MAX_CONCURRENCY", 6, min_v=1, max_v=64)

OMDB_HTTP_MIN_INTERVAL_SECONDS: float = _env_float_min("OMDB_HTTP_MIN_INTERVAL_SECONDS", 0.0, min_v=0.0)

# ============================================================
# OMDb (HTTP client tuning)
# ============================================================

OMDB_BASE_URL: str = _get_env_str("OMDB_BASE_URL", "https://www.omdbapi.com/") or "https://www.omdbapi.com/"

OMDB_HTTP_TIMEOUT_SECONDS: float = _env_float_min("OMDB_HTTP_TIMEOUT_SECONDS", 10.0, min_v=0.5)
OMDB_HTTP_SEMAPHORE_ACQUIRE_TIMEOUT: float = _env_float_min("OMDB_HTTP_SEMAPHORE_ACQUIRE_TIMEOUT", 30.0, min_v=0.1)

OMDB_HTTP_RETRY_TOTAL: int = _env_int_in("OMDB_HTTP_RETRY_TOTAL", 3, min_v=0, max_v=10)
OMDB_HTTP_RETRY_BACKOFF_FACTOR: float = _env_float_min("OMDB_HTTP_RETRY_BACKOFF_FACTOR", 0.5, min_v=0.0)

OMDB_HTTP_USER_AGENT: str = _get_env_str("OMDB_HTTP_USER_AGENT", "movie-discovery/1.0") or "movie-discovery/1.0"

OMDB_PLOT: str = (_get_env_str("OMDB_PLOT", "short") or "short").lower()

# ============================================================
# OMDb (circuit breaker)
# ============================================================

# Abre tras N fallos "duros" (red/protocolo) y evita llamadas durante OPEN_SECONDS.
OMDB_CIRCUIT_BREAKER_THRESHOLD: int = _env_int_in("OMDB_CIRCUIT_BREAKER_THRESHOLD", 5, min_v=1, max_v=50)
OMDB_CIRCUIT_BREAKER_OPEN_SECONDS: float = _env_float_min("OMDB_CIRCUIT_BREAKER_OPEN_SECONDS", 20.0, min_v=0.5)
