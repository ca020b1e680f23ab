from __future__ import annotations

from typing import Final

from movie_discovery.config_base import (
    _env_float_min,
    _env_int_in,
    _get_env_csv_list,
    _get_env_enum_str,
    _get_env_str,
)

# ============================================================
# YouTube Data API v3 (credenciales)
# ============================================================

# Máximo de variables YOUTUBE_API_KEY_<n> que se escanean.
_NUMBERED_KEYS_SCAN_MAX: Final[int] = 50


def _collect_youtube_api_keys() -> tuple[str, ...]:
    """
    Pool de credenciales, en este orden (sin duplicados):
      1) YOUTUBE_API_KEYS="k1,k2,k3"
      2) YOUTUBE_API_KEY
      3) YOUTUBE_API_KEY_1 .. YOUTUBE_API_KEY_50
    """
    keys: list[str] = list(_get_env_csv_list("YOUTUBE_API_KEYS"))

    single = _get_env_str("YOUTUBE_API_KEY", None)
    if single:
        keys.append(single)

    for i in range(1, _NUMBERED_KEYS_SCAN_MAX + 1):
        k = _get_env_str(f"YOUTUBE_API_KEY_{i}", None)
        if k:
            keys.append(k)

    return tuple(dict.fromkeys(keys))


YOUTUBE_API_KEYS: tuple[str, ...] = _collect_youtube_api_keys()

# ============================================================
# YouTube (HTTP client tuning)
# ============================================================

YOUTUBE_BASE_URL: str = (
    _get_env_str("YOUTUBE_BASE_URL", "https://www.googleapis.com/youtube/v3") or "https://www.googleapis.com/youtube/v3"
).rstrip("/")

YOUTUBE_HTTP_TIMEOUT_SECONDS: float = _env_float_min("YOUTUBE_HTTP_TIMEOUT_SECONDS", 10.0, min_v=0.5)

# Retry de transporte (urllib3) solo para 5xx; 403/429 de cuota los gestiona la rotación de keys.
YOUTUBE_HTTP_RETRY_TOTAL: int = _env_int_in("YOUTUBE_HTTP_RETRY_TOTAL", 2, min_v=0, max_v=10)
YOUTUBE_HTTP_RETRY_BACKOFF_FACTOR: float = _env_float_min("YOUTUBE_HTTP_RETRY_BACKOFF_FACTOR", 0.3, min_v=0.0)

YOUTUBE_HTTP_USER_AGENT: str = (
    _get_env_str("YOUTUBE_HTTP_USER_AGENT", "movie-discovery/1.0") or "movie-discovery/1.0"
)

# ============================================================
# YouTube (búsqueda)
# ============================================================

YOUTUBE_SEARCH_MAX_RESULTS: int = _env_int_in("YOUTUBE_SEARCH_MAX_RESULTS", 8, min_v=1, max_v=50)

# Filtro server-side de YouTube: "long" = vídeos de más de 20 minutos.
YOUTUBE_VIDEO_DURATION_FILTER: str = _get_env_enum_str(
    "YOUTUBE_VIDEO_DURATION_FILTER",
    default="long",
    allowed={"any", "long", "medium", "short"},
)

YOUTUBE_PROBE_REGION_CODE: str = (_get_env_str("YOUTUBE_PROBE_REGION_CODE", "US") or "US").upper()

# ============================================================
# YouTube (rotación de keys + retry del orquestador)
# ============================================================

YOUTUBE_KEY_PROBE_MAX_SWEEPS: int = _env_int_in("YOUTUBE_KEY_PROBE_MAX_SWEEPS", 2, min_v=1, max_v=10)
YOUTUBE_KEY_SWEEP_BACKOFF_SECONDS: float = _env_float_min("YOUTUBE_KEY_SWEEP_BACKOFF_SECONDS", 0.3, min_v=0.0)

# 0 => tantos intentos como keys haya en el pool.
YOUTUBE_SEARCH_MAX_ATTEMPTS: int = _env_int_in("YOUTUBE_SEARCH_MAX_ATTEMPTS", 0, min_v=0, max_v=50)
YOUTUBE_RETRY_DELAY_SECONDS: float = _env_float_min("YOUTUBE_RETRY_DELAY_SECONDS", 0.3, min_v=0.0)
