from __future__ import annotations

"""
Contadores HTTP del servidor + contadores del núcleo (run_metrics.METRICS)
en formato de texto Prometheus.
"""

import re
from threading import RLock

from movie_discovery.run_metrics import METRICS

_LOCK = RLock()
_METRICS: dict[str, int] = {
    "http_requests_total": 0,
    "http_errors_5xx_total": 0,
    "http_unhandled_exceptions_total": 0,
    "http_upstream_failures_total": 0,
}

_CORE_PREFIX = "movie_discovery_"
_INVALID_NAME_CHARS = re.compile(r"[^a-zA-Z0-9_]")


def inc(name: str, value: int = 1) -> None:
    with _LOCK:
        _METRICS[name] = _METRICS.get(name, 0) + value


def core_metric_name(key: str) -> str:
    """search.cache_hits -> movie_discovery_search_cache_hits_total"""
    return f"{_CORE_PREFIX}{_INVALID_NAME_CHARS.sub('_', key)}_total"


def render_prometheus() -> str:
    with _LOCK:
        own = dict(_METRICS)

    merged: dict[str, int] = dict(own)
    for key, value in METRICS.snapshot()["counters"].items():
        name = core_metric_name(key)
        merged[name] = merged.get(name, 0) + int(value)

    lines: list[str] = []
    for k, v in sorted(merged.items()):
        lines.append(f"# TYPE {k} counter")
        lines.append(f"{k} {v}")
    return "\n".join(lines) + "\n"
