from __future__ import annotations

"""
movie_discovery/run_metrics.py

Métricas agregadas del proceso (thread-safe) para YouTube / OMDb / caché / búsqueda.

Uso:
    from movie_discovery.run_metrics import METRICS

    METRICS.incr("youtube.search.calls")
    METRICS.incr("omdb.lookup.not_found")
    METRICS.observe_ms("search.latency_ms", elapsed_ms)
    METRICS.add_error("youtube", "search", cause="quota", detail="quotaExceeded")

    summary = METRICS.snapshot()

Las claves de contadores son texto libre con puntos; el servidor las expone en
/metrics con prefijo `movie_discovery_`.
"""

import threading
import time
from dataclasses import dataclass
from typing import Any

from movie_discovery import logger as _logger


@dataclass(frozen=True)
class ErrorEvent:
    ts: float
    subsystem: str  # "youtube" | "omdb" | "search" | "enrich"
    action: str  # "search" | "details" | "probe" | "lookup" | ...
    cause: str  # "network" | "quota" | "provider" | "keys_exhausted" | ...
    detail: str


class RunMetrics:
    """
    Contadores + observaciones básicas.

    - counters: dict[str, int]
    - timings_ms: dict[str, {"count", "sum", "min", "max", "avg"}]
    - errors: lista acotada para diagnóstico (se descarta la más antigua)
    """

    def __init__(self, *, max_error_events: int = 500) -> None:
        self._lock = threading.Lock()
        self._counters: dict[str, int] = {}
        self._timings: dict[str, dict[str, float]] = {}
        self._errors: list[ErrorEvent] = []
        self._max_error_events = max(0, int(max_error_events))

    def incr(self, key: str, n: int = 1) -> None:
        if not key:
            return
        with self._lock:
            self._counters[key] = int(self._counters.get(key, 0)) + int(n)

    def observe_ms(self, key: str, ms: float) -> None:
        if not key:
            return
        v = float(ms)
        with self._lock:
            t = self._timings.get(key)
            if t is None:
                self._timings[key] = {"count": 1.0, "sum": v, "min": v, "max": v}
                return
            t["count"] += 1.0
            t["sum"] += v
            t["min"] = min(t["min"], v)
            t["max"] = max(t["max"], v)

    def add_error(self, subsystem: str, action: str, *, cause: str, detail: str) -> None:
        ev = ErrorEvent(
            ts=time.time(),
            subsystem=str(subsystem),
            action=str(action),
            cause=str(cause),
            detail=str(detail)[:800],
        )
        with self._lock:
            if self._max_error_events <= 0:
                return
            if len(self._errors) >= self._max_error_events:
                self._errors.pop(0)
            self._errors.append(ev)

    def counter(self, key: str) -> int:
        with self._lock:
            return int(self._counters.get(key, 0))

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()
            self._timings.clear()
            self._errors.clear()

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            counters = dict(self._counters)
            timings = {k: dict(v) for k, v in self._timings.items()}
            errors = list(self._errors)

        by_cause: dict[str, int] = {}
        by_subsystem: dict[str, int] = {}
        for e in errors:
            by_cause[e.cause] = by_cause.get(e.cause, 0) + 1
            by_subsystem[e.subsystem] = by_subsystem.get(e.subsystem, 0) + 1

        for t in timings.values():
            t["avg"] = t["sum"] / max(1.0, t["count"])

        derived = {
            "errors.total": len(errors),
            "errors.by_cause": by_cause,
            "errors.by_subsystem": by_subsystem,
        }
        return {"counters": counters, "timings_ms": timings, "errors": errors, "derived": derived}


def log_metrics_summary(*, top_n: int = 12) -> None:
    """Resumen compacto de contadores (CLI al terminar / debug)."""
    snap = METRICS.snapshot()
    counters: dict[str, int] = snap["counters"]
    if not counters:
        return

    top = sorted(counters.items(), key=lambda kv: (-kv[1], kv[0]))[: max(1, top_n)]
    parts = ", ".join(f"{k}={v}" for k, v in top)
    _logger.debug_ctx("METRICS", parts)
    if snap["derived"]["errors.total"]:
        _logger.debug_ctx("METRICS", f"errors.by_cause={snap['derived']['errors.by_cause']}")


# Singleton del proceso (módulo)
METRICS = RunMetrics()
