from __future__ import annotations

"""
movie_discovery/resilience.py

Reintentos + circuit breaker simple.

- retry_with_backoff: combinador único (acción, max intentos, delay, efecto
  lateral on_failure). El orquestador lo usa con on_failure=KeyPool.rotate.
- CircuitBreaker: closed / open / half_open, thread-safe, reloj inyectable.

No impone logging: devuelve estados / excepciones para que el caller use logger.py.
"""

import threading
import time
from dataclasses import dataclass, replace
from typing import Callable, TypeVar

from movie_discovery.errors import RetryExhausted

T = TypeVar("T")


# ============================================================
# Retry combinator
# ============================================================


def retry_with_backoff(
    action: Callable[[], T],
    *,
    max_attempts: int,
    delay_seconds: float = 0.3,
    backoff_factor: float = 1.0,
    max_delay_seconds: float = 6.0,
    should_retry: Callable[[BaseException], bool] = lambda _exc: True,
    on_failure: Callable[[int, BaseException], None] | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Ejecuta action() hasta max_attempts veces.

    Tras cada fallo reintentable:
      1) on_failure(attempt, exc)  (p.ej. rotar key)
      2) sleep(delay)              delay = delay_seconds * backoff_factor**(attempt-1), con cap
    Excepciones no reintentables se propagan tal cual.
    Al agotar intentos lanza RetryExhausted(last_error).
    """
    attempts = max(1, int(max_attempts))
    last_exc: BaseException | None = None

    for attempt in range(1, attempts + 1):
        try:
            return action()
        except Exception as exc:
            if not should_retry(exc):
                raise
            last_exc = exc

            if on_failure is not None:
                on_failure(attempt, exc)

            if attempt >= attempts:
                break

            delay = min(max_delay_seconds, max(0.0, delay_seconds) * (max(1.0, backoff_factor) ** (attempt - 1)))
            if delay > 0:
                sleep(delay)

    raise RetryExhausted(attempts, last_exc)


# ============================================================
# Circuit breaker
# ============================================================

CLOSED = "closed"
OPEN = "open"
HALF_OPEN = "half_open"


@dataclass
class CircuitState:
    state: str = CLOSED
    consecutive_failures: int = 0
    opened_at: float = 0.0
    probes_in_flight: int = 0
    last_error: str = ""


class CircuitBreaker:
    """
    Un único circuito para un proveedor (OMDb).

    closed -> open tras `failure_threshold` fallos seguidos.
    open -> half_open cuando pasan `open_seconds`; deja pasar
    `half_open_max_calls` sondas. Una sonda con éxito cierra; un fallo reabre.
    """

    def __init__(
        self,
        *,
        failure_threshold: int = 5,
        open_seconds: float = 20.0,
        half_open_max_calls: int = 1,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._lock = threading.Lock()
        self._st = CircuitState()
        self._failure_threshold = max(1, int(failure_threshold))
        self._open_seconds = max(0.1, float(open_seconds))
        self._half_open_max_calls = max(1, int(half_open_max_calls))
        self._clock = clock

    def allow(self) -> tuple[bool, str]:
        """(permitido, motivo) para la próxima llamada."""
        with self._lock:
            st = self._st
            if st.state == OPEN:
                if self._clock() - st.opened_at < self._open_seconds:
                    return False, OPEN
                st.state = HALF_OPEN
                st.probes_in_flight = 0

            if st.state == HALF_OPEN:
                if st.probes_in_flight >= self._half_open_max_calls:
                    return False, f"{HALF_OPEN}:probe_in_flight"
                st.probes_in_flight += 1
                return True, f"{HALF_OPEN}:probe"

            return True, CLOSED

    def record_success(self) -> None:
        with self._lock:
            self._st = CircuitState()

    def record_failure(self, error: str) -> None:
        with self._lock:
            st = self._st
            st.consecutive_failures += 1
            st.last_error = error[:500]
            if st.state == HALF_OPEN or st.consecutive_failures >= self._failure_threshold:
                st.state = OPEN
                st.opened_at = self._clock()
                st.probes_in_flight = 0

    def snapshot(self) -> CircuitState:
        with self._lock:
            return replace(self._st)
