from __future__ import annotations

"""
movie_discovery/key_pool.py

Pool de API keys de YouTube con cursor circular.

acquire_working_key():
  - Empieza en el cursor actual y prueba cada key con un probe barato.
  - La primera key aceptada se devuelve y el cursor se queda en ella
    (las siguientes llamadas siguen usando la key "buena" hasta que falle).
  - Una key rechazada avanza el cursor (circular).
  - Si se completa una vuelta entera sin éxito: espera sweep_backoff_seconds y
    repite, hasta max_sweeps vueltas. Después: KeyPoolExhausted (parada dura
    para esa búsqueda; NO equivale a "sin resultados").

Concurrencia: el cursor está protegido por lock; el probe (red) se hace fuera
del lock y un rechazo solo avanza el cursor si nadie lo ha movido mientras tanto.
"""

import threading
import time
from collections.abc import Iterable
from typing import Callable

from movie_discovery import logger as logger
from movie_discovery.errors import KeyPoolExhausted, UpstreamError
from movie_discovery.run_metrics import METRICS

Prober = Callable[[str], None]


def _mask(key: str) -> str:
    return f"…{key[-4:]}" if len(key) > 4 else "***"


class KeyPool:
    def __init__(
        self,
        keys: Iterable[str],
        *,
        prober: Prober,
        max_sweeps: int = 2,
        sweep_backoff_seconds: float = 0.3,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        cleaned = tuple(dict.fromkeys(k.strip() for k in keys if k and k.strip()))
        if not cleaned:
            raise ValueError("KeyPool requires at least one API key")

        self._keys = cleaned
        self._prober = prober
        self._max_sweeps = max(1, int(max_sweeps))
        self._sweep_backoff = max(0.0, float(sweep_backoff_seconds))
        self._sleep = sleep
        self._lock = threading.Lock()
        self._index = 0

    def __len__(self) -> int:
        return len(self._keys)

    @property
    def current_index(self) -> int:
        with self._lock:
            return self._index

    @property
    def current_key(self) -> str:
        with self._lock:
            return self._keys[self._index]

    def rotate(self) -> int:
        """Avanza el cursor una posición (circular). Devuelve el nuevo índice."""
        with self._lock:
            self._index = (self._index + 1) % len(self._keys)
            idx = self._index
        METRICS.incr("youtube.keys.rotations")
        logger.debug_ctx("KEYS", f"rotate -> index={idx}")
        return idx

    def _advance_from(self, idx: int) -> None:
        with self._lock:
            if self._index == idx:
                self._index = (idx + 1) % len(self._keys)

    def acquire_working_key(self) -> str:
        n = len(self._keys)
        tried = 0

        for sweep in range(1, self._max_sweeps + 1):
            for _ in range(n):
                with self._lock:
                    idx = self._index
                    key = self._keys[idx]

                tried += 1
                METRICS.incr("youtube.keys.probes")
                try:
                    self._prober(key)
                except UpstreamError as exc:
                    METRICS.incr("youtube.keys.rejected")
                    logger.debug_ctx("KEYS", f"key #{idx} ({_mask(key)}) rejected: {exc}")
                    self._advance_from(idx)
                    continue

                logger.debug_ctx("KEYS", f"using key #{idx} ({_mask(key)})")
                return key

            if sweep < self._max_sweeps and self._sweep_backoff > 0:
                logger.debug_ctx("KEYS", f"all {n} keys rejected (sweep {sweep}); sleeping {self._sweep_backoff:g}s")
                self._sleep(self._sweep_backoff)

        METRICS.incr("youtube.keys.exhausted")
        logger.warning(
            f"All YouTube API keys rejected ({n} keys, {self._max_sweeps} sweeps).",
            always=True,
        )
        raise KeyPoolExhausted(
            "all YouTube API keys exhausted or quota exceeded",
            keys_tried=tried,
            sweeps=self._max_sweeps,
        )
