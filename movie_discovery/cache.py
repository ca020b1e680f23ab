from __future__ import annotations

"""
movie_discovery/cache.py

Caché en memoria con TTL (y LRU opcional), compartida por búsqueda y enriquecimiento.

- Claves normalizadas con title_utils.normalize_cache_key: "Shah Rukh Khan!" y
  "shah rukh khan" comparten entrada.
- Namespaces ("search", "enrich") se anteponen tras normalizar.
- Expiración perezosa: una entrada con edad > TTL se trata como ausente y se
  elimina en el propio get().
- max_entries > 0 añade desalojo LRU; 0 = sin límite.
- Thread-safe (RLock). Carreras de escritura: gana la última.
- Nunca se persiste.
"""

import threading
import time
from collections import OrderedDict
from typing import Callable, Generic, TypeVar

from movie_discovery.run_metrics import METRICS
from movie_discovery.title_utils import normalize_cache_key

V = TypeVar("V")


class TTLCache(Generic[V]):
    def __init__(
        self,
        *,
        ttl_seconds: float,
        max_entries: int = 0,
        clock: Callable[[], float] = time.monotonic,
        metrics_prefix: str = "cache",
    ) -> None:
        self._ttl = max(0.0, float(ttl_seconds))
        self._max_entries = max(0, int(max_entries))
        self._clock = clock
        self._prefix = metrics_prefix
        self._lock = threading.RLock()
        self._data: OrderedDict[str, tuple[V, float]] = OrderedDict()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @staticmethod
    def make_key(key: str, *, namespace: str = "") -> str:
        norm = normalize_cache_key(key)
        return f"{namespace}:{norm}" if namespace else norm

    def get(self, key: str, *, namespace: str = "") -> V | None:
        k = self.make_key(key, namespace=namespace)
        with self._lock:
            entry = self._data.get(k)
            if entry is None:
                METRICS.incr(f"{self._prefix}.misses")
                return None

            value, stored_at = entry
            if self._clock() - stored_at > self._ttl:
                del self._data[k]
                METRICS.incr(f"{self._prefix}.expired")
                METRICS.incr(f"{self._prefix}.misses")
                return None

            self._data.move_to_end(k)
            METRICS.incr(f"{self._prefix}.hits")
            return value

    def set(self, key: str, value: V, *, namespace: str = "") -> None:
        k = self.make_key(key, namespace=namespace)
        with self._lock:
            self._data[k] = (value, self._clock())
            self._data.move_to_end(k)
            if self._max_entries > 0:
                while len(self._data) > self._max_entries:
                    self._data.popitem(last=False)
                    METRICS.incr(f"{self._prefix}.evicted")

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
