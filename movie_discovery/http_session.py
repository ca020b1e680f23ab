from __future__ import annotations

"""
movie_discovery/http_session.py

requests.Session con pooling + Retry de urllib3, compartida por los clientes
de YouTube y OMDb (cada cliente crea la suya de forma perezosa).

- Retry solo para GET y solo para los status indicados (best-effort).
- respect_retry_after_header=True.
- raise_on_status=False: el cliente decide qué hacer con la última respuesta.
- pool_connections/pool_maxsize alineados con la concurrencia del cliente.
"""

from collections.abc import Sequence

import requests  # type: ignore[import-not-found]
from requests.adapters import HTTPAdapter  # type: ignore[import-not-found]
from urllib3.util.retry import Retry  # type: ignore[import-not-found]

DEFAULT_STATUS_FORCELIST: tuple[int, ...] = (500, 502, 503, 504)


def build_session(
    *,
    retry_total: int,
    backoff_factor: float,
    user_agent: str,
    pool_size: int = 8,
    status_forcelist: Sequence[int] = DEFAULT_STATUS_FORCELIST,
) -> requests.Session:
    session = requests.Session()

    retries = Retry(
        total=max(0, int(retry_total)),
        backoff_factor=max(0.0, float(backoff_factor)),
        status_forcelist=tuple(status_forcelist),
        allowed_methods=("GET",),
        raise_on_status=False,
        respect_retry_after_header=True,
    )

    size = max(1, min(64, int(pool_size)))
    adapter = HTTPAdapter(max_retries=retries, pool_connections=size, pool_maxsize=size)
    session.mount("https://", adapter)
    session.mount("http://", adapter)

    session.headers.update(
        {
            "User-Agent": user_agent,
            "Accept": "application/json,text/plain,*/*",
        }
    )
    return session
