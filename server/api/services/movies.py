# SearchResult/Movie -> respuestas HTTP
from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse

from movie_discovery.models import SearchResult
from server.api.services import metrics

# YouTube y el respaldo OMDb fallaron: es un fallo aguas arriba, no del cliente.
UPSTREAM_FAILURE_STATUS = 502


def result_response(result: SearchResult) -> dict[str, Any] | JSONResponse:
    if result.error is not None:
        metrics.inc("http_upstream_failures_total", 1)
        return JSONResponse(status_code=UPSTREAM_FAILURE_STATUS, content=result.to_dict())
    return result.to_dict()
