from __future__ import annotations

"""
server/api/middleware/request_id.py

Una línea de log por request con su X-Request-ID (propagado o generado).
Las búsquedas pueden tardar segundos (YouTube + OMDb), así que el log lleva
duración y las respuestas 5xx (incluido el 502 de "sin resultados") suben a WARNING.
"""

import logging
import time
import uuid
from collections.abc import Awaitable, Callable

from fastapi import Request, Response

from server.api.logging_config import configure_logging
from server.api.services import metrics
from server.api.settings import Settings

CallNext = Callable[[Request], Awaitable[Response]]
Middleware = Callable[[Request, CallNext], Awaitable[Response]]

REQUEST_ID_HEADER = "X-Request-ID"
_MAX_REQUEST_ID_LEN = 128


def _incoming_request_id(request: Request) -> str:
    raw = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
    if not raw:
        return uuid.uuid4().hex
    return raw[:_MAX_REQUEST_ID_LEN]


def build_request_id_middleware(settings: Settings) -> Middleware:
    logger = configure_logging(settings)

    async def middleware(request: Request, call_next: CallNext) -> Response:
        started = time.perf_counter()
        request.state.request_id = req_id = _incoming_request_id(request)
        metrics.inc("http_requests_total")

        response = await call_next(request)

        failed = response.status_code >= 500
        if failed:
            metrics.inc("http_errors_5xx_total")

        fields = {
            "request_id": req_id,
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": round((time.perf_counter() - started) * 1000),
        }
        if failed:
            logger.warning("request", extra=fields)
        else:
            logger.info("request", extra=fields)

        response.headers[REQUEST_ID_HEADER] = req_id
        return response

    return middleware
