from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, HTTPException, Response

from movie_discovery import config as core_config
from server.api.services import metrics

router = APIRouter()


@router.get("/health")
def health() -> dict[str, Any]:
    return {"ok": True, "ts": datetime.now(timezone.utc).isoformat()}


@router.get("/ready")
def ready() -> dict[str, Any]:
    """
    Readiness:
    - hace falta al menos una vía de búsqueda: keys de YouTube o key de OMDb.
    - sin OMDb no hay enriquecimiento ni respaldo (se informa, no bloquea).
    """
    youtube_keys = len(core_config.YOUTUBE_API_KEYS)
    omdb_configured = bool(core_config.OMDB_API_KEY)

    checks = {"youtube_keys": youtube_keys, "omdb_configured": omdb_configured}
    if youtube_keys == 0 and not omdb_configured:
        raise HTTPException(
            status_code=503,
            detail={"ready": False, "issues": {"credentials": "no YouTube API keys and no OMDb API key"}, **checks},
        )

    return {"ready": True, "ts": datetime.now(timezone.utc).isoformat(), **checks}


@router.get("/metrics")
def metrics_endpoint() -> Response:
    body = metrics.render_prometheus()
    return Response(content=body, media_type="text/plain; version=0.0.4")
