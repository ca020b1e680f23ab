from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from movie_discovery import query_builders
from movie_discovery.models import Movie, SearchParams
from movie_discovery.search_service import MovieSearchService
from server.api.deps import get_service
from server.api.services.movies import result_response

router = APIRouter(prefix="/movies", tags=["movies"])


@router.get("/search", response_model=None)
def search(
    q: str = Query(..., min_length=1, max_length=200, description="Título o texto libre"),
    service: MovieSearchService = Depends(get_service),
) -> dict[str, Any] | JSONResponse:
    return result_response(service.search(q))


@router.get("/trending", response_model=None)
def trending(service: MovieSearchService = Depends(get_service)) -> dict[str, Any] | JSONResponse:
    return result_response(query_builders.trending(service))


@router.get("/actor/{name}", response_model=None)
def by_actor(name: str, service: MovieSearchService = Depends(get_service)) -> dict[str, Any] | JSONResponse:
    return result_response(query_builders.by_actor(service, name))


@router.get("/genre/{genre}", response_model=None)
def by_genre(genre: str, service: MovieSearchService = Depends(get_service)) -> dict[str, Any] | JSONResponse:
    return result_response(query_builders.by_genre(service, genre))


@router.get("/advanced", response_model=None)
def advanced(
    query: str = Query("", max_length=200),
    actor: str | None = Query(None, max_length=200),
    genre: str | None = Query(None, max_length=100),
    language: str | None = Query(None, max_length=100),
    year: str | None = Query(None, max_length=10),
    duration: int | None = Query(None, ge=0, le=1000, description="Duración mínima en minutos"),
    service: MovieSearchService = Depends(get_service),
) -> dict[str, Any] | JSONResponse:
    params = SearchParams.from_dict(
        {
            "query": query,
            "actor": actor,
            "genre": genre,
            "language": language,
            "year": year,
            "duration": duration,
        }
    )
    if not params.composed_query():
        raise HTTPException(status_code=422, detail="at least one of query/actor/genre/language/year is required")
    return result_response(query_builders.advanced(service, params))


@router.post("/enrich")
def enrich(
    movie: dict[str, Any] = Body(...),
    service: MovieSearchService = Depends(get_service),
) -> dict[str, Any]:
    try:
        parsed = Movie.from_dict(movie)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return service.enricher.enrich(parsed).to_dict()
