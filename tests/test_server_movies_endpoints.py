import pytest

pytest.importorskip("httpx")

from fastapi.testclient import TestClient

import server.api.deps as deps
from movie_discovery.models import Movie, SearchResult
from server.api.app import create_app


class FakeEnricher:
    def enrich(self, movie):
        if movie.title == "Sholay":
            return movie.with_metadata(imdb_rating="8.1", year="1975")
        return movie


class FakeService:
    def __init__(self, results=None, default=None):
        self.results = results or {}
        self.default = default or SearchResult.of([])
        self.terms = []
        self.enricher = FakeEnricher()

    def search(self, term):
        self.terms.append(term)
        return self.results.get(term, self.default)


def _client(service):
    app = create_app()
    app.dependency_overrides[deps.get_service] = lambda: service
    return TestClient(app)


def _movie(vid, duration="PT2H30M", title=None):
    return Movie(id=vid, video_id=vid, title=title or vid.title(), duration=duration)


def test_search_returns_data_envelope():
    service = FakeService({"Sholay": SearchResult.of([_movie("sholay", "PT3H24M")])})

    res = _client(service).get("/movies/search", params={"q": "Sholay"})

    assert res.status_code == 200
    data = res.json()["data"]
    assert data[0]["videoId"] == "sholay"
    assert data[0]["durationInMinutes"] == 204
    assert "X-Request-ID" in res.headers


def test_search_requires_query():
    assert _client(FakeService()).get("/movies/search").status_code == 422


def test_upstream_failure_maps_to_502():
    service = FakeService({"Deewaar": SearchResult.failure("No results for 'Deewaar'")})

    res = _client(service).get("/movies/search", params={"q": "Deewaar"})

    assert res.status_code == 502
    assert res.json() == {"error": "No results for 'Deewaar'"}


def test_actor_and_genre_routes():
    service = FakeService({"Aamir Khan": SearchResult.of([_movie("lagaan")])})
    client = _client(service)

    assert client.get("/movies/actor/Aamir Khan").json()["data"][0]["id"] == "lagaan"
    assert client.get("/movies/genre/Comedy").json() == {"data": []}
    assert service.terms == ["Aamir Khan", "Comedy"]


def test_trending_stops_at_first_seed_with_results():
    service = FakeService(default=SearchResult.of([_movie("any")]))

    res = _client(service).get("/movies/trending")

    assert res.status_code == 200
    assert len(res.json()["data"]) == 1
    assert len(service.terms) == 1


def test_advanced_composes_and_filters():
    service = FakeService(
        {"Devdas Shah Rukh Khan 2002": SearchResult.of([_movie("a", "PT1H10M"), _movie("b", "PT3H5M")])}
    )

    res = _client(service).get(
        "/movies/advanced",
        params={"query": "Devdas", "actor": "Shah Rukh Khan", "year": "2002", "duration": 120},
    )

    assert res.status_code == 200
    assert [m["id"] for m in res.json()["data"]] == ["b"]


def test_advanced_without_terms_is_rejected():
    assert _client(FakeService()).get("/movies/advanced", params={"duration": 90}).status_code == 422


def test_enrich_endpoint():
    client = _client(FakeService())

    res = client.post("/movies/enrich", json={"id": "x", "videoId": "x", "title": "Sholay"})
    assert res.status_code == 200
    assert res.json()["imdbRating"] == "8.1"

    assert client.post("/movies/enrich", json={"title": "No id"}).status_code == 422
