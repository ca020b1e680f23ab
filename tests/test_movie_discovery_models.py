import pytest

import movie_discovery.models as m


def _movie(**kw):
    base = dict(
        id="vid1",
        video_id="vid1",
        title="Sholay",
        thumbnail="https://i.ytimg.com/vi/vid1/hq.jpg",
        channel_title="Classic Films",
        published_at="2015-01-01T00:00:00Z",
        duration="PT3H24M",
        view_count="1200",
    )
    base.update(kw)
    return m.Movie(**base)


def test_clean_na():
    assert m.clean_na("N/A") is None
    assert m.clean_na("  ") is None
    assert m.clean_na(None) is None
    assert m.clean_na(" 7.9 ") == "7.9"


def test_movie_derived_properties():
    movie = _movie()
    assert movie.duration_in_minutes == 204
    assert movie.is_enriched is False
    assert movie.is_fallback is False
    assert _movie(video_id="").is_fallback is True


def test_movie_to_dict_omits_absent_metadata():
    out = _movie().to_dict()
    assert out["videoId"] == "vid1"
    assert out["durationInMinutes"] == 204
    assert "plot" not in out
    assert "ratings" not in out


def test_movie_with_metadata_ignores_unknown_fields():
    enriched = _movie().with_metadata(plot="Two ex-convicts...", imdb_rating="8.1", bogus="x")
    assert enriched.plot == "Two ex-convicts..."
    assert enriched.is_enriched is True
    assert not hasattr(enriched, "bogus")


def test_movie_from_dict_wire_shape():
    data = {
        "id": "tt0073707",
        "videoId": "",
        "title": "Sholay",
        "imdbID": "tt0073707",
        "imdbRating": "8.1",
        "poster": "N/A",
        "ratings": [{"Source": "Internet Movie Database", "Value": "8.1/10"}, {"Source": "N/A"}],
        "durationInMinutes": 999,
    }
    movie = m.Movie.from_dict(data)
    assert movie.imdb_id == "tt0073707"
    assert movie.poster is None
    assert movie.ratings == (m.Rating("Internet Movie Database", "8.1/10"),)
    assert movie.duration_in_minutes == 0
    assert movie.view_count == "0"


def test_movie_from_dict_requires_id():
    with pytest.raises(ValueError):
        m.Movie.from_dict({"title": "Sholay"})


def test_search_params_composed_query_skips_blanks():
    params = m.SearchParams(query="Sholay", actor="  ", genre="Action", year="1975")
    assert params.composed_query() == "Sholay Action 1975"


def test_search_params_from_dict_tolerates_bad_duration():
    assert m.SearchParams.from_dict({"query": "x", "duration": "abc"}).duration is None
    assert m.SearchParams.from_dict({"query": "x", "duration": "120"}).duration == 120
    assert m.SearchParams.from_dict({"query": "x", "actor": " "}).actor is None


def test_search_result_exactly_one_of_movies_or_error():
    with pytest.raises(ValueError):
        m.SearchResult()
    with pytest.raises(ValueError):
        m.SearchResult(movies=(), error="boom")
    with pytest.raises(ValueError):
        m.SearchResult.failure("  ")


def test_search_result_to_dict_and_source_not_compared():
    ok = m.SearchResult.of([_movie()], source="youtube")
    cached = m.SearchResult.of([_movie()], source="cache")
    assert ok == cached
    assert ok.to_dict()["data"][0]["id"] == "vid1"

    err = m.SearchResult.failure("No results")
    assert err.ok is False
    assert err.to_dict() == {"error": "No results"}


def test_search_result_with_movies_keeps_source():
    res = m.SearchResult.of([_movie()], source="omdb").with_movies([])
    assert res.movies == ()
    assert res.source == "omdb"
