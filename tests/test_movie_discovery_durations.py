import pytest

import movie_discovery.durations as d


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("PT2H15M", 135),
        ("PT45M", 45),
        ("PT1H", 60),
        ("PT59M59S", 59),
        ("PT1H0M30S", 60),
        ("P1DT2H", 1560),
        ("pt1h30m", 90),
    ],
)
def test_to_minutes_valid_tokens(token, expected):
    assert d.to_minutes(token) == expected


@pytest.mark.parametrize("token", ["garbage", "", "PT", "P", "1H30M", "PTXM", None, 90])
def test_to_minutes_invalid_tokens_are_zero(token):
    assert d.to_minutes(token) == 0


def test_to_minutes_fractional_seconds_are_floored():
    assert d.to_minutes("PT1M59.9S") == 1
