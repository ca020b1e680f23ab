import movie_discovery.title_utils as tu


def test_extract_title_strips_year_quality_and_promo():
    assert tu.extract_title("Dil Chahta Hai (2001) [HD] Full Movie") == "Dil Chahta Hai"


def test_extract_title_splits_on_delimiters_without_title_case_run():
    assert tu.extract_title("LAGAAN - FULL MOVIE HD 1080p") == "LAGAAN"


def test_extract_title_never_empty_for_non_blank_input():
    assert tu.extract_title("Official Trailer") == "Official Trailer"
    assert tu.extract_title("   ") == ""
    assert tu.extract_title("") == ""


def test_title_stages_are_named_and_ordered():
    names = [name for name, _fn in tu.TITLE_STAGES]
    assert names == [
        "strip_bracketed",
        "strip_years",
        "strip_quality_tags",
        "strip_promo_keywords",
        "pick_title_candidate",
        "collapse_whitespace",
    ]


def test_individual_stages():
    assert tu.collapse_whitespace(tu.strip_bracketed("Sholay [Remastered] (1975)")) == "Sholay"
    assert tu.collapse_whitespace(tu.strip_years("Don 2006 Hindi")) == "Don Hindi"
    assert tu.collapse_whitespace(tu.strip_quality_tags("Devdas BluRay x264 720p")) == "Devdas"
    assert tu.collapse_whitespace(tu.strip_promo_keywords("Pathaan Official Trailer")) == "Pathaan"


def test_pick_title_candidate_first_longest_run_wins_ties():
    assert tu.pick_title_candidate("Mera Naam | Joker Raj") == "Mera Naam"
    assert tu.pick_title_candidate("watch Kabhi Khushi Kabhie Gham now") == "Kabhi Khushi Kabhie Gham"


def test_normalize_cache_key_cosmetic_variants_collide():
    assert tu.normalize_cache_key("Shah Rukh Khan!") == tu.normalize_cache_key("shah rukh khan")
    assert tu.normalize_cache_key("Amélie") == "amelie"


def test_normalize_cache_key_keeps_non_latin_text():
    a = tu.normalize_cache_key("दिल")
    b = tu.normalize_cache_key("प्यार")
    assert a and b
    assert a != b


def test_shorten_title_and_trailer_detection():
    assert tu.shorten_title("Kabhi Khushi Kabhie Gham Full", 3) == "Kabhi Khushi Kabhie"
    assert tu.shorten_title("Sholay", 3) == "Sholay"
    assert tu.looks_like_trailer("Pathaan Official TRAILER") is True
    assert tu.looks_like_trailer("Jawan teaser 2") is True
    assert tu.looks_like_trailer("Sholay Full Movie") is False
