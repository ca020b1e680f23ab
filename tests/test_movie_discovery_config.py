import movie_discovery.config as config
import movie_discovery.config_base as cfg
import movie_discovery.config_youtube as cfg_yt


def test_clean_env_raw():
    assert cfg._clean_env_raw(None) is None
    assert cfg._clean_env_raw("  ") is None
    assert cfg._clean_env_raw("'value'") == "value"
    assert cfg._clean_env_raw('"value"') == "value"
    assert cfg._clean_env_raw("  value ") == "value"


def test_get_env_parsers(monkeypatch):
    monkeypatch.delenv("TEST_STR", raising=False)
    assert cfg._get_env_str("TEST_STR", "default") == "default"

    monkeypatch.setenv("TEST_INT", "10")
    assert cfg._get_env_int("TEST_INT", 1) == 10
    monkeypatch.setenv("TEST_INT", "bad")
    assert cfg._get_env_int("TEST_INT", 1) == 1

    monkeypatch.setenv("TEST_FLOAT", "bad")
    assert cfg._get_env_float("TEST_FLOAT", 1.5) == 1.5

    monkeypatch.setenv("TEST_BOOL", "on")
    assert cfg._get_env_bool("TEST_BOOL", False) is True
    monkeypatch.setenv("TEST_BOOL", "maybe")
    assert cfg._get_env_bool("TEST_BOOL", False) is False


def test_get_env_enum_and_caps(monkeypatch):
    monkeypatch.setenv("TEST_ENUM", "ANY")
    assert cfg._get_env_enum_str("TEST_ENUM", default="long", allowed={"any", "long"}) == "any"
    monkeypatch.setenv("TEST_ENUM", "forever")
    assert cfg._get_env_enum_str("TEST_ENUM", default="long", allowed={"any", "long"}) == "long"

    assert cfg._cap_int("X", 0, min_v=1, max_v=16) == 1
    assert cfg._cap_int("X", 99, min_v=1, max_v=16) == 16
    assert cfg._cap_int("X", 6, min_v=1, max_v=16) == 6
    assert cfg._cap_float_min("X", -1.0, min_v=0.0) == 0.0


def test_parse_env_csv_list_dedupes_and_keeps_case():
    assert cfg._parse_env_csv_list(" AIzaA, AIzaB ,AIzaA,, ") == ["AIzaA", "AIzaB"]
    assert cfg._parse_env_csv_list('"Hindi,Tamil"', lower=True) == ["hindi", "tamil"]
    assert cfg._parse_env_csv_list(None) == []


def test_get_env_csv_list_default(monkeypatch):
    monkeypatch.delenv("TEST_CSV", raising=False)
    assert cfg._get_env_csv_list("TEST_CSV", ["a"]) == ["a"]
    monkeypatch.setenv("TEST_CSV", "x,y")
    assert cfg._get_env_csv_list("TEST_CSV", ["a"]) == ["x", "y"]


def test_sanitize_filename_component():
    assert cfg._sanitize_filename_component("run 1") == "run_1"
    assert cfg._sanitize_filename_component("..") == "run"
    assert cfg._sanitize_filename_component("a/b") == "a_b"


def test_collect_youtube_api_keys_merges_sources_in_order(monkeypatch):
    monkeypatch.setenv("YOUTUBE_API_KEYS", "k1, k2")
    monkeypatch.setenv("YOUTUBE_API_KEY", "k2")
    monkeypatch.setenv("YOUTUBE_API_KEY_1", "k3")
    monkeypatch.setenv("YOUTUBE_API_KEY_7", "k4")

    assert cfg_yt._collect_youtube_api_keys() == ("k1", "k2", "k3", "k4")


def test_collect_youtube_api_keys_empty(monkeypatch):
    monkeypatch.delenv("YOUTUBE_API_KEYS", raising=False)
    monkeypatch.delenv("YOUTUBE_API_KEY", raising=False)
    for i in range(1, 51):
        monkeypatch.delenv(f"YOUTUBE_API_KEY_{i}", raising=False)

    assert cfg_yt._collect_youtube_api_keys() == ()


def test_mask_secret_never_returns_full_value():
    assert config._mask_secret(None) == "<unset>"
    assert config._mask_secret("abc") == "***"
    masked = config._mask_secret("AIzaSyExampleKey123")
    assert masked.startswith("AIz")
    assert "ExampleKey" not in masked
