from server.api.settings import Settings


def test_settings_from_env_cors_star(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "*")
    settings = Settings.from_env()

    assert settings.cors_allow_origins() == ["*"]
    assert settings.cors_allow_credentials is False


def test_settings_from_env_custom_origins(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "https://a.com, https://b.com")
    settings = Settings.from_env()

    assert settings.cors_allow_origins() == ["https://a.com", "https://b.com"]
    assert settings.cors_allow_credentials is True


def test_settings_server_defaults_and_invalid_values(monkeypatch):
    monkeypatch.delenv("API_HOST", raising=False)
    monkeypatch.setenv("API_PORT", "99999")
    monkeypatch.setenv("API_RELOAD", "maybe")
    monkeypatch.setenv("GZIP_MIN_SIZE", "-5")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.api_host == "127.0.0.1"
    assert settings.api_port == 8000
    assert settings.api_reload is False
    assert settings.gzip_min_size == 0
    assert settings.log_level == "DEBUG"


def test_settings_reload_flag(monkeypatch):
    monkeypatch.setenv("API_RELOAD", "yes")
    monkeypatch.setenv("API_PORT", "9001")
    settings = Settings.from_env()
    assert settings.api_reload is True
    assert settings.api_port == 9001
