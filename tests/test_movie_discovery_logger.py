import movie_discovery.logger as logger


def test_truncate_line_marks_truncated():
    out = logger.truncate_line("x" * 50, max_chars=20)
    assert out.endswith("(truncated)")
    assert len(out) <= 30
    assert logger.truncate_line("short", max_chars=20) == "short"


def test_debug_ctx_is_noop_without_debug(monkeypatch):
    seen = []
    monkeypatch.setattr(logger, "is_debug_mode", lambda: False)
    monkeypatch.setattr(logger, "info", lambda msg, **kw: seen.append(msg))
    monkeypatch.setattr(logger, "progress", lambda msg: seen.append(msg))

    logger.debug_ctx("keys", "rotate")
    assert seen == []


def test_debug_ctx_routes_by_silent_mode(monkeypatch):
    infos = []
    progress = []
    monkeypatch.setattr(logger, "is_debug_mode", lambda: True)
    monkeypatch.setattr(logger, "info", lambda msg, **kw: infos.append(msg))
    monkeypatch.setattr(logger, "progress", lambda msg: progress.append(msg))

    monkeypatch.setattr(logger, "is_silent_mode", lambda: False)
    logger.debug_ctx("keys", "rotate -> index=1")
    assert infos == ["[KEYS][DEBUG] rotate -> index=1"]

    monkeypatch.setattr(logger, "is_silent_mode", lambda: True)
    logger.debug_ctx("search", "q='x'")
    assert progress == ["[SEARCH][DEBUG] q='x'"]


def test_silent_mode_suppresses_info_unless_always(monkeypatch):
    monkeypatch.setattr(logger, "is_silent_mode", lambda: True)
    assert logger._should_log() is False
    assert logger._should_log(always=True) is True


def test_progress_writes_to_stdout(capsys):
    logger.progress("[movie-search] hola")
    assert capsys.readouterr().out == "[movie-search] hola\n"


def test_progressf_tolerates_bad_format(capsys):
    logger.progressf("%d películas", "x")
    assert capsys.readouterr().out == "%d películas\n"


def test_truncate_line_redacts_api_keys():
    raw = "ConnectionError(url='/youtube/v3/search?part=snippet&key=AIzaSECRET&q=x') omdb ?apikey=abc123"
    out = logger.truncate_line(raw, max_chars=500)

    assert "AIzaSECRET" not in out
    assert "abc123" not in out
    assert "key=***&q=x" in out
    assert "apikey=***" in out
