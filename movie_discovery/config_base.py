"""
movie_discovery/config_base.py

Base de configuración (sin dependencias de los config_<área>.py):

- load_dotenv UNA vez, sin pisar variables ya exportadas.
- Parsers de env vars: nunca lanzan; un valor inválido avisa (always=True)
  y cae al default.
- Modo de ejecución (DEBUG_MODE / SILENT_MODE / LOG_LEVEL / HTTP_DEBUG).
- Fichero de log opcional por ejecución (LOGGER_FILE_*).
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable
from datetime import datetime
from pathlib import Path
from typing import Final, TypeVar

from dotenv import load_dotenv

load_dotenv(override=False)

from movie_discovery import logger as _logger  # noqa: E402

_T = TypeVar("_T")

BASE_DIR: Final[Path] = Path(__file__).resolve().parent
PROJECT_DIR: Final[Path] = BASE_DIR.parent


# ============================================================
# Parsers
# ============================================================

_BOOL_WORDS: Final[dict[str, bool]] = {
    **dict.fromkeys(("1", "true", "t", "yes", "y", "on"), True),
    **dict.fromkeys(("0", "false", "f", "no", "n", "off"), False),
}


def _clean_env_raw(v: object | None) -> str | None:
    """Recorta espacios y un par de comillas envolventes ("x" / 'x'). Vacío -> None."""
    s = "" if v is None else str(v).strip()
    if len(s) >= 2 and s[0] == s[-1] and s[0] in "'\"":
        s = s[1:-1].strip()
    return s or None


def _invalid(name: str, raw: str, default: object, hint: str = "") -> None:
    _logger.warning(f"Invalid value for {name!r}: {raw!r}{hint}, using default {default!r}", always=True)


def _get_env_typed(name: str, default: _T, cast: Callable[[str], _T]) -> _T:
    raw = _clean_env_raw(os.getenv(name))
    if raw is None:
        return default
    try:
        return cast(raw)
    except ValueError:
        _invalid(name, raw, default)
        return default


def _get_env_str(name: str, default: str | None = None) -> str | None:
    return _get_env_typed(name, default, str)


def _get_env_int(name: str, default: int) -> int:
    return _get_env_typed(name, default, int)


def _get_env_float(name: str, default: float) -> float:
    return _get_env_typed(name, default, float)


def _get_env_bool(name: str, default: bool) -> bool:
    def _to_bool(raw: str) -> bool:
        try:
            return _BOOL_WORDS[raw.lower()]
        except KeyError:
            raise ValueError(raw) from None

    return _get_env_typed(name, default, _to_bool)


def _get_env_enum_str(name: str, *, default: str, allowed: set[str], normalize: bool = True) -> str:
    raw = _get_env_str(name, None)
    if raw is None:
        return default
    value = raw.lower() if normalize else raw
    if value in allowed:
        return value
    _invalid(name, raw, default, f" (allowed: {', '.join(sorted(allowed))})")
    return default


def _cap_int(name: str, value: int, *, min_v: int, max_v: int) -> int:
    capped = min(max(value, min_v), max_v)
    if capped != value:
        _logger.warning(f"{name}={value} out of range [{min_v}, {max_v}]; using {capped}", always=True)
    return capped


def _cap_float_min(name: str, value: float, *, min_v: float) -> float:
    if value >= min_v:
        return value
    _logger.warning(f"{name}={value} below {min_v}; using {min_v}", always=True)
    return min_v


def _env_int_in(name: str, default: int, *, min_v: int, max_v: int) -> int:
    return _cap_int(name, _get_env_int(name, default), min_v=min_v, max_v=max_v)


def _env_float_min(name: str, default: float, *, min_v: float) -> float:
    return _cap_float_min(name, _get_env_float(name, default), min_v=min_v)


def _parse_env_csv_list(raw: str | None, *, lower: bool = False) -> list[str]:
    """
    "k1, k2 ,k1" -> ["k1", "k2"]: sin vacíos ni duplicados, orden estable.

    lower=False por defecto: las API keys distinguen mayúsculas.
    """
    body = _clean_env_raw(raw) or ""
    parts: Iterable[str] = (p.strip() for p in body.split(","))
    if lower:
        parts = (p.lower() for p in parts)
    return list(dict.fromkeys(p for p in parts if p))


def _get_env_csv_list(name: str, default: list[str] | None = None, *, lower: bool = False) -> list[str]:
    raw = _get_env_str(name, None)
    if raw is None:
        return list(default or [])
    return _parse_env_csv_list(raw, lower=lower)


# ============================================================
# Modo de ejecución
# ============================================================

DEBUG_MODE: bool = _get_env_bool("DEBUG_MODE", False)
SILENT_MODE: bool = _get_env_bool("SILENT_MODE", False)
HTTP_DEBUG: bool = _get_env_bool("HTTP_DEBUG", False)
LOG_LEVEL: str | None = _get_env_str("LOG_LEVEL", None)

LOGGER_LOG_LINE_MAX_CHARS: int = _env_int_in("LOGGER_LOG_LINE_MAX_CHARS", 500, min_v=80, max_v=20_000)


# ============================================================
# Fichero de log por ejecución
# ============================================================

LOGGER_FILE_ENABLED: bool = _get_env_bool("LOGGER_FILE_ENABLED", False)
LOGGER_FILE_DIR: Final[Path] = PROJECT_DIR / (_get_env_str("LOGGER_FILE_DIR", "logs") or "logs")
LOGGER_FILE_PREFIX: Final[str] = _get_env_str("LOGGER_FILE_PREFIX", "movie-search") or "movie-search"
LOGGER_FILE_TIMESTAMP_FORMAT: Final[str] = (
    _get_env_str("LOGGER_FILE_TIMESTAMP_FORMAT", "%Y%m%d-%H%M%S") or "%Y%m%d-%H%M%S"
)
LOGGER_FILE_INCLUDE_PID: bool = _get_env_bool("LOGGER_FILE_INCLUDE_PID", True)


def _sanitize_filename_component(s: str) -> str:
    chars = (ch if ch.isalnum() or ch in "-_.@" else "_" for ch in s or "")
    return "".join(chars).strip("._-") or "run"


def _build_logger_file_path() -> Path | None:
    """
    Decide el fichero de log una sola vez por proceso y lo exporta a
    os.environ["LOGGER_FILE_PATH"]; los workers de uvicorn lo heredan y
    escriben todos en el mismo fichero.
    """
    if not LOGGER_FILE_ENABLED:
        return None

    explicit = _clean_env_raw(os.getenv("LOGGER_FILE_PATH"))
    if explicit:
        return (PROJECT_DIR / explicit).resolve()

    stamp = _sanitize_filename_component(datetime.now().strftime(LOGGER_FILE_TIMESTAMP_FORMAT))
    name = f"{_sanitize_filename_component(LOGGER_FILE_PREFIX)}_{stamp}"
    if LOGGER_FILE_INCLUDE_PID:
        name += f"_{os.getpid()}"

    path = (LOGGER_FILE_DIR / f"{name}.log").resolve()
    os.environ["LOGGER_FILE_PATH"] = str(path)
    return path


LOGGER_FILE_PATH: Path | None = _build_logger_file_path()
