from __future__ import annotations

"""
movie_discovery/logger.py

Fachada de logging del núcleo de búsqueda.

Superficie pública
------------------
- debug / info / warning / error        -> logging estándar (logger "movie_discovery")
- progress / progressf                  -> stdout sin timestamps, siempre visible
- debug_ctx(tag, msg)                   -> trazas etiquetadas ([KEYS], [SEARCH], [OMDB]...)
- truncate_line / redact_secrets        -> higiene de mensajes de YouTube/OMDb

Modos (leídos de movie_discovery.config vía sys.modules, sin importarlo):
- SILENT_MODE: calla debug/info/warning salvo always=True. error() nunca se calla.
- DEBUG_MODE: activa debug_ctx. Con SILENT_MODE, debug_ctx sale por progress().
- LOG_LEVEL: nivel explícito del root; si falta, DEBUG_MODE decide DEBUG/INFO.
- HTTP_DEBUG: deja urllib3/requests con el nivel del root.
- LOGGER_FILE_ENABLED / LOGGER_FILE_PATH: copia opcional a fichero (logs y progress).

Las URLs de YouTube y OMDb llevan la key en la query (`key=` / `apikey=`), y
las excepciones de requests las repiten en su mensaje: todo lo que pasa por
truncate_line sale ya redactado.
"""

import logging
import os
import re
import sys
import threading
from types import ModuleType, TracebackType
from typing import Final, Mapping, TypedDict

from typing_extensions import TypeAlias, Unpack

_ExcInfoTuple: TypeAlias = tuple[type[BaseException], BaseException, TracebackType | None]
ExcInfo: TypeAlias = bool | _ExcInfoTuple | BaseException | None


class LogKwargs(TypedDict, total=False):
    exc_info: ExcInfo
    stack_info: bool
    stacklevel: int
    extra: Mapping[str, object] | None


LOGGER_NAME: Final[str] = "movie_discovery"
CONFIG_MODULE: Final[str] = "movie_discovery.config"

_LOG_FORMAT: Final[str] = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_FILE_HANDLER_TAG: Final[str] = "_movie_discovery_file_handler"
_NOISY_HTTP_LOGGERS: Final[tuple[str, ...]] = ("urllib3", "urllib3.connectionpool", "requests")

_STATE_LOCK = threading.Lock()
_FILE_LOCK = threading.Lock()
_LOGGER: logging.Logger | None = None

# ============================================================================
# Lectura de config (sin import directo: config_base importa este módulo)
# ============================================================================


def _cfg(name: str, default: object = None) -> object:
    mod = sys.modules.get(CONFIG_MODULE)
    if not isinstance(mod, ModuleType):
        return default
    return getattr(mod, name, default)


def is_silent_mode() -> bool:
    return bool(_cfg("SILENT_MODE", False))


def is_debug_mode() -> bool:
    return bool(_cfg("DEBUG_MODE", False))


def _root_level() -> int:
    raw = _cfg("LOG_LEVEL")
    if isinstance(raw, str) and raw.strip():
        name = raw.strip().upper()
        level = logging.getLevelName({"WARN": "WARNING", "FATAL": "CRITICAL"}.get(name, name))
        if isinstance(level, int):
            return level
    return logging.DEBUG if is_debug_mode() else logging.INFO


def _log_file_path() -> str | None:
    if not _cfg("LOGGER_FILE_ENABLED", False):
        return None
    env_path = (os.getenv("LOGGER_FILE_PATH") or "").strip()
    if env_path:
        return env_path
    cfg_path = str(_cfg("LOGGER_FILE_PATH") or "").strip()
    return cfg_path or None


# ============================================================================
# Configuración idempotente
# ============================================================================


def _sync_file_handler(root: logging.Logger, level: int) -> None:
    ours = [h for h in root.handlers if getattr(h, _FILE_HANDLER_TAG, False)]
    if ours:
        for h in ours:
            h.setLevel(level)
        return

    path = _log_file_path()
    if path is None:
        return
    try:
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        handler = logging.FileHandler(path, mode="a", encoding="utf-8", delay=True)
    except OSError:
        return
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    setattr(handler, _FILE_HANDLER_TAG, True)
    root.addHandler(handler)


def get_logger() -> logging.Logger:
    """
    Devuelve el logger "movie_discovery".

    Se puede llamar en cada uso: reaplica nivel, logs ruidosos de HTTP y el
    FileHandler opcional, porque movie_discovery.config puede cargarse
    después del primer mensaje.
    """
    global _LOGGER

    level = _root_level()
    root = logging.getLogger()
    with _STATE_LOCK:
        if not root.handlers:
            logging.basicConfig(level=level, format=_LOG_FORMAT)
        root.setLevel(level)

        http_level = level if _cfg("HTTP_DEBUG", False) else max(level, logging.WARNING)
        for name in _NOISY_HTTP_LOGGERS:
            logging.getLogger(name).setLevel(http_level)

        _sync_file_handler(root, level)

        if _LOGGER is None:
            _LOGGER = logging.getLogger(LOGGER_NAME)
    return _LOGGER


def _should_log(*, always: bool = False) -> bool:
    return always or not is_silent_mode()


# ============================================================================
# progress: salida de consola del CLI (no es logging)
# ============================================================================


def progress(message: str) -> None:
    try:
        sys.stdout.write(f"{message}\n")
        sys.stdout.flush()
    except (OSError, ValueError):
        pass

    path = _log_file_path()
    if path is None:
        return
    try:
        with _FILE_LOCK, open(path, "a", encoding="utf-8") as f:
            f.write(f"{message}\n")
    except OSError:
        return


def progressf(fmt: str, *args: object) -> None:
    try:
        msg = fmt % args if args else fmt
    except (TypeError, ValueError):
        msg = fmt
    progress(msg)


# ============================================================================
# Logging
# ============================================================================


def _emit(level: int, msg: str, args: tuple[object, ...], kwargs: LogKwargs) -> None:
    try:
        get_logger().log(level, msg, *args, **kwargs)
    except Exception:
        # El logging nunca rompe una búsqueda.
        pass


def debug(msg: str, *args: object, always: bool = False, **kwargs: Unpack[LogKwargs]) -> None:
    if _should_log(always=always):
        _emit(logging.DEBUG, msg, args, kwargs)


def info(msg: str, *args: object, always: bool = False, **kwargs: Unpack[LogKwargs]) -> None:
    if _should_log(always=always):
        _emit(logging.INFO, msg, args, kwargs)


def warning(msg: str, *args: object, always: bool = False, **kwargs: Unpack[LogKwargs]) -> None:
    if _should_log(always=always):
        _emit(logging.WARNING, msg, args, kwargs)


def error(msg: str, *args: object, always: bool = False, **kwargs: Unpack[LogKwargs]) -> None:
    """Siempre se emite (ignora SILENT_MODE)."""
    _emit(logging.ERROR, msg, args, kwargs)


# ============================================================================
# Higiene de mensajes + debug contextual
# ============================================================================

_DEFAULT_LOG_LINE_MAX_CHARS: Final[int] = 500
_SECRET_PARAM_RE: Final[re.Pattern[str]] = re.compile(r"(?i)\b(key|apikey|api_key)=([^&\s'\"]+)")


def redact_secrets(text: str) -> str:
    """`...?key=AIza...&q=x` -> `...?key=***&q=x` (también apikey= de OMDb)."""
    return _SECRET_PARAM_RE.sub(lambda m: f"{m.group(1)}=***", text)


def truncate_line(text: str, max_chars: int | None = None) -> str:
    limit = max_chars if isinstance(max_chars, int) and max_chars > 0 else None
    if limit is None:
        try:
            limit = int(_cfg("LOGGER_LOG_LINE_MAX_CHARS", _DEFAULT_LOG_LINE_MAX_CHARS))  # type: ignore[arg-type]
        except (TypeError, ValueError):
            limit = _DEFAULT_LOG_LINE_MAX_CHARS

    clean = redact_secrets(text)
    if len(clean) <= limit:
        return clean
    return clean[: max(0, limit - 12)] + " …(truncated)"


def debug_ctx(tag: str, msg: object) -> None:
    """
    "[TAG][DEBUG] msg" si DEBUG_MODE; por progress() en SILENT_MODE y por
    info() en otro caso. Sin DEBUG_MODE es no-op.
    """
    if not is_debug_mode():
        return

    line = f"[{(tag or 'DEBUG').strip().upper()}][DEBUG] {truncate_line(str(msg))}"
    if is_silent_mode():
        progress(line)
    else:
        info(line)
