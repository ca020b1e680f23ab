# lectura de env vars + defaults del servidor HTTP
from __future__ import annotations

import os
from dataclasses import dataclass


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    val = raw.strip()
    return val if val else default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    val = raw.strip().lower()
    if val in ("1", "true", "yes", "y", "on"):
        return True
    if val in ("0", "false", "no", "n", "off"):
        return False
    return default


@dataclass(frozen=True)
class Settings:
    """
    Settings del API (env vars). Las credenciales y límites del núcleo viven
    en movie_discovery.config; aquí solo lo propio del servidor.

    Notas:
    - CORS: si CORS_ORIGINS="*" -> allow_credentials=False (regla de navegador).
    - API_RELOAD: default False (seguro para producción).
    """

    log_level: str

    cors_origins_raw: str
    cors_allow_credentials: bool

    gzip_min_size: int

    api_host: str = "127.0.0.1"
    api_port: int = 8000
    api_reload: bool = False

    def cors_allow_origins(self) -> list[str]:
        raw = self.cors_origins_raw.strip()
        if raw == "*":
            return ["*"]
        parts = [p.strip() for p in raw.split(",")]
        return [p for p in parts if p]

    @staticmethod
    def from_env() -> "Settings":
        cors_raw = _env_str("CORS_ORIGINS", "*")
        cors_allow_credentials = cors_raw.strip() != "*"

        port = _env_int("API_PORT", 8000)
        if not (0 < port < 65536):
            port = 8000

        return Settings(
            log_level=_env_str("LOG_LEVEL", "INFO").upper(),
            cors_origins_raw=cors_raw,
            cors_allow_credentials=cors_allow_credentials,
            gzip_min_size=max(0, _env_int("GZIP_MIN_SIZE", 800)),
            api_host=_env_str("API_HOST", "127.0.0.1"),
            api_port=port,
            api_reload=_env_bool("API_RELOAD", False),
        )
