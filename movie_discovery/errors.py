from __future__ import annotations

"""
movie_discovery/errors.py

Taxonomía de errores del core.

Excepciones (solo circulan POR DENTRO del core; nunca cruzan la API pública):
- UpstreamError            base común (provider + detail)
- NetworkFailure           fallo de transporte / timeout / JSON inválido
- UpstreamProviderError    error estructurado del proveedor (cuota, key inválida, HTTP != 200)
- KeyPoolExhausted         todas las keys de YouTube rechazadas tras N barridos
- RetryExhausted           lo lanza retry_with_backoff al agotar intentos

"No match" y "resultado vacío" NO son excepciones:
- LookupOutcome(status="not_found") para OMDb
- lista vacía para búsquedas
"""

from dataclasses import dataclass
from typing import Any, Literal

Provider = Literal["youtube", "omdb"]

LookupStatus = Literal[
    "ok",
    "not_found",
    "network_error",
    "upstream_error",
    "rate_limited",
    "disabled",
    "circuit_open",
]


class UpstreamError(Exception):
    def __init__(self, provider: str, detail: str) -> None:
        super().__init__(f"[{provider}] {detail}")
        self.provider = provider
        self.detail = detail


class NetworkFailure(UpstreamError):
    pass


class UpstreamProviderError(UpstreamError):
    def __init__(self, provider: str, detail: str, *, status: int | None = None, reason: str | None = None) -> None:
        super().__init__(provider, detail)
        self.status = status
        self.reason = reason

    @property
    def is_quota(self) -> bool:
        r = (self.reason or "").lower()
        return r in ("quotaexceeded", "dailylimitexceeded", "ratelimitexceeded", "userratelimitexceeded")


class KeyPoolExhausted(UpstreamError):
    def __init__(self, detail: str, *, keys_tried: int = 0, sweeps: int = 0) -> None:
        super().__init__("youtube", detail)
        self.keys_tried = keys_tried
        self.sweeps = sweeps


class RetryExhausted(Exception):
    def __init__(self, attempts: int, last_error: BaseException | None) -> None:
        super().__init__(f"gave up after {attempts} attempt(s): {last_error!r}")
        self.attempts = attempts
        self.last_error = last_error


@dataclass(frozen=True)
class LookupOutcome:
    """Resultado etiquetado de una llamada a OMDb (para métricas/logs)."""

    status: LookupStatus
    payload: dict[str, Any] | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.status == "ok" and self.payload is not None


def failure_cause(exc: BaseException) -> str:
    """Etiqueta corta para métricas: network | quota | provider | keys_exhausted | unexpected."""
    if isinstance(exc, KeyPoolExhausted):
        return "keys_exhausted"
    if isinstance(exc, NetworkFailure):
        return "network"
    if isinstance(exc, UpstreamProviderError):
        return "quota" if exc.is_quota else "provider"
    if isinstance(exc, RetryExhausted) and exc.last_error is not None:
        return failure_cause(exc.last_error)
    return "unexpected"
