from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

import pytest

import movie_discovery.api as core_api
from movie_discovery.run_metrics import METRICS


@dataclass(slots=True)
class FakeResponse:
    status_code: int = 200
    payload: Any = None
    bad_json: bool = False

    def json(self) -> Any:
        if self.bad_json:
            raise ValueError("not json")
        return self.payload


@dataclass(slots=True)
class SessionCall:
    url: str
    params: dict[str, str]
    timeout: float | None


@dataclass
class FakeSession:
    """
    requests.Session mínima con enrutado programable.

    router(url, params) -> FakeResponse | BaseException (se lanza).
    """

    router: Callable[[str, dict[str, str]], Any]
    calls: list[SessionCall] = field(default_factory=list)

    def get(self, url: str, params: dict[str, str] | None = None, timeout: float | None = None) -> Any:
        p = dict(params or {})
        self.calls.append(SessionCall(url=url, params=p, timeout=timeout))
        out = self.router(url, p)
        if isinstance(out, BaseException):
            raise out
        return out


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _isolate_process_state():
    METRICS.reset()
    core_api.set_service(None)
    yield
    core_api.set_service(None)


@pytest.fixture()
def fake_response() -> type[FakeResponse]:
    return FakeResponse


@pytest.fixture()
def make_session() -> Callable[[Callable[[str, dict[str, str]], Any]], FakeSession]:
    return lambda router: FakeSession(router=router)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def no_sleep() -> Callable[[float], None]:
    return lambda _seconds: None
