import pytest

import movie_discovery.resilience as res
from movie_discovery.errors import NetworkFailure, RetryExhausted


def test_circuit_breaker_transitions():
    now = [0.0]
    breaker = res.CircuitBreaker(failure_threshold=2, open_seconds=1.0, clock=lambda: now[0])

    assert breaker.allow() == (True, "closed")

    breaker.record_failure("err-1")
    assert breaker.allow() == (True, "closed")

    breaker.record_failure("err-2")
    assert breaker.allow() == (False, "open")

    now[0] = 2.0
    assert breaker.allow() == (True, "half_open:probe")
    assert breaker.allow() == (False, "half_open:probe_in_flight")

    breaker.record_success()
    assert breaker.allow() == (True, "closed")
    assert breaker.snapshot().consecutive_failures == 0


def test_half_open_failure_reopens():
    now = [0.0]
    breaker = res.CircuitBreaker(failure_threshold=1, open_seconds=1.0, clock=lambda: now[0])

    breaker.record_failure("boom")
    now[0] = 5.0
    assert breaker.allow()[0] is True

    breaker.record_failure("still down")
    state = breaker.snapshot()
    assert state.state == "open"
    assert state.opened_at == 5.0
    assert state.last_error == "still down"
    assert breaker.allow() == (False, "open")


def test_retry_with_backoff_succeeds_after_failures():
    calls = []
    failures = []
    sleeps = []

    def action():
        calls.append(1)
        if len(calls) < 3:
            raise NetworkFailure("youtube", "timeout")
        return "ok"

    out = res.retry_with_backoff(
        action,
        max_attempts=4,
        delay_seconds=0.3,
        on_failure=lambda attempt, exc: failures.append(attempt),
        sleep=sleeps.append,
    )

    assert out == "ok"
    assert len(calls) == 3
    assert failures == [1, 2]
    assert sleeps == [0.3, 0.3]


def test_retry_with_backoff_exhausts_and_reports_last_error():
    failures = []
    sleeps = []

    def action():
        raise NetworkFailure("youtube", f"attempt {len(failures) + 1}")

    with pytest.raises(RetryExhausted) as info:
        res.retry_with_backoff(
            action,
            max_attempts=3,
            delay_seconds=0.1,
            backoff_factor=2.0,
            on_failure=lambda attempt, exc: failures.append(attempt),
            sleep=sleeps.append,
        )

    assert info.value.attempts == 3
    assert isinstance(info.value.last_error, NetworkFailure)
    assert failures == [1, 2, 3]
    assert sleeps == pytest.approx([0.1, 0.2])


def test_retry_with_backoff_propagates_non_retryable():
    calls = []

    def action():
        calls.append(1)
        raise KeyError("bug")

    with pytest.raises(KeyError):
        res.retry_with_backoff(
            action,
            max_attempts=5,
            should_retry=lambda exc: isinstance(exc, NetworkFailure),
            sleep=lambda _s: None,
        )
    assert len(calls) == 1
