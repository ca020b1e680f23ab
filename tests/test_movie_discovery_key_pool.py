import pytest

import movie_discovery.key_pool as kp
from movie_discovery.errors import KeyPoolExhausted, UpstreamProviderError
from movie_discovery.run_metrics import METRICS


def _prober(rejected):
    probed = []

    def probe(key):
        probed.append(key)
        if key in rejected:
            raise UpstreamProviderError("youtube", "quota", status=403, reason="quotaExceeded")

    return probe, probed


def test_requires_at_least_one_key():
    with pytest.raises(ValueError):
        kp.KeyPool(["", "  "], prober=lambda k: None)


def test_keys_are_deduplicated_in_order():
    pool = kp.KeyPool(["k1", "k2", "k1", " k3 "], prober=lambda k: None)
    assert len(pool) == 3
    assert pool.current_key == "k1"


@pytest.mark.parametrize("rejected_count", [0, 1, 3])
def test_k_rejected_keys_return_the_next_one(rejected_count):
    keys = ["k0", "k1", "k2", "k3", "k4"]
    probe, probed = _prober(set(keys[:rejected_count]))
    pool = kp.KeyPool(keys, prober=probe, sleep=lambda _s: None)

    assert pool.acquire_working_key() == keys[rejected_count]
    assert pool.current_index == rejected_count
    assert probed == keys[: rejected_count + 1]


def test_cursor_stays_on_good_key():
    probe, probed = _prober(set())
    pool = kp.KeyPool(["k0", "k1"], prober=probe)

    assert pool.acquire_working_key() == "k0"
    assert pool.acquire_working_key() == "k0"
    assert pool.current_index == 0


def test_rotate_is_circular():
    pool = kp.KeyPool(["k0", "k1", "k2"], prober=lambda k: None)
    assert pool.rotate() == 1
    assert pool.rotate() == 2
    assert pool.rotate() == 0
    assert METRICS.counter("youtube.keys.rotations") == 3


def test_acquire_starts_from_rotated_cursor():
    probe, probed = _prober({"k2"})
    pool = kp.KeyPool(["k0", "k1", "k2"], prober=probe)
    pool.rotate()
    pool.rotate()

    assert pool.acquire_working_key() == "k0"
    assert probed == ["k2", "k0"]


def test_all_rejected_raises_after_bounded_sweeps():
    keys = ["k0", "k1", "k2"]
    probe, probed = _prober(set(keys))
    sleeps = []
    pool = kp.KeyPool(keys, prober=probe, max_sweeps=2, sweep_backoff_seconds=0.3, sleep=sleeps.append)

    with pytest.raises(KeyPoolExhausted) as info:
        pool.acquire_working_key()

    assert len(probed) == 6
    assert sleeps == [0.3]
    assert info.value.keys_tried == 6
    assert info.value.sweeps == 2
    assert METRICS.counter("youtube.keys.exhausted") == 1
