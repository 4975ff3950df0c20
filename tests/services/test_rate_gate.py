import threading

import pytest

from doccrawl.exceptions import RateLimitExceeded
from doccrawl.services.rate_gate import RateGate


class FakeClock:
    """Monotonic clock whose sleep advances time instantly."""

    def __init__(self, now=100.0):
        self.now = now
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def test_first_request_does_not_wait():
    clock = FakeClock()
    gate = RateGate(clock=clock, sleep=clock.sleep)
    assert gate.acquire("example.com", 2.0) == 0
    assert clock.sleeps == []
    assert gate.last_request_at("example.com") == 100.0


@pytest.mark.parametrize("n, rate", [(5, 2.0), (3, 1.0), (10, 4.0)])
def test_n_requests_take_at_least_n_minus_one_intervals(n, rate):
    clock = FakeClock()
    gate = RateGate(clock=clock, sleep=clock.sleep)
    start = clock()
    for _ in range(n):
        gate.acquire("example.com", rate)
    assert clock() - start >= (n - 1) / rate - 1e-9


def test_elapsed_time_counts_towards_interval():
    clock = FakeClock()
    gate = RateGate(clock=clock, sleep=clock.sleep)
    gate.acquire("example.com", 1.0)
    clock.now += 0.4
    waited = gate.acquire("example.com", 1.0)
    assert waited == pytest.approx(0.6)


def test_hosts_are_paced_independently():
    clock = FakeClock()
    gate = RateGate(clock=clock, sleep=clock.sleep)
    gate.acquire("a.example.com", 1.0)
    assert gate.acquire("b.example.com", 1.0) == 0
    assert gate.acquire("a.example.com", 1.0) == pytest.approx(1.0)


def test_max_wait_raises_instead_of_sleeping():
    clock = FakeClock()
    gate = RateGate(clock=clock, sleep=clock.sleep, max_wait=0.5)
    gate.acquire("example.com", 1.0)

    with pytest.raises(RateLimitExceeded) as exc:
        gate.acquire("example.com", 1.0)
    assert exc.value.host == "example.com"
    assert exc.value.wait_seconds == pytest.approx(1.0)
    assert clock.sleeps == []
    # the refused request did not take the slot
    assert gate.last_request_at("example.com") == 100.0


def test_rejects_non_positive_rate():
    gate = RateGate()
    with pytest.raises(ValueError):
        gate.acquire("example.com", 0)


def test_concurrent_callers_get_distinct_slots():
    sleeps = []
    gate = RateGate(clock=lambda: 100.0, sleep=sleeps.append)
    barrier = threading.Barrier(6)
    waits = []

    def worker():
        barrier.wait()
        waits.append(gate.acquire("example.com", 4.0))

    threads = [threading.Thread(target=worker) for _ in range(6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    slots = sorted(100.0 + w for w in waits)
    assert len(slots) == 6
    assert all(b - a >= 0.25 - 1e-9 for a, b in zip(slots, slots[1:]))
    assert sorted(waits) == pytest.approx([0.25 * k for k in range(6)])
    assert gate.last_request_at("example.com") == pytest.approx(101.25)
    assert len(sleeps) == 5
