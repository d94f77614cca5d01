"""Tests for the sliding-window rate limiter."""

from unittest.mock import MagicMock

from traderfm.services.rate_limit import (
    MemoryRateLimitBackend,
    RateLimiter,
    RedisRateLimitBackend,
)


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _limiter(clock: FakeClock, **overrides: int) -> RateLimiter:
    options = {
        "global_max": 100,
        "global_window_seconds": 900,
        "question_max": 3,
        "question_window_seconds": 60,
    }
    options.update(overrides)
    return RateLimiter(MemoryRateLimitBackend(clock=clock), **options)


def test_allows_up_to_limit_then_blocks() -> None:
    clock = FakeClock()
    backend = MemoryRateLimitBackend(clock=clock)
    decisions = [backend.hit("k", 3, 60) for _ in range(4)]
    assert [d.allowed for d in decisions] == [True, True, True, False]
    assert [d.remaining for d in decisions[:3]] == [2, 1, 0]
    assert decisions[3].retry_after == 60


def test_window_slides() -> None:
    clock = FakeClock()
    backend = MemoryRateLimitBackend(clock=clock)
    backend.hit("k", 2, 60)
    clock.advance(30)
    backend.hit("k", 2, 60)
    assert not backend.hit("k", 2, 60).allowed

    clock.advance(31)
    decision = backend.hit("k", 2, 60)
    assert decision.allowed
    blocked = backend.hit("k", 2, 60)
    assert not blocked.allowed
    assert blocked.retry_after == 29


def test_rejected_hits_do_not_extend_the_window() -> None:
    clock = FakeClock()
    backend = MemoryRateLimitBackend(clock=clock)
    backend.hit("k", 1, 10)
    for _ in range(5):
        clock.advance(1)
        assert not backend.hit("k", 1, 10).allowed
    clock.advance(5)
    assert backend.hit("k", 1, 10).allowed


def test_question_limit_is_per_ip_and_handle() -> None:
    limiter = _limiter(FakeClock())
    for _ in range(3):
        assert limiter.check_question("1.1.1.1", "alice").allowed
    assert not limiter.check_question("1.1.1.1", "alice").allowed
    assert not limiter.check_question("1.1.1.1", "ALICE").allowed
    assert limiter.check_question("1.1.1.1", "bob").allowed
    assert limiter.check_question("2.2.2.2", "alice").allowed


def test_global_limit_is_per_ip() -> None:
    limiter = _limiter(FakeClock(), global_max=2)
    assert limiter.check_global("1.1.1.1").allowed
    assert limiter.check_global("1.1.1.1").allowed
    assert not limiter.check_global("1.1.1.1").allowed
    assert limiter.check_global("2.2.2.2").allowed


def test_reset_clears_counters() -> None:
    limiter = _limiter(FakeClock(), global_max=1)
    limiter.check_global("1.1.1.1")
    assert not limiter.check_global("1.1.1.1").allowed
    limiter.reset()
    assert limiter.check_global("1.1.1.1").allowed


def _redis_with_count(count: int, oldest_score: float = 970.0) -> MagicMock:
    client = MagicMock()
    pipe = client.pipeline.return_value
    pipe.execute.return_value = [0, 1, count, True]
    client.zrange.return_value = [(b"member", oldest_score)]
    return client


def test_redis_backend_allows_under_limit() -> None:
    client = _redis_with_count(2)
    backend = RedisRateLimitBackend(client, clock=FakeClock())
    decision = backend.hit("global:1.1.1.1", 3, 60)
    assert decision.allowed
    assert decision.remaining == 1
    client.zrem.assert_not_called()
    pipe = client.pipeline.return_value
    pipe.zremrangebyscore.assert_called_once_with("ratelimit:global:1.1.1.1", 0, 940.0)
    pipe.expire.assert_called_once_with("ratelimit:global:1.1.1.1", 60)


def test_redis_backend_blocks_and_discards_rejected_hit() -> None:
    client = _redis_with_count(4)
    backend = RedisRateLimitBackend(client, clock=FakeClock())
    decision = backend.hit("global:1.1.1.1", 3, 60)
    assert not decision.allowed
    assert decision.retry_after == 30
    client.zrem.assert_called_once()


def test_expired_keys_are_dropped() -> None:
    clock = FakeClock()
    backend = MemoryRateLimitBackend(clock=clock)
    limiter = RateLimiter(
        backend,
        global_max=100,
        global_window_seconds=900,
        question_max=3,
        question_window_seconds=60,
    )
    for i in range(5000):
        limiter.check_question("1.2.3.4", f"nohandle{i}")
    assert backend.tracked_keys == 5000

    clock.advance(10000)
    limiter.check_question("1.2.3.4", "alice")
    assert backend.tracked_keys == 1


def test_sweep_keeps_live_keys() -> None:
    clock = FakeClock()
    backend = MemoryRateLimitBackend(clock=clock, sweep_interval_seconds=10)
    backend.hit("short", 5, 5)
    backend.hit("long", 5, 900)
    clock.advance(20)
    backend.hit("other", 5, 5)
    assert backend.tracked_keys == 2
    assert backend.hit("long", 1, 900).allowed is False


def test_key_emptied_by_window_is_forgotten_on_next_hit() -> None:
    clock = FakeClock()
    backend = MemoryRateLimitBackend(clock=clock, sweep_interval_seconds=10**9)
    backend.hit("k", 1, 10)
    clock.advance(11)
    backend.hit("other", 0, 10)
    assert backend.hit("k", 0, 10).allowed is False
    assert backend.tracked_keys == 0
