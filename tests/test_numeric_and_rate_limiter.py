"""Tests for numeric guards and the minimum-spacing rate limiter."""

import threading

import pytest

from app.core.exceptions import CalculationCancelledError
from app.utils.numeric import clamp, round_half_up, safe_number
from app.utils.rate_limiter import RateLimiter


class TestSafeNumber:

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), None, "abc"])
    def test_unusable_values_become_default(self, value):
        assert safe_number(value) == 0.0
        assert safe_number(value, default=0.5) == 0.5

    def test_numbers_pass_through(self):
        assert safe_number(3) == 3.0
        assert safe_number("0.25") == 0.25

    def test_clamp(self):
        assert clamp(1.7) == 1.0
        assert clamp(-0.2) == 0.0
        assert clamp(float("nan")) == 0.0

    def test_round_half_up(self):
        assert round_half_up(0.125, 2) == 0.13
        assert round_half_up(0.675, 2) == 0.68
        assert round_half_up(1850.5) == 1851
        assert round_half_up(2.5) == 3


class FakeClock:
    def __init__(self):
        self.now = 100.0
        self.sleeps = []

    def clock(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


class TestRateLimiter:

    def test_first_acquire_does_not_wait(self):
        fake = FakeClock()
        limiter = RateLimiter(0.2, sleep=fake.sleep, clock=fake.clock)
        assert limiter.acquire() == 0
        assert fake.sleeps == []

    def test_back_to_back_acquires_are_spaced(self):
        fake = FakeClock()
        limiter = RateLimiter(0.2, sleep=fake.sleep, clock=fake.clock)
        limiter.acquire()
        limiter.acquire()
        limiter.acquire()
        assert fake.sleeps == [pytest.approx(0.2), pytest.approx(0.2)]
        assert limiter.total_wait == pytest.approx(0.4)

    def test_elapsed_time_counts_towards_spacing(self):
        fake = FakeClock()
        limiter = RateLimiter(0.3, sleep=fake.sleep, clock=fake.clock)
        limiter.acquire()
        fake.now += 0.1
        assert limiter.acquire() == pytest.approx(0.2)
        fake.now += 5
        assert limiter.acquire() == 0

    def test_zero_interval_never_sleeps(self):
        fake = FakeClock()
        limiter = RateLimiter(0, sleep=fake.sleep, clock=fake.clock)
        for _ in range(5):
            limiter.acquire()
        assert fake.sleeps == []

    def test_cancelled_before_acquire(self):
        fake = FakeClock()
        event = threading.Event()
        event.set()
        limiter = RateLimiter(0.2, sleep=fake.sleep, clock=fake.clock, cancel_event=event)
        with pytest.raises(CalculationCancelledError):
            limiter.acquire()

    def test_cancelled_while_waiting(self):
        fake = FakeClock()
        event = threading.Event()

        def cancelling_sleep(seconds):
            fake.sleep(seconds)
            event.set()

        limiter = RateLimiter(0.2, sleep=cancelling_sleep, clock=fake.clock, cancel_event=event)
        limiter.acquire()
        with pytest.raises(CalculationCancelledError):
            limiter.acquire()
        assert limiter.cancelled
