"""Tests for the poll-until-done loop."""

from __future__ import annotations

import pytest

from static_site_deployer.exceptions import WaitTimeoutError
from static_site_deployer.utils.polling import poll_until


def sequence(*values):
    items = list(values)

    def fetch():
        return items.pop(0) if len(items) > 1 else items[0]

    return fetch


class TestPollUntil:
    """Test cases for poll_until."""

    def test_returns_first_accepted_value(self, fake_clock):
        """Test that polling stops at the first accepted observation."""
        result = poll_until(
            sequence("a", "b", "done"),
            lambda v: v == "done",
            what="thing",
            interval=10,
            sleep=fake_clock.sleep,
            clock=fake_clock,
        )
        assert result == "done"
        assert fake_clock.sleeps == [10, 10, 10]

    def test_initial_delay(self, fake_clock):
        """Test that the first sleep uses the initial delay."""
        poll_until(
            sequence("x", "done"),
            lambda v: v == "done",
            what="thing",
            interval=2,
            initial_delay=5,
            sleep=fake_clock.sleep,
            clock=fake_clock,
        )
        assert fake_clock.sleeps == [5, 2]

    def test_zero_initial_delay_skips_sleep(self, fake_clock):
        """Test that a zero initial delay fetches immediately."""
        poll_until(
            sequence("done"),
            lambda v: v == "done",
            what="thing",
            interval=2,
            initial_delay=0,
            sleep=fake_clock.sleep,
            clock=fake_clock,
        )
        assert fake_clock.sleeps == []

    def test_exponential_backoff_is_capped(self, fake_clock):
        """Test that the interval grows by the backoff factor up to the cap."""
        poll_until(
            sequence(1, 2, 3, 4, 5, 6),
            lambda v: v == 6,
            what="thing",
            interval=10,
            backoff=2.0,
            max_interval=30,
            sleep=fake_clock.sleep,
            clock=fake_clock,
        )
        assert fake_clock.sleeps == [10, 10, 20, 30, 30, 30]

    def test_timeout(self, fake_clock):
        """Test that the deadline raises WaitTimeoutError with the last value."""
        with pytest.raises(WaitTimeoutError) as exc_info:
            poll_until(
                sequence("pending"),
                lambda v: False,
                what="thing",
                interval=10,
                timeout=25,
                sleep=fake_clock.sleep,
                clock=fake_clock,
            )
        assert exc_info.value.last_value == "pending"
        assert exc_info.value.timeout == 25
        # last sleep is clipped to the deadline
        assert fake_clock.sleeps == [10, 10, 5]

    def test_done_may_abort(self, fake_clock):
        """Test that an exception from done propagates."""
        def done(value):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            poll_until(sequence(1), done, what="thing", interval=1, sleep=fake_clock.sleep, clock=fake_clock)

    def test_unbounded_without_timeout(self, fake_clock):
        """Test that no timeout keeps polling."""
        values = ["p"] * 500 + ["done"]
        result = poll_until(
            sequence(*values),
            lambda v: v == "done",
            what="thing",
            interval=10,
            sleep=fake_clock.sleep,
            clock=fake_clock,
        )
        assert result == "done"
        assert len(fake_clock.sleeps) == 501

    def test_max_interval_caps_every_delay(self, fake_clock):
        """Test that a cap below the interval bounds the first sleeps too."""
        poll_until(
            sequence(1, 2, 3),
            lambda v: v == 3,
            what="thing",
            interval=10,
            max_interval=5,
            sleep=fake_clock.sleep,
            clock=fake_clock,
        )
        assert fake_clock.sleeps == [5, 5, 5]

    def test_max_interval_caps_initial_delay(self, fake_clock):
        poll_until(
            sequence("done"),
            lambda v: v == "done",
            what="thing",
            interval=2,
            initial_delay=30,
            max_interval=4,
            sleep=fake_clock.sleep,
            clock=fake_clock,
        )
        assert fake_clock.sleeps == [4]
