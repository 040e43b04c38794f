"""Generic poll-until-done loop used by the certificate waits."""

from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

from ..exceptions import WaitTimeoutError

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


def poll_until(
    fetch: Callable[[], _T],
    done: Callable[[_T], bool],
    *,
    what: str,
    interval: float,
    backoff: float = 1.0,
    max_interval: float | None = None,
    timeout: float | None = None,
    initial_delay: float | None = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> _T:
    """Call ``fetch`` until ``done`` accepts its result.

    The loop sleeps before every fetch: ``initial_delay`` (defaulting to
    ``interval``) before the first one, then ``interval`` grown by ``backoff``.
    Every delay, the first included, is capped at ``max_interval``. ``done``
    may raise to abort the wait.

    Args:
        fetch: Produces the current observation
        done: Returns True once the observation is final
        what: Description used in log and timeout messages
        interval: Initial delay between fetches in seconds
        backoff: Multiplier applied to the delay after each fetch (1.0 = fixed)
        max_interval: Upper bound on the delay
        timeout: Deadline in seconds, None to wait forever
        initial_delay: Delay before the first fetch
        sleep: Sleep function
        clock: Monotonic clock

    Returns:
        The first observation accepted by ``done``

    Raises:
        WaitTimeoutError: If the deadline passes first
    """
    def capped(value: float) -> float:
        return min(value, max_interval) if max_interval is not None else value

    deadline = clock() + timeout if timeout is not None else None
    delay = capped(interval if initial_delay is None else initial_delay)
    next_interval = capped(interval)
    last: _T | None = None
    attempts = 0

    while True:
        if deadline is not None:
            remaining = deadline - clock()
            if remaining <= 0:
                raise WaitTimeoutError(what, timeout, last)  # type: ignore[arg-type]
            delay = min(delay, remaining)
        if delay > 0:
            sleep(delay)

        last = fetch()
        attempts += 1
        if done(last):
            logger.debug(f"Finished waiting for {what} after {attempts} attempt(s)")
            return last

        delay = next_interval
        next_interval = capped(next_interval * backoff)
