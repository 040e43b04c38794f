"""Rate limiting and throttling retry for AWS API calls."""

from __future__ import annotations

import logging
import os
import time
from functools import wraps
from typing import Any, Callable, TypeVar

from botocore.exceptions import ClientError

from .. import metrics

logger = logging.getLogger(__name__)

_F = TypeVar("_F", bound=Callable[..., Any])

# Rate limit configuration
_AWS_RATE_LIMIT_PER_SECOND = float(os.getenv("AWS_RATE_LIMIT_PER_SECOND", "5.0"))

# Track last call time
_aws_last_call_time: float = 0.0

THROTTLING_ERROR_CODES = {
    "Throttling",
    "ThrottlingException",
    "ThrottledException",
    "TooManyRequestsException",
    "RequestLimitExceeded",
    "PriorRequestNotComplete",
    "SlowDown",
}


def rate_limit_aws(func: _F) -> _F:
    """Decorator to rate limit AWS API calls.

    Enforces a minimum interval between consecutive calls so a run never
    bursts past the account's control-plane limits.
    """
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        global _aws_last_call_time
        current_time = time.time()
        min_interval = 1.0 / _AWS_RATE_LIMIT_PER_SECOND

        time_since_last_call = current_time - _aws_last_call_time
        if time_since_last_call < min_interval:
            time.sleep(min_interval - time_since_last_call)

        _aws_last_call_time = time.time()
        return func(*args, **kwargs)

    return wrapper  # type: ignore


def is_throttling_error(e: Exception) -> bool:
    """Check whether an exception is an AWS throttling response."""
    if not isinstance(e, ClientError):
        return False
    error = e.response.get("Error", {})
    status = e.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return error.get("Code") in THROTTLING_ERROR_CODES or status == 429


def retry_on_throttling(api_type: str, max_retries: int = 3) -> Callable[[_F], _F]:
    """Decorator retrying throttled calls with exponential backoff.

    Waits 1s, 2s, 4s between attempts. Any other error, and the last
    throttling error once retries are exhausted, propagates unchanged.

    Args:
        api_type: Service name used for the rate limit metric
        max_retries: Maximum number of retries after the first attempt
    """
    def decorator(func: _F) -> _F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            retry_count = 0
            while True:
                try:
                    return func(*args, **kwargs)
                except ClientError as e:
                    if not is_throttling_error(e):
                        raise
                    metrics.rate_limit_hits_total.labels(api_type=api_type).inc()
                    if retry_count >= max_retries:
                        raise
                    sleep_time = 2 ** retry_count
                    logger.warning(
                        f"{api_type} call {getattr(func, '__name__', 'request')} throttled, retrying in {sleep_time}s "
                        f"({retry_count + 1}/{max_retries})"
                    )
                    time.sleep(sleep_time)
                    retry_count += 1

        return wrapper  # type: ignore

    return decorator
