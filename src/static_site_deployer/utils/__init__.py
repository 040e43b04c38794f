"""Utility functions for the static site deployer."""

from .context import get_context_dict, get_run_id, new_run_id, with_run_id
from .errors import sanitize_dict, sanitize_error_message, sanitize_exception
from .polling import poll_until
from .rate_limit import is_throttling_error, rate_limit_aws, retry_on_throttling

__all__ = [
    "get_context_dict",
    "get_run_id",
    "new_run_id",
    "with_run_id",
    "sanitize_dict",
    "sanitize_error_message",
    "sanitize_exception",
    "poll_until",
    "is_throttling_error",
    "rate_limit_aws",
    "retry_on_throttling",
]
