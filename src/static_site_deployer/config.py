"""Runtime configuration read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from . import constants
from .exceptions import UsageError


@dataclass(frozen=True)
class Settings:
    """Tunables for both pipelines."""

    region: str | None = None
    log_level: str = "INFO"
    cert_poll_interval: float = constants.CERT_POLL_INTERVAL
    cert_poll_backoff: float = constants.CERT_POLL_BACKOFF
    cert_poll_max_interval: float = constants.CERT_POLL_MAX_INTERVAL
    cert_wait_timeout: float | None = constants.CERT_WAIT_TIMEOUT
    validation_settle_delay: float = constants.VALIDATION_SETTLE_DELAY
    validation_poll_interval: float = constants.VALIDATION_POLL_INTERVAL
    validation_timeout: float | None = constants.VALIDATION_TIMEOUT
    dist_output_file: str = constants.DIST_OUTPUT_FILE
    pushgateway: str | None = None


def _get_float(env: Mapping[str, str], name: str, default: float, minimum: float = 0.0) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise UsageError(f"{name} must be a number, got {raw!r}") from None
    if value < minimum:
        raise UsageError(f"{name} must be >= {minimum:g}, got {raw!r}")
    return value


def _get_timeout(env: Mapping[str, str], name: str, default: float) -> float | None:
    """Read a deadline where 0 means wait forever."""
    value = _get_float(env, name, default)
    return value if value > 0 else None


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build settings from environment variables.

    Args:
        env: Mapping to read from (defaults to ``os.environ``)

    Returns:
        Parsed settings

    Raises:
        UsageError: If a numeric variable cannot be parsed
    """
    if env is None:
        env = os.environ

    backoff = _get_float(env, "STATIC_SITE_CERT_POLL_BACKOFF", constants.CERT_POLL_BACKOFF)
    if backoff < 1.0:
        raise UsageError(f"STATIC_SITE_CERT_POLL_BACKOFF must be >= 1, got {backoff:g}")

    return Settings(
        region=env.get("AWS_REGION") or env.get("AWS_DEFAULT_REGION") or None,
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
        cert_poll_interval=_get_float(
            env, "STATIC_SITE_CERT_POLL_INTERVAL", constants.CERT_POLL_INTERVAL, minimum=0.1
        ),
        cert_poll_backoff=backoff,
        cert_poll_max_interval=_get_float(
            env, "STATIC_SITE_CERT_POLL_MAX_INTERVAL", constants.CERT_POLL_MAX_INTERVAL, minimum=0.1
        ),
        cert_wait_timeout=_get_timeout(env, "STATIC_SITE_CERT_WAIT_TIMEOUT", constants.CERT_WAIT_TIMEOUT),
        validation_settle_delay=_get_float(
            env, "STATIC_SITE_VALIDATION_SETTLE_DELAY", constants.VALIDATION_SETTLE_DELAY
        ),
        validation_poll_interval=_get_float(
            env, "STATIC_SITE_VALIDATION_POLL_INTERVAL", constants.VALIDATION_POLL_INTERVAL, minimum=0.1
        ),
        validation_timeout=_get_timeout(env, "STATIC_SITE_VALIDATION_TIMEOUT", constants.VALIDATION_TIMEOUT),
        dist_output_file=env.get("STATIC_SITE_DIST_OUTPUT_FILE") or constants.DIST_OUTPUT_FILE,
        pushgateway=env.get("PROMETHEUS_PUSHGATEWAY") or None,
    )
