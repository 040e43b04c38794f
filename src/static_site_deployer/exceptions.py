"""Exceptions raised by the deployment pipelines."""

from __future__ import annotations

from .constants import EXIT_FAILURE


class DeployError(Exception):
    """Base class for all fatal deployment errors."""

    exit_code = EXIT_FAILURE


class UsageError(DeployError):
    """Wrong arguments or invalid configuration."""


class PreconditionError(DeployError):
    """A required resource or tool is missing before the step can run."""


class ProviderError(DeployError):
    """An AWS API call failed."""

    def __init__(self, operation: str, error: Exception) -> None:
        self.operation = operation
        self.error = error
        super().__init__(f"{operation} failed: {error}")


class CertificateFailedError(DeployError):
    """The certificate reached a terminal non-issued status."""

    def __init__(self, certificate_arn: str, status: str) -> None:
        self.certificate_arn = certificate_arn
        self.status = status
        super().__init__(f"Certificate validation failed with status: {status}")


class WaitTimeoutError(DeployError):
    """A poll did not reach its target state before the deadline."""

    def __init__(self, what: str, timeout: float, last_value: object = None) -> None:
        self.what = what
        self.timeout = timeout
        self.last_value = last_value
        super().__init__(f"Timed out after {timeout:g}s waiting for {what} (last value: {last_value})")
