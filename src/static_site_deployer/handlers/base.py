"""Base handler class with step sequencing shared by both pipelines."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, TypeVar

from boto3.exceptions import Boto3Error
from botocore.exceptions import BotoCoreError, ClientError

from .. import metrics
from ..constants import STEP_PREFLIGHT
from ..exceptions import DeployError, PreconditionError, ProviderError
from ..logging import log_step_event
from ..services.base import StaticSiteProvider
from ..tracing import trace_span
from ..utils.errors import sanitize_exception

_T = TypeVar("_T")

# Errors raised by boto3/botocore that abort a step
AWS_ERRORS = (ClientError, BotoCoreError, Boto3Error)


class BaseHandler:
    """Base class for the provisioning pipelines.

    Subclasses call :meth:`run_step` for each provisioning step in order. A
    step that raises aborts the pipeline; nothing is rolled back.
    """

    def __init__(self, pipeline: str, provider: StaticSiteProvider):
        """Initialize base handler.

        Args:
            pipeline: Pipeline name used in logs and metrics ("bucket", "cdn")
            provider: Cloud provider the steps run against
        """
        self.pipeline = pipeline
        self.provider = provider
        self.logger = logging.getLogger(__name__)

    def log_info(self, step: str, message: str, event: str = "info", **kwargs: Any) -> None:
        log_step_event(self.logger, self.pipeline, step, event, message, **kwargs)

    def log_warning(self, step: str, message: str, event: str = "warning", **kwargs: Any) -> None:
        log_step_event(self.logger, self.pipeline, step, event, message, level=logging.WARNING, **kwargs)

    def log_error(
        self,
        step: str,
        message: str,
        error: BaseException | None = None,
        event: str = "failed",
        **kwargs: Any,
    ) -> None:
        """Log an error-level structured message.

        Args:
            step: Step that failed
            message: Log message
            error: Optional exception to include sanitized error details
            event: Event type (default: "failed")
            **kwargs: Additional fields to include in the log
        """
        log_data = kwargs.copy()
        if error is not None:
            log_data["error"] = sanitize_exception(error)
            log_data["error_type"] = type(error).__name__
        log_step_event(self.logger, self.pipeline, step, event, message, level=logging.ERROR, **log_data)

    def require(self, condition: bool, step: str, message: str) -> None:
        """Raise a precondition error unless ``condition`` holds."""
        if not condition:
            self.log_error(step, message, event="precondition_failed")
            metrics.step_total.labels(pipeline=self.pipeline, step=step, result="failed").inc()
            raise PreconditionError(message)

    def run_step(self, step: str, message: str, func: Callable[..., _T], *args: Any, **kwargs: Any) -> _T:
        """Run one provisioning step with logging, metrics and tracing.

        AWS client errors are wrapped in :class:`ProviderError`; other
        deployment errors propagate unchanged.

        Args:
            step: Step name
            message: Human readable description logged when the step starts
            func: Callable performing the step

        Returns:
            Whatever ``func`` returns
        """
        self.log_info(step, message, event="started")
        start_time = time.time()
        with trace_span(f"{self.pipeline}.{step}", pipeline=self.pipeline):
            try:
                result = func(*args, **kwargs)
            except AWS_ERRORS as e:
                metrics.step_total.labels(pipeline=self.pipeline, step=step, result="failed").inc()
                self.log_error(step, f"Step {step} failed", error=e)
                raise ProviderError(step, e) from e
            except DeployError as e:
                metrics.step_total.labels(pipeline=self.pipeline, step=step, result="failed").inc()
                self.log_error(step, f"Step {step} failed", error=e)
                raise
        metrics.step_total.labels(pipeline=self.pipeline, step=step, result="success").inc()
        self.log_info(step, f"Step {step} succeeded", event="succeeded", duration=round(time.time() - start_time, 3))
        return result

    def preflight(self) -> None:
        """Check that AWS credentials resolve before any API call is made."""
        self.require(
            self.provider.has_credentials(),
            STEP_PREFLIGHT,
            "Error: AWS credentials could not be found. Configure them with `aws configure` or the AWS_* variables.",
        )

    def execute(self) -> Any:
        """Run the pipeline's steps; implemented by subclasses."""
        raise NotImplementedError

    def run(self) -> Any:
        """Run the whole pipeline, recording its outcome and duration."""
        start_time = time.time()
        with trace_span(f"{self.pipeline}.pipeline", pipeline=self.pipeline):
            try:
                self.preflight()
                result = self.execute()
            except BaseException:
                metrics.pipeline_runs_total.labels(pipeline=self.pipeline, result="failed").inc()
                raise
            finally:
                metrics.pipeline_duration_seconds.labels(pipeline=self.pipeline).observe(time.time() - start_time)
        metrics.pipeline_runs_total.labels(pipeline=self.pipeline, result="success").inc()
        return result
