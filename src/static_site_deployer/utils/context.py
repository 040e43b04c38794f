"""Per-run correlation ids attached to every structured log line."""

from __future__ import annotations

import contextvars
import uuid
from contextlib import contextmanager
from typing import Any, Iterator

from opentelemetry import trace

run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar("run_id", default=None)


def new_run_id() -> str:
    """Generate a short id for one pipeline run."""
    return uuid.uuid4().hex[:12]


def get_run_id() -> str | None:
    """Get the run id of the current context, if any."""
    return run_id.get()


@contextmanager
def with_run_id(value: str | None = None) -> Iterator[str]:
    """Bind a run id for the duration of a block.

    Args:
        value: Run id to use; a fresh one is generated when omitted

    Yields:
        The bound run id
    """
    value = value or new_run_id()
    token = run_id.set(value)
    try:
        yield value
    finally:
        run_id.reset(token)


def get_context_dict(additional: dict[str, Any] | None = None) -> dict[str, Any]:
    """Get the run id and active trace id merged with ``additional``."""
    ctx: dict[str, Any] = {}

    current = get_run_id()
    if current:
        ctx["run_id"] = current

    span_context = trace.get_current_span().get_span_context()
    if span_context.is_valid:
        ctx["trace_id"] = format(span_context.trace_id, "032x")

    if additional:
        ctx.update(additional)

    return ctx
