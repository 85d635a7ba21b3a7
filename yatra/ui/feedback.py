"""Shared message formatting for page renderers."""

from __future__ import annotations

from yatra.core.errors import StateError, YatraError
from yatra.workflows.booking import BookingState, BookingWorkflow
from yatra.workflows.router import Router

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."


def format_error(exc: BaseException) -> str:
    """Return the single inline message shown for ``exc``."""

    if isinstance(exc, YatraError):
        return exc.message
    return GENERIC_ERROR_MESSAGE


def settle_workflow(workflow: BookingWorkflow, router: Router) -> None:
    """Start a fresh attempt once a finished one has redirected away."""

    if router.pending is not None:
        return
    finished = workflow.state is BookingState.SUCCEEDED or (
        workflow.state is BookingState.FAILED and workflow.failure_reason == StateError.UNAUTHENTICATED
    )
    if finished:
        workflow.reset()


def stars(rating: float) -> str:
    return f"★ {rating:.1f}"


__all__ = ["GENERIC_ERROR_MESSAGE", "format_error", "settle_workflow", "stars"]
