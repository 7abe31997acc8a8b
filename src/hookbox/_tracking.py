"""Render tracking and scheduling: how state changes reach views.

Uses a contextvar to know which View is currently rendering, so hooks can
find their slots and StateCell.get() can register the view as an observer.

Batching: state changes inside a @batch function or `with transaction()`
accumulate scheduled views and re-render each of them once at the end.
"""

from __future__ import annotations

import contextvars
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Callable, TypeVar

if TYPE_CHECKING:
    from hookbox.view import View

T = TypeVar("T")

logger = logging.getLogger("hookbox.tracking")

# The View whose component is currently being evaluated.
current_view: contextvars.ContextVar[View | None] = contextvars.ContextVar(
    "current_view", default=None
)

# Batch depth counter. When > 0, re-renders are deferred.
_batch_depth: int = 0

# Views invalidated during a batch, awaiting flush. Dict keeps schedule order.
_pending: dict[View, None] = {}


def begin_batch() -> None:
    """Enter a batching scope. Nested batches are supported."""
    global _batch_depth
    _batch_depth += 1


def end_batch() -> None:
    """Exit a batching scope. When the outermost scope exits, flush pending views."""
    global _batch_depth
    _batch_depth -= 1
    if _batch_depth == 0:
        _flush_pending()


def schedule(view: View) -> None:
    """Schedule a view for re-evaluation.

    If inside a batch, defers. Otherwise, runs immediately.
    """
    if _batch_depth > 0:
        _pending[view] = None
    else:
        view._run()


def run_each(fn: Callable[[T], None], items: Iterable[T]) -> None:
    """Call fn on every item, even when some calls raise.

    The first error is re-raised after the last item; later ones are logged.
    """
    first: Exception | None = None
    for item in items:
        try:
            fn(item)
        except Exception as exc:
            if first is None:
                first = exc
            else:
                logger.error("another render failed while notifying", exc_info=exc)
    if first is not None:
        raise first


def _flush_pending() -> None:
    """Re-render all pending views. Handles views scheduled during flush.

    A view whose render raises does not keep the rest of the batch stale.
    """
    first: Exception | None = None
    while _pending:
        # Snapshot and clear, renders may schedule new ones during run.
        batch = list(_pending)
        _pending.clear()
        try:
            run_each(_render_view, batch)
        except Exception as exc:
            if first is None:
                first = exc
            else:
                logger.error("another render failed during flush", exc_info=exc)
    if first is not None:
        raise first


def _render_view(view: View) -> None:
    view._run()


def get_pending_count() -> int:
    """Number of views waiting to re-render. Useful for testing."""
    return len(_pending)
