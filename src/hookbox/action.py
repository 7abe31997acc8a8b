"""Batches and transactions: several container actions, one re-render.

Every container action notifies on its own, so three calls to
``actions.set`` re-render the owning view three times. Inside a @batch
function or ``with transaction()`` the views are only queued, and each one
re-renders once when the outermost scope exits.

While a batch is open the rendered snapshot is behind the backing store.
``get``/``has`` read the backing store, so they already see every change
made so far; the snapshot a view returned does not until the flush.
"""

from __future__ import annotations

import functools
from typing import TypeVar, Callable, ParamSpec
from contextlib import contextmanager
from hookbox._tracking import begin_batch, end_batch

P = ParamSpec("P")
R = TypeVar("R")


def batch(fn: Callable[P, R]) -> Callable[P, R]:
    """Decorator: queue the re-renders caused by fn's actions until it returns.

    Usage:
        snapshot, tags = view.result

        @batch
        def retag(old, new):
            tags.remove(old)
            tags.add(new)
            # the view renders once, never with only one of the two edits
    """

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        begin_batch()
        try:
            return fn(*args, **kwargs)
        finally:
            end_batch()

    return wrapper


@contextmanager
def transaction():
    """Context manager form of @batch.

    Usage:
        with transaction():
            actions.set("a", 1)
            actions.get("a")        # 1, read from the backing store
            view.result[0]          # still the snapshot from before the block
        # the view has re-rendered once here

    Pending views are flushed even when the block raises.
    """
    begin_batch()
    try:
        yield
    finally:
        end_batch()
