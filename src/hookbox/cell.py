"""State cells: the host's state registration primitive.

A StateCell holds one value. When it is read with get() while a View is
rendering, that view is registered as an observer. When set() stores a new
value, every observer is scheduled for re-evaluation.

set() accepts either a value or an updater ``prev -> next``. Updaters are
resolved against the value stored at the moment of the write, so two updates
issued before a re-render compose instead of clobbering each other. If the
resolved value *is* the stored value, nothing is stored and nobody is
notified (bail-out).

Ref is the opaque mutable holder: writing ``ref.current`` notifies nobody.

All cell state lives in _anchor; instances are thin handles holding an _id.

Thread safety: call set_scheduler() once from the owner thread. After that,
any .set() from a background thread is auto-marshaled. Owner-thread .set()
remains synchronous.
"""

from __future__ import annotations

import logging
import threading
from typing import TypeVar, Generic, Callable, Union
from hookbox._tracking import current_view, run_each, schedule
from hookbox.errors import HookError
from hookbox import _anchor

T = TypeVar("T")

Update = Union[T, Callable[[T], T]]

logger = logging.getLogger("hookbox.cell")

# ─── Auto-marshal ────────────────────────────────────────────────────────────
_scheduler = None
_scheduler_thread = None


def set_scheduler(scheduler) -> None:
    """Set the global thread scheduler for cross-thread state writes.

    Call once from the owner/UI thread:
        hookbox.set_scheduler(app.call_from_thread)

    After this, any StateCell.set() from a background thread is automatically
    marshaled. Owner-thread writes remain synchronous.
    """
    global _scheduler, _scheduler_thread
    _scheduler = scheduler
    _scheduler_thread = threading.current_thread()


class StateCell(Generic[T]):
    """A single state value that re-renders its readers when replaced."""

    __slots__ = ("_id",)

    def __init__(self, value: T) -> None:
        self._id = _anchor.new_id()
        _anchor.values[self._id] = value
        _anchor.observers[self._id] = set()

    @property
    def released(self) -> bool:
        return self._id not in _anchor.values

    def get(self) -> T:
        """Read the value. If inside a render, registers the rendering view."""
        value = self.peek()
        view = current_view.get()
        if view is not None:
            _anchor.observers[self._id].add(view)
            view._dependencies.add(self)
        return value

    def peek(self) -> T:
        """Read the latest stored value without registering anything."""
        try:
            return _anchor.values[self._id]
        except KeyError:
            raise HookError("state cell was released when its View was disposed") from None

    def set(self, value: Update[T]) -> None:
        """Store a value (or apply an updater). Auto-marshals from background threads.

        Callables are always treated as updaters; to store a function,
        wrap it: ``cell.set(lambda _prev: fn)``. Writes to a released cell
        are dropped.
        """
        if _scheduler is not None and threading.current_thread() != _scheduler_thread:
            _scheduler(lambda v=value: self._set_direct(v))
        else:
            self._set_direct(value)

    def _set_direct(self, value: Update[T]) -> None:
        """Resolve, store and notify. Always runs on the scheduler thread."""
        if self.released:
            logger.debug("cell %d released, dropping write", self._id)
            return
        old = _anchor.values[self._id]
        new = value(old) if callable(value) else value
        if new is old:
            logger.debug("cell %d unchanged, skipping notify", self._id)
            return
        _anchor.values[self._id] = new
        self._notify()

    def _notify(self) -> None:
        """Schedule all observers for re-evaluation.

        A failing render does not stop the others; the first error is
        re-raised once every observer has been scheduled.
        """
        run_each(schedule, list(_anchor.observers[self._id]))

    def _remove_observer(self, observer) -> None:
        """Remove an observer. Called during dependency cleanup."""
        observers = _anchor.observers.get(self._id)
        if observers is not None:
            observers.discard(observer)

    def _release(self) -> None:
        """Drop the value and observers. Called when the owning View is disposed."""
        _anchor.values.pop(self._id, None)
        _anchor.observers.pop(self._id, None)

    def __repr__(self) -> str:
        if self.released:
            return "StateCell(<released>)"
        return f"StateCell({_anchor.values[self._id]!r})"


class Ref(Generic[T]):
    """Mutable holder whose writes are invisible to the host."""

    __slots__ = ("current",)

    def __init__(self, current: T) -> None:
        self.current = current

    def __repr__(self) -> str:
        return f"Ref({self.current!r})"
