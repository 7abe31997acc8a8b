"""Views: the host consumer that re-evaluates a component when state changes.

A View wraps a component function. Rendering runs the function with the view
installed as the current view: hooks called inside it resolve to the view's
slots (by call order), and StateCells read inside it register the view as an
observer. When any of those cells changes, the view re-renders eagerly.

State changes made by the component while it is rendering are not applied
re-entrantly; the render finishes, then replays. More than MAX_RERENDERS
consecutive replays raise RenderLoopError.

All state lives in _anchor; instances are thin handles holding an _id.
"""

from __future__ import annotations

import logging
from typing import TypeVar, Generic, Callable
from hookbox._tracking import current_view
from hookbox.errors import HookError, RenderLoopError
from hookbox import _anchor

R = TypeVar("R")

logger = logging.getLogger("hookbox.view")

MAX_RERENDERS = 25

_UNSET = object()


class _Slot:
    """One hook's storage inside a view."""

    __slots__ = ("kind", "value", "deps")

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self.value = _UNSET
        self.deps = _UNSET


class View(Generic[R]):
    """A component instance that re-renders when the state it reads changes."""

    __slots__ = ("_id",)

    def __init__(
        self,
        component: Callable[..., R],
        *args,
        on_render: Callable[[R], None] | None = None,
    ) -> None:
        self._id = _anchor.new_id()
        _anchor.components[self._id] = (component, args, on_render)
        _anchor.dependencies[self._id] = set()
        _anchor.slots[self._id] = []
        _anchor.cursors[self._id] = 0
        _anchor.results[self._id] = None
        _anchor.render_counts[self._id] = 0
        _anchor.rendering[self._id] = False
        _anchor.rerender_requested[self._id] = False
        _anchor.disposed[self._id] = False
        _anchor.names[self._id] = getattr(component, "__name__", repr(component))

    @property
    def _name(self) -> str:
        return _anchor.names[self._id]

    @property
    def _dependencies(self) -> set:
        return _anchor.dependencies[self._id]

    @_dependencies.setter
    def _dependencies(self, value: set) -> None:
        _anchor.dependencies[self._id] = value

    @property
    def result(self) -> R:
        """Return value of the most recent render. None once disposed."""
        return _anchor.results.get(self._id)

    @property
    def render_count(self) -> int:
        return _anchor.render_counts.get(self._id, 0)

    @property
    def disposed(self) -> bool:
        return _anchor.disposed[self._id]

    def _run(self) -> None:
        """Render, then replay while the render scheduled itself."""
        if _anchor.disposed[self._id]:
            return
        if _anchor.rendering[self._id]:
            _anchor.rerender_requested[self._id] = True
            return

        _anchor.rerender_requested[self._id] = False
        replays = 0
        while True:
            self._evaluate()
            if _anchor.disposed[self._id] or not _anchor.rerender_requested[self._id]:
                break
            _anchor.rerender_requested[self._id] = False
            replays += 1
            if replays > MAX_RERENDERS:
                logger.warning(
                    "%s re-rendered %d times in a row; giving up",
                    self._name, replays,
                )
                raise RenderLoopError(
                    f"{self._name} keeps updating state while rendering"
                )

        if _anchor.disposed[self._id]:
            return
        on_render = _anchor.components[self._id][2]
        if on_render is not None:
            on_render(_anchor.results[self._id])

    def _evaluate(self) -> None:
        """Run the component once, re-tracking the cells it reads."""
        for dep in _anchor.dependencies[self._id]:
            dep._remove_observer(self)
        _anchor.dependencies[self._id].clear()

        component, args, _ = _anchor.components[self._id]
        _anchor.cursors[self._id] = 0
        _anchor.rendering[self._id] = True
        token = current_view.set(self)
        try:
            result = component(*args)
        finally:
            current_view.reset(token)
            _anchor.rendering[self._id] = False
            if _anchor.disposed[self._id]:
                # disposed by its own render; release was deferred until now
                self._release()

        if _anchor.disposed[self._id]:
            return
        if _anchor.cursors[self._id] != len(_anchor.slots[self._id]):
            raise HookError(
                f"{component.__name__} called fewer hooks than in its previous render"
            )
        _anchor.results[self._id] = result
        _anchor.render_counts[self._id] += 1
        logger.debug("rendered %s (#%d)", component.__name__, _anchor.render_counts[self._id])

    def _slot(self, kind: str) -> _Slot:
        """Return the hook slot at the current cursor, creating it on first render."""
        slots = _anchor.slots[self._id]
        index = _anchor.cursors[self._id]
        _anchor.cursors[self._id] = index + 1
        if index < len(slots):
            slot = slots[index]
            if slot.kind != kind:
                raise HookError(
                    f"hook #{index} of {self._name} was {slot.kind!r}, "
                    f"now {kind!r}; hooks must be called in the same order every render"
                )
            return slot
        if _anchor.render_counts[self._id] > 0:
            raise HookError(
                f"{self._name} called more hooks than in its previous render"
            )
        slot = _Slot(kind)
        slots.append(slot)
        return slot

    def dispose(self) -> None:
        """Stop this view and release everything it holds.

        Cells created by its hooks are released too; the last result is
        dropped, so .result is None afterwards.
        """
        if _anchor.disposed[self._id]:
            return
        _anchor.disposed[self._id] = True
        if not _anchor.rendering[self._id]:
            self._release()
        logger.debug("disposed %s", self._name)

    def _release(self) -> None:
        for dep in _anchor.dependencies[self._id]:
            dep._remove_observer(self)
        for slot in _anchor.slots[self._id]:
            if slot.kind == "cell":
                slot.value._release()
            elif slot.kind == "state":
                slot.value[0]._release()
        for table in (
            _anchor.components,
            _anchor.dependencies,
            _anchor.slots,
            _anchor.cursors,
            _anchor.results,
            _anchor.render_counts,
            _anchor.rendering,
            _anchor.rerender_requested,
        ):
            table.pop(self._id, None)

    def __repr__(self) -> str:
        state = "disposed" if _anchor.disposed[self._id] else "active"
        return f"View({self._name}, {state})"


def render(
    component: Callable[..., R],
    *args,
    on_render: Callable[[R], None] | None = None,
) -> View[R]:
    """Render component(*args) now, and again whenever its state changes.

    Returns the View (read .result, call .dispose() to stop).

    Usage:
        def counter():
            count, set_count = use_state(0)
            return count, set_count

        view = render(counter)
        count, set_count = view.result   # 0
        set_count(lambda c: c + 1)
        view.result[0]                   # 1
        view.render_count                # 2
    """
    view = View(component, *args, on_render=on_render)
    view._run()  # Initial render to create hook slots
    return view
