"""Hooks: per-render access to a View's persistent slots.

Each hook claims the next slot of the rendering view, so hooks must be called
unconditionally and in the same order on every render.

    use_cell / use_state   state registration (reading registers the view)
    use_ref                opaque mutable holder, same object every render
    use_memo / use_callback  values recomputed only when a dependency changes
    use_rerender           stable trigger that forces a re-render

Dependencies are compared element-wise by identity.
"""

from __future__ import annotations

from typing import TypeVar, Callable, Sequence
from hookbox._tracking import current_view
from hookbox.cell import StateCell, Ref
from hookbox.errors import HookError
from hookbox.view import View, _UNSET

T = TypeVar("T")


def _current_view() -> View:
    view = current_view.get()
    if view is None:
        raise HookError("hooks can only be called while a View is rendering")
    return view


def _deps_changed(old, new) -> bool:
    if old is _UNSET or old is None or new is None:
        return True
    if len(old) != len(new):
        return True
    return any(a is not b for a, b in zip(old, new))


def use_cell(initial: T | Callable[[], T]) -> StateCell[T]:
    """Return this slot's StateCell, created on first render.

    A callable initial is a factory, called once.
    """
    slot = _current_view()._slot("cell")
    if slot.value is _UNSET:
        slot.value = StateCell(initial() if callable(initial) else initial)
    return slot.value


def use_state(initial: T | Callable[[], T]) -> tuple[T, Callable]:
    """Return ``(value, setter)``. The setter is the same object on every render."""
    slot = _current_view()._slot("state")
    if slot.value is _UNSET:
        cell = StateCell(initial() if callable(initial) else initial)
        slot.value = (cell, cell.set)
    cell, setter = slot.value
    return cell.get(), setter


def use_ref(initial: T) -> Ref[T]:
    slot = _current_view()._slot("ref")
    if slot.value is _UNSET:
        slot.value = Ref(initial)
    return slot.value


def use_memo(producer: Callable[[], T], deps: Sequence | None) -> T:
    """Return producer()'s value, recomputed only when deps change.

    ``deps=[]`` computes once for the life of the view; ``deps=None``
    recomputes on every render.
    """
    slot = _current_view()._slot("memo")
    if _deps_changed(slot.deps, deps):
        slot.value = producer()
        slot.deps = tuple(deps) if deps is not None else None
    return slot.value


def use_callback(fn: Callable, deps: Sequence | None) -> Callable:
    """Return fn as first seen, until deps change."""
    return use_memo(lambda: fn, deps)


def _bump(count: int) -> int:
    return count + 1


def use_rerender() -> Callable[[], None]:
    """Return a stable function that forces this view to re-render.

    Backed by a generation counter, so every call is a real state change.
    """
    _, set_generation = use_state(0)
    return use_callback(lambda: set_generation(_bump), [set_generation])
