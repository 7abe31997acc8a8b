"""Notification bridges: how a container mutation reaches the host.

Two interchangeable strategies back every container:

COUNTER
    The backing value lives in a Ref and is mutated in place. Each change
    calls a use_rerender() trigger, which bumps a generation counter so the
    view re-renders. The hook hands out a fresh shallow copy on every render.

REPLACE
    The backing value is a frozen snapshot held in a StateCell. Each change
    submits an updater ``prev -> next``; returning ``prev`` itself is a
    bail-out, and the cell notifies nobody.

Actions are built against a bridge, never against the View, so the host's
scheduling stays behind the notify/replace capability the bridge carries.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import TypeVar, Generic, Callable
from hookbox.cell import StateCell, Ref
from hookbox.errors import InvalidInitialValue
from hookbox.hooks import use_cell, use_memo, use_rerender

T = TypeVar("T")

COUNTER = "counter"
REPLACE = "replace"
STRATEGIES = (COUNTER, REPLACE)

_default_strategy = COUNTER


def set_default_strategy(strategy: str) -> None:
    """Choose the strategy used when a container hook gets ``strategy=None``.

    Switching while views are mounted makes their next render fail with
    HookError, since the two strategies use different hooks.
    """
    global _default_strategy
    _default_strategy = resolve_strategy(strategy)


def get_default_strategy() -> str:
    return _default_strategy


def resolve_strategy(strategy: str | None) -> str:
    if strategy is None:
        return _default_strategy
    if strategy not in STRATEGIES:
        raise ValueError(f"unknown strategy {strategy!r}; expected one of {STRATEGIES}")
    return strategy


# ─── Values ──────────────────────────────────────────────────────────────────


def same_value(a: object, b: object) -> bool:
    """Bail-out test for a single entry: identical or equal.

    Only a real ``True`` from ``==`` counts. Values whose comparison returns
    something else (element-wise arrays, symbolic expressions) are treated as
    different, so the write goes through and notifies.
    """
    if a is b:
        return True
    return (a == b) is True


def coerce_map(value: object) -> dict:
    """Private dict copy of a mapping. None means empty."""
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise InvalidInitialValue(f"expected a mapping, got {type(value).__name__}")
    return dict(value)


def coerce_set(value: object) -> set:
    """Private set copy of an iterable of hashables. None means empty."""
    if value is None:
        return set()
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
        raise InvalidInitialValue(f"expected a set of elements, got {type(value).__name__}")
    try:
        return set(value)
    except TypeError as exc:
        raise InvalidInitialValue(f"set elements must be hashable: {exc}") from exc


def freeze_map(data: dict) -> Mapping:
    """Read-only view over a dict nobody else holds."""
    return MappingProxyType(data)


class SetSnapshot(frozenset):
    """Frozen set snapshot.

    Unlike frozenset() itself, every construction is a distinct object, so
    replacing a snapshot with an equal one still counts as a change.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f"SetSnapshot({set(self)!r})" if self else "SetSnapshot()"


def freeze_set(data: Iterable) -> SetSnapshot:
    return SetSnapshot(data)


# ─── Bridges ─────────────────────────────────────────────────────────────────


class CounterBridge(Generic[T]):
    """Backing value in a Ref; changes announced through a re-render trigger."""

    __slots__ = ("store", "notify", "initial")

    def __init__(self, store: Ref[T], notify: Callable[[], None], initial: T) -> None:
        self.store = store
        self.notify = notify
        self.initial = initial

    @property
    def current(self) -> T:
        return self.store.current


class ReplaceBridge(Generic[T]):
    """Backing snapshot in a StateCell; changes submitted as updaters."""

    __slots__ = ("cell", "initial")

    def __init__(self, cell: StateCell[T], initial: T) -> None:
        self.cell = cell
        self.initial = initial

    @property
    def current(self) -> T:
        return self.cell.peek()

    def replace(self, updater: Callable[[T], T]) -> None:
        self.cell.set(updater)


def use_counter_bridge(initial: object, coerce: Callable[[object], T]) -> CounterBridge[T]:
    """Create (first render) or return the counter bridge of this slot."""
    notify = use_rerender()

    def _create() -> CounterBridge[T]:
        seed = coerce(initial)
        return CounterBridge(Ref(seed), notify, coerce(seed))

    return use_memo(_create, [])


def use_replace_bridge(
    initial: object,
    coerce: Callable[[object], object],
    freeze: Callable[[object], T],
) -> tuple[ReplaceBridge[T], T]:
    """Create (first render) or return the replace bridge and the render snapshot."""
    cell = use_cell(lambda: freeze(coerce(initial)))
    bridge = use_memo(lambda: ReplaceBridge(cell, cell.peek()), [])
    return bridge, cell.get()
