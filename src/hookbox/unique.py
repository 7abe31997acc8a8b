"""Unique collection: a reactive set hook with stable actions."""

from __future__ import annotations

from collections.abc import Iterable, Set
from typing import Any, Callable, NamedTuple
from hookbox._bridge import (
    COUNTER,
    CounterBridge,
    ReplaceBridge,
    coerce_set,
    freeze_set,
    resolve_strategy,
    use_counter_bridge,
    use_replace_bridge,
)
from hookbox.hooks import use_memo


class SetActions(NamedTuple):
    """Accessor returned by use_set. Rebuilt each render; its members are not."""

    has: Callable[[Any], bool]
    add: Callable[[Any], None]
    remove: Callable[[Any], None]
    toggle: Callable[[Any], None]
    reset: Callable[[], None]
    clear: Callable[[], None]


def _counter_actions(bridge: CounterBridge[set]) -> tuple:
    store, notify, initial = bridge.store, bridge.notify, bridge.initial

    def add(item) -> None:
        if item not in store.current:
            store.current.add(item)
            notify()

    def remove(item) -> None:
        if item in store.current:
            store.current.discard(item)
            notify()

    def toggle(item) -> None:
        if item in store.current:
            store.current.discard(item)
        else:
            store.current.add(item)
        notify()

    def reset() -> None:
        store.current = set(initial)
        notify()

    def clear() -> None:
        if store.current:
            store.current.clear()
            notify()

    return add, remove, toggle, reset, clear


def _replace_actions(bridge: ReplaceBridge[Set]) -> tuple:
    replace, initial = bridge.replace, bridge.initial

    def add(item) -> None:
        replace(lambda prev: prev if item in prev else freeze_set(prev | {item}))

    def remove(item) -> None:
        replace(lambda prev: freeze_set(prev - {item}) if item in prev else prev)

    def toggle(item) -> None:
        replace(lambda prev: freeze_set(prev ^ {item}))

    def reset() -> None:
        replace(lambda _prev: freeze_set(initial))

    def clear() -> None:
        replace(lambda prev: freeze_set(()) if prev else prev)

    return add, remove, toggle, reset, clear


def use_set(
    initial: Iterable | None = None,
    *,
    strategy: str | None = None,
) -> tuple[Set, SetActions]:
    """Reactive set hook. Returns ``(snapshot, actions)``.

    ``initial`` may be any iterable of hashables except a string or mapping;
    it is copied on the first render and kept for reset(). add/remove/clear
    skip the re-render when nothing would change; toggle and reset always
    re-render.
    """
    if resolve_strategy(strategy) == COUNTER:
        bridge = use_counter_bridge(initial, coerce_set)
        stable = use_memo(lambda: _counter_actions(bridge), [])
        has = use_memo(lambda: lambda item: item in bridge.store.current, [])
        snapshot = set(bridge.current)
    else:
        bridge, snapshot = use_replace_bridge(initial, coerce_set, freeze_set)
        stable = use_memo(lambda: _replace_actions(bridge), [])
        has = use_memo(lambda: lambda item: item in bridge.cell.peek(), [snapshot])
    return snapshot, SetActions(has, *stable)
