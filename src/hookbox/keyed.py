"""Keyed container: a reactive mapping hook with stable actions.

    def inventory():
        stock, actions = use_map({"apples": 3})
        return stock, actions

    view = render(inventory)
    stock, actions = view.result
    actions.set("pears", 5)       # view re-renders with {"apples": 3, "pears": 5}
    actions.get("pears")          # 5, even before the re-render is observed
    actions.reset()               # back to {"apples": 3}

``actions.set``, ``set_all``, ``remove`` and ``reset`` are the same objects on
every render, so they can be handed to memoized children without
invalidating them.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, NamedTuple
from hookbox._bridge import (
    COUNTER,
    CounterBridge,
    ReplaceBridge,
    coerce_map,
    freeze_map,
    resolve_strategy,
    same_value,
    use_counter_bridge,
    use_replace_bridge,
)
from hookbox.errors import KeyNotFound
from hookbox.hooks import use_memo

_MISSING = object()


class MapActions(NamedTuple):
    """Accessor returned by use_map. Rebuilt each render; its members are not."""

    get: Callable[..., Any]
    set: Callable[[Any, Any], None]
    set_all: Callable[[Mapping], None]
    remove: Callable[[Any], None]
    reset: Callable[[], None]


def _make_get(read: Callable[[], Mapping]) -> Callable[..., Any]:
    def get(key, default=_MISSING):
        """Value at key in the latest snapshot; KeyNotFound unless default given."""
        try:
            return read()[key]
        except KeyError:
            if default is not _MISSING:
                return default
            raise KeyNotFound(key) from None

    return get


def _counter_actions(bridge: CounterBridge[dict]) -> tuple:
    store, notify, initial = bridge.store, bridge.notify, bridge.initial

    def set_entry(key, value) -> None:
        store.current[key] = value
        notify()

    def set_all(new_map: Mapping) -> None:
        store.current = coerce_map(new_map)
        notify()

    def remove(key) -> None:
        store.current.pop(key, None)
        notify()

    def reset() -> None:
        store.current = dict(initial)
        notify()

    return set_entry, set_all, remove, reset


def _replace_actions(bridge: ReplaceBridge[Mapping]) -> tuple:
    replace, initial = bridge.replace, bridge.initial

    def set_entry(key, value) -> None:
        def apply(prev: Mapping) -> Mapping:
            if key in prev and same_value(prev[key], value):
                return prev
            return freeze_map({**prev, key: value})

        replace(apply)

    def set_all(new_map: Mapping) -> None:
        snapshot = freeze_map(coerce_map(new_map))
        replace(lambda _prev: snapshot)

    def remove(key) -> None:
        def apply(prev: Mapping) -> Mapping:
            if key not in prev:
                return prev
            data = dict(prev)
            del data[key]
            return freeze_map(data)

        replace(apply)

    def reset() -> None:
        replace(lambda _prev: freeze_map(dict(initial)))

    return set_entry, set_all, remove, reset


def use_map(
    initial: Mapping | None = None,
    *,
    strategy: str | None = None,
) -> tuple[Mapping, MapActions]:
    """Reactive mapping hook. Returns ``(snapshot, actions)``.

    ``initial`` is copied on the first render and kept for reset(); later
    renders ignore it. A non-mapping raises InvalidInitialValue.

    With the counter strategy (default) the snapshot is a fresh dict each
    render and set/remove always re-render. With the replace strategy the
    snapshot is a read-only mapping, and set/remove skip the re-render when
    nothing would change.
    """
    if resolve_strategy(strategy) == COUNTER:
        bridge = use_counter_bridge(initial, coerce_map)
        stable = use_memo(lambda: _counter_actions(bridge), [])
        get = use_memo(lambda: _make_get(lambda: bridge.store.current), [])
        snapshot = dict(bridge.current)
    else:
        bridge, snapshot = use_replace_bridge(initial, coerce_map, freeze_map)
        stable = use_memo(lambda: _replace_actions(bridge), [])
        get = use_memo(lambda: _make_get(bridge.cell.peek), [snapshot])
    return snapshot, MapActions(get, *stable)
