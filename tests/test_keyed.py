"""Tests for use_map, run against both strategies."""

import pytest

from hookbox import (
    COUNTER,
    REPLACE,
    InvalidInitialValue,
    KeyNotFound,
    MapActions,
    StateCell,
    render,
    transaction,
    use_map,
)


@pytest.fixture(params=[COUNTER, REPLACE])
def strategy(request):
    return request.param


def _mount(strategy, initial=None):
    def inventory():
        return use_map(initial, strategy=strategy)

    return render(inventory)


class TestBasics:
    def test_empty_by_default(self, strategy):
        view = _mount(strategy)
        snapshot, actions = view.result
        assert snapshot == {}
        assert isinstance(actions, MapActions)

    def test_set_and_get(self, strategy):
        view = _mount(strategy)
        view.result[1].set("a", 1)
        snapshot, actions = view.result
        assert snapshot == {"a": 1}
        assert actions.get("a") == 1
        assert view.render_count == 2

    def test_initial_is_copied(self, strategy):
        src = {"a": 1}
        view = _mount(strategy, src)
        src["b"] = 2
        assert view.result[0] == {"a": 1}

    def test_get_missing_raises(self, strategy):
        view = _mount(strategy, {"a": 1})
        with pytest.raises(KeyNotFound) as info:
            view.result[1].get("b")
        assert info.value.key == "b"
        assert isinstance(info.value, KeyError)

    def test_get_missing_with_default(self, strategy):
        view = _mount(strategy)
        assert view.result[1].get("b", None) is None
        assert view.result[1].get("b", 7) == 7

    def test_get_reads_latest_before_rerender(self, strategy):
        view = _mount(strategy)
        snapshot, actions = view.result
        with transaction():
            actions.set("a", 1)
            assert actions.get("a") == 1
            assert view.result[0] == {}
        assert view.result[0] == {"a": 1}

    def test_keys_stay_unique(self, strategy):
        view = _mount(strategy)
        actions = view.result[1]
        for value in (1, 2, 3):
            actions.set("k", value)
        assert view.result[0] == {"k": 3}
        assert len(view.result[0]) == 1

    def test_invalid_initial_fails_fast(self, strategy):
        with pytest.raises(InvalidInitialValue):
            _mount(strategy, [("a", 1)])

    def test_set_all_rejects_non_mapping(self, strategy):
        view = _mount(strategy)
        with pytest.raises(InvalidInitialValue):
            view.result[1].set_all(["x"])


class TestRemove:
    def test_drops_only_that_key(self, strategy):
        kept = object()
        view = _mount(strategy, {"x": kept, "y": 1})
        view.result[1].remove("y")
        snapshot = view.result[0]
        assert snapshot == {"x": kept}
        assert snapshot["x"] is kept

    def test_remove_then_add_is_inverse(self, strategy):
        view = _mount(strategy, {"a": 1})
        before = dict(view.result[0])
        view.result[1].set("b", 2)
        view.result[1].remove("b")
        assert view.result[0] == before


class TestSetAllAndReset:
    def test_set_all_replaces(self, strategy):
        view = _mount(strategy, {"a": 1})
        view.result[1].set_all({"x": 9})
        assert view.result[0] == {"x": 9}

    def test_set_all_does_not_alias(self, strategy):
        view = _mount(strategy)
        src = {"x": 9}
        view.result[1].set_all(src)
        src["y"] = 1
        assert view.result[0] == {"x": 9}
        assert view.result[1].get("y", None) is None

    def test_set_all_always_notifies(self, strategy):
        view = _mount(strategy, {"x": 9})
        view.result[1].set_all({"x": 9})
        assert view.render_count == 2

    def test_reset_restores_construction_value(self, strategy):
        view = _mount(strategy, {"a": 1})
        actions = view.result[1]
        actions.set("b", 2)
        actions.remove("a")
        actions.reset()
        assert view.result[0] == {"a": 1}

    def test_reset_is_idempotent_and_notifies(self, strategy):
        view = _mount(strategy, {"a": 1})
        actions = view.result[1]
        actions.set("b", 2)
        actions.reset()
        first = view.result[0]
        count = view.render_count
        actions.reset()
        assert view.result[0] == first == {"a": 1}
        assert view.render_count == count + 1

    def test_later_initial_is_ignored(self, strategy):
        seed = StateCell({"a": 1})

        def inventory():
            return use_map(seed.get(), strategy=strategy)

        view = render(inventory)
        seed.set({"z": 0})
        assert view.result[0] == {"a": 1}
        view.result[1].set("b", 2)
        view.result[1].reset()
        assert view.result[0] == {"a": 1}


class TestSnapshots:
    def test_handed_out_snapshot_never_changes(self, strategy):
        view = _mount(strategy, {"a": 1})
        old = view.result[0]
        actions = view.result[1]
        actions.set("a", 2)
        actions.set("b", 3)
        actions.remove("a")
        assert old == {"a": 1}

    def test_counter_snapshot_is_a_copy(self):
        view = _mount(COUNTER)
        snapshot, actions = view.result
        snapshot["z"] = 1
        assert actions.get("z", None) is None

    def test_replace_snapshot_is_read_only(self):
        view = _mount(REPLACE)
        with pytest.raises(TypeError):
            view.result[0]["z"] = 1


class TestActionIdentity:
    def test_mutators_are_stable(self, strategy):
        view = _mount(strategy)
        first = view.result[1]
        first.set("a", 1)
        first.set_all({"b": 2})
        first.remove("b")
        first.reset()
        last = view.result[1]
        assert view.render_count == 5
        assert last.set is first.set
        assert last.set_all is first.set_all
        assert last.remove is first.remove
        assert last.reset is first.reset

    def test_counter_get_is_stable(self):
        view = _mount(COUNTER)
        first = view.result[1].get
        view.result[1].set("a", 1)
        assert view.result[1].get is first

    def test_replace_get_follows_snapshot(self):
        view = _mount(REPLACE)
        first = view.result[1].get
        view.result[1].set("a", 1)
        assert view.result[1].get is not first
        # older handles still read the latest value
        assert first("a") == 1


class TestBailOut:
    def test_replace_equal_set_is_noop(self):
        view = _mount(REPLACE, {"a": 1})
        snapshot = view.result[0]
        view.result[1].set("a", 1)
        assert view.render_count == 1
        assert view.result[0] is snapshot

    def test_replace_absent_remove_is_noop(self):
        view = _mount(REPLACE, {"a": 1})
        view.result[1].remove("b")
        assert view.render_count == 1

    def test_counter_equal_set_notifies(self):
        view = _mount(COUNTER, {"a": 1})
        view.result[1].set("a", 1)
        assert view.render_count == 2
        assert view.result[0] == {"a": 1}

    def test_counter_absent_remove_notifies(self):
        view = _mount(COUNTER, {"a": 1})
        view.result[1].remove("b")
        assert view.render_count == 2
        assert view.result[0] == {"a": 1}

    def test_replace_compares_against_current_value(self):
        """A pending removal is seen by the next set, not the rendered snapshot."""
        view = _mount(REPLACE, {"a": 1})
        actions = view.result[1]
        with transaction():
            actions.remove("a")
            actions.set("a", 1)
        assert view.result[0] == {"a": 1}
        assert view.render_count == 2

    def test_batched_actions_render_once(self, strategy):
        view = _mount(strategy)
        actions = view.result[1]
        with transaction():
            actions.set("a", 1)
            actions.set("b", 2)
            actions.remove("a")
        assert view.result[0] == {"b": 2}
        assert view.render_count == 2


class TestWalkthrough:
    @pytest.mark.parametrize(
        "strategy, counts",
        [
            (COUNTER, [2, 3, 4, 5, 6]),
            (REPLACE, [2, 2, 2, 3, 4]),
        ],
    )
    def test_end_to_end(self, strategy, counts):
        view = _mount(strategy)
        actions = view.result[1]
        observed = []

        actions.set("a", 1)
        assert view.result[0] == {"a": 1}
        observed.append(view.render_count)

        actions.set("a", 1)
        assert view.result[0] == {"a": 1}
        observed.append(view.render_count)

        actions.remove("b")
        assert view.result[0] == {"a": 1}
        observed.append(view.render_count)

        actions.set_all({"x": 9})
        assert view.result[0] == {"x": 9}
        observed.append(view.render_count)

        actions.reset()
        assert view.result[0] == {}
        observed.append(view.render_count)

        assert observed == counts


class _Elementwise:
    """Compares element-wise, like an array."""

    def __eq__(self, other):
        return [True]

    __hash__ = object.__hash__


class TestNonBoolValues:
    def test_replace_set_with_elementwise_values(self):
        view = _mount(REPLACE, {"a": _Elementwise()})
        replacement = _Elementwise()
        view.result[1].set("a", replacement)
        assert view.render_count == 2
        assert view.result[0]["a"] is replacement
