"""Tests for SelectionState."""

import pytest

from backend.errors import InvariantViolation
from backend.selection.state import SelectionState
from tests.factories import make_product


def _snapshot(state):
    return (
        state.use_case,
        state.selected,
        state.current_category_index,
        state.compatibility,
    )


def test_fresh_state_is_empty():
    state = SelectionState()
    assert state.use_case is None
    assert state.selected == {}
    assert state.current_category_index == 0
    assert state.compatibility == []
    assert state.current_category is None


def test_set_use_case_reinitializes(trading_template):
    state = SelectionState()
    state.set_use_case(trading_template)
    state.add_product("Wallet", make_product("w", chains=["eth"]))
    state.add_product("DEX", make_product("d", chains=["eth"]))
    state.set_current_category_index(2)
    state.calculate_compatibility()

    state.set_use_case(trading_template)

    assert state.selected == {}
    assert state.current_category_index == 0
    assert state.compatibility == []
    assert state.current_category.name == "Wallet"


def test_add_product_replaces_existing_selection(trading_template):
    state = SelectionState()
    state.set_use_case(trading_template)
    first = make_product("metamask")
    second = make_product("rabby")

    state.add_product("Wallet", first)
    state.add_product("Wallet", second)

    assert state.selected == {"Wallet": second}


def test_replacing_keeps_selection_order(trading_template):
    state = SelectionState()
    state.set_use_case(trading_template)
    state.add_product("Wallet", make_product("w1"))
    state.add_product("DEX", make_product("d"))
    state.add_product("Wallet", make_product("w2"))

    assert list(state.selected) == ["Wallet", "DEX"]
    assert [p.id for p in state.products] == ["w2", "d"]


def test_add_product_for_unknown_category_is_rejected(trading_template):
    state = SelectionState()
    state.set_use_case(trading_template)
    state.add_product("Wallet", make_product("w"))

    with pytest.raises(InvariantViolation):
        state.add_product("Oracle", make_product("o"))

    assert list(state.selected) == ["Wallet"]


def test_add_product_without_use_case_is_rejected():
    state = SelectionState()
    with pytest.raises(InvariantViolation):
        state.add_product("Wallet", make_product("w"))
    assert state.selected == {}


def test_remove_product_absent_is_noop(trading_template):
    state = SelectionState()
    state.set_use_case(trading_template)
    state.remove_product("Bridge")
    assert state.selected == {}


def test_add_then_remove_round_trip(trading_template):
    state = SelectionState()
    state.set_use_case(trading_template)
    state.add_product("Wallet", make_product("w"))
    before = state.selected

    state.add_product("DEX", make_product("d"))
    state.remove_product("DEX")

    assert state.selected == before


def test_selected_is_a_snapshot(trading_template):
    state = SelectionState()
    state.set_use_case(trading_template)
    snapshot = state.selected
    snapshot["Wallet"] = make_product("sneaky")
    assert state.selected == {}


def test_set_current_category_index_is_unchecked(trading_template):
    state = SelectionState()
    state.set_use_case(trading_template)
    state.set_current_category_index(7)
    assert state.current_category_index == 7
    assert state.current_category is None
    assert state.can_proceed_to_next() is False


class TestCanProceedToNext:
    def test_false_without_use_case(self):
        assert SelectionState().can_proceed_to_next() is False

    def test_required_category_needs_selection(self, trading_template):
        state = SelectionState()
        state.set_use_case(trading_template)
        assert state.can_proceed_to_next() is False

        state.add_product("Wallet", make_product("w"))
        assert state.can_proceed_to_next() is True

    def test_selection_for_another_category_does_not_count(self, trading_template):
        state = SelectionState()
        state.set_use_case(trading_template)
        state.add_product("DEX", make_product("d"))
        assert state.can_proceed_to_next() is False

    def test_optional_category_always_passes(self, trading_template):
        state = SelectionState()
        state.set_use_case(trading_template)
        state.set_current_category_index(2)
        assert state.can_proceed_to_next() is True

    def test_false_past_last_category(self, trading_template):
        state = SelectionState()
        state.set_use_case(trading_template)
        state.set_current_category_index(3)
        assert state.is_complete is True
        assert state.can_proceed_to_next() is False


class TestCalculateCompatibility:
    def test_fewer_than_two_products(self, trading_template):
        state = SelectionState()
        state.set_use_case(trading_template)
        state.add_product("Wallet", make_product("w", chains=["eth"]))

        assert state.calculate_compatibility() == []
        assert state.compatibility == []

    def test_uses_selection_order(self, trading_template):
        state = SelectionState()
        state.set_use_case(trading_template)
        state.add_product("Bridge", make_product("b", chains=["eth"], assets=["USDC"]))
        state.add_product("Wallet", make_product("w", chains=["eth", "sol"], assets=["USDC"]))
        state.add_product("DEX", make_product("d", chains=["sol"]))

        results = state.calculate_compatibility()

        assert [r.pair_id for r in results] == ["b-w", "b-d", "w-d"]
        assert [r.score for r in results] == [20, 0, 10]
        summary = state.stack_score()
        assert summary.score == 10
        assert summary.tier == "partial"


def test_reset_then_set_use_case_matches_fresh_install(trading_template):
    used = SelectionState()
    used.set_use_case(trading_template)
    used.add_product("Wallet", make_product("w", chains=["eth"]))
    used.add_product("DEX", make_product("d", chains=["eth"]))
    used.set_current_category_index(3)
    used.calculate_compatibility()

    used.reset()
    assert _snapshot(used) == (None, {}, 0, [])

    used.set_use_case(trading_template)
    fresh = SelectionState()
    fresh.set_use_case(trading_template)

    assert _snapshot(used) == _snapshot(fresh)
