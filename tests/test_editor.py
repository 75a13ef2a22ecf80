from __future__ import annotations

import pytest

from ffm.allocation import allocate, get_subs_for_quarter, swap_positions, swap_with_sub, update_slot
from ffm.contracts import FairnessRules, MatchConfig
from ffm.core import (
    CannotSwapGoalkeeper,
    ConsecutiveBenchViolation,
    FairnessViolation,
    InvalidSlotIndex,
    PlayerAlreadyPlaying,
    PlayerNotInRoster,
    QuarterNotFound,
    seeded_random,
)
from tests.helpers import ROSTER_10, fair_allocation, roster_of

LENIENT = MatchConfig(fairness=FairnessRules(max_variance_minutes=10))


def test_swap_positions_trades_players_but_keeps_slot_shape():
    original = fair_allocation()
    swapped = swap_positions(original, 1, 1, 7, roster=ROSTER_10)

    before = original.quarters[0].slots
    after = swapped.quarters[0].slots
    assert after[1].player == before[7].player
    assert after[7].player == before[1].player
    assert (after[1].position, after[1].minutes, after[1].wave) == (before[1].position, before[1].minutes, before[1].wave)
    assert (after[7].position, after[7].minutes, after[7].wave) == (before[7].position, before[7].minutes, before[7].wave)
    assert original.quarters[0].slots[1].player == "B"


def test_swap_positions_is_its_own_inverse():
    original = fair_allocation()
    twice = swap_positions(swap_positions(original, 3, 2, 6, roster=ROSTER_10), 3, 2, 6, roster=ROSTER_10)
    assert twice == original


def test_swap_positions_on_generated_allocation_is_its_own_inverse():
    config = MatchConfig(fairness=FairnessRules(max_variance_minutes=40))
    roster = roster_of(5)
    original = allocate(roster, config, random_source=seeded_random(17))
    assert not original.warnings

    once = swap_positions(original, 2, 1, 4, roster=roster, config=config)
    assert swap_positions(once, 2, 1, 4, roster=roster, config=config) == original


@pytest.mark.parametrize("a,b", [(0, 3), (5, 0), (0, 0)])
def test_swap_positions_refuses_goalkeeper_slots(a: int, b: int):
    with pytest.raises(CannotSwapGoalkeeper):
        swap_positions(fair_allocation(), 2, a, b, roster=ROSTER_10)


def test_swap_positions_rejects_result_outside_fairness_bound():
    unfair = update_slot(fair_allocation(), 1, 1, "J")
    with pytest.raises(FairnessViolation) as ex:
        swap_positions(unfair, 2, 1, 2)
    assert ex.value.variance == 10
    assert ex.value.max_variance == 5


def test_swap_positions_unknown_quarter_and_slot():
    with pytest.raises(QuarterNotFound):
        swap_positions(fair_allocation(), 9, 1, 2)
    with pytest.raises(InvalidSlotIndex):
        swap_positions(fair_allocation(), 1, 1, 42)
    with pytest.raises(InvalidSlotIndex):
        swap_positions(fair_allocation(), 1, -1, 2)


def test_swap_with_sub_moves_bench_player_into_slot():
    original = fair_allocation()
    edited = swap_with_sub(original, 4, 2, "C", ROSTER_10, config=LENIENT)

    assert edited.quarters[3].slots[2].player == "C"
    assert edited.summary["C"] == 25
    assert edited.summary["D"] == 15
    assert get_subs_for_quarter(edited, 4, ROSTER_10) == ["D"]
    assert original.quarters[3].slots[2].player == "D"
    assert original.summary["C"] == 20


def test_swap_with_sub_rejects_player_already_on_pitch():
    allocation = fair_allocation()
    on_pitch = allocation.quarters[0].slots[4].player
    with pytest.raises(PlayerAlreadyPlaying):
        swap_with_sub(allocation, 1, 3, on_pitch, ROSTER_10)


def test_swap_with_sub_rejects_unknown_player():
    with pytest.raises(PlayerNotInRoster):
        swap_with_sub(fair_allocation(), 1, 3, "Zed", ROSTER_10)


def test_swap_with_sub_refuses_goalkeeper_slot():
    with pytest.raises(CannotSwapGoalkeeper):
        swap_with_sub(fair_allocation(), 1, 0, "J", ROSTER_10)


def test_swap_with_sub_rejects_unfair_result():
    with pytest.raises(FairnessViolation):
        swap_with_sub(fair_allocation(), 4, 2, "C", ROSTER_10)


def test_swap_with_sub_rejects_second_consecutive_bench_quarter():
    # B already sits out Q2; benching B in Q1 too is not allowed.
    with pytest.raises(ConsecutiveBenchViolation) as ex:
        swap_with_sub(fair_allocation(), 1, 1, "J", ROSTER_10, config=LENIENT)
    assert "Player B" in str(ex.value)
    assert "Q1-Q2" in str(ex.value)


def test_update_slot_is_unchecked_and_recomputes_summary():
    original = fair_allocation()
    edited = update_slot(original, 1, 1, "J")

    assert edited.quarters[0].slots[1].player == "J"
    assert edited.summary["J"] == 25
    assert edited.summary["B"] == 15
    assert sum(edited.summary.values()) == sum(original.summary.values())
    assert original.summary["J"] == 20


def test_update_slot_keeps_players_left_without_minutes_in_summary():
    allocation = fair_allocation()
    for q in allocation.quarters:
        for idx, slot in enumerate(q.slots):
            if slot.player == "J":
                allocation = update_slot(allocation, q.quarter, idx, "A")
    assert allocation.summary["J"] == 0
