from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from ffm.allocation.validation import calculate_variance, compute_summary, find_consecutive_bench
from ffm.contracts import Allocation, MatchConfig, PlayerSlot, QuarterAllocation
from ffm.core.errors import (
    CannotSwapGoalkeeper,
    ConsecutiveBenchViolation,
    FairnessViolation,
    InvalidSlotIndex,
    PlayerAlreadyPlaying,
    PlayerNotInRoster,
    QuarterNotFound,
)


def _locate(allocation: Allocation, quarter: int, *slot_indexes: int) -> tuple[int, QuarterAllocation]:
    for position, q in enumerate(allocation.quarters):
        if q.quarter == quarter:
            for idx in slot_indexes:
                if idx < 0 or idx >= len(q.slots):
                    raise InvalidSlotIndex(quarter, idx)
            return position, q
    raise QuarterNotFound(quarter)


def _with_slots(
    allocation: Allocation,
    position: int,
    slots: list[PlayerSlot],
    roster: Sequence[str] | None,
) -> Allocation:
    quarters = list(allocation.quarters)
    quarters[position] = replace(quarters[position], slots=tuple(slots))
    players = roster if roster is not None else list(allocation.summary)
    return Allocation(quarters=tuple(quarters), summary=compute_summary(quarters, players))


def _check_post_edit(candidate: Allocation, config: MatchConfig, roster: Sequence[str] | None) -> None:
    stats = calculate_variance(candidate)
    limit = config.fairness.max_variance_minutes
    if stats.variance > limit:
        raise FairnessViolation(stats.variance, limit)
    if roster is not None:
        bench = find_consecutive_bench(candidate, roster)
        if bench is not None:
            raise ConsecutiveBenchViolation(bench)


def swap_positions(
    allocation: Allocation,
    quarter: int,
    slot_index_a: int,
    slot_index_b: int,
    roster: Sequence[str] | None = None,
    config: MatchConfig | None = None,
) -> Allocation:
    """Trade the players of two outfield slots in one quarter.

    The slots keep their position, minutes and wave; only the occupants move.
    The bench rule is only checked when ``roster`` is given, since bench
    quarters can only be detected against the full squad.
    """
    position, q = _locate(allocation, quarter, slot_index_a, slot_index_b)
    slot_a = q.slots[slot_index_a]
    slot_b = q.slots[slot_index_b]
    if slot_a.is_goalkeeper or slot_b.is_goalkeeper:
        raise CannotSwapGoalkeeper(quarter)

    slots = list(q.slots)
    slots[slot_index_a] = replace(slot_a, player=slot_b.player)
    slots[slot_index_b] = replace(slot_b, player=slot_a.player)
    candidate = _with_slots(allocation, position, slots, roster)
    _check_post_edit(candidate, config or MatchConfig(), roster)
    return candidate


def swap_with_sub(
    allocation: Allocation,
    quarter: int,
    slot_index: int,
    bench_player: str,
    roster: Sequence[str],
    config: MatchConfig | None = None,
) -> Allocation:
    """Put a benched player into a slot for one quarter; the displaced player goes to the bench."""
    position, q = _locate(allocation, quarter, slot_index)
    slot = q.slots[slot_index]
    if slot.is_goalkeeper:
        raise CannotSwapGoalkeeper(quarter)
    if bench_player in q.players():
        raise PlayerAlreadyPlaying(bench_player, quarter)
    if bench_player not in roster:
        raise PlayerNotInRoster(bench_player)

    slots = list(q.slots)
    slots[slot_index] = replace(slot, player=bench_player)
    candidate = _with_slots(allocation, position, slots, roster)
    _check_post_edit(candidate, config or MatchConfig(), roster)
    return candidate


def update_slot(allocation: Allocation, quarter: int, slot_index: int, new_player: str) -> Allocation:
    # Unchecked: callers re-validate if they need guarantees.
    position, q = _locate(allocation, quarter, slot_index)
    slots = list(q.slots)
    slots[slot_index] = replace(slots[slot_index], player=new_player)
    return _with_slots(allocation, position, slots, None)
