from __future__ import annotations

from ffm.allocation import compute_summary
from ffm.contracts import Allocation, PlayerSlot, Position, QuarterAllocation, Wave

ROSTER_10 = ["A", "B", "C", "D", "E", "F", "G", "H", "I", "J"]

# Slot order per quarter: GK, DEF1, DEF1, ATT1, ATT1, DEF2, DEF2, ATT2, ATT2.
# Everyone finishes on 20 minutes; bench: J (Q1), B (Q2), A (Q3), C (Q4).
FAIR_LINEUP = [
    ["A", "B", "C", "D", "E", "F", "G", "H", "I"],
    ["J", "A", "F", "G", "H", "I", "C", "D", "E"],
    ["C", "B", "D", "J", "F", "G", "H", "I", "E"],
    ["B", "A", "D", "E", "F", "G", "H", "I", "J"],
]

_LAYOUT = [
    (Position.GK, None),
    (Position.DEF, Wave.FIRST),
    (Position.DEF, Wave.FIRST),
    (Position.ATT, Wave.FIRST),
    (Position.ATT, Wave.FIRST),
    (Position.DEF, Wave.SECOND),
    (Position.DEF, Wave.SECOND),
    (Position.ATT, Wave.SECOND),
    (Position.ATT, Wave.SECOND),
]


def build_allocation(
    lineup: list[list[str]],
    roster: list[str],
    gk_minutes: int = 10,
    first_minutes: int = 5,
    second_minutes: int = 5,
) -> Allocation:
    quarters = []
    for number, players in enumerate(lineup, start=1):
        slots = []
        for player, (position, wave) in zip(players, _LAYOUT):
            if position is Position.GK:
                minutes = gk_minutes
            else:
                minutes = first_minutes if wave is Wave.FIRST else second_minutes
            slots.append(PlayerSlot(player=player, position=position, minutes=minutes, wave=wave))
        quarters.append(QuarterAllocation(quarter=number, slots=tuple(slots)))
    return Allocation(quarters=tuple(quarters), summary=compute_summary(quarters, roster))


def fair_allocation() -> Allocation:
    return build_allocation(FAIR_LINEUP, ROSTER_10)


def roster_of(size: int) -> list[str]:
    return [f"P{i}" for i in range(1, size + 1)]
