from __future__ import annotations

from typing import Iterable, Sequence

from ffm.contracts import Allocation, Position, PositionDistribution

SUB_LABEL = "sub"
GK_LABEL = "GK"


def get_subs_for_quarter(allocation: Allocation, quarter: int, roster: Sequence[str]) -> list[str]:
    q = allocation.quarter(quarter)
    if q is None:
        return list(roster)
    playing = q.players()
    return [p for p in roster if p not in playing]


def get_player_quarter_breakdown(allocation: Allocation, player: str) -> list[str]:
    """One label per quarter: ``"GK"``, the outfield minutes, or ``"sub"``."""
    labels: list[str] = []
    for q in allocation.quarters:
        slot = next((s for s in q.slots if s.player == player), None)
        if slot is None:
            labels.append(SUB_LABEL)
        elif slot.position is Position.GK:
            labels.append(GK_LABEL)
        else:
            labels.append(str(slot.minutes))
    return labels


def position_distribution(allocations: Iterable[Allocation], player: str) -> PositionDistribution:
    minutes = {Position.GK: 0, Position.DEF: 0, Position.ATT: 0}
    for allocation in allocations:
        for q in allocation.quarters:
            for slot in q.slots:
                if slot.player == player:
                    minutes[slot.position] += slot.minutes

    total = sum(minutes.values())
    if total == 0:
        return PositionDistribution(gk=0, defenders=0, attackers=0, total_minutes=0)
    return PositionDistribution(
        gk=round(minutes[Position.GK] / total * 100),
        defenders=round(minutes[Position.DEF] / total * 100),
        attackers=round(minutes[Position.ATT] / total * 100),
        total_minutes=total,
    )
