from __future__ import annotations

from typing import Iterable, Sequence

from ffm.contracts import Allocation, MatchConfig, Position, QuarterAllocation, VarianceStats, Wave


def compute_summary(quarters: Iterable[QuarterAllocation], roster: Iterable[str] | None = None) -> dict[str, int]:
    """Total minutes per player, derived from the slots.

    Roster players without a single slot are reported with 0.
    """
    summary: dict[str, int] = {p: 0 for p in roster or ()}
    for quarter in quarters:
        for slot in quarter.slots:
            summary[slot.player] = summary.get(slot.player, 0) + slot.minutes
    return summary


def calculate_variance(allocation: Allocation) -> VarianceStats:
    # "variance" is the max-min range of total minutes, not a statistical variance.
    minutes = list(allocation.summary.values())
    if not minutes:
        return VarianceStats(min=0, max=0, mean=0.0, variance=0)
    low = min(minutes)
    high = max(minutes)
    return VarianceStats(min=low, max=high, mean=sum(minutes) / len(minutes), variance=high - low)


def validate_allocation(allocation: Allocation, config: MatchConfig) -> list[str]:
    errors: list[str] = []
    counts = config.position_counts

    if len(allocation.quarters) != config.quarter_count:
        errors.append(f"Expected {config.quarter_count} quarters, got {len(allocation.quarters)}")

    for q in allocation.quarters:
        gk_count = q.count(Position.GK)
        if gk_count != counts.gk:
            errors.append(f"Quarter {q.quarter}: Expected {counts.gk} GK, got {gk_count}")
        def_count = q.count(Position.DEF)
        if def_count != counts.defenders * 2:
            errors.append(f"Quarter {q.quarter}: Expected {counts.defenders * 2} DEF slots, got {def_count}")
        att_count = q.count(Position.ATT)
        if att_count != counts.attackers * 2:
            errors.append(f"Quarter {q.quarter}: Expected {counts.attackers * 2} ATT slots, got {att_count}")

    if config.fairness.gk_requires_outfield:
        errors.extend(_goalkeeper_outfield_errors(allocation, config))

    return errors


def _goalkeeper_outfield_errors(allocation: Allocation, config: MatchConfig) -> list[str]:
    primary_minutes = config.wave_durations.first
    goalkeepers: list[str] = []
    credited: set[str] = set()
    for q in allocation.quarters:
        for slot in q.slots:
            if slot.position is Position.GK:
                if slot.player not in goalkeepers:
                    goalkeepers.append(slot.player)
            elif slot.minutes == primary_minutes:
                credited.add(slot.player)
    return [
        f"Player {player} played GK but has no {primary_minutes}-min outfield block"
        for player in goalkeepers
        if player not in credited
    ]


def goalkeepers_without_first_wave(allocation: Allocation) -> list[str]:
    """Players who kept goal but never played a first-wave outfield slot, in order of first GK quarter."""
    goalkeepers: list[str] = []
    credited: set[str] = set()
    for q in sorted(allocation.quarters, key=lambda q: q.quarter):
        for slot in q.slots:
            if slot.position is Position.GK:
                if slot.player not in goalkeepers:
                    goalkeepers.append(slot.player)
            elif slot.wave is Wave.FIRST:
                credited.add(slot.player)
    return [player for player in goalkeepers if player not in credited]


def find_consecutive_bench(allocation: Allocation, roster: Sequence[str]) -> str | None:
    """Return a description of the first player benched two quarters running, else None."""
    ordered = sorted(allocation.quarters, key=lambda q: q.quarter)
    on_pitch = [q.players() for q in ordered]
    for player in roster:
        streak = 0
        for idx, players in enumerate(on_pitch):
            if player in players:
                streak = 0
                continue
            streak += 1
            if streak >= 2:
                first = ordered[idx - streak + 1].quarter
                return (
                    f"Player {player} would be a substitute for {streak} consecutive quarters "
                    f"(Q{first}-Q{ordered[idx].quarter}). Maximum allowed is 1 quarter."
                )
    return None
