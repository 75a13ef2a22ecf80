from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from ffm.contracts import MatchConfig, PlayerSlot, Position, QuarterAllocation, RandomSource, Wave

# Candidates within this many minutes of the best candidate are treated as
# equally fair and picked between at random. Capped below the shortest wave so
# a whole stint never counts as a tie.
TIE_BREAK_BAND_MINUTES = 2


@dataclass(slots=True)
class PlayerCounters:
    """Running per-player totals for a single generation attempt."""

    total_minutes: dict[str, int] = field(default_factory=dict)
    goalkeeper_quarters: dict[str, int] = field(default_factory=dict)
    primary_outfield_blocks: dict[str, int] = field(default_factory=dict)
    rested: set[str] = field(default_factory=set)

    @classmethod
    def fresh(cls, roster: Sequence[str]) -> PlayerCounters:
        return cls(
            total_minutes={p: 0 for p in roster},
            goalkeeper_quarters={p: 0 for p in roster},
            primary_outfield_blocks={p: 0 for p in roster},
        )

    def has_primary_block(self, player: str) -> bool:
        return self.primary_outfield_blocks.get(player, 0) > 0

    def needs_outfield_credit(self, player: str) -> bool:
        return self.goalkeeper_quarters.get(player, 0) > 0 and not self.has_primary_block(player)

    def record(self, slot: PlayerSlot) -> None:
        p = slot.player
        self.total_minutes[p] = self.total_minutes.get(p, 0) + slot.minutes
        if slot.position is Position.GK:
            self.goalkeeper_quarters[p] = self.goalkeeper_quarters.get(p, 0) + 1
        elif slot.wave is Wave.FIRST:
            self.primary_outfield_blocks[p] = self.primary_outfield_blocks.get(p, 0) + 1

    def close_quarter(self, roster: Sequence[str], quarter: QuarterAllocation) -> None:
        on_pitch = quarter.players()
        self.rested = {p for p in roster if p not in on_pitch}


class QuarterAllocator:
    """Fills the slots of one quarter from the running counters.

    ``reserved_keeper`` is the player already chosen to keep goal in the final
    quarter. Until then they are kept out of goal, owed a first-wave block, and
    ranked as if they already had the extra minutes the final quarter in goal
    will give them.
    """

    def __init__(self, config: MatchConfig, random_source: RandomSource) -> None:
        self._config = config
        self._random = random_source
        waves = config.wave_durations
        self._band = max(0, min(TIE_BREAK_BAND_MINUTES, min(waves.first, waves.second) - 1))
        self._reserve_credit = config.quarter_duration_minutes - waves.first

    def choose_final_keeper(self, roster: Sequence[str], counters: PlayerCounters) -> str:
        return self._select_goalkeeper(list(roster), counters)

    def build(
        self,
        quarter: int,
        roster: Sequence[str],
        counters: PlayerCounters,
        manual_goalkeeper: str | None = None,
        reserved_keeper: str | None = None,
    ) -> QuarterAllocation:
        counts = self._config.position_counts
        used: set[str] = set()
        keepers: set[str] = set()
        slots: list[PlayerSlot] = []

        for gk_index in range(counts.gk):
            if gk_index == 0 and manual_goalkeeper is not None:
                keeper = manual_goalkeeper
            else:
                candidates = [p for p in roster if p not in used and p != reserved_keeper]
                keeper = self._select_goalkeeper(candidates or [p for p in roster if p not in used], counters)
            slot = PlayerSlot(player=keeper, position=Position.GK, minutes=self._config.quarter_duration_minutes)
            slots.append(slot)
            counters.record(slot)
            used.add(keeper)
            keepers.add(keeper)

        owed: set[str] = set()
        if self._config.fairness.gk_requires_outfield:
            owed = {p for p in roster if counters.needs_outfield_credit(p)}
            if reserved_keeper is not None and not counters.has_primary_block(reserved_keeper):
                owed.add(reserved_keeper)

        first_wave = self._select_wave(roster, used, keepers, counters, owed=owed, reserved_keeper=reserved_keeper)
        for slot in self._wave_slots(first_wave, Wave.FIRST):
            slots.append(slot)
            counters.record(slot)
            used.add(slot.player)

        second_wave = self._select_wave(roster, used, keepers, counters, owed=set(), reserved_keeper=reserved_keeper)
        for slot in self._wave_slots(second_wave, Wave.SECOND):
            slots.append(slot)
            counters.record(slot)

        allocation = QuarterAllocation(quarter=quarter, slots=tuple(slots))
        counters.close_quarter(roster, allocation)
        return allocation

    def _wave_slots(self, players: list[str], wave: Wave) -> list[PlayerSlot]:
        defenders = self._config.position_counts.defenders
        minutes = self._config.wave_durations.duration(wave)
        return [
            PlayerSlot(player=p, position=Position.DEF if idx < defenders else Position.ATT, minutes=minutes, wave=wave)
            for idx, p in enumerate(players)
        ]

    def _select_goalkeeper(self, candidates: list[str], counters: PlayerCounters) -> str:
        fewest = min(counters.goalkeeper_quarters.get(p, 0) for p in candidates)
        group = [p for p in candidates if counters.goalkeeper_quarters.get(p, 0) == fewest]
        band = self._within_band(group, counters)
        if self._config.fairness.gk_requires_outfield:
            # Already credited keepers do not take a later first-wave block away from anyone.
            band = [p for p in band if counters.has_primary_block(p)] or band
        return self._random.choice(band)

    def _select_wave(
        self,
        roster: Sequence[str],
        used: set[str],
        keepers: set[str],
        counters: PlayerCounters,
        *,
        owed: set[str],
        reserved_keeper: str | None,
    ) -> list[str]:
        count = self._config.position_counts.outfield_per_wave
        fresh = [p for p in roster if p not in used]
        # Small rosters play twice in a quarter, but never while in goal.
        reuse = [p for p in roster if p in used and p not in keepers]

        chosen: list[str] = []
        while len(chosen) < count:
            pool = fresh or reuse
            if not pool:
                break
            group = [p for p in pool if p in owed] or [p for p in pool if p in counters.rested] or pool
            pick = self._random.choice(self._within_band(group, counters, reserved_keeper))
            chosen.append(pick)
            pool.remove(pick)
        return chosen

    def _within_band(self, group: list[str], counters: PlayerCounters, reserved_keeper: str | None = None) -> list[str]:
        def minutes(player: str) -> int:
            extra = self._reserve_credit if player == reserved_keeper else 0
            return counters.total_minutes.get(player, 0) + extra

        least = min(minutes(p) for p in group)
        return [p for p in group if minutes(p) <= least + self._band]
