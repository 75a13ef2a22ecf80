from __future__ import annotations

import logging
from typing import Sequence

from ffm.allocation.quarter import PlayerCounters, QuarterAllocator
from ffm.allocation.validation import (
    calculate_variance,
    compute_summary,
    find_consecutive_bench,
    goalkeepers_without_first_wave,
    validate_allocation,
)
from ffm.contracts import Allocation, MatchConfig, QuarterAllocation, RandomSource
from ffm.core.errors import InvalidManualGoalkeeper, InvalidRoster, InvalidRosterSize
from ffm.core.randomness import allocation_random

logger = logging.getLogger(__name__)


class MatchAllocator:
    """Builds a full-match allocation, retrying until the fairness rules hold.

    Every attempt starts from zeroed counters and draws its tie-breaks from its
    own substream of the injected random source, so successive attempts differ
    while a seeded source keeps every run reproducible. When
    ``config.max_attempts`` attempts all fail, the most recent attempt is
    returned with ``warnings`` describing what is still violated.
    """

    def __init__(self, config: MatchConfig | None = None, random_source: RandomSource | None = None) -> None:
        self.config = config or MatchConfig()
        self.config.validate()
        self._random = random_source or allocation_random()
        self._runs = 0

    def allocate(self, roster: Sequence[str], manual_goalkeepers: Sequence[str | None] | None = None) -> Allocation:
        players = list(roster)
        goalkeepers = self._check_inputs(players, manual_goalkeepers)
        self._runs += 1

        attempt = 0
        while True:
            attempt += 1
            allocation = self._attempt(players, goalkeepers, self._random.spawn(f"run_{self._runs}:attempt_{attempt}"))
            problems = self._constraint_problems(allocation, players)
            if not problems:
                logger.debug("allocation for %d players satisfied constraints on attempt %d", len(players), attempt)
                return allocation
            logger.debug("attempt %d rejected: %s", attempt, "; ".join(problems))
            if attempt >= self.config.max_attempts:
                break

        logger.warning(
            "no allocation satisfied all constraints after %d attempts; returning last attempt",
            self.config.max_attempts,
        )
        return Allocation(quarters=allocation.quarters, summary=allocation.summary, warnings=tuple(problems))

    def _check_inputs(self, players: list[str], manual_goalkeepers: Sequence[str | None] | None) -> list[str | None]:
        minimum = max(self.config.roster_min, self.config.position_counts.players_on_pitch)
        if len(players) < minimum or len(players) > self.config.roster_max:
            raise InvalidRosterSize(len(players), minimum, self.config.roster_max)
        if len(set(players)) != len(players):
            duplicates = sorted({p for p in players if players.count(p) > 1})
            raise InvalidRoster(f"roster contains duplicate players: {', '.join(duplicates)}")

        goalkeepers: list[str | None] = list(manual_goalkeepers or [])
        if len(goalkeepers) > self.config.quarter_count:
            raise InvalidManualGoalkeeper(
                len(goalkeepers),
                goalkeepers[-1],
                reason=f"exceeds the {self.config.quarter_count} quarters of the match",
            )
        roster_set = set(players)
        for idx, keeper in enumerate(goalkeepers, start=1):
            if keeper is not None and keeper not in roster_set:
                raise InvalidManualGoalkeeper(idx, keeper)
        goalkeepers.extend([None] * (self.config.quarter_count - len(goalkeepers)))
        return goalkeepers

    def _attempt(self, players: list[str], goalkeepers: list[str | None], random_source: RandomSource) -> Allocation:
        counters = PlayerCounters.fresh(players)
        builder = QuarterAllocator(self.config, random_source)
        final = self.config.quarter_count
        # Nobody can earn a first-wave block after keeping goal in the final quarter,
        # so that keeper is settled before the first quarter is built.
        final_keeper = goalkeepers[final - 1] or builder.choose_final_keeper(players, counters)
        quarters: list[QuarterAllocation] = []
        for q in range(1, final):
            quarters.append(
                builder.build(q, players, counters, manual_goalkeeper=goalkeepers[q - 1], reserved_keeper=final_keeper)
            )
        quarters.append(builder.build(final, players, counters, manual_goalkeeper=final_keeper))
        return Allocation(quarters=tuple(quarters), summary=compute_summary(quarters, players))

    def _constraint_problems(self, allocation: Allocation, players: list[str]) -> list[str]:
        problems: list[str] = []
        stats = calculate_variance(allocation)
        limit = self.config.fairness.max_variance_minutes
        if stats.variance > limit:
            problems.append(
                f"fairness variance of {stats.variance} minutes exceeds configured maximum of {limit} minutes"
            )
        bench = find_consecutive_bench(allocation, players)
        if bench is not None:
            problems.append(bench)
        problems.extend(validate_allocation(allocation, self.config))
        if self.config.fairness.gk_requires_outfield:
            problems.extend(
                f"Player {player} played GK but has no first-wave outfield block"
                for player in goalkeepers_without_first_wave(allocation)
            )
        return problems


def allocate(
    roster: Sequence[str],
    config: MatchConfig | None = None,
    manual_goalkeepers: Sequence[str | None] | None = None,
    random_source: RandomSource | None = None,
) -> Allocation:
    return MatchAllocator(config, random_source).allocate(roster, manual_goalkeepers)
