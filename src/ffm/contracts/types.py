from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Protocol, Sequence


class Position(str, Enum):
    GK = "GK"
    DEF = "DEF"
    ATT = "ATT"


class Wave(str, Enum):
    FIRST = "first"
    SECOND = "second"


class RandomSource(Protocol):
    def choice(self, items: Sequence[Any]) -> Any: ...

    def spawn(self, substream_id: str) -> RandomSource: ...


class ConfigurationError(ValueError):
    def __init__(self, problems: list[str]) -> None:
        super().__init__("; ".join(problems))
        self.problems = problems


@dataclass(frozen=True, slots=True)
class WaveDurations:
    first: int = 5
    second: int = 5

    def duration(self, wave: Wave) -> int:
        return self.first if wave is Wave.FIRST else self.second


@dataclass(frozen=True, slots=True)
class PositionCounts:
    gk: int = 1
    defenders: int = 2
    attackers: int = 2

    @property
    def outfield_per_wave(self) -> int:
        return self.defenders + self.attackers

    @property
    def slots_per_quarter(self) -> int:
        return self.gk + 2 * self.outfield_per_wave

    @property
    def players_on_pitch(self) -> int:
        return self.gk + self.outfield_per_wave


@dataclass(frozen=True, slots=True)
class FairnessRules:
    max_variance_minutes: int = 5
    gk_requires_outfield: bool = True


@dataclass(frozen=True, slots=True)
class MatchConfig:
    quarter_count: int = 4
    quarter_duration_minutes: int = 10
    wave_durations: WaveDurations = field(default_factory=WaveDurations)
    position_counts: PositionCounts = field(default_factory=PositionCounts)
    fairness: FairnessRules = field(default_factory=FairnessRules)
    max_attempts: int = 100
    roster_min: int = 5
    roster_max: int = 15

    def validate(self) -> None:
        problems: list[str] = []
        if self.quarter_count < 1:
            problems.append("quarter_count must be at least 1")
        if self.position_counts.gk < 1:
            problems.append("position_counts.gk must be at least 1")
        if self.position_counts.defenders < 1:
            problems.append("position_counts.defenders must be at least 1")
        if self.position_counts.attackers < 1:
            problems.append("position_counts.attackers must be at least 1")
        if self.wave_durations.first <= 0 or self.wave_durations.second <= 0:
            problems.append("wave durations must be positive")
        if self.wave_durations.first + self.wave_durations.second != self.quarter_duration_minutes:
            problems.append(
                f"wave durations ({self.wave_durations.first}+{self.wave_durations.second}) "
                f"must sum to quarter duration ({self.quarter_duration_minutes})"
            )
        if self.fairness.max_variance_minutes < 0:
            problems.append("fairness.max_variance_minutes must not be negative")
        if self.max_attempts < 1:
            problems.append("max_attempts must be at least 1")
        if self.roster_min < 1 or self.roster_max < self.roster_min:
            problems.append("roster bounds must satisfy 1 <= roster_min <= roster_max")
        if problems:
            raise ConfigurationError(problems)


@dataclass(frozen=True, slots=True)
class PlayerSlot:
    player: str
    position: Position
    minutes: int
    wave: Wave | None = None

    @property
    def is_goalkeeper(self) -> bool:
        return self.position is Position.GK


@dataclass(frozen=True, slots=True)
class QuarterAllocation:
    quarter: int
    slots: tuple[PlayerSlot, ...]

    def players(self) -> set[str]:
        return {s.player for s in self.slots}

    def count(self, position: Position) -> int:
        return sum(1 for s in self.slots if s.position is position)


@dataclass(frozen=True, slots=True)
class Allocation:
    quarters: tuple[QuarterAllocation, ...]
    summary: Mapping[str, int]
    warnings: tuple[str, ...] = ()

    def quarter(self, number: int) -> QuarterAllocation | None:
        for q in self.quarters:
            if q.quarter == number:
                return q
        return None


@dataclass(frozen=True, slots=True)
class VarianceStats:
    min: int
    max: int
    mean: float
    variance: int


@dataclass(slots=True)
class PositionDistribution:
    gk: int
    defenders: int
    attackers: int
    total_minutes: int
