from .types import (
    Allocation,
    ConfigurationError,
    FairnessRules,
    MatchConfig,
    PlayerSlot,
    Position,
    PositionCounts,
    PositionDistribution,
    QuarterAllocation,
    RandomSource,
    VarianceStats,
    Wave,
    WaveDurations,
)

__all__ = [
    "Allocation",
    "ConfigurationError",
    "FairnessRules",
    "MatchConfig",
    "PlayerSlot",
    "Position",
    "PositionCounts",
    "PositionDistribution",
    "QuarterAllocation",
    "RandomSource",
    "VarianceStats",
    "Wave",
    "WaveDurations",
]
