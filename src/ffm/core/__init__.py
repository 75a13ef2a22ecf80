from .errors import (
    AllocationError,
    CannotSwapGoalkeeper,
    ConfigurationError,
    ConsecutiveBenchViolation,
    FairnessViolation,
    FixtureLockedError,
    FixtureNotFound,
    InvalidManualGoalkeeper,
    InvalidRoster,
    InvalidRosterSize,
    InvalidSlotIndex,
    PlayerAlreadyPlaying,
    PlayerNotInRoster,
    QuarterNotFound,
)
from .ids import new_fixture_id, new_ruleset_id, utc_timestamp
from .randomness import SeedableRandomSource, allocation_random, seeded_random

__all__ = [
    "AllocationError",
    "CannotSwapGoalkeeper",
    "ConfigurationError",
    "ConsecutiveBenchViolation",
    "FairnessViolation",
    "FixtureLockedError",
    "FixtureNotFound",
    "InvalidManualGoalkeeper",
    "InvalidRoster",
    "InvalidRosterSize",
    "InvalidSlotIndex",
    "PlayerAlreadyPlaying",
    "PlayerNotInRoster",
    "QuarterNotFound",
    "SeedableRandomSource",
    "allocation_random",
    "new_fixture_id",
    "new_ruleset_id",
    "seeded_random",
    "utc_timestamp",
]
