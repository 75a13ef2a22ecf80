from __future__ import annotations

from ffm.contracts import ConfigurationError


class AllocationError(ValueError):
    """Base class for every rejected allocation input or edit."""


class InvalidRosterSize(AllocationError):
    def __init__(self, size: int, minimum: int, maximum: int) -> None:
        if size < minimum:
            message = f"need at least {minimum} players for a match, got {size}"
        else:
            message = f"maximum {maximum} players supported, got {size}"
        super().__init__(message)
        self.size = size


class InvalidRoster(AllocationError):
    pass


class InvalidManualGoalkeeper(AllocationError):
    def __init__(self, quarter: int, player: str | None, reason: str = "is not in the roster") -> None:
        super().__init__(f"manual GK for Q{quarter} ({player}) {reason}")
        self.quarter = quarter
        self.player = player


class QuarterNotFound(AllocationError):
    def __init__(self, quarter: int) -> None:
        super().__init__(f"quarter {quarter} not found")
        self.quarter = quarter


class InvalidSlotIndex(AllocationError):
    def __init__(self, quarter: int, slot_index: int) -> None:
        super().__init__(f"invalid slot index {slot_index} for quarter {quarter}")
        self.quarter = quarter
        self.slot_index = slot_index


class CannotSwapGoalkeeper(AllocationError):
    def __init__(self, quarter: int) -> None:
        super().__init__(f"cannot swap GK positions in quarter {quarter}")
        self.quarter = quarter


class PlayerAlreadyPlaying(AllocationError):
    def __init__(self, player: str, quarter: int) -> None:
        super().__init__(f"player {player} is already playing quarter {quarter}")
        self.player = player
        self.quarter = quarter


class PlayerNotInRoster(AllocationError):
    def __init__(self, player: str) -> None:
        super().__init__(f"player {player} is not in the roster")
        self.player = player


class FairnessViolation(AllocationError):
    def __init__(self, variance: int, max_variance: int) -> None:
        super().__init__(
            f"edit would create too much variance ({variance} minutes); "
            f"maximum allowed difference is {max_variance} minutes"
        )
        self.variance = variance
        self.max_variance = max_variance


class ConsecutiveBenchViolation(AllocationError):
    pass


class FixtureNotFound(RuntimeError):
    def __init__(self, fixture_id: str) -> None:
        super().__init__(f"fixture {fixture_id} not found")
        self.fixture_id = fixture_id


class FixtureLockedError(RuntimeError):
    def __init__(self, fixture_id: str) -> None:
        super().__init__(f"fixture {fixture_id} is locked; lineup can no longer be replaced")
        self.fixture_id = fixture_id


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
]
