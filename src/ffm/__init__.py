"""Fair playing-time allocation for small-sided football matches."""

from ffm.allocation import (
    MatchAllocator,
    allocate,
    calculate_variance,
    get_player_quarter_breakdown,
    get_subs_for_quarter,
    swap_positions,
    swap_with_sub,
    update_slot,
    validate_allocation,
)
from ffm.contracts import Allocation, MatchConfig, PlayerSlot, Position, QuarterAllocation, Wave

__version__ = "1.0.0"

__all__ = [
    "Allocation",
    "MatchAllocator",
    "MatchConfig",
    "PlayerSlot",
    "Position",
    "QuarterAllocation",
    "Wave",
    "allocate",
    "calculate_variance",
    "get_player_quarter_breakdown",
    "get_subs_for_quarter",
    "swap_positions",
    "swap_with_sub",
    "update_slot",
    "validate_allocation",
]
