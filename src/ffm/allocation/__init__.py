from .editor import swap_positions, swap_with_sub, update_slot
from .match import MatchAllocator, allocate
from .quarter import TIE_BREAK_BAND_MINUTES, PlayerCounters, QuarterAllocator
from .validation import (
    calculate_variance,
    compute_summary,
    find_consecutive_bench,
    goalkeepers_without_first_wave,
    validate_allocation,
)
from .views import get_player_quarter_breakdown, get_subs_for_quarter, position_distribution

__all__ = [
    "MatchAllocator",
    "PlayerCounters",
    "QuarterAllocator",
    "TIE_BREAK_BAND_MINUTES",
    "allocate",
    "calculate_variance",
    "compute_summary",
    "find_consecutive_bench",
    "get_player_quarter_breakdown",
    "get_subs_for_quarter",
    "goalkeepers_without_first_wave",
    "position_distribution",
    "swap_positions",
    "swap_with_sub",
    "update_slot",
    "validate_allocation",
]
