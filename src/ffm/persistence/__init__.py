from .duckdb_store import PlayerSeasonSummary, SeasonAnalytics
from .migrations import MigrationRunner
from .sqlite_store import AllocationStore, FixtureRecord

__all__ = [
    "AllocationStore",
    "FixtureRecord",
    "MigrationRunner",
    "PlayerSeasonSummary",
    "SeasonAnalytics",
]
