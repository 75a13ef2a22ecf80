from __future__ import annotations

import logging
from pathlib import Path

import duckdb

logger = logging.getLogger(__name__)

# mart table -> file stem under the export directory
EXPORTED_MARTS = {
    "mart_fixtures": "fixtures",
    "mart_lineup_slots": "lineup_slots",
    "mart_player_match_stats": "player_match_stats",
}

COPY_OPTIONS = {
    ".csv": "(HEADER, DELIMITER ',')",
    ".parquet": "(FORMAT PARQUET)",
}


class ExportService:
    """Writes every season mart as a CSV file and a Parquet file side by side."""

    def __init__(self, analytics_db: Path) -> None:
        self.analytics_db = analytics_db

    def export_datasets(self, output_dir: Path) -> list[Path]:
        output_dir.mkdir(parents=True, exist_ok=True)
        targets = [
            (table, (output_dir / stem).with_suffix(suffix), options)
            for table, stem in EXPORTED_MARTS.items()
            for suffix, options in COPY_OPTIONS.items()
        ]
        with duckdb.connect(str(self.analytics_db)) as conn:
            for table, target, options in targets:
                conn.execute(f"COPY {table} TO '{target.as_posix()}' {options}")
        logger.info("exported %d season marts to %s", len(EXPORTED_MARTS), output_dir)
        return [target for _, target, _ in targets]
