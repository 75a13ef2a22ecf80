from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import duckdb

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PlayerSeasonSummary:
    player: str
    appearances: int
    total_minutes: int
    goalkeeper_quarters: int


class SeasonAnalytics:
    """Read-side marts built from the authoritative sqlite store."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def connect(self) -> Any:
        return duckdb.connect(str(self.db_path))

    def initialize_schema(self) -> None:
        with self.connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS mart_fixtures (
                    fixture_id VARCHAR PRIMARY KEY,
                    season VARCHAR,
                    opponent VARCHAR,
                    fixture_date VARCHAR,
                    status VARCHAR
                );

                CREATE TABLE IF NOT EXISTS mart_lineup_slots (
                    fixture_id VARCHAR,
                    quarter_number INTEGER,
                    slot_index INTEGER,
                    wave VARCHAR,
                    position VARCHAR,
                    player VARCHAR,
                    minutes INTEGER,
                    PRIMARY KEY(fixture_id, quarter_number, slot_index)
                );

                CREATE TABLE IF NOT EXISTS mart_player_match_stats (
                    fixture_id VARCHAR,
                    player VARCHAR,
                    total_minutes INTEGER,
                    goalkeeper_quarters INTEGER,
                    PRIMARY KEY(fixture_id, player)
                );
                """
            )

    def refresh_from_store(self, sqlite_path: Path) -> int:
        """Replace every mart with the current contents of the sqlite store; returns fixtures copied."""
        self.initialize_schema()
        with sqlite3.connect(sqlite_path) as sconn, self.connect() as dconn:
            fixtures = sconn.execute(
                "SELECT fixture_id, season, opponent, fixture_date, status FROM fixtures"
            ).fetchall()
            slots = sconn.execute(
                """
                SELECT fixture_id, quarter_number, slot_index, wave, position, player, minutes
                FROM lineup_quarters
                """
            ).fetchall()
            stats = sconn.execute(
                "SELECT fixture_id, player, total_minutes, goalkeeper_quarters FROM player_match_stats"
            ).fetchall()

            self._replace_rows(dconn, "mart_fixtures", fixtures)
            self._replace_rows(dconn, "mart_lineup_slots", slots)
            self._replace_rows(dconn, "mart_player_match_stats", stats)
        logger.info("refreshed season marts: %d fixtures, %d lineup slots", len(fixtures), len(slots))
        return len(fixtures)

    def _replace_rows(self, conn: Any, table: str, rows: list[tuple]) -> None:
        conn.execute(f"DELETE FROM {table}")
        if not rows:
            return
        values_placeholder = ",".join(["?"] * len(rows[0]))
        conn.executemany(f"INSERT INTO {table} VALUES ({values_placeholder})", rows)

    def player_season_summary(self, season: str | None = None) -> list[PlayerSeasonSummary]:
        query = """
            SELECT s.player,
                   COUNT(*) FILTER (WHERE s.total_minutes > 0) AS appearances,
                   SUM(s.total_minutes) AS total_minutes,
                   SUM(s.goalkeeper_quarters) AS goalkeeper_quarters
            FROM mart_player_match_stats s
            JOIN mart_fixtures f ON f.fixture_id = s.fixture_id
        """
        params: list[Any] = []
        if season is not None:
            query += " WHERE f.season = ?"
            params.append(season)
        query += " GROUP BY s.player ORDER BY s.player"
        with self.connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [
            PlayerSeasonSummary(
                player=r[0],
                appearances=int(r[1]),
                total_minutes=int(r[2]),
                goalkeeper_quarters=int(r[3]),
            )
            for r in rows
        ]
