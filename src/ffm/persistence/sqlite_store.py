from __future__ import annotations

import json
import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from ffm.allocation.validation import compute_summary
from ffm.contracts import Allocation, MatchConfig, PlayerSlot, Position, QuarterAllocation, Wave
from ffm.core import FixtureLockedError, FixtureNotFound, new_fixture_id, new_ruleset_id, utc_timestamp
from ffm.persistence.migrations import MigrationRunner
from ffm.rules import config_from_mapping, config_to_mapping, default_match_config

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FixtureRecord:
    fixture_id: str
    season: str | None
    opponent: str
    fixture_date: str
    status: str
    locked_at: str | None


class AllocationStore:
    """Authoritative sqlite storage for fixtures, their lineups and rulesets."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def initialize_schema(self) -> None:
        with self.connect() as conn:
            applied = MigrationRunner(conn).apply()
        if applied:
            logger.info("applied schema migrations %s to %s", applied, self.db_path)

    def create_fixture(
        self,
        opponent: str,
        fixture_date: str,
        roster: Sequence[str],
        season: str | None = None,
    ) -> str:
        fixture_id = new_fixture_id()
        stamp = utc_timestamp()
        with self.connect() as conn:
            conn.execute(
                """
                INSERT INTO fixtures(fixture_id, season, opponent, fixture_date, status, created_at, updated_at)
                VALUES (?, ?, ?, ?, 'draft', ?, ?)
                """,
                (fixture_id, season, opponent, fixture_date, stamp, stamp),
            )
            conn.executemany(
                "INSERT INTO fixture_players(fixture_id, player, roster_order) VALUES (?, ?, ?)",
                [(fixture_id, player, idx) for idx, player in enumerate(roster)],
            )
        return fixture_id

    def get_fixture(self, fixture_id: str) -> FixtureRecord:
        with self.connect() as conn:
            row = conn.execute(
                "SELECT fixture_id, season, opponent, fixture_date, status, locked_at FROM fixtures WHERE fixture_id = ?",
                (fixture_id,),
            ).fetchone()
        if row is None:
            raise FixtureNotFound(fixture_id)
        return FixtureRecord(*row)

    def list_fixtures(self, season: str | None = None) -> list[FixtureRecord]:
        query = "SELECT fixture_id, season, opponent, fixture_date, status, locked_at FROM fixtures"
        params: tuple = ()
        if season is not None:
            query += " WHERE season = ?"
            params = (season,)
        query += " ORDER BY fixture_date, created_at"
        with self.connect() as conn:
            return [FixtureRecord(*row) for row in conn.execute(query, params).fetchall()]

    def load_roster(self, fixture_id: str) -> list[str]:
        self.get_fixture(fixture_id)
        with self.connect() as conn:
            rows = conn.execute(
                "SELECT player FROM fixture_players WHERE fixture_id = ? ORDER BY roster_order",
                (fixture_id,),
            ).fetchall()
        return [r[0] for r in rows]

    def save_allocation(self, fixture_id: str, allocation: Allocation) -> None:
        fixture = self.get_fixture(fixture_id)
        if fixture.locked_at is not None:
            raise FixtureLockedError(fixture_id)

        lineup_rows = [
            (
                fixture_id,
                q.quarter,
                idx,
                slot.wave.value if slot.wave is not None else None,
                slot.position.value,
                slot.player,
                slot.minutes,
            )
            for q in allocation.quarters
            for idx, slot in enumerate(q.slots)
        ]
        gk_quarters: dict[str, int] = {}
        for q in allocation.quarters:
            for slot in q.slots:
                if slot.position is Position.GK:
                    gk_quarters[slot.player] = gk_quarters.get(slot.player, 0) + 1
        stat_rows = [
            (fixture_id, player, minutes, gk_quarters.get(player, 0))
            for player, minutes in allocation.summary.items()
        ]

        with self.connect() as conn:
            conn.execute("DELETE FROM lineup_quarters WHERE fixture_id = ?", (fixture_id,))
            conn.execute("DELETE FROM player_match_stats WHERE fixture_id = ?", (fixture_id,))
            conn.execute("DELETE FROM allocation_warnings WHERE fixture_id = ?", (fixture_id,))
            conn.executemany(
                """
                INSERT INTO lineup_quarters(fixture_id, quarter_number, slot_index, wave, position, player, minutes)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                lineup_rows,
            )
            conn.executemany(
                """
                INSERT INTO player_match_stats(fixture_id, player, total_minutes, goalkeeper_quarters)
                VALUES (?, ?, ?, ?)
                """,
                stat_rows,
            )
            conn.executemany(
                "INSERT INTO allocation_warnings(fixture_id, seq, message) VALUES (?, ?, ?)",
                [(fixture_id, seq, message) for seq, message in enumerate(allocation.warnings)],
            )
            conn.execute(
                "UPDATE fixtures SET status = 'allocated', updated_at = ? WHERE fixture_id = ?",
                (utc_timestamp(), fixture_id),
            )
        logger.info("saved %d lineup slots for fixture %s", len(lineup_rows), fixture_id)

    def load_allocation(self, fixture_id: str) -> Allocation:
        roster = self.load_roster(fixture_id)
        with self.connect() as conn:
            rows = conn.execute(
                """
                SELECT quarter_number, wave, position, player, minutes
                FROM lineup_quarters
                WHERE fixture_id = ?
                ORDER BY quarter_number, slot_index
                """,
                (fixture_id,),
            ).fetchall()
            warnings = [
                r[0]
                for r in conn.execute(
                    "SELECT message FROM allocation_warnings WHERE fixture_id = ? ORDER BY seq",
                    (fixture_id,),
                ).fetchall()
            ]

        by_quarter: dict[int, list[PlayerSlot]] = {}
        for quarter_number, wave, position, player, minutes in rows:
            by_quarter.setdefault(quarter_number, []).append(
                PlayerSlot(
                    player=player,
                    position=Position(position),
                    minutes=minutes,
                    wave=Wave(wave) if wave is not None else None,
                )
            )
        quarters = tuple(QuarterAllocation(quarter=q, slots=tuple(slots)) for q, slots in sorted(by_quarter.items()))
        return Allocation(quarters=quarters, summary=compute_summary(quarters, roster), warnings=tuple(warnings))

    def lock_fixture(self, fixture_id: str) -> FixtureRecord:
        fixture = self.get_fixture(fixture_id)
        if fixture.locked_at is None:
            with self.connect() as conn:
                stamp = utc_timestamp()
                conn.execute(
                    "UPDATE fixtures SET status = 'locked', locked_at = ?, updated_at = ? WHERE fixture_id = ?",
                    (stamp, stamp, fixture_id),
                )
        return self.get_fixture(fixture_id)

    def save_ruleset(self, name: str, config: MatchConfig, activate: bool = True) -> str:
        config.validate()
        ruleset_id = new_ruleset_id()
        with self.connect() as conn:
            if activate:
                conn.execute("UPDATE rulesets SET is_active = 0")
            conn.execute(
                "INSERT INTO rulesets(ruleset_id, name, config_json, is_active, created_at) VALUES (?, ?, ?, ?, ?)",
                (ruleset_id, name, json.dumps(config_to_mapping(config)), int(activate), utc_timestamp()),
            )
        return ruleset_id

    def active_config(self) -> MatchConfig:
        with self.connect() as conn:
            row = conn.execute(
                "SELECT config_json FROM rulesets WHERE is_active = 1 ORDER BY created_at DESC LIMIT 1"
            ).fetchone()
        if row is None:
            return default_match_config()
        return config_from_mapping(json.loads(row[0]))
