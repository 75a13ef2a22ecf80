from __future__ import annotations

import sqlite3

MIGRATIONS: list[tuple[int, str]] = [
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS schema_migrations (
            version INTEGER PRIMARY KEY,
            applied_at TEXT DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS rulesets (
            ruleset_id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            config_json TEXT NOT NULL,
            is_active INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS fixtures (
            fixture_id TEXT PRIMARY KEY,
            season TEXT,
            opponent TEXT NOT NULL,
            fixture_date TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'draft',
            locked_at TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS fixture_players (
            fixture_id TEXT NOT NULL,
            player TEXT NOT NULL,
            roster_order INTEGER NOT NULL,
            PRIMARY KEY (fixture_id, player),
            FOREIGN KEY (fixture_id) REFERENCES fixtures(fixture_id) ON DELETE CASCADE
        );

        CREATE TABLE IF NOT EXISTS lineup_quarters (
            fixture_id TEXT NOT NULL,
            quarter_number INTEGER NOT NULL CHECK (quarter_number >= 1),
            slot_index INTEGER NOT NULL,
            wave TEXT,
            position TEXT NOT NULL CHECK (position IN ('GK', 'DEF', 'ATT')),
            player TEXT NOT NULL,
            minutes INTEGER NOT NULL CHECK (minutes > 0),
            PRIMARY KEY (fixture_id, quarter_number, slot_index),
            FOREIGN KEY (fixture_id) REFERENCES fixtures(fixture_id) ON DELETE CASCADE
        );

        CREATE INDEX IF NOT EXISTS lineup_quarters_fixture_idx ON lineup_quarters (fixture_id, quarter_number);
        """,
    ),
    (
        2,
        """
        CREATE TABLE IF NOT EXISTS player_match_stats (
            fixture_id TEXT NOT NULL,
            player TEXT NOT NULL,
            total_minutes INTEGER NOT NULL DEFAULT 0,
            goalkeeper_quarters INTEGER NOT NULL DEFAULT 0,
            PRIMARY KEY (fixture_id, player),
            FOREIGN KEY (fixture_id) REFERENCES fixtures(fixture_id) ON DELETE CASCADE
        );

        CREATE TABLE IF NOT EXISTS allocation_warnings (
            fixture_id TEXT NOT NULL,
            seq INTEGER NOT NULL,
            message TEXT NOT NULL,
            PRIMARY KEY (fixture_id, seq),
            FOREIGN KEY (fixture_id) REFERENCES fixtures(fixture_id) ON DELETE CASCADE
        );
        """,
    ),
]


class MigrationRunner:
    """Runs the numbered schema scripts a database has not recorded yet, oldest first."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def applied_versions(self) -> set[int]:
        tracked = self.conn.execute(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'schema_migrations'"
        ).fetchone()
        if tracked is None:
            return set()
        return {version for (version,) in self.conn.execute("SELECT version FROM schema_migrations")}

    def pending(self) -> list[tuple[int, str]]:
        applied = self.applied_versions()
        return [(version, script) for version, script in MIGRATIONS if version not in applied]

    def apply(self) -> list[int]:
        versions: list[int] = []
        for version, script in self.pending():
            # One commit per version.
            self.conn.executescript(script)
            self.conn.execute("INSERT INTO schema_migrations(version) VALUES (?)", (version,))
            self.conn.commit()
            versions.append(version)
        return versions
