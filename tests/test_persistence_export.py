from __future__ import annotations

import sqlite3
from pathlib import Path

import duckdb
import pytest

from ffm.allocation import allocate, swap_with_sub
from ffm.contracts import FairnessRules, MatchConfig
from ffm.core import FixtureLockedError, FixtureNotFound, seeded_random
from ffm.export import ExportService
from ffm.persistence import AllocationStore, MigrationRunner, SeasonAnalytics
from tests.helpers import ROSTER_10, fair_allocation


def _store(tmp_path: Path) -> AllocationStore:
    store = AllocationStore(tmp_path / "ffm.sqlite")
    store.initialize_schema()
    return store


def test_migrations_apply_once(tmp_path: Path):
    with sqlite3.connect(tmp_path / "m.sqlite") as conn:
        runner = MigrationRunner(conn)
        assert runner.apply() == [1, 2]
        assert runner.apply() == []
        assert runner.applied_versions() == {1, 2}


def test_pending_migrations_shrink_as_versions_are_recorded(tmp_path: Path):
    with sqlite3.connect(tmp_path / "p.sqlite") as conn:
        runner = MigrationRunner(conn)
        assert runner.applied_versions() == set()
        assert [version for version, _ in runner.pending()] == [1, 2]
        runner.apply()
        assert runner.pending() == []


def test_allocation_round_trips_through_lineup_rows(tmp_path: Path):
    store = _store(tmp_path)
    fixture_id = store.create_fixture("Rovers", "2026-09-12", ROSTER_10, season="2026")
    allocation = fair_allocation()

    store.save_allocation(fixture_id, allocation)

    assert store.load_roster(fixture_id) == ROSTER_10
    assert store.load_allocation(fixture_id) == allocation
    assert store.get_fixture(fixture_id).status == "allocated"
    with store.connect() as conn:
        rows = conn.execute("SELECT COUNT(*) FROM lineup_quarters WHERE fixture_id = ?", (fixture_id,)).fetchone()[0]
        gk = conn.execute(
            "SELECT goalkeeper_quarters FROM player_match_stats WHERE fixture_id = ? AND player = 'A'",
            (fixture_id,),
        ).fetchone()[0]
    assert rows == 36
    assert gk == 1


def test_saving_again_replaces_the_lineup(tmp_path: Path):
    store = _store(tmp_path)
    fixture_id = store.create_fixture("Rovers", "2026-09-12", ROSTER_10)
    store.save_allocation(fixture_id, fair_allocation())

    lenient = MatchConfig(fairness=FairnessRules(max_variance_minutes=10))
    edited = swap_with_sub(fair_allocation(), 4, 2, "C", ROSTER_10, config=lenient)
    store.save_allocation(fixture_id, edited)

    loaded = store.load_allocation(fixture_id)
    assert loaded.summary["C"] == 25
    assert loaded == edited


def test_warnings_are_persisted(tmp_path: Path):
    store = _store(tmp_path)
    roster = [f"P{i}" for i in range(1, 8)]
    config = MatchConfig(fairness=FairnessRules(max_variance_minutes=0), max_attempts=2)
    allocation = allocate(roster, config, random_source=seeded_random(4))
    fixture_id = store.create_fixture("United", "2026-09-19", roster)

    store.save_allocation(fixture_id, allocation)

    assert store.load_allocation(fixture_id).warnings == allocation.warnings


def test_locked_fixture_lineup_cannot_be_replaced(tmp_path: Path):
    store = _store(tmp_path)
    fixture_id = store.create_fixture("Rovers", "2026-09-12", ROSTER_10)
    store.save_allocation(fixture_id, fair_allocation())

    locked = store.lock_fixture(fixture_id)
    assert locked.status == "locked"
    assert locked.locked_at is not None
    assert store.lock_fixture(fixture_id).locked_at == locked.locked_at

    with pytest.raises(FixtureLockedError):
        store.save_allocation(fixture_id, fair_allocation())


def test_unknown_fixture(tmp_path: Path):
    store = _store(tmp_path)
    with pytest.raises(FixtureNotFound):
        store.load_allocation("fx_missing")


def test_fixtures_listed_by_date_and_season(tmp_path: Path):
    store = _store(tmp_path)
    later = store.create_fixture("City", "2026-10-03", ROSTER_10, season="2026")
    earlier = store.create_fixture("Rovers", "2026-09-12", ROSTER_10, season="2026")
    store.create_fixture("Athletic", "2025-09-01", ROSTER_10, season="2025")

    assert [f.fixture_id for f in store.list_fixtures("2026")] == [earlier, later]
    assert len(store.list_fixtures()) == 3


def test_active_ruleset(tmp_path: Path):
    store = _store(tmp_path)
    assert store.active_config() == MatchConfig()

    first = MatchConfig(fairness=FairnessRules(max_variance_minutes=10))
    second = MatchConfig(quarter_count=2)
    store.save_ruleset("lenient", first)
    store.save_ruleset("short", second)
    assert store.active_config() == second

    store.save_ruleset("draft", first, activate=False)
    assert store.active_config() == second


def test_season_summary_aggregates_fixtures(tmp_path: Path):
    store = _store(tmp_path)
    for opponent, date in (("Rovers", "2026-09-12"), ("City", "2026-09-19")):
        fixture_id = store.create_fixture(opponent, date, ROSTER_10 + ["K"], season="2026")
        store.save_allocation(fixture_id, fair_allocation())

    analytics = SeasonAnalytics(tmp_path / "analytics.duckdb")
    assert analytics.refresh_from_store(store.db_path) == 2

    rows = {r.player: r for r in analytics.player_season_summary("2026")}
    assert rows["A"].appearances == 2
    assert rows["A"].total_minutes == 40
    assert rows["A"].goalkeeper_quarters == 2
    assert analytics.player_season_summary("1999") == []


def test_export_csv_parquet_row_count_parity(tmp_path: Path):
    store = _store(tmp_path)
    fixture_id = store.create_fixture("Rovers", "2026-09-12", ROSTER_10)
    store.save_allocation(fixture_id, fair_allocation())
    analytics = SeasonAnalytics(tmp_path / "analytics.duckdb")
    analytics.refresh_from_store(store.db_path)

    outputs = ExportService(analytics.db_path).export_datasets(tmp_path / "exports")
    csv_files = [p for p in outputs if p.suffix == ".csv"]
    parquet_files = [p for p in outputs if p.suffix == ".parquet"]
    assert len(csv_files) == len(parquet_files) == 3

    with duckdb.connect() as conn:
        for csv_path in csv_files:
            parquet_path = csv_path.with_suffix(".parquet")
            csv_count = conn.execute(f"SELECT COUNT(*) FROM read_csv_auto('{csv_path.as_posix()}')").fetchone()[0]
            parquet_count = conn.execute(f"SELECT COUNT(*) FROM parquet_scan('{parquet_path.as_posix()}')").fetchone()[0]
            assert csv_count == parquet_count
