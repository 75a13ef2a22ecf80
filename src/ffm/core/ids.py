from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4


def utc_timestamp() -> str:
    return datetime.now(UTC).isoformat(timespec="seconds")


def new_fixture_id() -> str:
    return f"fx_{uuid4().hex[:12]}"


def new_ruleset_id() -> str:
    return f"rs_{uuid4().hex[:12]}"
