from __future__ import annotations

import hashlib
import random
from typing import Any, Sequence

from ffm.contracts import RandomSource


class SeedableRandomSource(RandomSource):
    """Tie-break randomness for the allocator; seed it to make attempts reproducible."""

    def __init__(self, seed: int | None = None) -> None:
        self._seed = seed
        self._rng = random.Random(seed)

    def choice(self, items: Sequence[Any]) -> Any:
        if not items:
            raise ValueError("cannot choose from an empty candidate list")
        return self._rng.choice(items)

    def spawn(self, substream_id: str) -> RandomSource:
        # Unseeded parents hand out unseeded children; seeded parents derive a stable child seed.
        if self._seed is None:
            return SeedableRandomSource(seed=None)
        digest = hashlib.sha256(f"{self._seed}:{substream_id}".encode("utf-8")).hexdigest()
        return SeedableRandomSource(seed=int(digest[:16], 16))


def allocation_random() -> SeedableRandomSource:
    return SeedableRandomSource(seed=None)


def seeded_random(seed: int) -> SeedableRandomSource:
    return SeedableRandomSource(seed=seed)
