# /// script
# requires-python = ">=3.12"
# dependencies = []
# ///
"""Seeded sequential draw stream shared by every stage of one game."""

from __future__ import annotations

import random

from errors import ConsistencyError


class RandomSource:
    """A single seeded stream of uniform draws in [0, 1).

    One instance is created per game by the orchestrator and passed
    explicitly to every consumer. The stream refuses to be copied so a
    second consumer can never replay or fork it.
    """

    def __init__(self, seed: int):
        self.seed = seed
        self.draws = 0
        self._rng = random.Random(seed)

    def next_double(self) -> float:
        self.draws += 1
        return self._rng.random()

    def __copy__(self):
        raise ConsistencyError(
            "RandomSource cannot be copied; the stream is owned by one game",
            context={"seed": self.seed, "draws": self.draws},
        )

    def __deepcopy__(self, memo):
        raise ConsistencyError(
            "RandomSource cannot be copied; the stream is owned by one game",
            context={"seed": self.seed, "draws": self.draws},
        )

    def __repr__(self) -> str:
        return f"RandomSource(seed={self.seed}, draws={self.draws})"
