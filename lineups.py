# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Batting-order generation.

A lineup generator subclasses ``LineupGenerator`` and implements
``generate(team_name, rng) -> list[Batter]`` returning exactly nine
batters in batting order. The default one shuffles nine average batters
using the game's shared stream; tests inject a fixed one to get
predictable orders without consuming draws.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from models import Batter, BatterRatings
from randomness import RandomSource

LINEUP_SIZE = 9


class LineupGenerator(ABC):
    @abstractmethod
    def generate(self, team_name: str, rng: RandomSource) -> list[Batter]:
        """Return nine batters in batting order."""


def numbered_batters(team_name: str, ratings: BatterRatings | None = None) -> list[Batter]:
    """'<team> 1' through '<team> 9', in that order."""
    ratings = ratings or BatterRatings()
    return [Batter(name=f"{team_name} {i}", ratings=ratings) for i in range(1, LINEUP_SIZE + 1)]


class DefaultLineupGenerator(LineupGenerator):
    """Nine average batters in a Fisher-Yates shuffled order."""

    def generate(self, team_name: str, rng: RandomSource) -> list[Batter]:
        batters = numbered_batters(team_name)
        for i in range(len(batters) - 1, 0, -1):
            j = int(rng.next_double() * (i + 1))
            batters[i], batters[j] = batters[j], batters[i]
        return batters


class FixedLineupGenerator(LineupGenerator):
    """Returns preset lineups without drawing from the stream.

    ``lineups`` maps team name to batters; teams not listed get the
    numbered batters in order.
    """

    def __init__(self, lineups: dict[str, Sequence[Batter]] | None = None):
        self.lineups = {name: list(batters) for name, batters in (lineups or {}).items()}

    def generate(self, team_name: str, rng: RandomSource) -> list[Batter]:
        if team_name in self.lineups:
            return list(self.lineups[team_name])
        return numbered_batters(team_name)
