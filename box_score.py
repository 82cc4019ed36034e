# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Box score and line score accumulation.

The scorekeeper emits one batter line and one pitcher line per plate
appearance; ``BoxScore.record`` sums them into per-slot and per-team
totals and keeps the inning-by-inning line score. Text formatting of
these totals is left to callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Optional

from errors import ConsistencyError
from models import GameState, Team

if TYPE_CHECKING:
    from scorekeeper import AppliedPlay


# ---------------------------------------------------------------------------
# In-game stat tracking
# ---------------------------------------------------------------------------

@dataclass
class BatterGameStats:
    ab: int = 0
    hits: int = 0
    singles: int = 0
    doubles: int = 0
    triples: int = 0
    hr: int = 0
    runs: int = 0
    rbi: int = 0
    bb: int = 0
    hbp: int = 0
    k: int = 0
    sf: int = 0
    roe: int = 0
    gidp: int = 0

    @property
    def pa(self) -> int:
        return self.ab + self.bb + self.hbp + self.sf

    def add(self, other: BatterGameStats) -> None:
        for f in fields(self):
            setattr(self, f.name, getattr(self, f.name) + getattr(other, f.name))

    def to_dict(self) -> dict:
        return {
            "PA": self.pa, "AB": self.ab, "H": self.hits, "R": self.runs,
            "RBI": self.rbi, "BB": self.bb, "K": self.k, "HBP": self.hbp,
            "1B": self.singles, "2B": self.doubles, "3B": self.triples,
            "HR": self.hr, "SF": self.sf, "ROE": self.roe, "GIDP": self.gidp,
        }


@dataclass
class PitcherGameStats:
    ip_outs: int = 0  # outs recorded (3 = 1.0 IP)
    batters_faced: int = 0
    hits: int = 0
    runs: int = 0
    earned_runs: int = 0
    bb: int = 0
    hbp: int = 0
    k: int = 0
    hr_allowed: int = 0

    @property
    def innings_pitched(self) -> str:
        """Thirds notation, e.g. '6.2' for 20 outs."""
        return f"{self.ip_outs // 3}.{self.ip_outs % 3}"

    def add(self, other: PitcherGameStats) -> None:
        for f in fields(self):
            setattr(self, f.name, getattr(self, f.name) + getattr(other, f.name))

    def to_dict(self) -> dict:
        return {
            "IP": self.innings_pitched, "BF": self.batters_faced,
            "H": self.hits, "R": self.runs, "ER": self.earned_runs,
            "BB": self.bb, "HBP": self.hbp, "K": self.k, "HR": self.hr_allowed,
        }


# ---------------------------------------------------------------------------
# Line score
# ---------------------------------------------------------------------------

@dataclass
class LineScore:
    """Runs per half-inning. A skipped bottom half is stored as None."""
    away: list[Optional[int]] = field(default_factory=list)
    home: list[Optional[int]] = field(default_factory=list)

    def _innings(self, team: Team) -> list[Optional[int]]:
        return self.away if team is Team.AWAY else self.home

    def open_half(self, team: Team, inning: int) -> None:
        innings = self._innings(team)
        while len(innings) < inning:
            innings.append(0)

    def add_runs(self, team: Team, inning: int, runs: int) -> None:
        self.open_half(team, inning)
        innings = self._innings(team)
        innings[inning - 1] = (innings[inning - 1] or 0) + runs

    def skip_half(self, team: Team, inning: int) -> None:
        self.open_half(team, inning)
        self._innings(team)[inning - 1] = None

    def total(self, team: Team) -> int:
        return sum(r for r in self._innings(team) if r is not None)

    def display(self, team: Team) -> list[str]:
        return ["X" if r is None else str(r) for r in self._innings(team)]

    def to_dict(self) -> dict:
        return {"away": list(self.away), "home": list(self.home)}


# ---------------------------------------------------------------------------
# Box score
# ---------------------------------------------------------------------------

@dataclass
class TeamTotals:
    hits: int = 0
    errors: int = 0
    left_on_base: int = 0


class BoxScore:
    """Accumulates every statistic increment for one game."""

    def __init__(self):
        self.batting: dict[Team, list[BatterGameStats]] = {
            Team.AWAY: [BatterGameStats() for _ in range(9)],
            Team.HOME: [BatterGameStats() for _ in range(9)],
        }
        self.pitching: dict[Team, PitcherGameStats] = {
            Team.AWAY: PitcherGameStats(),
            Team.HOME: PitcherGameStats(),
        }
        self.teams: dict[Team, TeamTotals] = {Team.AWAY: TeamTotals(), Team.HOME: TeamTotals()}
        self.line_score = LineScore()

    def record(self, applied: AppliedPlay, state_before: GameState) -> None:
        offense = state_before.offense
        defense = state_before.defense
        inning = state_before.inning

        self.batting[offense][state_before.batting_index()].add(applied.batter_increment)
        self.pitching[defense].add(applied.pitcher_increment)

        self.line_score.add_runs(offense, inning, applied.runs_credited)
        self.teams[offense].hits += applied.batter_increment.hits
        if applied.resolution.had_error:
            self.teams[defense].errors += 1
        if applied.half_inning_complete:
            self.teams[offense].left_on_base += applied.left_on_base
        if applied.bottom_half_skipped:
            self.line_score.skip_half(Team.HOME, inning)

    def batting_totals(self, team: Team) -> BatterGameStats:
        total = BatterGameStats()
        for line in self.batting[team]:
            total.add(line)
        return total

    def validate(self, final_state: GameState) -> None:
        """Cross-check the accumulated totals against the final score.

        Raises:
            ConsistencyError: any total disagrees with another.
        """
        scores = {Team.AWAY: final_state.away_score, Team.HOME: final_state.home_score}
        for team, score in scores.items():
            opponent = team.opponent
            line_total = self.line_score.total(team)
            if line_total != score:
                raise ConsistencyError(
                    f"{team.value} line score totals {line_total}, final score is {score}")
            allowed = self.pitching[opponent].runs
            if allowed != score:
                raise ConsistencyError(
                    f"{opponent.value} pitching allowed {allowed} runs, "
                    f"{team.value} scored {score}")
            batting = self.batting_totals(team)
            if batting.hits != self.pitching[opponent].hits:
                raise ConsistencyError(
                    f"{team.value} batting hits {batting.hits} != "
                    f"{opponent.value} hits allowed {self.pitching[opponent].hits}")
            if batting.hits != batting.singles + batting.doubles + batting.triples + batting.hr:
                raise ConsistencyError(f"{team.value} hit types do not sum to hits")
            if batting.rbi > score:
                raise ConsistencyError(
                    f"{team.value} credited {batting.rbi} RBI on {score} runs")
            if self.teams[team].hits != batting.hits:
                raise ConsistencyError(f"{team.value} team hits disagree with batting lines")

    def to_dict(self) -> dict:
        return {
            "line_score": self.line_score.to_dict(),
            "batting": {t.value: [b.to_dict() for b in lines] for t, lines in self.batting.items()},
            "pitching": {t.value: p.to_dict() for t, p in self.pitching.items()},
            "teams": {
                t.value: {"R": self.line_score.total(t), "H": tt.hits,
                          "E": tt.errors, "LOB": tt.left_on_base}
                for t, tt in self.teams.items()
            },
        }
