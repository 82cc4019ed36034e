# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Baseball game simulation engine.

Drives one game from the top of the 1st to a final, tie-free result. Each
plate appearance runs through the same pipeline:

    AtBatEngine -> resolve_ball_in_play (balls in play only)
        -> resolve_plate_appearance -> apply_plate_appearance

The simulator owns the game's single seeded random stream and its current
state; every stage receives the stream explicitly. All randomness is seeded
for deterministic replay: the same seed and team names always produce the
same play log and digest.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from advancement import resolve_plate_appearance
from at_bat import AtBatEngine
from ball_in_play import resolve_ball_in_play
from box_score import BoxScore
from config import SimulationSettings, load_settings, require_team_name, resolve_seed
from errors import ConsistencyError, InvalidConfigurationError, SafetyCapExceededError
from lineups import LINEUP_SIZE, DefaultLineupGenerator, LineupGenerator
from models import AtBatTerminal, Batter, GameState, Pitcher, Team
from play_log import PlayLogEntry, compute_log_digest
from randomness import RandomSource
from scorekeeper import AppliedPlay, apply_plate_appearance

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Game result
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GameMetadata:
    home_team: str
    away_team: str
    seed: int


@dataclass(frozen=True)
class GameResult:
    """Everything a finished game produced. Never built for a failed game."""
    metadata: GameMetadata
    final_state: GameState
    play_log: tuple[PlayLogEntry, ...]
    box_score: BoxScore
    home_lineup: tuple[Batter, ...]
    away_lineup: tuple[Batter, ...]
    log_digest: str
    winner: str

    def play_log_lines(self) -> list[str]:
        return [entry.to_log_line() for entry in self.play_log]

    @property
    def plate_appearances(self) -> int:
        return len(self.play_log)

    def to_dict(self) -> dict:
        """Serialize the result for export."""
        return {
            "metadata": {
                "home_team": self.metadata.home_team,
                "away_team": self.metadata.away_team,
                "seed": self.metadata.seed,
            },
            "final_state": self.final_state.model_dump(mode="json"),
            "winner": self.winner,
            "log_digest": self.log_digest,
            "lineups": {
                "home": [b.name for b in self.home_lineup],
                "away": [b.name for b in self.away_lineup],
            },
            "play_log": self.play_log_lines(),
            "box_score": self.box_score.to_dict(),
        }


# ---------------------------------------------------------------------------
# Simulator
# ---------------------------------------------------------------------------

class GameSimulator:
    """Simulates one game between two named teams from a seed.

    Inputs are validated here, before the random stream exists, so a bad
    seed or team name fails without consuming a single draw. ``run`` may be
    called once; the stream is spent after that.
    """

    def __init__(self, home_team: str, away_team: str, seed: Optional[int] = None,
                 lineup_generator: Optional[LineupGenerator] = None,
                 settings: Optional[SimulationSettings] = None):
        self.home_team = require_team_name(home_team, "home")
        self.away_team = require_team_name(away_team, "away")
        self.settings = settings or load_settings()
        self.seed = resolve_seed(seed)
        self.lineup_generator = lineup_generator or DefaultLineupGenerator()
        self.rng = RandomSource(self.seed)
        self.at_bat = AtBatEngine(self.rng, self.settings.max_pitches_per_plate_appearance)
        self._has_run = False

    def _team_name(self, team: Team) -> str:
        return self.home_team if team is Team.HOME else self.away_team

    def _build_lineup(self, team_name: str) -> tuple[Batter, ...]:
        lineup = self.lineup_generator.generate(team_name, self.rng)
        if len(lineup) != LINEUP_SIZE or not all(isinstance(b, Batter) for b in lineup):
            raise InvalidConfigurationError(
                f"Lineup for {team_name} must be exactly {LINEUP_SIZE} batters, "
                f"got {len(lineup)}",
                field="lineup",
                context={"team": team_name, "seed": self.seed},
            )
        return tuple(lineup)

    def _cap_context(self, state: GameState) -> dict:
        return {"seed": self.seed, "inning": state.inning, "half": state.half.value}

    def _play_plate_appearance(self, state: GameState, lineups: dict[Team, tuple[Batter, ...]],
                               pitchers: dict[Team, Pitcher]) -> tuple[PlayLogEntry, AppliedPlay]:
        slot = state.batting_index()
        batter = lineups[state.offense][slot]
        pitcher = pitchers[state.defense]

        try:
            at_bat = self.at_bat.simulate(pitcher, batter)
        except SafetyCapExceededError as exc:
            exc.context.update(self._cap_context(state))
            raise
        batted_ball = None
        if at_bat.terminal is AtBatTerminal.BALL_IN_PLAY:
            batted_ball = resolve_ball_in_play(
                batter.ratings.power, pitcher.ratings.stuff, self.rng)

        resolution = resolve_plate_appearance(
            at_bat.terminal, batted_ball, state.bases, state.outs, self.rng)
        applied = apply_plate_appearance(state, resolution)

        entry = PlayLogEntry(
            inning=state.inning,
            half=state.half,
            batter_name=batter.name,
            batting_slot=slot + 1,
            pitching_team_name=self._team_name(state.defense),
            resolution=resolution,
            is_walkoff=applied.is_walkoff,
            outs_after=applied.outs_after,
            looking=at_bat.struck_out_looking,
            runs_credited=applied.runs_credited,
        )
        return entry, applied

    def run(self) -> GameResult:
        """Play the game to completion.

        Raises:
            ConsistencyError: called a second time, or an internal invariant
                broke mid-game.
            SafetyCapExceededError: the inning, plate-appearance or pitch
                cap was hit.
            InvalidConfigurationError: the lineup generator returned a bad
                lineup.
        """
        if self._has_run:
            raise ConsistencyError(
                "GameSimulator.run() called twice; the random stream is already spent",
                context={"seed": self.seed},
            )
        self._has_run = True

        logger.info("Starting %s at %s (seed %d)", self.away_team, self.home_team, self.seed)

        home_lineup = self._build_lineup(self.home_team)
        away_lineup = self._build_lineup(self.away_team)
        lineups = {Team.HOME: home_lineup, Team.AWAY: away_lineup}
        pitchers = {
            Team.HOME: Pitcher(name=f"{self.home_team} P"),
            Team.AWAY: Pitcher(name=f"{self.away_team} P"),
        }

        state = GameState.new_game()
        box_score = BoxScore()
        play_log: list[PlayLogEntry] = []

        while not state.is_final:
            if state.inning > self.settings.max_innings:
                raise SafetyCapExceededError(
                    f"Game exceeded {self.settings.max_innings} innings",
                    context=self._cap_context(state),
                )
            if len(play_log) >= self.settings.max_plate_appearances:
                raise SafetyCapExceededError(
                    f"Game exceeded {self.settings.max_plate_appearances} plate appearances",
                    context=self._cap_context(state),
                )

            entry, applied = self._play_plate_appearance(state, lineups, pitchers)
            box_score.record(applied, state)
            play_log.append(entry)
            logger.debug("%s | %s", state.situation_display(), entry.to_log_line())
            state = applied.state_after

        box_score.validate(state)
        digest = compute_log_digest(play_log)
        winner = self.home_team if state.home_score > state.away_score else self.away_team

        logger.info("Final: %s %d, %s %d after %d innings, %d PA (digest %s)",
                    self.away_team, state.away_score, self.home_team, state.home_score,
                    state.inning, len(play_log), digest)

        return GameResult(
            metadata=GameMetadata(home_team=self.home_team, away_team=self.away_team,
                                  seed=self.seed),
            final_state=state,
            play_log=tuple(play_log),
            box_score=box_score,
            home_lineup=home_lineup,
            away_lineup=away_lineup,
            log_digest=digest,
            winner=winner,
        )


def simulate_games(home_team: str, away_team: str, seeds: Iterable[int],
                   lineup_generator: Optional[LineupGenerator] = None,
                   settings: Optional[SimulationSettings] = None) -> list[GameResult]:
    """Run one independent game per seed, in order."""
    settings = settings or load_settings()
    return [
        GameSimulator(home_team, away_team, seed, lineup_generator, settings).run()
        for seed in seeds
    ]


# ---------------------------------------------------------------------------
# CLI entry point for testing
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    import sys

    if len(sys.argv) < 3:
        print("usage: simulation.py <home_team> <away_team> [seed]", file=sys.stderr)
        sys.exit(2)

    settings = load_settings()
    logging.basicConfig(level=settings.log_level,
                        format="%(levelname)s %(name)s: %(message)s")

    home, away = sys.argv[1], sys.argv[2]
    seed = int(sys.argv[3]) if len(sys.argv) > 3 else None

    result = GameSimulator(home, away, seed, settings=settings).run()

    for line in result.play_log_lines():
        print(line)
    final = result.final_state
    print("=" * 72)
    print(f"Final: {away} {final.away_score}, {home} {final.home_score}")
    print(f"Seed: {result.metadata.seed}")
    print(f"LogHash: {result.log_digest}")
