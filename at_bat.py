# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Pitch-by-pitch plate appearance simulation.

Each pitch consumes draws from the shared stream in a fixed order:

    1. hit-by-pitch check
    2. zone (in / out of the strike zone)
    3. swing decision
    4. contact, only when the batter swings
    5. foul vs. in play, only on contact

The order never varies, so a seed always reproduces the same pitches.
"""

from __future__ import annotations

import logging

from errors import SafetyCapExceededError
from models import AtBatResult, AtBatTerminal, Batter, Pitcher, PitchOutcome
from randomness import RandomSource

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Tuning constants
# ---------------------------------------------------------------------------

HBP_RATE = 0.01

ZONE_BASE = 0.575
ZONE_CONTROL_SPAN = 0.14  # full swing over 50 rating points

SWING_IN_ZONE = 0.72
CHASE_BASE = 0.228
CHASE_PATIENCE_SPAN = 0.22

CONTACT_BASE = 0.78
CONTACT_PER_POINT = 0.002
STUFF_PER_POINT = 0.002

FOUL_SHARE_TWO_STRIKES = 0.58
FOUL_SHARE = 0.43

# (balls, strikes) -> contact adjustment
COUNT_CONTACT_ADJUSTMENT: dict[tuple[int, int], float] = {
    (0, 1): -0.03,
    (0, 2): -0.12,
    (1, 0): 0.02,
    (2, 0): 0.05,
    (3, 0): 0.08,
    (3, 2): -0.03,
}

DEFAULT_MAX_PITCHES = 50


def _clamp(v: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, v))


class AtBatEngine:
    """Simulates one plate appearance at a time against the shared stream."""

    def __init__(self, rng: RandomSource, max_pitches: int = DEFAULT_MAX_PITCHES):
        self.rng = rng
        self.max_pitches = max_pitches

    # -------------------------------------------------------------------
    # Probability helpers
    # -------------------------------------------------------------------

    def _strike_zone_probability(self, pitcher: Pitcher) -> float:
        control = pitcher.ratings.control
        return _clamp(ZONE_BASE + (control - 50) * ZONE_CONTROL_SPAN / 50)

    def _swing_probability(self, batter: Batter, in_zone: bool) -> float:
        if in_zone:
            return SWING_IN_ZONE
        patience = batter.ratings.patience
        return _clamp(CHASE_BASE - (patience - 50) * CHASE_PATIENCE_SPAN / 50)

    def _contact_probability(self, batter: Batter, pitcher: Pitcher,
                             balls: int, strikes: int) -> float:
        """Probability of touching the ball on a swing at this count."""
        rate = (CONTACT_BASE
                + (batter.ratings.contact - 50) * CONTACT_PER_POINT
                - (pitcher.ratings.stuff - 50) * STUFF_PER_POINT)
        rate += COUNT_CONTACT_ADJUSTMENT.get((balls, strikes), 0.0)
        return _clamp(rate)

    def _foul_probability(self, strikes: int) -> float:
        return FOUL_SHARE_TWO_STRIKES if strikes >= 2 else FOUL_SHARE

    # -------------------------------------------------------------------
    # Pitch resolution
    # -------------------------------------------------------------------

    def resolve_pitch(self, batter: Batter, pitcher: Pitcher,
                      balls: int, strikes: int) -> PitchOutcome:
        """Resolve a single pitch at the given count."""
        if self.rng.next_double() < HBP_RATE:
            return PitchOutcome.HIT_BY_PITCH

        in_zone = self.rng.next_double() < self._strike_zone_probability(pitcher)
        swings = self.rng.next_double() < self._swing_probability(batter, in_zone)

        if not swings:
            return PitchOutcome.CALLED_STRIKE if in_zone else PitchOutcome.BALL

        contact = self._contact_probability(batter, pitcher, balls, strikes)
        if self.rng.next_double() >= contact:
            return PitchOutcome.SWINGING_STRIKE

        if self.rng.next_double() < self._foul_probability(strikes):
            return PitchOutcome.FOUL
        return PitchOutcome.IN_PLAY

    def simulate(self, pitcher: Pitcher, batter: Batter) -> AtBatResult:
        """Throw pitches until the plate appearance reaches a terminal outcome.

        Raises:
            SafetyCapExceededError: the pitch cap was reached without a
                terminal outcome.
        """
        balls = 0
        strikes = 0
        pitches: list[PitchOutcome] = []

        while len(pitches) < self.max_pitches:
            outcome = self.resolve_pitch(batter, pitcher, balls, strikes)
            pitches.append(outcome)

            terminal = None
            if outcome is PitchOutcome.HIT_BY_PITCH:
                terminal = AtBatTerminal.HIT_BY_PITCH
            elif outcome is PitchOutcome.IN_PLAY:
                terminal = AtBatTerminal.BALL_IN_PLAY
            elif outcome is PitchOutcome.BALL:
                balls += 1
                if balls == 4:
                    terminal = AtBatTerminal.WALK
            elif outcome is PitchOutcome.FOUL:
                if strikes < 2:
                    strikes += 1
            else:
                strikes += 1
                if strikes == 3:
                    terminal = AtBatTerminal.STRIKEOUT

            if terminal is not None:
                logger.debug("%s vs %s: %s on %d-%d after %d pitches", batter.name,
                             pitcher.name, terminal.value, balls, strikes, len(pitches))
                return AtBatResult(terminal=terminal, balls=balls, strikes=strikes,
                                   pitches=tuple(pitches))

        raise SafetyCapExceededError(
            f"Plate appearance exceeded {self.max_pitches} pitches",
            context={"seed": self.rng.seed, "batter": batter.name,
                     "pitcher": pitcher.name, "count": f"{balls}-{strikes}"},
        )
