# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Batted-ball resolution: what happened once the ball was put in play.

Every call consumes exactly two draws from the shared stream: one for the
outcome, then one for the batted-ball type.
"""

from __future__ import annotations

from models import BattedBall, BipOutcome, BipType
from randomness import RandomSource

# Average batter vs. average pitcher (power 50, stuff 50). Sums to 1.0.
BASE_RATES: dict[BipOutcome, float] = {
    BipOutcome.OUT: 0.702,
    BipOutcome.SINGLE: 0.195,
    BipOutcome.DOUBLE: 0.060,
    BipOutcome.TRIPLE: 0.004,
    BipOutcome.HOME_RUN: 0.039,
}

POWER_FACTOR = 0.30
STUFF_FACTOR = 0.20

POWER_WEIGHTS: dict[BipOutcome, float] = {
    BipOutcome.HOME_RUN: 2.0,
    BipOutcome.DOUBLE: 1.0,
    BipOutcome.TRIPLE: 0.3,
}

# Share of the extra-base boost taken from singles and outs
SINGLE_SHARE = 0.4
OUT_SHARE = 0.6

GROUND_BALL_CUTOFF = 0.5
FLY_BALL_CUTOFF = 0.9

_HIT_OUTCOMES = (BipOutcome.SINGLE, BipOutcome.DOUBLE, BipOutcome.TRIPLE, BipOutcome.HOME_RUN)


def outcome_distribution(power: int, stuff: int) -> dict[BipOutcome, float]:
    """Return the normalized outcome probabilities for a batter/pitcher pair."""
    probs = dict(BASE_RATES)

    power_delta = power / 100 - 0.5
    total_boost = 0.0
    for outcome, weight in POWER_WEIGHTS.items():
        boost = power_delta * POWER_FACTOR * weight
        probs[outcome] += boost
        total_boost += boost
    probs[BipOutcome.SINGLE] -= total_boost * SINGLE_SHARE
    probs[BipOutcome.OUT] -= total_boost * OUT_SHARE

    out_boost = (stuff / 100 - 0.5) * STUFF_FACTOR
    total_hits = sum(probs[o] for o in _HIT_OUTCOMES)
    probs[BipOutcome.OUT] += out_boost
    if total_hits > 0:
        reduction = out_boost / total_hits
        for outcome in _HIT_OUTCOMES:
            probs[outcome] -= probs[outcome] * reduction

    probs = {o: max(0.0, p) for o, p in probs.items()}
    total = sum(probs.values())
    if total > 0:
        probs = {o: p / total for o, p in probs.items()}
    return probs


def _sample_outcome(probs: dict[BipOutcome, float], roll: float) -> BipOutcome:
    cumulative = 0.0
    for outcome in (BipOutcome.OUT, BipOutcome.SINGLE, BipOutcome.DOUBLE, BipOutcome.TRIPLE):
        cumulative += probs[outcome]
        if roll < cumulative:
            return outcome
    return BipOutcome.HOME_RUN


def batted_ball_type(roll: float) -> BipType:
    if roll < GROUND_BALL_CUTOFF:
        return BipType.GROUND_BALL
    if roll < FLY_BALL_CUTOFF:
        return BipType.FLY_BALL
    return BipType.LINE_DRIVE


def resolve_ball_in_play(power: int, stuff: int, rng: RandomSource) -> BattedBall:
    """Draw an outcome and a batted-ball type for a ball put in play."""
    probs = outcome_distribution(power, stuff)
    outcome = _sample_outcome(probs, rng.next_double())
    bip_type = batted_ball_type(rng.next_double())
    return BattedBall(outcome=outcome, bip_type=bip_type)
