# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Runner advancement: turn an at-bat terminal into a full play resolution.

Everything here is pure. Given the terminal outcome, the batted ball (for
balls in play), the bases and outs before the play, and the shared random
stream, ``resolve_plate_appearance`` returns a validated ``PaResolution``
and touches nothing else. Applying it to the game is the scorekeeper's job.

Draws consumed per terminal:

    strikeout, walk, hit-by-pitch, hits    none
    ball-in-play out                       one per eligible check (DP, SF),
                                           one for the error check, plus one
                                           for the charged fielder on an error
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError

from errors import ConsistencyError
from models import (
    AtBatTerminal,
    BaseState,
    BattedBall,
    BipOutcome,
    BipType,
    OutcomeTag,
    PaFlags,
    PaResolution,
    PaType,
    RunnerMove,
)
from randomness import RandomSource

logger = logging.getLogger(__name__)

DOUBLE_PLAY_RATE = 0.15
SAC_FLY_RATE = 0.30
REACH_ON_ERROR_RATE = 0.05

_OUT_TAGS = {
    BipType.GROUND_BALL: OutcomeTag.GROUNDOUT,
    BipType.FLY_BALL: OutcomeTag.FLYOUT,
    BipType.LINE_DRIVE: OutcomeTag.LINEOUT,
}


def _bases_from(occupied: set[int]) -> BaseState:
    return BaseState(first=1 in occupied, second=2 in occupied, third=3 in occupied)


def _occupied(bases: BaseState) -> list[int]:
    return [b for b in (1, 2, 3) if bases.is_occupied(b)]


def forced_runners(bases: BaseState) -> list[int]:
    """Bases whose runners are forced when the batter takes first, nearest first."""
    forced = []
    for base in (1, 2, 3):
        if not bases.is_occupied(base):
            break
        forced.append(base)
    return forced


def _build(**fields) -> PaResolution:
    try:
        return PaResolution(**fields)
    except ValidationError as exc:
        raise ConsistencyError(
            "Runner advancement produced an impossible resolution",
            context={"errors": exc.errors(include_url=False)},
        ) from exc


# ---------------------------------------------------------------------------
# Non-contact outcomes
# ---------------------------------------------------------------------------

def _resolve_strikeout(bases: BaseState, outs: int) -> PaResolution:
    return _build(
        outs_added=1, runs_scored=0, new_bases=bases,
        pa_type=PaType.STRIKEOUT, tag=OutcomeTag.K,
        bases_before=bases, outs_before=outs,
    )


def _force_advance(bases: BaseState) -> tuple[BaseState, list[RunnerMove], int]:
    """Batter to first, pushing only forced runners up one base."""
    forced = forced_runners(bases)
    moves = [RunnerMove(origin=0, destination=1, forced=True)]
    runs = 0
    occupied = set(_occupied(bases))
    for base in reversed(forced):
        occupied.discard(base)
        if base == 3:
            runs += 1
            moves.append(RunnerMove(origin=3, destination=4, scored=True, forced=True))
        else:
            occupied.add(base + 1)
            moves.append(RunnerMove(origin=base, destination=base + 1, forced=True))
    occupied.add(1)
    return _bases_from(occupied), moves, runs


def _resolve_free_pass(bases: BaseState, outs: int, pa_type: PaType,
                       tag: OutcomeTag) -> PaResolution:
    new_bases, moves, runs = _force_advance(bases)
    return _build(
        outs_added=0, runs_scored=runs, new_bases=new_bases,
        pa_type=pa_type, tag=tag, rbi=runs,
        bases_before=bases, outs_before=outs, moves=tuple(moves),
    )


# ---------------------------------------------------------------------------
# Hits
# ---------------------------------------------------------------------------

_HIT_INFO = {
    BipOutcome.SINGLE: (1, PaType.SINGLE, OutcomeTag.SINGLE),
    BipOutcome.DOUBLE: (2, PaType.DOUBLE, OutcomeTag.DOUBLE),
    BipOutcome.TRIPLE: (3, PaType.TRIPLE, OutcomeTag.TRIPLE),
    BipOutcome.HOME_RUN: (4, PaType.HOME_RUN, OutcomeTag.HR),
}


def _resolve_hit(outcome: BipOutcome, bip_type: BipType, bases: BaseState,
                 outs: int) -> PaResolution:
    """Every runner moves up as many bases as the batter. No holds, no sends."""
    advance, pa_type, tag = _HIT_INFO[outcome]
    moves = []
    occupied: set[int] = set()
    runs = 0
    for base in (3, 2, 1):
        if not bases.is_occupied(base):
            continue
        dest = min(base + advance, 4)
        if dest == 4:
            runs += 1
            moves.append(RunnerMove(origin=base, destination=4, scored=True))
        else:
            occupied.add(dest)
            moves.append(RunnerMove(origin=base, destination=dest))
    if advance == 4:
        runs += 1
        moves.insert(0, RunnerMove(origin=0, destination=4, scored=True))
    else:
        occupied.add(advance)
        moves.insert(0, RunnerMove(origin=0, destination=advance))

    return _build(
        outs_added=0, runs_scored=runs, new_bases=_bases_from(occupied),
        pa_type=pa_type, tag=tag, rbi=runs,
        bases_before=bases, outs_before=outs, moves=tuple(moves),
        batted_ball_type=bip_type,
    )


# ---------------------------------------------------------------------------
# Outs in play
# ---------------------------------------------------------------------------

def _resolve_double_play(bases: BaseState, outs: int, bip_type: BipType) -> PaResolution:
    forced = forced_runners(bases)
    lead = forced[-1]
    moves = [
        RunnerMove(origin=0, destination=1, out=True, forced=True),
        RunnerMove(origin=lead, destination=lead + 1, out=True, forced=True),
    ]
    occupied: set[int] = set()
    for base in reversed(forced[:-1]):
        occupied.add(base + 1)
        moves.append(RunnerMove(origin=base, destination=base + 1, forced=True))

    runs = 0
    for base in _occupied(bases):
        if base in forced:
            continue
        # Only third can hold an unforced runner when first is occupied
        if outs == 0:
            runs += 1
            moves.append(RunnerMove(origin=base, destination=4, scored=True))
        else:
            occupied.add(base)

    return _build(
        outs_added=2, runs_scored=runs, new_bases=_bases_from(occupied),
        pa_type=PaType.IN_PLAY_OUT, tag=OutcomeTag.DP,
        flags=PaFlags(is_double_play=True), rbi=runs,
        bases_before=bases, outs_before=outs, moves=tuple(moves),
        batted_ball_type=bip_type,
    )


def _resolve_sac_fly(bases: BaseState, outs: int, bip_type: BipType) -> PaResolution:
    occupied = set(_occupied(bases))
    occupied.discard(3)
    return _build(
        outs_added=1, runs_scored=1, new_bases=_bases_from(occupied),
        pa_type=PaType.IN_PLAY_OUT, tag=OutcomeTag.SF,
        flags=PaFlags(is_sac_fly=True), rbi=1,
        bases_before=bases, outs_before=outs,
        moves=(RunnerMove(origin=3, destination=4, scored=True),),
        batted_ball_type=bip_type,
    )


def _resolve_reach_on_error(bases: BaseState, outs: int, bip_type: BipType,
                            rng: RandomSource) -> PaResolution:
    new_bases, moves, runs = _force_advance(bases)
    position = 1 + int(rng.next_double() * 9)
    return _build(
        outs_added=0, runs_scored=runs, new_bases=new_bases,
        pa_type=PaType.REACH_ON_ERROR, tag=OutcomeTag.ROE,
        had_error=True, rbi=0,
        bases_before=bases, outs_before=outs, moves=tuple(moves),
        batted_ball_type=bip_type, error_position=position,
    )


def _resolve_out(bip_type: BipType, bases: BaseState, outs: int,
                 rng: RandomSource) -> PaResolution:
    if bip_type is BipType.GROUND_BALL and bases.first and outs < 2:
        if rng.next_double() < DOUBLE_PLAY_RATE:
            return _resolve_double_play(bases, outs, bip_type)
    if bip_type is BipType.FLY_BALL and bases.third and outs < 2:
        if rng.next_double() < SAC_FLY_RATE:
            return _resolve_sac_fly(bases, outs, bip_type)
    if rng.next_double() < REACH_ON_ERROR_RATE:
        return _resolve_reach_on_error(bases, outs, bip_type, rng)

    return _build(
        outs_added=1, runs_scored=0, new_bases=bases,
        pa_type=PaType.IN_PLAY_OUT, tag=_OUT_TAGS[bip_type],
        bases_before=bases, outs_before=outs,
        batted_ball_type=bip_type,
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def resolve_plate_appearance(terminal: AtBatTerminal, batted_ball: Optional[BattedBall],
                             bases: BaseState, outs: int,
                             rng: RandomSource) -> PaResolution:
    """Resolve a plate appearance into outs, runs, new bases and RBI.

    Raises:
        ConsistencyError: outs outside 0-2, or a ball in play without a
            batted ball.
    """
    if not 0 <= outs <= 2:
        raise ConsistencyError(
            f"Cannot resolve a plate appearance with {outs} outs",
            context={"bases": bases.to_string()},
        )

    if terminal is AtBatTerminal.STRIKEOUT:
        resolution = _resolve_strikeout(bases, outs)
    elif terminal is AtBatTerminal.WALK:
        resolution = _resolve_free_pass(bases, outs, PaType.WALK, OutcomeTag.BB)
    elif terminal is AtBatTerminal.HIT_BY_PITCH:
        resolution = _resolve_free_pass(bases, outs, PaType.HIT_BY_PITCH, OutcomeTag.HBP)
    elif terminal is AtBatTerminal.BALL_IN_PLAY:
        if batted_ball is None:
            raise ConsistencyError("Ball in play resolved without a batted ball")
        if batted_ball.outcome is BipOutcome.OUT:
            resolution = _resolve_out(batted_ball.bip_type, bases, outs, rng)
        else:
            resolution = _resolve_hit(batted_ball.outcome, batted_ball.bip_type, bases, outs)
    else:
        raise ConsistencyError(f"Unknown at-bat terminal: {terminal!r}")

    logger.debug("Resolved %s with bases %s, %d out: %s", terminal.value,
                 bases.to_string(), outs, resolution.tag.value)
    return resolution
