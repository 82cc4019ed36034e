# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""The one place game state changes.

``apply_plate_appearance`` takes the current ``GameState`` and a
``PaResolution`` and returns the next state plus everything downstream
consumers need (walk-off flag, display outs, credited runs and the stat
lines for the batter and pitcher). It never mutates its inputs.

Rules applied, in order:

  1. Walk-off clamp. Bottom of the 9th or later, home team batting, and the
     play puts home ahead: a non-home-run play credits only the runs needed
     for a one-run lead and clears the bases. A home run credits all runs.
  2. Runs, outs and bases are applied and the batting order advances.
  3. On the third out the half ends: bases clear, sides swap, and the game
     is finalized when nothing is left to decide. Ties never end a game.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from box_score import BatterGameStats, PitcherGameStats
from errors import ConsistencyError
from models import BaseState, GameState, Half, PaResolution, PaType, Team

logger = logging.getLogger(__name__)

REGULATION_INNINGS = 9
MAX_INNING = 99


@dataclass(frozen=True)
class AppliedPlay:
    """Result of applying one plate appearance to the game."""
    state_after: GameState
    resolution: PaResolution
    is_walkoff: bool
    outs_after: int
    runs_credited: int
    rbi_credited: int
    half_inning_complete: bool
    bottom_half_skipped: bool
    left_on_base: int
    batter_increment: BatterGameStats
    pitcher_increment: PitcherGameStats


# ---------------------------------------------------------------------------
# Preconditions
# ---------------------------------------------------------------------------

def _check_preconditions(state: GameState, resolution: PaResolution) -> None:
    context = {"inning": state.inning, "half": state.half.value, "outs": state.outs}
    if state.is_final:
        raise ConsistencyError("Cannot apply a plate appearance to a final game", context)
    if state.outs > 2:
        raise ConsistencyError(f"Plate appearance applied with {state.outs} outs", context)
    if state.inning > MAX_INNING:
        raise ConsistencyError(f"Inning {state.inning} exceeds {MAX_INNING}", context)
    if resolution.bases_before != state.bases:
        raise ConsistencyError(
            f"Resolution was computed for bases {resolution.bases_before.to_string()}, "
            f"state has {state.bases.to_string()}", context)
    if resolution.outs_before != state.outs:
        raise ConsistencyError(
            f"Resolution was computed with {resolution.outs_before} outs, "
            f"state has {state.outs}", context)
    if state.outs + resolution.outs_added > 3:
        raise ConsistencyError(
            f"{resolution.outs_added} outs added to {state.outs} exceeds three", context)
    if resolution.runs_scored < 0:
        raise ConsistencyError(f"Negative runs: {resolution.runs_scored}", context)
    if (state.half is Half.BOTTOM and state.inning >= REGULATION_INNINGS
            and state.home_score > state.away_score):
        raise ConsistencyError(
            "Home team already leads in the bottom of a deciding inning", context)


# ---------------------------------------------------------------------------
# Stat lines
# ---------------------------------------------------------------------------

def _batter_increment(resolution: PaResolution, runs_credited: int,
                      rbi_credited: int) -> BatterGameStats:
    pa_type = resolution.pa_type
    stats = BatterGameStats(
        hits=int(resolution.is_hit),
        singles=int(pa_type is PaType.SINGLE),
        doubles=int(pa_type is PaType.DOUBLE),
        triples=int(pa_type is PaType.TRIPLE),
        hr=int(pa_type is PaType.HOME_RUN),
        rbi=rbi_credited,
        bb=int(pa_type is PaType.WALK),
        hbp=int(pa_type is PaType.HIT_BY_PITCH),
        k=int(pa_type is PaType.STRIKEOUT),
        sf=int(resolution.is_sac_fly),
        roe=int(pa_type is PaType.REACH_ON_ERROR),
        gidp=int(resolution.is_double_play),
    )
    stats.ab = 0 if (stats.bb or stats.hbp or stats.sf) else 1
    # No runner identity on the bases: only the batter's own trip around counts
    if pa_type is PaType.HOME_RUN and runs_credited > 0:
        stats.runs = 1
    return stats


def _pitcher_increment(resolution: PaResolution, runs_credited: int) -> PitcherGameStats:
    pa_type = resolution.pa_type
    return PitcherGameStats(
        ip_outs=resolution.outs_added,
        batters_faced=1,
        hits=int(resolution.is_hit),
        runs=runs_credited,
        earned_runs=0 if resolution.had_error else runs_credited,
        bb=int(pa_type is PaType.WALK),
        hbp=int(pa_type is PaType.HIT_BY_PITCH),
        k=int(pa_type is PaType.STRIKEOUT),
        hr_allowed=int(pa_type is PaType.HOME_RUN),
    )


# ---------------------------------------------------------------------------
# State transition
# ---------------------------------------------------------------------------

def apply_plate_appearance(state: GameState, resolution: PaResolution) -> AppliedPlay:
    """Apply one resolved plate appearance and return the next state.

    Raises:
        ConsistencyError: the resolution cannot legally be applied to
            ``state``.
    """
    _check_preconditions(state, resolution)

    offense = state.offense
    runs = resolution.runs_scored
    outs = state.outs + resolution.outs_added
    bases = resolution.new_bases

    is_walkoff = (state.is_walkoff_situation()
                  and state.home_score + runs > state.away_score)
    if is_walkoff:
        if resolution.pa_type is not PaType.HOME_RUN:
            runs = state.away_score - state.home_score + 1
        bases = BaseState()
    rbi = min(resolution.rbi, runs)

    away_score = state.away_score + (runs if offense is Team.AWAY else 0)
    home_score = state.home_score + (runs if offense is Team.HOME else 0)
    away_index = state.away_batting_index
    home_index = state.home_batting_index
    if offense is Team.AWAY:
        away_index = (away_index + 1) % 9
    else:
        home_index = (home_index + 1) % 9

    common = dict(balls=0, strikes=0, away_score=away_score, home_score=home_score,
                  away_batting_index=away_index, home_batting_index=home_index)
    half_complete = False
    skipped = False
    left_on_base = 0

    if is_walkoff:
        half_complete = True
        next_state = state.replace(bases=BaseState(), outs=outs, is_final=True, **common)
        logger.debug("Walk-off in the bottom of the %d: %s", state.inning,
                     next_state.score_display())
    elif outs == 3:
        half_complete = True
        left_on_base = bases.occupied_count
        final = False
        if state.half is Half.TOP:
            if state.inning >= REGULATION_INNINGS and home_score > away_score:
                final = skipped = True
        elif state.inning >= REGULATION_INNINGS and home_score != away_score:
            final = True

        if final:
            next_state = state.replace(bases=BaseState(), outs=3, is_final=True, **common)
        elif state.half is Half.TOP:
            next_state = state.replace(
                half=Half.BOTTOM, outs=0, bases=BaseState(),
                offense=Team.HOME, defense=Team.AWAY, **common)
        else:
            next_state = state.replace(
                inning=state.inning + 1, half=Half.TOP, outs=0, bases=BaseState(),
                offense=Team.AWAY, defense=Team.HOME, **common)
        logger.debug("End of %s %d (%d LOB), %s", state.half.value.lower(),
                     state.inning, left_on_base, next_state.score_display())
    else:
        next_state = state.replace(bases=bases, outs=outs, **common)

    return AppliedPlay(
        state_after=next_state,
        resolution=resolution,
        is_walkoff=is_walkoff,
        outs_after=outs,
        runs_credited=runs,
        rbi_credited=rbi,
        half_inning_complete=half_complete,
        bottom_half_skipped=skipped,
        left_on_base=left_on_base,
        batter_increment=_batter_increment(resolution, runs, rbi),
        pitcher_increment=_pitcher_increment(resolution, runs),
    )
