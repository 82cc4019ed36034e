# /// script
# requires-python = ">=3.12"
# dependencies = ["pytest>=7.0", "pydantic>=2.0"]
# ///
"""Tests for box score accumulation.

Verifies:
1. Batter and pitcher lines accumulate into the right slot and staff
2. Innings pitched uses thirds notation
3. Line score per half-inning, with "X" for a skipped bottom half
4. Team hits, errors and left on base
5. validate() catches totals that disagree with the final score
"""

import sys
from pathlib import Path

import pytest

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from box_score import BatterGameStats, BoxScore, LineScore, PitcherGameStats
from errors import ConsistencyError
from models import (
    BaseState,
    GameState,
    Half,
    OutcomeTag,
    PaResolution,
    PaType,
    RunnerMove,
    Team,
)
from scorekeeper import apply_plate_appearance


def make_state(inning=1, half=Half.TOP, outs=0, bases=None, away=0, home=0, **kw):
    offense = Team.AWAY if half is Half.TOP else Team.HOME
    return GameState(inning=inning, half=half, outs=outs, bases=bases or BaseState(),
                     away_score=away, home_score=home,
                     offense=offense, defense=offense.opponent, **kw)


def strikeout(state):
    return PaResolution(outs_added=1, runs_scored=0, new_bases=state.bases,
                        pa_type=PaType.STRIKEOUT, tag=OutcomeTag.K,
                        bases_before=state.bases, outs_before=state.outs)


def solo_home_run(state):
    return PaResolution(outs_added=0, runs_scored=1, rbi=1, new_bases=state.bases,
                        pa_type=PaType.HOME_RUN, tag=OutcomeTag.HR,
                        bases_before=state.bases, outs_before=state.outs,
                        moves=(RunnerMove(origin=0, destination=4, scored=True),))


def play(box, state, resolution):
    applied = apply_plate_appearance(state, resolution)
    box.record(applied, state)
    return applied.state_after


# ===========================================================================
# Stat lines
# ===========================================================================

class TestStatLines:

    def test_innings_pitched_thirds(self):
        assert PitcherGameStats(ip_outs=20).innings_pitched == "6.2"
        assert PitcherGameStats(ip_outs=27).innings_pitched == "9.0"
        assert PitcherGameStats(ip_outs=1).innings_pitched == "0.1"

    def test_batter_add_sums_fields(self):
        line = BatterGameStats(ab=1, hits=1, singles=1)
        line.add(BatterGameStats(ab=1, k=1))
        line.add(BatterGameStats(bb=1))
        assert (line.ab, line.hits, line.k, line.bb) == (2, 1, 1, 1)
        assert line.pa == 3

    def test_to_dict_keys(self):
        assert set(BatterGameStats().to_dict()) >= {"PA", "AB", "H", "R", "RBI", "BB", "K", "HR"}
        assert PitcherGameStats(ip_outs=4).to_dict()["IP"] == "1.1"


# ===========================================================================
# Line score
# ===========================================================================

class TestLineScore:

    def test_runs_land_in_their_inning(self):
        line = LineScore()
        line.add_runs(Team.AWAY, 1, 0)
        line.add_runs(Team.AWAY, 3, 2)
        line.add_runs(Team.AWAY, 3, 1)
        assert line.away == [0, 0, 3]
        assert line.total(Team.AWAY) == 3

    def test_skipped_half_displays_x(self):
        line = LineScore()
        line.add_runs(Team.HOME, 8, 1)
        line.skip_half(Team.HOME, 9)
        assert line.display(Team.HOME)[-1] == "X"
        assert line.total(Team.HOME) == 1
        assert line.to_dict()["home"][-1] is None


# ===========================================================================
# Recording plays
# ===========================================================================

class TestRecord:

    def test_plays_credit_slot_and_opposing_staff(self):
        box = BoxScore()
        state = make_state()
        state = play(box, state, strikeout(state))
        state = play(box, state, solo_home_run(state))

        assert box.batting[Team.AWAY][0].k == 1
        assert box.batting[Team.AWAY][1].hr == 1
        assert box.batting[Team.AWAY][1].runs == 1
        home_staff = box.pitching[Team.HOME]
        assert home_staff.batters_faced == 2
        assert home_staff.ip_outs == 1
        assert home_staff.runs == 1
        assert home_staff.hr_allowed == 1
        assert box.line_score.away == [1]
        assert box.teams[Team.AWAY].hits == 1

    def test_error_charged_to_defense(self):
        box = BoxScore()
        state = make_state()
        res = PaResolution(outs_added=0, runs_scored=0, new_bases=BaseState(first=True),
                           pa_type=PaType.REACH_ON_ERROR, tag=OutcomeTag.ROE,
                           had_error=True, error_position=4,
                           bases_before=state.bases, outs_before=0,
                           moves=(RunnerMove(origin=0, destination=1, forced=True),))
        play(box, state, res)
        assert box.teams[Team.HOME].errors == 1
        assert box.teams[Team.AWAY].errors == 0
        assert box.teams[Team.AWAY].hits == 0

    def test_left_on_base_counted_at_third_out(self):
        box = BoxScore()
        state = make_state(outs=2, bases=BaseState(first=True, second=True))
        play(box, state, strikeout(state))
        assert box.teams[Team.AWAY].left_on_base == 2

    def test_skipped_bottom_half_recorded(self):
        box = BoxScore()
        state = make_state(inning=9, outs=2, away=0, home=1)
        play(box, state, strikeout(state))
        assert box.line_score.display(Team.HOME)[8] == "X"


# ===========================================================================
# Validation
# ===========================================================================

class TestValidate:

    def test_consistent_totals_pass(self):
        box = BoxScore()
        state = make_state()
        state = play(box, state, solo_home_run(state))
        box.validate(state)

    def test_score_mismatch_raises(self):
        box = BoxScore()
        state = make_state()
        state = play(box, state, solo_home_run(state))
        wrong = state.replace(away_score=2)
        with pytest.raises(ConsistencyError, match="line score totals"):
            box.validate(wrong)

    def test_hits_disagreement_raises(self):
        box = BoxScore()
        state = make_state()
        state = play(box, state, solo_home_run(state))
        box.pitching[Team.HOME].hits = 0
        with pytest.raises(ConsistencyError, match="hits allowed"):
            box.validate(state)

    def test_to_dict_has_team_totals(self):
        box = BoxScore()
        state = make_state()
        play(box, state, solo_home_run(state))
        data = box.to_dict()
        assert data["teams"]["AWAY"] == {"R": 1, "H": 1, "E": 0, "LOB": 0}
        assert len(data["batting"]["HOME"]) == 9
