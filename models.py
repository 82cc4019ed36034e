# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Data models for the game simulator."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Half(str, Enum):
    TOP = "TOP"
    BOTTOM = "BOTTOM"


class Team(str, Enum):
    AWAY = "AWAY"
    HOME = "HOME"

    @property
    def opponent(self) -> Team:
        return Team.HOME if self is Team.AWAY else Team.AWAY


class PitchOutcome(str, Enum):
    BALL = "BALL"
    CALLED_STRIKE = "CALLED_STRIKE"
    SWINGING_STRIKE = "SWINGING_STRIKE"
    FOUL = "FOUL"
    IN_PLAY = "IN_PLAY"
    HIT_BY_PITCH = "HIT_BY_PITCH"


class AtBatTerminal(str, Enum):
    STRIKEOUT = "STRIKEOUT"
    WALK = "WALK"
    HIT_BY_PITCH = "HIT_BY_PITCH"
    BALL_IN_PLAY = "BALL_IN_PLAY"


class BipOutcome(str, Enum):
    OUT = "OUT"
    SINGLE = "SINGLE"
    DOUBLE = "DOUBLE"
    TRIPLE = "TRIPLE"
    HOME_RUN = "HOME_RUN"


class BipType(str, Enum):
    GROUND_BALL = "GROUND_BALL"
    FLY_BALL = "FLY_BALL"
    LINE_DRIVE = "LINE_DRIVE"


class PaType(str, Enum):
    """Outcome category used for statistics."""
    STRIKEOUT = "K"
    WALK = "BB"
    HIT_BY_PITCH = "HBP"
    IN_PLAY_OUT = "OUT"
    SINGLE = "1B"
    DOUBLE = "2B"
    TRIPLE = "3B"
    HOME_RUN = "HR"
    REACH_ON_ERROR = "ROE"


class OutcomeTag(str, Enum):
    """Finer-grained outcome used for the play log."""
    K = "K"
    BB = "BB"
    HBP = "HBP"
    GROUNDOUT = "GO"
    FLYOUT = "FO"
    LINEOUT = "LO"
    DP = "DP"
    SF = "SF"
    ROE = "ROE"
    SINGLE = "1B"
    DOUBLE = "2B"
    TRIPLE = "3B"
    HR = "HR"


HIT_TYPES = frozenset({PaType.SINGLE, PaType.DOUBLE, PaType.TRIPLE, PaType.HOME_RUN})


# ---------------------------------------------------------------------------
# Player data models
# ---------------------------------------------------------------------------

class BatterRatings(BaseModel):
    """Batting ratings on a 0-100 scale, 50 = league average."""
    model_config = ConfigDict(frozen=True)

    contact: int = Field(default=50, ge=0, le=100, description="Bat-to-ball skill")
    power: int = Field(default=50, ge=0, le=100, description="Extra-base power")
    patience: int = Field(default=50, ge=0, le=100, description="Plate discipline")
    speed: int = Field(default=50, ge=0, le=100, description="Running speed")


class PitcherRatings(BaseModel):
    """Pitching ratings on a 0-100 scale, 50 = league average."""
    model_config = ConfigDict(frozen=True)

    control: int = Field(default=50, ge=0, le=100, description="Strike-throwing ability")
    stuff: int = Field(default=50, ge=0, le=100, description="Pitch quality")
    stamina: int = Field(default=50, ge=0, le=100)
    speed: int = Field(default=50, ge=0, le=100)


class Batter(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    ratings: BatterRatings = Field(default_factory=BatterRatings)


class Pitcher(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    ratings: PitcherRatings = Field(default_factory=PitcherRatings)


# ---------------------------------------------------------------------------
# Bases and plate-appearance resolution
# ---------------------------------------------------------------------------

class BaseState(BaseModel):
    """Occupancy of first, second and third. Carries no runner identity."""
    model_config = ConfigDict(frozen=True)

    first: bool = False
    second: bool = False
    third: bool = False

    @classmethod
    def empty(cls) -> BaseState:
        return cls()

    @classmethod
    def loaded(cls) -> BaseState:
        return cls(first=True, second=True, third=True)

    @property
    def occupied_count(self) -> int:
        return int(self.first) + int(self.second) + int(self.third)

    @property
    def is_loaded(self) -> bool:
        return self.first and self.second and self.third

    def is_occupied(self, base: int) -> bool:
        return (self.first, self.second, self.third)[base - 1]

    def to_string(self) -> str:
        """Return base state string like '110' for runners on 1st and 2nd."""
        return "".join("1" if b else "0" for b in (self.first, self.second, self.third))


class RunnerMove(BaseModel):
    """One runner's movement on a play. Origin 0 is the batter, 4 is home."""
    model_config = ConfigDict(frozen=True)

    origin: int = Field(ge=0, le=3)
    destination: int = Field(ge=1, le=4)
    scored: bool = False
    forced: bool = False
    out: bool = False

    @model_validator(mode="after")
    def _check_move(self) -> RunnerMove:
        if self.scored and (self.destination != 4 or self.out):
            raise ValueError("a scoring move must reach home and cannot be an out")
        if not self.out and self.destination <= self.origin:
            raise ValueError(f"runner cannot move backwards ({self.origin} -> {self.destination})")
        return self


class PaFlags(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_double_play: bool = False
    is_sac_fly: bool = False


class PaResolution(BaseModel):
    """Complete result of one plate appearance, before it touches game state."""
    model_config = ConfigDict(frozen=True)

    outs_added: int = Field(ge=0, le=3)
    runs_scored: int = Field(ge=0, le=4)
    new_bases: BaseState
    pa_type: PaType
    tag: OutcomeTag
    flags: Optional[PaFlags] = None
    had_error: bool = False
    rbi: int = Field(default=0, ge=0, le=4)
    bases_before: BaseState
    outs_before: int = Field(ge=0, le=2)
    moves: tuple[RunnerMove, ...] = ()
    batted_ball_type: Optional[BipType] = None
    error_position: Optional[int] = Field(default=None, ge=1, le=9)

    @model_validator(mode="after")
    def _check_consistency(self) -> PaResolution:
        scored = sum(1 for m in self.moves if m.scored)
        if scored != self.runs_scored:
            raise ValueError(
                f"runner moves score {scored} but runs_scored is {self.runs_scored}")
        if self.runs_scored > self.bases_before.occupied_count + 1:
            raise ValueError(
                f"{self.runs_scored} runs cannot score with "
                f"{self.bases_before.occupied_count} runners on base")
        if self.rbi > self.runs_scored:
            raise ValueError(f"rbi {self.rbi} exceeds runs scored {self.runs_scored}")
        if self.outs_before + self.outs_added > 3:
            raise ValueError(
                f"{self.outs_added} outs added to {self.outs_before} exceeds three")
        if (self.error_position is not None) != self.had_error:
            raise ValueError("error_position must be set exactly when had_error is set")
        return self

    @property
    def is_double_play(self) -> bool:
        return bool(self.flags and self.flags.is_double_play)

    @property
    def is_sac_fly(self) -> bool:
        return bool(self.flags and self.flags.is_sac_fly)

    @property
    def is_hit(self) -> bool:
        return self.pa_type in HIT_TYPES


# ---------------------------------------------------------------------------
# Game state
# ---------------------------------------------------------------------------

class GameState(BaseModel):
    """Authoritative, immutable snapshot of the game between plate appearances."""
    model_config = ConfigDict(frozen=True)

    balls: int = Field(default=0, ge=0, le=3)
    strikes: int = Field(default=0, ge=0, le=2)
    inning: int = Field(default=1, ge=1)
    half: Half = Half.TOP
    outs: int = Field(default=0, ge=0, le=3)
    bases: BaseState = Field(default_factory=BaseState)
    away_score: int = Field(default=0, ge=0)
    home_score: int = Field(default=0, ge=0)
    away_batting_index: int = Field(default=0, ge=0, le=8)
    home_batting_index: int = Field(default=0, ge=0, le=8)
    offense: Team = Team.AWAY
    defense: Team = Team.HOME
    is_final: bool = False

    @model_validator(mode="after")
    def _check_sides(self) -> GameState:
        if self.offense == self.defense:
            raise ValueError(f"offense and defense are both {self.offense.value}")
        expected = Team.AWAY if self.half is Half.TOP else Team.HOME
        if self.offense != expected:
            raise ValueError(
                f"{self.offense.value} cannot bat in the {self.half.value.lower()} half")
        return self

    @classmethod
    def new_game(cls) -> GameState:
        return cls()

    def replace(self, **changes) -> GameState:
        """Return a validated copy with ``changes`` applied."""
        return type(self).model_validate({**self.model_dump(), **changes})

    def batting_index(self) -> int:
        return self.away_batting_index if self.offense is Team.AWAY else self.home_batting_index

    def offense_score(self) -> int:
        return self.away_score if self.offense is Team.AWAY else self.home_score

    def defense_score(self) -> int:
        return self.away_score if self.defense is Team.AWAY else self.home_score

    def is_walkoff_situation(self) -> bool:
        """Home batting in the 9th or later without the lead."""
        return (self.inning >= 9 and self.half is Half.BOTTOM
                and self.offense is Team.HOME and self.home_score <= self.away_score)

    def score_display(self) -> str:
        return f"Away {self.away_score} - Home {self.home_score}"

    def situation_display(self) -> str:
        half_str = "Top" if self.half is Half.TOP else "Bot"
        on_bases = [name for name, occ in (("1st", self.bases.first),
                                           ("2nd", self.bases.second),
                                           ("3rd", self.bases.third)) if occ]
        runners_str = "runners on " + ", ".join(on_bases) if on_bases else "bases empty"
        return f"{half_str} {self.inning}, {self.outs} out, {runners_str}, {self.score_display()}"


# ---------------------------------------------------------------------------
# At-bat and batted-ball results
# ---------------------------------------------------------------------------

class AtBatResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    terminal: AtBatTerminal
    balls: int = Field(ge=0, le=4)
    strikes: int = Field(ge=0, le=3)
    pitches: tuple[PitchOutcome, ...] = Field(min_length=1)

    @property
    def pitch_count(self) -> int:
        return len(self.pitches)

    @property
    def final_count(self) -> str:
        return f"{self.balls}-{self.strikes}"

    @property
    def struck_out_looking(self) -> bool:
        return (self.terminal is AtBatTerminal.STRIKEOUT
                and self.pitches[-1] is PitchOutcome.CALLED_STRIKE)


class BattedBall(BaseModel):
    model_config = ConfigDict(frozen=True)

    outcome: BipOutcome
    bip_type: BipType
