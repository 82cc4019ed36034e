# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Play-by-play log entries and the reproducibility digest.

Each plate appearance produces one ``PlayLogEntry``. Its rendered line
looks like:

    [Top 3] Comets 4 vs Sharks P: Single to CF. R3 scores, R1 to 2B.
    [Bot 9] Sharks 7 vs Comets P: Walk-off: Double to CF. R2 scores.
    [Top 5] Comets 1 vs Sharks P: Grounds into DP 6-4-3. R1 out at 2B. 2 outs.

The SHA-256 of the newline-joined, right-stripped lines is the game's
determinism fingerprint: same seed and team names, same digest.
"""

from __future__ import annotations

import hashlib
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field

from models import Half, OutcomeTag, PaResolution, RunnerMove

WALKOFF_PREFIX = "Walk-off: "

_BASE_NAMES = {1: "1B", 2: "2B", 3: "3B", 4: "home"}


def outs_phrase(outs: int) -> str:
    return "1 out." if outs == 1 else f"{outs} outs."


def outcome_phrase(resolution: PaResolution, looking: bool = False) -> str:
    tag = resolution.tag
    if tag is OutcomeTag.K:
        return "K looking" if looking else "K swinging"
    if tag is OutcomeTag.ROE:
        return f"Reaches on E{resolution.error_position}"
    return {
        OutcomeTag.BB: "Walk",
        OutcomeTag.HBP: "HBP",
        OutcomeTag.SINGLE: "Single to CF",
        OutcomeTag.DOUBLE: "Double to CF",
        OutcomeTag.TRIPLE: "Triple to CF",
        OutcomeTag.HR: "Home run to CF",
        OutcomeTag.GROUNDOUT: "Groundout 6-3",
        OutcomeTag.FLYOUT: "Flyout to CF",
        OutcomeTag.LINEOUT: "Lineout to SS",
        OutcomeTag.SF: "Sacrifice fly to CF",
        OutcomeTag.DP: "Grounds into DP 6-4-3",
    }[tag]


def runner_phrase(moves: Iterable[RunnerMove], max_runs: Optional[int] = None) -> str:
    """Describe runner movement, skipping the batter's routine trip to a base.

    ``max_runs`` caps the scoring moves shown, lead runner first, for a
    walk-off that ended before every runner crossed the plate.
    """
    parts = []
    runs = 0
    for move in moves:
        label = "Batter" if move.origin == 0 else f"R{move.origin}"
        if move.scored:
            if max_runs is not None and runs >= max_runs:
                continue
            runs += 1
            parts.append(f"{label} scores")
        elif move.origin == 0:
            continue
        elif move.out:
            parts.append(f"{label} out at {_BASE_NAMES[move.destination]}")
        else:
            parts.append(f"{label} to {_BASE_NAMES[move.destination]}")
    return ", ".join(parts)


class PlayLogEntry(BaseModel):
    """One plate appearance as it happened, in game order."""
    model_config = ConfigDict(frozen=True)

    inning: int = Field(ge=1)
    half: Half
    batter_name: str
    batting_slot: int = Field(ge=1, le=9)
    pitching_team_name: str
    resolution: PaResolution
    is_walkoff: bool = False
    outs_after: int = Field(ge=0, le=3)
    looking: bool = False
    runs_credited: Optional[int] = Field(default=None, ge=0, le=4)

    def to_log_line(self) -> str:
        half_str = "Top" if self.half is Half.TOP else "Bot"
        prefix = WALKOFF_PREFIX if self.is_walkoff else ""
        line = (f"[{half_str} {self.inning}] {self.batter_name} vs "
                f"{self.pitching_team_name} P: {prefix}"
                f"{outcome_phrase(self.resolution, self.looking)}.")
        runners = runner_phrase(self.resolution.moves, self.runs_credited)
        if runners:
            line += f" {runners}."
        if self.resolution.outs_added > 0:
            line += f" {outs_phrase(self.outs_after)}"
        return line.rstrip()


def normalize_play_log(entries: Iterable[PlayLogEntry]) -> str:
    return "\n".join(e.to_log_line().rstrip() for e in entries)


def compute_log_digest(entries: Iterable[PlayLogEntry]) -> str:
    """SHA-256 of the normalized play log, lower-case hex."""
    return hashlib.sha256(normalize_play_log(entries).encode("utf-8")).hexdigest()
