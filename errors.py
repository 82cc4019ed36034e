# /// script
# requires-python = ">=3.12"
# dependencies = []
# ///
"""Exception hierarchy for the game simulator.

Three failure classes exist and none of them is retried:

  InvalidConfigurationError
      Bad seed, missing team name, malformed lineup or setting. Raised
      before the first random draw.

  ConsistencyError
      An internal invariant was broken (impossible outs/runs/bases, a
      resolution applied to the wrong state, a duplicated random stream).
      Always fatal.

  SafetyCapExceededError
      A pitch, inning or plate-appearance cap was hit. Always fatal and
      carries seed/inning context for reproduction.
"""

from __future__ import annotations

from typing import Any


class SimulationError(Exception):
    """Base class for all simulator failures."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        self.context = dict(context or {})
        super().__init__(message)

    def __str__(self) -> str:
        base = super().__str__()
        if not self.context:
            return base
        ctx = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"{base} [{ctx}]"


class InvalidConfigurationError(SimulationError):
    """Raised when game inputs are rejected before simulation starts."""

    def __init__(self, message: str, field: str | None = None,
                 context: dict[str, Any] | None = None):
        self.field = field
        super().__init__(message, context)


class ConsistencyError(SimulationError):
    """Raised when a state transition would corrupt the game."""


class SafetyCapExceededError(SimulationError):
    """Raised when a pitch, inning or plate-appearance cap is exceeded."""
