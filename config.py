# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Centralized configuration for simulation settings and game inputs."""

from __future__ import annotations

import logging
import os
import random

from pydantic import BaseModel, Field, ValidationError, field_validator

from errors import InvalidConfigurationError

logger = logging.getLogger(__name__)

MAX_INNINGS_ENV = "DIAMOND_SIM_MAX_INNINGS"
MAX_PITCHES_ENV = "DIAMOND_SIM_MAX_PITCHES"
MAX_PLATE_APPEARANCES_ENV = "DIAMOND_SIM_MAX_PLATE_APPEARANCES"
LOG_LEVEL_ENV = "DIAMOND_SIM_LOG_LEVEL"

SEED_MIN = -(2**31)
SEED_MAX = 2**31 - 1

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class SimulationSettings(BaseModel):
    """Safety caps and logging level for one simulation run."""
    max_innings: int = Field(default=99, ge=9, le=99, description="Inning cap; exceeding it is fatal")
    max_pitches_per_plate_appearance: int = Field(
        default=50, ge=6, description="Pitch cap per PA; exceeding it is fatal")
    max_plate_appearances: int = Field(
        default=1500, ge=54, description="PA cap per game; exceeding it is fatal")
    log_level: str = Field(default="WARNING")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_LOG_LEVELS}, got {v!r}")
        return level


def _env_int(name: str) -> int | None:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise InvalidConfigurationError(
            f"{name} must be an integer, got {raw!r}", field=name,
        ) from None


def load_settings(**overrides) -> SimulationSettings:
    """Build settings from defaults, environment variables, then overrides."""
    values: dict = {}
    for env_name, key in (
        (MAX_INNINGS_ENV, "max_innings"),
        (MAX_PITCHES_ENV, "max_pitches_per_plate_appearance"),
        (MAX_PLATE_APPEARANCES_ENV, "max_plate_appearances"),
    ):
        v = _env_int(env_name)
        if v is not None:
            values[key] = v
    level = os.environ.get(LOG_LEVEL_ENV)
    if level:
        values["log_level"] = level
    values.update(overrides)

    try:
        return SimulationSettings(**values)
    except ValidationError as exc:
        fields = ", ".join(str(e.get("loc", ("?",))[0]) for e in exc.errors())
        raise InvalidConfigurationError(
            f"Invalid simulation settings: {fields}", field=fields,
        ) from exc


def require_team_name(name: object, role: str) -> str:
    """Return the team name or raise if it is missing or blank."""
    if not isinstance(name, str) or not name.strip():
        raise InvalidConfigurationError(
            f"{role} team name must be a non-empty string, got {name!r}",
            field=f"{role}_team",
        )
    return name


def validate_seed(seed: object) -> int:
    """Accept only plain ints in the signed 32-bit range."""
    if isinstance(seed, bool) or not isinstance(seed, int):
        raise InvalidConfigurationError(
            f"seed must be an integer, got {type(seed).__name__} {seed!r}",
            field="seed",
        )
    if not SEED_MIN <= seed <= SEED_MAX:
        raise InvalidConfigurationError(
            f"seed must be between {SEED_MIN} and {SEED_MAX}, got {seed}",
            field="seed",
        )
    return seed


def resolve_seed(seed: object | None) -> int:
    """Validate a seed, or generate and announce one when none is given."""
    if seed is None:
        generated = random.SystemRandom().randint(0, SEED_MAX)
        logger.warning("No seed supplied; generated seed %d", generated)
        return generated
    return validate_seed(seed)
