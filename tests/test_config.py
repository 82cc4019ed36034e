# /// script
# requires-python = ">=3.12"
# dependencies = ["pytest>=7.0", "pydantic>=2.0"]
# ///
"""Tests for simulation settings and input validation.

Verifies:
1. Defaults, environment overrides and keyword overrides
2. Malformed environment values raise InvalidConfigurationError
3. Seed validation (type and signed 32-bit range)
4. Generated seeds are logged
5. Team names must be non-empty
"""

import logging
import sys
from pathlib import Path

import pytest

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import (
    LOG_LEVEL_ENV,
    MAX_INNINGS_ENV,
    MAX_PITCHES_ENV,
    MAX_PLATE_APPEARANCES_ENV,
    SEED_MAX,
    SEED_MIN,
    load_settings,
    require_team_name,
    resolve_seed,
    validate_seed,
)
from errors import InvalidConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (MAX_INNINGS_ENV, MAX_PITCHES_ENV, MAX_PLATE_APPEARANCES_ENV, LOG_LEVEL_ENV):
        monkeypatch.delenv(name, raising=False)


# ===========================================================================
# Settings
# ===========================================================================

class TestLoadSettings:

    def test_defaults(self):
        settings = load_settings()
        assert settings.max_innings == 99
        assert settings.max_pitches_per_plate_appearance == 50
        assert settings.max_plate_appearances == 1500
        assert settings.log_level == "WARNING"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv(MAX_INNINGS_ENV, "20")
        monkeypatch.setenv(MAX_PITCHES_ENV, "30")
        monkeypatch.setenv(LOG_LEVEL_ENV, "debug")
        settings = load_settings()
        assert settings.max_innings == 20
        assert settings.max_pitches_per_plate_appearance == 30
        assert settings.log_level == "DEBUG"

    def test_keyword_overrides_win(self, monkeypatch):
        monkeypatch.setenv(MAX_INNINGS_ENV, "20")
        assert load_settings(max_innings=12).max_innings == 12

    def test_blank_env_ignored(self, monkeypatch):
        monkeypatch.setenv(MAX_PLATE_APPEARANCES_ENV, "  ")
        assert load_settings().max_plate_appearances == 1500

    def test_non_integer_env_rejected(self, monkeypatch):
        monkeypatch.setenv(MAX_PITCHES_ENV, "lots")
        with pytest.raises(InvalidConfigurationError, match="must be an integer") as exc_info:
            load_settings()
        assert exc_info.value.field == MAX_PITCHES_ENV

    def test_out_of_range_rejected(self):
        with pytest.raises(InvalidConfigurationError, match="max_innings") as exc_info:
            load_settings(max_innings=5)
        assert exc_info.value.field == "max_innings"
        with pytest.raises(InvalidConfigurationError):
            load_settings(max_innings=100)

    def test_unknown_log_level_rejected(self):
        with pytest.raises(InvalidConfigurationError, match="log_level"):
            load_settings(log_level="LOUD")


# ===========================================================================
# Seeds and team names
# ===========================================================================

class TestSeeds:

    @pytest.mark.parametrize("seed", [0, 42, SEED_MIN, SEED_MAX, -7])
    def test_valid_seeds(self, seed):
        assert validate_seed(seed) == seed

    @pytest.mark.parametrize("seed", [SEED_MAX + 1, SEED_MIN - 1, 1.0, "1", True, None, [1]])
    def test_invalid_seeds(self, seed):
        with pytest.raises(InvalidConfigurationError) as exc_info:
            validate_seed(seed)
        assert exc_info.value.field == "seed"

    def test_missing_seed_generated_and_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="config"):
            seed = resolve_seed(None)
        assert 0 <= seed <= SEED_MAX
        assert f"generated seed {seed}" in caplog.text

    def test_given_seed_not_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="config"):
            assert resolve_seed(42) == 42
        assert caplog.text == ""


class TestTeamNames:

    def test_name_returned(self):
        assert require_team_name("Sharks", "home") == "Sharks"

    @pytest.mark.parametrize("name", ["", "   ", None, 7])
    def test_bad_names_rejected(self, name):
        with pytest.raises(InvalidConfigurationError, match="away team name") as exc_info:
            require_team_name(name, "away")
        assert exc_info.value.field == "away_team"
