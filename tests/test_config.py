"""Tests for configuration defaults."""

import pytest

from swingtempo.config import DetectorConfig, Settings


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.default_long_game_preset_id == "24/8"
        assert settings.default_short_game_preset_id == "18/9"
        assert settings.tone_style == "beep"
        assert settings.delay_between_reps == 4

    def test_target_preset(self):
        settings = Settings()
        assert settings.target_preset("long").id == "24/8"
        assert settings.target_preset("shortGame").id == "18/9"

    def test_overridden_target(self):
        settings = Settings().with_overrides(default_long_game_preset_id="27/9")
        assert settings.target_preset("long").id == "27/9"

    def test_unknown_preset(self):
        settings = Settings(default_short_game_preset_id="24/8")
        with pytest.raises(ValueError):
            settings.target_preset("short")

    @pytest.mark.parametrize("changes", [
        {"delay_between_reps": 1},
        {"delay_between_reps": 11},
        {"volume": 1.5},
        {"tone_style": "whistle"},
    ])
    def test_invalid_overrides(self, changes):
        with pytest.raises(ValueError):
            Settings().with_overrides(**changes)


class TestDetectorConfig:
    @pytest.mark.parametrize("requested,expected", [
        (None, 30),
        (5, 10),
        (45, 45),
        (1000, 60),
    ])
    def test_bounded_sample_count(self, requested, expected):
        assert DetectorConfig().bounded_sample_count(requested) == expected

    def test_invalid_bounds(self):
        with pytest.raises(ValueError):
            DetectorConfig(min_frames=20, max_sample_count=10)
        with pytest.raises(ValueError):
            DetectorConfig(min_frames=2)
