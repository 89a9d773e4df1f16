"""Configuration defaults for swingtempo.

User preferences are plain values passed into the core; nothing here is
read from global state at call time.
"""

from dataclasses import dataclass, replace

from .models import TempoPreset
from .tempos import get_preset_by_id, normalize_mode, presets_for_mode

# Video capture limits
MAX_VIDEO_DURATION_MS = 10000
TARGET_FPS = 240
MIN_FPS = 60

# Playback
MIN_PLAYBACK_SPEED = 0.25
MAX_PLAYBACK_SPEED = 2.0
PLAYBACK_SPEEDS = (0.25, 0.5, 1.0)

# Settings
DEFAULT_LONG_GAME_PRESET_ID = "24/8"
DEFAULT_SHORT_GAME_PRESET_ID = "18/9"
DEFAULT_DELAY_BETWEEN_REPS = 4
MIN_DELAY_BETWEEN_REPS = 2
MAX_DELAY_BETWEEN_REPS = 10
TONE_STYLES = ("beep", "voice")


@dataclass(frozen=True)
class Settings:
    """User preferences relevant to tempo comparison and practice."""

    default_long_game_preset_id: str = DEFAULT_LONG_GAME_PRESET_ID
    default_short_game_preset_id: str = DEFAULT_SHORT_GAME_PRESET_ID
    tone_style: str = "beep"
    volume: float = 1.0
    delay_between_reps: int = DEFAULT_DELAY_BETWEEN_REPS

    def __post_init__(self) -> None:
        if self.tone_style not in TONE_STYLES:
            raise ValueError(f"Invalid tone style: {self.tone_style!r}")
        if not 0.0 <= self.volume <= 1.0:
            raise ValueError(f"Volume must be between 0 and 1, got {self.volume}")
        if not MIN_DELAY_BETWEEN_REPS <= self.delay_between_reps <= MAX_DELAY_BETWEEN_REPS:
            raise ValueError(
                f"Delay between reps must be {MIN_DELAY_BETWEEN_REPS}-"
                f"{MAX_DELAY_BETWEEN_REPS}s, got {self.delay_between_reps}"
            )

    def with_overrides(self, **changes) -> "Settings":
        """Return a validated copy with the given fields replaced."""
        return replace(self, **changes)

    def target_preset(self, mode: str) -> TempoPreset:
        """Resolve the default target preset for a game mode.

        Raises:
            ValueError: If the configured preset id is not in the mode's list
        """
        mode = normalize_mode(mode)
        preset_id = (
            self.default_long_game_preset_id
            if mode == "long"
            else self.default_short_game_preset_id
        )
        preset = get_preset_by_id(presets_for_mode(mode), preset_id)
        if preset is None:
            raise ValueError(f"Unknown {mode} game preset: {preset_id!r}")
        return preset


@dataclass(frozen=True)
class DetectorConfig:
    """Tuning for the motion-based swing detector.

    sample_count is clamped to [min_frames, max_sample_count] so the
    sampling cost does not grow with video length or frame rate.
    """

    sample_count: int = 30
    min_frames: int = 10
    max_sample_count: int = 60
    default_duration_ms: int = 5000
    takeaway_threshold: float = 0.1
    top_search_range: float = 0.7
    impact_search_start: float = 0.5
    smoothing_window: int = 3

    def __post_init__(self) -> None:
        if self.min_frames < 3:
            raise ValueError(f"min_frames must be at least 3, got {self.min_frames}")
        if self.max_sample_count < self.min_frames:
            raise ValueError("max_sample_count must be >= min_frames")

    def bounded_sample_count(self, requested=None) -> int:
        count = self.sample_count if requested is None else requested
        return max(self.min_frames, min(count, self.max_sample_count))
