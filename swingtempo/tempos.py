"""Tempo presets for Long Game and Short Game modes.

Presets are expressed in frames at FRAME_RATE (30fps), the rate used by
the Tour Tempo method: 24/8 means a 24-frame backswing followed by an
8-frame downswing.
"""

from typing import List, Optional, Sequence, Tuple

from .models import TempoPreset

FRAME_RATE = 30

LONG_GAME_PRESETS: Tuple[TempoPreset, ...] = (
    TempoPreset("18/6", "18/6", 18, 6, "Fastest tempo - aggressive swingers"),
    TempoPreset("21/7", "21/7", 21, 7, "Fast tempo - athletic players"),
    TempoPreset("24/8", "24/8", 24, 8, "Tour average - most common tempo"),
    TempoPreset("27/9", "27/9", 27, 9, "Smooth tempo - deliberate swingers"),
    TempoPreset("30/10", "30/10", 30, 10, "Slowest tempo - maximum control"),
)

SHORT_GAME_PRESETS: Tuple[TempoPreset, ...] = (
    TempoPreset("14/7", "14/7", 14, 7, "Quick chip - bump and run"),
    TempoPreset("16/8", "16/8", 16, 8, "Standard chip - versatile"),
    TempoPreset("18/9", "18/9", 18, 9, "Medium pitch - most common"),
    TempoPreset("20/10", "20/10", 20, 10, "Longer pitch - more loft"),
    TempoPreset("22/11", "22/11", 22, 11, "Full pitch - maximum height"),
)

_MODE_ALIASES = {
    "long": "long",
    "longGame": "long",
    "short": "short",
    "shortGame": "short",
}


def normalize_mode(mode: str) -> str:
    """Map a game mode name to 'long' or 'short'."""
    try:
        return _MODE_ALIASES[mode]
    except KeyError:
        raise ValueError(f"Unknown game mode: {mode!r}") from None


def presets_for_mode(mode: str) -> Tuple[TempoPreset, ...]:
    """Return the fixed preset list for a game mode."""
    if normalize_mode(mode) == "long":
        return LONG_GAME_PRESETS
    return SHORT_GAME_PRESETS


def frames_to_ms(frames: int) -> int:
    """Convert a frame count at FRAME_RATE to whole milliseconds."""
    return round((frames / FRAME_RATE) * 1000)


def get_total_time(preset: TempoPreset) -> int:
    """Total swing time (backswing + downswing) in milliseconds."""
    return frames_to_ms(preset.backswing_frames + preset.downswing_frames)


def format_time(ms: float) -> str:
    """Format milliseconds as seconds with 2 decimals, e.g. '1.07s'."""
    return f"{ms / 1000:.2f}s"


def get_preset_by_id(presets: Sequence[TempoPreset], preset_id: str) -> Optional[TempoPreset]:
    """Find a preset by id, or None."""
    for preset in presets:
        if preset.id == preset_id:
            return preset
    return None


def get_preset_ids(presets: Sequence[TempoPreset]) -> List[str]:
    return [p.id for p in presets]
