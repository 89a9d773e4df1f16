"""Conversions between milliseconds and frame indices."""

import math


def ms_to_frame(ms: float, fps: float) -> int:
    """Frame index containing the given time (floored, not clamped)."""
    return math.floor((ms / 1000) * fps)


def frame_to_ms(frame: int, fps: float) -> float:
    """Start time of a frame in milliseconds."""
    return (frame / fps) * 1000


def get_frame_count(duration_ms: float, fps: float) -> int:
    """Total number of whole frames in a video of the given duration."""
    if duration_ms <= 0:
        return 0
    return math.floor((duration_ms / 1000) * fps)


def clamp(value, low, high):
    """Clamp value into [low, high]."""
    return max(low, min(value, high))
