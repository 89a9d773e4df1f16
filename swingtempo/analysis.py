"""Tempo ratio calculations and comparison against target presets."""

import math
import sys

from .models import SwingAnalysis, TempoComparison, TempoPreset
from .tempos import presets_for_mode

# Tempos within this percentage of the target count as "similar".
SIMILARITY_TOLERANCE_PERCENT = 5


def calculate_ratio_from_frames(
    takeaway_frame: int,
    top_frame: int,
    impact_frame: int,
) -> float:
    """
    Calculate the backswing to downswing ratio from three event frames.

    Example: takeaway at 10, top at 40, impact at 50
    - backswing = 30 frames, downswing = 10 frames
    - ratio = 3.0

    Args:
        takeaway_frame: Frame where the club starts moving back
        top_frame: Frame at the top of the backswing
        impact_frame: Frame at ball impact

    Returns:
        Backswing frames divided by downswing frames, or math.inf when
        the downswing has zero frames
    """
    backswing_frames = top_frame - takeaway_frame
    downswing_frames = impact_frame - top_frame

    if downswing_frames == 0:
        # Ordered frames never get here, so this points at a caller bug.
        print(
            f"Warning: zero-length downswing (top={top_frame}, impact={impact_frame}), "
            f"ratio is infinite",
            file=sys.stderr,
        )
        return math.inf

    return backswing_frames / downswing_frames


def build_analysis(
    takeaway_frame: int,
    top_frame: int,
    impact_frame: int,
    confidence: float = 1.0,
    manually_adjusted: bool = False,
) -> SwingAnalysis:
    """Create a SwingAnalysis with its derived fields filled in."""
    analysis = SwingAnalysis(
        takeaway_frame=takeaway_frame,
        top_frame=top_frame,
        impact_frame=impact_frame,
        backswing_frames=0,
        downswing_frames=0,
        ratio=0.0,
        confidence=confidence,
        manually_adjusted=manually_adjusted,
    )
    analysis.recompute_ratio()
    return analysis


def compare_to_target_tempo(
    analysis: SwingAnalysis,
    target: TempoPreset,
) -> TempoComparison:
    """
    Compare a swing analysis to a target tempo preset.

    The percent difference is positive when the detected ratio is higher
    than the target (faster downswing relative to backswing) and negative
    when it is lower. Values within SIMILARITY_TOLERANCE_PERCENT, boundary
    included, are classified as "similar".

    An infinite detected ratio is classified as "faster" with an infinite
    percent difference rather than raising.
    """
    detected_ratio = analysis.ratio
    target_ratio = target.backswing_frames / target.downswing_frames

    percent_difference = ((detected_ratio - target_ratio) / target_ratio) * 100

    if abs(percent_difference) <= SIMILARITY_TOLERANCE_PERCENT:
        comparison = "similar"
    elif percent_difference > 0:
        comparison = "faster"
    else:
        comparison = "slower"

    if math.isfinite(percent_difference):
        percent_difference = round(percent_difference, 2)

    return TempoComparison(
        detected_ratio=detected_ratio,
        target_ratio=target_ratio,
        percent_difference=percent_difference,
        comparison=comparison,
    )


def get_tempo_feedback(comparison: TempoComparison) -> str:
    """Human-readable feedback for a tempo comparison."""
    if comparison.comparison == "similar":
        return "Your tempo matches the target!"

    direction = "faster" if comparison.comparison == "faster" else "slower"
    if math.isfinite(comparison.percent_difference):
        amount = str(abs(round(comparison.percent_difference)))
    else:
        amount = "inf"
    return f"Your tempo is {amount}% {direction} than target"


def find_closest_preset(ratio: float, mode: str) -> TempoPreset:
    """
    Pick the preset to recommend for a detected ratio.

    Every preset within a mode shares one ratio (3:1 for long, 2:1 for
    short), so this returns the middle preset of the mode's list (24/8 or
    18/9) whatever the ratio is.

    Raises:
        ValueError: If mode is not a known game mode
    """
    presets = presets_for_mode(mode)
    return presets[len(presets) // 2]


def format_ratio(ratio: float) -> str:
    """Format a ratio for display, e.g. '3.0:1'."""
    if not math.isfinite(ratio):
        return "inf:1"
    return f"{ratio:.1f}:1"
