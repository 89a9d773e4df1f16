"""Motion analysis for detecting swing phases from sampled frames.

A swing has a recognisable motion profile:
1. Still period (address)
2. Gradual motion increase (backswing)
3. Brief pause at the direction change (top)
4. Rapid increase (downswing)
5. Peak motion (impact)
6. Decreasing motion (follow-through)
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

import cv2
import numpy as np

from .models import ExtractedFrame, MotionSample

DEFAULT_MOTION_THRESHOLD = 0.1


@dataclass(frozen=True)
class PhaseEstimate:
    """Swing phases as indices into the sample sequence."""

    takeaway_index: int
    top_index: int
    impact_index: int
    confidence: float


def _to_gray(image: np.ndarray) -> np.ndarray:
    if image.ndim == 2:
        return image.astype(np.uint8)
    return cv2.cvtColor(image.astype(np.uint8), cv2.COLOR_RGB2GRAY)


def frame_difference(gray_a: np.ndarray, gray_b: np.ndarray) -> float:
    """
    Mean absolute difference between two grayscale frames.

    The difference image is blurred to suppress sensor noise before
    averaging over the frame area.
    """
    if gray_a.shape != gray_b.shape:
        gray_b = cv2.resize(gray_b, (gray_a.shape[1], gray_a.shape[0]))
    diff = cv2.absdiff(gray_a, gray_b)
    diff = cv2.GaussianBlur(diff, (5, 5), 0)
    area = diff.shape[0] * diff.shape[1]
    return float(np.sum(diff)) / area if area > 0 else 0.0


def compute_motion_scores(frames: Sequence[ExtractedFrame]) -> List[float]:
    """
    Compute a 0-1 motion score for each frame.

    Each score is the difference to the previous frame, normalized by the
    largest difference in the sequence. The first frame has no predecessor
    and takes the second frame's score.

    Returns:
        One score per frame; all zeros when there is no motion or fewer
        than two frames
    """
    n = len(frames)
    if n < 2:
        return [0.0] * n

    grays = [_to_gray(f.image) for f in frames]
    diffs = [frame_difference(grays[i - 1], grays[i]) for i in range(1, n)]
    raw = np.array([diffs[0]] + diffs, dtype=np.float64)

    peak = raw.max()
    if peak <= 0:
        return [0.0] * n
    return [float(s) for s in np.clip(raw / peak, 0.0, 1.0)]


def smooth_scores(scores: Sequence[float], window: int = 3) -> List[float]:
    """Moving-average smoothing; short series are returned unchanged."""
    if window <= 1 or len(scores) < window:
        return list(scores)
    kernel = np.ones(window) / window
    padded = np.pad(np.asarray(scores, dtype=np.float64), window // 2, mode="edge")
    smoothed = np.convolve(padded, kernel, mode="valid")[: len(scores)]
    return [float(s) for s in smoothed]


def analyze_motion(
    frames: Sequence[ExtractedFrame],
    motion_scores: Sequence[float],
) -> List[MotionSample]:
    """
    Pair extracted frames with their motion scores.

    Raises:
        ValueError: If frames and scores differ in length
    """
    if len(frames) != len(motion_scores):
        raise ValueError("Frames and motion scores must have the same length")

    return [
        MotionSample(frame_index=i, time_ms=frame.time_ms, motion_score=motion_scores[i])
        for i, frame in enumerate(frames)
    ]


def detect_peak_motion(analysis: Sequence[MotionSample]) -> Optional[MotionSample]:
    """Sample with the highest motion score (first one on ties)."""
    if not analysis:
        return None
    best = analysis[0]
    for sample in analysis[1:]:
        if sample.motion_score > best.motion_score:
            best = sample
    return best


def find_motion_start(
    analysis: Sequence[MotionSample],
    threshold: float = DEFAULT_MOTION_THRESHOLD,
) -> Optional[MotionSample]:
    """First sample whose motion exceeds the threshold."""
    for sample in analysis:
        if sample.motion_score > threshold:
            return sample
    return None


def find_motion_peak(
    analysis: Sequence[MotionSample],
    start_index: int,
    end_index: int,
) -> Optional[MotionSample]:
    """Peak motion within analysis[start_index:end_index]."""
    return detect_peak_motion(analysis[start_index:end_index])


def find_motion_end(
    analysis: Sequence[MotionSample],
    start_index: int,
    threshold: float = DEFAULT_MOTION_THRESHOLD,
) -> Optional[MotionSample]:
    """
    First sample below the threshold at or after start_index.

    Returns the last sample when motion never drops, or None when
    start_index is past the end.
    """
    if start_index >= len(analysis):
        return None
    search = analysis[start_index:]
    for sample in search:
        if sample.motion_score < threshold:
            return sample
    return search[-1]


def _end_of_rise(analysis: Sequence[MotionSample], start: int, stop: int) -> int:
    """Index where motion stops rising, walking forward from start (exclusive stop)."""
    index = start
    while index + 1 < stop and analysis[index + 1].motion_score >= analysis[index].motion_score:
        index += 1
    return index


def detect_swing_phases(
    analysis: Sequence[MotionSample],
    takeaway_threshold: float = DEFAULT_MOTION_THRESHOLD,
    top_search_range: float = 0.7,
    impact_search_start: float = 0.5,
) -> Optional[PhaseEstimate]:
    """
    Estimate takeaway, top and impact from a motion profile.

    - Takeaway: first sample above takeaway_threshold
    - Impact: peak motion after takeaway, from impact_search_start of the
      samples onwards
    - Top: lowest motion once the backswing has stopped speeding up, before
      impact and within top_search_range of the samples

    The top is never the takeaway sample itself: a profile that rises
    straight into impact has no pause to find and yields None.

    Confidence is the mean of three clarities: how clearly motion starts,
    how still the top is and how strong the impact peak is.

    Returns:
        PhaseEstimate, or None if the profile has no usable pattern
    """
    total = len(analysis)
    if total < 3:
        return None

    takeaway = find_motion_start(analysis, takeaway_threshold)
    if takeaway is None:
        return None

    search_start = max(takeaway.frame_index + 1, int(total * impact_search_start))
    impact = find_motion_peak(analysis, search_start, total)
    if impact is None:
        return None

    backswing_peak = _end_of_rise(analysis, takeaway.frame_index, impact.frame_index)
    top_search_end = min(impact.frame_index, int(total * top_search_range))
    pause = analysis[backswing_peak + 1:top_search_end]
    if not pause:
        return None
    top = pause[0]
    for sample in pause[1:]:
        if sample.motion_score < top.motion_score:
            top = sample

    takeaway_clarity = min(takeaway.motion_score / takeaway_threshold, 1.0)
    top_clarity = 1.0 - top.motion_score
    impact_clarity = impact.motion_score
    confidence = (takeaway_clarity + top_clarity + impact_clarity) / 3

    return PhaseEstimate(
        takeaway_index=takeaway.frame_index,
        top_index=top.frame_index,
        impact_index=impact.frame_index,
        confidence=round(min(max(confidence, 0.0), 1.0), 2),
    )
