"""Data models for swingtempo."""

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .frame_time import get_frame_count


@dataclass(frozen=True)
class VideoHandle:
    """A playable video asset.

    Immutable for the lifetime of a playback session.
    """

    uri: str
    fps: float
    duration_ms: int

    def __post_init__(self) -> None:
        if self.fps <= 0:
            raise ValueError(f"fps must be positive, got {self.fps}")
        if self.duration_ms < 0:
            raise ValueError(f"duration_ms must be non-negative, got {self.duration_ms}")

    @property
    def total_frames(self) -> int:
        """Number of whole frames in the video."""
        return get_frame_count(self.duration_ms, self.fps)


@dataclass
class PlaybackState:
    """Mutable playback state owned by a PlaybackController."""

    total_frames: int
    current_frame: int = 0
    is_playing: bool = False
    playback_speed: float = 1.0

    @property
    def max_frame(self) -> int:
        return max(0, self.total_frames - 1)


@dataclass
class SwingAnalysis:
    """One detected or adjusted interpretation of a swing.

    backswing_frames, downswing_frames and ratio are derived from the
    three event frames; recompute_ratio() keeps them in step.
    """

    takeaway_frame: int
    top_frame: int
    impact_frame: int
    backswing_frames: int
    downswing_frames: int
    ratio: float
    confidence: float
    manually_adjusted: bool = False

    def recompute_ratio(self) -> None:
        """Refresh the derived frame counts and ratio in place."""
        # Local import: analysis imports models.
        from .analysis import calculate_ratio_from_frames

        self.backswing_frames = self.top_frame - self.takeaway_frame
        self.downswing_frames = self.impact_frame - self.top_frame
        self.ratio = calculate_ratio_from_frames(
            self.takeaway_frame, self.top_frame, self.impact_frame
        )

    @property
    def is_ordered(self) -> bool:
        return self.takeaway_frame < self.top_frame < self.impact_frame

    @classmethod
    def from_detection(cls, result: "SwingDetectionResult") -> "SwingAnalysis":
        """Build an untouched analysis from detector output."""
        analysis = cls(
            takeaway_frame=result.takeaway_frame,
            top_frame=result.top_frame,
            impact_frame=result.impact_frame,
            backswing_frames=0,
            downswing_frames=0,
            ratio=0.0,
            confidence=result.confidence,
            manually_adjusted=False,
        )
        analysis.recompute_ratio()
        return analysis


@dataclass(frozen=True)
class TempoPreset:
    """A named target backswing/downswing frame pair."""

    id: str
    label: str
    backswing_frames: int
    downswing_frames: int
    description: str

    @property
    def ratio(self) -> float:
        return self.backswing_frames / self.downswing_frames


@dataclass(frozen=True)
class TempoComparison:
    """Result of comparing a detected ratio against a target preset."""

    detected_ratio: float
    target_ratio: float
    percent_difference: float  # Positive = faster (higher ratio)
    comparison: str  # "faster", "slower" or "similar"


@dataclass(frozen=True)
class SwingDetectionResult:
    """Raw output of a swing detector."""

    takeaway_frame: int
    top_frame: int
    impact_frame: int
    confidence: float
    processing_time_ms: float


@dataclass(frozen=True)
class ExtractedFrame:
    """A still image pulled from a video at a given time."""

    time_ms: int
    image: np.ndarray = field(repr=False, compare=False)  # RGB
    width: int = 0
    height: int = 0


@dataclass(frozen=True)
class MotionSample:
    """Motion score for one sampled frame."""

    frame_index: int  # Index in the sample sequence, not a video frame
    time_ms: int
    motion_score: float  # 0-1, higher = more motion


@dataclass
class SwingVideo:
    """A recorded swing video with optional analysis."""

    id: str
    uri: str
    created_at: int  # Unix timestamp (ms)
    duration_ms: int
    fps: float
    width: int
    height: int
    analysis: Optional[SwingAnalysis] = None
    session_id: Optional[str] = None
    thumbnail_uri: Optional[str] = None

    @property
    def handle(self) -> VideoHandle:
        return VideoHandle(uri=self.uri, fps=self.fps, duration_ms=self.duration_ms)
