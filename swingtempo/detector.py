"""Swing phase detectors.

A detector goes through Uninitialized -> Ready -> Disposed and can be
initialized again after disposal. Detection runs as a coroutine; the
frame sampling and scoring work is pushed to a worker thread so the
caller's event loop is not blocked.
"""

import asyncio
import random
import sys
import time
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from .config import DetectorConfig
from .frame_extractor import FrameExtractionError, FrameExtractor
from .frame_time import clamp, get_frame_count, ms_to_frame
from .models import MotionSample, SwingDetectionResult
from .motion_analysis import (
    analyze_motion,
    compute_motion_scores,
    detect_swing_phases,
    smooth_scores,
)


class SwingDetectorError(Exception):
    """Base class for swing detector errors."""


class DetectorNotInitializedError(SwingDetectorError):
    """detect_swing_phases() was called before initialize()."""

    def __init__(self, message: str = "Detector not initialized") -> None:
        super().__init__(message)


class DetectionFailedError(SwingDetectorError):
    """No usable swing estimate could be produced."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class SwingDetector(ABC):
    """Interface shared by all swing phase detectors."""

    @abstractmethod
    def is_ready(self) -> bool:
        """True once initialized and not yet disposed."""

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the detector. Calling it again while ready is a no-op."""

    @abstractmethod
    async def detect_swing_phases(
        self,
        uri: str,
        fps: float,
        duration_ms: Optional[int] = None,
        sample_count: Optional[int] = None,
    ) -> SwingDetectionResult:
        """
        Detect takeaway, top and impact frames in a video.

        Raises:
            DetectorNotInitializedError: If the detector is not ready
            DetectionFailedError: If no estimate could be produced
        """

    @abstractmethod
    def dispose(self) -> None:
        """Release resources. Safe to call from any state, repeatedly."""


def order_frames(
    takeaway: int,
    top: int,
    impact: int,
    total_frames: int,
    min_gap: int = 1,
) -> Tuple[int, int, int]:
    """
    Force three frames into strictly increasing order inside the video.

    Frames are pushed apart by at least min_gap going forward, then pulled
    back from the last frame if that overflowed.

    Raises:
        ValueError: If the video is too short to hold three ordered frames
    """
    max_frame = total_frames - 1
    if max_frame < 2 * min_gap:
        raise ValueError(f"Video too short for three ordered frames: {total_frames} frames")

    takeaway, top, impact = sorted((takeaway, top, impact))
    takeaway = clamp(takeaway, 0, max_frame)
    top = max(top, takeaway + min_gap)
    impact = max(impact, top + min_gap)

    if impact > max_frame:
        impact = max_frame
        top = min(top, impact - min_gap)
        takeaway = min(takeaway, top - min_gap)
    return takeaway, top, impact


class MotionSwingDetector(SwingDetector):
    """
    Detects swing phases from frame-to-frame motion.

    Samples a bounded number of stills across the video, scores the
    motion between consecutive samples and looks for the address /
    backswing / top / downswing / impact pattern.
    """

    def __init__(
        self,
        extractor: Optional[FrameExtractor] = None,
        config: Optional[DetectorConfig] = None,
    ) -> None:
        self._extractor = extractor
        self.config = config or DetectorConfig()
        self._ready = False

    def is_ready(self) -> bool:
        return self._ready

    async def initialize(self) -> None:
        if self._ready:
            return
        if self._extractor is None:
            self._extractor = FrameExtractor()
        self._ready = True

    def dispose(self) -> None:
        self._ready = False
        if self._extractor is not None:
            self._extractor.close()

    async def detect_swing_phases(
        self,
        uri: str,
        fps: float,
        duration_ms: Optional[int] = None,
        sample_count: Optional[int] = None,
    ) -> SwingDetectionResult:
        if not self._ready:
            raise DetectorNotInitializedError()
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")

        extractor = self._extractor
        start = time.monotonic()
        takeaway, top, impact, confidence = await asyncio.to_thread(
            self._run_detection, extractor, uri, fps, duration_ms, sample_count
        )
        processing_time_ms = max(0.0, (time.monotonic() - start) * 1000)

        return SwingDetectionResult(
            takeaway_frame=takeaway,
            top_frame=top,
            impact_frame=impact,
            confidence=confidence,
            processing_time_ms=processing_time_ms,
        )

    def _resolve_duration(self, extractor: FrameExtractor, uri: str) -> int:
        try:
            duration_ms, _, _, _ = extractor.get_video_info(uri)
        except FrameExtractionError as e:
            print(
                f"Warning: could not read duration of {uri} ({e}), "
                f"assuming {self.config.default_duration_ms}ms",
                file=sys.stderr,
            )
            return self.config.default_duration_ms
        return duration_ms if duration_ms > 0 else self.config.default_duration_ms

    def _run_detection(
        self,
        extractor: FrameExtractor,
        uri: str,
        fps: float,
        duration_ms: Optional[int],
        sample_count: Optional[int],
    ) -> Tuple[int, int, int, float]:
        try:
            return self._detect(extractor, uri, fps, duration_ms, sample_count)
        finally:
            # Clips are not kept between detections.
            extractor.release(uri)

    def _detect(
        self,
        extractor: FrameExtractor,
        uri: str,
        fps: float,
        duration_ms: Optional[int],
        sample_count: Optional[int],
    ) -> Tuple[int, int, int, float]:
        if duration_ms is None:
            duration_ms = self._resolve_duration(extractor, uri)
        count = self.config.bounded_sample_count(sample_count)

        failures: List[Tuple[int, FrameExtractionError]] = []
        frames = extractor.extract_frames(
            uri, count, duration_ms,
            continue_on_error=True,
            on_error=lambda t, e: failures.append((t, e)),
        )
        if failures:
            print(
                f"Warning: skipped {len(failures)}/{count} samples that failed to extract",
                file=sys.stderr,
            )

        if len(frames) < self.config.min_frames:
            cause = failures[-1][1] if failures else None
            raise DetectionFailedError(
                f"Insufficient frames extracted: {len(frames)} "
                f"(minimum: {self.config.min_frames})",
                cause,
            )

        scores = smooth_scores(compute_motion_scores(frames), self.config.smoothing_window)
        analysis = analyze_motion(frames, scores)
        phases = detect_swing_phases(
            analysis,
            takeaway_threshold=self.config.takeaway_threshold,
            top_search_range=self.config.top_search_range,
            impact_search_start=self.config.impact_search_start,
        )
        if phases is None:
            raise DetectionFailedError("Could not detect swing phases in video")

        total_frames = get_frame_count(duration_ms, fps)
        try:
            takeaway, top, impact = order_frames(
                self._sample_to_frame(analysis, phases.takeaway_index, fps),
                self._sample_to_frame(analysis, phases.top_index, fps),
                self._sample_to_frame(analysis, phases.impact_index, fps),
                total_frames,
            )
        except ValueError as e:
            raise DetectionFailedError(str(e), e) from e

        # Fewer successful samples means less evidence.
        success_fraction = len(frames) / count
        confidence = round(clamp(phases.confidence * success_fraction, 0.0, 1.0), 2)
        return takeaway, top, impact, confidence

    @staticmethod
    def _sample_to_frame(analysis: List[MotionSample], index: int, fps: float) -> int:
        return ms_to_frame(analysis[index].time_ms, fps)


# Typical swing positions as a fraction of the clip length.
_MOCK_TAKEAWAY = 0.1
_MOCK_TOP = 0.6
_MOCK_IMPACT = 0.8


class MockSwingDetector(SwingDetector):
    """Simulated detector for development and tests.

    Places the phases at typical positions with +/-10% jitter and reports
    a confidence between 0.7 and 0.95.
    """

    def __init__(
        self,
        init_delay_s: float = 0.1,
        detection_delay_s: float = 0.5,
        default_duration_ms: int = 5000,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.init_delay_s = init_delay_s
        self.detection_delay_s = detection_delay_s
        self.default_duration_ms = default_duration_ms
        self._rng = rng or random.Random()
        self._ready = False

    def is_ready(self) -> bool:
        return self._ready

    async def initialize(self) -> None:
        if self._ready:
            return
        await asyncio.sleep(self.init_delay_s)
        self._ready = True

    def dispose(self) -> None:
        self._ready = False

    def _jitter(self) -> float:
        return 0.9 + self._rng.random() * 0.2

    async def detect_swing_phases(
        self,
        uri: str,
        fps: float,
        duration_ms: Optional[int] = None,
        sample_count: Optional[int] = None,
    ) -> SwingDetectionResult:
        if not self._ready:
            raise DetectorNotInitializedError()

        start = time.monotonic()
        await asyncio.sleep(self.detection_delay_s)

        total_frames = get_frame_count(duration_ms or self.default_duration_ms, fps)
        raw = [
            int(total_frames * pct * self._jitter())
            for pct in (_MOCK_TAKEAWAY, _MOCK_TOP, _MOCK_IMPACT)
        ]
        try:
            takeaway, top, impact = order_frames(*raw, total_frames, min_gap=5)
        except ValueError as e:
            raise DetectionFailedError(str(e), e) from e

        confidence = 0.7 + self._rng.random() * 0.25
        return SwingDetectionResult(
            takeaway_frame=takeaway,
            top_frame=top,
            impact_frame=impact,
            confidence=round(confidence, 2),
            processing_time_ms=(time.monotonic() - start) * 1000,
        )


def create_swing_detector(kind: str = "auto", **kwargs) -> SwingDetector:
    """
    Create a swing detector.

    Args:
        kind: 'motion', 'mock', or 'auto' (currently the motion detector)
        **kwargs: Passed to the detector constructor

    Raises:
        ValueError: If kind is unknown
    """
    if kind in ("auto", "motion"):
        return MotionSwingDetector(**kwargs)
    if kind == "mock":
        return MockSwingDetector(**kwargs)
    raise ValueError(f"Unknown detector kind: {kind!r}")
