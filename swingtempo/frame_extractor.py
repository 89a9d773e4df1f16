"""Still-frame extraction from video files using MoviePy."""

import math
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np
from moviepy import VideoFileClip

from .models import ExtractedFrame


class FrameExtractionError(Exception):
    """A single frame could not be extracted."""


def sample_times(count: int, duration_ms: float) -> List[int]:
    """Evenly spaced sample positions (ms) from 0 to duration_ms inclusive."""
    if count < 1:
        raise ValueError("Frame count must be at least 1")
    if duration_ms < 0:
        raise ValueError("Duration must be positive")

    interval = duration_ms / (count - 1) if count > 1 else 0
    return [int(math.floor(i * interval + 0.5)) for i in range(count)]


class FrameExtractor:
    """Pulls RGB stills out of videos at millisecond positions."""

    def __init__(self, clip_loader: Optional[Callable[[str], VideoFileClip]] = None) -> None:
        """
        Initialize extractor with optional custom clip loader.

        Args:
            clip_loader: Function to load video clips (for testing injection)
        """
        self._load_clip = clip_loader or VideoFileClip
        self._clips: Dict[str, VideoFileClip] = {}

    def _clip(self, uri: str) -> VideoFileClip:
        if uri not in self._clips:
            self._clips[uri] = self._load_clip(uri)
        return self._clips[uri]

    def get_video_info(self, uri: str) -> Tuple[int, float, int, int]:
        """
        Get video metadata.

        Returns:
            (duration_ms, fps, width, height)

        Raises:
            FrameExtractionError: If the clip cannot be loaded
        """
        try:
            clip = self._clip(uri)
        except Exception as e:
            raise FrameExtractionError(f"Could not open video: {uri}: {e}") from e
        duration_ms = int(round((clip.duration or 0) * 1000))
        width, height = clip.size
        return duration_ms, float(clip.fps or 0), int(width), int(height)

    def extract_frame_at(self, uri: str, time_ms: int) -> ExtractedFrame:
        """
        Extract one frame at a time position.

        Raises:
            FrameExtractionError: If the clip cannot be loaded or decoded
        """
        try:
            clip = self._clip(uri)
            # Stay inside the clip; the last instant has no frame.
            safe_time = max(0.0, min(time_ms / 1000, clip.duration - 0.01))
            image = np.asarray(clip.get_frame(safe_time))
        except Exception as e:
            raise FrameExtractionError(f"Failed to extract frame at {time_ms}ms: {e}") from e

        if image.ndim < 2:
            raise FrameExtractionError(f"Failed to extract frame at {time_ms}ms: empty image")

        height, width = image.shape[:2]
        return ExtractedFrame(time_ms=time_ms, image=image, width=width, height=height)

    def extract_frames(
        self,
        uri: str,
        count: int,
        duration_ms: float,
        continue_on_error: bool = False,
        on_error: Optional[Callable[[int, FrameExtractionError], None]] = None,
    ) -> List[ExtractedFrame]:
        """
        Extract frames evenly distributed from 0 to duration_ms.

        For count=5 and duration 5000ms frames are taken at
        0, 1250, 2500, 3750 and 5000ms. count=1 takes only 0ms.

        Args:
            uri: Video location
            count: Number of frames to extract (at least 1)
            duration_ms: Video duration in milliseconds
            continue_on_error: Skip frames that fail instead of raising
            on_error: Called with (time_ms, error) for each skipped frame

        Returns:
            Extracted frames in time order (failed ones omitted)
        """
        frames = []
        for time_ms in sample_times(count, duration_ms):
            try:
                frames.append(self.extract_frame_at(uri, time_ms))
            except FrameExtractionError as e:
                if not continue_on_error:
                    raise
                if on_error is not None:
                    on_error(time_ms, e)
        return frames

    def release(self, uri: str) -> None:
        """Close and forget the cached clip for one video, if any."""
        clip = self._clips.pop(uri, None)
        if clip is not None:
            clip.close()

    def close(self) -> None:
        """Release all cached clips."""
        for clip in self._clips.values():
            clip.close()
        self._clips.clear()
