"""Pytest fixtures for swingtempo tests."""

import pytest
import numpy as np
from moviepy import VideoClip, ColorClip

from swingtempo.analysis import build_analysis
from swingtempo.models import VideoHandle
from swingtempo.playback import EVENTS, DecodingSurface


def swing_position(t):
    """Bar x position (0-1) for a swing-shaped motion profile.

    Still at address, slow backswing, pause at the top, fast downswing
    through impact, then a decelerating follow-through.
    """
    if t < 0.4:
        return 0.2
    if t < 1.2:
        return 0.2 + 0.6 * (t - 0.4) / 0.8
    if t < 1.3:
        return 0.8
    if t < 1.5:
        return 0.8 - 0.7 * (t - 1.3) / 0.2
    if t < 1.8:
        return 0.1 - 0.1 * (t - 1.5) / 0.3
    return 0.0


@pytest.fixture
def swing_clip():
    """Create a synthetic swing video: a bright bar moving across a dark frame."""

    def _create(duration=2.0, size=(160, 120), fps=30):
        width, height = size
        bar = 10

        def make_frame(t):
            frame = np.zeros((height, width, 3), dtype=np.uint8)
            x = int(swing_position(t) * (width - bar))
            frame[:, x:x + bar, :] = 255
            return frame

        return VideoClip(make_frame, duration=duration).with_fps(fps)

    return _create


@pytest.fixture
def color_clip():
    """Create a solid color clip (no motion at all)."""

    def _create(duration=2.0, size=(160, 120), color=(40, 120, 40)):
        return ColorClip(size=size, color=color, duration=duration).with_fps(30)

    return _create


@pytest.fixture
def mock_video_loader(swing_clip):
    """Create a mock video loader that returns synthetic swing clips."""
    clips = {}

    def loader(filepath):
        if filepath not in clips:
            clips[filepath] = swing_clip()
        return clips[filepath]

    loader.clips = clips
    return loader


class FlakyClip:
    """Wraps a clip and fails get_frame() on selected calls."""

    def __init__(self, clip, fail_every=3):
        self._clip = clip
        self.fail_every = fail_every
        self.calls = 0
        self.closed = False

    @property
    def duration(self):
        return self._clip.duration

    @property
    def fps(self):
        return self._clip.fps

    @property
    def size(self):
        return self._clip.size

    def get_frame(self, t):
        self.calls += 1
        if self.fail_every and self.calls % self.fail_every == 0:
            raise IOError(f"decode error at {t:.3f}s")
        return self._clip.get_frame(t)

    def close(self):
        self.closed = True
        self._clip.close()


@pytest.fixture
def flaky_loader(swing_clip):
    """Loader whose clips fail every third frame read (fail_every=1 fails all)."""

    def _create(fail_every=3):
        def loader(filepath):
            return FlakyClip(swing_clip(), fail_every=fail_every)

        return loader

    return _create


class FakeSurface(DecodingSurface):
    """Decoding surface that records commands and emits events on demand."""

    def __init__(self):
        self.current_time = 0.0
        self.playback_rate = 1.0
        self.commands = []
        self.released = False
        self.listeners = {e: [] for e in EVENTS}

    def play(self):
        self.commands.append("play")

    def pause(self):
        self.commands.append("pause")

    def add_listener(self, event, callback):
        self.listeners[event].append(callback)

    def remove_listener(self, event, callback):
        self.listeners[event].remove(callback)

    def emit(self, event, *args):
        for callback in list(self.listeners[event]):
            callback(*args)

    def release(self):
        self.released = True


@pytest.fixture
def fake_surface():
    return FakeSurface()


@pytest.fixture
def video_handle():
    """5s video at 30fps: 150 frames."""
    return VideoHandle(uri="swing.mp4", fps=30, duration_ms=5000)


@pytest.fixture
def sample_analysis():
    """Takeaway 10, top 40, impact 50: a 3:1 tempo."""
    return build_analysis(10, 40, 50, confidence=0.85)
