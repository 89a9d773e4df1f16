"""Frame-accurate video playback control.

The controller owns the PlaybackState for one video. It sends commands to
a decoding surface and folds the surface's asynchronous notifications
(time updates, playing changes, end of media) back into frame state.
Every state change happens under one lock so a notification arriving on a
decoder thread cannot interleave with an explicit seek.
"""

import math
import threading
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

import numpy as np
from moviepy import VideoFileClip

from .config import MAX_PLAYBACK_SPEED, MIN_PLAYBACK_SPEED, PLAYBACK_SPEEDS
from .frame_time import clamp, frame_to_ms, ms_to_frame
from .models import PlaybackState, VideoHandle

TIME_UPDATE = "timeUpdate"
PLAYING_CHANGE = "playingChange"
PLAY_TO_END = "playToEnd"
EVENTS = (TIME_UPDATE, PLAYING_CHANGE, PLAY_TO_END)


class DecodingSurface(ABC):
    """
    Interface of a video decoding surface.

    current_time is in seconds. Listeners receive:
    - timeUpdate(current_time)
    - playingChange(is_playing)
    - playToEnd()
    """

    current_time: float
    playback_rate: float

    @abstractmethod
    def play(self) -> None:
        pass

    @abstractmethod
    def pause(self) -> None:
        pass

    @abstractmethod
    def add_listener(self, event: str, callback: Callable) -> None:
        pass

    @abstractmethod
    def remove_listener(self, event: str, callback: Callable) -> None:
        pass

    @abstractmethod
    def release(self) -> None:
        pass


class ClipSurface(DecodingSurface):
    """Decoding surface backed by a MoviePy clip.

    Time only moves when advance() is called, which lets a display loop
    (or a test) drive playback at whatever cadence it renders.
    """

    def __init__(
        self,
        uri: str,
        clip_loader: Optional[Callable[[str], VideoFileClip]] = None,
    ) -> None:
        """
        Args:
            uri: Video to open
            clip_loader: Function to load video clips (for testing injection)
        """
        self._clip = (clip_loader or VideoFileClip)(uri)
        self._current_time = 0.0
        self.playback_rate = 1.0
        self.playing = False
        self._listeners: Dict[str, List[Callable]] = {e: [] for e in EVENTS}

    @property
    def duration(self) -> float:
        return float(self._clip.duration or 0.0)

    @property
    def current_time(self) -> float:
        return self._current_time

    @current_time.setter
    def current_time(self, seconds: float) -> None:
        self._current_time = clamp(seconds, 0.0, self.duration)

    def add_listener(self, event: str, callback: Callable) -> None:
        if event not in self._listeners:
            raise ValueError(f"Unknown surface event: {event!r}")
        self._listeners[event].append(callback)

    def remove_listener(self, event: str, callback: Callable) -> None:
        if callback in self._listeners.get(event, []):
            self._listeners[event].remove(callback)

    def _emit(self, event: str, *args) -> None:
        for callback in list(self._listeners[event]):
            callback(*args)

    def play(self) -> None:
        if self.playing:
            return
        if self._current_time >= self.duration:
            self._current_time = 0.0
        self.playing = True
        self._emit(PLAYING_CHANGE, True)

    def pause(self) -> None:
        if not self.playing:
            return
        self.playing = False
        self._emit(PLAYING_CHANGE, False)

    def advance(self, wall_seconds: float) -> None:
        """Move playback forward by wall_seconds scaled by the playback rate."""
        if not self.playing:
            return
        self._current_time = min(
            self._current_time + wall_seconds * self.playback_rate, self.duration
        )
        self._emit(TIME_UPDATE, self._current_time)
        if self._current_time >= self.duration:
            self.playing = False
            self._emit(PLAYING_CHANGE, False)
            self._emit(PLAY_TO_END)

    def get_frame(self) -> np.ndarray:
        """RGB image at the current position."""
        safe_time = max(0.0, min(self._current_time, self.duration - 0.01))
        return self._clip.get_frame(safe_time)

    def release(self) -> None:
        for listeners in self._listeners.values():
            listeners.clear()
        self._clip.close()


class PlaybackController:
    """Play/pause, frame stepping, seeking and speed for one video."""

    def __init__(
        self,
        surface: DecodingSurface,
        handle: VideoHandle,
        initial_frame: int = 0,
        on_frame_change: Optional[Callable[[int], None]] = None,
    ) -> None:
        self._surface = surface
        self.handle = handle
        self._on_frame_change = on_frame_change
        self._lock = threading.RLock()
        self._closed = False

        self._state = PlaybackState(total_frames=handle.total_frames)
        self._state.current_frame = clamp(initial_frame, 0, self._state.max_frame)
        if self._state.current_frame > 0:
            surface.current_time = self._state.current_frame / handle.fps

        surface.add_listener(TIME_UPDATE, self._handle_time_update)
        surface.add_listener(PLAYING_CHANGE, self._handle_playing_change)
        surface.add_listener(PLAY_TO_END, self._handle_play_to_end)

    @classmethod
    def open(
        cls,
        uri: str,
        fps: float,
        duration_ms: int,
        initial_frame: int = 0,
        on_frame_change: Optional[Callable[[int], None]] = None,
        clip_loader: Optional[Callable[[str], VideoFileClip]] = None,
    ) -> "PlaybackController":
        """Open a video on a ClipSurface."""
        handle = VideoHandle(uri=uri, fps=fps, duration_ms=duration_ms)
        surface = ClipSurface(uri, clip_loader=clip_loader)
        return cls(surface, handle, initial_frame, on_frame_change)

    # State

    @property
    def surface(self) -> DecodingSurface:
        return self._surface

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def current_frame(self) -> int:
        return self._state.current_frame

    @property
    def total_frames(self) -> int:
        return self._state.total_frames

    @property
    def is_playing(self) -> bool:
        return self._state.is_playing

    @property
    def playback_speed(self) -> float:
        return self._state.playback_speed

    @property
    def current_time_ms(self) -> float:
        return frame_to_ms(self._state.current_frame, self.handle.fps)

    @property
    def can_go_previous(self) -> bool:
        return self._state.current_frame > 0

    @property
    def can_go_next(self) -> bool:
        return self._state.current_frame < self._state.max_frame

    @property
    def position_label(self) -> str:
        """Frame counter text, '0/0' for an empty video."""
        return f"{self._state.current_frame}/{self._state.max_frame}"

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("Playback controller is closed")

    def _set_frame(self, frame: int) -> None:
        if frame == self._state.current_frame:
            return
        self._state.current_frame = frame
        if self._on_frame_change is not None:
            self._on_frame_change(frame)

    # Commands

    def play(self) -> None:
        with self._lock:
            self._check_open()
            if self._state.is_playing:
                return
            self._state.is_playing = True
            self._surface.play()

    def pause(self) -> None:
        with self._lock:
            self._check_open()
            if not self._state.is_playing:
                return
            self._state.is_playing = False
            self._surface.pause()

    def toggle_play_pause(self) -> None:
        with self._lock:
            if self._state.is_playing:
                self.pause()
            else:
                self.play()

    def seek_to_frame(self, frame: int) -> None:
        """
        Jump to a frame, pausing playback.

        The frame is clamped into the video. Seeking to the current frame
        changes nothing and fires no callback.
        """
        with self._lock:
            self._check_open()
            target = clamp(int(frame), 0, self._state.max_frame)
            if target == self._state.current_frame:
                return

            # Manual navigation always stops autoplay.
            if self._state.is_playing:
                self._state.is_playing = False
                self._surface.pause()

            self._surface.current_time = frame_to_ms(target, self.handle.fps) / 1000
            self._set_frame(target)

    def seek_to_time_ms(self, ms: float) -> None:
        self.seek_to_frame(ms_to_frame(ms, self.handle.fps))

    def next_frame(self) -> None:
        with self._lock:
            self.seek_to_frame(self._state.current_frame + 1)

    def previous_frame(self) -> None:
        with self._lock:
            self.seek_to_frame(self._state.current_frame - 1)

    def set_playback_speed(self, speed: float) -> None:
        with self._lock:
            self._check_open()
            speed = clamp(speed, MIN_PLAYBACK_SPEED, MAX_PLAYBACK_SPEED)
            self._surface.playback_rate = speed
            self._state.playback_speed = speed

    def cycle_playback_speed(self) -> float:
        """Step to the next preset speed, wrapping to the slowest. Returns the new speed."""
        with self._lock:
            current = self._state.playback_speed
            faster = [s for s in PLAYBACK_SPEEDS if s > current]
            speed = faster[0] if faster else PLAYBACK_SPEEDS[0]
            self.set_playback_speed(speed)
            return speed

    # Surface notifications

    def _handle_time_update(self, current_time: float) -> None:
        with self._lock:
            # Stray updates while paused (e.g. after a scrub) are ignored.
            if self._closed or not self._state.is_playing:
                return
            frame = clamp(math.floor(current_time * self.handle.fps), 0, self._state.max_frame)
            self._set_frame(frame)

    def _handle_playing_change(self, is_playing: bool) -> None:
        with self._lock:
            if self._closed:
                return
            self._state.is_playing = bool(is_playing)

    def _handle_play_to_end(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._state.is_playing = False
            self._set_frame(self._state.max_frame)

    # Teardown

    def close(self) -> None:
        """Detach from the surface and release it."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._surface.remove_listener(TIME_UPDATE, self._handle_time_update)
            self._surface.remove_listener(PLAYING_CHANGE, self._handle_playing_change)
            self._surface.remove_listener(PLAY_TO_END, self._handle_play_to_end)
            self._surface.release()

    def __enter__(self) -> "PlaybackController":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
