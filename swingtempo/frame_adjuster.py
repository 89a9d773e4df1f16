"""Manual adjustment of swing event frames.

Each marker can be nudged one frame at a time. An edit that would break
takeaway < top < impact or leave [0, total_frames - 1] is refused rather
than applied and corrected afterwards.
"""

from typing import Callable, Dict, Optional, Tuple

from .analysis import build_analysis
from .models import SwingAnalysis

MARKERS = ("takeaway", "top", "impact")


class FrameAdjuster:
    """Bounded increment/decrement controls over a SwingAnalysis."""

    def __init__(
        self,
        analysis: SwingAnalysis,
        total_frames: int,
        on_change: Optional[Callable[[SwingAnalysis], None]] = None,
    ) -> None:
        self._analysis = analysis
        self.total_frames = total_frames
        self._on_change = on_change

    @property
    def analysis(self) -> SwingAnalysis:
        return self._analysis

    def replace_analysis(self, analysis: SwingAnalysis) -> None:
        """Swap in a new analysis, e.g. a fresh auto-detection result."""
        self._analysis = analysis

    def bounds(self, marker: str) -> Tuple[int, int]:
        """Inclusive (low, high) range the marker may take right now."""
        a = self._analysis
        if marker == "takeaway":
            return 0, a.top_frame - 1
        if marker == "top":
            return a.takeaway_frame + 1, a.impact_frame - 1
        if marker == "impact":
            return a.top_frame + 1, self.total_frames - 1
        raise ValueError(f"Unknown frame marker: {marker!r}")

    def _value(self, marker: str) -> int:
        return getattr(self._analysis, f"{marker}_frame")

    def can_increment(self, marker: str) -> bool:
        _, high = self.bounds(marker)
        return self._value(marker) < high

    def can_decrement(self, marker: str) -> bool:
        low, _ = self.bounds(marker)
        return self._value(marker) > low

    def controls(self) -> Dict[str, Tuple[bool, bool]]:
        """(decrement enabled, increment enabled) for every marker."""
        return {m: (self.can_decrement(m), self.can_increment(m)) for m in MARKERS}

    def increment(self, marker: str) -> bool:
        """Move a marker one frame later. Returns False if disabled."""
        if not self.can_increment(marker):
            return False
        self._apply(marker, self._value(marker) + 1)
        return True

    def decrement(self, marker: str) -> bool:
        """Move a marker one frame earlier. Returns False if disabled."""
        if not self.can_decrement(marker):
            return False
        self._apply(marker, self._value(marker) - 1)
        return True

    def _apply(self, marker: str, value: int) -> None:
        frames = {m: self._value(m) for m in MARKERS}
        frames[marker] = value
        self._analysis = build_analysis(
            frames["takeaway"],
            frames["top"],
            frames["impact"],
            confidence=self._analysis.confidence,
            manually_adjusted=True,
        )
        if self._on_change is not None:
            self._on_change(self._analysis)
