"""Timing of the three practice tones in a swing cycle.

Pure calculations only; scheduling and playing the tones is left to the
audio layer.
"""

from dataclasses import dataclass
from typing import List, Optional

from .models import TempoPreset
from .tempos import frames_to_ms


@dataclass(frozen=True)
class ToneSequence:
    """Tone times within one rep, in milliseconds."""

    tone1_time: int  # Start of takeaway, always 0
    tone2_time: int  # Top of backswing
    tone3_time: int  # Impact
    total_cycle_time: int  # tone3 plus the delay between reps


@dataclass(frozen=True)
class NextTone:
    tone_number: int  # 1, 2 or 3
    time: int


def calculate_tone_sequence(preset: TempoPreset, delay_between_reps: float) -> ToneSequence:
    """
    Calculate the tone sequence for a preset.

    - tone 1 at 0ms
    - tone 2 after the backswing frames
    - tone 3 after the downswing frames
    - the cycle ends delay_between_reps seconds after tone 3
    """
    tone2 = frames_to_ms(preset.backswing_frames)
    tone3 = tone2 + frames_to_ms(preset.downswing_frames)
    return ToneSequence(
        tone1_time=0,
        tone2_time=tone2,
        tone3_time=tone3,
        total_cycle_time=tone3 + int(delay_between_reps * 1000),
    )


def generate_rep_timings(sequence: ToneSequence, rep_count: int) -> List[List[int]]:
    """Absolute [tone1, tone2, tone3] times for each of rep_count reps."""
    timings = []
    for rep in range(max(0, rep_count)):
        offset = rep * sequence.total_cycle_time
        timings.append([
            offset + sequence.tone1_time,
            offset + sequence.tone2_time,
            offset + sequence.tone3_time,
        ])
    return timings


def get_next_tone_time(current_time: float, sequence: ToneSequence) -> Optional[NextTone]:
    """The next tone due after current_time within a cycle, or None once tone 3 has played."""
    if current_time < sequence.tone1_time:
        return NextTone(1, sequence.tone1_time)
    if current_time < sequence.tone2_time:
        return NextTone(2, sequence.tone2_time)
    if current_time < sequence.tone3_time:
        return NextTone(3, sequence.tone3_time)
    return None
