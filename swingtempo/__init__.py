"""Swingtempo - Measure golf swing tempo from video and compare it to a target."""

from .models import (
    VideoHandle,
    PlaybackState,
    SwingAnalysis,
    TempoPreset,
    TempoComparison,
    SwingDetectionResult,
    ExtractedFrame,
    MotionSample,
    SwingVideo,
)
from .frame_time import ms_to_frame, frame_to_ms, get_frame_count, clamp
from .playback import ClipSurface, DecodingSurface, PlaybackController
from .frame_extractor import FrameExtractionError, FrameExtractor, sample_times
from .motion_analysis import (
    PhaseEstimate,
    compute_motion_scores,
    smooth_scores,
    analyze_motion,
    detect_peak_motion,
    find_motion_start,
    find_motion_peak,
    find_motion_end,
    detect_swing_phases,
)
from .detector import (
    SwingDetectorError,
    DetectorNotInitializedError,
    DetectionFailedError,
    SwingDetector,
    MotionSwingDetector,
    MockSwingDetector,
    create_swing_detector,
    order_frames,
)
from .analysis import (
    calculate_ratio_from_frames,
    build_analysis,
    compare_to_target_tempo,
    get_tempo_feedback,
    find_closest_preset,
    format_ratio,
)
from .frame_adjuster import FrameAdjuster
from .tempos import (
    LONG_GAME_PRESETS,
    SHORT_GAME_PRESETS,
    presets_for_mode,
    get_preset_by_id,
    get_total_time,
    format_time,
)
from .tempo_engine import (
    ToneSequence,
    NextTone,
    calculate_tone_sequence,
    generate_rep_timings,
    get_next_tone_time,
)
from .config import Settings, DetectorConfig
from .analysis_io import (
    analysis_to_dict,
    analysis_from_dict,
    video_to_dict,
    video_from_dict,
    save_analysis,
    load_analysis,
)

__all__ = [
    # Models
    "VideoHandle",
    "PlaybackState",
    "SwingAnalysis",
    "TempoPreset",
    "TempoComparison",
    "SwingDetectionResult",
    "ExtractedFrame",
    "MotionSample",
    "SwingVideo",
    # Frame/time conversion
    "ms_to_frame",
    "frame_to_ms",
    "get_frame_count",
    "clamp",
    # Playback
    "ClipSurface",
    "DecodingSurface",
    "PlaybackController",
    # Frame extraction
    "FrameExtractionError",
    "FrameExtractor",
    "sample_times",
    # Motion analysis
    "PhaseEstimate",
    "compute_motion_scores",
    "smooth_scores",
    "analyze_motion",
    "detect_peak_motion",
    "find_motion_start",
    "find_motion_peak",
    "find_motion_end",
    "detect_swing_phases",
    # Detection
    "SwingDetectorError",
    "DetectorNotInitializedError",
    "DetectionFailedError",
    "SwingDetector",
    "MotionSwingDetector",
    "MockSwingDetector",
    "create_swing_detector",
    "order_frames",
    # Tempo analysis
    "calculate_ratio_from_frames",
    "build_analysis",
    "compare_to_target_tempo",
    "get_tempo_feedback",
    "find_closest_preset",
    "format_ratio",
    # Manual adjustment
    "FrameAdjuster",
    # Presets
    "LONG_GAME_PRESETS",
    "SHORT_GAME_PRESETS",
    "presets_for_mode",
    "get_preset_by_id",
    "get_total_time",
    "format_time",
    # Tones
    "ToneSequence",
    "NextTone",
    "calculate_tone_sequence",
    "generate_rep_timings",
    "get_next_tone_time",
    # Config
    "Settings",
    "DetectorConfig",
    # Export
    "analysis_to_dict",
    "analysis_from_dict",
    "video_to_dict",
    "video_from_dict",
    "save_analysis",
    "load_analysis",
]
