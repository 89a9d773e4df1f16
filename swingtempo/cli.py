"""Command-line interface for swingtempo.

Usage:
    swingtempo presets [--mode long|short]
    swingtempo analyze <video> [options]      # Detect swing phases and compare
    swingtempo compare <analysis.json> [options]
    swingtempo tones [--mode long|short] [--preset ID] [--delay S] [--reps N]
"""

import argparse
import asyncio
import sys
from typing import Optional

from .analysis import (
    compare_to_target_tempo,
    find_closest_preset,
    format_ratio,
    get_tempo_feedback,
)
from .analysis_io import load_analysis, save_analysis
from .config import MAX_VIDEO_DURATION_MS, MIN_FPS, TARGET_FPS, DetectorConfig, Settings
from .detector import SwingDetectorError, create_swing_detector
from .frame_extractor import FrameExtractionError, FrameExtractor
from .models import SwingAnalysis, SwingDetectionResult, TempoPreset
from .tempo_engine import calculate_tone_sequence, generate_rep_timings
from .tempos import format_time, get_preset_by_id, get_total_time, presets_for_mode


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog='swingtempo',
        description='Measure golf swing tempo from video and compare it to a target.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # List Long Game presets
    swingtempo presets --mode long

    # Detect swing phases and compare with the 24/8 tempo
    swingtempo analyze swing.mp4 --preset 24/8 -o swing.json

    # Re-run the comparison on a saved (or hand-edited) analysis
    swingtempo compare swing.json --mode short --preset 18/9
        """
    )
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    presets_parser = subparsers.add_parser('presets', help='List tempo presets')
    presets_parser.add_argument(
        '--mode', choices=['long', 'short'], default=None,
        help='Only list presets for one game mode'
    )

    analyze_parser = subparsers.add_parser(
        'analyze',
        help='Detect swing phases in a video',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    analyze_parser.add_argument('video', help='Swing video file')
    analyze_parser.add_argument(
        '--fps', type=float, default=None,
        help='Frame rate of the recording (default: read from the file)'
    )
    analyze_parser.add_argument(
        '--samples', type=int, default=DetectorConfig.sample_count,
        help=f'Frames to sample for motion analysis (default: {DetectorConfig.sample_count})'
    )
    analyze_parser.add_argument(
        '--detector', choices=['auto', 'motion', 'mock'], default='auto',
        help='Detector implementation (default: auto)'
    )
    analyze_parser.add_argument('-o', '--output', help='Save the analysis as JSON')
    _add_target_args(analyze_parser)

    compare_parser = subparsers.add_parser('compare', help='Compare a saved analysis to a target')
    compare_parser.add_argument('analysis', help='Analysis JSON file')
    _add_target_args(compare_parser)

    tones_parser = subparsers.add_parser('tones', help='Show tone timings for a preset')
    _add_target_args(tones_parser)
    tones_parser.add_argument(
        '--delay', type=int, default=Settings.delay_between_reps,
        help=f'Seconds between reps (default: {Settings.delay_between_reps})'
    )
    tones_parser.add_argument('--reps', type=int, default=1, help='Number of reps (default: 1)')

    return parser


def _add_target_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--mode', choices=['long', 'short'], default='long',
        help='Game mode (default: long)'
    )
    parser.add_argument(
        '--preset', default=None,
        help='Target preset id, e.g. 24/8 (default: the mode default)'
    )


def resolve_target(mode: str, preset_id: Optional[str], settings: Optional[Settings] = None) -> TempoPreset:
    """Pick the target preset from --preset or the mode's default."""
    settings = settings or Settings()
    if preset_id is None:
        return settings.target_preset(mode)
    preset = get_preset_by_id(presets_for_mode(mode), preset_id)
    if preset is None:
        raise ValueError(f"Unknown {mode} game preset: {preset_id}")
    return preset


def recording_warnings(duration_ms: int, fps: float) -> list:
    """Notes about a recording that will make detection less reliable."""
    warnings = []
    if duration_ms > MAX_VIDEO_DURATION_MS:
        warnings.append(
            f"video is {duration_ms / 1000:.1f}s long; trim it to the swing "
            f"(at most {MAX_VIDEO_DURATION_MS // 1000}s)"
        )
    if fps < MIN_FPS:
        warnings.append(
            f"{fps:.0f} fps is below {MIN_FPS} fps; record at {TARGET_FPS} fps "
            f"for frame-accurate tempo"
        )
    return warnings


def print_report(analysis: SwingAnalysis, target: TempoPreset, mode: str) -> None:
    """Print the analysis and its comparison against the target to stdout."""
    comparison = compare_to_target_tempo(analysis, target)
    recommended = find_closest_preset(analysis.ratio, mode)

    print(f"Takeaway frame:  {analysis.takeaway_frame}")
    print(f"Top frame:       {analysis.top_frame}")
    print(f"Impact frame:    {analysis.impact_frame}")
    print(f"Backswing:       {analysis.backswing_frames} frames")
    print(f"Downswing:       {analysis.downswing_frames} frames")
    print(f"Ratio:           {format_ratio(analysis.ratio)}")
    print(f"Confidence:      {analysis.confidence:.0%}")
    if analysis.manually_adjusted:
        print("                 (manually adjusted)")
    print(f"Target:          {target.label} ({format_ratio(comparison.target_ratio)})")
    print(f"Difference:      {comparison.percent_difference:+.2f}%")
    print(get_tempo_feedback(comparison))
    print(f"Recommended {mode} game preset: {recommended.label}")


def run_presets_mode(args: argparse.Namespace) -> None:
    modes = [args.mode] if args.mode else ['long', 'short']
    for mode in modes:
        print(f"{mode.capitalize()} Game")
        for preset in presets_for_mode(mode):
            total = format_time(get_total_time(preset))
            print(f"  {preset.label:<6} {total:>6}  {preset.description}")


def run_analyze_mode(args: argparse.Namespace) -> SwingAnalysis:
    """Run detection on a video file and print the comparison."""
    target = resolve_target(args.mode, args.preset)

    extractor = FrameExtractor()
    try:
        result = _detect_with(extractor, args)
    finally:
        extractor.close()

    analysis = SwingAnalysis.from_detection(result)
    print_report(analysis, target, args.mode)

    if args.output:
        save_analysis(args.output, analysis)
        print(f"\nSaved analysis: {args.output}", file=sys.stderr)
    return analysis


def _detect_with(extractor: FrameExtractor, args: argparse.Namespace) -> SwingDetectionResult:
    duration_ms, file_fps, width, height = extractor.get_video_info(args.video)
    fps = args.fps or file_fps
    if not fps or fps <= 0:
        raise ValueError(f"Could not determine frame rate of {args.video}; pass --fps")

    print("=" * 60, file=sys.stderr)
    print("SWING ANALYSIS", file=sys.stderr)
    print("=" * 60, file=sys.stderr)
    print(f"Video: {args.video} ({width}x{height}, {duration_ms / 1000:.2f}s, {fps:.1f} fps)",
          file=sys.stderr)
    for warning in recording_warnings(duration_ms, fps):
        print(f"Warning: {warning}", file=sys.stderr)

    config = DetectorConfig(sample_count=args.samples)
    if args.detector == 'mock':
        detector = create_swing_detector('mock', detection_delay_s=0.0, init_delay_s=0.0)
    else:
        detector = create_swing_detector(args.detector, extractor=extractor, config=config)

    async def detect():
        await detector.initialize()
        try:
            return await detector.detect_swing_phases(
                args.video, fps, duration_ms=duration_ms, sample_count=args.samples
            )
        finally:
            detector.dispose()

    result = asyncio.run(detect())
    print(f"Detection took {result.processing_time_ms:.0f}ms", file=sys.stderr)
    return result


def run_compare_mode(args: argparse.Namespace) -> None:
    target = resolve_target(args.mode, args.preset)
    analysis = load_analysis(args.analysis)
    print_report(analysis, target, args.mode)


def run_tones_mode(args: argparse.Namespace) -> None:
    preset = resolve_target(args.mode, args.preset)
    settings = Settings().with_overrides(delay_between_reps=args.delay)
    sequence = calculate_tone_sequence(preset, settings.delay_between_reps)

    print(f"Preset {preset.label}: back 0ms, down {sequence.tone2_time}ms, "
          f"hit {sequence.tone3_time}ms, cycle {sequence.total_cycle_time}ms")
    for rep, times in enumerate(generate_rep_timings(sequence, args.reps), start=1):
        print(f"  Rep {rep}: " + ", ".join(f"{t}ms" for t in times))


def main(argv: list = None) -> None:
    """Main entry point."""
    argv = argv if argv is not None else sys.argv[1:]
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        if args.command == 'presets':
            run_presets_mode(args)
        elif args.command == 'analyze':
            run_analyze_mode(args)
        elif args.command == 'compare':
            run_compare_mode(args)
        elif args.command == 'tones':
            run_tones_mode(args)
    except (SwingDetectorError, FrameExtractionError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        if isinstance(e, SwingDetectorError):
            print("Try recording the swing again or mark the frames manually.", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
