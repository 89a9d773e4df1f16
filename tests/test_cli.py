"""Tests for the command-line interface."""

import json

import pytest

from swingtempo import cli
from swingtempo.analysis import build_analysis
from swingtempo.analysis_io import load_analysis, save_analysis
from swingtempo.frame_extractor import FrameExtractor


@pytest.fixture
def patched_extractor(monkeypatch, mock_video_loader):
    """Make the CLI read synthetic swing clips instead of files."""
    monkeypatch.setattr(cli, "FrameExtractor", lambda: FrameExtractor(clip_loader=mock_video_loader))


class TestParser:
    def test_analyze_defaults(self):
        args = cli.create_parser().parse_args(["analyze", "swing.mp4"])
        assert args.video == "swing.mp4"
        assert args.fps is None
        assert args.samples == 30
        assert args.mode == "long"
        assert args.preset is None
        assert args.detector == "auto"

    def test_tones_defaults(self):
        args = cli.create_parser().parse_args(["tones"])
        assert args.delay == 4
        assert args.reps == 1

    def test_no_command(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main([])
        assert exc_info.value.code == 1


class TestResolveTarget:
    def test_mode_default(self):
        assert cli.resolve_target("long", None).id == "24/8"
        assert cli.resolve_target("short", None).id == "18/9"

    def test_explicit_preset(self):
        assert cli.resolve_target("short", "22/11").downswing_frames == 11

    def test_unknown_preset(self):
        with pytest.raises(ValueError, match="Unknown long game preset"):
            cli.resolve_target("long", "18/9")


class TestPresetsCommand:
    def test_lists_both_modes(self, capsys):
        cli.main(["presets"])
        out = capsys.readouterr().out
        assert "Long Game" in out
        assert "Short Game" in out
        assert "1.07s" in out

    def test_single_mode(self, capsys):
        cli.main(["presets", "--mode", "short"])
        out = capsys.readouterr().out
        assert "Long Game" not in out
        assert "18/9" in out


class TestCompareCommand:
    def test_compare_saved_analysis(self, tmp_path, capsys):
        path = tmp_path / "swing.json"
        save_analysis(str(path), build_analysis(10, 40, 50, confidence=0.9))

        cli.main(["compare", str(path)])

        out = capsys.readouterr().out
        assert "Ratio:           3.0:1" in out
        assert "Your tempo matches the target!" in out
        assert "Recommended long game preset: 24/8" in out

    def test_compare_against_short_game(self, tmp_path, capsys):
        path = tmp_path / "swing.json"
        save_analysis(str(path), build_analysis(10, 40, 50))

        cli.main(["compare", str(path), "--mode", "short", "--preset", "16/8"])

        assert "Your tempo is 50% faster than target" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["compare", str(tmp_path / "missing.json")])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err

    def test_incomplete_record(self, tmp_path, capsys):
        path = tmp_path / "partial.json"
        path.write_text(json.dumps({"takeawayFrame": 1}))
        with pytest.raises(SystemExit):
            cli.main(["compare", str(path)])
        assert "Missing field" in capsys.readouterr().err


class TestTonesCommand:
    def test_tone_timings(self, capsys):
        cli.main(["tones", "--preset", "24/8", "--reps", "2"])
        out = capsys.readouterr().out
        assert "Rep 1: 0ms, 800ms, 1067ms" in out
        assert "Rep 2: 5067ms, 5867ms, 6134ms" in out

    def test_delay_out_of_range(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["tones", "--delay", "20"])
        assert exc_info.value.code == 1


class TestAnalyzeCommand:
    def test_analyze_and_save(self, patched_extractor, tmp_path, capsys):
        output = tmp_path / "swing.json"

        cli.main(["analyze", "swing.mp4", "-o", str(output)])

        captured = capsys.readouterr()
        assert "SWING ANALYSIS" in captured.err
        assert "Ratio:" in captured.out
        analysis = load_analysis(str(output))
        assert analysis.takeaway_frame < analysis.top_frame < analysis.impact_frame
        assert not analysis.manually_adjusted

    def test_analyze_with_mock_detector(self, patched_extractor, capsys):
        cli.main(["analyze", "swing.mp4", "--detector", "mock", "--fps", "30"])
        assert "Takeaway frame:" in capsys.readouterr().out

    def test_detection_failure_exits(self, monkeypatch, color_clip, capsys):
        monkeypatch.setattr(
            cli, "FrameExtractor", lambda: FrameExtractor(clip_loader=lambda f: color_clip())
        )
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["analyze", "still.mp4"])
        assert exc_info.value.code == 1
        assert "mark the frames manually" in capsys.readouterr().err

    def test_extractor_closed_when_detection_fails(self, monkeypatch, color_clip):
        closed = []

        class RecordingExtractor(FrameExtractor):
            def close(self):
                closed.append(True)
                super().close()

        monkeypatch.setattr(
            cli, "FrameExtractor", lambda: RecordingExtractor(clip_loader=lambda f: color_clip())
        )
        with pytest.raises(SystemExit):
            cli.main(["analyze", "still.mp4"])
        assert closed == [True]

    def test_extractor_closed_when_video_unreadable(self, monkeypatch):
        closed = []

        def loader(filepath):
            raise OSError(f"No such file: {filepath}")

        class RecordingExtractor(FrameExtractor):
            def close(self):
                closed.append(True)
                super().close()

        monkeypatch.setattr(cli, "FrameExtractor", lambda: RecordingExtractor(clip_loader=loader))
        with pytest.raises(SystemExit):
            cli.main(["analyze", "missing.mp4"])
        assert closed == [True]

    def test_low_frame_rate_warning(self, patched_extractor, capsys):
        cli.main(["analyze", "swing.mp4", "--detector", "mock"])
        assert "Warning: 30 fps is below 60 fps" in capsys.readouterr().err


class TestRecordingWarnings:
    def test_good_recording(self):
        assert cli.recording_warnings(3000, 240) == []
        assert cli.recording_warnings(10000, 60) == []

    def test_too_long(self):
        (warning,) = cli.recording_warnings(12500, 240)
        assert "12.5s" in warning
        assert "at most 10s" in warning

    def test_too_slow(self):
        (warning,) = cli.recording_warnings(3000, 30)
        assert "30 fps is below 60 fps" in warning
        assert "240 fps" in warning

    def test_both(self):
        assert len(cli.recording_warnings(20000, 24)) == 2
