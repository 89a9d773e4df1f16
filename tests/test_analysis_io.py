"""Tests for analysis JSON export and import."""

import json
import math

import pytest

from swingtempo.analysis import build_analysis, compare_to_target_tempo, get_tempo_feedback
from swingtempo.analysis_io import (
    analysis_from_dict,
    analysis_to_dict,
    load_analysis,
    save_analysis,
    video_from_dict,
    video_to_dict,
)
from swingtempo.models import SwingVideo
from swingtempo.tempos import SHORT_GAME_PRESETS, get_preset_by_id


class TestAnalysisRecord:
    def test_camel_case_fields(self, sample_analysis):
        record = analysis_to_dict(sample_analysis)
        assert record == {
            "takeawayFrame": 10,
            "topFrame": 40,
            "impactFrame": 50,
            "backswingFrames": 30,
            "downswingFrames": 10,
            "ratio": 3.0,
            "confidence": 0.85,
            "manuallyAdjusted": False,
        }

    def test_missing_field(self, sample_analysis):
        record = analysis_to_dict(sample_analysis)
        del record["topFrame"]
        with pytest.raises(ValueError, match="topFrame"):
            analysis_from_dict(record)


class TestSaveLoad:
    def test_reload_gives_same_comparison(self, tmp_path):
        """A saved analysis compares and reads back exactly as before saving."""
        analysis = build_analysis(5, 25, 32, confidence=0.77, manually_adjusted=True)
        target = get_preset_by_id(SHORT_GAME_PRESETS, "18/9")
        before = compare_to_target_tempo(analysis, target)

        path = tmp_path / "swing.json"
        save_analysis(str(path), analysis)
        loaded = load_analysis(str(path))
        after = compare_to_target_tempo(loaded, target)

        assert loaded == analysis
        assert after == before
        assert get_tempo_feedback(after) == get_tempo_feedback(before)

    def test_infinite_ratio(self, tmp_path):
        analysis = build_analysis(10, 20, 20)
        path = tmp_path / "degenerate.json"

        save_analysis(str(path), analysis)

        assert "Infinity" in path.read_text()
        assert math.isinf(load_analysis(str(path)).ratio)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text(json.dumps([1, 2, 3]))
        with pytest.raises(ValueError):
            load_analysis(str(path))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ValueError):
            load_analysis(str(path))


class TestVideoRecord:
    def test_video_with_analysis(self, sample_analysis):
        video = SwingVideo(
            id="v1", uri="swing.mp4", created_at=1700000000000,
            duration_ms=5000, fps=240, width=1920, height=1080,
            analysis=sample_analysis, session_id="s1",
        )

        record = video_to_dict(video)

        assert record["duration"] == 5000
        assert record["createdAt"] == 1700000000000
        assert record["analysis"]["impactFrame"] == 50
        assert record["thumbnailUri"] is None
        assert video_from_dict(record) == video

    def test_video_without_analysis(self):
        record = {
            "id": "v2", "uri": "b.mp4", "createdAt": 1, "duration": 3000,
            "fps": 60, "width": 1280, "height": 720,
        }
        video = video_from_dict(record)
        assert video.analysis is None
        assert video.session_id is None
        assert video.handle.total_frames == 180
