"""Swing analysis export and import.

Analyses are stored as JSON with the camelCase field names used by the
video-record store, so a saved analysis reloads with identical values.
Ratios are written as-is; an infinite ratio uses the JSON Infinity token.
"""

import json
from typing import Any, Dict

from .models import SwingAnalysis, SwingVideo

_ANALYSIS_FIELDS = (
    ("takeawayFrame", "takeaway_frame"),
    ("topFrame", "top_frame"),
    ("impactFrame", "impact_frame"),
    ("backswingFrames", "backswing_frames"),
    ("downswingFrames", "downswing_frames"),
    ("ratio", "ratio"),
    ("confidence", "confidence"),
    ("manuallyAdjusted", "manually_adjusted"),
)

_VIDEO_FIELDS = (
    ("id", "id"),
    ("uri", "uri"),
    ("createdAt", "created_at"),
    ("duration", "duration_ms"),
    ("fps", "fps"),
    ("width", "width"),
    ("height", "height"),
)


def _require(data: Dict[str, Any], key: str, kind: str) -> Any:
    if key not in data:
        raise ValueError(f"Missing field '{key}' in {kind} record")
    return data[key]


def analysis_to_dict(analysis: SwingAnalysis) -> Dict[str, Any]:
    """Convert a SwingAnalysis to a camelCase record."""
    return {key: getattr(analysis, attr) for key, attr in _ANALYSIS_FIELDS}


def analysis_from_dict(data: Dict[str, Any]) -> SwingAnalysis:
    """
    Build a SwingAnalysis from a camelCase record.

    Raises:
        ValueError: If a field is missing
    """
    values = {attr: _require(data, key, "analysis") for key, attr in _ANALYSIS_FIELDS}
    values["manually_adjusted"] = bool(values["manually_adjusted"])
    return SwingAnalysis(**values)


def video_to_dict(video: SwingVideo) -> Dict[str, Any]:
    """Convert a SwingVideo, including any analysis, to a camelCase record."""
    record = {key: getattr(video, attr) for key, attr in _VIDEO_FIELDS}
    record["thumbnailUri"] = video.thumbnail_uri
    record["sessionId"] = video.session_id
    record["analysis"] = analysis_to_dict(video.analysis) if video.analysis else None
    return record


def video_from_dict(data: Dict[str, Any]) -> SwingVideo:
    """
    Build a SwingVideo from a camelCase record.

    Raises:
        ValueError: If a required field is missing
    """
    values = {attr: _require(data, key, "video") for key, attr in _VIDEO_FIELDS}
    analysis = data.get("analysis")
    return SwingVideo(
        **values,
        analysis=analysis_from_dict(analysis) if analysis else None,
        session_id=data.get("sessionId"),
        thumbnail_uri=data.get("thumbnailUri"),
    )


def save_analysis(path: str, analysis: SwingAnalysis) -> None:
    """Write an analysis record to a JSON file."""
    with open(path, "w") as f:
        json.dump(analysis_to_dict(analysis), f, indent=2)


def load_analysis(path: str) -> SwingAnalysis:
    """
    Read an analysis record from a JSON file.

    Raises:
        ValueError: If the file is not a valid analysis record
    """
    with open(path, "r") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {path}")
    return analysis_from_dict(data)
