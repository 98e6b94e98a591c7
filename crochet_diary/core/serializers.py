"""Serialization utilities — pattern / workspace models <-> JSON bytes.

Wire format (compatible with existing stored blobs):
  - camelCase record keys
  - ``id`` as a canonical UUID string (upper case on write)
  - image bytes as base64 strings
  - dates as seconds since 2001-01-01T00:00:00Z, omitted when absent

Decoding is strict: a missing key or a value of the wrong JSON type raises
``SchemaDecodeError``. The pattern store relies on that to detect blobs
written in the older ``isFinished`` shape.
"""

from __future__ import annotations

import base64
import binascii
import json
import math
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from crochet_diary.constants import REFERENCE_DATE
from crochet_diary.models.pattern import CrochetPattern, LegacyPattern
from crochet_diary.models.workspace import Marker, WorkspaceState


class SchemaDecodeError(ValueError):
    """Raised when stored bytes do not match the expected record shape."""


class SchemaEncodeError(ValueError):
    """Raised when a value cannot be represented in the stored format."""


# =====================================================================
# Field helpers
# =====================================================================


def _require(data: dict, key: str) -> Any:
    if key not in data:
        raise SchemaDecodeError(f"missing key: {key}")
    return data[key]


def _as_str(data: dict, key: str) -> str:
    val = _require(data, key)
    if not isinstance(val, str):
        raise SchemaDecodeError(f"{key}: expected string, got {type(val).__name__}")
    return val


def _as_bool(data: dict, key: str) -> bool:
    val = _require(data, key)
    if not isinstance(val, bool):
        raise SchemaDecodeError(f"{key}: expected bool, got {type(val).__name__}")
    return val


def _as_int(data: dict, key: str) -> int:
    val = _require(data, key)
    if isinstance(val, bool):
        raise SchemaDecodeError(f"{key}: expected integer, got bool")
    if isinstance(val, int):
        return val
    if isinstance(val, float) and val.is_integer():
        return int(val)
    raise SchemaDecodeError(f"{key}: expected integer, got {val!r}")


def _as_float(data: dict, key: str) -> float:
    val = _require(data, key)
    if isinstance(val, bool) or not isinstance(val, (int, float)):
        raise SchemaDecodeError(f"{key}: expected number, got {type(val).__name__}")
    return float(val)


def _as_uuid(data: dict, key: str) -> uuid.UUID:
    text = _as_str(data, key)
    try:
        return uuid.UUID(text)
    except ValueError as exc:
        raise SchemaDecodeError(f"{key}: invalid UUID {text!r}") from exc


def _decode_bytes(val: Any, key: str) -> bytes:
    if not isinstance(val, str):
        raise SchemaDecodeError(f"{key}: expected base64 string")
    try:
        return base64.b64decode(val, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise SchemaDecodeError(f"{key}: invalid base64") from exc


def _encode_bytes(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _optional_date(data: dict, key: str) -> datetime | None:
    val = data.get(key)
    if val is None:
        return None
    if isinstance(val, bool) or not isinstance(val, (int, float)):
        raise SchemaDecodeError(f"{key}: expected number of seconds")
    return date_from_reference_seconds(float(val))


def _finite(value: float, key: str) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise SchemaEncodeError(f"{key}: non-finite value {value!r}")
    return value


def date_to_reference_seconds(value: datetime) -> float:
    """Seconds since the reference date. Naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - REFERENCE_DATE).total_seconds()


def date_from_reference_seconds(seconds: float) -> datetime:
    return REFERENCE_DATE + timedelta(seconds=seconds)


# =====================================================================
# Pattern records
# =====================================================================


def pattern_to_dict(pattern: CrochetPattern) -> dict:
    """Serialize a pattern to a JSON-safe dict in the current shape."""
    d = {
        "id": str(pattern.id).upper(),
        "name": pattern.name,
        "imageData": _encode_bytes(pattern.image_data),
        "hookSize": _finite(pattern.hook_size, "hookSize"),
        "yarn": pattern.yarn,
        "notes": pattern.notes,
        "currentRound": int(pattern.current_round),
        "currentStitch": int(pattern.current_stitch),
        "markerXRatio": _finite(pattern.marker_x_ratio, "markerXRatio"),
        "markerYRatio": _finite(pattern.marker_y_ratio, "markerYRatio"),
        "isInWorks": bool(pattern.is_in_works),
        "isStarred": bool(pattern.is_starred),
        "stitchImages": [_encode_bytes(img) for img in pattern.stitch_images],
    }
    if pattern.start_date is not None:
        d["startDate"] = _finite(
            date_to_reference_seconds(pattern.start_date), "startDate",
        )
    return d


def dict_to_pattern(data: Any) -> CrochetPattern:
    """Deserialize one current-shape record.

    Raises:
        SchemaDecodeError: On any missing key or type mismatch.
    """
    if not isinstance(data, dict):
        raise SchemaDecodeError("pattern record must be an object")
    raw_images = _require(data, "stitchImages")
    if not isinstance(raw_images, list):
        raise SchemaDecodeError("stitchImages: expected array")
    return CrochetPattern(
        id=_as_uuid(data, "id"),
        name=_as_str(data, "name"),
        image_data=_decode_bytes(_require(data, "imageData"), "imageData"),
        hook_size=_as_float(data, "hookSize"),
        yarn=_as_str(data, "yarn"),
        notes=_as_str(data, "notes"),
        current_round=_as_int(data, "currentRound"),
        current_stitch=_as_int(data, "currentStitch"),
        marker_x_ratio=_as_float(data, "markerXRatio"),
        marker_y_ratio=_as_float(data, "markerYRatio"),
        is_in_works=_as_bool(data, "isInWorks"),
        is_starred=_as_bool(data, "isStarred"),
        start_date=_optional_date(data, "startDate"),
        stitch_images=[_decode_bytes(v, "stitchImages") for v in raw_images],
    )


def dict_to_legacy_pattern(data: Any) -> LegacyPattern:
    """Deserialize one record written in the older ``isFinished`` shape."""
    if not isinstance(data, dict):
        raise SchemaDecodeError("pattern record must be an object")
    return LegacyPattern(
        id=_as_uuid(data, "id"),
        name=_as_str(data, "name"),
        image_data=_decode_bytes(_require(data, "imageData"), "imageData"),
        hook_size=_as_float(data, "hookSize"),
        yarn=_as_str(data, "yarn"),
        notes=_as_str(data, "notes"),
        current_round=_as_int(data, "currentRound"),
        current_stitch=_as_int(data, "currentStitch"),
        marker_x_ratio=_as_float(data, "markerXRatio"),
        marker_y_ratio=_as_float(data, "markerYRatio"),
        is_finished=_as_bool(data, "isFinished"),
        start_date=_optional_date(data, "startDate"),
    )


def _parse_array(raw: bytes) -> list:
    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise SchemaDecodeError(f"invalid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise SchemaDecodeError("expected a JSON array of patterns")
    return data


def encode_patterns(patterns: list[CrochetPattern]) -> bytes:
    """Encode a full pattern list to stored bytes.

    Raises:
        SchemaEncodeError: If a float field is NaN or infinite.
    """
    payload = [pattern_to_dict(p) for p in patterns]
    try:
        return json.dumps(payload, ensure_ascii=False, allow_nan=False).encode("utf-8")
    except ValueError as exc:
        raise SchemaEncodeError(str(exc)) from exc


def decode_patterns(raw: bytes) -> list[CrochetPattern]:
    return [dict_to_pattern(item) for item in _parse_array(raw)]


def decode_legacy_patterns(raw: bytes) -> list[LegacyPattern]:
    return [dict_to_legacy_pattern(item) for item in _parse_array(raw)]


# =====================================================================
# Workspace state map
# =====================================================================


def workspace_state_to_dict(state: WorkspaceState) -> dict:
    return {
        "round": int(state.round),
        "stitch": int(state.stitch),
        "markers": [
            {"x": _finite(m.x, "markers.x"), "y": _finite(m.y, "markers.y")}
            for m in state.markers
        ],
    }


def dict_to_workspace_state(data: Any) -> WorkspaceState:
    if not isinstance(data, dict):
        raise SchemaDecodeError("workspace state must be an object")
    raw_markers = _require(data, "markers")
    if not isinstance(raw_markers, list):
        raise SchemaDecodeError("markers: expected array")
    markers = []
    for m in raw_markers:
        if not isinstance(m, dict):
            raise SchemaDecodeError("marker must be an object")
        markers.append(Marker(x=_as_float(m, "x"), y=_as_float(m, "y")))
    return WorkspaceState(
        round=_as_int(data, "round"),
        stitch=_as_int(data, "stitch"),
        markers=markers,
    )


def encode_workspace_states(states: dict[str, WorkspaceState]) -> bytes:
    payload = {key: workspace_state_to_dict(s) for key, s in states.items()}
    try:
        return json.dumps(payload, ensure_ascii=False, allow_nan=False).encode("utf-8")
    except ValueError as exc:
        raise SchemaEncodeError(str(exc)) from exc


def decode_workspace_states(raw: bytes) -> dict[str, WorkspaceState]:
    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise SchemaDecodeError(f"invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise SchemaDecodeError("expected a JSON object keyed by entry id")
    return {str(key): dict_to_workspace_state(val) for key, val in data.items()}
