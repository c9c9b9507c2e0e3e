"""JSON encoding/decoding helpers for StageWindow payloads."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from typing import Any

from availability.dto import DateRange, StageWindow
from availability.sanitizer import sanitize


def encode_stage_window(window: StageWindow) -> dict[str, Any]:
    """Encode a StageWindow into a JSON-serializable dictionary.

    Optional bands are omitted rather than written as null, so the payload is
    exactly the shape `decode_stage_windows` accepts.
    """

    payload: dict[str, Any] = {
        "key": window.key,
        "kind": window.kind,
        "full": _encode_range(window.full),
    }
    for name in ("risky", "unlikely", "likely"):
        band = getattr(window, name)
        if band is not None:
            payload[name] = _encode_range(band)
    if window.anchor is not None:
        payload["anchor"] = _encode_date(window.anchor)
    return payload


def encode_stage_windows(windows: Iterable[StageWindow]) -> list[dict[str, Any]]:
    """Encode windows in order."""

    return [encode_stage_window(window) for window in windows]


def decode_stage_windows(payload: object) -> list[StageWindow]:
    """Decode a stored or received payload, dropping unrenderable entries."""

    return sanitize(payload)


def _encode_range(value: DateRange) -> dict[str, str]:
    return {"start": _encode_date(value.start), "end": _encode_date(value.end)}


def _encode_date(value: date) -> str:
    """Encode a date as an ISO string for JSON storage."""

    return value.isoformat()
