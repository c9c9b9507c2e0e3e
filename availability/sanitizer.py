"""Window Sanitizer: the defensive boundary in front of renderers.

Engine output is correct when its inputs are, but renderers also receive windows
that bypassed the builder (API payloads, cached JSON). Sanitizing never raises:
entries without a readable `full` range are dropped, and malformed sub-bands are
omitted while the rest of the entry survives.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from .dates import coerce_date
from .dto import DateRange, StageWindow


def sanitize(windows: object) -> list[StageWindow]:
    """Return only windows that are safe to render.

    Args:
        windows: A list/tuple of StageWindow instances or window mappings shaped
            like `{"key": ..., "full": {"start": ..., "end": ...}, "likely": ...}`.
            Ranges may also be `[start, end]` pairs.

    Returns:
        StageWindow list in input order. Any other input type yields `[]`.
    """

    if not isinstance(windows, (list, tuple)):
        return []

    out: list[StageWindow] = []
    for raw in windows:
        window = sanitize_window(raw)
        if window is not None:
            out.append(window)
    return out


def sanitize_window(raw: object) -> StageWindow | None:
    """Sanitize a single window, or return None when it cannot be rendered."""

    if isinstance(raw, StageWindow):
        fields: Mapping[str, object] = {
            "key": raw.key,
            "kind": raw.kind,
            "full": raw.full,
            "risky": raw.risky,
            "unlikely": raw.unlikely,
            "likely": raw.likely,
            "anchor": raw.anchor,
        }
    elif isinstance(raw, Mapping):
        fields = raw
    else:
        return None

    full = coerce_range(fields.get("full"))
    if full is None:
        return None

    likely = coerce_range(fields.get("likely"))
    kind = fields.get("kind")
    if kind not in ("phase", "date"):
        kind = "phase" if likely is not None else "date"

    key = fields.get("key")
    return StageWindow(
        key="" if key is None else str(key),
        kind=kind,  # type: ignore[arg-type]
        full=full,
        risky=coerce_range(fields.get("risky")),
        unlikely=coerce_range(fields.get("unlikely")),
        likely=likely,
        anchor=coerce_date(fields.get("anchor")),
    )


def coerce_range(value: object) -> DateRange | None:
    """Coerce a range-like value; None unless both endpoints are readable."""

    if isinstance(value, DateRange):
        start: object = value.start
        end: object = value.end
    elif isinstance(value, Mapping):
        start = value.get("start")
        end = value.get("end")
    elif isinstance(value, Sequence) and not isinstance(value, (str, bytes)) and len(value) == 2:
        start, end = value[0], value[1]
    else:
        return None

    start_date = coerce_date(start)
    end_date = coerce_date(end)
    if start_date is None or end_date is None:
        return None
    return DateRange(start=start_date, end=end_date)
