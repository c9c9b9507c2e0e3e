"""Local display preferences for availability bands.

These values belong to one user/device and are stored apart from the tenant
Offset Policy. The Window Builder never reads them; callers pass the relevant
flag (e.g. `auto_widen_unlikely`) in explicitly.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from datetime import date
from typing import Final

from .dto import DateRange, StageWindow
from .payload import coerce_offset, parse_bool, unwrap_payload
from .policy import OffsetPolicy, has_any_exact_values


MIN_HORIZON_MONTHS: Final[int] = 6
MAX_HORIZON_MONTHS: Final[int] = 36
EMPTY_HORIZON_EXTRA_MONTHS: Final[int] = 5


@dataclass(frozen=True, slots=True)
class DisplayPrefs:
    """Device-local band display settings.

    Attributes:
        show_gantt_bands: Draw availability bands on Gantt views.
        show_calendar_bands: Draw availability bands on calendar views.
        gantt_horizon_months: Default Gantt horizon, clamped to 6..36.
        auto_widen_unlikely: Push unlikely sides out by a day when they would
            coincide with the risky sides.
        default_exact_bands_visible: Explicit local choice for showing exact-date
            bands by default; None defers to tenant defaults.
    """

    show_gantt_bands: bool = True
    show_calendar_bands: bool = True
    gantt_horizon_months: int = 18
    auto_widen_unlikely: bool = True
    default_exact_bands_visible: bool | None = None


def display_prefs_from_mapping(raw: object, *, base: DisplayPrefs | None = None) -> DisplayPrefs:
    """Overlay stored display values on `base`.

    Args:
        raw: Stored values (booleans may arrive as "0"/"1" strings). Anything
            other than a mapping leaves `base` unchanged.
        base: Starting preferences; defaults to `DisplayPrefs()`.

    Returns:
        DisplayPrefs with a clamped horizon.
    """

    prefs = base if base is not None else DisplayPrefs()
    if not isinstance(raw, Mapping) or not raw:
        return prefs

    updates: dict[str, object] = {}
    for name in ("show_gantt_bands", "show_calendar_bands", "auto_widen_unlikely"):
        if raw.get(name) is not None:
            updates[name] = parse_bool(raw[name])
    if "default_exact_bands_visible" in raw:
        value = raw["default_exact_bands_visible"]
        updates["default_exact_bands_visible"] = None if value is None else parse_bool(value)

    months = coerce_offset(raw.get("gantt_horizon_months"))
    if months is not None and months > 0:
        updates["gantt_horizon_months"] = clamp_horizon_months(months)

    return replace(prefs, **updates)


def clamp_horizon_months(months: int) -> int:
    """Clamp a Gantt horizon to the supported month range."""

    return max(MIN_HORIZON_MONTHS, min(MAX_HORIZON_MONTHS, months))


def exact_bands_visible(prefs: DisplayPrefs, *, policy: OffsetPolicy, tenant_payload: object = None) -> bool:
    """Decide whether exact-date bands are shown by default.

    Order: the local choice, the tenant's per-plan Gantt default, the tenant's
    master Gantt default, and finally whether the policy has any non-zero
    exact-date offset.
    """

    if prefs.default_exact_bands_visible is not None:
        return prefs.default_exact_bands_visible
    tenant = unwrap_payload(tenant_payload) or {}
    for key in ("gantt_perplan_default_exact_bands_visible", "gantt_master_default_exact_bands_visible"):
        value = tenant.get(key)
        if isinstance(value, bool):
            return value
    return has_any_exact_values(policy)


def timeline_horizon(windows: Iterable[StageWindow], *, today: date) -> DateRange:
    """Return the month-aligned date range a timeline should show.

    Args:
        windows: Windows to fit; every band (full, risky, unlikely, likely) counts.
        today: Caller-supplied current date, used only when there are no windows.

    Returns:
        First-of-month through end-of-month covering every band, or the current
        month plus the following five months when `windows` is empty.
    """

    starts: list[date] = []
    ends: list[date] = []
    for window in windows:
        for band in (window.full, window.risky, window.unlikely, window.likely):
            if band is None:
                continue
            starts.append(min(band.start, band.end))
            ends.append(max(band.start, band.end))

    if not starts:
        first = today.replace(day=1)
        return DateRange(start=first, end=_end_of_month(_add_months(first, EMPTY_HORIZON_EXTRA_MONTHS)))
    return DateRange(start=min(starts).replace(day=1), end=_end_of_month(max(ends)))


def _add_months(value: date, months: int) -> date:
    index = value.year * 12 + (value.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def _end_of_month(value: date) -> date:
    return value.replace(day=calendar.monthrange(value.year, value.month)[1])
