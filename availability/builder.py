"""Window Builder: plan anchors + Offset Policy -> StageWindow DTOs.

Two construction modes share one output shape:

- Phase mode wraps a span between two anchors (Testing -> Breeding,
  Birth -> Placement). `likely` and `full` are the span itself; `unlikely` is
  built outward from `likely` and `risky` outward from `full`.
- Exact-date mode wraps a single anchor. `full` (and `risky`) is the anchor
  +/- the risky offsets; `unlikely` is the anchor +/- the unlikely offsets.

Both modes are requested through `WindowRequest` variants and dispatched by
`build_window`. Construction is a pure function of its inputs: no clock, no
randomness, and a missing anchor means "no window", never a default one.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Final

from .anchors import PlanAnchors
from .bands import SignedBand, normalize_band, widen_unlikely
from .dto import DateRange, StageWindow
from .policy import Anchor, DateOffsets, OffsetPolicy, Phase, PhaseOffsets


PHASE_STAGE_KEYS: Final[dict[Phase, str]] = {
    Phase.testing_to_breeding: "testing_to_breeding",
    Phase.birth_to_placement: "birth_to_placement",
}

ANCHOR_STAGE_KEYS: Final[dict[Anchor, str]] = {
    Anchor.cycle_start: "exact_cycle",
    Anchor.testing_start: "exact_testing",
    Anchor.breeding: "exact_breeding",
    Anchor.birth: "exact_birth",
    Anchor.weaned: "exact_weaning",
    Anchor.placement_start: "exact_placement_start",
    Anchor.placement_completed: "exact_placement_completed",
}

# (start anchor, end anchor) of each phase span.
PHASE_SPAN_ANCHORS: Final[dict[Phase, tuple[Anchor, Anchor]]] = {
    Phase.testing_to_breeding: (Anchor.testing_start, Anchor.breeding),
    Phase.birth_to_placement: (Anchor.birth, Anchor.placement_completed),
}


@dataclass(frozen=True, slots=True)
class PhaseSpanRequest:
    """Request a phase-span window between two (possibly missing) dates."""

    phase: Phase
    start: date | None
    end: date | None


@dataclass(frozen=True, slots=True)
class ExactDateRequest:
    """Request an exact-date window around a single (possibly missing) date."""

    anchor: Anchor
    anchor_date: date | None


WindowRequest = PhaseSpanRequest | ExactDateRequest


def build_phase_window(
    core_span: DateRange | None,
    offsets: PhaseOffsets,
    *,
    key: str,
    auto_widen: bool = False,
) -> StageWindow | None:
    """Build a phase-span window.

    Args:
        core_span: Expected span of the phase, or None when either end is unknown.
        offsets: Phase offsets from the Offset Policy.
        key: Stage key to stamp on the window.
        auto_widen: Apply `widen_unlikely` so unlikely never hides under risky.

    Returns:
        StageWindow with `likely == full == core_span`, or None without a span
        or when a widened band falls outside the representable date range.
    """

    if core_span is None:
        return None

    risky = normalize_band(offsets.risky_from_full_start, offsets.risky_to_full_end)
    unlikely = normalize_band(offsets.unlikely_from_likely_start, offsets.unlikely_to_likely_end)
    if auto_widen:
        unlikely = widen_unlikely(risky, unlikely)

    likely = core_span
    full = core_span
    try:
        risky_range = full.widen(before=-risky.before, after=risky.after)
        unlikely_range = likely.widen(before=-unlikely.before, after=unlikely.after)
    except OverflowError:
        return None
    return StageWindow(
        key=key,
        kind="phase",
        full=full,
        risky=risky_range,
        unlikely=unlikely_range,
        likely=likely,
    )


def build_date_window(
    anchor_date: date | None,
    offsets: DateOffsets,
    *,
    key: str,
    enabled: bool = True,
    auto_widen: bool = False,
    pad_zero_width: bool = False,
) -> StageWindow | None:
    """Build an exact-date window.

    Args:
        anchor_date: The anchor date, or None when the plan has none.
        offsets: Exact-date offsets from the Offset Policy.
        key: Stage key to stamp on the window.
        enabled: Originating toggle; False produces no window.
        auto_widen: Apply `widen_unlikely` so unlikely never hides under risky.
        pad_zero_width: Extend a zero-width band's end by one day so a
            timeline can still draw it.

    Returns:
        StageWindow without `likely`, or None when disabled, unanchored, or
        when a band falls outside the representable date range.
    """

    if anchor_date is None or not enabled:
        return None

    risky = normalize_band(offsets.risky_from, offsets.risky_to)
    unlikely = normalize_band(offsets.unlikely_from, offsets.unlikely_to)
    if auto_widen:
        unlikely = widen_unlikely(risky, unlikely)

    try:
        full = _around(anchor_date, risky, pad_zero_width=pad_zero_width)
        unlikely_range = _around(anchor_date, unlikely, pad_zero_width=pad_zero_width)
    except OverflowError:
        return None
    return StageWindow(
        key=key,
        kind="date",
        full=full,
        risky=full,
        unlikely=unlikely_range,
        anchor=anchor_date,
    )


def _around(anchor_date: date, band: SignedBand, *, pad_zero_width: bool) -> DateRange:
    """Return the anchor shifted by a signed band; raises OverflowError past date.min/max."""

    start = anchor_date + timedelta(days=band.before)
    end = anchor_date + timedelta(days=band.after)
    if pad_zero_width and start == end:
        end += timedelta(days=1)
    return DateRange(start=start, end=end)


def build_window(
    request: WindowRequest,
    policy: OffsetPolicy,
    *,
    auto_widen: bool = False,
    pad_zero_width: bool = False,
) -> StageWindow | None:
    """Build one window for a request variant.

    `pad_zero_width` only affects exact-date requests.

    Raises:
        TypeError: When `request` is not a known WindowRequest variant.
    """

    if isinstance(request, PhaseSpanRequest):
        span = None
        if request.start is not None and request.end is not None:
            span = DateRange(start=request.start, end=request.end)
        return build_phase_window(
            span,
            policy.phase(request.phase),
            key=PHASE_STAGE_KEYS[request.phase],
            auto_widen=auto_widen,
        )
    if isinstance(request, ExactDateRequest):
        enabled = True
        if request.anchor is Anchor.placement_start:
            enabled = policy.placement_start_enable_bands
        return build_date_window(
            request.anchor_date,
            policy.anchor(request.anchor),
            key=ANCHOR_STAGE_KEYS[request.anchor],
            enabled=enabled,
            auto_widen=auto_widen,
            pad_zero_width=pad_zero_width,
        )
    raise TypeError(f"Unsupported window request: {request!r}")


def requests_for_anchors(anchors: PlanAnchors) -> tuple[WindowRequest, ...]:
    """Return every window request for a plan: phases first, then anchors."""

    requests: list[WindowRequest] = []
    for phase in Phase:
        start_anchor, end_anchor = PHASE_SPAN_ANCHORS[phase]
        requests.append(PhaseSpanRequest(phase=phase, start=anchors.get(start_anchor), end=anchors.get(end_anchor)))
    for anchor in Anchor:
        requests.append(ExactDateRequest(anchor=anchor, anchor_date=anchors.get(anchor)))
    return tuple(requests)


def build_windows(
    anchors: PlanAnchors,
    policy: OffsetPolicy,
    *,
    auto_widen: bool = False,
    pad_zero_width: bool = False,
) -> tuple[StageWindow, ...]:
    """Build all windows for a plan, omitting stages without inputs.

    Args:
        anchors: Plan anchor dates.
        policy: Tenant Offset Policy.
        auto_widen: Apply the unlikely auto-widen rule to every window.
        pad_zero_width: Keep zero-width exact-date bands one day wide.

    Returns:
        Tuple of StageWindow in deterministic order (phases, then anchors in
        lifecycle order).
    """

    windows: list[StageWindow] = []
    for request in requests_for_anchors(anchors):
        window = build_window(request, policy, auto_widen=auto_widen, pad_zero_width=pad_zero_width)
        if window is not None:
            windows.append(window)
    return tuple(windows)


def merge_stage_windows(first: Iterable[StageWindow], second: Iterable[StageWindow]) -> tuple[StageWindow, ...]:
    """Merge two window sets into per-stage envelopes.

    Used when a plan is seeded by an earliest and a latest date: every band of a
    stage present in both sets becomes the range covering both. Stages present in
    only one set pass through unchanged.

    Returns:
        Tuple ordered by first appearance (`first`, then new keys of `second`).
    """

    merged: dict[str, StageWindow] = {}
    for window in first:
        merged[window.key] = window
    for window in second:
        existing = merged.get(window.key)
        merged[window.key] = window if existing is None else _envelope(existing, window)
    return tuple(merged.values())


def _envelope(a: StageWindow, b: StageWindow) -> StageWindow:
    return StageWindow(
        key=a.key,
        kind=a.kind,
        full=a.full.envelope(b.full),
        risky=_envelope_optional(a.risky, b.risky),
        unlikely=_envelope_optional(a.unlikely, b.unlikely),
        likely=_envelope_optional(a.likely, b.likely),
        anchor=a.anchor if a.anchor == b.anchor else None,
    )


def _envelope_optional(a: DateRange | None, b: DateRange | None) -> DateRange | None:
    if a is None:
        return b
    if b is None:
        return a
    return a.envelope(b)
