"""Band validation and normalization for Offset Policy pairs.

Validation never clamps and never raises: an inverted `(from, to)` pair is
reported so a person can correct it, and the Window Builder keeps building from
it in the meantime.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .policy import Anchor, OffsetPolicy, Phase, row_field_keys


BandName = Literal["risky", "unlikely"]


@dataclass(frozen=True, slots=True)
class BandValidity:
    """Validity of one `(from, to)` offset pair.

    Attributes:
        valid: True when `to - from >= 0`. Zero width is valid.
        width: `to - from` in days.
    """

    valid: bool
    width: int


@dataclass(frozen=True, slots=True)
class BandIssue:
    """A collapsed band found in an Offset Policy.

    Attributes:
        row: Phase or Anchor the band belongs to.
        band: Which band of the row collapsed.
        from_key: Field key of the lower offset.
        to_key: Field key of the upper offset.
        from_days: Lower offset value.
        to_days: Upper offset value.
        message: Short text for inline display.
    """

    row: Phase | Anchor
    band: BandName
    from_key: str
    to_key: str
    from_days: int
    to_days: int
    message: str


@dataclass(frozen=True, slots=True)
class PolicyValidationResult:
    """Validation result for a whole Offset Policy.

    Args:
        is_valid: True when no band collapses.
        issues: One entry per collapsed band, in row order.
    """

    is_valid: bool
    issues: tuple[BandIssue, ...] = ()


@dataclass(frozen=True, slots=True)
class SignedBand:
    """Offsets normalized to signed magnitudes: `before <= 0 <= after`."""

    before: int
    after: int


def validate_band(from_days: int, to_days: int) -> BandValidity:
    """Return whether an offset pair yields a non-negative-width interval."""

    width = to_days - from_days
    return BandValidity(valid=width >= 0, width=width)


def _row_pairs(row: Phase | Anchor) -> tuple[tuple[BandName, str, str], ...]:
    """Return `(band, from_key, to_key)` pairs for a row."""

    if isinstance(row, Phase):
        unlikely_from, unlikely_to, risky_from, risky_to = row_field_keys(row)
    else:
        risky_from, risky_to, unlikely_from, unlikely_to = row_field_keys(row)
    return (("risky", risky_from, risky_to), ("unlikely", unlikely_from, unlikely_to))


def validate_policy(policy: OffsetPolicy) -> PolicyValidationResult:
    """Check every risky/unlikely pair of every phase and anchor row.

    Args:
        policy: Offset Policy to inspect.

    Returns:
        PolicyValidationResult listing each collapsed band.
    """

    issues: list[BandIssue] = []
    rows: tuple[Phase | Anchor, ...] = (*Phase, *Anchor)
    for row in rows:
        for band, from_key, to_key in _row_pairs(row):
            from_days = policy.value(from_key)
            to_days = policy.value(to_key)
            if validate_band(from_days, to_days).valid:
                continue
            issues.append(
                BandIssue(
                    row=row,
                    band=band,
                    from_key=from_key,
                    to_key=to_key,
                    from_days=from_days,
                    to_days=to_days,
                    message=f"{band.capitalize()} band collapses (to < from).",
                )
            )
    return PolicyValidationResult(is_valid=not issues, issues=tuple(issues))


def invalid_field_keys(policy: OffsetPolicy) -> frozenset[str]:
    """Return every field key that participates in a collapsed band."""

    keys: set[str] = set()
    for issue in validate_policy(policy).issues:
        keys.update((issue.from_key, issue.to_key))
    return frozenset(keys)


def normalize_band(from_days: int, to_days: int) -> SignedBand:
    """Convert an offset pair into signed magnitudes around an anchor or span."""

    return SignedBand(before=-abs(from_days), after=abs(to_days))


def widen_unlikely(risky: SignedBand, unlikely: SignedBand) -> SignedBand:
    """Push unlikely sides one day past risky sides they would otherwise hide.

    A side is widened only when its magnitude equals the risky magnitude on the
    same side and that magnitude is non-zero.
    """

    before = unlikely.before
    after = unlikely.after
    if before == risky.before and risky.before != 0:
        before = risky.before - 1
    if after == risky.after and risky.after != 0:
        after = risky.after + 1
    return SignedBand(before=before, after=after)
