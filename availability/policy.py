"""Tenant Offset Policy: the day offsets that parameterize band construction.

The policy is an immutable value. Every edit (presets, resets, single field
changes) goes through a function that returns a new policy, so the engine never
depends on editable form state.

Field keys are flat strings shared with the tenant settings API, e.g.
`testing_risky_to_full_end` (phase) or `date_birth_unlikely_from` (exact date).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Final


class Phase(Enum):
    """Named spans between two anchors, banded as one schedulable unit."""

    testing_to_breeding = "testing_to_breeding"
    birth_to_placement = "birth_to_placement"


class Anchor(Enum):
    """Single lifecycle dates that carry exact-date bands, in lifecycle order."""

    cycle_start = "cycle_start"
    testing_start = "testing_start"
    breeding = "breeding"
    birth = "birth"
    weaned = "weaned"
    placement_start = "placement_start"
    placement_completed = "placement_completed"


PHASE_FIELD_PREFIXES: Final[dict[Phase, str]] = {
    Phase.testing_to_breeding: "testing",
    Phase.birth_to_placement: "post",
}

ANCHOR_FIELD_PREFIXES: Final[dict[Anchor, str]] = {
    Anchor.cycle_start: "date_cycle",
    Anchor.testing_start: "date_testing",
    Anchor.breeding: "date_breeding",
    Anchor.birth: "date_birth",
    Anchor.weaned: "date_weaned",
    Anchor.placement_start: "date_placement_start",
    Anchor.placement_completed: "date_placement_completed",
}

PHASE_FIELD_SUFFIXES: Final[tuple[str, ...]] = (
    "unlikely_from_likely_start",
    "unlikely_to_likely_end",
    "risky_from_full_start",
    "risky_to_full_end",
)
DATE_FIELD_SUFFIXES: Final[tuple[str, ...]] = ("risky_from", "risky_to", "unlikely_from", "unlikely_to")

PLACEMENT_TOGGLE_KEY: Final[str] = "placement_start_enable_bands"


def row_field_keys(row: Phase | Anchor) -> tuple[str, str, str, str]:
    """Return the four field keys belonging to one phase or anchor row.

    Args:
        row: Phase or Anchor whose quartet of offsets is requested.

    Returns:
        Phase rows: (unlikely_from_likely_start, unlikely_to_likely_end,
        risky_from_full_start, risky_to_full_end). Anchor rows: (risky_from,
        risky_to, unlikely_from, unlikely_to).
    """

    if isinstance(row, Phase):
        prefix = PHASE_FIELD_PREFIXES[row]
        a, b, c, d = (f"{prefix}_{suffix}" for suffix in PHASE_FIELD_SUFFIXES)
    else:
        prefix = ANCHOR_FIELD_PREFIXES[row]
        a, b, c, d = (f"{prefix}_{suffix}" for suffix in DATE_FIELD_SUFFIXES)
    return (a, b, c, d)


PHASE_FIELD_KEYS: Final[tuple[str, ...]] = tuple(key for phase in Phase for key in row_field_keys(phase))
DATE_FIELD_KEYS: Final[tuple[str, ...]] = tuple(key for anchor in Anchor for key in row_field_keys(anchor))
OFFSET_FIELD_KEYS: Final[tuple[str, ...]] = PHASE_FIELD_KEYS + DATE_FIELD_KEYS


class PolicyFieldError(ValueError):
    """Raised when a policy field key is unknown or its value is not an integer."""

    def __init__(self, key: str, message: str) -> None:
        """Initialize the error.

        Args:
            key: Offending field key.
            message: Human-readable reason.
        """

        super().__init__(f"{key}: {message}")
        self.key = key


@dataclass(frozen=True, slots=True)
class PhaseOffsets:
    """Offsets for a phase-span window, in days."""

    unlikely_from_likely_start: int = 0
    unlikely_to_likely_end: int = 0
    risky_from_full_start: int = 0
    risky_to_full_end: int = 0


@dataclass(frozen=True, slots=True)
class DateOffsets:
    """Offsets for an exact-date window, in days relative to the anchor."""

    risky_from: int = 0
    risky_to: int = 0
    unlikely_from: int = 0
    unlikely_to: int = 0


@dataclass(frozen=True, slots=True)
class OffsetPolicy:
    """Immutable per-tenant Offset Policy.

    Args:
        offsets: Value for every key in `OFFSET_FIELD_KEYS`. Stored as a
            read-only mapping; extra or missing keys are rejected.
        placement_start_enable_bands: When False, Placement Start offsets are
            ignored and no Placement Start window is produced.
    """

    offsets: Mapping[str, int]
    placement_start_enable_bands: bool = False

    def __post_init__(self) -> None:
        unknown = sorted(set(self.offsets) - set(OFFSET_FIELD_KEYS))
        if unknown:
            raise PolicyFieldError(unknown[0], "unknown offset field")
        missing = [key for key in OFFSET_FIELD_KEYS if key not in self.offsets]
        if missing:
            raise PolicyFieldError(missing[0], "missing offset field")
        values = {key: _require_int(key, self.offsets[key]) for key in OFFSET_FIELD_KEYS}
        object.__setattr__(self, "offsets", MappingProxyType(values))
        object.__setattr__(self, "placement_start_enable_bands", bool(self.placement_start_enable_bands))

    def value(self, key: str) -> int:
        """Return one offset by field key."""

        try:
            return self.offsets[key]
        except KeyError:
            raise PolicyFieldError(key, "unknown offset field") from None

    def phase(self, phase: Phase) -> PhaseOffsets:
        """Return the offsets for a phase row."""

        a, b, c, d = row_field_keys(phase)
        return PhaseOffsets(
            unlikely_from_likely_start=self.offsets[a],
            unlikely_to_likely_end=self.offsets[b],
            risky_from_full_start=self.offsets[c],
            risky_to_full_end=self.offsets[d],
        )

    def anchor(self, anchor: Anchor) -> DateOffsets:
        """Return the offsets for an exact-date anchor row."""

        a, b, c, d = row_field_keys(anchor)
        return DateOffsets(
            risky_from=self.offsets[a],
            risky_to=self.offsets[b],
            unlikely_from=self.offsets[c],
            unlikely_to=self.offsets[d],
        )

    def with_values(self, updates: Mapping[str, int]) -> OffsetPolicy:
        """Return a new policy with the given fields replaced.

        Raises:
            PolicyFieldError: When a key is unknown or a value is not an int.
        """

        merged = dict(self.offsets)
        for key, value in updates.items():
            if key not in merged:
                raise PolicyFieldError(key, "unknown offset field")
            merged[key] = _require_int(key, value)
        return OffsetPolicy(offsets=merged, placement_start_enable_bands=self.placement_start_enable_bands)

    def with_placement_start_bands(self, enabled: bool) -> OffsetPolicy:
        """Return a new policy with the Placement Start toggle set."""

        return OffsetPolicy(offsets=self.offsets, placement_start_enable_bands=enabled)

    def as_dict(self) -> dict[str, int | bool]:
        """Return a flat, JSON-friendly copy including the Placement Start toggle."""

        payload: dict[str, int | bool] = dict(self.offsets)
        payload[PLACEMENT_TOGGLE_KEY] = self.placement_start_enable_bands
        return payload


def _require_int(key: str, value: object) -> int:
    """Return `value` when it is a plain int (bools are rejected)."""

    if isinstance(value, bool) or not isinstance(value, int):
        raise PolicyFieldError(key, f"expected an integer day offset, got {value!r}")
    return value


def _default_offsets() -> dict[str, int]:
    values = {key: 0 for key in OFFSET_FIELD_KEYS}
    for anchor in (Anchor.cycle_start, Anchor.testing_start, Anchor.breeding, Anchor.birth, Anchor.weaned):
        risky_from, risky_to, unlikely_from, unlikely_to = row_field_keys(anchor)
        values.update({risky_from: -5, risky_to: 5, unlikely_from: -10, unlikely_to: 10})
    risky_from, risky_to, unlikely_from, unlikely_to = row_field_keys(Anchor.placement_completed)
    values.update({risky_from: 0, risky_to: 5, unlikely_from: 0, unlikely_to: 10})
    return values


DEFAULT_OFFSETS: Final[Mapping[str, int]] = MappingProxyType(_default_offsets())
DEFAULT_POLICY: Final[OffsetPolicy] = OffsetPolicy(offsets=DEFAULT_OFFSETS)


def has_any_exact_values(policy: OffsetPolicy) -> bool:
    """Return True when any exact-date (`date_*`) offset is non-zero."""

    return any(policy.offsets[key] != 0 for key in DATE_FIELD_KEYS)
