"""Preset Scaler: scoped, reversible bulk edits of an Offset Policy.

A preset scope is either every phase field or every exact-date (`date_*`) field.
A preset in one scope never touches the other scope, nor the Placement Start
toggle, so the two settings surfaces can be tuned and reset independently.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Final, Literal

from .policy import (
    DATE_FIELD_KEYS,
    PHASE_FIELD_KEYS,
    Anchor,
    OffsetPolicy,
    Phase,
    row_field_keys,
)


PresetScope = Literal["phase", "date"]

PRESET_FACTORS: Final[dict[str, float]] = {
    "tight": 0.6,
    "balanced": 1.0,
    "wide": 1.4,
}

_ROW_KEY_SETS: Final[tuple[frozenset[str], ...]] = tuple(
    frozenset(row_field_keys(row)) for row in (*Phase, *Anchor)
)


def scope_field_keys(scope: str) -> tuple[str, ...]:
    """Return the field keys covered by a preset scope.

    Raises:
        ValueError: When `scope` is not "phase" or "date".
    """

    if scope == "phase":
        return PHASE_FIELD_KEYS
    if scope == "date":
        return DATE_FIELD_KEYS
    raise ValueError(f"Unknown preset scope: {scope!r}.")


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded toward +infinity."""

    return math.floor(value + 0.5)


def apply_preset(policy: OffsetPolicy, scope: str, factor: float) -> OffsetPolicy:
    """Scale every field in scope by `factor`.

    Args:
        policy: Policy whose current values are scaled.
        scope: "phase" or "date".
        factor: Finite multiplier; 1 leaves the policy unchanged.

    Returns:
        New OffsetPolicy; fields outside the scope keep their values.

    Raises:
        ValueError: For an unknown scope or a non-finite factor.
    """

    keys = scope_field_keys(scope)
    factor = _require_factor(factor)
    return policy.with_values({key: round_half_up(policy.value(key) * factor) for key in keys})


def apply_named_preset(policy: OffsetPolicy, scope: str, name: str, defaults: OffsetPolicy) -> OffsetPolicy:
    """Apply a named preset ("tight", "balanced", "wide") to a scope.

    Named presets scale the *defaults*, not the current values, so applying the
    same preset twice yields the same policy and "balanced" equals a scope reset.

    Raises:
        ValueError: For an unknown scope or preset name.
    """

    try:
        factor = PRESET_FACTORS[name]
    except KeyError:
        raise ValueError(f"Unknown preset: {name!r}.") from None
    keys = scope_field_keys(scope)
    return policy.with_values({key: round_half_up(defaults.value(key) * factor) for key in keys})


def reset_scope(policy: OffsetPolicy, scope: str, defaults: OffsetPolicy) -> OffsetPolicy:
    """Restore every field in scope from `defaults`."""

    return policy.with_values({key: defaults.value(key) for key in scope_field_keys(scope)})


def reset_field(policy: OffsetPolicy, field_key: str, defaults: OffsetPolicy) -> OffsetPolicy:
    """Restore one field from `defaults`.

    Raises:
        PolicyFieldError: When `field_key` is not an offset field.
    """

    return policy.with_values({field_key: defaults.value(field_key)})


def reset_row(policy: OffsetPolicy, field_keys: Sequence[str], defaults: OffsetPolicy) -> OffsetPolicy:
    """Restore the four fields of one phase or anchor row from `defaults`.

    Args:
        policy: Policy to edit.
        field_keys: Exactly the four keys of one row, in any order.
        defaults: Source of the restored values.

    Raises:
        ValueError: When the keys are not exactly one row's quartet.
    """

    keys = tuple(field_keys)
    if len(keys) != 4 or frozenset(keys) not in _ROW_KEY_SETS:
        raise ValueError(f"reset_row expects the four keys of one row, got {list(keys)!r}.")
    return policy.with_values({key: defaults.value(key) for key in keys})


def _require_factor(factor: object) -> float:
    if isinstance(factor, bool) or not isinstance(factor, (int, float)):
        raise ValueError(f"Preset factor must be a number, got {factor!r}.")
    if not math.isfinite(factor):
        raise ValueError(f"Preset factor must be finite, got {factor!r}.")
    return float(factor)

