"""Unit tests for the immutable Offset Policy."""

from __future__ import annotations

import pytest

from availability.policy import (
    DATE_FIELD_KEYS,
    DEFAULT_POLICY,
    OFFSET_FIELD_KEYS,
    PHASE_FIELD_KEYS,
    PLACEMENT_TOGGLE_KEY,
    Anchor,
    DateOffsets,
    OffsetPolicy,
    Phase,
    PhaseOffsets,
    PolicyFieldError,
    has_any_exact_values,
    row_field_keys,
)

pytestmark = pytest.mark.unit


def test_field_catalog_sizes() -> None:
    """Two phases and seven anchors each contribute a quartet of fields."""

    assert len(PHASE_FIELD_KEYS) == 8
    assert len(DATE_FIELD_KEYS) == 28
    assert len(set(OFFSET_FIELD_KEYS)) == 36
    assert all(key.startswith("date_") for key in DATE_FIELD_KEYS)
    assert not any(key.startswith("date_") for key in PHASE_FIELD_KEYS)


def test_row_field_keys_for_phase_and_anchor() -> None:
    """Row quartets follow the persisted key naming."""

    assert row_field_keys(Phase.testing_to_breeding) == (
        "testing_unlikely_from_likely_start",
        "testing_unlikely_to_likely_end",
        "testing_risky_from_full_start",
        "testing_risky_to_full_end",
    )
    assert row_field_keys(Anchor.placement_start) == (
        "date_placement_start_risky_from",
        "date_placement_start_risky_to",
        "date_placement_start_unlikely_from",
        "date_placement_start_unlikely_to",
    )


def test_default_policy_values() -> None:
    """Defaults match the documented per-anchor bands."""

    assert DEFAULT_POLICY.anchor(Anchor.birth) == DateOffsets(risky_from=-5, risky_to=5, unlikely_from=-10, unlikely_to=10)
    assert DEFAULT_POLICY.anchor(Anchor.placement_completed) == DateOffsets(
        risky_from=0, risky_to=5, unlikely_from=0, unlikely_to=10
    )
    assert DEFAULT_POLICY.anchor(Anchor.placement_start) == DateOffsets()
    assert DEFAULT_POLICY.phase(Phase.birth_to_placement) == PhaseOffsets()
    assert DEFAULT_POLICY.placement_start_enable_bands is False


def test_with_values_returns_new_policy() -> None:
    """Edits never mutate the original policy."""

    edited = DEFAULT_POLICY.with_values({"post_risky_to_full_end": 4})
    assert edited.value("post_risky_to_full_end") == 4
    assert DEFAULT_POLICY.value("post_risky_to_full_end") == 0
    assert edited != DEFAULT_POLICY


def test_with_values_rejects_unknown_key_and_non_int() -> None:
    """Unknown keys and non-integer values raise PolicyFieldError."""

    with pytest.raises(PolicyFieldError, match="unknown offset field"):
        DEFAULT_POLICY.with_values({"date_moon_risky_from": 1})
    with pytest.raises(PolicyFieldError, match="expected an integer"):
        DEFAULT_POLICY.with_values({"date_birth_risky_from": 1.5})
    with pytest.raises(ValueError):
        DEFAULT_POLICY.with_values({"date_birth_risky_from": True})


def test_constructor_requires_every_field() -> None:
    """A policy cannot be built from a partial mapping directly."""

    with pytest.raises(PolicyFieldError, match="missing offset field"):
        OffsetPolicy(offsets={"date_birth_risky_from": -5})


def test_offsets_mapping_is_read_only() -> None:
    """The stored offsets cannot be mutated in place."""

    with pytest.raises(TypeError):
        DEFAULT_POLICY.offsets["date_birth_risky_from"] = 0  # type: ignore[index]


def test_as_dict_includes_toggle() -> None:
    """The flat export carries every offset plus the Placement Start toggle."""

    payload = DEFAULT_POLICY.with_placement_start_bands(True).as_dict()
    assert payload[PLACEMENT_TOGGLE_KEY] is True
    assert set(payload) == set(OFFSET_FIELD_KEYS) | {PLACEMENT_TOGGLE_KEY}


def test_has_any_exact_values() -> None:
    """Only non-zero `date_*` fields count as explicit exact values."""

    zeroed = DEFAULT_POLICY.with_values({key: 0 for key in DATE_FIELD_KEYS})
    assert has_any_exact_values(DEFAULT_POLICY) is True
    assert has_any_exact_values(zeroed) is False
    assert has_any_exact_values(zeroed.with_values({"post_risky_to_full_end": 3})) is False
