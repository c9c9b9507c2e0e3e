"""Unit tests for Offset Policy import/export."""

from __future__ import annotations

import logging

import pytest

from availability.payload import coerce_offset, encode_policy, policy_changes, policy_from_payload, unwrap_payload
from availability.policy import DEFAULT_POLICY, PLACEMENT_TOGGLE_KEY

pytestmark = pytest.mark.unit


def test_partial_payload_merges_over_base() -> None:
    """Omitted fields keep the base values."""

    policy = policy_from_payload({"date_birth_risky_from": -3, "unrelated_setting": "x"})

    assert policy.value("date_birth_risky_from") == -3
    assert policy.value("date_birth_risky_to") == DEFAULT_POLICY.value("date_birth_risky_to")
    assert policy.placement_start_enable_bands is False


def test_data_envelope_and_string_values() -> None:
    """Response bodies may be wrapped in `data` and carry numeric strings."""

    policy = policy_from_payload({"data": {"date_weaned_unlikely_to": "12", "post_risky_to_full_end": 3.0}})

    assert policy.value("date_weaned_unlikely_to") == 12
    assert policy.value("post_risky_to_full_end") == 3
    assert unwrap_payload({"data": "oops", "a": 1}) == {"data": "oops", "a": 1}
    assert unwrap_payload([1, 2]) is None


def test_legacy_aliases_fill_testing_phase() -> None:
    """Legacy cycle_breeding_* names populate the Testing phase; canonical keys win."""

    policy = policy_from_payload(
        {
            "cycle_breeding_risky_from": -2,
            "cycle_breeding_unlikely_to_likely_end": 6,
            "testing_risky_to_full_end": 2,
            "cycle_breeding_risky_to": 9,
        }
    )

    assert policy.value("testing_risky_from_full_start") == -2
    assert policy.value("testing_unlikely_to_likely_end") == 6
    assert policy.value("testing_risky_to_full_end") == 2


def test_unreadable_values_keep_base_and_warn(caplog: pytest.LogCaptureFixture) -> None:
    """Garbled fields are logged and skipped instead of raising."""

    with caplog.at_level(logging.WARNING, logger="availability.payload"):
        policy = policy_from_payload({"date_birth_risky_from": "soon", "date_birth_risky_to": 2.5})

    assert policy == DEFAULT_POLICY
    assert "date_birth_risky_from" in caplog.text
    assert "date_birth_risky_to" in caplog.text


def test_non_mapping_payload_returns_base(caplog: pytest.LogCaptureFixture) -> None:
    """Lists and scalars are ignored with a warning; None is silent."""

    with caplog.at_level(logging.WARNING, logger="availability.payload"):
        assert policy_from_payload([1, 2]) is DEFAULT_POLICY
    assert "expected a mapping" in caplog.text
    assert policy_from_payload(None) is DEFAULT_POLICY


@pytest.mark.parametrize(("raw", "expected"), [(True, True), ("true", True), ("1", True), ("off", False), (0, False)])
def test_placement_toggle_parsing(raw: object, expected: bool) -> None:
    """The Placement Start toggle accepts persisted string and int forms."""

    assert policy_from_payload({PLACEMENT_TOGGLE_KEY: raw}).placement_start_enable_bands is expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (5, 5),
        (-3.0, -3),
        ("-5", -5),
        (" 7.0 ", 7),
        (2.5, None),
        ("1.5", None),
        ("NaN", None),
        (True, None),
        ("", None),
        (None, None),
    ],
)
def test_coerce_offset(value: object, expected: int | None) -> None:
    """Only whole-day values are accepted."""

    assert coerce_offset(value) == expected


def test_policy_changes_lists_only_differences() -> None:
    """The PATCH body contains only edited fields."""

    edited = DEFAULT_POLICY.with_values({"date_birth_risky_from": -2}).with_placement_start_bands(True)

    assert policy_changes(DEFAULT_POLICY, edited) == {"date_birth_risky_from": -2, PLACEMENT_TOGGLE_KEY: True}
    assert policy_changes(edited, edited) == {}


def test_encoded_policy_reimports_unchanged() -> None:
    """An export bundle imports back to the same policy."""

    policy = DEFAULT_POLICY.with_values({"post_unlikely_to_likely_end": 4}).with_placement_start_bands(True)
    assert policy_from_payload(encode_policy(policy)) == policy
