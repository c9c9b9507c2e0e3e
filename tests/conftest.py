"""Pytest fixtures shared across availability tests."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from availability.policy import DEFAULT_POLICY, OffsetPolicy


@pytest.fixture
def default_policy() -> OffsetPolicy:
    """Return the compiled-in default Offset Policy."""

    return DEFAULT_POLICY


@pytest.fixture
def birth_policy() -> OffsetPolicy:
    """Return a policy whose Birth row is risky -3/+3 and unlikely -7/+7."""

    return DEFAULT_POLICY.with_values(
        {
            "date_birth_risky_from": -3,
            "date_birth_risky_to": 3,
            "date_birth_unlikely_from": -7,
            "date_birth_unlikely_to": 7,
        }
    )


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    The suite must be runnable by intent:
    - `unit`: pure engine tests with no Django settings access.
    - `integration`: tests touching Django settings, system checks, or services.

    Each test must have exactly one of these markers.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
