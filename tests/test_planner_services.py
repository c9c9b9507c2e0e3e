"""Integration tests for planner services wired to Django settings."""

from __future__ import annotations

import logging
from datetime import date

import pytest

from availability.dto import DateRange
from availability.policy import DEFAULT_POLICY
from planner.services import (
    configured_default_policy,
    configured_display_prefs,
    plan_range_stage_windows,
    plan_stage_windows,
    renderable_windows,
    resolve_tenant_policy,
)

pytestmark = pytest.mark.integration


def test_configured_default_policy_applies_overrides(settings) -> None:
    """Settings overrides are merged over the compiled-in defaults."""

    settings.AVAILABILITY_DEFAULT_OFFSETS = {}
    assert configured_default_policy() is DEFAULT_POLICY

    settings.AVAILABILITY_DEFAULT_OFFSETS = {"date_birth_risky_from": -2, "placement_start_enable_bands": True}
    policy = configured_default_policy()
    assert policy.value("date_birth_risky_from") == -2
    assert policy.placement_start_enable_bands is True


def test_resolve_tenant_policy_layers_tenant_over_settings(settings) -> None:
    """Tenant payloads override settings, which override the defaults."""

    settings.AVAILABILITY_DEFAULT_OFFSETS = {"date_birth_risky_from": -2}
    policy = resolve_tenant_policy({"data": {"date_birth_risky_to": 1}})

    assert policy.value("date_birth_risky_from") == -2
    assert policy.value("date_birth_risky_to") == 1
    assert resolve_tenant_policy(None).value("date_birth_risky_to") == 5


def test_configured_display_prefs(settings) -> None:
    """Local values overlay the configured display defaults."""

    settings.BREEDING_DISPLAY_DEFAULTS = {"gantt_horizon_months": 24, "show_calendar_bands": False}
    prefs = configured_display_prefs({"show_gantt_bands": "0"})

    assert prefs.gantt_horizon_months == 24
    assert prefs.show_calendar_bands is False
    assert prefs.show_gantt_bands is False

    settings.BREEDING_DISPLAY_DEFAULTS = "broken"
    assert configured_display_prefs().gantt_horizon_months == 18


def test_plan_stage_windows_from_api_record(settings) -> None:
    """API plan records produce windows using configured defaults."""

    settings.AVAILABILITY_DEFAULT_OFFSETS = {}
    settings.BREEDING_DISPLAY_DEFAULTS = {"auto_widen_unlikely": False}
    windows = plan_stage_windows({"expectedDue": "2025-05-10", "lockedGoHomeDate": "2025-07-05"})

    assert [window.key for window in windows] == ["birth_to_placement", "exact_birth", "exact_placement_completed"]
    assert windows[1].full == DateRange(start=date(2025, 5, 5), end=date(2025, 5, 15))


def test_plan_range_stage_windows_envelopes_seeds(settings) -> None:
    """Earliest and latest seeds merge; a missing side passes the other through."""

    settings.AVAILABILITY_DEFAULT_OFFSETS = {}
    windows = plan_range_stage_windows({"birth": "2025-05-01"}, {"birth": "2025-05-09"}, auto_widen=False)

    (birth,) = windows
    assert birth.full == DateRange(start=date(2025, 4, 26), end=date(2025, 5, 14))
    assert plan_range_stage_windows(None, {"birth": "2025-05-09"}, auto_widen=False)[0].anchor == date(2025, 5, 9)


def test_renderable_windows_logs_dropped_entries(caplog: pytest.LogCaptureFixture) -> None:
    """Dropped windows are counted in the log."""

    raw = [
        {"key": "exact_birth", "full": {"start": "2025-05-07", "end": "2025-05-13"}},
        {"key": "exact_weaning", "full": None},
    ]
    with caplog.at_level(logging.INFO, logger="planner.services"):
        windows = renderable_windows(raw)

    assert [window.key for window in windows] == ["exact_birth"]
    assert "Dropped 1 unrenderable availability window(s)." in caplog.text
