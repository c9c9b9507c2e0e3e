"""Django system checks for availability settings.

Misconfigured defaults are reported through `manage.py check` instead of
failing at import time, matching how the engine treats bad bands: visible, but
not fatal.
"""

from __future__ import annotations

from collections.abc import Mapping

from django.conf import settings
from django.core.checks import CheckMessage, Error, Warning, register

from availability.bands import validate_policy
from availability.display import MAX_HORIZON_MONTHS, MIN_HORIZON_MONTHS
from availability.payload import LEGACY_FIELD_ALIASES, coerce_offset
from availability.policy import OFFSET_FIELD_KEYS, PLACEMENT_TOGGLE_KEY
from planner.services import configured_default_policy

_KNOWN_KEYS = frozenset(OFFSET_FIELD_KEYS) | {PLACEMENT_TOGGLE_KEY} | {
    alias for aliases in LEGACY_FIELD_ALIASES.values() for alias in aliases
}


@register()
def check_default_offset_policy(app_configs: object = None, **kwargs: object) -> list[CheckMessage]:
    """Validate `AVAILABILITY_DEFAULT_OFFSETS` and the policy it produces."""

    messages: list[CheckMessage] = []
    overrides = getattr(settings, "AVAILABILITY_DEFAULT_OFFSETS", None)
    if overrides is None:
        overrides = {}
    if not isinstance(overrides, Mapping):
        return [
            Error(
                "AVAILABILITY_DEFAULT_OFFSETS must be a mapping of field keys to day offsets.",
                id="planner.E001",
            )
        ]

    for key, value in overrides.items():
        if key not in _KNOWN_KEYS:
            messages.append(
                Error(f"AVAILABILITY_DEFAULT_OFFSETS names an unknown field: {key!r}.", id="planner.E001")
            )
        elif key != PLACEMENT_TOGGLE_KEY and coerce_offset(value) is None:
            messages.append(
                Error(
                    f"AVAILABILITY_DEFAULT_OFFSETS[{key!r}] must be a whole number of days, got {value!r}.",
                    id="planner.E001",
                )
            )

    for issue in validate_policy(configured_default_policy()).issues:
        messages.append(
            Warning(
                f"Default {issue.row.value} {issue.message}",
                hint=f"{issue.from_key}={issue.from_days}, {issue.to_key}={issue.to_days}.",
                id="planner.W001",
            )
        )
    return messages


@register()
def check_display_defaults(app_configs: object = None, **kwargs: object) -> list[CheckMessage]:
    """Warn when the configured Gantt horizon will be clamped."""

    defaults = getattr(settings, "BREEDING_DISPLAY_DEFAULTS", None) or {}
    if not isinstance(defaults, Mapping):
        return [Error("BREEDING_DISPLAY_DEFAULTS must be a mapping.", id="planner.E002")]

    months = coerce_offset(defaults.get("gantt_horizon_months"))
    if months is not None and not MIN_HORIZON_MONTHS <= months <= MAX_HORIZON_MONTHS:
        return [
            Warning(
                f"gantt_horizon_months={months} is outside {MIN_HORIZON_MONTHS}..{MAX_HORIZON_MONTHS} "
                "and will be clamped.",
                id="planner.W002",
            )
        ]
    return []
