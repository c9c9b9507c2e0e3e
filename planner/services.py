"""Service-layer functions for the planner app.

Services read Django settings and inbound plan records, then hand plain values
to the pure `availability` engine. Nothing here persists state.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from django.conf import settings

from availability.anchors import anchors_from_record
from availability.builder import build_windows, merge_stage_windows
from availability.display import DisplayPrefs, display_prefs_from_mapping
from availability.dto import StageWindow
from availability.payload import policy_from_payload
from availability.policy import DEFAULT_POLICY, OffsetPolicy
from availability.sanitizer import sanitize

logger = logging.getLogger(__name__)


def configured_default_policy() -> OffsetPolicy:
    """Return the compiled-in defaults overlaid with `AVAILABILITY_DEFAULT_OFFSETS`.

    Settings are read on every call so overrides (including test overrides) take
    effect immediately. Unreadable overrides are skipped; `planner.checks`
    reports them at startup.
    """

    overrides = getattr(settings, "AVAILABILITY_DEFAULT_OFFSETS", None)
    if not overrides:
        return DEFAULT_POLICY
    return policy_from_payload(overrides, base=DEFAULT_POLICY)


def resolve_tenant_policy(payload: object) -> OffsetPolicy:
    """Return the effective Offset Policy for a tenant settings payload.

    Args:
        payload: Tenant availability response body (possibly partial or wrapped
            in `{"data": ...}`), or None when nothing has loaded yet.

    Returns:
        The tenant policy merged over the configured defaults.
    """

    defaults = configured_default_policy()
    if payload is None:
        logger.debug("No tenant availability payload; using configured defaults.")
        return defaults
    return policy_from_payload(payload, base=defaults)


def configured_display_prefs(local: Mapping[str, object] | None = None) -> DisplayPrefs:
    """Return display prefs from `BREEDING_DISPLAY_DEFAULTS` overlaid with local values."""

    defaults = display_prefs_from_mapping(getattr(settings, "BREEDING_DISPLAY_DEFAULTS", None))
    return display_prefs_from_mapping(local, base=defaults)


def plan_stage_windows(
    plan: object,
    *,
    policy: OffsetPolicy | None = None,
    auto_widen: bool | None = None,
) -> tuple[StageWindow, ...]:
    """Compute availability windows for one plan record.

    Args:
        plan: Plan mapping from the plans API or an attribute-bearing object.
        policy: Tenant Offset Policy; defaults to the configured defaults.
        auto_widen: Unlikely auto-widen flag; defaults to the configured
            display prefs.

    Returns:
        Tuple of StageWindow; stages without anchors are omitted.
    """

    if policy is None:
        policy = configured_default_policy()
    if auto_widen is None:
        auto_widen = configured_display_prefs().auto_widen_unlikely
    return build_windows(anchors_from_record(plan), policy, auto_widen=auto_widen)


def plan_range_stage_windows(
    earliest: object,
    latest: object,
    *,
    policy: OffsetPolicy | None = None,
    auto_widen: bool | None = None,
) -> tuple[StageWindow, ...]:
    """Compute the envelope of windows for an earliest/latest pair of anchor records.

    Either side may be None; the other side's windows are then returned as-is.
    """

    first = () if earliest is None else plan_stage_windows(earliest, policy=policy, auto_widen=auto_widen)
    second = () if latest is None else plan_stage_windows(latest, policy=policy, auto_widen=auto_widen)
    return merge_stage_windows(first, second)


def renderable_windows(raw: object) -> list[StageWindow]:
    """Sanitize windows from any source before they reach a renderer."""

    windows = sanitize(raw)
    if isinstance(raw, (list, tuple)) and len(windows) != len(raw):
        logger.info("Dropped %d unrenderable availability window(s).", len(raw) - len(windows))
    return windows
