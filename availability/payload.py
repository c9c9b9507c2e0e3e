"""Import/export of Offset Policy payloads.

Tenant settings responses, PATCH bodies and export bundles all carry the policy
as a flat mapping of field keys. Payloads may be partial, wrapped in a
`{"data": ...}` envelope, use legacy phase key names, or carry unrelated
configuration; `policy_from_payload` merges whatever it can read over a base
policy and never requires the full shape.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Final

from .policy import DEFAULT_POLICY, OFFSET_FIELD_KEYS, PLACEMENT_TOGGLE_KEY, OffsetPolicy

logger = logging.getLogger(__name__)

# Older tenants persisted the Testing -> Breeding phase under cycle_breeding_*
# names; the canonical key wins when both are present.
LEGACY_FIELD_ALIASES: Final[dict[str, tuple[str, ...]]] = {
    "testing_risky_from_full_start": ("cycle_breeding_risky_from_full_start", "cycle_breeding_risky_from"),
    "testing_risky_to_full_end": ("cycle_breeding_risky_to_full_end", "cycle_breeding_risky_to"),
    "testing_unlikely_from_likely_start": (
        "cycle_breeding_unlikely_from_likely_start",
        "cycle_breeding_unlikely_from",
    ),
    "testing_unlikely_to_likely_end": ("cycle_breeding_unlikely_to_likely_end", "cycle_breeding_unlikely_to"),
}


def unwrap_payload(raw: object) -> Mapping[str, object] | None:
    """Return the policy mapping from a raw response body, or None."""

    if not isinstance(raw, Mapping):
        return None
    data = raw.get("data")
    if isinstance(data, Mapping):
        return data
    return raw


def policy_from_payload(raw: object, *, base: OffsetPolicy = DEFAULT_POLICY) -> OffsetPolicy:
    """Merge a (partial) policy payload over a base policy.

    Args:
        raw: None, a flat mapping of field keys, or a `{"data": {...}}` envelope.
        base: Values used for every field the payload omits or garbles.

    Returns:
        A complete OffsetPolicy.

    Notes:
        Values that cannot be read as whole days keep the base value and are
        logged; they never raise. Unknown keys are ignored.
    """

    if raw is None:
        return base
    payload = unwrap_payload(raw)
    if payload is None:
        logger.warning("Ignoring availability payload of type %s; expected a mapping.", type(raw).__name__)
        return base

    updates: dict[str, int] = {}
    for key in OFFSET_FIELD_KEYS:
        source_key, value = _lookup(payload, key)
        if source_key is None:
            continue
        parsed = coerce_offset(value)
        if parsed is None:
            logger.warning("Ignoring availability field %s=%r; expected whole days.", source_key, value)
            continue
        updates[key] = parsed

    policy = base.with_values(updates)
    if PLACEMENT_TOGGLE_KEY in payload and payload[PLACEMENT_TOGGLE_KEY] is not None:
        policy = policy.with_placement_start_bands(parse_bool(payload[PLACEMENT_TOGGLE_KEY]))
    return policy


def encode_policy(policy: OffsetPolicy) -> dict[str, int | bool]:
    """Encode a policy as a JSON-serializable mapping of canonical keys."""

    return policy.as_dict()


def policy_changes(initial: OffsetPolicy, current: OffsetPolicy) -> dict[str, int | bool]:
    """Return only the fields that differ between two policies (a PATCH body)."""

    before = initial.as_dict()
    return {key: value for key, value in current.as_dict().items() if before.get(key) != value}


def coerce_offset(value: object) -> int | None:
    """Best-effort parsing of a whole-day offset.

    Accepts ints, integral floats and numeric strings (e.g. `"-5"`, `"7.0"`).
    Returns None for anything else, including booleans and fractional days.
    """

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        cleaned = value.strip()
        if not cleaned:
            return None
        try:
            number = Decimal(cleaned)
        except InvalidOperation:
            return None
        if not number.is_finite() or number != number.to_integral_value():
            return None
        return int(number)
    return None


def _lookup(payload: Mapping[str, object], key: str) -> tuple[str | None, object]:
    for candidate in (key, *LEGACY_FIELD_ALIASES.get(key, ())):
        value = payload.get(candidate)
        if value is not None:
            return candidate, value
    return None, None


def parse_bool(value: object) -> bool:
    """Best-effort bool parsing for persisted and device-stored toggles."""

    if isinstance(value, bool):
        return value
    normalized = str(value).strip().casefold()
    return normalized in {"1", "true", "yes", "on"}
