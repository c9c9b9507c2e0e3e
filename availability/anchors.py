"""Plan anchor records consumed by the Window Builder.

Plans come from the plan-lifecycle API with several spellings for the same
lifecycle date (actual, locked, expected). This module picks one date per anchor
and leaves everything else alone; it never invents a date.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from typing import Final

from .dates import coerce_date
from .policy import Anchor


@dataclass(frozen=True, slots=True)
class PlanAnchors:
    """Sparse lifecycle dates for one plan. Any anchor may be None."""

    cycle_start: date | None = None
    testing_start: date | None = None
    breeding: date | None = None
    birth: date | None = None
    weaned: date | None = None
    placement_start: date | None = None
    placement_completed: date | None = None

    def get(self, anchor: Anchor) -> date | None:
        """Return the date recorded for an anchor."""

        return getattr(self, anchor.value)


# Checked in order; the first value that coerces to a date wins.
ANCHOR_ALIASES: Final[dict[Anchor, tuple[str, ...]]] = {
    Anchor.cycle_start: ("cycle_start", "lockedCycleStart", "expectedCycleStart"),
    Anchor.testing_start: (
        "testing_start",
        "hormoneTestingStartDateActual",
        "lockedOvulationDate",
        "expectedHormoneTestingStart",
    ),
    Anchor.breeding: ("breeding", "breedDateActual", "expectedBreedDate", "expectedBreedingDate"),
    Anchor.birth: ("birth", "birthDateActual", "lockedDueDate", "expectedDue", "expectedBirthDate"),
    Anchor.weaned: (
        "weaned",
        "weanedDateActual",
        "expectedWeaned",
        "expectedWeanedDate",
        "expectedWeaningDate",
    ),
    Anchor.placement_start: (
        "placement_start",
        "lockedPlacementStartDate",
        "expectedPlacementStart",
        "expectedPlacementStartDate",
    ),
    Anchor.placement_completed: (
        "placement_completed",
        "lockedGoHomeDate",
        "expectedPlacementCompleted",
        "expectedGoHome",
    ),
}


def anchors_from_record(record: object) -> PlanAnchors:
    """Build PlanAnchors from a plan mapping or attribute-bearing object.

    Args:
        record: A dict-like payload from the plans API, an ORM-like object, or
            an existing PlanAnchors instance.

    Returns:
        PlanAnchors with unparseable or missing values left as None.
    """

    if isinstance(record, PlanAnchors):
        return record
    if record is None:
        return PlanAnchors()

    values: dict[str, date | None] = {}
    for anchor, aliases in ANCHOR_ALIASES.items():
        values[anchor.value] = _first_date(record, aliases)
    return PlanAnchors(**values)


def _first_date(record: object, aliases: tuple[str, ...]) -> date | None:
    for name in aliases:
        if isinstance(record, Mapping):
            raw = record.get(name)
        else:
            raw = getattr(record, name, None)
        parsed = coerce_date(raw)
        if parsed is not None:
            return parsed
    return None
