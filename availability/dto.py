"""DTO types returned by the Availability Window Engine.

DTOs are plain, immutable data containers handed to calendar and Gantt
renderers. They intentionally avoid any Django/ORM dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Literal


WindowKind = Literal["phase", "date"]


@dataclass(frozen=True, slots=True)
class DateRange:
    """An inclusive calendar date range.

    Attributes:
        start: Inclusive start date.
        end: Inclusive end date. May precede `start` when built from inverted
            offsets; the engine reports such bands instead of reordering them.
    """

    start: date
    end: date

    def widen(self, *, before: int, after: int) -> DateRange:
        """Return a copy moved `before` days earlier and `after` days later."""

        return DateRange(start=self.start - timedelta(days=before), end=self.end + timedelta(days=after))

    def envelope(self, other: DateRange) -> DateRange:
        """Return the smallest range covering both ranges."""

        return DateRange(start=min(self.start, other.start), end=max(self.end, other.end))


@dataclass(frozen=True, slots=True)
class StageWindow:
    """Nested availability bands computed for one lifecycle stage.

    Attributes:
        key: Stable stage key (e.g. `birth_to_placement`, `exact_birth`).
        kind: "phase" for phase-span windows, "date" for exact-date windows.
        full: Maximal plausible range for the stage. Always present.
        risky: Caution extension around `full`. Equals `full` for exact dates.
        unlikely: Softer caution ring around `likely` (phase) or the anchor (date).
        likely: Expected/core span; only present for phase windows.
        anchor: The anchor date an exact-date window was built from.
    """

    key: str
    kind: WindowKind
    full: DateRange
    risky: DateRange | None = None
    unlikely: DateRange | None = None
    likely: DateRange | None = None
    anchor: date | None = None
