"""Greenness series, seasonal cycle and transition data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import StrEnum
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Sequence

# Peaks must rise at least this fraction of the series' value range above
# their surroundings to count as a growing season.
DEFAULT_PROMINENCE_FRACTION = 0.10

# Trough-to-trough cycles shorter than this are treated as noise.
DEFAULT_MIN_CYCLE_DAYS = 30

DEFAULT_THRESHOLDS = (0.10, 0.25, 0.50)

# An edge trough higher than this fraction of the cycle's full range (above
# its deeper trough) is taken as a limb cut off by the end of the record.
EDGE_TROUGH_FRACTION = 0.5


class Direction(StrEnum):
    """Which limb of a cycle a transition lies on."""

    RISING = "rising"  # start of season (SOS)
    FALLING = "falling"  # end of season (EOS)


@dataclass(frozen=True)
class GreennessSample:
    """One day of smoothed greenness."""

    date: date
    value: float
    ci: float | None = None


@dataclass(frozen=True)
class GreennessSeries:
    """Daily greenness values, one sample per calendar day, no gaps."""

    samples: tuple[GreennessSample, ...]
    site: str | None = None
    veg_type: str | None = None
    roi_id: int | None = None
    filled_days: int = 0

    @classmethod
    def from_values(
        cls,
        start: date,
        values: Sequence[float],
        ci: Sequence[float | None] | None = None,
        *,
        site: str | None = None,
        veg_type: str | None = None,
        roi_id: int | None = None,
        filled_days: int = 0,
    ) -> GreennessSeries:
        """Build a series of consecutive days beginning at ``start``."""
        cis = list(ci) if ci is not None else [None] * len(values)
        if len(cis) != len(values):
            msg = "ci must have the same length as values"
            raise ValueError(msg)
        samples = tuple(
            GreennessSample(
                date=start + timedelta(days=i),
                value=float(v),
                ci=None if c is None else float(c),
            )
            for i, (v, c) in enumerate(zip(values, cis, strict=True))
        )
        return cls(
            samples=samples,
            site=site,
            veg_type=veg_type,
            roi_id=roi_id,
            filled_days=filled_days,
        )

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def start(self) -> date:
        return self.samples[0].date

    @property
    def end(self) -> date:
        return self.samples[-1].date

    @property
    def dates(self) -> list[date]:
        return [s.date for s in self.samples]

    def values(self) -> np.ndarray:
        """Greenness values as a float array."""
        return np.array([s.value for s in self.samples], dtype=float)

    def ci(self) -> np.ndarray | None:
        """CI half-widths as a float array, or None if the series carries none.

        Days without a CI inside a series that has some are treated as zero.
        """
        if all(s.ci is None for s in self.samples):
            return None
        return np.array([s.ci or 0.0 for s in self.samples], dtype=float)

    def date_at(self, position: float) -> date:
        """Calendar date nearest to a (fractional) sample position."""
        return self.start + timedelta(days=int(np.floor(position + 0.5)))


@dataclass(frozen=True)
class SeasonalCycle:
    """One rising-then-falling pulse: leading trough, peak, trailing trough.

    A trough on the very first or last sample is flagged ``*_on_edge``: the
    series may have been cut off before the real minimum was reached. Such a
    trough still serves as its limb's base when it reaches the lower part of
    the cycle's range (see ``EDGE_TROUGH_FRACTION``).
    """

    start_index: int
    peak_index: int
    end_index: int
    start_date: date
    peak_date: date
    end_date: date
    start_value: float
    peak_value: float
    end_value: float
    start_on_edge: bool = False
    end_on_edge: bool = False

    @property
    def year(self) -> int:
        return self.peak_date.year

    @property
    def length_days(self) -> int:
        return (self.end_date - self.start_date).days

    @property
    def amplitude(self) -> float:
        """Peak height above the deeper of the two troughs."""
        return self.peak_value - min(self.start_value, self.end_value)

    def _cut_off(self, trough: float) -> bool:
        floor = min(self.start_value, self.end_value)
        return trough - floor > EDGE_TROUGH_FRACTION * (self.peak_value - floor)

    @property
    def rising_base(self) -> float:
        """Reference trough for start-of-season levels."""
        if self.start_on_edge and self._cut_off(self.start_value):
            return self.end_value
        return self.start_value

    @property
    def falling_base(self) -> float:
        """Reference trough for end-of-season levels."""
        if self.end_on_edge and self._cut_off(self.end_value):
            return self.start_value
        return self.end_value


@dataclass(frozen=True)
class TransitionEvent:
    """Date at which greenness crosses a threshold level on one limb."""

    direction: Direction
    threshold: float
    level: float
    position: float  # fractional sample index into the series
    date: date

    @property
    def doy(self) -> int:
        return self.date.timetuple().tm_yday


@dataclass(frozen=True)
class CycleTransitions:
    """Transitions found for one cycle; ``None`` marks "not found"."""

    cycle: SeasonalCycle
    direction: Direction
    transitions: dict[float, TransitionEvent | None] = field(default_factory=dict)

    @property
    def year(self) -> int:
        return self.cycle.year

    def found(self) -> dict[float, TransitionEvent]:
        """Only the thresholds that produced a date."""
        return {t: ev for t, ev in self.transitions.items() if ev is not None}


@dataclass(frozen=True)
class Phenophase:
    """SOS or EOS dates for one cycle, with CI envelope bounds.

    ``lower``/``upper`` hold the earliest and latest crossing dates of the
    ``value - ci`` and ``value + ci`` envelopes (None without CI data).
    """

    direction: Direction
    cycle: SeasonalCycle
    levels: dict[float, float]
    dates: dict[float, date | None]
    lower: dict[float, date | None]
    upper: dict[float, date | None]

    @property
    def year(self) -> int:
        return self.cycle.year
