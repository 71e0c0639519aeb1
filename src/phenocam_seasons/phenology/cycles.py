"""Seasonal cycle segmentation (pure, no I/O).

A cycle is one growing-season pulse: the greenness minimum before a peak,
the peak, and the minimum after it. Peaks are local maxima whose topographic
prominence clears ``min_prominence``; cycles shorter than ``min_cycle_days``
(trough to trough) are dropped as noise.

Irregular data (double seasons, noisy peaks) can yield the "wrong" cycle or
none at all. That is reported as ordinary output; callers are expected to
look at the curve.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

import numpy as np
from scipy.signal import find_peaks

from phenocam_seasons.errors import InvalidInputError
from phenocam_seasons.phenology.models import (
    DEFAULT_MIN_CYCLE_DAYS,
    DEFAULT_PROMINENCE_FRACTION,
    GreennessSeries,
    SeasonalCycle,
)

if TYPE_CHECKING:
    from datetime import date


def validate_series(series: GreennessSeries) -> np.ndarray:
    """Check the daily-series invariants and return the values array.

    Raises:
        InvalidInputError: Empty series, non-finite values, or dates that
            are not consecutive calendar days.
    """
    if not isinstance(series, GreennessSeries) or len(series) == 0:
        msg = "greenness series is empty"
        raise InvalidInputError(msg)

    values = series.values()
    if not np.all(np.isfinite(values)):
        msg = "greenness series contains missing or non-finite values"
        raise InvalidInputError(msg)

    one_day = timedelta(days=1)
    dates = series.dates
    for prev, cur in zip(dates, dates[1:], strict=False):
        if cur - prev != one_day:
            msg = f"greenness series is not daily and gap-free: {prev} -> {cur}"
            raise InvalidInputError(msg)

    return values


def find_cycles(
    series: GreennessSeries,
    min_prominence: float | None = None,
    min_cycle_days: int = DEFAULT_MIN_CYCLE_DAYS,
) -> list[SeasonalCycle]:
    """Split a daily greenness series into seasonal cycles.

    Args:
        series: Daily, gap-free greenness series.
        min_prominence: Minimum peak prominence in greenness units.
            Defaults to 10% of the series' value range.
        min_cycle_days: Minimum trough-to-trough length in days.

    Returns:
        Cycles ordered by peak date (possibly empty).

    Raises:
        InvalidInputError: If the series is empty or malformed.
    """
    values = validate_series(series)
    return cycles_from_values(values, series.dates, min_prominence, min_cycle_days)


def cycles_from_values(
    values: np.ndarray,
    dates: list[date],
    min_prominence: float | None = None,
    min_cycle_days: int = DEFAULT_MIN_CYCLE_DAYS,
) -> list[SeasonalCycle]:
    """Cycle segmentation on an already validated values array."""
    n = len(values)
    if n < 3:
        return []

    value_range = float(values.max() - values.min())
    if value_range == 0.0:
        return []

    prominence = (
        min_prominence if min_prominence is not None else DEFAULT_PROMINENCE_FRACTION * value_range
    )
    peaks, _ = find_peaks(values, prominence=prominence)

    cycles: list[SeasonalCycle] = []
    for k, raw_peak in enumerate(peaks):
        peak = int(raw_peak)
        left = int(peaks[k - 1]) if k > 0 else 0
        right = int(peaks[k + 1]) if k + 1 < len(peaks) else n - 1

        # Minimum closest to the peak on each side
        start = peak - int(np.argmin(values[left : peak + 1][::-1]))
        end = peak + int(np.argmin(values[peak : right + 1]))

        if (dates[end] - dates[start]).days < min_cycle_days:
            continue

        cycles.append(
            SeasonalCycle(
                start_index=start,
                peak_index=peak,
                end_index=end,
                start_date=dates[start],
                peak_date=dates[peak],
                end_date=dates[end],
                start_value=float(values[start]),
                peak_value=float(values[peak]),
                end_value=float(values[end]),
                start_on_edge=start == 0,
                end_on_edge=end == n - 1,
            )
        )

    return cycles


def select_per_year(cycles: list[SeasonalCycle]) -> list[SeasonalCycle]:
    """Keep the largest-amplitude cycle for each calendar year of its peak.

    Ties keep the earlier cycle. Result is ordered by peak date.
    """
    best: dict[int, SeasonalCycle] = {}
    for cycle in cycles:
        current = best.get(cycle.year)
        if current is None or cycle.amplitude > current.amplitude:
            best[cycle.year] = cycle
    return sorted(best.values(), key=lambda c: c.peak_index)
