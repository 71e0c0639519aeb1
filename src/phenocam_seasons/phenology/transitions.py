"""Seasonal transition dates by amplitude-threshold crossing (pure, no I/O).

For a cycle with trough ``b`` and peak ``p``, the crossing level for a
threshold ``t`` is::

    rising  (start of season):  b + t * (p - b)
    falling (end of season):    p - t * (p - b)

The limb is walked sample by sample (trough -> peak, or peak -> trailing
trough); the first sample pair that brackets the level is linearly
interpolated to a fractional day. A level that is never bracketed (e.g. a
limb cut off by the start of the record) is reported as ``None`` rather than
extrapolated.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from phenocam_seasons.errors import InvalidInputError
from phenocam_seasons.phenology.cycles import cycles_from_values, select_per_year, validate_series
from phenocam_seasons.phenology.models import (
    DEFAULT_MIN_CYCLE_DAYS,
    DEFAULT_THRESHOLDS,
    CycleTransitions,
    Direction,
    Phenophase,
    TransitionEvent,
)

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date

    import numpy as np

    from phenocam_seasons.phenology.models import GreennessSeries, SeasonalCycle


def _normalize_thresholds(thresholds: Iterable[float]) -> list[float]:
    """Validate thresholds, keeping caller order and dropping duplicates."""
    result: list[float] = []
    for raw in thresholds:
        t = float(raw)
        if not 0.0 <= t <= 1.0:
            msg = f"threshold must lie in [0, 1], got {raw!r}"
            raise InvalidInputError(msg)
        if t not in result:
            result.append(t)
    if not result:
        msg = "at least one threshold is required"
        raise InvalidInputError(msg)
    return result


def crossing_level(cycle: SeasonalCycle, direction: Direction, threshold: float) -> float:
    """Greenness level that marks ``threshold`` on the given limb of ``cycle``."""
    peak = cycle.peak_value
    if direction is Direction.RISING:
        base = cycle.rising_base
        level = base + threshold * (peak - base)
    else:
        base = cycle.falling_base
        level = peak - threshold * (peak - base)
    return min(max(level, base), peak)


def limb_bounds(cycle: SeasonalCycle, direction: Direction) -> tuple[int, int]:
    """First and last sample index of a cycle limb."""
    if direction is Direction.RISING:
        return cycle.start_index, cycle.peak_index
    return cycle.peak_index, cycle.end_index


def find_crossing(values: np.ndarray, first: int, last: int, level: float) -> float | None:
    """Fractional index where ``values[first..last]`` first reaches ``level``.

    Returns:
        Position between ``first`` and ``last``, or None if no consecutive
        pair brackets the level.
    """
    for i in range(first, last):
        a = float(values[i])
        b = float(values[i + 1])
        if min(a, b) <= level <= max(a, b):
            if a == b:
                return float(i)
            return i + (level - a) / (b - a)
    return None


def limb_crossing(
    values: np.ndarray, cycle: SeasonalCycle, direction: Direction, level: float
) -> float | None:
    """Position where one limb of ``cycle`` reaches ``level``.

    The peak level resolves to the peak itself; on a flat top the walk would
    otherwise stop at the first sample of the plateau.
    """
    if direction is Direction.RISING and level >= cycle.peak_value:
        return float(cycle.peak_index)
    first, last = limb_bounds(cycle, direction)
    return find_crossing(values, first, last, level)


def _event(
    series: GreennessSeries,
    values: np.ndarray,
    cycle: SeasonalCycle,
    direction: Direction,
    threshold: float,
) -> TransitionEvent | None:
    level = crossing_level(cycle, direction, threshold)
    position = limb_crossing(values, cycle, direction, level)
    if position is None:
        return None
    return TransitionEvent(
        direction=direction,
        threshold=threshold,
        level=level,
        position=position,
        date=series.date_at(position),
    )


def _select_cycles(
    series: GreennessSeries,
    values: np.ndarray,
    per_year: bool,
    min_prominence: float | None,
    min_cycle_days: int,
) -> list[SeasonalCycle]:
    cycles = cycles_from_values(values, series.dates, min_prominence, min_cycle_days)
    return select_per_year(cycles) if per_year else cycles


def detect_transitions(
    series: GreennessSeries,
    direction: Direction | str,
    thresholds: Iterable[float] = DEFAULT_THRESHOLDS,
    per_year: bool = True,
    *,
    min_prominence: float | None = None,
    min_cycle_days: int = DEFAULT_MIN_CYCLE_DAYS,
) -> list[CycleTransitions]:
    """Detect start-of-season or end-of-season dates in a greenness series.

    Args:
        series: Daily, gap-free smoothed greenness series.
        direction: ``"rising"`` (start of season) or ``"falling"`` (end).
        thresholds: Fractions of the trough-to-peak amplitude in [0, 1].
        per_year: Keep only the largest-amplitude cycle per calendar year
            (by peak date). False reports every detected cycle.
        min_prominence: Minimum peak prominence (default 10% of value range).
        min_cycle_days: Minimum trough-to-trough cycle length in days.

    Returns:
        One CycleTransitions per selected cycle, ordered by peak date. Each
        maps threshold -> TransitionEvent, or None when no crossing exists.

    Raises:
        InvalidInputError: Empty/malformed series or invalid thresholds.
    """
    try:
        direction = Direction(direction)
    except ValueError:
        msg = f"direction must be 'rising' or 'falling', got {direction!r}"
        raise InvalidInputError(msg) from None
    levels = _normalize_thresholds(thresholds)
    values = validate_series(series)

    results: list[CycleTransitions] = []
    for cycle in _select_cycles(series, values, per_year, min_prominence, min_cycle_days):
        transitions = {t: _event(series, values, cycle, direction, t) for t in levels}
        results.append(CycleTransitions(cycle=cycle, direction=direction, transitions=transitions))
    return results


def _envelope_dates(
    series: GreennessSeries,
    envelopes: list[np.ndarray],
    first: int,
    last: int,
    level: float,
) -> tuple[date | None, date | None]:
    found = [
        series.date_at(pos)
        for env in envelopes
        if (pos := find_crossing(env, first, last, level)) is not None
    ]
    if not found:
        return None, None
    return min(found), max(found)


def phenophases(
    series: GreennessSeries,
    thresholds: Iterable[float] = DEFAULT_THRESHOLDS,
    per_year: bool = True,
    *,
    min_prominence: float | None = None,
    min_cycle_days: int = DEFAULT_MIN_CYCLE_DAYS,
) -> list[Phenophase]:
    """Start- and end-of-season dates for each selected cycle.

    Both directions use the same cycles. When the series carries CI
    half-widths, the same crossing levels are also located on the
    ``value - ci`` and ``value + ci`` curves to bound each date.

    Returns:
        Rows ordered by peak date, rising before falling within a cycle.
    """
    levels = _normalize_thresholds(thresholds)
    values = validate_series(series)
    ci = series.ci()
    envelopes = [] if ci is None else [values - ci, values + ci]

    rows: list[Phenophase] = []
    for cycle in _select_cycles(series, values, per_year, min_prominence, min_cycle_days):
        for direction in (Direction.RISING, Direction.FALLING):
            first, last = limb_bounds(cycle, direction)
            row_levels: dict[float, float] = {}
            dates: dict[float, date | None] = {}
            lower: dict[float, date | None] = {}
            upper: dict[float, date | None] = {}
            for t in levels:
                level = crossing_level(cycle, direction, t)
                position = limb_crossing(values, cycle, direction, level)
                row_levels[t] = level
                dates[t] = None if position is None else series.date_at(position)
                lower[t], upper[t] = _envelope_dates(series, envelopes, first, last, level)
            rows.append(
                Phenophase(
                    direction=direction,
                    cycle=cycle,
                    levels=row_levels,
                    dates=dates,
                    lower=lower,
                    upper=upper,
                )
            )
    return rows
