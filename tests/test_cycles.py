"""Tests for seasonal cycle segmentation."""

from __future__ import annotations

from datetime import date, timedelta

import numpy as np
import pytest

from phenocam_seasons.errors import InvalidInputError
from phenocam_seasons.phenology import (
    GreennessSeries,
    SeasonalCycle,
    find_cycles,
    select_per_year,
    validate_series,
)

START = date(2019, 1, 1)


def yearly_seasons(years: int, peaks: list[float]) -> GreennessSeries:
    """One summer pulse per year with the given peak heights."""
    points: list[tuple[int, float]] = [(0, 0.32)]
    for i, peak in enumerate(peaks[:years]):
        offset = 365 * i
        points += [(offset + 120, 0.32), (offset + 190, peak), (offset + 280, 0.32)]
    points.append((365 * years - 1, 0.32))
    xs, ys = zip(*points, strict=True)
    values = np.interp(np.arange(365 * years), xs, ys)
    return GreennessSeries.from_values(START, list(values))


def make_cycle(peak_day: int, peak_value: float, trough: float = 0.3) -> SeasonalCycle:
    peak_date = START + timedelta(days=peak_day)
    return SeasonalCycle(
        start_index=peak_day - 40,
        peak_index=peak_day,
        end_index=peak_day + 40,
        start_date=peak_date - timedelta(days=40),
        peak_date=peak_date,
        end_date=peak_date + timedelta(days=40),
        start_value=trough,
        peak_value=peak_value,
        end_value=trough,
    )


class TestFindCycles:
    """Segmentation into trough-peak-trough cycles."""

    def test_one_cycle_per_year(self) -> None:
        cycles = find_cycles(yearly_seasons(3, [0.45, 0.42, 0.47]))
        assert [c.year for c in cycles] == [2019, 2020, 2021]
        assert [round(c.peak_value, 2) for c in cycles] == [0.45, 0.42, 0.47]

    def test_troughs_closest_to_peak(self) -> None:
        cycle = find_cycles(yearly_seasons(1, [0.45]))[0]
        assert cycle.start_index == 120
        assert cycle.peak_index == 190
        assert cycle.end_index == 280
        assert cycle.length_days == 160
        assert cycle.start_on_edge is False
        assert cycle.end_on_edge is False

    def test_amplitude(self) -> None:
        cycle = find_cycles(yearly_seasons(1, [0.45]))[0]
        assert cycle.amplitude == pytest.approx(0.13)

    def test_edge_trough_flagged(self) -> None:
        values = np.interp(np.arange(100), [0, 50, 99], [0.30, 0.40, 0.38])
        cycle = find_cycles(GreennessSeries.from_values(START, list(values)))[0]
        assert cycle.start_on_edge is True
        assert cycle.end_on_edge is True
        # Trailing edge still near the peak: measured from the deeper trough
        assert cycle.rising_base == pytest.approx(0.30)
        assert cycle.falling_base == pytest.approx(0.30)

    def test_low_edge_trough_is_own_base(self) -> None:
        values = np.interp(np.arange(100), [0, 50, 99], [0.30, 0.40, 0.32])
        cycle = find_cycles(GreennessSeries.from_values(START, list(values)))[0]
        assert cycle.end_on_edge is True
        assert cycle.falling_base == pytest.approx(0.32)

    def test_interior_trough_uses_own_value(self) -> None:
        values = np.interp(np.arange(120), [0, 50, 99, 119], [0.30, 0.40, 0.35, 0.35])
        cycle = find_cycles(GreennessSeries.from_values(START, list(values)))[0]
        assert cycle.end_on_edge is False
        assert cycle.falling_base == pytest.approx(0.35)

    def test_too_short_series(self) -> None:
        assert find_cycles(GreennessSeries.from_values(START, [0.3, 0.4])) == []

    def test_empty_series_raises(self) -> None:
        with pytest.raises(InvalidInputError, match="empty"):
            find_cycles(GreennessSeries(samples=()))


class TestSelectPerYear:
    def test_keeps_largest_amplitude(self) -> None:
        small = make_cycle(100, 0.38)
        large = make_cycle(200, 0.48)
        assert select_per_year([small, large]) == [large]

    def test_tie_keeps_earlier(self) -> None:
        first = make_cycle(100, 0.40)
        second = make_cycle(200, 0.40)
        assert select_per_year([first, second]) == [first]

    def test_ordered_by_peak(self) -> None:
        a = make_cycle(200, 0.40)
        b = make_cycle(200 + 365, 0.45)
        assert select_per_year([b, a]) == [a, b]

    def test_empty(self) -> None:
        assert select_per_year([]) == []


class TestValidateSeries:
    def test_returns_values(self) -> None:
        series = GreennessSeries.from_values(START, [0.3, 0.35, 0.4])
        np.testing.assert_allclose(validate_series(series), [0.3, 0.35, 0.4])

    def test_rejects_inf(self) -> None:
        series = GreennessSeries.from_values(START, [0.3, float("inf")])
        with pytest.raises(InvalidInputError):
            validate_series(series)

    def test_rejects_non_series(self) -> None:
        with pytest.raises(InvalidInputError):
            validate_series([0.3, 0.4])  # type: ignore[arg-type]
