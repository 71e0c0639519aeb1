"""JSON serialization helpers for cycle and transition results."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from phenocam_seasons.phenology.models import Direction

if TYPE_CHECKING:
    from datetime import date

    from phenocam_seasons.phenology.models import (
        CycleTransitions,
        Phenophase,
        SeasonalCycle,
        TransitionEvent,
    )


def threshold_key(threshold: float) -> str:
    """Column name for a threshold, e.g. 0.5 -> ``transition_50``."""
    return f"transition_{threshold * 100:g}"


def _iso(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


def cycle_to_dict(cycle: SeasonalCycle) -> dict[str, Any]:
    """Serialize a SeasonalCycle to a JSON-compatible dict."""
    return {
        "year": cycle.year,
        "start": cycle.start_date.isoformat(),
        "peak": cycle.peak_date.isoformat(),
        "end": cycle.end_date.isoformat(),
        "start_value": round(cycle.start_value, 4),
        "peak_value": round(cycle.peak_value, 4),
        "end_value": round(cycle.end_value, 4),
        "amplitude": round(cycle.amplitude, 4),
        "start_on_edge": cycle.start_on_edge,
        "end_on_edge": cycle.end_on_edge,
    }


def _event_to_dict(event: TransitionEvent | None) -> dict[str, Any] | None:
    if event is None:
        return None
    return {
        "date": event.date.isoformat(),
        "doy": event.doy,
        "level": round(event.level, 4),
    }


def transitions_to_dict(results: list[CycleTransitions]) -> list[dict[str, Any]]:
    """Serialize detect_transitions() output.

    Thresholds without a crossing serialize as ``null``.
    """
    return [
        {
            "direction": str(r.direction),
            "year": r.year,
            "cycle": cycle_to_dict(r.cycle),
            "transitions": {
                threshold_key(t): _event_to_dict(ev) for t, ev in r.transitions.items()
            },
        }
        for r in results
    ]


def phenophases_to_rows(rows: list[Phenophase]) -> list[dict[str, Any]]:
    """Flatten phenophases() output into one dict per cycle and direction.

    Columns per threshold: ``transition_<pct>``, ``transition_<pct>_lower``,
    ``transition_<pct>_upper`` and ``threshold_<pct>`` (the greenness level).
    """
    flat: list[dict[str, Any]] = []
    for row in rows:
        cycle = row.cycle
        base = cycle.rising_base if row.direction is Direction.RISING else cycle.falling_base
        record: dict[str, Any] = {
            "direction": str(row.direction),
            "year": row.year,
            "peak": cycle.peak_date.isoformat(),
            "min_gcc": round(base, 4),
            "max_gcc": round(cycle.peak_value, 4),
        }
        for t, level in row.levels.items():
            key = threshold_key(t)
            record[key] = _iso(row.dates[t])
            record[f"{key}_lower"] = _iso(row.lower[t])
            record[f"{key}_upper"] = _iso(row.upper[t])
            record[key.replace("transition_", "threshold_")] = round(level, 4)
        flat.append(record)
    return flat
