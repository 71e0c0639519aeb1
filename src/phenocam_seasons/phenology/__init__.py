"""Seasonal transition detection on daily greenness (GCC) series.

Start of season (SOS) and end of season (EOS) are the dates at which the
smoothed greenness curve crosses a fraction of its trough-to-peak amplitude
on the rising and falling limb of a growing-season cycle.

Public API:
  - models: GreennessSample, GreennessSeries, SeasonalCycle, TransitionEvent,
            CycleTransitions, Phenophase, Direction
  - cycles: find_cycles, select_per_year
  - transitions: detect_transitions, phenophases
  - serialization: transitions_to_dict, phenophases_to_rows
"""

from phenocam_seasons.phenology.cycles import find_cycles, select_per_year, validate_series
from phenocam_seasons.phenology.models import (
    DEFAULT_MIN_CYCLE_DAYS,
    DEFAULT_PROMINENCE_FRACTION,
    DEFAULT_THRESHOLDS,
    EDGE_TROUGH_FRACTION,
    CycleTransitions,
    Direction,
    GreennessSample,
    GreennessSeries,
    Phenophase,
    SeasonalCycle,
    TransitionEvent,
)
from phenocam_seasons.phenology.serialization import (
    cycle_to_dict,
    phenophases_to_rows,
    threshold_key,
    transitions_to_dict,
)
from phenocam_seasons.phenology.transitions import (
    crossing_level,
    detect_transitions,
    find_crossing,
    limb_crossing,
    phenophases,
)

__all__ = [
    "DEFAULT_MIN_CYCLE_DAYS",
    "DEFAULT_PROMINENCE_FRACTION",
    "DEFAULT_THRESHOLDS",
    "EDGE_TROUGH_FRACTION",
    "CycleTransitions",
    "Direction",
    "GreennessSample",
    "GreennessSeries",
    "Phenophase",
    "SeasonalCycle",
    "TransitionEvent",
    "crossing_level",
    "cycle_to_dict",
    "detect_transitions",
    "find_crossing",
    "find_cycles",
    "limb_crossing",
    "phenophases",
    "phenophases_to_rows",
    "select_per_year",
    "threshold_key",
    "transitions_to_dict",
    "validate_series",
]
