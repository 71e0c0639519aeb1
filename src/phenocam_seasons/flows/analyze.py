"""
Prefect flow for computing transition dates from archived ROI series.

Reads every downloaded ROI summary file, detects start/end of season dates
and writes one JSON document per file under ``derived/transitions/``.

Run locally:
    python -m phenocam_seasons.flows.analyze
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from prefect import flow, task

from phenocam_seasons.config import get_settings
from phenocam_seasons.datasources import phenocam
from phenocam_seasons.errors import InvalidInputError
from phenocam_seasons.phenology import (
    DEFAULT_MIN_CYCLE_DAYS,
    DEFAULT_THRESHOLDS,
    Direction,
    GreennessSeries,
    detect_transitions,
    phenophases,
    phenophases_to_rows,
    transitions_to_dict,
)
from phenocam_seasons.store import DataStore

store = DataStore(get_settings().data_dir)

TRANSITIONS_DIR = Path("derived/transitions")


def transitions_path(archive_file: Path) -> Path:
    """Store path of the transitions JSON for an archive CSV."""
    return TRANSITIONS_DIR / f"{archive_file.stem}_transitions.json"


# =============================================================================
# Tasks
# =============================================================================


@task(name="load-series")
def load_series(
    path: Path,
    column: str = "gcc_90",
    smooth: bool = True,
    drop_outliers: bool = True,
) -> GreennessSeries:
    """Read an archive CSV into a daily greenness series."""
    ts = phenocam.read_timeseries(path)
    return phenocam.to_greenness_series(
        ts, column, smooth=smooth, drop_outliers=drop_outliers
    )


@task(name="compute-transitions")
def compute_transitions(
    series: GreennessSeries,
    thresholds: list[float],
    per_year: bool = True,
    min_prominence: float | None = None,
    min_cycle_days: int = DEFAULT_MIN_CYCLE_DAYS,
) -> dict[str, Any]:
    """Detect SOS/EOS dates and serialize them for the derived tier."""
    options: dict[str, Any] = {
        "per_year": per_year,
        "min_prominence": min_prominence,
        "min_cycle_days": min_cycle_days,
    }
    rising = detect_transitions(series, Direction.RISING, thresholds, **options)
    falling = detect_transitions(series, Direction.FALLING, thresholds, **options)
    return {
        "site": series.site,
        "veg_type": series.veg_type,
        "roi_id": series.roi_id,
        "start": series.start.isoformat(),
        "end": series.end.isoformat(),
        "filled_days": series.filled_days,
        "rising": transitions_to_dict(rising),
        "falling": transitions_to_dict(falling),
        "phenophases": phenophases_to_rows(phenophases(series, thresholds, **options)),
    }


@task(name="save-transitions")
def save_transitions(archive_file: Path, result: dict[str, Any], **params: Any) -> Path:
    """Save computed transitions via store (derived tier, no expiry)."""
    return store.write(
        transitions_path(archive_file),
        result,
        source="phenocam-seasons",
        archive_file=archive_file.name,
        **params,
    )


# =============================================================================
# Flow
# =============================================================================


@flow(name="analyze-transitions", log_prints=True)
def analyze_all(
    frequency: int = 3,
    thresholds: list[float] | None = None,
    per_year: bool = True,
    min_prominence: float | None = None,
    min_cycle_days: int = DEFAULT_MIN_CYCLE_DAYS,
    smooth: bool = True,
) -> dict[str, Any]:
    """
    Compute transition dates for every archived ROI series.

    Files that cannot be turned into a series are reported and skipped;
    the remaining files are still processed.
    """
    phenocam.check_frequency(frequency)
    levels = list(thresholds) if thresholds is not None else list(DEFAULT_THRESHOLDS)

    files = store.list_files(store.archive, f"*_{frequency}day.csv")
    results: dict[str, Any] = {"files": len(files), "outputs": [], "skipped": []}
    if not files:
        print(f"No {frequency}-day archive files found in {store.archive}.")
        return results

    for archive_file in files:
        try:
            series = load_series(archive_file, smooth=smooth)
        except InvalidInputError as exc:
            print(f"Skipping {archive_file.name}: {exc}")
            results["skipped"].append(archive_file.name)
            continue

        if series.filled_days:
            print(f"{archive_file.name}: filled {series.filled_days} days between observations")

        result = compute_transitions(series, levels, per_year, min_prominence, min_cycle_days)
        out = save_transitions(
            archive_file, result, thresholds=levels, per_year=per_year, smooth=smooth
        )
        print(
            f"{archive_file.name}: {len(result['rising'])} seasons "
            f"({series.start} to {series.end}) -> {out}"
        )
        results["outputs"].append(str(out))

    return results


if __name__ == "__main__":
    settings = get_settings()
    result = analyze_all(
        frequency=settings.frequency,
        thresholds=settings.thresholds,
        per_year=settings.per_year,
        min_prominence=settings.min_prominence,
        min_cycle_days=settings.min_cycle_days,
    )
    print(f"Flow complete: {result}")
