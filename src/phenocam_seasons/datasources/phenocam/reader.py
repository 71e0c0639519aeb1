"""Reading ROI summary files into greenness series.

File layout::

    # Site: harvard
    # Veg Type: DB
    # ROI ID Number: 1000
    # Aggregation Period: 3
    # ...
    #
    date,year,doy,image_count,...,gcc_90,...,smooth_gcc_90,smooth_ci_gcc_90,...
    2008-04-04,2008,95,30,...,0.3456,...,0.3449,0.0031,...

Smoothed and outlier-flag columns are produced upstream; this module only
selects them. Days between observations (every third day for 3-day files,
or missing days) are filled by time interpolation so the result is a daily,
gap-free series.
"""

from __future__ import annotations

import io
from pathlib import Path

import numpy as np
import pandas as pd

from phenocam_seasons.datasources.phenocam.models import PhenocamTimeseries, SeriesMetadata
from phenocam_seasons.errors import InvalidInputError
from phenocam_seasons.phenology.models import GreennessSample, GreennessSeries

# Header keys mapped onto SeriesMetadata fields (keys lower-cased, spaces -> _)
_HEADER_FIELDS: dict[str, tuple[str, type]] = {
    "site": ("site", str),
    "veg_type": ("veg_type", str),
    "roi_id_number": ("roi_id", int),
    "lat": ("lat", float),
    "lon": ("lon", float),
    "elev": ("elevation_m", float),
    "utc_offset": ("utc_offset", float),
    "aggregation_period": ("aggregation_period", int),
    "version": ("version", str),
}


# =============================================================================
# Parsing
# =============================================================================


def _parse_header(lines: list[str]) -> SeriesMetadata:
    meta = SeriesMetadata()
    for line in lines:
        body = line.lstrip("#").strip()
        if ":" not in body:
            continue
        key, _, value = body.partition(":")
        key = key.strip().lower().replace(" ", "_")
        value = value.strip()
        if key in _HEADER_FIELDS and value:
            attr, cast = _HEADER_FIELDS[key]
            try:
                setattr(meta, attr, cast(value))
            except ValueError:
                meta.extra[key] = value
        else:
            meta.extra[key] = value
    return meta


def parse_timeseries(text: str) -> PhenocamTimeseries:
    """Parse the content of an ROI summary file.

    Raises:
        InvalidInputError: If there is no CSV body, no ``date`` column, or a
            date that is not ``YYYY-MM-DD``.
    """
    header_lines = [ln for ln in text.splitlines() if ln.startswith("#")]
    try:
        data = pd.read_csv(io.StringIO(text), comment="#", na_values="NA", skipinitialspace=True)
    except pd.errors.EmptyDataError:
        msg = "time-series file has no CSV body"
        raise InvalidInputError(msg) from None
    except pd.errors.ParserError as exc:
        msg = f"malformed time-series file: {exc}"
        raise InvalidInputError(msg) from None

    data.columns = [str(c).strip() for c in data.columns]
    if "date" not in data.columns:
        msg = f"time-series file has no 'date' column (columns: {list(data.columns[:5])}...)"
        raise InvalidInputError(msg)

    raw_dates = data["date"]
    dates = pd.to_datetime(raw_dates, format="%Y-%m-%d", errors="coerce")
    invalid = dates.isna() & raw_dates.notna()
    if invalid.any():
        msg = f"invalid date {raw_dates[invalid].iloc[0]!r}"
        raise InvalidInputError(msg)
    data["date"] = dates
    data = data[dates.notna()].reset_index(drop=True)

    return PhenocamTimeseries(metadata=_parse_header(header_lines), data=data)


def read_timeseries(path: Path | str) -> PhenocamTimeseries:
    """Read a stored ROI summary CSV (metadata block + body).

    Raises:
        InvalidInputError: If the file is not UTF-8 text or cannot be parsed.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        msg = f"{Path(path).name} is not a UTF-8 text file: {exc.reason}"
        raise InvalidInputError(msg) from None
    return parse_timeseries(text)


# =============================================================================
# Conversion to a daily greenness series
# =============================================================================


def _numeric(data: pd.DataFrame, column: str) -> pd.Series:
    """Column as floats; infinities become NaN, unparseable cells raise."""
    raw = data[column]
    values = pd.to_numeric(raw, errors="coerce")
    invalid = values.isna() & raw.notna()
    if invalid.any():
        row = invalid.idxmax()
        msg = f"non-numeric {column!r} value {raw[row]!r} on {data['date'][row].date()}"
        raise InvalidInputError(msg)
    return values.replace([np.inf, -np.inf], np.nan)


def _observations(
    ts: PhenocamTimeseries,
    value_column: str,
    ci_column: str | None,
    flag_column: str | None,
) -> pd.DataFrame:
    """Usable observations indexed by date, oldest first."""
    data = ts.data
    frame = pd.DataFrame(
        {
            "date": data["date"],
            "value": _numeric(data, value_column),
            "ci": _numeric(data, ci_column) if ci_column else np.nan,
        }
    )
    keep = frame["value"].notna()
    if flag_column:
        keep &= _numeric(data, flag_column).ne(1)
    frame = frame[keep].set_index("date").sort_index()

    duplicated = frame.index[frame.index.duplicated()]
    if len(duplicated):
        msg = f"duplicate date {duplicated[0].date()} in time series"
        raise InvalidInputError(msg)
    return frame


def _fill_daily(observations: pd.DataFrame) -> tuple[pd.DataFrame, int]:
    daily = observations.asfreq("D")
    filled = int(daily["value"].isna().sum())
    return daily.interpolate(method="time"), filled


def to_greenness_series(
    ts: PhenocamTimeseries,
    column: str = "gcc_90",
    *,
    smooth: bool = True,
    drop_outliers: bool = True,
) -> GreennessSeries:
    """
    Build a daily GreennessSeries from a parsed ROI summary file.

    Args:
        ts: Parsed time series.
        column: Greenness statistic, e.g. ``gcc_90`` or ``gcc_mean``.
        smooth: Use the upstream ``smooth_<column>`` curve and its
            ``smooth_ci_<column>`` band. False uses the raw column.
        drop_outliers: Skip raw rows flagged in ``outlierflag_<column>``.
            Ignored for smoothed values, which were fit without outliers.

    Returns:
        Daily, gap-free series; ``filled_days`` counts interpolated days.

    Raises:
        InvalidInputError: Missing column, unparseable cells, duplicate
            dates, or fewer than two usable observations.
    """
    value_column = f"smooth_{column}" if smooth else column
    if not ts.has_column(value_column):
        hint = " (file has no smoothed columns; use smooth=False)" if smooth else ""
        msg = f"column {value_column!r} not found{hint}"
        raise InvalidInputError(msg)

    ci_column = f"smooth_ci_{column}" if smooth else None
    if ci_column and not ts.has_column(ci_column):
        ci_column = None

    flag_column = f"outlierflag_{column}" if drop_outliers and not smooth else None
    if flag_column and not ts.has_column(flag_column):
        flag_column = None

    observations = _observations(ts, value_column, ci_column, flag_column)
    if len(observations) < 2:
        msg = f"need at least two {value_column!r} observations, found {len(observations)}"
        raise InvalidInputError(msg)

    daily, filled = _fill_daily(observations)
    samples = tuple(
        GreennessSample(
            date=day.date(),
            value=float(value),
            ci=None if np.isnan(ci) else float(ci),
        )
        for day, value, ci in zip(daily.index, daily["value"], daily["ci"], strict=True)
    )
    meta = ts.metadata
    return GreennessSeries(
        samples=samples,
        site=meta.site,
        veg_type=meta.veg_type,
        roi_id=meta.roi_id,
        filled_days=filled,
    )
