"""
phenocam-seasons command line.

Browse the PhenoCam site and ROI catalogs, download ROI summary files, and
print start/end-of-season dates for a stored file. ``refresh`` runs the fetch
and analyze flows against the local data store.

Package errors (bad input, no matching ROI) are printed to stderr and exit 1.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from phenocam_seasons import __version__
from phenocam_seasons.config import get_settings
from phenocam_seasons.datasources import phenocam
from phenocam_seasons.errors import PhenocamError
from phenocam_seasons.flows.analyze import analyze_all
from phenocam_seasons.flows.fetch import fetch_all
from phenocam_seasons.phenology import phenophases, threshold_key
from phenocam_seasons.schemas import BoundingBox


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="phenocam-seasons",
        description="PhenoCam greenness time series and seasonal transition dates",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("info", help="Show application info")

    sites_parser = subparsers.add_parser("sites", help="List camera sites")
    sites_parser.add_argument("--veg-type", type=str, default=None, help="Primary veg type")
    sites_parser.add_argument("--pattern", type=str, default=None, help="Site name regex")
    sites_parser.add_argument(
        "--bbox",
        type=float,
        nargs=4,
        metavar=("SOUTH", "WEST", "NORTH", "EAST"),
        default=None,
        help="Only sites inside this box",
    )
    sites_parser.add_argument("--active", action="store_true", help="Only active cameras")

    rois_parser = subparsers.add_parser("rois", help="List regions of interest")
    rois_parser.add_argument("--site", type=str, default=None, help="Site name regex")
    rois_parser.add_argument("--veg-type", type=str, default=None, help="Veg type code")
    rois_parser.add_argument("--roi-id", type=int, default=None, help="ROI number")
    rois_parser.add_argument(
        "--min-years", type=float, default=None, help="Minimum years of record"
    )

    download_parser = subparsers.add_parser("download", help="Download ROI time series")
    download_parser.add_argument("--site", type=str, default=None, help="Site name regex")
    download_parser.add_argument("--veg-type", type=str, default=None, help="Veg type code")
    download_parser.add_argument("--roi-id", type=int, default=None, help="ROI number")
    download_parser.add_argument(
        "--frequency", type=int, choices=[1, 3], default=None, help="Aggregation days"
    )
    download_parser.add_argument(
        "--out-dir", type=Path, default=Path(), help="Output directory (default: .)"
    )

    transitions_parser = subparsers.add_parser(
        "transitions", help="Transition dates for a stored time-series CSV"
    )
    transitions_parser.add_argument("path", type=Path, help="ROI summary CSV file")
    transitions_parser.add_argument(
        "--threshold",
        type=float,
        action="append",
        default=None,
        help="Amplitude fraction (repeatable, default from settings)",
    )
    transitions_parser.add_argument(
        "--all-cycles", action="store_true", help="Report every cycle, not one per year"
    )
    transitions_parser.add_argument(
        "--column", type=str, default="gcc_90", help="Greenness column (default: gcc_90)"
    )
    transitions_parser.add_argument(
        "--raw", action="store_true", help="Use the raw column instead of the smoothed one"
    )
    transitions_parser.add_argument(
        "--keep-outliers", action="store_true", help="Keep rows flagged as outliers (raw only)"
    )

    subparsers.add_parser("refresh", help="Fetch data and compute transition dates")

    return parser


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Debug: {settings.debug}")
    print(f"Data dir: {settings.data_dir}")
    print(f"ROI: {settings.site_pattern} {settings.veg_type} {settings.roi_id:04d}")
    return 0


def cmd_sites(args: argparse.Namespace) -> int:
    """Handle the 'sites' command."""
    bbox = None
    if args.bbox:
        south, west, north, east = args.bbox
        bbox = BoundingBox(south=south, west=west, north=north, east=east)
    sites = phenocam.filter_sites(
        phenocam.fetch_sites(),
        veg_type=args.veg_type,
        name_pattern=args.pattern,
        bbox=bbox,
        active=True if args.active else None,
    )
    for site in sites:
        print(
            f"{site.name:<28} {site.lat:>9.4f} {site.lon:>10.4f} "
            f"{site.primary_veg_type or '-':<3} {'active' if site.active else 'inactive'}"
        )
    print(f"{len(sites)} sites")
    return 0


def cmd_rois(args: argparse.Namespace) -> int:
    """Handle the 'rois' command."""
    rois = phenocam.filter_rois(
        phenocam.fetch_rois(),
        site_pattern=args.site,
        veg_type=args.veg_type,
        roi_id=args.roi_id,
        min_years=args.min_years,
    )
    for roi in rois:
        first = roi.first_date.isoformat() if roi.first_date else "-"
        last = roi.last_date.isoformat() if roi.last_date else "-"
        print(f"{roi.roi_name:<36} {first} {last} {roi.site_years:>5.1f} yr")
    print(f"{len(rois)} ROIs")
    return 0


def cmd_download(args: argparse.Namespace) -> int:
    """Handle the 'download' command."""
    settings = get_settings()
    written = phenocam.download_timeseries(
        args.site or settings.site_pattern,
        args.veg_type or settings.veg_type,
        args.roi_id if args.roi_id is not None else settings.roi_id,
        frequency=args.frequency or settings.frequency,
        out_dir=args.out_dir,
    )
    for path in written:
        print(f"Saved {path}")
    return 0


def cmd_transitions(args: argparse.Namespace) -> int:
    """Handle the 'transitions' command: print SOS/EOS dates per cycle."""
    settings = get_settings()
    thresholds = args.threshold or settings.thresholds
    ts = phenocam.read_timeseries(args.path)
    series = phenocam.to_greenness_series(
        ts, args.column, smooth=not args.raw, drop_outliers=not args.keep_outliers
    )
    rows = phenophases(
        series,
        thresholds,
        per_year=settings.per_year and not args.all_cycles,
        min_prominence=settings.min_prominence,
        min_cycle_days=settings.min_cycle_days,
    )
    if args.debug:
        print(f"Series: {series.start} to {series.end}, {series.filled_days} days filled")

    if not rows:
        print("No growing seasons detected.")
        return 0

    header = ["direction", "peak"] + [threshold_key(t) for t in thresholds]
    print("\t".join(header))
    for row in rows:
        cells = [str(row.direction), row.cycle.peak_date.isoformat()]
        cells += [d.isoformat() if (d := row.dates[t]) else "NA" for t in thresholds]
        print("\t".join(cells))
    return 0


def cmd_refresh(_args: argparse.Namespace) -> int:
    """Handle the 'refresh' command: fetch data then compute transitions."""
    settings = get_settings()
    print(f"Fetching data for {settings.site_pattern} {settings.veg_type} {settings.roi_id}...")
    fetch_all(
        site_pattern=settings.site_pattern,
        veg_type=settings.veg_type,
        roi_id=settings.roi_id,
        frequency=settings.frequency,
    )

    print("Computing transition dates...")
    analyze_all(
        frequency=settings.frequency,
        thresholds=settings.thresholds,
        per_year=settings.per_year,
        min_prominence=settings.min_prominence,
        min_cycle_days=settings.min_cycle_days,
    )

    print("Done.")
    return 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "info": cmd_info,
        "sites": cmd_sites,
        "rois": cmd_rois,
        "download": cmd_download,
        "transitions": cmd_transitions,
        "refresh": cmd_refresh,
    }

    handler = commands.get(args.command)
    if not handler:
        parser.print_help()
        return 1

    if args.debug:
        print(f"Debug mode enabled. Settings: {get_settings()}")

    try:
        return handler(args)
    except PhenocamError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
