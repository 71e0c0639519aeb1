"""
Prefect flows for the data pipeline.

Flows:
- fetch: Download site/ROI catalogs and ROI time-series CSVs
- analyze: Detect transition dates in archived series, write derived JSON

Usage (local):
    python -m phenocam_seasons.flows.fetch
    python -m phenocam_seasons.flows.analyze

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    prefect deployment run 'fetch-data/default'
"""
