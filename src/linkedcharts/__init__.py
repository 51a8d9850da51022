"""Reusable event-coupling pipeline for linked Plotly dashboards."""

__version__ = "0.1.0"
