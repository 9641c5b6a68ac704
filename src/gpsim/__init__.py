"""Deterministic single-event race simulator: qualifying, race and scoring."""

__version__ = "0.1.0"
