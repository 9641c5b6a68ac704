"""Simulation engine components."""

from .lap import LapRecord, compute_lap_time, format_lap_time
from .qualifying import QualifyingResult, QualifyingSimulator, run_qualifying
from .race import (
    FinalResult,
    Race,
    RacePhase,
    RaceSimulator,
    RaceStartInfo,
    ResultsSnapshot,
    SessionState,
    Standing,
)

__all__ = [
    "FinalResult",
    "LapRecord",
    "QualifyingResult",
    "QualifyingSimulator",
    "Race",
    "RacePhase",
    "RaceSimulator",
    "RaceStartInfo",
    "ResultsSnapshot",
    "SessionState",
    "Standing",
    "compute_lap_time",
    "format_lap_time",
    "run_qualifying",
]
