"""Data models for race simulation."""

from .car import PitStopReport, Vehicle, VehicleStatus, WearDelta
from .driver import Driver, DriverSkills, DrivingStyle
from .tire import TIRE_COMPOUNDS, Tire, TireCompound, get_tire
from .track import Corner, CornerDifficulty, DRSZone, Track, TrackRecord
from .weather import Weather, WeatherCondition

__all__ = [
    "Corner",
    "CornerDifficulty",
    "DRSZone",
    "Driver",
    "DriverSkills",
    "DrivingStyle",
    "PitStopReport",
    "TIRE_COMPOUNDS",
    "Tire",
    "TireCompound",
    "Track",
    "TrackRecord",
    "Vehicle",
    "VehicleStatus",
    "WearDelta",
    "Weather",
    "WeatherCondition",
    "get_tire",
]
