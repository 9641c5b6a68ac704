"""Lap time calculation engine."""

from dataclasses import dataclass

from gpsim.errors import InvalidRaceSetup, InvalidVehicleConfig
from gpsim.models import Driver, Track, Vehicle, Weather, get_tire

# Lap time grows 0.1% per point of tire wear
TIRE_WEAR_PENALTY = 0.001


@dataclass(frozen=True)
class LapRecord:
    """A single timed lap."""

    driver_id: str
    vehicle_id: str
    lap_number: int
    lap_time_seconds: float
    formatted_time: str


def format_lap_time(seconds: float) -> str:
    """Render a lap time as ``M:SS.mmm`` (e.g. ``1:21.046``)."""
    total_ms = round(seconds * 1000)
    minutes, remainder = divmod(total_ms, 60_000)
    secs, millis = divmod(remainder, 1000)
    return f"{minutes}:{secs:02d}.{millis:03d}"


def compute_lap_time(
    vehicle: Vehicle,
    driver: Driver,
    track: Track,
    weather: Weather | None = None,
) -> float:
    """Calculate a deterministic lap time.

    ``base = length / max_speed * 3600`` is scaled by the driver's pace
    rating, the compound's grip factor, the weather factor and the tire
    wear penalty. Nothing is mutated.

    Args:
        vehicle: Car being driven (its current tire wear is used)
        driver: Driver in the car
        track: Circuit being lapped
        weather: Conditions for the lap (the track's weather if None)

    Returns:
        Lap time in seconds

    Raises:
        InvalidVehicleConfig: If the vehicle's top speed is not positive
        InvalidTireCompound: If the fitted compound is unknown
        InvalidRaceSetup: If no weather is available
    """
    if vehicle.max_speed <= 0:
        raise InvalidVehicleConfig(f"Vehicle {vehicle.id} has non-positive max_speed {vehicle.max_speed}")

    weather = weather if weather is not None else track.weather
    if weather is None:
        raise InvalidRaceSetup(f"No weather set for {track.name}")

    tire = get_tire(vehicle.tire_compound)

    base_time = track.length_km / vehicle.max_speed * 3600
    driver_factor = driver.performance_factor()
    wear_penalty = 1.0 + vehicle.tire_wear * TIRE_WEAR_PENALTY

    return base_time * driver_factor * tire.grip_factor * weather.lap_time_multiplier() * wear_penalty


def make_lap_record(vehicle: Vehicle, lap_number: int, lap_time: float) -> LapRecord:
    """Build the record for a lap driven by the vehicle's current driver."""
    driver_id = vehicle.driver.id if vehicle.driver is not None else ""
    return LapRecord(
        driver_id=driver_id,
        vehicle_id=vehicle.id,
        lap_number=lap_number,
        lap_time_seconds=lap_time,
        formatted_time=format_lap_time(lap_time),
    )
