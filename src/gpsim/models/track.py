"""Track model with corners, DRS zones and weather."""

from datetime import date
from enum import Enum

from pydantic import Field

from gpsim.base import GpsimModel

from .weather import Weather, WeatherCondition


class CornerDifficulty(str, Enum):
    """How demanding a corner is."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


_DIFFICULTY_SCORES = {
    CornerDifficulty.LOW: 1,
    CornerDifficulty.MEDIUM: 2,
    CornerDifficulty.HIGH: 3,
}


class Corner(GpsimModel):
    """Represents a corner on the circuit."""

    name: str = Field(..., description="Corner name")
    max_speed: float = Field(..., gt=0, description="Maximum corner speed in km/h")
    difficulty: CornerDifficulty = Field(
        default=CornerDifficulty.MEDIUM,
        description="Corner difficulty",
    )


class DRSZone(GpsimModel):
    """Represents a DRS zone on track."""

    name: str = Field(..., description="DRS zone name")
    length_km: float = Field(..., gt=0, description="Zone length in kilometres")


class TrackRecord(GpsimModel):
    """Best lap ever set at a circuit."""

    lap_time: float = Field(..., gt=0, description="Lap time in seconds")
    driver_id: str = Field(..., description="Driver who set the record")
    set_on: date = Field(..., description="Date the record was set")


class Track(GpsimModel):
    """Represents a circuit and its current conditions."""

    id: str = Field(..., min_length=1, description="Track identifier (e.g., 'monza')")
    name: str = Field(..., min_length=1, description="Official track name")
    country: str = Field(default="", description="Country")

    length_km: float = Field(..., gt=0, description="Lap length in kilometres")
    corners: list[Corner] = Field(default_factory=list, description="Corners in lap order")
    drs_zones: list[DRSZone] = Field(default_factory=list, description="DRS zones on track")
    weather: Weather | None = Field(
        default=None,
        description="Current conditions (required before a race can start)",
    )
    lap_record: TrackRecord | None = Field(default=None, description="All-time lap record")

    @property
    def curve_count(self) -> int:
        return len(self.corners)

    @property
    def drs_zone_count(self) -> int:
        return len(self.drs_zones)

    def add_corner(
        self,
        name: str,
        max_speed: float,
        difficulty: CornerDifficulty | str = CornerDifficulty.MEDIUM,
    ) -> Corner:
        """Append a corner to the lap.

        Args:
            name: Corner name
            max_speed: Maximum speed through the corner in km/h
            difficulty: "low", "medium" or "high"

        Returns:
            The created corner
        """
        corner = Corner(name=name, max_speed=max_speed, difficulty=difficulty)
        self.corners.append(corner)
        return corner

    def add_drs_zone(self, name: str, length_km: float) -> DRSZone:
        """Append a DRS zone to the lap."""
        zone = DRSZone(name=name, length_km=length_km)
        self.drs_zones.append(zone)
        return zone

    def set_weather(
        self,
        condition: WeatherCondition | str,
        temperature: float,
        humidity: float,
    ) -> Weather:
        """Replace the current weather conditions.

        Returns:
            The new weather
        """
        self.weather = Weather(
            condition=condition,
            temperature=temperature,
            humidity=humidity,
        )
        return self.weather

    def average_difficulty(self) -> CornerDifficulty | None:
        """Classify the mean corner difficulty (None for a track with no corners)."""
        if not self.corners:
            return None

        mean = sum(_DIFFICULTY_SCORES[c.difficulty] for c in self.corners) / len(self.corners)
        if mean <= 1.5:
            return CornerDifficulty.LOW
        elif mean <= 2.5:
            return CornerDifficulty.MEDIUM
        return CornerDifficulty.HIGH

    def is_challenging(self) -> bool:
        """Check for many corners, at least two DRS zones, length over 5 km and hard corners."""
        return (
            self.curve_count > 10
            and self.drs_zone_count >= 2
            and self.length_km > 5
            and self.average_difficulty() == CornerDifficulty.HIGH
        )

    def update_lap_record(self, lap_time: float, driver_id: str, set_on: date) -> bool:
        """Store a new lap record if the time beats the current one.

        Returns:
            True if the record was replaced
        """
        if self.lap_record is not None and lap_time >= self.lap_record.lap_time:
            return False

        self.lap_record = TrackRecord(lap_time=lap_time, driver_id=driver_id, set_on=set_on)
        return True
