"""Driver model with skill attributes."""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import Field

from gpsim.base import GpsimModel
from gpsim.errors import IncompatibleAssignment, InvalidConfig

from .weather import Weather

if TYPE_CHECKING:
    from .car import Vehicle

SKILL_NAMES = ("speed", "consistency", "aggression")

# A perfect driver is 10% quicker than a 0-rated one
RATING_WEIGHT = 0.1


class DrivingStyle(str, Enum):
    """How a driver approaches the race."""

    AGGRESSIVE = "aggressive"
    CONSERVATIVE = "conservative"


def _clamp_skill(value: float) -> float:
    return max(0.0, min(100.0, value))


class DriverSkills(GpsimModel):
    """Skill attributes on a 0-100 scale."""

    speed: float = Field(default=0.0, ge=0.0, le=100.0, description="Raw pace")
    consistency: float = Field(default=0.0, ge=0.0, le=100.0, description="Lap-to-lap repeatability")
    aggression: float = Field(default=0.0, ge=0.0, le=100.0, description="Willingness to attack")

    @property
    def overall_rating(self) -> float:
        """Mean of the three skills."""
        return (self.speed + self.consistency + self.aggression) / 3

    @property
    def race_rating(self) -> float:
        """Pace rating in [0, 1] used by the lap-time model."""
        rating = (self.speed + self.consistency) / 200
        return max(0.0, min(1.0, rating))


@dataclass
class StyleAdaptation:
    """Outcome of a driver reacting to the weather."""

    previous_style: DrivingStyle
    new_style: DrivingStyle
    aggression_change: float
    consistency_change: float


@dataclass
class PerformanceRating:
    """Skills adjusted for a given set of conditions."""

    speed: float
    consistency: float
    aggression: float

    @property
    def overall(self) -> float:
        return (self.speed + self.consistency + self.aggression) / 3


class Driver(GpsimModel):
    """Represents a racing driver."""

    id: str = Field(..., description="Unique driver identifier (e.g., 'LEC')")
    name: str = Field(..., description="Full name")
    nationality: str = Field(default="", description="Nationality")
    team_id: str | None = Field(default=None, description="Team identifier")

    skills: DriverSkills = Field(default_factory=DriverSkills)
    style: DrivingStyle = Field(default=DrivingStyle.AGGRESSIVE)
    vehicle_id: str | None = Field(default=None, description="Assigned vehicle, if any")

    def set_skills(self, **skills: float) -> dict[str, float]:
        """Set one or more skills.

        All values are checked before any is applied.

        Returns:
            Every skill plus the resulting ``overall`` rating

        Raises:
            InvalidConfig: For an unknown skill name or a value outside 0-100
        """
        for skill, value in skills.items():
            if skill not in SKILL_NAMES:
                raise InvalidConfig(f"Unknown skill {skill!r}")
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not 0 <= value <= 100:
                raise InvalidConfig(f"Skill {skill!r} must be between 0 and 100, got {value!r}")

        self.skills = self.skills.model_copy(update={k: float(v) for k, v in skills.items()})
        return {**self.skills.model_dump(), "overall": self.skills.overall_rating}

    def performance_factor(self) -> float:
        """Lap time multiplier from skill (1.0 for a 0-rated driver, 0.9 at best)."""
        return 1.0 - self.skills.race_rating * RATING_WEIGHT

    def rate_performance(self, weather: Weather) -> PerformanceRating:
        """Estimate how the driver's skills play out in the given conditions."""
        speed = self.skills.speed
        consistency = self.skills.consistency
        aggression = self.skills.aggression

        if weather.is_wet():
            speed -= 5
            consistency += 5
            aggression -= 5
        else:
            speed += 2
            aggression += 2

        # Heat costs concentration, humidity costs attack
        if weather.temperature > 30:
            consistency -= 3
        if weather.humidity > 70:
            aggression -= 2

        return PerformanceRating(
            speed=_clamp_skill(speed),
            consistency=_clamp_skill(consistency),
            aggression=_clamp_skill(aggression),
        )

    def adapt_style(self, weather: Weather) -> StyleAdaptation:
        """Switch driving style to suit the conditions.

        A damp or wet track makes an aggressive driver conservative; a dry
        track turns a conservative driver aggressive again. Skills only move
        when the style actually changes.
        """
        previous = self.style
        target = DrivingStyle.CONSERVATIVE if weather.is_wet() else DrivingStyle.AGGRESSIVE

        if target == previous:
            return StyleAdaptation(previous, previous, 0.0, 0.0)

        if target == DrivingStyle.CONSERVATIVE:
            aggression_change, consistency_change = -20.0, 15.0
        else:
            aggression_change, consistency_change = 10.0, -5.0

        self.skills = self.skills.model_copy(update={
            "aggression": _clamp_skill(self.skills.aggression + aggression_change),
            "consistency": _clamp_skill(self.skills.consistency + consistency_change),
        })
        self.style = target
        return StyleAdaptation(previous, target, aggression_change, consistency_change)

    def can_drive(self, vehicle: "Vehicle") -> bool:
        """Check the vehicle is free and its skill requirements are met."""
        if not vehicle.available:
            return False
        return all(
            getattr(self.skills, skill, 0.0) >= minimum
            for skill, minimum in vehicle.requirements.items()
        )

    def assign_vehicle(self, vehicle: "Vehicle") -> dict[str, str]:
        """Take the seat in a vehicle.

        Returns:
            Summary of the assignment

        Raises:
            IncompatibleAssignment: If the vehicle is unavailable or too demanding
        """
        if not vehicle.available:
            raise IncompatibleAssignment(f"Vehicle {vehicle.id} is not available")
        if not self.can_drive(vehicle):
            raise IncompatibleAssignment(
                f"{self.name} does not meet the requirements of vehicle {vehicle.id}"
            )

        vehicle.driver = self
        vehicle.available = False
        self.vehicle_id = vehicle.id
        return {
            "driver": self.name,
            "vehicle": f"{vehicle.make} {vehicle.model}".strip(),
            "vehicle_id": vehicle.id,
            "status": "assigned",
        }
