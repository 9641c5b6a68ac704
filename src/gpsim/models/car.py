"""Vehicle model with wear, fuel and per-lap degradation."""

from dataclasses import dataclass
from enum import Enum

from pydantic import Field, ValidationError, field_validator

from gpsim.base import GpsimModel, describe_errors
from gpsim.errors import InvalidConfig, InvalidVehicleConfig
from gpsim.settings import RaceSettings

from .driver import SKILL_NAMES, Driver
from .tire import Tire, TireCompound, get_tire
from .weather import Weather

# Stationary times for a full pit stop, in seconds
TIRE_CHANGE_SECONDS = 2.5
REFUEL_SECONDS = 1.8
PIT_LANE_SECONDS = 1.0


class VehicleStatus(str, Enum):
    """Where a vehicle currently is."""

    RACING = "racing"
    IN_PIT = "in_pit"
    RESERVE = "reserve"
    DEVELOPMENT = "development"


@dataclass(frozen=True)
class WearDelta:
    """Wear and fuel consumed over one lap."""

    tire_wear: float
    engine_wear: float
    fuel_used: float


@dataclass
class PitStopReport:
    """Summary of a completed pit stop."""

    status: VehicleStatus
    operations: list[str]
    total_time: float
    previous_compound: TireCompound
    new_compound: TireCompound
    fuel_before: float
    fuel_after: float


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


def _check_percentage(name: str, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not 0 <= value <= 100:
        raise InvalidConfig(f"{name} must be between 0 and 100, got {value!r}")


class Vehicle(GpsimModel):
    """A race car and its live wear state."""

    id: str = Field(..., description="Unique vehicle identifier (e.g., '16')")
    number: int | None = Field(default=None, description="Race number")
    make: str = Field(default="", description="Manufacturer")
    model: str = Field(default="", description="Chassis model")
    team_id: str | None = Field(default=None, description="Team the car scores for")

    max_speed: float = Field(..., gt=0, description="Rated top speed in km/h")
    tire_compound: TireCompound = Field(
        default=TireCompound.MEDIUM,
        description="Compound currently fitted",
    )

    # Wear state (mutable during simulation)
    fuel_level: float = Field(default=100.0, ge=0.0, le=100.0, description="Fuel in percent of tank")
    tire_wear: float = Field(default=0.0, ge=0.0, le=100.0, description="0 = fresh, 100 = worn out")
    engine_wear: float = Field(default=0.0, ge=0.0, le=100.0, description="0 = fresh, 100 = worn out")
    status: VehicleStatus = Field(default=VehicleStatus.RACING)

    driver: Driver | None = Field(default=None, description="Driver in the seat")
    requirements: dict[str, float] = Field(
        default_factory=dict,
        description="Minimum driver skill per skill name",
    )
    available: bool = Field(default=True, description="Whether a driver may take the seat")

    @field_validator("tire_compound", mode="before")
    @classmethod
    def _parse_compound(cls, value: object) -> TireCompound:
        # Raises InvalidTireCompound rather than a validation error
        return TireCompound.parse(value)

    @field_validator("requirements")
    @classmethod
    def _known_skills(cls, value: dict[str, float]) -> dict[str, float]:
        unknown = set(value) - set(SKILL_NAMES)
        if unknown:
            raise ValueError(f"Unknown skill requirements: {sorted(unknown)}")
        return value

    @classmethod
    def _config_error(cls, err: ValidationError) -> InvalidConfig:
        if any(detail["loc"][:1] == ("max_speed",) for detail in err.errors()):
            return InvalidVehicleConfig(f"Invalid Vehicle: {describe_errors(err)}")
        return super()._config_error(err)

    @property
    def tire(self) -> Tire:
        """Characteristics of the fitted compound."""
        return get_tire(self.tire_compound)

    def configure_initial_wear(self, tire_wear: float, engine_wear: float, fuel_level: float) -> None:
        """Set starting wear and fuel.

        Raises:
            InvalidConfig: If any value is outside 0-100 (nothing is changed)
        """
        _check_percentage("tire_wear", tire_wear)
        _check_percentage("engine_wear", engine_wear)
        _check_percentage("fuel_level", fuel_level)

        self.tire_wear = float(tire_wear)
        self.engine_wear = float(engine_wear)
        self.fuel_level = float(fuel_level)

    def is_race_ready(self) -> bool:
        """Check wear and fuel are healthy and a racing car has a driver."""
        if self.status == VehicleStatus.RACING and self.driver is None:
            return False
        return self.tire_wear < 30 and self.engine_wear < 40 and self.fuel_level > 20

    def compute_wear(self, weather: Weather, settings: RaceSettings | None = None) -> WearDelta:
        """Calculate the wear one lap at average race speed would cause.

        Wear scales with average speed relative to top speed. Hot tracks
        inflate tire wear and humid air inflates engine wear.

        Args:
            weather: Conditions for the lap
            settings: Engine constants (defaults if None)

        Returns:
            Wear and fuel to add/subtract; the vehicle is not modified
        """
        settings = settings or RaceSettings()
        average_speed = self.max_speed * settings.average_speed_ratio
        speed_ratio = average_speed / self.max_speed

        tire_wear = speed_ratio * self.tire.degradation_rate
        if weather.temperature > settings.hot_track_threshold:
            tire_wear *= settings.hot_track_tire_factor

        engine_wear = speed_ratio
        if weather.humidity > settings.humid_threshold:
            engine_wear *= settings.humid_engine_factor

        return WearDelta(tire_wear=tire_wear, engine_wear=engine_wear, fuel_used=speed_ratio)

    def apply_wear(self, delta: WearDelta) -> None:
        """Apply a lap's wear, keeping every counter within 0-100."""
        self.tire_wear = _clamp(self.tire_wear + delta.tire_wear)
        self.engine_wear = _clamp(self.engine_wear + delta.engine_wear)
        self.fuel_level = _clamp(self.fuel_level - delta.fuel_used)

    def change_tires(self, compound: TireCompound | str) -> dict[str, str | bool]:
        """Fit a fresh set of tires.

        Raises:
            InvalidTireCompound: If the compound is unknown
        """
        new_compound = TireCompound.parse(compound)
        previous = self.tire_compound
        self.tire_compound = new_compound
        self.tire_wear = 0.0
        return {
            "previous": previous.value,
            "new": new_compound.value,
            "wear_reset": True,
        }

    def refuel(self, amount: float) -> tuple[float, float]:
        """Add fuel, capping the tank at 100%.

        Returns:
            Fuel level before and after

        Raises:
            InvalidConfig: If the amount is outside 0-100
        """
        _check_percentage("refuel amount", amount)
        before = self.fuel_level
        self.fuel_level = _clamp(self.fuel_level + amount)
        return before, self.fuel_level

    def pit_stop(self, compound: TireCompound | str, fuel: float) -> PitStopReport:
        """Bring the car in for tires and fuel.

        The car stays ``IN_PIT`` until its next simulated lap, which
        absorbs the stop time.
        """
        new_compound = TireCompound.parse(compound)
        _check_percentage("refuel amount", fuel)

        previous = self.tire_compound
        self.status = VehicleStatus.IN_PIT
        self.change_tires(new_compound)
        fuel_before, fuel_after = self.refuel(fuel)

        return PitStopReport(
            status=self.status,
            operations=["tire_change", "refuel"],
            total_time=TIRE_CHANGE_SECONDS + REFUEL_SECONDS + PIT_LANE_SECONDS,
            previous_compound=previous,
            new_compound=new_compound,
            fuel_before=fuel_before,
            fuel_after=fuel_after,
        )

    def wear_report(self) -> dict[str, float | str]:
        """Snapshot of wear, fuel and status."""
        return {
            "tire_wear": self.tire_wear,
            "engine_wear": self.engine_wear,
            "fuel_level": self.fuel_level,
            "status": self.status.value,
        }
