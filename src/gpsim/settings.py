"""Engine constants for lap counts, wear, qualifying and scoring."""

from pydantic import ConfigDict, Field

from gpsim.base import GpsimModel

DEFAULT_POINTS_TABLE = (25, 18, 15, 12, 10, 8, 6, 4, 2, 1)


class RaceSettings(GpsimModel):
    """Tunable constants used by the qualifying and race engines.

    Every value has the default the engine was calibrated with; pass a
    customised instance to the simulators (or set them in an event file)
    to override.
    """

    model_config = ConfigDict(frozen=True)

    # Race length
    duration_target_seconds: float = Field(
        default=5400.0,
        gt=0,
        description="Target race duration used for the duration-limited lap count",
    )
    fuel_capacity: float = Field(
        default=110.0,
        gt=0,
        description="Fuel available for the whole race",
    )
    base_fuel_burn: float = Field(
        default=2.5,
        gt=0,
        description="Fuel burned per lap on a reference-length track",
    )
    tire_allowance: float = Field(
        default=40.0,
        gt=0,
        description="Laps a tire allocation lasts on a reference-length track",
    )
    reference_length_km: float = Field(
        default=5.0,
        gt=0,
        description="Track length the fuel burn and tire allowance are quoted for",
    )

    # Per-lap wear
    average_speed_ratio: float = Field(
        default=0.65,
        gt=0,
        le=1.0,
        description="Average lap speed as a fraction of the vehicle's top speed",
    )
    hot_track_threshold: float = Field(
        default=35.0,
        description="Temperature (C) above which tire wear is inflated",
    )
    hot_track_tire_factor: float = Field(default=1.15, ge=1.0)
    humid_threshold: float = Field(
        default=60.0,
        description="Humidity (%) above which engine wear is inflated",
    )
    humid_engine_factor: float = Field(default=1.10, ge=1.0)
    pit_stop_seconds: float = Field(
        default=5.3,
        ge=0,
        description="Time added to a lap that includes a pit stop",
    )

    # Field and qualifying
    min_field_size: int = Field(default=10, ge=1)
    q1_eliminations: int = Field(default=5, ge=0)
    q3_size: int = Field(default=10, ge=1)

    # Scoring
    points_table: tuple[int, ...] = Field(default=DEFAULT_POINTS_TABLE)
    podium_size: int = Field(default=3, ge=1)

    # Drivers react to the starting weather
    adapt_driving_style: bool = True

    def points_for(self, position: int) -> int:
        """Points awarded for a 1-indexed finishing position."""
        if 1 <= position <= len(self.points_table):
            return self.points_table[position - 1]
        return 0
