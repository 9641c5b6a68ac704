"""Weather model and conditions."""

from enum import Enum

from pydantic import Field

from gpsim.base import GpsimModel


class WeatherCondition(str, Enum):
    """Weather condition types."""

    DRY = "dry"
    DAMP = "damp"
    WET = "wet"


_LAP_TIME_MULTIPLIERS = {
    WeatherCondition.DRY: 1.0,
    WeatherCondition.DAMP: 1.10,
    WeatherCondition.WET: 1.15,
}


class Weather(GpsimModel):
    """Represents current weather conditions at a circuit."""

    condition: WeatherCondition = Field(
        default=WeatherCondition.DRY,
        description="Current weather condition",
    )
    temperature: float = Field(
        default=25.0,
        ge=-20.0,
        le=70.0,
        description="Track temperature in Celsius",
    )
    humidity: float = Field(
        default=50.0,
        ge=0.0,
        le=100.0,
        description="Relative humidity in percent",
    )

    def lap_time_multiplier(self) -> float:
        """Calculate lap time multiplier based on conditions.

        Returns:
            1.00 for dry, 1.10 for damp and 1.15 for wet
        """
        return _LAP_TIME_MULTIPLIERS[self.condition]

    def is_wet(self) -> bool:
        """Check if the track is anything other than dry."""
        return self.condition != WeatherCondition.DRY
