"""Tire compounds with grip and degradation characteristics."""

from enum import Enum

from pydantic import ConfigDict, Field

from gpsim.base import GpsimModel
from gpsim.errors import InvalidTireCompound


class TireCompound(str, Enum):
    """Available tire compounds."""

    SOFT = "soft"
    MEDIUM = "medium"
    HARD = "hard"
    INTERMEDIATE = "intermediate"
    WET = "wet"

    @classmethod
    def parse(cls, value: "TireCompound | str") -> "TireCompound":
        """Resolve a compound from an enum member or its name.

        Raises:
            InvalidTireCompound: If the name is not a known compound
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidTireCompound(value)


class Tire(GpsimModel):
    """Performance characteristics of one compound.

    Instances are immutable and shared by every vehicle running the compound.
    """

    model_config = ConfigDict(frozen=True)

    compound: TireCompound = Field(..., description="Tire compound type")
    grip_factor: float = Field(
        default=1.0,
        ge=0.0,
        description="Lap time multiplier (1.0 = baseline, lower = more grip)",
    )
    degradation_rate: float = Field(
        default=1.0,
        ge=0.0,
        description="Per-lap tire wear multiplier (soft wears faster)",
    )

    @property
    def name(self) -> str:
        return self.compound.value


TIRE_COMPOUNDS: dict[TireCompound, Tire] = {
    TireCompound.SOFT: Tire(
        compound=TireCompound.SOFT,
        grip_factor=0.98,
        degradation_rate=1.3,
    ),
    TireCompound.MEDIUM: Tire(
        compound=TireCompound.MEDIUM,
        grip_factor=1.0,
        degradation_rate=1.0,
    ),
    TireCompound.HARD: Tire(
        compound=TireCompound.HARD,
        grip_factor=1.02,
        degradation_rate=0.7,
    ),
    TireCompound.INTERMEDIATE: Tire(
        compound=TireCompound.INTERMEDIATE,
        grip_factor=1.06,
        degradation_rate=1.1,
    ),
    TireCompound.WET: Tire(
        compound=TireCompound.WET,
        grip_factor=1.1,
        degradation_rate=0.9,
    ),
}


def get_tire(compound: TireCompound | str) -> Tire:
    """Look up the shared :class:`Tire` for a compound.

    Raises:
        InvalidTireCompound: If the compound is unknown
    """
    return TIRE_COMPOUNDS[TireCompound.parse(compound)]
