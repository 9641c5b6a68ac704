"""Exceptions raised by the simulation engine."""


class SimulationError(Exception):
    """Base class for all gpsim errors."""


class InvalidConfig(SimulationError):
    """An entity was configured with out-of-range or unknown values."""


class InvalidTireCompound(InvalidConfig):
    """A tire compound name is not one of the known compounds."""

    def __init__(self, name: object):
        self.name = name
        super().__init__(f"Unknown tire compound: {name!r}")


class InvalidVehicleConfig(InvalidConfig):
    """A vehicle cannot be simulated with its current configuration."""


class InvalidRaceSetup(SimulationError):
    """A race cannot start or advance in its current state."""


class InsufficientParticipants(SimulationError):
    """Qualifying was requested with no entrants."""


class IncompatibleAssignment(SimulationError):
    """A driver cannot be assigned to a vehicle."""
