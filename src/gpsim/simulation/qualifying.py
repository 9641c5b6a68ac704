"""Qualifying session simulation (Q1, Q2, Q3)."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from gpsim.errors import InsufficientParticipants, InvalidRaceSetup
from gpsim.models import Track, Vehicle, Weather
from gpsim.settings import RaceSettings
from gpsim.simulation.lap import compute_lap_time, format_lap_time

logger = logging.getLogger(__name__)


@dataclass
class QualifyingLap:
    """One participant's timed lap in a qualifying stage."""

    position: int
    vehicle_id: str
    driver_id: str
    lap_time: float
    formatted_time: str
    eliminated: bool = False


@dataclass
class GridSlot:
    """A starting position."""

    position: int
    vehicle_id: str
    driver_id: str


@dataclass
class QualifyingResult:
    """Classification of every qualifying stage and the resulting grid."""

    stage1: list[QualifyingLap] = field(default_factory=list)
    stage2: list[QualifyingLap] = field(default_factory=list)
    stage3: list[QualifyingLap] = field(default_factory=list)
    starting_grid: list[GridSlot] = field(default_factory=list)

    @property
    def pole_sitter(self) -> str | None:
        """Vehicle ID starting first."""
        return self.starting_grid[0].vehicle_id if self.starting_grid else None

    def grid_order(self) -> list[str]:
        """Vehicle IDs in starting order."""
        return [slot.vehicle_id for slot in self.starting_grid]


class QualifyingSimulator:
    """Simulates three-stage elimination qualifying.

    Q1 drops the slowest ``q1_eliminations`` cars (never cutting the field
    below that many), Q2 cuts the survivors to ``q3_size`` and Q3 sets the
    top of the grid. Each stage is one timed lap per car using the
    deterministic lap-time model. Equal times keep the order in which the
    cars entered the stage.
    """

    def __init__(self, settings: RaceSettings | None = None):
        """Initialize qualifying simulator.

        Args:
            settings: Engine constants (defaults if None)
        """
        self.settings = settings or RaceSettings()

    def simulate_qualifying(
        self,
        vehicles: Sequence[Vehicle],
        track: Track,
        weather: Weather | None = None,
    ) -> QualifyingResult:
        """Run Q1, Q2 and Q3 and build the starting grid.

        Args:
            vehicles: Entrants, in entry order
            track: Circuit being lapped
            weather: Session conditions (the track's weather if None)

        Returns:
            Stage classifications and the starting grid

        Raises:
            InsufficientParticipants: If there are no entrants
            InvalidRaceSetup: If an entrant has no driver or no weather is set
        """
        if not vehicles:
            raise InsufficientParticipants("Qualifying needs at least one participant")

        seen: set[str] = set()
        for vehicle in vehicles:
            if vehicle.driver is None:
                raise InvalidRaceSetup(f"Vehicle {vehicle.id} has no driver for qualifying")
            if vehicle.id in seen:
                raise InvalidRaceSetup(f"Vehicle {vehicle.id} entered twice")
            seen.add(vehicle.id)

        # Q1: everyone, drop the slowest (keeping at least q1_eliminations cars)
        n = len(vehicles)
        q1_cut = min(self.settings.q1_eliminations, max(0, n - self.settings.q1_eliminations))
        stage1 = self._simulate_stage(vehicles, track, weather, advancing=n - q1_cut)
        q2_vehicles = self._survivors(vehicles, stage1)

        # Q2: cut the field down to the Q3 size
        stage2 = self._simulate_stage(
            q2_vehicles, track, weather,
            advancing=min(len(q2_vehicles), self.settings.q3_size),
        )
        q3_vehicles = self._survivors(q2_vehicles, stage2)

        # Q3: fight for pole
        stage3 = self._simulate_stage(q3_vehicles, track, weather, advancing=len(q3_vehicles))

        grid_entries = (
            stage3
            + [lap for lap in stage2 if lap.eliminated]
            + [lap for lap in stage1 if lap.eliminated]
        )
        starting_grid = [
            GridSlot(position=pos, vehicle_id=lap.vehicle_id, driver_id=lap.driver_id)
            for pos, lap in enumerate(grid_entries, 1)
        ]

        logger.info(
            "Qualifying at %s: %d entrants, %d out in Q1, %d out in Q2, pole %s",
            track.name,
            n,
            q1_cut,
            len(q2_vehicles) - len(q3_vehicles),
            starting_grid[0].vehicle_id,
        )

        return QualifyingResult(
            stage1=stage1,
            stage2=stage2,
            stage3=stage3,
            starting_grid=starting_grid,
        )

    def _simulate_stage(
        self,
        vehicles: Sequence[Vehicle],
        track: Track,
        weather: Weather | None,
        advancing: int,
    ) -> list[QualifyingLap]:
        """Time one lap per vehicle and classify the stage.

        Args:
            vehicles: Cars in this stage
            track: Circuit
            weather: Conditions
            advancing: How many of the quickest cars go through

        Returns:
            Stage classification, quickest first
        """
        times = [
            (compute_lap_time(vehicle, vehicle.driver, track, weather), index, vehicle)
            for index, vehicle in enumerate(vehicles)
        ]
        # Entry index breaks ties
        times.sort(key=lambda entry: (entry[0], entry[1]))

        return [
            QualifyingLap(
                position=pos,
                vehicle_id=vehicle.id,
                driver_id=vehicle.driver.id,
                lap_time=lap_time,
                formatted_time=format_lap_time(lap_time),
                eliminated=pos > advancing,
            )
            for pos, (lap_time, _, vehicle) in enumerate(times, 1)
        ]

    @staticmethod
    def _survivors(vehicles: Sequence[Vehicle], stage: list[QualifyingLap]) -> list[Vehicle]:
        """Vehicles that advanced from a stage, in stage order."""
        by_id = {v.id: v for v in vehicles}
        return [by_id[lap.vehicle_id] for lap in stage if not lap.eliminated]


def run_qualifying(
    vehicles: Sequence[Vehicle],
    track: Track,
    settings: RaceSettings | None = None,
) -> QualifyingResult:
    """Run a full qualifying session with default or given settings."""
    return QualifyingSimulator(settings).simulate_qualifying(vehicles, track)
