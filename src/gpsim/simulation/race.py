"""Race simulation engine."""

import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

import numpy as np

from gpsim.errors import InvalidConfig, InvalidRaceSetup
from gpsim.models import Track, Vehicle, VehicleStatus, Weather
from gpsim.settings import RaceSettings
from gpsim.simulation.lap import LapRecord, compute_lap_time, format_lap_time, make_lap_record
from gpsim.simulation.qualifying import QualifyingResult, QualifyingSimulator

logger = logging.getLogger(__name__)

_ACTIVE_STATUSES = (VehicleStatus.RACING, VehicleStatus.IN_PIT)


class RacePhase(str, Enum):
    """Session phases, in the only order they may occur."""

    NOT_STARTED = "not_started"
    QUALIFYING = "qualifying"
    RACING = "racing"
    FINISHED = "finished"


@dataclass
class Standing:
    """A car's place in the live classification."""

    position: int
    vehicle_id: str
    driver_id: str
    lap_time: float | None = None
    gap_to_leader: float | None = None

    @property
    def formatted_time(self) -> str:
        """Leader's lap time as M:SS.mmm, a +gap for the rest, blank before a lap."""
        if self.lap_time is None:
            return ""
        if self.position == 1 or not self.gap_to_leader:
            return format_lap_time(self.lap_time)
        return f"+{self.gap_to_leader:.3f}"


@dataclass
class SessionState:
    """Mutable state of one race, owned by its :class:`Race`."""

    phase: RacePhase = RacePhase.NOT_STARTED
    laps_completed: int = 0
    total_laps: int = 0
    grid: list[str] = field(default_factory=list)
    standings: list[Standing] = field(default_factory=list)
    fastest_lap: LapRecord | None = None
    lap_history: list[list[LapRecord]] = field(default_factory=list)


@dataclass
class RaceStartInfo:
    """Returned when a race goes green."""

    phase: RacePhase
    total_laps: int
    participants: int
    weather: Weather


@dataclass
class DriverPoints:
    """Points scored by one finisher."""

    position: int
    driver_id: str
    vehicle_id: str
    team_id: str | None
    points: int


@dataclass
class FinalResult:
    """Final classification of a finished race."""

    podium: list[Standing]
    fastest_lap: LapRecord | None
    points: list[DriverPoints]
    laps_completed: int

    def points_by_team(self) -> dict[str, int]:
        """Total points per team (cars without a team are left out)."""
        totals: dict[str, int] = defaultdict(int)
        for entry in self.points:
            if entry.team_id is not None:
                totals[entry.team_id] += entry.points
        return dict(totals)


@dataclass
class ResultsSnapshot:
    """Current state of a race, readable in any phase."""

    phase: RacePhase
    standings: list[Standing]
    laps_completed: int
    laps_remaining: int
    fastest_lap: LapRecord | None


@dataclass
class Race:
    """A single race event and its session state.

    All engine operations take the race explicitly; nothing is shared
    between races.
    """

    name: str
    track: Track
    date: date | str | None
    vehicles: list[Vehicle] = field(default_factory=list)
    weather: Weather | None = None
    qualifying: QualifyingResult | None = None
    state: SessionState = field(default_factory=SessionState)

    def __post_init__(self) -> None:
        if isinstance(self.date, str):
            try:
                self.date = date.fromisoformat(self.date)
            except ValueError as err:
                raise InvalidConfig(f"Invalid race date {self.date!r}") from err

    @property
    def phase(self) -> RacePhase:
        return self.state.phase

    def add_vehicle(self, vehicle: Vehicle) -> None:
        """Enter a vehicle (only before the race starts)."""
        if self.state.phase in (RacePhase.RACING, RacePhase.FINISHED):
            raise InvalidRaceSetup(f"Cannot enter vehicle {vehicle.id} once {self.name} has started")
        self.vehicles.append(vehicle)

    def entrants(self) -> list[Vehicle]:
        """Vehicles entered with racing status, in entry order."""
        return [v for v in self.vehicles if v.status == VehicleStatus.RACING]

    def field_in_grid_order(self) -> list[Vehicle]:
        """Vehicles on the grid, in starting order."""
        by_id = {v.id: v for v in self.vehicles}
        return [by_id[vehicle_id] for vehicle_id in self.state.grid]


class RaceSimulator:
    """Drives a race through qualifying, laps and scoring.

    The simulator holds only settings; every bit of session state lives on
    the :class:`Race` passed in. Lap times are deterministic, so the same
    race and call sequence always produce the same standings.
    """

    def __init__(self, settings: RaceSettings | None = None):
        """Initialize race simulator.

        Args:
            settings: Engine constants (defaults if None)
        """
        self.settings = settings or RaceSettings()
        self.qualifying_simulator = QualifyingSimulator(self.settings)

    def run_qualifying(self, race: Race) -> QualifyingResult:
        """Qualify the race's entrants and store the starting grid.

        Raises:
            InvalidRaceSetup: If the race is past the pre-race phase
            InsufficientParticipants: If nobody is entered
        """
        if race.phase != RacePhase.NOT_STARTED:
            raise InvalidRaceSetup(f"{race.name} cannot qualify in phase {race.phase.value}")

        result = self.qualifying_simulator.simulate_qualifying(
            race.entrants(), race.track, race.track.weather
        )
        race.qualifying = result
        race.state.grid = result.grid_order()
        race.state.phase = RacePhase.QUALIFYING
        return result

    def validate(self, race: Race) -> list[str]:
        """List every reason the race cannot start (empty if it can)."""
        problems: list[str] = []
        entrants = race.entrants()

        if race.phase not in (RacePhase.NOT_STARTED, RacePhase.QUALIFYING):
            problems.append(f"race is already {race.phase.value}")
        if len(entrants) < self.settings.min_field_size:
            problems.append(
                f"{len(entrants)} vehicles entered, at least {self.settings.min_field_size} required"
            )
        if not race.track.name or race.track.length_km <= 0:
            problems.append("track is invalid")
        if race.track.weather is None:
            problems.append("track weather is not set")
        if not isinstance(race.date, date):
            problems.append("race date is not set")

        ids = [v.id for v in entrants]
        if len(set(ids)) != len(ids):
            problems.append("duplicate vehicle IDs")
        for vehicle in entrants:
            if vehicle.driver is None:
                problems.append(f"vehicle {vehicle.id} has no driver")

        return problems

    def is_valid(self, race: Race) -> bool:
        """Check the race meets every requirement to start."""
        return not self.validate(race)

    def compute_total_laps(self, race: Race, weather: Weather | None = None) -> int:
        """Work out the race distance.

        The race is as long as the shortest of three limits: the target
        duration at the field's average fresh-tire pace, the laps the fuel
        allowance covers and the laps the tire allowance covers.

        Args:
            race: Race to measure
            weather: Conditions to pace the field in (the race's, then the
                track's, if None)

        Returns:
            Number of laps (at least 1)
        """
        track = race.track
        weather = weather or race.weather or track.weather
        length_ratio = track.length_km / self.settings.reference_length_km

        fresh_times = [
            compute_lap_time(v.model_copy(update={"tire_wear": 0.0}), v.driver, track, weather)
            for v in race.entrants()
        ]
        if not fresh_times:
            raise InvalidRaceSetup(f"{race.name} has no entrants to pace the race")
        average_lap = float(np.mean(fresh_times))

        fuel_per_lap = self.settings.base_fuel_burn * length_ratio
        duration_laps = math.floor(self.settings.duration_target_seconds / average_lap)
        fuel_laps = math.floor(self.settings.fuel_capacity / fuel_per_lap)
        tire_laps = math.floor(self.settings.tire_allowance * length_ratio)

        logger.debug(
            "Lap limits for %s: duration %d, fuel %d, tires %d (average lap %.3fs)",
            race.name, duration_laps, fuel_laps, tire_laps, average_lap,
        )
        return max(1, min(duration_laps, fuel_laps, tire_laps))

    def start_race(self, race: Race) -> RaceStartInfo:
        """Validate the race, fix its distance and go racing.

        Raises:
            InvalidRaceSetup: If any start requirement is not met
            InvalidVehicleConfig: If a car cannot be timed (the race is left unchanged)
        """
        problems = self.validate(race)
        if problems:
            raise InvalidRaceSetup(f"{race.name} cannot start: " + "; ".join(problems))

        state = race.state
        weather = race.track.weather.model_copy(deep=True)

        # Qualified cars line up in grid order, anyone else behind them
        entrants = race.entrants()
        qualified = [vid for vid in state.grid if any(v.id == vid for v in entrants)]
        grid = qualified + [v.id for v in entrants if v.id not in qualified]

        total_laps = self.compute_total_laps(race, weather)

        # Commit only once every step has succeeded
        race.weather = weather
        state.grid = grid
        state.total_laps = total_laps

        if self.settings.adapt_driving_style:
            for vehicle in entrants:
                adaptation = vehicle.driver.adapt_style(race.weather)
                if adaptation.new_style != adaptation.previous_style:
                    logger.info(
                        "%s switches to %s driving",
                        vehicle.driver.name, adaptation.new_style.value,
                    )

        state.standings = [
            Standing(position=pos, vehicle_id=v.id, driver_id=v.driver.id)
            for pos, v in enumerate(race.field_in_grid_order(), 1)
        ]
        state.phase = RacePhase.RACING

        logger.info(
            "%s started: %d cars, %d laps, %s",
            race.name, len(entrants), state.total_laps, race.weather.condition.value,
        )
        return RaceStartInfo(
            phase=state.phase,
            total_laps=state.total_laps,
            participants=len(entrants),
            weather=race.weather,
        )

    def run_lap(self, race: Race) -> list[Standing]:
        """Simulate one lap for every running car.

        Lap times use each car's wear before the lap. Wear for the whole field
        is worked out first and only then applied, so a failure leaves
        the race unchanged. Cars are classified by lap time, ties going to
        the car ahead on the grid.

        Returns:
            The new standings (unchanged once the last lap is done)

        Raises:
            InvalidRaceSetup: If the race has not started
        """
        state = race.state
        if state.phase in (RacePhase.NOT_STARTED, RacePhase.QUALIFYING):
            raise InvalidRaceSetup(f"{race.name} has not started")
        if state.phase == RacePhase.FINISHED or state.laps_completed >= state.total_laps:
            return list(state.standings)

        lap_number = state.laps_completed + 1
        grid = race.field_in_grid_order()
        running = [v for v in grid if v.status in _ACTIVE_STATUSES]
        stopped = [v for v in grid if v.status not in _ACTIVE_STATUSES]

        # Phase 1: lap times and wear, without touching any car
        laps: list[tuple[float, int, Vehicle]] = []
        deltas = []
        for grid_index, vehicle in enumerate(running):
            if vehicle.driver is None:
                raise InvalidRaceSetup(f"Vehicle {vehicle.id} lost its driver")

            lap_time = compute_lap_time(vehicle, vehicle.driver, race.track, race.weather)
            if vehicle.status == VehicleStatus.IN_PIT:
                lap_time += self.settings.pit_stop_seconds

            laps.append((lap_time, grid_index, vehicle))
            deltas.append(vehicle.compute_wear(race.weather, self.settings))

        # Phase 2: apply
        for (_, _, vehicle), delta in zip(laps, deltas):
            vehicle.apply_wear(delta)
            if vehicle.status == VehicleStatus.IN_PIT:
                vehicle.status = VehicleStatus.RACING

        laps.sort(key=lambda entry: (entry[0], entry[1]))
        records = [make_lap_record(vehicle, lap_number, lap_time) for lap_time, _, vehicle in laps]
        state.lap_history.append(records)

        leader_time = records[0].lap_time_seconds if records else 0.0
        standings = [
            Standing(
                position=pos,
                vehicle_id=record.vehicle_id,
                driver_id=record.driver_id,
                lap_time=record.lap_time_seconds,
                gap_to_leader=record.lap_time_seconds - leader_time,
            )
            for pos, record in enumerate(records, 1)
        ]
        for vehicle in stopped:
            standings.append(Standing(
                position=len(standings) + 1,
                vehicle_id=vehicle.id,
                driver_id=vehicle.driver.id if vehicle.driver is not None else "",
            ))
        state.standings = standings

        if records and (
            state.fastest_lap is None
            or records[0].lap_time_seconds < state.fastest_lap.lap_time_seconds
        ):
            state.fastest_lap = records[0]
            logger.debug(
                "Lap %d: fastest lap %s by %s",
                lap_number, records[0].formatted_time, records[0].driver_id,
            )

        state.laps_completed = lap_number
        logger.debug(
            "Lap %d/%d of %s: leader %s",
            lap_number, state.total_laps, race.name,
            standings[0].driver_id if standings else "-",
        )
        return list(standings)

    def finalize_race(self, race: Race) -> FinalResult:
        """Close the race and award points.

        Runs one lap first if none has been completed.

        Raises:
            InvalidRaceSetup: If the race never started or is already finished
        """
        state = race.state
        if state.phase in (RacePhase.NOT_STARTED, RacePhase.QUALIFYING):
            raise InvalidRaceSetup(f"{race.name} has not started")
        if state.phase == RacePhase.FINISHED:
            raise InvalidRaceSetup(f"{race.name} is already finished")

        if state.laps_completed == 0:
            self.run_lap(race)

        vehicles = {v.id: v for v in race.vehicles}
        standings = list(state.standings)
        points = [
            DriverPoints(
                position=s.position,
                driver_id=s.driver_id,
                vehicle_id=s.vehicle_id,
                team_id=vehicles[s.vehicle_id].team_id,
                points=self.settings.points_for(s.position),
            )
            for s in standings
        ]

        fastest = state.fastest_lap
        if fastest is not None and isinstance(race.date, date):
            if race.track.update_lap_record(fastest.lap_time_seconds, fastest.driver_id, race.date):
                logger.info("New lap record at %s: %s", race.track.name, fastest.formatted_time)

        state.phase = RacePhase.FINISHED
        logger.info(
            "%s finished after %d laps, winner %s",
            race.name, state.laps_completed, standings[0].driver_id if standings else "-",
        )

        return FinalResult(
            podium=standings[: self.settings.podium_size],
            fastest_lap=fastest,
            points=points,
            laps_completed=state.laps_completed,
        )

    def get_results(self, race: Race) -> ResultsSnapshot:
        """Read the current classification without changing anything."""
        state = race.state
        return ResultsSnapshot(
            phase=state.phase,
            standings=list(state.standings),
            laps_completed=state.laps_completed,
            laps_remaining=max(0, state.total_laps - state.laps_completed),
            fastest_lap=state.fastest_lap,
        )

    def run_race(self, race: Race) -> FinalResult:
        """Start (if needed), run every lap and finalize."""
        if race.phase in (RacePhase.NOT_STARTED, RacePhase.QUALIFYING):
            self.start_race(race)
        while race.state.laps_completed < race.state.total_laps:
            self.run_lap(race)
        return self.finalize_race(race)
