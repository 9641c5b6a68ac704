"""Load race events from YAML files."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from gpsim.errors import InvalidConfig, InvalidTireCompound
from gpsim.models import Driver, Track, Vehicle
from gpsim.settings import RaceSettings
from gpsim.simulation.race import Race

logger = logging.getLogger(__name__)

_REQUIRED_SECTIONS: tuple[str, ...] = ("race", "track", "drivers", "vehicles")


@dataclass
class EventConfig:
    """Everything needed to simulate one event."""

    race: Race
    settings: RaceSettings
    drivers: list[Driver]


def _build(model: type, entry: Any, label: str):
    if not isinstance(entry, dict):
        raise InvalidConfig(f"{label} must be a mapping, got {type(entry).__name__}")
    try:
        return model(**entry)
    except InvalidTireCompound:
        raise
    except InvalidConfig as err:
        # Same error type, prefixed with the entry that caused it
        raise type(err)(f"{label}: {err}") from err


def parse_event(data: dict[str, Any]) -> EventConfig:
    """Build an event from already-parsed YAML/JSON data.

    Vehicles name their driver by ID; each driver is assigned to the
    vehicle that names them.

    Raises:
        InvalidConfig: If a section is missing or an entry is malformed
        IncompatibleAssignment: If a driver cannot take the named vehicle
    """
    if not isinstance(data, dict):
        raise InvalidConfig("Event file must contain a mapping")
    for section in _REQUIRED_SECTIONS:
        if section not in data:
            raise InvalidConfig(f"Event is missing required section '{section}'")

    settings = _build(RaceSettings, data.get("settings") or {}, "settings")
    track = _build(Track, data["track"], "track")

    drivers: dict[str, Driver] = {}
    for idx, entry in enumerate(data["drivers"]):
        driver = _build(Driver, entry, f"driver entry {idx}")
        if driver.id in drivers:
            raise InvalidConfig(f"driver entry {idx}: duplicate driver ID '{driver.id}'")
        drivers[driver.id] = driver

    vehicles: list[Vehicle] = []
    for idx, entry in enumerate(data["vehicles"]):
        if not isinstance(entry, dict):
            raise InvalidConfig(f"vehicle entry {idx} must be a mapping")
        entry = dict(entry)
        driver_id = entry.pop("driver", None)
        vehicle = _build(Vehicle, entry, f"vehicle entry {idx}")

        if driver_id is not None:
            if driver_id not in drivers:
                raise InvalidConfig(f"vehicle entry {idx} ({vehicle.id}): unknown driver '{driver_id}'")
            drivers[driver_id].assign_vehicle(vehicle)
        vehicles.append(vehicle)

    race_data = data["race"]
    if not isinstance(race_data, dict) or "name" not in race_data:
        raise InvalidConfig("race section must be a mapping with a 'name'")

    race = Race(
        name=str(race_data["name"]),
        track=track,
        date=race_data.get("date"),
        vehicles=vehicles,
    )
    return EventConfig(race=race, settings=settings, drivers=list(drivers.values()))


def load_event(path: str | Path) -> EventConfig:
    """Load an event file.

    Args:
        path: YAML file with ``race``, ``track``, ``drivers``, ``vehicles``
            and optional ``settings`` sections

    Returns:
        The parsed event

    Raises:
        FileNotFoundError: If the file does not exist
        InvalidConfig: If the content is malformed
    """
    event_path = Path(path)
    if not event_path.exists():
        raise FileNotFoundError(f"Event file not found: {event_path}")

    with open(event_path, encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh)
        except yaml.YAMLError as err:
            raise InvalidConfig(f"Could not parse {event_path}: {err}") from err

    event = parse_event(data)
    logger.info(
        "Loaded %s from %s: %d drivers, %d vehicles",
        event.race.name, event_path, len(event.drivers), len(event.race.vehicles),
    )
    return event
