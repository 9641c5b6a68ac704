"""Tests for loading events from YAML."""

from datetime import date
from pathlib import Path

import pytest
import yaml

from gpsim.config import load_event, parse_event
from gpsim.errors import IncompatibleAssignment, InvalidConfig, InvalidTireCompound, InvalidVehicleConfig
from gpsim.simulation import RaceSimulator

EXAMPLE_EVENT = Path(__file__).resolve().parents[1] / "examples" / "monza.yaml"


def _sample_event(n: int = 10) -> dict:
    return {
        "race": {"name": "Test Grand Prix", "date": "2024-06-09"},
        "track": {
            "id": "montreal",
            "name": "Circuit Gilles Villeneuve",
            "length_km": 4.361,
            "weather": {"condition": "dry", "temperature": 22, "humidity": 55},
        },
        "settings": {"min_field_size": n},
        "drivers": [
            {"id": f"D{i}", "name": f"Driver {i}", "team_id": f"team{i // 2}", "skills": {"speed": 70 + i}}
            for i in range(n)
        ],
        "vehicles": [
            {"id": f"V{i}", "team_id": f"team{i // 2}", "max_speed": 320 + i, "driver": f"D{i}"}
            for i in range(n)
        ],
    }


def _write(tmp_path: Path, data: dict) -> Path:
    path = tmp_path / "event.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


def test_load_event(tmp_path: Path) -> None:
    """A well-formed file must yield a race with assigned drivers."""
    event = load_event(_write(tmp_path, _sample_event()))

    assert event.race.name == "Test Grand Prix"
    assert event.race.date == date(2024, 6, 9)
    assert event.race.track.length_km == pytest.approx(4.361)
    assert len(event.race.vehicles) == 10
    assert len(event.drivers) == 10
    assert event.settings.min_field_size == 10
    assert event.race.vehicles[3].driver.id == "D3"
    assert event.drivers[3].vehicle_id == "V3"


def test_settings_are_optional() -> None:
    """Without a settings section the defaults apply."""
    data = _sample_event()
    del data["settings"]
    assert parse_event(data).settings.min_field_size == 10


def test_missing_file(tmp_path: Path) -> None:
    """A missing file must raise FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_event(tmp_path / "nope.yaml")


def test_malformed_yaml(tmp_path: Path) -> None:
    """Unparseable YAML must raise InvalidConfig."""
    path = tmp_path / "broken.yaml"
    path.write_text("race: [unclosed\n", encoding="utf-8")
    with pytest.raises(InvalidConfig):
        load_event(path)


@pytest.mark.parametrize("section", ["race", "track", "drivers", "vehicles"])
def test_missing_section(section: str) -> None:
    """Every required section must be present."""
    data = _sample_event()
    del data[section]
    with pytest.raises(InvalidConfig, match=section):
        parse_event(data)


def test_bad_vehicle() -> None:
    """A vehicle with no top speed must be reported with its entry number."""
    data = _sample_event()
    data["vehicles"][2]["max_speed"] = 0
    with pytest.raises(InvalidVehicleConfig, match="vehicle entry 2"):
        parse_event(data)


def test_bad_fuel_level() -> None:
    """Out-of-range fuel must be reported as InvalidConfig naming the field."""
    data = _sample_event()
    data["vehicles"][1]["fuel_level"] = 150
    with pytest.raises(InvalidConfig, match="fuel_level") as excinfo:
        parse_event(data)
    assert not isinstance(excinfo.value, InvalidVehicleConfig)


def test_bad_settings() -> None:
    """Invalid settings must be reported as InvalidConfig."""
    data = _sample_event()
    data["settings"]["min_field_size"] = 0
    with pytest.raises(InvalidConfig, match="settings"):
        parse_event(data)


def test_unknown_driver() -> None:
    """Vehicles must name a listed driver."""
    data = _sample_event()
    data["vehicles"][0]["driver"] = "XXX"
    with pytest.raises(InvalidConfig, match="unknown driver"):
        parse_event(data)


def test_duplicate_driver() -> None:
    """Driver IDs must be unique."""
    data = _sample_event()
    data["drivers"][1]["id"] = "D0"
    with pytest.raises(InvalidConfig, match="duplicate"):
        parse_event(data)


def test_unknown_compound() -> None:
    """An unknown tire compound must surface as InvalidTireCompound."""
    data = _sample_event()
    data["vehicles"][0]["tire_compound"] = "slick"
    with pytest.raises(InvalidTireCompound):
        parse_event(data)


def test_driver_below_requirements() -> None:
    """A driver who cannot handle the car must not be assigned to it."""
    data = _sample_event()
    data["vehicles"][0]["requirements"] = {"speed": 95}
    with pytest.raises(IncompatibleAssignment):
        parse_event(data)


def test_bad_date() -> None:
    """An unparseable race date must raise InvalidConfig."""
    data = _sample_event()
    data["race"]["date"] = "sometime in June"
    with pytest.raises(InvalidConfig):
        parse_event(data)


def test_not_a_mapping() -> None:
    """The document itself must be a mapping."""
    with pytest.raises(InvalidConfig):
        parse_event(["race"])


def test_example_event_runs() -> None:
    """The bundled Monza event must load and race to a full classification."""
    event = load_event(EXAMPLE_EVENT)
    assert len(event.race.vehicles) == 20

    sim = RaceSimulator(event.settings)
    sim.run_qualifying(event.race)
    result = sim.run_race(event.race)

    assert len(result.points) == 20
    assert sum(p.points for p in result.points) == 101
    assert result.laps_completed == event.race.state.total_laps
