"""Tests for driver skills, style adaptation and vehicle assignment."""

import pytest

from gpsim.errors import IncompatibleAssignment, InvalidConfig
from gpsim.models import Driver, DriverSkills, DrivingStyle, Vehicle, Weather, WeatherCondition


def _sample_driver(speed: float = 80, consistency: float = 80, aggression: float = 80) -> Driver:
    return Driver(
        id="HAM",
        name="Lewis Hamilton",
        nationality="United Kingdom",
        team_id="mercedes",
        skills=DriverSkills(speed=speed, consistency=consistency, aggression=aggression),
    )


def _sample_vehicle(**overrides) -> Vehicle:
    data = {"id": "44", "make": "Mercedes", "model": "W15", "max_speed": 342}
    data.update(overrides)
    return Vehicle(**data)


# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------


def test_ratings() -> None:
    """Overall is the mean of all skills, race rating uses speed and consistency."""
    skills = DriverSkills(speed=95, consistency=90, aggression=85)
    assert skills.overall_rating == pytest.approx(90.0)
    assert skills.race_rating == pytest.approx(0.925)


def test_skills_out_of_range_at_construction() -> None:
    """Skills outside 0-100 must raise InvalidConfig at construction."""
    with pytest.raises(InvalidConfig, match="speed"):
        DriverSkills(speed=150)
    with pytest.raises(InvalidConfig, match="aggression"):
        DriverSkills(aggression=-1)


def test_set_skills() -> None:
    """Setting skills must return them with the overall rating."""
    driver = Driver(id="LEC", name="Charles Leclerc")
    result = driver.set_skills(speed=95, consistency=90, aggression=85)
    assert result == {"speed": 95.0, "consistency": 90.0, "aggression": 85.0, "overall": 90.0}
    assert driver.skills.speed == 95.0


def test_set_skills_partial_update() -> None:
    """Skills not named must keep their values."""
    driver = _sample_driver()
    driver.set_skills(speed=60)
    assert driver.skills.speed == 60.0
    assert driver.skills.consistency == 80.0


@pytest.mark.parametrize(
    "skills",
    [{"speed": 120}, {"speed": -1}, {"charisma": 50}, {"speed": "fast"}, {"speed": 50, "consistency": 150}],
)
def test_set_skills_rejects_invalid(skills: dict) -> None:
    """Invalid skills must raise InvalidConfig and change nothing."""
    driver = _sample_driver()
    with pytest.raises(InvalidConfig):
        driver.set_skills(**skills)
    assert driver.skills == DriverSkills(speed=80, consistency=80, aggression=80)


def test_performance_factor() -> None:
    """The factor must run from 1.0 for a zero-rated driver to 0.9 at the top."""
    assert _sample_driver(0, 0).performance_factor() == pytest.approx(1.0)
    assert _sample_driver(80, 80).performance_factor() == pytest.approx(0.92)
    assert _sample_driver(100, 100).performance_factor() == pytest.approx(0.9)


# ---------------------------------------------------------------------------
# Conditions
# ---------------------------------------------------------------------------


def test_rate_performance_wet() -> None:
    """Rain must cost speed and aggression and reward consistency."""
    rating = _sample_driver().rate_performance(Weather(condition=WeatherCondition.WET, temperature=20, humidity=50))
    assert (rating.speed, rating.consistency, rating.aggression) == (75, 85, 75)
    assert rating.overall == pytest.approx(235 / 3)


def test_rate_performance_hot_humid_dry() -> None:
    """Dry heat and humidity adjust each skill independently."""
    rating = _sample_driver().rate_performance(Weather(temperature=32, humidity=75))
    assert (rating.speed, rating.consistency, rating.aggression) == (82, 77, 80)


def test_rate_performance_clamps() -> None:
    """Adjusted skills must stay within 0-100."""
    rating = _sample_driver(100, 100, 1).rate_performance(
        Weather(condition=WeatherCondition.WET, temperature=20, humidity=80)
    )
    assert rating.consistency == 100
    assert rating.aggression == 0


def test_rate_performance_does_not_mutate() -> None:
    """Rating performance must leave the stored skills alone."""
    driver = _sample_driver()
    driver.rate_performance(Weather(condition=WeatherCondition.WET))
    assert driver.skills.speed == 80


def test_adapt_style_to_rain_and_back() -> None:
    """Wet weather makes the driver conservative, dry weather aggressive again."""
    driver = _sample_driver()
    assert driver.style == DrivingStyle.AGGRESSIVE

    wet = driver.adapt_style(Weather(condition=WeatherCondition.WET))
    assert wet.previous_style == DrivingStyle.AGGRESSIVE
    assert wet.new_style == DrivingStyle.CONSERVATIVE
    assert (wet.aggression_change, wet.consistency_change) == (-20, 15)
    assert driver.style == DrivingStyle.CONSERVATIVE
    assert driver.skills.aggression == 60
    assert driver.skills.consistency == 95

    dry = driver.adapt_style(Weather())
    assert dry.new_style == DrivingStyle.AGGRESSIVE
    assert driver.skills.aggression == 70
    assert driver.skills.consistency == 90


def test_adapt_style_is_idempotent() -> None:
    """Adapting twice to the same weather must only change skills once."""
    driver = _sample_driver()
    driver.adapt_style(Weather(condition=WeatherCondition.DAMP))
    again = driver.adapt_style(Weather(condition=WeatherCondition.DAMP))
    assert again.previous_style == again.new_style == DrivingStyle.CONSERVATIVE
    assert (again.aggression_change, again.consistency_change) == (0, 0)
    assert driver.skills.aggression == 60


def test_adapt_style_clamps() -> None:
    """Style changes must not push skills out of range."""
    driver = _sample_driver(aggression=10, consistency=95)
    driver.adapt_style(Weather(condition=WeatherCondition.WET))
    assert driver.skills.aggression == 0
    assert driver.skills.consistency == 100


def test_dry_weather_leaves_aggressive_driver_alone() -> None:
    """An aggressive driver in the dry needs no adaptation."""
    driver = _sample_driver()
    driver.adapt_style(Weather())
    assert driver.skills == DriverSkills(speed=80, consistency=80, aggression=80)


# ---------------------------------------------------------------------------
# Assignment
# ---------------------------------------------------------------------------


def test_assign_vehicle() -> None:
    """Assignment must link driver and vehicle and take the car off the market."""
    driver = _sample_driver()
    vehicle = _sample_vehicle(requirements={"speed": 75})
    info = driver.assign_vehicle(vehicle)
    assert info == {"driver": "Lewis Hamilton", "vehicle": "Mercedes W15", "vehicle_id": "44", "status": "assigned"}
    assert vehicle.driver is driver
    assert driver.vehicle_id == "44"
    assert not vehicle.available


def test_can_drive() -> None:
    """Every requirement must be met by the driver's skills."""
    driver = _sample_driver(speed=80, consistency=70)
    assert driver.can_drive(_sample_vehicle(requirements={"speed": 80, "consistency": 70}))
    assert not driver.can_drive(_sample_vehicle(requirements={"speed": 81}))
    assert not driver.can_drive(_sample_vehicle(available=False))


def test_assign_unavailable_vehicle() -> None:
    """A taken vehicle must raise IncompatibleAssignment."""
    vehicle = _sample_vehicle()
    _sample_driver().assign_vehicle(vehicle)
    other = Driver(id="RUS", name="George Russell")
    with pytest.raises(IncompatibleAssignment):
        other.assign_vehicle(vehicle)
    assert vehicle.driver.id == "HAM"
    assert other.vehicle_id is None


def test_assign_too_demanding_vehicle() -> None:
    """Unmet requirements must raise and leave both sides unassigned."""
    driver = _sample_driver(speed=80)
    vehicle = _sample_vehicle(requirements={"speed": 90})
    with pytest.raises(IncompatibleAssignment):
        driver.assign_vehicle(vehicle)
    assert vehicle.driver is None
    assert vehicle.available
    assert driver.vehicle_id is None
