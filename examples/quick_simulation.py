#!/usr/bin/env python3
"""Quick simulation example using generated driver skills.

Builds a ten-car field in code, gives every driver seeded random skills,
then runs qualifying and the race lap by lap.

Usage:
    python examples/quick_simulation.py [--seed N]
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import numpy as np

from gpsim.models import Driver, Track, Vehicle
from gpsim.output import ConsoleOutput
from gpsim.simulation import Race, RaceSimulator


def create_field(rng: np.random.Generator) -> list[Vehicle]:
    """Create five two-car teams with randomly skilled drivers."""
    teams_data = [
        ("ferrari", "Ferrari", "SF-24", 345, "soft"),
        ("mercedes", "Mercedes", "W15", 341, "medium"),
        ("red_bull", "Red Bull", "RB20", 348, "medium"),
        ("mclaren", "McLaren", "MCL38", 343, "hard"),
        ("williams", "Williams", "FW46", 346, "medium"),
    ]

    vehicles = []
    number = 1
    for team_id, make, model, top_speed, compound in teams_data:
        for seat in range(2):
            vehicle = Vehicle(
                id=str(number),
                number=number,
                make=make,
                model=model,
                team_id=team_id,
                max_speed=top_speed - seat,
                tire_compound=compound,
            )
            vehicle.configure_initial_wear(tire_wear=0, engine_wear=0, fuel_level=100)

            driver = Driver(id=f"{team_id[:3].upper()}{seat + 1}", name=f"{make} driver {seat + 1}", team_id=team_id)
            speed, consistency, aggression = rng.integers(60, 100, size=3)
            driver.set_skills(speed=int(speed), consistency=int(consistency), aggression=int(aggression))
            driver.assign_vehicle(vehicle)

            vehicles.append(vehicle)
            number += 1

    return vehicles


def create_monza_track() -> Track:
    """Create Monza circuit configuration."""
    track = Track(id="monza", name="Autodromo Nazionale Monza", country="Italy", length_km=5.793)
    track.set_weather("dry", temperature=25, humidity=50)
    track.add_drs_zone("Rettifilo Tribune", 1.1)
    track.add_drs_zone("Curva del Serraglio", 0.8)
    track.add_corner("Variante del Rettifilo", 80, "high")
    track.add_corner("Curva Grande", 300, "low")
    track.add_corner("Parabolica", 210, "high")
    return track


def main():
    parser = argparse.ArgumentParser(description="Quick race simulation with generated skills")
    parser.add_argument("--seed", type=int, default=42, help="Seed for driver skills (default: 42)")
    args = parser.parse_args()

    rng = np.random.default_rng(args.seed)
    track = create_monza_track()
    race = Race(name="Gran Premio d'Italia", track=track, date="2024-09-08", vehicles=create_field(rng))

    simulator = RaceSimulator()
    ConsoleOutput.print_qualifying_results(simulator.run_qualifying(race))

    info = simulator.start_race(race)
    ConsoleOutput.print_race_start(info)

    # Drive the race lap by lap, pitting every car at half distance
    half_distance = info.total_laps // 2
    while race.state.laps_completed < info.total_laps:
        if race.state.laps_completed == half_distance:
            for vehicle in race.field_in_grid_order():
                vehicle.pit_stop("hard", fuel=30)
        standings = simulator.run_lap(race)
        if race.state.laps_completed % 10 == 0:
            leader = standings[0]
            print(f"Lap {race.state.laps_completed}: {leader.driver_id} leads ({leader.formatted_time})")

    result = simulator.finalize_race(race)
    ConsoleOutput.print_race_results(result)
    ConsoleOutput.print_wear_report(race.field_in_grid_order())
    return 0


if __name__ == "__main__":
    sys.exit(main())
