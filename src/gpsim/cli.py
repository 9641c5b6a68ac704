"""Command-line entry point: simulate an event file.

Usage:
    gpsim examples/monza.yaml [--verbose]
"""

import argparse
import logging
import sys

from gpsim.config import load_event
from gpsim.errors import SimulationError
from gpsim.output import ConsoleOutput
from gpsim.simulation import RaceSimulator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Simulate qualifying and a race from an event file")
    parser.add_argument("event", help="Path to the event YAML file")
    parser.add_argument(
        "--skip-qualifying",
        action="store_true",
        help="Start in entry order instead of running qualifying",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Log race progress (-v for info, -vv for every lap)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        event = load_event(args.event)
        simulator = RaceSimulator(event.settings)
        race = event.race

        if not args.skip_qualifying:
            ConsoleOutput.print_qualifying_results(simulator.run_qualifying(race))

        ConsoleOutput.print_race_start(simulator.start_race(race))
        result = simulator.run_race(race)
    except (FileNotFoundError, SimulationError) as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1

    ConsoleOutput.print_race_results(result)
    ConsoleOutput.print_wear_report(race.field_in_grid_order())
    return 0


if __name__ == "__main__":
    sys.exit(main())
