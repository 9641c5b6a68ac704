"""Console output formatting."""

from gpsim.models import Vehicle
from gpsim.simulation.qualifying import QualifyingResult
from gpsim.simulation.race import FinalResult, RaceStartInfo


class ConsoleOutput:
    """Formats simulation results for console display."""

    @staticmethod
    def print_qualifying_results(result: QualifyingResult) -> None:
        """Print each qualifying stage and the starting grid.

        Args:
            result: Qualifying result
        """
        print("\n" + "=" * 60)
        print("QUALIFYING RESULTS")
        print("=" * 60)

        for label, stage in (("Q1", result.stage1), ("Q2", result.stage2), ("Q3", result.stage3)):
            print(f"\n{label}")
            print(f"{'Pos':<4} {'Driver':<10} {'Car':<6} {'Time':<10}")
            print("-" * 60)
            for lap in stage:
                eliminated = " (eliminated)" if lap.eliminated else ""
                print(
                    f"{lap.position:<4} "
                    f"{lap.driver_id:<10} "
                    f"{lap.vehicle_id:<6} "
                    f"{lap.formatted_time:<10}"
                    f"{eliminated}"
                )

        print("\nSTARTING GRID")
        print("-" * 60)
        for slot in result.starting_grid:
            print(f"{slot.position:<4} {slot.driver_id:<10} {slot.vehicle_id:<6}")

        print("=" * 60)

    @staticmethod
    def print_race_start(info: RaceStartInfo) -> None:
        """Print the race distance and conditions."""
        weather = info.weather
        print(
            f"\nLights out: {info.participants} cars, {info.total_laps} laps, "
            f"{weather.condition.value} ({weather.temperature:.0f}C, {weather.humidity:.0f}% humidity)"
        )

    @staticmethod
    def print_race_results(result: FinalResult) -> None:
        """Print race classification and points.

        Args:
            result: Final race result
        """
        print("\n" + "=" * 60)
        print(f"RACE RESULTS ({result.laps_completed} laps)")
        print("=" * 60)
        print(f"{'Pos':<4} {'Driver':<10} {'Car':<6} {'Team':<15} {'Pts':<4}")
        print("-" * 60)

        for entry in result.points:
            print(
                f"{entry.position:<4} "
                f"{entry.driver_id:<10} "
                f"{entry.vehicle_id:<6} "
                f"{entry.team_id or '':<15} "
                f"{entry.points:<4}"
            )

        print("\nPodium: " + ", ".join(s.driver_id for s in result.podium))
        if result.fastest_lap is not None:
            lap = result.fastest_lap
            print(f"Fastest lap: {lap.driver_id} {lap.formatted_time} (lap {lap.lap_number})")

        team_points = result.points_by_team()
        if team_points:
            print("\nTeam points:")
            for team_id, points in sorted(team_points.items(), key=lambda x: x[1], reverse=True):
                print(f"  {team_id:<15} {points}")

        print("=" * 60)

    @staticmethod
    def print_wear_report(vehicles: list[Vehicle]) -> None:
        """Print end-of-race wear for each car."""
        print("\nWEAR REPORT")
        print("-" * 60)
        print(f"{'Car':<6} {'Tires':>8} {'Engine':>8} {'Fuel':>8}")
        for vehicle in vehicles:
            print(
                f"{vehicle.id:<6} "
                f"{vehicle.tire_wear:7.1f}% "
                f"{vehicle.engine_wear:7.1f}% "
                f"{vehicle.fuel_level:7.1f}%"
            )
