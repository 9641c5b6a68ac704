"""Tests for the command-line entry point and console output."""

from pathlib import Path

import pytest

from gpsim.cli import build_parser, main

EXAMPLE_EVENT = Path(__file__).resolve().parents[1] / "examples" / "monza.yaml"


def test_parser_defaults() -> None:
    """Qualifying runs and logging stays quiet unless asked."""
    args = build_parser().parse_args(["event.yaml"])
    assert args.event == "event.yaml"
    assert not args.skip_qualifying
    assert args.verbose == 0


def test_parser_verbosity() -> None:
    """Repeated -v flags must raise the verbosity."""
    assert build_parser().parse_args(["event.yaml", "-vv"]).verbose == 2


def test_main_runs_example(capsys: pytest.CaptureFixture[str]) -> None:
    """Simulating the bundled event must print every section and succeed."""
    assert main([str(EXAMPLE_EVENT)]) == 0

    out = capsys.readouterr().out
    assert "QUALIFYING RESULTS" in out
    assert "STARTING GRID" in out
    assert "Lights out: 20 cars" in out
    assert "RACE RESULTS" in out
    assert "Fastest lap:" in out


def test_main_skip_qualifying(capsys: pytest.CaptureFixture[str]) -> None:
    """Skipping qualifying must still run the race."""
    assert main([str(EXAMPLE_EVENT), "--skip-qualifying"]) == 0

    out = capsys.readouterr().out
    assert "QUALIFYING RESULTS" not in out
    assert "RACE RESULTS" in out


def test_main_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """A missing event file must fail with exit status 1."""
    assert main([str(tmp_path / "missing.yaml")]) == 1
    assert "Error:" in capsys.readouterr().err


def test_main_invalid_event(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """An event that cannot start must fail with exit status 1."""
    path = tmp_path / "small.yaml"
    path.write_text(
        "race: {name: Tiny, date: 2024-01-01}\n"
        "track: {id: t, name: Test, length_km: 3.0, weather: {condition: dry}}\n"
        "drivers: [{id: A, name: Driver A}]\n"
        "vehicles: [{id: '1', max_speed: 300, driver: A}]\n",
        encoding="utf-8",
    )
    assert main([str(path), "--skip-qualifying"]) == 1
    assert "cannot start" in capsys.readouterr().err
