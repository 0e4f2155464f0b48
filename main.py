"""CLI entrypoint for the zone race simulation engine."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from race_engine import __version__
from race_engine.config import load_race_config
from race_engine.core.errors import ConfigurationError
from race_engine.race_file import default_output_name, write_race_file
from race_engine.runner import run_race


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Simulate a zoned-track race.")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Race configuration YAML (default: data/race_default.yaml).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Race file to write (default derived from laps and racers).",
    )
    parser.add_argument("--seed", type=int, default=None, help="Override the seed.")
    parser.add_argument("--verbose", action="store_true", help="Debug logging.")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Load a race configuration, run it, and write the race file."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print(f"Zone Race Simulation Engine v{__version__}")
    print("=" * 56)

    try:
        config = load_race_config(args.config)
        if args.seed is not None:
            config = config.with_seed(args.seed)
        race = config.build_race()
    except (FileNotFoundError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Race  : {config.name}")
    print(f"Track : {config.track.name} ({config.track.length:g} units)")
    print(f"Field : {len(race.participants)} racers, {config.laps} lap(s)")
    print("-" * 56)

    run = run_race(race, config.header())

    output = args.output or Path(
        default_output_name(config.laps, config.racer_count, config.lap_time)
    )
    write_race_file(output, run.lines)

    print(f"Simulated {run.ticks} ticks, {len(run.lines)} lines.")
    print("\nFinish order:")
    for place, racer_id in enumerate(race.leaderboard, start=1):
        name = next(p.name for p in race.participants if p.racer_id == racer_id)
        print(f"  {place:2d}. {name} (ID {racer_id})")
    print(f"\nRace file written to {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
