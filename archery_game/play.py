"""
Bow Range - Autoplay CLI

Plays a full run headlessly with the aim solver on a simulated clock and
prints a per-level summary.

Usage:
    archery-play
    archery-play --seed 7 --max-attempts 5
    archery-play --levels my_levels.yaml --verbose
"""

import argparse
import logging
from pathlib import Path

import numpy as np
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from archery_game.autoplay import play_run
from archery_game.clock import ManualClock
from archery_game.levels import DEFAULT_LEVELS_PATH, load_levels
from archery_game.session import GameSession, LevelState

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Auto-play a Bow Range run")
    parser.add_argument("--levels", type=Path, default=DEFAULT_LEVELS_PATH,
                        help="Level catalog YAML")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for the wind (unseeded by default)")
    parser.add_argument("--max-attempts", type=int, default=3,
                        help="Attempts per level before giving up")
    parser.add_argument("--verbose", action="store_true",
                        help="Log level transitions")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    try:
        levels = load_levels(args.levels)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 2

    clock = ManualClock()
    session = GameSession(levels=levels, clock=clock, rng=np.random.default_rng(args.seed))

    console.print("\n[bold cyan]=== Bow Range Autoplay ===[/bold cyan]")
    console.print(f"  Levels: {len(levels)} from {args.levels}")
    console.print(f"  Seed: {args.seed}\n")

    results = play_run(session, clock, max_attempts=args.max_attempts)

    table = Table(title="Run Summary")
    table.add_column("Level", style="cyan")
    table.add_column("Name")
    table.add_column("Attempts", justify="right")
    table.add_column("Result")
    table.add_column("Score", justify="right", style="yellow")
    table.add_column("Accuracy", justify="right")
    for r in results:
        table.add_row(
            f"{r.level_index + 1}/{len(levels)}",
            r.name,
            str(r.attempts),
            "[green]passed[/green]" if r.passed else "[red]failed[/red]",
            str(r.total_score),
            r.accuracy,
        )
    console.print(table)

    complete = session.state == LevelState.ALL_LEVELS_COMPLETE
    if complete:
        console.print(f"\n  [bold green]All levels complete![/bold green] "
                      f"Final score {session.total_score}, accuracy {session.accuracy_string}\n")
    else:
        console.print(f"\n  [yellow]Run ended on level {session.level_index + 1}[/yellow] "
                      f"with score {session.total_score}\n")
    return 0 if complete else 1


if __name__ == "__main__":
    raise SystemExit(main())
