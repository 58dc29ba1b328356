import argparse
import asyncio
import os
import random
import sys
import time
from collections import Counter
from typing import Optional

from loguru import logger

from .advisors import available
from .config import config
from .events import LoggingSink
from .lobby import new_match


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Simulate advisor-only Ludo matches and report the results"
    )
    parser.add_argument(
        "--advisors",
        type=str,
        default=os.getenv("SIM_ADVISORS", "heuristic,random,heuristic,random"),
        help=f"Comma-separated advisor per seat (2-4). Available: {', '.join(available())}",
    )
    parser.add_argument("--games", type=int, default=1, help="Number of matches")
    parser.add_argument(
        "--max-turns",
        type=int,
        default=config.MAX_TURNS,
        help="Roll cap per match",
    )
    parser.add_argument("--seed", type=int, default=config.SEED)
    parser.add_argument(
        "--verbose", action="store_true", help="Log every engine event"
    )
    return parser.parse_args(argv)


async def simulate(
    seats: list[str],
    games: int,
    max_turns: int,
    seed: Optional[int] = None,
    verbose: bool = False,
) -> Counter:
    rng = random.Random(seed)
    wins: Counter = Counter()
    for game_idx in range(games):
        engine = new_match(
            seats,
            [f"{name}-{i}" for i, name in enumerate(seats)],
            sink=LoggingSink() if verbose else None,
            rng=rng,
        )
        winner = await engine.run(max_turns=max_turns)
        label = winner.name if winner is not None else "draw"
        wins[label] += 1
        logger.info(f"Game {game_idx + 1}: {label} after {engine.match.turn_count} turns")
    return wins


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    seats = [s.strip() for s in args.advisors.split(",") if s.strip()]
    if "human" in seats:
        logger.error("Simulation seats must be advisor-controlled")
        sys.exit(2)
    if not args.verbose:
        logger.remove()
        logger.add(sys.stderr, level="INFO")

    start_time = time.time()
    wins = asyncio.run(
        simulate(seats, args.games, args.max_turns, args.seed, args.verbose)
    )
    print("\n--- SIMULATION COMPLETE ---")
    for label, count in wins.most_common():
        print(f"{label}: {count}/{args.games}")
    print(f"Simulation Time: {time.time() - start_time:.2f} seconds")


if __name__ == "__main__":
    main()
