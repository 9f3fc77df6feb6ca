"""
Critters - Headless World
Main entry point: hatch a few creatures, plant a tree, and keep ticking.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
import signal
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
load_dotenv(Path(__file__).parent.parent / ".env")

from creatures import CreatureConfig
from world.config import WorldConfig
from world.game import GameWorld

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("critters.world")


async def ring_bells(world: GameWorld, every_seconds: float, rng: random.Random) -> None:
    """Ring a bell at a random spot every few seconds."""
    low, high = world.config.bounds_min, world.config.bounds_max
    while world.is_running:
        await asyncio.sleep(every_seconds)
        world.ring_bell((rng.uniform(low[0], high[0]), 0.0, rng.uniform(low[1], high[1])))


async def main(
    ticks: int | None = None,
    creatures: int | None = None,
    bell_every: float = 0.0,
    seed: int | None = None,
) -> int:
    """Run the world until the tick limit or a shutdown signal."""
    world_config = WorldConfig.from_env()
    if creatures is not None:
        world_config.initial_creatures = creatures
    creature_config = CreatureConfig.from_env()

    errors = world_config.validate() + creature_config.validate()
    if errors:
        for error in errors:
            logger.error(f"Config error: {error}")
        return 1

    rng = random.Random(seed)
    world = GameWorld(config=world_config, creature_config=creature_config, rng=rng)

    for _ in range(world_config.initial_creatures):
        world.spawn_creature()
    world.add_fruit_tree((0.0, 0.0, 0.0))

    logger.info(f"Starting {world}...")

    # Setup signal handlers for graceful shutdown
    loop = asyncio.get_running_loop()

    def signal_handler() -> None:
        logger.info("Shutdown signal received")
        world.stop()

    if sys.platform == "win32":
        def windows_handler(signum: int, frame: object) -> None:
            loop.call_soon_threadsafe(world.stop)

        signal.signal(signal.SIGINT, windows_handler)
    else:
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, signal_handler)

    bell_task: asyncio.Task[None] | None = None
    try:
        run_task = asyncio.create_task(world.run(max_ticks=ticks), name="world")
        if bell_every > 0:
            bell_task = asyncio.create_task(ring_bells(world, bell_every, rng), name="bells")
        await run_task
    finally:
        logger.info("Shutting down...")

        if bell_task is not None:
            bell_task.cancel()
            try:
                await bell_task
            except asyncio.CancelledError:
                pass

        logger.info(f"Final summary: {world.summary()}")
        await world.shutdown()

    return 0


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Critters headless world")
    parser.add_argument(
        "--ticks",
        type=int,
        default=None,
        help="Stop after this many ticks (default: run until interrupted)",
    )
    parser.add_argument(
        "--creatures",
        type=int,
        default=None,
        help="Creatures to hatch at startup (default: CRITTERS_INITIAL_CREATURES or 3)",
    )
    parser.add_argument(
        "--bell-every",
        type=float,
        default=0.0,
        help="Ring a bell at a random spot every N seconds (default: never)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for a reproducible run",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args()


def run() -> None:
    args = parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    sys.exit(asyncio.run(main(
        ticks=args.ticks,
        creatures=args.creatures,
        bell_every=args.bell_every,
        seed=args.seed,
    )))


if __name__ == "__main__":
    run()
