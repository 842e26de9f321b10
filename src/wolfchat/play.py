#!/usr/bin/env python
"""Watch a simulated werewolf room played by stub bots.

Usage:
    wolfchat                         # 6 bots, fast timings, random seed
    wolfchat --players 8 --seed 42   # Reproducible 8-seat game
    wolfchat --games 50              # Run 50 silent games and print win rates
    wolfchat --verbose               # Include private messages and timers
"""

import argparse
import asyncio
import logging
import random
from collections import Counter
from typing import Optional

from rich.console import Console
from rich.panel import Panel

from wolfchat.ai.stub_ai import StubPlayer, create_stub_player
from wolfchat.broadcast import ConsoleBroadcaster, RecordingBroadcaster
from wolfchat.config import GameSettings
from wolfchat.engine.session import GameSession
from wolfchat.events.game_events import Phase
from wolfchat.models.player import Faction
from wolfchat.runner import RoomRunner

BOT_NAMES = ["Ada", "Bram", "Cleo", "Dax", "Edda", "Finn", "Gus", "Hana"]

# Simulated rooms stop after this many days even without a winner
MAX_GAME_DAYS = 20


def fast_settings(scale: float = 1.0) -> GameSettings:
    """Short timings suitable for watching bots play."""
    return GameSettings(
        night_seconds=4.0 * scale,
        day_seconds=2.0 * scale,
        vote_seconds=4.0 * scale,
        resolution_delay=1.0 * scale,
        tick_interval=0.25 * scale,
    )


def create_bots(count: int, seed: int) -> dict[str, StubPlayer]:
    return {
        f"bot-{i}": create_stub_player(f"bot-{i}", BOT_NAMES[i], seed=seed + i)
        for i in range(count)
    }


async def run_simulated_room(
    player_count: int,
    seed: int,
    settings: GameSettings,
    broadcaster: Optional[RecordingBroadcaster] = None,
    step: float = 0.3,
) -> Optional[Faction]:
    """Play one game in real time through a RoomRunner.

    Returns:
        Winning faction, or None for no survivors or an unfinished game.
    """
    broadcaster = broadcaster or RecordingBroadcaster()
    rng = random.Random(seed)
    session = GameSession(broadcaster, settings=settings, rng=random.Random(seed))
    runner = RoomRunner(session)
    bots = create_bots(player_count, seed)

    for identity, bot in bots.items():
        broadcaster.connect(identity, bot.name)
        await runner.submit(identity, f"/join {bot.name}")
    await runner.submit(next(iter(bots)), "/start")

    await runner.start()
    try:
        while session.state.phase != Phase.ENDED and session.state.day <= MAX_GAME_DAYS:
            await asyncio.sleep(step)
            order = list(bots.values())
            rng.shuffle(order)
            for bot in order:
                bot.observe(broadcaster.messages_for(bot.identity))
                line = bot.decide(session.snapshot())
                # Bots hesitate so timeouts get exercised too
                if line is not None and rng.random() < 0.7:
                    await runner.submit(bot.identity, line)
    finally:
        await runner.stop()
    return session.state.winner


def run_batch(games: int, player_count: int, seed_base: int, console: Console) -> None:
    """Run several silent games and print the winner distribution."""
    winners: Counter = Counter()
    settings = fast_settings(scale=0.02)
    for i in range(games):
        winner = asyncio.run(
            run_simulated_room(player_count, seed_base + i, settings, step=0.005)
        )
        winners[winner.value if winner else "NONE"] += 1

    console.print("=" * 40)
    console.print(f"Games run: {games} ({player_count} players)")
    for winner, count in winners.most_common():
        console.print(f"  {winner}: {count} ({count / games * 100:.1f}%)")
    console.print("=" * 40)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="wolfchat - watch a werewolf chat room played by bots",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--players", type=int, default=6, help="Number of bot seats (5-8, default: 6)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible games")
    parser.add_argument("--scale", type=float, default=1.0, help="Multiply all phase timings (default: 1.0)")
    parser.add_argument("--games", type=int, default=None, help="Run N silent games and report win rates")
    parser.add_argument("--verbose", action="store_true", help="Show private messages and phase timers")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(name)s: %(message)s",
    )

    console = Console()
    if not 5 <= args.players <= len(BOT_NAMES):
        console.print(f"Error: --players must be between 5 and {len(BOT_NAMES)}")
        return 1
    if args.seed is None:
        args.seed = random.randint(1, 1000000)

    if args.games is not None:
        if args.games < 1:
            console.print("Error: --games must be a positive integer")
            return 1
        run_batch(args.games, args.players, args.seed, console)
        return 0

    console.print(Panel(f"wolfchat simulation - {args.players} bots, seed {args.seed}"))
    broadcaster = ConsoleBroadcaster(
        console,
        show_private=args.verbose,
        show_timers=args.verbose,
    )
    winner = asyncio.run(
        run_simulated_room(args.players, args.seed, fast_settings(args.scale), broadcaster)
    )
    console.print(f"Winner: {winner.value if winner else 'none'}")
    return 0


if __name__ == "__main__":
    exit(main())
