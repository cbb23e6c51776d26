#!/usr/bin/env python3
"""Run a headless bot-only table for a number of hands.

Every seat is driven by the table's bot policy, so this exercises the engine,
the bot scheduling and chip accounting without a presentation client.

Example:
    python scripts/table_sim.py --hands 200 --policy strength
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import random

from holdem.bots import HandStrengthBotPolicy, RandomBotPolicy
from holdem.models import TableConfig
from host.session import TableSession

LOGGER = logging.getLogger("table_sim")


async def run_simulation(args: argparse.Namespace) -> None:
    config = TableConfig(
        seats=args.players,
        starting_stack=args.starting_stack,
        sb=args.sb,
        bb=args.bb,
        bot_delay_ms=(0, args.bot_delay),
        split_ties=not args.no_split_ties,
    )
    rng = random.Random(args.seed)
    if args.policy == "strength":
        policy = HandStrengthBotPolicy(config.bb, rng)
    else:
        policy = RandomBotPolicy(config.bb, rng)

    session = TableSession(config, human_name=None, policy=policy, rng=rng)
    total_chips = sum(player.chips for player in session.engine.players)
    hands_played = 0

    try:
        while hands_played < args.hands and session.engine.can_start_hand():
            await session.start_hand()
            snapshot = await session.wait_for_showdown(timeout=args.timeout)
            hands_played += 1
            for award in snapshot.awards:
                LOGGER.debug("Hand %s: %s +%s (%s)", snapshot.hand_number, award.player_id, award.amount, award.result.description)
    finally:
        await session.close()

    remaining = sum(player.chips for player in session.engine.players)
    LOGGER.info("Played %s hands", hands_played)
    for player in session.engine.players:
        LOGGER.info("  %-12s %6s chips", player.name, player.chips)
    if remaining != total_chips:
        LOGGER.error("Chip total drifted from %s to %s", total_chips, remaining)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a local bot-only table simulation")
    parser.add_argument("--players", type=int, default=5)
    parser.add_argument("--hands", type=int, default=100)
    parser.add_argument("--starting-stack", type=int, default=1_000)
    parser.add_argument("--sb", type=int, default=10)
    parser.add_argument("--bb", type=int, default=20)
    parser.add_argument("--bot-delay", type=int, default=0, help="max bot thinking time in milliseconds")
    parser.add_argument("--policy", choices=("random", "strength"), default="random")
    parser.add_argument("--no-split-ties", action="store_true")
    parser.add_argument("--timeout", type=float, default=30.0, help="max seconds to wait for a single hand")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))
    try:
        asyncio.run(run_simulation(args))
    except KeyboardInterrupt:
        LOGGER.info("Simulation interrupted; shutting down")


if __name__ == "__main__":
    main()
