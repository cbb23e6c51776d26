import argparse
import asyncio
import logging

from holdem.models import TableConfig
from .server import HostServer

logging.basicConfig(level=logging.INFO)


def main() -> None:
    # CLI doubles as documentation for the table defaults.
    parser = argparse.ArgumentParser(description="Royal Hold'em table host")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8765)
    parser.add_argument("--seats", type=int, default=5)
    parser.add_argument("--starting-stack", type=int, default=1_000)
    parser.add_argument("--sb", type=int, default=10)
    parser.add_argument("--bb", type=int, default=20)
    parser.add_argument("--bot-delay-min", type=int, default=1_000, help="Minimum bot thinking time in milliseconds")
    parser.add_argument("--bot-delay-max", type=int, default=2_000, help="Maximum bot thinking time in milliseconds")
    parser.add_argument(
        "--no-split-ties",
        action="store_true",
        help="Award a tied pot to the first best hand in seat order instead of splitting it",
    )
    args = parser.parse_args()

    if args.bot_delay_max < args.bot_delay_min:
        parser.error("--bot-delay-max must be at least --bot-delay-min")

    config = TableConfig(
        seats=args.seats,
        starting_stack=args.starting_stack,
        sb=args.sb,
        bb=args.bb,
        bot_delay_ms=(args.bot_delay_min, args.bot_delay_max),
        split_ties=not args.no_split_ties,
    )

    server = HostServer(config)
    asyncio.run(server.start(host=args.host, port=args.port))


if __name__ == "__main__":
    main()
