#!/usr/bin/env python3
"""
Entry point: python -m flattenhund
"""

import argparse
import logging

from .constants import BEST_FILE, CHARACTERS, DB_FILE, DEFAULT_CHARACTER
from .leaderboard import Leaderboard
from .leaderboard_client import SupabaseLeaderboard
from .local_store import BestScoreCache
from .reporter import OutcomeReporter
from .server_db import Database


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="flattenhund", description="Flap through the pipes.")
    parser.add_argument("--name", default="", help="Name used for the leaderboard")
    parser.add_argument("--character", choices=CHARACTERS, default=DEFAULT_CHARACTER)
    parser.add_argument("--night", action="store_true", help="Start in night mode")
    parser.add_argument("--db", default=DB_FILE, help="Local leaderboard database")
    parser.add_argument("--best-file", default=BEST_FILE, help="Personal best cache")
    parser.add_argument("--offline", action="store_true", help="Never contact the remote leaderboard")
    parser.add_argument("--seed", type=int, default=None, help="Seed for pipe placement")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # pygame is only needed once a window is opened
    from .flappy_client import FlappyClient
    from .sounds import SoundBoard

    remote = None if args.offline else SupabaseLeaderboard.from_env()
    leaderboard = Leaderboard(local=Database(args.db), remote=remote)
    reporter = OutcomeReporter(BestScoreCache(args.best_file), store=leaderboard)

    # Mixer first: pygame.init() would open it at its default rate
    audio = SoundBoard()
    audio.init()
    try:
        client = FlappyClient(
            reporter,
            leaderboard=leaderboard,
            audio=audio,
            name=args.name,
            character=args.character,
            night=args.night,
            seed=args.seed,
        )
        client.run()
    finally:
        audio.quit()
        leaderboard.local.close()


if __name__ == "__main__":
    main()
