"""Protean Engine runner for the Directory domain.

Only needed when PROTEAN_ENV selects asynchronous event processing: the
Engine then delivers review events to the safety-score handler outside the
request that raised them.

Usage:
    python src/server.py
    python src/server.py --test-mode    # drain pending messages and exit
"""

import argparse
import asyncio

from protean.server.engine import Engine

from directory.domain import directory


async def run(test_mode=False):
    directory.init()
    engine = Engine(directory, test_mode=test_mode)
    await engine.run()


def main():
    parser = argparse.ArgumentParser(description="Safe Space Finder Engine runner")
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Process pending messages once and exit",
    )
    args = parser.parse_args()

    asyncio.run(run(test_mode=args.test_mode))


if __name__ == "__main__":
    main()
