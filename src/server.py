"""Protean Engine runner for the lending domain.

Starts the Engine that processes lending events asynchronously when the
domain runs with event_processing = "async" (the production overlay):
projectors such as UserOrders are then fed from the broker instead of
inside the command's unit of work.

Usage:
    PROTEAN_ENV=production python src/server.py
"""

import asyncio

from protean.server.engine import Engine


async def run():
    from lending.domain import lending

    lending.init()
    await Engine(lending).run()


def main():
    asyncio.run(run())


if __name__ == "__main__":
    main()
