"""Protean Engine runner for the storefront domain.

Starts the Engine workers that process events asynchronously when the
production overlay is active:
- OutboxProcessor: polls the outbox table, publishes events to Redis Streams
- StreamSubscriptions: reads Redis Streams, invokes the projectors

Usage:
    PROTEAN_ENV=production python src/server.py
"""

import argparse

from protean.server.engine import Engine


def main():
    parser = argparse.ArgumentParser(description="Storefront Engine runner")
    parser.add_argument("--test-mode", action="store_true", help="Drain pending messages once and exit")
    args = parser.parse_args()

    from storefront.domain import storefront

    storefront.init()
    engine = Engine(storefront, test_mode=args.test_mode)
    engine.run()


if __name__ == "__main__":
    main()
