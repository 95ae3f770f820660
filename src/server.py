"""Run the asynchronous consumers for AgroMarket.

Inventory must run wherever Ordering events should turn into stock holds
and releases; Ordering runs its own Engine for the producer notifications
driven by OrderPaid.

    python src/server.py [--domain inventory|ordering]
"""

import argparse
import asyncio
import importlib

from protean.server.engine import Engine

# Domain name -> module holding the Domain object of the same name
DOMAIN_MODULES = {
    "inventory": "inventory.domain",
    "ordering": "ordering.domain",
}


def load_domain(name):
    domain = getattr(importlib.import_module(DOMAIN_MODULES[name]), name)
    domain.init()
    return domain


async def consume(names):
    engines = [Engine(load_domain(name)) for name in names]
    await asyncio.gather(*(engine.run() for engine in engines))


def main():
    parser = argparse.ArgumentParser(description="AgroMarket event consumers")
    parser.add_argument("--domain", choices=sorted(DOMAIN_MODULES), help="Only consume for this domain (default: both)")
    args = parser.parse_args()

    asyncio.run(consume([args.domain] if args.domain else list(DOMAIN_MODULES)))


if __name__ == "__main__":
    main()
