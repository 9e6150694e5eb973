"""Errors: missing registrations and circular factory chains."""

from __future__ import annotations

import asyncio

from autolocator import (
    AutoLocatorCircularDependencyError,
    AutoLocatorNotFoundError,
    Getter,
    ServiceLocator,
)


class Chicken:
    pass


class Egg:
    pass


class Cache:
    pass


async def create_chicken(get: Getter) -> Chicken:
    await get(Egg)
    return Chicken()


async def create_egg(get: Getter) -> Egg:
    await get(Chicken)
    return Egg()


async def main() -> None:
    locator = ServiceLocator()

    try:
        await locator.get(Cache)
    except AutoLocatorNotFoundError as error:
        print(f"missing={error.identity}")  # => missing=Cache

    locator.register_singleton(Chicken, create_chicken)
    locator.register_singleton(Egg, create_egg)

    try:
        await locator.get(Chicken)
    except AutoLocatorCircularDependencyError as error:
        chain = " -> ".join(str(identity) for identity in error.chain)
    print(f"cycle={chain}")  # => cycle=Chicken -> Egg -> Chicken


if __name__ == "__main__":
    asyncio.run(main())
