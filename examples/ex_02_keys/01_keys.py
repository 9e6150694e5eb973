"""Keys: several registrations for one type, and per-call factories.

A key turns ``(type, key)`` into a separate slot. Keys are unique across the
whole locator, whatever type they are paired with.
"""

from __future__ import annotations

import asyncio
import itertools

from autolocator import AutoLocatorKeyAlreadyRegisteredError, ServiceLocator


class Database:
    def __init__(self, host: str) -> None:
        self.host = host


class RequestId:
    def __init__(self, value: int) -> None:
        self.value = value


async def main() -> None:
    locator = ServiceLocator()
    locator.register_singleton(Database, lambda _get: Database("primary.local"))
    locator.register_singleton(Database, lambda _get: Database("replica.local"), key="replica")

    primary = await locator.get(Database)
    replica = await locator.get(Database, key="replica")
    print(f"hosts={primary.host},{replica.host}")  # => hosts=primary.local,replica.local

    try:
        locator.register_singleton(RequestId, lambda _get: RequestId(0), key="replica")
    except AutoLocatorKeyAlreadyRegisteredError as error:
        print(f"key_taken={error.key}")  # => key_taken=replica

    counter = itertools.count(1)
    locator.register_factory(RequestId, lambda _get: RequestId(next(counter)))
    ids = [(await locator.get(RequestId)).value for _ in range(3)]
    print(f"request_ids={ids}")  # => request_ids=[1, 2, 3]


if __name__ == "__main__":
    asyncio.run(main())
