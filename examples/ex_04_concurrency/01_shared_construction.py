"""Concurrency: callers arriving during a construction share its result.

Re-registering an identity while its factory is still running aborts that
construction for everyone waiting on it.
"""

from __future__ import annotations

import asyncio

from autolocator import AutoLocatorRegistrationOverriddenError, Getter, ServiceLocator


class Connection:
    pass


async def main() -> None:
    locator = ServiceLocator()
    opened: list[Connection] = []

    async def connect(_get: Getter) -> Connection:
        await asyncio.sleep(0.01)
        connection = Connection()
        opened.append(connection)
        return connection

    locator.register_singleton(Connection, connect)
    first, second = await asyncio.gather(locator.get(Connection), locator.get(Connection))
    print(f"opened={len(opened)} same={first is second}")  # => opened=1 same=True

    locator.register_singleton(Connection, connect, key="slow")
    pending = asyncio.create_task(locator.get(Connection, key="slow"))
    await asyncio.sleep(0)
    await locator.wait_pending_initializations()
    print(f"fenced={pending.done()}")  # => fenced=True

    locator.allow_reassignment = True
    locator.register_singleton(Connection, connect, key="aborted")
    aborted = asyncio.create_task(locator.get(Connection, key="aborted"))
    await asyncio.sleep(0)
    locator.register_singleton(Connection, lambda _get: Connection(), key="aborted")
    try:
        await aborted
    except AutoLocatorRegistrationOverriddenError:
        outcome = "overridden"
    print(f"outcome={outcome}")  # => outcome=overridden


if __name__ == "__main__":
    asyncio.run(main())
