from __future__ import annotations

import asyncio
from concurrent.futures import Future
from typing import Any

from autolocator.identity import Identity

PendingHandle = Future
"""Completion handle shared by every caller waiting on one in-flight resolution."""


class PendingInitializations:
    """Track resolutions that are currently running, one handle per identity.

    Handles are ``concurrent.futures.Future`` objects so chains driven by
    different threads or event loops can wait on the same resolution. Each
    handle is switched to the running state on creation, which makes
    ``cancel()`` a no-op: a waiter that gets cancelled never cancels the
    handle other waiters depend on.

    The table itself is not synchronized; ``ServiceLocator`` calls it while
    holding its state lock.
    """

    def __init__(self) -> None:
        self._handles: dict[Identity, PendingHandle[Any]] = {}

    def __contains__(self, identity: object) -> bool:
        return identity in self._handles

    def __len__(self) -> int:
        return len(self._handles)

    def get(self, identity: Identity) -> PendingHandle[Any] | None:
        return self._handles.get(identity)

    def create(self, identity: Identity) -> PendingHandle[Any]:
        if identity in self._handles:
            msg = f"A pending initialization for {identity} already exists."
            raise RuntimeError(msg)
        handle: PendingHandle[Any] = Future()
        handle.set_running_or_notify_cancel()
        self._handles[identity] = handle
        return handle

    def discard(self, identity: Identity, handle: PendingHandle[Any]) -> None:
        """Remove ``handle`` if it is still the one registered for ``identity``."""
        if self._handles.get(identity) is handle:
            del self._handles[identity]

    def abort(self, identity: Identity, error: BaseException) -> bool:
        """Remove and fail the handle for ``identity``.

        Returns:
            ``True`` when a handle was aborted.

        """
        handle = self._handles.pop(identity, None)
        if handle is None:
            return False
        if not handle.done():
            handle.set_exception(error)
        return True

    def snapshot(self) -> list[PendingHandle[Any]]:
        return list(self._handles.values())

    def clear(self) -> None:
        self._handles.clear()


async def wait_handle(handle: PendingHandle[Any]) -> Any:
    """Await ``handle`` from the running event loop and return or raise its outcome."""
    return await asyncio.wrap_future(handle)
