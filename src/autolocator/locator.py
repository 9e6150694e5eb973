from __future__ import annotations

import asyncio
import inspect
import logging
import threading
from typing import Any, TypeVar, overload

from autolocator.entries import MISSING, Factory, Lifetime, ServiceEntry
from autolocator.exceptions import (
    AutoLocatorAlreadyRegisteredError,
    AutoLocatorCircularDependencyError,
    AutoLocatorInvalidRegistrationError,
    AutoLocatorKeyAlreadyRegisteredError,
    AutoLocatorNotFoundError,
    AutoLocatorNotRegisteredError,
    AutoLocatorRegistrationOverriddenError,
)
from autolocator.identity import Identity
from autolocator.pending import PendingHandle, PendingInitializations, wait_handle
from autolocator.resolution_stack import clear_resolution_chain, current_chain, resolving

T = TypeVar("T")

logger = logging.getLogger(__name__)


class ServiceLocator:
    """Register factories by type and key, and resolve them on demand.

    Factories receive the locator's ``get`` coroutine function, so a factory can
    await any other registration, including ones that are still being built
    asynchronously by another caller. Registration order does not matter: the
    dependency graph is discovered while resolving.

    Concurrent requests for an identity that is already being built share that
    single construction. Requests that loop back into an identity already on
    their own chain, directly or by waiting on a construction that waits on
    them, fail with ``AutoLocatorCircularDependencyError``.

    Examples:
        .. code-block:: python

            locator = ServiceLocator()
            locator.register_singleton(Water, lambda get: Water())
            locator.register_singleton(Orange, build_orange)


            async def build_orange(get: Getter) -> Orange:
                return Orange(await get(Water), await get(Soil))

    """

    def __init__(self, *, allow_reassignment: bool = False) -> None:
        """Initialize an empty locator.

        Args:
            allow_reassignment: Allow registering an identity that already has an
                entry, replacing it. Tests that swap implementations usually want
                this; it is disabled by default because reassignments in
                application wiring are mostly unintentional.

        """
        self.allow_reassignment = allow_reassignment

        self._entries: dict[Identity, ServiceEntry] = {}
        self._keys: dict[str, Identity] = {}
        self._pending = PendingInitializations()
        self._waits: dict[Identity, list[Identity]] = {}
        self._build_tasks: set[asyncio.Task[None]] = set()
        self._state_lock = threading.Lock()

    # region Registration Methods
    def register_singleton(
        self,
        type_tag: Any,
        factory: Factory,
        *,
        key: str | None = None,
    ) -> None:
        """Register a factory whose first successful result is cached and shared.

        The factory runs lazily, on the first ``get`` for the identity.

        Args:
            type_tag: Type (or other hashable discriminator) to register.
            factory: Callable receiving the ``get`` accessor and returning an
                instance or an awaitable producing it.
            key: Optional key registering one of several entries for the same
                type. Keys are unique across the whole locator.

        Raises:
            AutoLocatorAlreadyRegisteredError: If the identity is already
                registered and ``allow_reassignment`` is disabled.
            AutoLocatorKeyAlreadyRegisteredError: If ``key`` is bound to a
                different type.

        Notes:
            When reassignment replaces an entry whose factory is still running,
            every caller waiting on it fails with
            ``AutoLocatorRegistrationOverriddenError``.

        """
        self._register(Identity(type_tag, key), factory, lifetime=Lifetime.SINGLETON)

    def register_factory(
        self,
        type_tag: Any,
        factory: Factory,
        *,
        key: str | None = None,
    ) -> None:
        """Register a factory that runs again for every ``get`` call.

        Accepts the same arguments and raises the same errors as
        ``register_singleton``.
        """
        self._register(Identity(type_tag, key), factory, lifetime=Lifetime.FACTORY)

    def _register(self, identity: Identity, factory: Factory, *, lifetime: Lifetime) -> None:
        if not callable(factory):
            msg = f"Factory registered for {identity} must be callable, got {factory!r}."
            raise AutoLocatorInvalidRegistrationError(msg)

        with self._state_lock:
            if not self.allow_reassignment and identity in self._entries:
                raise AutoLocatorAlreadyRegisteredError(identity)

            key = identity.key
            if key:
                owner = self._keys.get(key)
                if owner is not None and owner != identity:
                    raise AutoLocatorKeyAlreadyRegisteredError(key, owner)
                self._keys[key] = identity

            self._entries[identity] = ServiceEntry(factory=factory, lifetime=lifetime)
            self._abort_pending(identity)

        logger.debug("Registered %s as %s", identity, lifetime.value)

    def unregister(self, type_tag: Any, *, key: str | None = None) -> None:
        """Remove the entry registered for a type and optional key.

        Raises:
            AutoLocatorNotRegisteredError: If nothing is registered for the
                identity.

        """
        identity = Identity(type_tag, key)
        with self._state_lock:
            if identity not in self._entries:
                raise AutoLocatorNotRegisteredError(identity)
            self._remove(identity)

        logger.debug("Unregistered %s", identity)

    def unregister_instance(self, instance: Any) -> None:
        """Remove every entry whose cached singleton is ``instance``.

        The same object registered under several keys is removed from all of
        them. This is a linear scan over all entries.

        Raises:
            AutoLocatorNotRegisteredError: If no entry caches ``instance``.

        """
        with self._state_lock:
            matching = [
                identity
                for identity, entry in self._entries.items()
                if entry.has_instance and entry.instance is instance
            ]
            if not matching:
                raise AutoLocatorNotRegisteredError(Identity(type(instance)))
            for identity in matching:
                self._remove(identity)

        logger.debug("Unregistered instance %r from %d entries", instance, len(matching))

    def _remove(self, identity: Identity) -> None:
        del self._entries[identity]
        if identity.key and self._keys.get(identity.key) == identity:
            del self._keys[identity.key]
        self._abort_pending(identity)

    def _abort_pending(self, identity: Identity) -> None:
        if self._pending.abort(identity, AutoLocatorRegistrationOverriddenError(identity)):
            logger.debug("Aborted pending initialization of %s", identity)

    # endregion Registration Methods

    # region Resolution Methods
    @overload
    async def get(self, type_tag: type[T], *, key: str | None = None) -> T: ...

    @overload
    async def get(self, type_tag: Any, *, key: str | None = None) -> Any: ...

    async def get(self, type_tag: Any, *, key: str | None = None) -> Any:
        """Return an instance for a type and optional key.

        Singletons are built once and then returned from cache. Factory
        registrations produce a new instance per call, except that callers
        arriving while a construction is in flight share its result.

        Each construction runs in its own task, so cancelling a caller only
        abandons that caller's wait: the factory still completes and its
        result is cached and handed to the remaining callers.

        Raises:
            AutoLocatorNotFoundError: If the identity is not registered.
            AutoLocatorCircularDependencyError: If the identity is already being
                built further up the same resolution chain, or if waiting for
                it would wait on this chain itself.
            AutoLocatorRegistrationOverriddenError: If the identity was
                registered again or unregistered while it was being built.

        Any error raised by the factory propagates unchanged, to this caller
        and to every caller that joined the same construction.

        """
        identity = Identity(type_tag, key)

        entry = self._entries.get(identity)
        if entry is None:
            raise AutoLocatorNotFoundError(identity)

        if entry.has_instance:
            return entry.instance

        # The chain is private to this task, so it is checked before taking the lock.
        chain = current_chain()
        if identity in chain:
            raise AutoLocatorCircularDependencyError([*chain, identity])

        with self._state_lock:
            # The entry may have been replaced or cached since the unlocked read.
            entry = self._entries.get(identity)
            if entry is None:
                raise AutoLocatorNotFoundError(identity)
            if entry.has_instance:
                return entry.instance

            handle = self._pending.get(identity)
            if handle is None:
                handle = self._pending.create(identity)
                self._start_build(identity, entry, handle)
            else:
                wait_path = self._find_wait_path(identity, chain)
                if wait_path is not None:
                    raise AutoLocatorCircularDependencyError([*chain, *wait_path])
                logger.debug("Waiting for pending initialization of %s", identity)

            waiter = chain[-1] if chain else None
            if waiter is not None:
                self._waits.setdefault(waiter, []).append(identity)

        try:
            return await wait_handle(handle)
        finally:
            if waiter is not None:
                self._stop_waiting(waiter, identity)

    def _start_build(
        self,
        identity: Identity,
        entry: ServiceEntry,
        handle: PendingHandle[Any],
    ) -> None:
        # The task copies the caller's context, which carries the resolution chain.
        task = asyncio.get_running_loop().create_task(self._build(identity, entry, handle))
        self._build_tasks.add(task)
        task.add_done_callback(self._build_tasks.discard)

    async def _build(
        self,
        identity: Identity,
        entry: ServiceEntry,
        handle: PendingHandle[Any],
    ) -> None:
        with resolving(identity):
            try:
                logger.debug("Running %s factory for %s", entry.lifetime.value, identity)
                result = entry.factory(self.get)
                instance = await result if inspect.isawaitable(result) else result
            except Exception as error:
                self._settle(identity, handle, error=error)
                logger.debug("Factory for %s failed: %r", identity, error)
                return
            except BaseException as error:
                self._settle(identity, handle, error=error)
                raise

        with self._state_lock:
            if handle.done():
                # Aborted by a registration change while the factory ran.
                self._pending.discard(identity, handle)
                logger.debug("Discarded result for %s after its registration changed", identity)
                return
            if entry.is_singleton and self._entries.get(identity) is entry:
                self._entries[identity] = entry.with_instance(instance)
            handle.set_result(instance)
            self._pending.discard(identity, handle)

        logger.debug("Resolved %s", identity)

    def _settle(
        self,
        identity: Identity,
        handle: PendingHandle[Any],
        *,
        error: BaseException,
    ) -> None:
        with self._state_lock:
            if not handle.done():
                handle.set_exception(error)
            self._pending.discard(identity, handle)

    def _find_wait_path(
        self,
        identity: Identity,
        chain: tuple[Identity, ...],
    ) -> tuple[Identity, ...] | None:
        """Follow in-flight waits from ``identity`` back into ``chain``.

        Returns the identities visited, starting with ``identity`` and ending
        with the member of ``chain`` that was reached, or ``None`` when waiting
        for ``identity`` cannot depend on this chain.
        """
        on_chain = set(chain)
        seen = {identity}
        paths: list[tuple[Identity, ...]] = [(identity,)]
        while paths:
            path = paths.pop()
            for waited in self._waits.get(path[-1], ()):
                if waited in on_chain:
                    return (*path, waited)
                if waited not in seen:
                    seen.add(waited)
                    paths.append((*path, waited))
        return None

    def _stop_waiting(self, waiter: Identity, identity: Identity) -> None:
        with self._state_lock:
            waited = self._waits.get(waiter)
            if waited is None:
                return
            if identity in waited:
                waited.remove(identity)
            if not waited:
                del self._waits[waiter]

    async def wait_pending_initializations(self) -> None:
        """Wait until every construction in flight right now has settled.

        Useful as a fence before proceeding when the caller does not want to
        request each instance itself.

        Raises:
            BaseException: The first failure among the awaited constructions,
                after all of them settled.

        """
        with self._state_lock:
            handles = self._pending.snapshot()
        if not handles:
            return

        outcomes = await asyncio.gather(
            *(wait_handle(handle) for handle in handles),
            return_exceptions=True,
        )
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome

    # endregion Resolution Methods

    def is_registered(
        self,
        type_tag: Any,
        *,
        key: str | None = None,
        instance: Any = MISSING,
    ) -> bool:
        """Return whether an identity is registered.

        When ``instance`` is given the check is narrowed to entries whose cached
        singleton is that very object.
        """
        entry = self._entries.get(Identity(type_tag, key))
        if entry is None:
            return False
        if instance is not MISSING:
            return entry.has_instance and entry.instance is instance
        return True

    def reset(self) -> None:
        """Drop all registrations, keys and in-flight bookkeeping.

        Intended for test suites only. Constructions already running finish and
        hand their result to the callers waiting on them, but nothing is cached.
        """
        with self._state_lock:
            self._entries.clear()
            self._keys.clear()
            self._pending.clear()
            self._waits.clear()
        clear_resolution_chain()
        logger.debug("Locator reset")
