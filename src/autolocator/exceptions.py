from __future__ import annotations

from collections.abc import Sequence

from autolocator.identity import Identity, format_chain


class AutoLocatorError(Exception):
    """Represent a base class for all autolocator-specific failures.

    Catch this type when you want to handle any locator error path without
    matching each concrete exception class individually. Errors raised by
    user factories are never wrapped in this type.
    """


class AutoLocatorInvalidRegistrationError(AutoLocatorError):
    """Signal invalid arguments passed to a registration method.

    Raised by ``ServiceLocator.register_singleton`` and
    ``ServiceLocator.register_factory`` when the factory is not callable.
    """


class AutoLocatorAlreadyRegisteredError(AutoLocatorError):
    """Signal a registration for an identity that already has an entry.

    Raised by ``register_singleton``/``register_factory`` while
    ``allow_reassignment`` is disabled.

    Typical fixes include calling ``unregister`` first, registering under a
    distinct key, or enabling ``allow_reassignment`` in test suites.
    """

    def __init__(self, identity: Identity) -> None:
        self.identity = identity
        prefix = f"The Key {identity.key} with " if identity.key else ""
        super().__init__(
            f"{prefix}Type {identity.type_name} is already registered. "
            "Unregister it before trying to register this type again.",
        )


class AutoLocatorKeyAlreadyRegisteredError(AutoLocatorError):
    """Signal a key that is already bound to a different identity.

    Keys are unique across the whole locator, independent of the type they are
    paired with.
    """

    def __init__(self, key: str, identity: Identity) -> None:
        self.key = key
        self.identity = identity
        super().__init__(
            f"The Key {key} is already registered for {identity}. "
            "Unregister it before trying to register it again.",
        )


class AutoLocatorNotRegisteredError(AutoLocatorError):
    """Signal an unregister call for something that has no entry.

    Raised by ``unregister`` when the identity is absent and by
    ``unregister_instance`` when no cached singleton matches the instance.
    Unregistering something that was never registered is likely a bug.
    """

    def __init__(self, identity: Identity) -> None:
        self.identity = identity
        prefix = f"The Key {identity.key} with " if identity.key else ""
        super().__init__(
            f"{prefix}Type {identity.type_name} was not registered. "
            "Unregister expects the type to be already registered.",
        )


class AutoLocatorNotFoundError(AutoLocatorError):
    """Signal a ``get`` for an identity without a registration.

    Typical fix is registering the type (and key, when used) before the first
    request, or checking the key spelling.
    """

    def __init__(self, identity: Identity) -> None:
        self.identity = identity
        prefix = f"The Key {identity.key} with t" if identity.key else "T"
        super().__init__(
            f"{prefix}he type {identity.type_name} was not registered. "
            "You need to register the type or key before you can use it.",
        )


class AutoLocatorCircularDependencyError(AutoLocatorError):
    """Signal a factory chain that requests an identity already under construction.

    ``chain`` lists the identities from the outermost request to the repeated
    one, so its first and last elements name the same slot only when the cycle
    starts at the top-level request.
    """

    def __init__(self, chain: Sequence[Identity]) -> None:
        self.chain = tuple(chain)
        self.identity = self.chain[-1]
        key = self.identity.key
        for_key = f" for Key {key}" if key else ""
        super().__init__(
            f"Circular dependency detected{for_key}. "
            f"Dependency resolution chain: {format_chain(self.chain)}",
        )


class AutoLocatorRegistrationOverriddenError(AutoLocatorError):
    """Signal that an in-flight resolution lost its registration.

    Delivered to every caller waiting on a resolution when the identity is
    registered again or unregistered before the factory settled. Request the
    identity again to get an instance from the current registration.
    """

    def __init__(self, identity: Identity) -> None:
        self.identity = identity
        prefix = f"The Key {identity.key} with t" if identity.key else "T"
        super().__init__(
            f"{prefix}he type {identity.type_name} was registered again, but the old "
            "instance was still initializing, and the initialization was aborted.",
        )
