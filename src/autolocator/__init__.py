from autolocator.entries import Factory, Getter, Lifetime, ServiceEntry
from autolocator.exceptions import (
    AutoLocatorAlreadyRegisteredError,
    AutoLocatorCircularDependencyError,
    AutoLocatorError,
    AutoLocatorInvalidRegistrationError,
    AutoLocatorKeyAlreadyRegisteredError,
    AutoLocatorNotFoundError,
    AutoLocatorNotRegisteredError,
    AutoLocatorRegistrationOverriddenError,
)
from autolocator.identity import Identity
from autolocator.locator import ServiceLocator

__all__ = [
    "AutoLocatorAlreadyRegisteredError",
    "AutoLocatorCircularDependencyError",
    "AutoLocatorError",
    "AutoLocatorInvalidRegistrationError",
    "AutoLocatorKeyAlreadyRegisteredError",
    "AutoLocatorNotFoundError",
    "AutoLocatorNotRegisteredError",
    "AutoLocatorRegistrationOverriddenError",
    "Factory",
    "Getter",
    "Identity",
    "Lifetime",
    "ServiceEntry",
    "ServiceLocator",
]
