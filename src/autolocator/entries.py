from __future__ import annotations

import dataclasses
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, TypeAlias, TypeVar, overload

T = TypeVar("T")


class Lifetime(str, Enum):
    """Defines how long an instance produced by a factory is kept."""

    SINGLETON = "singleton"
    """The first successfully produced instance is cached and shared."""

    FACTORY = "factory"
    """The factory runs again for every ``get`` call."""


class Getter(Protocol):
    """Accessor handed to factories to resolve other registrations."""

    @overload
    def __call__(self, type_tag: type[T], *, key: str | None = None) -> Awaitable[T]: ...

    @overload
    def __call__(self, type_tag: Any, *, key: str | None = None) -> Awaitable[Any]: ...

    def __call__(self, type_tag: Any, *, key: str | None = None) -> Awaitable[Any]: ...


FactoryResult: TypeAlias = Any | Awaitable[Any]
"""Return type for factories: a plain value or an awaitable producing it."""

Factory: TypeAlias = Callable[[Getter], FactoryResult]
"""A callable receiving the locator accessor and producing an instance."""


class _Missing:
    """Sentinel type for an entry without a cached instance."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


@dataclass(frozen=True, slots=True)
class ServiceEntry:
    """Registered factory with its lifetime and, for singletons, the cached instance.

    ``None`` is a valid instance, so an absent cache is represented by
    ``MISSING``.
    """

    factory: Factory
    lifetime: Lifetime
    instance: Any = MISSING

    @property
    def is_singleton(self) -> bool:
        return self.lifetime is Lifetime.SINGLETON

    @property
    def has_instance(self) -> bool:
        return self.instance is not MISSING

    def with_instance(self, instance: Any) -> ServiceEntry:
        """Return a copy of a singleton entry carrying ``instance`` as its cache."""
        if not self.is_singleton:
            msg = "Only singleton entries can cache an instance."
            raise ValueError(msg)
        if self.has_instance:
            msg = "The entry already caches an instance."
            raise ValueError(msg)
        return dataclasses.replace(self, instance=instance)
