from __future__ import annotations

from collections.abc import Iterable
from typing import Any, NamedTuple


class Identity(NamedTuple):
    """Name one registration slot in a ``ServiceLocator``.

    Two identities are the same slot when both the type tag and the key are
    equal. The type tag is usually a class but any hashable value works, which
    lets callers use ``typing.NewType`` aliases or plain strings as
    discriminators.

    Examples:
        .. code-block:: python

            Identity(Database)
            Identity(Database, "replica")

    """

    type_tag: Any
    key: str | None = None

    @property
    def type_name(self) -> str:
        return getattr(self.type_tag, "__qualname__", None) or repr(self.type_tag)

    def __str__(self) -> str:
        if not self.key:
            return self.type_name
        return f"{self.type_name}(key: {self.key})"


def format_chain(chain: Iterable[Identity]) -> str:
    """Render a resolution chain as ``A -> B(key: b) -> A``."""
    return " -> ".join(str(identity) for identity in chain)
