from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from autolocator.identity import Identity

# The chain is an immutable tuple. Tasks started while it is set copy the
# context, so every descendant sees its ancestors and extends only its own copy.
_resolution_chain: ContextVar[tuple[Identity, ...]] = ContextVar(
    "autolocator_resolution_chain",
    default=(),
)


def current_chain() -> tuple[Identity, ...]:
    """Return the identities being built on this logical chain, outermost first."""
    return _resolution_chain.get()


@contextmanager
def resolving(identity: Identity) -> Iterator[tuple[Identity, ...]]:
    """Extend the chain with ``identity`` for the duration of the block."""
    chain = (*_resolution_chain.get(), identity)
    token = _resolution_chain.set(chain)
    try:
        yield chain
    finally:
        _resolution_chain.reset(token)


def clear_resolution_chain() -> None:
    _resolution_chain.set(())
