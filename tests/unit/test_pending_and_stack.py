from __future__ import annotations

import asyncio

import pytest

from autolocator.identity import Identity
from autolocator.pending import PendingInitializations, wait_handle
from autolocator.resolution_stack import clear_resolution_chain, current_chain, resolving

A = Identity("a")
B = Identity("b")


class TestPendingInitializations:
    def test_one_handle_per_identity(self) -> None:
        pending = PendingInitializations()
        handle = pending.create(A)

        assert pending.get(A) is handle
        assert A in pending
        with pytest.raises(RuntimeError, match="already exists"):
            pending.create(A)

    def test_handles_cannot_be_cancelled(self) -> None:
        pending = PendingInitializations()
        handle = pending.create(A)

        assert not handle.cancel()
        assert not handle.done()

    def test_discard_ignores_replaced_handle(self) -> None:
        pending = PendingInitializations()
        stale = pending.create(A)
        pending.abort(A, RuntimeError("stale"))
        fresh = pending.create(A)

        pending.discard(A, stale)

        assert pending.get(A) is fresh
        pending.discard(A, fresh)
        assert len(pending) == 0

    def test_abort_fails_and_removes_handle(self) -> None:
        pending = PendingInitializations()
        handle = pending.create(A)
        error = RuntimeError("aborted")

        assert pending.abort(A, error)
        assert not pending.abort(A, error)
        assert handle.exception() is error
        assert pending.get(A) is None

    async def test_wait_handle_returns_result(self) -> None:
        pending = PendingInitializations()
        handle = pending.create(A)
        waiter = asyncio.create_task(wait_handle(handle))
        await asyncio.sleep(0)

        handle.set_result(42)

        assert await waiter == 42

    def test_snapshot_and_clear(self) -> None:
        pending = PendingInitializations()
        first = pending.create(A)
        second = pending.create(B)

        assert pending.snapshot() == [first, second]
        pending.clear()
        assert pending.snapshot() == []


class TestResolutionChain:
    async def test_resolving_extends_and_restores(self) -> None:
        with resolving(A) as chain:
            assert chain == (A,)
            with resolving(B) as nested:
                assert nested == (A, B)
                assert current_chain() == (A, B)
            assert current_chain() == (A,)
        assert current_chain() == ()

    async def test_restores_on_error(self) -> None:
        with pytest.raises(ValueError, match="boom"), resolving(A):
            raise ValueError("boom")

        assert current_chain() == ()

    async def test_child_task_extends_its_own_copy(self) -> None:
        async def child() -> tuple[Identity, ...]:
            with resolving(B) as chain:
                return chain

        with resolving(A):
            child_chain = await asyncio.create_task(child())
            assert current_chain() == (A,)

        assert child_chain == (A, B)

    async def test_clear_tolerates_open_blocks(self) -> None:
        with resolving(A):
            clear_resolution_chain()
            assert current_chain() == ()
        assert current_chain() == ()
