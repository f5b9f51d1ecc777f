"""Optimistic mutation protocol.

Every client-side change that needs server confirmation runs the same steps
against a ``StateCell``:

1. Snapshot the current value (by reference; values are immutable).
2. Propose: publish ``propose(snapshot)`` right away.
3. Submit the request. This is the only suspension point.
4. On success, publish ``reconcile(current, result)``. This is applied to
   whatever the cell holds *now*, which may include other mutations.
5. On failure, restore the snapshot and raise ``MutationFailedError``.
6. Settle: run a refresh whose own failure is logged and swallowed.

Two mutations touching the same node are not merged; the later write wins
and the settle refresh converges the cache.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import logfire

from discuss.application.cache import StateCell
from discuss.domain.error import MutationFailedError

T = TypeVar("T")
R = TypeVar("R")


async def settle(refresh: Callable[[], Awaitable[object]], operation: str) -> None:
    """Run a best-effort refresh, logging instead of raising on failure."""
    try:
        await refresh()
    except Exception as e:
        logfire.warn(
            "Settle refresh failed",
            operation=operation,
            error=str(e),
            error_type=type(e).__name__,
        )


async def run_optimistic(
    cell: StateCell[T],
    *,
    operation: str,
    propose: Callable[[T], T],
    submit: Callable[[], Awaitable[R]],
    reconcile: Callable[[T, R], T],
    refresh: Callable[[], Awaitable[object]] | None = None,
    failure_message: str,
) -> R:
    """Apply a change locally, confirm it with the server, then settle.

    Args:
        cell: Cache cell to mutate
        operation: Name used in logs and errors
        propose: Pure function producing the optimistic value
        submit: Sends the request; may raise
        reconcile: Pure function folding the server result into the cell
        refresh: Best-effort refetch run after reconcile or rollback
        failure_message: Message shown to the user when submit fails

    Returns:
        The server result

    Raises:
        MutationFailedError: If propose or submit fails; the cell holds the
            snapshot again
    """
    snapshot = cell.value

    try:
        try:
            cell.set(propose(snapshot))
            result = await submit()
        except asyncio.CancelledError:
            cell.set(snapshot)
            raise
        except Exception as e:
            cell.set(snapshot)
            logfire.error(
                "Optimistic mutation rolled back",
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise MutationFailedError(failure_message, operation) from e

        cell.set(reconcile(cell.value, result))
        logfire.info("Optimistic mutation reconciled", operation=operation)
        return result
    finally:
        if refresh is not None:
            await settle(refresh, operation)
