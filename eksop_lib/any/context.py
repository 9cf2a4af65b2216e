"""
Reconcile context for eksop-lib.

A ReconcileContext is created by the caller for each reconcile cycle and threaded through
every call that reaches an external system (secret lookups, CloudFormation describe/delete).
It carries an optional deadline and a cancel flag. Operations call ``check()`` before
issuing I/O, and blocking calls go through ``run_in_context`` so a cycle cancelled
mid-call aborts promptly instead of hanging.
"""

import threading
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Any, TypeVar

from eksop_lib.any.exceptions import ReconcileCancelledError

T = TypeVar("T")

POLL_INTERVAL = 0.1


class ReconcileContext:
    """
    Cancellation and deadline carrier for one reconcile cycle.

    Example:
    -------
        ```python
        from eksop_lib.any.context import ReconcileContext

        ctx = ReconcileContext(timeout=30)
        config = resolver.resolve(ctx, spec)

        # From another thread (e.g. controller shutdown)
        ctx.cancel()
        ```

    """

    def __init__(self, timeout: float | None = None, parent: "ReconcileContext | None" = None):
        """
        Initialize a context.

        Args:
        ----
            timeout: Seconds until the deadline, or None for no deadline
            parent: Optional parent context; cancelling the parent cancels this context,
                    and the earlier of the two deadlines applies

        """
        self._cancelled = threading.Event()
        self._parent = parent

        deadline = time.monotonic() + timeout if timeout is not None else None
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self._deadline = deadline

    @property
    def deadline(self) -> float | None:
        """Absolute deadline on the ``time.monotonic()`` clock, or None."""
        return self._deadline

    def cancel(self) -> None:
        """Cancel this context (and every child derived from it)."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        """True once cancelled, directly or through the parent."""
        if self._cancelled.is_set():
            return True
        return self._parent is not None and self._parent.cancelled

    def remaining(self) -> float | None:
        """Seconds left before the deadline (never negative), or None without a deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def expired(self) -> bool:
        """True when a deadline is set and has passed."""
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def check(self, operation: str) -> None:
        """
        Raise if the context can no longer be used for ``operation``.

        Raises
        ------
            ReconcileCancelledError: If cancelled or past the deadline

        """
        if self.cancelled:
            raise ReconcileCancelledError(f"{operation}: context cancelled")
        if self.expired():
            raise ReconcileCancelledError(f"{operation}: context deadline exceeded")

    def child(self, timeout: float | None = None) -> "ReconcileContext":
        """Derive a context that is cancelled with this one and has an optional tighter deadline."""
        return ReconcileContext(timeout=timeout, parent=self)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"ReconcileContext(cancelled={self.cancelled}, remaining={self.remaining()})"


def background() -> ReconcileContext:
    """Return a fresh context with no deadline that is never cancelled unless asked to."""
    return ReconcileContext()


def run_in_context(
    ctx: ReconcileContext,
    operation: str,
    fn: Callable[..., T],
    *args: Any,
    poll_interval: float = POLL_INTERVAL,
    **kwargs: Any,
) -> T:
    """
    Run a blocking call so that cancelling ``ctx`` interrupts the wait for it.

    ``fn`` runs on a worker thread while the caller polls the context. When the context is
    cancelled or its deadline passes, ReconcileCancelledError is raised right away and the
    worker is abandoned; its result is discarded once it finishes.

    Args:
    ----
        ctx: Reconcile context
        operation: Operation name used in the cancellation message
        fn: Blocking callable (e.g. a boto3 client method)
        *args: Positional arguments for ``fn``
        poll_interval: Seconds between context checks
        **kwargs: Keyword arguments for ``fn``

    Returns:
    -------
        The value returned by ``fn``

    Raises:
    ------
        ReconcileCancelledError: If the context is cancelled before or during the call
        Exception: Whatever ``fn`` raises

    Example:
    -------
        >>> run_in_context(ctx, "describe stack prod-eu-eks-vpc", client.describe_stacks, StackName="prod-eu-eks-vpc")

    """
    ctx.check(operation)

    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="eksop-call")
    try:
        future = executor.submit(fn, *args, **kwargs)
        while True:
            try:
                return future.result(timeout=poll_interval)
            except FuturesTimeoutError:
                # fn itself may raise TimeoutError
                if future.done():
                    raise
                ctx.check(operation)
    finally:
        executor.shutdown(wait=False)
