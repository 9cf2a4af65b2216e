"""Tests for ReconcileContext."""

import threading
import time
from unittest.mock import MagicMock, patch

import pytest

from eksop_lib.any.context import ReconcileContext, background, run_in_context
from eksop_lib.any.exceptions import ReconcileCancelledError


class TestReconcileContext:
    """Test cancellation and deadlines."""

    def test_background_never_expires(self):
        """Test a context without deadline."""
        ctx = background()

        assert ctx.deadline is None
        assert ctx.remaining() is None
        assert not ctx.expired()
        assert not ctx.cancelled
        ctx.check("describe stack")

    def test_cancel(self):
        """Test that cancel makes check() raise."""
        ctx = ReconcileContext()
        ctx.cancel()

        assert ctx.cancelled
        with pytest.raises(ReconcileCancelledError, match="describe stack: context cancelled"):
            ctx.check("describe stack")

    def test_cancel_from_other_thread(self):
        """Test that cancellation is visible across threads."""
        ctx = ReconcileContext()

        thread = threading.Thread(target=ctx.cancel)
        thread.start()
        thread.join()

        assert ctx.cancelled

    @patch("eksop_lib.any.context.time.monotonic")
    def test_deadline_exceeded(self, mock_monotonic):
        """Test that check() raises once the deadline passes."""
        mock_monotonic.return_value = 100.0
        ctx = ReconcileContext(timeout=5)

        assert ctx.remaining() == 5.0
        ctx.check("delete stack")

        mock_monotonic.return_value = 106.0

        assert ctx.remaining() == 0.0
        assert ctx.expired()
        with pytest.raises(ReconcileCancelledError, match="delete stack: context deadline exceeded"):
            ctx.check("delete stack")

    def test_zero_timeout_is_expired(self):
        """Test that a zero timeout expires immediately."""
        assert ReconcileContext(timeout=0).expired()

    def test_child_cancelled_with_parent(self):
        """Test cancel propagation to children."""
        parent = ReconcileContext()
        child = parent.child()

        parent.cancel()

        assert child.cancelled

    def test_child_cancel_does_not_affect_parent(self):
        """Test that cancelling a child leaves the parent usable."""
        parent = ReconcileContext()
        child = parent.child()

        child.cancel()

        assert not parent.cancelled

    @patch("eksop_lib.any.context.time.monotonic")
    def test_child_takes_earlier_deadline(self, mock_monotonic):
        """Test that the tighter of parent and child deadlines applies."""
        mock_monotonic.return_value = 0.0
        parent = ReconcileContext(timeout=10)

        assert parent.child(timeout=30).deadline == 10.0
        assert parent.child(timeout=3).deadline == 3.0
        assert parent.child().deadline == 10.0

    def test_repr(self):
        """Test string representation."""
        assert repr(ReconcileContext()) == "ReconcileContext(cancelled=False, remaining=None)"


class TestRunInContext:
    """Test blocking calls bounded by a context."""

    def test_returns_result(self, ctx):
        """Test that the call's return value is passed through."""
        fn = MagicMock(return_value={"Stacks": []})

        assert run_in_context(ctx, "describe stack x", fn, StackName="x") == {"Stacks": []}
        fn.assert_called_once_with(StackName="x")

    def test_propagates_exceptions(self, ctx):
        """Test that errors raised by the call reach the caller."""
        fn = MagicMock(side_effect=RuntimeError("boom"))

        with pytest.raises(RuntimeError, match="boom"):
            run_in_context(ctx, "delete stack x", fn)

    def test_timeout_error_from_call_not_mistaken_for_polling(self, ctx):
        """Test that a TimeoutError raised by the call propagates promptly."""
        fn = MagicMock(side_effect=TimeoutError("socket timed out"))

        with pytest.raises(TimeoutError, match="socket timed out"):
            run_in_context(ctx, "delete stack x", fn)

    def test_cancelled_context_never_calls(self, cancelled_ctx):
        """Test that nothing runs on a cancelled context."""
        fn = MagicMock()

        with pytest.raises(ReconcileCancelledError):
            run_in_context(cancelled_ctx, "describe stack x", fn)

        fn.assert_not_called()

    def test_cancel_while_blocked(self, ctx, blocking_call):
        """Test that cancelling from another thread releases the caller."""
        blocking_call.cancel_once_started(ctx)

        start = time.monotonic()
        with pytest.raises(ReconcileCancelledError, match="describe stack x: context cancelled"):
            run_in_context(ctx, "describe stack x", blocking_call)

        assert time.monotonic() - start < 5

    def test_deadline_while_blocked(self, blocking_call):
        """Test that the deadline passing releases the caller."""
        with pytest.raises(ReconcileCancelledError, match="deadline exceeded"):
            run_in_context(ReconcileContext(timeout=0.2), "describe stack x", blocking_call)
