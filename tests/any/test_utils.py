"""Tests for eksop-lib utility functions."""

import subprocess
import sys
import threading
import time
from unittest.mock import patch

import pytest
from botocore.exceptions import ClientError

from eksop_lib.any.context import ReconcileContext
from eksop_lib.any.exceptions import (
    EKSOpConfigurationError,
    ReconcileCancelledError,
    StackDeletionError,
    StackNotFoundError,
)
from eksop_lib.any.utils import does_not_exist, parse_secret_ref, run_command


class TestRunCommand:
    """Test run_command."""

    @patch("eksop_lib.any.utils.subprocess.run")
    def test_runs_with_defaults(self, mock_run):
        """Test default arguments passed to subprocess.run."""
        run_command(["kubectl", "version"])

        args, kwargs = mock_run.call_args
        assert args[0] == ["kubectl", "version"]
        assert kwargs["capture_output"] is True
        assert kwargs["text"] is True
        assert kwargs["check"] is True
        assert kwargs["timeout"] is None

    @patch("eksop_lib.any.utils.subprocess.run")
    def test_env_merged_with_environ(self, mock_run, monkeypatch):
        """Test that extra environment variables are merged."""
        monkeypatch.setenv("EKSOP_EXISTING", "1")

        run_command(["kubectl", "version"], env={"KUBECONFIG": "/tmp/kubeconfig"})

        env = mock_run.call_args.kwargs["env"]
        assert env["KUBECONFIG"] == "/tmp/kubeconfig"
        assert env["EKSOP_EXISTING"] == "1"

    @patch("eksop_lib.any.utils.subprocess.run")
    def test_failure_propagates(self, mock_run):
        """Test that CalledProcessError is not swallowed."""
        mock_run.side_effect = subprocess.CalledProcessError(1, ["kubectl"])

        with pytest.raises(subprocess.CalledProcessError):
            run_command(["kubectl", "get", "secret", "x"])


class TestRunCommandInContext:
    """Test run_command bounded by a reconcile context."""

    def test_captures_output(self, ctx):
        """Test a successful command."""
        result = run_command([sys.executable, "-c", "print('ok')"], ctx=ctx)

        assert result.returncode == 0
        assert result.stdout.strip() == "ok"

    def test_failure_raises(self, ctx):
        """Test that a non-zero exit raises CalledProcessError with stderr."""
        cmd = [sys.executable, "-c", "import sys; sys.stderr.write('NotFound'); sys.exit(3)"]

        with pytest.raises(subprocess.CalledProcessError) as exc_info:
            run_command(cmd, ctx=ctx)

        assert exc_info.value.returncode == 3
        assert "NotFound" in exc_info.value.stderr

    def test_failure_unchecked(self, ctx):
        """Test check=False returns the failed process."""
        result = run_command([sys.executable, "-c", "import sys; sys.exit(2)"], check=False, ctx=ctx)

        assert result.returncode == 2

    def test_cancel_kills_running_command(self, ctx):
        """Test that cancelling mid-run kills the command promptly."""
        threading.Timer(0.2, ctx.cancel).start()

        start = time.monotonic()
        with pytest.raises(ReconcileCancelledError, match="context cancelled"):
            run_command([sys.executable, "-c", "import time; time.sleep(30)"], ctx=ctx)

        assert time.monotonic() - start < 10

    def test_deadline_kills_running_command(self):
        """Test that the context deadline kills the command."""
        start = time.monotonic()
        with pytest.raises(ReconcileCancelledError, match="deadline exceeded"):
            run_command([sys.executable, "-c", "import time; time.sleep(30)"], ctx=ReconcileContext(timeout=0.3))

        assert time.monotonic() - start < 10

    @patch("eksop_lib.any.utils.subprocess.Popen")
    def test_cancelled_context_never_starts(self, mock_popen, cancelled_ctx):
        """Test that nothing is spawned on a cancelled context."""
        with pytest.raises(ReconcileCancelledError):
            run_command(["kubectl", "version"], ctx=cancelled_ctx)

        mock_popen.assert_not_called()


class TestParseSecretRef:
    """Test parse_secret_ref."""

    def test_namespace_and_name(self):
        """Test the namespace/name form."""
        assert parse_secret_ref("cattle-global-data/cc-abc12") == ("cattle-global-data", "cc-abc12")

    def test_bare_name(self):
        """Test that a bare name has an empty namespace."""
        assert parse_secret_ref("cc-abc12") == ("", "cc-abc12")

    def test_surrounding_whitespace(self):
        """Test that whitespace is stripped."""
        assert parse_secret_ref("  ns/creds \n") == ("ns", "creds")

    def test_only_first_separator_splits(self):
        """Test that the name keeps further separators."""
        assert parse_secret_ref("ns/a/b") == ("ns", "a/b")

    @pytest.mark.parametrize("ref", ["", "   ", "/creds", "ns/"])
    def test_invalid_refs(self, ref):
        """Test that malformed references are rejected."""
        with pytest.raises(EKSOpConfigurationError):
            parse_secret_ref(ref)


class TestDoesNotExist:
    """Test does_not_exist."""

    def test_stack_not_found(self):
        """Test the typed adapter error."""
        assert does_not_exist(StackNotFoundError("prod-eu-eks-vpc"))

    def test_cloudformation_validation_error(self):
        """Test the raw CloudFormation missing-stack error."""
        error = ClientError(
            {"Error": {"Code": "ValidationError", "Message": "Stack with id prod-eu-eks-vpc does not exist"}},
            "DescribeStacks",
        )

        assert does_not_exist(error)

    def test_other_client_error(self):
        """Test that other provider errors are not treated as absence."""
        error = ClientError({"Error": {"Code": "AccessDenied", "Message": "not authorized"}}, "DeleteStack")

        assert not does_not_exist(error)

    def test_unrelated_errors(self):
        """Test None and non-provider errors."""
        assert not does_not_exist(None)
        assert not does_not_exist(ValueError("does not exist"))
        assert not does_not_exist(StackDeletionError("x", RuntimeError("boom")))
