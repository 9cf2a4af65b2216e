"""Utility functions for eksop-lib."""

import contextlib
import os
import signal
import subprocess

import structlog
from botocore.exceptions import ClientError

from eksop_lib.any.context import POLL_INTERVAL, ReconcileContext
from eksop_lib.any.exceptions import EKSOpConfigurationError, ReconcileCancelledError, ResourceNotFoundError

LOGGER = structlog.get_logger("eksop_lib.utils")

SECRET_REF_SEPARATOR = "/"


def run_command(
    cmd: list[str],
    check: bool = True,
    capture: bool = True,
    env: dict[str, str] | None = None,
    timeout: float | None = None,
    ctx: ReconcileContext | None = None,
    poll_interval: float = POLL_INTERVAL,
) -> subprocess.CompletedProcess:
    """
    Run a shell command with consistent handling.

    With a ``ctx`` the command is polled and killed as soon as the context is cancelled
    or its deadline passes.

    Args:
    ----
        cmd: Command and arguments as a list
        check: If True, raise CalledProcessError on non-zero exit
        capture: If True, capture stdout/stderr
        env: Optional environment variables (merged with os.environ)
        timeout: Optional timeout in seconds (with ctx, the context deadline applies instead)
        ctx: Optional reconcile context bounding the command
        poll_interval: Seconds between context checks

    Returns:
    -------
        CompletedProcess instance with returncode, stdout, stderr

    Raises:
    ------
        subprocess.CalledProcessError: If check=True and command fails
        subprocess.TimeoutExpired: If timeout is exceeded
        ReconcileCancelledError: If ctx is cancelled or expires while the command runs

    Example:
    -------
        ```python
        from eksop_lib.any.utils import run_command

        result = run_command(["kubectl", "get", "secret", "cc-abc", "-n", "cattle-global-data", "-o", "json"])
        print(result.stdout)
        ```

    """
    command_env = os.environ.copy()
    if env:
        command_env.update(env)

    LOGGER.debug(f"Running command: {' '.join(cmd)}")

    if ctx is None:
        return subprocess.run(
            cmd,
            capture_output=capture,
            text=True,
            check=check,
            env=command_env,
            timeout=timeout,
        )

    operation = f"run {cmd[0]}"
    ctx.check(operation)

    pipe = subprocess.PIPE if capture else None
    process = subprocess.Popen(
        cmd,
        stdout=pipe,
        stderr=pipe,
        text=True,
        env=command_env,
        start_new_session=os.name == "posix",
    )
    while True:
        try:
            stdout, stderr = process.communicate(timeout=poll_interval)
            break
        except subprocess.TimeoutExpired:
            try:
                ctx.check(operation)
            except ReconcileCancelledError:
                LOGGER.debug(f"Killing {cmd[0]} (pid {process.pid})")
                _kill_process_tree(process)
                raise

    if check and process.returncode != 0:
        raise subprocess.CalledProcessError(process.returncode, cmd, output=stdout, stderr=stderr)
    return subprocess.CompletedProcess(cmd, process.returncode, stdout, stderr)


def _kill_process_tree(process: subprocess.Popen) -> None:
    """Kill a process started in its own session together with its children."""
    if os.name == "posix":
        with contextlib.suppress(ProcessLookupError):
            os.killpg(process.pid, signal.SIGKILL)
    else:
        process.kill()
    process.wait()
    # Orphaned children may still hold the pipes
    for stream in (process.stdout, process.stderr):
        if stream is not None:
            stream.close()


def parse_secret_ref(ref: str) -> tuple[str, str]:
    """
    Split a credential secret reference into (namespace, name).

    References follow the ``namespace/name`` convention. A bare ``name`` yields an empty
    namespace, which secret lookups resolve to their own default namespace.

    Raises
    ------
        EKSOpConfigurationError: If the reference is empty or either part is blank

    Example:
    -------
        >>> parse_secret_ref("cattle-global-data/cc-abc")
        ('cattle-global-data', 'cc-abc')
        >>> parse_secret_ref("cc-abc")
        ('', 'cc-abc')

    """
    ref = ref.strip()
    if not ref:
        raise EKSOpConfigurationError("Credential secret reference is empty")

    if SECRET_REF_SEPARATOR not in ref:
        return "", ref

    namespace, name = ref.split(SECRET_REF_SEPARATOR, 1)
    if not namespace or not name:
        raise EKSOpConfigurationError(
            f"Invalid credential secret reference '{ref}'\n" f"Expected format: namespace{SECRET_REF_SEPARATOR}name"
        )
    return namespace, name


def does_not_exist(error: BaseException | None) -> bool:
    """
    Report whether ``error`` is the recognized "resource does not exist" condition.

    Matches the typed ResourceNotFoundError family raised by the eksop adapters, and raw
    botocore ClientErrors whose message says the resource does not exist (CloudFormation
    reports a missing stack as a ValidationError with that text).
    """
    if error is None:
        return False
    if isinstance(error, ResourceNotFoundError):
        return True
    if isinstance(error, ClientError):
        return "does not exist" in str(error)
    return False
