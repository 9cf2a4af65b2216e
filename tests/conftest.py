"""Pytest configuration and fixtures for eksop-lib tests."""

import threading
from collections.abc import Callable, Iterator
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from eksop_lib.any.context import ReconcileContext
from eksop_lib.any.exceptions import StackNotFoundError
from eksop_lib.config.credentials import StaticCredentialsProvider
from eksop_lib.config.schemas import ACCESS_KEY_FIELD, SECRET_KEY_FIELD, ClientConfig, SecretRecord


class FakeStackClient:
    """In-memory InfraStackClient recording every call."""

    def __init__(self, stacks: set[str] | None = None, describe_error: Exception | None = None):
        self.stacks = set(stacks or ())
        self.describe_error = describe_error
        self.delete_error: Exception | None = None
        self.calls: list[tuple[str, str]] = []

    def describe_stack(self, ctx: ReconcileContext, stack_name: str) -> dict:
        self.calls.append(("describe", stack_name))
        if self.describe_error is not None:
            raise self.describe_error
        if stack_name not in self.stacks:
            raise StackNotFoundError(stack_name)
        return {"StackName": stack_name, "StackStatus": "CREATE_COMPLETE"}

    def delete_stack(self, ctx: ReconcileContext, stack_name: str) -> None:
        self.calls.append(("delete", stack_name))
        if self.delete_error is not None:
            raise self.delete_error
        if stack_name not in self.stacks:
            raise StackNotFoundError(stack_name)
        self.stacks.discard(stack_name)

    @property
    def deleted(self) -> list[str]:
        return [name for op, name in self.calls if op == "delete"]


class BlockingCall:
    """Stand-in for a slow provider call that blocks until released."""

    def __init__(self, result: object = None):
        self.result = result
        self.started = threading.Event()
        self.released = threading.Event()

    def __call__(self, *args, **kwargs):
        self.started.set()
        self.released.wait(timeout=10)
        return self.result

    def cancel_once_started(self, context: ReconcileContext) -> threading.Thread:
        """Cancel ``context`` from another thread as soon as the call is in flight."""

        def _cancel() -> None:
            if self.started.wait(timeout=5):
                context.cancel()

        thread = threading.Thread(target=_cancel, daemon=True)
        thread.start()
        return thread


def client_error(code: str, message: str, operation: str = "DescribeStacks") -> ClientError:
    """Build a botocore ClientError."""
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


@pytest.fixture
def ctx() -> ReconcileContext:
    """A live reconcile context without deadline."""
    return ReconcileContext()


@pytest.fixture
def cancelled_ctx() -> ReconcileContext:
    """A cancelled reconcile context."""
    context = ReconcileContext()
    context.cancel()
    return context


@pytest.fixture
def ambient_credentials() -> StaticCredentialsProvider:
    """Credentials standing in for the ambient default chain."""
    return StaticCredentialsProvider("AKIAAMBIENT", "ambient-secret")


@pytest.fixture
def baseline_config(ambient_credentials) -> ClientConfig:
    """Ambient baseline configuration."""
    return ClientConfig(region="us-east-1", credentials=ambient_credentials)


@pytest.fixture
def default_resolver(baseline_config) -> MagicMock:
    """DefaultConfigResolver returning the baseline."""
    resolver = MagicMock()
    resolver.load.return_value = baseline_config
    return resolver


@pytest.fixture
def make_secret() -> Callable[..., SecretRecord]:
    """Factory for credential secrets."""

    def _make(
        access_key: bytes | None = b"AKIASECRET",
        secret_key: bytes | None = b"secret-from-store",
        namespace: str = "cattle-global-data",
        name: str = "cc-abc12",
    ) -> SecretRecord:
        data = {}
        if access_key is not None:
            data[ACCESS_KEY_FIELD] = access_key
        if secret_key is not None:
            data[SECRET_KEY_FIELD] = secret_key
        return SecretRecord(namespace=namespace, name=name, data=data)

    return _make


@pytest.fixture
def secret_lookup(make_secret) -> MagicMock:
    """SecretLookup returning a complete credential secret."""
    lookup = MagicMock()
    lookup.get.return_value = make_secret()
    return lookup


@pytest.fixture
def stack_client() -> FakeStackClient:
    """Empty in-memory stack client."""
    return FakeStackClient()


@pytest.fixture
def blocking_call() -> Iterator[BlockingCall]:
    """A blocking provider call, released at teardown."""
    call = BlockingCall()
    yield call
    call.released.set()
