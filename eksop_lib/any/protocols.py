"""
Protocol definitions for eksop-lib.

These protocols define the contracts that external collaborators must satisfy.
They let the resolver and the teardown coordinator be wired with real adapters in the
controller and with fakes in tests.

All protocols follow PEP 544 (Structural Subtyping / Protocol).
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from eksop_lib.any.context import ReconcileContext
    from eksop_lib.config.schemas import AWSCredentials, ClientConfig, SecretRecord


@runtime_checkable
class SecretLookup(Protocol):
    """
    Protocol for reading Kubernetes secrets by namespace and name.

    Implementations:
    - k8s/secrets.py - KubectlSecretLookup, reads through kubectl
    """

    def get(self, ctx: "ReconcileContext", namespace: str, name: str) -> "SecretRecord":
        """
        Fetch a secret.

        Args:
        ----
            ctx: Reconcile context (checked before the lookup starts)
            namespace: Secret namespace ("" means the implementation's default namespace)
            name: Secret name

        Returns:
        -------
            SecretRecord with raw (decoded) byte values

        Raises:
        ------
            SecretNotFoundError: If the secret does not exist
            ReconcileCancelledError: If the context is cancelled or expired

        """
        ...


@runtime_checkable
class CredentialsProvider(Protocol):
    """
    Protocol for AWS credential capabilities.

    Implementations:
    - config/credentials.py - StaticCredentialsProvider (fixed key pair from a secret)
    - config/credentials.py - DefaultChainCredentialsProvider (botocore discovery chain)

    A rotating implementation only needs to return fresh values from ``provide_credentials``;
    nothing that consumes a ClientConfig has to change.
    """

    def provide_credentials(self) -> "AWSCredentials":
        """
        Return the access key pair to sign requests with.

        Raises
        ------
            botocore.exceptions.NoCredentialsError: If no credentials can be found

        """
        ...


@runtime_checkable
class DefaultConfigResolver(Protocol):
    """
    Protocol for the ambient AWS region/credential discovery chain.

    Implementations:
    - config/defaults.py - BotocoreDefaultConfigResolver

    Injected into the CredentialResolver so tests never depend on real environment
    variables, shared config files or instance metadata.
    """

    def load(self, ctx: "ReconcileContext") -> "ClientConfig":
        """
        Build the baseline configuration.

        Raises
        ------
            ConfigLoadError: If the baseline cannot be established

        """
        ...
