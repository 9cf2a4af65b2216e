"""
Credential and region resolution for EKS cluster configs.

Turns an EKSClusterConfig spec plus the Kubernetes secret store into the ClientConfig
every AWS service client of a reconcile cycle is built from:

1. Start from the ambient baseline (DefaultConfigResolver)
2. Override the region when the spec names one
3. When the spec references a credential secret, replace the baseline credentials
   wholesale with the static key pair stored in that secret

Region and credential overrides are independent: the region override always applies,
while the credential override is all-or-nothing.
"""

import structlog

from eksop_lib.any.context import ReconcileContext
from eksop_lib.any.exceptions import (
    InvalidCredentialError,
    ReconcileCancelledError,
    SecretLookupError,
)
from eksop_lib.any.protocols import DefaultConfigResolver, SecretLookup
from eksop_lib.any.utils import parse_secret_ref
from eksop_lib.config.credentials import StaticCredentialsProvider
from eksop_lib.config.schemas import ACCESS_KEY_FIELD, SECRET_KEY_FIELD, ClientConfig, ClusterConfigSpec

LOGGER = structlog.get_logger("eksop_lib.config.resolver")


class CredentialResolver:
    """
    Resolves the AWS ClientConfig for a cluster spec.

    Example:
    -------
        ```python
        from eksop_lib.any.context import ReconcileContext
        from eksop_lib.config.resolver import CredentialResolver
        from eksop_lib.k8s.secrets import KubectlSecretLookup

        resolver = CredentialResolver(secrets=KubectlSecretLookup())
        config = resolver.resolve(ReconcileContext(timeout=30), spec)
        ```

    """

    def __init__(
        self,
        secrets: SecretLookup,
        default_resolver: DefaultConfigResolver | None = None,
        access_key_field: str = ACCESS_KEY_FIELD,
        secret_key_field: str = SECRET_KEY_FIELD,
    ) -> None:
        """
        Initialize resolver.

        Args:
        ----
            secrets: SecretLookup used when the spec references a credential secret
            default_resolver: Ambient baseline (defaults to BotocoreDefaultConfigResolver)
            access_key_field: Secret data key holding the access key id
            secret_key_field: Secret data key holding the secret access key

        """
        if default_resolver is None:
            from eksop_lib.config.defaults import BotocoreDefaultConfigResolver

            default_resolver = BotocoreDefaultConfigResolver()

        self._secrets = secrets
        self._default_resolver = default_resolver
        self._access_key_field = access_key_field
        self._secret_key_field = secret_key_field

    def resolve(self, ctx: ReconcileContext, spec: ClusterConfigSpec) -> ClientConfig:
        """
        Resolve the client configuration for ``spec``.

        Args:
        ----
            ctx: Reconcile context
            spec: Cluster config spec

        Returns:
        -------
            ClientConfig with region and credential provider resolved

        Raises:
        ------
            ConfigLoadError: If the ambient baseline cannot be loaded
            SecretLookupError: If the referenced secret cannot be fetched
            InvalidCredentialError: If the secret lacks the access or secret key field
            EKSOpConfigurationError: If the secret reference is malformed
            ReconcileCancelledError: If the context is cancelled

        """
        config = self._default_resolver.load(ctx)

        if spec.region:
            config = config.with_region(spec.region)

        if spec.amazon_credential_secret:
            config = config.with_credentials(self._static_credentials(ctx, spec.amazon_credential_secret))
        else:
            LOGGER.debug("No credential secret referenced, keeping default credential chain")

        LOGGER.debug(f"Resolved AWS client config (region: {config.region or 'default'}, credentials: {config.credentials!r})")
        return config

    def _static_credentials(self, ctx: ReconcileContext, ref: str) -> StaticCredentialsProvider:
        """Build a static provider from the key pair stored in the referenced secret."""
        namespace, name = parse_secret_ref(ref)
        ctx.check(f"get secret {namespace}/{name}")

        try:
            secret = self._secrets.get(ctx, namespace, name)
        except ReconcileCancelledError:
            raise
        except Exception as e:
            raise SecretLookupError(namespace, name, e) from e

        access_key = secret.get(self._access_key_field)
        secret_key = secret.get(self._secret_key_field)
        if access_key is None or secret_key is None:
            missing = [
                field
                for field, value in ((self._access_key_field, access_key), (self._secret_key_field, secret_key))
                if value is None
            ]
            raise InvalidCredentialError(
                f"invalid aws cloud credential: secret {namespace}/{name} is missing {', '.join(missing)}"
            )

        try:
            provider = StaticCredentialsProvider(access_key.decode("utf-8"), secret_key.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise InvalidCredentialError(
                f"invalid aws cloud credential: secret {namespace}/{name} holds non UTF-8 key data"
            ) from e

        LOGGER.debug(f"Using static credentials from secret {namespace}/{name}")
        return provider

    def __repr__(self) -> str:
        """Return string representation."""
        return f"CredentialResolver(secrets={self._secrets!r}, default_resolver={self._default_resolver!r})"


def resolve_client_config(
    ctx: ReconcileContext,
    spec: ClusterConfigSpec,
    secrets: SecretLookup,
    default_resolver: DefaultConfigResolver | None = None,
) -> ClientConfig:
    """Resolve ``spec`` with a one-off CredentialResolver (see CredentialResolver.resolve)."""
    return CredentialResolver(secrets=secrets, default_resolver=default_resolver).resolve(ctx, spec)
