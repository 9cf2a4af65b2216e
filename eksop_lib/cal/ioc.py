"""
eksop-lib IoC Container.

This module provides dependency injection for the resolution and teardown components.

The container manages:
- The ambient default config resolver (singleton; overridable in tests)
- The secret lookup (singleton; overridable in tests)
- Credential resolvers (one per call, wired with the two above)
- The service client factory (overridable in tests)

Example:
-------
    ```python
    from eksop_lib.any.context import ReconcileContext
    from eksop_lib.cal.ioc import container

    ctx = ReconcileContext(timeout=60)
    config = container.credential_resolver().resolve(ctx, spec)
    services = container.services_factory()(config)

    # Override in tests
    container.secret_lookup.override(fake_lookup)
    ```

"""

from dependency_injector import containers, providers

from eksop_lib.any.protocols import SecretLookup
from eksop_lib.cal.factory import build_aws_services
from eksop_lib.config.defaults import BotocoreDefaultConfigResolver
from eksop_lib.config.resolver import CredentialResolver
from eksop_lib.k8s.secrets import KubectlSecretLookup


class EKSOpIoCContainer(containers.DeclarativeContainer):
    """
    Inversion of Control (IoC) container for eksop-lib.

    Features:
    - Injectable default config resolver and secret lookup (mockable in tests)
    - Fresh CredentialResolver per call, so nothing resolved is shared across cycles
    - Injectable service client factory

    Example:
    -------
        ```python
        container = EKSOpIoCContainer()
        container.config.from_dict({"aws_profile": "ops", "kubeconfig": "/etc/eksop/kubeconfig"})
        resolver = container.credential_resolver()
        ```

    """

    # Settings: aws_profile, kubeconfig, default_namespace
    config = providers.Configuration()

    # Singleton: ambient discovery chain
    default_config_resolver = providers.Singleton(
        BotocoreDefaultConfigResolver,
        profile_name=config.aws_profile,
    )

    # Singleton: Kubernetes secret lookup
    secret_lookup = providers.Singleton(
        KubectlSecretLookup,
        default_namespace=config.default_namespace.as_(lambda v: v or "default"),
        kubeconfig=config.kubeconfig,
    )

    # Factory: one resolver per request
    credential_resolver = providers.Factory(
        CredentialResolver,
        secrets=secret_lookup,
        default_resolver=default_config_resolver,
    )

    # Service client factory (ClientConfig -> AWSServices)
    services_factory = providers.Object(build_aws_services)


def create_container(**settings: str | None) -> EKSOpIoCContainer:
    """
    Create an isolated container.

    Args:
    ----
        **settings: Optional aws_profile, kubeconfig, default_namespace

    Returns:
    -------
        Configured container

    """
    new_container = EKSOpIoCContainer()
    if settings:
        new_container.config.from_dict(settings)
    return new_container


# Global singleton container instance
container = EKSOpIoCContainer()


def get_secret_lookup() -> SecretLookup:
    """
    Get the secret lookup (singleton).

    Example:
    -------
        ```python
        from eksop_lib.cal.ioc import get_secret_lookup

        secret = get_secret_lookup().get(ctx, "cattle-global-data", "cc-abc12")
        ```

    """
    return container.secret_lookup()


def get_credential_resolver() -> CredentialResolver:
    """
    Get a credential resolver wired from the global container.

    Example:
    -------
        ```python
        from eksop_lib.cal.ioc import get_credential_resolver

        config = get_credential_resolver().resolve(ctx, spec)
        ```

    """
    return container.credential_resolver()
