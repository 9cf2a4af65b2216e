"""
AWS Service Client Factory.

This module provides the factory functions for building the per-cycle set of AWS
service clients from a resolved ClientConfig:

- build_aws_services: ClientConfig -> AWSServices (pure construction, no I/O)
- new_aws_services: cluster spec + secret store -> AWSServices (resolve, then build)

Usage:
------
    >>> from eksop_lib.any.context import ReconcileContext
    >>> from eksop_lib.cal.factory import new_aws_services
    >>> from eksop_lib.k8s.secrets import KubectlSecretLookup
    >>>
    >>> ctx = ReconcileContext(timeout=60)
    >>> with new_aws_services(ctx, spec, KubectlSecretLookup()) as services:
    ...     services.cloudformation.describe_stack(ctx, "prod-eu-eks-vpc")

"""

from collections.abc import Callable
from typing import Any

from eksop_lib.any.context import ReconcileContext
from eksop_lib.any.protocols import DefaultConfigResolver, SecretLookup
from eksop_lib.cal.adapters.aws_family import AWSServices
from eksop_lib.config.resolver import CredentialResolver
from eksop_lib.config.schemas import ClientConfig, ClusterConfigSpec


def build_aws_services(
    config: ClientConfig,
    client_factory: Callable[..., Any] | None = None,
    ctx: ReconcileContext | None = None,
) -> AWSServices:
    """
    Build the typed EKS, CloudFormation, IAM and EC2 clients for ``config``.

    Construction cannot fail for a valid ClientConfig; clients are created lazily on
    first use.

    Args:
    ----
        config: Resolved client configuration
        client_factory: Callable creating raw boto3 clients (None picks the session or boto3.client)
        ctx: Optional reconcile context whose deadline bounds client timeouts

    Returns:
    -------
        AWSServices owned by the calling reconcile cycle

    """
    return AWSServices(config=config, client_factory=client_factory, ctx=ctx)


def new_aws_services(
    ctx: ReconcileContext,
    spec: ClusterConfigSpec,
    secrets: SecretLookup,
    default_resolver: DefaultConfigResolver | None = None,
    client_factory: Callable[..., Any] | None = None,
) -> AWSServices:
    """
    Resolve the client configuration for ``spec`` and build the service clients.

    Raises
    ------
        ConfigLoadError, SecretLookupError, InvalidCredentialError: From credential resolution

    """
    config = CredentialResolver(secrets=secrets, default_resolver=default_resolver).resolve(ctx, spec)
    return build_aws_services(config, client_factory=client_factory, ctx=ctx)
