"""
eksop-lib Cloud Abstraction Layer (CAL).

This module provides typed AWS service clients and the stack teardown logic:
- Protocols for the infra-stack, compute-cluster, identity and virtual-network clients
- AWSServices: per-cycle client set built from a resolved ClientConfig
- Stack teardown with naming-convention fallback
- Dependency injection container

Example:
-------
    >>> from eksop_lib.any.context import ReconcileContext
    >>> from eksop_lib.cal import build_aws_services, delete_stack
    >>>
    >>> services = build_aws_services(config)
    >>> delete_stack(ReconcileContext(), services.cloudformation, "eks-cluster-abc", "rancher-eks-abc")

"""

from eksop_lib.cal.adapters.aws_family import AWSServices
from eksop_lib.cal.factory import build_aws_services, new_aws_services
from eksop_lib.cal.ioc import EKSOpIoCContainer, container, create_container, get_credential_resolver, get_secret_lookup
from eksop_lib.cal.protocols import (
    ComputeClusterClient,
    IdentityClient,
    InfraStackClient,
    VirtualNetworkClient,
)
from eksop_lib.cal.teardown import StackTeardownCoordinator, delete_stack, delete_stack_candidates

__all__ = [
    "InfraStackClient",
    "ComputeClusterClient",
    "IdentityClient",
    "VirtualNetworkClient",
    "AWSServices",
    "build_aws_services",
    "new_aws_services",
    "delete_stack",
    "delete_stack_candidates",
    "StackTeardownCoordinator",
    "EKSOpIoCContainer",
    "container",
    "create_container",
    "get_credential_resolver",
    "get_secret_lookup",
]
