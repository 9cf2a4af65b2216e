"""
Cloud Abstraction Layer Protocol Definitions.

This module defines protocols (structural typing) for the AWS subsystems the EKS
controller talks to. The teardown coordinator depends only on InfraStackClient, so any
object with matching context-aware describe/delete methods (a boto3 adapter, a fake) can be used.

Key protocols:
- InfraStackClient: CloudFormation-style stack describe/delete
- ComputeClusterClient: EKS control plane
- IdentityClient: IAM
- VirtualNetworkClient: EC2 networking / launch templates
"""

from typing import Any, Protocol, runtime_checkable

from eksop_lib.any.context import ReconcileContext


@runtime_checkable
class InfraStackClient(Protocol):
    """
    Protocol for infrastructure-stack operations.

    Both methods signal a missing stack with StackNotFoundError (or any error
    ``does_not_exist`` recognizes); every other failure propagates unchanged.
    A cancelled or expired ``ctx`` aborts the call with ReconcileCancelledError,
    also while it is in flight.
    """

    def describe_stack(self, ctx: ReconcileContext, stack_name: str) -> dict[str, Any]:
        """
        Describe a stack.

        Args:
        ----
            ctx: Reconcile context bounding the call
            stack_name: Stack name or id

        Returns:
        -------
            Stack description (StackName, StackStatus, Tags, ...)

        Raises:
        ------
            StackNotFoundError: If the stack does not exist

        """
        ...

    def delete_stack(self, ctx: ReconcileContext, stack_name: str) -> None:
        """
        Request deletion of a stack.

        Raises
        ------
            StackNotFoundError: If the stack does not exist

        """
        ...


@runtime_checkable
class ComputeClusterClient(Protocol):
    """Protocol for EKS control-plane operations."""

    def describe_cluster(self, ctx: ReconcileContext, cluster_name: str) -> dict[str, Any]:
        """Describe an EKS cluster; raises ResourceNotFoundError if absent."""
        ...

    def delete_cluster(self, ctx: ReconcileContext, cluster_name: str) -> None:
        """Request deletion of an EKS cluster."""
        ...

    def list_nodegroups(self, ctx: ReconcileContext, cluster_name: str) -> list[str]:
        """List node group names of a cluster."""
        ...

    def delete_nodegroup(self, ctx: ReconcileContext, cluster_name: str, nodegroup_name: str) -> None:
        """Request deletion of a node group."""
        ...


@runtime_checkable
class IdentityClient(Protocol):
    """Protocol for IAM operations."""

    def get_role(self, ctx: ReconcileContext, role_name: str) -> dict[str, Any]:
        """Get an IAM role; raises ResourceNotFoundError if absent."""
        ...


@runtime_checkable
class VirtualNetworkClient(Protocol):
    """Protocol for EC2 operations."""

    def describe_launch_template(self, ctx: ReconcileContext, launch_template_id: str) -> dict[str, Any]:
        """Describe a launch template; raises ResourceNotFoundError if absent."""
        ...

    def delete_launch_template(self, ctx: ReconcileContext, launch_template_id: str) -> None:
        """Delete a launch template."""
        ...
