"""
Service type definitions for eksop-lib.

This module defines the enum of AWS subsystems a reconcile cycle builds clients for.
"""

from enum import Enum


class ServiceName(str, Enum):
    """
    AWS subsystems used by the EKS cluster-lifecycle controller.

    Attributes
    ----------
        EKS: Compute-cluster control plane
        CLOUDFORMATION: Infrastructure-stack engine
        IAM: Identity
        EC2: Virtual network (VPCs, subnets, launch templates)

    """

    EKS = "eks"
    """EKS control plane (clusters, node groups)."""

    CLOUDFORMATION = "cloudformation"
    """CloudFormation stacks (service role, VPC, node group stacks)."""

    IAM = "iam"
    """IAM roles and instance profiles."""

    EC2 = "ec2"
    """EC2 networking and launch templates."""

    @property
    def display_name(self) -> str:
        """Get human-readable display name."""
        names = {
            ServiceName.EKS: "Amazon EKS",
            ServiceName.CLOUDFORMATION: "AWS CloudFormation",
            ServiceName.IAM: "AWS IAM",
            ServiceName.EC2: "Amazon EC2",
        }
        return names[self]
