"""
Cloud service adapters.

- aws_family: boto3-backed CloudFormation, EKS, IAM and EC2 adapters plus AWSServices
"""

from eksop_lib.cal.adapters.aws_family import (
    AWSServices,
    CloudFormationService,
    EC2Service,
    EKSService,
    IAMService,
)

__all__ = [
    "AWSServices",
    "CloudFormationService",
    "EKSService",
    "IAMService",
    "EC2Service",
]
