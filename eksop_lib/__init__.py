"""
eksop-lib - AWS credential resolution and stack teardown for an EKS cluster-lifecycle controller.

This library provides:
- Credential resolution: cluster spec + Kubernetes secret store -> immutable AWS ClientConfig
- Service client factory: ClientConfig -> lazy EKS/CloudFormation/IAM/EC2 clients
- Stack teardown: delete CloudFormation stacks across naming-convention changes
- IoC container: dependency injection for the controller and for tests
"""

# ============================================================================
# CORE EXPORTS (from any/)
# ============================================================================

from eksop_lib.any.context import ReconcileContext
from eksop_lib.any.exceptions import (
    ConfigLoadError,
    EKSOpConfigurationError,
    EKSOpError,
    InvalidCredentialError,
    ReconcileCancelledError,
    ResourceNotFoundError,
    SecretLookupError,
    SecretNotFoundError,
    StackDeletionError,
    StackNotFoundError,
)

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("eksop-lib")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"

__all__ = [
    # Context
    "ReconcileContext",
    # Exceptions
    "EKSOpError",
    "EKSOpConfigurationError",
    "ConfigLoadError",
    "SecretLookupError",
    "InvalidCredentialError",
    "StackDeletionError",
    "ReconcileCancelledError",
    "ResourceNotFoundError",
    "StackNotFoundError",
    "SecretNotFoundError",
    # Version
    "__version__",
]
