"""
Any - Shared components for eksop-lib.

This module contains code used throughout the library: exceptions, protocols for external
collaborators, the reconcile context and small utilities.
"""

from eksop_lib.any.context import ReconcileContext, background, run_in_context
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
from eksop_lib.any.protocols import CredentialsProvider, DefaultConfigResolver, SecretLookup
from eksop_lib.any.utils import does_not_exist, parse_secret_ref, run_command

__all__ = [
    # Context
    "ReconcileContext",
    "background",
    "run_in_context",
    # Exceptions
    "EKSOpError",
    "EKSOpConfigurationError",
    "ConfigLoadError",
    "SecretLookupError",
    "InvalidCredentialError",
    "StackDeletionError",
    "ResourceNotFoundError",
    "StackNotFoundError",
    "SecretNotFoundError",
    "ReconcileCancelledError",
    # Protocols
    "SecretLookup",
    "CredentialsProvider",
    "DefaultConfigResolver",
    # Utils
    "run_command",
    "parse_secret_ref",
    "does_not_exist",
]
