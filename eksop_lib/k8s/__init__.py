"""Kubernetes-side adapters for eksop-lib."""

from eksop_lib.k8s.secrets import KubectlSecretLookup

__all__ = [
    "KubectlSecretLookup",
]
