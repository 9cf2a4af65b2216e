"""
Kubernetes secret lookup through kubectl.

This adapter implements the SecretLookup protocol by shelling out to
``kubectl get secret -o json`` with the controller's kubeconfig or service account.
"""

import base64
import binascii
import json
import subprocess

import structlog

from eksop_lib.any.context import ReconcileContext
from eksop_lib.any.exceptions import EKSOpConfigurationError, SecretNotFoundError
from eksop_lib.any.utils import run_command
from eksop_lib.config.schemas import SecretRecord

LOGGER = structlog.get_logger("eksop_lib.k8s.secrets")

DEFAULT_NAMESPACE = "default"


class KubectlSecretLookup:
    """
    Reads Kubernetes secrets with kubectl.

    Example:
    -------
        ```python
        lookup = KubectlSecretLookup(kubeconfig="/etc/eksop/kubeconfig")
        secret = lookup.get(ReconcileContext(timeout=10), "cattle-global-data", "cc-abc12")
        print(sorted(secret.data))
        ```

    """

    def __init__(
        self,
        default_namespace: str = DEFAULT_NAMESPACE,
        kubeconfig: str | None = None,
        kubectl: str = "kubectl",
    ):
        """
        Initialize lookup.

        Args:
        ----
            default_namespace: Namespace used for bare secret names
            kubeconfig: Optional kubeconfig path (in-cluster service account when None)
            kubectl: kubectl executable

        """
        self._default_namespace = default_namespace
        self._kubeconfig = kubeconfig
        self._kubectl = kubectl
        LOGGER.debug(f"Initialized kubectl secret lookup (default namespace: {default_namespace})")

    def get(self, ctx: ReconcileContext, namespace: str, name: str) -> SecretRecord:
        """
        Fetch a secret and decode its data.

        Raises
        ------
            SecretNotFoundError: If the secret does not exist
            EKSOpConfigurationError: If kubectl fails otherwise or returns malformed data
            ReconcileCancelledError: If the context is cancelled or its deadline passes, also while kubectl runs

        """
        namespace = namespace or self._default_namespace
        ctx.check(f"get secret {namespace}/{name}")

        cmd = [self._kubectl]
        if self._kubeconfig:
            cmd += ["--kubeconfig", self._kubeconfig]
        cmd += ["get", "secret", name, "-n", namespace, "-o", "json"]

        LOGGER.debug(f"Fetching K8s secret: {namespace}/{name}")

        try:
            result = run_command(cmd, check=True, ctx=ctx)
        except subprocess.CalledProcessError as e:
            if "NotFound" in str(e.stderr):
                raise SecretNotFoundError(namespace, name) from e
            raise EKSOpConfigurationError(f"Failed to fetch K8s secret: {namespace}/{name}\n" f"Error: {e.stderr}") from e

        try:
            payload = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise EKSOpConfigurationError(f"Failed to parse K8s secret JSON: {namespace}/{name}\n" f"Error: {e}") from e

        data: dict[str, bytes] = {}
        for key, encoded_value in (payload.get("data") or {}).items():
            try:
                data[key] = base64.b64decode(encoded_value, validate=True)
            except (binascii.Error, TypeError) as e:
                raise EKSOpConfigurationError(f"K8s secret {namespace}/{name} has malformed value for key '{key}'") from e

        LOGGER.debug(f"Loaded K8s secret {namespace}/{name} (keys: {', '.join(sorted(data)) or 'none'})")

        return SecretRecord(namespace=namespace, name=name, data=data)

    def __repr__(self) -> str:
        """String representation."""
        return f"KubectlSecretLookup(default_namespace='{self._default_namespace}')"
