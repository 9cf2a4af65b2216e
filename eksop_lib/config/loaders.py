"""
Configuration loading functions for EKS cluster manifests.

Loads ``EKSClusterConfig`` manifests (YAML files or already-parsed dicts, e.g. the object
handed to a reconcile callback) and validates their spec via Pydantic models.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from eksop_lib.any.exceptions import EKSOpConfigurationError
from eksop_lib.config.schemas import ClusterConfigSpec

CLUSTER_CONFIG_KIND = "EKSClusterConfig"


def _read_manifest(path: Path) -> dict[str, Any]:
    """Read a YAML manifest into a dict."""
    if not path.exists():
        raise EKSOpConfigurationError(f"Cluster manifest not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise EKSOpConfigurationError(f"Failed to parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise EKSOpConfigurationError(f"Cluster manifest {path} must be a mapping, got {type(data).__name__}")
    return data


def load_cluster_spec(source: Path | str | dict[str, Any]) -> ClusterConfigSpec:
    """
    Load and validate the spec of an EKSClusterConfig manifest.

    Args:
    ----
        source: Path to a YAML manifest, or the manifest as a dict

    Returns:
    -------
        Validated ClusterConfigSpec

    Raises:
    ------
        EKSOpConfigurationError: If the file is missing/unparseable, the kind is wrong,
                                 or the spec fails validation

    Example:
    -------
        >>> spec = load_cluster_spec(Path("cluster.yaml"))
        >>> spec.amazon_credential_secret
        'cattle-global-data/cc-abc12'

    """
    origin = "manifest"
    if isinstance(source, dict):
        manifest = source
    else:
        path = Path(source)
        origin = str(path)
        manifest = _read_manifest(path)

    kind = manifest.get("kind")
    if kind is not None and kind != CLUSTER_CONFIG_KIND:
        raise EKSOpConfigurationError(f"Unexpected kind '{kind}' in {origin}, expected {CLUSTER_CONFIG_KIND}")

    spec = manifest.get("spec")
    if spec is None:
        raise EKSOpConfigurationError(f"Missing 'spec' in {origin}")

    try:
        return ClusterConfigSpec.model_validate(spec)
    except ValidationError as e:
        raise EKSOpConfigurationError(f"Invalid cluster spec in {origin}: {e}") from e
