"""
Configuration schemas for credential resolution and stack teardown.

This module defines Pydantic models for:
- The EKS cluster config spec (the subset the resolver reads)
- Secret records fetched from the Kubernetes secret store
- Resolved AWS client configuration
- Stack identities spanning a naming-convention change
"""

from collections.abc import Iterator
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from eksop_lib.any.protocols import CredentialsProvider

# Secret data keys written by the cloud-credential UI for amazonec2 credentials
ACCESS_KEY_FIELD = "amazonec2credentialConfig-accessKey"
SECRET_KEY_FIELD = "amazonec2credentialConfig-secretKey"

SERVICE_ROLE_STACK_SUFFIX = "eks-service-role"
VPC_STACK_SUFFIX = "eks-vpc"


class ClusterConfigSpec(BaseModel):
    """
    EKS cluster config spec (``EKSClusterConfig.spec``).

    Only the fields the resolver and teardown need are modelled; the remaining spec
    fields are kept as extras.

    Examples
    --------
        displayName: prod-eu
        region: eu-west-1
        amazonCredentialSecret: cattle-global-data/cc-abc12

    """

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    region: Annotated[str, Field(default="", description="AWS region; empty means the ambient default")]
    amazon_credential_secret: Annotated[
        str,
        Field(
            default="",
            alias="amazonCredentialSecret",
            description="Credential secret reference 'namespace/name'; empty means the ambient credential chain",
        ),
    ]
    display_name: Annotated[str, Field(default="", alias="displayName", description="Cluster display name")]

    @field_validator("region", "amazon_credential_secret", "display_name", mode="before")
    @classmethod
    def none_as_empty(cls, v: str | None) -> str:
        """Treat explicit nulls in manifests as unset."""
        return "" if v is None else v


class SecretRecord(BaseModel):
    """Read-only view of a Kubernetes secret; ``data`` values are already base64-decoded."""

    model_config = ConfigDict(frozen=True)

    namespace: str
    name: str
    data: dict[str, bytes] = Field(default_factory=dict)

    def get(self, key: str) -> bytes | None:
        """Return the raw value for ``key``, or None when absent."""
        return self.data.get(key)

    def __repr__(self) -> str:
        """Return string representation without secret values."""
        return f"SecretRecord(namespace='{self.namespace}', name='{self.name}', keys={sorted(self.data)})"


class AWSCredentials(BaseModel):
    """AWS access key pair (plus optional session token)."""

    model_config = ConfigDict(frozen=True)

    access_key_id: str
    secret_access_key: str = Field(repr=False)
    session_token: str | None = Field(default=None, repr=False)


class ClientConfig(BaseModel):
    """
    Resolved AWS client configuration.

    Immutable: overrides return a new ClientConfig. Created once per reconcile cycle by
    the CredentialResolver and shared by every service client built from it.
    """

    model_config = ConfigDict(frozen=True)

    region: str = ""
    credentials: Any

    @field_validator("credentials")
    @classmethod
    def must_provide_credentials(cls, v: Any) -> Any:
        """Accept any object satisfying the CredentialsProvider protocol."""
        if not isinstance(v, CredentialsProvider):
            raise ValueError(f"{type(v).__name__} does not implement provide_credentials()")
        return v

    def with_region(self, region: str) -> "ClientConfig":
        """Return a copy with ``region`` replaced."""
        return self.model_copy(update={"region": region})

    def with_credentials(self, credentials: CredentialsProvider) -> "ClientConfig":
        """Return a copy whose credential provider is replaced wholesale."""
        return self.model_copy(update={"credentials": credentials})


class StackIdentity(BaseModel):
    """
    Candidate names of one logical CloudFormation stack across naming conventions.

    At most one of the candidates names a live stack at any time.
    """

    model_config = ConfigDict(frozen=True)

    current: Annotated[str, Field(min_length=1, description="Name under the current naming convention")]
    legacy: Annotated[str, Field(min_length=1, description="Name under the previous naming convention")]
    older: Annotated[
        tuple[str, ...],
        Field(default=(), description="Names under even older conventions, newest first"),
    ]

    def candidates(self) -> Iterator[str]:
        """Yield candidate names in probe order, skipping duplicates."""
        seen: set[str] = set()
        for name in (self.current, self.legacy, *self.older):
            if name not in seen:
                seen.add(name)
                yield name


def cluster_stack_identity(display_name: str, cluster_name: str, suffix: str) -> StackIdentity:
    """
    Build the identity of a cluster-scoped stack.

    Stacks are currently named after the cluster display name; clusters provisioned
    before the rename used the cluster object name.

    Example:
    -------
        >>> cluster_stack_identity("prod-eu", "c-x8k2p", VPC_STACK_SUFFIX)
        StackIdentity(current='prod-eu-eks-vpc', legacy='c-x8k2p-eks-vpc', older=())

    """
    return StackIdentity(current=f"{display_name}-{suffix}", legacy=f"{cluster_name}-{suffix}")
