"""
AWS Cloud Adapters.

This module provides boto3-backed implementations of the cloud service protocols for
the EKS controller:
- CloudFormationService (InfraStackClient)
- EKSService (ComputeClusterClient)
- IAMService (IdentityClient)
- EC2Service (VirtualNetworkClient)

and AWSServices, the per-reconcile-cycle set of those clients built from one ClientConfig.
Adapters translate the provider's "resource does not exist" errors into
ResourceNotFoundError subclasses; every other ClientError propagates unchanged.
Every call runs through ``run_in_context``, so cancelling the reconcile context releases
the caller even while botocore is still waiting on the network or retrying.
"""

from collections.abc import Callable, Iterator, Mapping
from typing import Any

import boto3
import structlog
from botocore.client import Config
from botocore.exceptions import ClientError

from eksop_lib.any.context import ReconcileContext, run_in_context
from eksop_lib.any.exceptions import ResourceNotFoundError, StackNotFoundError
from eksop_lib.any.utils import does_not_exist
from eksop_lib.config.credentials import DefaultChainCredentialsProvider
from eksop_lib.config.schemas import ClientConfig
from eksop_lib.types import ServiceName

LOGGER = structlog.get_logger("eksop_lib.cal.adapters.aws_family")

USER_AGENT_EXTRA = "eksop-lib"

# botocore's own defaults
DEFAULT_CONNECT_TIMEOUT = 60.0
DEFAULT_READ_TIMEOUT = 60.0
MIN_CALL_TIMEOUT = 1.0


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "")


class CloudFormationService:
    """AWS CloudFormation stack operations."""

    def __init__(self, client: Any):
        """
        Initialize CloudFormation adapter.

        Args:
        ----
            client: boto3 CloudFormation client

        """
        self._client = client

    def describe_stack(self, ctx: ReconcileContext, stack_name: str) -> dict[str, Any]:
        """Describe a stack."""
        try:
            response = run_in_context(
                ctx, f"describe stack {stack_name}", self._client.describe_stacks, StackName=stack_name
            )
        except ClientError as e:
            if does_not_exist(e):
                raise StackNotFoundError(stack_name) from e
            raise

        stacks = response.get("Stacks", [])
        if not stacks:
            raise StackNotFoundError(stack_name)
        return stacks[0]

    def delete_stack(self, ctx: ReconcileContext, stack_name: str) -> None:
        """Request deletion of a stack."""
        try:
            run_in_context(ctx, f"delete stack {stack_name}", self._client.delete_stack, StackName=stack_name)
        except ClientError as e:
            if does_not_exist(e):
                raise StackNotFoundError(stack_name) from e
            raise


class EKSService:
    """AWS EKS control-plane operations."""

    def __init__(self, client: Any):
        """
        Initialize EKS adapter.

        Args:
        ----
            client: boto3 EKS client

        """
        self._client = client

    def _raise_if_not_found(self, error: ClientError, what: str) -> None:
        if _error_code(error) == "ResourceNotFoundException":
            raise ResourceNotFoundError(f"{what} does not exist") from error

    def describe_cluster(self, ctx: ReconcileContext, cluster_name: str) -> dict[str, Any]:
        """Describe an EKS cluster."""
        try:
            return run_in_context(
                ctx, f"describe cluster {cluster_name}", self._client.describe_cluster, name=cluster_name
            )["cluster"]
        except ClientError as e:
            self._raise_if_not_found(e, f"EKS cluster {cluster_name}")
            raise

    def delete_cluster(self, ctx: ReconcileContext, cluster_name: str) -> None:
        """Request deletion of an EKS cluster."""
        try:
            run_in_context(ctx, f"delete cluster {cluster_name}", self._client.delete_cluster, name=cluster_name)
        except ClientError as e:
            self._raise_if_not_found(e, f"EKS cluster {cluster_name}")
            raise

    def list_nodegroups(self, ctx: ReconcileContext, cluster_name: str) -> list[str]:
        """List node group names of a cluster, following pagination."""
        names: list[str] = []
        kwargs: dict[str, Any] = {"clusterName": cluster_name}
        while True:
            try:
                response = run_in_context(
                    ctx, f"list node groups of {cluster_name}", self._client.list_nodegroups, **kwargs
                )
            except ClientError as e:
                self._raise_if_not_found(e, f"EKS cluster {cluster_name}")
                raise
            names.extend(response.get("nodegroups", []))
            next_token = response.get("nextToken")
            if not next_token:
                return names
            kwargs["nextToken"] = next_token

    def delete_nodegroup(self, ctx: ReconcileContext, cluster_name: str, nodegroup_name: str) -> None:
        """Request deletion of a node group."""
        try:
            run_in_context(
                ctx,
                f"delete node group {nodegroup_name}",
                self._client.delete_nodegroup,
                clusterName=cluster_name,
                nodegroupName=nodegroup_name,
            )
        except ClientError as e:
            self._raise_if_not_found(e, f"Node group {nodegroup_name} of EKS cluster {cluster_name}")
            raise


class IAMService:
    """AWS IAM operations."""

    def __init__(self, client: Any):
        """
        Initialize IAM adapter.

        Args:
        ----
            client: boto3 IAM client

        """
        self._client = client

    def get_role(self, ctx: ReconcileContext, role_name: str) -> dict[str, Any]:
        """Get an IAM role."""
        try:
            return run_in_context(ctx, f"get role {role_name}", self._client.get_role, RoleName=role_name)["Role"]
        except ClientError as e:
            if _error_code(e) == "NoSuchEntity":
                raise ResourceNotFoundError(f"IAM role {role_name} does not exist") from e
            raise


class EC2Service:
    """AWS EC2 launch template operations."""

    NOT_FOUND_CODES = frozenset(
        {
            "InvalidLaunchTemplateId.NotFound",
            "InvalidLaunchTemplateName.NotFoundException",
        }
    )

    def __init__(self, client: Any):
        """
        Initialize EC2 adapter.

        Args:
        ----
            client: boto3 EC2 client

        """
        self._client = client

    def describe_launch_template(self, ctx: ReconcileContext, launch_template_id: str) -> dict[str, Any]:
        """Describe a launch template."""
        try:
            response = run_in_context(
                ctx,
                f"describe launch template {launch_template_id}",
                self._client.describe_launch_templates,
                LaunchTemplateIds=[launch_template_id],
            )
        except ClientError as e:
            if _error_code(e) in self.NOT_FOUND_CODES:
                raise ResourceNotFoundError(f"Launch template {launch_template_id} does not exist") from e
            raise

        templates = response.get("LaunchTemplates", [])
        if not templates:
            raise ResourceNotFoundError(f"Launch template {launch_template_id} does not exist")
        return templates[0]

    def delete_launch_template(self, ctx: ReconcileContext, launch_template_id: str) -> None:
        """Delete a launch template."""
        try:
            run_in_context(
                ctx,
                f"delete launch template {launch_template_id}",
                self._client.delete_launch_template,
                LaunchTemplateId=launch_template_id,
            )
        except ClientError as e:
            if _error_code(e) in self.NOT_FOUND_CODES:
                raise ResourceNotFoundError(f"Launch template {launch_template_id} does not exist") from e
            raise


_ADAPTERS: dict[ServiceName, type] = {
    ServiceName.EKS: EKSService,
    ServiceName.CLOUDFORMATION: CloudFormationService,
    ServiceName.IAM: IAMService,
    ServiceName.EC2: EC2Service,
}


class AWSServices(Mapping):
    """
    Per-reconcile-cycle set of typed AWS clients sharing one ClientConfig.

    Nothing is contacted at construction: each boto3 client is created on first access
    and cached for the lifetime of the set. Also usable as a read-only mapping
    ``ServiceName -> adapter``; membership tests and comparisons create no clients.

    Clients for default-chain credentials are built from the resolved boto3 session, so
    botocore keeps refreshing role credentials and profile settings apply. Static
    credentials are passed to the client explicitly.
    """

    def __init__(
        self,
        config: ClientConfig,
        client_factory: Callable[..., Any] | None = None,
        ctx: ReconcileContext | None = None,
    ):
        """
        Initialize service set.

        Args:
        ----
            config: Resolved client configuration
            client_factory: Callable creating raw clients (defaults to the default-chain
                            session's ``client`` or ``boto3.client``; replaceable in tests)
            ctx: Optional reconcile context whose deadline bounds client timeouts

        """
        self._config = config
        self._client_factory = client_factory
        self._ctx = ctx
        self._adapters: dict[ServiceName, Any] = {}
        self._clients: dict[ServiceName, Any] = {}

    @property
    def config(self) -> ClientConfig:
        """The configuration every client is built from."""
        return self._config

    def _client_config(self) -> Config:
        """Botocore client config, with timeouts capped by the context deadline."""
        remaining = self._ctx.remaining() if self._ctx is not None else None
        if remaining is None:
            return Config(user_agent_extra=USER_AGENT_EXTRA)

        return Config(
            user_agent_extra=USER_AGENT_EXTRA,
            connect_timeout=max(MIN_CALL_TIMEOUT, min(DEFAULT_CONNECT_TIMEOUT, remaining)),
            read_timeout=max(MIN_CALL_TIMEOUT, min(DEFAULT_READ_TIMEOUT, remaining)),
        )

    def _create_boto3_client(self, service: ServiceName) -> Any:
        """
        Create a boto3 client for the specified service.

        Args:
        ----
            service: Service to create a client for

        Returns:
        -------
            Configured boto3 client

        """
        kwargs: dict[str, Any] = {
            "service_name": service.value,
            "config": self._client_config(),
        }
        if self._config.region:
            kwargs["region_name"] = self._config.region

        provider = self._config.credentials
        if isinstance(provider, DefaultChainCredentialsProvider):
            factory = self._client_factory or provider.session.client
        else:
            credentials = provider.provide_credentials()
            kwargs["aws_access_key_id"] = credentials.access_key_id
            kwargs["aws_secret_access_key"] = credentials.secret_access_key
            if credentials.session_token:
                kwargs["aws_session_token"] = credentials.session_token
            factory = self._client_factory or boto3.client

        LOGGER.debug(f"Creating {service.display_name} client (region: {self._config.region or 'default'})")
        return factory(**kwargs)

    def _adapter(self, service: ServiceName) -> Any:
        if service not in self._adapters:
            self._clients[service] = self._create_boto3_client(service)
            self._adapters[service] = _ADAPTERS[service](self._clients[service])
        return self._adapters[service]

    @property
    def eks(self) -> EKSService:
        """EKS control-plane client."""
        return self._adapter(ServiceName.EKS)

    @property
    def cloudformation(self) -> CloudFormationService:
        """CloudFormation client."""
        return self._adapter(ServiceName.CLOUDFORMATION)

    @property
    def iam(self) -> IAMService:
        """IAM client."""
        return self._adapter(ServiceName.IAM)

    @property
    def ec2(self) -> EC2Service:
        """EC2 client."""
        return self._adapter(ServiceName.EC2)

    def __getitem__(self, key: ServiceName | str) -> Any:
        """Return the adapter for ``key`` (a ServiceName or its value)."""
        try:
            service = ServiceName(key)
        except ValueError:
            raise KeyError(key) from None
        return self._adapter(service)

    def __contains__(self, key: object) -> bool:
        """Report whether ``key`` names a supported service, without creating its client."""
        try:
            ServiceName(key)
        except ValueError:
            return False
        return True

    def __eq__(self, other: object) -> bool:
        """Service sets compare by identity."""
        return self is other

    __hash__ = object.__hash__

    def __iter__(self) -> Iterator[ServiceName]:
        """Iterate over supported service names."""
        return iter(ServiceName)

    def __len__(self) -> int:
        """Number of supported services."""
        return len(ServiceName)

    def close(self) -> None:
        """Close all created clients and drop them."""
        for client in self._clients.values():
            if hasattr(client, "close"):
                client.close()
        self._clients.clear()
        self._adapters.clear()

    def __enter__(self) -> "AWSServices":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit with cleanup."""
        self.close()

    def __repr__(self) -> str:
        """Return string representation."""
        created = ", ".join(s.value for s in self._adapters) or "none"
        return f"AWSServices(region='{self._config.region}', created=[{created}])"
