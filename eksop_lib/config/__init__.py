"""
Configuration for eksop-lib.

- schemas: Pydantic models (cluster spec, secret records, client config, stack identities)
- credentials: Static and default-chain AWS credential providers
- defaults: Ambient boto3 discovery (baseline config)
- resolver: Cluster spec + secret store -> ClientConfig
- loaders: EKSClusterConfig manifest loading
"""

from eksop_lib.config.credentials import DefaultChainCredentialsProvider, StaticCredentialsProvider
from eksop_lib.config.defaults import BotocoreDefaultConfigResolver
from eksop_lib.config.loaders import load_cluster_spec
from eksop_lib.config.resolver import CredentialResolver, resolve_client_config
from eksop_lib.config.schemas import (
    ACCESS_KEY_FIELD,
    SECRET_KEY_FIELD,
    SERVICE_ROLE_STACK_SUFFIX,
    VPC_STACK_SUFFIX,
    AWSCredentials,
    ClientConfig,
    ClusterConfigSpec,
    SecretRecord,
    StackIdentity,
    cluster_stack_identity,
)

__all__ = [
    # Schemas
    "ClusterConfigSpec",
    "SecretRecord",
    "AWSCredentials",
    "ClientConfig",
    "StackIdentity",
    "cluster_stack_identity",
    "ACCESS_KEY_FIELD",
    "SECRET_KEY_FIELD",
    "SERVICE_ROLE_STACK_SUFFIX",
    "VPC_STACK_SUFFIX",
    # Credentials
    "StaticCredentialsProvider",
    "DefaultChainCredentialsProvider",
    "BotocoreDefaultConfigResolver",
    # Resolution
    "CredentialResolver",
    "resolve_client_config",
    # Loaders
    "load_cluster_spec",
]
