"""
Ambient AWS configuration discovery.

BotocoreDefaultConfigResolver implements the DefaultConfigResolver protocol on top of
boto3's standard discovery (AWS_* environment variables, shared config and credential
files, named profiles, container and instance roles).
"""

from collections.abc import Callable
from typing import Any

import boto3
import structlog
from botocore.exceptions import BotoCoreError

from eksop_lib.any.context import ReconcileContext
from eksop_lib.any.exceptions import ConfigLoadError
from eksop_lib.config.credentials import DefaultChainCredentialsProvider
from eksop_lib.config.schemas import ClientConfig

LOGGER = structlog.get_logger("eksop_lib.config.defaults")


class BotocoreDefaultConfigResolver:
    """
    Builds the baseline ClientConfig from boto3 session discovery.

    Example:
    -------
        ```python
        from eksop_lib.any.context import ReconcileContext
        from eksop_lib.config.defaults import BotocoreDefaultConfigResolver

        baseline = BotocoreDefaultConfigResolver(profile_name="ops").load(ReconcileContext())
        print(baseline.region)
        ```

    """

    def __init__(
        self,
        profile_name: str | None = None,
        session_factory: Callable[..., Any] = boto3.Session,
    ) -> None:
        """
        Initialize resolver.

        Args:
        ----
            profile_name: Optional shared-config profile (None uses AWS_PROFILE / default)
            session_factory: Callable creating the session (boto3.Session, replaceable in tests)

        """
        self._profile_name = profile_name
        self._session_factory = session_factory

    def load(self, ctx: ReconcileContext) -> ClientConfig:
        """
        Build the baseline configuration.

        Region may be empty when nothing in the environment sets one; the region
        override from the cluster spec is applied on top by the resolver.

        Raises
        ------
            ConfigLoadError: If the session cannot be created (bad profile, broken config file)
            ReconcileCancelledError: If the context is cancelled

        """
        ctx.check("load default AWS config")

        kwargs: dict[str, Any] = {}
        if self._profile_name:
            kwargs["profile_name"] = self._profile_name

        try:
            session = self._session_factory(**kwargs)
        except BotoCoreError as e:
            raise ConfigLoadError(f"error loading default AWS config: {e}") from e

        region = session.region_name or ""
        LOGGER.debug(f"Loaded default AWS config (profile: {self._profile_name or 'default'}, region: {region or 'unset'})")

        return ClientConfig(region=region, credentials=DefaultChainCredentialsProvider(session))

    def __repr__(self) -> str:
        """Return string representation."""
        return f"BotocoreDefaultConfigResolver(profile_name={self._profile_name!r})"
