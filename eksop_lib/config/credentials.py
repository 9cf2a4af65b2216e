"""
AWS credential providers.

Both providers satisfy the CredentialsProvider protocol:
- StaticCredentialsProvider: a fixed key pair read from a credential secret (never refreshes)
- DefaultChainCredentialsProvider: whatever the botocore discovery chain resolves
"""

from typing import Any

import structlog
from botocore.exceptions import NoCredentialsError

from eksop_lib.config.schemas import AWSCredentials

LOGGER = structlog.get_logger("eksop_lib.config.credentials")


class StaticCredentialsProvider:
    """
    Fixed, non-refreshing AWS credentials.

    If the source secret changes, a new provider must be resolved; callers re-resolve
    every reconcile cycle instead of caching.
    """

    def __init__(self, access_key_id: str, secret_access_key: str, session_token: str | None = None):
        self._credentials = AWSCredentials(
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            session_token=session_token or None,
        )

    def provide_credentials(self) -> AWSCredentials:
        """Return the fixed credentials."""
        return self._credentials

    def __eq__(self, other: object) -> bool:
        """Providers are equal when they yield the same key pair."""
        if not isinstance(other, StaticCredentialsProvider):
            return NotImplemented
        return self._credentials == other._credentials

    def __hash__(self) -> int:
        """Hash by the yielded key pair."""
        return hash(self._credentials)

    def __repr__(self) -> str:
        """Return string representation (access key id only)."""
        return f"StaticCredentialsProvider(access_key_id='{self._credentials.access_key_id}')"


class DefaultChainCredentialsProvider:
    """
    Credentials from the botocore discovery chain of a boto3 session.

    Environment variables, shared credential/config files, SSO, container and instance
    roles are consulted lazily, on the first ``provide_credentials`` call. AWS clients are
    built from ``session`` itself, so botocore refreshes expiring role credentials;
    ``provide_credentials`` returns a point-in-time snapshot.
    """

    def __init__(self, session: Any):
        """
        Initialize provider.

        Args:
        ----
            session: boto3.Session whose credential chain is used

        """
        self._session = session

    @property
    def session(self) -> Any:
        """The underlying boto3 session."""
        return self._session

    def provide_credentials(self) -> AWSCredentials:
        """
        Resolve and freeze the current credentials of the chain.

        Raises
        ------
            NoCredentialsError: If no link of the chain yields credentials

        """
        credentials = self._session.get_credentials()
        if credentials is None:
            raise NoCredentialsError()

        frozen = credentials.get_frozen_credentials()
        LOGGER.debug(f"Resolved credentials from default chain (method: {getattr(credentials, 'method', 'unknown')})")
        return AWSCredentials(
            access_key_id=frozen.access_key,
            secret_access_key=frozen.secret_key,
            session_token=frozen.token,
        )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"DefaultChainCredentialsProvider(profile='{getattr(self._session, 'profile_name', None)}')"
