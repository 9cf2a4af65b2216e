"""
EKSOp exception classes.

This module defines custom exceptions for eksop-lib to avoid masking built-in Python errors
and to provide clear, specific error handling for the different failure scenarios of
credential resolution and stack teardown.

All EKSOp exceptions inherit from EKSOpError.
"""


class EKSOpError(Exception):
    """
    Base exception for all eksop-lib errors.

    All eksop-lib exceptions inherit from this, allowing callers (the reconcile loop)
    to catch every library error with a single except clause without catching
    unrelated Python errors.
    """

    pass


class EKSOpConfigurationError(EKSOpError):
    """
    Raised when a cluster manifest or secret reference is malformed.

    This includes unparseable YAML, a spec that fails validation, or a credential
    secret reference that does not follow the ``namespace/name`` convention.
    """

    pass


class ConfigLoadError(EKSOpError):
    """
    Raised when the baseline AWS configuration cannot be established.

    The ambient discovery chain (environment, shared config files, profiles) failed
    before any spec override could be applied. Not retryable at this layer.
    """

    pass


class SecretLookupError(EKSOpError):
    """
    Raised when a referenced credential secret cannot be retrieved.

    Carries the namespace/name that was looked up; the underlying cause is chained
    as ``__cause__``. The caller decides whether to retry (secret not created yet)
    or give up (permanently wrong reference).

    Example:
    -------
        >>> resolver.resolve(ctx, ClusterConfigSpec(amazonCredentialSecret="cattle-global-data/cc-abc"))
        SecretLookupError: error getting secret cattle-global-data/cc-abc: ...

    """

    def __init__(self, namespace: str, name: str, cause: BaseException):
        self.namespace = namespace
        self.name = name
        self.cause = cause
        super().__init__(f"error getting secret {namespace}/{name}: {cause}")


class InvalidCredentialError(EKSOpError):
    """
    Raised when a credential secret exists but lacks a required key field.

    This is a data-integrity defect in the secret, not a transient failure.
    """

    pass


class StackDeletionError(EKSOpError):
    """
    Raised when a CloudFormation stack deletion fails for a reason other than "already absent".

    The provider error is chained as ``__cause__``.
    """

    def __init__(self, stack_name: str, cause: BaseException):
        self.stack_name = stack_name
        self.cause = cause
        super().__init__(f"error deleting stack: {cause}")


class ResourceNotFoundError(EKSOpError):
    """Raised by the typed AWS adapters when the addressed resource does not exist."""

    pass


class StackNotFoundError(ResourceNotFoundError):
    """Raised when a CloudFormation stack does not exist."""

    def __init__(self, stack_name: str):
        self.stack_name = stack_name
        super().__init__(f"Stack with id {stack_name} does not exist")


class SecretNotFoundError(ResourceNotFoundError):
    """Raised by a SecretLookup when the requested secret does not exist."""

    def __init__(self, namespace: str, name: str):
        self.namespace = namespace
        self.name = name
        super().__init__(f'secret "{name}" not found in namespace "{namespace}"')


class ReconcileCancelledError(EKSOpError):
    """
    Raised when the reconcile context is cancelled or its deadline has passed.

    Every operation that talks to an external system checks the context first and
    raises this instead of starting (or waiting on) the call.
    """

    pass
