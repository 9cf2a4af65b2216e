"""
CloudFormation stack teardown across naming-convention changes.

Stacks provisioned by older controller versions may still carry a name from a previous
naming convention. Deletion therefore probes the candidate names in priority order and
deletes the first one that is not reported missing, treating "does not exist" as the
desired end state both when probing and when deleting. The context is passed to every
client call, so cancellation also interrupts a describe or delete in flight.
"""

from collections.abc import Iterable, Sequence

import structlog

from eksop_lib.any.context import ReconcileContext
from eksop_lib.any.exceptions import ReconcileCancelledError, StackDeletionError
from eksop_lib.any.utils import does_not_exist
from eksop_lib.cal.protocols import InfraStackClient
from eksop_lib.config.schemas import StackIdentity

LOGGER = structlog.get_logger("eksop_lib.cal.teardown")


def _select_target(ctx: ReconcileContext, client: InfraStackClient, candidates: list[str]) -> str:
    """Return the candidate the delete should be issued against."""
    for name in candidates[:-1]:
        ctx.check(f"describe stack {name}")
        try:
            client.describe_stack(ctx, name)
        except ReconcileCancelledError:
            raise
        except Exception as e:
            if does_not_exist(e):
                LOGGER.debug(f"Stack {name} does not exist, trying next naming convention")
                continue
            # Only the delete outcome is authoritative
            LOGGER.warning(f"Failed to describe stack {name}, attempting deletion anyway: {e}")
        return name
    return candidates[-1]


def delete_stack(
    ctx: ReconcileContext,
    client: InfraStackClient,
    current_name: str,
    legacy_name: str,
    *older_names: str,
) -> str:
    """
    Delete a stack that lives under one of several candidate names.

    ``current_name`` is probed first; if it does not exist the next candidate becomes the
    target, the last candidate being deleted without a probe. A describe failure other
    than "does not exist" keeps the probed name as the target.

    Args:
    ----
        ctx: Reconcile context
        client: Infra-stack client (e.g. services.cloudformation)
        current_name: Name under the current naming convention
        legacy_name: Name under the previous naming convention
        *older_names: Names under even older conventions, newest first

    Returns:
    -------
        Name the delete was issued against

    Raises:
    ------
        StackDeletionError: If the delete fails for a reason other than "does not exist"
        ReconcileCancelledError: If the context is cancelled

    Example:
    -------
        >>> delete_stack(ctx, services.cloudformation, "eks-cluster-abc", "rancher-eks-abc")
        'rancher-eks-abc'

    """
    return delete_stack_candidates(ctx, client, [current_name, legacy_name, *older_names])


def delete_stack_candidates(ctx: ReconcileContext, client: InfraStackClient, candidates: Sequence[str]) -> str:
    """
    Delete the first live stack among ``candidates`` (in priority order).

    Duplicate names are probed once. See delete_stack for the probing rules.
    """
    names = list(dict.fromkeys(candidates))
    if not names:
        raise ValueError("At least one candidate stack name is required")
    target = _select_target(ctx, client, names)

    ctx.check(f"delete stack {target}")
    try:
        client.delete_stack(ctx, target)
    except ReconcileCancelledError:
        raise
    except Exception as e:
        if not does_not_exist(e):
            raise StackDeletionError(target, e) from e
        LOGGER.debug(f"Stack {target} already deleted")
        return target

    LOGGER.info(f"Requested deletion of stack {target}")
    return target


class StackTeardownCoordinator:
    """
    Deletes the CloudFormation stacks of a cluster by StackIdentity.

    Example:
    -------
        ```python
        coordinator = StackTeardownCoordinator(services.cloudformation)
        coordinator.delete_all(
            ctx,
            [
                cluster_stack_identity(spec.display_name, cluster_name, VPC_STACK_SUFFIX),
                cluster_stack_identity(spec.display_name, cluster_name, SERVICE_ROLE_STACK_SUFFIX),
            ],
        )
        ```

    """

    def __init__(self, client: InfraStackClient):
        """
        Initialize coordinator.

        Args:
        ----
            client: Infra-stack client used for every describe/delete

        """
        self._client = client

    def delete(self, ctx: ReconcileContext, identity: StackIdentity) -> str:
        """Delete the live stack of ``identity``; returns the name deleted."""
        return delete_stack_candidates(ctx, self._client, list(identity.candidates()))

    def delete_all(self, ctx: ReconcileContext, identities: Iterable[StackIdentity]) -> list[str]:
        """
        Delete several stacks in order, stopping at the first failure.

        Returns
        -------
            Names the deletes were issued against, in order

        """
        return [self.delete(ctx, identity) for identity in identities]

    def __repr__(self) -> str:
        """Return string representation."""
        return f"StackTeardownCoordinator(client={self._client!r})"
