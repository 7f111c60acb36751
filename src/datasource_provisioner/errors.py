"""Exception classes for datasource provisioning."""


class ProvisioningError(Exception):
    """Base exception for dialect resolution and pool provisioning."""


class ContractViolation(ProvisioningError, ValueError):
    """A precondition or postcondition of provisioning does not hold.

    Raised for missing slot counts, empty credential lists, URLs that do
    not use the ``jdbc`` scheme, and batches that produce no pool. Always
    fatal: the whole provisioning batch is aborted.
    """


def check_argument(expression: bool, message: str, *args: object) -> None:
    """Raise :class:`ContractViolation` unless ``expression`` holds.

    Args:
        expression: Condition that must be true
        message: Error message, formatted with ``%`` when ``args`` are given
        *args: Values substituted into ``message``
    """
    if not expression:
        raise ContractViolation(message % args if args else message)
