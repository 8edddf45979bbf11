"""Turns authorization decisions into API errors on write paths."""

import logging

from devcamper.core.logging_safety import safe_log_identifier
from devcamper.domain.authorization import Allow, Deny
from devcamper.errors import bad_request, forbidden

logger = logging.getLogger(__name__)


def ensure_allowed(decision: Allow | Deny) -> None:
    """Raise 403 for an ownership or role denial."""
    if isinstance(decision, Allow):
        return
    logger.warning(
        "authz.denied resource_id=%s action=%s",
        safe_log_identifier(decision.resource_id, prefix="rid"),
        decision.action.value if decision.action else "access",
    )
    details = None
    if decision.resource_id is not None:
        details = {
            "resource_id": decision.resource_id,
            "action": decision.action.value if decision.action else None,
        }
    raise forbidden(decision.reason, details=details)


def ensure_precondition(decision: Allow | Deny) -> None:
    """Raise 400 when a business precondition (e.g. one bootcamp per publisher) fails."""
    if isinstance(decision, Allow):
        return
    logger.info("precondition.failed action=%s", decision.action.value if decision.action else "create")
    raise bad_request(decision.reason)


__all__ = ["ensure_allowed", "ensure_precondition"]
