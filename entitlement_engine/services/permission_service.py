"""
Permission matching.

Checks a required ``resource:action`` against the wildcard patterns granted
to a principal. Granted patterns are evaluated in order, first match wins:

  1. ``*:*`` grants everything.
  2. A ``*`` resource grants every action, whatever the action token says,
     so ``*:create`` also grants ``orders:read``.
  3. A literal resource must equal the required resource; its action must
     then be ``*`` or equal the required action.

Malformed patterns never match and never raise.
"""

import logging
from collections.abc import Iterable

from entitlement_engine.exceptions import ForbiddenError
from entitlement_engine.models.permission import (
    LiteralToken,
    PermissionPattern,
    RequiredPermission,
    WildcardToken,
)
from entitlement_engine.models.plan import PlanTier
from entitlement_engine.models.principal import Principal
from entitlement_engine.permissions_config.permissions import get_plan_permissions
from entitlement_engine.utils.metrics import record_decision

logger = logging.getLogger(__name__)


def _as_required(required: RequiredPermission | str) -> RequiredPermission:
    if isinstance(required, RequiredPermission):
        return required
    return RequiredPermission.parse(required)


def _as_pattern(granted: PermissionPattern | str) -> PermissionPattern | None:
    if isinstance(granted, PermissionPattern):
        return granted
    return PermissionPattern.parse(granted)


def pattern_grants(pattern: PermissionPattern, required: RequiredPermission) -> bool:
    """Return True if a single granted pattern covers the required permission."""
    if pattern.is_global:
        return True

    resource = pattern.resource
    if isinstance(resource, WildcardToken):
        return True
    if resource.value != required.resource:
        return False

    action = pattern.action
    if isinstance(action, WildcardToken):
        return True
    return isinstance(action, LiteralToken) and action.value == required.action


def matches(required: RequiredPermission | str, granted: Iterable[PermissionPattern | str]) -> bool:
    """
    Return True if any granted pattern covers ``required``.

    ``required`` must be a well-formed ``resource:action``; a string that
    is not raises ValueError. Route checks parse theirs when the route is
    declared.
    """
    required = _as_required(required)
    for raw in granted:
        pattern = _as_pattern(raw)
        if pattern is None:
            logger.debug(f"Ignoring malformed permission pattern {raw!r}")
            continue
        if pattern_grants(pattern, required):
            return True
    return False


# ── Principal checks ─────────────────────────────────────────────────────────


def effective_permissions(principal: Principal, tier: PlanTier | str | None = None) -> list[str]:
    """
    Role-granted permissions plus those included in the organization's plan.

    Without a tier only the principal's own grants apply.
    """
    permissions = list(principal.permissions)
    if tier is not None:
        permissions.extend(get_plan_permissions(tier))
    return permissions


def has_permission(
    principal: Principal,
    required: RequiredPermission | str,
    tier: PlanTier | str | None = None,
) -> bool:
    """Platform administrators hold every permission."""
    if principal.is_platform_admin:
        return True
    return matches(required, effective_permissions(principal, tier))


def check_permission(
    principal: Principal,
    required: RequiredPermission | str,
    tier: PlanTier | str | None = None,
) -> None:
    """
    Raise ForbiddenError unless the principal holds ``required``.

    Raises:
        ForbiddenError: with the resource and action in the message
    """
    required = _as_required(required)
    allowed = has_permission(principal, required, tier)
    record_decision("permission", allowed)
    if allowed:
        return

    logger.warning(
        f"Permission {required} denied for principal {principal.id}",
        extra={"user_id": principal.id, "organization_id": principal.organization_id},
    )
    raise ForbiddenError(
        message=f"You do not have permission to {required.action} {required.resource}",
        details={"required_permission": str(required)},
    )
