"""
Per-route policy composition.

A route declares an ordered list of checks. Each check is an async callable
that receives the PolicyContext and raises an EngineError to stop the
request; the first failure wins.

    @router.post("/activities/{activity_id}/start")
    async def start_activity(
        ctx: PolicyContext = Depends(secured(
            require_feature("activities"),
            require_permission("activities:update"),
            require_resource_access("activity", "activity_id"),
        )),
    ): ...
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from entitlement_engine.exceptions import ForbiddenError, UnauthorizedError
from entitlement_engine.models.permission import RequiredPermission
from entitlement_engine.models.plan import MeteredResource
from entitlement_engine.models.principal import Principal
from entitlement_engine.models.tenant import TenantContext
from entitlement_engine.services.access_service import AccessPolicy
from entitlement_engine.services.entitlement_service import check_feature_access
from entitlement_engine.services.permission_service import check_permission
from entitlement_engine.services.usage_service import UsageDecision

if TYPE_CHECKING:
    from entitlement_engine.engine import AuthorizationEngine

logger = logging.getLogger(__name__)


@dataclass
class PolicyContext:
    """State shared by the checks of one request."""

    engine: AuthorizationEngine
    principal: Principal
    tenant: TenantContext | None = None
    path_params: dict[str, Any] = field(default_factory=dict)
    resources: dict[str, Any] = field(default_factory=dict)
    usage: UsageDecision | None = None

    def require_tenant(self) -> TenantContext:
        if self.tenant is None:
            raise UnauthorizedError("No organization context for this request")
        return self.tenant


PolicyCheck = Callable[[PolicyContext], Awaitable[None]]


async def run_policies(ctx: PolicyContext, checks: Sequence[PolicyCheck]) -> PolicyContext:
    for check in checks:
        await check(ctx)
    return ctx


def require_platform_admin() -> PolicyCheck:
    async def check(ctx: PolicyContext) -> None:
        if not ctx.principal.is_platform_admin:
            raise ForbiddenError("Platform administrator access required")

    return check


def require_role_level(min_level: int) -> PolicyCheck:
    async def check(ctx: PolicyContext) -> None:
        if ctx.principal.is_platform_admin:
            return
        if ctx.principal.max_role_level < min_level:
            raise ForbiddenError(
                "Your role level is insufficient for this action",
                details={"required_level": min_level, "current_level": ctx.principal.max_role_level},
            )

    return check


def require_permission(permission: str) -> PolicyCheck:
    """
    The principal's grants plus the tenant's plan permissions must cover
    ``permission``. A malformed permission raises ValueError here, when the
    route is declared.
    """
    required = RequiredPermission.parse(permission)

    async def check(ctx: PolicyContext) -> None:
        tier = None
        if ctx.tenant is not None:
            tier = await ctx.engine.get_tier(ctx.tenant)
        check_permission(ctx.principal, required, tier)

    return check


def require_feature(module: str) -> PolicyCheck:
    """The tenant's organization type and plan must both include ``module``."""

    async def check(ctx: PolicyContext) -> None:
        if ctx.principal.is_platform_admin:
            return
        organization, feature_set = await ctx.engine.resolve_entitlements(ctx.require_tenant())
        check_feature_access(organization.organization_type, feature_set, module)

    return check


def require_usage_capacity(resource_type: MeteredResource | str) -> PolicyCheck:
    """Stop creations that would exceed the plan quota. Warnings are kept on the context."""

    async def check(ctx: PolicyContext) -> None:
        organization_id = ctx.tenant.organization_id if ctx.tenant else None
        ctx.usage = await ctx.engine.usage.enforce(ctx.principal, resource_type, organization_id)

    return check


def require_resource_access(
    resource_type: str,
    id_param: str = "resource_id",
    policy: AccessPolicy | None = None,
) -> PolicyCheck:
    """Authorize the resource named by path parameter ``id_param`` and keep it on the context."""

    async def check(ctx: PolicyContext) -> None:
        resource_id = ctx.path_params.get(id_param)
        if resource_id is None:
            raise ValueError(f"Route has no path parameter '{id_param}'")
        ctx.resources[resource_type] = await ctx.engine.access.authorize(
            ctx.principal, resource_type, str(resource_id), policy
        )

    return check
