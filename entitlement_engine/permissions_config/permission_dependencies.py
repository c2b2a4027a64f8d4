from fastapi import Depends, Request, Response

from entitlement_engine.constants.headers import USAGE_WARNING_HEADER
from entitlement_engine.engine import AuthorizationEngine
from entitlement_engine.exceptions import UnauthorizedError
from entitlement_engine.models.principal import Principal
from entitlement_engine.models.tenant import TenantContext
from entitlement_engine.services.policy import PolicyCheck, PolicyContext, run_policies


def get_engine(request: Request) -> AuthorizationEngine:
    return request.app.state.engine


def get_principal(request: Request) -> Principal:
    """The principal placed on request.state by the authentication layer."""
    principal = getattr(request.state, "principal", None)
    if principal is None:
        raise UnauthorizedError()
    return principal


def get_tenant_context(request: Request, principal: Principal = Depends(get_principal)) -> TenantContext:
    tenant = getattr(request.state, "tenant_context", None)
    if tenant is None:
        raise UnauthorizedError("No organization context for this request")
    return tenant


def secured(*checks: PolicyCheck):
    """Dependency factory running ``checks`` in order before the route."""

    async def dependency(
        request: Request,
        response: Response,
        principal: Principal = Depends(get_principal),
        engine: AuthorizationEngine = Depends(get_engine),
    ) -> PolicyContext:
        ctx = PolicyContext(
            engine=engine,
            principal=principal,
            tenant=getattr(request.state, "tenant_context", None),
            path_params=dict(request.path_params),
        )
        await run_policies(ctx, checks)
        if ctx.usage is not None and ctx.usage.warning:
            response.headers[USAGE_WARNING_HEADER] = ctx.usage.warning
        return ctx

    return dependency
