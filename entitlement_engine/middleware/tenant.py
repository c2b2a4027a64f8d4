"""
Tenant Context Middleware

Resolves the organization each authenticated request acts on and stores it
as request.state.tenant_context. Platform administrators may impersonate an
organization by sending its id in the X-Organization-Id header; impersonated
responses carry X-Impersonated-Organization and
X-Impersonated-Organization-Name.

The authentication layer must run first and set request.state.principal.
Requests without a principal pass through untouched.

Errors raised here never reach the app's exception handlers, so they are
rendered directly.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from entitlement_engine.exception_handlers import engine_error_response
from entitlement_engine.exceptions import EngineError
from entitlement_engine.services.tenant_service import TenantContextResolver

if TYPE_CHECKING:
    from collections.abc import Callable

    from fastapi import Request
    from starlette.responses import Response

logger = logging.getLogger(__name__)


class TenantContextMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, resolver: TenantContextResolver):
        super().__init__(app)
        self.resolver = resolver

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Always initialise state so downstream code can safely read without AttributeError
        request.state.tenant_context = None

        principal = getattr(request.state, "principal", None)
        if principal is None:
            return await call_next(request)

        override = self.resolver.get_override(request)
        if override is None and not principal.organization_id:
            # Platform-level caller without a tenant; routes that need one reject it
            return await call_next(request)

        try:
            tenant = await self.resolver.resolve(principal, override)
        except EngineError as exc:
            logger.warning(
                f"Tenant resolution failed for principal {principal.id}: {exc.message}",
                extra={"user_id": principal.id, "path": request.url.path},
            )
            return engine_error_response(request, exc)

        request.state.tenant_context = tenant
        logger.debug(f"Tenant resolved: {tenant.organization_id} (impersonation={tenant.is_impersonation})")

        response = await call_next(request)
        for name, value in tenant.audit_headers().items():
            response.headers[name] = value
        return response
