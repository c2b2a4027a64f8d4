"""
Usage Limit Middleware

Checks plan quotas before collection creations (POST to a path ending in
/users, /farms, /activities or /listings). Over-limit requests get a 403;
requests at or above the warning threshold get an X-Usage-Warning header.
A successful creation invalidates the cached count so the next check sees
it.

Must run inside TenantContextMiddleware so the tenant context is available.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from entitlement_engine.constants.headers import USAGE_WARNING_HEADER
from entitlement_engine.exception_handlers import engine_error_response
from entitlement_engine.exceptions import EngineError
from entitlement_engine.models.plan import MeteredResource
from entitlement_engine.services.usage_service import UsageGovernor

if TYPE_CHECKING:
    from collections.abc import Callable

    from fastapi import Request
    from starlette.responses import Response

logger = logging.getLogger(__name__)

METERED_COLLECTIONS = {resource.value: resource for resource in MeteredResource}


def resolve_metered_resource(method: str, path: str) -> MeteredResource | None:
    """Return the metered resource a request creates, if any."""
    if method.upper() != "POST":
        return None
    collection = path.rstrip("/").rsplit("/", 1)[-1]
    return METERED_COLLECTIONS.get(collection)


class UsageLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, governor: UsageGovernor):
        super().__init__(app)
        self.governor = governor

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        resource = resolve_metered_resource(request.method, request.url.path)
        principal = getattr(request.state, "principal", None)
        if resource is None or principal is None:
            return await call_next(request)

        tenant = getattr(request.state, "tenant_context", None)
        organization_id = tenant.organization_id if tenant else principal.organization_id

        try:
            decision = await self.governor.enforce(principal, resource, organization_id)
        except EngineError as exc:
            return engine_error_response(request, exc)

        request.state.usage_decision = decision
        response = await call_next(request)

        if decision.warning:
            response.headers[USAGE_WARNING_HEADER] = decision.warning
        if organization_id and 200 <= response.status_code < 300:
            self.governor.invalidate_cache(organization_id, resource)
            logger.debug(f"Invalidated {resource.value} usage for {organization_id} after creation")
        return response
