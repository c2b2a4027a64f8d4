"""
Tenant Context Resolution

Binds each request to exactly one organization. Members act within their
own organization; platform administrators may act within another one by
sending its id in the override header. Every impersonation target is
validated before it is used.
"""

import logging

from starlette.requests import Request

from entitlement_engine.config import settings
from entitlement_engine.exceptions import ErrorCode, ForbiddenError, UnauthorizedError
from entitlement_engine.models.principal import Principal
from entitlement_engine.models.tenant import TenantContext
from entitlement_engine.services.collaborators import OrganizationLookup
from entitlement_engine.utils.metrics import record_decision

logger = logging.getLogger(__name__)


class TenantContextResolver:
    def __init__(self, organizations: OrganizationLookup, header_name: str | None = None):
        self.organizations = organizations
        self.header_name = header_name or settings.organization_override_header

    def get_override(self, request: Request) -> str | None:
        value = request.headers.get(self.header_name)
        if value is None:
            return None
        return value.strip() or None

    async def resolve_request(self, request: Request, principal: Principal) -> TenantContext:
        return await self.resolve(principal, self.get_override(request))

    async def resolve(self, principal: Principal, override: str | None = None) -> TenantContext:
        """
        Return the tenant context for a principal and optional override.

        Raises:
            ForbiddenError: a non-administrator sent an override
            UnauthorizedError: no organization could be bound, or the
                override target is missing, inactive or suspended
        """
        if not override:
            if not principal.organization_id:
                raise UnauthorizedError("No organization associated with this account")
            return TenantContext(organization_id=principal.organization_id)

        if not principal.is_platform_admin:
            record_decision("tenant", False)
            logger.warning(
                f"Principal {principal.id} attempted to impersonate organization {override}",
                extra={"user_id": principal.id, "organization_id": principal.organization_id},
            )
            raise ForbiddenError(
                "Only platform administrators can impersonate organizations",
                error_code=ErrorCode.TENANT_IMPERSONATION_FORBIDDEN,
            )

        try:
            organization = await self.organizations.get_organization(override)
        except (UnauthorizedError, ForbiddenError):
            raise
        except Exception as e:
            logger.error(f"Organization lookup failed for {override}: {e}", exc_info=True)
            raise UnauthorizedError("Invalid organization ID", error_code=ErrorCode.TENANT_INVALID) from e

        if organization is None:
            raise UnauthorizedError("Organization not found", error_code=ErrorCode.TENANT_NOT_FOUND)
        if not organization.is_active:
            raise UnauthorizedError("Organization is inactive", error_code=ErrorCode.TENANT_INACTIVE)
        if organization.is_suspended:
            raise UnauthorizedError("Organization is suspended", error_code=ErrorCode.TENANT_SUSPENDED)

        record_decision("tenant", True)
        logger.info(
            f"Platform admin {principal.id} impersonating organization {organization.id} ({organization.name})",
            extra={"user_id": principal.id, "organization_id": organization.id},
        )
        return TenantContext(
            organization_id=organization.id,
            is_impersonation=True,
            acting_admin_id=principal.id,
            organization_name=organization.name,
        )
