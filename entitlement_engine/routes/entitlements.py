from fastapi import APIRouter, Depends

from entitlement_engine.engine import AuthorizationEngine
from entitlement_engine.models.organization import OrganizationType
from entitlement_engine.models.tenant import TenantContext
from entitlement_engine.permissions_config.permission_dependencies import get_engine, get_tenant_context
from entitlement_engine.schemas.entitlements import EntitlementsResponse, UsageStatsResponse

router = APIRouter(tags=["Entitlements"])


@router.get("/entitlements/me", response_model=EntitlementsResponse)
async def get_my_entitlements(
    tenant: TenantContext = Depends(get_tenant_context),
    engine: AuthorizationEngine = Depends(get_engine),
):
    """Features and modules available to the current organization."""
    organization, feature_set = await engine.resolve_entitlements(tenant)
    tier = await engine.get_tier(tenant)
    org_type = organization.organization_type
    return EntitlementsResponse(
        organization_id=organization.id,
        organization_type=org_type.value if isinstance(org_type, OrganizationType) else str(org_type),
        tier=tier.value,
        is_impersonation=tenant.is_impersonation,
        **feature_set.to_dict(),
    )


@router.get("/usage", response_model=UsageStatsResponse)
async def get_usage(
    tenant: TenantContext = Depends(get_tenant_context),
    engine: AuthorizationEngine = Depends(get_engine),
):
    """Current usage against plan limits for every metered resource."""
    return await engine.usage.get_usage_stats(tenant.organization_id)
