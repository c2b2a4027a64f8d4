"""
AuthorizationEngine wires the five components to one set of collaborators.

A request flows through them in this order: tenant context, then
entitlements and permissions, then usage (creations only), then resource
access (operations on an existing resource).
"""

from __future__ import annotations

from entitlement_engine.exceptions import ResourceNotFoundError
from entitlement_engine.models.organization import OrganizationRecord
from entitlement_engine.models.plan import PlanTier
from entitlement_engine.models.tenant import TenantContext
from entitlement_engine.services.access_service import ResourceAccessService
from entitlement_engine.services.cache_service import UsageCache
from entitlement_engine.services.collaborators import (
    InMemoryDirectory,
    OrganizationLookup,
    ResourceLookup,
    SubscriptionLookup,
    UsageCounter,
)
from entitlement_engine.services.entitlement_service import EntitlementService, FeatureSet
from entitlement_engine.services.tenant_service import TenantContextResolver
from entitlement_engine.services.usage_service import UsageGovernor


class AuthorizationEngine:
    def __init__(
        self,
        organizations: OrganizationLookup,
        subscriptions: SubscriptionLookup,
        resources: ResourceLookup,
        usage_counter: UsageCounter,
        usage_cache: UsageCache | None = None,
    ):
        self.organizations = organizations
        self.tenants = TenantContextResolver(organizations)
        self.entitlements = EntitlementService(subscriptions)
        self.usage = UsageGovernor(
            subscriptions,
            usage_counter,
            cache=usage_cache,
        )
        self.access = ResourceAccessService(resources)

    @classmethod
    def from_directory(cls, directory: InMemoryDirectory, usage_cache: UsageCache | None = None) -> AuthorizationEngine:
        """Build an engine whose collaborators are all served by one directory."""
        return cls(
            organizations=directory,
            subscriptions=directory,
            resources=directory,
            usage_counter=directory,
            usage_cache=usage_cache,
        )

    async def get_organization(self, organization_id: str) -> OrganizationRecord:
        organization = await self.organizations.get_organization(organization_id)
        if organization is None:
            raise ResourceNotFoundError("Organization", organization_id)
        return organization

    async def get_tier(self, tenant: TenantContext) -> PlanTier:
        tier, _ = await self.entitlements.get_tier_and_flags(tenant.organization_id)
        return tier

    async def resolve_entitlements(self, tenant: TenantContext) -> tuple[OrganizationRecord, FeatureSet]:
        organization = await self.get_organization(tenant.organization_id)
        return organization, await self.entitlements.entitlements_for(organization)
