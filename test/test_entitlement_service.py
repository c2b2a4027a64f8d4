"""
Tests for entitlement resolution.
"""

from unittest.mock import AsyncMock

import pytest

from entitlement_engine.exceptions import FeatureNotAvailableError
from entitlement_engine.models import OrganizationRecord, OrganizationType, PlanFlags, PlanTier
from entitlement_engine.permissions_config.plans import PLAN_CATALOG
from entitlement_engine.services.entitlement_service import (
    EntitlementService,
    FeatureSet,
    check_feature_access,
    has_capability,
    organization_supports_module,
    resolve_entitlements,
)

FREE_FARM_MODULES = {"farm_management", "activities", "marketplace", "orders", "inventory", "media"}
BASE_FEATURES = {"basic_farm_management", "marketplace_access", "order_management", "inventory_management"}


class TestResolveEntitlements:
    @pytest.mark.parametrize("tier", list(PlanTier))
    @pytest.mark.parametrize("org_type", list(OrganizationType))
    def test_resolution_is_idempotent(self, org_type, tier):
        flags = PLAN_CATALOG[tier].flags

        first = resolve_entitlements(org_type, tier, flags)
        second = resolve_entitlements(org_type, tier, flags)

        assert first == second
        assert first.features == second.features
        assert first.modules == second.modules

    def test_free_farm_operation(self):
        result = resolve_entitlements(OrganizationType.FARM_OPERATION, PlanTier.FREE)

        assert result.modules == FREE_FARM_MODULES
        assert result.features == BASE_FEATURES

    def test_org_type_limits_tier_modules(self):
        result = resolve_entitlements(OrganizationType.LOGISTICS_PROVIDER, PlanTier.FREE)

        assert result.modules == {"orders"}

    def test_enterprise_logistics_unlocks_fleet_modules(self):
        result = resolve_entitlements(OrganizationType.LOGISTICS_PROVIDER, PlanTier.ENTERPRISE)

        assert result.modules == {"deliveries", "tracking", "orders", "drivers"}
        assert {"white_label", "priority_support", "unlimited_usage"} <= result.features

    def test_advanced_analytics_flag_adds_modules_and_feature(self):
        result = resolve_entitlements(
            OrganizationType.FARM_OPERATION, PlanTier.FREE, PlanFlags(has_advanced_analytics=True)
        )

        assert {"analytics", "intelligence"} <= result.modules
        assert "advanced_analytics" in result.features

    def test_flags_accept_plain_dict(self):
        result = resolve_entitlements(OrganizationType.COMMODITY_TRADER, PlanTier.BASIC, {"has_white_label": True})

        assert "white_label" in result.features

    def test_disabled_flags_add_nothing(self):
        with_flags = resolve_entitlements(OrganizationType.FARM_OPERATION, PlanTier.FREE, PlanFlags())
        without = resolve_entitlements(OrganizationType.FARM_OPERATION, PlanTier.FREE)

        assert with_flags == without

    def test_unknown_tier_resolves_as_free(self):
        unknown = resolve_entitlements(OrganizationType.FARM_OPERATION, "PLATINUM")
        free = resolve_entitlements(OrganizationType.FARM_OPERATION, PlanTier.FREE)

        assert unknown == free

    def test_unknown_org_type_is_well_formed(self):
        result = resolve_entitlements("SPACE_AGENCY", PlanTier.PRO)

        assert isinstance(result, FeatureSet)
        assert result.modules == frozenset()
        assert "advanced_analytics" in result.features

    def test_org_type_accepts_string_value(self):
        assert resolve_entitlements("FARM_OPERATION", "FREE").modules == FREE_FARM_MODULES

    def test_to_dict_is_sorted(self):
        result = resolve_entitlements(OrganizationType.FARM_OPERATION, PlanTier.FREE)

        assert result.to_dict()["modules"] == sorted(FREE_FARM_MODULES)


class TestFeatureAccess:
    def test_rbac_is_always_available(self):
        empty = FeatureSet(features=frozenset(), modules=frozenset())

        assert check_feature_access("SPACE_AGENCY", empty, "rbac") is None
        assert organization_supports_module(OrganizationType.LOGISTICS_PROVIDER, "rbac")

    def test_module_outside_org_type(self):
        feature_set = resolve_entitlements(OrganizationType.LOGISTICS_PROVIDER, PlanTier.ENTERPRISE)

        with pytest.raises(FeatureNotAvailableError) as exc_info:
            check_feature_access(OrganizationType.LOGISTICS_PROVIDER, feature_set, "farm_management")

        assert exc_info.value.message == "Feature 'farm_management' is not available for LOGISTICS_PROVIDER organizations"
        assert exc_info.value.status_code == 403

    def test_module_outside_plan(self):
        feature_set = resolve_entitlements(OrganizationType.FARM_OPERATION, PlanTier.FREE)

        with pytest.raises(FeatureNotAvailableError) as exc_info:
            check_feature_access(OrganizationType.FARM_OPERATION, feature_set, "analytics")

        assert "not included in your current plan" in exc_info.value.message
        assert exc_info.value.details == {"feature": "analytics"}

    def test_module_in_plan(self):
        feature_set = resolve_entitlements(OrganizationType.FARM_OPERATION, PlanTier.FREE)

        assert check_feature_access(OrganizationType.FARM_OPERATION, feature_set, "inventory") is None

    def test_capabilities_by_org_type(self):
        assert has_capability(OrganizationType.LOGISTICS_PROVIDER, "upload_delivery_proof")
        assert not has_capability(OrganizationType.COMMODITY_TRADER, "create_farms")
        assert has_capability("INTEGRATED_FARM", "use_intelligence")
        assert not has_capability("SPACE_AGENCY", "create_farms")


class TestEntitlementService:
    @pytest.mark.asyncio
    async def test_uses_subscription_plan(self, directory):
        service = EntitlementService(directory)
        organization = await directory.get_organization("org-2")

        result = await service.entitlements_for(organization)

        assert "trading" in result.modules
        assert "ai_insights" in result.features

    @pytest.mark.asyncio
    async def test_missing_subscription_uses_free(self):
        subscriptions = AsyncMock()
        subscriptions.get_subscription.return_value = None
        service = EntitlementService(subscriptions)

        result = await service.entitlements_for(OrganizationRecord(id="org-x", name="New Farm"))

        assert result.modules == FREE_FARM_MODULES
        subscriptions.get_subscription.assert_awaited_once_with("org-x")
