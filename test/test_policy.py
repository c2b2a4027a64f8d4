"""
Tests for per-route policy composition.
"""

import pytest

from entitlement_engine.exceptions import (
    FeatureNotAvailableError,
    ForbiddenError,
    UnauthorizedError,
    UsageLimitExceededError,
)
from entitlement_engine.models import MeteredResource, Principal, Role, TenantContext
from entitlement_engine.services.policy import (
    PolicyContext,
    require_feature,
    require_permission,
    require_platform_admin,
    require_resource_access,
    require_role_level,
    require_usage_capacity,
    run_policies,
)

WORKER = Principal(id="user-1", organization_id="org-1", roles=[Role(name="worker", level=20)])
ADMIN = Principal(id="admin-1", is_platform_admin=True)
OWN_TENANT = TenantContext(organization_id="org-1")


def _ctx(engine, principal=WORKER, tenant=OWN_TENANT, **path_params) -> PolicyContext:
    return PolicyContext(engine=engine, principal=principal, tenant=tenant, path_params=path_params)


class TestRunPolicies:
    @pytest.mark.asyncio
    async def test_checks_run_in_order_and_stop_at_first_failure(self, engine):
        calls = []

        async def first(ctx):
            calls.append("first")

        async def failing(ctx):
            calls.append("failing")
            raise ForbiddenError("nope")

        async def never(ctx):
            calls.append("never")

        with pytest.raises(ForbiddenError):
            await run_policies(_ctx(engine), [first, failing, never])

        assert calls == ["first", "failing"]

    @pytest.mark.asyncio
    async def test_returns_context(self, engine):
        ctx = _ctx(engine)

        assert await run_policies(ctx, []) is ctx


class TestRoleChecks:
    @pytest.mark.asyncio
    async def test_role_level_insufficient(self, engine):
        with pytest.raises(ForbiddenError) as exc_info:
            await require_role_level(50)(_ctx(engine))

        assert exc_info.value.message == "Your role level is insufficient for this action"
        assert exc_info.value.details == {"required_level": 50, "current_level": 20}

    @pytest.mark.asyncio
    async def test_role_level_sufficient(self, engine):
        await require_role_level(20)(_ctx(engine))

    @pytest.mark.asyncio
    async def test_platform_admin_passes_role_level(self, engine):
        await require_role_level(100)(_ctx(engine, principal=ADMIN, tenant=None))

    @pytest.mark.asyncio
    async def test_require_platform_admin(self, engine):
        await require_platform_admin()(_ctx(engine, principal=ADMIN))

        with pytest.raises(ForbiddenError):
            await require_platform_admin()(_ctx(engine))


class TestPermissionAndFeatureChecks:
    @pytest.mark.asyncio
    async def test_plan_permission_is_used(self, engine):
        await require_permission("farms:create")(_ctx(engine))

    def test_malformed_permission_fails_at_declaration(self):
        with pytest.raises(ValueError):
            require_permission("orders")

    @pytest.mark.asyncio
    async def test_permission_outside_plan(self, engine):
        with pytest.raises(ForbiddenError):
            await require_permission("orders:read")(_ctx(engine))

    @pytest.mark.asyncio
    async def test_feature_in_plan(self, engine):
        await require_feature("inventory")(_ctx(engine))

    @pytest.mark.asyncio
    async def test_feature_outside_plan(self, engine):
        with pytest.raises(FeatureNotAvailableError):
            await require_feature("analytics")(_ctx(engine))

    @pytest.mark.asyncio
    async def test_feature_needs_tenant(self, engine):
        with pytest.raises(UnauthorizedError):
            await require_feature("inventory")(_ctx(engine, tenant=None))

    @pytest.mark.asyncio
    async def test_admin_bypasses_feature_check(self, engine):
        await require_feature("analytics")(_ctx(engine, principal=ADMIN))


class TestUsageAndResourceChecks:
    @pytest.mark.asyncio
    async def test_usage_capacity_records_decision(self, engine, directory):
        directory.set_usage("org-1", MeteredResource.ACTIVITIES, 40)
        ctx = _ctx(engine)

        await require_usage_capacity(MeteredResource.ACTIVITIES)(ctx)

        assert ctx.usage.allowed is True
        assert ctx.usage.warning == "activities usage at 80.0%"

    @pytest.mark.asyncio
    async def test_usage_capacity_exceeded(self, engine, directory):
        directory.set_usage("org-1", MeteredResource.FARMS, 1)

        with pytest.raises(UsageLimitExceededError):
            await require_usage_capacity("farms")(_ctx(engine))

    @pytest.mark.asyncio
    async def test_usage_capacity_skips_unmetered_type(self, engine):
        ctx = _ctx(engine)

        await require_usage_capacity("orders")(ctx)

        assert ctx.usage.allowed is True
        assert ctx.usage.reason == "not a metered resource"

    @pytest.mark.asyncio
    async def test_resource_access_keeps_subject(self, engine):
        manager = Principal(id="user-2", organization_id="org-1", roles=[Role(name="manager", level=50)])
        ctx = _ctx(engine, principal=manager, activity_id="act-1")

        await require_resource_access("activity", "activity_id")(ctx)

        assert ctx.resources["activity"].resource_id == "act-1"

    @pytest.mark.asyncio
    async def test_resource_access_denied(self, engine):
        with pytest.raises(ForbiddenError):
            await require_resource_access("activity", "activity_id")(_ctx(engine, activity_id="act-1"))

    @pytest.mark.asyncio
    async def test_missing_path_parameter(self, engine):
        with pytest.raises(ValueError):
            await require_resource_access("activity", "activity_id")(_ctx(engine))
