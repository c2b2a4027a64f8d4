"""
Pytest configuration and fixtures for entitlement engine tests.

Everything runs against an InMemoryDirectory; no external services are
needed. The ``app`` fixture adds a middleware that authenticates requests
from the ``X-Test-Principal`` header, standing in for the real
authentication layer.
"""

from collections.abc import AsyncGenerator
from datetime import datetime, timezone

import pytest
from fastapi import APIRouter, Depends, FastAPI, status
from httpx import ASGITransport, AsyncClient
from starlette.middleware.base import BaseHTTPMiddleware

from entitlement_engine.engine import AuthorizationEngine
from entitlement_engine.main import create_app
from entitlement_engine.models import (
    Assignee,
    CounterpartSubject,
    OrganizationRecord,
    OrganizationType,
    PlanTier,
    Principal,
    ResourceAccessSubject,
    Role,
    Subscription,
)
from entitlement_engine.permissions_config.permission_dependencies import secured
from entitlement_engine.permissions_config.plans import PLAN_CATALOG
from entitlement_engine.services.access_service import SupplierAccessPolicy
from entitlement_engine.services.cache_service import UsageCache
from entitlement_engine.services.collaborators import InMemoryDirectory
from entitlement_engine.services.policy import (
    PolicyContext,
    require_feature,
    require_permission,
    require_resource_access,
)

PERIOD_START = datetime(2026, 10, 1, tzinfo=timezone.utc)
PERIOD_END = datetime(2026, 11, 1, tzinfo=timezone.utc)


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


PRINCIPALS = {
    "worker": Principal(
        id="user-1",
        organization_id="org-1",
        email="worker@greenacres.test",
        roles=[Role(name="worker", level=20)],
        permissions=["farms:read"],
    ),
    "manager": Principal(
        id="user-2",
        organization_id="org-1",
        roles=[Role(name="manager", level=50)],
    ),
    "trader": Principal(
        id="user-9",
        organization_id="org-2",
        roles=[Role(name="owner", level=100)],
    ),
    "basic": Principal(
        id="user-5",
        organization_id="org-basic",
        roles=[Role(name="admin", level=80)],
    ),
    "admin": Principal(id="admin-1", is_platform_admin=True),
}


class PrincipalHeaderMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        request.state.principal = PRINCIPALS.get(request.headers.get("X-Test-Principal", ""))
        return await call_next(request)


def _subscription(organization_id: str, tier: PlanTier) -> Subscription:
    return Subscription(
        organization_id=organization_id,
        plan=PLAN_CATALOG[tier],
        current_period_start=PERIOD_START,
        current_period_end=PERIOD_END,
    )


@pytest.fixture
def directory() -> InMemoryDirectory:
    directory = InMemoryDirectory()

    directory.add_organization(OrganizationRecord(id="org-1", name="Green Acres"))
    directory.add_organization(
        OrganizationRecord(id="org-2", name="Grain Traders", organization_type=OrganizationType.COMMODITY_TRADER)
    )
    directory.add_organization(OrganizationRecord(id="org-basic", name="Hill Farm"))
    directory.add_organization(
        OrganizationRecord(id="org-suspended", name="Late Payers", suspended_at=datetime(2026, 9, 1, tzinfo=timezone.utc))
    )
    directory.add_organization(OrganizationRecord(id="org-inactive", name="Closed Farm", is_active=False))

    directory.add_subscription(_subscription("org-1", PlanTier.FREE))
    directory.add_subscription(_subscription("org-2", PlanTier.PRO))
    directory.add_subscription(_subscription("org-basic", PlanTier.BASIC))

    directory.add_resource(
        ResourceAccessSubject(
            resource_type="activity",
            resource_id="act-1",
            owner_organization_id="org-1",
            creator_id="user-3",
            assignees=[Assignee(user_id="user-4")],
        )
    )
    directory.add_resource(
        CounterpartSubject(
            resource_type="order",
            resource_id="ord-1",
            buyer_organization_id="org-1",
            supplier_organization_id="org-2",
            creator_id="user-1",
            status="PENDING",
        )
    )
    return directory


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def engine(directory, clock) -> AuthorizationEngine:
    return AuthorizationEngine.from_directory(directory, usage_cache=UsageCache(ttl_seconds=60, clock=clock))


def _build_test_router() -> APIRouter:
    router = APIRouter()

    @router.post("/farms", status_code=status.HTTP_201_CREATED)
    async def create_farm(
        ctx: PolicyContext = Depends(secured(require_feature("farm_management"), require_permission("farms:create"))),
    ):
        return {"created": True, "organization_id": ctx.tenant.organization_id}

    @router.post("/listings", status_code=status.HTTP_201_CREATED)
    async def create_listing():
        return {"created": True}

    @router.get("/analytics/reports")
    async def analytics_reports(ctx: PolicyContext = Depends(secured(require_feature("analytics")))):
        return {"reports": []}

    @router.post("/activities/{activity_id}/start")
    async def start_activity(
        ctx: PolicyContext = Depends(secured(require_resource_access("activity", "activity_id"))),
    ):
        return {"started": ctx.resources["activity"].resource_id}

    @router.post("/orders/{order_id}/ship")
    async def ship_order(
        ctx: PolicyContext = Depends(secured(require_resource_access("order", "order_id", SupplierAccessPolicy()))),
    ):
        return {"shipped": ctx.resources["order"].resource_id}

    return router


@pytest.fixture
def app(engine) -> FastAPI:
    app = create_app(engine, configure_logging=False)
    app.include_router(_build_test_router())
    app.add_middleware(PrincipalHeaderMiddleware)
    return app


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac