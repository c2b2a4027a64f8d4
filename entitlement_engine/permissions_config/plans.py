"""Plan catalog: quotas and capability flags per tier."""

from entitlement_engine.models.plan import UNLIMITED, Plan, PlanFlags, PlanLimits, PlanTier

PLAN_CATALOG: dict[PlanTier, Plan] = {
    PlanTier.FREE: Plan(
        tier=PlanTier.FREE,
        name="Free",
        limits=PlanLimits(
            max_users=1,
            max_farms=1,
            max_activities_per_month=50,
            max_active_listings=0,
            storage_gb=1,
            api_calls_per_day=100,
        ),
    ),
    PlanTier.BASIC: Plan(
        tier=PlanTier.BASIC,
        name="Basic",
        limits=PlanLimits(
            max_users=3,
            max_farms=2,
            max_activities_per_month=UNLIMITED,
            max_active_listings=5,
            storage_gb=5,
            api_calls_per_day=500,
        ),
    ),
    PlanTier.PRO: Plan(
        tier=PlanTier.PRO,
        name="Pro",
        limits=PlanLimits(
            max_users=10,
            max_farms=5,
            max_activities_per_month=UNLIMITED,
            max_active_listings=UNLIMITED,
            storage_gb=50,
            api_calls_per_day=5000,
        ),
        flags=PlanFlags(
            has_advanced_analytics=True,
            has_ai_insights=True,
            has_api_access=True,
            has_custom_roles=True,
            has_priority_support=True,
        ),
    ),
    PlanTier.ENTERPRISE: Plan(
        tier=PlanTier.ENTERPRISE,
        name="Enterprise",
        limits=PlanLimits(
            max_users=UNLIMITED,
            max_farms=UNLIMITED,
            max_activities_per_month=UNLIMITED,
            max_active_listings=UNLIMITED,
            storage_gb=UNLIMITED,
            api_calls_per_day=UNLIMITED,
        ),
        flags=PlanFlags(
            has_advanced_analytics=True,
            has_ai_insights=True,
            has_api_access=True,
            has_custom_roles=True,
            has_priority_support=True,
            has_white_label=True,
        ),
    ),
}
