"""
Feature catalog.

Which modules each organization type can ever use, which modules and
features each tier unlocks, and what the plan capability flags add.
"""

from entitlement_engine.models.organization import OrganizationType
from entitlement_engine.models.plan import PlanTier

# Modules that every organization can use regardless of type or plan
ALWAYS_AVAILABLE_MODULES = frozenset({"rbac"})

ORGANIZATION_MODULES: dict[OrganizationType, list[str]] = {
    OrganizationType.FARM_OPERATION: [
        "farm_management",
        "activities",
        "inventory",
        "analytics",
        "observations",
        "sensors",
        "crop_cycles",
        "areas",
        "seasons",
        "media",
        "orders",
        "marketplace",
    ],
    OrganizationType.COMMODITY_TRADER: [
        "marketplace",
        "orders",
        "trading",
        "analytics",
        "inventory",
        "deliveries",
    ],
    OrganizationType.LOGISTICS_PROVIDER: [
        "deliveries",
        "tracking",
        "orders",
        "drivers",
    ],
    OrganizationType.INTEGRATED_FARM: [
        "farm_management",
        "marketplace",
        "orders",
        "trading",
        "activities",
        "inventory",
        "analytics",
        "observations",
        "sensors",
        "crop_cycles",
        "areas",
        "seasons",
        "deliveries",
        "intelligence",
        "media",
    ],
}

ORGANIZATION_CAPABILITIES: dict[OrganizationType, list[str]] = {
    OrganizationType.FARM_OPERATION: [
        "create_farms",
        "manage_crops",
        "track_activities",
        "view_analytics",
        "data_export",
        "manage_inventory",
        "create_observations",
        "view_sensors",
        "manage_seasons",
        "create_orders",
        "browse_commodities",
        "manage_trades",
        "view_market_analytics",
        "negotiate_prices",
    ],
    OrganizationType.COMMODITY_TRADER: [
        "browse_commodities",
        "create_orders",
        "manage_trades",
        "view_market_analytics",
        "negotiate_prices",
        "track_deliveries",
        "manage_inventory",
    ],
    OrganizationType.LOGISTICS_PROVIDER: [
        "manage_deliveries",
        "track_shipments",
        "view_orders",
        "manage_drivers",
        "update_delivery_status",
        "upload_delivery_proof",
    ],
    OrganizationType.INTEGRATED_FARM: [
        "create_farms",
        "manage_crops",
        "track_activities",
        "view_analytics",
        "data_export",
        "manage_inventory",
        "create_observations",
        "view_sensors",
        "manage_seasons",
        "browse_commodities",
        "create_orders",
        "manage_trades",
        "view_market_analytics",
        "negotiate_prices",
        "track_deliveries",
        "use_intelligence",
        "analyze_farm_data",
        "optimize_activities",
    ],
}

_FREE_MODULES = ["farm_management", "activities", "marketplace", "orders", "inventory", "media"]
_PRO_MODULES = [
    "farm_management",
    "activities",
    "inventory",
    "analytics",
    "marketplace",
    "orders",
    "trading",
    "deliveries",
    "observations",
    "crop_cycles",
    "intelligence",
    "media",
]

TIER_MODULES: dict[PlanTier, list[str]] = {
    PlanTier.FREE: _FREE_MODULES,
    PlanTier.BASIC: _FREE_MODULES + ["deliveries"],
    PlanTier.PRO: _PRO_MODULES,
    PlanTier.ENTERPRISE: _PRO_MODULES + ["sensors", "areas", "seasons", "drivers", "tracking"],
}

_BASE_FEATURES = [
    "basic_farm_management",
    "marketplace_access",
    "order_management",
    "inventory_management",
]
_PRO_FEATURES = _BASE_FEATURES + ["advanced_analytics", "ai_insights", "api_access", "custom_roles"]

TIER_FEATURES: dict[PlanTier, list[str]] = {
    PlanTier.FREE: _BASE_FEATURES,
    PlanTier.BASIC: _BASE_FEATURES,
    PlanTier.PRO: _PRO_FEATURES,
    PlanTier.ENTERPRISE: _PRO_FEATURES + ["white_label", "priority_support", "unlimited_usage"],
}

# Plan flag name -> (features added, modules added)
FLAG_ADDITIONS: dict[str, tuple[list[str], list[str]]] = {
    "has_advanced_analytics": (["advanced_analytics"], ["analytics", "intelligence"]),
    "has_ai_insights": (["ai_insights"], []),
    "has_api_access": (["api_access"], []),
    "has_custom_roles": (["custom_roles"], []),
    "has_priority_support": (["priority_support"], []),
    "has_white_label": (["white_label"], []),
}
