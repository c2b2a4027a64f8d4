"""
Plan permission table.

Permissions every member of an organization receives from its subscription
tier, on top of the permissions granted by their roles.
"""

from entitlement_engine.models.plan import PlanTier

FREE_PERMISSIONS = [
    "farms:read",
    "farms:create",
    "activities:read",
    "activities:create",
    "inventory:read",
    "marketplace:browse",
    "media:read",
    "media:create",
]

BASIC_PERMISSIONS = [
    "farms:read",
    "farms:create",
    "farms:update",
    "activities:read",
    "activities:create",
    "activities:update",
    "activities:delete",
    "inventory:read",
    "inventory:create",
    "inventory:update",
    "inventory:delete",
    "marketplace:browse",
    "marketplace:read",
    "orders:read",
    "orders:create",
    "analytics:read",
    "media:read",
    "media:create",
    "media:update",
    "media:delete",
]

PRO_PERMISSIONS = [
    "farms:*",
    "activities:*",
    "activities:assign",
    "activities:bulk_schedule",
    "inventory:*",
    "marketplace:*",
    "marketplace:create_listing",
    "marketplace:generate_contract",
    "orders:*",
    "analytics:*",
    "analytics:export",
    "intelligence:read",
    "intelligence:create",
    "api:access",
    "media:*",
    "users:read",
    "users:update",
    "organizations:read",
    "organizations:update",
]

ENTERPRISE_PERMISSIONS = [
    "*:*",
    "rbac:read",
    "rbac:create",
    "rbac:update",
    "rbac:delete",
    "organizations:export",
    "organizations:backup",
    "organizations:delete",
]

PLAN_PERMISSIONS: dict[PlanTier, list[str]] = {
    PlanTier.FREE: FREE_PERMISSIONS,
    PlanTier.BASIC: BASIC_PERMISSIONS,
    PlanTier.PRO: PRO_PERMISSIONS,
    PlanTier.ENTERPRISE: ENTERPRISE_PERMISSIONS,
}


def get_plan_permissions(tier) -> list[str]:
    """Return the permissions included in a tier. Unknown tiers get FREE."""
    parsed = PlanTier.parse(tier)
    return PLAN_PERMISSIONS.get(parsed, FREE_PERMISSIONS)
