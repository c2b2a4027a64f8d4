from .organization import OrganizationRecord, OrganizationType
from .permission import LiteralToken, PermissionPattern, RequiredPermission, WildcardToken
from .plan import UNLIMITED, MeteredResource, Plan, PlanFlags, PlanLimits, PlanTier, Subscription
from .principal import Principal, Role
from .resource import Assignee, CounterpartSubject, ResourceAccessSubject
from .tenant import TenantContext

__all__ = [
    "Assignee",
    "CounterpartSubject",
    "LiteralToken",
    "MeteredResource",
    "OrganizationRecord",
    "OrganizationType",
    "PermissionPattern",
    "Plan",
    "PlanFlags",
    "PlanLimits",
    "PlanTier",
    "Principal",
    "RequiredPermission",
    "ResourceAccessSubject",
    "Role",
    "Subscription",
    "TenantContext",
    "UNLIMITED",
    "WildcardToken",
]
