"""Subscription plan models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

# Limit value meaning "no limit"
UNLIMITED = -1


class PlanTier(str, Enum):
    """Subscription tiers, ordered FREE < BASIC < PRO < ENTERPRISE."""

    FREE = "FREE"
    BASIC = "BASIC"
    PRO = "PRO"
    ENTERPRISE = "ENTERPRISE"

    @property
    def rank(self) -> int:
        return _TIER_RANK[self]

    @classmethod
    def parse(cls, value: str | PlanTier | None) -> PlanTier | None:
        """Return the tier for a value, or None if it is not a known tier."""
        if isinstance(value, PlanTier):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.upper())
        except ValueError:
            return None

    def __lt__(self, other):
        if not isinstance(other, PlanTier):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, PlanTier):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, PlanTier):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, PlanTier):
            return NotImplemented
        return self.rank >= other.rank


_TIER_RANK = {
    PlanTier.FREE: 0,
    PlanTier.BASIC: 1,
    PlanTier.PRO: 2,
    PlanTier.ENTERPRISE: 3,
}


class MeteredResource(str, Enum):
    """Resource types whose creation is governed by plan quotas."""

    USERS = "users"
    FARMS = "farms"
    ACTIVITIES = "activities"
    LISTINGS = "listings"

    @classmethod
    def parse(cls, value: str | MeteredResource | None) -> MeteredResource | None:
        """Return the metered resource for a value, or None if it is not metered."""
        if isinstance(value, MeteredResource):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.lower())
        except ValueError:
            return None

    @property
    def period_bound(self) -> bool:
        """Whether the count resets with the billing period."""
        return self is MeteredResource.ACTIVITIES

    @property
    def unit(self) -> str:
        return "per month" if self.period_bound else "total"


@dataclass(frozen=True)
class PlanLimits:
    max_users: int = 1
    max_farms: int = 1
    max_activities_per_month: int = 50
    max_active_listings: int = 0
    storage_gb: int = 1
    api_calls_per_day: int = 100

    def for_resource(self, resource_type: MeteredResource) -> int:
        return {
            MeteredResource.USERS: self.max_users,
            MeteredResource.FARMS: self.max_farms,
            MeteredResource.ACTIVITIES: self.max_activities_per_month,
            MeteredResource.LISTINGS: self.max_active_listings,
        }[resource_type]


@dataclass(frozen=True)
class PlanFlags:
    has_advanced_analytics: bool = False
    has_ai_insights: bool = False
    has_api_access: bool = False
    has_custom_roles: bool = False
    has_priority_support: bool = False
    has_white_label: bool = False


@dataclass(frozen=True)
class Plan:
    tier: PlanTier
    name: str
    limits: PlanLimits = field(default_factory=PlanLimits)
    flags: PlanFlags = field(default_factory=PlanFlags)


@dataclass
class Subscription:
    organization_id: str
    plan: Plan
    current_period_start: datetime | None = None
    current_period_end: datetime | None = None
