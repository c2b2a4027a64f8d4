"""
Entitlement resolution.

Derives the features and modules an organization may use from its
organization type, subscription tier and plan capability flags:

    modules  = (org type modules ∩ tier modules) ∪ flag modules
    features = tier features ∪ flag features

Resolution is total. Unknown tiers resolve as FREE and unknown organization
types contribute no modules.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass

from entitlement_engine.exceptions import FeatureNotAvailableError
from entitlement_engine.models.organization import OrganizationRecord, OrganizationType
from entitlement_engine.models.plan import PlanFlags, PlanTier
from entitlement_engine.permissions_config.features import (
    ALWAYS_AVAILABLE_MODULES,
    FLAG_ADDITIONS,
    ORGANIZATION_CAPABILITIES,
    ORGANIZATION_MODULES,
    TIER_FEATURES,
    TIER_MODULES,
)
from entitlement_engine.permissions_config.plans import PLAN_CATALOG
from entitlement_engine.services.collaborators import SubscriptionLookup
from entitlement_engine.utils.metrics import record_decision

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeatureSet:
    features: frozenset[str]
    modules: frozenset[str]

    def has_feature(self, feature: str) -> bool:
        return feature in self.features

    def has_module(self, module: str) -> bool:
        return module in self.modules

    def to_dict(self) -> dict[str, list[str]]:
        return {"features": sorted(self.features), "modules": sorted(self.modules)}


def _parse_org_type(org_type) -> OrganizationType | None:
    if isinstance(org_type, OrganizationType):
        return org_type
    try:
        return OrganizationType(org_type)
    except ValueError:
        return None


def _flag_items(flags: PlanFlags | dict[str, bool] | None) -> dict[str, bool]:
    if flags is None:
        return {}
    if isinstance(flags, PlanFlags):
        return asdict(flags)
    return dict(flags)


def resolve_entitlements(
    org_type: OrganizationType | str | None,
    tier: PlanTier | str | None,
    flags: PlanFlags | dict[str, bool] | None = None,
) -> FeatureSet:
    """Resolve the FeatureSet for an (org type, tier, flags) combination."""
    parsed_tier = PlanTier.parse(tier)
    if parsed_tier is None:
        logger.debug(f"Unknown plan tier {tier!r}, resolving as FREE")
        parsed_tier = PlanTier.FREE

    parsed_type = _parse_org_type(org_type)
    candidate_modules = set(ORGANIZATION_MODULES.get(parsed_type, []))

    modules = candidate_modules & set(TIER_MODULES[parsed_tier])
    features = set(TIER_FEATURES[parsed_tier])

    for flag, enabled in _flag_items(flags).items():
        if not enabled or flag not in FLAG_ADDITIONS:
            continue
        flag_features, flag_modules = FLAG_ADDITIONS[flag]
        features.update(flag_features)
        modules.update(flag_modules)

    return FeatureSet(features=frozenset(features), modules=frozenset(modules))


def organization_supports_module(org_type: OrganizationType | str | None, module: str) -> bool:
    """Whether the organization type could ever use ``module``, independent of plan."""
    if module in ALWAYS_AVAILABLE_MODULES:
        return True
    return module in ORGANIZATION_MODULES.get(_parse_org_type(org_type), [])


def has_capability(org_type: OrganizationType | str | None, capability: str) -> bool:
    return capability in ORGANIZATION_CAPABILITIES.get(_parse_org_type(org_type), [])


def check_feature_access(
    org_type: OrganizationType | str | None,
    feature_set: FeatureSet,
    feature: str,
) -> None:
    """
    Raise unless the organization may use the ``feature`` module.

    Raises:
        FeatureNotAvailableError: when the organization type never supports
            the module, or the current plan does not include it
    """
    if feature in ALWAYS_AVAILABLE_MODULES:
        return

    if not organization_supports_module(org_type, feature):
        record_decision("feature", False)
        type_name = org_type.value if isinstance(org_type, OrganizationType) else org_type
        raise FeatureNotAvailableError(
            f"Feature '{feature}' is not available for {type_name} organizations",
            feature=feature,
        )

    if not feature_set.has_module(feature):
        record_decision("feature", False)
        raise FeatureNotAvailableError(
            f"Feature '{feature}' is not included in your current plan. "
            "Please upgrade to access this feature.",
            feature=feature,
        )

    record_decision("feature", True)


class EntitlementService:
    """Resolves entitlements for stored organizations via their subscription."""

    def __init__(self, subscriptions: SubscriptionLookup):
        self.subscriptions = subscriptions

    async def get_tier_and_flags(self, organization_id: str) -> tuple[PlanTier, PlanFlags]:
        subscription = await self.subscriptions.get_subscription(organization_id)
        if subscription is None:
            logger.warning(f"No subscription for organization {organization_id}, using FREE plan")
            free = PLAN_CATALOG[PlanTier.FREE]
            return free.tier, free.flags
        return subscription.plan.tier, subscription.plan.flags

    async def entitlements_for(self, organization: OrganizationRecord) -> FeatureSet:
        tier, flags = await self.get_tier_and_flags(organization.id)
        return resolve_entitlements(organization.organization_type, tier, flags)
