"""
Usage Governor

Compares metered resource counts against the organization's plan limits
before a creation is allowed.

Enforcement is soft: counts are cached for a short TTL and there is no
cross-process coordination, so concurrent creations can overshoot a limit
by a small margin. When a collaborator fails the check fails open and the
decision is marked as degraded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from entitlement_engine.config import settings
from entitlement_engine.exceptions import ForbiddenError, UsageLimitExceededError
from entitlement_engine.models.plan import UNLIMITED, MeteredResource, Plan, PlanTier, Subscription
from entitlement_engine.models.principal import Principal
from entitlement_engine.permissions_config.plans import PLAN_CATALOG
from entitlement_engine.services.cache_service import UsageCache
from entitlement_engine.services.collaborators import SubscriptionLookup, UsageCounter
from entitlement_engine.utils.metrics import record_decision, record_degraded_usage_check

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LimitCheck:
    allowed: bool
    limit: int
    is_unlimited: bool


@dataclass(frozen=True)
class UsageDecision:
    """Outcome of a usage check. ``degraded`` marks a fail-open allow."""

    allowed: bool
    resource_type: str
    reason: str
    current_count: int | None = None
    limit: int | None = None
    is_unlimited: bool = False
    warning: str | None = None
    degraded: bool = False

    @classmethod
    def bypass(cls, resource_type: str, reason: str) -> UsageDecision:
        return cls(allowed=True, resource_type=resource_type, reason=reason)


def evaluate_limit(current_count: int, limit: int) -> LimitCheck:
    """``limit == -1`` is unlimited; otherwise creation is allowed while below the limit."""
    if limit == UNLIMITED:
        return LimitCheck(allowed=True, limit=limit, is_unlimited=True)
    return LimitCheck(allowed=current_count < limit, limit=limit, is_unlimited=False)


def usage_warning(resource_type: str, current_count: int, limit: int, threshold: float = 0.8) -> str | None:
    """Return ``"<type> usage at NN.N%"`` once usage reaches the threshold, else None."""
    if limit == UNLIMITED or limit <= 0:
        return None
    ratio = current_count / limit
    if ratio < threshold:
        return None
    return f"{resource_type} usage at {ratio * 100:.1f}%"


def _resource(resource_type: MeteredResource | str) -> MeteredResource:
    return MeteredResource(resource_type)


class UsageGovernor:
    def __init__(
        self,
        subscriptions: SubscriptionLookup,
        counter: UsageCounter,
        cache: UsageCache | None = None,
        warning_threshold: float | None = None,
        enabled: bool | None = None,
    ):
        self.subscriptions = subscriptions
        self.counter = counter
        self.cache = cache if cache is not None else UsageCache(ttl_seconds=settings.usage_cache_ttl_seconds)
        self.warning_threshold = (
            settings.usage_warning_threshold if warning_threshold is None else warning_threshold
        )
        self.enabled = settings.enable_usage_limits if enabled is None else enabled

    # ── Plan lookup ──────────────────────────────────────────────────────────

    async def get_subscription(self, organization_id: str) -> Subscription:
        """Return the organization's subscription; organizations without one are on FREE."""
        subscription = await self.subscriptions.get_subscription(organization_id)
        if subscription is None:
            logger.warning(f"No subscription for organization {organization_id}, applying FREE limits")
            return Subscription(organization_id=organization_id, plan=PLAN_CATALOG[PlanTier.FREE])
        return subscription

    async def get_plan(self, organization_id: str) -> Plan:
        return (await self.get_subscription(organization_id)).plan

    # ── Counting ─────────────────────────────────────────────────────────────

    async def get_current_usage(
        self,
        organization_id: str,
        resource_type: MeteredResource | str,
        subscription: Subscription | None = None,
    ) -> int:
        """
        Return the current count, from the cache while it is fresh.

        Period-bound resources are counted within the subscription's current
        billing period.
        """
        resource = _resource(resource_type)
        cached = self.cache.get(organization_id, resource.value)
        if cached is not None:
            logger.debug(f"Usage cache hit for {organization_id}:{resource.value}")
            return cached

        period_start: datetime | None = None
        period_end: datetime | None = None
        if resource.period_bound:
            subscription = subscription or await self.get_subscription(organization_id)
            period_start = subscription.current_period_start
            period_end = subscription.current_period_end

        count = await self.counter.count_usage(organization_id, resource, period_start, period_end)
        self.cache.put(organization_id, resource.value, count)
        return count

    def invalidate_cache(self, organization_id: str, resource_type: MeteredResource | str) -> None:
        """Forget a cached count after a creation succeeded."""
        self.cache.invalidate(organization_id, _resource(resource_type).value)

    def sweep_cache(self) -> int:
        return self.cache.sweep()

    # ── Limit checks ─────────────────────────────────────────────────────────

    async def check_limit(
        self,
        organization_id: str,
        resource_type: MeteredResource | str,
        current_count: int,
    ) -> LimitCheck:
        plan = await self.get_plan(organization_id)
        return evaluate_limit(current_count, plan.limits.for_resource(_resource(resource_type)))

    async def evaluate(
        self,
        principal: Principal | None,
        resource_type: MeteredResource | str,
        organization_id: str | None = None,
    ) -> UsageDecision:
        """
        Decide whether the principal's organization may create one more
        ``resource_type``.

        Unknown resource types, platform administrators and principals
        without an organization are not metered. ForbiddenError raised by a
        collaborator propagates; any other failure is logged and allowed with
        ``degraded=True``.
        """
        resource = MeteredResource.parse(resource_type)
        if resource is None:
            logger.debug(f"{resource_type} is not a metered resource, skipping usage check")
            return UsageDecision.bypass(str(resource_type), "not a metered resource")

        if not self.enabled:
            return UsageDecision.bypass(resource.value, "usage limits disabled")
        if principal is None or principal.is_platform_admin:
            return UsageDecision.bypass(resource.value, "not metered")
        organization_id = organization_id or principal.organization_id
        if not organization_id:
            return UsageDecision.bypass(resource.value, "no organization")

        try:
            subscription = await self.get_subscription(organization_id)
            current = await self.get_current_usage(organization_id, resource, subscription)
            check = evaluate_limit(current, subscription.plan.limits.for_resource(resource))
        except ForbiddenError:
            raise
        except Exception as e:
            logger.error(
                f"Usage check failed for {organization_id}:{resource.value}, allowing request: {e}",
                exc_info=True,
                extra={"organization_id": organization_id},
            )
            record_degraded_usage_check(resource.value)
            return UsageDecision(
                allowed=True,
                resource_type=resource.value,
                reason="usage check failed",
                degraded=True,
            )

        record_decision("usage", check.allowed)
        if not check.allowed:
            logger.warning(
                f"Usage limit reached for {organization_id}:{resource.value} ({current}/{check.limit})",
                extra={"organization_id": organization_id, "user_id": principal.id},
            )
            return UsageDecision(
                allowed=False,
                resource_type=resource.value,
                reason="usage limit exceeded",
                current_count=current,
                limit=check.limit,
            )

        return UsageDecision(
            allowed=True,
            resource_type=resource.value,
            reason="within limit",
            current_count=current,
            limit=check.limit,
            is_unlimited=check.is_unlimited,
            warning=usage_warning(resource.value, current, check.limit, self.warning_threshold),
        )

    async def enforce(
        self,
        principal: Principal | None,
        resource_type: MeteredResource | str,
        organization_id: str | None = None,
    ) -> UsageDecision:
        """
        Like ``evaluate`` but raises when the limit is reached.

        Raises:
            UsageLimitExceededError: the organization is at its plan limit
        """
        decision = await self.evaluate(principal, resource_type, organization_id)
        if not decision.allowed:
            raise UsageLimitExceededError(decision.resource_type, decision.current_count, decision.limit)
        return decision

    # ── Reporting ────────────────────────────────────────────────────────────

    async def get_usage_stats(self, organization_id: str) -> dict[str, Any]:
        """Usage against limits for every metered resource."""
        subscription = await self.get_subscription(organization_id)
        usage: dict[str, dict[str, Any]] = {}
        for resource in MeteredResource:
            used = await self.get_current_usage(organization_id, resource, subscription)
            limit = subscription.plan.limits.for_resource(resource)
            is_unlimited = limit == UNLIMITED
            usage[resource.value] = {
                "used": used,
                "limit": limit,
                "unit": resource.unit,
                "is_unlimited": is_unlimited,
                "percentage_used": 0.0 if is_unlimited or limit <= 0 else round(used / limit * 100, 1),
            }

        return {
            "organization_id": organization_id,
            "tier": subscription.plan.tier.value,
            "current_period_start": subscription.current_period_start,
            "current_period_end": subscription.current_period_end,
            "usage": usage,
        }

    async def is_approaching_limit(
        self,
        organization_id: str,
        resource_type: MeteredResource | str,
        threshold: float | None = None,
    ) -> bool:
        threshold = self.warning_threshold if threshold is None else threshold
        subscription = await self.get_subscription(organization_id)
        resource = _resource(resource_type)
        limit = subscription.plan.limits.for_resource(resource)
        if limit == UNLIMITED:
            return False
        current = await self.get_current_usage(organization_id, resource, subscription)
        if limit <= 0:
            return current > 0
        return current / limit >= threshold
