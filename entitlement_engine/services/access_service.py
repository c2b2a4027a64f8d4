"""
Resource Access Decisions

Decides whether a principal may act on one resource instance. Each resource
family has a policy; every policy lets platform administrators through
before its own checks run.

Assignment policy (work items with a creator and assignees):

  1. owner organization differs from the principal's  -> deny
  2. principal created the resource                    -> allow
  3. principal is an active assignee                   -> allow
  4. highest role level >= required override level     -> allow
     (the resource's own level, else default_override_level)
  5.                                                   -> deny

Role scope is not consulted in step 4.

Counterpart policy (resources shared by a buyer and a supplier
organization): membership in either organization replaces steps 1-3.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from entitlement_engine.config import settings
from entitlement_engine.exceptions import (
    ErrorCode,
    ForbiddenError,
    InternalError,
    ResourceNotFoundError,
    UnauthorizedError,
)
from entitlement_engine.models.principal import Principal
from entitlement_engine.models.resource import CounterpartSubject, ResourceAccessSubject
from entitlement_engine.services.collaborators import AccessSubject, ResourceLookup
from entitlement_engine.utils.metrics import record_decision

logger = logging.getLogger(__name__)

CROSS_TENANT_ACCESS = "cross-tenant access"
NOT_ASSIGNED = "not assigned to this resource"
NOT_A_PARTICIPANT = "not a participant in this resource"
NOT_CREATOR = "Only the creator can perform this action"
NO_SUPPLIER = "Order has no supplier assigned"
NOT_SUPPLIER = "Only the supplier can perform this action"
NOT_PUBLISHED = "resource is not publicly listed"

PUBLISHED_STATUS = "CONFIRMED"


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    reason: str

    @classmethod
    def allow(cls, reason: str = "allowed") -> AccessDecision:
        return cls(allowed=True, reason=reason)

    @classmethod
    def deny(cls, reason: str) -> AccessDecision:
        return cls(allowed=False, reason=reason)


class AccessPolicy(ABC):
    """Decision procedure for one resource family."""

    def decide(self, principal: Principal, subject: AccessSubject) -> AccessDecision:
        if principal.is_platform_admin:
            return AccessDecision.allow("platform administrator")
        return self.check_access(principal, subject)

    @abstractmethod
    def check_access(self, principal: Principal, subject: AccessSubject) -> AccessDecision: ...


class AssignmentAccessPolicy(AccessPolicy):
    def required_level(self, subject: ResourceAccessSubject) -> int:
        if subject.required_override_level is None:
            return settings.default_override_level
        return subject.required_override_level

    def check_access(self, principal: Principal, subject: ResourceAccessSubject) -> AccessDecision:
        if subject.owner_organization_id != principal.organization_id:
            return AccessDecision.deny(CROSS_TENANT_ACCESS)
        if subject.creator_id is not None and subject.creator_id == principal.id:
            return AccessDecision.allow("creator")
        if subject.is_assigned(principal.id):
            return AccessDecision.allow("assignee")
        if principal.max_role_level >= self.required_level(subject):
            return AccessDecision.allow("role level override")
        return AccessDecision.deny(NOT_ASSIGNED)


class CounterpartAccessPolicy(AccessPolicy):
    def check_access(self, principal: Principal, subject: CounterpartSubject) -> AccessDecision:
        if not subject.is_participant(principal.organization_id):
            return AccessDecision.deny(CROSS_TENANT_ACCESS)
        if principal.max_role_level >= subject.required_override_level:
            return AccessDecision.allow("counterpart member")
        return AccessDecision.deny(NOT_A_PARTICIPANT)


class CreatorOnlyAccessPolicy(CounterpartAccessPolicy):
    """Counterpart members who also created the resource."""

    def check_access(self, principal: Principal, subject: CounterpartSubject) -> AccessDecision:
        decision = super().check_access(principal, subject)
        if not decision.allowed:
            return decision
        if subject.creator_id != principal.id:
            return AccessDecision.deny(NOT_CREATOR)
        return AccessDecision.allow("creator")


class SupplierAccessPolicy(AccessPolicy):
    def check_access(self, principal: Principal, subject: CounterpartSubject) -> AccessDecision:
        if subject.supplier_organization_id is None:
            return AccessDecision.deny(NO_SUPPLIER)
        if subject.supplier_organization_id != principal.organization_id:
            return AccessDecision.deny(NOT_SUPPLIER)
        return AccessDecision.allow("supplier")


class PublishedListingAccessPolicy(AccessPolicy):
    """Any authenticated principal may view confirmed resources flagged public."""

    def check_access(self, principal: Principal, subject: CounterpartSubject) -> AccessDecision:
        if subject.status == PUBLISHED_STATUS and subject.metadata.get("isPublic"):
            return AccessDecision.allow("published")
        return AccessDecision.deny(NOT_PUBLISHED)


def default_policy_for(subject: AccessSubject) -> AccessPolicy:
    if isinstance(subject, CounterpartSubject):
        return CounterpartAccessPolicy()
    return AssignmentAccessPolicy()


def decide(principal: Principal, subject: AccessSubject, policy: AccessPolicy | None = None) -> AccessDecision:
    """Decide with ``policy``, or the default policy for the subject's family."""
    return (policy or default_policy_for(subject)).decide(principal, subject)


class ResourceAccessService:
    """Looks resources up and enforces access decisions on them."""

    def __init__(self, resources: ResourceLookup):
        self.resources = resources

    async def get_subject(self, resource_type: str, resource_id: str) -> AccessSubject:
        try:
            subject = await self.resources.get_resource(resource_type, resource_id)
        except (UnauthorizedError, ForbiddenError):
            raise
        except Exception as e:
            logger.error(f"Resource lookup failed for {resource_type} {resource_id}: {e}", exc_info=True)
            raise InternalError(
                f"Could not load {resource_type}",
                details={"resource_type": resource_type, "resource_id": resource_id},
            ) from e
        if subject is None:
            raise ResourceNotFoundError(resource_type, resource_id)
        return subject

    async def authorize(
        self,
        principal: Principal,
        resource_type: str,
        resource_id: str,
        policy: AccessPolicy | None = None,
    ) -> AccessSubject:
        """
        Return the resource if the principal may act on it.

        Raises:
            ResourceNotFoundError: the resource does not exist
            InternalError: the resource lookup failed
            ForbiddenError: the policy denied access; ``reason`` holds why
        """
        subject = await self.get_subject(resource_type, resource_id)
        decision = decide(principal, subject, policy)
        record_decision("resource", decision.allowed)

        if not decision.allowed:
            logger.warning(
                f"Access to {resource_type} {resource_id} denied for principal {principal.id}: {decision.reason}",
                extra={"user_id": principal.id, "organization_id": principal.organization_id},
            )
            raise ForbiddenError(
                message=f"Access denied: {decision.reason}",
                reason=decision.reason,
                details={"resource_type": resource_type, "resource_id": resource_id},
                error_code=ErrorCode.RESOURCE_ACCESS_DENIED,
            )

        logger.debug(f"Access to {resource_type} {resource_id} granted to {principal.id}: {decision.reason}")
        return subject
