"""
Collaborator interfaces.

The engine never touches storage directly. Persistence layers supply these
async lookups; ``InMemoryDirectory`` implements all of them for local runs
and tests.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Protocol, Union

from entitlement_engine.models.organization import OrganizationRecord
from entitlement_engine.models.plan import MeteredResource, Subscription
from entitlement_engine.models.resource import CounterpartSubject, ResourceAccessSubject

AccessSubject = Union[ResourceAccessSubject, CounterpartSubject]


class ResourceLookup(Protocol):
    async def get_resource(self, resource_type: str, resource_id: str) -> AccessSubject | None: ...


class OrganizationLookup(Protocol):
    async def get_organization(self, organization_id: str) -> OrganizationRecord | None: ...


class UsageCounter(Protocol):
    async def count_usage(
        self,
        organization_id: str,
        resource_type: MeteredResource,
        period_start: datetime | None = None,
        period_end: datetime | None = None,
    ) -> int: ...


class SubscriptionLookup(Protocol):
    async def get_subscription(self, organization_id: str) -> Subscription | None: ...


class InMemoryDirectory:
    """Dictionary-backed implementation of every collaborator."""

    def __init__(self):
        self.organizations: dict[str, OrganizationRecord] = {}
        self.subscriptions: dict[str, Subscription] = {}
        self.resources: dict[tuple[str, str], AccessSubject] = {}
        self.usage: dict[tuple[str, MeteredResource], int] = defaultdict(int)

    def add_organization(self, organization: OrganizationRecord) -> OrganizationRecord:
        self.organizations[organization.id] = organization
        return organization

    def add_subscription(self, subscription: Subscription) -> Subscription:
        self.subscriptions[subscription.organization_id] = subscription
        return subscription

    def add_resource(self, subject: AccessSubject) -> AccessSubject:
        self.resources[(subject.resource_type, subject.resource_id)] = subject
        return subject

    def set_usage(self, organization_id: str, resource_type: MeteredResource, count: int) -> None:
        self.usage[(organization_id, MeteredResource(resource_type))] = count

    async def get_organization(self, organization_id: str) -> OrganizationRecord | None:
        return self.organizations.get(organization_id)

    async def get_subscription(self, organization_id: str) -> Subscription | None:
        return self.subscriptions.get(organization_id)

    async def get_resource(self, resource_type: str, resource_id: str) -> AccessSubject | None:
        return self.resources.get((resource_type, resource_id))

    async def count_usage(
        self,
        organization_id: str,
        resource_type: MeteredResource,
        period_start: datetime | None = None,
        period_end: datetime | None = None,
    ) -> int:
        return self.usage.get((organization_id, MeteredResource(resource_type)), 0)
