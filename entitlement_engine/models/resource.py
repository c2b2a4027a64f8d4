"""Per-resource authorization inputs returned by the resource lookup."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Assignee:
    user_id: str
    active: bool = True


@dataclass
class ResourceAccessSubject:
    """An organization-owned resource with a creator and assignees (e.g. an activity)."""

    resource_type: str
    resource_id: str
    owner_organization_id: str
    creator_id: str | None = None
    assignees: list[Assignee] = field(default_factory=list)
    # None means the configured default_override_level
    required_override_level: int | None = None

    def is_assigned(self, user_id: str) -> bool:
        return any(a.user_id == user_id and a.active for a in self.assignees)


@dataclass
class CounterpartSubject:
    """A resource shared by two organizations (e.g. an order between buyer and supplier)."""

    resource_type: str
    resource_id: str
    buyer_organization_id: str
    supplier_organization_id: str | None = None
    creator_id: str | None = None
    status: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    required_override_level: int = 0

    def is_participant(self, organization_id: str | None) -> bool:
        if organization_id is None:
            return False
        return organization_id in (self.buyer_organization_id, self.supplier_organization_id)
