from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class OrganizationType(str, Enum):
    FARM_OPERATION = "FARM_OPERATION"
    COMMODITY_TRADER = "COMMODITY_TRADER"
    LOGISTICS_PROVIDER = "LOGISTICS_PROVIDER"
    INTEGRATED_FARM = "INTEGRATED_FARM"


@dataclass
class OrganizationRecord:
    """Tenant as returned by the organization lookup."""

    id: str
    name: str
    organization_type: OrganizationType | str = OrganizationType.FARM_OPERATION
    is_active: bool = True
    suspended_at: datetime | None = None

    @property
    def is_suspended(self) -> bool:
        return self.suspended_at is not None
