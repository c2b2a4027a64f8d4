from datetime import datetime

from pydantic import BaseModel, Field


class EntitlementsResponse(BaseModel):
    organization_id: str
    organization_type: str
    tier: str
    is_impersonation: bool = False
    features: list[str] = Field(default_factory=list, description="Sorted feature names.")
    modules: list[str] = Field(default_factory=list, description="Sorted module names.")


class ResourceUsage(BaseModel):
    used: int
    limit: int = Field(..., description="-1 means unlimited.")
    unit: str
    is_unlimited: bool
    percentage_used: float


class UsageStatsResponse(BaseModel):
    organization_id: str
    tier: str
    current_period_start: datetime | None = None
    current_period_end: datetime | None = None
    usage: dict[str, ResourceUsage]
