from .entitlements import EntitlementsResponse, ResourceUsage, UsageStatsResponse

__all__ = [
    "EntitlementsResponse",
    "ResourceUsage",
    "UsageStatsResponse",
]
