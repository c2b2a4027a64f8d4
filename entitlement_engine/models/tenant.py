from __future__ import annotations

from dataclasses import dataclass

from entitlement_engine.constants.headers import (
    IMPERSONATED_ORGANIZATION_HEADER,
    IMPERSONATED_ORGANIZATION_NAME_HEADER,
)


@dataclass(frozen=True)
class TenantContext:
    """The organization a request acts on."""

    organization_id: str
    is_impersonation: bool = False
    acting_admin_id: str | None = None
    organization_name: str | None = None

    def audit_headers(self) -> dict[str, str]:
        """Response headers that mark an impersonated request."""
        if not self.is_impersonation:
            return {}
        headers = {IMPERSONATED_ORGANIZATION_HEADER: self.organization_id}
        if self.organization_name:
            headers[IMPERSONATED_ORGANIZATION_NAME_HEADER] = self.organization_name
        return headers
