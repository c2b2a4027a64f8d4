"""Authenticated caller models."""

from __future__ import annotations

from dataclasses import dataclass, field

from entitlement_engine.constants.roles import RoleScope


@dataclass(frozen=True)
class Role:
    name: str
    level: int
    scope: RoleScope = RoleScope.ORGANIZATION
    farm_id: str | None = None


@dataclass
class Principal:
    """
    The authenticated caller.

    ``permissions`` holds granted ``resource:action`` patterns as issued by
    the authentication layer; they are parsed when matched.
    """

    id: str
    organization_id: str | None = None
    email: str | None = None
    is_platform_admin: bool = False
    roles: list[Role] = field(default_factory=list)
    permissions: list[str] = field(default_factory=list)

    @property
    def max_role_level(self) -> int:
        """Highest level across all roles, regardless of scope. 0 without roles."""
        return max((role.level for role in self.roles), default=0)
