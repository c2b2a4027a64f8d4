"""
Role Constants

Roles carry an integer level; higher levels are more privileged. Role
names are advisory, access decisions compare levels only.
"""

from enum import Enum


class RoleName(str, Enum):
    """Enumeration of the built-in role names."""

    VIEWER = "viewer"
    WORKER = "worker"
    SUPERVISOR = "supervisor"
    MANAGER = "manager"
    ADMIN = "admin"
    OWNER = "owner"


class RoleScope(str, Enum):
    """Where a role assignment applies."""

    PLATFORM = "platform"
    ORGANIZATION = "organization"
    FARM = "farm"


# Role hierarchy (higher number = more privileges)
ROLE_LEVELS = {
    RoleName.VIEWER: 10,
    RoleName.WORKER: 20,
    RoleName.SUPERVISOR: 30,
    RoleName.MANAGER: 50,
    RoleName.ADMIN: 80,
    RoleName.OWNER: 100,
}

# Minimum level that may act on resources without being assigned to them
MANAGER_OVERRIDE_LEVEL = ROLE_LEVELS[RoleName.MANAGER]


def get_role_level(role: str) -> int:
    """Return the level of a built-in role name, or 0 for unknown names."""
    try:
        return ROLE_LEVELS[RoleName(role)]
    except ValueError:
        return 0


def is_higher_role(role1: str, role2: str) -> bool:
    """Check if role1 has higher privileges than role2."""
    return get_role_level(role1) > get_role_level(role2)
