"""Constants package for the entitlement engine."""

from .headers import (
    IMPERSONATED_ORGANIZATION_HEADER,
    IMPERSONATED_ORGANIZATION_NAME_HEADER,
    ORGANIZATION_OVERRIDE_HEADER,
    REQUEST_ID_HEADER,
    USAGE_WARNING_HEADER,
)
from .roles import MANAGER_OVERRIDE_LEVEL, ROLE_LEVELS, RoleName, RoleScope, get_role_level, is_higher_role

__all__ = [
    # Role constants
    "RoleName",
    "RoleScope",
    "ROLE_LEVELS",
    "MANAGER_OVERRIDE_LEVEL",
    "get_role_level",
    "is_higher_role",
    # Header names
    "ORGANIZATION_OVERRIDE_HEADER",
    "IMPERSONATED_ORGANIZATION_HEADER",
    "IMPERSONATED_ORGANIZATION_NAME_HEADER",
    "USAGE_WARNING_HEADER",
    "REQUEST_ID_HEADER",
]
