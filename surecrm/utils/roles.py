"""
Role-based permission table for CRM users.

Agents manage their own book of clients; system administrators additionally
read every client and use the backoffice.
"""

from enum import Enum
from typing import Dict, FrozenSet, Set


ROLE_AGENT = "agent"
ROLE_TEAM_ADMIN = "team_admin"
ROLE_SYSTEM_ADMIN = "system_admin"

ROLE_PERMISSIONS = {
    ROLE_AGENT: {
        "can_manage_own_clients": True,
        "can_read_all_clients": False,
        "can_access_backoffice": False,
    },
    ROLE_TEAM_ADMIN: {
        "can_manage_own_clients": True,
        "can_read_all_clients": False,
        "can_access_backoffice": False,
    },
    ROLE_SYSTEM_ADMIN: {
        "can_manage_own_clients": True,
        "can_read_all_clients": True,
        "can_access_backoffice": True,
    },
}

ALLOWED_ROLES = set(ROLE_PERMISSIONS.keys())

ADMIN_ROLES: FrozenSet[str] = frozenset(
    role for role, perms in ROLE_PERMISSIONS.items() if perms["can_access_backoffice"]
)


class RoleEnum(str, Enum):
    """Enum for user roles used in schemas and validation."""
    agent = ROLE_AGENT
    team_admin = ROLE_TEAM_ADMIN
    system_admin = ROLE_SYSTEM_ADMIN


def get_role_permissions(role: str) -> Dict[str, bool]:
    """
    Get the permissions granted to a role.

    Args:
        role: The role name (agent, team_admin, system_admin)

    Returns:
        Dict of permission name to boolean

    Raises:
        ValueError: If role is not recognized
    """
    if role not in ROLE_PERMISSIONS:
        raise ValueError(f"Unknown role: {role}. Allowed roles: {sorted(ROLE_PERMISSIONS)}")
    return ROLE_PERMISSIONS[role].copy()


def get_allowed_roles() -> Set[str]:
    return ALLOWED_ROLES.copy()


def validate_role(role: str) -> None:
    if role not in ALLOWED_ROLES:
        raise ValueError(f"Invalid role '{role}'. Allowed roles: {sorted(ALLOWED_ROLES)}")


def role_can_read_all_clients(role: str) -> bool:
    return bool(ROLE_PERMISSIONS.get(role, {}).get("can_read_all_clients"))


def role_can_access_backoffice(role: str) -> bool:
    return role in ADMIN_ROLES
