# Role-Based Access Control for the Seeding Dashboard
# This module defines operator roles and permissions

from enum import Enum
from typing import List, Set


class OperatorRole(str, Enum):
    """Agency team roles."""
    ADMIN = "Admin"
    MANAGER = "Manager"
    VIEWER = "Viewer"


class Permission(str, Enum):
    """Fine-grained permissions for the dashboard."""

    # Read access
    VIEW_CREATORS = "view_creators"
    VIEW_PROJECTS = "view_projects"
    VIEW_REPORTS = "view_reports"
    VIEW_NOTIFICATIONS = "view_notifications"

    # Workflow
    MANAGE_CREATORS = "manage_creators"
    MANAGE_CONTRACTS = "manage_contracts"
    SEND_OUTREACH = "send_outreach"
    RELEASE_PAYMENTS = "release_payments"
    MANAGE_PROJECTS = "manage_projects"
    MANAGE_TEMPLATES = "manage_templates"

    # Administration
    DELETE_CREATORS = "delete_creators"
    DELETE_PROJECTS = "delete_projects"


READ_PERMISSIONS = {
    Permission.VIEW_CREATORS,
    Permission.VIEW_PROJECTS,
    Permission.VIEW_REPORTS,
    Permission.VIEW_NOTIFICATIONS,
}

# Role to permissions mapping
ROLE_PERMISSIONS: dict[OperatorRole, Set[Permission]] = {
    OperatorRole.VIEWER: set(READ_PERMISSIONS),

    OperatorRole.MANAGER: {
        *READ_PERMISSIONS,
        Permission.MANAGE_CREATORS,
        Permission.MANAGE_CONTRACTS,
        Permission.SEND_OUTREACH,
        Permission.RELEASE_PAYMENTS,
        Permission.MANAGE_PROJECTS,
        Permission.MANAGE_TEMPLATES,
    },

    OperatorRole.ADMIN: {
        # Admin has ALL permissions
        *Permission.__members__.values()
    },
}


def get_permissions_for_role(role: OperatorRole) -> Set[Permission]:
    """Get all permissions for a given role."""
    return ROLE_PERMISSIONS.get(role, set())


def has_permission(role: OperatorRole, permission: Permission) -> bool:
    """Check if a role has a specific permission."""
    return permission in get_permissions_for_role(role)


def has_any_permission(role: OperatorRole, permissions: List[Permission]) -> bool:
    """Check if a role has any of the given permissions."""
    role_permissions = get_permissions_for_role(role)
    return any(p in role_permissions for p in permissions)


def has_all_permissions(role: OperatorRole, permissions: List[Permission]) -> bool:
    """Check if a role has all of the given permissions."""
    role_permissions = get_permissions_for_role(role)
    return all(p in role_permissions for p in permissions)
