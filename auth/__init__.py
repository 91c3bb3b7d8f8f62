# Auth module for the Seeding Dashboard
# Provides operator identity and role-based access control

from auth.roles import (
    OperatorRole,
    Permission,
    ROLE_PERMISSIONS,
    get_permissions_for_role,
    has_permission,
    has_any_permission,
    has_all_permissions,
)

from auth.dependencies import (
    Operator,
    create_access_token,
    decode_access_token,
    get_current_operator,
)

from auth.decorators import (
    AuthError,
    require_role,
    require_permission,
)

__all__ = [
    # Roles
    "OperatorRole",
    "Permission",
    "ROLE_PERMISSIONS",
    "get_permissions_for_role",
    "has_permission",
    "has_any_permission",
    "has_all_permissions",

    # Identity
    "Operator",
    "create_access_token",
    "decode_access_token",
    "get_current_operator",

    # Dependencies
    "AuthError",
    "require_role",
    "require_permission",
]
