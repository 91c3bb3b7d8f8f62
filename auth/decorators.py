# Authorization Dependencies for the Seeding Dashboard
# These provide easy-to-use access control for API endpoints

from fastapi import HTTPException, status, Depends

from auth.roles import OperatorRole, Permission, has_any_permission
from auth.dependencies import Operator, get_current_operator


class AuthError(HTTPException):
    """Custom exception for authentication/authorization errors."""

    def __init__(self, detail: str, status_code: int = status.HTTP_403_FORBIDDEN):
        super().__init__(status_code=status_code, detail=detail)


def require_role(*allowed_roles: OperatorRole):
    """
    Dependency that requires the operator to hold one of the given roles.

    Usage:
        @router.delete("/{influencer_id}")
        async def delete_creator(
            operator: Operator = Depends(require_role(OperatorRole.ADMIN))
        ):
            ...
    """
    async def dependency(operator: Operator = Depends(get_current_operator)) -> Operator:
        # Admin can access everything
        if operator.role == OperatorRole.ADMIN:
            return operator

        if operator.role not in allowed_roles:
            allowed_names = ", ".join(r.value for r in allowed_roles)
            raise AuthError(
                detail=f"This endpoint requires role: {allowed_names}",
                status_code=status.HTTP_403_FORBIDDEN
            )

        return operator

    return dependency


def require_permission(*permissions: Permission):
    """
    Dependency that requires the operator to have any of the given permissions.

    Usage:
        @router.post("/{influencer_id}/payment")
        async def release(
            operator: Operator = Depends(require_permission(Permission.RELEASE_PAYMENTS))
        ):
            ...
    """
    async def dependency(operator: Operator = Depends(get_current_operator)) -> Operator:
        if not has_any_permission(operator.role, list(permissions)):
            raise AuthError(
                detail="You don't have permission to perform this action",
                status_code=status.HTTP_403_FORBIDDEN
            )

        return operator

    return dependency
