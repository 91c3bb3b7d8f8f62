from jose import jwt

from auth.roles import (
    OperatorRole,
    Permission,
    has_all_permissions,
    has_any_permission,
    has_permission,
)
from auth.dependencies import create_access_token, decode_access_token
from config.app_config import JWT_ALGORITHM, JWT_SECRET_KEY


def test_viewer_is_read_only():
    assert has_permission(OperatorRole.VIEWER, Permission.VIEW_CREATORS)
    assert not has_permission(OperatorRole.VIEWER, Permission.MANAGE_CREATORS)
    assert not has_any_permission(OperatorRole.VIEWER, [Permission.SEND_OUTREACH, Permission.RELEASE_PAYMENTS])


def test_manager_runs_workflow_but_cannot_delete():
    assert has_all_permissions(OperatorRole.MANAGER, [
        Permission.MANAGE_CONTRACTS,
        Permission.SEND_OUTREACH,
        Permission.RELEASE_PAYMENTS,
    ])
    assert not has_permission(OperatorRole.MANAGER, Permission.DELETE_CREATORS)


def test_admin_has_everything():
    assert has_all_permissions(OperatorRole.ADMIN, list(Permission))


def test_token_round_trip():
    token = create_access_token("lead@agency.test", name="Lead", role=OperatorRole.ADMIN)
    operator = decode_access_token(token)
    assert operator.email == "lead@agency.test"
    assert operator.name == "Lead"
    assert operator.role == OperatorRole.ADMIN


def test_expired_token_is_rejected():
    assert decode_access_token(create_access_token("lead@agency.test", expires_minutes=-1)) is None


def test_unknown_role_falls_back_to_viewer():
    token = jwt.encode({"sub": "guest@agency.test", "role": "Owner"}, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)
    assert decode_access_token(token).role == OperatorRole.VIEWER


def test_token_without_subject_is_rejected():
    token = jwt.encode({"role": "Admin"}, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)
    assert decode_access_token(token) is None
