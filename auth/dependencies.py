# Authentication Dependencies for the Seeding Dashboard
# Resolves the operator behind a request from its JWT bearer token

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from datetime import datetime, timedelta
from typing import Optional
from pydantic import BaseModel

from config.app_config import JWT_SECRET_KEY, JWT_ALGORITHM
from auth.roles import OperatorRole


security = HTTPBearer()


class Operator(BaseModel):
    """The agency team member making a request."""
    email: str
    name: Optional[str] = None
    role: OperatorRole = OperatorRole.VIEWER


def create_access_token(email: str, name: Optional[str] = None, role: OperatorRole = OperatorRole.MANAGER, expires_minutes: int = 60 * 24) -> str:
    """Issue a signed token for an operator."""
    payload = {
        "sub": email,
        "email": email,
        "name": name,
        "role": OperatorRole(role).value,
        "exp": datetime.utcnow() + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[Operator]:
    """Decode and validate JWT token."""
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError:
        return None

    email = payload.get("email") or payload.get("sub")
    if email is None:
        return None
    try:
        role = OperatorRole(payload.get("role") or OperatorRole.VIEWER)
    except ValueError:
        role = OperatorRole.VIEWER
    return Operator(email=email, name=payload.get("name"), role=role)


async def get_current_operator(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Operator:
    """
    Validate JWT token and return the current operator.
    This is the core authentication dependency.
    """
    operator = decode_access_token(credentials.credentials)

    if operator is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return operator
