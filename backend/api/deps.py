"""
Calibration Tracker - API Dependencies
Version: 1.0.0

Changelog:
v1.0.0 (2026-10-05): Bearer session lookup and role checks
"""

from fastapi import Depends, Header, HTTPException
from typing import Optional

from models.user import User
from services.auth_service import auth_provider


def bearer_token(authorization: Optional[str] = Header(None)) -> Optional[str]:
    """Token from 'Authorization: Bearer <token>', or None"""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def optional_user(token: Optional[str] = Depends(bearer_token)) -> Optional[User]:
    return await auth_provider.current_user(token)


async def current_user(user: Optional[User] = Depends(optional_user)) -> User:
    """Logged-in user or 401"""
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated",
                            headers={"WWW-Authenticate": "Bearer"})
    return user


def require_permission(permission: str):
    """Dependency factory: 403 unless user.<permission> is true"""
    async def checker(user: User = Depends(current_user)) -> User:
        if not getattr(user, permission):
            raise HTTPException(status_code=403, detail=f"Role {user.role.value} lacks {permission}")
        return user
    return checker
