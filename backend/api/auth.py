"""
Calibration Tracker - Auth API
Version: 1.0.0

Changelog:
v1.0.0 (2026-10-05): Login, registration, logout, current user
"""

from fastapi import APIRouter, Depends, HTTPException
from typing import Optional

from api.deps import bearer_token, current_user, optional_user
from models.user import LoginRequest, LoginResult, RegisterRequest, User, UserRole
from services.auth_service import auth_provider

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResult)
async def login(data: LoginRequest, lang: Optional[str] = None):
    """
    Email/password login.
    Failures are returned as success=false with a localized message, not as HTTP errors.
    """
    return await auth_provider.login(data.email, data.password, lang)


@router.post("/register", response_model=LoginResult)
async def register(data: RegisterRequest, lang: Optional[str] = None,
                   caller: Optional[User] = Depends(optional_user)):
    """Create an account; only an Admin may create Moderator/Admin accounts"""
    if data.role != UserRole.USER and (caller is None or caller.role != UserRole.ADMIN):
        raise HTTPException(status_code=403, detail="Only an Admin can assign elevated roles")
    return await auth_provider.register(data.email, data.password, data.username, data.role, lang)


@router.post("/logout")
async def logout(token: Optional[str] = Depends(bearer_token),
                 user: User = Depends(current_user)):
    await auth_provider.logout(token)
    return {"success": True}


@router.get("/me")
async def me(user: User = Depends(current_user)):
    """Current user with derived permissions"""
    return {**user.model_dump(mode="json"), "permissions": user.permissions()}
