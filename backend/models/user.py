"""
Calibration Tracker - User and Auth Models
Version: 1.1.0

Changelog:
v1.1.0 (2026-10-12): LoginResult carries error_code alongside the localized message
v1.0.0 (2026-10-05): Initial user models
"""

from pydantic import BaseModel, Field
from enum import Enum
from typing import Optional


class UserRole(str, Enum):
    ADMIN = "Admin"
    MODERATOR = "Moderator"
    USER = "User"


class User(BaseModel):
    """Logged-in user profile"""
    uid: str
    email: str
    username: str
    role: UserRole = UserRole.USER

    @property
    def can_add_device(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def can_calibrate(self) -> bool:
        return self.role in (UserRole.ADMIN, UserRole.MODERATOR)

    @property
    def can_delete(self) -> bool:
        return self.role == UserRole.ADMIN

    def permissions(self) -> dict:
        return {
            "can_add_device": self.can_add_device,
            "can_calibrate": self.can_calibrate,
            "can_delete": self.can_delete,
        }


class LoginRequest(BaseModel):
    email: str = Field(..., description="Email, or a bare demo username")
    password: str


class RegisterRequest(BaseModel):
    email: str
    password: str
    username: str
    role: UserRole = UserRole.USER


class LoginResult(BaseModel):
    """Outcome of a login or registration attempt"""
    success: bool
    error: Optional[str] = None
    error_code: Optional[str] = None
    token: Optional[str] = None
    user: Optional[User] = None
