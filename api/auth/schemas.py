"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=128)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=128)


class UpdateProfileRequest(BaseModel):
    username: str | None = Field(default=None, min_length=1, max_length=64)
    email: str | None = Field(default=None, min_length=3, max_length=320)


class PasswordStrengthRequest(BaseModel):
    password: str = Field(..., max_length=128)


class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    created_at: datetime


class AuthResponse(BaseModel):
    user: UserResponse
    token: str
    token_type: str = "bearer"


class CurrentUserResponse(BaseModel):
    user: UserResponse | None = None
