"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from . import dependencies, schemas, service
from .sessions import SessionTable

router = APIRouter(prefix="/auth")


@router.post("/register", response_model=schemas.AuthResponse)
async def register(
    payload: schemas.RegisterRequest,
    sessions: SessionTable = Depends(dependencies.get_session_table),
) -> schemas.AuthResponse:
    return await service.register(payload, sessions=sessions)


@router.post("/login", response_model=schemas.AuthResponse)
async def login(
    payload: schemas.LoginRequest,
    sessions: SessionTable = Depends(dependencies.get_session_table),
) -> schemas.AuthResponse:
    return await service.login(payload, sessions=sessions)


@router.post("/logout")
async def logout(
    token: str | None = Depends(dependencies.get_token_if_wellformed),
    sessions: SessionTable = Depends(dependencies.get_session_table),
) -> dict:
    return await service.logout(token, sessions=sessions)


@router.get("/me", response_model=schemas.CurrentUserResponse)
async def me(
    token: str | None = Depends(dependencies.get_token_if_wellformed),
    sessions: SessionTable = Depends(dependencies.get_session_table),
) -> schemas.CurrentUserResponse:
    user = await service.get_current_user(token, sessions=sessions)
    return schemas.CurrentUserResponse(user=user)


@router.patch("/me", response_model=schemas.UserResponse)
async def update_me(
    payload: schemas.UpdateProfileRequest,
    token: str = Depends(dependencies.get_bearer_token),
    sessions: SessionTable = Depends(dependencies.get_session_table),
) -> schemas.UserResponse:
    return await service.update_profile(token, payload, sessions=sessions)


@router.post("/password-strength")
async def password_strength(payload: schemas.PasswordStrengthRequest) -> dict:
    return service.validate_password_strength(payload.password)
