"""Authentication endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.dependencies import get_auth_service
from app.schemas.auth import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse
from app.schemas.user import RegisteredUserResponse, UserResponse
from app.services.auth_service import AuthService
from app.utils.time import ensure_utc

router = APIRouter()


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> RegisterResponse:
    """Create an account and open its first session."""
    account, token = service.register(payload.email, payload.password)
    return RegisterResponse(
        user=RegisteredUserResponse(
            id=account.id,
            email=account.email,
            created_at=ensure_utc(account.created_at),
        ),
        token=token,
    )


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """Open a new session; any token from an earlier login stops working."""
    account, token = service.login(payload.email, payload.password)
    return LoginResponse(user=UserResponse(id=account.id, email=account.email), token=token)
