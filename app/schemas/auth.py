"""Registration and login schemas."""

import re

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.schemas.user import RegisteredUserResponse, UserResponse

# Width of the accounts.email column.
MAX_EMAIL_LENGTH = 100


class CredentialsBase(BaseModel):
    """Email normalized the same way for registration and login."""

    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, email: str) -> str:
        email = email.strip().lower()
        if len(email) > MAX_EMAIL_LENGTH:
            raise ValueError(f"Email must be at most {MAX_EMAIL_LENGTH} characters long")
        return email


class RegisterRequest(CredentialsBase):
    """Request body for creating an account."""

    password: str = Field(..., max_length=72)

    @field_validator("password")
    @classmethod
    def validate_password(cls, password: str) -> str:
        if len(password) < 6:
            raise ValueError("Password must be at least 6 characters long")
        if not re.search(r"\d", password):
            raise ValueError("Password must contain at least one number")
        return password


class LoginRequest(CredentialsBase):
    """Request body for logging in."""

    password: str = Field(..., min_length=1, max_length=72)


class RegisterResponse(BaseModel):
    message: str = "User registered successfully"
    user: RegisteredUserResponse
    token: str


class LoginResponse(BaseModel):
    message: str = "Login successful"
    user: UserResponse
    token: str
