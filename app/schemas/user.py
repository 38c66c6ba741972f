"""User-related schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class UserResponse(BaseModel):
    """Public account representation returned at login."""

    id: UUID
    email: str


class RegisteredUserResponse(UserResponse):
    """Public account representation returned at registration."""

    created_at: datetime
