"""Authentication schemas."""

from pydantic import BaseModel, Field

from salesnet.schemas.user import UserResponse


class LoginRequest(BaseModel):
    """Login request body."""

    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Login response."""

    success: bool
    message: str
    user: UserResponse


class RegisterRequest(BaseModel):
    """Self-registration; the account stays pending until approved."""

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6, max_length=100)
