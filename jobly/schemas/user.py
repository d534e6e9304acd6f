"""
Pydantic schemas for User authentication and registration.
"""

from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from jobly.schemas.base import CamelModel, StrictCamelModel, reject_null


class UserRegisterRequest(StrictCamelModel):
    """Request schema for self-registration."""
    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(
        ...,
        min_length=5,
        max_length=72,  # bcrypt limit
    )
    first_name: str = Field(..., min_length=1, max_length=30)
    last_name: str = Field(..., min_length=1, max_length=30)
    email: EmailStr


class UserCreateRequest(UserRegisterRequest):
    """Request schema for admins adding a user, who may be an admin."""
    is_admin: bool = False


class UserUpdateRequest(StrictCamelModel):
    """Partial update of a user. Only admins may send isAdmin."""
    first_name: Optional[str] = Field(None, min_length=1, max_length=30)
    last_name: Optional[str] = Field(None, min_length=1, max_length=30)
    password: Optional[str] = Field(None, min_length=5, max_length=72)
    email: Optional[EmailStr] = None
    is_admin: Optional[bool] = None

    @field_validator("first_name", "last_name", "password", "email", "is_admin")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class UserLoginRequest(StrictCamelModel):
    """Request schema for POST /auth/token."""
    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """JWT token response."""
    token: str


class UserResponse(CamelModel):
    """User profile response (no password)."""
    username: str
    first_name: str
    last_name: str
    email: str
    is_admin: bool


class UserDetailResponse(UserResponse):
    """User profile with the ids of jobs applied to."""
    jobs: List[int] = []


class UserTokenResponse(BaseModel):
    """Newly created user and a token for them."""
    user: UserResponse
    token: str


class TokenUser(BaseModel):
    """Identity carried by a validated access token."""
    username: str
    is_admin: bool = False
