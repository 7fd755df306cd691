"""
Pydantic schemas for user-related API operations.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class UserRole(str, Enum):
    """User role enum."""
    USER = "user"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


class UserCreate(BaseModel):
    """Schema for self-registration."""
    name: str = Field(..., min_length=1, description="User's name")
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        """Validate password length."""
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters long")
        return v


class AdminUserCreate(UserCreate):
    """Schema for a superadmin creating an account with a chosen role."""
    role: UserRole = Field(UserRole.USER, description="User role")


class UserUpdate(BaseModel):
    """Schema for updating a user."""
    name: Optional[str] = None
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None


class UserResponse(BaseModel):
    """Schema for user response."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    role: UserRole
    is_active: bool = True
    created_at: Optional[datetime] = None


class LoginRequest(BaseModel):
    """Credentials for JSON login."""
    email: str
    password: str


class Token(BaseModel):
    """Schema for authentication token."""
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: Optional[UserResponse] = None


class RegisterResponse(BaseModel):
    """Result of self-registration."""
    message: str
    user_id: str


class RoleUpdate(BaseModel):
    """New role for a user."""
    role: UserRole


class StatusUpdate(BaseModel):
    """New active flag for a user."""
    is_active: bool


class MessageResponse(BaseModel):
    """Plain confirmation message."""
    message: str


class CurrentUser(BaseModel):
    """The authenticated principal behind a request."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    role: UserRole = UserRole.USER
    is_active: bool = True
    auth_provider: str = Field("local", description="'local' or 'azure'")
