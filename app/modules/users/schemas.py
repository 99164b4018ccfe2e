# app/modules/users/schemas.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime

from app.shared.schemas.common import BaseResponse, UserRole, normalize_email

class UserCreate(BaseModel):
    """Schema for registering a user after sign-in"""
    email: str = Field(..., description="User email")
    name: Optional[str] = Field(None, max_length=255)
    photo_url: Optional[str] = Field(None, description="Avatar URL")

    @field_validator('email')
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)

    class Config:
        extra = 'forbid'
        json_schema_extra = {
            "example": {
                "email": "customer@dakbox.com",
                "name": "Rahim Uddin",
                "photo_url": "https://i.ibb.co/avatar.png"
            }
        }

class UserCreateResponse(BaseModel):
    inserted: bool
    message: str = ""
    id: Optional[int] = None

class UserResponse(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    photo_url: Optional[str] = None
    role: str
    created_at: datetime
    last_login_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class UserRoleResponse(BaseModel):
    email: str
    role: str

class RoleUpdateRequest(BaseModel):
    role: UserRole = Field(UserRole.ADMIN, description="admin or user")

    @field_validator('role')
    @classmethod
    def validate_role(cls, v: UserRole) -> UserRole:
        if v == UserRole.RIDER:
            raise ValueError('The rider role is granted through rider application approval')
        return v

    class Config:
        extra = 'forbid'

class RoleUpdateResponse(BaseResponse):
    user_id: int
    role: str
    modified_count: int

class UserListResponse(BaseResponse):
    users: List[UserResponse]
    count: int
