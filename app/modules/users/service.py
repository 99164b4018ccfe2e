# app/modules/users/service.py
from typing import Optional, List
from sqlalchemy.orm import Session
import logging

from app.core.exceptions import NotFoundError, InvalidInputError
from app.shared.database.models import User, RiderApplication
from .repository import UsersRepository
from .schemas import (
    UserCreate, UserCreateResponse, UserRoleResponse, UserResponse,
    UserListResponse, RoleUpdateRequest, RoleUpdateResponse
)

logger = logging.getLogger(__name__)

class UsersService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = UsersRepository(db)

    async def register_user(self, user_data: UserCreate) -> UserCreateResponse:
        """Insert the user unless the email is already registered"""
        existing = self.repository.get_by_email(user_data.email)
        if existing:
            return UserCreateResponse(inserted=False, message="User already exists", id=existing.id)

        user = self.repository.create_user(user_data.model_dump())
        logger.info(f"User registered: {user.email}")
        return UserCreateResponse(inserted=True, message="User created", id=user.id)

    async def get_user_role(self, email: str) -> UserRoleResponse:
        user = self.repository.get_by_email(email)
        if not user:
            raise NotFoundError("User not found")
        return UserRoleResponse(email=user.email, role=user.role)

    async def list_users(self, search: Optional[str], role: Optional[str]) -> UserListResponse:
        users = self.repository.list_users(search, role)
        return UserListResponse(
            success=True,
            message="Registered users",
            users=[UserResponse.model_validate(u) for u in users],
            count=len(users)
        )

    async def change_role(self, user_id: int, role_update: RoleUpdateRequest, admin: User) -> RoleUpdateResponse:
        """Promote a user to admin or demote an admin back to user"""
        target = self.repository.get_by_id(user_id)
        if not target:
            raise NotFoundError("User not found")

        new_role = role_update.role.value

        if target.id == admin.id and new_role != "admin":
            raise InvalidInputError("Admins cannot remove their own admin role")

        if target.role == "rider":
            raise InvalidInputError("Rider roles are managed through rider applications")

        if new_role == "admin" and self.repository.get_rider_application(target.email):
            raise InvalidInputError("User has a rider application; remove it before promoting")

        modified = self.repository.set_role(user_id, new_role)
        if modified:
            logger.info(f"Role of {target.email} changed to {new_role} by {admin.email}")

        return RoleUpdateResponse(
            success=True,
            message=f"User is now {new_role}" if modified else f"User already has role {new_role}",
            user_id=user_id,
            role=new_role,
            modified_count=modified
        )

    async def list_active_riders(self, district: Optional[str]) -> List[RiderApplication]:
        return self.repository.list_active_riders(district)
