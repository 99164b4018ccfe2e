# app/modules/users/router.py
from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional

from app.config.database import get_db
from app.core.auth.dependencies import get_current_email, get_admin_user, ensure_same_email
from app.modules.riders.schemas import RiderApplicationResponse
from app.shared.schemas.common import UserRole
from .service import UsersService
from .schemas import (
    UserCreate, UserCreateResponse, UserRoleResponse, UserListResponse,
    RoleUpdateRequest, RoleUpdateResponse
)

router = APIRouter()

@router.post("/users", response_model=UserCreateResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    user_data: UserCreate,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Register a user after sign-in

    - New users always start with role `user`
    - An already registered email answers 200 with `inserted: false`
    """
    service = UsersService(db)
    result = await service.register_user(user_data)
    if not result.inserted:
        response.status_code = status.HTTP_200_OK
    return result

@router.get("/user-role", response_model=UserRoleResponse)
async def get_user_role(
    email: str = Query(..., description="Email to look up; must be the caller's"),
    current_email: str = Depends(get_current_email),
    db: Session = Depends(get_db)
):
    """Stored role of the caller"""
    ensure_same_email(current_email, email)
    service = UsersService(db)
    return await service.get_user_role(current_email)

@router.get("/users/admin-list", response_model=UserListResponse)
async def list_users(
    search: Optional[str] = Query(None, description="Search by email or name"),
    role: Optional[UserRole] = Query(None, description="Filter by role"),
    current_user = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """All registered users, newest first"""
    service = UsersService(db)
    return await service.list_users(search, role.value if role else None)

@router.patch("/users/make-admin/{user_id}", response_model=RoleUpdateResponse)
async def change_user_role(
    user_id: int = Path(..., description="User ID"),
    role_update: RoleUpdateRequest = RoleUpdateRequest(),
    current_user = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """
    Promote a user to admin (default) or demote an admin back to user

    **Validations:**
    - Admins cannot demote themselves
    - Riders keep the role granted by their application
    """
    service = UsersService(db)
    return await service.change_role(user_id, role_update, current_user)

@router.get("/users/riders-list", response_model=List[RiderApplicationResponse])
async def list_active_riders(
    district: Optional[str] = Query(None, description="Only riders working in this district"),
    current_user = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """Active riders available for assignment"""
    service = UsersService(db)
    return await service.list_active_riders(district)
