# app/modules/riders/router.py
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from app.config.database import get_db
from app.core.auth.dependencies import (
    get_current_email, get_admin_user, get_rider_user, ensure_same_email
)
from app.shared.schemas.common import PaginatedResponse, ParcelStatus, RiderApplicationStatus
from .service import RidersService
from .schemas import (
    RiderApplicationCreate, RiderApplicationResponse, ApprovalResponse,
    ToggleStatusResponse, WithdrawResponse, MyDeliveriesResponse
)

router = APIRouter()

@router.post("/rider-applications", response_model=RiderApplicationResponse, status_code=status.HTTP_201_CREATED)
async def submit_rider_application(
    application_data: RiderApplicationCreate,
    current_email: str = Depends(get_current_email),
    db: Session = Depends(get_db)
):
    """
    Apply to become a rider

    **Validations:**
    - The application email must be the caller's
    - Only one application per email
    """
    ensure_same_email(current_email, application_data.email)
    service = RidersService(db)
    return await service.submit_application(application_data)

@router.get("/rider-applications", response_model=PaginatedResponse)
async def list_rider_applications(
    status_filter: Optional[RiderApplicationStatus] = Query(None, alias="status", description="pending, active or penalty"),
    page: int = Query(1, ge=1),
    size: int = Query(10, ge=1, le=100),
    current_user = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """Rider applications, newest first, paginated"""
    service = RidersService(db)
    return await service.list_applications(status_filter.value if status_filter else None, page, size)

@router.get("/rider-applications/me", response_model=RiderApplicationResponse)
async def get_my_rider_application(
    current_email: str = Depends(get_current_email),
    db: Session = Depends(get_db)
):
    """The caller's own application"""
    service = RidersService(db)
    return await service.get_my_application(current_email)

@router.patch("/rider-applications/approve/{application_id}", response_model=ApprovalResponse)
async def approve_rider_application(
    application_id: int = Path(..., description="Application ID"),
    current_user = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """
    Approve a pending rider

    - Application status becomes `active`
    - The applicant's role becomes `rider`
    - Re-approving reports `app_modified: 0` and changes nothing
    """
    service = RidersService(db)
    return await service.approve_application(application_id)

@router.patch("/rider-applications/toggle-status/{application_id}", response_model=ToggleStatusResponse)
async def toggle_rider_status(
    application_id: int = Path(..., description="Application ID"),
    current_user = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """Switch an approved rider between running (`active`) and `penalty`"""
    service = RidersService(db)
    return await service.toggle_status(application_id)

@router.delete("/rider-applications/{application_id}", response_model=WithdrawResponse)
async def delete_rider_application(
    application_id: int = Path(..., description="Application ID"),
    current_email: str = Depends(get_current_email),
    db: Session = Depends(get_db)
):
    """
    Reject (admin) or withdraw (applicant) an application

    A rider whose application is removed goes back to role `user`.
    """
    service = RidersService(db)
    return await service.withdraw_application(application_id, current_email)

@router.get("/rider/my-deliveries/{email}", response_model=MyDeliveriesResponse)
async def get_my_deliveries(
    email: str = Path(..., description="Rider email; must be the caller's"),
    status_filter: Optional[ParcelStatus] = Query(None, alias="status"),
    current_user = Depends(get_rider_user),
    db: Session = Depends(get_db)
):
    """Parcels assigned to the rider with earnings summary"""
    ensure_same_email(current_user.email, email)
    service = RidersService(db)
    return await service.get_my_deliveries(current_user.email, status_filter.value if status_filter else None)
