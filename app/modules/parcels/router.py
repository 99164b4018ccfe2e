# app/modules/parcels/router.py
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from app.config.database import get_db
from app.core.auth.dependencies import (
    get_current_email, get_admin_user, get_rider_user, ensure_same_email
)
from app.shared.schemas.common import PaginatedResponse, ParcelStatus
from .service import ParcelsService
from .schemas import (
    ParcelCreate, ParcelResponse, PublicParcelInfo, TrackingUpdateResponse,
    AssignRiderRequest, StatusUpdateRequest, ParcelActionResponse, CancelResponse
)

router = APIRouter()

@router.post("/parcels", response_model=ParcelResponse, status_code=status.HTTP_201_CREATED)
async def create_parcel(
    parcel_data: ParcelCreate,
    current_email: str = Depends(get_current_email),
    db: Session = Depends(get_db)
):
    """
    Book a parcel

    - Owner is the caller
    - Tracing id is generated by the server
    - Starts in status `pending`, waiting for payment
    """
    service = ParcelsService(db)
    return await service.create_parcel(parcel_data, current_email)

@router.get("/my-parcels/{email}", response_model=List[ParcelResponse])
async def get_my_parcels(
    email: str = Path(..., description="Owner email; must be the caller's"),
    status_filter: Optional[ParcelStatus] = Query(None, alias="status"),
    current_email: str = Depends(get_current_email),
    db: Session = Depends(get_db)
):
    """The caller's bookings, newest first"""
    ensure_same_email(current_email, email)
    service = ParcelsService(db)
    return await service.get_user_parcels(current_email, status_filter.value if status_filter else None)

@router.get("/parcel/{parcel_id}", response_model=ParcelResponse)
async def get_parcel(
    parcel_id: int = Path(..., description="Parcel ID"),
    current_email: str = Depends(get_current_email),
    db: Session = Depends(get_db)
):
    """Parcel details for its owner, its rider or an admin"""
    service = ParcelsService(db)
    return await service.get_parcel(parcel_id, current_email)

@router.delete("/parcels/{parcel_id}", response_model=CancelResponse)
async def cancel_parcel(
    parcel_id: int = Path(..., description="Parcel ID"),
    current_email: str = Depends(get_current_email),
    db: Session = Depends(get_db)
):
    """Cancel a booking that has not been paid yet"""
    service = ParcelsService(db)
    return await service.cancel_parcel(parcel_id, current_email)

@router.get("/track-parcel-info/{tracing_id}", response_model=PublicParcelInfo)
async def track_parcel_info(
    tracing_id: str = Path(..., description="Public tracing id"),
    db: Session = Depends(get_db)
):
    """Public parcel summary by tracing id"""
    service = ParcelsService(db)
    return await service.get_public_info(tracing_id)

@router.get("/tracking/{tracing_id}", response_model=List[TrackingUpdateResponse])
async def get_tracking_updates(
    tracing_id: str = Path(..., description="Public tracing id"),
    db: Session = Depends(get_db)
):
    """Tracking timeline, oldest first"""
    service = ParcelsService(db)
    return await service.get_tracking(tracing_id)

@router.patch("/admin/assign-rider/{parcel_id}", response_model=ParcelActionResponse)
async def assign_rider(
    assignment: AssignRiderRequest,
    parcel_id: int = Path(..., description="Parcel ID"),
    current_user = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """
    Assign an active rider to a paid parcel

    - Status becomes `assigned`
    - Tracking event "Rider Assigned" is recorded
    """
    service = ParcelsService(db)
    return await service.assign_rider(parcel_id, assignment)

@router.patch("/parcels/update-status/{parcel_id}", response_model=ParcelActionResponse)
async def update_parcel_status(
    update: StatusUpdateRequest,
    parcel_id: int = Path(..., description="Parcel ID"),
    current_user = Depends(get_rider_user),
    db: Session = Depends(get_db)
):
    """
    Rider moves an assigned parcel forward

    **Delivery:**
    - Rider earns 20% between districts, 12% inside one district
    - The platform keeps the rest
    - The parcel becomes eligible for cash-out
    """
    service = ParcelsService(db)
    return await service.advance_status(parcel_id, update, current_user)

@router.get("/admin/all-parcels", response_model=PaginatedResponse)
async def list_all_parcels(
    status_filter: Optional[ParcelStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    size: int = Query(10, ge=1, le=100),
    current_user = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """Every booking, newest first, paginated"""
    service = ParcelsService(db)
    return await service.list_parcels(status_filter.value if status_filter else None, page, size)
