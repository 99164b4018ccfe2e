# app/modules/cashouts/router.py
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from app.config.database import get_db
from app.core.auth.dependencies import get_admin_user, get_rider_user, ensure_same_email
from app.shared.schemas.common import CashoutStatus
from .service import CashoutsService
from .schemas import CashoutCreate, CashoutResponse, CashoutApprovalResponse

router = APIRouter()

@router.post("/cashout-requests", response_model=CashoutResponse, status_code=status.HTTP_201_CREATED)
async def request_cashout(
    cashout_data: CashoutCreate,
    current_user = Depends(get_rider_user),
    db: Session = Depends(get_db)
):
    """Rider payout request; minimum 500"""
    service = CashoutsService(db)
    return await service.request_cashout(cashout_data, current_user.email)

@router.get("/my-cashouts/{email}", response_model=List[CashoutResponse])
async def get_my_cashouts(
    email: str = Path(..., description="Rider email; must be the caller's"),
    current_user = Depends(get_rider_user),
    db: Session = Depends(get_db)
):
    ensure_same_email(current_user.email, email)
    service = CashoutsService(db)
    return await service.get_rider_cashouts(current_user.email)

@router.get("/admin/cashout-requests", response_model=List[CashoutResponse])
async def list_cashout_requests(
    status_filter: Optional[CashoutStatus] = Query(None, alias="status"),
    current_user = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """All payout requests, newest first"""
    service = CashoutsService(db)
    return await service.list_cashouts(status_filter.value if status_filter else None)

@router.patch("/admin/approve-cashout/{cashout_id}", response_model=CashoutApprovalResponse)
async def approve_cashout(
    cashout_id: int = Path(..., description="Cash-out request ID"),
    current_user = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """
    Approve a payout

    - Request status becomes `success`
    - Every delivered, unsettled parcel of the rider is marked cashed out
    - Approving twice changes nothing
    """
    service = CashoutsService(db)
    return await service.approve_cashout(cashout_id)
