# app/modules/payments/router.py
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session
from typing import List

from app.config.database import get_db
from app.core.auth.dependencies import get_current_email, ensure_same_email
from app.shared.services.payment_gateway import PaymentGatewayClient, get_payment_gateway
from .service import PaymentsService
from .schemas import (
    PaymentIntentRequest, PaymentIntentResponse, PaymentSuccessRequest,
    PaymentRecordResponse, PaymentResponse
)

router = APIRouter()

@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    intent_request: PaymentIntentRequest,
    current_email: str = Depends(get_current_email),
    gateway: PaymentGatewayClient = Depends(get_payment_gateway),
    db: Session = Depends(get_db)
):
    """
    Start a card payment

    **Returns:**
    - `client_secret` to confirm the card payment on the client
    """
    service = PaymentsService(db)
    return await service.create_payment_intent(intent_request, gateway)

@router.patch("/parcel/payment-success/{parcel_id}", response_model=PaymentRecordResponse)
async def record_payment_success(
    payment_info: PaymentSuccessRequest,
    parcel_id: int = Path(..., description="Parcel ID"),
    current_email: str = Depends(get_current_email),
    db: Session = Depends(get_db)
):
    """
    Record a confirmed card payment

    - Writes the payment to the ledger
    - Parcel status becomes `paid`
    - Tracking event "Payment Confirmed" is recorded
    - Repeating the call with the same transaction id is safe
    """
    service = PaymentsService(db)
    return await service.record_payment(parcel_id, payment_info, current_email)

@router.get("/payment-history", response_model=List[PaymentResponse])
async def get_payment_history(
    email: str = Query(..., description="Payer email; must be the caller's"),
    current_email: str = Depends(get_current_email),
    db: Session = Depends(get_db)
):
    """The caller's payments, newest first"""
    ensure_same_email(current_email, email)
    service = PaymentsService(db)
    return await service.get_payment_history(current_email)
