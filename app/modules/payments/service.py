# app/modules/payments/service.py
from typing import List
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging

from app.config.settings import settings
from app.core.exceptions import NotFoundError, InvalidInputError, AuthorizationError
from app.shared.services.payment_gateway import PaymentGatewayClient
from .repository import PaymentsRepository
from .schemas import (
    PaymentIntentRequest, PaymentIntentResponse, PaymentSuccessRequest,
    PaymentResponse, PaymentRecordResponse
)

logger = logging.getLogger(__name__)

class PaymentsService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = PaymentsRepository(db)

    async def create_payment_intent(
        self,
        intent_request: PaymentIntentRequest,
        gateway: PaymentGatewayClient
    ) -> PaymentIntentResponse:
        """Convert the price to minor units and hand the client secret back; nothing is stored"""
        amount = int(round(intent_request.price * 100))
        if amount < 1:
            raise InvalidInputError("Price is too small to charge")

        intent = await gateway.create_payment_intent(amount, settings.payment_currency)

        client_secret = intent.get("client_secret")
        if not client_secret:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Payment gateway returned no client secret"
            )

        return PaymentIntentResponse(client_secret=client_secret)

    async def record_payment(
        self,
        parcel_id: int,
        payment_info: PaymentSuccessRequest,
        current_email: str
    ) -> PaymentRecordResponse:
        """
        Record a successful charge for a pending parcel.

        A transaction id that was already recorded for this parcel answers with
        the existing payment instead of writing a second ledger row.
        """
        parcel = self.repository.get_parcel(parcel_id)
        if not parcel:
            raise NotFoundError("Parcel not found")

        if parcel.user_email != current_email:
            raise AuthorizationError()

        existing = self.repository.get_payment_by_transaction(payment_info.transaction_id)
        if existing:
            if existing.parcel_id != parcel.id:
                raise InvalidInputError("Transaction id already used for another parcel")
            return PaymentRecordResponse(
                success=True,
                message="Payment already recorded",
                parcel_id=parcel.id,
                status=parcel.status,
                already_recorded=True,
                payment=PaymentResponse.model_validate(existing)
            )

        if parcel.status != "pending":
            raise InvalidInputError(f"Parcel is not waiting for payment (current status: {parcel.status})")

        try:
            payment = self.repository.record_payment(parcel, payment_info.transaction_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Payment for parcel {parcel_id} rolled back: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Recording payment failed: {str(e)}"
            )

        if payment is None:
            raise InvalidInputError("Parcel is not waiting for payment")

        logger.info(f"Payment {payment.transaction_id} recorded for parcel {parcel.tracing_id}")
        return PaymentRecordResponse(
            success=True,
            message="Payment Confirmed",
            parcel_id=parcel.id,
            status=parcel.status,
            payment=PaymentResponse.model_validate(payment)
        )

    async def get_payment_history(self, user_email: str) -> List[PaymentResponse]:
        payments = self.repository.get_payment_history(user_email)
        return [PaymentResponse.model_validate(p) for p in payments]
