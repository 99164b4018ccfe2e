# app/modules/cashouts/service.py
from typing import List, Optional
from decimal import Decimal
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging

from app.config.settings import settings
from app.core.exceptions import NotFoundError, InvalidInputError
from .repository import CashoutsRepository
from .schemas import CashoutCreate, CashoutResponse, CashoutApprovalResponse

logger = logging.getLogger(__name__)

class CashoutsService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = CashoutsRepository(db)

    async def request_cashout(self, cashout_data: CashoutCreate, rider_email: str) -> CashoutResponse:
        """Rider asks for a payout of at least the minimum amount"""
        minimum = Decimal(settings.min_cashout_amount)
        if cashout_data.amount < minimum:
            raise InvalidInputError(f"Minimum cash-out amount is {minimum}")

        cashout = self.repository.create_request(rider_email, cashout_data.amount)
        logger.info(f"Cash-out {cashout.id} of {cashout.amount} requested by {rider_email}")
        return CashoutResponse.model_validate(cashout)

    async def get_rider_cashouts(self, rider_email: str) -> List[CashoutResponse]:
        return [CashoutResponse.model_validate(c) for c in self.repository.get_rider_requests(rider_email)]

    async def list_cashouts(self, status_filter: Optional[str]) -> List[CashoutResponse]:
        return [CashoutResponse.model_validate(c) for c in self.repository.get_requests(status_filter)]

    async def approve_cashout(self, cashout_id: int) -> CashoutApprovalResponse:
        """Approve a payout and settle the rider's delivered parcels in the same transaction"""
        cashout = self.repository.get_by_id(cashout_id)
        if not cashout:
            raise NotFoundError("Cash-out request not found")

        try:
            result = self.repository.approve_and_settle(cashout)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Approval of cash-out {cashout_id} rolled back: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Cash-out approval failed: {str(e)}"
            )

        if result["request_modified"]:
            logger.info(
                f"Cash-out {cashout_id} approved for {cashout.rider_email}, "
                f"{result['parcels_settled']} parcels settled"
            )

        return CashoutApprovalResponse(
            success=True,
            message="Cash-out approved" if result["request_modified"] else "Cash-out was already approved",
            cashout_id=cashout.id,
            status=cashout.status,
            request_modified=result["request_modified"],
            parcels_settled=result["parcels_settled"]
        )
