# app/modules/parcels/service.py
from typing import Optional, Tuple
from decimal import Decimal, ROUND_HALF_UP
from datetime import datetime
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging
import uuid

from app.core.exceptions import NotFoundError, InvalidInputError, AuthorizationError
from app.shared.database.models import Parcel, User
from app.shared.schemas.common import PaginatedResponse, ParcelStatus, PARCEL_STATUS_ORDER
from .repository import ParcelsRepository
from .schemas import (
    ParcelCreate, ParcelResponse, PublicParcelInfo, TrackingUpdateResponse,
    AssignRiderRequest, StatusUpdateRequest, ParcelActionResponse, CancelResponse
)

logger = logging.getLogger(__name__)

INTER_DISTRICT_RATE = Decimal("0.20")
SAME_DISTRICT_RATE = Decimal("0.12")
CENT = Decimal("0.01")

# Statuses a rider may move a parcel into, with the default tracking message
RIDER_STATUS_MESSAGES = {
    ParcelStatus.PICKED_UP.value: "Parcel Picked Up",
    ParcelStatus.IN_TRANSIT.value: "Parcel In Transit",
    ParcelStatus.DELIVERED.value: "Parcel Delivered",
}


def calculate_commission(total_charge, sender_district: str, receiver_district: str) -> Tuple[Decimal, Decimal]:
    """
    Split a delivered parcel's charge into (rider_commission, admin_commission).

    The rider earns 20% when the parcel crosses districts and 12% inside one
    district; the platform keeps the rest, so both parts always add up to the
    charge.
    """
    total = Decimal(str(total_charge)).quantize(CENT, rounding=ROUND_HALF_UP)
    same_district = (sender_district or "").strip().lower() == (receiver_district or "").strip().lower()
    rate = SAME_DISTRICT_RATE if same_district else INTER_DISTRICT_RATE

    rider_commission = (total * rate).quantize(CENT, rounding=ROUND_HALF_UP)
    admin_commission = total - rider_commission
    return rider_commission, admin_commission


def generate_tracing_id() -> str:
    return f"DBX-{datetime.utcnow():%Y%m%d}-{uuid.uuid4().hex[:8].upper()}"


def status_rank(parcel_status: str) -> int:
    return PARCEL_STATUS_ORDER.index(parcel_status)


class ParcelsService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = ParcelsRepository(db)

    def _get_parcel(self, parcel_id: int) -> Parcel:
        parcel = self.repository.get_by_id(parcel_id)
        if not parcel:
            raise NotFoundError("Parcel not found")
        return parcel

    def _caller_role(self, email: str) -> Optional[str]:
        user = self.db.query(User).filter(User.email == email).first()
        return user.role if user else None

    def _rollback(self, action: str, error: Exception):
        self.db.rollback()
        logger.error(f"{action} rolled back: {error}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"{action} failed: {str(error)}"
        )

    # ==================== BOOKING ====================

    async def create_parcel(self, parcel_data: ParcelCreate, user_email: str) -> ParcelResponse:
        """Book a parcel in status pending"""
        data = parcel_data.model_dump()
        data["parcel_type"] = parcel_data.parcel_type.value

        try:
            parcel = self.repository.create_parcel(data, user_email, generate_tracing_id())
        except SQLAlchemyError as e:
            self._rollback("Parcel booking", e)

        logger.info(f"Parcel {parcel.tracing_id} booked by {user_email}")
        return ParcelResponse.model_validate(parcel)

    async def get_user_parcels(self, user_email: str, status_filter: Optional[str]):
        parcels = self.repository.get_user_parcels(user_email, status_filter)
        return [ParcelResponse.model_validate(p) for p in parcels]

    async def get_parcel(self, parcel_id: int, current_email: str) -> ParcelResponse:
        """Visible to the owner, the assigned rider and admins"""
        parcel = self._get_parcel(parcel_id)

        if current_email not in (parcel.user_email, parcel.rider_email) \
                and self._caller_role(current_email) != "admin":
            raise AuthorizationError()

        return ParcelResponse.model_validate(parcel)

    async def cancel_parcel(self, parcel_id: int, current_email: str) -> CancelResponse:
        """Only a pending parcel can be cancelled"""
        parcel = self._get_parcel(parcel_id)

        if parcel.user_email != current_email and self._caller_role(current_email) != "admin":
            raise AuthorizationError()

        if parcel.status != ParcelStatus.PENDING.value:
            raise InvalidInputError("Cannot cancel! Only pending parcels can be cancelled")

        deleted = self.repository.delete_pending_parcel(parcel_id)
        if not deleted:
            raise InvalidInputError("Cannot cancel! Only pending parcels can be cancelled")

        logger.info(f"Parcel {parcel_id} cancelled by {current_email}")
        return CancelResponse(
            success=True,
            message="Parcel cancelled",
            parcel_id=parcel_id,
            deleted_count=deleted
        )

    async def list_parcels(self, status_filter: Optional[str], page: int, size: int) -> PaginatedResponse:
        items, total = self.repository.get_parcels(status_filter, page, size)
        return PaginatedResponse.build(
            items=[ParcelResponse.model_validate(p) for p in items],
            total=total,
            page=page,
            size=size
        )

    # ==================== ASSIGNMENT & DELIVERY ====================

    async def assign_rider(self, parcel_id: int, assignment: AssignRiderRequest) -> ParcelActionResponse:
        """paid -> assigned"""
        parcel = self._get_parcel(parcel_id)

        if not self.repository.get_active_rider(assignment.rider_email):
            raise InvalidInputError("Rider is not an active rider")

        if parcel.status != ParcelStatus.PAID.value:
            raise InvalidInputError(f"Only paid parcels can be assigned (current status: {parcel.status})")

        try:
            modified = self.repository.assign_rider(
                parcel, assignment.rider_email, assignment.rider_name, assignment.estimated_delivery
            )
        except SQLAlchemyError as e:
            self._rollback("Rider assignment", e)

        if not modified:
            raise InvalidInputError("Parcel is no longer waiting for a rider")

        logger.info(f"Parcel {parcel.tracing_id} assigned to {assignment.rider_email}")
        return ParcelActionResponse(
            success=True,
            message="Rider assigned",
            parcel_id=parcel_id,
            status=parcel.status,
            modified_count=modified
        )

    async def advance_status(self, parcel_id: int, update: StatusUpdateRequest, rider: User) -> ParcelActionResponse:
        """
        Rider moves the parcel forward: assigned -> picked_up -> in_transit -> delivered.

        Delivery stamps the commission split and opens the parcel for cash-out.
        """
        parcel = self._get_parcel(parcel_id)

        if parcel.rider_email != rider.email:
            raise AuthorizationError("Parcel is not assigned to you")

        new_status = update.status.value
        if new_status not in RIDER_STATUS_MESSAGES:
            raise InvalidInputError("Riders can only set picked_up, in_transit or delivered")

        current_status = parcel.status
        if status_rank(new_status) <= status_rank(current_status):
            raise InvalidInputError(f"Status cannot move from {current_status} to {new_status}")

        extra_fields = {}
        if new_status == ParcelStatus.DELIVERED.value:
            rider_commission, admin_commission = calculate_commission(
                parcel.total_charge, parcel.sender_district, parcel.receiver_district
            )
            extra_fields = {
                "rider_commission": rider_commission,
                "admin_commission": admin_commission,
                "delivered_date": datetime.utcnow(),
                "is_cashed_out": False,
            }

        message = (update.message or "").strip() or RIDER_STATUS_MESSAGES[new_status]

        try:
            modified = self.repository.advance_status(parcel, current_status, new_status, message, extra_fields)
        except SQLAlchemyError as e:
            self._rollback("Status update", e)

        if not modified:
            raise InvalidInputError("Parcel status changed concurrently, try again")

        logger.info(f"Parcel {parcel.tracing_id}: {current_status} -> {new_status} by {rider.email}")
        return ParcelActionResponse(
            success=True,
            message=message,
            parcel_id=parcel_id,
            status=parcel.status,
            modified_count=modified,
            rider_commission=float(parcel.rider_commission) if parcel.rider_commission is not None else None,
            admin_commission=float(parcel.admin_commission) if parcel.admin_commission is not None else None
        )

    # ==================== PUBLIC TRACKING ====================

    async def get_public_info(self, tracing_id: str) -> PublicParcelInfo:
        parcel = self.repository.get_by_tracing_id(tracing_id)
        if not parcel:
            raise NotFoundError("No parcel with this tracing id")
        return PublicParcelInfo.model_validate(parcel)

    async def get_tracking(self, tracing_id: str):
        updates = self.repository.get_tracking_updates(tracing_id)
        return [TrackingUpdateResponse.model_validate(u) for u in updates]
