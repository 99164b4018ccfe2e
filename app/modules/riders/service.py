# app/modules/riders/service.py
from typing import Optional
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging

from app.core.exceptions import NotFoundError, InvalidInputError, AuthorizationError
from app.shared.schemas.common import PaginatedResponse
from app.modules.parcels.schemas import ParcelResponse
from .repository import RidersRepository
from .schemas import (
    RiderApplicationCreate, RiderApplicationResponse, ApprovalResponse,
    ToggleStatusResponse, WithdrawResponse, MyDeliveriesResponse
)

logger = logging.getLogger(__name__)

class RidersService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = RidersRepository(db)

    def _get_application(self, application_id: int):
        application = self.repository.get_by_id(application_id)
        if not application:
            raise NotFoundError("Rider application not found")
        return application

    async def submit_application(self, application_data: RiderApplicationCreate) -> RiderApplicationResponse:
        """Create a pending application; one per email"""
        if self.repository.get_by_email(application_data.email):
            raise InvalidInputError("An application for this email already exists")

        user = self.repository.get_user(application_data.email)
        if user and user.role == "admin":
            raise InvalidInputError("Admins cannot apply as riders")

        application = self.repository.create_application(application_data.model_dump())
        logger.info(f"Rider application submitted: {application.email}")
        return RiderApplicationResponse.model_validate(application)

    async def get_my_application(self, email: str) -> RiderApplicationResponse:
        application = self.repository.get_by_email(email)
        if not application:
            raise NotFoundError("No rider application for this email")
        return RiderApplicationResponse.model_validate(application)

    async def list_applications(self, status_filter: Optional[str], page: int, size: int) -> PaginatedResponse:
        items, total = self.repository.get_applications(status_filter, page, size)
        return PaginatedResponse.build(
            items=[RiderApplicationResponse.model_validate(a) for a in items],
            total=total,
            page=page,
            size=size
        )

    async def approve_application(self, application_id: int) -> ApprovalResponse:
        """
        pending -> active, cascading the user's role to rider.
        Approving an active or penalized application changes nothing.
        """
        application = self._get_application(application_id)

        user = self.repository.get_user(application.email)
        if not user:
            raise NotFoundError("No registered user for this application")

        if application.status == "pending" and user.role not in ("user", "rider"):
            raise InvalidInputError(f"A user with role {user.role} cannot be approved as a rider")

        try:
            result = self.repository.approve_application(application)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Approval of application {application_id} rolled back: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Approval failed: {str(e)}"
            )

        if result["app_modified"]:
            logger.info(f"Rider approved: {application.email}")

        return ApprovalResponse(
            success=True,
            message="Rider approved and role updated" if result["app_modified"] else "Application was not pending",
            application_id=application.id,
            status=application.status,
            app_modified=result["app_modified"],
            role_modified=result["role_modified"]
        )

    async def toggle_status(self, application_id: int) -> ToggleStatusResponse:
        """active <-> penalty; the role stays rider"""
        application = self._get_application(application_id)

        if application.status == "active":
            new_status = "penalty"
        elif application.status == "penalty":
            new_status = "active"
        else:
            raise InvalidInputError("Only active or penalized riders can be toggled")

        modified = self.repository.set_status(application, application.status, new_status)
        if not modified:
            raise InvalidInputError("Rider status changed concurrently, try again")

        logger.info(f"Rider {application.email} is now {new_status}")
        return ToggleStatusResponse(
            success=True,
            message=f"Rider is now {'running' if new_status == 'active' else 'on penalty'}",
            application_id=application_id,
            new_status=new_status
        )

    async def withdraw_application(self, application_id: int, current_email: str) -> WithdrawResponse:
        """Delete an application (admin reject or applicant withdraw) and revert the role"""
        application = self._get_application(application_id)

        current_user = self.repository.get_user(current_email)
        is_admin = current_user is not None and current_user.role == "admin"
        if not is_admin and application.email != current_email:
            raise AuthorizationError()

        try:
            result = self.repository.delete_application(application)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Withdrawal of application {application_id} rolled back: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Withdrawal failed: {str(e)}"
            )

        return WithdrawResponse(
            success=True,
            message="Rider application removed",
            application_id=application_id,
            deleted_count=result["deleted_count"],
            role_reverted=bool(result["role_reverted"])
        )

    async def get_my_deliveries(self, rider_email: str, status_filter: Optional[str]) -> MyDeliveriesResponse:
        parcels = self.repository.get_rider_parcels(rider_email, status_filter)
        earnings = self.repository.get_rider_earnings(rider_email)

        return MyDeliveriesResponse(
            success=True,
            message="Assigned parcels",
            deliveries=[ParcelResponse.model_validate(p) for p in parcels],
            summary={
                "total": len(parcels),
                **earnings
            }
        )
