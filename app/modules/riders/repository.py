# app/modules/riders/repository.py
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List, Optional, Tuple, Dict, Any
from datetime import datetime
import logging

from app.shared.database.models import RiderApplication, User, Parcel

logger = logging.getLogger(__name__)

class RidersRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, application_id: int) -> Optional[RiderApplication]:
        return self.db.query(RiderApplication).filter(RiderApplication.id == application_id).first()

    def get_by_email(self, email: str) -> Optional[RiderApplication]:
        return self.db.query(RiderApplication).filter(RiderApplication.email == email).first()

    def get_user(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def create_application(self, application_data: dict) -> RiderApplication:
        application = RiderApplication(**application_data, status='pending')
        self.db.add(application)
        self.db.commit()
        self.db.refresh(application)
        return application

    def get_applications(self, status: Optional[str], page: int, size: int) -> Tuple[List[RiderApplication], int]:
        """One page of applications plus the total matching count"""
        query = self.db.query(RiderApplication)

        if status:
            query = query.filter(RiderApplication.status == status)

        total = query.count()
        items = query.order_by(RiderApplication.created_at.desc(), RiderApplication.id.desc())\
            .offset((page - 1) * size).limit(size).all()

        return items, total

    def approve_application(self, application: RiderApplication) -> Dict[str, int]:
        """
        pending -> active and user role -> rider, committed together.
        Both updates are conditional so a repeated approval modifies nothing.
        """
        app_modified = self.db.query(RiderApplication).filter(
            RiderApplication.id == application.id,
            RiderApplication.status == 'pending'
        ).update(
            {RiderApplication.status: 'active', RiderApplication.approved_at: datetime.utcnow()},
            synchronize_session=False
        )

        role_modified = 0
        if app_modified:
            role_modified = self.db.query(User).filter(
                User.email == application.email,
                User.role == 'user'
            ).update({User.role: 'rider'}, synchronize_session=False)

        self.db.commit()
        self.db.refresh(application)

        return {"app_modified": app_modified, "role_modified": role_modified}

    def set_status(self, application: RiderApplication, current_status: str, new_status: str) -> int:
        modified = self.db.query(RiderApplication).filter(
            RiderApplication.id == application.id,
            RiderApplication.status == current_status
        ).update({RiderApplication.status: new_status}, synchronize_session=False)
        self.db.commit()
        return modified

    def delete_application(self, application: RiderApplication) -> Dict[str, int]:
        """Delete the application and revert a rider back to user, committed together"""
        email = application.email

        deleted = self.db.query(RiderApplication).filter(
            RiderApplication.id == application.id
        ).delete(synchronize_session=False)

        role_reverted = self.db.query(User).filter(
            User.email == email,
            User.role == 'rider'
        ).update({User.role: 'user'}, synchronize_session=False)

        self.db.commit()

        return {"deleted_count": deleted, "role_reverted": role_reverted}

    def get_rider_parcels(self, rider_email: str, status: Optional[str] = None) -> List[Parcel]:
        query = self.db.query(Parcel).filter(Parcel.rider_email == rider_email)

        if status:
            query = query.filter(Parcel.status == status)

        return query.order_by(Parcel.assigned_at.desc(), Parcel.id.desc()).all()

    def get_rider_earnings(self, rider_email: str) -> Dict[str, Any]:
        """Commission totals over the rider's delivered parcels"""
        delivered = self.db.query(
            func.count(Parcel.id),
            func.coalesce(func.sum(Parcel.rider_commission), 0)
        ).filter(
            Parcel.rider_email == rider_email,
            Parcel.status == 'delivered'
        ).one()

        pending_cashout = self.db.query(
            func.coalesce(func.sum(Parcel.rider_commission), 0)
        ).filter(
            Parcel.rider_email == rider_email,
            Parcel.status == 'delivered',
            Parcel.is_cashed_out == False
        ).scalar()

        return {
            "delivered": delivered[0] or 0,
            "total_earned": float(delivered[1] or 0),
            "pending_cashout_amount": float(pending_cashout or 0)
        }
