# app/modules/parcels/repository.py
from sqlalchemy.orm import Session
from typing import List, Optional, Tuple, Dict, Any
from datetime import datetime
import logging

from app.shared.database.models import Parcel, TrackingUpdate, RiderApplication

logger = logging.getLogger(__name__)

class ParcelsRepository:
    def __init__(self, db: Session):
        self.db = db

    def _add_tracking(self, tracing_id: str, status: str, message: str):
        self.db.add(TrackingUpdate(
            tracing_id=tracing_id,
            status=status,
            message=message,
            time=datetime.utcnow()
        ))

    def create_parcel(self, parcel_data: Dict[str, Any], user_email: str, tracing_id: str) -> Parcel:
        """Insert the booking together with its first tracking event"""
        parcel = Parcel(
            **parcel_data,
            user_email=user_email,
            tracing_id=tracing_id,
            status='pending',
            created_at=datetime.utcnow()
        )
        self.db.add(parcel)
        self._add_tracking(tracing_id, 'pending', "Parcel Created")
        self.db.commit()
        self.db.refresh(parcel)
        return parcel

    def get_by_id(self, parcel_id: int) -> Optional[Parcel]:
        return self.db.query(Parcel).filter(Parcel.id == parcel_id).first()

    def get_by_tracing_id(self, tracing_id: str) -> Optional[Parcel]:
        return self.db.query(Parcel).filter(Parcel.tracing_id == tracing_id).first()

    def get_user_parcels(self, user_email: str, status: Optional[str] = None) -> List[Parcel]:
        query = self.db.query(Parcel).filter(Parcel.user_email == user_email)

        if status:
            query = query.filter(Parcel.status == status)

        return query.order_by(Parcel.created_at.desc(), Parcel.id.desc()).all()

    def get_parcels(self, status: Optional[str], page: int, size: int) -> Tuple[List[Parcel], int]:
        query = self.db.query(Parcel)

        if status:
            query = query.filter(Parcel.status == status)

        total = query.count()
        items = query.order_by(Parcel.created_at.desc(), Parcel.id.desc())\
            .offset((page - 1) * size).limit(size).all()

        return items, total

    def delete_pending_parcel(self, parcel_id: int) -> int:
        """Conditional delete; only a pending parcel goes away"""
        deleted = self.db.query(Parcel).filter(
            Parcel.id == parcel_id,
            Parcel.status == 'pending'
        ).delete(synchronize_session=False)
        self.db.commit()
        return deleted

    def get_active_rider(self, rider_email: str) -> Optional[RiderApplication]:
        return self.db.query(RiderApplication).filter(
            RiderApplication.email == rider_email,
            RiderApplication.status == 'active'
        ).first()

    def assign_rider(self, parcel: Parcel, rider_email: str, rider_name: str, estimated_delivery: str) -> int:
        """paid -> assigned with rider identity and tracking event, committed together"""
        modified = self.db.query(Parcel).filter(
            Parcel.id == parcel.id,
            Parcel.status == 'paid'
        ).update({
            Parcel.status: 'assigned',
            Parcel.rider_email: rider_email,
            Parcel.rider_name: rider_name,
            Parcel.estimated_delivery: estimated_delivery,
            Parcel.assigned_at: datetime.utcnow()
        }, synchronize_session=False)

        if modified:
            self._add_tracking(
                parcel.tracing_id,
                'assigned',
                f"Rider Assigned: {rider_name} (estimated delivery {estimated_delivery})"
            )

        self.db.commit()
        self.db.refresh(parcel)
        return modified

    def advance_status(
        self,
        parcel: Parcel,
        current_status: str,
        new_status: str,
        message: str,
        extra_fields: Optional[Dict[str, Any]] = None
    ) -> int:
        """Move the assigned rider's parcel from current_status to new_status and log it"""
        values = {Parcel.status: new_status}
        for field, value in (extra_fields or {}).items():
            values[getattr(Parcel, field)] = value

        modified = self.db.query(Parcel).filter(
            Parcel.id == parcel.id,
            Parcel.status == current_status,
            Parcel.rider_email == parcel.rider_email
        ).update(values, synchronize_session=False)

        if modified:
            self._add_tracking(parcel.tracing_id, new_status, message)

        self.db.commit()
        self.db.refresh(parcel)
        return modified

    def get_tracking_updates(self, tracing_id: str) -> List[TrackingUpdate]:
        return self.db.query(TrackingUpdate)\
            .filter(TrackingUpdate.tracing_id == tracing_id)\
            .order_by(TrackingUpdate.time.asc(), TrackingUpdate.id.asc()).all()
