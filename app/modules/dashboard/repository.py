# app/modules/dashboard/repository.py
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List, Dict, Any

from app.shared.database.models import (
    User, RiderApplication, Parcel, Payment, CashoutRequest
)

class DashboardRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_totals(self) -> Dict[str, Any]:
        """Counters and money sums over the whole store"""
        return {
            "total_users": self.db.query(func.count(User.id)).scalar() or 0,
            "total_riders": self.db.query(func.count(RiderApplication.id))
                .filter(RiderApplication.status.in_(['active', 'penalty'])).scalar() or 0,
            "pending_rider_applications": self.db.query(func.count(RiderApplication.id))
                .filter(RiderApplication.status == 'pending').scalar() or 0,
            "total_parcels": self.db.query(func.count(Parcel.id)).scalar() or 0,
            "delivered_parcels": self.db.query(func.count(Parcel.id))
                .filter(Parcel.status == 'delivered').scalar() or 0,
            "total_revenue": float(self.db.query(func.coalesce(func.sum(Payment.amount), 0)).scalar() or 0),
            "admin_earnings": float(self.db.query(func.coalesce(func.sum(Parcel.admin_commission), 0))
                .filter(Parcel.status == 'delivered').scalar() or 0),
            "rider_payouts": float(self.db.query(func.coalesce(func.sum(CashoutRequest.amount), 0))
                .filter(CashoutRequest.status == 'success').scalar() or 0),
            "pending_cashout_requests": self.db.query(func.count(CashoutRequest.id))
                .filter(CashoutRequest.status == 'pending').scalar() or 0,
        }

    def get_daily_bookings(self, limit: int = 15) -> List[Dict[str, Any]]:
        """Bookings per day for the most recent days that had any"""
        day = func.date(Parcel.created_at)
        rows = self.db.query(day.label("day"), func.count(Parcel.id).label("count"))\
            .group_by(day)\
            .order_by(day.desc())\
            .limit(limit).all()

        return [{"date": str(row.day), "count": row.count} for row in rows]

    def get_district_counts(self, limit: int = 8) -> List[Dict[str, Any]]:
        """Busiest sender districts"""
        count = func.count(Parcel.id)
        rows = self.db.query(Parcel.sender_district, count.label("count"))\
            .group_by(Parcel.sender_district)\
            .order_by(count.desc(), Parcel.sender_district.asc())\
            .limit(limit).all()

        return [{"district": row.sender_district, "count": row.count} for row in rows]

    def get_status_breakdown(self) -> Dict[str, int]:
        rows = self.db.query(Parcel.status, func.count(Parcel.id))\
            .group_by(Parcel.status).all()

        return {status: count for status, count in rows}
