# app/modules/reviews/repository.py
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List, Optional, Dict, Any
from datetime import datetime

from app.shared.database.models import Review, Parcel, RiderApplication

class ReviewsRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_parcel(self, parcel_id: int) -> Optional[Parcel]:
        return self.db.query(Parcel).filter(Parcel.id == parcel_id).first()

    def get_approved_rider(self, rider_email: str) -> Optional[RiderApplication]:
        return self.db.query(RiderApplication).filter(
            RiderApplication.email == rider_email,
            RiderApplication.status.in_(['active', 'penalty'])
        ).first()

    def find_review(self, parcel_id: int, user_email: str) -> Optional[Review]:
        return self.db.query(Review).filter(
            Review.parcel_id == parcel_id,
            Review.user_email == user_email
        ).first()

    def find_rider_review(self, rider_email: str, user_email: str) -> Optional[Review]:
        """Rating of the rider not tied to a parcel"""
        return self.db.query(Review).filter(
            Review.rider_email == rider_email,
            Review.user_email == user_email,
            Review.parcel_id.is_(None)
        ).first()

    def create_review(self, review_data: Dict[str, Any], user_email: str) -> Review:
        review = Review(**review_data, user_email=user_email, date=datetime.utcnow())
        self.db.add(review)
        self.db.commit()
        self.db.refresh(review)
        return review

    def get_rider_reviews(self, rider_email: str) -> List[Review]:
        return self.db.query(Review)\
            .filter(Review.rider_email == rider_email)\
            .order_by(Review.date.desc(), Review.id.desc()).all()

    def get_rating_summary(self, rider_email: str) -> Dict[str, Any]:
        average, count = self.db.query(
            func.avg(Review.rating),
            func.count(Review.id)
        ).filter(Review.rider_email == rider_email).one()

        return {"average": average, "count": count or 0}

    def get_delivery_summary(self, rider_email: str) -> Dict[str, Any]:
        """Delivered parcel count and commission totals split by settlement"""
        rows = self.db.query(
            Parcel.is_cashed_out,
            func.count(Parcel.id),
            func.coalesce(func.sum(Parcel.rider_commission), 0)
        ).filter(
            Parcel.rider_email == rider_email,
            Parcel.status == 'delivered'
        ).group_by(Parcel.is_cashed_out).all()

        summary = {"deliveries": 0, "cashed_out": 0.0, "pending": 0.0}
        for is_cashed_out, count, total in rows:
            summary["deliveries"] += count
            if is_cashed_out:
                summary["cashed_out"] += float(total or 0)
            else:
                summary["pending"] += float(total or 0)

        return summary
