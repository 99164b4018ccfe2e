# app/modules/reviews/service.py
from typing import List
from decimal import Decimal, ROUND_HALF_UP
from sqlalchemy.orm import Session
import logging

from app.core.exceptions import NotFoundError, InvalidInputError, AuthorizationError
from .repository import ReviewsRepository
from .schemas import ReviewCreate, ReviewResponse, RiderStatsResponse

logger = logging.getLogger(__name__)


def round_rating(average) -> float:
    """Mean rating to one decimal place; 0 when there are no reviews"""
    if average is None:
        return 0
    return float(Decimal(str(average)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


class ReviewsService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = ReviewsRepository(db)

    async def create_review(self, review_data: ReviewCreate, user_email: str) -> ReviewResponse:
        if review_data.rider_email == user_email:
            raise InvalidInputError("Riders cannot review themselves")

        if not self.repository.get_approved_rider(review_data.rider_email):
            raise NotFoundError("Rider not found")

        if review_data.parcel_id is not None:
            parcel = self.repository.get_parcel(review_data.parcel_id)
            if not parcel:
                raise NotFoundError("Parcel not found")
            if parcel.user_email != user_email:
                raise AuthorizationError("Only the parcel owner can review its delivery")
            if parcel.status != "delivered":
                raise InvalidInputError("Only delivered parcels can be reviewed")
            if parcel.rider_email != review_data.rider_email:
                raise InvalidInputError("This rider did not deliver the parcel")
            if self.repository.find_review(parcel.id, user_email):
                raise InvalidInputError("You already reviewed this delivery")
        elif self.repository.find_rider_review(review_data.rider_email, user_email):
            raise InvalidInputError("You already rated this rider")

        review = self.repository.create_review(review_data.model_dump(), user_email)
        logger.info(f"Review {review.id} ({review.rating}/5) for {review.rider_email}")
        return ReviewResponse.model_validate(review)

    async def get_rider_reviews(self, rider_email: str) -> List[ReviewResponse]:
        return [ReviewResponse.model_validate(r) for r in self.repository.get_rider_reviews(rider_email)]

    async def get_rider_stats(self, rider_email: str) -> RiderStatsResponse:
        ratings = self.repository.get_rating_summary(rider_email)
        deliveries = self.repository.get_delivery_summary(rider_email)

        return RiderStatsResponse(
            rider_email=rider_email,
            average_rating=round_rating(ratings["average"]),
            total_reviews=ratings["count"],
            total_deliveries=deliveries["deliveries"],
            total_earned=round(deliveries["cashed_out"] + deliveries["pending"], 2),
            cashed_out_amount=round(deliveries["cashed_out"], 2),
            pending_cashout_amount=round(deliveries["pending"], 2)
        )
