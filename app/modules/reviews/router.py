# app/modules/reviews/router.py
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session
from typing import List

from app.config.database import get_db
from app.core.auth.dependencies import get_current_email
from .service import ReviewsService
from .schemas import ReviewCreate, ReviewResponse, RiderStatsResponse

router = APIRouter()

@router.post("/reviews", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    review_data: ReviewCreate,
    current_email: str = Depends(get_current_email),
    db: Session = Depends(get_db)
):
    """
    Rate a rider from 1 to 5

    When `parcel_id` is given it must be the caller's delivered parcel, delivered
    by that rider, and reviewed only once.
    """
    service = ReviewsService(db)
    return await service.create_review(review_data, current_email)

@router.get("/rider-reviews/{email}", response_model=List[ReviewResponse])
async def get_rider_reviews(
    email: str = Path(..., description="Rider email"),
    current_email: str = Depends(get_current_email),
    db: Session = Depends(get_db)
):
    service = ReviewsService(db)
    return await service.get_rider_reviews(email.strip().lower())

@router.get("/rider-stats/{email}", response_model=RiderStatsResponse)
async def get_rider_stats(
    email: str = Path(..., description="Rider email"),
    current_email: str = Depends(get_current_email),
    db: Session = Depends(get_db)
):
    """Average rating, deliveries and earnings of a rider"""
    service = ReviewsService(db)
    return await service.get_rider_stats(email.strip().lower())
