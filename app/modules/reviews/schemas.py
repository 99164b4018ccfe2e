# app/modules/reviews/schemas.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

from app.shared.schemas.common import normalize_email

class ReviewCreate(BaseModel):
    rider_email: str = Field(..., description="Rider being reviewed")
    parcel_id: Optional[int] = Field(None, description="Delivered parcel the review is about")
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=1000)

    @field_validator('rider_email')
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)

    class Config:
        extra = 'forbid'
        json_schema_extra = {
            "example": {
                "rider_email": "rider@dakbox.com",
                "parcel_id": 12,
                "rating": 5,
                "comment": "Fast and polite"
            }
        }

class ReviewResponse(BaseModel):
    id: int
    rider_email: str
    user_email: str
    parcel_id: Optional[int] = None
    rating: int
    comment: Optional[str] = None
    date: datetime

    class Config:
        from_attributes = True

class RiderStatsResponse(BaseModel):
    rider_email: str
    average_rating: float
    total_reviews: int
    total_deliveries: int
    total_earned: float
    cashed_out_amount: float
    pending_cashout_amount: float
