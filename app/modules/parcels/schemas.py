# app/modules/parcels/schemas.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from decimal import Decimal
from datetime import datetime
from enum import Enum

from app.shared.schemas.common import BaseResponse, ParcelStatus, normalize_email


class ParcelType(str, Enum):
    DOCUMENT = "document"
    NON_DOCUMENT = "non-document"


class ParcelCreate(BaseModel):
    """Schema for booking a parcel"""
    parcel_type: ParcelType = Field(..., description="document or non-document")
    title: str = Field(..., min_length=2, max_length=255)
    weight: Optional[Decimal] = Field(None, ge=0, description="Weight in kg")

    sender_name: str = Field(..., min_length=2, max_length=255)
    sender_contact: str = Field(..., min_length=6, max_length=50)
    sender_region: str = Field(..., min_length=2, max_length=100)
    sender_district: str = Field(..., min_length=1, max_length=100)
    sender_address: str = Field(..., min_length=3)

    receiver_name: str = Field(..., min_length=2, max_length=255)
    receiver_contact: str = Field(..., min_length=6, max_length=50)
    receiver_region: str = Field(..., min_length=2, max_length=100)
    receiver_district: str = Field(..., min_length=1, max_length=100)
    receiver_address: str = Field(..., min_length=3)
    delivery_instruction: Optional[str] = Field(None, max_length=1000)

    total_charge: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2, description="Booking charge")

    @field_validator('sender_district', 'receiver_district', 'sender_region', 'receiver_region')
    @classmethod
    def strip_location(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Location cannot be blank')
        return v.strip()

    class Config:
        extra = 'forbid'
        json_schema_extra = {
            "example": {
                "parcel_type": "non-document",
                "title": "Winter jacket",
                "weight": 1.5,
                "sender_name": "Rahim Uddin",
                "sender_contact": "+8801711000000",
                "sender_region": "Dhaka",
                "sender_district": "Dhaka",
                "sender_address": "House 12, Road 4, Dhanmondi",
                "receiver_name": "Salma Akter",
                "receiver_contact": "+8801811000000",
                "receiver_region": "Chattogram",
                "receiver_district": "Cumilla",
                "receiver_address": "College Road, Kandirpar",
                "delivery_instruction": "Call before arriving",
                "total_charge": 150
            }
        }


class ParcelResponse(BaseModel):
    id: int
    tracing_id: str
    user_email: str
    parcel_type: str
    title: str
    weight: Optional[float] = None

    sender_name: str
    sender_contact: str
    sender_region: str
    sender_district: str
    sender_address: str

    receiver_name: str
    receiver_contact: str
    receiver_region: str
    receiver_district: str
    receiver_address: str
    delivery_instruction: Optional[str] = None

    total_charge: float
    status: str
    transaction_id: Optional[str] = None
    payment_date: Optional[datetime] = None

    rider_email: Optional[str] = None
    rider_name: Optional[str] = None
    estimated_delivery: Optional[str] = None
    assigned_at: Optional[datetime] = None

    delivered_date: Optional[datetime] = None
    rider_commission: Optional[float] = None
    admin_commission: Optional[float] = None
    is_cashed_out: Optional[bool] = None

    created_at: datetime

    class Config:
        from_attributes = True


class PublicParcelInfo(BaseModel):
    """What anyone holding the tracing id may see"""
    tracing_id: str
    status: str
    parcel_type: str
    title: str
    sender_district: str
    receiver_district: str
    rider_name: Optional[str] = None
    estimated_delivery: Optional[str] = None
    created_at: datetime
    delivered_date: Optional[datetime] = None

    class Config:
        from_attributes = True


class TrackingUpdateResponse(BaseModel):
    tracing_id: str
    status: str
    message: str
    time: datetime

    class Config:
        from_attributes = True


class AssignRiderRequest(BaseModel):
    rider_email: str = Field(..., description="Email of an active rider")
    rider_name: str = Field(..., min_length=2, max_length=255)
    estimated_delivery: str = Field(..., min_length=1, max_length=100, description="Expected delivery, e.g. 2024-06-01 or '2 days'")

    @field_validator('rider_email')
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)

    class Config:
        extra = 'forbid'


class StatusUpdateRequest(BaseModel):
    status: ParcelStatus = Field(..., description="picked_up, in_transit or delivered")
    message: Optional[str] = Field(None, max_length=500, description="Tracking message shown to the customer")

    class Config:
        extra = 'forbid'


class ParcelActionResponse(BaseResponse):
    parcel_id: int
    status: str
    modified_count: int
    rider_commission: Optional[float] = None
    admin_commission: Optional[float] = None


class CancelResponse(BaseResponse):
    parcel_id: int
    deleted_count: int
