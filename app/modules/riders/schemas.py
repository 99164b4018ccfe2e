# app/modules/riders/schemas.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime

from app.shared.schemas.common import BaseResponse, normalize_email
from app.modules.parcels.schemas import ParcelResponse

class RiderApplicationCreate(BaseModel):
    """Schema for applying as a rider"""
    email: str = Field(..., description="Applicant email; must be the caller's")
    name: str = Field(..., min_length=2, max_length=255)
    phone: str = Field(..., min_length=6, max_length=50)
    nid: str = Field(..., min_length=5, max_length=50, description="National ID number")
    age: Optional[int] = Field(None, ge=18, le=80)
    region: str = Field(..., min_length=2, max_length=100)
    district: str = Field(..., min_length=2, max_length=100)
    bike_brand: Optional[str] = Field(None, max_length=100)
    bike_registration: Optional[str] = Field(None, max_length=100)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator('name', 'region', 'district')
    @classmethod
    def strip_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Field cannot be blank')
        return v.strip()

    class Config:
        extra = 'forbid'
        json_schema_extra = {
            "example": {
                "email": "rider@dakbox.com",
                "name": "Karim Hossain",
                "phone": "+8801711000000",
                "nid": "1990123456789",
                "age": 27,
                "region": "Dhaka",
                "district": "Gazipur",
                "bike_brand": "Bajaj Pulsar",
                "bike_registration": "DHAKA-METRO-LA-11-2345"
            }
        }

class RiderApplicationResponse(BaseModel):
    id: int
    email: str
    name: str
    phone: str
    nid: str
    age: Optional[int] = None
    region: str
    district: str
    bike_brand: Optional[str] = None
    bike_registration: Optional[str] = None
    status: str
    created_at: datetime
    approved_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ApprovalResponse(BaseResponse):
    application_id: int
    status: str
    app_modified: int
    role_modified: int

class ToggleStatusResponse(BaseResponse):
    application_id: int
    new_status: str

class WithdrawResponse(BaseResponse):
    application_id: int
    deleted_count: int
    role_reverted: bool

class MyDeliveriesResponse(BaseResponse):
    deliveries: List[ParcelResponse]
    summary: Dict[str, Any]
