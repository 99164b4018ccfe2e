# app/modules/payments/schemas.py
from pydantic import BaseModel, Field
from datetime import datetime

from app.shared.schemas.common import BaseResponse

# Gateway ceiling is 99999999 minor units
MAX_PRICE = 999999.99

class PaymentIntentRequest(BaseModel):
    price: float = Field(..., gt=0, le=MAX_PRICE, allow_inf_nan=False, description="Amount to charge in major currency units")

    class Config:
        extra = 'forbid'
        json_schema_extra = {
            "example": {"price": 150}
        }

class PaymentIntentResponse(BaseModel):
    client_secret: str

class PaymentSuccessRequest(BaseModel):
    transaction_id: str = Field(..., min_length=3, max_length=255, description="Gateway transaction / payment intent id")

    class Config:
        extra = 'forbid'
        json_schema_extra = {
            "example": {"transaction_id": "pi_3PqR2sL8xyz"}
        }

class PaymentResponse(BaseModel):
    id: int
    parcel_id: int
    transaction_id: str
    user_email: str
    amount: float
    payment_date: datetime

    class Config:
        from_attributes = True

class PaymentRecordResponse(BaseResponse):
    parcel_id: int
    status: str
    already_recorded: bool = False
    payment: PaymentResponse
