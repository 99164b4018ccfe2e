# app/modules/cashouts/schemas.py
from pydantic import BaseModel, Field
from typing import Optional
from decimal import Decimal
from datetime import datetime

from app.shared.schemas.common import BaseResponse

class CashoutCreate(BaseModel):
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2, description="Amount to withdraw")

    class Config:
        extra = 'forbid'
        json_schema_extra = {
            "example": {"amount": 1200}
        }

class CashoutResponse(BaseModel):
    id: int
    rider_email: str
    amount: float
    status: str
    request_date: datetime
    approved_date: Optional[datetime] = None

    class Config:
        from_attributes = True

class CashoutApprovalResponse(BaseResponse):
    cashout_id: int
    status: str
    request_modified: int
    parcels_settled: int
