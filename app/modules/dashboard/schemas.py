# app/modules/dashboard/schemas.py
from pydantic import BaseModel
from typing import Dict, List

from app.shared.schemas.common import BaseResponse

class DailyBookingCount(BaseModel):
    date: str
    count: int

class DistrictCount(BaseModel):
    district: str
    count: int

class DashboardStatsResponse(BaseResponse):
    total_users: int
    total_riders: int
    pending_rider_applications: int
    total_parcels: int
    delivered_parcels: int
    total_revenue: float
    admin_earnings: float
    rider_payouts: float
    pending_cashout_requests: int
    daily_bookings: List[DailyBookingCount]
    district_counts: List[DistrictCount]
    status_breakdown: Dict[str, int]
