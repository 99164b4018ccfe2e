# app/modules/dashboard/router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.auth.dependencies import get_admin_user
from .service import DashboardService
from .schemas import DashboardStatsResponse

router = APIRouter()

@router.get("/admin/dashboard-stats", response_model=DashboardStatsResponse)
async def get_dashboard_stats(
    current_user = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """
    Admin reporting

    **Includes:**
    - Users, riders, parcels and deliveries
    - Revenue, platform earnings and rider payouts
    - Bookings per day (last 15 days with bookings)
    - Top 8 sender districts
    - Parcel count per status
    """
    service = DashboardService(db)
    return await service.get_dashboard_stats()
