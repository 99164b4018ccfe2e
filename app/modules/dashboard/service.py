# app/modules/dashboard/service.py
from sqlalchemy.orm import Session

from app.shared.schemas.common import ParcelStatus
from .repository import DashboardRepository
from .schemas import DashboardStatsResponse

DAILY_BOOKING_DAYS = 15
TOP_DISTRICTS = 8

class DashboardService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = DashboardRepository(db)

    async def get_dashboard_stats(self) -> DashboardStatsResponse:
        """Read-only snapshot of the current store"""
        breakdown = self.repository.get_status_breakdown()

        return DashboardStatsResponse(
            success=True,
            message="Dashboard statistics",
            **self.repository.get_totals(),
            daily_bookings=self.repository.get_daily_bookings(DAILY_BOOKING_DAYS),
            district_counts=self.repository.get_district_counts(TOP_DISTRICTS),
            # every status is listed, including the ones with no parcels
            status_breakdown={s.value: breakdown.get(s.value, 0) for s in ParcelStatus}
        )
