# app/modules/cashouts/repository.py
from sqlalchemy.orm import Session
from typing import List, Optional, Dict
from decimal import Decimal
from datetime import datetime

from app.shared.database.models import CashoutRequest, Parcel

class CashoutsRepository:
    def __init__(self, db: Session):
        self.db = db

    def create_request(self, rider_email: str, amount: Decimal) -> CashoutRequest:
        cashout = CashoutRequest(
            rider_email=rider_email,
            amount=amount,
            status='pending',
            request_date=datetime.utcnow()
        )
        self.db.add(cashout)
        self.db.commit()
        self.db.refresh(cashout)
        return cashout

    def get_by_id(self, cashout_id: int) -> Optional[CashoutRequest]:
        return self.db.query(CashoutRequest).filter(CashoutRequest.id == cashout_id).first()

    def get_rider_requests(self, rider_email: str) -> List[CashoutRequest]:
        return self.db.query(CashoutRequest)\
            .filter(CashoutRequest.rider_email == rider_email)\
            .order_by(CashoutRequest.request_date.desc(), CashoutRequest.id.desc()).all()

    def get_requests(self, status: Optional[str] = None) -> List[CashoutRequest]:
        query = self.db.query(CashoutRequest)

        if status:
            query = query.filter(CashoutRequest.status == status)

        return query.order_by(CashoutRequest.request_date.desc(), CashoutRequest.id.desc()).all()

    def approve_and_settle(self, cashout: CashoutRequest) -> Dict[str, int]:
        """
        pending -> success, then mark the rider's delivered and unsettled parcels
        as cashed out. Both writes are committed together; an already approved
        request writes nothing.
        """
        request_modified = self.db.query(CashoutRequest).filter(
            CashoutRequest.id == cashout.id,
            CashoutRequest.status == 'pending'
        ).update({
            CashoutRequest.status: 'success',
            CashoutRequest.approved_date: datetime.utcnow()
        }, synchronize_session=False)

        parcels_settled = 0
        if request_modified:
            parcels_settled = self.db.query(Parcel).filter(
                Parcel.rider_email == cashout.rider_email,
                Parcel.status == 'delivered',
                Parcel.is_cashed_out == False
            ).update({Parcel.is_cashed_out: True}, synchronize_session=False)

        self.db.commit()
        self.db.refresh(cashout)

        return {"request_modified": request_modified, "parcels_settled": parcels_settled}
