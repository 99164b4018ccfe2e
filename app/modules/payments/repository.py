# app/modules/payments/repository.py
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime

from app.shared.database.models import Parcel, Payment, TrackingUpdate

class PaymentsRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_parcel(self, parcel_id: int) -> Optional[Parcel]:
        return self.db.query(Parcel).filter(Parcel.id == parcel_id).first()

    def get_payment_by_transaction(self, transaction_id: str) -> Optional[Payment]:
        return self.db.query(Payment).filter(Payment.transaction_id == transaction_id).first()

    def record_payment(self, parcel: Parcel, transaction_id: str) -> Optional[Payment]:
        """
        Ledger row, parcel pending -> paid and tracking event in one transaction.
        Returns None (nothing written) when the parcel is no longer pending.
        """
        now = datetime.utcnow()

        modified = self.db.query(Parcel).filter(
            Parcel.id == parcel.id,
            Parcel.status == 'pending'
        ).update({
            Parcel.status: 'paid',
            Parcel.transaction_id: transaction_id,
            Parcel.payment_date: now
        }, synchronize_session=False)

        if not modified:
            self.db.rollback()
            return None

        payment = Payment(
            parcel_id=parcel.id,
            transaction_id=transaction_id,
            user_email=parcel.user_email,
            amount=parcel.total_charge,
            payment_date=now
        )
        self.db.add(payment)
        self.db.add(TrackingUpdate(
            tracing_id=parcel.tracing_id,
            status='paid',
            message="Payment Confirmed",
            time=now
        ))

        self.db.commit()
        self.db.refresh(payment)
        self.db.refresh(parcel)
        return payment

    def get_payment_history(self, user_email: str) -> List[Payment]:
        return self.db.query(Payment)\
            .filter(Payment.user_email == user_email)\
            .order_by(Payment.payment_date.desc(), Payment.id.desc()).all()
