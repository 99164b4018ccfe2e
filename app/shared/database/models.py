# app/shared/database/models.py
from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Text,
    Numeric, ForeignKey, CheckConstraint
)
from sqlalchemy.orm import declarative_base, relationship
from datetime import datetime

Base = declarative_base()

# =====================================================
# USERS & RIDERS
# =====================================================

class User(Base):
    """Registered account; role is the only authorization attribute"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255))
    photo_url = Column(Text)
    role = Column(String(20), nullable=False, default='user')
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    last_login_at = Column(DateTime)

    __table_args__ = (
        CheckConstraint("role IN ('user', 'rider', 'admin')", name='check_user_role'),
    )


class RiderApplication(Base):
    """Rider onboarding request, one per email"""
    __tablename__ = "rider_applications"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    nid = Column(String(50), nullable=False)
    age = Column(Integer)
    region = Column(String(100), nullable=False)
    district = Column(String(100), nullable=False, index=True)
    bike_brand = Column(String(100))
    bike_registration = Column(String(100))
    status = Column(String(20), nullable=False, default='pending', index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    approved_at = Column(DateTime)

    __table_args__ = (
        CheckConstraint("status IN ('pending', 'active', 'penalty')", name='check_rider_application_status'),
    )


# =====================================================
# PARCELS
# =====================================================

class Parcel(Base):
    """Shipment booking; status drives the lifecycle"""
    __tablename__ = "parcels"

    id = Column(Integer, primary_key=True, index=True)
    tracing_id = Column(String(40), unique=True, nullable=False, index=True)
    user_email = Column(String(255), nullable=False, index=True)

    # Contents
    parcel_type = Column(String(20), nullable=False)
    title = Column(String(255), nullable=False)
    weight = Column(Numeric(10, 2))

    # Sender
    sender_name = Column(String(255), nullable=False)
    sender_contact = Column(String(50), nullable=False)
    sender_region = Column(String(100), nullable=False)
    sender_district = Column(String(100), nullable=False, index=True)
    sender_address = Column(Text, nullable=False)

    # Receiver
    receiver_name = Column(String(255), nullable=False)
    receiver_contact = Column(String(50), nullable=False)
    receiver_region = Column(String(100), nullable=False)
    receiver_district = Column(String(100), nullable=False)
    receiver_address = Column(Text, nullable=False)
    delivery_instruction = Column(Text)

    total_charge = Column(Numeric(12, 2), nullable=False)
    status = Column(String(20), nullable=False, default='pending', index=True)

    # Payment
    transaction_id = Column(String(255))
    payment_date = Column(DateTime)

    # Assignment
    rider_email = Column(String(255), index=True)
    rider_name = Column(String(255))
    estimated_delivery = Column(String(100))
    assigned_at = Column(DateTime)

    # Delivery & settlement
    delivered_date = Column(DateTime)
    rider_commission = Column(Numeric(12, 2))
    admin_commission = Column(Numeric(12, 2))
    is_cashed_out = Column(Boolean)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)

    payments = relationship("Payment", back_populates="parcel")

    __table_args__ = (
        CheckConstraint('total_charge > 0', name='check_positive_total_charge'),
        CheckConstraint(
            "status IN ('pending', 'paid', 'assigned', 'picked_up', 'in_transit', 'delivered')",
            name='check_parcel_status'
        ),
    )


class Payment(Base):
    """Ledger row per successful charge; never updated"""
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    parcel_id = Column(Integer, ForeignKey("parcels.id"), nullable=False, index=True)
    transaction_id = Column(String(255), unique=True, nullable=False)
    user_email = Column(String(255), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    payment_date = Column(DateTime, nullable=False, default=datetime.utcnow)

    parcel = relationship("Parcel", back_populates="payments")


class TrackingUpdate(Base):
    """Event log per parcel, keyed by the public tracing id"""
    __tablename__ = "tracking_updates"

    id = Column(Integer, primary_key=True, index=True)
    tracing_id = Column(String(40), nullable=False, index=True)
    status = Column(String(20), nullable=False)
    message = Column(Text, nullable=False)
    time = Column(DateTime, nullable=False, default=datetime.utcnow)


# =====================================================
# SETTLEMENT & FEEDBACK
# =====================================================

class CashoutRequest(Base):
    """Rider payout request settled by admin approval"""
    __tablename__ = "cashout_requests"

    id = Column(Integer, primary_key=True, index=True)
    rider_email = Column(String(255), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    status = Column(String(20), nullable=False, default='pending', index=True)
    request_date = Column(DateTime, nullable=False, default=datetime.utcnow)
    approved_date = Column(DateTime)

    __table_args__ = (
        CheckConstraint("status IN ('pending', 'success')", name='check_cashout_status'),
    )


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    rider_email = Column(String(255), nullable=False, index=True)
    user_email = Column(String(255), nullable=False)
    parcel_id = Column(Integer, ForeignKey("parcels.id"))
    rating = Column(Integer, nullable=False)
    comment = Column(Text)
    date = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        CheckConstraint('rating BETWEEN 1 AND 5', name='check_review_rating'),
    )
