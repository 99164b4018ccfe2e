"""
Shared fixtures: an in-memory database per test, a fake payment gateway,
a TestClient wired to both, and factories for users, riders and parcels.
"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.config.database import get_db
from app.core.auth.service import AuthService
from app.shared.database.models import Base, User, RiderApplication, Parcel
from app.shared.services.payment_gateway import get_payment_gateway


class FakePaymentGateway:
    """Records payment intent calls instead of reaching the gateway"""

    def __init__(self):
        self.calls = []

    async def create_payment_intent(self, amount, currency):
        self.calls.append({"amount": amount, "currency": currency})
        return {"id": "pi_test_123", "client_secret": "pi_test_123_secret_abc"}


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def fake_gateway():
    return FakePaymentGateway()


@pytest.fixture
def client(db_session, fake_gateway):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: fake_gateway
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def auth_headers(email):
    token = AuthService.create_access_token({"email": email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user(db_session):
    def _make_user(email, role="user", name=None):
        user = User(email=email.lower(), role=role, name=name or email.split("@")[0])
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make_user


@pytest.fixture
def make_rider(db_session, make_user):
    """User with role rider and an application in the given status"""
    def _make_rider(email, status="active", district="Dhaka"):
        role = "rider" if status in ("active", "penalty") else "user"
        user = make_user(email, role=role)
        application = RiderApplication(
            email=email.lower(),
            name=f"Rider {email.split('@')[0]}",
            phone="+8801700000000",
            nid="1234567890",
            age=25,
            region="Dhaka",
            district=district,
            status=status,
        )
        db_session.add(application)
        db_session.commit()
        db_session.refresh(application)
        return user, application
    return _make_rider


@pytest.fixture
def make_parcel(db_session):
    counter = {"n": 0}

    def _make_parcel(
        user_email="customer@example.com",
        status="pending",
        sender_district="Dhaka",
        receiver_district="Cumilla",
        total_charge="1000",
        rider_email=None,
        created_at=None,
        **extra
    ):
        counter["n"] += 1
        parcel = Parcel(
            tracing_id=f"DBX-TEST-{counter['n']:04d}",
            user_email=user_email,
            parcel_type="non-document",
            title="Books",
            weight=Decimal("2"),
            sender_name="Sender",
            sender_contact="+8801711111111",
            sender_region="Dhaka",
            sender_district=sender_district,
            sender_address="Road 1",
            receiver_name="Receiver",
            receiver_contact="+8801722222222",
            receiver_region="Chattogram",
            receiver_district=receiver_district,
            receiver_address="Road 2",
            total_charge=Decimal(total_charge),
            status=status,
            rider_email=rider_email,
            rider_name="Rider" if rider_email else None,
            created_at=created_at or datetime.utcnow(),
            **extra
        )
        db_session.add(parcel)
        db_session.commit()
        db_session.refresh(parcel)
        return parcel
    return _make_parcel


@pytest.fixture
def expired_token():
    return AuthService.create_access_token(
        {"email": "late@example.com"}, expires_delta=timedelta(seconds=-10)
    )


PARCEL_PAYLOAD = {
    "parcel_type": "non-document",
    "title": "Winter jacket",
    "weight": 1.5,
    "sender_name": "Rahim Uddin",
    "sender_contact": "+8801711000000",
    "sender_region": "Dhaka",
    "sender_district": "A",
    "sender_address": "House 12, Road 4",
    "receiver_name": "Salma Akter",
    "receiver_contact": "+8801811000000",
    "receiver_region": "Chattogram",
    "receiver_district": "B",
    "receiver_address": "College Road",
    "total_charge": 1000,
}


def fail_commits(monkeypatch, session):
    """Make every later commit flush its writes and then fail"""
    from sqlalchemy.exc import SQLAlchemyError

    def failing_commit():
        session.flush()
        raise SQLAlchemyError("database unavailable")

    monkeypatch.setattr(session, "commit", failing_commit)
