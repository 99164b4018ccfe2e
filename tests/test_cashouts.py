"""
Rider payouts and settlement of delivered parcels.
"""

from decimal import Decimal

from app.shared.database.models import Parcel, CashoutRequest
from conftest import auth_headers, fail_commits

RIDER = "rider@example.com"
ADMIN = "admin@example.com"


def delivered_parcel(make_parcel, rider_email=RIDER, **extra):
    return make_parcel(
        status="delivered",
        rider_email=rider_email,
        rider_commission=Decimal("200"),
        admin_commission=Decimal("800"),
        is_cashed_out=False,
        **extra
    )


class TestRequestCashout:

    def test_below_minimum_is_rejected(self, client, make_rider, db_session):
        make_rider(RIDER)

        response = client.post("/cashout-requests", json={"amount": 499}, headers=auth_headers(RIDER))

        assert response.status_code == 400
        assert db_session.query(CashoutRequest).count() == 0

    def test_minimum_creates_pending_request(self, client, make_rider):
        make_rider(RIDER)

        response = client.post("/cashout-requests", json={"amount": 500}, headers=auth_headers(RIDER))

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["amount"] == 500.0
        assert data["rider_email"] == RIDER
        assert data["approved_date"] is None

    def test_plain_user_cannot_request(self, client, make_user):
        make_user("user@example.com")

        response = client.post("/cashout-requests", json={"amount": 900}, headers=auth_headers("user@example.com"))

        assert response.status_code == 403

    def test_rider_lists_own_requests(self, client, make_rider):
        make_rider(RIDER)
        make_rider("second@example.com")
        client.post("/cashout-requests", json={"amount": 600}, headers=auth_headers(RIDER))
        client.post("/cashout-requests", json={"amount": 700}, headers=auth_headers("second@example.com"))

        response = client.get(f"/my-cashouts/{RIDER}", headers=auth_headers(RIDER))

        assert response.status_code == 200
        assert [c["amount"] for c in response.json()] == [600.0]

    def test_rider_cannot_list_other_riders_requests(self, client, make_rider):
        make_rider(RIDER)

        response = client.get("/my-cashouts/second@example.com", headers=auth_headers(RIDER))

        assert response.status_code == 403


class TestApproveCashout:

    def test_approval_settles_only_that_riders_unsettled_deliveries(
        self, client, make_user, make_rider, make_parcel, db_session
    ):
        make_user(ADMIN, role="admin")
        make_rider(RIDER)
        make_rider("second@example.com")

        own_delivered = [delivered_parcel(make_parcel).id for _ in range(2)]
        own_in_transit = make_parcel(status="in_transit", rider_email=RIDER).id
        other_delivered = delivered_parcel(make_parcel, rider_email="second@example.com").id

        cashout_id = client.post(
            "/cashout-requests", json={"amount": 500}, headers=auth_headers(RIDER)
        ).json()["id"]

        response = client.patch(f"/admin/approve-cashout/{cashout_id}", headers=auth_headers(ADMIN))

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "success"
        assert data["request_modified"] == 1
        assert data["parcels_settled"] == 2

        db_session.expire_all()

        def settled(parcel_id):
            return db_session.query(Parcel).filter(Parcel.id == parcel_id).one().is_cashed_out

        assert all(settled(pid) for pid in own_delivered)
        assert not settled(own_in_transit)
        assert settled(other_delivered) is False

        cashout = db_session.query(CashoutRequest).filter(CashoutRequest.id == cashout_id).one()
        assert cashout.approved_date is not None

    def test_second_approval_changes_nothing(self, client, make_user, make_rider, make_parcel, db_session):
        make_user(ADMIN, role="admin")
        make_rider(RIDER)
        delivered_parcel(make_parcel)

        cashout_id = client.post(
            "/cashout-requests", json={"amount": 500}, headers=auth_headers(RIDER)
        ).json()["id"]
        client.patch(f"/admin/approve-cashout/{cashout_id}", headers=auth_headers(ADMIN))

        # delivered after the first approval; must wait for the next payout
        late_id = delivered_parcel(make_parcel).id

        again = client.patch(f"/admin/approve-cashout/{cashout_id}", headers=auth_headers(ADMIN))

        assert again.status_code == 200
        assert again.json()["request_modified"] == 0
        assert again.json()["parcels_settled"] == 0

        db_session.expire_all()
        assert db_session.query(Parcel).filter(Parcel.id == late_id).one().is_cashed_out is False

    def test_failed_commit_rolls_back_approval_and_settlement(
        self, client, make_user, make_rider, make_parcel, db_session, monkeypatch
    ):
        make_user(ADMIN, role="admin")
        make_rider(RIDER)
        parcel_id = delivered_parcel(make_parcel).id
        cashout_id = client.post(
            "/cashout-requests", json={"amount": 500}, headers=auth_headers(RIDER)
        ).json()["id"]
        fail_commits(monkeypatch, db_session)

        response = client.patch(f"/admin/approve-cashout/{cashout_id}", headers=auth_headers(ADMIN))

        assert response.status_code == 500
        db_session.expire_all()
        cashout = db_session.query(CashoutRequest).filter(CashoutRequest.id == cashout_id).one()
        assert cashout.status == "pending"
        assert cashout.approved_date is None
        assert db_session.query(Parcel).filter(Parcel.id == parcel_id).one().is_cashed_out is False

    def test_unknown_request_is_not_found(self, client, make_user):
        make_user(ADMIN, role="admin")

        response = client.patch("/admin/approve-cashout/777", headers=auth_headers(ADMIN))

        assert response.status_code == 404

    def test_rider_cannot_approve(self, client, make_rider):
        make_rider(RIDER)
        cashout_id = client.post(
            "/cashout-requests", json={"amount": 500}, headers=auth_headers(RIDER)
        ).json()["id"]

        response = client.patch(f"/admin/approve-cashout/{cashout_id}", headers=auth_headers(RIDER))

        assert response.status_code == 403

    def test_admin_lists_requests_by_status(self, client, make_user, make_rider):
        make_user(ADMIN, role="admin")
        make_rider(RIDER)
        first = client.post("/cashout-requests", json={"amount": 500}, headers=auth_headers(RIDER)).json()["id"]
        client.post("/cashout-requests", json={"amount": 800}, headers=auth_headers(RIDER))
        client.patch(f"/admin/approve-cashout/{first}", headers=auth_headers(ADMIN))

        pending = client.get(
            "/admin/cashout-requests", params={"status": "pending"}, headers=auth_headers(ADMIN)
        ).json()
        everything = client.get("/admin/cashout-requests", headers=auth_headers(ADMIN)).json()

        assert [c["amount"] for c in pending] == [800.0]
        assert len(everything) == 2
