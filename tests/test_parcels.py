"""
Parcel lifecycle: booking, cancellation, assignment, rider status updates and
public tracking.
"""

from app.shared.database.models import Parcel, TrackingUpdate
from conftest import auth_headers, PARCEL_PAYLOAD

CUSTOMER = "customer@example.com"
RIDER = "rider@example.com"
ADMIN = "admin@example.com"


def book(client, email=CUSTOMER, **overrides):
    payload = {**PARCEL_PAYLOAD, **overrides}
    return client.post("/parcels", json=payload, headers=auth_headers(email))


def update_status(client, parcel_id, new_status, email=RIDER, message=None):
    body = {"status": new_status}
    if message is not None:
        body["message"] = message
    return client.patch(f"/parcels/update-status/{parcel_id}", json=body, headers=auth_headers(email))


class TestBooking:

    def test_booking_starts_pending_with_server_tracing_id(self, client, db_session):
        response = book(client)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["user_email"] == CUSTOMER
        assert data["tracing_id"].startswith("DBX-")
        assert data["total_charge"] == 1000.0
        assert data["rider_commission"] is None

        events = db_session.query(TrackingUpdate).filter(TrackingUpdate.tracing_id == data["tracing_id"]).all()
        assert [e.message for e in events] == ["Parcel Created"]

    def test_single_letter_districts_are_accepted(self, client):
        response = book(client, sender_district="A", receiver_district="B")

        assert response.status_code == 201
        assert response.json()["sender_district"] == "A"

    def test_blank_district_is_rejected(self, client):
        assert book(client, sender_district="   ").status_code == 400

    def test_tracing_ids_are_unique(self, client):
        first = book(client).json()["tracing_id"]
        second = book(client).json()["tracing_id"]

        assert first != second

    def test_booking_requires_token(self, client):
        response = client.post("/parcels", json=PARCEL_PAYLOAD)

        assert response.status_code == 401

    def test_unknown_fields_are_rejected(self, client):
        response = book(client, status="delivered")

        assert response.status_code == 400

    def test_non_positive_charge_is_rejected(self, client):
        assert book(client, total_charge=0).status_code == 400
        assert book(client, total_charge=-5).status_code == 400

    def test_unknown_parcel_type_is_rejected(self, client):
        response = book(client, parcel_type="furniture")

        assert response.status_code == 400

    def test_my_parcels_lists_only_own_bookings(self, client, make_parcel):
        make_parcel(user_email=CUSTOMER)
        make_parcel(user_email=CUSTOMER, status="paid")
        make_parcel(user_email="other@example.com")

        response = client.get(f"/my-parcels/{CUSTOMER}", headers=auth_headers(CUSTOMER))

        assert response.status_code == 200
        assert len(response.json()) == 2
        assert {p["user_email"] for p in response.json()} == {CUSTOMER}

    def test_my_parcels_filters_by_status(self, client, make_parcel):
        make_parcel(user_email=CUSTOMER)
        make_parcel(user_email=CUSTOMER, status="paid")

        response = client.get(
            f"/my-parcels/{CUSTOMER}", params={"status": "paid"}, headers=auth_headers(CUSTOMER)
        )

        assert [p["status"] for p in response.json()] == ["paid"]

    def test_my_parcels_of_someone_else_is_forbidden(self, client):
        response = client.get("/my-parcels/other@example.com", headers=auth_headers(CUSTOMER))

        assert response.status_code == 403


class TestParcelDetails:

    def test_owner_sees_parcel(self, client, make_parcel):
        parcel = make_parcel()

        response = client.get(f"/parcel/{parcel.id}", headers=auth_headers(CUSTOMER))

        assert response.status_code == 200
        assert response.json()["tracing_id"] == parcel.tracing_id

    def test_stranger_is_forbidden(self, client, make_parcel, make_user):
        parcel = make_parcel()
        make_user("stranger@example.com")

        response = client.get(f"/parcel/{parcel.id}", headers=auth_headers("stranger@example.com"))

        assert response.status_code == 403

    def test_admin_sees_any_parcel(self, client, make_parcel, make_user):
        parcel = make_parcel()
        make_user(ADMIN, role="admin")

        response = client.get(f"/parcel/{parcel.id}", headers=auth_headers(ADMIN))

        assert response.status_code == 200

    def test_unknown_parcel_is_not_found(self, client):
        response = client.get("/parcel/9999", headers=auth_headers(CUSTOMER))

        assert response.status_code == 404

    def test_malformed_id_is_bad_request(self, client):
        response = client.get("/parcel/not-a-number", headers=auth_headers(CUSTOMER))

        assert response.status_code == 400


class TestCancel:

    def test_pending_parcel_is_deleted(self, client, make_parcel, db_session):
        parcel_id = make_parcel().id

        response = client.delete(f"/parcels/{parcel_id}", headers=auth_headers(CUSTOMER))

        assert response.status_code == 200
        assert response.json()["deleted_count"] == 1
        assert db_session.query(Parcel).filter(Parcel.id == parcel_id).count() == 0

    def test_paid_parcel_cannot_be_cancelled(self, client, make_parcel, db_session):
        parcel_id = make_parcel(status="paid").id

        response = client.delete(f"/parcels/{parcel_id}", headers=auth_headers(CUSTOMER))

        assert response.status_code == 400
        assert "Cannot cancel" in response.json()["detail"]
        assert db_session.query(Parcel).filter(Parcel.id == parcel_id).count() == 1

    def test_other_customer_cannot_cancel(self, client, make_parcel, make_user):
        parcel_id = make_parcel().id
        make_user("other@example.com")

        response = client.delete(f"/parcels/{parcel_id}", headers=auth_headers("other@example.com"))

        assert response.status_code == 403


class TestAssignment:

    def test_admin_assigns_active_rider_to_paid_parcel(self, client, make_parcel, make_user, make_rider, db_session):
        make_user(ADMIN, role="admin")
        make_rider(RIDER)
        parcel = make_parcel(status="paid")

        response = client.patch(
            f"/admin/assign-rider/{parcel.id}",
            json={"rider_email": RIDER, "rider_name": "Karim", "estimated_delivery": "2 days"},
            headers=auth_headers(ADMIN)
        )

        assert response.status_code == 200
        assert response.json()["status"] == "assigned"
        assert response.json()["modified_count"] == 1

        db_session.expire_all()
        stored = db_session.query(Parcel).filter(Parcel.id == parcel.id).one()
        assert stored.rider_email == RIDER
        assert stored.rider_name == "Karim"
        assert stored.assigned_at is not None

        last_event = db_session.query(TrackingUpdate).order_by(TrackingUpdate.id.desc()).first()
        assert last_event.status == "assigned"
        assert last_event.message.startswith("Rider Assigned: Karim")

    def test_unpaid_parcel_cannot_be_assigned(self, client, make_parcel, make_user, make_rider):
        make_user(ADMIN, role="admin")
        make_rider(RIDER)
        parcel = make_parcel(status="pending")

        response = client.patch(
            f"/admin/assign-rider/{parcel.id}",
            json={"rider_email": RIDER, "rider_name": "Karim", "estimated_delivery": "2 days"},
            headers=auth_headers(ADMIN)
        )

        assert response.status_code == 400

    def test_penalized_rider_cannot_be_assigned(self, client, make_parcel, make_user, make_rider):
        make_user(ADMIN, role="admin")
        make_rider(RIDER, status="penalty")
        parcel = make_parcel(status="paid")

        response = client.patch(
            f"/admin/assign-rider/{parcel.id}",
            json={"rider_email": RIDER, "rider_name": "Karim", "estimated_delivery": "2 days"},
            headers=auth_headers(ADMIN)
        )

        assert response.status_code == 400

    def test_customer_cannot_assign(self, client, make_parcel, make_user):
        make_user(CUSTOMER)
        parcel = make_parcel(status="paid")

        response = client.patch(
            f"/admin/assign-rider/{parcel.id}",
            json={"rider_email": RIDER, "rider_name": "Karim", "estimated_delivery": "2 days"},
            headers=auth_headers(CUSTOMER)
        )

        assert response.status_code == 403


class TestRiderStatusUpdates:

    def test_delivery_stamps_cross_district_commission(self, client, make_parcel, make_rider, db_session):
        make_rider(RIDER)
        parcel = make_parcel(status="in_transit", rider_email=RIDER, sender_district="A", receiver_district="B")

        response = update_status(client, parcel.id, "delivered")

        assert response.status_code == 200
        assert response.json()["rider_commission"] == 200.0
        assert response.json()["admin_commission"] == 800.0

        db_session.expire_all()
        stored = db_session.query(Parcel).filter(Parcel.id == parcel.id).one()
        assert stored.status == "delivered"
        assert stored.delivered_date is not None
        assert stored.is_cashed_out is False

    def test_delivery_inside_one_district(self, client, make_parcel, make_rider):
        make_rider(RIDER)
        parcel = make_parcel(status="assigned", rider_email=RIDER, sender_district="A", receiver_district="A")

        response = update_status(client, parcel.id, "delivered")

        assert response.json()["rider_commission"] == 120.0
        assert response.json()["admin_commission"] == 880.0

    def test_status_cannot_move_backwards(self, client, make_parcel, make_rider):
        make_rider(RIDER)
        parcel = make_parcel(status="in_transit", rider_email=RIDER)

        response = update_status(client, parcel.id, "picked_up")

        assert response.status_code == 400

    def test_delivered_parcel_is_final(self, client, make_parcel, make_rider):
        make_rider(RIDER)
        parcel = make_parcel(status="delivered", rider_email=RIDER)

        assert update_status(client, parcel.id, "delivered").status_code == 400

    def test_rider_cannot_set_payment_statuses(self, client, make_parcel, make_rider):
        make_rider(RIDER)
        parcel = make_parcel(status="assigned", rider_email=RIDER)

        assert update_status(client, parcel.id, "paid").status_code == 400

    def test_other_rider_is_forbidden(self, client, make_parcel, make_rider):
        make_rider(RIDER)
        make_rider("second@example.com")
        parcel = make_parcel(status="assigned", rider_email=RIDER)

        response = update_status(client, parcel.id, "picked_up", email="second@example.com")

        assert response.status_code == 403

    def test_customer_cannot_update_status(self, client, make_parcel, make_user):
        make_user(CUSTOMER)
        parcel = make_parcel(status="assigned", rider_email=RIDER)

        response = update_status(client, parcel.id, "picked_up", email=CUSTOMER)

        assert response.status_code == 403

    def test_custom_tracking_message(self, client, make_parcel, make_rider, db_session):
        make_rider(RIDER)
        parcel = make_parcel(status="assigned", rider_email=RIDER)

        update_status(client, parcel.id, "picked_up", message="Collected from the front desk")

        event = db_session.query(TrackingUpdate).filter(TrackingUpdate.tracing_id == parcel.tracing_id).one()
        assert event.status == "picked_up"
        assert event.message == "Collected from the front desk"


class TestPublicTracking:

    def test_public_info_needs_no_token(self, client, make_parcel):
        parcel = make_parcel(status="paid")

        response = client.get(f"/track-parcel-info/{parcel.tracing_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "paid"
        assert "user_email" not in data
        assert "receiver_contact" not in data

    def test_unknown_tracing_id(self, client):
        assert client.get("/track-parcel-info/DBX-NOPE").status_code == 404
        assert client.get("/tracking/DBX-NOPE").json() == []


class TestAdminListing:

    def test_paginated_listing(self, client, make_parcel, make_user):
        make_user(ADMIN, role="admin")
        for _ in range(3):
            make_parcel()

        response = client.get("/admin/all-parcels", params={"page": 2, "size": 2}, headers=auth_headers(ADMIN))

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert data["pages"] == 2
        assert len(data["items"]) == 1


def test_full_delivery_scenario(client, make_user, make_rider, fake_gateway, db_session):
    make_user(CUSTOMER)
    make_user(ADMIN, role="admin")
    make_rider(RIDER)

    booked = book(client).json()
    parcel_id = booked["id"]

    intent = client.post("/create-payment-intent", json={"price": 1000}, headers=auth_headers(CUSTOMER))
    assert intent.status_code == 200
    assert fake_gateway.calls == [{"amount": 100000, "currency": "bdt"}]

    paid = client.patch(
        f"/parcel/payment-success/{parcel_id}",
        json={"transaction_id": "pi_test_123"},
        headers=auth_headers(CUSTOMER)
    )
    assert paid.json()["status"] == "paid"

    assigned = client.patch(
        f"/admin/assign-rider/{parcel_id}",
        json={"rider_email": RIDER, "rider_name": "Karim", "estimated_delivery": "2 days"},
        headers=auth_headers(ADMIN)
    )
    assert assigned.json()["status"] == "assigned"

    for step in ("picked_up", "in_transit", "delivered"):
        assert update_status(client, parcel_id, step).status_code == 200

    parcel = client.get(f"/parcel/{parcel_id}", headers=auth_headers(CUSTOMER)).json()
    assert parcel["status"] == "delivered"
    assert parcel["rider_commission"] == 200.0
    assert parcel["admin_commission"] == 800.0
    assert parcel["is_cashed_out"] is False

    timeline = client.get(f"/tracking/{booked['tracing_id']}").json()
    assert [event["status"] for event in timeline] == [
        "pending", "paid", "assigned", "picked_up", "in_transit", "delivered"
    ]
    assert timeline[-1]["message"] == "Parcel Delivered"
