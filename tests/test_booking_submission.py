from datetime import date

from app.models.booking import Booking
from app.models.notification import AdminNotification
from app.models.sms_message import SmsMessage

from conftest import make_user, make_hall, make_dorm, auth, facility_payload, dormitory_payload


def test_company_books_halls_on_a_schedule(client, db_session, company, admin, superadmin, sent_sms):
    hall = make_hall(db_session, "Main Hall", rental_cost=3000)
    section = make_hall(db_session, "Section B", item_type="section")
    d1, d2 = date(2025, 3, 1), date(2025, 3, 2)
    body = facility_payload(d1, d2, [(d1, [hall.id, section.id]), (d2, [hall.id])], attendees=10, lunch="level1")

    r = client.post("/api/v1/company/facility-bookings", json=body, headers=auth(company))
    assert r.status_code == 201, r.text
    data = r.json()
    assert data["totalCost"] == 3000 + 1500 + 3000 + 10 * 2 * 150
    assert data["paymentStatus"] == "pending"
    assert data["approvalStatus"] == "pending"
    assert data["agreementStatus"] == "pending_admin_action"
    assert [(i["name"], i["date"], i["rentalCost"]) for i in data["items"]] == [
        ("Main Hall", "2025-03-01", 3000), ("Section B", "2025-03-01", 1500), ("Main Hall", "2025-03-02", 3000),
    ]

    note = db_session.query(AdminNotification).one()
    assert note.type == "new_facility_booking"
    assert note.related_id == data["id"]
    assert sorted(to for to, _ in sent_sms) == ["0911111111", "0922222222"]
    assert db_session.query(SmsMessage).filter(SmsMessage.status == "sent").count() == 2


def test_booking_survives_notification_failure(client, db_session, company, admin, monkeypatch):
    def broken(to, message):
        raise RuntimeError("provider down")
    monkeypatch.setattr("app.services.sms_service.send_sms", broken)
    hall = make_hall(db_session, "Main Hall")
    d = date(2025, 3, 5)

    r = client.post("/api/v1/company/facility-bookings", json=facility_payload(d, d, [(d, [hall.id])]),
                    headers=auth(company))
    assert r.status_code == 201
    assert db_session.query(Booking).count() == 1
    assert db_session.query(SmsMessage).one().status == "failed"


def test_booking_survives_broker_outage(client, db_session, company, admin, monkeypatch):
    from app.tasks import jobs

    def broker_down(*args, **kwargs):
        raise ConnectionError("redis unreachable")
    monkeypatch.setattr(jobs.notify_admins_of_new_booking, "delay", broker_down)
    hall = make_hall(db_session, "Main Hall")
    d = date(2025, 3, 6)

    r = client.post("/api/v1/company/facility-bookings", json=facility_payload(d, d, [(d, [hall.id])]),
                    headers=auth(company))
    assert r.status_code == 201, r.text
    assert db_session.get(Booking, r.json()["id"]) is not None
    assert db_session.query(AdminNotification).count() == 0
    assert db_session.query(SmsMessage).count() == 0


def test_hall_already_booked_that_day_is_rejected(client, db_session, company, sent_sms):
    hall = make_hall(db_session, "Main Hall")
    d = date(2025, 4, 1)
    first = client.post("/api/v1/company/facility-bookings", json=facility_payload(d, d, [(d, [hall.id])]),
                        headers=auth(company))
    assert first.status_code == 201

    second = client.post("/api/v1/company/facility-bookings", json=facility_payload(d, d, [(d, [hall.id])]),
                         headers=auth(company))
    assert second.status_code == 400
    assert "not available on 2025-04-01" in second.json()["detail"]
    assert db_session.query(Booking).count() == 1


def test_schedule_mode_needs_every_day(client, db_session, company):
    hall = make_hall(db_session, "Main Hall")
    d1, d2 = date(2025, 4, 1), date(2025, 4, 2)
    body = facility_payload(d1, d2, [(d1, [hall.id])])

    r = client.post("/api/v1/company/facility-bookings", json=body, headers=auth(company))
    assert r.status_code == 400
    assert "2025-04-02" in r.json()["detail"]


def test_cart_mode_allows_gaps(client, db_session, company, sent_sms):
    hall = make_hall(db_session, "Main Hall")
    d1, d2 = date(2025, 4, 1), date(2025, 4, 2)
    body = facility_payload(d1, d2, [(d1, [hall.id])], attendees=5, lunch="level2")

    r = client.post("/api/v1/company/facility-bookings?mode=cart", json=body, headers=auth(company))
    assert r.status_code == 201, r.text
    assert r.json()["totalCost"] == 3000 + 5 * 1 * 250
    assert [(i["id"], i["date"]) for i in r.json()["items"]] == [(hall.id, "2025-04-01")]


def test_unapproved_company_cannot_book(client, db_session):
    pending = make_user(db_session, "company_representative", approval_status="pending")
    hall = make_hall(db_session, "Main Hall")
    d = date(2025, 4, 1)
    r = client.post("/api/v1/company/facility-bookings", json=facility_payload(d, d, [(d, [hall.id])]),
                    headers=auth(pending))
    assert r.status_code == 403


def test_quote_reports_total_and_missing_days(client, db_session):
    hall = make_hall(db_session, "Main Hall")
    d1, d2 = date(2025, 4, 1), date(2025, 4, 2)
    r = client.post("/api/v1/public/facility-bookings/quote", json={
        "startDate": d1.isoformat(), "endDate": d2.isoformat(),
        "schedule": [{"date": d1.isoformat(), "itemIds": [hall.id]}],
        "numberOfAttendees": 10, "lunch": "level1", "refreshment": "none",
    })
    assert r.status_code == 200
    data = r.json()
    assert data["totalCost"] == 3000 + 10 * 150
    assert data["missingDays"] == ["2025-04-02"]
    assert [h["id"] for h in data["days"][0]["available"]] == [hall.id]


def test_guest_books_dormitory_rooms(client, db_session, sent_sms):
    a = make_dorm(db_session, "101")
    b = make_dorm(db_session, "102", price_per_day=800)

    r = client.post("/api/v1/public/dormitory-bookings", json=dormitory_payload([a.id, b.id]))
    assert r.status_code == 201, r.text
    data = r.json()
    assert data["totalCost"] == (500 + 800) * 3
    assert data["paymentStatus"] == "pending_transfer"
    assert data["approvalStatus"] == "pending"
    assert data["keyStatus"] == "not_issued"
    assert db_session.query(AdminNotification).one().building == "ifaboru"

    r = client.get(f"/api/v1/public/bookings/{data['id']}")
    assert r.status_code == 200
    assert r.json()["requesterName"] == "Chaltu Tesfaye"


def test_overlapping_dormitory_booking_is_rejected(client, db_session, sent_sms):
    room = make_dorm(db_session, "101")
    assert client.post("/api/v1/public/dormitory-bookings", json=dormitory_payload([room.id])).status_code == 201

    r = client.post("/api/v1/public/dormitory-bookings",
                    json=dormitory_payload([room.id], start=date(2025, 1, 12), end=date(2025, 1, 14)))
    assert r.status_code == 400
    assert "already booked on 2025-01-12" in r.json()["detail"]


def test_unavailable_room_is_rejected(client, db_session):
    room = make_dorm(db_session, "102", is_available=False)
    r = client.post("/api/v1/public/dormitory-bookings", json=dormitory_payload([room.id]))
    assert r.status_code == 400


def test_public_availability_lists_free_rooms(client, db_session, sent_sms):
    a = make_dorm(db_session, "101")
    b = make_dorm(db_session, "102")
    client.post("/api/v1/public/dormitory-bookings", json=dormitory_payload([a.id]))

    r = client.get("/api/v1/public/availability", params={"category": "dormitory", "start": "2025-01-12", "end": "2025-01-13"})
    assert r.status_code == 200
    days = r.json()
    assert [x["id"] for x in days[0]["available"]] == [b.id]
    assert {x["id"] for x in days[1]["available"]} == {a.id, b.id}
