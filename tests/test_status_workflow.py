from datetime import date

import pytest

from app.core.errors import StatusConflictError
from app.models.audit_log import AuditLog
from app.models.booking import Booking, BookingItem
from app.schemas.settings import AgreementTemplate
from app.services import status_service
from app.services.settings_service import set_agreement_template

from conftest import make_user, make_dorm, auth


def facility_booking(db, **fields):
    b = Booking(id=fields.pop("id", "fb1"), category="facility", company_name="Acme PLC",
                start_date=date(2025, 6, 1), end_date=date(2025, 6, 1), total_cost=3000,
                payment_status="pending", approval_status="pending", agreement_status="pending_admin_action", **fields)
    b.items.append(BookingItem(id=b.id + "-i", position=0, item_id="hall-1", name="Main Hall", item_type="hall",
                               day=date(2025, 6, 1), rental_cost=3000))
    db.add(b)
    db.commit()
    return b


def dorm_booking(db, dorm, **fields):
    b = Booking(id=fields.pop("id", "db1"), category="dormitory", guest_name="Chaltu",
                start_date=date(2025, 6, 1), end_date=date(2025, 6, 2), total_cost=1000,
                payment_status=fields.pop("payment_status", "pending_transfer"),
                approval_status=fields.pop("approval_status", "pending"),
                key_status=fields.pop("key_status", "not_issued"), **fields)
    b.items.append(BookingItem(id=b.id + "-i", position=0, item_id=dorm.id, name=dorm.name, item_type="dormitory",
                               rental_cost=500))
    db.add(b)
    db.commit()
    return b


def test_approving_facility_sends_agreement_with_template_terms(db_session, admin):
    set_agreement_template(db_session, AgreementTemplate(defaultTerms="Be nice to the hall."))
    b = facility_booking(db_session)

    b = status_service.approve(db_session, b, admin)
    assert b.approval_status == "approved"
    assert b.agreement_status == "sent_to_client"
    assert b.agreement_sent_at is not None
    assert b.agreement_terms == "Be nice to the hall."
    assert b.version == 2

    audit = db_session.query(AuditLog).filter(AuditLog.entity_id == b.id).one()
    assert audit.action == "booking.approve"
    assert '"approval_status": "pending"' in audit.before_json
    assert '"approval_status": "approved"' in audit.after_json


def test_reject_marks_payment_failed(db_session, admin):
    b = status_service.reject(db_session, facility_booking(db_session), admin)
    assert (b.approval_status, b.payment_status) == ("rejected", "failed")


def test_redundant_action_is_a_conflict(db_session, admin):
    b = status_service.approve(db_session, facility_booking(db_session), admin)
    with pytest.raises(StatusConflictError):
        status_service.approve(db_session, b, admin)
    b = status_service.mark_paid(db_session, b, admin)
    with pytest.raises(StatusConflictError):
        status_service.mark_paid(db_session, b, admin)


def test_stale_version_is_a_conflict(db_session, admin):
    b = facility_booking(db_session)
    status_service.mark_paid(db_session, b, admin, expected_version=1)
    with pytest.raises(StatusConflictError):
        status_service.approve(db_session, b, admin, expected_version=1)
    assert b.approval_status == "pending"


def test_agreement_status_is_facility_only(db_session, admin):
    dorm = make_dorm(db_session, "101")
    with pytest.raises(StatusConflictError):
        status_service.set_agreement_status(db_session, dorm_booking(db_session, dorm), admin, "sent_to_client")


def test_signed_by_client_stamps_signed_time(db_session, admin):
    b = status_service.approve(db_session, facility_booking(db_session), admin)
    b = status_service.set_agreement_status(db_session, b, admin, "signed_by_client")
    assert b.agreement_signed_at is not None


def test_verify_payment_requires_uploaded_proof(db_session, admin):
    dorm = make_dorm(db_session, "101")
    b = dorm_booking(db_session, dorm)
    with pytest.raises(StatusConflictError):
        status_service.verify_payment(db_session, b, admin, "paid")
    b.payment_status = "awaiting_verification"
    db_session.commit()
    assert status_service.verify_payment(db_session, b, admin, "failed").payment_status == "failed"


def test_key_status_rules(db_session, admin):
    dorm = make_dorm(db_session, "101")
    b = dorm_booking(db_session, dorm, approval_status="approved")
    with pytest.raises(StatusConflictError):
        status_service.set_key_status(db_session, b, admin, "returned")
    b = status_service.set_key_status(db_session, b, admin, "issued")
    with pytest.raises(StatusConflictError):
        status_service.set_key_status(db_session, b, admin, "issued")
    b = status_service.set_key_status(db_session, b, admin, "returned")
    with pytest.raises(StatusConflictError):
        status_service.set_key_status(db_session, b, admin, "returned")
    assert b.key_status == "returned"


def test_dormitory_approval_notifies_keyholders(db_session, admin, sent_sms):
    make_user(db_session, "keyholder", phone="0933333333")
    dorm = make_dorm(db_session, "101")
    status_service.approve_payment(db_session, dorm_booking(db_session, dorm), admin)
    assert [to for to, _ in sent_sms] == ["0933333333"]
    assert "Booking Approved!" in sent_sms[0][1]


def test_building_admin_only_manages_own_building(client, db_session, sent_sms):
    ifaboru_admin = make_user(db_session, "admin", building="ifaboru")
    own = dorm_booking(db_session, make_dorm(db_session, "101", building="ifaboru"), id="own")
    other = dorm_booking(db_session, make_dorm(db_session, "201", building="buuraboru"), id="other")
    facility = facility_booking(db_session)

    assert client.post(f"/api/v1/admin/bookings/{own.id}/approve", headers=auth(ifaboru_admin)).status_code == 200
    assert client.post(f"/api/v1/admin/bookings/{other.id}/approve", headers=auth(ifaboru_admin)).status_code == 403
    assert client.post(f"/api/v1/admin/bookings/{facility.id}/approve", headers=auth(ifaboru_admin)).status_code == 403

    listed = client.get("/api/v1/admin/bookings", headers=auth(ifaboru_admin)).json()
    assert [b["id"] for b in listed["items"]] == ["own"]


def test_status_endpoint_maps_conflicts(client, db_session, admin):
    b = facility_booking(db_session)
    r = client.post(f"/api/v1/admin/bookings/{b.id}/mark-paid", json={"expectedVersion": 1}, headers=auth(admin))
    assert r.status_code == 200
    assert r.json()["version"] == 2
    r = client.post(f"/api/v1/admin/bookings/{b.id}/approve", json={"expectedVersion": 1}, headers=auth(admin))
    assert r.status_code == 409


def test_keyholder_issues_key(client, db_session):
    keyholder = make_user(db_session, "keyholder")
    b = dorm_booking(db_session, make_dorm(db_session, "101"), approval_status="approved")
    r = client.post(f"/api/v1/keyholder/bookings/{b.id}/key-status", json={"status": "issued"}, headers=auth(keyholder))
    assert r.status_code == 200
    assert r.json()["keyStatus"] == "issued"
    listed = client.get("/api/v1/keyholder/bookings", headers=auth(keyholder)).json()
    assert [x["id"] for x in listed] == [b.id]
