import inspect

import pytest

from app.models.booking import Booking
from app.models.notification import AdminNotification
from app.services import airtable_client, media_client
from app.services.airtable_client import AirtableClient, AirtableConfig, AirtableError

from conftest import make_user, make_dorm, auth, dormitory_payload


class FakeResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload
        self.text = "x"

    def json(self):
        return self._payload


class FakeAirtable:
    def __init__(self, error=None):
        self.records = []
        self.error = error

    def create_record(self, fields):
        if self.error:
            raise self.error
        self.records.append(fields)
        return {"id": "rec123", "fields": fields}


@pytest.fixture
def hosted(monkeypatch):
    uploads = []

    def fake_upload(content, filename, folder):
        uploads.append((filename, folder, content))
        return f"https://media.example.com/{folder}/{filename}"

    monkeypatch.setattr("app.services.payment_proof_service.upload_file", fake_upload)
    monkeypatch.setattr("app.api.v1.routes.admin.upload_file", fake_upload)
    monkeypatch.setattr("app.api.v1.routes.company.upload_file", fake_upload)
    return uploads


def _dorm_booking(client, db_session, building="ifaboru"):
    room = make_dorm(db_session, "101", building=building)
    return client.post("/api/v1/public/dormitory-bookings", json=dormitory_payload([room.id])).json()["id"]


def test_payment_proof_is_hosted_mirrored_and_flags_booking(client, db_session, hosted, monkeypatch, sent_sms):
    make_user(db_session, "admin", phone="0944444444", building="ifaboru")
    make_user(db_session, "admin", phone="0955555555", building="buuraboru")
    fake = FakeAirtable()
    monkeypatch.setattr("app.services.payment_proof_service.get_airtable_client", lambda: fake)
    booking_id = _dorm_booking(client, db_session)
    sent_sms.clear()

    r = client.post(f"/api/v1/public/bookings/{booking_id}/payment-proof",
                    files={"file": ("receipt.png", b"png-bytes", "image/png")})
    assert r.status_code == 200, r.text
    assert r.json()["url"] == "https://media.example.com/payment_screenshots/receipt.png"

    assert hosted[0][1] == "payment_screenshots"
    fields = fake.records[0]
    assert fields["Booking ID"] == booking_id
    assert fields["Screenshot"] == [{"url": "https://media.example.com/payment_screenshots/receipt.png"}]
    assert fields["Original Filename"] == "receipt.png"
    assert fields["Recipient phones"] == "0944444444"

    b = db_session.get(Booking, booking_id)
    db_session.refresh(b)
    assert b.payment_status == "awaiting_verification"
    assert b.payment_screenshot_record_id == "rec123"
    assert [to for to, _ in sent_sms] == ["0944444444"]
    assert db_session.query(AdminNotification).filter(AdminNotification.type == "payment_proof_uploaded").count() == 1


def test_airtable_failure_leaves_booking_alone(client, db_session, hosted, monkeypatch, sent_sms):
    fake = FakeAirtable(error=AirtableError("schema", "field mismatch", 422))
    monkeypatch.setattr("app.services.payment_proof_service.get_airtable_client", lambda: fake)
    booking_id = _dorm_booking(client, db_session)

    r = client.post(f"/api/v1/public/bookings/{booking_id}/payment-proof",
                    files={"file": ("receipt.png", b"png-bytes", "image/png")})
    assert r.status_code == 502
    assert r.json()["detail"]["category"] == "schema"
    b = db_session.get(Booking, booking_id)
    db_session.refresh(b)
    assert b.payment_status == "pending_transfer"


def test_unconfigured_media_host_is_a_server_error(client, db_session, sent_sms):
    booking_id = _dorm_booking(client, db_session)
    r = client.post(f"/api/v1/public/bookings/{booking_id}/payment-proof",
                    files={"file": ("receipt.png", b"png-bytes", "image/png")})
    assert r.status_code == 500
    assert "CLOUDINARY_CLOUD_NAME" in r.json()["detail"]


@pytest.mark.parametrize("status,category", [(401, "auth"), (403, "auth"), (404, "not_found"), (422, "schema"), (500, "remote")])
def test_airtable_error_categories(monkeypatch, status, category):
    monkeypatch.setattr(airtable_client.requests, "post",
                        lambda *a, **kw: FakeResponse(status, {"error": {"message": "nope"}}))
    client = AirtableClient(AirtableConfig(api_key="k", base_id="app1", table_name="Payment Proofs"))
    with pytest.raises(AirtableError) as exc:
        client.create_record({"Booking ID": "b1"})
    assert exc.value.category == category


def test_airtable_posts_single_record(monkeypatch):
    seen = {}

    def fake_post(url, json=None, headers=None, timeout=None):
        seen.update(url=url, json=json, headers=headers)
        return FakeResponse(200, {"records": [{"id": "rec1", "fields": {}}]})

    monkeypatch.setattr(airtable_client.requests, "post", fake_post)
    client = AirtableClient(AirtableConfig(api_key="k", base_id="app1", table_name="Payment Proofs"))
    assert client.create_record({"Booking ID": "b1"})["id"] == "rec1"
    assert seen["url"] == "https://api.airtable.com/v0/app1/Payment%20Proofs"
    assert seen["json"] == {"records": [{"fields": {"Booking ID": "b1"}}]}
    assert seen["headers"]["Authorization"] == "Bearer k"


def test_media_upload_goes_through_cloudinary(monkeypatch):
    seen = {}

    def fake_upload(file, **options):
        seen.update(file=file, options=options)
        return {"secure_url": "https://res.example.com/x.png", "public_id": "blog_images/x"}

    monkeypatch.setattr(media_client.cloudinary.uploader, "upload", fake_upload)
    client = media_client.MediaHostClient(media_client.MediaHostConfig("demo", "key", "secret"))
    out = client.upload(content=b"1", filename="x.png", folder="blog_images")
    assert out["secure_url"] == "https://res.example.com/x.png"
    assert seen["file"] == b"1"
    assert seen["options"]["folder"] == "blog_images"
    assert seen["options"]["resource_type"] == "auto"
    assert media_client.cloudinary.config().cloud_name == "demo"


def test_media_host_errors_are_wrapped(monkeypatch):
    def failing_upload(file, **options):
        raise media_client.cloudinary.exceptions.Error("Invalid Signature")

    monkeypatch.setattr(media_client.cloudinary.uploader, "upload", failing_upload)
    client = media_client.MediaHostClient(media_client.MediaHostConfig("demo", "key", "secret"))
    with pytest.raises(media_client.MediaHostError, match="Invalid Signature"):
        client.upload(content=b"1", filename="x.png", folder="blog_images")


def test_brand_asset_upload_updates_settings(client, db_session, admin, hosted):
    r = client.post("/api/v1/admin/uploads/brand-asset?assetType=logo",
                    files={"file": ("logo.png", b"img", "image/png")}, headers=auth(admin))
    assert r.status_code == 200
    assert r.json()["assets"]["logoUrl"] == "https://media.example.com/brand_assets/logo.png"
    assert client.get("/api/v1/public/site-content").json()["logoUrl"].endswith("logo.png")


def test_airtable_record_delete_is_disabled(client, admin):
    assert client.delete("/api/v1/admin/airtable-records/rec1", headers=auth(admin)).status_code == 501


@pytest.mark.parametrize("path", [
    "/api/v1/public/bookings/{booking_id}/payment-proof",
    "/api/v1/company/bookings/{booking_id}/signed-agreement",
    "/api/v1/admin/uploads/blog-image",
    "/api/v1/admin/uploads/brand-asset",
])
def test_upload_routes_run_in_threadpool(path):
    from fastapi.routing import APIRoute
    from app.main import app as api

    route = next(r for r in api.routes if isinstance(r, APIRoute) and r.path == path)
    assert not inspect.iscoroutinefunction(route.endpoint)
