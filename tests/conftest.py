import os

os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
for _var in ("CLOUDINARY_CLOUD_NAME", "AIRTABLE_API_KEY", "AFRO_MESSAGING_API_KEY"):
    os.environ[_var] = ""

import uuid
from datetime import date

import pytest
from fastapi.testclient import TestClient

from app.db.session import Base, engine, SessionLocal, get_db
from app.core.security import hash_password, create_access_token
from app.models.user import User
from app.models.hall import Hall
from app.models.dormitory import Dormitory
from app.main import app


@pytest.fixture(scope="function")
def db_session():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def sent_sms(monkeypatch):
    """Capture outgoing SMS instead of calling the provider."""
    sent = []
    monkeypatch.setattr("app.services.sms_service.send_sms", lambda to, message: sent.append((to, message)))
    return sent


def make_user(db, role, email=None, phone="0911000000", building=None, approval_status=None, **extra):
    u = User(
        id=str(uuid.uuid4()),
        email=email or f"{role}-{uuid.uuid4().hex[:6]}@oec.test",
        full_name=role.title(),
        phone=phone,
        role=role,
        password_hash=hash_password("password123"),
        is_active=True,
        building_assignment=building,
        approval_status=approval_status,
        **extra,
    )
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


def auth(user):
    return {"Authorization": f"Bearer {create_access_token(user.id, role=user.role)}"}


def make_hall(db, name, item_type="hall", rental_cost=None, is_available=True):
    h = Hall(id=str(uuid.uuid4()), name=name, item_type=item_type, capacity=100,
             rental_cost=rental_cost, is_available=is_available)
    db.add(h)
    db.commit()
    db.refresh(h)
    return h


def make_dorm(db, room_number, building="ifaboru", price_per_day=None, is_available=True, floor=1):
    d = Dormitory(id=str(uuid.uuid4()), room_number=room_number, floor=floor, capacity=4,
                  price_per_day=price_per_day, building_name=building, is_available=is_available)
    db.add(d)
    db.commit()
    db.refresh(d)
    return d


@pytest.fixture
def superadmin(db_session):
    return make_user(db_session, "superadmin", phone="0911111111")


@pytest.fixture
def admin(db_session):
    return make_user(db_session, "admin", phone="0922222222")


@pytest.fixture
def company(db_session):
    return make_user(db_session, "company_representative", approval_status="approved",
                     company_id=str(uuid.uuid4()), company_name="Acme PLC")


def facility_payload(start, end, schedule, attendees=1, lunch="none", refreshment="none"):
    return {
        "companyName": "Acme PLC",
        "contactPerson": "Abebe Kebede",
        "email": "abebe@acme.example.com",
        "phone": "0911234567",
        "startDate": start.isoformat(),
        "endDate": end.isoformat(),
        "schedule": [{"date": d.isoformat(), "itemIds": ids} for d, ids in schedule],
        "numberOfAttendees": attendees,
        "lunch": lunch,
        "refreshment": refreshment,
    }


def dormitory_payload(dorm_ids, start=date(2025, 1, 10), end=date(2025, 1, 12)):
    return {
        "dormitoryIds": dorm_ids,
        "guestName": "Chaltu Tesfaye",
        "guestEmployer": "Oromia Education Bureau",
        "phone": "0912345678",
        "email": "chaltu@example.org",
        "startDate": start.isoformat(),
        "endDate": end.isoformat(),
        "payerBankName": "CBE",
        "payerAccountNumber": "1000123456789",
    }
