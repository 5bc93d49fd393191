import pytest

from app.core.errors import ServiceNotConfigured
from app.models.sms_message import SmsMessage
from app.services import sms_service


@pytest.mark.parametrize("raw,expected", [
    ("0911234567", "+251911234567"),
    ("251711234567", "+251711234567"),
    ("911234567", "+251911234567"),
    ("+251 91 123 4567", "+251911234567"),
])
def test_normalize_phone(raw, expected):
    assert sms_service.normalize_phone(raw) == expected


@pytest.mark.parametrize("raw", ["", "12345", "0811234567", "+2519112345678"])
def test_invalid_phone(raw):
    with pytest.raises(sms_service.SmsError):
        sms_service.normalize_phone(raw)


def test_send_requires_configuration():
    with pytest.raises(ServiceNotConfigured):
        sms_service.send_sms("0911234567", "hi")


class FakeResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload
        self.text = "x"

    def json(self):
        return self._payload


def test_send_posts_to_provider(monkeypatch):
    monkeypatch.setattr(sms_service.settings, "AFRO_MESSAGING_API_KEY", "key")
    monkeypatch.setattr(sms_service.settings, "AFRO_MESSAGING_SENDER_ID", "OEC")
    calls = []

    def fake_post(url, json=None, headers=None, timeout=None):
        calls.append((url, json, headers))
        return FakeResponse(200, {"acknowledge": "success"})

    monkeypatch.setattr(sms_service.requests, "post", fake_post)
    sms_service.send_sms("0911234567", "hello")
    assert calls[0][1] == {"to": "+251911234567", "sender": "OEC", "message": "hello"}
    assert calls[0][2]["Authorization"] == "Bearer key"


def test_logical_failure_in_2xx_raises(monkeypatch):
    monkeypatch.setattr(sms_service.settings, "AFRO_MESSAGING_API_KEY", "key")
    monkeypatch.setattr(sms_service.settings, "AFRO_MESSAGING_SENDER_ID", "OEC")
    monkeypatch.setattr(sms_service.requests, "post",
                        lambda *a, **kw: FakeResponse(200, {"acknowledge": "error", "response": {"message": "no credit"}}))
    with pytest.raises(sms_service.SmsError, match="no credit"):
        sms_service.send_sms("0911234567", "hello")


def test_outbox_message_is_sent_once(db_session, sent_sms):
    sid = sms_service.queue_sms(db_session, "0911234567", "hello")
    assert db_session.get(SmsMessage, sid).status == "sent"
    assert sms_service.deliver_sms(db_session, sid) == "sent"
    assert len(sent_sms) == 1
