import pytest

from app.core.errors import InsufficientStockError, NotFoundError
from app.models.store import StoreItem, StoreTransaction
from app.schemas.store import StoreItemIn, StoreItemPatch
from app.services import store_service

from conftest import make_user, auth


@pytest.fixture
def item(db_session):
    return store_service.create_item(db_session, StoreItemIn(name="Bed sheets", category="linen", quantity=5))


def test_out_movement_reduces_stock_and_appends_ledger_row(db_session, item):
    txn = store_service.record_stock_movement(db_session, item.id, "out", 3, reason="room 101")
    assert txn.quantity_after == 2
    assert db_session.get(StoreItem, item.id).quantity == 2
    assert db_session.query(StoreTransaction).count() == 1


def test_shortage_leaves_stock_and_ledger_untouched(db_session, item):
    with pytest.raises(InsufficientStockError, match="Available: 5, requested: 8"):
        store_service.record_stock_movement(db_session, item.id, "out", 8)
    assert db_session.get(StoreItem, item.id).quantity == 5
    assert db_session.query(StoreTransaction).count() == 0


def test_in_movement_adds_stock(db_session, item):
    store_service.record_stock_movement(db_session, item.id, "in", 10)
    assert db_session.get(StoreItem, item.id).quantity == 15


@pytest.mark.parametrize("quantity", [0, -2])
def test_quantity_must_be_positive(db_session, item, quantity):
    with pytest.raises(ValueError):
        store_service.record_stock_movement(db_session, item.id, "in", quantity)


def test_unknown_item(db_session):
    with pytest.raises(NotFoundError):
        store_service.record_stock_movement(db_session, "nope", "in", 1)


def test_item_edit_never_touches_quantity(db_session, item):
    updated = store_service.update_item(db_session, item.id, StoreItemPatch(name="Sheets", unit="set"))
    assert (updated.name, updated.unit, updated.quantity) == ("Sheets", "set", 5)


def test_movement_endpoint_returns_conflict_on_shortage(client, db_session, item):
    manager = make_user(db_session, "store_manager")
    r = client.post(f"/api/v1/store/items/{item.id}/movements", json={"direction": "out", "quantity": 8},
                    headers=auth(manager))
    assert r.status_code == 409
    assert "Not enough stock" in r.json()["detail"]

    r = client.post(f"/api/v1/store/items/{item.id}/movements", json={"direction": "out", "quantity": 5},
                    headers=auth(manager))
    assert r.status_code == 201
    assert r.json()["quantityAfter"] == 0


def test_keyholder_cannot_use_store(client, db_session, item):
    keyholder = make_user(db_session, "keyholder")
    assert client.get("/api/v1/store/items", headers=auth(keyholder)).status_code == 403
