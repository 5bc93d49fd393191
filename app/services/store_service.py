import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.errors import InsufficientStockError, NotFoundError
from app.models.store import StoreItem, StoreTransaction
from app.models.user import User
from app.schemas.store import StoreItemIn, StoreItemPatch

logger = logging.getLogger(__name__)


def create_item(db: Session, body: StoreItemIn) -> StoreItem:
    item = StoreItem(
        id=str(uuid.uuid4()),
        name=body.name.strip(),
        category=body.category,
        unit=body.unit,
        quantity=body.quantity,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def update_item(db: Session, item_id: str, body: StoreItemPatch) -> StoreItem:
    item = db.get(StoreItem, item_id)
    if not item:
        raise NotFoundError("store item not found")
    if body.name is not None:
        item.name = body.name.strip()
    if body.category is not None:
        item.category = body.category
    if body.unit is not None:
        item.unit = body.unit
    db.commit()
    db.refresh(item)
    return item


def record_stock_movement(db: Session, item_id: str, direction: str, quantity: int, reason: str = "",
                          employee_id: str | None = None, actor: User | None = None) -> StoreTransaction:
    """Apply one stock movement and append its ledger row in a single transaction.

    The item row is locked for the duration, so concurrent movements on the same item
    serialize and the quantity can never go below zero. Any failure rolls everything back.
    """
    if direction not in ("in", "out"):
        raise ValueError("direction must be in or out")
    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
        raise ValueError("quantity must be a positive integer")

    try:
        item = db.execute(
            select(StoreItem).where(StoreItem.id == item_id).with_for_update()
        ).scalar_one_or_none()
        if not item:
            raise NotFoundError("store item not found")

        current = item.quantity or 0
        if direction == "out" and quantity > current:
            raise InsufficientStockError(
                f"Not enough stock for {item.name}. Available: {current}, requested: {quantity}."
            )
        new_quantity = current + quantity if direction == "in" else current - quantity

        item.quantity = new_quantity
        item.last_updated = datetime.now(timezone.utc)
        txn = StoreTransaction(
            id=str(uuid.uuid4()),
            item_id=item.id,
            item_name=item.name,
            direction=direction,
            quantity=quantity,
            quantity_after=new_quantity,
            reason=reason or "",
            employee_id=employee_id,
            recorded_by=actor.id if actor else "",
        )
        db.add(txn)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(txn)
    logger.info("stock %s %s x%d -> %d", direction, txn.item_name, quantity, txn.quantity_after)
    return txn


def list_transactions(db: Session, item_id: str | None = None, limit: int = 200) -> list[StoreTransaction]:
    q = db.query(StoreTransaction)
    if item_id:
        q = q.filter(StoreTransaction.item_id == item_id)
    return q.order_by(StoreTransaction.created_at.desc()).limit(limit).all()
