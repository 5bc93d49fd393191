import uuid
from datetime import date
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.api.deps import require_roles, require_general_admin, to_http
from app.models.employee import Employee
from app.models.store import StoreItem, StoreTransaction
from app.models.user import User
from app.schemas.catalog import EmployeeIn, AttendanceScanIn
from app.schemas.store import StoreItemIn, StoreItemPatch, StockMovementIn
from app.services import store_service, attendance_service

router = APIRouter(tags=["store"])

_STORE_ROLES = ("store_manager", "admin", "superadmin")


def _item_out(i: StoreItem) -> dict:
    return {"id": i.id, "name": i.name, "category": i.category, "quantity": i.quantity, "unit": i.unit,
            "lastUpdated": i.last_updated.isoformat() if i.last_updated else None}


def _txn_out(t: StoreTransaction) -> dict:
    return {"id": t.id, "itemId": t.item_id, "itemName": t.item_name, "direction": t.direction,
            "quantity": t.quantity, "quantityAfter": t.quantity_after, "reason": t.reason,
            "employeeId": t.employee_id, "recordedBy": t.recorded_by, "createdAt": t.created_at.isoformat()}


def _employee_out(e: Employee) -> dict:
    return {"id": e.id, "employeeCode": e.employee_code, "fullName": e.full_name, "position": e.position,
            "phone": e.phone, "isActive": e.is_active}


@router.get("/store/items")
def list_items(db: Session = Depends(get_db), me: User = Depends(require_roles(*_STORE_ROLES))):
    return [_item_out(i) for i in db.query(StoreItem).order_by(StoreItem.name.asc()).all()]


@router.post("/store/items", status_code=201)
def create_item(body: StoreItemIn, db: Session = Depends(get_db), me: User = Depends(require_roles(*_STORE_ROLES))):
    return _item_out(store_service.create_item(db, body))


@router.patch("/store/items/{item_id}")
def update_item(item_id: str, body: StoreItemPatch, db: Session = Depends(get_db),
                me: User = Depends(require_roles(*_STORE_ROLES))):
    try:
        return _item_out(store_service.update_item(db, item_id, body))
    except LookupError as e:
        raise to_http(e)


@router.post("/store/items/{item_id}/movements", status_code=201)
def record_movement(item_id: str, body: StockMovementIn, db: Session = Depends(get_db),
                    me: User = Depends(require_roles(*_STORE_ROLES))):
    if body.employeeId and not db.get(Employee, body.employeeId):
        raise HTTPException(status_code=400, detail="employee not found")
    try:
        txn = store_service.record_stock_movement(db, item_id, body.direction, body.quantity,
                                                  body.reason, body.employeeId, me)
    except (ValueError, LookupError) as e:
        raise to_http(e)
    return _txn_out(txn)


@router.get("/store/transactions")
def list_transactions(itemId: str | None = None, limit: int = 200, db: Session = Depends(get_db),
                      me: User = Depends(require_roles(*_STORE_ROLES))):
    return [_txn_out(t) for t in store_service.list_transactions(db, itemId, max(1, min(limit, 500)))]


# employees and attendance

@router.get("/admin/employees")
def list_employees(db: Session = Depends(get_db), me: User = Depends(require_roles(*_STORE_ROLES))):
    return [_employee_out(e) for e in db.query(Employee).order_by(Employee.full_name.asc()).all()]


@router.post("/admin/employees", status_code=201)
def create_employee(body: EmployeeIn, db: Session = Depends(get_db), me: User = Depends(require_general_admin)):
    if db.query(Employee).filter(Employee.employee_code == body.employeeCode).first():
        raise HTTPException(status_code=409, detail="employee code already exists")
    e = Employee(id=str(uuid.uuid4()), employee_code=body.employeeCode, full_name=body.fullName,
                 position=body.position, phone=body.phone, is_active=True)
    db.add(e)
    db.commit()
    return _employee_out(e)


@router.put("/admin/employees/{employee_id}")
def update_employee(employee_id: str, body: EmployeeIn, db: Session = Depends(get_db),
                    me: User = Depends(require_general_admin)):
    e = db.get(Employee, employee_id)
    if not e:
        raise HTTPException(status_code=404, detail="not found")
    clash = db.query(Employee).filter(Employee.employee_code == body.employeeCode, Employee.id != e.id).first()
    if clash:
        raise HTTPException(status_code=409, detail="employee code already exists")
    e.employee_code, e.full_name, e.position, e.phone = body.employeeCode, body.fullName, body.position, body.phone
    db.commit()
    return _employee_out(e)


@router.delete("/admin/employees/{employee_id}")
def deactivate_employee(employee_id: str, db: Session = Depends(get_db), me: User = Depends(require_general_admin)):
    e = db.get(Employee, employee_id)
    if not e:
        raise HTTPException(status_code=404, detail="not found")
    e.is_active = False
    db.commit()
    return {"ok": True}


@router.post("/admin/attendance/scan", status_code=201)
def scan(body: AttendanceScanIn, db: Session = Depends(get_db),
         me: User = Depends(require_roles("admin", "superadmin"))):
    try:
        rec = attendance_service.record_scan(db, body.employeeId, recorded_by=me.id)
    except attendance_service.DuplicateScanError as e:
        raise HTTPException(status_code=429, detail=str(e))
    except LookupError as e:
        raise to_http(e)
    return {"id": rec.id, "employeeId": rec.employee_id, "employeeName": rec.employee_name,
            "type": rec.type, "timestamp": rec.timestamp.isoformat()}


@router.get("/admin/attendance")
def attendance_log(employeeId: str | None = None, day: date | None = None, db: Session = Depends(get_db),
                   me: User = Depends(require_roles("admin", "superadmin"))):
    return [
        {"id": r.id, "employeeId": r.employee_id, "employeeName": r.employee_name, "type": r.type,
         "timestamp": r.timestamp.isoformat()}
        for r in attendance_service.list_records(db, employeeId, day)
    ]
