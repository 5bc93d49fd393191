import logging
import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.models.employee import AttendanceRecord, Employee

logger = logging.getLogger(__name__)

# scanners fire twice on one badge swipe
SCAN_DEBOUNCE = timedelta(seconds=2)


class DuplicateScanError(ValueError):
    pass


def _aware(ts: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


def last_record(db: Session, employee_id: str) -> AttendanceRecord | None:
    return (
        db.query(AttendanceRecord)
        .filter(AttendanceRecord.employee_id == employee_id)
        .order_by(AttendanceRecord.timestamp.desc())
        .first()
    )


def record_scan(db: Session, employee_id: str, recorded_by: str = "", now: datetime | None = None) -> AttendanceRecord:
    """Check the employee in, or out if their last record is a check-in."""
    emp = db.get(Employee, employee_id)
    if not emp or not emp.is_active:
        raise NotFoundError("employee not found")
    now = now or datetime.now(timezone.utc)

    last = last_record(db, employee_id)
    if last and now - _aware(last.timestamp) < SCAN_DEBOUNCE:
        raise DuplicateScanError(f"{emp.full_name} was scanned less than 2 seconds ago")

    kind = "check-out" if last and last.type == "check-in" else "check-in"
    rec = AttendanceRecord(
        id=str(uuid.uuid4()),
        employee_id=emp.id,
        employee_name=emp.full_name,
        type=kind,
        recorded_by=recorded_by,
        timestamp=now,
    )
    db.add(rec)
    db.commit()
    db.refresh(rec)
    logger.info("attendance %s for %s", kind, emp.full_name)
    return rec


def list_records(db: Session, employee_id: str | None = None, day=None, limit: int = 500) -> list[AttendanceRecord]:
    q = db.query(AttendanceRecord)
    if employee_id:
        q = q.filter(AttendanceRecord.employee_id == employee_id)
    if day:
        start = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
        q = q.filter(AttendanceRecord.timestamp >= start, AttendanceRecord.timestamp < start + timedelta(days=1))
    return q.order_by(AttendanceRecord.timestamp.desc()).limit(limit).all()
