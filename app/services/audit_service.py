import uuid, json
from sqlalchemy.orm import Session
from app.models.audit_log import AuditLog


def _jsonable(v):
    if hasattr(v, "isoformat"):
        return v.isoformat()
    return v


def snapshot(obj, fields: tuple[str, ...]) -> dict:
    return {f: _jsonable(getattr(obj, f, None)) for f in fields}


def log_change(db: Session, actor_user_id: str, action: str, entity_type: str, entity_id: str,
               before: dict | None = None, after: dict | None = None):
    """Stage an audit row in the caller's transaction; committed together with the change it records."""
    db.add(AuditLog(
        id=str(uuid.uuid4()),
        actor_user_id=actor_user_id or "",
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        before_json=json.dumps(before or {}, ensure_ascii=False, default=str),
        after_json=json.dumps(after or {}, ensure_ascii=False, default=str),
    ))
