from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.core.errors import NotFoundError, StatusConflictError, InsufficientStockError, ServiceNotConfigured
from app.core.security import decode_token
from app.models.user import User
from app.services.airtable_client import AirtableError
from app.services.media_client import MediaHostError

bearer = HTTPBearer(auto_error=False)

def get_current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
) -> User:
    if not creds:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        payload = decode_token(creds.credentials, "access")
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid token")
    user_id = payload.get("sub")
    user = db.get(User, user_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="User not found or inactive")
    return user

def get_optional_user(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
) -> User | None:
    if not creds:
        return None
    return get_current_user(creds, db)

def require_roles(*roles: str):
    def _guard(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise HTTPException(status_code=403, detail="Forbidden")
        return user
    return _guard

def require_general_admin(user: User = Depends(require_roles("admin", "superadmin"))) -> User:
    """Superadmins and admins without a building assignment."""
    if not user.is_general_admin:
        raise HTTPException(status_code=403, detail="Not available to building admins")
    return user

def require_approved_company(user: User = Depends(require_roles("company_representative"))) -> User:
    if user.approval_status != "approved":
        raise HTTPException(status_code=403, detail="Company account is awaiting approval")
    return user

def to_http(e: Exception) -> HTTPException:
    """Map a service exception to the HTTP error the client sees."""
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e) or "not found")
    if isinstance(e, (StatusConflictError, InsufficientStockError)):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, ServiceNotConfigured):
        return HTTPException(status_code=500, detail=str(e))
    if isinstance(e, AirtableError):
        return HTTPException(status_code=502, detail={"category": e.category, "message": str(e)})
    if isinstance(e, MediaHostError):
        return HTTPException(status_code=502, detail=str(e))
    if isinstance(e, ValueError):
        return HTTPException(status_code=400, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))
