import uuid
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.schemas.auth import LoginRequest, TokenPair, CompanyRegistration
from app.models.user import User
from app.core.security import verify_password, hash_password, create_access_token, create_refresh_token, decode_token
from app.api.deps import get_current_user

router = APIRouter(tags=["auth"])


def _tokens(user: User) -> TokenPair:
    return TokenPair(
        access_token=create_access_token(user.id, role=user.role),
        refresh_token=create_refresh_token(user.id),
    )


def user_out(u: User) -> dict:
    return {
        "id": u.id,
        "email": u.email,
        "fullName": u.full_name or "",
        "phone": u.phone or "",
        "role": u.role,
        "isActive": u.is_active,
        "companyId": u.company_id,
        "companyName": u.company_name,
        "approvalStatus": u.approval_status,
        "buildingAssignment": u.building_assignment,
        "createdAt": u.created_at.isoformat() if u.created_at else "",
    }


@router.post("/auth/login", response_model=TokenPair)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == body.email.strip().lower()).first()
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if not verify_password(body.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return _tokens(user)


@router.post("/auth/refresh", response_model=TokenPair)
def refresh(refresh_token: str, db: Session = Depends(get_db)):
    try:
        payload = decode_token(refresh_token, "refresh")
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid refresh token")
    user = db.get(User, payload.get("sub"))
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="User not found or inactive")
    return _tokens(user)


@router.get("/auth/me")
def me(me: User = Depends(get_current_user)):
    """Return current user info including role and building assignment."""
    return user_out(me)


@router.post("/auth/change-password")
def change_password(oldPassword: str, newPassword: str,
                    db: Session = Depends(get_db),
                    me: User = Depends(get_current_user)):
    if not verify_password(oldPassword, me.password_hash):
        raise HTTPException(status_code=400, detail="Old password incorrect")
    if len(newPassword) < 8:
        raise HTTPException(status_code=400, detail="Password too short")
    me.password_hash = hash_password(newPassword)
    db.commit()
    return {"ok": True}


@router.post("/auth/register-company", status_code=201)
def register_company(body: CompanyRegistration, db: Session = Depends(get_db)):
    """Company sign-up. The account can log in right away but cannot book until an admin approves it."""
    email = str(body.email).strip().lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=409, detail="email already exists")
    u = User(
        id=str(uuid.uuid4()),
        email=email,
        full_name=body.contactPerson,
        phone=body.phone,
        role="company_representative",
        password_hash=hash_password(body.password),
        is_active=True,
        company_id=str(uuid.uuid4()),
        company_name=body.companyName,
        approval_status="pending",
    )
    db.add(u)
    db.commit()
    return {"ok": True, "id": u.id, "approvalStatus": u.approval_status}
