from typing import Literal, Optional
from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class CompanyRegistration(BaseModel):
    companyName: str = Field(min_length=2)
    contactPerson: str = Field(min_length=2)
    email: EmailStr
    phone: str = Field(min_length=7)
    password: str = Field(min_length=8)


class StaffCreate(BaseModel):
    email: EmailStr
    fullName: str = ""
    phone: str = ""
    role: Literal["admin", "keyholder", "store_manager"]
    buildingAssignment: Optional[Literal["ifaboru", "buuraboru"]] = None
    tempPassword: Optional[str] = None


class UserPatch(BaseModel):
    fullName: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[str] = None
    # "none" clears the assignment
    buildingAssignment: Optional[Literal["ifaboru", "buuraboru", "none"]] = None
    isActive: Optional[bool] = None
