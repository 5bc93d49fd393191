import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, EmailStr

Tier = Literal["none", "level1", "level2"]


class ScheduleDayIn(BaseModel):
    date: dt.date
    itemIds: List[str] = []


class FacilityBookingCreate(BaseModel):
    companyName: str = Field(min_length=2)
    contactPerson: str = Field(min_length=2)
    email: EmailStr
    phone: str = Field(min_length=7)
    startDate: dt.date
    endDate: dt.date
    schedule: List[ScheduleDayIn] = []
    numberOfAttendees: int = Field(default=1, ge=1)
    lunch: Tier = "none"
    refreshment: Tier = "none"
    notes: str = ""


class FacilityQuoteRequest(BaseModel):
    startDate: dt.date
    endDate: dt.date
    schedule: List[ScheduleDayIn] = []
    numberOfAttendees: int = Field(default=1, ge=0)
    lunch: Tier = "none"
    refreshment: Tier = "none"


class DormitoryBookingCreate(BaseModel):
    dormitoryIds: List[str] = Field(min_length=1)
    guestName: str = Field(min_length=2)
    guestEmployer: str = Field(min_length=2)
    phone: str = Field(min_length=7)
    email: str = ""
    startDate: dt.date
    endDate: dt.date
    payerBankName: str = ""
    payerAccountNumber: str = ""
    notes: str = ""


class BookingItemOut(BaseModel):
    id: str
    name: str
    itemType: str
    date: Optional[dt.date] = None
    rentalCost: int = 0


class BookingOut(BaseModel):
    id: str
    category: str
    items: List[BookingItemOut]
    startDate: Optional[dt.date] = None
    endDate: Optional[dt.date] = None
    requesterName: str
    companyName: str = ""
    contactPerson: str = ""
    guestName: str = ""
    email: str = ""
    phone: str = ""
    numberOfAttendees: int = 1
    lunch: str = "none"
    refreshment: str = "none"
    totalCost: int
    paymentStatus: str
    approvalStatus: str
    agreementStatus: Optional[str] = None
    keyStatus: Optional[str] = None
    signedAgreementUrl: Optional[str] = None
    paymentScreenshotUrl: Optional[str] = None
    version: int = 1
    createdAt: str


class StatusActionIn(BaseModel):
    expectedVersion: Optional[int] = None


class PaymentVerificationIn(StatusActionIn):
    status: Literal["paid", "failed"]


class AgreementStatusIn(StatusActionIn):
    status: Literal["pending_admin_action", "sent_to_client", "signed_by_client", "completed"]


class KeyStatusIn(StatusActionIn):
    status: Literal["issued", "returned"]
