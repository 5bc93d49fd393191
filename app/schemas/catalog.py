from typing import List, Literal, Optional
from pydantic import BaseModel, Field


class HallIn(BaseModel):
    name: str = Field(min_length=1)
    itemType: Literal["hall", "section"] = "hall"
    capacity: int = Field(default=0, ge=0)
    isAvailable: bool = True
    rentalCost: Optional[int] = Field(default=None, ge=0)
    lunchServiceCost: Optional[int] = Field(default=None, ge=0)
    refreshmentServiceCost: Optional[int] = Field(default=None, ge=0)
    description: str = ""
    images: List[str] = []


class DormitoryIn(BaseModel):
    roomNumber: str = Field(min_length=1)
    floor: int = 1
    capacity: int = Field(default=1, ge=1)
    isAvailable: bool = True
    pricePerDay: Optional[int] = Field(default=None, ge=0)
    buildingName: Optional[Literal["ifaboru", "buuraboru"]] = None
    images: List[str] = []


class EmployeeIn(BaseModel):
    employeeCode: str = Field(min_length=1)
    fullName: str = Field(min_length=2)
    position: str = ""
    phone: str = ""


class AttendanceScanIn(BaseModel):
    employeeId: str


class BlogPostIn(BaseModel):
    title: str = Field(min_length=2)
    slug: Optional[str] = None
    excerpt: str = ""
    content: str = ""
    imageUrl: Optional[str] = None
    isPublished: bool = True
