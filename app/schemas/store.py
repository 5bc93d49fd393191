from typing import Literal, Optional
from pydantic import BaseModel, Field


class StoreItemIn(BaseModel):
    name: str = Field(min_length=1)
    category: str = ""
    unit: str = "pcs"
    quantity: int = Field(default=0, ge=0)


class StoreItemPatch(BaseModel):
    # quantity is deliberately absent: stock only moves through the ledger
    name: Optional[str] = None
    category: Optional[str] = None
    unit: Optional[str] = None


class StockMovementIn(BaseModel):
    direction: Literal["in", "out"]
    quantity: int = Field(gt=0)
    reason: str = ""
    employeeId: Optional[str] = None
