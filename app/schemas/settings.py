from pydantic import BaseModel, Field
from typing import Optional


class PricingSettings(BaseModel):
    """Global per-day rental defaults and per-person service tiers (ETB)."""
    defaultDormitoryPricePerDay: int = Field(default=500, ge=0)
    defaultHallRentalCostPerDay: int = Field(default=3000, ge=0)
    defaultSectionRentalCostPerDay: int = Field(default=1500, ge=0)
    lunchServiceCostLevel1: int = Field(default=150, ge=0)
    lunchServiceCostLevel2: int = Field(default=250, ge=0)
    refreshmentServiceCostLevel1: int = Field(default=50, ge=0)
    refreshmentServiceCostLevel2: int = Field(default=100, ge=0)
    defaultLedProjectorCostPerDay: int = Field(default=500, ge=0)


class AgreementTemplate(BaseModel):
    defaultTerms: str = (
        "1. The client shall use the facility only for the purpose stated in the booking.\n"
        "2. Payment must be completed before the first day of the booking.\n"
        "3. Any damage to the facility shall be compensated by the client.\n"
        "4. Cancellation must be communicated at least three days in advance."
    )


class BankDetails(BaseModel):
    bankName: str = Field(default="", min_length=0)
    accountName: str = ""
    accountNumber: str = ""


class SiteContent(BaseModel):
    welcomeTitle: str = "Oromia Education Center"
    welcomeMessage: str = ""
    announcement: Optional[str] = None
    contactPhone: str = ""
    contactEmail: str = ""


class BrandAssets(BaseModel):
    logoUrl: Optional[str] = None
    signatureUrl: Optional[str] = None
    stampUrl: Optional[str] = None
