import json
from datetime import datetime, timezone
from typing import Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.models.setting import Setting
from app.schemas.settings import PricingSettings, AgreementTemplate, BankDetails, SiteContent, BrandAssets

PRICING = "pricing_settings"
AGREEMENT_TEMPLATE = "agreement_template"
BANK_DETAILS = "bank_account_details"
SITE_CONTENT = "site_content"
BRAND_ASSETS = "brand_assets"

M = TypeVar("M", bound=BaseModel)


def _load(db: Session, key: str, model: Type[M]) -> M:
    s = db.get(Setting, key)
    if s and s.value_json:
        try:
            return model.model_validate(json.loads(s.value_json))
        except (json.JSONDecodeError, ValueError):
            pass
    return model()


def _save(db: Session, key: str, value: BaseModel, actor_id: str = "") -> int:
    """Write the whole record and bump its version. Returns the new version."""
    s = db.get(Setting, key)
    data = json.dumps(value.model_dump(), ensure_ascii=False)
    if not s:
        s = Setting(key=key, value_json=data, version=1, updated_by=actor_id)
        db.add(s)
    else:
        s.value_json = data
        s.version = (s.version or 0) + 1
        s.updated_by = actor_id
        s.updated_at = datetime.now(timezone.utc)
    db.commit()
    return s.version


def setting_version(db: Session, key: str) -> int:
    s = db.get(Setting, key)
    return s.version if s else 0


def get_pricing(db: Session) -> PricingSettings:
    return _load(db, PRICING, PricingSettings)

def set_pricing(db: Session, pricing: PricingSettings, actor_id: str = "") -> int:
    return _save(db, PRICING, pricing, actor_id)

def get_agreement_template(db: Session) -> AgreementTemplate:
    return _load(db, AGREEMENT_TEMPLATE, AgreementTemplate)

def set_agreement_template(db: Session, template: AgreementTemplate, actor_id: str = "") -> int:
    return _save(db, AGREEMENT_TEMPLATE, template, actor_id)

def get_bank_details(db: Session) -> BankDetails:
    return _load(db, BANK_DETAILS, BankDetails)

def set_bank_details(db: Session, details: BankDetails, actor_id: str = "") -> int:
    if not (details.bankName and details.accountName and details.accountNumber):
        raise ValueError("bank name, account name and account number are required")
    return _save(db, BANK_DETAILS, details, actor_id)

def get_site_content(db: Session) -> SiteContent:
    return _load(db, SITE_CONTENT, SiteContent)

def set_site_content(db: Session, content: SiteContent, actor_id: str = "") -> int:
    return _save(db, SITE_CONTENT, content, actor_id)

def get_brand_assets(db: Session) -> BrandAssets:
    return _load(db, BRAND_ASSETS, BrandAssets)

def set_brand_asset(db: Session, asset_type: str, url: str, actor_id: str = "") -> BrandAssets:
    assets = get_brand_assets(db)
    field = {"logo": "logoUrl", "signature": "signatureUrl", "stamp": "stampUrl"}.get(asset_type)
    if not field:
        raise ValueError("assetType must be logo, signature or stamp")
    assets = assets.model_copy(update={field: url})
    _save(db, BRAND_ASSETS, assets, actor_id)
    return assets
