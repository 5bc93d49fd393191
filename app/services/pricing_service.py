"""
Price resolution and booking totals.

Bookable items (Hall, Dormitory, or anything with the same two attributes) expose
`category` (hall|section|dormitory) and `override_cost` (per-day price or None).
All functions here are pure; the caller loads PricingSettings once and passes it in.
"""
from typing import Iterable, Mapping

from app.schemas.settings import PricingSettings

SERVICE_NONE = "none"


def category_default(category: str, pricing: PricingSettings) -> int:
    if category == "hall":
        return pricing.defaultHallRentalCostPerDay
    if category == "section":
        return pricing.defaultSectionRentalCostPerDay
    if category == "dormitory":
        return pricing.defaultDormitoryPricePerDay
    return 0


def resolve_day_cost(item, pricing: PricingSettings) -> int:
    """Item override when set, otherwise the category default. Never raises; unknown category costs 0."""
    override = getattr(item, "override_cost", None)
    if override is not None:
        return int(override)
    return int(category_default(getattr(item, "category", ""), pricing) or 0)


def lunch_price(tier: str, pricing: PricingSettings) -> int:
    return {"level1": pricing.lunchServiceCostLevel1, "level2": pricing.lunchServiceCostLevel2}.get(tier, 0)


def refreshment_price(tier: str, pricing: PricingSettings) -> int:
    return {"level1": pricing.refreshmentServiceCostLevel1, "level2": pricing.refreshmentServiceCostLevel2}.get(tier, 0)


def rental_cost(rows: Iterable, items_by_id: Mapping[str, object], pricing: PricingSettings) -> int:
    total = 0
    for row in rows:
        for item_id in row.item_ids:
            item = items_by_id.get(item_id)
            if item is not None:
                total += resolve_day_cost(item, pricing)
    return total


def aggregate_cost(rows, items_by_id, pricing: PricingSettings, attendees: int,
                   lunch: str = SERVICE_NONE, refreshment: str = SERVICE_NONE) -> int:
    """Rental line items plus per-person per-day services.

    Services are charged for every schedule day that has at least one assigned item.
    """
    rows = list(rows)
    total = rental_cost(rows, items_by_id, pricing)
    service_days = sum(1 for r in rows if r.item_ids)
    attendees = max(int(attendees or 0), 0)
    if service_days and attendees:
        per_person = lunch_price(lunch, pricing) + refreshment_price(refreshment, pricing)
        total += attendees * service_days * per_person
    return total
