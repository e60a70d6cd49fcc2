import math
from typing import List, Optional, Sequence

from loguru import logger

from app.models.dto import BudgetSpec, MatchedVehicle, MatchResult, PreferenceRecord
from app.utils.catalog import InventoryRecord
from app.utils.intake import missing_fields
from app.utils.text_parsers import normalize_label


PRICE_TOLERANCE = 50_000  # allowed above the budget upper bound, same unit as budget
MAX_MATCHES = 2
IMAGE_SLOTS = 5


class IncompletePreferencesError(ValueError):
    """Match engine called before every required preference was collected."""


def price_measure(vehicle: InventoryRecord, payment_type: str) -> Optional[float]:
    """SRP for cash buyers, all-in for financing. None when the sheet has no usable number."""
    value = vehicle.srp if payment_type == "cash" else vehicle.all_in
    if value is None:
        return None
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(value):
        return None
    return value


def passes_hard_filters(vehicle: InventoryRecord, prefs: PreferenceRecord) -> bool:
    return (
        normalize_label(vehicle.body_type) == normalize_label(prefs.body_type)
        and normalize_label(vehicle.transmission) == normalize_label(prefs.transmission)
    )


def within_tolerance(price: float, budget: BudgetSpec) -> bool:
    return price <= budget.upper_bound + PRICE_TOLERANCE


def _rank_key(price: float, vehicle: InventoryRecord, budget: BudgetSpec) -> tuple:
    mileage = vehicle.mileage if vehicle.mileage is not None else math.inf
    newest_first = -vehicle.year if vehicle.year is not None else math.inf
    return (abs(price - budget.target), mileage, newest_first)


def project(vehicle: InventoryRecord) -> MatchedVehicle:
    images = list(vehicle.images[:IMAGE_SLOTS])
    images += [""] * (IMAGE_SLOTS - len(images))
    return MatchedVehicle(
        sku=vehicle.sku,
        year=vehicle.year,
        brand=vehicle.brand,
        model=vehicle.model,
        variant=vehicle.variant,
        transmission=vehicle.transmission,
        fuel_type=vehicle.fuel_type,
        body_type=vehicle.body_type,
        color=vehicle.color,
        mileage=vehicle.mileage,
        city=vehicle.city,
        province=vehicle.province,
        price_status=vehicle.price_status,
        updated_at=vehicle.updated_at,
        srp=vehicle.srp,
        all_in=vehicle.all_in,
        image_1=images[0],
        image_2=images[1],
        image_3=images[2],
        image_4=images[3],
        image_5=images[4],
        drive_link=vehicle.drive_link,
        video_link=vehicle.video_link,
    )


def rank_matches(prefs: PreferenceRecord, catalog: Sequence[InventoryRecord]) -> List[MatchedVehicle]:
    """
    Filter and rank the catalog for a complete preference record.

    Hard filters on body type and transmission, then the budget tolerance on the
    payment-appropriate price. Survivors are ordered by distance to the budget
    target, lower mileage, newer year; remaining ties keep catalog order.
    """
    missing = missing_fields(prefs)
    if missing:
        raise IncompletePreferencesError(f"Cannot match incomplete preferences, missing: {', '.join(missing)}")

    budget = prefs.budget
    candidates = []
    for vehicle in catalog:
        if not passes_hard_filters(vehicle, prefs):
            continue
        price = price_measure(vehicle, prefs.payment_type)
        if price is None:
            logger.debug(f"Skipping {vehicle.sku}: no {prefs.payment_type} price")
            continue
        if not within_tolerance(price, budget):
            continue
        candidates.append((price, vehicle))

    ranked = sorted(candidates, key=lambda item: _rank_key(item[0], item[1], budget))
    top = [project(vehicle) for _, vehicle in ranked[:MAX_MATCHES]]

    logger.info(
        f"Matched {len(candidates)}/{len(catalog)} vehicles "
        f"(body={prefs.body_type}, trans={prefs.transmission}, pay={prefs.payment_type}, "
        f"target={budget.target:.0f}, upper={budget.upper_bound:.0f}) -> top {[v.sku for v in top]}"
    )
    return top


def default_summary(matches: Sequence[MatchedVehicle]) -> str:
    """Stock summary that introduces exactly as many units as were found."""
    if not matches:
        return (
            "Pasensya na po, wala pa kaming unit na pasok sa hinahanap niyo ngayon. "
            "Pwede po nating i-adjust ang budget o body type."
        )
    names = [" ".join(str(part) for part in (v.year, v.brand, v.model) if part) for v in matches]
    if len(matches) == 1:
        return f"May 1 po akong nakitang pasok sa hinahanap niyo: {names[0]}. Tingnan natin!"
    return f"May {len(matches)} po akong nirekomenda: {' at '.join(names)}. Tingnan natin!"


def _looks_structured(text: str) -> bool:
    return any(ch in text for ch in "{}[]")


def build_match_result(matches: Sequence[MatchedVehicle], summary: Optional[str]) -> MatchResult:
    """Pair the ranked units with the collaborator's summary, falling back to the stock one."""
    text = (summary or "").strip()
    if not text or _looks_structured(text):
        if text:
            logger.warning("Summary contained structured data - using stock summary")
        text = default_summary(matches)
    return MatchResult(summary=text, top_matches=list(matches))
