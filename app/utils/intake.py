from typing import List, Optional

from loguru import logger

from app.models.dto import ExtractionResult, IntakeOutcome, PreferenceRecord
from app.utils.text_parsers import normalize_label, normalize_payment_type, parse_budget


# Canonical order in which missing fields are asked for.
REQUIRED_FIELDS = ("body_type", "location_city", "payment_type", "budget", "transmission")

RETRY_MESSAGE = "Pasensya na po, pakiulit ng sagot?"

FIELD_QUESTIONS = {
    "body_type": "Anong body type po ang hanap niyo? (sedan, SUV, MPV, van, pickup, hatchback)",
    "location_city": "Saang city po kayo located?",
    "payment_type": "Cash po ba or financing?",
    "budget": "Magkano po ang budget niyo? (hal. 500k o 400k-500k)",
    "transmission": "Automatic po ba or manual?",
}


def missing_fields(record: PreferenceRecord) -> List[str]:
    """Required fields still unfilled, in asking order."""
    return [name for name in REQUIRED_FIELDS if getattr(record, name) in (None, "")]


def next_missing_field(record: PreferenceRecord) -> Optional[str]:
    missing = missing_fields(record)
    return missing[0] if missing else None


def is_complete(record: PreferenceRecord) -> bool:
    return not missing_fields(record)


def merge_extraction(prior: PreferenceRecord, extracted: ExtractionResult) -> PreferenceRecord:
    """
    Merge non-empty extracted values over the prior record.
    Empty or unreadable values never clear a field that is already filled.
    """
    updates = {}

    client_name = extracted.client_name.strip()
    if client_name:
        updates["client_name"] = client_name

    location_city = extracted.location_city.strip()
    if location_city:
        updates["location_city"] = location_city

    body_type = normalize_label(extracted.body_type)
    if body_type:
        updates["body_type"] = body_type

    transmission = normalize_label(extracted.transmission)
    if transmission:
        updates["transmission"] = transmission

    payment_type = normalize_payment_type(extracted.payment_type)
    if payment_type:
        updates["payment_type"] = payment_type
    elif extracted.payment_type.strip():
        logger.info(f"Ignoring unrecognized payment type: {extracted.payment_type!r}")

    budget = parse_budget(extracted.budget)
    if budget is not None:
        updates["budget"] = budget
    elif extracted.budget.strip():
        logger.info(f"Ignoring unparseable budget: {extracted.budget!r}")

    return prior.model_copy(update=updates)


def resolve(
    prior: PreferenceRecord,
    extracted: Optional[ExtractionResult],
    proposed_message: str,
) -> IntakeOutcome:
    """
    Merge one qualifier extraction into the preference record and gate on completeness.

    A missing extraction leaves the record untouched and asks the user to repeat.
    While incomplete, the qualifier's proposed message is returned as-is; a blank
    proposal falls back to the stock question for the next missing field.
    """
    if extracted is None:
        logger.warning("No usable extraction - keeping prior record")
        return IntakeOutcome(
            record=prior,
            is_complete=False,
            reply_message=RETRY_MESSAGE,
            missing_fields=missing_fields(prior),
        )

    record = merge_extraction(prior, extracted)
    missing = missing_fields(record)
    reply = proposed_message or ""

    if missing and not reply.strip():
        reply = FIELD_QUESTIONS[next_missing_field(record)]

    logger.debug(f"Intake resolved: missing={missing}")
    return IntakeOutcome(
        record=record,
        is_complete=not missing,
        reply_message=reply,
        missing_fields=missing,
    )
