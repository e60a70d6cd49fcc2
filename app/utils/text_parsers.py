import re
from typing import Optional

from app.models.dto import BudgetSpec, PaymentType


CASH_KEYWORDS = {"cash", "spot cash", "full cash", "straight cash"}
FINANCING_KEYWORDS = {"financing", "finance", "financed", "loan", "installment", "hulugan", "hulog"}

MULTIPLIERS = {"k": 1_000, "m": 1_000_000}

_NUMBER = r"(\d+(?:\.\d+)?)\s*([km])?"
_BUDGET_RE = re.compile(rf"^{_NUMBER}(?:\s*(?:-|–|—|to)\s*{_NUMBER})?$")
_CURRENCY_RE = re.compile(r"₱|php|pesos?|(?<![a-z])p(?=\s*\d)")
# Hedges around an amount ("mga 500k", "500k max", "hanggang 500k lang").
_FILLER_RE = re.compile(
    r"\b(?:up to|less than|mga|around|about|approx(?:imately)?|max(?:imum)?|below|under|"
    r"hanggang|until|within|budget|lang|po|only)\b"
)


def normalize_label(value: Optional[str]) -> str:
    """Lowercase/trim a free-form label (body type, transmission) for comparison."""
    if value is None:
        return ""
    return str(value).strip().lower()


def normalize_payment_type(value: Optional[str]) -> Optional[PaymentType]:
    """Map free text onto cash/financing. Anything unrecognized counts as not provided."""
    text = normalize_label(value)
    if not text:
        return None
    if text in CASH_KEYWORDS:
        return "cash"
    if text in FINANCING_KEYWORDS:
        return "financing"
    return None


def _to_amount(number: str, suffix: Optional[str]) -> float:
    return float(number) * MULTIPLIERS.get(suffix or "", 1)


def parse_budget(text: Optional[str]) -> Optional[BudgetSpec]:
    """
    Parse a budget string into a BudgetSpec.

    Accepts a single amount ("500000", "₱500,000", "500k", "1.2M") or a range
    ("400k-500k", "400–500k", "400k to 500k"). In a range, a bare side below
    1000 borrows the suffix of the other side, so "400-500k" reads as 400k-500k.
    Hedges such as "mga", "max" or "hanggang ... lang" are ignored.

    Returns None when the text cannot be read as an amount.
    """
    if not text:
        return None

    cleaned = str(text).strip().lower()
    cleaned = _CURRENCY_RE.sub("", cleaned)
    cleaned = _FILLER_RE.sub("", cleaned)
    cleaned = cleaned.replace(",", "")
    cleaned = re.sub(r"(?<=\d)\s+(?=\d)", "", cleaned)
    cleaned = cleaned.strip()

    match = _BUDGET_RE.match(cleaned)
    if not match:
        return None

    first_num, first_suffix, second_num, second_suffix = match.groups()

    if second_num is None:
        value = _to_amount(first_num, first_suffix)
        return BudgetSpec(target=value, upper_bound=value)

    if first_suffix is None and second_suffix and float(first_num) < 1000:
        first_suffix = second_suffix
    if second_suffix is None and first_suffix and float(second_num) < 1000:
        second_suffix = first_suffix

    low = _to_amount(first_num, first_suffix)
    high = _to_amount(second_num, second_suffix)
    return BudgetSpec(target=(low + high) / 2, upper_bound=max(low, high))
