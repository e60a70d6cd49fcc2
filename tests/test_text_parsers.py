import pytest
from app.utils.text_parsers import normalize_label, normalize_payment_type, parse_budget


def test_single_value_budget():
    budget = parse_budget("500000")
    assert budget.target == 500000
    assert budget.upper_bound == 500000


def test_range_budget_with_k_suffix():
    budget = parse_budget("400k-500k")
    assert budget.target == 450000
    assert budget.upper_bound == 500000


@pytest.mark.parametrize("text", ["abc", "", None, "around half a million", "500k-", "-"])
def test_unparseable_budget_is_none(text):
    assert parse_budget(text) is None


@pytest.mark.parametrize("text,target,upper", [
    ("₱1,200,000", 1_200_000, 1_200_000),
    ("P500k", 500_000, 500_000),
    ("500K pesos", 500_000, 500_000),
    ("1.2M", 1_200_000, 1_200_000),
    ("500 000", 500_000, 500_000),
    ("400–450k", 425_000, 450_000),        # en dash, suffix borrowed
    ("400k to 450k", 425_000, 450_000),
    ("₱400,000 - ₱450,000", 425_000, 450_000),
])
def test_budget_formats(text, target, upper):
    budget = parse_budget(text)
    assert budget is not None
    assert budget.target == target
    assert budget.upper_bound == upper


@pytest.mark.parametrize("text,target,upper", [
    ("mga 500k", 500_000, 500_000),
    ("500k max", 500_000, 500_000),
    ("below 500k", 500_000, 500_000),
    ("up to 500k", 500_000, 500_000),
    ("around 500k", 500_000, 500_000),
    ("500k lang", 500_000, 500_000),
    ("hanggang 450k po", 450_000, 450_000),
    ("mga 400k-450k", 425_000, 450_000),
])
def test_hedged_budget_phrasing(text, target, upper):
    budget = parse_budget(text)
    assert budget is not None
    assert budget.target == target
    assert budget.upper_bound == upper


def test_reversed_range_uses_larger_side_as_upper_bound():
    budget = parse_budget("500k-400k")
    assert budget.upper_bound == 500_000
    assert budget.target == 450_000


def test_labels_are_trimmed_and_lowercased():
    assert normalize_label("  Sedan ") == "sedan"
    assert normalize_label("AUTOMATIC") == "automatic"
    assert normalize_label(None) == ""


@pytest.mark.parametrize("text,expected", [
    ("Cash", "cash"),
    (" spot cash ", "cash"),
    ("Financing", "financing"),
    ("loan", "financing"),
    ("hulugan", "financing"),
    ("", None),
    ("maybe", None),
])
def test_payment_type_normalization(text, expected):
    assert normalize_payment_type(text) == expected
