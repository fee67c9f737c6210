import math

import pytest

from quote_engine.quote.calculator import calculate, detail_margin, group_subtotal, item_subtotal
from quote_engine.quote.records import export_quote
from quote_engine.schemas.quote import Detail, Quote


def test_single_group_exclusive_vat(quote_builder):
    q = quote_builder(
        ("촬영", True, [{"quantity": 2, "days": 1, "unit_price": 100000}]),
        agency_fee_rate=0.15,
        discount_amount=0,
        vat_type="exclusive",
    )
    calc = calculate(q)
    assert calc.subtotal == 200000
    assert calc.agency_fee == pytest.approx(30000)
    assert calc.total_before_vat == pytest.approx(230000)
    assert calc.vat_amount == pytest.approx(23000)
    assert calc.final_total == pytest.approx(253000)
    assert calc.groups[0].name == "촬영"
    assert calc.groups[0].subtotal == 200000


def test_inclusive_vat_adds_nothing(quote_builder):
    q = quote_builder(
        ("촬영", True, [{"quantity": 2, "days": 1, "unit_price": 100000}]),
        agency_fee_rate=0.15,
        vat_type="inclusive",
    )
    calc = calculate(q)
    assert calc.vat_amount == 0
    assert calc.final_total == pytest.approx(230000)


def test_fee_split_between_groups(quote_builder):
    q = quote_builder(
        ("fee", True, [{"unit_price": 100000}]),
        ("pass-through", False, [{"unit_price": 50000}]),
        agency_fee_rate=0.1,
    )
    calc = calculate(q)
    assert calc.fee_applicable_amount == 100000
    assert calc.fee_excluded_amount == 50000
    assert calc.agency_fee == pytest.approx(10000)
    assert calc.fee_applicable_amount + calc.fee_excluded_amount == calc.subtotal
    assert [g.include_in_fee for g in calc.groups] == [True, False]


def test_cost_and_profit(quote_builder):
    q = quote_builder(
        ("g", True, [{"quantity": 1, "days": 1, "unit_price": 100000, "cost_price": 50000}]),
        agency_fee_rate=0,
        vat_type="inclusive",
    )
    calc = calculate(q)
    assert calc.total_cost == 50000
    assert calc.total_profit == calc.final_total - 50000
    assert calc.profit_margin_percentage == pytest.approx(50.0)


def test_cost_counts_details_outside_fee(quote_builder):
    q = quote_builder(
        ("fee", True, [{"unit_price": 1000, "cost_price": 400}]),
        ("no fee", False, [{"unit_price": 1000, "cost_price": 300, "quantity": 2}]),
    )
    assert calculate(q).total_cost == 1000


def test_empty_quote_is_all_zero():
    calc = calculate(Quote())
    assert calc.groups == ()
    for field in (
        "subtotal",
        "fee_applicable_amount",
        "fee_excluded_amount",
        "agency_fee",
        "total_before_vat",
        "vat_amount",
        "final_total",
        "total_cost",
        "total_profit",
        "profit_margin_percentage",
    ):
        assert getattr(calc, field) == 0, field


def test_margin_is_zero_when_final_total_not_positive(quote_builder):
    q = quote_builder(
        ("g", True, [{"unit_price": 10000, "cost_price": 5000}]),
        discount_amount=50000,
    )
    calc = calculate(q)
    assert calc.final_total < 0
    assert calc.profit_margin_percentage == 0
    assert not math.isnan(calc.profit_margin_percentage)


def test_discount_is_subtracted_before_vat(quote_builder):
    q = quote_builder(("g", True, [{"unit_price": 100000}]), agency_fee_rate=0, discount_amount=10000)
    calc = calculate(q)
    assert calc.discount_amount == 10000
    assert calc.total_before_vat == 90000
    assert calc.vat_amount == pytest.approx(round(90000 * 0.10))


def test_subtotals_are_additive(quote_builder):
    q = quote_builder(
        ("a", True, [{"quantity": 1.5, "days": 2, "unit_price": 33333}, {"quantity": 3, "unit_price": 7}]),
        ("b", False, [{"quantity": 0.25, "days": 4, "unit_price": 120000}]),
    )
    calc = calculate(q)
    for group, row in zip(q.groups, calc.groups):
        assert group_subtotal(group) == sum(item_subtotal(i) for i in group.items)
        assert row.subtotal == pytest.approx(float(group_subtotal(group)))
    assert calc.subtotal == pytest.approx(sum(r.subtotal for r in calc.groups))
    assert calc.subtotal == pytest.approx(1.5 * 2 * 33333 + 3 * 7 + 0.25 * 4 * 120000)


def test_calculation_is_deterministic(quote_builder):
    q = quote_builder(
        ("a", True, [{"quantity": 1.1, "days": 3, "unit_price": 12345, "cost_price": 999}]),
        agency_fee_rate=0.137,
    )
    first = calculate(q)
    assert calculate(q) == first
    rebuilt = Quote.model_validate(export_quote(q))
    assert rebuilt is not q
    assert calculate(rebuilt) == first


def test_detail_margin():
    assert detail_margin(Detail(unit_price=1000, cost_price=250)) == pytest.approx(75.0)
    assert detail_margin(Detail(unit_price=0, cost_price=250)) == 0.0
