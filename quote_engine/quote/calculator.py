"""Derivation of all monetary aggregates for a quote tree."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from quote_engine.schemas.quote import (
    Detail,
    Group,
    GroupCalculation,
    Item,
    Quote,
    QuoteCalculation,
    VatType,
)

VAT_RATE = Decimal("0.10")
_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def _to_decimal(v: float | int) -> Decimal:
    return Decimal(str(v))


def sum_totals(values: Iterable[Decimal]) -> Decimal:
    s = _ZERO
    for v in values:
        s += v
    return s


def detail_amount(detail: Detail) -> Decimal:
    return _to_decimal(detail.quantity) * _to_decimal(detail.days) * _to_decimal(detail.unit_price)


def detail_cost(detail: Detail) -> Decimal:
    return _to_decimal(detail.quantity) * _to_decimal(detail.days) * _to_decimal(detail.cost_price)


def detail_margin(detail: Detail) -> float:
    """Per-unit margin in percent; 0 for a zero sale price."""
    if detail.unit_price <= 0:
        return 0.0
    price = _to_decimal(detail.unit_price)
    return float((price - _to_decimal(detail.cost_price)) / price * _HUNDRED)


def item_subtotal(item: Item) -> Decimal:
    return sum_totals(detail_amount(d) for d in item.details)


def group_subtotal(group: Group) -> Decimal:
    return sum_totals(item_subtotal(i) for i in group.items)


def calculate(quote: Quote) -> QuoteCalculation:
    """Compute every derived total of ``quote``.

    Pure and deterministic: intermediate sums are kept as exact decimals and only
    converted to floats on the way out, so equal trees always give equal results.
    """
    group_rows: list[GroupCalculation] = []
    subtotal = _ZERO
    fee_applicable = _ZERO
    total_cost = _ZERO

    for group in quote.groups:
        g_subtotal = group_subtotal(group)
        subtotal += g_subtotal
        if group.include_in_fee:
            fee_applicable += g_subtotal
        # Cost tracks every detail regardless of fee applicability.
        total_cost += sum_totals(detail_cost(d) for item in group.items for d in item.details)
        group_rows.append(
            GroupCalculation(name=group.name, subtotal=float(g_subtotal), include_in_fee=group.include_in_fee)
        )

    fee_excluded = subtotal - fee_applicable
    agency_fee = fee_applicable * _to_decimal(quote.agency_fee_rate)
    discount = _to_decimal(quote.discount_amount)
    total_before_vat = subtotal + agency_fee - discount
    vat_amount = total_before_vat * VAT_RATE if quote.vat_type == VatType.exclusive else _ZERO
    final_total = total_before_vat + vat_amount
    total_profit = final_total - total_cost
    margin = total_profit / final_total * _HUNDRED if final_total > _ZERO else _ZERO

    return QuoteCalculation(
        groups=group_rows,
        subtotal=float(subtotal),
        fee_applicable_amount=float(fee_applicable),
        fee_excluded_amount=float(fee_excluded),
        agency_fee=float(agency_fee),
        total_before_vat=float(total_before_vat),
        vat_amount=float(vat_amount),
        discount_amount=float(discount),
        final_total=float(final_total),
        total_cost=float(total_cost),
        total_profit=float(total_profit),
        profit_margin_percentage=float(margin),
    )
