"""Quote tree, catalog snapshots and calculation result models."""

from __future__ import annotations

import math
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_UNIT = "개"


def _to_number(v: Any, default: float) -> float:
    if v is None or isinstance(v, bool):
        return default
    try:
        f = float(v)
    except (TypeError, ValueError):
        return default
    if math.isnan(f) or math.isinf(f):
        return default
    return f


def coerce_money(v: Any) -> int:
    """Whole currency units; invalid input becomes 0, negatives clamp to 0."""
    f = _to_number(v, 0.0)
    if f <= 0:
        return 0
    return int(Decimal(str(f)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def coerce_measure(v: Any) -> float:
    """Quantity/days; invalid input becomes 1, negatives clamp to 0."""
    return max(_to_number(v, 1.0), 0.0)


def coerce_rate(v: Any) -> float:
    return min(max(_to_number(v, 0.0), 0.0), 1.0)


class QuoteStatus(str, Enum):
    draft = "draft"
    sent = "sent"
    accepted = "accepted"
    revised = "revised"
    canceled = "canceled"


class VatType(str, Enum):
    exclusive = "exclusive"
    inclusive = "inclusive"


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)


class Detail(_Node):
    id: str | None = None
    name: str = ""
    description: str = ""
    quantity: float = 1.0
    days: float = 1.0
    unit: str = DEFAULT_UNIT
    unit_price: int = 0
    is_service: bool = False
    cost_price: int = 0
    supplier_id: str | None = None
    supplier_name_snapshot: str = ""

    @field_validator("quantity", "days", mode="before")
    @classmethod
    def _measure(cls, v: Any) -> float:
        return coerce_measure(v)

    @field_validator("unit_price", "cost_price", mode="before")
    @classmethod
    def _money(cls, v: Any) -> int:
        return coerce_money(v)

    @field_validator("description", "supplier_name_snapshot", mode="before")
    @classmethod
    def _blank(cls, v: Any) -> str:
        return "" if v is None else v


class Item(_Node):
    id: str | None = None
    name: str
    sort_order: int = 0
    include_in_fee: bool = True
    details: tuple[Detail, ...] = ()


class Group(_Node):
    id: str | None = None
    name: str
    sort_order: int = 0
    include_in_fee: bool = True
    items: tuple[Item, ...] = ()


class Quote(_Node):
    id: str | None = None
    project_title: str = ""
    customer_id: str = ""
    customer_name_snapshot: str = ""
    issue_date: date = Field(default_factory=date.today)
    status: QuoteStatus = QuoteStatus.draft
    vat_type: VatType = VatType.exclusive
    discount_amount: int = 0
    agency_fee_rate: float = 0.15
    version: int = Field(default=1, ge=1)
    show_cost_management: bool = False
    template_id: str | None = None
    parent_quote_id: str | None = None
    groups: tuple[Group, ...] = ()

    @field_validator("discount_amount", mode="before")
    @classmethod
    def _money(cls, v: Any) -> int:
        return coerce_money(v)

    @field_validator("agency_fee_rate", mode="before")
    @classmethod
    def _rate(cls, v: Any) -> float:
        return coerce_rate(v)

    @field_validator("customer_id", "customer_name_snapshot", mode="before")
    @classmethod
    def _blank(cls, v: Any) -> str:
        return "" if v is None else v


class MasterItem(_Node):
    id: str | None = None
    name: str
    category: str | None = None
    description: str | None = None
    default_unit: str = DEFAULT_UNIT
    default_unit_price: int = 0
    is_active: bool = True
    # Explicit flag wins over the name heuristic when set.
    is_service: bool | None = None

    @field_validator("default_unit_price", mode="before")
    @classmethod
    def _money(cls, v: Any) -> int:
        return coerce_money(v)

    model_config = ConfigDict(frozen=True, from_attributes=True)


class Supplier(_Node):
    id: str
    name: str
    contact_person: str | None = None
    phone: str | None = None
    email: str | None = None
    memo: str | None = None
    is_active: bool = True

    model_config = ConfigDict(frozen=True, from_attributes=True)


class GroupCalculation(_Node):
    name: str
    subtotal: float
    include_in_fee: bool


class QuoteCalculation(_Node):
    groups: tuple[GroupCalculation, ...] = ()
    subtotal: float = 0.0
    fee_applicable_amount: float = 0.0
    fee_excluded_amount: float = 0.0
    agency_fee: float = 0.0
    total_before_vat: float = 0.0
    vat_amount: float = 0.0
    discount_amount: float = 0.0
    final_total: float = 0.0
    total_cost: float = 0.0
    total_profit: float = 0.0
    profit_margin_percentage: float = 0.0
