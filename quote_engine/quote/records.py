"""Plain-record import/export and quote copies.

The engine never talks to storage itself: callers persist the dicts produced
here and hand records back through :func:`import_quote`.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from jsonschema import Draft202012Validator
from pydantic import ValidationError

from quote_engine.core.config import get_settings
from quote_engine.core.errors import InvalidQuoteRecord
from quote_engine.schemas.quote import Detail, Group, Item, Quote, QuoteCalculation, QuoteStatus
from quote_engine.schemas.record_schema import QUOTE_RECORD_SCHEMA

logger = logging.getLogger(__name__)

validator = Draft202012Validator(QUOTE_RECORD_SCHEMA)


def new_quote(**fields: Any) -> Quote:
    """Empty draft quote using the configured default agency fee rate."""
    data = {"agency_fee_rate": get_settings().DEFAULT_AGENCY_FEE_RATE, **fields}
    return Quote.model_validate(data)


def export_quote(quote: Quote) -> dict[str, Any]:
    return quote.model_dump(mode="json")


def export_calculation(calculation: QuoteCalculation) -> dict[str, Any]:
    return calculation.model_dump(mode="json")


def import_quote(record: Mapping[str, Any]) -> Quote:
    errors = sorted(validator.iter_errors(record), key=lambda e: e.json_path)
    if errors:
        raise InvalidQuoteRecord([f"{e.json_path}: {e.message}" for e in errors])
    try:
        quote = new_quote(**record)
    except ValidationError as e:
        raise InvalidQuoteRecord(
            [f"$.{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        ) from e
    logger.info("imported quote %s (%d groups)", quote.id or "<new>", len(quote.groups))
    return quote


def _fresh_detail(detail: Detail) -> Detail:
    return detail.model_copy(update={"id": None})


def _fresh_item(item: Item, *, structure_only: bool) -> Item:
    details = () if structure_only else tuple(_fresh_detail(d) for d in item.details)
    return item.model_copy(update={"id": None, "details": details})


def _fresh_group(group: Group, *, structure_only: bool) -> Group:
    items = tuple(_fresh_item(i, structure_only=structure_only) for i in group.items)
    return group.model_copy(update={"id": None, "items": items})


def copy_quote(
    quote: Quote,
    *,
    project_title: str,
    customer_id: str | None = None,
    customer_name_snapshot: str | None = None,
    structure_only: bool = False,
) -> Quote:
    """New draft built from ``quote``.

    ``structure_only`` keeps groups and items but leaves every item without details.
    """
    if not project_title or not project_title.strip():
        raise ValueError("project_title is required to copy a quote")
    return Quote(
        project_title=project_title.strip(),
        customer_id=customer_id if customer_id is not None else quote.customer_id,
        customer_name_snapshot=(
            customer_name_snapshot if customer_name_snapshot is not None else quote.customer_name_snapshot
        ),
        status=QuoteStatus.draft,
        vat_type=quote.vat_type,
        discount_amount=quote.discount_amount,
        agency_fee_rate=quote.agency_fee_rate,
        version=1,
        show_cost_management=quote.show_cost_management,
        template_id=quote.template_id,
        parent_quote_id=quote.id,
        groups=[_fresh_group(g, structure_only=structure_only) for g in quote.groups],
    )


def revise_quote(quote: Quote) -> Quote:
    return quote.model_copy(update={"version": quote.version + 1, "status": QuoteStatus.revised})
