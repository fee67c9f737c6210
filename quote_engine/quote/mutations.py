"""Structural edits of a quote tree.

Every function takes the current :class:`Quote` and returns a new one; the input
is never modified. Nodes on the edited path are rebuilt, untouched groups/items
are shared with the previous tree. Models are frozen and child collections are
tuples, so a shared subtree cannot be changed through either revision.

Addresses are positional. An index outside the current tree is ignored and the
original quote object is returned unchanged, so callers holding a stale index
cannot corrupt the tree. Pass ``strict=True`` to get :class:`IndexOutOfRange`
instead.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence, TypeVar

from pydantic import BaseModel

from quote_engine.core.errors import IndexOutOfRange, VersionConflict
from quote_engine.schemas.quote import DEFAULT_UNIT, Detail, Group, Item, MasterItem, Quote, Supplier

logger = logging.getLogger(__name__)

# "editing" / "production": catalog names that denote services rather than goods.
SERVICE_KEYWORDS = ("편집", "제작")

DEFAULT_GROUP_NAME = "새 그룹"
DEFAULT_ITEM_NAME = "새 항목"

N = TypeVar("N", bound=BaseModel)


def infer_is_service(name: str) -> bool:
    return any(k in (name or "") for k in SERVICE_KEYWORDS)


def _merge(node: N, patch: Mapping[str, Any]) -> N:
    return type(node).model_validate({**dict(node), **dict(patch)})


def _in_range(seq: Sequence[Any], index: int, level: str, strict: bool) -> bool:
    if 0 <= index < len(seq):
        return True
    if strict:
        raise IndexOutOfRange(level, index)
    logger.debug("ignoring %s index %s (size %d)", level, index, len(seq))
    return False


def _locate(
    quote: Quote,
    group_index: int,
    item_index: int | None = None,
    detail_index: int | None = None,
    *,
    strict: bool,
) -> bool:
    if not _in_range(quote.groups, group_index, "group", strict):
        return False
    if item_index is None:
        return True
    items = quote.groups[group_index].items
    if not _in_range(items, item_index, "item", strict):
        return False
    if detail_index is None:
        return True
    return _in_range(items[item_index].details, detail_index, "detail", strict)


def _replace_at(seq: Sequence[N], index: int, value: N) -> tuple[N, ...]:
    return (*seq[:index], value, *seq[index + 1 :])


def _drop_at(seq: Sequence[N], index: int) -> tuple[N, ...]:
    return (*seq[:index], *seq[index + 1 :])


def _with_groups(quote: Quote, groups: tuple[Group, ...]) -> Quote:
    return quote.model_copy(update={"groups": groups})


def _with_item(quote: Quote, group_index: int, item_index: int, item: Item) -> Quote:
    group = quote.groups[group_index]
    new_group = group.model_copy(update={"items": _replace_at(group.items, item_index, item)})
    return _with_groups(quote, _replace_at(quote.groups, group_index, new_group))


def _with_details(quote: Quote, group_index: int, item_index: int, details: tuple[Detail, ...]) -> Quote:
    item = quote.groups[group_index].items[item_index]
    return _with_item(quote, group_index, item_index, item.model_copy(update={"details": details}))


# -- quote level -----------------------------------------------------------


def update_quote(quote: Quote, patch: Mapping[str, Any]) -> Quote:
    """Shallow merge of quote-level fields. ``version`` may only move forward."""
    updated = _merge(quote, patch)
    if updated.version < quote.version:
        raise VersionConflict(updated.version, quote.version)
    return updated


# -- groups -----------------------------------------------------------------


def add_group(quote: Quote, name: str = DEFAULT_GROUP_NAME) -> Quote:
    group = Group(name=name, sort_order=len(quote.groups), include_in_fee=True, items=())
    return _with_groups(quote, (*quote.groups, group))


def update_group(quote: Quote, group_index: int, patch: Mapping[str, Any], *, strict: bool = False) -> Quote:
    if not _locate(quote, group_index, strict=strict):
        return quote
    group = _merge(quote.groups[group_index], patch)
    return _with_groups(quote, _replace_at(quote.groups, group_index, group))


def remove_group(quote: Quote, group_index: int, *, strict: bool = False) -> Quote:
    # Sibling sort_order values are left as they are.
    if not _locate(quote, group_index, strict=strict):
        return quote
    return _with_groups(quote, _drop_at(quote.groups, group_index))


# -- items ------------------------------------------------------------------


def add_item(quote: Quote, group_index: int, name: str = DEFAULT_ITEM_NAME, *, strict: bool = False) -> Quote:
    if not _locate(quote, group_index, strict=strict):
        return quote
    group = quote.groups[group_index]
    item = Item(name=name, sort_order=len(group.items), include_in_fee=group.include_in_fee, details=())
    new_group = group.model_copy(update={"items": (*group.items, item)})
    return _with_groups(quote, _replace_at(quote.groups, group_index, new_group))


def update_item(
    quote: Quote, group_index: int, item_index: int, patch: Mapping[str, Any], *, strict: bool = False
) -> Quote:
    if not _locate(quote, group_index, item_index, strict=strict):
        return quote
    item = _merge(quote.groups[group_index].items[item_index], patch)
    return _with_item(quote, group_index, item_index, item)


def remove_item(quote: Quote, group_index: int, item_index: int, *, strict: bool = False) -> Quote:
    if not _locate(quote, group_index, item_index, strict=strict):
        return quote
    group = quote.groups[group_index]
    new_group = group.model_copy(update={"items": _drop_at(group.items, item_index)})
    return _with_groups(quote, _replace_at(quote.groups, group_index, new_group))


# -- details ----------------------------------------------------------------


def _append_detail(quote: Quote, group_index: int, item_index: int, detail: Detail) -> Quote:
    details = quote.groups[group_index].items[item_index].details
    return _with_details(quote, group_index, item_index, (*details, detail))


def add_detail(quote: Quote, group_index: int, item_index: int, *, strict: bool = False) -> Quote:
    if not _locate(quote, group_index, item_index, strict=strict):
        return quote
    blank = Detail(
        name="",
        description="",
        quantity=1,
        days=1,
        unit=DEFAULT_UNIT,
        unit_price=0,
        is_service=False,
        cost_price=0,
    )
    return _append_detail(quote, group_index, item_index, blank)


def detail_from_master(master_item: MasterItem) -> Detail:
    """Snapshot a catalog entry into a new Detail; nothing links back to the catalog."""
    is_service = master_item.is_service
    if is_service is None:
        is_service = infer_is_service(master_item.name)
    return Detail(
        name=master_item.name,
        description=master_item.description or "",
        quantity=1,
        days=1,
        unit=master_item.default_unit,
        unit_price=master_item.default_unit_price,
        is_service=is_service,
        cost_price=0,
        supplier_id=None,
        supplier_name_snapshot="",
    )


def add_detail_from_master(
    quote: Quote, group_index: int, item_index: int, master_item: MasterItem, *, strict: bool = False
) -> Quote:
    if not _locate(quote, group_index, item_index, strict=strict):
        return quote
    return _append_detail(quote, group_index, item_index, detail_from_master(master_item))


def update_detail(
    quote: Quote,
    group_index: int,
    item_index: int,
    detail_index: int,
    patch: Mapping[str, Any],
    *,
    strict: bool = False,
) -> Quote:
    if not _locate(quote, group_index, item_index, detail_index, strict=strict):
        return quote
    details = quote.groups[group_index].items[item_index].details
    detail = _merge(details[detail_index], patch)
    return _with_details(quote, group_index, item_index, _replace_at(details, detail_index, detail))


def remove_detail(
    quote: Quote, group_index: int, item_index: int, detail_index: int, *, strict: bool = False
) -> Quote:
    if not _locate(quote, group_index, item_index, detail_index, strict=strict):
        return quote
    details = quote.groups[group_index].items[item_index].details
    return _with_details(quote, group_index, item_index, _drop_at(details, detail_index))


def assign_supplier(
    quote: Quote,
    group_index: int,
    item_index: int,
    detail_index: int,
    supplier: Supplier | None,
    *,
    strict: bool = False,
) -> Quote:
    """Store the supplier id plus a copy of its current name; ``None`` clears both."""
    patch = {
        "supplier_id": supplier.id if supplier else None,
        "supplier_name_snapshot": supplier.name if supplier else "",
    }
    return update_detail(quote, group_index, item_index, detail_index, patch, strict=strict)
