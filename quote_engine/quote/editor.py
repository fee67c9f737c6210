"""Single-writer editing session for one quote."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Mapping

from quote_engine.core.errors import VersionConflict
from quote_engine.quote import mutations
from quote_engine.quote.calculator import calculate
from quote_engine.quote.records import new_quote
from quote_engine.quote.scheduler import RecalculationScheduler
from quote_engine.quote.templates import DEFAULT_TEMPLATES, apply_template
from quote_engine.schemas.quote import MasterItem, Quote, QuoteCalculation, Supplier
from quote_engine.schemas.template import QuoteTemplate


class QuoteEditor:
    """Holds the current quote tree, its dirty flag and the latest calculation.

    Every edit replaces :attr:`quote` with a new tree and re-arms the debounced
    recalculation; :attr:`calculation` is swapped in whole once the edits settle.
    ``strict`` selects the index policy for every operation: ignore stale
    indices (default) or raise :class:`~quote_engine.core.errors.IndexOutOfRange`.
    """

    def __init__(
        self,
        quote: Quote | None = None,
        *,
        templates: Mapping[str, QuoteTemplate] | None = None,
        debounce: float | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
        calculate_fn: Callable[[Quote], QuoteCalculation] = calculate,
        strict: bool = False,
    ) -> None:
        self._quote = quote if quote is not None else new_quote()
        self._calculation: QuoteCalculation | None = None
        self._dirty = False
        self.strict = strict
        self._calculate_fn = calculate_fn
        self.templates = templates if templates is not None else DEFAULT_TEMPLATES
        self.scheduler = RecalculationScheduler(calculate_fn, self._publish, debounce=debounce, loop=loop)
        # Initial calculation for whatever tree we start from.
        self.scheduler.notify(self._current)

    # -- state --------------------------------------------------------------

    @property
    def quote(self) -> Quote:
        return self._quote

    @property
    def calculation(self) -> QuoteCalculation | None:
        return self._calculation

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    @property
    def is_calculating(self) -> bool:
        return self.scheduler.is_calculating

    @property
    def is_stale(self) -> bool:
        return self.scheduler.is_pending

    def _current(self) -> Quote:
        return self._quote

    def _publish(self, calculation: QuoteCalculation) -> None:
        self._calculation = calculation

    def _commit(self, quote: Quote) -> Quote:
        if quote is not self._quote:
            self._quote = quote
            self._dirty = True
            self.scheduler.notify(self._current)
        return self._quote

    def calculate_now(self) -> QuoteCalculation:
        """Skip the debounce window and return a calculation of the current tree."""
        self.scheduler.flush()
        if self._calculation is None:
            self._calculation = self._calculate_fn(self._quote)
        return self._calculation

    def mark_saved(self, version: int | None = None) -> None:
        if version is not None and version != self._quote.version:
            self._quote = mutations.update_quote(self._quote, {"version": version})
        self._dirty = False

    def reset(self, quote: Quote | None = None) -> None:
        self.scheduler.cancel()
        self._quote = quote if quote is not None else new_quote()
        self._calculation = None
        self._dirty = False
        self.scheduler.notify(self._current)

    # -- edits --------------------------------------------------------------

    def update_quote(self, patch: Mapping[str, Any], *, expected_version: int | None = None) -> Quote:
        if expected_version is not None and expected_version != self._quote.version:
            raise VersionConflict(expected_version, self._quote.version)
        return self._commit(mutations.update_quote(self._quote, patch))

    def apply_template(self, template_id: str) -> Quote:
        return self._commit(apply_template(self._quote, template_id, self.templates))

    def add_group(self, name: str = mutations.DEFAULT_GROUP_NAME) -> Quote:
        return self._commit(mutations.add_group(self._quote, name))

    def update_group(self, group_index: int, patch: Mapping[str, Any]) -> Quote:
        return self._commit(mutations.update_group(self._quote, group_index, patch, strict=self.strict))

    def remove_group(self, group_index: int) -> Quote:
        return self._commit(mutations.remove_group(self._quote, group_index, strict=self.strict))

    def add_item(self, group_index: int, name: str = mutations.DEFAULT_ITEM_NAME) -> Quote:
        return self._commit(mutations.add_item(self._quote, group_index, name, strict=self.strict))

    def update_item(self, group_index: int, item_index: int, patch: Mapping[str, Any]) -> Quote:
        return self._commit(
            mutations.update_item(self._quote, group_index, item_index, patch, strict=self.strict)
        )

    def remove_item(self, group_index: int, item_index: int) -> Quote:
        return self._commit(mutations.remove_item(self._quote, group_index, item_index, strict=self.strict))

    def add_detail(self, group_index: int, item_index: int) -> Quote:
        return self._commit(mutations.add_detail(self._quote, group_index, item_index, strict=self.strict))

    def add_detail_from_master(self, group_index: int, item_index: int, master_item: MasterItem) -> Quote:
        return self._commit(
            mutations.add_detail_from_master(self._quote, group_index, item_index, master_item, strict=self.strict)
        )

    def update_detail(
        self, group_index: int, item_index: int, detail_index: int, patch: Mapping[str, Any]
    ) -> Quote:
        return self._commit(
            mutations.update_detail(self._quote, group_index, item_index, detail_index, patch, strict=self.strict)
        )

    def remove_detail(self, group_index: int, item_index: int, detail_index: int) -> Quote:
        return self._commit(
            mutations.remove_detail(self._quote, group_index, item_index, detail_index, strict=self.strict)
        )

    def assign_supplier(
        self, group_index: int, item_index: int, detail_index: int, supplier: Supplier | None
    ) -> Quote:
        return self._commit(
            mutations.assign_supplier(
                self._quote, group_index, item_index, detail_index, supplier, strict=self.strict
            )
        )
