"""Debounced recalculation of a quote after a burst of edits settles."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Callable

from quote_engine.core.config import get_settings
from quote_engine.schemas.quote import Quote, QuoteCalculation

logger = logging.getLogger(__name__)

QuoteSource = Callable[[], Quote]


class SchedulerState(str, Enum):
    idle = "idle"
    pending = "pending"
    calculating = "calculating"


class RecalculationScheduler:
    """Trailing-edge debounce around a synchronous calculation function.

    Each :meth:`notify` cancels the armed timer and arms a new one on the event
    loop. When a timer fires, the calculation runs inline against the tree
    returned by the latest source callable and the result goes to ``on_result``.
    A generation counter discards fires that were superseded after being queued.

    Without a running (or explicitly given) loop no timer is armed; the work then
    stays pending until :meth:`flush`.
    """

    def __init__(
        self,
        calculate_fn: Callable[[Quote], QuoteCalculation],
        on_result: Callable[[QuoteCalculation], None],
        *,
        debounce: float | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._calculate = calculate_fn
        self._on_result = on_result
        self.debounce = get_settings().debounce_seconds if debounce is None else debounce
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._source: QuoteSource | None = None
        self._generation = 0
        self._state = SchedulerState.idle
        self.runs = 0

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def is_calculating(self) -> bool:
        return self._state is SchedulerState.calculating

    @property
    def is_pending(self) -> bool:
        return self._source is not None

    def _resolve_loop(self) -> asyncio.AbstractEventLoop | None:
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    def _cancel_timer(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def notify(self, source: QuoteSource) -> None:
        """Record that the tree changed and (re)arm the debounce timer."""
        self._source = source
        self._generation += 1
        self._cancel_timer()
        loop = self._resolve_loop()
        if loop is not None:
            self._handle = loop.call_later(self.debounce, self._fire, self._generation)
        else:
            logger.debug("no event loop; recalculation waits for flush()")
        if self._state is not SchedulerState.calculating:
            self._state = SchedulerState.pending

    def cancel(self) -> None:
        self._generation += 1
        self._cancel_timer()
        self._source = None
        if self._state is SchedulerState.pending:
            self._state = SchedulerState.idle

    def flush(self) -> bool:
        """Run a pending calculation immediately. Returns False when nothing was pending."""
        if not self.is_pending:
            return False
        self._generation += 1
        self._cancel_timer()
        self._run()
        return True

    def _fire(self, generation: int) -> None:
        if generation != self._generation:
            logger.debug("dropping stale recalculation (generation %d < %d)", generation, self._generation)
            return
        self._handle = None
        self._run()

    def _run(self) -> None:
        source = self._source
        if source is None:
            self._state = SchedulerState.idle
            return
        self._source = None
        self._state = SchedulerState.calculating
        try:
            result = self._calculate(source())
        except Exception:
            logger.exception("quote recalculation failed; previous result kept")
        else:
            self.runs += 1
            logger.debug("quote recalculated (run %d)", self.runs)
            self._on_result(result)
        finally:
            # A notify() issued while calculating re-armed the timer and set a new source.
            self._state = SchedulerState.pending if self._source is not None else SchedulerState.idle
