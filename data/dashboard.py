"""
data/dashboard.py
The refresh loop's state: one chart and one price readout per index, updated by a
sequential pass over the indices. app.py owns a single Dashboard and drives it from
a dcc.Interval.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from dataclasses import replace
from datetime import tzinfo
from typing import Callable, Iterable, Optional

from components.chart import ChartState, update_chart
from components.price import PriceDisplayState, update_price_display
from data.fetch import QuoteSnapshot, fetch_quote
from data.indices import INDICES, IndexDescriptor

logger = logging.getLogger(__name__)

# Ticks closer together than this (e.g. several open browser tabs) reuse the last pass.
MIN_REFRESH_GAP_S = float(os.getenv("MIN_REFRESH_GAP_S", "30"))

Fetcher = Callable[[str], Optional[QuoteSnapshot]]


class Dashboard:
    """Owns chart and readout state for every index and refreshes them in order."""

    def __init__(
        self,
        indices: Iterable[IndexDescriptor] = INDICES,
        fetcher: Fetcher = fetch_quote,
        min_interval: float = MIN_REFRESH_GAP_S,
        clock: Callable[[], float] = time.monotonic,
        tz: Optional[tzinfo] = None,
    ):
        self.indices = tuple(indices)
        self.fetcher = fetcher
        self.min_interval = min_interval
        self._clock = clock
        self.tz = tz

        self.charts: dict[str, ChartState] = {
            index.id: ChartState.for_index(index) for index in self.indices
        }
        self.displays: dict[str, PriceDisplayState] = {
            index.id: PriceDisplayState() for index in self.indices
        }

        self._lock = threading.Lock()        # one pass at a time
        self._state_lock = threading.Lock()  # writers vs. page readers
        self._last_pass: Optional[float] = None

    @property
    def last_pass(self) -> Optional[float]:
        """Clock reading at the start of the most recent pass, None before the first."""
        return self._last_pass

    def view(self, index_id: str) -> tuple[ChartState, PriceDisplayState]:
        """Consistent copies of one index's chart and readout, safe to render from any thread."""
        with self._state_lock:
            chart = self.charts[index_id]
            chart = replace(chart, prices=list(chart.prices), labels=list(chart.labels))
            display = replace(self.displays[index_id])
        return chart, display

    def refresh(self, force: bool = False) -> bool:
        """
        Run one refresh pass: fetch each index in turn, waiting for each fetch before
        starting the next, and apply whatever came back.

        Only one pass runs at a time. A call made while a pass is in flight, or
        within min_interval of the last pass (unless force), does nothing.

        Returns:
            True if a pass ran, False if it was skipped.
        """
        if not self._lock.acquire(blocking=False):
            logger.info("Refresh pass already running, skipping this tick.")
            return False

        try:
            now = self._clock()
            if (not force and self._last_pass is not None
                    and now - self._last_pass < self.min_interval):
                return False
            self._last_pass = now

            updated = [index.id for index in self.indices if self.update_index(index)]
            logger.info(f"Refresh pass done: {len(updated)}/{len(self.indices)} indices updated.")
            return True
        finally:
            self._lock.release()

    def update_index(self, index: IndexDescriptor) -> bool:
        """Fetch and apply one index. False leaves its chart and readout as they were."""
        try:
            snapshot = self.fetcher(index.symbol)
            if snapshot is None:
                return False
            with self._state_lock:
                update_chart(self.charts, index.id, snapshot)
                update_price_display(
                    self.displays,
                    index.id,
                    snapshot.current_price,
                    snapshot.previous_close,
                    snapshot.last_updated,
                    self.tz,
                )
        except Exception:
            logger.exception(f"Updating {index.name} ({index.symbol}) failed, keeping last view.")
            return False
        return True
