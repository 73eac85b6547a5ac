"""Refresh loop that re-values the portfolio and redraws the table on a timer."""

import datetime as dt
import logging
import signal
import threading
import time
from contextlib import contextmanager
from typing import Callable, Optional

from rich.console import Console

from .display import render_valuation
from .portfolio import valuate
from .storage import AppState

logger = logging.getLogger(__name__)


class Monitor:
    """
    Fixed-schedule refresh loop. A tick that comes due less than min_spacing
    seconds after the previous render finished is skipped.
    """

    def __init__(
        self,
        state: AppState,
        fetch: Callable,
        console: Optional[Console] = None,
        interval: float = 20.0,
        min_spacing: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.state = state
        self.fetch = fetch
        self.console = console or Console()
        self.interval = interval
        self.min_spacing = min_spacing
        self._clock = clock
        self._sleep = sleep
        self.update_count = 0
        self.skipped = 0
        self.previous_return: Optional[float] = None
        self._last_render: Optional[float] = None
        self._stop_requested = False

    def tick(self) -> None:
        """One valuation cycle: reload portfolio, fetch quotes, redraw."""
        self.update_count += 1
        self.console.clear()
        self.state.refresh_portfolio()
        with self.console.status(f"Monitoring stocks... (Update #{self.update_count})"):
            valuation = valuate(self.state.positions, self.fetch)
        self.console.print(
            f"Last update: {dt.datetime.now():%Y-%m-%d %H:%M:%S}  (Update #{self.update_count})\n",
            style="cyan",
        )
        render_valuation(valuation, self.console, self.previous_return)
        self.previous_return = valuation.total_return_pct

    @contextmanager
    def _finish_before_interrupt(self):
        """Hold Ctrl+C until the cycle in flight has rendered."""
        if threading.current_thread() is not threading.main_thread():
            yield
            return

        def request_stop(signum, frame):
            self._stop_requested = True

        previous = signal.signal(signal.SIGINT, request_stop)
        try:
            yield
        finally:
            if previous is None:
                previous = signal.default_int_handler
            signal.signal(signal.SIGINT, previous)

    def _due(self, now: float) -> bool:
        if self._last_render is None:
            return True
        return now - self._last_render >= self.min_spacing

    def run(self, max_updates: Optional[int] = None) -> int:
        """Run until Ctrl+C (or max_updates renders). Returns the number of renders."""
        next_tick = self._clock()
        try:
            while max_updates is None or self.update_count < max_updates:
                delay = next_tick - self._clock()
                if delay > 0:
                    self._sleep(delay)
                next_tick += self.interval

                if not self._due(self._clock()):
                    self.skipped += 1
                    logger.debug("Skipping tick, previous render finished too recently")
                    continue

                with self._finish_before_interrupt():
                    try:
                        self.tick()
                    except Exception:
                        logger.exception("Error updating display")
                self._last_render = self._clock()
                if self._stop_requested:
                    break
        except KeyboardInterrupt:
            pass
        self.console.print("\nMonitoring stopped")
        return self.update_count
