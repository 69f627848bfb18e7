"""Bounded repeating timer with explicit ownership and cancellation."""

from __future__ import annotations

import threading
from typing import Callable, Optional

from core import get_logger

logger = get_logger(__name__)


class SpinTicker:
    """Calls ``on_tick`` at a fixed interval for a bounded number of ticks.

    The ticker runs on its own daemon thread. Whoever starts it owns it and
    may stop it through :meth:`cancel`, which sets the cancellation token:
    no further ticks run and ``on_complete`` is skipped. When all ticks
    have run without cancellation, ``on_complete`` is called once on the
    ticker thread.
    """

    def __init__(
        self,
        interval: float,
        ticks: int,
        on_tick: Callable[[int], None],
        on_complete: Callable[[], None],
        name: str = "spin-ticker",
    ) -> None:
        if ticks < 1:
            raise ValueError("Ticker needs at least one tick")
        self.interval = max(interval, 0.0)
        self.ticks = ticks
        self._on_tick = on_tick
        self._on_complete = on_complete
        self._name = name
        self.token = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.ticks_run = 0

    @property
    def cancelled(self) -> bool:
        return self.token.is_set()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("Ticker already started")
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()

    def cancel(self) -> None:
        if not self.token.is_set():
            logger.debug(f"Cancelling {self._name} after {self.ticks_run} ticks")
        self.token.set()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the ticker thread; returns True when it has finished."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def _run(self) -> None:
        try:
            for tick in range(1, self.ticks + 1):
                # wait() returns True as soon as the token is set
                if self.token.wait(self.interval):
                    return
                self._on_tick(tick)
                self.ticks_run = tick
            if not self.token.is_set():
                self._on_complete()
        except Exception:
            logger.exception(f"{self._name} stopped with an error")
