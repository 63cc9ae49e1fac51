"""Session timer alternating capture between running and paused phases.

The timer is cooperative: a PollingTicker fires from inside the host loop's
``poll()`` call, so ticks never overlap frame analysis.
"""
import logging
import time
from enum import Enum
from typing import Callable, Optional, Protocol


class TimerPhase(Enum):
    RUNNING = "running"
    PAUSED = "paused"


class Capture(Protocol):
    def start(self): ...

    def stop(self): ...


class PollingTicker:
    """Periodic tick source driven by ``poll()``."""

    def __init__(self, interval: float, callback: Callable[[], None],
                 clock: Callable[[], float] = time.monotonic):
        if interval <= 0:
            raise ValueError("Tick interval must be positive")
        self.interval = interval
        self.callback = callback
        self.clock = clock
        self.started = clock()
        self.ticks = 0
        self.cancelled = False

    @property
    def next_fire(self) -> float:
        return self.started + (self.ticks + 1) * self.interval

    def poll(self) -> int:
        """Fire once per interval elapsed since the last poll; returns ticks fired."""
        fired = 0
        now = self.clock()
        while not self.cancelled and now >= self.next_fire:
            self.ticks += 1
            fired += 1
            self.callback()
        return fired

    def cancel(self):
        self.cancelled = True


class SessionTimer:
    """Two-phase oscillator gating the capture collaborator.

    Starts idle in the paused phase. ``start()`` begins a running phase; when a
    phase's countdown drops below zero the timer flips phase and calls
    ``capture.stop()`` or ``capture.start()``. ``force_stop()`` halts it until
    the next ``start()``.
    """

    def __init__(self, config, capture: Optional[Capture] = None,
                 clock: Callable[[], float] = time.monotonic,
                 ticker_factory: Callable[..., PollingTicker] = PollingTicker,
                 logger: Optional[logging.Logger] = None):
        self.config = config
        self.capture = capture
        self.clock = clock
        self.ticker_factory = ticker_factory
        self.logger = logger or logging.getLogger(__name__)

        self.phase = TimerPhase.PAUSED
        self.remaining = float(config.PAUSE_DURATION)
        self.active = False
        self.ticker: Optional[PollingTicker] = None

    @property
    def is_active(self) -> bool:
        return self.active

    @property
    def is_running(self) -> bool:
        return self.active and self.phase == TimerPhase.RUNNING

    @property
    def countdown(self) -> int:
        """Remaining seconds of the current phase, for display."""
        return max(0, int(round(self.remaining)))

    def start(self):
        """Begin a running phase (user initiated)."""
        self.active = True
        self._enter(TimerPhase.RUNNING)
        self.logger.info(f"Session started: running for {self.config.RUN_DURATION}s")

    def force_stop(self):
        """Cancel ticking and pause capture until start() is called again."""
        self._cancel_ticker()
        self.active = False
        self.phase = TimerPhase.PAUSED
        self._emit_stop()
        self.logger.info("Session stopped by user")

    def poll(self) -> int:
        """Advance the timer; call this from the host loop."""
        if self.ticker is None:
            return 0
        return self.ticker.poll()

    def _tick(self, ticker: PollingTicker):
        if not self.active or ticker is not self.ticker:
            return
        # rounded so repeated float steps land exactly on zero, not just below it
        self.remaining = round(self.remaining - ticker.interval, 6)
        if self.remaining < 0:
            if self.phase == TimerPhase.RUNNING:
                self._enter(TimerPhase.PAUSED)
                self.logger.info(f"Running phase over: pausing for {self.config.PAUSE_DURATION}s")
            else:
                self._enter(TimerPhase.RUNNING)
                self.logger.info(f"Pause over: running for {self.config.RUN_DURATION}s")

    def _enter(self, phase: TimerPhase):
        self._cancel_ticker()
        self.phase = phase
        if phase == TimerPhase.RUNNING:
            self.remaining = float(self.config.RUN_DURATION)
            self._start_ticker()
            self._emit_start()
        else:
            self.remaining = float(self.config.PAUSE_DURATION)
            self._start_ticker()
            self._emit_stop()

    def _start_ticker(self):
        ticker = self.ticker_factory(float(self.config.TICK_SECONDS),
                                     lambda: self._tick(ticker), self.clock)
        self.ticker = ticker

    def _cancel_ticker(self):
        if self.ticker is not None:
            self.ticker.cancel()
            self.ticker = None

    def _emit_start(self):
        if self.capture is None:
            return
        try:
            self.capture.start()
        except Exception as e:
            self.logger.warning(f"Failed to resume capture: {e}")

    def _emit_stop(self):
        if self.capture is None:
            return
        try:
            self.capture.stop()
        except Exception as e:
            self.logger.warning(f"Failed to pause capture: {e}")
