"""
Simulation clock: tick scheduling, lifecycle and speed scaling.

States:
    IDLE    --start()-->           RUNNING
    RUNNING --stop() / reset()-->  IDLE
    RUNNING --tick-->              RUNNING
    reset() is valid from either state and always lands in IDLE.

Each start or speed change installs a new timer generation: one daemon
thread waiting on an Event for `period` seconds between ticks. Ticks run
under a re-entrant lock and check their generation first, so once stop(),
reset() or set_speed() returns no tick from an older timer can run.
Subscribers are notified under the same lock, so observers never see a
partially applied tick and may call back into the clock.
"""

import logging
import math
import threading
from typing import Callable, List, Optional

from .constants import BASE_TICK_PERIOD_S, SPEED_MIN, SPEED_MAX
from .data_types import ClockState, EngineConfig, EngineSnapshot
from .engine import SimulationEngine
from .walk import clamp

logger = logging.getLogger(__name__)

Subscriber = Callable[[EngineSnapshot], None]


def clamp_speed(factor: float) -> float:
    """Clamp a speed factor into the slider range [0.1, 5.0]"""
    factor = float(factor)
    if not math.isfinite(factor):
        raise ValueError(f"Speed factor must be finite, got {factor}")
    return clamp(factor, SPEED_MIN, SPEED_MAX)


def tick_period(speed: float) -> float:
    """Seconds between ticks at the given speed factor"""
    return BASE_TICK_PERIOD_S / speed


class SimulationClock:
    """Owns the engine and drives it on a timer"""

    def __init__(self, engine: Optional[SimulationEngine] = None, config: Optional[EngineConfig] = None):
        """
        Args:
            engine: Engine to drive (built from config if None)
            config: Engine parameters, used only when engine is None
        """
        self.engine = engine if engine is not None else SimulationEngine(config)
        self._lock = threading.RLock()
        self._state = ClockState.IDLE
        self._speed = clamp_speed(self.engine.speed)
        self.engine.speed = self._speed
        self._generation = 0
        self._stop_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None
        self._released: Optional[threading.Thread] = None
        self._subscribers: List[Subscriber] = []

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def state(self) -> ClockState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state is ClockState.RUNNING

    @property
    def speed(self) -> float:
        return self._speed

    @property
    def period(self) -> float:
        return tick_period(self._speed)

    def snapshot(self) -> EngineSnapshot:
        """Latest published snapshot (pull-based accessor)"""
        with self._lock:
            return self.engine.get_snapshot()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register an observer called with each new snapshot.

        Returns:
            Callable that removes the observer
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe():
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    # ------------------------------------------------------------------
    # Control surface
    # ------------------------------------------------------------------

    def start(self):
        """Begin periodic ticking (no-op while already running)"""
        with self._lock:
            if self._state is ClockState.RUNNING:
                return
            self._state = ClockState.RUNNING
            self.engine.running = True
            self.engine.refresh_snapshot()
            self._install_timer()
            logger.info("Clock started at %.1fx (period %.3fs)", self._speed, self.period)

    def stop(self):
        """Halt ticking without touching subsystem state"""
        with self._lock:
            if self._state is ClockState.IDLE:
                return
            self._release_timer()
            self._state = ClockState.IDLE
            self.engine.running = False
            self.engine.refresh_snapshot()
            logger.info("Clock stopped after %d ticks", self.engine.tick_count)
        self._join_released()

    def reset(self) -> EngineSnapshot:
        """Stop ticking and restore every subsystem to its initial value"""
        with self._lock:
            self._release_timer()
            self._state = ClockState.IDLE
            snapshot = self.engine.reset()
            logger.info("Clock reset")
            self._publish(snapshot)
        self._join_released()
        return snapshot

    def set_speed(self, factor: float) -> float:
        """
        Change the speed factor; the period becomes 1s / factor.

        While running, the active timer is released and a new one installed.
        Subsystem values are left untouched.

        Returns:
            The applied (clamped) speed factor
        """
        speed = clamp_speed(factor)
        with self._lock:
            self._speed = speed
            self.engine.speed = speed
            self.engine.refresh_snapshot()
            if self._state is ClockState.RUNNING:
                self._release_timer()
                self._install_timer()
            logger.debug("Speed set to %.1fx (period %.3fs)", speed, self.period)
        self._join_released()
        return speed

    # ------------------------------------------------------------------
    # Timer management
    # ------------------------------------------------------------------

    def _install_timer(self):
        """Start a new timer generation (caller holds the lock)"""
        self._generation += 1
        stop_event = threading.Event()
        thread = threading.Thread(
            target=self._run,
            args=(self._generation, self.period, stop_event),
            name=f"smartcity-clock-{self._generation}",
            daemon=True,
        )
        self._stop_event = stop_event
        self._thread = thread
        thread.start()

    def _release_timer(self):
        """Invalidate the current timer generation (caller holds the lock)"""
        self._generation += 1
        if self._stop_event is not None:
            self._stop_event.set()
        self._released = self._thread
        self._stop_event = None
        self._thread = None

    def _join_released(self):
        """Wait for a released timer thread to exit (outside the lock)"""
        thread = self._released
        self._released = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=BASE_TICK_PERIOD_S / SPEED_MIN)

    def _run(self, generation: int, period: float, stop_event: threading.Event):
        while not stop_event.wait(period):
            with self._lock:
                if generation != self._generation:
                    return
                snapshot = self.engine.tick(self._speed)
                self._publish(snapshot)

    def _publish(self, snapshot: EngineSnapshot):
        """Notify observers (caller holds the lock)"""
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                logger.exception("Snapshot subscriber %r failed", callback)
