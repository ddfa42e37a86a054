"""
Smart city simulation kernel.

Owns every subsystem and advances them in a fixed order once per tick:

    quantum -> depin -> optimization -> portfolio -> ledger -> energy flow -> history

Later subsystems observe the values already updated earlier in the same
tick. The engine itself has no timer; SimulationClock drives it.
"""

import time
from typing import Dict, List, Optional

from .constants import (
    ENERGY_FLOW_RATE,
    TICK_TIME_WINDOW,
)
from .data_types import EngineConfig, EngineSnapshot
from .depin import DePINNetwork
from .history import PerformanceHistory
from .ledger import LedgerSimulator
from .optimization import OptimizationProcess
from .portfolio import CityPortfolio
from .quantum import QuantumRegister
from .rng import make_rng, make_seed


class SimulationEngine:
    """
    Single owned state aggregate for all city subsystems.

    Not thread-safe on its own; callers serialize tick() and reset()
    (SimulationClock does this with a lock).
    """

    def __init__(self, config: Optional[EngineConfig] = None, rng=None):
        """
        Args:
            config: Engine parameters (defaults if None)
            rng: Random source with a random() method; a PCG64 generator
                 seeded from make_seed(config.seed, "engine") is created
                 if None
        """
        self.config = config or EngineConfig()
        if rng is None:
            rng = make_rng(make_seed(self.config.seed, "engine")) if self.config.seed is not None else make_rng()
        self.rng = rng

        self.quantum = QuantumRegister(self.config.qubit_count)
        self.depin = DePINNetwork()
        self.optimization = OptimizationProcess()
        self.portfolio = CityPortfolio()
        self.ledger = LedgerSimulator(
            edge_cap=self.config.ledger_edge_cap,
            transaction_cap=self.config.transaction_cap
        )
        self.history = PerformanceHistory(self.config.history_cap)

        self.tick_count: int = 0
        self.energy_flow_phase: float = 0.0
        self.speed: float = self.config.initial_speed
        self.running: bool = False

        # Performance metrics
        self._tick_times: List[float] = []
        self._tick_time_sum: float = 0.0
        self._tick_time_window: int = TICK_TIME_WINDOW

        self._snapshot: EngineSnapshot = self._build_snapshot()

    def tick(self, speed: Optional[float] = None) -> EngineSnapshot:
        """
        Advance every subsystem by one step.

        Args:
            speed: Current speed factor (scales the energy flow phase only)

        Returns:
            Snapshot of the state after this tick
        """
        start = time.perf_counter()
        if speed is not None:
            self.speed = speed

        self.quantum.update(self.rng)
        self.depin.update(self.quantum, self.rng)
        score = self.optimization.update(self.rng)
        self.portfolio.update(score, self.rng)
        self.ledger.update(self.rng)
        self.energy_flow_phase = (self.energy_flow_phase + ENERGY_FLOW_RATE * self.speed) % 1.0
        self.history.append(
            self.portfolio.average_building_efficiency(),
            self.depin.volumes,
            score,
            self.portfolio.traffic_efficiency,
        )

        self.tick_count += 1
        self._snapshot = self._build_snapshot()

        self._record_tick_time(time.perf_counter() - start)
        return self._snapshot

    def reset(self) -> EngineSnapshot:
        """Restore every subsystem to its initial value"""
        self.quantum.reset()
        self.depin.reset()
        self.optimization.reset()
        self.portfolio.reset()
        self.ledger.reset()
        self.history.reset()

        self.tick_count = 0
        self.energy_flow_phase = 0.0
        self.running = False
        self._tick_times = []
        self._tick_time_sum = 0.0

        self._snapshot = self._build_snapshot()
        return self._snapshot

    def _build_snapshot(self) -> EngineSnapshot:
        """Copy current state into immutable tuples"""
        return EngineSnapshot(
            tick_count=self.tick_count,
            running=self.running,
            speed=self.speed,
            quantum_bits=tuple(bool(b) for b in self.quantum.bits),
            depin_nodes=self.depin.node_states(),
            depin_connections=tuple(self.depin.connections),
            optimization_score=float(self.optimization.score),
            building_efficiencies=tuple(float(e) for e in self.portfolio.building_efficiencies),
            infrastructure_efficiency=float(self.portfolio.infrastructure_efficiency),
            traffic_efficiency=float(self.portfolio.traffic_efficiency),
            energy_flow_phase=float(self.energy_flow_phase),
            ledger_nodes=self.ledger.nodes,
            ledger_transfers=tuple(self.ledger.transfers),
            transactions=tuple(self.ledger.transactions),
            performance_history=self.history.as_tuple(),
        )

    def refresh_snapshot(self) -> EngineSnapshot:
        """Rebuild the snapshot after a control change (speed, running flag)"""
        self._snapshot = self._build_snapshot()
        return self._snapshot

    def get_snapshot(self) -> EngineSnapshot:
        return self._snapshot

    def get_tick_stats(self) -> Dict:
        """
        Get current tick timing statistics.

        Returns:
            Dict with tick_count, avg_tick_time_ms, last_tick_time_ms
        """
        if not self._tick_times:
            return {
                'tick_count': self.tick_count,
                'avg_tick_time_ms': 0.0,
                'last_tick_time_ms': 0.0
            }

        avg_time = self._tick_time_sum / len(self._tick_times)
        last_time = self._tick_times[-1]

        return {
            'tick_count': self.tick_count,
            'avg_tick_time_ms': avg_time * 1000.0,
            'last_tick_time_ms': last_time * 1000.0
        }

    def _record_tick_time(self, elapsed: float):
        """
        Record tick timing for rolling average.

        Args:
            elapsed: Tick time in seconds
        """
        self._tick_times.append(elapsed)
        self._tick_time_sum += elapsed

        # Maintain rolling window
        if len(self._tick_times) > self._tick_time_window:
            removed = self._tick_times.pop(0)
            self._tick_time_sum -= removed

    def print_tick_summary(self):
        """Print tick summary to console (lightweight monitoring)"""
        stats = self.get_tick_stats()
        sample = self.history.latest()
        if sample is None:
            print(f"Tick {stats['tick_count']:5d} | no samples yet")
            return
        print(f"Tick {stats['tick_count']:5d} | "
              f"Energy: {sample.avg_energy_efficiency:6.2f}% | "
              f"DePIN: {sample.depin_volume_sum:6.2f} | "
              f"Opt: {sample.optimization_score:6.2f}% | "
              f"Traffic: {sample.traffic_efficiency:6.2f}% | "
              f"Avg: {stats['avg_tick_time_ms']:6.3f} ms")
