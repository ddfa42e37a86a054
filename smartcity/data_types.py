"""
Data types for engine state and published snapshots.

Snapshot types are frozen dataclasses holding tuples so renderers can keep
references across frames without observing later ticks.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Optional, Tuple
from enum import Enum

Vec3 = Tuple[float, float, float]


# ============================================================================
# Configuration
# ============================================================================

@dataclass
class EngineConfig:
    """Overridable engine parameters (loaded from YAML by loader.py)"""
    seed: Optional[int] = None  # None = non-reproducible run
    qubit_count: int = 5
    initial_speed: float = 1.0
    history_cap: int = 20
    ledger_edge_cap: int = 20
    transaction_cap: int = 20
    description: Optional[str] = None


# ============================================================================
# Clock
# ============================================================================

class ClockState(Enum):
    """Lifecycle state of the simulation clock"""
    IDLE = "idle"
    RUNNING = "running"


# ============================================================================
# DePIN Network
# ============================================================================

@dataclass(frozen=True)
class DePINConnection:
    """Static grid edge between two DePIN node positions"""
    start: Vec3
    end: Vec3


@dataclass(frozen=True)
class DePINNodeState:
    """Per-node view of the DePIN network"""
    index: int
    position: Vec3
    active: bool
    transaction_volume: float


# ============================================================================
# Ledger
# ============================================================================

class TransactionStatus(Enum):
    """Transaction outcome. Only SUCCESS is produced by the update rule."""
    SUCCESS = "success"
    FAILURE = "failure"
    PENDING = "pending"


@dataclass(frozen=True)
class LedgerNode:
    """Fixed blockchain node"""
    label: str
    position: Vec3


@dataclass(frozen=True)
class LedgerTransfer:
    """Transfer edge between two ledger node positions"""
    from_position: Vec3
    to_position: Vec3


@dataclass(frozen=True)
class TransactionRecord:
    """Human-readable DePIN transaction row"""
    hash: str
    from_node: str
    to_node: str
    amount: float
    status: TransactionStatus = TransactionStatus.SUCCESS

    def to_dict(self) -> dict:
        return {
            'hash': self.hash,
            'from': self.from_node,
            'to': self.to_node,
            'amount': self.amount,
            'status': self.status.value,
        }


# ============================================================================
# Performance History
# ============================================================================

@dataclass(frozen=True)
class PerformanceSample:
    """
    One chart point.

    Attributes:
        step: 1-based running counter
        avg_energy_efficiency: mean building efficiency, percent
        depin_volume_sum: total DePIN transaction volume
        optimization_score: annealing score, percent
        traffic_efficiency: traffic efficiency, percent
    """
    step: int
    avg_energy_efficiency: float
    depin_volume_sum: float
    optimization_score: float
    traffic_efficiency: float


# ============================================================================
# Snapshot
# ============================================================================

@dataclass(frozen=True)
class EngineSnapshot:
    """Complete read-only engine state as of the end of the latest tick"""
    tick_count: int
    running: bool
    speed: float
    quantum_bits: Tuple[bool, ...]
    depin_nodes: Tuple[DePINNodeState, ...]
    depin_connections: Tuple[DePINConnection, ...]
    optimization_score: float
    building_efficiencies: Tuple[float, ...]
    infrastructure_efficiency: float
    traffic_efficiency: float
    energy_flow_phase: float
    ledger_nodes: Tuple[LedgerNode, ...]
    ledger_transfers: Tuple[LedgerTransfer, ...]
    transactions: Tuple[TransactionRecord, ...]
    performance_history: Tuple[PerformanceSample, ...]

    @property
    def depin_active(self) -> Tuple[bool, ...]:
        return tuple(n.active for n in self.depin_nodes)

    @property
    def depin_volumes(self) -> Tuple[float, ...]:
        return tuple(n.transaction_volume for n in self.depin_nodes)

    @property
    def latest_sample(self) -> Optional[PerformanceSample]:
        return self.performance_history[-1] if self.performance_history else None

    def to_dict(self) -> Dict:
        """Plain JSON-friendly structure (enums rendered as their values)"""
        data = asdict(self)
        data['transactions'] = [t.to_dict() for t in self.transactions]
        return data
