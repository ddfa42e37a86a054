"""
Tests for the per-tick update rules of each subsystem.

Fixed random sources make every draw known, so the update rules can be
checked exactly.
"""

import numpy as np
import pytest

from smartcity.depin import DePINNetwork, grid_connections, grid_positions
from smartcity.history import PerformanceHistory
from smartcity.optimization import OptimizationProcess
from smartcity.portfolio import CityPortfolio
from smartcity.quantum import QuantumRegister
from smartcity.rng import make_rng
from smartcity.tests.fixed_random import FixedRandom


# ============================================================================
# Quantum Register
# ============================================================================

def test_register_starts_all_false():
    register = QuantumRegister()
    assert register.size == 5
    assert not register.bits.any()


def test_register_coin_flip_threshold():
    register = QuantumRegister()
    register.update(FixedRandom([0.6, 0.5, 0.4, 0.51, 0.0]))
    assert register.bits.tolist() == [True, False, False, True, False]


def test_register_has_no_memory():
    register = QuantumRegister()
    register.update(FixedRandom([0.9]))
    assert register.bits.all()
    register.update(FixedRandom([0.1]))
    assert not register.bits.any()


def test_register_gate_wraps_index():
    register = QuantumRegister()
    register.update(FixedRandom([0.9, 0.1, 0.1, 0.1, 0.1]))
    assert register.gate(0) and register.gate(5)
    assert not register.gate(6)


def test_register_rejects_empty():
    with pytest.raises(ValueError):
        QuantumRegister(0)


# ============================================================================
# DePIN Network
# ============================================================================

def register_with(bits):
    register = QuantumRegister(len(bits))
    register.bits = np.array(bits, dtype=bool)
    return register


def test_grid_positions_layout():
    positions = grid_positions()
    assert len(positions) == 9
    assert positions[0] == (35.0, 0.0, -35.0)
    assert positions[2] == (45.0, 0.0, -35.0)
    assert positions[3] == (35.0, 0.0, -30.0)
    assert positions[8] == (45.0, 0.0, -25.0)


def test_grid_connections_adjacency():
    positions = grid_positions()
    connections = grid_connections(positions)
    assert len(connections) == 12

    assert connections[0].start == positions[0] and connections[0].end == positions[1]
    assert connections[1].start == positions[0] and connections[1].end == positions[3]

    # No edge leaves the last column to the right or the last row downward
    pairs = {(positions.index(c.start), positions.index(c.end)) for c in connections}
    assert (2, 3) not in pairs
    assert (5, 6) not in pairs
    assert all(a < 6 for a, b in pairs if b == a + 3)


def test_depin_inactive_gate_blocks_activity():
    network = DePINNetwork()
    bits = [True, False, False, False, False]
    network.update(register_with(bits), FixedRandom([0.9]))

    assert network.active.tolist() == [i % 5 == 0 for i in range(9)]
    assert np.allclose(network.volumes, [0.1 if i % 5 == 0 else 0.0 for i in range(9)])


def test_depin_activity_threshold():
    network = DePINNetwork()
    network.update(register_with([True] * 5), FixedRandom([0.3]))
    assert not network.active.any()
    network.update(register_with([True] * 5), FixedRandom([0.31]))
    assert network.active.all()


def test_depin_consumes_one_draw_per_node():
    rng = FixedRandom([0.5])
    DePINNetwork().update(register_with([False] * 5), rng)
    assert rng.calls == 9


def test_depin_volume_never_negative():
    network = DePINNetwork()
    network.update(register_with([True] * 5), FixedRandom([0.9]))
    for _ in range(10):
        network.update(register_with([False] * 5), FixedRandom([0.9]))
        assert (network.volumes >= 0.0).all()
    assert np.allclose(network.volumes, 0.0)


def test_depin_reset():
    network = DePINNetwork()
    network.update(register_with([True] * 5), FixedRandom([0.9]))
    network.reset()
    assert not network.active.any()
    assert network.total_volume() == 0.0
    assert len(network.connections) == 12


def test_depin_gates_wrap_around_small_register():
    # Node i reads qubit i mod 2: even nodes open, odd nodes closed
    network = DePINNetwork()
    network.update(register_with([True, False]), FixedRandom([0.9]))
    assert network.active.tolist() == [i % 2 == 0 for i in range(9)]


# ============================================================================
# Optimization Process
# ============================================================================

def test_optimization_step():
    process = OptimizationProcess()
    assert process.update(FixedRandom([0.6])) == pytest.approx(0.03)


def test_optimization_non_decreasing_and_saturates():
    process = OptimizationProcess()
    rng = make_rng(3)
    previous = 0.0
    for _ in range(200):
        score = process.update(rng)
        assert previous <= score <= 1.0
        previous = score
    assert process.converged

    process.reset()
    assert process.score == 0.0


# ============================================================================
# City Portfolio
# ============================================================================

def test_portfolio_update_formula():
    portfolio = CityPortfolio()
    portfolio.update(0.03, FixedRandom([0.6]))
    assert np.allclose(portfolio.building_efficiencies, 0.5056)
    assert portfolio.infrastructure_efficiency == pytest.approx(0.5023)
    assert portfolio.traffic_efficiency == pytest.approx(0.5023)


def test_portfolio_draw_order():
    # 9 building draws, then infrastructure, then traffic
    values = [0.5] * 9 + [1.0, 0.0]
    portfolio = CityPortfolio()
    portfolio.update(0.0, FixedRandom(values))
    assert np.allclose(portfolio.building_efficiencies, 0.5)
    assert portfolio.infrastructure_efficiency == pytest.approx(0.51)
    assert portfolio.traffic_efficiency == pytest.approx(0.49)


def test_portfolio_clamps_both_ends():
    portfolio = CityPortfolio()
    portfolio.building_efficiencies[:] = 1.0
    portfolio.infrastructure_efficiency = 1.0
    portfolio.update(1.0, FixedRandom([0.99]))
    assert np.all(portfolio.building_efficiencies == 1.0)
    assert portfolio.infrastructure_efficiency == 1.0

    portfolio.building_efficiencies[:] = 0.0
    portfolio.traffic_efficiency = 0.0
    portfolio.update(0.0, FixedRandom([0.0]))
    assert np.all(portfolio.building_efficiencies == 0.0)
    assert portfolio.traffic_efficiency == 0.0


def test_portfolio_average_building_efficiency():
    portfolio = CityPortfolio()
    assert portfolio.average_building_efficiency() == 0.5
    portfolio.building_efficiencies[:3] = 1.0
    assert portfolio.average_building_efficiency() == pytest.approx(2.0 / 3.0)

    assert CityPortfolio(building_count=0).average_building_efficiency() == 0.0


def test_portfolio_reset():
    portfolio = CityPortfolio()
    portfolio.update(1.0, FixedRandom([0.9]))
    portfolio.reset()
    assert np.all(portfolio.building_efficiencies == 0.5)
    assert portfolio.infrastructure_efficiency == 0.5
    assert portfolio.traffic_efficiency == 0.5


# ============================================================================
# Performance History
# ============================================================================

def test_history_sample_metrics():
    portfolio = CityPortfolio()
    portfolio.building_efficiencies[-1] = 1.0
    history = PerformanceHistory()
    sample = history.append(portfolio.average_building_efficiency(), [0.1] * 9, 0.25, 0.75)
    assert sample.step == 1
    assert sample.avg_energy_efficiency == pytest.approx(100.0 * 5.0 / 9.0)
    assert sample.depin_volume_sum == pytest.approx(0.9)
    assert sample.optimization_score == pytest.approx(25.0)
    assert sample.traffic_efficiency == pytest.approx(75.0)


def test_history_cap_and_consecutive_steps():
    history = PerformanceHistory()
    for _ in range(25):
        history.append(0.5, [0.0] * 9, 0.0, 0.5)

    steps = [s.step for s in history.samples]
    assert len(history) == 20
    assert steps == list(range(6, 26))
    assert history.latest().step == 25


def test_history_reset_restarts_steps():
    history = PerformanceHistory()
    history.append(0.5, [0.0] * 9, 0.0, 0.5)
    history.reset()
    assert len(history) == 0
    assert history.latest() is None
    assert history.append(0.5, [0.0] * 9, 0.0, 0.5).step == 1
