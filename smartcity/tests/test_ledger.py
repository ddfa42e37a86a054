"""
Tests for the toy ledger: transfer edges, transaction records and caps.
"""

import pytest

from smartcity.data_types import LedgerNode, TransactionStatus
from smartcity.ledger import LedgerSimulator, default_ledger_nodes, pick_distinct_pair
from smartcity.rng import make_rng
from smartcity.tests.fixed_random import FixedRandom

BLOCK_A = (0.0, 0.0, 30.0)
BLOCK_B = (5.0, 0.0, 30.0)
BLOCK_C = (-5.0, 0.0, 30.0)


def test_default_nodes():
    nodes = default_ledger_nodes()
    assert [n.label for n in nodes] == ['Block A', 'Block B', 'Block C']
    assert [n.position for n in nodes] == [BLOCK_A, BLOCK_B, BLOCK_C]


def test_seed_edges():
    ledger = LedgerSimulator()
    edges = [(t.from_position, t.to_position) for t in ledger.transfers]
    assert edges == [(BLOCK_A, BLOCK_B), (BLOCK_B, BLOCK_C), (BLOCK_C, BLOCK_A)]
    assert len(ledger.transactions) == 0


def test_pick_distinct_pair():
    assert pick_distinct_pair(FixedRandom([0.0, 0.0]), 3) == (0, 1)
    assert pick_distinct_pair(FixedRandom([0.5, 0.5]), 3) == (1, 2)
    assert pick_distinct_pair(FixedRandom([0.99, 0.99]), 3) == (2, 1)

    rng = make_rng(11)
    for _ in range(200):
        a, b = pick_distinct_pair(rng, 3)
        assert a != b and 0 <= a < 3 and 0 <= b < 3

    with pytest.raises(ValueError):
        pick_distinct_pair(FixedRandom([0.5]), 1)


def test_edge_appended_above_threshold():
    ledger = LedgerSimulator()
    # edge gate 0.8, pair draws 0.0 / 0.5 -> (A, C), record gate 0.4 -> none
    ledger.update(FixedRandom([0.8, 0.0, 0.5, 0.4]))

    assert len(ledger.transfers) == 4
    assert ledger.transfers[-1].from_position == BLOCK_A
    assert ledger.transfers[-1].to_position == BLOCK_C
    assert len(ledger.transactions) == 0


def test_no_edge_at_threshold():
    ledger = LedgerSimulator()
    ledger.update(FixedRandom([0.7, 0.5]))
    assert len(ledger.transfers) == 3
    assert len(ledger.transactions) == 0


def test_record_fields():
    ledger = LedgerSimulator()
    # edge gate 0.0 (skip), record gate 0.9, hash 0.5, from 0.1, to 0.25, amount 0.123
    ledger.update(FixedRandom([0.0, 0.9, 0.5, 0.1, 0.25, 0.123]))

    assert len(ledger.transactions) == 1
    record = ledger.transactions[0]
    assert record.hash == "i"
    assert record.from_node == "Node_1"
    assert record.to_node == "Node_2"
    assert record.amount == 1.23
    assert record.status is TransactionStatus.SUCCESS
    assert record.to_dict()['status'] == 'success'


def test_records_newest_first():
    ledger = LedgerSimulator()
    ledger.update(FixedRandom([0.0, 0.9, 0.5, 0.1, 0.2, 0.1]))
    ledger.update(FixedRandom([0.0, 0.9, 0.5, 0.1, 0.2, 0.2]))
    assert [r.amount for r in ledger.transactions] == [2.0, 1.0]


def test_caps_evict_oldest():
    ledger = LedgerSimulator()
    rng = FixedRandom([0.9])
    for _ in range(30):
        ledger.update(rng)

    assert len(ledger.transfers) == 20
    assert len(ledger.transactions) == 20
    # Seed edges were the oldest and are gone; every survivor is C -> B
    assert all(t.from_position == BLOCK_C and t.to_position == BLOCK_B for t in ledger.transfers)


def test_caps_hold_under_random_updates():
    ledger = LedgerSimulator()
    rng = make_rng(5)
    for _ in range(500):
        ledger.update(rng)
        assert len(ledger.transfers) <= 20
        assert len(ledger.transactions) <= 20
        for record in ledger.transactions:
            assert 0.0 <= record.amount < 10.0
            assert record.status is TransactionStatus.SUCCESS


def test_reset_restores_seed_edges():
    ledger = LedgerSimulator()
    rng = FixedRandom([0.9])
    for _ in range(5):
        ledger.update(rng)
    ledger.reset()

    assert len(ledger.transfers) == 3
    assert ledger.transfers[0].from_position == BLOCK_A
    assert len(ledger.transactions) == 0


def test_custom_nodes_and_caps():
    nodes = [LedgerNode('X', (1.0, 2.0, 3.0)), LedgerNode('Y', (4.0, 5.0, 6.0))]
    ledger = LedgerSimulator(nodes=nodes, edge_cap=4, transaction_cap=2)
    # Only seed edges whose indices exist are kept (X -> Y)
    assert len(ledger.transfers) == 1

    rng = FixedRandom([0.9])
    for _ in range(10):
        ledger.update(rng)
    assert len(ledger.transfers) == 4
    assert len(ledger.transactions) == 2
