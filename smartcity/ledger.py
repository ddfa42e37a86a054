"""
Toy blockchain ledger.

Keeps two capped lists:
- transfer edges between the fixed ledger nodes (drawn in the 3D scene),
  oldest evicted first;
- human-readable transaction records (shown in the table), newest first.

Records carry a status, but the update rule only ever produces SUCCESS.
"""

from collections import deque
from typing import Deque, Optional, Sequence, Tuple

from .constants import (
    LEDGER_NODES,
    LEDGER_SEED_EDGES,
    LEDGER_EDGE_CAP,
    LEDGER_EDGE_THRESHOLD,
    TRANSACTION_CAP,
    TRANSACTION_THRESHOLD,
    TRANSACTION_PEER_COUNT,
    TRANSACTION_AMOUNT_MAX,
    TRANSACTION_HASH_LENGTH,
)
from .data_types import LedgerNode, LedgerTransfer, TransactionRecord, TransactionStatus
from .rng import uniform, uniform_index, base36_fraction


def default_ledger_nodes() -> Tuple[LedgerNode, ...]:
    return tuple(LedgerNode(label=label, position=position) for label, position in LEDGER_NODES)


def pick_distinct_pair(rng, n: int) -> Tuple[int, int]:
    """
    Draw two distinct indices in [0, n) without replacement.

    The second index is drawn from the n - 1 remaining slots and shifted
    past the first.
    """
    if n < 2:
        raise ValueError(f"Need at least two ledger nodes, got {n}")
    first = uniform_index(rng, n)
    second = uniform_index(rng, n - 1)
    if second >= first:
        second += 1
    return first, second


class LedgerSimulator:
    """Capped transfer edges and transaction records over fixed ledger nodes"""

    def __init__(
        self,
        nodes: Optional[Sequence[LedgerNode]] = None,
        edge_cap: int = LEDGER_EDGE_CAP,
        transaction_cap: int = TRANSACTION_CAP
    ):
        self.nodes: Tuple[LedgerNode, ...] = tuple(nodes) if nodes is not None else default_ledger_nodes()
        self.edge_cap = edge_cap
        self.transaction_cap = transaction_cap

        self.transfers: Deque[LedgerTransfer] = deque(maxlen=edge_cap)
        self.transactions: Deque[TransactionRecord] = deque(maxlen=transaction_cap)
        self._seed_transfers()

    def _seed_transfers(self):
        self.transfers.clear()
        for a, b in LEDGER_SEED_EDGES:
            if a < len(self.nodes) and b < len(self.nodes):
                self.transfers.append(LedgerTransfer(self.nodes[a].position, self.nodes[b].position))

    def update(self, rng):
        """
        Maybe append a transfer edge (p = 0.3), then maybe synthesize a
        transaction record (p = 0.5). The two events are independent.
        """
        if uniform(rng) > LEDGER_EDGE_THRESHOLD:
            src, dst = pick_distinct_pair(rng, len(self.nodes))
            # deque(maxlen) evicts the oldest edge on overflow
            self.transfers.append(LedgerTransfer(self.nodes[src].position, self.nodes[dst].position))

        if uniform(rng) > TRANSACTION_THRESHOLD:
            self.transactions.appendleft(self._synthesize_record(rng))

    def _synthesize_record(self, rng) -> TransactionRecord:
        tx_hash = base36_fraction(uniform(rng), TRANSACTION_HASH_LENGTH)
        from_node = f"Node_{uniform_index(rng, TRANSACTION_PEER_COUNT)}"
        to_node = f"Node_{uniform_index(rng, TRANSACTION_PEER_COUNT)}"
        amount = round(uniform(rng) * TRANSACTION_AMOUNT_MAX, 2)
        return TransactionRecord(
            hash=tx_hash,
            from_node=from_node,
            to_node=to_node,
            amount=amount,
            status=TransactionStatus.SUCCESS,
        )

    def reset(self):
        """Restore the seed edges and clear the transaction table"""
        self._seed_transfers()
        self.transactions.clear()
