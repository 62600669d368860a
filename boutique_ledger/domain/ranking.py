"""Top-N ranking of products and clients by revenue"""

from typing import Dict, Iterable, List
from boutique_ledger.domain.models import RankedEntry, Transaction

DIMENSIONS = ("product_id", "client_id")


def top_by_revenue(transactions: Iterable[Transaction], dimension: str, n: int) -> List[RankedEntry]:
    """
    Group transactions by product or client and keep the N biggest earners.

    Revenue is the sum of transaction totals. Groups with equal revenue keep
    the order in which their key was first encountered.
    """
    if dimension not in DIMENSIONS:
        raise ValueError(f"Cannot rank by '{dimension}', expected one of {DIMENSIONS}")

    groups: Dict[str, RankedEntry] = {}
    for txn in transactions:
        key = getattr(txn, dimension)
        entry = groups.get(key)
        if entry is None:
            entry = RankedEntry(key=key, quantity=0, revenue_cents=0, transaction_count=0)
            groups[key] = entry
        entry.quantity += txn.quantity
        entry.revenue_cents += txn.total_cents
        entry.transaction_count += 1

    # sorted() is stable and dicts keep insertion order
    ranked = sorted(groups.values(), key=lambda e: e.revenue_cents, reverse=True)
    return ranked[:max(n, 0)]
