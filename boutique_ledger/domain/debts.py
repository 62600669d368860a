"""Client debt aggregation - who owes what across sales and rentals"""

from datetime import date
from typing import Dict, Iterable, List, Optional
from boutique_ledger.domain.models import (
    Client,
    DebtSummary,
    DebtTotals,
    OutstandingTransaction,
    Product,
    Transaction,
    SALE,
    RENTAL,
)
from boutique_ledger.utils.date_utils import start_of_day, end_of_day


def aggregate_client_debts(transactions: Iterable[Transaction], clients: Iterable[Client]) -> List[DebtSummary]:
    """
    Group outstanding transactions by client.

    Requirements:
    - Only transactions with remaining > 0 contribute
    - Clients without any outstanding transaction are left out entirely
    - Transactions pointing at an unknown client are skipped (tolerant join)
    - Sorted by total debt, largest first
    """
    clients_by_id = {c.id: c for c in clients}
    debt_map: Dict[str, DebtSummary] = {}

    for txn in transactions:
        if txn.remaining_cents <= 0:
            continue

        client = clients_by_id.get(txn.client_id)
        if client is None:
            continue

        summary = debt_map.get(client.id)
        if summary is None:
            summary = DebtSummary(
                client=client,
                sales=[],
                rentals=[],
                sales_debt_cents=0,
                rentals_debt_cents=0,
                total_debt_cents=0,
                transaction_count=0,
                last_transaction=txn.created_at,
            )
            debt_map[client.id] = summary

        if txn.kind == SALE:
            summary.sales.append(txn)
            summary.sales_debt_cents += txn.remaining_cents
        elif txn.kind == RENTAL:
            summary.rentals.append(txn)
            summary.rentals_debt_cents += txn.remaining_cents
        else:
            raise ValueError(f"Unknown transaction kind: {txn.kind}")

        summary.total_debt_cents += txn.remaining_cents
        summary.transaction_count += 1

        if txn.created_at > summary.last_transaction:
            summary.last_transaction = txn.created_at

    return sorted(debt_map.values(), key=lambda s: s.total_debt_cents, reverse=True)


def find_orphaned_transactions(transactions: Iterable[Transaction], clients: Iterable[Client]) -> List[Transaction]:
    """Outstanding transactions whose client id does not resolve"""
    client_ids = {c.id for c in clients}
    return [t for t in transactions if t.remaining_cents > 0 and t.client_id not in client_ids]


def _client_matches(client: Client, search: str) -> bool:
    needle = search.lower()
    return (
        needle in client.first_name.lower()
        or needle in client.last_name.lower()
        or search in client.phone
        or (client.email is not None and needle in client.email.lower())
    )


def filter_debts(
    summaries: Iterable[DebtSummary],
    search: Optional[str] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> List[DebtSummary]:
    """
    Narrow debt summaries by client text and last-transaction date.

    Either date bound may be omitted; given bounds are widened to whole days.
    Order of the input is preserved.
    """
    lower = start_of_day(start) if start else None
    upper = end_of_day(end) if end else None

    result = []
    for summary in summaries:
        if search and not _client_matches(summary.client, search):
            continue
        last = summary.last_transaction.replace(tzinfo=None)
        if lower is not None and last < lower:
            continue
        if upper is not None and last > upper:
            continue
        result.append(summary)
    return result


def debt_totals(summaries: Iterable[DebtSummary]) -> DebtTotals:
    summaries = list(summaries)
    return DebtTotals(
        total_debt_cents=sum(s.total_debt_cents for s in summaries),
        sales_debt_cents=sum(s.sales_debt_cents for s in summaries),
        rentals_debt_cents=sum(s.rentals_debt_cents for s in summaries),
        client_count=len(summaries),
    )


def list_outstanding(
    transactions: Iterable[Transaction],
    clients: Iterable[Client],
    products: Iterable[Product],
    search: Optional[str] = None,
) -> List[OutstandingTransaction]:
    """
    Unpaid transactions ready for payment collection, newest first.

    Rows whose client or product cannot be resolved are dropped. The search
    term matches client names and phone, product name and barcode.
    """
    clients_by_id = {c.id: c for c in clients}
    products_by_id = {p.id: p for p in products}

    outstanding = []
    for txn in transactions:
        if txn.remaining_cents <= 0:
            continue
        client = clients_by_id.get(txn.client_id)
        product = products_by_id.get(txn.product_id)
        if client is None or product is None:
            continue
        outstanding.append(OutstandingTransaction(transaction=txn, client=client, product=product))

    if search:
        needle = search.lower()
        outstanding = [
            o for o in outstanding
            if needle in o.client.first_name.lower()
            or needle in o.client.last_name.lower()
            or search in o.client.phone
            or needle in o.product.name.lower()
            or search in o.product.barcode
        ]

    return sorted(outstanding, key=lambda o: o.transaction.created_at, reverse=True)
