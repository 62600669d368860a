"""Unit tests for client debt aggregation"""

from datetime import date, datetime
from boutique_ledger.domain.debts import (
    aggregate_client_debts,
    debt_totals,
    filter_debts,
    find_orphaned_transactions,
    list_outstanding,
)


def test_fully_paid_client_excluded(shop_clients, sale_factory):
    """Test client whose sales are all settled does not appear"""
    transactions = [sale_factory("s1", "client_a", total_cents=100, paid_cents=100)]

    assert aggregate_client_debts(transactions, shop_clients) == []


def test_sales_and_rentals_summed(shop_clients, sale_factory, rental_factory):
    """Test sale remaining 50 + rental remaining 75 → 125 over 2 transactions"""
    transactions = [
        sale_factory("s1", "client_b", total_cents=100, paid_cents=50),
        rental_factory("r1", "client_b", total_cents=75),
    ]

    summaries = aggregate_client_debts(transactions, shop_clients)

    assert len(summaries) == 1
    summary = summaries[0]
    assert summary.client.id == "client_b"
    assert summary.sales_debt_cents == 50
    assert summary.rentals_debt_cents == 75
    assert summary.total_debt_cents == 125
    assert summary.transaction_count == 2
    assert [s.id for s in summary.sales] == ["s1"]
    assert [r.id for r in summary.rentals] == ["r1"]


def test_last_transaction_is_latest(shop_clients, sale_factory, rental_factory):
    transactions = [
        sale_factory("s1", "client_a", total_cents=100, created_at=datetime(2024, 4, 1)),
        rental_factory("r1", "client_a", total_cents=100, created_at=datetime(2024, 6, 1)),
        sale_factory("s2", "client_a", total_cents=100, created_at=datetime(2024, 5, 1)),
    ]

    summary = aggregate_client_debts(transactions, shop_clients)[0]

    assert summary.last_transaction == datetime(2024, 6, 1)


def test_sorted_by_total_debt_descending(shop_clients, sale_factory):
    transactions = [
        sale_factory("s1", "client_a", total_cents=100),
        sale_factory("s2", "client_b", total_cents=900),
    ]

    summaries = aggregate_client_debts(transactions, shop_clients)

    assert [s.client.id for s in summaries] == ["client_b", "client_a"]


def test_unknown_client_skipped(shop_clients, sale_factory):
    """Test dangling client reference is dropped, not raised"""
    transactions = [
        sale_factory("s1", "ghost", total_cents=500),
        sale_factory("s2", "client_a", total_cents=200),
    ]

    summaries = aggregate_client_debts(transactions, shop_clients)

    assert [s.client.id for s in summaries] == ["client_a"]
    assert [t.id for t in find_orphaned_transactions(transactions, shop_clients)] == ["s1"]


def test_orphans_ignore_settled_transactions(shop_clients, sale_factory):
    transactions = [sale_factory("s1", "ghost", total_cents=500, paid_cents=500)]
    assert find_orphaned_transactions(transactions, shop_clients) == []


def test_filter_debts_by_search(shop_clients, sale_factory):
    summaries = aggregate_client_debts(
        [
            sale_factory("s1", "client_a", total_cents=100),
            sale_factory("s2", "client_b", total_cents=200),
        ],
        shop_clients,
    )

    assert [s.client.id for s in filter_debts(summaries, search="haddad")] == ["client_b"]
    assert [s.client.id for s in filter_debts(summaries, search="0550")] == ["client_a"]
    assert [s.client.id for s in filter_debts(summaries, search="AMINA@")] == ["client_a"]


def test_filter_debts_by_date(shop_clients, sale_factory):
    """Test bounds are widened to whole days and either may be omitted"""
    summaries = aggregate_client_debts(
        [
            sale_factory("s1", "client_a", total_cents=100, created_at=datetime(2024, 3, 10, 18, 45)),
            sale_factory("s2", "client_b", total_cents=200, created_at=datetime(2024, 5, 1, 9, 0)),
        ],
        shop_clients,
    )

    assert [s.client.id for s in filter_debts(summaries, start=date(2024, 3, 10), end=date(2024, 3, 10))] == ["client_a"]
    assert [s.client.id for s in filter_debts(summaries, start=date(2024, 4, 1))] == ["client_b"]
    assert [s.client.id for s in filter_debts(summaries, end=date(2024, 4, 1))] == ["client_a"]


def test_debt_totals(shop_clients, sale_factory, rental_factory):
    summaries = aggregate_client_debts(
        [
            sale_factory("s1", "client_a", total_cents=100),
            rental_factory("r1", "client_b", total_cents=300, paid_cents=100),
        ],
        shop_clients,
    )

    totals = debt_totals(summaries)

    assert totals.total_debt_cents == 300
    assert totals.sales_debt_cents == 100
    assert totals.rentals_debt_cents == 200
    assert totals.client_count == 2


def test_list_outstanding_newest_first(shop_clients, shop_products, sale_factory, rental_factory):
    transactions = [
        sale_factory("s1", "client_a", total_cents=100, created_at=datetime(2024, 1, 5)),
        rental_factory("r1", "client_b", total_cents=300, created_at=datetime(2024, 2, 5)),
        sale_factory("s2", "client_a", total_cents=100, paid_cents=100),
        sale_factory("s3", "client_a", total_cents=100, product_id="missing_product"),
    ]

    outstanding = list_outstanding(transactions, shop_clients, shop_products)

    assert [o.transaction.id for o in outstanding] == ["r1", "s1"]
    assert outstanding[0].product.name == "Caftan"


def test_list_outstanding_search_by_barcode(shop_clients, shop_products, sale_factory, rental_factory):
    transactions = [
        sale_factory("s1", "client_a", total_cents=100),
        rental_factory("r1", "client_b", total_cents=300),
    ]

    outstanding = list_outstanding(transactions, shop_clients, shop_products, search="2222")

    assert [o.transaction.id for o in outstanding] == ["r1"]
