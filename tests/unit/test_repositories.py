"""Unit tests for the SQLAlchemy repositories"""

import pytest
from datetime import datetime
from boutique_ledger.domain.balance import apply_payment
from boutique_ledger.domain.exceptions import (
    ConcurrentUpdateError,
    InsufficientStock,
    InvalidRentalState,
    MissingReference,
    TransactionHasPayments,
)
from boutique_ledger.infrastructure.database.repositories import (
    ClientRepository,
    PaymentRepository,
    ProductRepository,
    RentalRepository,
    SaleRepository,
)


@pytest.fixture
def stocked(db, shop_clients, shop_products):
    for c in shop_clients:
        ClientRepository(db).save(c)
    for p in shop_products:
        ProductRepository(db).save(p)
    db.commit()
    return db


def test_round_trip_keeps_transaction_kind(stocked, sale_factory, rental_factory):
    SaleRepository(stocked).save(sale_factory("s1", "client_a", total_cents=500))
    RentalRepository(stocked).save(rental_factory("r1", "client_b", total_cents=900))

    sale = SaleRepository(stocked).get("s1")
    rental = RentalRepository(stocked).get("r1")

    assert sale.kind == "sale"
    assert rental.kind == "rental"
    assert rental.rental_status == "active"
    assert SaleRepository(stocked).get("missing") is None


def test_get_by_barcode(stocked):
    assert ProductRepository(stocked).get_by_barcode("2222").id == "prod_caftan"
    assert ProductRepository(stocked).get_by_barcode("9999") is None


def test_record_payment_updates_balance(stocked, sale_factory):
    sale = SaleRepository(stocked).save(sale_factory("s1", "client_a", total_cents=500, paid_cents=200))
    stocked.commit()

    application = apply_payment(sale, 300, created_by="Nadia")
    PaymentRepository(stocked).record(application, expected_paid_cents=200)
    stocked.commit()

    stored = SaleRepository(stocked).get("s1")
    assert stored.paid_cents == 500
    assert stored.remaining_cents == 0
    assert stored.status == "paid"
    assert [p.amount_cents for p in PaymentRepository(stocked).get_for_transaction("s1")] == [300]


def test_record_payment_rejects_stale_balance(stocked, sale_factory):
    """Test second payment validated against an outdated balance is refused"""
    sale = SaleRepository(stocked).save(sale_factory("s1", "client_a", total_cents=500))
    stocked.commit()

    first = apply_payment(sale, 400)
    second = apply_payment(sale, 400)

    PaymentRepository(stocked).record(first, expected_paid_cents=sale.paid_cents)
    stocked.commit()

    with pytest.raises(ConcurrentUpdateError):
        PaymentRepository(stocked).record(second, expected_paid_cents=sale.paid_cents)
    stocked.rollback()

    stored = SaleRepository(stocked).get("s1")
    assert stored.paid_cents == 400
    assert len(PaymentRepository(stocked).get_for_transaction("s1")) == 1


def test_delete_transaction_with_payments_refused(stocked, sale_factory):
    SaleRepository(stocked).save(sale_factory("s1", "client_a", total_cents=500, paid_cents=100))
    SaleRepository(stocked).save(sale_factory("s2", "client_a", total_cents=500))
    stocked.commit()

    with pytest.raises(TransactionHasPayments):
        SaleRepository(stocked).delete("s1")

    assert SaleRepository(stocked).delete("s2") is True
    assert SaleRepository(stocked).delete("s2") is False


def test_payments_are_append_only(stocked):
    with pytest.raises(TransactionHasPayments):
        PaymentRepository(stocked).delete("any")


def test_require_missing_record(stocked):
    assert ClientRepository(stocked).require("client_a").full_name == "Amina Benali"
    with pytest.raises(MissingReference):
        ProductRepository(stocked).require("gone")


def test_mark_returned_keeps_payment_made_after_read(stocked, rental_factory):
    """Test returning a rental read before a payment does not wipe that payment's balance"""
    RentalRepository(stocked).save(rental_factory("r1", "client_b", total_cents=900))
    stocked.commit()

    stale = RentalRepository(stocked).get("r1")
    PaymentRepository(stocked).record(apply_payment(stale, 900), expected_paid_cents=0)
    stocked.commit()

    RentalRepository(stocked).mark_returned(stale.id)
    stocked.commit()

    stored = RentalRepository(stocked).get("r1")
    assert stored.rental_status == "returned"
    assert stored.paid_cents == 900
    assert stored.remaining_cents == 0
    assert stored.status == "paid"


def test_mark_returned_twice_refused(stocked, rental_factory):
    RentalRepository(stocked).save(rental_factory("r1", "client_b", total_cents=900))
    stocked.commit()

    RentalRepository(stocked).mark_returned("r1")
    with pytest.raises(InvalidRentalState):
        RentalRepository(stocked).mark_returned("r1")
    with pytest.raises(InvalidRentalState):
        RentalRepository(stocked).mark_returned("missing")


def test_adjust_stock_never_goes_negative(stocked):
    """Test two sales of the last units: the second is refused, stock stays at zero"""
    products = ProductRepository(stocked)

    products.adjust_stock("prod_caftan", -3)
    stocked.commit()
    with pytest.raises(InsufficientStock):
        products.adjust_stock("prod_caftan", -1)
    stocked.rollback()

    assert products.get("prod_caftan").stock == 0

    products.adjust_stock("prod_caftan", 2)
    stocked.commit()
    assert products.get("prod_caftan").stock == 2

    with pytest.raises(InsufficientStock):
        products.adjust_stock("missing", 1)


def test_payment_ledger_in_recorded_order(stocked, sale_factory):
    """Test payments sharing a timestamp come back in the order they were recorded"""
    sale = SaleRepository(stocked).save(sale_factory("s1", "client_a", total_cents=500))
    stocked.commit()

    when = datetime(2024, 3, 1, 10, 0)
    first = apply_payment(sale, 200, created_at=when)
    PaymentRepository(stocked).record(first, expected_paid_cents=0)
    second = apply_payment(first.transaction, 300, created_at=when)
    PaymentRepository(stocked).record(second, expected_paid_cents=200)
    stocked.commit()

    ledger = PaymentRepository(stocked).get_for_transaction("s1")
    assert [p.id for p in ledger] == [first.payment.id, second.payment.id]
