"""Unit tests for balance derivation, payment application and transaction creation"""

import pytest
from datetime import date, datetime
from boutique_ledger.domain.balance import (
    apply_payment,
    create_rental,
    create_sale,
    derive_balance,
    is_overdue,
    remaining_after_payment,
    rental_days,
    return_rental,
)
from boutique_ledger.domain.exceptions import InsufficientStock, InvalidAmount, InvalidPaymentMethod, InvalidRentalState


def test_derive_balance_statuses():
    """Test status derivation from total and paid"""
    assert derive_balance(50000, 0).status == "pending"
    assert derive_balance(50000, 20000).status == "partial"
    assert derive_balance(50000, 50000).status == "paid"
    assert derive_balance(0, 0).status == "paid"  # nothing owed


def test_derive_balance_remaining():
    assert derive_balance(50000, 20000).remaining_cents == 30000
    assert derive_balance(50000, 50000).remaining_cents == 0


def test_derive_balance_overpayment_passes_through():
    """Test overpaid rows keep a negative remaining and count as paid"""
    balance = derive_balance(50000, 60000)
    assert balance.remaining_cents == -10000
    assert balance.status == "paid"


def test_derive_balance_is_idempotent():
    assert derive_balance(12345, 678) == derive_balance(12345, 678)


def test_apply_payment_rejects_more_than_remaining(sale_factory):
    """Test 500 total / 200 paid: 301 is refused, 300 settles"""
    sale = sale_factory("s1", "client_a", total_cents=500, paid_cents=200)

    with pytest.raises(InvalidAmount):
        apply_payment(sale, 301)

    # No state change on rejection
    assert sale.paid_cents == 200
    assert sale.remaining_cents == 300

    application = apply_payment(sale, 300)
    assert application.transaction.status == "paid"
    assert application.transaction.remaining_cents == 0
    assert application.transaction.paid_cents == 500


@pytest.mark.parametrize("amount", [0, -100])
def test_apply_payment_rejects_non_positive(sale_factory, amount):
    sale = sale_factory("s1", "client_a", total_cents=500)
    with pytest.raises(InvalidAmount):
        apply_payment(sale, amount)


def test_apply_payment_rejects_unknown_method(sale_factory):
    sale = sale_factory("s1", "client_a", total_cents=500)
    with pytest.raises(InvalidPaymentMethod):
        apply_payment(sale, 100, method="cheque")


def test_apply_payment_partial_keeps_balance_consistent(sale_factory):
    """Test paid + remaining == total after a partial payment"""
    sale = sale_factory("s1", "client_a", total_cents=99999)
    application = apply_payment(sale, 33333, method="card", created_by="Nadia")

    updated = application.transaction
    assert updated.status == "partial"
    assert updated.paid_cents + updated.remaining_cents == updated.total_cents
    assert sale.paid_cents == 0  # input left untouched


def test_apply_payment_produces_payment_record(rental_factory):
    """Test payment carries the transaction reference and kind"""
    rental = rental_factory("r1", "client_b", total_cents=24000)
    when = datetime(2024, 3, 1, 12, 0)

    application = apply_payment(rental, 10000, method="transfer", created_by="Nadia", created_at=when)

    payment = application.payment
    assert payment.transaction_id == "r1"
    assert payment.transaction_kind == "rental"
    assert payment.amount_cents == 10000
    assert payment.method == "transfer"
    assert payment.created_at == when
    assert application.transaction.kind == "rental"
    assert application.transaction.rental_status == "active"


def test_create_sale_totals_and_stock(shop_clients, shop_products):
    """Test total = price * quantity - discount and stock decrement"""
    dress = shop_products[0]
    sale, product = create_sale(shop_clients[0], dress, quantity=2, paid_cents=40000, discount_cents=5000)

    assert sale.total_cents == 95000  # 2 * 50000 - 5000
    assert sale.unit_price_cents == 50000
    assert sale.remaining_cents == 55000
    assert sale.status == "partial"
    assert product.stock == 8
    assert dress.stock == 10


def test_create_sale_unpaid_is_pending(shop_clients, shop_products):
    sale, _ = create_sale(shop_clients[0], shop_products[0], quantity=1)
    assert sale.status == "pending"
    assert sale.kind == "sale"


def test_create_sale_rejects_overpayment(shop_clients, shop_products):
    with pytest.raises(InvalidAmount):
        create_sale(shop_clients[0], shop_products[0], quantity=1, paid_cents=50001)


def test_create_sale_rejects_insufficient_stock(shop_clients, shop_products):
    with pytest.raises(InsufficientStock):
        create_sale(shop_clients[0], shop_products[1], quantity=4)


def test_create_sale_rejects_zero_quantity(shop_clients, shop_products):
    with pytest.raises(InvalidAmount):
        create_sale(shop_clients[0], shop_products[0], quantity=0)


def test_rental_days_inclusive():
    assert rental_days(date(2024, 5, 1), date(2024, 5, 1)) == 1
    assert rental_days(date(2024, 5, 1), date(2024, 5, 3)) == 3


def test_create_rental_totals(shop_clients, shop_products):
    """Test total = daily rate * quantity * days"""
    caftan = shop_products[1]
    rental, product = create_rental(
        shop_clients[1],
        caftan,
        quantity=2,
        start_date=date(2024, 5, 1),
        end_date=date(2024, 5, 3),
        paid_cents=48000,
        deposit_cents=20000,
    )

    assert rental.total_cents == 48000  # 8000 * 2 * 3
    assert rental.status == "paid"
    assert rental.rental_status == "active"
    assert rental.deposit_cents == 20000
    assert product.stock == 1


def test_create_rental_rejects_inverted_dates(shop_clients, shop_products):
    with pytest.raises(InvalidAmount):
        create_rental(shop_clients[1], shop_products[1], 1, date(2024, 5, 3), date(2024, 5, 1))


def test_return_rental_restores_stock(rental_factory, shop_products):
    rental = rental_factory("r1", "client_b", total_cents=24000)
    caftan = shop_products[1]

    returned, product = return_rental(rental, caftan)

    assert returned.rental_status == "returned"
    assert product.stock == caftan.stock + 1

    with pytest.raises(InvalidRentalState):
        return_rental(returned, product)


def test_is_overdue(rental_factory):
    rental = rental_factory("r1", "client_b", total_cents=24000, end_date=date(2024, 2, 22))

    assert not is_overdue(rental, date(2024, 2, 22))
    assert is_overdue(rental, date(2024, 2, 23))

    returned = rental_factory("r2", "client_b", total_cents=24000, rental_status="returned")
    assert not is_overdue(returned, date(2025, 1, 1))


def test_remaining_after_payment_replays_later_payments(sale_factory):
    """Test 500 sale paid 200 then 300: balance after each payment"""
    sale = sale_factory("s1", "client_a", total_cents=500)
    first = apply_payment(sale, 200, created_at=datetime(2024, 3, 1, 10, 0))
    second = apply_payment(first.transaction, 300, created_at=datetime(2024, 3, 1, 10, 0))
    ledger = [first.payment, second.payment]
    current = second.transaction.remaining_cents

    assert remaining_after_payment(current, ledger, first.payment.id) == 300
    assert remaining_after_payment(current, ledger, second.payment.id) == 0


def test_remaining_after_payment_unknown_id(sale_factory):
    sale = sale_factory("s1", "client_a", total_cents=500)
    with pytest.raises(ValueError):
        remaining_after_payment(sale.remaining_cents, [], "missing")
