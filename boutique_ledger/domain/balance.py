"""Balance and status derivation - reconciliation rules for sales, rentals and payments"""

import uuid
from dataclasses import replace
from datetime import date, datetime
from typing import Sequence, Tuple
from boutique_ledger.domain.models import (
    Balance,
    Client,
    Payment,
    PaymentApplication,
    Product,
    Rental,
    Sale,
    Transaction,
    PAYMENT_METHODS,
    RENTAL_ACTIVE,
    RENTAL_RETURNED,
    STATUS_PAID,
    STATUS_PARTIAL,
    STATUS_PENDING,
)
from boutique_ledger.domain.exceptions import (
    InsufficientStock,
    InvalidAmount,
    InvalidPaymentMethod,
    InvalidRentalState,
)


def derive_balance(total_cents: int, paid_cents: int) -> Balance:
    """
    Compute outstanding balance and payment status.

    Rules:
    - remaining = total - paid, not clamped (an overpaid row yields a negative remaining)
    - remaining <= 0 → "paid"
    - paid > 0 → "partial"
    - otherwise → "pending"
    """
    remaining = total_cents - paid_cents

    if remaining <= 0:
        status = STATUS_PAID
    elif paid_cents > 0:
        status = STATUS_PARTIAL
    else:
        status = STATUS_PENDING

    return Balance(remaining_cents=remaining, status=status)


def apply_payment(
    transaction: Transaction,
    amount_cents: int,
    method: str = "cash",
    created_by: str = "",
    created_at: datetime | None = None,
) -> PaymentApplication:
    """
    Settle part of a transaction's outstanding balance.

    The input transaction is left untouched; the updated copy and the new
    Payment are returned together so the caller can commit them as one unit.

    Raises:
        InvalidAmount: amount <= 0 or amount > remaining
        InvalidPaymentMethod: method not in PAYMENT_METHODS
    """
    if amount_cents <= 0:
        raise InvalidAmount(f"Payment amount must be positive, got {amount_cents}")

    if amount_cents > transaction.remaining_cents:
        raise InvalidAmount(
            f"Payment of {amount_cents} exceeds remaining balance {transaction.remaining_cents}"
        )

    if method not in PAYMENT_METHODS:
        raise InvalidPaymentMethod(f"Unknown payment method: {method}")

    paid = transaction.paid_cents + amount_cents
    balance = derive_balance(transaction.total_cents, paid)

    updated = replace(
        transaction,
        paid_cents=paid,
        remaining_cents=balance.remaining_cents,
        status=balance.status,
    )

    payment = Payment(
        id=str(uuid.uuid4()),
        transaction_id=transaction.id,
        transaction_kind=transaction.kind,
        amount_cents=amount_cents,
        method=method,
        created_by=created_by,
        created_at=created_at or datetime.now(),
    )

    return PaymentApplication(transaction=updated, payment=payment)


def remaining_after_payment(current_remaining_cents: int, ledger: Sequence[Payment], payment_id: str) -> int:
    """
    Balance left on a transaction right after one of its payments.

    ledger holds every payment of the transaction in recorded order; the
    amounts recorded after payment_id are added back to the current balance.
    """
    ids = [p.id for p in ledger]
    if payment_id not in ids:
        raise ValueError(f"Payment {payment_id} is not in the ledger")
    later = ledger[ids.index(payment_id) + 1:]
    return current_remaining_cents + sum(p.amount_cents for p in later)


def _check_paid(paid_cents: int, total_cents: int) -> None:
    if paid_cents < 0 or paid_cents > total_cents:
        raise InvalidAmount(f"Paid amount must be between 0 and {total_cents}, got {paid_cents}")


def _take_stock(product: Product, quantity: int) -> Product:
    if quantity <= 0:
        raise InvalidAmount(f"Quantity must be positive, got {quantity}")
    if quantity > product.stock:
        raise InsufficientStock(f"Only {product.stock} of '{product.name}' in stock, {quantity} requested")
    return replace(product, stock=product.stock - quantity)


def create_sale(
    client: Client,
    product: Product,
    quantity: int,
    paid_cents: int = 0,
    discount_cents: int = 0,
    created_by: str = "",
    created_at: datetime | None = None,
) -> Tuple[Sale, Product]:
    """
    Build a new sale at the product's list price.

    total = price * quantity - discount

    Returns:
        The sale and the product with its stock decremented
    """
    if discount_cents < 0:
        raise InvalidAmount(f"Discount cannot be negative, got {discount_cents}")

    updated_product = _take_stock(product, quantity)
    total = product.price_cents * quantity - discount_cents
    if total < 0:
        raise InvalidAmount(f"Discount {discount_cents} exceeds sale amount")
    _check_paid(paid_cents, total)

    balance = derive_balance(total, paid_cents)
    sale = Sale(
        id=str(uuid.uuid4()),
        client_id=client.id,
        product_id=product.id,
        quantity=quantity,
        unit_price_cents=product.price_cents,
        discount_cents=discount_cents,
        total_cents=total,
        paid_cents=paid_cents,
        remaining_cents=balance.remaining_cents,
        status=balance.status,
        created_by=created_by,
        created_at=created_at or datetime.now(),
    )
    return sale, updated_product


def rental_days(start_date: date, end_date: date) -> int:
    """Number of billed days, both ends included"""
    return (end_date - start_date).days + 1


def create_rental(
    client: Client,
    product: Product,
    quantity: int,
    start_date: date,
    end_date: date,
    paid_cents: int = 0,
    deposit_cents: int = 0,
    created_by: str = "",
    created_at: datetime | None = None,
) -> Tuple[Rental, Product]:
    """
    Build a new active rental at the product's daily rate.

    total = daily_rate * quantity * days

    Returns:
        The rental and the product with its stock decremented
    """
    if end_date < start_date:
        raise InvalidAmount(f"Rental ends ({end_date}) before it starts ({start_date})")
    if deposit_cents < 0:
        raise InvalidAmount(f"Deposit cannot be negative, got {deposit_cents}")

    updated_product = _take_stock(product, quantity)
    total = product.rental_price_cents * quantity * rental_days(start_date, end_date)
    _check_paid(paid_cents, total)

    balance = derive_balance(total, paid_cents)
    rental = Rental(
        id=str(uuid.uuid4()),
        client_id=client.id,
        product_id=product.id,
        quantity=quantity,
        daily_rate_cents=product.rental_price_cents,
        start_date=start_date,
        end_date=end_date,
        deposit_cents=deposit_cents,
        total_cents=total,
        paid_cents=paid_cents,
        remaining_cents=balance.remaining_cents,
        status=balance.status,
        created_by=created_by,
        created_at=created_at or datetime.now(),
        rental_status=RENTAL_ACTIVE,
    )
    return rental, updated_product


def return_rental(rental: Rental, product: Product | None) -> Tuple[Rental, Product | None]:
    """Mark an active rental returned and put its quantity back in stock"""
    if rental.rental_status != RENTAL_ACTIVE:
        raise InvalidRentalState(f"Rental {rental.id} is {rental.rental_status}, not active")

    returned = replace(rental, rental_status=RENTAL_RETURNED)
    if product is None:
        return returned, None
    return returned, replace(product, stock=product.stock + rental.quantity)


def is_overdue(rental: Rental, today: date) -> bool:
    return rental.rental_status == RENTAL_ACTIVE and today > rental.end_date
