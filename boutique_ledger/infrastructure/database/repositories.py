"""Data access layer for shop records"""

from dataclasses import asdict
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from boutique_ledger.infrastructure.database.models import (
    ClientRecord,
    PaymentRecord,
    ProductRecord,
    RentalRecord,
    SaleRecord,
)
from boutique_ledger.domain.models import (
    Client,
    Payment,
    PaymentApplication,
    Product,
    Rental,
    Sale,
    Transaction,
    SALE,
    RENTAL,
    RENTAL_ACTIVE,
    RENTAL_RETURNED,
)
from boutique_ledger.domain.exceptions import (
    ConcurrentUpdateError,
    InsufficientStock,
    InvalidRentalState,
    MissingReference,
    TransactionHasPayments,
)


class RecordRepository:
    """Get/save/delete for one entity type, converting between ORM rows and domain dataclasses"""

    model: Any = None
    entity: Any = None
    order_by: str = "created_at"

    def __init__(self, db: Session):
        self.db = db

    def to_domain(self, row) -> Any:
        fields = {
            name: getattr(row, name)
            for name in self.entity.__dataclass_fields__
            if self.entity.__dataclass_fields__[name].init
        }
        return self.entity(**fields)

    def to_columns(self, entity) -> Dict[str, Any]:
        columns = self.model.__table__.columns.keys()
        return {k: v for k, v in asdict(entity).items() if k in columns}

    def get_all(self) -> List[Any]:
        rows = self.db.query(self.model).order_by(getattr(self.model, self.order_by).desc()).all()
        return [self.to_domain(row) for row in rows]

    def get(self, record_id: str) -> Optional[Any]:
        row = self.db.get(self.model, record_id)
        return self.to_domain(row) if row else None

    def require(self, record_id: str) -> Any:
        """Like get, but a missing row raises MissingReference"""
        entity = self.get(record_id)
        if entity is None:
            raise MissingReference(f"{self.entity.__name__} {record_id} does not exist")
        return entity

    def save(self, entity) -> Any:
        """Insert or update by primary key"""
        self.db.merge(self.model(**self.to_columns(entity)))
        self.db.flush()
        return entity

    def delete(self, record_id: str) -> bool:
        row = self.db.get(self.model, record_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.flush()
        return True


class ClientRepository(RecordRepository):
    """Repository for clients"""

    model = ClientRecord
    entity = Client


class ProductRepository(RecordRepository):
    """Repository for products"""

    model = ProductRecord
    entity = Product

    def get_by_barcode(self, barcode: str) -> Optional[Product]:
        row = self.db.query(ProductRecord).filter(ProductRecord.barcode == barcode).first()
        return self.to_domain(row) if row else None

    def adjust_stock(self, product_id: str, delta: int) -> None:
        """
        Add delta units to stock (negative to take units out) in a single UPDATE.

        The row is only changed when stock stays non-negative, so two sales of
        the last unit cannot both succeed.

        Raises:
            InsufficientStock: Product missing or fewer than -delta units left
        """
        updated = (
            self.db.query(ProductRecord)
            .filter(ProductRecord.id == product_id, ProductRecord.stock + delta >= 0)
            .update({ProductRecord.stock: ProductRecord.stock + delta}, synchronize_session=False)
        )
        if updated != 1:
            raise InsufficientStock(f"Cannot change stock of product {product_id} by {delta}")
        self.db.flush()


class _TransactionRepository(RecordRepository):
    def delete(self, record_id: str) -> bool:
        """Remove a transaction unless money was already collected on it"""
        row = self.db.get(self.model, record_id)
        if row is None:
            return False
        if row.paid_cents > 0:
            raise TransactionHasPayments(f"Transaction {record_id} has {row.paid_cents} paid and cannot be deleted")
        self.db.delete(row)
        self.db.flush()
        return True


class SaleRepository(_TransactionRepository):
    """Repository for sales"""

    model = SaleRecord
    entity = Sale


class RentalRepository(_TransactionRepository):
    """Repository for rentals"""

    model = RentalRecord
    entity = Rental

    def mark_returned(self, rental_id: str) -> None:
        """
        Flip an active rental to returned without touching its balance columns.

        Raises:
            InvalidRentalState: Rental missing or no longer active
        """
        updated = (
            self.db.query(RentalRecord)
            .filter(RentalRecord.id == rental_id, RentalRecord.rental_status == RENTAL_ACTIVE)
            .update({RentalRecord.rental_status: RENTAL_RETURNED}, synchronize_session=False)
        )
        if updated != 1:
            raise InvalidRentalState(f"Rental {rental_id} is not active")
        self.db.flush()


class PaymentRepository(RecordRepository):
    """Repository for the payment ledger"""

    model = PaymentRecord
    entity = Payment

    def delete(self, record_id: str) -> bool:
        raise TransactionHasPayments("Payments are append-only")

    def get_for_transaction(self, transaction_id: str) -> List[Payment]:
        """Payments of one transaction in the order they were recorded"""
        rows = (
            self.db.query(PaymentRecord)
            .filter(PaymentRecord.transaction_id == transaction_id)
            .order_by(PaymentRecord.sequence.asc())
            .all()
        )
        return [self.to_domain(row) for row in rows]

    def record(self, application: PaymentApplication, expected_paid_cents: int) -> Payment:
        """
        Write the payment and the transaction's new balance in one flush.

        The balance update only applies if paid_cents still equals the value
        the payment was validated against, so two concurrent payments on the
        same transaction cannot both succeed.

        Raises:
            ConcurrentUpdateError: Transaction missing or changed since it was read
        """
        txn: Transaction = application.transaction
        model = _transaction_model(txn.kind)

        updated = (
            self.db.query(model)
            .filter(model.id == txn.id, model.paid_cents == expected_paid_cents)
            .update(
                {
                    model.paid_cents: txn.paid_cents,
                    model.remaining_cents: txn.remaining_cents,
                    model.status: txn.status,
                },
                synchronize_session=False,
            )
        )
        if updated != 1:
            raise ConcurrentUpdateError(f"Balance of {txn.kind} {txn.id} changed before the payment was recorded")

        # The balance update above serialises writers on this transaction
        sequence = self.db.query(PaymentRecord).filter(PaymentRecord.transaction_id == txn.id).count() + 1
        self.db.add(PaymentRecord(sequence=sequence, **self.to_columns(application.payment)))
        self.db.flush()
        return application.payment


def _transaction_model(kind: str):
    if kind == SALE:
        return SaleRecord
    if kind == RENTAL:
        return RentalRecord
    raise ValueError(f"Unknown transaction kind: {kind}")
