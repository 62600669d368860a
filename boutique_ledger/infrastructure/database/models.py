"""SQLAlchemy ORM models for the shop records"""

import uuid
from sqlalchemy import Column, String, BigInteger, Date, DateTime, Integer, ForeignKey, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


class ClientRecord(Base):
    """Shop customer"""

    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=_new_id)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    phone = Column(Text, nullable=False, index=True)
    email = Column(Text, nullable=True)
    address = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())


class ProductRecord(Base):
    """Catalogue item"""

    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(Text, nullable=False)
    category = Column(Text, nullable=False, default="")
    size = Column(Text, nullable=False, default="")
    color = Column(Text, nullable=False, default="")
    barcode = Column(Text, nullable=False, default="", index=True)
    price_cents = Column(BigInteger, nullable=False)
    rental_price_cents = Column(BigInteger, nullable=False, default=0)
    purchase_price_cents = Column(BigInteger, nullable=False, default=0)
    stock = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, server_default=func.now())


class SaleRecord(Base):
    """Sale with its running balance"""

    __tablename__ = "sales"

    id = Column(String(36), primary_key=True, default=_new_id)
    client_id = Column(String(36), ForeignKey("clients.id"), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    unit_price_cents = Column(BigInteger, nullable=False)
    discount_cents = Column(BigInteger, nullable=False, default=0)
    total_cents = Column(BigInteger, nullable=False)
    paid_cents = Column(BigInteger, nullable=False, default=0)
    remaining_cents = Column(BigInteger, nullable=False)
    status = Column(Text, nullable=False)
    created_by = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, nullable=False, server_default=func.now(), index=True)


class RentalRecord(Base):
    """Rental with its running balance and lifecycle state"""

    __tablename__ = "rentals"

    id = Column(String(36), primary_key=True, default=_new_id)
    client_id = Column(String(36), ForeignKey("clients.id"), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    daily_rate_cents = Column(BigInteger, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    deposit_cents = Column(BigInteger, nullable=False, default=0)
    total_cents = Column(BigInteger, nullable=False)
    paid_cents = Column(BigInteger, nullable=False, default=0)
    remaining_cents = Column(BigInteger, nullable=False)
    status = Column(Text, nullable=False)
    rental_status = Column(Text, nullable=False, default="active")
    created_by = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, nullable=False, server_default=func.now(), index=True)


class PaymentRecord(Base):
    """Append-only payment ledger entry"""

    __tablename__ = "payments"

    id = Column(String(36), primary_key=True, default=_new_id)
    transaction_id = Column(String(36), nullable=False, index=True)
    transaction_kind = Column(Text, nullable=False)
    amount_cents = Column(BigInteger, nullable=False)
    method = Column(Text, nullable=False)
    sequence = Column(Integer, nullable=False, default=1)  # 1-based position in the transaction's ledger
    created_by = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, nullable=False, server_default=func.now())
