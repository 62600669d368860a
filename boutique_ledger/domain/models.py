"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Union

SALE = "sale"
RENTAL = "rental"

STATUS_PAID = "paid"
STATUS_PARTIAL = "partial"
STATUS_PENDING = "pending"

RENTAL_ACTIVE = "active"
RENTAL_RETURNED = "returned"
RENTAL_RESERVED = "reserved"

PAYMENT_METHODS = ("cash", "card", "transfer")


@dataclass
class Client:
    """Shop customer"""

    id: str
    first_name: str
    last_name: str
    phone: str
    created_at: datetime
    email: Optional[str] = None
    address: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass
class Product:
    """Catalogue item that can be sold or rented"""

    id: str
    name: str
    price_cents: int
    rental_price_cents: int
    purchase_price_cents: int
    stock: int
    created_at: datetime
    category: str = ""
    size: str = ""
    color: str = ""
    barcode: str = ""


@dataclass
class Sale:
    """One-time transfer of stock to a client"""

    id: str
    client_id: str
    product_id: str
    quantity: int
    unit_price_cents: int
    discount_cents: int
    total_cents: int
    paid_cents: int
    remaining_cents: int
    status: str  # "paid", "partial" or "pending"
    created_by: str
    created_at: datetime
    kind: str = field(default=SALE, init=False)


@dataclass
class Rental:
    """Stock lent to a client for a date range at a daily rate"""

    id: str
    client_id: str
    product_id: str
    quantity: int
    daily_rate_cents: int
    start_date: date
    end_date: date
    deposit_cents: int
    total_cents: int
    paid_cents: int
    remaining_cents: int
    status: str  # payment status, same values as Sale.status
    created_by: str
    created_at: datetime
    rental_status: str = RENTAL_ACTIVE  # "active", "returned" or "reserved"
    kind: str = field(default=RENTAL, init=False)


Transaction = Union[Sale, Rental]


@dataclass
class Payment:
    """Append-only ledger entry settling part of a transaction"""

    id: str
    transaction_id: str
    transaction_kind: str
    amount_cents: int
    method: str
    created_by: str
    created_at: datetime


@dataclass
class Balance:
    """Derived outstanding balance of a transaction"""

    remaining_cents: int
    status: str


@dataclass
class PaymentApplication:
    """Updated transaction and the payment that produced it, committed together"""

    transaction: Transaction
    payment: Payment


@dataclass
class DebtSummary:
    """Outstanding balances of one client"""

    client: Client
    sales: List[Sale]
    rentals: List[Rental]
    sales_debt_cents: int
    rentals_debt_cents: int
    total_debt_cents: int
    transaction_count: int
    last_transaction: datetime


@dataclass
class DebtTotals:
    """Roll-up of a list of debt summaries"""

    total_debt_cents: int
    sales_debt_cents: int
    rentals_debt_cents: int
    client_count: int


@dataclass
class OutstandingTransaction:
    """Unpaid transaction joined with its client and product"""

    transaction: Transaction
    client: Client
    product: Product


@dataclass
class MonthlyData:
    """Revenue and activity for one calendar month"""

    month: str
    year: int
    month_number: int
    sales_revenue_cents: int
    rentals_revenue_cents: int
    total_revenue_cents: int
    sales_count: int
    rentals_count: int
    new_clients: int
    average_order_value: float


@dataclass
class YearlyData:
    """Revenue and activity for one calendar year"""

    year: int
    total_revenue_cents: int
    sales_revenue_cents: int
    rentals_revenue_cents: int
    total_transactions: int
    sales_count: int
    rentals_count: int
    new_clients: int
    average_monthly_revenue: float
    best_month: str
    worst_month: str
    growth_percent: Optional[float] = None


@dataclass
class RankedEntry:
    """Group of transactions sharing a product or client id"""

    key: str
    quantity: int
    revenue_cents: int
    transaction_count: int


@dataclass
class PeriodStatistics:
    """Financial summary of a closed date interval"""

    start: datetime
    end: datetime
    total_revenue_cents: int
    total_paid_cents: int
    total_remaining_cents: int
    total_transactions: int
    sales_revenue_cents: int
    sales_paid_cents: int
    sales_remaining_cents: int
    sales_count: int
    rentals_revenue_cents: int
    rentals_paid_cents: int
    rentals_remaining_cents: int
    rentals_count: int
    top_products: List[RankedEntry]
    top_clients: List[RankedEntry]


@dataclass
class DashboardOverview:
    """Headline figures for the shop front page"""

    sales_revenue_cents: int
    profit_cents: int
    profit_margin: float
    units_in_stock: int
    low_stock_products: List[Product]
    rentals_revenue_cents: int
    active_rentals: int
    overdue_rentals: int
    clients_count: int
    recent_sales: int
