"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime
from typing import List, Literal, Optional


class ORMSchema(BaseModel):
    """Response schema readable from domain dataclasses"""

    model_config = ConfigDict(from_attributes=True)


class ClientCreate(BaseModel):
    """Request body for POST /v1/clients"""

    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    email: Optional[str] = None
    address: Optional[str] = None


class ClientSchema(ORMSchema):
    id: str
    first_name: str
    last_name: str
    full_name: str
    phone: str
    email: Optional[str] = None
    address: Optional[str] = None
    created_at: datetime


class ProductCreate(BaseModel):
    """Request body for POST /v1/products"""

    name: str = Field(..., min_length=1)
    price_cents: int = Field(..., ge=0, description="Sale price in cents")
    rental_price_cents: int = Field(0, ge=0, description="Daily rental rate in cents")
    purchase_price_cents: int = Field(0, ge=0, description="Purchase cost in cents")
    stock: int = Field(0, ge=0)
    category: str = ""
    size: str = ""
    color: str = ""
    barcode: str = ""


class ProductSchema(ORMSchema):
    id: str
    name: str
    category: str
    size: str
    color: str
    barcode: str
    price_cents: int
    rental_price_cents: int
    purchase_price_cents: int
    stock: int
    created_at: datetime


class SaleCreate(BaseModel):
    """Request body for POST /v1/sales"""

    client_id: str = Field(..., min_length=1)
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, description="Units sold")
    discount_cents: int = Field(0, description="Discount off the line total in cents")
    paid_cents: int = Field(0, description="Amount collected at checkout in cents")
    created_by: str = ""


class SaleSchema(ORMSchema):
    id: str
    kind: str
    client_id: str
    product_id: str
    quantity: int
    unit_price_cents: int
    discount_cents: int
    total_cents: int
    paid_cents: int
    remaining_cents: int
    status: str
    created_by: str
    created_at: datetime


class RentalCreate(BaseModel):
    """Request body for POST /v1/rentals"""

    client_id: str = Field(..., min_length=1)
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, description="Units rented")
    start_date: date
    end_date: date
    deposit_cents: int = Field(0, description="Refundable deposit in cents")
    paid_cents: int = Field(0, description="Amount collected at checkout in cents")
    created_by: str = ""


class RentalSchema(ORMSchema):
    id: str
    kind: str
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
    status: str
    rental_status: str
    created_by: str
    created_at: datetime


class PaymentCreate(BaseModel):
    """Request body for POST /v1/payments"""

    transaction_id: str = Field(..., min_length=1)
    transaction_kind: Literal["sale", "rental"]
    amount_cents: int = Field(..., description="Amount to settle in cents")
    method: Literal["cash", "card", "transfer"] = "cash"
    created_by: str = ""


class PaymentSchema(ORMSchema):
    id: str
    transaction_id: str
    transaction_kind: str
    amount_cents: int
    method: str
    created_by: str
    created_at: datetime


class PaymentResponse(BaseModel):
    """Response for POST /v1/payments"""

    payment: PaymentSchema
    paid_cents: int
    remaining_cents: int
    status: str


class DebtSummarySchema(ORMSchema):
    client: ClientSchema
    sales: List[SaleSchema]
    rentals: List[RentalSchema]
    sales_debt_cents: int
    rentals_debt_cents: int
    total_debt_cents: int
    transaction_count: int
    last_transaction: datetime


class DebtTotalsSchema(ORMSchema):
    total_debt_cents: int
    sales_debt_cents: int
    rentals_debt_cents: int
    client_count: int


class DebtsResponse(BaseModel):
    """Response for GET /v1/debts"""

    totals: DebtTotalsSchema
    debts: List[DebtSummarySchema]
    skipped_count: int


class OutstandingItem(BaseModel):
    """Single unpaid transaction in the payment worklist"""

    transaction_id: str
    kind: str
    client: ClientSchema
    product_name: str
    total_cents: int
    paid_cents: int
    remaining_cents: int
    created_by: str
    created_at: datetime


class OutstandingResponse(BaseModel):
    """Response for GET /v1/debts/outstanding"""

    total_remaining_cents: int
    transactions: List[OutstandingItem]


class MonthlyDataSchema(ORMSchema):
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


class YearlyDataSchema(ORMSchema):
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


class RankedEntrySchema(ORMSchema):
    key: str
    quantity: int
    revenue_cents: int
    transaction_count: int


class PeriodStatisticsSchema(ORMSchema):
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
    top_products: List[RankedEntrySchema]
    top_clients: List[RankedEntrySchema]


class DashboardSchema(ORMSchema):
    sales_revenue_cents: int
    profit_cents: int
    profit_margin: float
    units_in_stock: int
    low_stock_products: List[ProductSchema]
    rentals_revenue_cents: int
    active_rentals: int
    overdue_rentals: int
    clients_count: int
    recent_sales: int
