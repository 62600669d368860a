"""Revenue reports and statistics - /v1/reports"""

from datetime import date, datetime
from typing import List, Literal, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from boutique_ledger.api.v1.schemas import (
    DashboardSchema,
    MonthlyDataSchema,
    PeriodStatisticsSchema,
    RankedEntrySchema,
    YearlyDataSchema,
)
from boutique_ledger.api.v1.receipts import DocumentFormat, document_response
from boutique_ledger.api.dependencies import get_request_id, get_shop_details
from boutique_ledger.config import settings
from boutique_ledger.domain.debts import find_orphaned_transactions
from boutique_ledger.domain.periods import (
    PERIODS,
    dashboard_overview,
    monthly_report,
    period_statistics,
    resolve_period,
    yearly_report,
)
from boutique_ledger.domain.ranking import top_by_revenue
from boutique_ledger.utils.date_utils import within_interval
from boutique_ledger.infrastructure.database.session import get_db
from boutique_ledger.infrastructure.database.repositories import (
    ClientRepository,
    ProductRepository,
    RentalRepository,
    SaleRepository,
)
from boutique_ledger.infrastructure.documents.receipts import ShopDetails
from boutique_ledger.infrastructure.documents.reports import (
    render_monthly_report_html,
    render_statistics_report_html,
)
from boutique_ledger.infrastructure.observability.logging import log_skipped_rows
from boutique_ledger.infrastructure.observability.metrics import skipped_rows_counter

router = APIRouter()


def _period(period: str, start_date: Optional[date], end_date: Optional[date]):
    if period not in PERIODS:
        raise HTTPException(status_code=400, detail=f"Unknown period '{period}', expected one of {PERIODS}")
    return resolve_period(period, date.today(), start_date, end_date)


@router.get("/reports/monthly", response_model=List[MonthlyDataSchema])
def get_monthly_report(
    year: Optional[int] = Query(None, ge=1900, le=9999, description="Defaults to the current year"),
    db: Session = Depends(get_db),
):
    """Twelve monthly entries for the given year, empty months included"""
    year = year or date.today().year
    months = monthly_report(
        year,
        SaleRepository(db).get_all(),
        RentalRepository(db).get_all(),
        ClientRepository(db).get_all(),
    )
    return [MonthlyDataSchema.model_validate(m) for m in months]


@router.get("/reports/monthly/document")
def get_monthly_report_document(
    year: Optional[int] = Query(None, ge=1900, le=9999, description="Defaults to the current year"),
    output: DocumentFormat = Query("html", alias="format"),
    db: Session = Depends(get_db),
    shop: ShopDetails = Depends(get_shop_details),
):
    year = year or date.today().year
    months = monthly_report(
        year,
        SaleRepository(db).get_all(),
        RentalRepository(db).get_all(),
        ClientRepository(db).get_all(),
    )
    html = render_monthly_report_html(year, months, shop, datetime.now())
    return document_response(html, output, f"monthly-report-{year}")


@router.get("/reports/yearly", response_model=List[YearlyDataSchema])
def get_yearly_report(db: Session = Depends(get_db)):
    """
    One entry per year with activity, most recent first.

    growth_percent is null for the oldest year and whenever the previous
    year had no revenue.
    """
    years = yearly_report(
        SaleRepository(db).get_all(),
        RentalRepository(db).get_all(),
        ClientRepository(db).get_all(),
    )
    return [YearlyDataSchema.model_validate(y) for y in years]


def _statistics(db: Session, request_id: str, period: str, start_date, end_date):
    start, end = _period(period, start_date, end_date)
    sales = SaleRepository(db).get_all()
    rentals = RentalRepository(db).get_all()
    clients = ClientRepository(db).get_all()
    products = ProductRepository(db).get_all()

    orphans = find_orphaned_transactions([*sales, *rentals], clients)
    if orphans:
        skipped_rows_counter.labels(report="statistics").inc(len(orphans))
        log_skipped_rows(request_id, "statistics", [t.id for t in orphans])

    stats = period_statistics(sales, rentals, clients, products, start, end, top_n=settings.top_n)
    return stats, clients, products


@router.get("/reports/statistics", response_model=PeriodStatisticsSchema)
def get_statistics(
    request: Request,
    period: str = Query("current-year", description=f"One of {', '.join(PERIODS)}"),
    start_date: Optional[date] = Query(None, description="Custom period start"),
    end_date: Optional[date] = Query(None, description="Custom period end"),
    db: Session = Depends(get_db),
):
    """Revenue, collected and outstanding amounts for a period, with top products and clients"""
    stats, _, _ = _statistics(db, get_request_id(request), period, start_date, end_date)
    return PeriodStatisticsSchema.model_validate(stats)


@router.get("/reports/statistics/document")
def get_statistics_document(
    request: Request,
    period: str = Query("current-year"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    output: DocumentFormat = Query("html", alias="format"),
    db: Session = Depends(get_db),
    shop: ShopDetails = Depends(get_shop_details),
):
    stats, clients, products = _statistics(db, get_request_id(request), period, start_date, end_date)
    html = render_statistics_report_html(
        stats,
        {p.id: p.name for p in products},
        {c.id: c.full_name for c in clients},
        shop,
        datetime.now(),
    )
    return document_response(html, output, f"accounting-report-{stats.start.date()}-{stats.end.date()}")


@router.get("/reports/top", response_model=List[RankedEntrySchema])
def get_top(
    dimension: Literal["product_id", "client_id"] = Query("product_id"),
    limit: int = Query(5, ge=1, le=100),
    period: str = Query("current-year"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: Session = Depends(get_db),
):
    """Best-earning products or clients over sales and rentals of a period"""
    start, end = _period(period, start_date, end_date)
    transactions = [
        t
        for t in [*SaleRepository(db).get_all(), *RentalRepository(db).get_all()]
        if within_interval(t.created_at, start, end)
    ]
    return [RankedEntrySchema.model_validate(e) for e in top_by_revenue(transactions, dimension, limit)]


@router.get("/reports/dashboard", response_model=DashboardSchema)
def get_dashboard(db: Session = Depends(get_db)):
    overview = dashboard_overview(
        ProductRepository(db).get_all(),
        SaleRepository(db).get_all(),
        RentalRepository(db).get_all(),
        ClientRepository(db).get_all(),
        now=datetime.now(),
        low_stock_threshold=settings.low_stock_threshold,
        recent_days=settings.recent_sales_days,
    )
    return DashboardSchema.model_validate(overview)
