"""Period aggregation - monthly and yearly revenue reports, statistics and dashboard figures"""

from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple
from boutique_ledger.domain.models import (
    Client,
    DashboardOverview,
    MonthlyData,
    PeriodStatistics,
    Product,
    Rental,
    Sale,
    YearlyData,
    RENTAL_ACTIVE,
)
from boutique_ledger.domain.balance import is_overdue
from boutique_ledger.domain.ranking import top_by_revenue
from boutique_ledger.utils.date_utils import (
    add_months,
    end_of_day,
    month_bounds,
    month_label,
    start_of_day,
    within_interval,
    year_bounds,
)

PERIODS = ("current-year", "last-year", "current-month", "last-month", "custom")


def _in_interval(items: Iterable, start: datetime, end: datetime) -> list:
    return [item for item in items if within_interval(item.created_at, start, end)]


def monthly_report(
    year: int,
    sales: Sequence[Sale],
    rentals: Sequence[Rental],
    clients: Sequence[Client],
) -> List[MonthlyData]:
    """
    Revenue breakdown for each of the 12 months of a year.

    Months without activity are still reported with zero revenue and a zero
    average order value.
    """
    months = []
    for month in range(1, 13):
        start, end = month_bounds(year, month)

        month_sales = _in_interval(sales, start, end)
        month_rentals = _in_interval(rentals, start, end)
        month_clients = _in_interval(clients, start, end)

        sales_revenue = sum(s.total_cents for s in month_sales)
        rentals_revenue = sum(r.total_cents for r in month_rentals)
        total_revenue = sales_revenue + rentals_revenue
        total_transactions = len(month_sales) + len(month_rentals)

        months.append(
            MonthlyData(
                month=month_label(month),
                year=year,
                month_number=month,
                sales_revenue_cents=sales_revenue,
                rentals_revenue_cents=rentals_revenue,
                total_revenue_cents=total_revenue,
                sales_count=len(month_sales),
                rentals_count=len(month_rentals),
                new_clients=len(month_clients),
                average_order_value=total_revenue / total_transactions if total_transactions > 0 else 0.0,
            )
        )
    return months


def available_years(sales: Iterable[Sale], rentals: Iterable[Rental]) -> List[int]:
    """Distinct years with at least one transaction, most recent first"""
    years = {s.created_at.year for s in sales} | {r.created_at.year for r in rentals}
    return sorted(years, reverse=True)


def growth_percent(current_cents: int, previous_cents: int) -> Optional[float]:
    """Year-over-year growth; None when the previous year earned nothing"""
    if previous_cents == 0:
        return None
    return (current_cents - previous_cents) / previous_cents * 100


def yearly_report(
    sales: Sequence[Sale],
    rentals: Sequence[Rental],
    clients: Sequence[Client],
) -> List[YearlyData]:
    """
    One summary per year present in the data, most recent first.

    - average_monthly_revenue always divides by 12
    - best/worst month use strict comparison, so ties go to the earlier month
    - growth_percent compares with the next (older) year in the list
    """
    report = []
    for year in available_years(sales, rentals):
        start, end = year_bounds(year)

        year_sales = _in_interval(sales, start, end)
        year_rentals = _in_interval(rentals, start, end)
        year_clients = _in_interval(clients, start, end)

        sales_revenue = sum(s.total_cents for s in year_sales)
        rentals_revenue = sum(r.total_cents for r in year_rentals)
        total_revenue = sales_revenue + rentals_revenue

        monthly = monthly_report(year, sales, rentals, clients)
        best = monthly[0]
        worst = monthly[0]
        for current in monthly[1:]:
            if current.total_revenue_cents > best.total_revenue_cents:
                best = current
            if current.total_revenue_cents < worst.total_revenue_cents:
                worst = current

        report.append(
            YearlyData(
                year=year,
                total_revenue_cents=total_revenue,
                sales_revenue_cents=sales_revenue,
                rentals_revenue_cents=rentals_revenue,
                total_transactions=len(year_sales) + len(year_rentals),
                sales_count=len(year_sales),
                rentals_count=len(year_rentals),
                new_clients=len(year_clients),
                average_monthly_revenue=total_revenue / 12,
                best_month=best.month,
                worst_month=worst.month,
            )
        )

    for current, previous in zip(report, report[1:]):
        current.growth_percent = growth_percent(current.total_revenue_cents, previous.total_revenue_cents)

    return report


def resolve_period(
    name: str,
    today: date,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> Tuple[datetime, datetime]:
    """
    Turn a named reporting period into a closed datetime interval.

    Unknown names fall back to the current year, as does either missing bound
    of a custom range.
    """
    if name == "last-year":
        return year_bounds(today.year - 1)
    if name == "current-month":
        return month_bounds(today.year, today.month)
    if name == "last-month":
        previous = add_months(today, -1)
        return month_bounds(previous.year, previous.month)
    if name == "custom":
        year_start, year_end = year_bounds(today.year)
        return (
            start_of_day(start) if start else year_start,
            end_of_day(end) if end else year_end,
        )
    return year_bounds(today.year)


def period_statistics(
    sales: Sequence[Sale],
    rentals: Sequence[Rental],
    clients: Sequence[Client],
    products: Sequence[Product],
    start: datetime,
    end: datetime,
    top_n: int = 10,
) -> PeriodStatistics:
    """
    Financial summary of everything created within [start, end].

    Top products are ranked over sales only; top clients over sales and
    rentals. Rows whose product or client is unknown are left out of the
    rankings but still count toward the totals.
    """
    period_sales = _in_interval(sales, start, end)
    period_rentals = _in_interval(rentals, start, end)

    sales_revenue = sum(s.total_cents for s in period_sales)
    sales_paid = sum(s.paid_cents for s in period_sales)
    rentals_revenue = sum(r.total_cents for r in period_rentals)
    rentals_paid = sum(r.paid_cents for r in period_rentals)

    product_ids = {p.id for p in products}
    client_ids = {c.id for c in clients}

    top_products = top_by_revenue(
        [s for s in period_sales if s.product_id in product_ids], "product_id", top_n
    )
    top_clients = top_by_revenue(
        [t for t in [*period_sales, *period_rentals] if t.client_id in client_ids], "client_id", top_n
    )

    return PeriodStatistics(
        start=start,
        end=end,
        total_revenue_cents=sales_revenue + rentals_revenue,
        total_paid_cents=sales_paid + rentals_paid,
        total_remaining_cents=(sales_revenue - sales_paid) + (rentals_revenue - rentals_paid),
        total_transactions=len(period_sales) + len(period_rentals),
        sales_revenue_cents=sales_revenue,
        sales_paid_cents=sales_paid,
        sales_remaining_cents=sales_revenue - sales_paid,
        sales_count=len(period_sales),
        rentals_revenue_cents=rentals_revenue,
        rentals_paid_cents=rentals_paid,
        rentals_remaining_cents=rentals_revenue - rentals_paid,
        rentals_count=len(period_rentals),
        top_products=top_products,
        top_clients=top_clients,
    )


def dashboard_overview(
    products: Sequence[Product],
    sales: Sequence[Sale],
    rentals: Sequence[Rental],
    clients: Sequence[Client],
    now: datetime,
    low_stock_threshold: int = 5,
    recent_days: int = 30,
) -> DashboardOverview:
    """Headline figures: revenue, profit margin, stock and rental activity"""
    products_by_id = {p.id: p for p in products}

    sales_revenue = sum(s.total_cents for s in sales)

    # Profit only counts sales whose product still carries a purchase price
    profit = 0
    for sale in sales:
        product = products_by_id.get(sale.product_id)
        if product is not None:
            profit += (sale.unit_price_cents - product.purchase_price_cents) * sale.quantity

    recent_cutoff = now - timedelta(days=recent_days)

    return DashboardOverview(
        sales_revenue_cents=sales_revenue,
        profit_cents=profit,
        profit_margin=profit / sales_revenue * 100 if sales_revenue > 0 else 0.0,
        units_in_stock=sum(p.stock for p in products),
        low_stock_products=[p for p in products if p.stock < low_stock_threshold],
        rentals_revenue_cents=sum(r.total_cents for r in rentals),
        active_rentals=sum(1 for r in rentals if r.rental_status == RENTAL_ACTIVE),
        overdue_rentals=sum(1 for r in rentals if is_overdue(r, now.date())),
        clients_count=len(clients),
        recent_sales=sum(1 for s in sales if s.created_at.replace(tzinfo=None) > recent_cutoff),
    )
