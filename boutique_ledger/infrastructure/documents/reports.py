"""HTML renderings of the debt, monthly and statistics reports"""

from datetime import datetime
from html import escape
from typing import Dict, List, Sequence
from boutique_ledger.domain.models import DebtSummary, DebtTotals, MonthlyData, PeriodStatistics
from boutique_ledger.infrastructure.documents.receipts import ShopDetails, format_money


def _report_css() -> str:
    return """
        body { font-family: Helvetica, Arial, sans-serif; font-size: 10pt; }
        .container { padding: 15px; }
        h1 { text-align: center; color: #333; }
        .header-info { border: 1px solid #ccc; padding: 10px; margin-bottom: 20px; border-radius: 5px; background-color: #f9f9f9; }
        .header-info p { margin: 5px 0; }
        table { width: 100%; border-collapse: collapse; margin-top: 15px; }
        th, td { border: 1px solid #ddd; padding: 6px; }
        th { background-color: #f2f2f2; font-weight: bold; text-align: center; }
        .amount { text-align: right; }
        .center { text-align: center; }
    """


def _open(title: str, shop: ShopDetails, generated_at: datetime) -> str:
    html = f"<html><head><meta charset='UTF-8'><title>{escape(title)}</title><style>{_report_css()}</style></head>"
    html += "<body><div class='container'>"
    html += f"<h1>{escape(title)} - {escape(shop.name)}</h1>"
    html += f"<p class='center'>Generated on: {generated_at.strftime('%d/%m/%Y %H:%M')}</p>"
    return html


def _close() -> str:
    return "</div></body></html>"


def render_debts_report_html(
    summaries: Sequence[DebtSummary],
    totals: DebtTotals,
    shop: ShopDetails,
    generated_at: datetime,
) -> str:
    def money(cents: int) -> str:
        return format_money(cents, shop.currency)

    html = _open("OUTSTANDING DEBTS", shop, generated_at)
    html += "<div class='header-info'>"
    html += f"<p><b>Clients with debts:</b> {totals.client_count}</p>"
    html += f"<p><b>Total debts:</b> {money(totals.total_debt_cents)}</p>"
    html += f"<p><b>Sales debts:</b> {money(totals.sales_debt_cents)}</p>"
    html += f"<p><b>Rentals debts:</b> {money(totals.rentals_debt_cents)}</p>"
    html += "</div>"

    html += "<table><thead><tr><th>Client</th><th>Phone</th><th>Sales</th><th>Rentals</th>"
    html += "<th>Total</th><th>Transactions</th><th>Last transaction</th></tr></thead><tbody>"
    if summaries:
        for s in summaries:
            html += f"<tr><td>{escape(s.client.full_name)}</td><td>{escape(s.client.phone)}</td>"
            html += f"<td class='amount'>{money(s.sales_debt_cents)}</td>"
            html += f"<td class='amount'>{money(s.rentals_debt_cents)}</td>"
            html += f"<td class='amount'>{money(s.total_debt_cents)}</td>"
            html += f"<td class='center'>{s.transaction_count}</td>"
            html += f"<td class='center'>{s.last_transaction.strftime('%d/%m/%Y')}</td></tr>"
    else:
        html += "<tr><td colspan='7' class='center'>No outstanding debts.</td></tr>"
    html += "</tbody></table>"
    return html + _close()


def render_monthly_report_html(
    year: int,
    months: List[MonthlyData],
    shop: ShopDetails,
    generated_at: datetime,
) -> str:
    def money(cents: int) -> str:
        return format_money(cents, shop.currency)

    year_total = sum(m.total_revenue_cents for m in months)
    transactions = sum(m.sales_count + m.rentals_count for m in months)

    html = _open(f"MONTHLY REPORT {year}", shop, generated_at)
    html += "<div class='header-info'>"
    html += f"<p><b>Yearly revenue:</b> {money(year_total)}</p>"
    html += f"<p><b>Transactions:</b> {transactions}</p>"
    html += f"<p><b>Average per month:</b> {money(year_total // 12)}</p>"
    html += "</div>"

    html += "<table><thead><tr><th>Month</th><th>Sales</th><th>Rentals</th><th>Total</th>"
    html += "<th>Transactions</th><th>New clients</th><th>Average order</th></tr></thead><tbody>"
    for m in months:
        html += f"<tr><td>{m.month}</td>"
        html += f"<td class='amount'>{money(m.sales_revenue_cents)}</td>"
        html += f"<td class='amount'>{money(m.rentals_revenue_cents)}</td>"
        html += f"<td class='amount'>{money(m.total_revenue_cents)}</td>"
        html += f"<td class='center'>{m.sales_count + m.rentals_count}</td>"
        html += f"<td class='center'>{m.new_clients}</td>"
        html += f"<td class='amount'>{money(round(m.average_order_value))}</td></tr>"
    html += "</tbody></table>"
    return html + _close()


def render_statistics_report_html(
    stats: PeriodStatistics,
    product_names: Dict[str, str],
    client_names: Dict[str, str],
    shop: ShopDetails,
    generated_at: datetime,
) -> str:
    """Accounting report for a period; names map ids to display labels for the rankings"""
    def money(cents: int) -> str:
        return format_money(cents, shop.currency)

    html = _open("ACCOUNTING REPORT", shop, generated_at)
    html += f"<p class='center'>Period: {stats.start.strftime('%d/%m/%Y')} - {stats.end.strftime('%d/%m/%Y')}</p>"
    html += "<div class='header-info'>"
    html += f"<p><b>Total revenue:</b> {money(stats.total_revenue_cents)}</p>"
    html += f"<p><b>Collected:</b> {money(stats.total_paid_cents)}</p>"
    html += f"<p><b>Outstanding:</b> {money(stats.total_remaining_cents)}</p>"
    html += f"<p><b>Transactions:</b> {stats.total_transactions}</p>"
    html += "</div>"

    html += "<table><thead><tr><th></th><th>Count</th><th>Revenue</th><th>Collected</th><th>Outstanding</th></tr></thead><tbody>"
    html += f"<tr><td>Sales</td><td class='center'>{stats.sales_count}</td><td class='amount'>{money(stats.sales_revenue_cents)}</td>"
    html += f"<td class='amount'>{money(stats.sales_paid_cents)}</td><td class='amount'>{money(stats.sales_remaining_cents)}</td></tr>"
    html += f"<tr><td>Rentals</td><td class='center'>{stats.rentals_count}</td><td class='amount'>{money(stats.rentals_revenue_cents)}</td>"
    html += f"<td class='amount'>{money(stats.rentals_paid_cents)}</td><td class='amount'>{money(stats.rentals_remaining_cents)}</td></tr>"
    html += "</tbody></table>"

    for title, entries, names in (
        ("Top products", stats.top_products, product_names),
        ("Top clients", stats.top_clients, client_names),
    ):
        html += f"<h3>{title}</h3><table><thead><tr><th>#</th><th>Name</th><th>Quantity</th><th>Transactions</th><th>Revenue</th></tr></thead><tbody>"
        for rank, entry in enumerate(entries, start=1):
            html += f"<tr><td class='center'>{rank}</td><td>{escape(names.get(entry.key, entry.key))}</td>"
            html += f"<td class='center'>{entry.quantity}</td><td class='center'>{entry.transaction_count}</td>"
            html += f"<td class='amount'>{money(entry.revenue_cents)}</td></tr>"
        html += "</tbody></table>"

    return html + _close()
